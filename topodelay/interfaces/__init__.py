"""核心接口定义模块。

此模块定义了系统的核心抽象接口和公共数据类型，包括：
1. BaseNetworkTopology：拓扑服务的抽象基类
2. Link：带宽和延迟链路
3. TopologyConfig：拓扑服务配置
4. InvalidParameterError / TopologyStructureError：参数错误和结构错误

Typical usage example:

    from topodelay.interfaces import BaseNetworkTopology, TopologyConfig

    config = TopologyConfig(node_allocation="next_free")
"""

from .base_topology import (
    BaseNetworkTopology,
    Link,
    TopologyConfig,
    NODE_ALLOCATION_POLICIES
)
from .errors import (
    InvalidParameterError,
    TopologyStructureError,
    require_non_negative_id
)

__all__ = [
    # 拓扑服务接口
    "BaseNetworkTopology",
    "Link",
    "TopologyConfig",
    "NODE_ALLOCATION_POLICIES",

    # 异常
    "InvalidParameterError",
    "TopologyStructureError",
    "require_non_negative_id"
]

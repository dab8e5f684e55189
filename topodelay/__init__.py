"""topodelay - 仿真网络拓扑延迟引擎。

此包为离散事件仿真器提供计算节点之间的网络延迟模型，主要功能包括：

1. 拓扑图管理：带宽和延迟链路组成的无向多重图
2. 实体映射：仿真实体ID到拓扑节点ID的映射
3. 延迟矩阵：基于Floyd-Warshall的全源最短延迟，拓扑变化后惰性重算
4. 拓扑读写：CSV和BRITE格式

Typical usage example:

    from topodelay import NetworkTopology

    topology = NetworkTopology()
    topology.add_link(0, 1, bandwidth=10.0, latency=2.0)
    topology.add_link(1, 2, bandwidth=10.0, latency=3.0)
    topology.map_node(100, 0)
    topology.map_node(200, 2)

    delay = topology.get_delay(100, 200)  # 5.0
"""

from .network.graph import TopologicalGraph, TopologicalGraphView
from .network.mapper import EntityNodeMapper
from .network.delay_matrix import DelayMatrix, DelayMatrixCalculator
from .network.topology import NetworkTopology
from .interfaces.base_topology import Link, TopologyConfig
from .interfaces.errors import InvalidParameterError, TopologyStructureError

__version__ = "1.0.0"

__all__ = [
    # 主要组件
    "TopologicalGraph",
    "TopologicalGraphView",
    "EntityNodeMapper",
    "DelayMatrix",
    "DelayMatrixCalculator",
    "NetworkTopology",
    "Link",
    "TopologyConfig",

    # 异常
    "InvalidParameterError",
    "TopologyStructureError",

    # 版本信息
    "__version__"
]

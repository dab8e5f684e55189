"""网络拓扑接口定义。

此模块定义了拓扑引擎的核心抽象接口，包括：
1. 链路数据：带宽和延迟
2. 配置管理：节点ID分配策略和重算策略
3. 拓扑服务：链路添加、实体映射和延迟查询

Typical usage example:

    from topodelay.interfaces import BaseNetworkTopology

    class CustomTopology(BaseNetworkTopology):
        def get_delay(self, src_entity_id: int, dest_entity_id: int) -> Optional[float]:
            # 自定义延迟计算逻辑
            pass
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

# 前向声明，避免循环导入
if False:
    from topodelay.network.graph import TopologicalGraphView

NODE_ALLOCATION_POLICIES = ("identity", "next_free")


@dataclass(frozen=True)
class Link:
    """链路数据类"""
    source: int
    target: int
    bandwidth: float  # 带宽（容量单位，通常为Mbps）
    latency: float  # 延迟（时间单位，通常为ms）
    key: int = 0  # 同一节点对之间并行链路的序号


@dataclass
class TopologyConfig:
    """拓扑服务配置数据类"""
    node_allocation: str = "identity"  # 未映射实体的节点ID分配策略：'identity'或'next_free'
    eager_recompute: bool = False      # 是否在服务创建时和每次添加链路后立即重算延迟矩阵


class BaseNetworkTopology(ABC):
    """网络拓扑服务抽象基类"""

    @abstractmethod
    def add_link(self, src_entity_id: int, dest_entity_id: int,
                 bandwidth: float, latency: float) -> None:
        """添加一条链路，链路两端的实体会被映射到拓扑图节点

        Args:
            src_entity_id: 源实体ID
            dest_entity_id: 目标实体ID
            bandwidth: 链路带宽，必须大于0
            latency: 链路延迟，不能为负数

        Raises:
            InvalidParameterError: 参数非法
        """
        pass

    @abstractmethod
    def map_node(self, entity_id: int, node_id: int) -> None:
        """将仿真实体映射到拓扑图节点

        Args:
            entity_id: 实体ID
            node_id: 拓扑图节点ID

        Raises:
            InvalidParameterError: ID为负数
        """
        pass

    @abstractmethod
    def unmap_node(self, entity_id: int) -> None:
        """解除实体的映射，未映射的实体直接忽略

        Args:
            entity_id: 实体ID
        """
        pass

    @abstractmethod
    def get_delay(self, src_entity_id: int, dest_entity_id: int) -> Optional[float]:
        """计算两个实体之间的通信延迟

        Args:
            src_entity_id: 源实体ID
            dest_entity_id: 目标实体ID

        Returns:
            最短路径延迟；网络不可用时返回0.0；实体未映射或不可达时返回None
        """
        pass

    @abstractmethod
    def is_network_enabled(self) -> bool:
        """检查网络模拟是否可用

        Returns:
            拓扑构建成功返回True，否则返回False
        """
        pass

    @abstractmethod
    def get_topological_graph(self) -> 'TopologicalGraphView':
        """获取拓扑图的只读视图

        Returns:
            拓扑图只读视图
        """
        pass

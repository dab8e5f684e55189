"""网络拓扑服务实现模块。

此模块组合拓扑图、实体映射和延迟矩阵计算，对仿真内核提供：
1. 链路添加：未映射的实体由服务分配节点ID
2. 实体映射和解除映射
3. 延迟查询：矩阵过期时在查询路径上惰性重算并缓存
4. 网络不可用时的退化行为：延迟恒为0，其余操作不生效

所有可变状态（图、映射表、缓存矩阵、过期标记）由同一把锁保护，
同一过期周期内至多进行一次重算，并发查询方等待进行中的重算完成。

Typical usage example:

    from topodelay.network import NetworkTopology

    topology = NetworkTopology()
    topology.add_link(0, 1, bandwidth=10.0, latency=2.0)
    topology.add_link(1, 2, bandwidth=10.0, latency=3.0)
    topology.map_node(100, 0)
    topology.map_node(200, 2)
    print(topology.get_delay(100, 200))  # 5.0
"""

import logging
import threading
from pathlib import Path
from typing import Optional, Union

from topodelay.interfaces.base_topology import (
    BaseNetworkTopology,
    TopologyConfig,
    NODE_ALLOCATION_POLICIES
)
from topodelay.interfaces.errors import InvalidParameterError, require_non_negative_id
from topodelay.network.delay_matrix import DelayMatrix, DelayMatrixCalculator
from topodelay.network.graph import TopologicalGraph, TopologicalGraphView, validate_link_params
from topodelay.network.mapper import EntityNodeMapper
from topodelay.network.readers import load_graph_brite, load_graph_csv

logger = logging.getLogger(__name__)


class NetworkTopology(BaseNetworkTopology):
    """网络拓扑服务"""

    def __init__(
        self,
        graph: Optional[TopologicalGraph] = None,
        config: Optional[TopologyConfig] = None,
        enabled: bool = True,
        calculator: Optional[DelayMatrixCalculator] = None
    ):
        """初始化拓扑服务

        Args:
            graph: 已构建的拓扑图，为None时使用空图
            config: 服务配置
            enabled: 网络模拟是否可用，构建失败时为False
            calculator: 延迟矩阵计算器
        """
        self.config = config or TopologyConfig()
        if self.config.node_allocation not in NODE_ALLOCATION_POLICIES:
            raise InvalidParameterError(f"不支持的节点ID分配策略：{self.config.node_allocation}")
        self._enabled = enabled
        self._graph = graph if graph is not None else TopologicalGraph()
        self._mapper = EntityNodeMapper()
        self._calculator = calculator or DelayMatrixCalculator()
        self._matrix: Optional[DelayMatrix] = None
        self._stale = True
        self._recompute_count = 0
        self._lock = threading.RLock()
        if self._enabled and self.config.eager_recompute:
            self._recompute()

    @classmethod
    def from_graph(cls, graph: TopologicalGraph,
                   config: Optional[TopologyConfig] = None) -> 'NetworkTopology':
        """基于已构建的拓扑图创建可用的服务"""
        return cls(graph=graph, config=config, enabled=True)

    @classmethod
    def disabled(cls) -> 'NetworkTopology':
        """创建不可用的服务，所有查询退化为固定结果"""
        return cls(enabled=False)

    @classmethod
    def from_file(cls, path: Union[str, Path], fmt: str = "brite",
                  nodes_csv: Optional[Union[str, Path]] = None,
                  config: Optional[TopologyConfig] = None) -> 'NetworkTopology':
        """从拓扑文件构建服务，读取失败时返回不可用的服务

        Args:
            path: BRITE文件路径，或fmt为'csv'时的边配置文件路径
            fmt: 文件格式，'brite'或'csv'
            nodes_csv: fmt为'csv'时可选的节点配置文件路径
            config: 服务配置

        Returns:
            拓扑服务
        """
        try:
            if fmt == "brite":
                graph = load_graph_brite(path)
            elif fmt == "csv":
                graph = load_graph_csv(nodes_csv, path)
            else:
                raise ValueError(f"不支持的拓扑文件格式：{fmt}")
        except (FileNotFoundError, ValueError) as e:
            logger.error(f"拓扑构建失败，网络模拟已禁用：{str(e)}")
            return cls.disabled()

        logger.info(f"拓扑加载完成：{graph.node_count()}个节点，{graph.link_count()}条链路")
        return cls.from_graph(graph, config)

    @property
    def stale(self) -> bool:
        """缓存的延迟矩阵是否已过期"""
        with self._lock:
            return self._stale

    @property
    def recompute_count(self) -> int:
        """延迟矩阵的重算次数"""
        with self._lock:
            return self._recompute_count

    def is_network_enabled(self) -> bool:
        return self._enabled

    def get_topological_graph(self) -> TopologicalGraphView:
        """获取拓扑图只读视图，网络不可用时为空图"""
        if not self._enabled:
            return TopologicalGraphView(TopologicalGraph())
        return TopologicalGraphView(self._graph, self._lock)

    def add_link(self, src_entity_id: int, dest_entity_id: int,
                 bandwidth: float, latency: float) -> None:
        """添加一条链路，未映射的实体先分配节点ID

        Args:
            src_entity_id: 源实体ID
            dest_entity_id: 目标实体ID
            bandwidth: 链路带宽，必须大于0
            latency: 链路延迟，不能为负数

        Raises:
            InvalidParameterError: 参数非法
        """
        if not self._enabled:
            logger.debug("网络模拟已禁用，忽略链路添加")
            return
        require_non_negative_id(src_entity_id, "源实体ID")
        require_non_negative_id(dest_entity_id, "目标实体ID")

        # 非法链路不能留下新的映射
        validate_link_params(bandwidth, latency)

        with self._lock:
            src_node = self._resolve_or_allocate(src_entity_id)
            dest_node = self._resolve_or_allocate(dest_entity_id)
            self._graph.add_link(src_node, dest_node, bandwidth, latency)
            self._stale = True
            if self.config.eager_recompute:
                self._recompute()

    def _resolve_or_allocate(self, entity_id: int) -> int:
        node_id = self._mapper.node_id_for(entity_id)
        if node_id is not None:
            return node_id

        if self.config.node_allocation == "identity":
            node_id = entity_id
        else:
            known = set(self._graph.get_nodes()) | self._mapper.mapped_node_ids()
            node_id = max(known) + 1 if known else 0
        self._mapper.map(entity_id, node_id)
        logger.debug(f"实体{entity_id}未映射，分配节点{node_id}")
        return node_id

    def map_node(self, entity_id: int, node_id: int) -> None:
        """将实体映射到拓扑节点，不影响延迟矩阵的缓存状态"""
        if not self._enabled:
            return
        with self._lock:
            self._mapper.map(entity_id, node_id)

    def unmap_node(self, entity_id: int) -> None:
        if not self._enabled:
            return
        with self._lock:
            self._mapper.unmap(entity_id)

    def node_id_for(self, entity_id: int) -> Optional[int]:
        """查询实体对应的节点ID，未映射时返回None"""
        with self._lock:
            return self._mapper.node_id_for(entity_id)

    def get_delay(self, src_entity_id: int, dest_entity_id: int) -> Optional[float]:
        """计算两个实体之间的通信延迟

        Args:
            src_entity_id: 源实体ID
            dest_entity_id: 目标实体ID

        Returns:
            最短路径延迟；网络不可用时返回0.0；实体未映射、节点不在图中
            或两节点不连通时返回None

        Raises:
            InvalidParameterError: 实体ID为负数
        """
        if not self._enabled:
            return 0.0
        require_non_negative_id(src_entity_id, "源实体ID")
        require_non_negative_id(dest_entity_id, "目标实体ID")

        with self._lock:
            src_node = self._mapper.node_id_for(src_entity_id)
            dest_node = self._mapper.node_id_for(dest_entity_id)
            if src_node is None or dest_node is None:
                return None
            matrix = self._fresh_matrix()
            if src_node not in matrix or dest_node not in matrix:
                return None
            delay = matrix.delay(src_node, dest_node)

        if delay == float('inf'):
            return None
        return delay

    def get_bandwidth(self, src_entity_id: int, dest_entity_id: int) -> float:
        """获取两个实体所在节点之间直连链路的带宽

        Returns:
            带宽；没有直连链路、实体未映射或网络不可用时返回0.0

        Raises:
            InvalidParameterError: 实体ID为负数
        """
        if not self._enabled:
            return 0.0
        require_non_negative_id(src_entity_id, "源实体ID")
        require_non_negative_id(dest_entity_id, "目标实体ID")

        with self._lock:
            src_node = self._mapper.node_id_for(src_entity_id)
            dest_node = self._mapper.node_id_for(dest_entity_id)
            if src_node is None or dest_node is None:
                return 0.0
            bandwidth = self._graph.get_link_bandwidth(src_node, dest_node)
        return 0.0 if bandwidth is None else bandwidth

    def get_delay_matrix(self) -> Optional[DelayMatrix]:
        """获取最新的延迟矩阵，网络不可用时返回None"""
        if not self._enabled:
            return None
        with self._lock:
            return self._fresh_matrix()

    def rebuild(self) -> None:
        """立即重算延迟矩阵，用于在一批拓扑修改后主动承担重算开销"""
        if not self._enabled:
            return
        with self._lock:
            self._recompute()

    def _fresh_matrix(self) -> DelayMatrix:
        # 调用方必须持有锁
        if self._stale or self._matrix is None or self._matrix.version != self._graph.version:
            self._recompute()
        return self._matrix

    def _recompute(self) -> None:
        self._matrix = self._calculator.calculate(self._graph)
        self._stale = False
        self._recompute_count += 1
        logger.debug(f"延迟矩阵已重算（第{self._recompute_count}次）")

    def __repr__(self) -> str:
        return (f"NetworkTopology(enabled={self._enabled}, nodes={self._graph.node_count()}, "
                f"links={self._graph.link_count()}, stale={self._stale})")

"""拓扑图实现模块。

此模块实现了无向带权多重图，包括：
1. 节点的隐式/显式添加（upsert语义）
2. 并行链路的添加，每条链路独立参与最短路径计算
3. 邻接查询：每个邻居取延迟最小的链路
4. 只读视图和可视化

图每发生一次结构变化，version计数就加一，消费方据此判断缓存的
延迟矩阵是否过期。

Typical usage example:

    from topodelay.network import TopologicalGraph

    graph = TopologicalGraph()
    graph.add_link(0, 1, bandwidth=10.0, latency=2.0)
    graph.add_link(1, 2, bandwidth=10.0, latency=3.0)
    print(graph.neighbors(1))
"""

import math
import threading
from numbers import Real
from typing import Dict, Iterator, List, Optional

import networkx as nx
import matplotlib.pyplot as plt

from topodelay.interfaces.base_topology import Link
from topodelay.interfaces.errors import (
    InvalidParameterError,
    TopologyStructureError,
    require_non_negative_id
)


def validate_link_params(bandwidth: float, latency: float) -> None:
    """检查链路带宽和延迟

    Raises:
        InvalidParameterError: 带宽不大于0，延迟为负数，或取值不是有限数
    """
    if isinstance(bandwidth, bool) or not isinstance(bandwidth, Real) or not math.isfinite(bandwidth) or bandwidth <= 0:
        raise InvalidParameterError(f"带宽必须是大于0的有限数：{bandwidth}")
    if isinstance(latency, bool) or not isinstance(latency, Real) or not math.isfinite(latency) or latency < 0:
        raise InvalidParameterError(f"延迟必须是非负的有限数：{latency}")


class GraphVisualizationMixin:
    """拓扑可视化混入类，依赖get_nodes和get_links"""

    def collapsed_graph(self) -> nx.Graph:
        """将并行链路合并为简单图，每对节点只保留延迟最小的链路

        Returns:
            以latency和bandwidth为边属性的networkx简单图
        """
        collapsed = nx.Graph()
        collapsed.add_nodes_from(self.get_nodes())
        for link in self.get_links():
            if link.source == link.target:
                continue
            current = collapsed.get_edge_data(link.source, link.target)
            if current is None or link.latency < current['latency']:
                collapsed.add_edge(
                    link.source,
                    link.target,
                    latency=link.latency,
                    bandwidth=link.bandwidth
                )
        return collapsed

    def visualize(self, ax=None, show: bool = True, seed: Optional[int] = None):
        """可视化网络拓扑

        Args:
            ax: matplotlib坐标轴，为None时新建
            show: 是否调用plt.show()
            seed: 布局随机种子

        Returns:
            绘制所用的坐标轴
        """
        collapsed = self.collapsed_graph()
        if ax is None:
            _, ax = plt.subplots()
        pos = nx.spring_layout(collapsed, seed=seed)
        nx.draw(collapsed, pos, ax=ax, with_labels=True, font_weight='bold',
                node_size=700, node_color='skyblue', font_size=8)
        edge_labels = {
            (u, v): f"{data['latency']:.1f}"
            for u, v, data in collapsed.edges(data=True)
        }
        nx.draw_networkx_edge_labels(collapsed, pos, edge_labels=edge_labels,
                                     ax=ax, font_size=8)
        ax.set_axis_off()
        if show:
            plt.show()
        return ax


class TopologicalGraph(GraphVisualizationMixin):
    """无向带权拓扑图，允许同一节点对之间存在多条链路"""

    def __init__(self):
        """初始化空拓扑图"""
        self._graph = nx.MultiGraph()
        self._version = 0

    @property
    def version(self) -> int:
        """结构版本号，每次添加节点或链路后递增"""
        return self._version

    def add_node(self, node_id: int) -> None:
        """添加节点，节点已存在时不做任何操作

        Args:
            node_id: 节点ID

        Raises:
            InvalidParameterError: 节点ID为负数
        """
        require_non_negative_id(node_id, "节点ID")
        if node_id not in self._graph:
            self._graph.add_node(node_id)
            self._version += 1

    def add_link(self, src_node_id: int, dest_node_id: int,
                 bandwidth: float, latency: float) -> Link:
        """添加一条无向链路，端点不存在时自动创建

        并行链路不会被合并。

        Args:
            src_node_id: 源节点ID
            dest_node_id: 目标节点ID
            bandwidth: 带宽，必须大于0
            latency: 延迟，不能为负数

        Returns:
            新添加的链路

        Raises:
            InvalidParameterError: ID、带宽或延迟非法
        """
        require_non_negative_id(src_node_id, "源节点ID")
        require_non_negative_id(dest_node_id, "目标节点ID")
        validate_link_params(bandwidth, latency)

        key = self._graph.add_edge(
            src_node_id,
            dest_node_id,
            bandwidth=float(bandwidth),
            latency=float(latency)
        )
        self._version += 1
        return Link(src_node_id, dest_node_id, float(bandwidth), float(latency), key)

    def has_node(self, node_id: int) -> bool:
        return node_id in self._graph

    def node_count(self) -> int:
        return self._graph.number_of_nodes()

    def link_count(self) -> int:
        return self._graph.number_of_edges()

    def get_nodes(self) -> List[int]:
        """获取所有节点ID（升序）"""
        return sorted(self._graph.nodes())

    def get_links(self) -> List[Link]:
        """获取所有链路，包括并行链路

        Returns:
            链路列表
        """
        return list(self._iter_links())

    def _iter_links(self) -> Iterator[Link]:
        for u, v, key, data in self._graph.edges(keys=True, data=True):
            yield Link(u, v, data['bandwidth'], data['latency'], key)

    def neighbors(self, node_id: int) -> Dict[int, Link]:
        """获取节点的邻居，每个邻居只返回延迟最小的链路

        Args:
            node_id: 节点ID

        Returns:
            邻居ID到链路的字典

        Raises:
            TopologyStructureError: 节点不存在
        """
        if node_id not in self._graph:
            raise TopologyStructureError(f"节点{node_id}不存在")
        result: Dict[int, Link] = {}
        for neighbor, keydict in self._graph[node_id].items():
            if neighbor == node_id:
                continue
            key, data = min(keydict.items(), key=lambda item: item[1]['latency'])
            result[neighbor] = Link(node_id, neighbor, data['bandwidth'], data['latency'], key)
        return result

    def _best_link(self, source: int, target: int) -> Optional[dict]:
        keydict = self._graph.get_edge_data(source, target)
        if not keydict:
            return None
        return min(keydict.values(), key=lambda data: data['latency'])

    def get_link_latency(self, source: int, target: int) -> Optional[float]:
        """获取两个直连节点之间的最小链路延迟

        Returns:
            延迟，如果两节点没有直连链路则返回None
        """
        data = self._best_link(source, target)
        return None if data is None else data['latency']

    def get_link_bandwidth(self, source: int, target: int) -> Optional[float]:
        """获取两个直连节点之间延迟最小那条链路的带宽

        Returns:
            带宽，如果两节点没有直连链路则返回None
        """
        data = self._best_link(source, target)
        return None if data is None else data['bandwidth']

    def copy(self) -> 'TopologicalGraph':
        """复制拓扑图（包括版本号）"""
        clone = TopologicalGraph()
        clone._graph = self._graph.copy()
        clone._version = self._version
        return clone

    def to_networkx(self) -> nx.MultiGraph:
        """导出为冻结的networkx多重图副本"""
        return nx.freeze(self._graph.copy())

    def __len__(self) -> int:
        return self.node_count()

    def __repr__(self) -> str:
        return f"TopologicalGraph(nodes={self.node_count()}, links={self.link_count()})"


class TopologicalGraphView(GraphVisualizationMixin):
    """拓扑图只读视图，只暴露查询接口，避免绕过缓存失效协议修改图

    每次读取都持有lock。由拓扑服务创建时与服务共用同一把锁，
    读取不会与并发的add_link交错。
    """

    def __init__(self, graph: TopologicalGraph, lock: Optional[threading.RLock] = None):
        self._source = graph
        self._lock = lock if lock is not None else threading.RLock()

    @property
    def version(self) -> int:
        with self._lock:
            return self._source.version

    def has_node(self, node_id: int) -> bool:
        with self._lock:
            return self._source.has_node(node_id)

    def node_count(self) -> int:
        with self._lock:
            return self._source.node_count()

    def link_count(self) -> int:
        with self._lock:
            return self._source.link_count()

    def get_nodes(self) -> List[int]:
        with self._lock:
            return self._source.get_nodes()

    def get_links(self) -> List[Link]:
        with self._lock:
            return self._source.get_links()

    def neighbors(self, node_id: int) -> Dict[int, Link]:
        with self._lock:
            return self._source.neighbors(node_id)

    def get_link_latency(self, source: int, target: int) -> Optional[float]:
        with self._lock:
            return self._source.get_link_latency(source, target)

    def get_link_bandwidth(self, source: int, target: int) -> Optional[float]:
        with self._lock:
            return self._source.get_link_bandwidth(source, target)

    def copy(self) -> TopologicalGraph:
        """复制出一个可修改的独立拓扑图"""
        with self._lock:
            return self._source.copy()

    def to_networkx(self) -> nx.MultiGraph:
        with self._lock:
            return self._source.to_networkx()

    def __len__(self) -> int:
        return self.node_count()

    def __repr__(self) -> str:
        with self._lock:
            return f"TopologicalGraphView(nodes={self._source.node_count()}, links={self._source.link_count()})"

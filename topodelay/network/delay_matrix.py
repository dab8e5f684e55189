"""延迟矩阵计算模块。

此模块基于拓扑图计算任意两节点间的最短延迟，包括：
1. 以并行链路的最小延迟初始化邻接矩阵
2. Floyd-Warshall动态规划，逐个中间节点松弛整行整列
3. 延迟矩阵的查询和导出（numpy数组/pandas表格）

不可达的节点对保留numpy.inf，由调用方决定如何对外呈现。

Typical usage example:

    from topodelay.network import TopologicalGraph, DelayMatrixCalculator

    graph = TopologicalGraph()
    graph.add_link(0, 1, bandwidth=10.0, latency=2.0)
    matrix = DelayMatrixCalculator().calculate(graph)
    print(matrix.delay(0, 1))
"""

import logging
from typing import Dict, List

import numpy as np
import pandas as pd

from topodelay.interfaces.errors import TopologyStructureError
from topodelay.network.graph import TopologicalGraph

logger = logging.getLogger(__name__)


class DelayMatrix:
    """稠密延迟矩阵，按拓扑节点ID索引"""

    def __init__(self, node_ids: List[int], delays: np.ndarray, version: int = 0):
        """初始化延迟矩阵

        Args:
            node_ids: 升序排列的节点ID，对应矩阵的行列顺序
            delays: 形状为(n, n)的延迟数组
            version: 计算时拓扑图的版本号
        """
        self._node_ids = list(node_ids)
        self._index: Dict[int, int] = {node: i for i, node in enumerate(self._node_ids)}
        self._delays = np.array(delays, dtype=np.float64, copy=True)
        self._delays.setflags(write=False)
        self.version = version

    @property
    def node_ids(self) -> List[int]:
        return list(self._node_ids)

    @property
    def size(self) -> int:
        return len(self._node_ids)

    def _row(self, node_id: int) -> int:
        try:
            return self._index[node_id]
        except KeyError:
            raise TopologyStructureError(f"节点{node_id}不在延迟矩阵中")

    def __contains__(self, node_id: int) -> bool:
        return node_id in self._index

    def delay(self, src_node_id: int, dest_node_id: int) -> float:
        """查询两节点间的最短延迟

        Args:
            src_node_id: 源节点ID
            dest_node_id: 目标节点ID

        Returns:
            最短延迟，不可达时为inf

        Raises:
            TopologyStructureError: 节点不在矩阵中
        """
        return float(self._delays[self._row(src_node_id), self._row(dest_node_id)])

    def is_reachable(self, src_node_id: int, dest_node_id: int) -> bool:
        return bool(np.isfinite(self.delay(src_node_id, dest_node_id)))

    def as_array(self) -> np.ndarray:
        """返回延迟数组的可写副本"""
        return self._delays.copy()

    def to_dataframe(self) -> pd.DataFrame:
        """导出为以节点ID为行列索引的DataFrame"""
        return pd.DataFrame(self._delays.copy(), index=self._node_ids, columns=self._node_ids)

    def __repr__(self) -> str:
        return f"DelayMatrix(size={self.size}, version={self.version})"


class DelayMatrixCalculator:
    """全源最短延迟计算器（Floyd-Warshall）"""

    def calculate(self, graph: TopologicalGraph) -> DelayMatrix:
        """计算拓扑图的延迟矩阵

        复杂度为O(V^3)，应在一批拓扑修改之后调用一次，而不是每次查询都调用。

        Args:
            graph: 拓扑图

        Returns:
            延迟矩阵
        """
        node_ids = graph.get_nodes()
        delays = self._initial_matrix(graph, node_ids)

        # 松弛：delay[i][j] = min(delay[i][j], delay[i][k] + delay[k][j])
        for k in range(len(node_ids)):
            np.minimum(delays, delays[:, k, np.newaxis] + delays[np.newaxis, k, :], out=delays)

        logger.debug(f"延迟矩阵计算完成：{len(node_ids)}个节点，{graph.link_count()}条链路")
        return DelayMatrix(node_ids, delays, graph.version)

    @staticmethod
    def _initial_matrix(graph: TopologicalGraph, node_ids: List[int]) -> np.ndarray:
        """初始化：对角线为0，直连节点取并行链路的最小延迟，其余为inf"""
        index = {node: i for i, node in enumerate(node_ids)}
        delays = np.full((len(node_ids), len(node_ids)), np.inf, dtype=np.float64)
        for link in graph.get_links():
            i, j = index[link.source], index[link.target]
            if link.latency < delays[i, j]:
                delays[i, j] = link.latency
                delays[j, i] = link.latency
        np.fill_diagonal(delays, 0.0)
        return delays

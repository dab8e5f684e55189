"""网络拓扑管理模块。

此模块提供了拓扑引擎的核心功能，包括：
1. 拓扑图：带宽和延迟链路的无向多重图
2. 实体映射：仿真实体ID和拓扑节点ID之间的映射
3. 延迟矩阵：全源最短延迟计算和缓存
4. 拓扑服务：对仿真内核的统一入口
5. 拓扑读写和生成

Typical usage example:

    from topodelay.network import NetworkTopology

    topology = NetworkTopology.from_file("topology.brite")
    delay = topology.get_delay(3, 7)
"""

from topodelay.network.graph import TopologicalGraph, TopologicalGraphView, GraphVisualizationMixin
from topodelay.network.mapper import EntityNodeMapper
from topodelay.network.delay_matrix import DelayMatrix, DelayMatrixCalculator
from topodelay.network.topology import NetworkTopology
from topodelay.network.readers import load_graph_csv, save_graph_csv, load_graph_brite
from topodelay.network.generators import build_fat_tree

__all__ = ["TopologicalGraph", "TopologicalGraphView", "GraphVisualizationMixin", "EntityNodeMapper",
           "DelayMatrix", "DelayMatrixCalculator", "NetworkTopology", "load_graph_csv", "save_graph_csv",
           "load_graph_brite", "build_fat_tree"]

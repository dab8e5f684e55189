"""拓扑生成模块。

Typical usage example:

    from topodelay.network.generators import build_fat_tree

    graph = build_fat_tree(pod_num=4, seed=7)
"""

from typing import Optional, Tuple

import numpy as np

from topodelay.interfaces.errors import InvalidParameterError
from topodelay.network.graph import TopologicalGraph


def build_fat_tree(pod_num: int = 4, bandwidth: float = 10000.0,
                   latency_range: Tuple[float, float] = (1.0, 10.0),
                   seed: Optional[int] = None) -> TopologicalGraph:
    """生成k叉FatTree交换网络

    节点编号依次为核心层、汇聚层、边缘层交换机。链路延迟在latency_range内
    均匀随机。

    Args:
        pod_num: Pod数量k，必须为非负偶数
        bandwidth: 每条链路的带宽
        latency_range: 链路延迟范围
        seed: 随机种子

    Returns:
        拓扑图

    Raises:
        InvalidParameterError: pod_num不是非负偶数
    """
    if pod_num % 2 != 0 or pod_num < 0:
        raise InvalidParameterError(f"pod_num必须为非负偶数：{pod_num}")

    rng = np.random.default_rng(seed)
    k = pod_num
    pod_size = k // 2
    core_switches = pod_size ** 2  # 核心层交换机数量
    aggr_switches = k * pod_size   # 汇聚层交换机数量
    edge_switches = k * pod_size   # 边缘层交换机数量

    graph = TopologicalGraph()
    for node in range(core_switches + aggr_switches + edge_switches):
        graph.add_node(node)

    def latency() -> float:
        return float(rng.uniform(latency_range[0], latency_range[1]))

    # 1. 连接核心层和汇聚层
    for pod in range(k):
        for j in range(pod_size):
            for r in range(pod_size):
                core = r * pod_size + j
                aggr = core_switches + pod * pod_size + j
                graph.add_link(core, aggr, bandwidth, latency())

    # 2. 连接汇聚层和边缘层
    for pod in range(k):
        for aggr in range(pod_size):
            for edge in range(pod_size):
                aggr_switch = core_switches + pod * pod_size + aggr
                edge_switch = core_switches + aggr_switches + pod * pod_size + edge
                graph.add_link(aggr_switch, edge_switch, bandwidth, latency())

    return graph

import os

from topodelay.network import NetworkTopology

# 获取样例拓扑所在目录
current_dir = os.path.dirname(os.path.abspath(__file__))
topology_dir = os.path.join(current_dir, "..", "..", "input", "topology", "sample")

# 从文件加载拓扑
topology = NetworkTopology.from_file(
    os.path.join(topology_dir, "edges.csv"),
    fmt="csv",
    nodes_csv=os.path.join(topology_dir, "nodes.csv")
)
for node_id in topology.get_topological_graph().get_nodes():
    topology.map_node(node_id, node_id)

print(topology.get_delay_matrix().to_dataframe())

# 可视化拓扑
topology.get_topological_graph().visualize()

"""拓扑文件读写模块。

此模块负责从外部拓扑描述构建拓扑图，包括：
1. CSV格式：nodes.csv（node_id）和edges.csv（source,target,bandwidth,latency）
2. BRITE格式：读取Nodes段的节点ID，以及Edges段的端点、延迟和带宽

Typical usage example:

    from topodelay.network.readers import load_graph_csv, load_graph_brite

    graph = load_graph_csv("nodes.csv", "edges.csv")
    graph = load_graph_brite("topology.brite")
"""

import csv
import logging
from pathlib import Path
from typing import List, Optional, Union

from topodelay.interfaces.errors import InvalidParameterError
from topodelay.network.graph import TopologicalGraph

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# BRITE边记录的字段位置：id from to length delay bandwidth ...
BRITE_EDGE_FROM = 1
BRITE_EDGE_TO = 2
BRITE_EDGE_DELAY = 4
BRITE_EDGE_BANDWIDTH = 5


def load_graph_csv(nodes_csv: Optional[PathLike], edges_csv: PathLike) -> TopologicalGraph:
    """从CSV文件加载拓扑图

    Args:
        nodes_csv: 节点配置文件路径，为None时只从链路推导节点
        edges_csv: 边配置文件路径

    Returns:
        拓扑图

    Raises:
        FileNotFoundError: 文件不存在
        ValueError: 文件格式错误
    """
    graph = TopologicalGraph()

    if nodes_csv is not None:
        try:
            with open(nodes_csv, 'r', newline='', encoding='utf-8') as f:
                reader = csv.DictReader(f)
                for row in reader:
                    graph.add_node(int(row['node_id']))
        except FileNotFoundError:
            raise FileNotFoundError(f"节点配置文件不存在：{nodes_csv}")
        except (KeyError, ValueError) as e:
            raise ValueError(f"节点配置文件格式错误：{str(e)}")

    try:
        with open(edges_csv, 'r', newline='', encoding='utf-8') as f:
            reader = csv.DictReader(f)
            for row in reader:
                graph.add_link(
                    int(row['source']),
                    int(row['target']),
                    float(row['bandwidth']),
                    float(row['latency'])
                )
    except FileNotFoundError:
        raise FileNotFoundError(f"边配置文件不存在：{edges_csv}")
    except InvalidParameterError:
        raise
    except (KeyError, ValueError) as e:
        raise ValueError(f"边配置文件格式错误：{str(e)}")

    return graph


def save_graph_csv(graph: TopologicalGraph, output_dir: PathLike) -> None:
    """将拓扑图保存为nodes.csv和edges.csv，每条并行链路单独一行

    Args:
        graph: 拓扑图或其只读视图
        output_dir: 输出目录路径
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    with open(output_dir / 'nodes.csv', 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(['node_id'])
        for node in graph.get_nodes():
            writer.writerow([node])

    with open(output_dir / 'edges.csv', 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(['source', 'target', 'bandwidth', 'latency'])
        for link in graph.get_links():
            writer.writerow([link.source, link.target, link.bandwidth, link.latency])


def load_graph_brite(path: PathLike) -> TopologicalGraph:
    """从BRITE格式文件加载拓扑图

    只使用节点ID以及边的端点、延迟和带宽，其余字段（坐标、AS号等）忽略。

    Args:
        path: BRITE文件路径

    Returns:
        拓扑图

    Raises:
        FileNotFoundError: 文件不存在
        ValueError: 文件格式错误
    """
    graph = TopologicalGraph()
    section = None
    found_edges_section = False

    try:
        with open(path, 'r', encoding='utf-8') as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue

                if line.startswith('Nodes:'):
                    section = 'node'
                    continue
                if line.startswith('Edges:'):
                    section = 'edge'
                    found_edges_section = True
                    continue
                if section is None or line.startswith(('Topology:', 'Model')):
                    continue

                fields = line.split()
                try:
                    if section == 'node':
                        graph.add_node(int(fields[0]))
                    else:
                        _add_brite_edge(graph, fields)
                except (IndexError, ValueError) as e:
                    raise ValueError(f"BRITE文件第{line_no}行格式错误：{str(e)}")
    except FileNotFoundError:
        raise FileNotFoundError(f"BRITE文件不存在：{path}")

    if not found_edges_section:
        raise ValueError(f"BRITE文件缺少Edges段：{path}")

    logger.debug(f"BRITE文件解析完成：{graph.node_count()}个节点，{graph.link_count()}条链路")
    return graph


def _add_brite_edge(graph: TopologicalGraph, fields: List[str]) -> None:
    graph.add_link(
        int(fields[BRITE_EDGE_FROM]),
        int(fields[BRITE_EDGE_TO]),
        float(fields[BRITE_EDGE_BANDWIDTH]),
        float(fields[BRITE_EDGE_DELAY])
    )

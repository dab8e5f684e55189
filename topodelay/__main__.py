"""topodelay的主入口模块。

此模块提供命令行接口，用于：
1. 从CSV或BRITE文件加载网络拓扑
2. 查询两个实体之间的最短延迟
3. 输出或保存完整的延迟矩阵

Typical usage example:

    python -m topodelay delay \
        --nodes nodes.csv \
        --edges edges.csv \
        --src 100 --dest 200 \
        --map 100:0 --map 200:2

    python -m topodelay matrix --brite topology.brite --output matrix.csv
"""

import argparse
import logging
import sys
from typing import List, Optional, Tuple

from topodelay.interfaces.base_topology import TopologyConfig
from topodelay.network.topology import NetworkTopology

# 配置日志
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def parse_mapping(text: str) -> Tuple[int, int]:
    """解析ENTITY:NODE格式的映射参数"""
    try:
        entity, node = text.split(':', 1)
        return int(entity), int(node)
    except ValueError:
        raise argparse.ArgumentTypeError(f"映射格式应为ENTITY:NODE：{text}")


def load_topology(
    edges: Optional[str] = None,
    nodes: Optional[str] = None,
    brite: Optional[str] = None,
    mappings: Optional[List[Tuple[int, int]]] = None,
    eager: bool = False
) -> NetworkTopology:
    """加载拓扑并建立实体映射

    未给出任何映射时，每个节点映射到同号实体。

    Args:
        edges: 边配置CSV文件路径
        nodes: 节点配置CSV文件路径
        brite: BRITE文件路径，给出时忽略CSV参数
        mappings: (实体ID, 节点ID)列表
        eager: 是否在加载完成时和添加链路后立即重算

    Returns:
        拓扑服务，加载失败时为不可用的服务
    """
    config = TopologyConfig(eager_recompute=eager)
    if brite:
        topology = NetworkTopology.from_file(brite, fmt="brite", config=config)
    else:
        topology = NetworkTopology.from_file(edges, fmt="csv", nodes_csv=nodes, config=config)

    if not topology.is_network_enabled():
        return topology

    if mappings:
        for entity_id, node_id in mappings:
            topology.map_node(entity_id, node_id)
    else:
        for node_id in topology.get_topological_graph().get_nodes():
            topology.map_node(node_id, node_id)
    return topology


def delay(topology: NetworkTopology, src: int, dest: int) -> Optional[float]:
    """查询并输出两个实体之间的延迟"""
    result = topology.get_delay(src, dest)
    if result is None:
        print("unreachable")
    else:
        print(f"{result:g}")
    return result


def matrix(topology: NetworkTopology, output: Optional[str] = None) -> None:
    """输出或保存延迟矩阵"""
    frame = topology.get_delay_matrix().to_dataframe()
    if output:
        frame.to_csv(output)
        logger.info(f"延迟矩阵已保存到{output}")
    else:
        print(frame.to_string())


def main(argv: Optional[List[str]] = None) -> int:
    """命令行入口函数"""
    parser = argparse.ArgumentParser(
        description="topodelay网络拓扑延迟计算工具"
    )

    # 添加子命令
    subparsers = parser.add_subparsers(
        dest='command',
        help='可用命令'
    )

    source_parser = argparse.ArgumentParser(add_help=False)
    source_parser.add_argument(
        '--edges',
        help='边配置CSV文件路径'
    )
    source_parser.add_argument(
        '--nodes',
        help='节点配置CSV文件路径'
    )
    source_parser.add_argument(
        '--brite',
        help='BRITE拓扑文件路径'
    )
    source_parser.add_argument(
        '--map',
        dest='mappings',
        action='append',
        type=parse_mapping,
        help='实体映射，格式为ENTITY:NODE，可重复'
    )
    source_parser.add_argument(
        '--eager',
        action='store_true',
        help='加载完成时和添加链路后立即重算延迟矩阵'
    )
    source_parser.add_argument(
        '--verbose',
        action='store_true',
        help='输出详细日志'
    )

    # delay命令
    delay_parser = subparsers.add_parser(
        'delay',
        parents=[source_parser],
        help='查询两个实体之间的延迟'
    )
    delay_parser.add_argument(
        '--src',
        type=int,
        required=True,
        help='源实体ID'
    )
    delay_parser.add_argument(
        '--dest',
        type=int,
        required=True,
        help='目标实体ID'
    )

    # matrix命令
    matrix_parser = subparsers.add_parser(
        'matrix',
        parents=[source_parser],
        help='输出完整的延迟矩阵'
    )
    matrix_parser.add_argument(
        '--output',
        help='输出CSV文件路径'
    )

    # 解析命令行参数
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.verbose:
        logging.getLogger('topodelay').setLevel(logging.DEBUG)

    if not args.brite and not args.edges:
        parser.error("需要指定--edges或--brite")

    topology = load_topology(
        edges=args.edges,
        nodes=args.nodes,
        brite=args.brite,
        mappings=args.mappings,
        eager=args.eager
    )
    if not topology.is_network_enabled():
        logger.error("网络拓扑不可用")
        return 1

    if args.command == 'delay':
        delay(topology, args.src, args.dest)
    else:
        matrix(topology, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())

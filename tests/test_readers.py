"""
Tests for topology readers, writers and generators.
"""

import pytest

from topodelay.interfaces.errors import InvalidParameterError
from topodelay.network.delay_matrix import DelayMatrixCalculator
from topodelay.network.generators import build_fat_tree
from topodelay.network.readers import load_graph_brite, load_graph_csv, save_graph_csv
from topodelay.network.topology import NetworkTopology


class TestCsv:
    def test_load_sample(self, sample_dir):
        graph = load_graph_csv(sample_dir / "nodes.csv", sample_dir / "edges.csv")

        assert graph.node_count() == 6
        assert graph.link_count() == 7
        assert graph.get_link_latency(0, 1) == 12.0

    def test_nodes_file_is_optional(self, sample_dir):
        graph = load_graph_csv(None, sample_dir / "edges.csv")
        assert graph.get_nodes() == [0, 1, 2, 3, 4]

    def test_save_keeps_parallel_links(self, tmp_path, sample_dir):
        graph = load_graph_csv(sample_dir / "nodes.csv", sample_dir / "edges.csv")
        save_graph_csv(graph, tmp_path / "out")
        reloaded = load_graph_csv(tmp_path / "out" / "nodes.csv", tmp_path / "out" / "edges.csv")

        assert reloaded.link_count() == 7
        assert reloaded.get_nodes() == graph.get_nodes()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_graph_csv(None, tmp_path / "edges.csv")

    def test_missing_column(self, tmp_path):
        edges = tmp_path / "edges.csv"
        edges.write_text("source,target,latency\n0,1,3\n", encoding="utf-8")

        with pytest.raises(ValueError, match="边配置文件格式错误"):
            load_graph_csv(None, edges)

    def test_negative_latency_keeps_parameter_error(self, tmp_path):
        edges = tmp_path / "edges.csv"
        edges.write_text("source,target,bandwidth,latency\n0,1,10,-3\n", encoding="utf-8")

        with pytest.raises(InvalidParameterError):
            load_graph_csv(None, edges)

    def test_csv_service(self, sample_dir):
        service = NetworkTopology.from_file(sample_dir / "edges.csv", fmt="csv",
                                            nodes_csv=sample_dir / "nodes.csv")
        service.map_node(10, 0)
        service.map_node(30, 3)
        service.map_node(50, 5)

        assert service.get_delay(10, 30) == 37.0
        assert service.get_delay(10, 50) is None


class TestBrite:
    def test_load_sample(self, sample_dir):
        graph = load_graph_brite(sample_dir / "topology.brite")

        assert graph.node_count() == 5
        assert graph.link_count() == 5
        assert graph.get_link_latency(0, 4) == 20.0
        assert graph.get_link_bandwidth(2, 3) == 100.0

    def test_shortest_delay(self, sample_dir):
        matrix = DelayMatrixCalculator().calculate(load_graph_brite(sample_dir / "topology.brite"))
        assert matrix.delay(0, 4) == 10.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_graph_brite(tmp_path / "none.brite")

    def test_truncated_edge_line(self, tmp_path):
        path = tmp_path / "bad.brite"
        path.write_text("Nodes: ( 2 )\n0 1 1 1 1 -1 RT_NODE\n1 2 2 1 1 -1 RT_NODE\n\n"
                        "Edges: ( 1 )\n0 0 1 1.0\n", encoding="utf-8")

        with pytest.raises(ValueError, match="第6行"):
            load_graph_brite(path)

    def test_missing_edges_section(self, tmp_path):
        path = tmp_path / "nodes_only.brite"
        path.write_text("Nodes: ( 1 )\n0 1 1 0 0 -1 RT_NODE\n", encoding="utf-8")

        with pytest.raises(ValueError, match="Edges"):
            load_graph_brite(path)


class TestFatTree:
    def test_sizes(self):
        graph = build_fat_tree(pod_num=4, seed=0)

        assert graph.node_count() == 20
        assert graph.link_count() == 32

    def test_latency_range(self):
        graph = build_fat_tree(pod_num=4, latency_range=(2.0, 3.0), seed=0)
        assert all(2.0 <= link.latency <= 3.0 for link in graph.get_links())

    def test_seed_is_reproducible(self):
        first = [link.latency for link in build_fat_tree(pod_num=4, seed=9).get_links()]
        second = [link.latency for link in build_fat_tree(pod_num=4, seed=9).get_links()]
        assert first == second

    def test_fabric_is_connected(self):
        matrix = DelayMatrixCalculator().calculate(build_fat_tree(pod_num=4, seed=1))
        assert all(matrix.is_reachable(0, node) for node in matrix.node_ids)

    @pytest.mark.parametrize("pod_num", [3, -2])
    def test_invalid_pod_num(self, pod_num):
        with pytest.raises(InvalidParameterError):
            build_fat_tree(pod_num=pod_num)

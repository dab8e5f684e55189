"""
Tests for TopologicalGraph and its read-only view.
"""

import math

import networkx as nx
import pytest

from topodelay.interfaces.errors import InvalidParameterError, TopologyStructureError
from topodelay.network.graph import TopologicalGraph, TopologicalGraphView


class TestNodes:
    def test_add_node_is_idempotent(self):
        graph = TopologicalGraph()
        graph.add_node(3)
        version = graph.version
        graph.add_node(3)

        assert graph.node_count() == 1
        assert graph.version == version

    def test_nodes_may_exist_before_any_link(self):
        graph = TopologicalGraph()
        graph.add_node(0)
        graph.add_node(7)

        assert graph.get_nodes() == [0, 7]
        assert graph.link_count() == 0
        assert graph.neighbors(7) == {}

    def test_negative_node_id_rejected(self):
        graph = TopologicalGraph()
        with pytest.raises(InvalidParameterError):
            graph.add_node(-1)

    def test_unknown_node_neighbors_is_structural_error(self):
        graph = TopologicalGraph()
        with pytest.raises(TopologyStructureError):
            graph.neighbors(42)


class TestLinks:
    def test_link_creates_endpoints(self):
        graph = TopologicalGraph()
        graph.add_link(4, 9, bandwidth=100.0, latency=1.5)

        assert graph.has_node(4)
        assert graph.has_node(9)
        assert graph.link_count() == 1

    def test_parallel_links_are_kept(self):
        graph = TopologicalGraph()
        graph.add_link(0, 1, bandwidth=10.0, latency=5.0)
        graph.add_link(0, 1, bandwidth=20.0, latency=2.0)

        assert graph.link_count() == 2
        latencies = sorted(link.latency for link in graph.get_links())
        assert latencies == [2.0, 5.0]

    def test_neighbors_report_min_latency_link(self):
        graph = TopologicalGraph()
        graph.add_link(0, 1, bandwidth=10.0, latency=5.0)
        graph.add_link(1, 0, bandwidth=20.0, latency=2.0)
        graph.add_link(0, 2, bandwidth=30.0, latency=1.0)

        neighbors = graph.neighbors(0)
        assert set(neighbors) == {1, 2}
        assert neighbors[1].latency == 2.0
        assert neighbors[1].bandwidth == 20.0
        assert graph.get_link_latency(1, 0) == 2.0
        assert graph.get_link_bandwidth(0, 1) == 20.0

    def test_unlinked_pair_has_no_latency(self, chain_graph):
        assert chain_graph.get_link_latency(0, 2) is None
        assert chain_graph.get_link_bandwidth(0, 2) is None

    def test_zero_latency_allowed(self):
        graph = TopologicalGraph()
        link = graph.add_link(0, 1, bandwidth=1.0, latency=0)
        assert link.latency == 0.0

    def test_every_link_bumps_version(self):
        graph = TopologicalGraph()
        graph.add_link(0, 1, bandwidth=1.0, latency=1.0)
        version = graph.version
        graph.add_link(0, 1, bandwidth=1.0, latency=1.0)
        assert graph.version == version + 1

    @pytest.mark.parametrize("bandwidth, latency", [
        (0.0, 1.0),
        (-5.0, 1.0),
        (10.0, -0.1),
        (math.nan, 1.0),
        (10.0, math.nan),
        (math.inf, 1.0),
        (10.0, math.inf),
    ])
    def test_invalid_link_parameters(self, bandwidth, latency):
        graph = TopologicalGraph()
        with pytest.raises(InvalidParameterError):
            graph.add_link(0, 1, bandwidth=bandwidth, latency=latency)
        assert graph.node_count() == 0
        assert graph.version == 0

    def test_invalid_parameter_is_value_error(self):
        graph = TopologicalGraph()
        with pytest.raises(ValueError):
            graph.add_link(-1, 1, bandwidth=1.0, latency=1.0)


class TestViewAndExport:
    def test_view_has_no_mutators(self, chain_graph):
        view = TopologicalGraphView(chain_graph)

        assert not hasattr(view, "add_link")
        assert not hasattr(view, "add_node")
        assert view.node_count() == 3
        assert view.link_count() == 2
        assert view.neighbors(1)[2].latency == 3.0

    def test_view_tracks_source_graph(self, chain_graph):
        view = TopologicalGraphView(chain_graph)
        chain_graph.add_link(2, 3, bandwidth=1.0, latency=1.0)

        assert view.node_count() == 4
        assert view.version == chain_graph.version

    def test_copy_is_independent(self, chain_graph):
        clone = chain_graph.copy()
        clone.add_link(5, 6, bandwidth=1.0, latency=1.0)

        assert chain_graph.node_count() == 3
        assert clone.node_count() == 5

    def test_to_networkx_is_frozen_copy(self, chain_graph):
        exported = chain_graph.to_networkx()

        assert nx.is_frozen(exported)
        with pytest.raises(nx.NetworkXError):
            exported.add_edge(0, 2)

    def test_collapsed_graph_keeps_fastest_link(self):
        graph = TopologicalGraph()
        graph.add_link(0, 1, bandwidth=10.0, latency=5.0)
        graph.add_link(0, 1, bandwidth=20.0, latency=2.0)

        collapsed = graph.collapsed_graph()
        assert collapsed.number_of_edges() == 1
        assert collapsed[0][1]["latency"] == 2.0

    def test_visualize_draws_without_showing(self, chain_graph):
        ax = chain_graph.visualize(show=False, seed=1)
        assert ax is not None

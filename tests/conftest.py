"""
Pytest configuration for topodelay tests.
"""

from pathlib import Path

import matplotlib
import pytest

matplotlib.use("Agg")

from topodelay.network.graph import TopologicalGraph  # noqa: E402


SAMPLE_DIR = Path(__file__).parent.parent / "input" / "topology" / "sample"


@pytest.fixture
def sample_dir() -> Path:
    return SAMPLE_DIR


@pytest.fixture
def chain_graph() -> TopologicalGraph:
    """Nodes {0,1,2} linked 0-1 (latency 2) and 1-2 (latency 3)."""
    graph = TopologicalGraph()
    graph.add_link(0, 1, bandwidth=10.0, latency=2.0)
    graph.add_link(1, 2, bandwidth=10.0, latency=3.0)
    return graph

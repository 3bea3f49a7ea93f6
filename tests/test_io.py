from pathlib import Path

import pandas as pd
import pytest

from retweet_influence.diffusion import CascadeModel
from retweet_influence.exceptions import GraphLoadError
from retweet_influence.graph import Graph
from retweet_influence.io import (
    cascade_frame,
    cascade_output_path,
    load_edge_list,
    write_cascade_result,
    write_influencer_report,
)


@pytest.fixture
def edge_file(tmp_path):
    path = tmp_path / "retweets.txt"
    path.write_text("# from to\n2 1\n2 1\n3 1\n2 4\n")
    return path


@pytest.fixture
def weighted_edge_file(tmp_path):
    path = tmp_path / "retweets_weighted.txt"
    path.write_text("2 1 2\n3 1 1\n2 4 1\n")
    return path


def assert_scenario_graph(G):
    assert set(G.nodes()) == {1, 2, 3, 4}
    assert G.get_node(1).followed_by == {2: 2, 3: 1}
    assert G.get_node(2).follows == {1: 2, 4: 1}
    assert G.get_node(1).total_times_retweeted == 3
    assert G.get_node(2).total_retweets_made == 3
    assert G.get_node(3).total_retweets_made == 1


class TestLoadEdgeList:
    """Tests for loading graphs from edge list files."""

    def test_unweighted_duplicates_add_up(self, edge_file):
        assert_scenario_graph(load_edge_list(edge_file))

    def test_weighted(self, weighted_edge_file):
        assert_scenario_graph(load_edge_list(str(weighted_edge_file), weighted=True))

    def test_populates_existing_graph(self, edge_file):
        G = Graph()
        G.add_vertex(9)
        loaded = load_edge_list(edge_file, graph=G)

        assert loaded is G
        assert set(G.nodes()) == {1, 2, 3, 4, 9}

    def test_missing_file(self):
        with pytest.raises(GraphLoadError):
            load_edge_list("nonexistent.txt")
        with pytest.raises(IOError):
            load_edge_list("nonexistent.txt")

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "bad.txt"
        path.write_text("a b\n")
        with pytest.raises(GraphLoadError):
            load_edge_list(path)

    def test_invalid_weight(self, tmp_path):
        path = tmp_path / "zero.txt"
        path.write_text("2 1 0\n")
        with pytest.raises(GraphLoadError):
            load_edge_list(path, weighted=True)

    def test_invalid_weight_leaves_graph_untouched(self, tmp_path):
        path = tmp_path / "late_zero.txt"
        path.write_text("2 1 2\n3 1 1\n2 4 0\n")
        G = Graph()
        G.add_vertex(9)

        with pytest.raises(GraphLoadError):
            load_edge_list(path, weighted=True, graph=G)
        assert G.nodes() == [9]
        assert G.total_weight() == 0


class TestCascadeOutput:
    """Tests for cascade result files."""

    @pytest.fixture
    def result(self, edge_file):
        return CascadeModel(load_edge_list(edge_file)).simulate(5, 1, 1, 1)

    def test_cascade_frame(self, result):
        frame = cascade_frame(result)
        assert list(frame.columns) == ["generation", "number_active", "newly_active"]
        assert frame["generation"].tolist() == [0, 1]
        assert frame["number_active"].tolist() == [1, 3]
        assert frame["newly_active"].tolist() == ["1", "2 3"]

    def test_ids_sort_numerically(self):
        frame = cascade_frame({1: {1}, 3: {2, 10}})
        assert frame["newly_active"].tolist() == ["1", "2 10"]

    def test_mixed_id_types(self):
        frame = cascade_frame({2: {"b", 3}})
        assert frame["newly_active"].tolist() == ["3 b"]

    def test_write_cascade_result(self, result, tmp_path):
        path = write_cascade_result(result, tmp_path / "out" / "cascade.csv")

        assert path.exists()
        frame = pd.read_csv(path, dtype={"newly_active": str})
        assert frame["number_active"].tolist() == [1, 3]
        assert frame["newly_active"].tolist() == ["1", "2 3"]

    def test_output_path_single_seed(self, tmp_path):
        path = cascade_output_path(tmp_path, [7], "higgs")
        assert path == tmp_path / "CascadeFromNode7higgs.csv"

    def test_output_path_many_seeds(self):
        path = cascade_output_path("out", [7, 3, 12], "higgs")
        assert path == Path("out") / "cascadeFromNodes7_3_12higgs.csv"


class TestInfluencerReport:
    """Tests for the influencer text report."""

    def test_report(self, edge_file, tmp_path):
        G = load_edge_list(edge_file)
        path = write_influencer_report(tmp_path / "report.txt", G, G.get_influencer_graphs(2))

        lines = path.read_text().splitlines()
        assert lines == [
            "Graph with 4 nodes",
            "",
            "Graph with 3 nodes and influential node: 1",
            "Graph with 2 nodes and influential node: 4",
        ]

    def test_report_with_paths(self, edge_file, tmp_path):
        G = load_edge_list(edge_file)
        path = write_influencer_report(tmp_path / "report.txt", G, G.get_influencer_graphs(1),
                                       include_paths=True)

        lines = path.read_text().splitlines()
        assert set(lines[3:]) == {
            "Path from Node: 2 to Influencer node: 1--> [2, 1]",
            "Path from Node: 3 to Influencer node: 1--> [3, 1]",
        }

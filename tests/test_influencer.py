import networkx as nx
import pytest

from retweet_influence.graph import Graph
from retweet_influence.influencer import InfluencerGraph


@pytest.fixture
def chain_graph():
    """
    Retweet chain 4 -> 3 -> 2 -> 1 plus a shortcut 4 -> 1 and a user 6 who only follows 5.
    """
    G = Graph()
    for node in [1, 2, 3, 4, 5, 6]:
        G.add_vertex(node)
    G.add_edges_from([(2, 1), (3, 2), (4, 3), (4, 1), (6, 5)])
    return G


@pytest.fixture
def influencer_graph(chain_graph):
    return chain_graph.build_influencer_subgraph(1)


def test_influencer_property(influencer_graph):
    assert influencer_graph.influencer == 1
    assert isinstance(influencer_graph.graph, Graph)


def test_reach(influencer_graph):
    assert set(influencer_graph.nodes()) == {1, 2, 3, 4}
    assert influencer_graph.reach() == 3


def test_shortest_path(influencer_graph):
    assert influencer_graph.shortest_path(2) == [2, 1]
    assert influencer_graph.shortest_path(3) == [3, 2, 1]
    # the shortcut beats the long way round through 3 and 2
    assert influencer_graph.shortest_path(4) == [4, 1]


def test_shortest_path_to_influencer(influencer_graph):
    assert influencer_graph.shortest_path(1) is None


def test_shortest_path_unknown_target(influencer_graph):
    assert influencer_graph.shortest_path(5) is None
    assert influencer_graph.shortest_path(42) is None


def test_shortest_path_influencer_missing(chain_graph):
    g = InfluencerGraph(99, chain_graph)
    assert g.shortest_path(2) is None
    assert g.shortest_paths() == {}


def test_shortest_path_unreachable(chain_graph):
    g = InfluencerGraph(1, chain_graph)
    assert g.shortest_path(6) is None
    assert g.shortest_path(5) is None
    assert g.reach() == 5


def test_shortest_path_matches_hop_distance(chain_graph):
    g = InfluencerGraph(1, chain_graph)
    nx_graph = chain_graph.to_networkx()

    for node in [2, 3, 4]:
        path = g.shortest_path(node)
        assert path[0] == node
        assert path[-1] == 1
        # every hop follows a retweet edge from follower to followed
        assert all(nx_graph.has_edge(u, v) for u, v in zip(path, path[1:]))
        assert len(path) - 1 == nx.shortest_path_length(nx_graph, source=node, target=1)


def test_shortest_paths(influencer_graph):
    paths = influencer_graph.shortest_paths()
    assert set(paths) == {2, 3, 4}
    for node, path in paths.items():
        assert path == influencer_graph.shortest_path(node)


def test_empty_influencer_graph():
    g = InfluencerGraph(1)
    assert g.reach() == 0
    assert g.shortest_path(1) is None

    g.add_vertex(1)
    g.add_vertex(2)
    g.add_edge(2, 1)
    assert g.shortest_path(2) == [2, 1]
    assert g.reach() == 1


def test_cycle_back_to_influencer():
    G = Graph()
    for node in [1, 2, 3]:
        G.add_vertex(node)
    G.add_edges_from([(2, 1), (3, 2), (1, 3)])

    g = G.build_influencer_subgraph(1)
    assert g.shortest_path(3) == [3, 2, 1]


def test_delegation(influencer_graph):
    assert influencer_graph.number_of_nodes() == 4
    assert 3 in influencer_graph
    assert len(influencer_graph) == 4
    assert influencer_graph.get_node(1).total_times_retweeted == 2
    with pytest.raises(AttributeError):
        influencer_graph.not_a_graph_method()


def test_str(influencer_graph):
    assert str(influencer_graph) == "Graph with 4 nodes and influential node: 1"

import logging
from typing import Dict, Hashable, Iterable, Iterator, List, Tuple

import networkx as nx
import numpy as np

from retweet_influence.exceptions import (
    InvalidArgumentError,
    RequestedTooManyInfluencersError,
    UnknownVertexError,
)

logger = logging.getLogger(__name__)


######## VERTEX ########

class GraphNode:
    """
    A single user in the retweet network.

    Edges are kept on both endpoints as weighted adjacency maps: ``follows`` maps the id of every
    user this node retweeted to the number of times it did so, and ``followed_by`` maps the id of
    every user who retweeted this node to the number of times they did so. The two totals are the
    weight sums of those maps and only change together with them.
    """

    def __init__(self, node_id: Hashable):
        self._node_id = node_id
        self._follows: Dict[Hashable, int] = {}
        self._followed_by: Dict[Hashable, int] = {}
        self._total_retweets_made = 0
        self._total_times_retweeted = 0

    def record_follower(self, node_id: Hashable):
        """Count one more retweet of this node by ``node_id``."""
        self._followed_by[node_id] = self._followed_by.get(node_id, 0) + 1
        self._total_times_retweeted += 1

    def record_follows(self, node_id: Hashable):
        """Count one more retweet of ``node_id`` by this node."""
        self._follows[node_id] = self._follows.get(node_id, 0) + 1
        self._total_retweets_made += 1

    @property
    def node_id(self) -> Hashable:
        return self._node_id

    @property
    def follows(self) -> Dict[Hashable, int]:
        """ Returns a copy of the {followed id: weight} map """
        return dict(self._follows)

    @property
    def followed_by(self) -> Dict[Hashable, int]:
        """ Returns a copy of the {follower id: weight} map """
        return dict(self._followed_by)

    @property
    def total_retweets_made(self) -> int:
        return self._total_retweets_made

    @property
    def total_times_retweeted(self) -> int:
        return self._total_times_retweeted

    def __repr__(self) -> str:
        return f"GraphNode({self._node_id!r})"

    def __str__(self) -> str:
        return (f"{self._node_id} following: {self._follows} and followed by: {self._followed_by} "
                f"Made {self._total_retweets_made} retweets. "
                f"Was retweeted {self._total_times_retweeted} times.")


def times_retweeted(node: GraphNode) -> int:
    """
    Ordering key for influencer ranking. Nodes order ascending by how often they were
    retweeted; nodes with equal counts compare equal.
    """
    return node.total_times_retweeted


######## GRAPH ########

class Graph:
    """
    A directed retweet graph stored as a weighted multigraph collapsed into per-pair counts.

    An edge ``(from_id, to_id)`` is recorded as ``from_id`` following ``to_id``: it bumps
    ``follows[to_id]`` on the source node and ``followed_by[from_id]`` on the target node.
    Adding the same pair again increases its weight instead of creating a parallel edge.
    """

    def __init__(self):
        self._nodes: Dict[Hashable, GraphNode] = {}

    @classmethod
    def from_networkx(cls, nx_graph) -> "Graph":
        """
        Builds a Graph from a directed networkx graph.

        Parameters:
        ----------
        nx_graph : nx.DiGraph or nx.MultiDiGraph
            Source graph. The ``weight`` edge attribute (default 1) gives the number of times
            each edge is replayed; parallel edges of a multigraph are each counted.

        Returns:
        -------
        Graph
            A new graph with the same vertices and edge multiplicities.
        """
        if not nx_graph.is_directed():
            raise InvalidArgumentError("Retweet graphs must be built from a directed networkx graph.")

        graph = cls()
        for node in nx_graph.nodes():
            graph.add_vertex(node)
        for u, v, weight in nx_graph.edges(data="weight", default=1):
            graph._replay_edge(u, v, weight)
        return graph

    def add_vertex(self, node_id: Hashable):
        """Adds a vertex. Adding an existing id is a no-op."""
        if node_id not in self._nodes:
            self._nodes[node_id] = GraphNode(node_id)

    def add_edge(self, from_id: Hashable, to_id: Hashable):
        """
        Records one retweet between two existing vertices.

        Parameters:
        ----------
        from_id : Hashable
            Vertex whose ``follows`` map gains ``to_id``.
        to_id : Hashable
            Vertex whose ``followed_by`` map gains ``from_id``.

        Raises:
        ------
        UnknownVertexError
            If either endpoint has not been added. The graph is left unchanged.
        """
        for node_id in (from_id, to_id):
            if node_id not in self._nodes:
                raise UnknownVertexError(node_id)

        self._nodes[from_id].record_follows(to_id)
        self._nodes[to_id].record_follower(from_id)

    def add_edges_from(self, edges: Iterable[Tuple[Hashable, Hashable]]):
        for from_id, to_id in edges:
            self.add_edge(from_id, to_id)

    def _replay_edge(self, from_id: Hashable, to_id: Hashable, weight: int):
        count = int(weight)
        if count < 1 or count != weight:
            raise InvalidArgumentError(f"Invalid weight {weight} for edge ({from_id}, {to_id}). "
                                       "Weights must be positive integers.")
        for _ in range(count):
            self.add_edge(from_id, to_id)

    def deep_copy(self) -> "Graph":
        """
        Makes a fully independent copy of the graph.

        Every vertex is added explicitly so isolated nodes survive, then each outgoing edge is
        replayed as many times as its weight.
        """
        copy = Graph()
        for node_id in self._nodes:
            copy.add_vertex(node_id)
        for node_id, node in self._nodes.items():
            for followed_id, weight in node.follows.items():
                copy.add_vertex(followed_id)
                copy._replay_edge(node_id, followed_id, weight)
        return copy

    ######## INFLUENCERS ########

    def find_influencers(self, k: int) -> List[Hashable]:
        """
        Ranks vertices by how many times they were retweeted.

        Parameters:
        ----------
        k : int
            Number of influencers to return.

        Returns:
        -------
        List[Hashable]
            Ids of the ``k`` most retweeted vertices, most retweeted first. The relative order of
            vertices with equal counts is arbitrary.
        """
        if k < 0:
            raise InvalidArgumentError(f"Number of influencers must be non-negative, got {k}.")
        if k > self.number_of_nodes():
            raise RequestedTooManyInfluencersError(
                f"Requested {k} influencers but the graph only has {self.number_of_nodes()} users.")

        node_ids = list(self._nodes)
        totals = np.fromiter((times_retweeted(node) for node in self._nodes.values()),
                             dtype=np.int64, count=len(node_ids))
        ranking = np.argsort(-totals, kind="stable")[:k]
        influencers = [node_ids[i] for i in ranking]
        logger.info(f"Found {len(influencers)} influencers: {influencers}")
        return influencers

    def build_influencer_subgraph(self, node_id: Hashable) -> "InfluencerGraph":
        """
        Extracts the sphere of influence of ``node_id``.

        Walks follower edges outward from the influencer with a LIFO frontier. Every vertex
        transitively reachable through follower chains is included, along with each
        follower -> followed edge between included vertices at its full original weight.

        Parameters:
        ----------
        node_id : Hashable
            The influencer at the root of the subgraph.

        Returns:
        -------
        InfluencerGraph
            Subgraph rooted at ``node_id``.
        """
        from retweet_influence.influencer import InfluencerGraph

        if node_id not in self._nodes:
            raise UnknownVertexError(node_id)

        subgraph = InfluencerGraph(node_id)
        subgraph.add_vertex(node_id)
        visited = set()
        to_visit = [node_id]

        while to_visit:
            current_id = to_visit.pop()
            if current_id in visited:
                continue
            visited.add(current_id)

            for follower_id, weight in self._nodes[current_id].followed_by.items():
                subgraph.add_vertex(follower_id)
                subgraph.graph._replay_edge(follower_id, current_id, weight)
                if follower_id not in visited:
                    to_visit.append(follower_id)

        logger.debug(f"Influencer {node_id!r} reaches {subgraph.reach()} users.")
        return subgraph

    def get_influencer_graphs(self, k: int) -> List["InfluencerGraph"]:
        """Subgraphs of the ``k`` most retweeted vertices, in ranking order."""
        return [self.build_influencer_subgraph(node_id) for node_id in self.find_influencers(k)]

    ######## QUERIES ########

    def get_node(self, node_id: Hashable) -> GraphNode:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise UnknownVertexError(node_id) from None

    def nodes(self) -> List[Hashable]:
        """ Returns a list of vertex ids """
        return list(self._nodes)

    def edges(self) -> List[Tuple[Hashable, Hashable, int]]:
        """ Returns a list of edges as tuples (from_id, to_id, weight) """
        return [(node_id, followed_id, weight)
                for node_id, node in self._nodes.items()
                for followed_id, weight in node.follows.items()]

    def number_of_nodes(self) -> int:
        return len(self._nodes)

    def number_of_edges(self) -> int:
        """Number of distinct (from_id, to_id) pairs."""
        return sum(len(node.follows) for node in self._nodes.values())

    def total_weight(self) -> int:
        """Number of recorded retweets, counting edge multiplicity."""
        return sum(node.total_retweets_made for node in self._nodes.values())

    def to_networkx(self) -> nx.DiGraph:
        """ Returns an nx.DiGraph with the retweet counts as the ``weight`` edge attribute """
        nx_graph = nx.DiGraph()
        nx_graph.add_nodes_from(self._nodes)
        nx_graph.add_weighted_edges_from(self.edges())
        return nx_graph

    def graph_info(self) -> str:
        """A detailed view of the graph, one line per vertex."""
        return "".join(f"{node}\n" for node in self._nodes.values())

    def __contains__(self, node_id) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __str__(self) -> str:
        return f"Graph with {self.number_of_nodes()} nodes"

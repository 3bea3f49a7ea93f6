import logging
from collections import deque
from typing import Dict, Hashable, List, Optional

from retweet_influence.graph import Graph

logger = logging.getLogger(__name__)


class InfluencerGraph:
    """
    A retweet graph centered on one influential node.

    Wraps a plain Graph and adds shortest-path and reach queries relative to the influencer.
    Any other attribute is looked up on the wrapped graph, so an InfluencerGraph can be used
    wherever a read-only Graph is expected.
    """
    _graph: Graph

    def __init__(self, influencer: Hashable, graph: Optional[Graph] = None):
        """
        Args:
            influencer: Id of the influential node. It does not need to be in the graph yet, but
                        path queries return None until it is.
            graph: The graph to wrap. Defaults to a new empty Graph.
        """
        self._influencer = influencer
        self._graph = graph if graph is not None else Graph()

    @property
    def influencer(self) -> Hashable:
        return self._influencer

    @property
    def graph(self) -> Graph:
        return self._graph

    def _bfs_parents(self, target: Optional[Hashable] = None) -> Dict[Hashable, Hashable]:
        """
        Breadth first search over follower edges starting at the influencer.

        Records the node each vertex was first discovered from. Stops early once ``target`` is
        discovered; with no target the whole reachable set is explored.
        """
        parents = {}
        visited = {self._influencer}
        to_explore = deque([self._influencer])

        while to_explore:
            current_id = to_explore.popleft()
            if current_id == target:
                break
            for follower_id in self._graph.get_node(current_id).followed_by:
                if follower_id not in visited:
                    visited.add(follower_id)
                    parents[follower_id] = current_id
                    to_explore.append(follower_id)
        return parents

    def _path_from(self, node_id: Hashable, parents: Dict[Hashable, Hashable]) -> List[Hashable]:
        path = [node_id]
        while path[-1] != self._influencer:
            path.append(parents[path[-1]])
        return path

    def shortest_path(self, target: Hashable) -> Optional[List[Hashable]]:
        """
        Shortest follower chain between ``target`` and the influencer.

        Parameters:
        ----------
        target : Hashable
            The node to find a path to.

        Returns:
        -------
        Optional[List[Hashable]]
            Ids from ``target`` back to the influencer, both inclusive. None if either node is
            missing from the graph, if ``target`` is the influencer, or if no path exists.
        """
        if target not in self._graph or self._influencer not in self._graph:
            logger.debug(f"Nodes {target!r} and {self._influencer!r} are invalid. No path.")
            return None
        if target == self._influencer:
            return None

        parents = self._bfs_parents(target)
        if target not in parents:
            return None
        return self._path_from(target, parents)

    def shortest_paths(self) -> Dict[Hashable, List[Hashable]]:
        """
        Shortest paths from every reachable node back to the influencer, using a single BFS.
        The influencer itself is not included.
        """
        if self._influencer not in self._graph:
            return {}
        parents = self._bfs_parents()
        return {node_id: self._path_from(node_id, parents) for node_id in parents}

    def reach(self) -> int:
        """Number of users within the influencer's sphere, excluding the influencer."""
        return max(self._graph.number_of_nodes() - 1, 0)

    def __getattr__(self, name: str):
        """
        Delegates attribute and method calls to the wrapped graph.
        """
        graph = self.__dict__.get("_graph")
        if graph is None:
            raise AttributeError(name)
        try:
            return getattr(graph, name)
        except AttributeError as e:
            raise AttributeError(
                f"'{type(self).__name__}' object has no attribute '{name}'. It was also not found "
                f"on the wrapped '{type(graph).__name__}'."
            ) from e

    def __contains__(self, node_id) -> bool:
        return node_id in self._graph

    def __iter__(self):
        return iter(self._graph)

    def __len__(self) -> int:
        return len(self._graph)

    def __str__(self) -> str:
        return f"{self._graph} and influential node: {self._influencer}"

import logging
from typing import Collection, Dict, Hashable, Iterable, Set, Union

from retweet_influence.exceptions import InvalidArgumentError, UnknownVertexError
from retweet_influence.graph import Graph, GraphNode

logger = logging.getLogger(__name__)

Seed = Union[Hashable, Iterable[Hashable]]
CascadeResult = Dict[int, Set[Hashable]]


######## THRESHOLD CASCADE WITH INFLUENCERS #######

class CascadeModel:
    """
    Generational cascade of a new behavior through a retweet network.

    Starting from one or more seed nodes, every generation looks at the followers of the
    currently active nodes. A follower adopts the behavior when the share of its retweets that
    went to active nodes is strictly greater than the threshold
    ``reward_for_inertia / (reward_for_inertia + reward_for_change)``. A higher reward for
    inertia makes users harder to convert.

    The model never mutates the graph, and the active set lives only for the length of one
    ``simulate`` call, so repeated or concurrent runs on the same graph are independent.
    """

    def __init__(self, graph: Graph):
        """
        Parameters:
        ----------
        graph : Graph
            The retweet network the cascade runs on.
        """
        self.graph = graph

    @staticmethod
    def threshold(reward_for_inertia: float, reward_for_change: float) -> float:
        """Share of retweets to active nodes a user needs before it adopts."""
        return reward_for_inertia / (reward_for_inertia + reward_for_change)

    @staticmethod
    def influence_fraction(node: GraphNode, active_nodes: Collection[Hashable]) -> float:
        """
        Share of ``node``'s retweets that went to active nodes.

        A node that never retweeted anyone has no measurable susceptibility, so its fraction
        is 0 and it can never adopt.
        """
        if node.total_retweets_made == 0:
            return 0.0
        active_weight = sum(weight for followed_id, weight in node.follows.items()
                            if followed_id in active_nodes)
        return active_weight / node.total_retweets_made

    @staticmethod
    def _validate_arguments(max_generations: int, reward_for_inertia: float, reward_for_change: float):
        if max_generations <= 0 or reward_for_inertia <= 0 or reward_for_change <= 0:
            raise InvalidArgumentError(
                "Generations and reward values must be positive, got "
                f"max_generations={max_generations}, reward_for_inertia={reward_for_inertia}, "
                f"reward_for_change={reward_for_change}.")

    def _seed_set(self, seed: Seed) -> Set[Hashable]:
        """Accepts a single node id or an iterable of node ids."""
        if isinstance(seed, Hashable) and seed in self.graph:
            seeds = {seed}
        elif isinstance(seed, Iterable) and not isinstance(seed, (str, bytes)):
            seeds = set(seed)
        else:
            seeds = {seed}

        if not seeds:
            raise InvalidArgumentError("At least one node must be seeded.")
        for node_id in seeds:
            if node_id not in self.graph:
                raise UnknownVertexError(node_id)
        return seeds

    def _spread(self, active_nodes: Set[Hashable], threshold: float) -> Set[Hashable]:
        """
        Runs one generation and returns the nodes that adopt in it.

        Every follower of an active node is evaluated at most once, against the active set as it
        was at the start of the generation.
        """
        candidates = {
            follower_id
            for node_id in active_nodes
            for follower_id in self.graph.get_node(node_id).followed_by
            if follower_id not in active_nodes
        }

        return {
            candidate_id for candidate_id in candidates
            if self.influence_fraction(self.graph.get_node(candidate_id), active_nodes) > threshold
        }

    def simulate(self, max_generations: int, seed: Seed, reward_for_inertia: float,
                 reward_for_change: float) -> CascadeResult:
        """
        Runs a single cascade to completion or until ``max_generations`` is reached.

        Parameters:
        ----------
        max_generations : int
            Maximum number of generations to model. Must be positive.
        seed : Hashable or Iterable[Hashable]
            The influential node, or several nodes seeded concurrently.
        reward_for_inertia : float
            Reward for keeping the old behavior. Must be positive.
        reward_for_change : float
            Reward for adopting the new behavior. Must be positive.

        Returns:
        -------
        Dict[int, Set[Hashable]]
            Insertion-ordered mapping from the number of active nodes after each step to the nodes
            that became active in that step. The first entry is the seed set.
        """
        self._validate_arguments(max_generations, reward_for_inertia, reward_for_change)
        active_nodes = self._seed_set(seed)
        threshold = self.threshold(reward_for_inertia, reward_for_change)

        seed_count = len(active_nodes)
        result: CascadeResult = {seed_count: set(active_nodes)}

        for generation in range(1, max_generations + 1):
            newly_active = self._spread(active_nodes, threshold)
            if not newly_active:
                logger.debug(f"Cascade settled after {generation - 1} generations.")
                break

            active_nodes.update(newly_active)
            result[len(active_nodes)] = newly_active
            logger.debug(f"Generation {generation}: {len(newly_active)} adopted, {len(active_nodes)} active.")

        logger.info(f"Cascade from {seed_count} seed(s) reached "
                    f"{len(active_nodes)} of {self.graph.number_of_nodes()} users.")
        return result

    def simulate_each(self, max_generations: int, seeds: Iterable[Hashable], reward_for_inertia: float,
                      reward_for_change: float) -> Dict[Hashable, CascadeResult]:
        """
        Runs one independent cascade per seed node, in the order given.
        """
        self._validate_arguments(max_generations, reward_for_inertia, reward_for_change)
        return {
            node_id: self.simulate(max_generations, {node_id}, reward_for_inertia, reward_for_change)
            for node_id in seeds
        }

    def __call__(self, max_generations: int, seed: Seed, reward_for_inertia: float,
                 reward_for_change: float) -> CascadeResult:
        return self.simulate(max_generations, seed, reward_for_inertia, reward_for_change)

    def __str__(self):
        return f"{self.__class__.__name__}({self.graph})"

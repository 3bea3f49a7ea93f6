import logging
from pathlib import Path
from typing import Hashable, Iterable, Optional, Sequence, Union

import networkx as nx
import pandas as pd

from retweet_influence.exceptions import GraphLoadError
from retweet_influence.graph import Graph
from retweet_influence.influencer import InfluencerGraph

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


######## LOADING ########

def load_edge_list(file_path: PathLike, weighted: bool = False, graph: Optional[Graph] = None) -> Graph:
    """
    Loads a retweet graph from an edge list file using the NetworkX parser.

    Parameters:
    ----------
    file_path : str or Path
        Path to a whitespace separated edge list. Each line is ``from to`` or, when ``weighted``,
        ``from to weight``. Lines starting with ``#`` are ignored. Repeated lines add up.
    weighted : bool, optional
        Whether a third integer column holds the number of retweets. Defaults to False.
    graph : Graph, optional
        Graph to populate. A new one is created if omitted.

    Returns:
    -------
    Graph
        The populated graph.
    """
    graph = graph if graph is not None else Graph()
    logger.info(f"Loading graph from {file_path} using NetworkX parser...")
    try:
        nx_graph = nx.read_edgelist(
            file_path,
            create_using=nx.MultiDiGraph,
            nodetype=int,
            data=(("weight", int),) if weighted else False,
        )
    except Exception as e:
        raise GraphLoadError(f"Error loading file {file_path} with NetworkX: {e}") from e

    edges = list(nx_graph.edges(data="weight", default=1))
    for from_id, to_id, weight in edges:
        if weight < 1:
            raise GraphLoadError(f"Invalid weight {weight} for edge ({from_id}, {to_id}) in {file_path}.")

    for node_id in nx_graph.nodes():
        graph.add_vertex(node_id)
    for from_id, to_id, weight in edges:
        for _ in range(weight):
            graph.add_edge(from_id, to_id)

    logger.info(f"Loaded {graph} and {graph.total_weight()} retweets.")
    return graph


######## WRITING ########

def _sorted_ids(node_ids):
    try:
        return sorted(node_ids)
    except TypeError:
        # mixed id types
        return sorted(node_ids, key=str)


def cascade_frame(result) -> pd.DataFrame:
    """One row per cascade step: generation, number of active nodes and the newly active ids."""
    rows = [
        {
            "generation": generation,
            "number_active": number_active,
            "newly_active": " ".join(str(node_id) for node_id in _sorted_ids(newly_active)),
        }
        for generation, (number_active, newly_active) in enumerate(result.items())
    ]
    return pd.DataFrame(rows, columns=["generation", "number_active", "newly_active"])


def write_cascade_result(result, file_path: PathLike) -> Path:
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    cascade_frame(result).to_csv(file_path, index=False)
    logger.info(f"Wrote {len(result)} cascade steps to {file_path}")
    return file_path


def cascade_output_path(output_dir: PathLike, seeds: Sequence[Hashable], input_name: str) -> Path:
    """
    File name for a cascade result. A single seed gives ``CascadeFromNode<seed><input>.csv``,
    several concurrent seeds give ``cascadeFromNodes<a>_<b>...<input>.csv``.
    """
    if len(seeds) == 1:
        name = f"CascadeFromNode{seeds[0]}{input_name}.csv"
    else:
        name = f"cascadeFromNodes{'_'.join(str(seed) for seed in seeds)}{input_name}.csv"
    return Path(output_dir) / name


def write_influencer_report(file_path: PathLike, graph: Graph, influencer_graphs: Iterable[InfluencerGraph],
                            include_paths: bool = False) -> Path:
    """
    Writes a text summary of the network and each influencer's subgraph.

    With ``include_paths`` the shortest path from every node in a subgraph back to its
    influencer is listed as well. This runs a BFS per influencer and is slow on large networks.
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    influencer_graphs = list(influencer_graphs)

    lines = [str(graph), ""]
    lines.extend(str(influencer_graph) for influencer_graph in influencer_graphs)
    if include_paths:
        for influencer_graph in influencer_graphs:
            for node_id, path in influencer_graph.shortest_paths().items():
                lines.append(f"Path from Node: {node_id} to Influencer node: "
                             f"{influencer_graph.influencer}--> [{', '.join(str(n) for n in path)}]")

    file_path.write_text("\n".join(lines) + "\n")
    logger.info(f"Wrote influencer report for {len(influencer_graphs)} influencers to {file_path}")
    return file_path

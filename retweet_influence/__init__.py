"""Top-level package for influencer discovery and cascade modeling on retweet networks."""

from .graph import Graph, GraphNode, times_retweeted
from .influencer import InfluencerGraph
from .diffusion import CascadeModel
from .exceptions import (
    InfluencerError,
    InvalidArgumentError,
    UnknownVertexError,
    RequestedTooManyInfluencersError,
    GraphLoadError,
    ConfigError,
)

__all__ = [
    "Graph",
    "GraphNode",
    "times_retweeted",
    "InfluencerGraph",
    "CascadeModel",
    "InfluencerError",
    "InvalidArgumentError",
    "UnknownVertexError",
    "RequestedTooManyInfluencersError",
    "GraphLoadError",
    "ConfigError",
]

__version__ = "0.1"

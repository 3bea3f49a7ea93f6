"""Exceptions raised by the retweet_influence package."""


class InfluencerError(Exception):
    """Base class for all errors raised by this package."""


class InvalidArgumentError(InfluencerError, ValueError):
    """A generation count, reward, seed or k value is out of range."""


class UnknownVertexError(InfluencerError, KeyError):
    """A vertex id was referenced before it was added to the graph."""

    def __init__(self, node):
        self.node = node
        super().__init__(node)

    def __str__(self):
        return f"Vertex {self.node!r} is not in the graph. Add nodes first."


class RequestedTooManyInfluencersError(InfluencerError, ValueError):
    """More influencers were requested than there are vertices."""


class GraphLoadError(InfluencerError, IOError):
    """An edge list could not be read or parsed."""


class ConfigError(InfluencerError, ValueError):
    """A run configuration failed validation."""

"""Graph storage for the Steiner Forest solver."""

from sfgraph.graph.csr import (
    NO_EDGE,
    Edge,
    Graph,
    has_negative_weights,
    is_graph_connected,
)

__all__ = [
    "Edge",
    "Graph",
    "NO_EDGE",
    "has_negative_weights",
    "is_graph_connected",
]

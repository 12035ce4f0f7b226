"""Shared types for sfgraph."""

from sfgraph.types.base import (
    COST_EPS,
    INF,
    REUSED_EDGE_WEIGHT,
    UNREACHABLE_COST,
    Cost,
)

__all__ = ["Cost", "INF", "COST_EPS", "REUSED_EDGE_WEIGHT", "UNREACHABLE_COST"]

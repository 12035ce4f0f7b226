"""Shared numeric types and constants for the Steiner Forest solver."""

from __future__ import annotations

from typing import Union

#: Represents numeric cost in the graph (edge weight, path cost, objective).
Cost = Union[int, float]

#: Weight used to make an edge unusable on a working graph.
INF: float = float("inf")

#: Cost difference below which two objective values are treated as equal.
COST_EPS = 1e-9

#: Working-graph weight given to an edge already bought by the solution.
#: Reused edges become indistinguishable from free new connections.
REUSED_EDGE_WEIGHT = 0.0

#: Sentinel cost returned for an unreachable shortest-path query.
UNREACHABLE_COST = -1.0

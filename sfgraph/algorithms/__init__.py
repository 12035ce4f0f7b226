"""Connectivity and shortest-path algorithms."""

from sfgraph.algorithms.dsu import DSU
from sfgraph.algorithms.spf import UNREACHABLE, PathResult, ShortestPathEngine

__all__ = ["DSU", "PathResult", "ShortestPathEngine", "UNREACHABLE"]

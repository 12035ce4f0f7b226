"""sfgraph: GRASP heuristics for the Steiner Forest Problem.

Given a weighted graph and terminal node pairs, sfgraph searches for a
low-cost set of edges under which every pair lies in one connected component.

Primary API:
    Problem - validated instance (graph + terminal pairs)
    Solution, Move - edge-activation state and reversible changes to it
    GraspSolver - repeated construction + local search, keep the best
    GraspConstructive, LocalSearch - the two GRASP phases
    read_problem() - parse a benchmark instance file

Example:
    from sfgraph import GraspSolver, Problem

    problem = Problem.from_edges(
        3, [(0, 1, 100.0), (0, 2, 10.0), (2, 1, 10.0)], terminals=[(0, 1)]
    )
    best = GraspSolver(iterations=5, alpha=0.3, seed=1).solve(problem)
    best.cost  # 20.0
"""

from __future__ import annotations

from sfgraph import logging
from sfgraph._version import __version__
from sfgraph.algorithms import DSU, UNREACHABLE, PathResult, ShortestPathEngine
from sfgraph.config import SolverConfig, load_config
from sfgraph.graph import NO_EDGE, Edge, Graph
from sfgraph.io import find_instance_files, parse_problem, read_problem
from sfgraph.model import Move, MoveType, Problem, Solution
from sfgraph.solver import GraspConstructive, GraspSolver, LocalSearch, prune

__all__ = [
    "__version__",
    # Graph
    "Edge",
    "Graph",
    "NO_EDGE",
    # Algorithms
    "DSU",
    "PathResult",
    "ShortestPathEngine",
    "UNREACHABLE",
    # Model
    "Problem",
    "Solution",
    "Move",
    "MoveType",
    # Solver
    "GraspConstructive",
    "LocalSearch",
    "GraspSolver",
    "prune",
    # I/O and configuration
    "read_problem",
    "parse_problem",
    "find_instance_files",
    "SolverConfig",
    "load_config",
    "logging",
]

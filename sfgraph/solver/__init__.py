"""GRASP solver phases for the Steiner Forest Problem."""

from sfgraph.solver.constructive import (
    CandidatePair,
    GraspConstructive,
    generate_pairs,
    group_terminals,
)
from sfgraph.solver.grasp import GraspSolver, SolveStats
from sfgraph.solver.local_search import LocalSearch, prune

__all__ = [
    "CandidatePair",
    "GraspConstructive",
    "GraspSolver",
    "LocalSearch",
    "SolveStats",
    "generate_pairs",
    "group_terminals",
    "prune",
]

"""Single-edge move neighbourhoods of a solution."""

from __future__ import annotations

from typing import List

from sfgraph.model.solution import Move, MoveType, Solution


def add_moves(solution: Solution) -> List[Move]:
    """One ADD move per canonical edge not yet in ``solution``."""
    graph = solution.problem.graph
    return [
        Move(MoveType.ADD, i, graph.edges[i].weight)
        for i in graph.canonical_edges()
        if not solution.is_edge_active(i)
    ]


def remove_moves(solution: Solution) -> List[Move]:
    """One REMOVE move per canonical edge in ``solution``."""
    edges = solution.problem.graph.edges
    return [
        Move(MoveType.REMOVE, i, edges[i].weight) for i in solution.active_edges()
    ]

"""Shared fixtures: small hand-made instances and a seeded random generator."""

from __future__ import annotations

import random
from typing import Callable, List, Tuple

import pytest

from sfgraph.graph.csr import Graph
from sfgraph.model.problem import Problem
from sfgraph.model.solution import Solution


def random_connected_edges(
    n_nodes: int, extra_edges: int, rng: random.Random
) -> List[Tuple[int, int, float]]:
    """Random spanning tree plus ``extra_edges`` distinct chords."""
    edges = []
    seen = set()
    for v in range(1, n_nodes):
        u = rng.randrange(v)
        edges.append((u, v, float(rng.randint(1, 20))))
        seen.add((u, v))
    while extra_edges > 0:
        u, v = sorted(rng.sample(range(n_nodes), 2))
        if (u, v) in seen:
            continue
        seen.add((u, v))
        edges.append((u, v, float(rng.randint(1, 20))))
        extra_edges -= 1
    return edges


def make_random_problem(
    seed: int, n_nodes: int = 12, extra_edges: int = 15, n_pairs: int = 4
) -> Problem:
    rng = random.Random(seed)
    edges = random_connected_edges(n_nodes, extra_edges, rng)
    pairs = [tuple(rng.sample(range(n_nodes), 2)) for _ in range(n_pairs)]
    return Problem.from_edges(n_nodes, edges, pairs, name=f"random-{seed}")


def active_degrees(solution: Solution) -> List[int]:
    graph = solution.problem.graph
    degree = [0] * graph.n_nodes
    for i in solution.active_edges():
        degree[graph.edges[i].source] += 1
        degree[graph.edges[i].target] += 1
    return degree


@pytest.fixture
def random_problem() -> Callable[..., Problem]:
    return make_random_problem


@pytest.fixture
def triangle_graph() -> Graph:
    #      [10]       [10]
    #   0 ─────── 1 ─────── 2
    #   └───────────────────┘
    #            [5]
    return Graph(3, [(0, 1, 10.0), (1, 2, 10.0), (0, 2, 5.0)])


@pytest.fixture
def detour_problem() -> Problem:
    #   0 ──[100]── 1
    #    \         /
    #   [10]    [10]
    #      \   /
    #        2
    return Problem.from_edges(
        3, [(0, 1, 100.0), (0, 2, 10.0), (2, 1, 10.0)], [(0, 1)], name="detour"
    )


@pytest.fixture
def line_problem() -> Problem:
    # 0 ─[1]─ 1 ─[2]─ 2 ─[3]─ 3, terminals (0, 3) and (1, 2)
    return Problem.from_edges(
        4, [(0, 1, 1.0), (1, 2, 2.0), (2, 3, 3.0)], [(0, 3), (1, 2)], name="line"
    )


@pytest.fixture
def instance_text() -> str:
    return "\n".join(
        [
            "33D32945 STP File, STP Format Version 1.0",
            "",
            "SECTION Graph",
            "Nodes 4",
            "Edges 4",
            "E 1 2 10",
            "E 2 3 20",
            "E 3 4 30",
            "E 1 4 100",
            "END",
            "",
            "SECTION Terminals",
            "Terminals 1",
            "TP 1 4",
            "END",
            "",
            "EOF",
        ]
    )


@pytest.fixture
def degrees_of() -> Callable[[Solution], List[int]]:
    return active_degrees

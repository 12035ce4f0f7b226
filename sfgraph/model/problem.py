"""Static definition of a Steiner Forest Problem instance."""

from __future__ import annotations

import random
from math import isfinite
from typing import FrozenSet, Iterable, Optional, Sequence, Tuple

from sfgraph.algorithms.dsu import DSU
from sfgraph.algorithms.spf import ShortestPathEngine
from sfgraph.graph.csr import Graph, has_negative_weights, is_graph_connected
from sfgraph.model.solution import Move, Solution
from sfgraph.types.base import Cost

TerminalPair = Tuple[int, int]


class Problem:
    """A graph plus the terminal pairs that must end up connected.

    The graph is validated once here and treated as read-only afterwards;
    solver phases that need to re-weight edges work on their own copies.

    Args:
        graph: CSR graph of the instance.
        terminals: Unordered node pairs to connect.
        name: Instance label used in logs and reports.

    Raises:
        ValueError: If ``graph`` is None, has negative or non-finite weights,
            is not connected, or a terminal id is out of range.
    """

    def __init__(
        self,
        graph: Graph,
        terminals: Iterable[Sequence[int]],
        name: str = "Manual",
    ) -> None:
        if graph is None:
            raise ValueError("Graph cannot be None.")

        pairs = tuple((int(p[0]), int(p[1])) for p in terminals)
        for source, target in pairs:
            if not (0 <= source < graph.n_nodes and 0 <= target < graph.n_nodes):
                raise ValueError(
                    f"Terminal pair ({source}, {target}) references a node outside "
                    f"0..{graph.n_nodes - 1}."
                )

        if any(not isfinite(edge.weight) for edge in graph.edges):
            raise ValueError("Graph has non-finite weights.")
        if has_negative_weights(graph):
            raise ValueError("Graph has negative weights.")
        if not is_graph_connected(graph):
            raise ValueError("Graph is not connected.")

        self._graph = graph
        self._terminals: Tuple[TerminalPair, ...] = pairs
        self._terminal_nodes: FrozenSet[int] = frozenset(
            node for pair in pairs for node in pair
        )
        self.name = name

    @classmethod
    def from_edges(
        cls,
        n_nodes: int,
        edges: Iterable[Sequence[Cost]],
        terminals: Iterable[Sequence[int]],
        name: str = "Manual",
        bidirectional: bool = True,
    ) -> Problem:
        """Build the graph from a raw edge list and validate the instance."""
        return cls(Graph(n_nodes, edges, bidirectional=bidirectional), terminals, name)

    @property
    def graph(self) -> Graph:
        return self._graph

    @property
    def terminals(self) -> Tuple[TerminalPair, ...]:
        return self._terminals

    @property
    def terminal_nodes(self) -> FrozenSet[int]:
        """Every node that appears in at least one terminal pair."""
        return self._terminal_nodes

    @property
    def n_nodes(self) -> int:
        return self._graph.n_nodes

    @property
    def n_edges(self) -> int:
        return self._graph.n_edges

    def empty_solution(self) -> Solution:
        return Solution(self)

    def random_solution(self, rng: Optional[random.Random] = None) -> Solution:
        """Connect the pairs in random order along plain shortest paths.

        Pairs already joined by earlier paths are skipped. This is a cheap
        baseline, not the GRASP construction.
        """
        rng = rng or random.Random()
        solution = Solution(self)
        dsu = DSU(self.n_nodes)
        engine = ShortestPathEngine(self.n_nodes)
        edges = self._graph.edges

        pairs = list(self._terminals)
        rng.shuffle(pairs)
        for source, target in pairs:
            if dsu.is_connected(source, target):
                continue
            result = engine.shortest_path(self._graph, source, target)
            for edge_index in result.edges:
                if not solution.is_edge_active(edge_index):
                    Move.add(self, edge_index).apply(solution)
                dsu.unite(edges[edge_index].source, edges[edge_index].target)
        return solution

    def __repr__(self) -> str:
        return (
            f"Problem(name={self.name!r}, n_nodes={self.n_nodes}, "
            f"n_edges={self.n_edges}, terminals={len(self._terminals)})"
        )

    def __str__(self) -> str:
        return (
            f"SFP instance {self.name}: {self.n_nodes} nodes, "
            f"{self.n_edges} directed edges, {len(self._terminals)} terminal pairs, "
            f"total weight {self._graph.total_weight:g}"
        )

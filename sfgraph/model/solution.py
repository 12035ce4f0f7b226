"""Mutable solution state and the reversible moves that change it.

A :class:`Solution` is an edge-activation overlay on a Problem's graph plus a
cached objective value. The overlay is only changed through :class:`Move`, so
the cached cost always equals the weight of the active canonical edges.

The running total is kept as an exact rational, so any sequence of moves and
their undos leaves the float cost bit-identical to a fresh summation of the
same edge set.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from sfgraph.algorithms.dsu import DSU

if TYPE_CHECKING:
    from sfgraph.model.problem import Problem


class MoveType(Enum):
    """Direction of an edge move."""

    ADD = "add"
    REMOVE = "remove"


class Solution:
    """Active-edge set over a Problem's graph with a cached cost.

    Twins of bidirectional edges are always activated together, and the cost
    counts each undirected edge once.
    """

    def __init__(self, problem: Problem) -> None:
        self._problem = problem
        self._active: List[bool] = [False] * problem.n_edges
        self._total: Fraction = Fraction(0)
        self._cost: float = 0.0

    @property
    def problem(self) -> Problem:
        return self._problem

    @property
    def cost(self) -> float:
        """Total weight of the active edges."""
        return self._cost

    def get_objective_value(self) -> float:
        return self._cost

    def is_edge_active(self, edge_index: int) -> bool:
        if edge_index < 0:
            raise IndexError(f"Edge index {edge_index} out of bounds.")
        return self._active[edge_index]

    def _set_active(self, edge_index: int, status: bool) -> None:
        if not 0 <= edge_index < len(self._active):
            raise IndexError(f"Edge index {edge_index} out of bounds.")
        self._active[edge_index] = status
        reverse = self._problem.graph.edges[edge_index].reverse_index
        if reverse >= 0:
            self._active[reverse] = status

    def _credit(self, amount: float) -> None:
        self._total += Fraction(amount)
        self._cost = float(self._total)

    def active_edges(self) -> List[int]:
        """Indices of the active canonical edges, ascending."""
        graph = self._problem.graph
        return [
            i
            for i, active in enumerate(self._active)
            if active and graph.is_canonical(i)
        ]

    def edge_pairs(self) -> List[Tuple[int, int]]:
        """``(source, target)`` of every active canonical edge."""
        edges = self._problem.graph.edges
        return [(edges[i].source, edges[i].target) for i in self.active_edges()]

    @property
    def n_active_edges(self) -> int:
        return len(self.active_edges())

    def build_dsu(self, dsu: Optional[DSU] = None) -> DSU:
        """Union the endpoints of every active canonical edge.

        Args:
            dsu: DSU to reset and reuse; a new one is created when omitted.
        """
        if dsu is None:
            dsu = DSU(self._problem.n_nodes)
        else:
            dsu.reset()
        edges = self._problem.graph.edges
        for i in self.active_edges():
            dsu.unite(edges[i].source, edges[i].target)
        return dsu

    def is_feasible(self, dsu: Optional[DSU] = None) -> bool:
        """True if every terminal pair lies in one component of active edges."""
        dsu = self.build_dsu(dsu)
        return all(
            dsu.is_connected(source, target)
            for source, target in self._problem.terminals
        )

    def copy(self) -> Solution:
        clone = Solution.__new__(Solution)
        clone._problem = self._problem
        clone._active = list(self._active)
        clone._total = self._total
        clone._cost = self._cost
        return clone

    def same_edges(self, other: Solution) -> bool:
        return self._problem is other._problem and self._active == other._active

    def __lt__(self, other: Solution) -> bool:
        return self._cost < other._cost

    def __gt__(self, other: Solution) -> bool:
        return self._cost > other._cost

    def to_dict(self) -> Dict[str, Any]:
        return {
            "instance": self._problem.name,
            "cost": self._cost,
            "edges": [list(pair) for pair in self.edge_pairs()],
        }

    def __repr__(self) -> str:
        return (
            f"Solution(cost={self._cost:g}, active_edges={self.n_active_edges}, "
            f"instance={self._problem.name!r})"
        )

    def __str__(self) -> str:
        pairs = self.edge_pairs()
        listed = " ".join(f"({u}->{v})" for u, v in pairs) if pairs else "None"
        return f"Solution Cost: {self._cost:g}\nActive Edges: [ {listed} ]"


@dataclass(frozen=True)
class Move:
    """Atomic, reversible activation change of one edge (and its twin).

    Attributes:
        type: ADD or REMOVE.
        edge_index: Index into the Problem graph's edge array.
        cost_delta: Edge weight; added on ADD, subtracted on REMOVE.
    """

    type: MoveType
    edge_index: int
    cost_delta: float

    @classmethod
    def add(cls, problem: Problem, edge_index: int) -> Move:
        return cls(MoveType.ADD, edge_index, problem.graph.edges[edge_index].weight)

    @classmethod
    def remove(cls, problem: Problem, edge_index: int) -> Move:
        return cls(MoveType.REMOVE, edge_index, problem.graph.edges[edge_index].weight)

    def _toggle(self, solution: Solution, activate: bool) -> Solution:
        if solution.is_edge_active(self.edge_index) == activate:
            state = "active" if activate else "inactive"
            raise ValueError(f"Edge {self.edge_index} is already {state}.")
        solution._set_active(self.edge_index, activate)
        solution._credit(self.cost_delta if activate else -self.cost_delta)
        return solution

    def apply(self, solution: Solution) -> Solution:
        """Perform the move in place and return ``solution``.

        Raises:
            ValueError: If the edge is already in the target state.
            IndexError: If ``edge_index`` is out of range.
        """
        return self._toggle(solution, self.type is MoveType.ADD)

    def undo(self, solution: Solution) -> Solution:
        """Exact inverse of :meth:`apply`."""
        return self._toggle(solution, self.type is MoveType.REMOVE)

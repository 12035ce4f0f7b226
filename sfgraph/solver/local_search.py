"""Destroy-and-repair local search with leaf pruning.

Neighbourhood: drop one active edge, find which terminal pairs lost
connectivity, and reconnect each of them along a shortest path on a working
graph where the dropped edge costs infinity. The first strictly cheaper
neighbour is accepted and the sweep restarts (first improvement). Candidate
solutions are built by applying moves to the current solution in place and
undoing them when rejected.
"""

from __future__ import annotations

from collections import deque
from typing import List, Optional

from sfgraph.algorithms.dsu import DSU
from sfgraph.algorithms.spf import ShortestPathEngine
from sfgraph.graph.csr import Graph
from sfgraph.logging import get_logger
from sfgraph.model.neighborhood import remove_moves
from sfgraph.model.solution import Move, Solution
from sfgraph.types.base import COST_EPS, INF

logger = get_logger(__name__)


def prune(solution: Solution) -> int:
    """Strip non-terminal leaves from the active-edge subgraph.

    Removing a leaf's only edge may turn its neighbour into a leaf, so leaves
    are processed through a queue until every degree-1 node is a terminal.

    Returns:
        Number of removed edges.
    """
    problem = solution.problem
    edges = problem.graph.edges
    terminals = problem.terminal_nodes

    degree = [0] * problem.n_nodes
    incident: List[List[int]] = [[] for _ in range(problem.n_nodes)]
    for i in solution.active_edges():
        edge = edges[i]
        for node in (edge.source, edge.target):
            degree[node] += 1
            incident[node].append(i)

    queue = deque(
        node
        for node in range(problem.n_nodes)
        if degree[node] == 1 and node not in terminals
    )
    removed = 0
    while queue:
        node = queue.popleft()
        if degree[node] != 1:
            continue
        edge_index = next(i for i in incident[node] if solution.is_edge_active(i))
        Move.remove(problem, edge_index).apply(solution)
        removed += 1

        edge = edges[edge_index]
        other = edge.target if edge.source == node else edge.source
        degree[node] -= 1
        degree[other] -= 1
        if degree[other] == 1 and other not in terminals:
            queue.append(other)

    if removed:
        logger.debug("Pruned %d non-terminal leaf edges", removed)
    return removed


class LocalSearch:
    """First-improvement, single-edge destroy-and-repair local search."""

    @property
    def name(self) -> str:
        return "GRASP Local Search"

    def prune(self, solution: Solution) -> int:
        return prune(solution)

    def optimize(self, solution: Solution) -> bool:
        """Refine ``solution`` in place until no single removal improves it.

        Prunes, sweeps to a fixed point, then prunes again since repairs can
        leave new non-terminal leaves.

        Returns:
            True if the cost went down.
        """
        problem = solution.problem
        start_cost = solution.cost
        working = problem.graph.copy()
        engine = ShortestPathEngine(problem.n_nodes)
        dsu = DSU(problem.n_nodes)

        improved = self.prune(solution) > 0
        accepted = 0
        while self._sweep(solution, working, engine, dsu):
            improved = True
            accepted += 1
        if self.prune(solution) > 0:
            improved = True

        logger.debug(
            "Local search on %s: %g -> %g after %d accepted moves",
            problem.name,
            start_cost,
            solution.cost,
            accepted,
        )
        return improved

    def _sweep(
        self,
        solution: Solution,
        working: Graph,
        engine: ShortestPathEngine,
        dsu: DSU,
    ) -> bool:
        """Try each active edge once; stop at the first accepted improvement."""
        for removal in remove_moves(solution):
            edge_index = removal.edge_index
            current_cost = solution.cost
            original_weight = working.edges[edge_index].weight

            working.set_edge_weight(edge_index, INF)
            try:
                applied = self._destroy_and_repair(
                    solution, removal, working, engine, dsu
                )
            finally:
                working.set_edge_weight(edge_index, original_weight)

            if applied is None:
                continue
            if solution.cost < current_cost - COST_EPS:
                logger.debug(
                    "Accepted removal of edge %d: %g -> %g",
                    edge_index,
                    current_cost,
                    solution.cost,
                )
                return True
            for move in reversed(applied):
                move.undo(solution)
        return False

    def _destroy_and_repair(
        self,
        solution: Solution,
        removal: Move,
        working: Graph,
        engine: ShortestPathEngine,
        dsu: DSU,
    ) -> Optional[List[Move]]:
        """Apply ``removal`` and reconnect every pair it disconnects.

        Returns:
            The applied moves, or None (with the solution restored) when some
            pair cannot be reconnected.
        """
        problem = solution.problem
        edges = problem.graph.edges
        removal.apply(solution)
        applied = [removal]
        solution.build_dsu(dsu)

        for source, target in problem.terminals:
            if dsu.is_connected(source, target):
                continue
            result = engine.shortest_path(working, source, target)
            if not result.found or result.cost >= INF:
                for move in reversed(applied):
                    move.undo(solution)
                return None
            for edge_index in result.edges:
                if solution.is_edge_active(edge_index):
                    continue
                addition = Move.add(problem, edge_index)
                addition.apply(solution)
                applied.append(addition)
                dsu.unite(edges[edge_index].source, edges[edge_index].target)
        return applied

"""GRASP constructive heuristic.

Builds a feasible solution by repeatedly connecting one terminal pair along
its shortest path on a private working copy of the graph. Edges bought for
earlier pairs are re-weighted to zero on the working copy, so later paths are
drawn towards shared infrastructure.

Terminal pairs that share endpoints (directly or transitively) are first
merged into groups; each group is then re-paired randomly into ``|group| - 1``
pairs that are enough to join the whole group into one component.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from sfgraph.algorithms.dsu import DSU
from sfgraph.algorithms.spf import ShortestPathEngine
from sfgraph.logging import get_logger
from sfgraph.model.problem import Problem
from sfgraph.model.solution import Move, Solution
from sfgraph.types.base import REUSED_EDGE_WEIGHT

logger = get_logger(__name__)


@dataclass
class CandidatePair:
    """Entry of the candidate list (CL).

    Attributes:
        source: First terminal.
        target: Second terminal.
        cost: Shortest-path cost on the current working graph.
        path: Edge indices of that shortest path.
    """

    source: int
    target: int
    cost: float = float("inf")
    path: Tuple[int, ...] = field(default_factory=tuple)


def group_terminals(
    n_nodes: int, terminals: Sequence[Tuple[int, int]]
) -> List[List[int]]:
    """Merge terminal pairs that transitively share a node.

    Returns:
        Groups of at least two distinct terminals, each sorted ascending, in
        order of their smallest member.
    """
    dsu = DSU(n_nodes)
    for source, target in terminals:
        dsu.unite(source, target)

    groups: Dict[int, List[int]] = {}
    for node in sorted({node for pair in terminals for node in pair}):
        groups.setdefault(dsu.find(node), []).append(node)
    return [members for members in groups.values() if len(members) > 1]


def generate_pairs(
    groups: Sequence[Sequence[int]], rng: random.Random
) -> List[Tuple[int, int]]:
    """Randomly pair the members of each group down to a spanning pair set.

    Repeatedly removes a random pivot and pairs it with a random remaining
    member until one member is left, yielding ``len(group) - 1`` pairs.
    """
    pairs: List[Tuple[int, int]] = []
    for members in groups:
        group = list(members)
        while len(group) > 1:
            pivot_idx = rng.randrange(len(group))
            pivot = group[pivot_idx]
            group[pivot_idx] = group[-1]
            group.pop()
            pairs.append((pivot, group[rng.randrange(len(group))]))
    return pairs


class GraspConstructive:
    """Randomized greedy construction driven by a restricted candidate list.

    Args:
        alpha: RCL fraction in ``[0, 1]``. 0.0 always connects the cheapest
            pair next, 1.0 picks uniformly among all remaining pairs.
        rng: Default random generator; a fresh entropy-seeded one if omitted.

    Raises:
        ValueError: If ``alpha`` is outside ``[0, 1]``.
    """

    def __init__(self, alpha: float = 1.0, rng: Optional[random.Random] = None) -> None:
        if not 0.0 <= alpha <= 1.0:
            raise ValueError(f"alpha must be within [0, 1], got {alpha}")
        self.alpha = float(alpha)
        self.rng = rng or random.Random()

    @property
    def name(self) -> str:
        return f"GRASP Constructive (alpha={self.alpha:.2f})"

    def rcl_size(self, n_candidates: int) -> int:
        """Size of the restricted candidate list for ``n_candidates`` entries."""
        return max(1, int(n_candidates * self.alpha))

    def generate(
        self, problem: Problem, rng: Optional[random.Random] = None
    ) -> Solution:
        """Construct a feasible solution for ``problem``.

        Args:
            problem: Validated instance.
            rng: Generator for this run; falls back to ``self.rng``.

        Raises:
            RuntimeError: If a pair cannot be connected on the working graph.
        """
        rng = rng or self.rng
        solution = Solution(problem)
        working = problem.graph.copy()
        engine = ShortestPathEngine(problem.n_nodes)

        groups = group_terminals(problem.n_nodes, problem.terminals)
        candidates = [
            CandidatePair(source, target)
            for source, target in generate_pairs(groups, rng)
        ]
        logger.debug(
            "Constructing %s: %d groups, %d candidate pairs",
            problem.name,
            len(groups),
            len(candidates),
        )

        while candidates:
            for cand in candidates:
                result = engine.shortest_path(working, cand.source, cand.target)
                if not result.found:
                    raise RuntimeError(
                        f"Terminals {cand.source} and {cand.target} cannot be connected."
                    )
                cand.cost, cand.path = result.cost, result.edges

            candidates.sort(key=lambda cand: cand.cost)
            chosen_idx = rng.randrange(self.rcl_size(len(candidates)))
            chosen = candidates.pop(chosen_idx)

            for edge_index in chosen.path:
                if not solution.is_edge_active(edge_index):
                    Move.add(problem, edge_index).apply(solution)
                working.set_edge_weight(edge_index, REUSED_EDGE_WEIGHT)

        logger.debug("Constructed solution for %s with cost %g", problem.name, solution.cost)
        return solution

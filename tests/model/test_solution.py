import math
import random

import pytest

from sfgraph.model.neighborhood import add_moves, remove_moves
from sfgraph.model.problem import Problem
from sfgraph.model.solution import Move, MoveType, Solution


def active_weight(solution: Solution) -> float:
    edges = solution.problem.graph.edges
    return sum(edges[i].weight for i in solution.active_edges())


def test_add_and_undo_restore_state(line_problem):
    solution = line_problem.empty_solution()
    idx = line_problem.graph.get_edge(1, 2)
    move = Move.add(line_problem, idx)
    assert move.type is MoveType.ADD
    assert move.cost_delta == 2.0

    assert move.apply(solution) is solution
    assert solution.cost == pytest.approx(2.0)
    assert solution.is_edge_active(idx)
    assert solution.is_edge_active(line_problem.graph.edges[idx].reverse_index)

    move.undo(solution)
    assert solution.cost == 0.0
    assert not solution.is_edge_active(idx)
    assert solution.same_edges(line_problem.empty_solution())


def test_move_through_reverse_index(line_problem):
    solution = line_problem.empty_solution()
    idx = line_problem.graph.get_edge(3, 2)
    Move.add(line_problem, idx).apply(solution)
    assert solution.active_edges() == [line_problem.graph.get_edge(2, 3)]
    assert solution.n_active_edges == 1


def test_invalid_moves_raise(line_problem):
    solution = line_problem.empty_solution()
    idx = line_problem.graph.get_edge(0, 1)
    with pytest.raises(ValueError, match="already inactive"):
        Move.remove(line_problem, idx).apply(solution)

    Move.add(line_problem, idx).apply(solution)
    with pytest.raises(ValueError, match="already active"):
        Move.add(line_problem, idx).apply(solution)
    with pytest.raises(ValueError):
        Move.add(line_problem, idx).undo(line_problem.empty_solution())
    with pytest.raises(IndexError):
        solution.is_edge_active(-1)


def test_out_of_range_move(line_problem):
    with pytest.raises(IndexError):
        Move(MoveType.ADD, 99, 1.0).apply(line_problem.empty_solution())


def test_random_move_sequence_keeps_cost_exact(random_problem):
    problem = random_problem(7)
    solution = problem.empty_solution()
    rng = random.Random(7)
    canonical = list(problem.graph.canonical_edges())
    history = []
    for _ in range(300):
        idx = rng.choice(canonical)
        if solution.is_edge_active(idx):
            move = Move.remove(problem, idx)
        else:
            move = Move.add(problem, idx)
        move.apply(solution)
        history.append(move)
        assert solution.cost == pytest.approx(active_weight(solution))

    for move in reversed(history):
        move.undo(solution)
    assert solution.active_edges() == []
    assert solution.cost == pytest.approx(0.0)


def test_feasibility_follows_edges(line_problem):
    solution = line_problem.empty_solution()
    graph = line_problem.graph
    for u, v in [(0, 1), (1, 2)]:
        Move.add(line_problem, graph.get_edge(u, v)).apply(solution)
    assert not solution.is_feasible()
    Move.add(line_problem, graph.get_edge(2, 3)).apply(solution)
    assert solution.is_feasible()

    dsu = solution.build_dsu()
    assert dsu.components == 1
    Move.remove(line_problem, graph.get_edge(1, 2)).apply(solution)
    assert not solution.is_feasible(dsu)
    assert dsu.components == 2


def test_copy_is_independent(line_problem):
    solution = line_problem.empty_solution()
    Move.add(line_problem, line_problem.graph.get_edge(0, 1)).apply(solution)
    clone = solution.copy()
    assert clone.same_edges(solution)
    assert clone.cost == solution.cost

    Move.add(line_problem, line_problem.graph.get_edge(1, 2)).apply(clone)
    assert not clone.same_edges(solution)
    assert solution.cost == pytest.approx(1.0)
    assert clone.cost == pytest.approx(3.0)


def test_ordering_by_cost(line_problem):
    cheap = line_problem.empty_solution()
    dear = line_problem.empty_solution()
    Move.add(line_problem, line_problem.graph.get_edge(2, 3)).apply(dear)
    assert cheap < dear
    assert dear > cheap
    assert min([dear, cheap]) is cheap
    assert dear.get_objective_value() == dear.cost == 3.0


def test_neighbourhoods(line_problem):
    solution = line_problem.empty_solution()
    assert len(add_moves(solution)) == 3
    assert remove_moves(solution) == []

    idx = line_problem.graph.get_edge(0, 1)
    Move.add(line_problem, idx).apply(solution)
    removals = remove_moves(solution)
    assert removals == [Move(MoveType.REMOVE, idx, 1.0)]
    assert all(m.edge_index != idx for m in add_moves(solution))
    assert len(add_moves(solution)) == 2


def test_to_dict_and_str(line_problem):
    solution = line_problem.empty_solution()
    assert "Active Edges: [ None ]" in str(solution)
    Move.add(line_problem, line_problem.graph.get_edge(2, 1)).apply(solution)
    assert solution.to_dict() == {"instance": "line", "cost": 2.0, "edges": [[1, 2]]}
    assert str(solution) == "Solution Cost: 2\nActive Edges: [ (1->2) ]"
    assert "cost=2" in repr(solution)


def test_undo_restores_fractional_cost_exactly():
    problem = Problem.from_edges(3, [(0, 1, 0.1), (1, 2, 0.2)], [(0, 2)])
    solution = problem.empty_solution()
    Move.add(problem, problem.graph.get_edge(0, 1)).apply(solution)
    before = solution.cost

    move = Move.add(problem, problem.graph.get_edge(1, 2))
    move.apply(solution)
    assert solution.cost == math.fsum([0.1, 0.2])
    move.undo(solution)
    move.undo(move.apply(solution))
    assert solution.cost == before == 0.1


def test_cost_matches_exact_sum_after_many_moves():
    rng = random.Random(19)
    edges = [(v - 1, v, rng.random()) for v in range(1, 12)]
    edges += [(u, v, rng.random() * 3) for u in range(12) for v in range(u + 2, 12, 3)]
    problem = Problem.from_edges(12, edges, [(0, 11)])
    solution = problem.empty_solution()
    canonical = list(problem.graph.canonical_edges())
    history = []
    for _ in range(500):
        idx = rng.choice(canonical)
        move = (
            Move.remove(problem, idx)
            if solution.is_edge_active(idx)
            else Move.add(problem, idx)
        )
        move.apply(solution)
        history.append(move)
        weights = [problem.graph.edges[i].weight for i in solution.active_edges()]
        assert solution.cost == math.fsum(weights)

    for move in reversed(history):
        move.undo(solution)
    assert solution.cost == 0.0

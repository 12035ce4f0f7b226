"""Problem instances, solutions and moves."""

from sfgraph.model.neighborhood import add_moves, remove_moves
from sfgraph.model.problem import Problem
from sfgraph.model.solution import Move, MoveType, Solution

__all__ = ["Problem", "Solution", "Move", "MoveType", "add_moves", "remove_moves"]

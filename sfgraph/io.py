"""Reading and writing Steiner Forest benchmark instances.

Instances use a sectioned text format with 1-based node ids::

    SECTION Graph
    Nodes 4
    Edges 3
    E 1 2 10
    E 2 3 20
    E 3 4 30
    END

    SECTION Terminals
    Terminals 1
    TP 1 4
    END

Lines outside the ``Graph`` and ``Terminals`` sections, and unknown keywords
inside them, are ignored.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from sfgraph.logging import get_logger
from sfgraph.model.problem import Problem

logger = get_logger(__name__)

PathLike = Union[str, Path]


def _ints(tokens: List[str], line_no: int, line: str) -> List[int]:
    try:
        return [int(tok) for tok in tokens]
    except ValueError:
        raise ValueError(f"Line {line_no}: expected integers in '{line}'") from None


def parse_problem(lines: Iterable[str], name: str = "Manual") -> Problem:
    """Parse an instance from text lines.

    Args:
        lines: Iterable of lines (e.g. an open file or ``text.splitlines()``).
        name: Instance name for the resulting Problem.

    Returns:
        Validated Problem with 0-based node ids.

    Raises:
        ValueError: On malformed lines, a missing node count or edge list, or
            an instance rejected by :class:`Problem`.
        IndexError: If an edge references a node outside ``1..Nodes``.
    """
    section: Optional[str] = None
    n_nodes = 0
    declared_edges: Optional[int] = None
    declared_terminals: Optional[int] = None
    edges: List[Tuple[int, int, float]] = []
    terminals: List[Tuple[int, int]] = []

    for line_no, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line:
            continue
        tokens = line.split()
        keyword = tokens[0]

        if keyword.upper() == "SECTION":
            label = tokens[1] if len(tokens) > 1 else ""
            if "Graph" in label:
                section = "graph"
            elif "Terminals" in label:
                section = "terminals"
            else:
                section = None
            continue
        if keyword.upper() == "END":
            section = None
            continue

        if section == "graph":
            if keyword == "Nodes":
                (n_nodes,) = _ints(tokens[1:2], line_no, line)
            elif keyword == "Edges":
                (declared_edges,) = _ints(tokens[1:2], line_no, line)
            elif keyword == "E":
                if len(tokens) != 4:
                    raise ValueError(f"Line {line_no}: edge needs 'E u v w', got '{line}'")
                source, target = _ints(tokens[1:3], line_no, line)
                try:
                    weight = float(tokens[3])
                except ValueError:
                    raise ValueError(
                        f"Line {line_no}: invalid edge weight '{tokens[3]}'"
                    ) from None
                edges.append((source - 1, target - 1, weight))
        elif section == "terminals":
            if keyword == "Terminals":
                (declared_terminals,) = _ints(tokens[1:2], line_no, line)
            elif keyword == "TP":
                if len(tokens) != 3:
                    raise ValueError(f"Line {line_no}: pair needs 'TP u v', got '{line}'")
                source, target = _ints(tokens[1:3], line_no, line)
                terminals.append((source - 1, target - 1))

    if n_nodes <= 0:
        raise ValueError(f"Instance {name}: missing or non-positive 'Nodes' count.")
    if not edges:
        raise ValueError(f"Instance {name}: no edges found.")
    if declared_edges is not None and declared_edges != len(edges):
        logger.warning(
            "Instance %s declares %d edges but lists %d", name, declared_edges, len(edges)
        )
    if declared_terminals is not None and declared_terminals != len(terminals):
        logger.warning(
            "Instance %s declares %d terminal pairs but lists %d",
            name,
            declared_terminals,
            len(terminals),
        )

    return Problem.from_edges(n_nodes, edges, terminals, name=name)


def read_problem(path: PathLike) -> Problem:
    """Parse the instance file at ``path``; the file name becomes the name."""
    path = Path(path)
    with path.open("r", encoding="utf-8") as fh:
        return parse_problem(fh, name=path.name)


def format_problem(problem: Problem) -> List[str]:
    """Render ``problem`` in the sectioned text format (1-based ids)."""
    edge_list = problem.graph.to_edge_list()
    lines = ["SECTION Graph", f"Nodes {problem.n_nodes}", f"Edges {len(edge_list)}"]
    lines.extend(f"E {u + 1} {v + 1} {w:g}" for u, v, w in edge_list)
    lines.extend(["END", "", "SECTION Terminals", f"Terminals {len(problem.terminals)}"])
    lines.extend(f"TP {u + 1} {v + 1}" for u, v in problem.terminals)
    lines.append("END")
    return lines


def find_instance_files(directory: PathLike, suffix: str = ".stp") -> List[Path]:
    """Recursively list files under ``directory`` ending in ``suffix``, sorted.

    Raises:
        NotADirectoryError: If ``directory`` is not a directory.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")
    return sorted(p for p in directory.rglob(f"*{suffix}") if p.is_file())

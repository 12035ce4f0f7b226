"""NetworkX conversion utilities.

Converts NetworkX graphs with arbitrary hashable node names into a validated
:class:`~sfgraph.model.problem.Problem`, and solutions back into NetworkX
graphs holding only the bought edges.

Example:
    >>> import networkx as nx
    >>> from sfgraph.lib.nx import from_networkx, to_networkx
    >>>
    >>> G = nx.Graph()
    >>> G.add_edge("A", "B", weight=3.0)
    >>> G.add_edge("B", "C", weight=1.0)
    >>> problem, node_map = from_networkx(G, [("A", "C")])
    >>> # ... solve ...
    >>> H = to_networkx(solution, node_map)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Iterable, List, Optional, Tuple

import networkx as nx

from sfgraph.logging import get_logger
from sfgraph.model.problem import Problem
from sfgraph.model.solution import Solution

logger = get_logger(__name__)


@dataclass
class NodeMap:
    """Bidirectional mapping between node names and integer indices.

    Attributes:
        to_index: Maps original node names to integer indices.
        to_name: Maps integer indices back to original node names.
    """

    to_index: Dict[Hashable, int] = field(default_factory=dict)
    to_name: Dict[int, Hashable] = field(default_factory=dict)

    @classmethod
    def from_names(cls, names: List[Hashable]) -> "NodeMap":
        return cls(
            to_index={name: i for i, name in enumerate(names)},
            to_name={i: name for i, name in enumerate(names)},
        )

    def __len__(self) -> int:
        return len(self.to_index)


def from_networkx(
    G: Any,
    terminals: Iterable[Tuple[Hashable, Hashable]],
    *,
    weight_attr: str = "weight",
    default_weight: float = 1.0,
    bidirectional: Optional[bool] = None,
    name: str = "networkx",
) -> Tuple[Problem, NodeMap]:
    """Build a Problem from a NetworkX graph and named terminal pairs.

    Nodes are indexed in ``sorted(G.nodes(), key=str)`` order. Self-loops are
    dropped since they never help connect a pair.

    Args:
        G: Graph, DiGraph, MultiGraph or MultiDiGraph.
        terminals: Pairs of node names to connect.
        weight_attr: Edge attribute holding the weight.
        default_weight: Weight for edges lacking ``weight_attr``.
        bidirectional: Store edges in both directions. Defaults to
            ``not G.is_directed()``.
        name: Instance name.

    Raises:
        TypeError: If ``G`` is not a NetworkX graph.
        ValueError: If ``G`` has no nodes, a terminal is not a node of ``G``,
            or the instance fails Problem validation.
    """
    if not isinstance(G, (nx.Graph, nx.DiGraph, nx.MultiGraph, nx.MultiDiGraph)):
        raise TypeError(f"Expected a NetworkX graph, got {type(G).__name__}")
    if G.number_of_nodes() == 0:
        raise ValueError("Graph has no nodes")

    if bidirectional is None:
        bidirectional = not G.is_directed()

    node_map = NodeMap.from_names(sorted(G.nodes(), key=str))
    edges: List[Tuple[int, int, float]] = []
    dropped = 0
    for u, v, data in G.edges(data=True):
        if u == v:
            dropped += 1
            continue
        edges.append(
            (
                node_map.to_index[u],
                node_map.to_index[v],
                float(data.get(weight_attr, default_weight)),
            )
        )
    if dropped:
        logger.debug("Dropped %d self-loops while converting %s", dropped, name)

    pairs: List[Tuple[int, int]] = []
    for source, target in terminals:
        for node in (source, target):
            if node not in node_map.to_index:
                raise ValueError(f"Terminal '{node}' is not a node of the graph.")
        pairs.append((node_map.to_index[source], node_map.to_index[target]))

    problem = Problem.from_edges(
        len(node_map), edges, pairs, name=name, bidirectional=bidirectional
    )
    return problem, node_map


def to_networkx(
    solution: Solution,
    node_map: Optional[NodeMap] = None,
    *,
    weight_attr: str = "weight",
) -> Any:
    """Return the bought edges of ``solution`` as a NetworkX graph.

    Every node of the instance is present; only active edges are added. The
    result is a ``nx.Graph`` for bidirectional instances and a ``nx.DiGraph``
    otherwise.
    """
    graph = solution.problem.graph
    G = nx.Graph() if graph.bidirectional else nx.DiGraph()

    def label(idx: int) -> Hashable:
        if node_map is None:
            return idx
        return node_map.to_name.get(idx, idx)

    G.add_nodes_from(label(i) for i in range(graph.n_nodes))
    for i in solution.active_edges():
        edge = graph.edges[i]
        G.add_edge(label(edge.source), label(edge.target), **{weight_attr: edge.weight})
    return G

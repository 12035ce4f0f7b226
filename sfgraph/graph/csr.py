"""Immutable CSR (Compressed Sparse Row) graph with soft edge activation.

`Graph` stores every directed edge once, grouped contiguously by source node,
with ``ptrs[u]..ptrs[u + 1]`` bounding the out-edges of node ``u``. For
bidirectional graphs each undirected input edge yields two directed entries
linked through ``reverse_index``; activation and weight changes are always
applied to both twins together.

Topology (endpoints, CSR offsets, reverse links) is fixed once the constructor
returns. Only edge weights and activation flags change afterwards, and only
through `Graph` methods so that ``total_weight`` stays exact.
"""

from __future__ import annotations

from collections import deque
from math import isfinite
from pickle import dumps, loads
from typing import Iterable, Iterator, List, Sequence, Tuple

import numpy as np

from sfgraph.types.base import Cost

#: Returned by :meth:`Graph.get_edge` when no edge connects the two nodes.
NO_EDGE = -1

EdgeTuple = Tuple[int, int, Cost]


class Edge:
    """One directed CSR entry.

    Attributes:
        source: Tail node id.
        target: Head node id.
        weight: Edge weight (cost of buying the edge).
        reverse_index: Index of the twin entry ``target -> source``, or -1 for
            directed graphs.
        active: Soft-delete flag; inactive edges are skipped by traversals.
    """

    __slots__ = ("source", "target", "weight", "reverse_index", "active")

    def __init__(
        self,
        source: int,
        target: int,
        weight: float,
        reverse_index: int = NO_EDGE,
        active: bool = True,
    ) -> None:
        self.source = source
        self.target = target
        self.weight = weight
        self.reverse_index = reverse_index
        self.active = active

    def __repr__(self) -> str:
        return (
            f"Edge(source={self.source}, target={self.target}, "
            f"weight={self.weight}, reverse_index={self.reverse_index}, "
            f"active={self.active})"
        )


class Graph:
    """CSR graph tailored to the Steiner Forest solver.

    Args:
        n_nodes: Number of nodes; node ids are ``0..n_nodes-1``.
        edge_list: Iterable of ``(source, target, weight)`` tuples.
        bidirectional: If True (default) every input edge is stored in both
            directions with mutually linked twins.

    Raises:
        ValueError: If ``n_nodes`` is not positive, ``edge_list`` is empty, or
            an edge is a self-loop.
        IndexError: If an edge endpoint is out of range.
    """

    def __init__(
        self,
        n_nodes: int,
        edge_list: Iterable[Sequence[Cost]],
        bidirectional: bool = True,
    ) -> None:
        n_nodes = int(n_nodes)
        if n_nodes <= 0:
            raise ValueError("Number of nodes must be positive.")

        input_edges: List[EdgeTuple] = []
        for item in edge_list:
            source, target, weight = int(item[0]), int(item[1]), float(item[2])
            if not (0 <= source < n_nodes and 0 <= target < n_nodes):
                raise IndexError(
                    f"Edge ({source}, {target}) is out of bounds for {n_nodes} nodes."
                )
            if source == target:
                raise ValueError(f"Self-loop on node {source} is not allowed.")
            input_edges.append((source, target, weight))

        if not input_edges:
            raise ValueError("edge_list cannot be empty.")

        self.n_nodes: int = n_nodes
        self.bidirectional: bool = bool(bidirectional)

        # Pass 1: raw directed entries with the raw position of their twin.
        stride = 2 if self.bidirectional else 1
        n_entries = len(input_edges) * stride
        raw_src = np.empty(n_entries, dtype=np.int64)
        raw_dst = np.empty(n_entries, dtype=np.int64)
        raw_w = np.empty(n_entries, dtype=np.float64)
        for k, (source, target, weight) in enumerate(input_edges):
            pos = k * stride
            raw_src[pos], raw_dst[pos], raw_w[pos] = source, target, weight
            if self.bidirectional:
                raw_src[pos + 1], raw_dst[pos + 1], raw_w[pos + 1] = (
                    target,
                    source,
                    weight,
                )
        if self.bidirectional:
            raw_twin = np.arange(n_entries, dtype=np.int64) ^ 1
        else:
            raw_twin = None

        # Pass 2: stable group-by-source and translate twin positions.
        order = np.argsort(raw_src, kind="stable")
        position = np.empty(n_entries, dtype=np.int64)
        position[order] = np.arange(n_entries, dtype=np.int64)
        counts = np.bincount(raw_src, minlength=n_nodes)
        ptrs = np.concatenate(([0], np.cumsum(counts)))

        edges: List[Edge] = []
        for raw_pos in order.tolist():
            reverse = (
                int(position[raw_twin[raw_pos]]) if raw_twin is not None else NO_EDGE
            )
            edges.append(
                Edge(
                    int(raw_src[raw_pos]),
                    int(raw_dst[raw_pos]),
                    float(raw_w[raw_pos]),
                    reverse,
                )
            )

        self.ptrs: List[int] = [int(p) for p in ptrs.tolist()]
        self.edges: List[Edge] = edges
        self.n_edges: int = len(edges)
        self.total_weight: float = float(sum(w for _, _, w in input_edges))

        # Generational scratch space for is_reachable().
        self._visit_token: List[int] = [0] * n_nodes
        self._token: int = 0

    #
    # Lookup
    #
    def _check_node(self, node: int) -> None:
        if not 0 <= node < self.n_nodes:
            raise IndexError(f"Node {node} does not exist in this graph.")

    def _check_edge(self, edge_index: int) -> None:
        if not 0 <= edge_index < self.n_edges:
            raise IndexError(f"Edge index {edge_index} out of bounds.")

    def get_edge(self, source: int, target: int) -> int:
        """Return the index of the first edge ``source -> target``.

        Runs in O(deg(source)). Returns :data:`NO_EDGE` when absent.

        Raises:
            IndexError: If either node id is out of range.
        """
        self._check_node(source)
        self._check_node(target)
        edges = self.edges
        for i in range(self.ptrs[source], self.ptrs[source + 1]):
            if edges[i].target == target:
                return i
        return NO_EDGE

    def out_edges(self, node: int) -> range:
        """Index range of all out-edges of ``node`` (active or not)."""
        return range(self.ptrs[node], self.ptrs[node + 1])

    def neighbors(self, node: int) -> Iterator[int]:
        """Yield targets of the active out-edges of ``node``."""
        self._check_node(node)
        edges = self.edges
        for i in range(self.ptrs[node], self.ptrs[node + 1]):
            if edges[i].active:
                yield edges[i].target

    def is_canonical(self, edge_index: int) -> bool:
        """Whether ``edge_index`` is the direction that represents its edge.

        In bidirectional graphs that is the entry with ``source < target``; in
        directed graphs every entry is canonical.
        """
        if not self.bidirectional:
            return True
        edge = self.edges[edge_index]
        return edge.source < edge.target

    def canonical_edges(self) -> Iterator[int]:
        """Yield the index of every canonical edge."""
        for i in range(self.n_edges):
            if self.is_canonical(i):
                yield i

    def to_edge_list(self) -> List[EdgeTuple]:
        """Return canonical edges as ``(source, target, weight)`` tuples."""
        return [
            (self.edges[i].source, self.edges[i].target, self.edges[i].weight)
            for i in self.canonical_edges()
        ]

    #
    # Mutation of weights and activation
    #
    def set_edge_status(self, edge_index: int, status: bool) -> None:
        """Activate or deactivate an edge and its twin in O(1).

        Raises:
            IndexError: If ``edge_index`` is out of range.
        """
        self._check_edge(edge_index)
        edge = self.edges[edge_index]
        status = bool(status)
        if edge.active == status:
            return
        edge.active = status
        if status:
            self.total_weight += edge.weight
        else:
            self.total_weight -= edge.weight
        if edge.reverse_index != NO_EDGE:
            self.edges[edge.reverse_index].active = status

    def set_all_edges_status(self, status: bool) -> None:
        """Activate or deactivate every edge."""
        status = bool(status)
        for edge in self.edges:
            edge.active = status
        self._recompute_total_weight()

    def _recompute_total_weight(self) -> None:
        self.total_weight = float(
            sum(
                self.edges[i].weight
                for i in self.canonical_edges()
                if self.edges[i].active
            )
        )

    def set_edge_weight(self, edge_index: int, weight: Cost) -> None:
        """Change the weight of an edge and its twin.

        Meant for private working copies; the graph of a Problem is never
        re-weighted.

        Raises:
            IndexError: If ``edge_index`` is out of range.
        """
        self._check_edge(edge_index)
        edge = self.edges[edge_index]
        weight = float(weight)
        previous = edge.weight
        edge.weight = weight
        if edge.reverse_index != NO_EDGE:
            self.edges[edge.reverse_index].weight = weight
        if not edge.active:
            return
        if isfinite(previous) and isfinite(weight) and isfinite(self.total_weight):
            self.total_weight += weight - previous
        else:
            # inf - inf would poison the running sum
            self._recompute_total_weight()

    def copy(self) -> Graph:
        """Return an independent deep copy (pickle-based)."""
        return loads(dumps(self))

    #
    # Traversal
    #
    def is_reachable(self, source: int, target: int) -> bool:
        """BFS over active out-edges from ``source`` looking for ``target``.

        Uses a generation token instead of clearing a visited array per call.
        Not safe for concurrent calls on the same instance.

        Raises:
            IndexError: If either node id is out of range.
        """
        self._check_node(source)
        self._check_node(target)
        if source == target:
            return True

        self._token += 1
        token = self._token
        visited = self._visit_token
        edges, ptrs = self.edges, self.ptrs

        queue = deque([source])
        visited[source] = token
        while queue:
            node = queue.popleft()
            for i in range(ptrs[node], ptrs[node + 1]):
                edge = edges[i]
                if not edge.active or visited[edge.target] == token:
                    continue
                if edge.target == target:
                    return True
                visited[edge.target] = token
                queue.append(edge.target)
        return False

    def __repr__(self) -> str:
        kind = "bidirectional" if self.bidirectional else "directed"
        return (
            f"Graph(n_nodes={self.n_nodes}, n_edges={self.n_edges}, "
            f"{kind}, total_weight={self.total_weight:g})"
        )

    def __str__(self) -> str:
        lines = [repr(self)]
        for node in range(self.n_nodes):
            targets = [
                f"{{target {self.edges[i].target}, weight {self.edges[i].weight:g}}}"
                for i in self.out_edges(node)
                if self.edges[i].active
            ]
            lines.append(f"Node {node} -> " + " ".join(targets) + ";")
        return "\n".join(lines)


def has_negative_weights(graph: Graph) -> bool:
    """Return True if any active edge carries a negative weight."""
    return any(edge.active and edge.weight < 0 for edge in graph.edges)


def is_graph_connected(graph: Graph) -> bool:
    """Check that all nodes form one component over active edges.

    Edge direction is ignored, so directed graphs are tested for weak
    connectivity.
    """
    if graph.bidirectional:
        adjacency = None
    else:
        adjacency = [[] for _ in range(graph.n_nodes)]
        for edge in graph.edges:
            if edge.active:
                adjacency[edge.source].append(edge.target)
                adjacency[edge.target].append(edge.source)

    visited = [False] * graph.n_nodes
    visited[0] = True
    seen = 1
    queue = deque([0])
    while queue:
        node = queue.popleft()
        if adjacency is None:
            next_nodes = graph.neighbors(node)
        else:
            next_nodes = adjacency[node]
        for neighbor in next_nodes:
            if not visited[neighbor]:
                visited[neighbor] = True
                seen += 1
                queue.append(neighbor)
    return seen == graph.n_nodes

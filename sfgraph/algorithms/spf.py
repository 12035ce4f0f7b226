"""Reusable single-pair shortest-path engine (Dijkstra).

The solver issues thousands of point-to-point queries against graphs with a
fixed node count whose weights and activation change between calls. Clearing
per-node state on every call would cost O(N) even when the search touches a
handful of nodes, so the engine stamps each node with a generation token
instead: a node's distance and parent are valid only if its token equals the
current generation.

Notes:
    The search terminates when the target is *popped* from the heap, at which
    point its distance is final. Paths are returned as sequences of edge
    indices in source-to-target order, since callers key their state by edge.
"""

from __future__ import annotations

from heapq import heappop, heappush
from typing import List, NamedTuple, Tuple

from sfgraph.graph.csr import Graph
from sfgraph.types.base import UNREACHABLE_COST


class PathResult(NamedTuple):
    """Result of a shortest-path query.

    Attributes:
        edges: Edge indices from source to target. Empty when unreachable or
            when source equals target.
        cost: Total path cost, or ``-1.0`` when the target is unreachable.
    """

    edges: Tuple[int, ...]
    cost: float

    @property
    def found(self) -> bool:
        return self.cost >= 0


#: Sentinel returned when the target cannot be reached over active edges.
UNREACHABLE = PathResult((), UNREACHABLE_COST)


class ShortestPathEngine:
    """Dijkstra with persistent scratch arrays bound to one node count.

    Not safe for concurrent queries: distance, parent and token arrays and the
    heap are shared by every call on the same instance.

    Args:
        n_nodes: Node count of every graph this engine will be queried with.
    """

    def __init__(self, n_nodes: int) -> None:
        if n_nodes <= 0:
            raise ValueError("Number of nodes must be positive.")
        self.n_nodes = n_nodes
        self._dist: List[float] = [0.0] * n_nodes
        self._parent_edge: List[int] = [-1] * n_nodes
        self._token: List[int] = [0] * n_nodes
        self._generation = 0
        self._heap: List[Tuple[float, int]] = []

    @property
    def generation(self) -> int:
        """Number of queries served so far."""
        return self._generation

    def shortest_path(self, graph: Graph, source: int, target: int) -> PathResult:
        """Compute the cheapest path ``source -> target`` over active edges.

        Args:
            graph: CSR graph with ``graph.n_nodes == self.n_nodes``.
            source: Start node.
            target: Destination node.

        Returns:
            :class:`PathResult` with the edge sequence and its cost, or
            :data:`UNREACHABLE`.

        Raises:
            ValueError: If the graph's node count differs from the engine's.
            IndexError: If a node id is out of range.
        """
        if graph.n_nodes != self.n_nodes:
            raise ValueError(
                f"Engine sized for {self.n_nodes} nodes cannot query a graph "
                f"with {graph.n_nodes} nodes."
            )
        if not (0 <= source < self.n_nodes and 0 <= target < self.n_nodes):
            raise IndexError(f"Node pair ({source}, {target}) out of bounds.")

        self._generation += 1
        generation = self._generation
        dist = self._dist
        parent_edge = self._parent_edge
        token = self._token
        heap = self._heap
        heap.clear()

        edges = graph.edges
        ptrs = graph.ptrs

        dist[source] = 0.0
        parent_edge[source] = -1
        token[source] = generation
        heappush(heap, (0.0, source))

        found = False
        while heap:
            cost, node = heappop(heap)
            if cost > dist[node]:
                continue  # stale heap entry
            if node == target:
                found = True
                break

            for i in range(ptrs[node], ptrs[node + 1]):
                edge = edges[i]
                if not edge.active:
                    continue
                neighbor = edge.target
                new_cost = cost + edge.weight
                if token[neighbor] != generation or new_cost < dist[neighbor]:
                    token[neighbor] = generation
                    dist[neighbor] = new_cost
                    parent_edge[neighbor] = i
                    heappush(heap, (new_cost, neighbor))

        heap.clear()
        if not found:
            return UNREACHABLE

        path: List[int] = []
        node = target
        while node != source:
            edge_index = parent_edge[node]
            path.append(edge_index)
            node = edges[edge_index].source
        path.reverse()
        return PathResult(tuple(path), dist[target])

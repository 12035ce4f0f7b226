"""Disjoint Set Union (union-find) for connectivity tracking."""

from __future__ import annotations

from typing import List


class DSU:
    """Union-find with path compression and union by rank.

    Instances are meant to be reset and reused: the local search rebuilds one
    DSU per evaluated edge, so :meth:`reset` restores the identity partition
    in place without reallocating.

    Attributes:
        parent: Parent pointer of each node.
        rank: Upper bound on the height of the tree rooted at each node.
        components: Current number of disjoint sets.
    """

    def __init__(self, n_nodes: int) -> None:
        if n_nodes < 0:
            raise ValueError("DSU size must be non-negative.")
        self.parent: List[int] = list(range(n_nodes))
        self.rank: List[int] = [0] * n_nodes
        self.components: int = n_nodes

    def __len__(self) -> int:
        return len(self.parent)

    def reset(self) -> None:
        """Return to ``n`` singleton components."""
        parent = self.parent
        for i in range(len(parent)):
            parent[i] = i
        self.rank[:] = [0] * len(parent)
        self.components = len(parent)

    def find(self, node: int) -> int:
        """Return the root of ``node``'s set, compressing the traversed path."""
        parent = self.parent
        root = node
        while parent[root] != root:
            root = parent[root]
        while parent[node] != root:
            parent[node], node = root, parent[node]
        return root

    def unite(self, a: int, b: int) -> bool:
        """Merge the sets of ``a`` and ``b``.

        The shorter tree goes under the taller one; on equal rank ``a``'s root
        becomes the new root and its rank grows by one.

        Returns:
            True if two sets were merged, False if already connected.
        """
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a == root_b:
            return False

        if self.rank[root_a] < self.rank[root_b]:
            self.parent[root_a] = root_b
        else:
            self.parent[root_b] = root_a
            if self.rank[root_a] == self.rank[root_b]:
                self.rank[root_a] += 1
        self.components -= 1
        return True

    def is_connected(self, a: int, b: int) -> bool:
        return self.find(a) == self.find(b)

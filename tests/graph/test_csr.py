import math
import random

import pytest

from sfgraph.graph.csr import (
    NO_EDGE,
    Graph,
    has_negative_weights,
    is_graph_connected,
)


def canonical_active_weight(graph: Graph) -> float:
    return sum(
        graph.edges[i].weight for i in graph.canonical_edges() if graph.edges[i].active
    )


def test_csr_layout(triangle_graph):
    g = triangle_graph
    assert g.n_nodes == 3
    assert g.n_edges == 6
    assert len(g.ptrs) == 4
    assert g.ptrs[0] == 0 and g.ptrs[-1] == g.n_edges
    for node in range(g.n_nodes):
        for i in g.out_edges(node):
            assert g.edges[i].source == node
    assert g.total_weight == pytest.approx(25.0)


def test_out_edges_keep_input_order():
    g = Graph(3, [(0, 2, 1.0), (0, 1, 2.0), (1, 2, 3.0)])
    assert [g.edges[i].target for i in g.out_edges(0)] == [2, 1]
    assert [g.edges[i].target for i in g.out_edges(2)] == [0, 1]


def test_reverse_links_are_mutual(triangle_graph):
    g = triangle_graph
    for i, edge in enumerate(g.edges):
        twin = g.edges[edge.reverse_index]
        assert twin.reverse_index == i
        assert (twin.source, twin.target) == (edge.target, edge.source)
        assert twin.weight == edge.weight


def test_parallel_edges_link_to_their_own_twin():
    g = Graph(2, [(0, 1, 3.0), (0, 1, 7.0)])
    assert g.n_edges == 4
    for i, edge in enumerate(g.edges):
        assert g.edges[edge.reverse_index].weight == edge.weight
        assert g.edges[edge.reverse_index].reverse_index == i


def test_directed_graph_has_no_twins():
    g = Graph(3, [(0, 1, 1.0), (1, 2, 1.0)], bidirectional=False)
    assert g.n_edges == 2
    assert all(edge.reverse_index == NO_EDGE for edge in g.edges)
    assert all(g.is_canonical(i) for i in range(g.n_edges))
    assert g.get_edge(1, 0) == NO_EDGE


@pytest.mark.parametrize(
    "n_nodes, edges, exc",
    [
        (0, [(0, 1, 1.0)], ValueError),
        (-3, [(0, 1, 1.0)], ValueError),
        (3, [], ValueError),
        (3, [(0, 3, 1.0)], IndexError),
        (3, [(-1, 2, 1.0)], IndexError),
        (3, [(1, 1, 1.0)], ValueError),
    ],
)
def test_invalid_construction(n_nodes, edges, exc):
    with pytest.raises(exc):
        Graph(n_nodes, edges)


def test_get_edge(triangle_graph):
    g = triangle_graph
    idx = g.get_edge(1, 2)
    assert g.edges[idx].source == 1 and g.edges[idx].target == 2
    assert g.edges[idx].weight == 10.0

    g2 = Graph(4, [(0, 1, 1.0), (1, 2, 1.0), (2, 3, 1.0)])
    assert g2.get_edge(0, 3) == NO_EDGE
    with pytest.raises(IndexError):
        g2.get_edge(0, 4)


def test_canonical_edges_count_each_undirected_edge_once(triangle_graph):
    canonical = list(triangle_graph.canonical_edges())
    assert len(canonical) == 3
    assert sorted(triangle_graph.to_edge_list()) == [
        (0, 1, 10.0),
        (0, 2, 5.0),
        (1, 2, 10.0),
    ]


def test_set_edge_status_toggles_twin_and_total(triangle_graph):
    g = triangle_graph
    idx = g.get_edge(2, 0)
    rev = g.edges[idx].reverse_index

    g.set_edge_status(idx, False)
    assert not g.edges[idx].active
    assert not g.edges[rev].active
    assert g.total_weight == pytest.approx(20.0)

    # Repeating a status is a no-op.
    g.set_edge_status(rev, False)
    assert g.total_weight == pytest.approx(20.0)

    g.set_edge_status(rev, True)
    assert g.edges[idx].active and g.edges[rev].active
    assert g.total_weight == pytest.approx(25.0)


def test_set_edge_status_random_sequence_keeps_invariants():
    rng = random.Random(5)
    edges = [(u, v, float(rng.randint(1, 9))) for u in range(6) for v in range(u + 1, 6)]
    g = Graph(6, edges)
    for _ in range(200):
        idx = rng.randrange(g.n_edges)
        status = rng.random() < 0.5
        g.set_edge_status(idx, status)
        assert g.edges[idx].active == status
        assert g.edges[g.edges[idx].reverse_index].active == status
        assert g.total_weight == pytest.approx(canonical_active_weight(g))


def test_set_edge_status_out_of_range(triangle_graph):
    with pytest.raises(IndexError):
        triangle_graph.set_edge_status(6, False)
    with pytest.raises(IndexError):
        triangle_graph.set_edge_status(-1, False)


def test_set_all_edges_status(triangle_graph):
    g = triangle_graph
    g.set_all_edges_status(False)
    assert g.total_weight == 0.0
    assert not any(edge.active for edge in g.edges)
    g.set_all_edges_status(True)
    assert g.total_weight == pytest.approx(25.0)


def test_set_edge_weight_updates_twin_and_survives_infinity(triangle_graph):
    g = triangle_graph
    idx = g.get_edge(0, 1)
    rev = g.edges[idx].reverse_index

    g.set_edge_weight(idx, 4.0)
    assert g.edges[rev].weight == 4.0
    assert g.total_weight == pytest.approx(19.0)

    g.set_edge_weight(idx, math.inf)
    assert math.isinf(g.total_weight)
    g.set_edge_weight(idx, 10.0)
    assert g.total_weight == pytest.approx(25.0)


def test_copy_is_independent(triangle_graph):
    clone = triangle_graph.copy()
    idx = clone.get_edge(0, 1)
    clone.set_edge_weight(idx, 0.0)
    clone.set_edge_status(clone.get_edge(1, 2), False)

    assert triangle_graph.edges[idx].weight == 10.0
    assert triangle_graph.edges[triangle_graph.get_edge(1, 2)].active
    assert triangle_graph.total_weight == pytest.approx(25.0)
    assert clone.ptrs == triangle_graph.ptrs


def test_is_reachable_skips_inactive_edges():
    g = Graph(4, [(0, 1, 1.0), (1, 2, 1.0), (2, 3, 1.0)])
    assert g.is_reachable(0, 3)
    assert g.is_reachable(2, 2)
    g.set_edge_status(g.get_edge(1, 2), False)
    assert not g.is_reachable(0, 3)
    assert g.is_reachable(3, 2)
    with pytest.raises(IndexError):
        g.is_reachable(0, 9)


def test_neighbors(triangle_graph):
    assert sorted(triangle_graph.neighbors(0)) == [1, 2]
    triangle_graph.set_edge_status(triangle_graph.get_edge(0, 1), False)
    assert list(triangle_graph.neighbors(0)) == [2]


def test_has_negative_weights():
    assert not has_negative_weights(Graph(2, [(0, 1, 0.0)]))
    g = Graph(3, [(0, 1, 1.0), (1, 2, -2.0)])
    assert has_negative_weights(g)
    g.set_edge_status(g.get_edge(1, 2), False)
    assert not has_negative_weights(g)


def test_is_graph_connected():
    assert is_graph_connected(Graph(3, [(0, 1, 1.0), (1, 2, 1.0)]))
    assert not is_graph_connected(Graph(4, [(0, 1, 1.0), (2, 3, 1.0)]))


def test_is_graph_connected_after_deactivation():
    g = Graph(3, [(0, 1, 1.0), (1, 2, 1.0)])
    g.set_edge_status(g.get_edge(0, 1), False)
    assert not is_graph_connected(g)


def test_directed_graph_connectivity_is_weak():
    g = Graph(3, [(1, 0, 1.0), (1, 2, 1.0)], bidirectional=False)
    assert is_graph_connected(g)
    assert not g.is_reachable(0, 2)

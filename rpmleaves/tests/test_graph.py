"""Tests for the reverse dependency graph"""

import pytest

from rpmleaves.core.graph import CompactGraph, build_rdepends, sort_unique_edges


def _assert_well_formed(graph):
    for u in range(graph.node_count):
        neighbors = graph.neighbors_of(u)
        assert neighbors == sorted(set(neighbors))
        assert u not in neighbors
        assert all(0 <= v < graph.node_count for v in neighbors)


class TestCompactGraph:
    """Tests for CompactGraph layout."""

    def test_from_edges(self):
        graph = CompactGraph.from_edges(4, [(0, 1), (0, 3), (2, 0)])
        assert graph.node_count == 4
        assert graph.edge_count == 3
        assert graph.neighbors_of(0) == [1, 3]
        assert graph.neighbors_of(1) == []
        assert graph.neighbors_of(2) == [0]
        assert graph.neighbors_of(3) == []

    def test_edges_iteration(self):
        edges = [(0, 2), (1, 0), (1, 2), (2, 1)]
        graph = CompactGraph.from_edges(3, edges)
        assert list(graph.edges()) == edges
        _assert_well_formed(graph)

    def test_empty_graph(self):
        graph = CompactGraph.from_edges(0, [])
        assert graph.node_count == 0
        assert graph.edge_count == 0
        assert list(graph.edges()) == []

    def test_nodes_without_edges(self):
        graph = CompactGraph.from_edges(3, [])
        assert [graph.neighbors_of(u) for u in range(3)] == [[], [], []]

    def test_unsorted_edges_rejected(self):
        with pytest.raises(ValueError):
            CompactGraph.from_edges(3, [(0, 2), (0, 1)])

    def test_duplicate_edges_rejected(self):
        with pytest.raises(ValueError):
            CompactGraph.from_edges(3, [(0, 1), (0, 1)])

    def test_self_edge_rejected(self):
        with pytest.raises(ValueError):
            CompactGraph.from_edges(2, [(1, 1)])

    def test_out_of_range_rejected(self):
        with pytest.raises(ValueError):
            CompactGraph.from_edges(2, [(0, 2)])
        with pytest.raises(ValueError):
            CompactGraph.from_edges(2, [(2, 0)])


class TestSortUniqueEdges:
    """Tests for edge sorting and deduplication."""

    def test_sort_and_dedup(self):
        edges = [(2, 0), (0, 1), (2, 0), (0, 1), (1, 2), (0, 0)]
        assert sort_unique_edges(edges) == [(0, 0), (0, 1), (1, 2), (2, 0)]

    def test_empty(self):
        assert sort_unique_edges([]) == []


class TestBuildRdepends:
    """Tests for build_rdepends."""

    def test_unique_dependency_edge(self, make_store):
        # A requires B, nothing else provides B
        store = make_store({'A': {'depends': ['B']}, 'B': {}})
        graph = build_rdepends(store, store.packages())
        assert list(graph.edges()) == [(1, 0)]

    def test_alternatives_no_edge(self, make_store):
        store = make_store({
            'A': {'depends': ['mta']},
            'B': {'provides': ['mta']},
            'C': {'provides': ['mta']},
        })
        graph = build_rdepends(store, store.packages())
        assert graph.edge_count == 0

    def test_duplicate_edges_merged(self, make_store):
        store = make_store({
            'app': {'depends': ['lib', 'lib.so.1', 'lib.so.2']},
            'lib': {'provides': ['lib.so.1', 'lib.so.2']},
        })
        graph = build_rdepends(store, store.packages())
        assert list(graph.edges()) == [(1, 0)]

    def test_self_dependency_no_edge(self, make_store):
        store = make_store({'A': {'depends': ['A', 'libA.so'], 'provides': ['libA.so']}})
        graph = build_rdepends(store, store.packages())
        assert graph.edge_count == 0

    def test_optdepends_ignored_by_default(self, make_store):
        store = make_store({'A': {'optdepends': ['B']}, 'B': {}})
        graph = build_rdepends(store, store.packages())
        assert graph.edge_count == 0

    def test_optdepends_enabled(self, make_store):
        store = make_store({'A': {'optdepends': ['B']}, 'B': {}})
        graph = build_rdepends(store, store.packages(), optdepends=True)
        assert list(graph.edges()) == [(1, 0)]

    def test_optdepends_alternatives(self, make_store):
        store = make_store({
            'A': {'optdepends': ['docviewer']},
            'B': {'provides': ['docviewer']},
            'C': {'provides': ['docviewer']},
        })
        graph = build_rdepends(store, store.packages(), optdepends=True)
        assert graph.edge_count == 0

    def test_neighbors_sorted(self, make_store):
        store = make_store({
            'e': {'depends': ['lib']},
            'a': {'depends': ['lib', 'tool']},
            'lib': {},
            'c': {'depends': ['lib', 'tool']},
            'tool': {'depends': ['lib']},
        })
        graph = build_rdepends(store, store.packages())
        _assert_well_formed(graph)
        lib = store.index('lib')
        tool = store.index('tool')
        assert graph.neighbors_of(lib) == sorted(
            store.index(n) for n in ('e', 'a', 'c', 'tool'))
        assert graph.neighbors_of(tool) == sorted(store.index(n) for n in ('a', 'c'))

    def test_empty_store(self, make_store):
        store = make_store({})
        graph = build_rdepends(store, store.packages())
        assert graph.node_count == 0
        assert graph.edge_count == 0

    def test_node_count_matches_packages(self, make_store):
        store = make_store({'a': {}, 'b': {}, 'c': {'depends': ['missing']}})
        graph = build_rdepends(store, store.packages())
        assert graph.node_count == 3
        assert graph.edge_count == 0

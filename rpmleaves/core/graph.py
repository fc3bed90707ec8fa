"""
Reverse dependency graph.

The graph has one node per installed package, numbered in the order the
package store enumerates them. An edge u -> v means that package u is the
only installed package satisfying one of the dependencies of package v,
so removing u would break v.

Storage is CSR style: a row offset per node into one flat neighbor array.
Each row is sorted, free of duplicates and closed by SENTINEL.
"""

import logging
from typing import Iterable, Iterator, List, Sequence, Tuple

from .edges import EdgeResolver
from .store import Package, PackageStore

logger = logging.getLogger(__name__)

# Marks the end of a neighbor row
SENTINEL = -1


class CompactGraph:
    """Immutable directed graph over node indices 0..node_count-1."""

    __slots__ = ('node_count', 'edge_count', '_rows', '_adj')

    def __init__(self, node_count: int, edge_count: int):
        self.node_count = node_count
        self.edge_count = edge_count
        # _rows[u] is where row u starts in _adj; each row ends with SENTINEL
        self._rows = [0] * (node_count + 1)
        self._adj = [SENTINEL] * (edge_count + node_count)

    @classmethod
    def from_edges(cls, node_count: int,
                   edges: Sequence[Tuple[int, int]]) -> 'CompactGraph':
        """Build a graph from edges sorted by (u, v) without duplicates.

        Raises:
            ValueError: if edges are unsorted, duplicated, self-referencing
                        or reference a node outside the graph
        """
        graph = cls(node_count, len(edges))
        rows = graph._rows
        adj = graph._adj

        pos = 0
        it = 0
        prev = None
        for u in range(node_count):
            rows[u] = pos
            while it < len(edges) and edges[it][0] == u:
                edge = edges[it]
                v = edge[1]
                if prev is not None and edge <= prev:
                    raise ValueError(f"edges not sorted or duplicated at {edge}")
                if v == u:
                    raise ValueError(f"self edge on node {u}")
                if not 0 <= v < node_count:
                    raise ValueError(f"edge {edge} outside graph of {node_count} nodes")
                adj[pos] = v
                pos += 1
                prev = edge
                it += 1
            adj[pos] = SENTINEL
            pos += 1
        rows[node_count] = pos

        if it != len(edges):
            raise ValueError(f"edge {edges[it]} outside graph of {node_count} nodes")

        return graph

    def neighbors_of(self, u: int) -> List[int]:
        """Return the sorted neighbors of node u."""
        # Last slot of the row holds the sentinel
        return self._adj[self._rows[u]:self._rows[u + 1] - 1]

    def edges(self) -> Iterator[Tuple[int, int]]:
        """Iterate over all edges in (u, v) order."""
        for u in range(self.node_count):
            for v in self.neighbors_of(u):
                yield u, v

    def __repr__(self) -> str:
        return f"CompactGraph(nodes={self.node_count}, edges={self.edge_count})"


def sort_unique_edges(edges: Iterable[Tuple[int, int]]) -> List[Tuple[int, int]]:
    """Sort edges by (u, v) and drop adjacent duplicates."""
    result = []
    for edge in sorted(edges):
        if result and result[-1] == edge:
            continue
        result.append(edge)
    return result


def build_rdepends(store: PackageStore, packages: Sequence[Package],
                   optdepends: bool = False) -> CompactGraph:
    """Build the reverse dependency graph of a package set.

    Args:
        store: Package store used for satisfier lookups
        packages: Installed packages, in index order
        optdepends: Also resolve optional (weak) dependencies

    Returns:
        CompactGraph with an edge u -> v for each unique prerequisite u of v
    """
    resolver = EdgeResolver(store, packages)
    edges = []

    for v, pkg in enumerate(packages):
        edges.extend(resolver.resolve(v, pkg.depends))
        if optdepends:
            edges.extend(resolver.resolve(v, pkg.optdepends))

    logger.debug(f"Resolved {len(edges)} forced dependency edges "
                 f"for {len(packages)} packages")

    edges = sort_unique_edges(edges)
    graph = CompactGraph.from_edges(len(packages), edges)

    logger.debug(f"Built {graph!r}")
    return graph

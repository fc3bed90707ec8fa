"""Strongly connected components of the reverse dependency graph.

Iterative Tarjan, one pass over the graph. Instead of separate index and
lowlink arrays each node carries a single marker:

- 0: not visited yet
- even value: discovery order of the node (counts by 2)
- odd value: lowest marker reachable from the node, low bit set to flag
  that the node is not the root of its component
- FINISHED: node already assigned to a component

While a component is collected every neighbor of its members is marked in
a bitmap. Clearing the members themselves leaves the packages outside the
component that depend on it; if none are left the component is closed and
can be removed as a whole.
"""

import logging
import sys
from dataclasses import dataclass
from typing import List

from .bitmap import Bitmap
from .graph import CompactGraph

logger = logging.getLogger(__name__)

# Greater than any discovery marker
FINISHED = sys.maxsize


@dataclass
class Component:
    """A strongly connected component, members in discovery order."""
    members: List[int]
    closed: bool

    def __len__(self) -> int:
        return len(self.members)

    @property
    def first(self) -> int:
        """Smallest member index."""
        return min(self.members)


def tarjan(graph: CompactGraph, all_cycles: bool = False) -> List[Component]:
    """Find the components of interest in graph.

    Args:
        graph: Reverse dependency graph (u -> v when v needs u)
        all_cycles: If False, return closed components of any size.
                    If True, return every component with more than one
                    member, closed or not.

    Returns:
        List of Component, in the order they were completed
    """
    n = graph.node_count
    marker = [0] * n
    outside = Bitmap(n)
    dfs = []    # (node, position of next neighbor to visit)
    done = []   # visited nodes not yet assigned to a component
    components = []

    for root in range(n):
        if marker[root]:
            continue

        u = root
        pos = 0
        counter = 2
        marker[u] = counter
        neighbors = graph.neighbors_of(u)

        while True:
            if pos < len(neighbors):
                v = neighbors[pos]
                pos += 1
                if not marker[v]:
                    dfs.append((u, pos))
                    u = v
                    pos = 0
                    counter += 2
                    marker[u] = counter
                    neighbors = graph.neighbors_of(u)
                elif marker[v] < marker[u]:
                    marker[u] = marker[v] | 1
                continue

            # All neighbors of u explored
            done.append(u)
            u_marker = marker[u]
            if not u_marker & 1:
                members = []
                while True:
                    v = done.pop()
                    marker[v] = FINISHED
                    members.append(v)
                    for w in graph.neighbors_of(v):
                        outside.set(w)
                    if not done or marker[done[-1]] < u_marker:
                        break

                for v in members:
                    outside.clear(v)
                closed = outside.is_empty()
                if not closed:
                    outside.clear_all()

                if all_cycles:
                    wanted = len(members) > 1
                else:
                    wanted = closed
                if wanted:
                    components.append(Component(members, closed))

            if not dfs:
                break

            v = u
            u, pos = dfs.pop()
            neighbors = graph.neighbors_of(u)
            if marker[v] < marker[u]:
                marker[u] = marker[v] | 1

    logger.debug(f"Found {len(components)} "
                 f"{'cycles' if all_cycles else 'closed components'} "
                 f"in {n} nodes")
    return components

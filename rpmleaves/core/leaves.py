"""Leaf cluster and dependency cycle detection."""

import logging
from typing import List, Tuple

from .graph import build_rdepends
from .scc import Component, tarjan
from .store import Package, PackageStore

logger = logging.getLogger(__name__)


def find_clusters(store: PackageStore, all_cycles: bool = False,
                  optdepends: bool = False) -> Tuple[List[Package], List[Component]]:
    """Find removable package clusters, or dependency cycles.

    Args:
        store: Package store to analyze
        all_cycles: Report every dependency cycle instead of closed clusters
        optdepends: Treat optional dependencies as dependencies

    Returns:
        Tuple of (packages, components). Component members are indices
        into packages; components are sorted by their smallest member.
    """
    packages = store.packages()
    logger.debug(f"Analyzing {len(packages)} installed packages "
                 f"(cycles={all_cycles}, optdepends={optdepends})")

    graph = build_rdepends(store, packages, optdepends=optdepends)
    components = tarjan(graph, all_cycles=all_cycles)
    components.sort(key=lambda c: c.first)

    return packages, components

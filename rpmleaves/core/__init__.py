"""Core modules for rpmleaves"""

from .graph import CompactGraph, build_rdepends
from .leaves import find_clusters
from .scc import Component, tarjan
from .store import Package, PackageStore, StoreError

__all__ = [
    'CompactGraph',
    'build_rdepends',
    'find_clusters',
    'Component',
    'tarjan',
    'Package',
    'PackageStore',
    'StoreError',
]

"""Forced dependency edge detection.

A dependency only ties two packages together when exactly one installed
package can satisfy it. If several installed packages provide the
capability, removing any single one of them leaves the dependent package
working, so no edge is recorded.
"""

from collections import OrderedDict
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .store import Package, PackageStore


class CandidateSet:
    """Ordered set of packages still available as satisfiers.

    Supports O(1) removal and O(1) re-insertion at the front, so packages
    matched recently are tried first by the next lookups.
    """

    def __init__(self, packages: Iterable[Package] = ()):
        self._items = OrderedDict((pkg, None) for pkg in packages)

    def __iter__(self) -> Iterator[Package]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, pkg: Package) -> bool:
        return pkg in self._items

    def remove(self, pkg: Package):
        """Remove pkg from the set (KeyError if absent)."""
        del self._items[pkg]

    def push_front(self, pkg: Package):
        """Insert pkg as the first element."""
        self._items[pkg] = None
        self._items.move_to_end(pkg, last=False)


class EdgeResolver:
    """Find the unique prerequisites of each package's dependencies.

    Args:
        store: Package store providing satisfier lookups
        packages: Installed packages, in index order
    """

    def __init__(self, store: PackageStore, packages: Sequence[Package]):
        self.store = store
        self._index: Dict[Package, int] = {pkg: i for i, pkg in enumerate(packages)}
        self.candidates = CandidateSet(packages)

    def unique_satisfier(self, constraint: Any) -> Optional[Package]:
        """Return the only installed package satisfying constraint.

        Returns None when nothing installed satisfies it, or when two or
        more installed packages do.
        """
        fst = self.store.find_satisfier(constraint, self.candidates)
        if fst is None:
            return None

        self.candidates.remove(fst)
        try:
            snd = self.store.find_satisfier(constraint, self.candidates)
        finally:
            self.candidates.push_front(fst)

        if snd is not None:
            return None
        return fst

    def resolve(self, v: int, constraints: Iterable[Any]) -> List[Tuple[int, int]]:
        """Return the edges (u, v) forced by the constraints of package v."""
        edges = []
        for constraint in constraints:
            fst = self.unique_satisfier(constraint)
            if fst is None:
                continue

            u = self._index[fst]
            if u == v:
                # Package satisfies its own dependency
                continue
            edges.append((u, v))
        return edges

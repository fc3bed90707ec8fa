"""Package store interface.

The analysis only needs three things from a package database: the ordered
list of installed packages, the dependency constraints of each package and
a way to find which package satisfies a constraint. Any source providing
those (the rpm database, a synthetic fixture) can drive the same core.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional


class StoreError(Exception):
    """Package store could not be opened, queried or released."""

    def __init__(self, message: str, hint: str = None):
        super().__init__(message)
        self.hint = hint


@dataclass(eq=False)
class Package:
    """An installed package.

    Packages compare and hash by identity: two records with the same name
    are still distinct packages.
    """
    name: str
    version: str
    arch: str = 'noarch'
    depends: List[Any] = field(default_factory=list)
    optdepends: List[Any] = field(default_factory=list)
    handle: Any = None  # Store specific reference


class PackageStore(ABC):
    """Source of installed packages and satisfier lookups.

    Stores are context managers: release() runs when the block exits.
    """

    @abstractmethod
    def packages(self) -> List[Package]:
        """Return the installed packages, in a stable order."""

    @abstractmethod
    def find_satisfier(self, constraint: Any,
                       candidates: Iterable[Package]) -> Optional[Package]:
        """Return the first candidate satisfying constraint, or None."""

    def release(self):
        """Release the underlying database.

        Raises:
            StoreError: if the database could not be closed cleanly
        """

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
        return False

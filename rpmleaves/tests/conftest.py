"""Shared fixtures: an in-memory package store."""

from typing import Dict, List

import pytest

from rpmleaves.core.store import Package, PackageStore, StoreError


class MockStore(PackageStore):
    """Package store built from a dict of package specs.

    Constraints are plain capability names. Every package provides its own
    name plus the capabilities listed in 'provides'.

    Example:
        MockStore({
            'a': {'depends': ['b']},
            'b': {'provides': ['libb.so']},
        })
    """

    def __init__(self, specs: Dict[str, dict], fail_release: bool = False):
        self._packages = []
        self._provides = {}
        for name, spec in specs.items():
            pkg = Package(
                name=name,
                version=spec.get('version', '1.0-1'),
                arch=spec.get('arch', 'x86_64'),
                depends=list(spec.get('depends', [])),
                optdepends=list(spec.get('optdepends', [])),
            )
            self._packages.append(pkg)
            self._provides[pkg] = {name, *spec.get('provides', [])}
        self.fail_release = fail_release
        self.released = False
        self.lookups: List[str] = []

    def packages(self) -> List[Package]:
        return self._packages

    def find_satisfier(self, constraint, candidates):
        self.lookups.append(constraint)
        for pkg in candidates:
            if constraint in self._provides[pkg]:
                return pkg
        return None

    def release(self):
        self.released = True
        if self.fail_release:
            raise StoreError("database is locked")

    def index(self, name: str) -> int:
        for i, pkg in enumerate(self._packages):
            if pkg.name == name:
                return i
        raise KeyError(name)


@pytest.fixture
def make_store():
    """Factory for MockStore instances."""
    return MockStore

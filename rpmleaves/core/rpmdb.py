"""
Installed package store backed by the rpm database.

Headers are read with the rpm bindings, then loaded into a libsolv pool as
the @System repo so that versioned and rich dependencies are matched the
way rpm itself matches them. File dependencies are resolved by asking the
rpm database which packages own the required paths.
"""

import logging
import platform
from typing import Dict, Iterable, List, Optional, Tuple

import solv

try:
    import rpm
    HAS_RPM = True
except ImportError:
    HAS_RPM = False

from .deps import (
    Dependency,
    RPMSENSE_EQUAL,
    RPMSENSE_GREATER,
    RPMSENSE_LESS,
    RPMSENSE_SENSEMASK,
    dependencies_from_arrays,
)
from .store import Package, PackageStore, StoreError

logger = logging.getLogger(__name__)

# Pseudo packages holding imported signing keys
IGNORED_NAMES = frozenset(['gpg-pubkey'])

REBUILD_HINT = "try running 'rpmdb --rebuilddb'"


def rpm_flags_to_solv(flags: int) -> int:
    """Map RPM sense flags to libsolv relation flags."""
    rel = 0
    if flags & RPMSENSE_LESS:
        rel |= solv.REL_LT
    if flags & RPMSENSE_GREATER:
        rel |= solv.REL_GT
    if flags & RPMSENSE_EQUAL:
        rel |= solv.REL_EQ
    return rel


def format_evr(epoch, version: str, release: str) -> str:
    """Format epoch:version-release, omitting a zero epoch."""
    if epoch:
        return f"{epoch}:{version}-{release}"
    return f"{version}-{release}"


def _header_deps(hdr, name_tag, flags_tag, version_tag) -> List[Dependency]:
    return dependencies_from_arrays(hdr[name_tag] or [],
                                    hdr[flags_tag] or [],
                                    hdr[version_tag] or [])


def _header_nevr(hdr) -> Tuple[str, str, str]:
    evr = format_evr(hdr[rpm.RPMTAG_EPOCH] or 0,
                     hdr[rpm.RPMTAG_VERSION],
                     hdr[rpm.RPMTAG_RELEASE])
    return hdr[rpm.RPMTAG_NAME], evr, hdr[rpm.RPMTAG_ARCH] or 'noarch'


class SolvIndex:
    """libsolv pool of installed packages answering "who provides X".

    Add every package, then call finalize() before querying providers.
    """

    def __init__(self, arch: Optional[str] = None):
        pool = solv.Pool()
        pool.setdisttype(solv.Pool.DISTTYPE_RPM)
        pool.setarch(arch or platform.machine())
        installed = pool.add_repo("@System")
        installed.appdata = {"type": "installed"}
        pool.installed = installed

        self.pool = pool
        self.repo = installed
        self.packages: List[Package] = []
        self._solvables = {}
        self._by_solvable: Dict[int, Package] = {}
        self._by_nevra: Dict[Tuple[str, str, str], Package] = {}
        self._providers: Dict[Dependency, Tuple[Package, ...]] = {}

    def add(self, name: str, evr: str, arch: str,
            provides: Iterable[Dependency] = (),
            requires: Iterable[Dependency] = (),
            weak: Iterable[Dependency] = ()) -> Package:
        """Add an installed package and return its Package record."""
        pool = self.pool
        s = self.repo.add_solvable()
        s.name = name
        s.evr = evr
        s.arch = arch
        for dep in provides:
            s.add_deparray(solv.SOLVABLE_PROVIDES, self.dep_id(dep))
        # Installed packages always provide themselves
        s.add_deparray(solv.SOLVABLE_PROVIDES,
                       pool.rel2id(pool.str2id(name), pool.str2id(evr), solv.REL_EQ))

        pkg = Package(name=name, version=evr, arch=arch,
                      depends=list(requires), optdepends=list(weak), handle=s.id)
        self.packages.append(pkg)
        self._solvables[s.id] = s
        self._by_solvable[s.id] = pkg
        self._by_nevra[(name, evr, arch)] = pkg
        return pkg

    def lookup(self, name: str, evr: str, arch: str) -> Optional[Package]:
        return self._by_nevra.get((name, evr, arch))

    def add_file(self, pkg: Package, path: str):
        """Record that pkg owns path, so file dependencies match it."""
        self._solvables[pkg.handle].add_deparray(solv.SOLVABLE_PROVIDES,
                                                 self.pool.str2id(path))

    def finalize(self):
        self.pool.createwhatprovides()

    def dep_id(self, dep: Dependency) -> int:
        """Convert a Dependency to a libsolv dependency id."""
        pool = self.pool
        if dep.is_rich:
            parsed = pool.parserpmrichdep(dep.name)
            if parsed is not None:
                return parsed.id
            logger.debug(f"Cannot parse rich dependency {dep.name}")
            return pool.str2id(dep.name)

        name_id = pool.str2id(dep.name)
        if dep.version and dep.flags & RPMSENSE_SENSEMASK:
            return pool.rel2id(name_id, pool.str2id(dep.version),
                               rpm_flags_to_solv(dep.flags))
        return name_id

    def providers(self, dep: Dependency) -> Tuple[Package, ...]:
        """Return all installed packages satisfying dep."""
        found = self._providers.get(dep)
        if found is None:
            found = tuple(self._by_solvable[s.id]
                          for s in self.pool.whatprovides(self.dep_id(dep))
                          if s.id in self._by_solvable)
            self._providers[dep] = found
        return found

    def free(self):
        self._providers.clear()
        self._solvables.clear()
        self.pool.free()


class RpmPackageStore(PackageStore):
    """Installed packages of an rpm database.

    Args:
        root: Installation root (chroot path), '/' for the running system
        dbpath: Database location, None for rpm's configured %_dbpath

    Raises:
        StoreError: if the database cannot be opened
    """

    def __init__(self, root: str = '/', dbpath: Optional[str] = None):
        if not HAS_RPM:
            raise StoreError("rpm python bindings are not available")

        self.root = root or '/'
        self.dbpath = dbpath
        self._ts = None
        self._index: Optional[SolvIndex] = None

        self._open()

    def _open(self):
        if self.dbpath:
            rpm.addMacro('_dbpath', self.dbpath)

        try:
            ts = rpm.TransactionSet(self.root)
            ts.setVSFlags(rpm._RPMVSF_NOSIGNATURES | rpm._RPMVSF_NODIGESTS)
            rc = ts.openDB()
        except rpm.error as e:
            self._forget_dbpath()
            raise StoreError(str(e), hint=REBUILD_HINT) from e

        if rc != 0:
            self._forget_dbpath()
            raise StoreError(f"cannot open rpm database (error {rc})",
                             hint=REBUILD_HINT)

        self._ts = ts
        logger.debug(f"Opened rpm database (root={self.root}, dbpath={self.dbpath})")

    def _forget_dbpath(self):
        if self.dbpath:
            rpm.delMacro('_dbpath')

    def packages(self) -> List[Package]:
        if self._index is None:
            self._index = self._load()
        return self._index.packages

    def _read_headers(self) -> list:
        """Read installed headers, sorted by name, evr and arch."""
        records = []
        try:
            for hdr in self._ts.dbMatch():
                name, evr, arch = _header_nevr(hdr)
                if name in IGNORED_NAMES:
                    continue

                provides = _header_deps(hdr, rpm.RPMTAG_PROVIDENAME,
                                        rpm.RPMTAG_PROVIDEFLAGS,
                                        rpm.RPMTAG_PROVIDEVERSION)
                requires = [d for d in _header_deps(hdr, rpm.RPMTAG_REQUIRENAME,
                                                    rpm.RPMTAG_REQUIREFLAGS,
                                                    rpm.RPMTAG_REQUIREVERSION)
                            if not d.is_rpmlib]
                weak = []
                if hasattr(rpm, 'RPMTAG_RECOMMENDNAME'):
                    weak.extend(_header_deps(hdr, rpm.RPMTAG_RECOMMENDNAME,
                                             rpm.RPMTAG_RECOMMENDFLAGS,
                                             rpm.RPMTAG_RECOMMENDVERSION))
                if hasattr(rpm, 'RPMTAG_SUGGESTNAME'):
                    weak.extend(_header_deps(hdr, rpm.RPMTAG_SUGGESTNAME,
                                             rpm.RPMTAG_SUGGESTFLAGS,
                                             rpm.RPMTAG_SUGGESTVERSION))

                records.append((name, evr, arch, provides, requires, weak))
        except rpm.error as e:
            raise StoreError(f"error reading installed packages: {e}",
                             hint=REBUILD_HINT) from e

        records.sort(key=lambda r: (r[0], r[1], r[2]))
        return records

    def _load(self) -> SolvIndex:
        records = self._read_headers()
        index = SolvIndex()
        required_files = set()

        for name, evr, arch, provides, requires, weak in records:
            index.add(name, evr, arch, provides, requires, weak)
            required_files.update(d.name for d in requires if d.is_file)
            required_files.update(d.name for d in weak if d.is_file)

        # File dependencies: make owners provide the required paths
        try:
            for path in sorted(required_files):
                for hdr in self._ts.dbMatch('basenames', path):
                    owner = index.lookup(*_header_nevr(hdr))
                    if owner is not None:
                        index.add_file(owner, path)
        except rpm.error as e:
            index.free()
            raise StoreError(f"error looking up file owners: {e}",
                             hint=REBUILD_HINT) from e

        index.finalize()

        logger.debug(f"Loaded {len(index.packages)} installed packages, "
                     f"{len(required_files)} required files")
        return index

    def providers(self, constraint: Dependency) -> Tuple[Package, ...]:
        """Return all installed packages satisfying constraint."""
        self.packages()
        return self._index.providers(constraint)

    def find_satisfier(self, constraint: Dependency, candidates) -> Optional[Package]:
        """Return the first package of candidates providing constraint."""
        found = self.providers(constraint)
        if len(found) <= 1:
            if found and found[0] in candidates:
                return found[0]
            return None

        # Several providers: candidate order decides
        found = set(found)
        for pkg in candidates:
            if pkg in found:
                return pkg
        return None

    def release(self):
        if self._index is not None:
            self._index.free()
            self._index = None

        if self._ts is None:
            return
        ts = self._ts
        self._ts = None
        try:
            rc = ts.closeDB()
        except rpm.error as e:
            raise StoreError(f"error closing rpm database: {e}") from e
        finally:
            self._forget_dbpath()
        if rc:
            raise StoreError(f"error closing rpm database (error {rc})")
        logger.debug("Closed rpm database")

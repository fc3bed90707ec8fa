"""
RPM dependency records.

Dependencies are read from installed package headers as parallel
name/version/flags arrays and kept as Dependency objects.
"""

from dataclasses import dataclass
from typing import List, Sequence

# RPM sense flags (rpmds.h)
RPMSENSE_ANY = 0
RPMSENSE_LESS = 1 << 1
RPMSENSE_GREATER = 1 << 2
RPMSENSE_EQUAL = 1 << 3
RPMSENSE_RPMLIB = 1 << 24

RPMSENSE_SENSEMASK = RPMSENSE_LESS | RPMSENSE_GREATER | RPMSENSE_EQUAL


@dataclass(frozen=True)
class Dependency:
    """A single Requires/Recommends/Suggests entry."""
    name: str
    flags: int = RPMSENSE_ANY
    version: str = ''

    @property
    def operator(self) -> str:
        """Comparison operator, '' for unversioned dependencies."""
        if not self.version:
            return ''
        op = ''
        if self.flags & RPMSENSE_LESS:
            op += '<'
        if self.flags & RPMSENSE_GREATER:
            op += '>'
        if self.flags & RPMSENSE_EQUAL:
            op += '='
        return op

    @property
    def is_rich(self) -> bool:
        """Boolean dependency like "(foo or bar)"."""
        return self.name.startswith('(')

    @property
    def is_file(self) -> bool:
        return self.name.startswith('/')

    @property
    def is_rpmlib(self) -> bool:
        """Dependency on an rpm feature, satisfied by rpm itself."""
        return bool(self.flags & RPMSENSE_RPMLIB) or self.name.startswith('rpmlib(')

    def __str__(self) -> str:
        op = self.operator
        if op:
            return f"{self.name} {op} {self.version}"
        return self.name


def dependencies_from_arrays(names: Sequence[str], flags: Sequence[int] = (),
                             versions: Sequence[str] = ()) -> List[Dependency]:
    """Combine header name/flags/version arrays into Dependency objects.

    Empty names are skipped; missing flags or versions default to an
    unversioned dependency.
    """
    result = []
    for i, name in enumerate(names or []):
        if not name:
            continue
        flag = flags[i] if i < len(flags or []) else 0
        version = versions[i] if i < len(versions or []) else ''
        result.append(Dependency(name, flag or 0, version or ''))
    return result

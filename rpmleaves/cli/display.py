"""Report formatting for rpmleaves.

Two output modes:
- lines: one package per line, '-' marks the first package of a cluster
- json: list of clusters (programmatic consumption)
"""

import json
from enum import Enum
from typing import List, Sequence

from ..core.scc import Component
from ..core.store import Package


class DisplayMode(Enum):
    """Output display mode."""
    LINES = "lines"
    JSON = "json"


FIRST_MARK = '-'
NEXT_MARK = ' '


def format_lines(packages: Sequence[Package],
                 components: Sequence[Component]) -> List[str]:
    """Format clusters as "<mark> <name> <version>" lines.

    Example:
        - foo 1.0-1.mga9
          libfoo1 1.0-1.mga9
        - bar 2.3-2.mga9
    """
    lines = []
    for component in components:
        mark = FIRST_MARK
        for i in component.members:
            pkg = packages[i]
            lines.append(f"{mark} {pkg.name} {pkg.version}")
            mark = NEXT_MARK
    return lines


def format_json(packages: Sequence[Package],
                components: Sequence[Component]) -> str:
    """Format clusters as a JSON array."""
    clusters = []
    for component in components:
        clusters.append({
            'closed': component.closed,
            'packages': [
                {
                    'name': packages[i].name,
                    'version': packages[i].version,
                    'arch': packages[i].arch,
                }
                for i in component.members
            ],
        })
    return json.dumps(clusters, indent=2, ensure_ascii=False)


def format_report(packages: Sequence[Package], components: Sequence[Component],
                  mode: DisplayMode = DisplayMode.LINES) -> List[str]:
    """Format the report according to display mode.

    Returns:
        List of lines ready to print (empty when nothing was found in
        lines mode)
    """
    if mode == DisplayMode.JSON:
        return [format_json(packages, components)]
    return format_lines(packages, components)

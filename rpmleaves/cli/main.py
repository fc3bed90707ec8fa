"""
Main CLI entry point for rpmleaves

Lists installed packages that can be removed because nothing else needs
them, grouped in clusters of packages that only depend on each other:
- rpmleaves             (closed leaf clusters)
- rpmleaves --cycles    (every dependency cycle, for diagnostics)
"""

import argparse
import logging
import sys

from .. import __version__
from ..core.config import read_config
from ..core.leaves import find_clusters
from ..core.store import PackageStore, StoreError
from . import colors
from .display import DisplayMode, format_report


def check_dependencies() -> list:
    """Check for required Python modules.

    Returns:
        List of (package, purpose) tuples for missing modules
    """
    missing = []

    try:
        import rpm  # noqa: F401
    except ImportError:
        missing.append(('python3-rpm', 'installed package database'))

    try:
        import solv  # noqa: F401
    except ImportError:
        missing.append(('python3-solv', 'dependency matching'))

    return missing


def print_missing_dependencies(missing: list):
    """Print error message for missing dependencies."""
    print(colors.error("ERROR: Missing required Python modules:\n"), file=sys.stderr)
    for pkg, purpose in missing:
        print(f"  - {pkg} ({purpose})", file=sys.stderr)
    print("\nInstall with:", file=sys.stderr)
    print(f"  urpmi {' '.join(pkg for pkg, _ in missing)}", file=sys.stderr)


class LeavesArgumentParser(argparse.ArgumentParser):
    """Argument parser exiting with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""

    parser = LeavesArgumentParser(
        prog='rpmleaves',
        description='List installed packages nothing else depends on',
        epilog='Packages that only depend on each other are reported together; '
               'the first package of each cluster is marked with "-".',
        add_help=False,
    )

    operations = parser.add_argument_group('operations')
    operations.add_argument(
        '--cycles', '-c',
        dest='all_cycles',
        action='store_true',
        help='Show all dependency cycles found'
    )
    operations.add_argument(
        '--help', '-h',
        action='store_true',
        help='Show this help'
    )

    options = parser.add_argument_group('options')
    options.add_argument(
        '--optdepends', '-o',
        action='store_true',
        help='Treat optional dependencies (Recommends, Suggests) as dependencies'
    )
    options.add_argument(
        '--dbpath', '-b',
        metavar='<path>',
        help='Set an alternate database location'
    )
    options.add_argument(
        '--root', '-r',
        metavar='<path>',
        help='Set an alternate installation root'
    )
    options.add_argument(
        '--json',
        action='store_true',
        help='JSON output for scripting'
    )
    options.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Verbose output'
    )
    options.add_argument(
        '--nocolor',
        action='store_true',
        help='Disable colored output'
    )
    options.add_argument(
        '--version', '-V',
        action='version',
        version=f'rpmleaves {__version__}'
    )

    return parser


def load_settings(args) -> dict:
    """Merge configuration file settings with command-line options."""
    settings = read_config()
    if args.root:
        settings['root'] = args.root
    if args.dbpath:
        settings['dbpath'] = args.dbpath
    if args.optdepends:
        settings['optdepends'] = True
    return settings


def open_store(root: str, dbpath: str) -> PackageStore:
    """Open the installed package database."""
    from ..core.rpmdb import RpmPackageStore
    return RpmPackageStore(root=root, dbpath=dbpath)


def report(store: PackageStore, all_cycles: bool = False, optdepends: bool = False,
           mode: DisplayMode = DisplayMode.LINES, out=None) -> int:
    """Analyze an opened store, print the report and release the store.

    Returns:
        Exit code (0 on success, 1 on any failure)
    """
    out = out if out is not None else sys.stdout
    ret = 0

    try:
        packages, components = find_clusters(store, all_cycles=all_cycles,
                                             optdepends=optdepends)
    except StoreError as e:
        print(colors.error(f"error getting packages: {e}"), file=sys.stderr)
        ret = 1
    except MemoryError:
        print(colors.error("error building graph: out of memory"), file=sys.stderr)
        ret = 1
    else:
        for line in format_report(packages, components, mode):
            print(line, file=out)
    finally:
        try:
            store.release()
        except StoreError as e:
            print(colors.error(f"error releasing package database: {e}"), file=sys.stderr)
            ret = 1

    return ret


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.help:
        parser.print_help()
        return 1

    # Configure logging based on verbose flag
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(name)s - %(levelname)s - %(message)s',
            stream=sys.stderr
        )

    colors.init(nocolor=args.nocolor)

    missing = check_dependencies()
    if missing:
        print_missing_dependencies(missing)
        return 1

    settings = load_settings(args)

    try:
        store = open_store(settings['root'], settings['dbpath'])
    except StoreError as e:
        print(colors.error("failed to initialize rpm database:"), file=sys.stderr)
        print(f"(root: {settings['root']}, dbpath: {settings['dbpath'] or 'default'})",
              file=sys.stderr)
        print(str(e), file=sys.stderr)
        if e.hint:
            print(colors.warning(e.hint), file=sys.stderr)
        return 1

    mode = DisplayMode.JSON if args.json else DisplayMode.LINES
    return report(store, all_cycles=args.all_cycles,
                  optdepends=settings['optdepends'], mode=mode)


if __name__ == '__main__':
    sys.exit(main())

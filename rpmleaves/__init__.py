"""
rpmleaves - Find removable package clusters in an RPM installation

Reports groups of installed packages that nothing else depends on:
- Leaf clusters, including packages that only depend on each other
- Dependency cycles among installed packages (diagnostic mode)
- Optional (weak) dependencies can be counted as hard ones
"""

__version__ = "0.1.0"
__author__ = "Mageia Community"

"""
Xplat Bans

A static banned-API detector. Flags uses of configured classes, package
prefixes and class-scoped methods in typed syntax trees, with the ban list
supplied as a JSON document.
"""

__version__ = "0.1.0"
__author__ = "Xplat Bans Team"

# Make version easily importable
def get_version():
    """Get the current version of Xplat Bans."""
    return __version__

__all__ = ['get_version']

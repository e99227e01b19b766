"""
Version management for Xplat Bans.

This module provides centralized version information to avoid hardcoding
version numbers throughout the codebase.
"""

from . import __version__


def get_version() -> str:
    """
    Get the current version of Xplat Bans.

    Returns:
        Version string (e.g., "0.1.0")
    """
    return __version__


def get_user_agent() -> str:
    """User-Agent header sent when fetching remote ban lists."""
    return f"xplat-bans/{__version__}"


def get_full_name_with_version() -> str:
    """
    Get the full tool name with version.

    Returns:
        Full name string (e.g., "Xplat Bans v0.1.0")
    """
    return f"Xplat Bans v{__version__}"

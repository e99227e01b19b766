"""
Typed Tree Module

Readers that turn exported typed syntax trees into the nodes the ban matcher
checks.
"""

from .base import TypedTreeParser, detect_tree_format, read_tree_document
from .typed_ast import FORMAT_NAME, TypedAstParser

__all__ = [
    "FORMAT_NAME",
    "TypedAstParser",
    "TypedTreeParser",
    "detect_tree_format",
    "read_tree_document",
]

"""
Scope-based suppression of ban diagnostics.

A declaration (class, method, field or local variable) annotated with a
suppression marker silences every diagnostic on itself and on everything
lexically nested inside it. Host adapters thread the enclosing declarations
explicitly through a ``ScopeStack``; the resulting ``Scope`` chain travels
with each typed node.
"""

from contextlib import contextmanager
from typing import Iterable, Iterator, Optional

from ..nodes import Scope

DEFAULT_MARKERS = (
    "XplatBanSuppression",
    "com.google.errorprone.xplat.checker.XplatBanSuppression",
)


class SuppressionIndex:
    """Answers whether a node sits inside a suppressed declaration."""

    def __init__(self, markers: Optional[Iterable[str]] = None):
        self.markers = frozenset(markers if markers is not None else DEFAULT_MARKERS)
        self._simple_markers = frozenset(marker.rsplit('.', 1)[-1] for marker in self.markers)

    def is_marker(self, annotation: str) -> bool:
        """
        Check whether an annotation name is a suppression marker.

        Qualified names must match a configured marker exactly; simple names
        match the simple name of any configured marker.
        """
        name = annotation.strip().lstrip('@')
        if '(' in name:
            name = name[:name.index('(')]
        if '.' in name:
            return name in self.markers
        return name in self._simple_markers

    def is_marked(self, annotations: Iterable[str]) -> bool:
        return any(self.is_marker(annotation) for annotation in annotations)

    def is_suppressed(self, node) -> bool:
        """
        Walk from the node's innermost declaration outwards looking for a marker.

        Args:
            node: Any typed node carrying a ``scope`` attribute

        Returns:
            True on the first marked scope, False if none is marked
        """
        scope = node.scope
        if scope is None:
            return False
        for frame in scope.chain():
            if frame.suppressed:
                return True
        return False


class ScopeStack:
    """Tracks the enclosing declarations while a host walks a syntax tree."""

    def __init__(self, index: Optional[SuppressionIndex] = None):
        self.index = index or SuppressionIndex()
        self._current: Optional[Scope] = None

    @property
    def current(self) -> Optional[Scope]:
        return self._current

    @property
    def depth(self) -> int:
        if self._current is None:
            return 0
        return sum(1 for _ in self._current.chain())

    @contextmanager
    def push(self, kind: str, name: str, annotations: Iterable[str] = ()) -> Iterator[Scope]:
        """Enter a declaration for the duration of the ``with`` block."""
        scope = Scope(kind=kind, name=name,
                      suppressed=self.index.is_marked(annotations),
                      parent=self._current)
        self._current = scope
        try:
            yield scope
        finally:
            self._current = scope.parent

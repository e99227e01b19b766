"""
Data models for the ban registry.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

SECTIONS = ("classes", "packages", "methods")


@dataclass(frozen=True)
class BanEntry:
    """A disallowed class, package prefix or method with the reason it is banned."""
    key: str
    reason: str
    section: str = "classes"
    owner: Optional[str] = None  # declaring class, for method bans


class LoadStatus(Enum):
    """Outcome of loading one ban list source."""
    LOADED = "loaded"
    PARTIAL = "partial"  # some sections missing or malformed
    FAILED = "failed"    # nothing from this source was applied


@dataclass
class LoadResult:
    """What happened when one ban list source was merged into the loader."""
    source: str
    status: LoadStatus
    loaded_sections: List[str] = field(default_factory=list)
    missing_sections: List[str] = field(default_factory=list)
    malformed_sections: List[str] = field(default_factory=list)
    entry_counts: Dict[str, int] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is not LoadStatus.FAILED

    @classmethod
    def failed(cls, source: str, error: str) -> "LoadResult":
        return cls(source=source, status=LoadStatus.FAILED, error=error)


class BanRegistry:
    """
    Immutable store of the merged ban lists.

    Holds three mappings: class name -> reason, package prefix -> reason and
    class name -> (method name -> reason). Instances are built once by
    ``BanRegistryLoader.build()`` and only read afterwards, so a single
    registry can be shared by matchers running in parallel.
    """

    def __init__(self,
                 classes: Optional[Mapping[str, str]] = None,
                 packages: Optional[Mapping[str, str]] = None,
                 methods: Optional[Mapping[str, Mapping[str, str]]] = None,
                 sources: Optional[Iterable[str]] = None):
        self._classes = MappingProxyType(dict(classes or {}))
        self._packages = MappingProxyType(dict(packages or {}))
        self._methods = MappingProxyType({
            owner: MappingProxyType(dict(names))
            for owner, names in (methods or {}).items()
        })
        # Longest prefix first, ties broken alphabetically
        self._prefixes: Tuple[str, ...] = tuple(sorted(self._packages, key=lambda p: (-len(p), p)))
        self.sources: Tuple[str, ...] = tuple(sources or ())

    @classmethod
    def empty(cls) -> "BanRegistry":
        return cls()

    @property
    def classes(self) -> Mapping[str, str]:
        return self._classes

    @property
    def packages(self) -> Mapping[str, str]:
        return self._packages

    @property
    def methods(self) -> Mapping[str, Mapping[str, str]]:
        return self._methods

    def class_ban(self, key: str) -> Optional[str]:
        """Reason for a banned class, or None. Exact, case-sensitive match."""
        return self._classes.get(key)

    def package_ban(self, key: str) -> Optional[str]:
        """Reason for a banned package, or None. Exact match; see ``package_prefix_match``."""
        return self._packages.get(key)

    def method_ban(self, class_key: str, method_name: str) -> Optional[str]:
        names = self._methods.get(class_key)
        if names is None:
            return None
        return names.get(method_name)

    def package_prefix_match(self, key: str) -> Optional[Tuple[str, str]]:
        """
        Find the banned package prefix that ``key`` starts with.

        When several registered prefixes match, the longest one wins.

        Args:
            key: Normalized type key

        Returns:
            ``(prefix, reason)`` or None when no prefix matches
        """
        for prefix in self._prefixes:
            if key.startswith(prefix):
                return prefix, self._packages[prefix]
        return None

    def is_empty(self) -> bool:
        return not (self._classes or self._packages or self._methods)

    def counts(self) -> Dict[str, int]:
        return {
            "classes": len(self._classes),
            "packages": len(self._packages),
            "methods": sum(len(names) for names in self._methods.values()),
        }

    def entries(self) -> List[BanEntry]:
        """Flatten the registry into ``BanEntry`` records, sorted by section and key."""
        entries = [BanEntry(key, reason, "classes") for key, reason in sorted(self._classes.items())]
        entries.extend(BanEntry(key, reason, "packages") for key, reason in sorted(self._packages.items()))
        for owner in sorted(self._methods):
            for name, reason in sorted(self._methods[owner].items()):
                entries.append(BanEntry(name, reason, "methods", owner=owner))
        return entries

    def to_document(self) -> Dict[str, Dict]:
        """Render the registry in the ban list document shape."""
        return {
            "classes": dict(sorted(self._classes.items())),
            "packages": dict(sorted(self._packages.items())),
            "methods": {
                owner: dict(sorted(self._methods[owner].items()))
                for owner in sorted(self._methods)
            },
        }

    def __repr__(self) -> str:
        counts = self.counts()
        return (f"BanRegistry(classes={counts['classes']}, packages={counts['packages']}, "
                f"methods={counts['methods']})")

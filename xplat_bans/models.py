"""
Core data models for Xplat Bans.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

CHECK_NAME = "XplatBans"


class Severity(Enum):
    """Diagnostic severity. Every ban violation is an error."""
    ERROR = "error"


@dataclass(frozen=True)
class SourceLocation:
    """Position of a node in the analyzed source."""
    file: str
    line: Optional[int] = None
    column: Optional[int] = None

    def __str__(self) -> str:
        parts = [self.file]
        if self.line is not None:
            parts.append(str(self.line))
            if self.column is not None:
                parts.append(str(self.column))
        return ":".join(parts)


@dataclass(frozen=True)
class Diagnostic:
    """A single banned-API finding tied to one syntax node."""
    location: SourceLocation
    message: str
    severity: Severity = Severity.ERROR
    node_kind: Optional[str] = None  # "call", "new_class", "import", ...
    rule: Optional[str] = None       # which decision step fired
    check: str = CHECK_NAME


@dataclass
class AnalysisResult:
    """Complete result of running the ban checks over a set of inputs."""
    diagnostics: List[Diagnostic]
    files_analyzed: int
    nodes_visited: int
    errors: List[str]
    processing_time: float
    inputs: List[str] = field(default_factory=list)
    ban_sources: List[str] = field(default_factory=list)

    @property
    def diagnostic_count(self) -> int:
        return len(self.diagnostics)

    @property
    def has_diagnostics(self) -> bool:
        return bool(self.diagnostics)

    def diagnostics_by_file(self) -> Dict[str, List[Diagnostic]]:
        """Group diagnostics by source file, keeping traversal order."""
        grouped: Dict[str, List[Diagnostic]] = {}
        for diagnostic in self.diagnostics:
            grouped.setdefault(diagnostic.location.file, []).append(diagnostic)
        return grouped

    def counts_by_rule(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for diagnostic in self.diagnostics:
            key = diagnostic.rule or "unknown"
            counts[key] = counts.get(key, 0) + 1
        return counts

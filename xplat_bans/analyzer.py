"""
Analysis driver: runs the ban matcher over every node of every compilation unit.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from .exceptions import TypedTreeParseError
from .matching.matcher import BanMatcher
from .models import AnalysisResult, Diagnostic
from .nodes import CompilationUnit
from .tree.base import TypedTreeParser
from .tree.typed_ast import TypedAstParser

logger = logging.getLogger(__name__)


class BanAnalyzer:
    """
    Feeds typed nodes to a ``BanMatcher`` and collects the diagnostics.

    Compilation units are independent, so with ``jobs > 1`` they are matched
    on a thread pool. Diagnostics are always returned in input order.
    """

    def __init__(self, matcher: BanMatcher, parser: Optional[TypedTreeParser] = None):
        """
        Initialize the analyzer.

        Args:
            matcher: Matcher holding the ban registry
            parser: Reader for typed tree documents (defaults to TypedAstParser
                sharing the matcher's suppression markers)
        """
        self.matcher = matcher
        self.parser = parser or TypedAstParser(suppression_index=matcher.suppression_index)

    def analyze_unit(self, unit: CompilationUnit) -> List[Diagnostic]:
        diagnostics = []
        for node in unit.nodes:
            diagnostic = self.matcher.match(node)
            if diagnostic is not None:
                diagnostics.append(diagnostic)

        logger.debug(f"{unit.file}: {len(unit.nodes)} nodes, {len(diagnostics)} diagnostics")
        return diagnostics

    def analyze_units(self, units: Sequence[CompilationUnit], jobs: int = 1,
                      errors: Optional[List[str]] = None,
                      inputs: Optional[List[str]] = None) -> AnalysisResult:
        """
        Analyze already parsed compilation units.

        Args:
            units: Compilation units to check
            jobs: Number of worker threads
            errors: Errors collected before matching (e.g. parse failures)
            inputs: Input documents, recorded on the result

        Returns:
            AnalysisResult with all diagnostics in unit order
        """
        start_time = time.time()
        logger.info(f"Checking {len(units)} compilation unit(s) against "
                    f"{_describe_counts(self.matcher.registry.counts())}")

        if jobs > 1 and len(units) > 1:
            with ThreadPoolExecutor(max_workers=jobs) as executor:
                per_unit = list(executor.map(self.analyze_unit, units))
        else:
            per_unit = [self.analyze_unit(unit) for unit in units]

        diagnostics = [diagnostic for unit_diagnostics in per_unit for diagnostic in unit_diagnostics]
        processing_time = time.time() - start_time

        logger.info(f"Found {len(diagnostics)} banned API use(s) in {processing_time:.3f}s")

        return AnalysisResult(
            diagnostics=diagnostics,
            files_analyzed=len(units),
            nodes_visited=sum(len(unit.nodes) for unit in units),
            errors=list(errors or []),
            processing_time=processing_time,
            inputs=list(inputs or []),
            ban_sources=list(self.matcher.registry.sources),
        )

    def analyze_files(self, file_paths: Sequence[str], jobs: int = 1) -> AnalysisResult:
        """
        Parse typed tree documents and analyze every unit they contain.

        A document that cannot be parsed is recorded as an error and skipped;
        the remaining documents are still analyzed.
        """
        units, errors = self.parse_files(file_paths)
        return self.analyze_units(units, jobs=jobs, errors=errors, inputs=list(file_paths))

    def parse_files(self, file_paths: Sequence[str]) -> Tuple[List[CompilationUnit], List[str]]:
        units: List[CompilationUnit] = []
        errors: List[str] = []
        for file_path in file_paths:
            try:
                units.extend(self.parser.parse(file_path))
            except FileNotFoundError as e:
                logger.error(str(e))
                errors.append(str(e))
            except TypedTreeParseError as e:
                logger.error(str(e))
                errors.append(str(e))
        return units, errors


def _describe_counts(counts) -> str:
    return (f"{counts['classes']} class, {counts['packages']} package "
            f"and {counts['methods']} method ban(s)")

"""
JSON report generator for ban check results.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..exceptions import ReportGenerationError
from ..models import AnalysisResult, Diagnostic
from ..version import get_full_name_with_version
from .base import ReportGenerator


class JSONReporter(ReportGenerator):
    """
    JSON report generator that serves as the foundation for all other report formats.
    """

    def __init__(self, include_metadata: bool = True, pretty_print: bool = True):
        """
        Initialize JSON reporter.

        Args:
            include_metadata: Whether to include metadata like timestamps
            pretty_print: Whether to format JSON with indentation
        """
        self.include_metadata = include_metadata
        self.pretty_print = pretty_print

    def generate_report(self, analysis_result: AnalysisResult, output_path: Optional[str] = None) -> str:
        report_data = self.get_structured_data(analysis_result)

        if self.pretty_print:
            json_content = json.dumps(report_data, indent=2, ensure_ascii=False)
        else:
            json_content = json.dumps(report_data, ensure_ascii=False)

        if output_path:
            try:
                with open(output_path, 'w', encoding='utf-8') as f:
                    f.write(json_content)
            except OSError as e:
                raise ReportGenerationError(str(e), format_name=self.get_format_name(),
                                            output_path=output_path) from e

        return json_content

    def get_format_name(self) -> str:
        """Get the name of the report format."""
        return "json"

    def get_structured_data(self, analysis_result: AnalysisResult) -> Dict[str, Any]:
        """
        Build the report data structure shared by every output format.

        Args:
            analysis_result: Analysis results to structure

        Returns:
            Dictionary with summary, diagnostics, statistics and errors
        """
        report = {
            "summary": self._build_summary(analysis_result),
            "diagnostics": self._build_diagnostics_list(analysis_result.diagnostics),
            "statistics": self._build_statistics(analysis_result),
            "errors": list(analysis_result.errors),
        }

        if self.include_metadata:
            report["metadata"] = self._build_metadata(analysis_result)

        return report

    def _build_summary(self, analysis_result: AnalysisResult) -> Dict[str, Any]:
        files_with_diagnostics = len(analysis_result.diagnostics_by_file())
        return {
            "total_diagnostics": analysis_result.diagnostic_count,
            "files_analyzed": analysis_result.files_analyzed,
            "files_with_diagnostics": files_with_diagnostics,
            "nodes_visited": analysis_result.nodes_visited,
            "has_issues": analysis_result.has_diagnostics or bool(analysis_result.errors),
            "processing_time_seconds": round(analysis_result.processing_time, 3),
        }

    def _build_diagnostics_list(self, diagnostics: List[Diagnostic]) -> List[Dict[str, Any]]:
        return [
            {
                "file": diagnostic.location.file,
                "line": diagnostic.location.line,
                "column": diagnostic.location.column,
                "severity": diagnostic.severity.value,
                "check": diagnostic.check,
                "rule": diagnostic.rule,
                "node_kind": diagnostic.node_kind,
                "message": diagnostic.message,
            }
            for diagnostic in diagnostics
        ]

    def _build_statistics(self, analysis_result: AnalysisResult) -> Dict[str, Any]:
        by_file = {
            file: len(diagnostics)
            for file, diagnostics in analysis_result.diagnostics_by_file().items()
        }
        by_kind: Dict[str, int] = {}
        for diagnostic in analysis_result.diagnostics:
            key = diagnostic.node_kind or "unknown"
            by_kind[key] = by_kind.get(key, 0) + 1

        return {
            "by_file": by_file,
            "by_rule": dict(sorted(analysis_result.counts_by_rule().items())),
            "by_node_kind": dict(sorted(by_kind.items())),
        }

    def _build_metadata(self, analysis_result: AnalysisResult) -> Dict[str, Any]:
        return {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "tool": get_full_name_with_version(),
            "inputs": list(analysis_result.inputs),
            "ban_sources": list(analysis_result.ban_sources),
        }

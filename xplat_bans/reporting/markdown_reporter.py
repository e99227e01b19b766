"""
Markdown report generator for ban check results.
"""

from typing import Any, Dict, List, Optional

from ..exceptions import ReportGenerationError
from ..models import AnalysisResult
from .base import ReportGenerator
from .json_reporter import JSONReporter


class MarkdownReporter(ReportGenerator):
    """
    Markdown report generator for pull request comments and CI summaries.
    Uses JSONReporter internally for data structuring.
    """

    def __init__(self, include_metadata: bool = True):
        self.include_metadata = include_metadata
        self.json_reporter = JSONReporter(include_metadata=include_metadata)

    def generate_report(self, analysis_result: AnalysisResult, output_path: Optional[str] = None) -> str:
        data = self.json_reporter.get_structured_data(analysis_result)
        markdown_content = self._build_markdown_report(data)

        if output_path:
            try:
                with open(output_path, 'w', encoding='utf-8') as f:
                    f.write(markdown_content)
            except OSError as e:
                raise ReportGenerationError(str(e), format_name=self.get_format_name(),
                                            output_path=output_path) from e

        return markdown_content

    def get_format_name(self) -> str:
        return "markdown"

    def _build_markdown_report(self, data: Dict[str, Any]) -> str:
        sections = [
            "# Banned API Report",
            self._build_summary_section(data["summary"]),
        ]

        if data["diagnostics"]:
            sections.append(self._build_diagnostics_section(data["diagnostics"]))

        if data["errors"]:
            sections.append(self._build_errors_section(data["errors"]))

        if self.include_metadata and "metadata" in data:
            sections.append(self._build_metadata_section(data["metadata"]))

        return "\n\n".join(sections) + "\n"

    def _build_summary_section(self, summary: Dict[str, Any]) -> str:
        rows = [
            "## Summary",
            "",
            "| Metric | Value |",
            "|--------|-------|",
            f"| Banned API uses | {summary['total_diagnostics']} |",
            f"| Files analyzed | {summary['files_analyzed']} |",
            f"| Files with banned API uses | {summary['files_with_diagnostics']} |",
            f"| Nodes checked | {summary['nodes_visited']} |",
        ]
        return "\n".join(rows)

    def _build_diagnostics_section(self, diagnostics: List[Dict[str, Any]]) -> str:
        lines = ["## Diagnostics"]

        grouped: Dict[str, List[Dict[str, Any]]] = {}
        for diagnostic in diagnostics:
            grouped.setdefault(diagnostic["file"], []).append(diagnostic)

        for file, file_diagnostics in grouped.items():
            lines.extend([
                "",
                f"### `{file}`",
                "",
                "| Line | Column | Rule | Message |",
                "|------|--------|------|---------|",
            ])
            for diagnostic in file_diagnostics:
                line = diagnostic["line"] if diagnostic["line"] is not None else ""
                column = diagnostic["column"] if diagnostic["column"] is not None else ""
                message = self._escape(diagnostic["message"])
                lines.append(f"| {line} | {column} | `{diagnostic['rule']}` | {message} |")

        return "\n".join(lines)

    def _build_errors_section(self, errors: List[str]) -> str:
        lines = ["## Errors", ""]
        lines.extend(f"- {self._escape(error)}" for error in errors)
        return "\n".join(lines)

    def _build_metadata_section(self, metadata: Dict[str, Any]) -> str:
        lines = [
            "## Metadata",
            "",
            f"- Generated: {metadata['generated_at']}",
            f"- Tool: {metadata['tool']}",
        ]
        if metadata["ban_sources"]:
            lines.append(f"- Ban lists: {', '.join(metadata['ban_sources'])}")
        return "\n".join(lines)

    @staticmethod
    def _escape(text: str) -> str:
        return text.replace("|", "\\|").replace("\n", " ")

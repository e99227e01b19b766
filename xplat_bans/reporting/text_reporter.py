"""
Human-readable text report generator for ban check results.
"""

import os
import re
import sys
from typing import Any, Dict, List, Optional

from ..exceptions import ReportGenerationError
from ..models import AnalysisResult
from .base import ReportGenerator
from .json_reporter import JSONReporter

_ANSI_PATTERN = re.compile(r'\033\[[0-9;]*m')


class HumanReadableReporter(ReportGenerator):
    """
    Compiler-style text report for console output.

    One line per diagnostic in ``file:line:column: error: [XplatBans] message``
    form, followed by a short summary.
    """

    COLORS = {
        'RED': '\033[91m',
        'GREEN': '\033[92m',
        'YELLOW': '\033[93m',
        'CYAN': '\033[96m',
        'BOLD': '\033[1m',
        'RESET': '\033[0m'
    }

    def __init__(self, use_colors: bool = None, detailed: bool = False):
        """
        Initialize human-readable text reporter.

        Args:
            use_colors: Whether to use ANSI color codes. Auto-detects if None.
            detailed: Append per-rule counts to the summary
        """
        if use_colors is None:
            self.use_colors = self._supports_color()
        else:
            self.use_colors = use_colors

        self.detailed = detailed
        self.json_reporter = JSONReporter(include_metadata=False)

    def generate_report(self, analysis_result: AnalysisResult, output_path: Optional[str] = None) -> str:
        data = self.json_reporter.get_structured_data(analysis_result)
        text_content = self._build_text_report(data)

        # Files never get color codes
        if output_path:
            try:
                with open(output_path, 'w', encoding='utf-8') as f:
                    f.write(self._strip_colors(text_content))
            except OSError as e:
                raise ReportGenerationError(str(e), format_name=self.get_format_name(),
                                            output_path=output_path) from e

        return text_content

    def get_format_name(self) -> str:
        return "text"

    def _supports_color(self) -> bool:
        if os.environ.get('NO_COLOR'):
            return False

        ci_with_colors = ['GITHUB_ACTIONS', 'GITLAB_CI', 'BUILDKITE']
        if any(os.environ.get(var) for var in ci_with_colors):
            return True

        if not hasattr(sys.stdout, 'isatty') or not sys.stdout.isatty():
            return False

        term = os.environ.get('TERM', '').lower()
        return 'color' in term or term in ['xterm', 'xterm-256color', 'screen']

    def _colorize(self, text: str, color: str) -> str:
        if not self.use_colors or color not in self.COLORS:
            return text
        return f"{self.COLORS[color]}{text}{self.COLORS['RESET']}"

    def _strip_colors(self, text: str) -> str:
        return _ANSI_PATTERN.sub('', text)

    def _build_text_report(self, data: Dict[str, Any]) -> str:
        lines: List[str] = []

        for diagnostic in data["diagnostics"]:
            lines.append(self._format_diagnostic(diagnostic))

        for error in data["errors"]:
            lines.append(self._colorize(f"error: {error}", 'YELLOW'))

        if lines:
            lines.append("")
        lines.extend(self._build_summary(data))
        return "\n".join(lines) + "\n"

    def _format_diagnostic(self, diagnostic: Dict[str, Any]) -> str:
        position = diagnostic["file"]
        if diagnostic["line"] is not None:
            position += f":{diagnostic['line']}"
            if diagnostic["column"] is not None:
                position += f":{diagnostic['column']}"

        severity = self._colorize(f"{diagnostic['severity']}:", 'RED')
        check = self._colorize(f"[{diagnostic['check']}]", 'BOLD')
        return f"{position}: {severity} {check} {diagnostic['message']}"

    def _build_summary(self, data: Dict[str, Any]) -> List[str]:
        summary = data["summary"]
        total = summary["total_diagnostics"]
        files = summary["files_analyzed"]

        if total == 0:
            headline = self._colorize(f"No banned API usage found in {files} file(s).", 'GREEN')
        else:
            headline = self._colorize(
                f"{total} banned API usage(s) in {summary['files_with_diagnostics']} of {files} file(s).",
                'RED')

        lines = [headline]
        if data["errors"]:
            lines.append(self._colorize(f"{len(data['errors'])} input(s) could not be read.", 'YELLOW'))

        if self.detailed and data["statistics"]["by_rule"]:
            lines.append("By rule:")
            for rule, count in data["statistics"]["by_rule"].items():
                lines.append(f"  {rule}: {count}")

        return lines

"""
Common interface of the ban check report writers.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import AnalysisResult


class ReportGenerator(ABC):
    """Renders the diagnostics of one ban check run in a single output format."""

    @abstractmethod
    def generate_report(self, analysis_result: AnalysisResult, output_path: Optional[str] = None) -> str:
        """
        Render the banned API diagnostics, input errors and ban list sources of a run.

        Args:
            analysis_result: Result of ``BanAnalyzer.analyze_files`` or ``analyze_units``
            output_path: File to write the rendered report to; when omitted the
                report is only returned

        Returns:
            The rendered report (for the workbook writer, a short note naming the file)
        """

    @abstractmethod
    def get_format_name(self) -> str:
        """Name used to pick this writer: "text", "json", "markdown" or "excel"."""

"""
Excel report generator for ban check results.
"""

import io
from typing import Any, Dict, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from ..exceptions import ReportGenerationError
from ..models import AnalysisResult
from .base import ReportGenerator
from .json_reporter import JSONReporter

DIAGNOSTIC_COLUMNS = ("File", "Line", "Column", "Severity", "Rule", "Node kind", "Message")


class ExcelReporter(ReportGenerator):
    """
    Excel report generator with a summary sheet and a diagnostics sheet.
    Uses JSONReporter internally for data structuring.
    """

    def __init__(self):
        self.json_reporter = JSONReporter(include_metadata=True)

        self.header_font = Font(bold=True, color="FFFFFF")
        self.header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
        self.error_fill = PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid")
        self.clean_fill = PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid")
        self.center_alignment = Alignment(horizontal="center", vertical="center")
        self.border = Border(
            left=Side(style="thin"),
            right=Side(style="thin"),
            top=Side(style="thin"),
            bottom=Side(style="thin")
        )

    def generate_report(self, analysis_result: AnalysisResult, output_path: Optional[str] = None) -> str:
        """
        Generate an Excel workbook.

        Args:
            analysis_result: AnalysisResult to generate report from
            output_path: Path of the .xlsx file to write

        Returns:
            Short description of what was written
        """
        data = self.json_reporter.get_structured_data(analysis_result)
        workbook = self.create_workbook(data)

        if output_path:
            try:
                workbook.save(output_path)
            except OSError as e:
                raise ReportGenerationError(str(e), format_name=self.get_format_name(),
                                            output_path=output_path) from e
            return f"Excel report saved to {output_path}"

        buffer = io.BytesIO()
        workbook.save(buffer)
        return f"Excel workbook generated ({len(buffer.getvalue())} bytes)"

    def get_format_name(self) -> str:
        return "excel"

    def create_workbook(self, data: Dict[str, Any]) -> Workbook:
        wb = Workbook()

        # Remove default sheet
        wb.remove(wb.active)

        self._create_summary_sheet(wb, data)
        self._create_diagnostics_sheet(wb, data)

        if data["errors"]:
            self._create_errors_sheet(wb, data)

        wb.active = wb["Summary"]
        return wb

    def _create_summary_sheet(self, workbook: Workbook, data: Dict[str, Any]) -> None:
        ws = workbook.create_sheet("Summary")
        summary = data["summary"]

        ws["A1"] = "Banned API Report"
        ws["A1"].font = Font(bold=True, size=14)

        rows = [
            ("Banned API uses", summary["total_diagnostics"]),
            ("Files analyzed", summary["files_analyzed"]),
            ("Files with banned API uses", summary["files_with_diagnostics"]),
            ("Nodes checked", summary["nodes_visited"]),
            ("Unreadable inputs", len(data["errors"])),
        ]
        for offset, (label, value) in enumerate(rows):
            row = 3 + offset
            ws.cell(row=row, column=1, value=label).border = self.border
            cell = ws.cell(row=row, column=2, value=value)
            cell.border = self.border
            cell.alignment = self.center_alignment

        status_cell = ws.cell(row=3, column=2)
        status_cell.fill = self.error_fill if summary["total_diagnostics"] else self.clean_fill

        by_rule = data["statistics"]["by_rule"]
        if by_rule:
            start = 3 + len(rows) + 1
            self._write_header(ws, start, ("Rule", "Count"))
            for offset, (rule, count) in enumerate(by_rule.items(), start=1):
                ws.cell(row=start + offset, column=1, value=rule).border = self.border
                ws.cell(row=start + offset, column=2, value=count).border = self.border

        if "metadata" in data:
            ws.cell(row=1, column=4, value=data["metadata"]["tool"])
            ws.cell(row=2, column=4, value=data["metadata"]["generated_at"])

        ws.column_dimensions["A"].width = 32
        ws.column_dimensions["B"].width = 14

    def _create_diagnostics_sheet(self, workbook: Workbook, data: Dict[str, Any]) -> None:
        ws = workbook.create_sheet("Diagnostics")
        self._write_header(ws, 1, DIAGNOSTIC_COLUMNS)

        for row, diagnostic in enumerate(data["diagnostics"], start=2):
            values = (
                diagnostic["file"],
                diagnostic["line"],
                diagnostic["column"],
                diagnostic["severity"],
                diagnostic["rule"],
                diagnostic["node_kind"],
                diagnostic["message"],
            )
            for column, value in enumerate(values, start=1):
                ws.cell(row=row, column=column, value=value).border = self.border

        ws.freeze_panes = "A2"
        widths = (40, 8, 8, 10, 28, 12, 90)
        for column, width in enumerate(widths, start=1):
            ws.column_dimensions[get_column_letter(column)].width = width

    def _create_errors_sheet(self, workbook: Workbook, data: Dict[str, Any]) -> None:
        ws = workbook.create_sheet("Errors")
        self._write_header(ws, 1, ("Error",))
        for row, error in enumerate(data["errors"], start=2):
            ws.cell(row=row, column=1, value=error)
        ws.column_dimensions["A"].width = 120

    def _write_header(self, ws, row: int, titles) -> None:
        for column, title in enumerate(titles, start=1):
            cell = ws.cell(row=row, column=column, value=title)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.alignment = self.center_alignment
            cell.border = self.border

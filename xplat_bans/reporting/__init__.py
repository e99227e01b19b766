"""
Reporting Module

Contains report generators for different output formats (JSON, Markdown, Excel, text).
"""

from .base import ReportGenerator
from .excel_reporter import ExcelReporter
from .json_reporter import JSONReporter
from .markdown_reporter import MarkdownReporter
from .text_reporter import HumanReadableReporter

REPORTERS = {
    'text': HumanReadableReporter,
    'json': JSONReporter,
    'markdown': MarkdownReporter,
    'excel': ExcelReporter,
}


def get_reporter(format_name: str, **kwargs) -> ReportGenerator:
    """
    Create the report generator for a format name.

    Args:
        format_name: One of "text", "json", "markdown", "excel"
        **kwargs: Passed to the reporter's constructor

    Raises:
        ValueError: If the format is unknown
    """
    try:
        reporter_class = REPORTERS[format_name]
    except KeyError:
        raise ValueError(f"Unknown report format '{format_name}'. "
                         f"Choose one of: {', '.join(REPORTERS)}") from None
    return reporter_class(**kwargs)


__all__ = [
    'ExcelReporter',
    'HumanReadableReporter',
    'JSONReporter',
    'MarkdownReporter',
    'REPORTERS',
    'ReportGenerator',
    'get_reporter',
]

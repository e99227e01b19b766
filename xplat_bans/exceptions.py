"""
Custom exceptions for Xplat Bans.
"""


class XplatBansError(Exception):
    """Base exception class for all Xplat Bans errors."""
    pass


class BanListLoadError(XplatBansError):
    """Raised when a ban list document cannot be read or parsed."""

    def __init__(self, message: str, source: str = None):
        self.source = source

        if source:
            message = f"Ban list error in '{source}': {message}"

        super().__init__(message)


class DefaultBanListError(BanListLoadError):
    """
    Raised when the bundled default ban list cannot be loaded.

    The engine cannot run without its baseline bans, so this is always fatal.
    """
    pass


class TypedTreeParseError(XplatBansError):
    """Raised when a typed syntax tree document cannot be parsed."""

    def __init__(self, message: str, file_path: str = None, node_path: str = None):
        self.file_path = file_path
        self.node_path = node_path

        if file_path:
            message = f"Error parsing typed tree '{file_path}': {message}"
            if node_path:
                message += f" (at {node_path})"

        super().__init__(message)


class ConfigurationError(XplatBansError):
    """Raised when configuration is invalid."""
    pass


class ReportGenerationError(XplatBansError):
    """Raised when report generation fails."""

    def __init__(self, message: str, format_name: str = None, output_path: str = None):
        self.format_name = format_name
        self.output_path = output_path

        if format_name:
            message = f"Report generation error for format '{format_name}': {message}"
            if output_path:
                message += f" (output: {output_path})"

        super().__init__(message)

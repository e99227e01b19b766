"""
Abstract base classes for typed syntax tree readers.
"""

import json
import os
from abc import ABC, abstractmethod
from typing import List, Optional

import yaml

from ..exceptions import TypedTreeParseError
from ..matching.suppression import SuppressionIndex
from ..nodes import CompilationUnit

YAML_SUFFIXES = ('.yaml', '.yml')


class TypedTreeParser(ABC):
    """Abstract base class for readers of exported typed syntax trees."""

    def __init__(self, suppression_index: Optional[SuppressionIndex] = None):
        """
        Initialize the parser.

        Args:
            suppression_index: Decides which annotations mark suppressed declarations
        """
        self.suppression_index = suppression_index or SuppressionIndex()
        self.supported_formats = self._get_supported_formats()

    @abstractmethod
    def _get_supported_formats(self) -> List[str]:
        """
        Get list of document formats handled by this parser.

        Returns:
            List of format identifiers (e.g., ["xplat-typed-ast"])
        """
        pass

    def parse(self, file_path: str) -> List[CompilationUnit]:
        """
        Parse a typed tree document into compilation units.

        Args:
            file_path: Path to a JSON or YAML document

        Returns:
            List of CompilationUnit objects

        Raises:
            FileNotFoundError: If the file doesn't exist
            TypedTreeParseError: If the document is invalid or unsupported
        """
        data = read_tree_document(file_path)

        if not self.is_supported_format(data):
            detected_format = detect_tree_format(data)
            raise TypedTreeParseError(
                f"Unsupported document format. Detected: {detected_format}, "
                f"Supported: {self.supported_formats}",
                file_path=file_path
            )

        return self._parse_units(data, file_path)

    @abstractmethod
    def _parse_units(self, data: dict, source_file: str) -> List[CompilationUnit]:
        """
        Build compilation units from a parsed document.

        Args:
            data: Parsed document
            source_file: Path of the document, for error messages

        Returns:
            List of CompilationUnit objects
        """
        pass

    @abstractmethod
    def is_supported_format(self, data: dict) -> bool:
        pass


def read_tree_document(file_path: str) -> dict:
    """Load a JSON document, or YAML when the suffix says so."""
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Typed tree file not found: {file_path}")

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            if str(file_path).lower().endswith(YAML_SUFFIXES):
                return yaml.safe_load(f)
            return json.load(f)
    except json.JSONDecodeError as e:
        raise TypedTreeParseError(f"Invalid JSON: {e}", file_path=file_path) from e
    except yaml.YAMLError as e:
        raise TypedTreeParseError(f"Invalid YAML: {e}", file_path=file_path) from e
    except (OSError, UnicodeDecodeError) as e:
        raise TypedTreeParseError(f"Could not read file: {e}", file_path=file_path) from e


def detect_tree_format(data) -> str:
    """
    Detect the typed tree format of a parsed document.

    Args:
        data: Parsed document

    Returns:
        String identifier for the format, or "unknown"
    """
    if not isinstance(data, dict):
        return "unknown"

    declared = data.get("format")
    if isinstance(declared, str):
        return declared

    if isinstance(data.get("compilation_units"), list):
        return "xplat-typed-ast"

    return "unknown"

"""
Reader for ``xplat-typed-ast`` documents.

A compiler-side exporter writes each compilation unit as nested declarations
and expressions with their resolved types and symbols. This module walks that
structure in source order, threads the enclosing declarations through a
``ScopeStack`` and emits the typed nodes the matcher consumes:

    {"format": "xplat-typed-ast", "version": 1,
     "compilation_units": [
       {"file": "src/Foo.java",
        "imports": [{"name": "org.joda.time.Chronology", "package": "org.joda.time", "line": 3}],
        "declarations": [{"kind": "class", "name": "Foo", "annotations": [], "members": [...]}]}]}
"""

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from ..exceptions import TypedTreeParseError
from ..matching.suppression import ScopeStack
from ..models import SourceLocation
from ..nodes import (
    Argument,
    CallNode,
    CompilationUnit,
    ImportNode,
    MethodNode,
    NewClassNode,
    Parameter,
    SymbolRef,
    VariableNode,
)
from .base import TypedTreeParser, detect_tree_format

logger = logging.getLogger(__name__)

FORMAT_NAME = "xplat-typed-ast"

CLASS_KINDS = {"class", "interface", "enum", "record", "annotation_type"}
METHOD_KINDS = {"method", "constructor"}
VARIABLE_KINDS = {"variable", "field", "local", "parameter"}
DECLARATION_KINDS = CLASS_KINDS | METHOD_KINDS | VARIABLE_KINDS

# Child lists visited for expressions the walker has no special handling for
GENERIC_CHILD_KEYS = ("receiver", "children", "arguments", "initializer", "body", "parameters")


class TypedAstParser(TypedTreeParser):
    """Parser for documents in the ``xplat-typed-ast`` format."""

    def _get_supported_formats(self) -> List[str]:
        return [FORMAT_NAME]

    def is_supported_format(self, data: dict) -> bool:
        return detect_tree_format(data) == FORMAT_NAME

    def _parse_units(self, data: dict, source_file: str) -> List[CompilationUnit]:
        version = data.get("version", 1)
        if version != 1:
            logger.warning(f"{source_file}: unknown {FORMAT_NAME} version {version}, reading as version 1")

        raw_units = data.get("compilation_units")
        if not isinstance(raw_units, list):
            raise TypedTreeParseError("'compilation_units' must be a list", file_path=source_file)

        units = []
        for index, raw_unit in enumerate(raw_units):
            walker = _UnitWalker(ScopeStack(self.suppression_index), source_file, f"compilation_units[{index}]")
            units.append(walker.walk_unit(raw_unit))

        logger.debug(f"Parsed {len(units)} compilation unit(s) from {source_file}")
        return units


class _UnitWalker:
    """Walks one compilation unit and collects its typed nodes."""

    def __init__(self, scopes: ScopeStack, source_file: str, path: str):
        self.scopes = scopes
        self.source_file = source_file
        self.path = [path]
        self.file = source_file
        self.unit: Optional[CompilationUnit] = None

    def walk_unit(self, raw_unit) -> CompilationUnit:
        raw_unit = self._expect_mapping(raw_unit)
        self.file = raw_unit.get("file") or self.source_file
        self.unit = CompilationUnit(file=self.file)

        for index, raw_import in enumerate(self._list(raw_unit, "imports")):
            with self._at(f"imports[{index}]"):
                self._walk_import(self._expect_mapping(raw_import))

        self._walk_children(raw_unit, "declarations")
        return self.unit

    def _walk_import(self, raw: Dict) -> None:
        name = raw.get("name")
        if not isinstance(name, str) or not name:
            raise self._error("import without a 'name'")

        package = raw.get("package")
        if package is None and not raw.get("static", False) and '.' in name:
            package = name.rsplit('.', 1)[0]

        self._emit(ImportNode(location=self._location(raw), qualified_name=name,
                              package=package, scope=self.scopes.current))

    def _walk_statement(self, raw) -> None:
        raw = self._expect_mapping(raw)
        kind = self._kind(raw)
        if kind in DECLARATION_KINDS:
            self._walk_declaration(raw, kind)
        else:
            self._walk_expression(raw)

    def _walk_declaration(self, raw: Dict, kind: str) -> None:
        name = raw.get("name") or f"<{kind}>"
        if not isinstance(name, str):
            raise self._error(f"declaration 'name' must be a string, got {type(name).__name__}")

        with self.scopes.push(kind, name, self._annotations(raw)):
            if kind in CLASS_KINDS:
                self._walk_children(raw, "members")
            elif kind in METHOD_KINDS:
                self._emit(MethodNode(
                    location=self._location(raw),
                    name=name,
                    return_type=raw.get("return_type"),
                    resolved=raw.get("resolved", True),
                    scope=self.scopes.current,
                ))
                for index, parameter in enumerate(self._list(raw, "parameters")):
                    with self._at(f"parameters[{index}]"):
                        parameter = self._expect_mapping(parameter)
                        self._walk_declaration(parameter, "parameter")
                self._walk_children(raw, "body")
            else:
                self._emit(VariableNode(
                    location=self._location(raw),
                    name=name,
                    declared_type=raw.get("type"),
                    scope=self.scopes.current,
                ))
                initializer = raw.get("initializer")
                if initializer is not None:
                    with self._at("initializer"):
                        self._walk_expression(self._expect_mapping(initializer))

    def _walk_expression(self, raw: Dict) -> None:
        kind = self._kind(raw)

        if kind == "call":
            arguments = []
            for index, argument in enumerate(self._list(raw, "arguments")):
                with self._at(f"arguments[{index}]"):
                    arguments.append(self._argument(argument))
            self._emit(CallNode(
                location=self._location(raw),
                method=self._symbol(raw.get("method")),
                receiver_type=raw.get("receiver_type"),
                result_type=raw.get("type"),
                arguments=tuple(arguments),
                scope=self.scopes.current,
            ))
            receiver = raw.get("receiver")
            if receiver is not None:
                with self._at("receiver"):
                    self._walk_expression(self._expect_mapping(receiver))
            self._walk_children(raw, "arguments")

        elif kind == "new":
            constructor = raw.get("constructor")
            self._emit(NewClassNode(
                location=self._location(raw),
                constructor=self._symbol(constructor),
                constructed_type=raw.get("type"),
                parameters=self._parameters(constructor),
                scope=self.scopes.current,
            ))
            self._walk_children(raw, "arguments")
            if self._list(raw, "body"):
                # Anonymous class body
                with self.scopes.push("class", "<anonymous>", self._annotations(raw)):
                    self._walk_children(raw, "body")

        elif kind in DECLARATION_KINDS:
            # Lambda parameters and local classes can appear inside expressions
            self._walk_declaration(raw, kind)

        else:
            for key in GENERIC_CHILD_KEYS:
                child = raw.get(key)
                if isinstance(child, dict):
                    with self._at(key):
                        self._walk_statement(child)
                elif isinstance(child, list):
                    self._walk_children(raw, key)

    def _walk_children(self, raw: Dict, key: str) -> None:
        for index, child in enumerate(self._list(raw, key)):
            with self._at(f"{key}[{index}]"):
                self._walk_statement(child)

    def _list(self, raw: Dict, key: str) -> List:
        """A list-valued field; absent or null reads as empty."""
        value = raw.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise self._error(f"'{key}' must be a list")
        return value

    def _kind(self, raw: Dict) -> Optional[str]:
        kind = raw.get("kind")
        if kind is not None and not isinstance(kind, str):
            raise self._error(f"'kind' must be a string, got {type(kind).__name__}")
        return kind

    def _annotations(self, raw: Dict) -> List[str]:
        annotations = self._list(raw, "annotations")
        for index, annotation in enumerate(annotations):
            if not isinstance(annotation, str):
                with self._at(f"annotations[{index}]"):
                    raise self._error(f"annotation must be a name, got {type(annotation).__name__}")
        return annotations

    def _argument(self, raw) -> Argument:
        raw = self._expect_mapping(raw)
        symbol = raw.get("symbol")
        if symbol is None:
            # A call or construction used as an argument resolves to its method
            kind = self._kind(raw)
            if kind == "call":
                symbol = raw.get("method")
            elif kind == "new":
                symbol = raw.get("constructor")
        return Argument(type=raw.get("type"), symbol=self._symbol(symbol))

    def _parameters(self, constructor) -> tuple:
        if constructor is None:
            return ()
        constructor = self._expect_mapping(constructor)
        parameters = []
        for index, raw in enumerate(self._list(constructor, "parameters")):
            with self._at(f"constructor.parameters[{index}]"):
                raw = self._expect_mapping(raw)
                parameters.append(Parameter(type=raw.get("type"), package=raw.get("package"),
                                            name=raw.get("name")))
        return tuple(parameters)

    def _symbol(self, raw) -> Optional[SymbolRef]:
        if raw is None:
            return None
        raw = self._expect_mapping(raw)
        name = raw.get("name")
        if not isinstance(name, str) or not name:
            raise self._error("symbol without a 'name'")
        return SymbolRef(name=name, package=raw.get("package"), signature=raw.get("signature"))

    def _location(self, raw: Dict) -> SourceLocation:
        return SourceLocation(file=self.file, line=raw.get("line"), column=raw.get("column"))

    def _emit(self, node) -> None:
        self.unit.nodes.append(node)

    def _expect_mapping(self, raw) -> Dict:
        if not isinstance(raw, dict):
            raise self._error(f"expected an object, got {type(raw).__name__}")
        return raw

    def _error(self, message: str) -> TypedTreeParseError:
        return TypedTreeParseError(message, file_path=self.source_file, node_path=".".join(self.path))

    @contextmanager
    def _at(self, segment: str) -> Iterator[None]:
        """Record where in the document the walker is, for error messages."""
        self.path.append(segment)
        try:
            yield
        finally:
            self.path.pop()

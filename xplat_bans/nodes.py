"""
Typed syntax nodes handed to the ban matcher.

Each node kind carries only the resolved symbol and type information the
matching rules need. Host adapters (see ``xplat_bans.tree``) build them from
compiler output; the matcher never mutates them.

Every node also carries the innermost declaration ``Scope`` enclosing it. For
declaration nodes (variables, methods) the innermost scope is the declaration
itself, so a suppression marker placed directly on the declaration applies.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Iterator, List, Optional, Tuple, Union

from .models import SourceLocation


class NodeKind(Enum):
    """The closed set of constructs the matcher understands."""
    CALL = "call"
    NEW_CLASS = "new_class"
    IMPORT = "import"
    VARIABLE = "variable"
    METHOD = "method"


@dataclass(frozen=True)
class Scope:
    """One lexically enclosing declaration (class, method, field, local variable)."""
    kind: str
    name: str
    suppressed: bool = False
    parent: Optional["Scope"] = None

    def chain(self) -> Iterator["Scope"]:
        """Yield this scope, then each enclosing scope out to the top level."""
        scope: Optional[Scope] = self
        while scope is not None:
            yield scope
            scope = scope.parent

    @property
    def path(self) -> str:
        names = [scope.name for scope in self.chain()]
        return ".".join(reversed(names))


@dataclass(frozen=True)
class SymbolRef:
    """
    A resolved declared entity.

    Attributes:
        name: Simple name (method name, class name, variable name)
        package: Package the symbol is declared in, if known
        signature: Display text such as ``plus(int)`` or ``DateTime(long)``
    """
    name: str
    package: Optional[str] = None
    signature: Optional[str] = None

    def display(self) -> str:
        return self.signature or self.name


@dataclass(frozen=True)
class Argument:
    """An actual argument of a call: its static type and the symbol it refers to."""
    type: Optional[str] = None
    symbol: Optional[SymbolRef] = None


@dataclass(frozen=True)
class Parameter:
    """A declared constructor parameter."""
    type: Optional[str] = None
    package: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class CallNode:
    """A method invocation. ``method`` is None when the call does not resolve."""
    location: SourceLocation
    method: Optional[SymbolRef]
    receiver_type: Optional[str] = None
    result_type: Optional[str] = None
    arguments: Tuple[Argument, ...] = ()
    scope: Optional[Scope] = None

    kind: ClassVar[NodeKind] = NodeKind.CALL


@dataclass(frozen=True)
class NewClassNode:
    """An object construction. ``constructor`` is None when it does not resolve."""
    location: SourceLocation
    constructor: Optional[SymbolRef]
    constructed_type: Optional[str] = None
    parameters: Tuple[Parameter, ...] = ()
    scope: Optional[Scope] = None

    kind: ClassVar[NodeKind] = NodeKind.NEW_CLASS


@dataclass(frozen=True)
class ImportNode:
    location: SourceLocation
    qualified_name: str
    package: Optional[str] = None
    scope: Optional[Scope] = None

    kind: ClassVar[NodeKind] = NodeKind.IMPORT


@dataclass(frozen=True)
class VariableNode:
    """A field, local variable or parameter declaration."""
    location: SourceLocation
    name: str
    declared_type: Optional[str] = None
    scope: Optional[Scope] = None

    kind: ClassVar[NodeKind] = NodeKind.VARIABLE


@dataclass(frozen=True)
class MethodNode:
    """A method or constructor declaration. ``resolved`` is False when its type is unknown."""
    location: SourceLocation
    name: str
    return_type: Optional[str] = None
    resolved: bool = True
    scope: Optional[Scope] = None

    kind: ClassVar[NodeKind] = NodeKind.METHOD


TypedNode = Union[CallNode, NewClassNode, ImportNode, VariableNode, MethodNode]


@dataclass
class CompilationUnit:
    """All typed nodes of one source file, in traversal order."""
    file: str
    nodes: List[TypedNode] = field(default_factory=list)

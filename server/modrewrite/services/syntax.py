"""
Syntax tree consumed by the rewrite rules.

Every node carries a half-open byte range ``[start, end)`` into the source
it was parsed from. Only the three module declaration shapes and the
declarations that can appear inside ``export`` are modelled in detail;
everything else is a generic ``Statement``/``Expression`` that just holds
its children so nested code still gets walked.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Optional


class NodeType(str, Enum):
    PROGRAM = "Program"
    IMPORT_DECLARATION = "ImportDeclaration"
    EXPORT_DECLARATION = "ExportDeclaration"
    MODULE_DECLARATION = "ModuleDeclaration"
    DEFAULT_ASSIGNMENT = "DefaultAssignment"
    VARIABLE_DECLARATION = "VariableDeclaration"
    VARIABLE_DECLARATOR = "VariableDeclarator"
    FUNCTION_DECLARATION = "FunctionDeclaration"
    CLASS_DECLARATION = "ClassDeclaration"
    SPECIFIER = "Specifier"
    BATCH_SPECIFIER = "BatchSpecifier"
    LITERAL = "Literal"
    STATEMENT = "Statement"
    EXPRESSION = "Expression"
    OTHER = "Other"


class ImportKind:
    DEFAULT = "default"
    NAMED = "named"


@dataclass
class Node:
    start: int
    end: int

    type: ClassVar[NodeType] = NodeType.OTHER

    def child_nodes(self) -> List["Node"]:
        return []

    @property
    def kind_name(self) -> str:
        return self.type.value


@dataclass
class Program(Node):
    body: List[Node] = field(default_factory=list)

    type: ClassVar[NodeType] = NodeType.PROGRAM

    def child_nodes(self) -> List[Node]:
        return list(self.body)


@dataclass
class Statement(Node):
    # Parser-level kind (e.g. "if_statement"), informational only.
    kind: str = ""
    body: List[Node] = field(default_factory=list)

    type: ClassVar[NodeType] = NodeType.STATEMENT

    def child_nodes(self) -> List[Node]:
        return list(self.body)


@dataclass
class Expression(Node):
    kind: str = ""
    body: List[Node] = field(default_factory=list)

    type: ClassVar[NodeType] = NodeType.EXPRESSION

    def child_nodes(self) -> List[Node]:
        return list(self.body)


@dataclass
class Literal(Node):
    """A quoted module path, ``raw`` keeps the quotes."""
    raw: str = ""

    type: ClassVar[NodeType] = NodeType.LITERAL


@dataclass
class Specifier(Node):
    name: str = ""
    alias: Optional[str] = None

    type: ClassVar[NodeType] = NodeType.SPECIFIER

    @property
    def local_name(self) -> str:
        return self.alias or self.name


@dataclass
class BatchSpecifier(Node):
    """The ``*`` in ``export * from "m"``."""

    type: ClassVar[NodeType] = NodeType.BATCH_SPECIFIER


@dataclass
class ImportDeclaration(Node):
    # None means a bare ``import "m";``
    kind: Optional[str] = None
    specifiers: List[Specifier] = field(default_factory=list)
    source: Optional[Literal] = None

    type: ClassVar[NodeType] = NodeType.IMPORT_DECLARATION


@dataclass
class ModuleDeclaration(Node):
    name: str = ""
    source: Optional[Literal] = None

    type: ClassVar[NodeType] = NodeType.MODULE_DECLARATION


@dataclass
class DefaultAssignment(Node):
    """``export default = value`` / ``export name = value`` / ``export default;``"""
    name: str = "default"
    init: Optional[Node] = None

    type: ClassVar[NodeType] = NodeType.DEFAULT_ASSIGNMENT

    def child_nodes(self) -> List[Node]:
        return [self.init] if self.init is not None else []


@dataclass
class VariableDeclarator(Node):
    # None when the target is a destructuring pattern.
    name: Optional[str] = None
    init: Optional[Node] = None

    type: ClassVar[NodeType] = NodeType.VARIABLE_DECLARATOR

    def child_nodes(self) -> List[Node]:
        return [self.init] if self.init is not None else []


@dataclass
class VariableDeclaration(Node):
    kind: str = "var"
    declarations: List[VariableDeclarator] = field(default_factory=list)

    type: ClassVar[NodeType] = NodeType.VARIABLE_DECLARATION

    def child_nodes(self) -> List[Node]:
        return list(self.declarations)


@dataclass
class FunctionDeclaration(Node):
    name: str = ""
    body: List[Node] = field(default_factory=list)

    type: ClassVar[NodeType] = NodeType.FUNCTION_DECLARATION

    def child_nodes(self) -> List[Node]:
        return list(self.body)


@dataclass
class ClassDeclaration(Node):
    name: str = ""
    body: List[Node] = field(default_factory=list)

    type: ClassVar[NodeType] = NodeType.CLASS_DECLARATION

    def child_nodes(self) -> List[Node]:
        return list(self.body)


@dataclass
class OtherDeclaration(Node):
    """A declaration we recognise syntactically but never rewrite."""
    kind: str = ""

    type: ClassVar[NodeType] = NodeType.OTHER

    @property
    def kind_name(self) -> str:
        return self.kind or self.type.value


@dataclass
class ExportDeclaration(Node):
    declaration: Optional[Node] = None
    specifiers: List[Node] = field(default_factory=list)
    source: Optional[Literal] = None
    # ``export default function f() {}`` / ``export default class C {}``
    default: bool = False

    type: ClassVar[NodeType] = NodeType.EXPORT_DECLARATION

    def child_nodes(self) -> List[Node]:
        if self.declaration is not None:
            return [self.declaration]
        return list(self.specifiers)

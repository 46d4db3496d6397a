"""Closed set of AST node variants consumed by the doc generator.

Parser adapters translate a concrete syntax tree into these dataclasses.
Nodes compare and hash by identity so they can key the traversal side
tables; parent links are never stored on the nodes themselves.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field, fields
from typing import Any

from codex_docs.models import Comment, SourceLocation

_NON_CHILD_FIELDS = frozenset({"loc", "leading_comments", "trailing_comments", "raw", "inner_comments"})


@dataclass(eq=False, kw_only=True)
class Node:
    loc: SourceLocation | None = None
    leading_comments: list[Comment] = field(default_factory=list)
    trailing_comments: list[Comment] = field(default_factory=list)
    raw: str | None = None

    @property
    def type(self) -> str:
        return type(self).__name__

    def children(self) -> Iterator["Node"]:
        """Yield direct child nodes in source order."""
        for f in fields(self):
            if f.name in _NON_CHILD_FIELDS:
                continue
            value = getattr(self, f.name)
            if isinstance(value, Node):
                yield value
            elif isinstance(value, list):
                for item in value:
                    if isinstance(item, Node):
                        yield item


@dataclass(eq=False, kw_only=True)
class Program(Node):
    body: list[Node] = field(default_factory=list)
    inner_comments: list[Comment] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class VirtualNode(Node):
    """Zero-content stand-in for comments that document no real node."""


@dataclass(eq=False, kw_only=True)
class GenericNode(Node):
    """Any construct outside the closed set; only its children matter."""

    kind: str = ""
    body: list[Node] = field(default_factory=list)

    @property
    def type(self) -> str:
        return self.kind or "GenericNode"


# Expressions --------------------------------------------------------------


@dataclass(eq=False, kw_only=True)
class Identifier(Node):
    name: str = ""


@dataclass(eq=False, kw_only=True)
class ThisExpression(Node):
    pass


@dataclass(eq=False, kw_only=True)
class Literal(Node):
    value: Any = None
    # one of: string, number, boolean, null, regex
    kind: str = "string"


@dataclass(eq=False, kw_only=True)
class TemplateLiteral(Node):
    pass


@dataclass(eq=False, kw_only=True)
class ArrayExpression(Node):
    elements: list[Node] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class ObjectProperty(Node):
    key: Node | None = None
    value: Node | None = None
    computed: bool = False


@dataclass(eq=False, kw_only=True)
class ObjectMethod(Node):
    key: Node | None = None
    params: list[Node] = field(default_factory=list)
    body: "BlockStatement | None" = None


@dataclass(eq=False, kw_only=True)
class SpreadElement(Node):
    argument: Node | None = None


@dataclass(eq=False, kw_only=True)
class ObjectExpression(Node):
    properties: list[Node] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class MemberExpression(Node):
    object: Node | None = None
    property: Node | None = None
    computed: bool = False


@dataclass(eq=False, kw_only=True)
class CallExpression(Node):
    callee: Node | None = None
    arguments: list[Node] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class NewExpression(Node):
    callee: Node | None = None
    arguments: list[Node] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class AssignmentExpression(Node):
    left: Node | None = None
    right: Node | None = None
    operator: str = "="


# Functions and classes ----------------------------------------------------


@dataclass(eq=False, kw_only=True)
class BaseFunction(Node):
    id: Node | None = None
    params: list[Node] = field(default_factory=list)
    body: Node | None = None
    async_: bool = False
    generator: bool = False


@dataclass(eq=False, kw_only=True)
class FunctionDeclaration(BaseFunction):
    pass


@dataclass(eq=False, kw_only=True)
class FunctionExpression(BaseFunction):
    pass


@dataclass(eq=False, kw_only=True)
class ArrowFunctionExpression(Node):
    params: list[Node] = field(default_factory=list)
    body: Node | None = None
    async_: bool = False
    generator: bool = False


@dataclass(eq=False, kw_only=True)
class Decorator(Node):
    expression: Node | None = None


@dataclass(eq=False, kw_only=True)
class ClassBody(Node):
    body: list[Node] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class BaseClass(Node):
    decorators: list[Decorator] = field(default_factory=list)
    id: Identifier | None = None
    super_class: Node | None = None
    body: ClassBody = field(default_factory=ClassBody)


@dataclass(eq=False, kw_only=True)
class ClassDeclaration(BaseClass):
    pass


@dataclass(eq=False, kw_only=True)
class ClassExpression(BaseClass):
    pass


@dataclass(eq=False, kw_only=True)
class ClassMethod(Node):
    decorators: list[Decorator] = field(default_factory=list)
    key: Node | None = None
    params: list[Node] = field(default_factory=list)
    body: Node | None = None
    # one of: constructor, method, get, set
    kind: str = "method"
    static: bool = False
    computed: bool = False
    async_: bool = False
    generator: bool = False


@dataclass(eq=False, kw_only=True)
class ClassProperty(Node):
    decorators: list[Decorator] = field(default_factory=list)
    key: Node | None = None
    value: Node | None = None
    static: bool = False
    computed: bool = False


# Statements ---------------------------------------------------------------


@dataclass(eq=False, kw_only=True)
class ExpressionStatement(Node):
    expression: Node | None = None


@dataclass(eq=False, kw_only=True)
class BlockStatement(Node):
    body: list[Node] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class ReturnStatement(Node):
    argument: Node | None = None


@dataclass(eq=False, kw_only=True)
class VariableDeclarator(Node):
    id: Node | None = None
    init: Node | None = None


@dataclass(eq=False, kw_only=True)
class VariableDeclaration(Node):
    kind: str = "let"
    declarations: list[VariableDeclarator] = field(default_factory=list)


# Patterns -----------------------------------------------------------------


@dataclass(eq=False, kw_only=True)
class AssignmentPattern(Node):
    left: Node | None = None
    right: Node | None = None


@dataclass(eq=False, kw_only=True)
class RestElement(Node):
    argument: Node | None = None


@dataclass(eq=False, kw_only=True)
class ObjectPattern(Node):
    properties: list[Node] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class ArrayPattern(Node):
    elements: list[Node] = field(default_factory=list)


# Modules ------------------------------------------------------------------


@dataclass(eq=False, kw_only=True)
class ExportSpecifier(Node):
    local: Identifier | None = None
    exported: Identifier | None = None


@dataclass(eq=False, kw_only=True)
class ExportDefaultDeclaration(Node):
    declaration: Node | None = None


@dataclass(eq=False, kw_only=True)
class ExportNamedDeclaration(Node):
    declaration: Node | None = None
    specifiers: list[ExportSpecifier] = field(default_factory=list)
    source: Literal | None = None


@dataclass(eq=False, kw_only=True)
class ImportSpecifier(Node):
    local: Identifier | None = None
    imported: Identifier | None = None


@dataclass(eq=False, kw_only=True)
class ImportDeclaration(Node):
    specifiers: list[ImportSpecifier] = field(default_factory=list)
    source: Literal | None = None


CLASS_NODES = (ClassDeclaration, ClassExpression)
EXPORT_NODES = (ExportDefaultDeclaration, ExportNamedDeclaration)
FUNCTION_NODES = (FunctionDeclaration, FunctionExpression, ArrowFunctionExpression)

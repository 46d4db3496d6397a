import re

from codex_docs.core import nodes as n
from codex_docs.core.ast_util import find_decorators, flatten_member_expression, node_to_code
from codex_docs.docs.base import AbstractDoc
from codex_docs.models import DocCategory, ParsedParam
from codex_docs.parser.params import guess_params, guess_return_param, guess_type

_ACCESSOR_KINDS = ("get", "set")


def _key_name(key: n.Node | None, computed: bool) -> str | None:
    if computed:
        return f"[{node_to_code(key)}]"
    if isinstance(key, n.Identifier):
        return key.name
    if isinstance(key, n.Literal):
        return str(key.value)
    return None


class ClassScopedDoc(AbstractDoc):
    """Base for docs whose memberof is the nearest enclosing class."""

    def _memberof(self) -> None:
        class_node = self._ctx.find_up(self._node, n.CLASS_NODES)
        if class_node is None:
            self._value.memberof = self._ctx.file_path
            return

        name = self._ctx.doc_names.get(class_node)
        if name is None and isinstance(class_node, n.BaseClass) and class_node.id:
            name = class_node.id.name
        self._value.memberof = f"{self._ctx.file_path}~{name}"

    def _decorators(self) -> None:
        self._value.decorators = find_decorators(self._node)


class ClassMethodDoc(ClassScopedDoc):
    """Doc for a class method; ``get``/``set`` accessors are documented as members."""

    category = DocCategory.CLASS_METHOD

    STEPS = ("category",) + AbstractDoc.STEPS + (
        "accessor",
        "qualifier",
        "async",
        "generator",
        "params",
        "return",
        "type",
        "throws",
        "emits",
        "listens",
        "decorators",
        "abstract",
        "override",
    )

    @property
    def _kind(self) -> str:
        return self._node.kind if isinstance(self._node, n.ClassMethod) else "method"

    def _category(self) -> None:
        self._value.category = (
            DocCategory.CLASS_MEMBER if self._kind in _ACCESSOR_KINDS else DocCategory.CLASS_METHOD
        )

    def _name(self) -> None:
        node = self._node
        if isinstance(node, n.ClassMethod):
            self._value.name = _key_name(node.key, node.computed)

    def _static(self) -> None:
        self._value.static = bool(getattr(self._node, "static", False))

    def _accessor(self) -> None:
        self._value.accessor = self._kind in _ACCESSOR_KINDS

    def _qualifier(self) -> None:
        self._value.qualifier = self._kind

    def _async(self) -> None:
        self._value.async_ = bool(getattr(self._node, "async_", False))

    def _generator(self) -> None:
        self._value.generator = bool(getattr(self._node, "generator", False))

    def _params(self) -> None:
        super()._params()
        if self._value.params is None and not self._value.accessor:
            self._value.params = guess_params(getattr(self._node, "params", []))

    def _return(self) -> None:
        super()._return()
        if self._value.return_ is not None or self._kind in ("constructor", *_ACCESSOR_KINDS):
            return
        self._value.return_ = guess_return_param(getattr(self._node, "body", None))

    def _type(self) -> None:
        super()._type()
        if self._value.type is not None:
            return

        if self._kind == "get":
            self._value.type = guess_return_param(getattr(self._node, "body", None))
        elif self._kind == "set":
            self._value.type = ParsedParam(types=["*"])


class ClassMemberDoc(ClassScopedDoc):
    """Doc for a ``this.<member> = value`` assignment inside a class method."""

    category = DocCategory.CLASS_MEMBER

    STEPS = AbstractDoc.STEPS + ("type",)

    def _name(self) -> None:
        left = self._node.left if isinstance(self._node, n.AssignmentExpression) else None
        if isinstance(left, n.MemberExpression) and left.computed:
            self._value.name = f"[{node_to_code(left.property)}]"
        else:
            self._value.name = re.sub(r"^this\.", "", flatten_member_expression(left))

    def _static(self) -> None:
        method = self._ctx.find_up(self._node, (n.ClassMethod,))
        self._value.static = method.static if isinstance(method, n.ClassMethod) else True

    def _type(self) -> None:
        super()._type()
        if self._value.type is None and isinstance(self._node, n.AssignmentExpression):
            self._value.type = guess_type(self._node.right)


class ClassPropertyDoc(ClassScopedDoc):
    category = DocCategory.CLASS_PROPERTY

    STEPS = AbstractDoc.STEPS + ("type", "decorators")

    def _name(self) -> None:
        node = self._node
        if isinstance(node, n.ClassProperty):
            self._value.name = _key_name(node.key, node.computed)

    def _static(self) -> None:
        self._value.static = bool(getattr(self._node, "static", False))

    def _type(self) -> None:
        super()._type()
        if self._value.type is None and isinstance(self._node, n.ClassProperty):
            self._value.type = guess_type(self._node.value)

import re

from codex_docs.core import nodes as n
from codex_docs.core.ast_util import callee_name, find_decorators, flatten_member_expression, node_to_code
from codex_docs.core.path_resolver import filepath_to_name
from codex_docs.docs.base import ModuleDoc
from codex_docs.models import DocCategory, ParsedParam
from codex_docs.parser.params import guess_params, guess_return_param, guess_type, parse_param_value


def _name_from_parent(parent: n.Node | None) -> str | None:
    """Name of a function or class expression bound by an assignment or declaration."""
    if isinstance(parent, n.AssignmentExpression):
        if isinstance(parent.left, n.Identifier):
            return parent.left.name
        if isinstance(parent.left, n.MemberExpression) and isinstance(parent.left.property, n.Identifier):
            return parent.left.property.name
    elif isinstance(parent, n.VariableDeclaration) and parent.declarations:
        declarator_id = parent.declarations[0].id
        if isinstance(declarator_id, n.Identifier):
            return declarator_id.name
    return None


def _type_text(value: str) -> str:
    return parse_param_value(value, type=True, name=False, desc=False).type_text or "*"


class ModuleClassDoc(ModuleDoc):
    category = DocCategory.MODULE_CLASS

    STEPS = ModuleDoc.STEPS + ("extends", "implements", "interface", "decorators", "abstract")

    def _name(self) -> None:
        node = self._node
        name = None
        if isinstance(node, n.ClassExpression):
            name = _name_from_parent(self._ctx.parent_of(node))
        if name is None:
            name = node.id.name if isinstance(node, n.BaseClass) and node.id else filepath_to_name(self._ctx.file_path)
        self._value.name = name
        # members look up their memberof through the class node
        self._ctx.doc_names[node] = name

    def _extends(self) -> None:
        values = self._find_all_tag_values(["@extends"])
        if values:
            self._value.extends = [_type_text(value) for value in values]
            return

        super_class = self._node.super_class if isinstance(self._node, n.BaseClass) else None
        if super_class is None:
            return

        if isinstance(super_class, n.CallExpression):
            targets = [super_class.callee, *super_class.arguments]
        else:
            targets = [super_class]

        longnames: list[str] = []
        for target in targets:
            if isinstance(target, n.Identifier):
                longnames.append(self._resolve_longname(target.name))
            elif isinstance(target, n.MemberExpression):
                full_identifier = flatten_member_expression(target)
                root_longname = self._resolve_longname(full_identifier.split(".")[0])
                file_path = re.sub(r"~.*", "", root_longname)
                longnames.append(f"{file_path}~{full_identifier}")

        if isinstance(super_class, n.CallExpression):
            # mixin arguments may be classes or functions
            longnames = [name for name in longnames if re.match(r"^[a-zA-Z]|^[$_][a-zA-Z]", name)]
            self._value.expression_extends = node_to_code(super_class)

        if longnames:
            self._value.extends = longnames

    def _implements(self) -> None:
        values = self._find_all_tag_values(["@implements"])
        if values:
            self._value.implements = [_type_text(value) for value in values]

    def _interface(self) -> None:
        self._value.interface = self._find_tag(["@interface"]) is not None

    def _decorators(self) -> None:
        self._value.decorators = find_decorators(self._node)


class ModuleFunctionDoc(ModuleDoc):
    category = DocCategory.MODULE_FUNCTION

    STEPS = ModuleDoc.STEPS + ("async", "generator", "params", "return", "throws", "emits", "listens")

    def _name(self) -> None:
        node = self._node
        name = None
        if isinstance(node, (n.FunctionExpression, n.ArrowFunctionExpression)):
            name = _name_from_parent(self._ctx.parent_of(node))

        if name is None:
            function_id = getattr(node, "id", None)
            if isinstance(function_id, n.MemberExpression):
                name = f"[{node_to_code(function_id)}]"
            elif isinstance(function_id, n.Identifier):
                name = function_id.name
            else:
                name = filepath_to_name(self._ctx.file_path)
        self._value.name = name

    def _async(self) -> None:
        self._value.async_ = bool(getattr(self._node, "async_", False))

    def _generator(self) -> None:
        self._value.generator = bool(getattr(self._node, "generator", False))

    def _params(self) -> None:
        super()._params()
        if self._value.params is None:
            self._value.params = guess_params(getattr(self._node, "params", []))

    def _return(self) -> None:
        super()._return()
        if self._value.return_ is None:
            self._value.return_ = guess_return_param(getattr(self._node, "body", None))


class ModuleVariableDoc(ModuleDoc):
    category = DocCategory.MODULE_VARIABLE

    STEPS = ModuleDoc.STEPS + ("type",)

    def _declarator(self) -> n.VariableDeclarator:
        if not isinstance(self._node, n.VariableDeclaration) or not self._node.declarations:
            raise ValueError(f"not a variable declaration: {self._node.type}")
        return self._node.declarations[0]

    def _name(self) -> None:
        target = self._declarator().id

        if isinstance(target, n.Identifier):
            self._value.name = target.name
        elif isinstance(target, n.ObjectPattern) and target.properties:
            # destructuring documents the first binding only
            key = getattr(target.properties[0], "key", None)
            self._value.name = key.name if isinstance(key, n.Identifier) else None
        elif isinstance(target, n.ArrayPattern):
            first = next((element for element in target.elements if isinstance(element, n.Identifier)), None)
            self._value.name = first.name if first else None
        else:
            raise ValueError(f"unknown declarations type: {target.type if target else None}")

    def _type(self) -> None:
        super()._type()
        if self._value.type is not None:
            return

        init = self._declarator().init
        if isinstance(init, n.NewExpression):
            longname = self._find_class_longname(callee_name(init.callee)) or "*"
            self._value.type = ParsedParam(types=[longname])
        else:
            self._value.type = guess_type(init)


class ModuleAssignmentDoc(ModuleDoc):
    category = DocCategory.MODULE_ASSIGNMENT

    STEPS = ModuleDoc.STEPS + ("type",)

    def _name(self) -> None:
        left = self._node.left if isinstance(self._node, n.AssignmentExpression) else None
        self._value.name = re.sub(r"^this\.", "", flatten_member_expression(left))

    def _type(self) -> None:
        super()._type()
        if self._value.type is None and isinstance(self._node, n.AssignmentExpression):
            self._value.type = guess_type(self._node.right)


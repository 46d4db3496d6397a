"""Adapter from the tree-sitter JavaScript grammar to the doc generator node set.

Comments are attached the way ESTree parsers do it: comments before an
item of a statement list (program, block, class body) become its leading
comments, or the leading comments of its first decorator; comments after
the last item become its trailing comments. Constructs outside the node
set become ``GenericNode`` so their children are still walked.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from tree_sitter import Node as TSNode
from tree_sitter_language_pack import get_parser

from codex_docs.core import nodes as n
from codex_docs.models import Comment, Position, SourceLocation

logger = logging.getLogger(__name__)

_FUNCTION_EXPRESSIONS = ("function", "function_expression", "generator_function")
_FUNCTION_DECLARATIONS = ("function_declaration", "generator_function_declaration")
_METHOD_MODIFIERS = ("static", "async", "get", "set", "*")

# statements and declarations render from their parts, not their source slice
_NO_RAW = frozenset(
    {
        "program",
        "statement_block",
        "class_body",
        "class_declaration",
        "expression_statement",
        "lexical_declaration",
        "variable_declaration",
        "export_statement",
        "import_statement",
        *_FUNCTION_DECLARATIONS,
    }
)


def _loc(node: TSNode) -> SourceLocation:
    return SourceLocation(
        start=Position(line=node.start_point[0] + 1, column=node.start_point[1]),
        end=Position(line=node.end_point[0] + 1, column=node.end_point[1]),
    )


def _text(node: TSNode | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def _modifiers(node: TSNode) -> set[str]:
    """Anonymous keyword tokens such as ``async``, ``static``, ``get`` or ``*``."""
    return {child.type for child in node.children if not child.is_named and child.type in _METHOD_MODIFIERS}


def _is_comment(node: TSNode) -> bool:
    return node.type == "comment"


def _code_children(node: TSNode) -> list[TSNode]:
    return [child for child in node.named_children if not _is_comment(child)]


def _to_comment(node: TSNode) -> Comment:
    text = _text(node)
    if text.startswith("/*"):
        return Comment(kind="CommentBlock", value=text[2:-2], loc=_loc(node))
    return Comment(kind="CommentLine", value=text[2:], loc=_loc(node))


def _parse_number(text: str) -> int | float | str:
    cleaned = text.replace("_", "").rstrip("n")
    try:
        return int(cleaned, 0)
    except ValueError:
        pass
    try:
        return float(cleaned)
    except ValueError:
        return text


class JavaScriptConverter:
    """Converts one tree-sitter JavaScript tree into ``nodes.Program``."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[TSNode], n.Node]] = {
            "program": self._program,
            "expression_statement": self._expression_statement,
            "statement_block": self._statement_block,
            "return_statement": self._return_statement,
            "lexical_declaration": self._variable_declaration,
            "variable_declaration": self._variable_declaration,
            "variable_declarator": self._variable_declarator,
            "class_declaration": self._class,
            "class": self._class,
            "class_body": self._class_body,
            "method_definition": self._method_definition,
            "field_definition": self._field_definition,
            "public_field_definition": self._field_definition,
            "decorator": self._decorator,
            "arrow_function": self._arrow_function,
            "assignment_expression": self._assignment_expression,
            "augmented_assignment_expression": self._assignment_expression,
            "member_expression": self._member_expression,
            "subscript_expression": self._subscript_expression,
            "call_expression": self._call_expression,
            "new_expression": self._new_expression,
            "parenthesized_expression": self._parenthesized_expression,
            "this": lambda node: n.ThisExpression(),
            "identifier": self._identifier,
            "property_identifier": self._identifier,
            "private_property_identifier": self._identifier,
            "shorthand_property_identifier": self._identifier,
            "shorthand_property_identifier_pattern": self._identifier,
            "statement_identifier": self._identifier,
            "undefined": self._identifier,
            "string": self._string,
            "number": lambda node: n.Literal(value=_parse_number(_text(node)), kind="number"),
            "true": lambda node: n.Literal(value=True, kind="boolean"),
            "false": lambda node: n.Literal(value=False, kind="boolean"),
            "null": lambda node: n.Literal(value=None, kind="null"),
            "regex": lambda node: n.Literal(value=_text(node), kind="regex"),
            "template_string": lambda node: n.TemplateLiteral(),
            "array": lambda node: n.ArrayExpression(elements=self._convert_all(_code_children(node))),
            "object": self._object,
            "pair": self._pair,
            "spread_element": self._spread_element,
            "assignment_pattern": self._assignment_pattern,
            "object_assignment_pattern": self._object_assignment_pattern,
            "rest_pattern": self._rest_pattern,
            "object_pattern": self._object_pattern,
            "pair_pattern": self._pair,
            "array_pattern": lambda node: n.ArrayPattern(elements=self._convert_all(_code_children(node))),
            "export_statement": self._export_statement,
            "export_specifier": self._export_specifier,
            "import_statement": self._import_statement,
        }
        for kind in (*_FUNCTION_EXPRESSIONS, *_FUNCTION_DECLARATIONS):
            self._handlers[kind] = self._function

    # entry points ---------------------------------------------------------

    def convert(self, root: TSNode) -> n.Program:
        program = self._convert(root)
        if not isinstance(program, n.Program):
            raise TypeError(f"expected a program root, got {root.type}")
        return program

    def _convert(self, node: TSNode | None) -> n.Node | None:
        if node is None or _is_comment(node):
            return None

        handler = self._handlers.get(node.type)
        if handler is None:
            result: n.Node = n.GenericNode(kind=node.type, body=self._convert_all(_code_children(node)))
        else:
            result = handler(node)

        result.loc = _loc(node)
        if node.type not in _NO_RAW:
            result.raw = _text(node)
        return result

    def _convert_all(self, nodes: list[TSNode]) -> list[n.Node]:
        results: list[n.Node] = []
        for node in nodes:
            converted = self._convert(node)
            if converted is not None:
                results.append(converted)
        return results

    def _field(self, node: TSNode, name: str) -> n.Node | None:
        return self._convert(node.child_by_field_name(name))

    def _statements(self, container: TSNode) -> tuple[list[n.Node], list[Comment]]:
        """Convert a statement list, attaching comments; returns leftover comments of an empty list."""
        items: list[n.Node] = []
        pending: list[Comment] = []

        for child in container.named_children:
            if _is_comment(child):
                pending.append(_to_comment(child))
                continue
            if child.type == "hash_bang_line" or child.type == "empty_statement":
                continue

            item = self._convert(child)
            if item is None:
                continue
            if pending:
                decorators = getattr(item, "decorators", None)
                target = decorators[0] if decorators else item
                target.leading_comments.extend(pending)
                pending = []
            items.append(item)

        if pending and items:
            items[-1].trailing_comments.extend(pending)
            pending = []
        return items, pending

    # statements -----------------------------------------------------------

    def _program(self, node: TSNode) -> n.Node:
        body, inner = self._statements(node)
        return n.Program(body=body, inner_comments=inner)

    def _statement_block(self, node: TSNode) -> n.Node:
        body, _ = self._statements(node)
        return n.BlockStatement(body=body)

    def _expression_statement(self, node: TSNode) -> n.Node:
        children = _code_children(node)
        return n.ExpressionStatement(expression=self._convert(children[0]) if children else None)

    def _return_statement(self, node: TSNode) -> n.Node:
        children = _code_children(node)
        return n.ReturnStatement(argument=self._convert(children[0]) if children else None)

    def _variable_declaration(self, node: TSNode) -> n.Node:
        kind_node = node.child_by_field_name("kind")
        kind = _text(kind_node) if kind_node is not None else "var"
        declarators = [
            declarator
            for declarator in self._convert_all(_code_children(node))
            if isinstance(declarator, n.VariableDeclarator)
        ]
        return n.VariableDeclaration(kind=kind, declarations=declarators)

    def _variable_declarator(self, node: TSNode) -> n.Node:
        return n.VariableDeclarator(id=self._field(node, "name"), init=self._field(node, "value"))

    # classes --------------------------------------------------------------

    def _decorators(self, node: TSNode) -> list[n.Decorator]:
        return [
            decorator
            for decorator in self._convert_all(node.children_by_field_name("decorator"))
            if isinstance(decorator, n.Decorator)
        ]

    def _decorator(self, node: TSNode) -> n.Node:
        children = _code_children(node)
        return n.Decorator(expression=self._decorator_expression(children[0]) if children else None)

    def _decorator_expression(self, node: TSNode) -> n.Node | None:
        if node.type == "decorator_member_expression":
            expression: n.Node = n.MemberExpression(
                object=self._decorator_expression(node.child_by_field_name("object")),  # type: ignore[arg-type]
                property=self._field(node, "property"),
            )
        elif node.type == "decorator_call_expression":
            arguments = node.child_by_field_name("arguments")
            expression = n.CallExpression(
                callee=self._decorator_expression(node.child_by_field_name("function")),  # type: ignore[arg-type]
                arguments=self._convert_all(_code_children(arguments)) if arguments is not None else [],
            )
        else:
            return self._convert(node)

        expression.loc = _loc(node)
        expression.raw = _text(node)
        return expression

    def _class(self, node: TSNode) -> n.Node:
        heritage = next((child for child in node.named_children if child.type == "class_heritage"), None)
        super_class = None
        if heritage is not None:
            heritage_children = _code_children(heritage)
            super_class = self._convert(heritage_children[0]) if heritage_children else None

        name = self._field(node, "name")
        body = self._field(node, "body")
        cls = n.ClassDeclaration if node.type == "class_declaration" else n.ClassExpression
        return cls(
            decorators=self._decorators(node),
            id=name if isinstance(name, n.Identifier) else None,
            super_class=super_class,
            body=body if isinstance(body, n.ClassBody) else n.ClassBody(),
        )

    def _class_body(self, node: TSNode) -> n.Node:
        body, _ = self._statements(node)
        return n.ClassBody(body=body)

    def _property_key(self, node: TSNode | None) -> tuple[n.Node | None, bool]:
        if node is not None and node.type == "computed_property_name":
            children = _code_children(node)
            return (self._convert(children[0]) if children else None), True
        return self._convert(node), False

    def _method_definition(self, node: TSNode) -> n.Node:
        key, computed = self._property_key(node.child_by_field_name("name"))
        parameters = node.child_by_field_name("parameters")
        modifiers = _modifiers(node)

        if "get" in modifiers:
            kind = "get"
        elif "set" in modifiers:
            kind = "set"
        elif isinstance(key, n.Identifier) and key.name == "constructor" and "static" not in modifiers:
            kind = "constructor"
        else:
            kind = "method"

        return n.ClassMethod(
            decorators=self._decorators(node),
            key=key,
            params=self._convert_all(_code_children(parameters)) if parameters is not None else [],
            body=self._field(node, "body"),
            kind=kind,
            static="static" in modifiers,
            computed=computed,
            async_="async" in modifiers,
            generator="*" in modifiers,
        )

    def _field_definition(self, node: TSNode) -> n.Node:
        key, computed = self._property_key(node.child_by_field_name("property"))
        return n.ClassProperty(
            decorators=self._decorators(node),
            key=key,
            value=self._field(node, "value"),
            static="static" in _modifiers(node),
            computed=computed,
        )

    # functions ------------------------------------------------------------

    def _function(self, node: TSNode) -> n.Node:
        parameters = node.child_by_field_name("parameters")
        modifiers = _modifiers(node)
        cls = n.FunctionDeclaration if node.type in _FUNCTION_DECLARATIONS else n.FunctionExpression
        return cls(
            id=self._field(node, "name"),
            params=self._convert_all(_code_children(parameters)) if parameters is not None else [],
            body=self._field(node, "body"),
            async_="async" in modifiers,
            generator="*" in modifiers or node.type.startswith("generator_"),
        )

    def _arrow_function(self, node: TSNode) -> n.Node:
        parameter = node.child_by_field_name("parameter")
        if parameter is not None:
            params = self._convert_all([parameter])
        else:
            parameters = node.child_by_field_name("parameters")
            params = self._convert_all(_code_children(parameters)) if parameters is not None else []

        return n.ArrowFunctionExpression(
            params=params,
            body=self._field(node, "body"),
            async_="async" in _modifiers(node),
        )

    # expressions ----------------------------------------------------------

    def _identifier(self, node: TSNode) -> n.Node:
        return n.Identifier(name=_text(node))

    def _string(self, node: TSNode) -> n.Node:
        return n.Literal(value=_text(node)[1:-1], kind="string")

    def _assignment_expression(self, node: TSNode) -> n.Node:
        operator = node.child_by_field_name("operator")
        return n.AssignmentExpression(
            left=self._field(node, "left"),
            right=self._field(node, "right"),
            operator=_text(operator) if operator is not None else "=",
        )

    def _member_expression(self, node: TSNode) -> n.Node:
        return n.MemberExpression(object=self._field(node, "object"), property=self._field(node, "property"))

    def _subscript_expression(self, node: TSNode) -> n.Node:
        return n.MemberExpression(object=self._field(node, "object"), property=self._field(node, "index"), computed=True)

    def _arguments(self, node: TSNode) -> list[n.Node]:
        arguments = node.child_by_field_name("arguments")
        if arguments is None:
            return []
        if arguments.type == "template_string":
            # tagged template
            return self._convert_all([arguments])
        return self._convert_all(_code_children(arguments))

    def _call_expression(self, node: TSNode) -> n.Node:
        return n.CallExpression(callee=self._field(node, "function"), arguments=self._arguments(node))

    def _new_expression(self, node: TSNode) -> n.Node:
        return n.NewExpression(callee=self._field(node, "constructor"), arguments=self._arguments(node))

    def _parenthesized_expression(self, node: TSNode) -> n.Node:
        children = _code_children(node)
        inner = self._convert(children[0]) if len(children) == 1 else None
        if inner is not None:
            return inner
        return n.GenericNode(kind=node.type, body=self._convert_all(children))

    def _object(self, node: TSNode) -> n.Node:
        properties: list[n.Node] = []
        for child in _code_children(node):
            if child.type == "method_definition":
                key, _ = self._property_key(child.child_by_field_name("name"))
                parameters = child.child_by_field_name("parameters")
                method = n.ObjectMethod(
                    key=key,
                    params=self._convert_all(_code_children(parameters)) if parameters is not None else [],
                    body=self._field(child, "body"),  # type: ignore[arg-type]
                )
                method.loc = _loc(child)
                properties.append(method)
            elif child.type == "shorthand_property_identifier":
                identifier = self._convert(child)
                prop = n.ObjectProperty(key=identifier, value=self._convert(child))
                prop.loc = _loc(child)
                properties.append(prop)
            else:
                converted = self._convert(child)
                if converted is not None:
                    properties.append(converted)
        return n.ObjectExpression(properties=properties)

    def _pair(self, node: TSNode) -> n.Node:
        key, computed = self._property_key(node.child_by_field_name("key"))
        return n.ObjectProperty(key=key, value=self._field(node, "value"), computed=computed)

    def _spread_element(self, node: TSNode) -> n.Node:
        children = _code_children(node)
        return n.SpreadElement(argument=self._convert(children[0]) if children else None)

    # patterns -------------------------------------------------------------

    def _assignment_pattern(self, node: TSNode) -> n.Node:
        return n.AssignmentPattern(left=self._field(node, "left"), right=self._field(node, "right"))

    def _object_assignment_pattern(self, node: TSNode) -> n.Node:
        left = self._field(node, "left")
        pattern = n.AssignmentPattern(left=left, right=self._field(node, "right"))
        pattern.loc = _loc(node)
        key = n.Identifier(name=left.name) if isinstance(left, n.Identifier) else left
        return n.ObjectProperty(key=key, value=pattern)

    def _rest_pattern(self, node: TSNode) -> n.Node:
        children = _code_children(node)
        return n.RestElement(argument=self._convert(children[0]) if children else None)

    def _object_pattern(self, node: TSNode) -> n.Node:
        properties: list[n.Node] = []
        for child in _code_children(node):
            converted = self._convert(child)
            if converted is None:
                continue
            if child.type == "shorthand_property_identifier_pattern":
                prop = n.ObjectProperty(key=converted, value=self._convert(child))
                prop.loc = converted.loc
                converted = prop
            properties.append(converted)
        return n.ObjectPattern(properties=properties)

    # modules --------------------------------------------------------------

    def _export_statement(self, node: TSNode) -> n.Node:
        source = self._field(node, "source")
        source_literal = source if isinstance(source, n.Literal) else None
        is_default = any(not child.is_named and child.type == "default" for child in node.children)

        declaration = self._field(node, "declaration")
        value = node.child_by_field_name("value")
        if declaration is None and value is not None:
            declaration = self._export_default_value(value)

        decorators = self._decorators(node)
        if decorators and isinstance(declaration, n.BaseClass):
            declaration.decorators = decorators + declaration.decorators

        if is_default:
            return n.ExportDefaultDeclaration(declaration=declaration)

        specifiers: list[n.ExportSpecifier] = []
        clause = next((child for child in node.named_children if child.type == "export_clause"), None)
        if clause is not None:
            specifiers = [
                specifier
                for specifier in self._convert_all(_code_children(clause))
                if isinstance(specifier, n.ExportSpecifier)
            ]
        return n.ExportNamedDeclaration(declaration=declaration, specifiers=specifiers, source=source_literal)

    def _export_default_value(self, value: TSNode) -> n.Node | None:
        """``export default class {}`` and ``export default function () {}`` declare anonymous bindings."""
        converted = self._convert(value)
        if isinstance(converted, n.ClassExpression):
            declaration: n.Node = n.ClassDeclaration(
                decorators=converted.decorators,
                id=converted.id,
                super_class=converted.super_class,
                body=converted.body,
            )
        elif isinstance(converted, n.FunctionExpression):
            declaration = n.FunctionDeclaration(
                id=converted.id,
                params=converted.params,
                body=converted.body,
                async_=converted.async_,
                generator=converted.generator,
            )
        else:
            return converted

        declaration.loc = converted.loc
        return declaration

    def _export_specifier(self, node: TSNode) -> n.Node:
        local = self._field(node, "name")
        alias = self._field(node, "alias")
        return n.ExportSpecifier(
            local=local if isinstance(local, n.Identifier) else None,
            exported=alias if isinstance(alias, n.Identifier) else None,
        )

    def _import_statement(self, node: TSNode) -> n.Node:
        specifiers: list[n.ImportSpecifier] = []
        clause = next((child for child in node.named_children if child.type == "import_clause"), None)

        for child in _code_children(clause) if clause is not None else []:
            if child.type == "identifier":
                specifiers.append(
                    n.ImportSpecifier(local=n.Identifier(name=_text(child)), imported=n.Identifier(name="default"))
                )
            elif child.type == "namespace_import":
                names = [grandchild for grandchild in _code_children(child) if grandchild.type == "identifier"]
                if names:
                    specifiers.append(n.ImportSpecifier(local=n.Identifier(name=_text(names[0]))))
            elif child.type == "named_imports":
                for spec in _code_children(child):
                    if spec.type != "import_specifier":
                        continue
                    imported = n.Identifier(name=_text(spec.child_by_field_name("name")))
                    alias = spec.child_by_field_name("alias")
                    local = n.Identifier(name=_text(alias)) if alias is not None else imported
                    specifiers.append(n.ImportSpecifier(local=local, imported=imported))

        source = self._field(node, "source")
        return n.ImportDeclaration(
            specifiers=specifiers,
            source=source if isinstance(source, n.Literal) else None,
        )


def parse_source(source: str | bytes) -> n.Program:
    """Parse JavaScript source into the doc generator node set."""
    source_bytes = source.encode("utf-8") if isinstance(source, str) else source
    parser = get_parser("javascript")
    tree = parser.parse(source_bytes)

    if tree.root_node.has_error:
        logger.warning("JavaScript source contains syntax errors; affected constructs are kept as ERROR nodes")

    return JavaScriptConverter().convert(tree.root_node)


def parse_file(path: str | Path) -> n.Program:
    file_path = Path(path)
    try:
        source_bytes = file_path.read_bytes()
    except FileNotFoundError:
        raise FileNotFoundError(f"File not found: {path}") from None

    return parse_source(source_bytes)

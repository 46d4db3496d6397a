"""Lookups, synthesis and rendering helpers over the node set."""

from typing import Any

from codex_docs.core import nodes as n
from codex_docs.models import Decorator


def create_variable_declaration_and_new_expression_node(
    name: str, class_name: str, source_node: n.Node
) -> n.VariableDeclaration:
    """Synthesize ``let <name> = new <class_name>()`` borrowing location and comments."""
    return n.VariableDeclaration(
        kind="let",
        loc=source_node.loc,
        leading_comments=list(source_node.leading_comments),
        declarations=[
            n.VariableDeclarator(
                id=n.Identifier(name=name),
                init=n.NewExpression(callee=n.Identifier(name=class_name)),
            )
        ],
    )


def _unwrap_statement(node: n.Node) -> n.Node | None:
    if isinstance(node, n.EXPORT_NODES):
        return node.declaration
    return node


def find_class_declaration_node(ast: n.Program, name: str | None, include_exports: bool = False) -> n.Node | None:
    if not name:
        return None

    for statement in ast.body:
        node = _unwrap_statement(statement) if include_exports else statement
        if isinstance(node, n.ClassDeclaration) and node.id is not None and node.id.name == name:
            return node
    return None


def _first_declarator(node: n.Node) -> n.VariableDeclarator | None:
    if isinstance(node, n.VariableDeclaration) and node.declarations:
        return node.declarations[0]
    return None


def find_variable_declaration_and_new_expression_node(ast: n.Program, name: str | None) -> n.VariableDeclaration | None:
    if not name:
        return None

    for statement in ast.body:
        declarator = _first_declarator(statement)
        if (
            declarator
            and isinstance(declarator.init, n.NewExpression)
            and isinstance(declarator.id, n.Identifier)
            and declarator.id.name == name
        ):
            return statement  # type: ignore[return-value]
    return None


def find_path_in_import_declaration(ast: n.Program, name: str) -> str | None:
    """Find ``./foo/bar.js`` from ``import Bar from './foo/bar.js'`` by ``Bar``."""
    for statement in ast.body:
        if not isinstance(statement, n.ImportDeclaration) or statement.source is None:
            continue
        for spec in statement.specifiers:
            if spec.local is not None and spec.local.name == name:
                return str(statement.source.value)
    return None


def callee_name(node: n.Node | None) -> str:
    """Class name constructed by a ``new`` callee: identifier or rightmost member property."""
    if isinstance(node, n.Identifier):
        return node.name
    if isinstance(node, n.MemberExpression) and isinstance(node.property, n.Identifier):
        return node.property.name
    return ""


def flatten_member_expression(node: n.Node | None) -> str:
    """``this.foo.bar`` for a member expression chain."""
    results: list[str] = []
    target = node
    while target is not None:
        if isinstance(target, n.ThisExpression):
            results.append("this")
            break
        if isinstance(target, n.Identifier):
            results.append(target.name)
            break
        if isinstance(target, n.MemberExpression):
            prop = target.property
            results.append(prop.name if isinstance(prop, n.Identifier) else node_to_code(prop))
            target = target.object
        else:
            results.append(node_to_code(target))
            break
    return ".".join(reversed(results))


def node_to_code(node: n.Node | None) -> str:
    """Render an expression back to source, preferring the original text."""
    if node is None:
        return ""
    if node.raw is not None:
        return node.raw
    if isinstance(node, n.Identifier):
        return node.name
    if isinstance(node, n.ThisExpression):
        return "this"
    if isinstance(node, n.Literal):
        return _literal_to_code(node)
    if isinstance(node, n.MemberExpression):
        if node.computed:
            return f"{node_to_code(node.object)}[{node_to_code(node.property)}]"
        return f"{node_to_code(node.object)}.{node_to_code(node.property)}"
    if isinstance(node, n.CallExpression):
        return f"{node_to_code(node.callee)}({', '.join(node_to_code(arg) for arg in node.arguments)})"
    if isinstance(node, n.NewExpression):
        return f"new {node_to_code(node.callee)}({', '.join(node_to_code(arg) for arg in node.arguments)})"
    return node.type


def _literal_to_code(node: n.Literal) -> str:
    if node.kind == "string":
        return repr(node.value)
    if node.kind == "boolean":
        return "true" if node.value else "false"
    if node.kind == "null":
        return "null"
    return str(node.value)


def find_decorators(node: n.Node) -> list[Decorator] | None:
    decorators = getattr(node, "decorators", None)
    if not decorators:
        return None

    results: list[Decorator] = []
    for decorator in decorators:
        expression = decorator.expression
        if isinstance(expression, n.Identifier):
            results.append(Decorator(name=expression.name, arguments=None))
        elif isinstance(expression, n.MemberExpression):
            results.append(Decorator(name=flatten_member_expression(expression), arguments=None))
        elif isinstance(expression, n.CallExpression):
            arguments = ", ".join(node_to_code(arg) for arg in expression.arguments)
            results.append(Decorator(name=flatten_member_expression(expression.callee), arguments=f"({arguments})"))
        else:
            raise ValueError(f"unknown decorator expression type: {expression.type if expression else None}")
    return results


def sanitize_node(node: n.Node | None) -> dict[str, Any] | None:
    """Keep only type, location and comments of a node for log output."""
    if node is None:
        return None

    return {
        "type": node.type,
        "loc": node.loc.model_dump() if node.loc else None,
        "leadingComments": [comment.model_dump() for comment in node.leading_comments],
        "trailingComments": [comment.model_dump() for comment in node.trailing_comments],
    }


def line_number_start(node: n.Node | None) -> int | None:
    if node is None or node.loc is None:
        return None
    return node.loc.start.line

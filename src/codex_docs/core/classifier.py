"""Maps a (node, tags) pair to a doc category and the node the doc describes."""

import json
import logging
from dataclasses import dataclass

from codex_docs.core import nodes as n
from codex_docs.core.ast_util import sanitize_node
from codex_docs.core.context import TraversalContext
from codex_docs.models import DocCategory, Tag

logger = logging.getLogger(__name__)

_VIRTUAL_TAGS = {
    "@typedef": DocCategory.VIRTUAL_TYPEDEF,
    "@external": DocCategory.VIRTUAL_EXTERNAL,
}


@dataclass(frozen=True)
class Decision:
    category: DocCategory
    node: n.Node


def decide_type(ctx: TraversalContext, tags: list[Tag], node: n.Node | None) -> Decision | None:
    """Classify ``node``; ``None`` means no doc object is produced."""
    category: DocCategory | None = None
    # a later @typedef / @external overrides an earlier one
    for tag in tags:
        category = _VIRTUAL_TAGS.get(tag.tag_name, category)

    if category is not None:
        return Decision(category, node) if node is not None else None

    if node is None:
        return None

    decision = _decide_by_node(ctx, node)
    if decision is not None and decision.category is DocCategory.MODULE_CLASS:
        ctx.processed_classes.append(decision.node)
    return decision


def _decide_by_node(ctx: TraversalContext, node: n.Node) -> Decision | None:
    if isinstance(node, n.ClassDeclaration):
        return _top_level(ctx, node, DocCategory.MODULE_CLASS)
    if isinstance(node, n.ClassMethod):
        return _class_scoped(ctx, node, DocCategory.CLASS_METHOD, "This method is not in class")
    if isinstance(node, n.ClassProperty):
        return _class_scoped(ctx, node, DocCategory.CLASS_PROPERTY, "This class property is not in class")
    if isinstance(node, n.ExpressionStatement):
        return _decide_expression_statement(ctx, node)
    if isinstance(node, n.FunctionDeclaration):
        return _top_level(ctx, node, DocCategory.MODULE_FUNCTION)
    if isinstance(node, n.FunctionExpression):
        # plain function expressions are reached through their variable or assignment
        if not node.async_:
            return None
        return _top_level(ctx, node, DocCategory.MODULE_FUNCTION)
    if isinstance(node, n.ArrowFunctionExpression):
        return _top_level(ctx, node, DocCategory.MODULE_FUNCTION)
    if isinstance(node, n.AssignmentExpression):
        return _decide_assignment(ctx, node)
    if isinstance(node, n.VariableDeclaration):
        return _decide_variable(ctx, node)
    return None


def _top_level(ctx: TraversalContext, node: n.Node, category: DocCategory) -> Decision | None:
    return Decision(category, node) if ctx.is_top_level(node) else None


def _warn_not_in_class(message: str, node: n.Node) -> None:
    logger.warning("%s: %s", message, json.dumps(sanitize_node(node)))


def _class_scoped(ctx: TraversalContext, node: n.Node, category: DocCategory, message: str) -> Decision | None:
    class_node = ctx.find_up(node, n.CLASS_NODES)
    if ctx.is_class_processed(class_node):
        return Decision(category, node)

    _warn_not_in_class(message, node)
    return None


def _decide_expression_statement(ctx: TraversalContext, node: n.ExpressionStatement) -> Decision | None:
    expression = node.expression
    if not isinstance(expression, n.AssignmentExpression) or expression.right is None:
        return None

    ctx.set_parent(expression, node)

    left = expression.left
    if not (isinstance(left, n.MemberExpression) and isinstance(left.object, n.ThisExpression)):
        return None

    class_node = ctx.find_up(expression, n.CLASS_NODES)
    # a free function may use `this` with a bound context; that is not a member
    if class_node is None:
        return None

    if not ctx.is_class_processed(class_node):
        _warn_not_in_class("This class member is not in class", expression)
        return None

    ctx.mark_visited(expression)
    return Decision(DocCategory.CLASS_MEMBER, expression)


def _inner_decision(ctx: TraversalContext, outer: n.Node, inner: n.Node | None) -> Decision | None:
    """Reclassify a class or function value bound by ``outer`` onto the value itself."""
    if isinstance(inner, (n.FunctionExpression, n.ArrowFunctionExpression)):
        category = DocCategory.MODULE_FUNCTION
    elif isinstance(inner, n.ClassExpression):
        category = DocCategory.MODULE_CLASS
    else:
        return None

    ctx.set_parent(inner, outer)
    ctx.mark_visited(inner)
    return Decision(category, inner)


def _decide_assignment(ctx: TraversalContext, node: n.AssignmentExpression) -> Decision | None:
    if not ctx.is_top_level(node):
        return None

    return _inner_decision(ctx, node, node.right) or Decision(DocCategory.MODULE_ASSIGNMENT, node)


def _decide_variable(ctx: TraversalContext, node: n.VariableDeclaration) -> Decision | None:
    if not ctx.is_top_level(node):
        return None

    # only the first declarator is inspected
    if not node.declarations or node.declarations[0].init is None:
        return None

    return _inner_decision(ctx, node, node.declarations[0].init) or Decision(DocCategory.MODULE_VARIABLE, node)

from codex_docs.core import nodes as n
from codex_docs.core.classifier import decide_type
from codex_docs.core.context import TraversalContext
from codex_docs.docs import DOC_BUILDERS
from codex_docs.models import Comment, DocObject, Tag
from codex_docs.parser.comment import UNDOCUMENT_COMMENT, get_comment_value, parse_comment, parse_last_comment


def doc_comments(comments: list[Comment] | None) -> list[Comment]:
    """Doc comments of a node, or the ``@_undocument`` placeholder when there are none."""
    found = [comment for comment in comments or [] if get_comment_value(comment) is not None]
    return found or [UNDOCUMENT_COMMENT]


def parse_doc_tags(comments: list[Comment]) -> list[Tag]:
    """Tags of the last doc comment, ignoring line and plain block comments."""
    return parse_last_comment([comment for comment in comments if get_comment_value(comment) is not None])


def create_doc(ctx: TraversalContext, node: n.Node, tags: list[Tag]) -> DocObject | None:
    decision = decide_type(ctx, tags, node)
    if decision is None:
        return None

    builder = DOC_BUILDERS[decision.category]
    return builder.create(ctx.next_id(), ctx.module_id, ctx, decision.node, tags)


def _virtual_node(ctx: TraversalContext, parent: n.Node | None) -> n.VirtualNode:
    virtual = n.VirtualNode()
    ctx.set_parent(virtual, parent)
    return virtual


def traverse_comments(
    ctx: TraversalContext, node: n.Node | None, parent: n.Node | None, comments: list[Comment] | None
) -> None:
    """Create and insert docs for each doc comment of ``node``.

    Only the last comment documents the node itself; earlier comments are
    classified against a virtual node so tags like ``@typedef`` still count.
    """
    if node is None:
        node = _virtual_node(ctx, parent)

    selected = doc_comments(comments)
    last = len(selected) - 1
    for i, comment in enumerate(selected):
        target = node if i == last else _virtual_node(ctx, parent)
        doc = create_doc(ctx, target, parse_comment(comment))
        if doc is not None:
            ctx.database.insert(doc, ctx.doc_filter)

from collections.abc import Callable

from codex_docs.core.nodes import Node

SKIP = object()

EnterNode = Callable[[Node, Node | None], object]


def traverse(root: Node, enter_node: EnterNode) -> None:
    """Depth-first pre-order walk calling ``enter_node(node, parent)``.

    Returning ``SKIP`` from the callback prevents descending into that
    node's children. The walk keeps its own ancestor stack, so nodes are
    never annotated with parent links.
    """
    stack: list[tuple[Node, Node | None]] = [(root, None)]
    while stack:
        node, parent = stack.pop()
        if enter_node(node, parent) is SKIP:
            continue
        children = list(node.children())
        for child in reversed(children):
            stack.append((child, node))

from codex_docs.core import nodes as n
from codex_docs.core.walker import SKIP, traverse


def _program() -> n.Program:
    return n.Program(
        body=[
            n.FunctionDeclaration(
                id=n.Identifier(name="f"),
                body=n.BlockStatement(body=[n.ReturnStatement(argument=n.Identifier(name="x"))]),
            ),
            n.ExpressionStatement(expression=n.Identifier(name="y")),
        ]
    )


def test_traverse_is_pre_order_with_parents() -> None:
    program = _program()
    visited: list[tuple[str, str | None]] = []

    traverse(program, lambda node, parent: visited.append((node.type, parent.type if parent else None)))

    assert visited == [
        ("Program", None),
        ("FunctionDeclaration", "Program"),
        ("Identifier", "FunctionDeclaration"),
        ("BlockStatement", "FunctionDeclaration"),
        ("ReturnStatement", "BlockStatement"),
        ("Identifier", "ReturnStatement"),
        ("ExpressionStatement", "Program"),
        ("Identifier", "ExpressionStatement"),
    ]


def test_skip_prunes_children() -> None:
    visited: list[str] = []

    def enter(node: n.Node, parent: n.Node | None) -> object:
        visited.append(node.type)
        return SKIP if isinstance(node, n.FunctionDeclaration) else None

    traverse(_program(), enter)

    assert visited == ["Program", "FunctionDeclaration", "ExpressionStatement", "Identifier"]


def test_nodes_hash_by_identity() -> None:
    a = n.Identifier(name="a")
    b = n.Identifier(name="a")

    assert a != b
    assert len({a, b}) == 2

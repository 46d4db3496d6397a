import pytest

from codex_docs.core import nodes as n
from codex_docs.parser.params import (
    guess_params,
    guess_return_param,
    guess_type,
    parse_param,
    parse_param_value,
    parse_tag_value,
)


def test_parse_param_value_splits_type_name_and_description() -> None:
    value = parse_param_value("{number} x - the x")

    assert value.type_text == "number"
    assert value.param_name == "x"
    assert value.param_desc == "the x"


def test_parse_param_value_defaults_to_any_type() -> None:
    assert parse_param_value("x the x").type_text == "*"


def test_parse_tag_value_handles_optional_names_with_defaults() -> None:
    param = parse_tag_value("{string} [name=foo] - the name")

    assert param.types == ["string"]
    assert param.name == "name"
    assert param.optional is True
    assert param.default_value == "foo"
    assert param.default_raw == "foo"
    assert param.description == "the name"


@pytest.mark.parametrize(
    ("type_text", "types", "nullable", "spread"),
    [
        ("number|string", ["number", "string"], None, False),
        ("(number|string)", ["number", "string"], None, False),
        ("?number", ["number"], True, False),
        ("!Object", ["Object"], False, False),
        ("Map<string|number>", ["Map<string|number>"], None, False),
        ("...number", ["...number"], None, True),
    ],
)
def test_parse_param_types(type_text: str, types: list[str], nullable: bool | None, spread: bool) -> None:
    param = parse_param(type_text, "x", None)

    assert param.types == types
    assert param.nullable is nullable
    assert param.spread is spread


@pytest.mark.parametrize("value", ["{} x", "{|} x"])
def test_parse_tag_value_rejects_empty_types(value: str) -> None:
    with pytest.raises(ValueError, match="Empty type found"):
        parse_tag_value(value)


def test_guess_params_covers_identifiers_defaults_and_rest() -> None:
    params = guess_params(
        [
            n.Identifier(name="a"),
            n.AssignmentPattern(left=n.Identifier(name="b"), right=n.Literal(value=1, kind="number")),
            n.RestElement(argument=n.Identifier(name="rest")),
        ]
    )

    assert [p.name for p in params] == ["a", "b", "rest"]
    assert params[0].types == ["*"]
    assert params[1].types == ["number"]
    assert params[1].optional is True
    assert params[1].default_value == "1"
    assert params[2].types == ["...*"]
    assert params[2].spread is True


def test_guess_params_names_patterns_by_position() -> None:
    params = guess_params(
        [
            n.ObjectPattern(properties=[n.ObjectProperty(key=n.Identifier(name="x"), value=n.Identifier(name="x"))]),
            n.ArrayPattern(elements=[n.Identifier(name="y")]),
        ]
    )

    assert params[0].name == "objectPattern"
    assert params[0].types == ['{"x": *}']
    assert params[1].name == "arrayPattern1"
    assert params[1].types == ["*[]"]


def test_guess_return_param_ignores_nested_functions() -> None:
    body = n.BlockStatement(
        body=[
            n.FunctionDeclaration(
                id=n.Identifier(name="inner"),
                body=n.BlockStatement(body=[n.ReturnStatement(argument=n.Literal(value=1, kind="number"))]),
            ),
            n.ReturnStatement(argument=n.Literal(value="a", kind="string")),
        ]
    )

    param = guess_return_param(body)

    assert param is not None
    assert param.types == ["string"]


def test_guess_return_param_without_return_is_none() -> None:
    assert guess_return_param(n.BlockStatement()) is None


@pytest.mark.parametrize(
    ("node", "types"),
    [
        (None, ["*"]),
        (n.Literal(value=True, kind="boolean"), ["boolean"]),
        (n.Literal(value=None, kind="null"), ["*"]),
        (n.Literal(value="/a/", kind="regex"), ["RegExp"]),
        (n.TemplateLiteral(), ["string"]),
        (n.ArrayExpression(elements=[n.Literal(value=1, kind="number")]), ["number[]"]),
        (n.ArrayExpression(), ["*[]"]),
        (
            n.ObjectExpression(
                properties=[n.ObjectProperty(key=n.Identifier(name="a"), value=n.Literal(value="x", kind="string"))]
            ),
            ['{"a": string}'],
        ),
        (n.CallExpression(callee=n.Identifier(name="f")), ["*"]),
    ],
    ids=["none", "boolean", "null", "regex", "template", "array", "empty-array", "object", "call"],
)
def test_guess_type(node: n.Node | None, types: list[str]) -> None:
    assert guess_type(node).types == types

"""Parsing of ``{type} name - description`` tag values and shape-based type guessing."""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

from codex_docs.core import nodes as n
from codex_docs.core.walker import SKIP, traverse
from codex_docs.models import ParsedParam

logger = logging.getLogger(__name__)

_TYPE_PREFIX = re.compile(r"^\{([^@]*?)\}(\s+|$)")


@dataclass(frozen=True)
class ParamValue:
    type_text: str | None
    param_name: str | None
    param_desc: str | None


def parse_param_value(value: str, type: bool = True, name: bool = True, desc: bool = True) -> ParamValue:
    value = value.strip()
    type_text: str | None = None
    param_name: str | None = None
    param_desc: str | None = None

    if type:
        match = _TYPE_PREFIX.match(value)
        if match:
            type_text = match.group(1)
            value = value[match.end() :]
        else:
            type_text = "*"

    if name:
        if value.startswith("["):
            depth = 0
            chars: list[str] = []
            for char in value:
                chars.append(char)
                if char == "[":
                    depth += 1
                elif char == "]":
                    depth -= 1
                if depth <= 0:
                    break
            param_name = "".join(chars)
            value = value.replace(param_name, "", 1).strip()
        else:
            match = re.match(r"^(\S+)", value)
            if match:
                param_name = match.group(1)
                value = re.sub(r"^\S+\s*", "", value, count=1)

    if desc:
        match = re.match(r"^-?\s*([\s\S]*)$", value)
        if match:
            param_desc = match.group(1)

    return ParamValue(type_text=type_text, param_name=param_name, param_desc=param_desc)


def parse_param(type_text: str | None = None, param_name: str | None = None, param_desc: str | None = None) -> ParsedParam:
    """Build a ``ParsedParam`` from the pieces returned by ``parse_param_value``."""
    result = ParsedParam()

    if type_text:
        if type_text.startswith("?"):
            result.nullable = True
        elif type_text.startswith("!"):
            result.nullable = False
        type_text = re.sub(r"^[?!]", "", type_text)

        if type_text.startswith("{"):
            result.types = [type_text]
        elif type_text.startswith("("):
            result.types = type_text.removeprefix("(").removesuffix(")").split("|")
        elif "|" in type_text:
            if re.search(r"<.*?\|.*?>", type_text):
                result.types = [type_text]
            elif re.match(r"^\.\.\.\(.*?\)", type_text):
                result.types = re.sub(r"\)$", "", re.sub(r"^\.\.\.\(", "...", type_text)).split("|")
            else:
                result.types = type_text.split("|")
        else:
            result.types = [type_text]

        result.spread = type_text.startswith("...")
    else:
        result.types = [""]

    if any(not t for t in result.types):
        raise ValueError(f"Empty type found name={param_name} desc={param_desc}")

    if param_name:
        if param_name.startswith("["):
            result.optional = True
            param_name = param_name.removeprefix("[").removesuffix("]")
        else:
            result.optional = False

        pair = param_name.split("=")
        if len(pair) == 2:
            result.default_value = pair[1]
            try:
                result.default_raw = json.loads(pair[1])
            except ValueError:
                result.default_raw = pair[1]
        result.name = pair[0].strip()

    result.description = param_desc
    return result


def parse_tag_value(value: str, type: bool = True, name: bool = True, desc: bool = True) -> ParsedParam:
    parsed = parse_param_value(value, type=type, name=name, desc=desc)
    return parse_param(parsed.type_text, parsed.param_name, parsed.param_desc)


# Guessing -----------------------------------------------------------------


def js_typeof(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int | float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


def _literal_value(node: n.Node | None) -> Any:
    return node.value if isinstance(node, n.Literal) else None


def _key_name(key: n.Node | None) -> str | None:
    if isinstance(key, n.Identifier):
        return key.name
    if isinstance(key, n.Literal):
        return str(key.value)
    return None


def guess_params(params: list[n.Node]) -> list[ParsedParam]:
    """Guess parameter names and types from a function's parameter list."""
    results: list[ParsedParam] = []

    for i, param in enumerate(params):
        suffix = "" if i == 0 else str(i)
        result = ParsedParam()

        if isinstance(param, n.Identifier):
            result.name = param.name
            result.types = ["*"]

        elif isinstance(param, n.AssignmentPattern):
            if isinstance(param.left, n.Identifier):
                result.name = param.left.name
            elif isinstance(param.left, n.ObjectPattern):
                result.name = f"objectPattern{suffix}"
            elif isinstance(param.left, n.ArrayPattern):
                result.name = f"arrayPattern{suffix}"

            result.optional = True
            right = param.right

            if isinstance(right, n.Literal):
                result.types = ["*"] if right.value is None else [js_typeof(right.value)]
                result.default_raw = right.value
                result.default_value = _js_string(right.value)
            elif isinstance(right, n.ArrayExpression):
                result.types = [f"{js_typeof(_literal_value(right.elements[0]))}[]"] if right.elements else ["*[]"]
                result.default_raw = [_literal_value(element) for element in right.elements]
                result.default_value = json.dumps(result.default_raw)
            elif isinstance(right, n.ObjectExpression):
                type_map: dict[str, str] = {}
                if isinstance(param.left, n.ObjectPattern):
                    for prop in param.left.properties:
                        key = _key_name(getattr(prop, "key", None))
                        if key:
                            type_map[key] = "*"
                raw: dict[str, Any] = {}
                for prop in right.properties:
                    if not isinstance(prop, n.ObjectProperty):
                        continue
                    key = _key_name(prop.key)
                    if key is None:
                        continue
                    raw[key] = _literal_value(prop.value)
                    type_map[key] = js_typeof(raw[key]) if isinstance(prop.value, n.Literal) else "*"
                result.types = ["{" + ", ".join(f'"{k}": {v}' for k, v in type_map.items()) + "}"]
                result.default_raw = raw
                result.default_value = json.dumps(raw)
            elif isinstance(right, n.Identifier):
                result.types = ["*"]
                result.default_raw = right.name
                result.default_value = right.name
            else:
                result.types = ["*"]

        elif isinstance(param, n.RestElement):
            result.name = param.argument.name if isinstance(param.argument, n.Identifier) else "rest"
            result.types = ["...*"]
            result.spread = True

        elif isinstance(param, n.ObjectPattern):
            entries: list[str] = []
            raw_pattern: dict[str, Any] = {}
            for prop in param.properties:
                if isinstance(prop, n.RestElement) and isinstance(prop.argument, n.Identifier):
                    entries.append(f"...{prop.argument.name}: Object")
                    raw_pattern[prop.argument.name] = {}
                else:
                    key = _key_name(getattr(prop, "key", None))
                    if key:
                        entries.append(f'"{key}": *')
                        raw_pattern[key] = None
            result.name = f"objectPattern{suffix}"
            result.types = ["{" + ", ".join(entries) + "}"]
            result.default_raw = raw_pattern
            result.default_value = json.dumps(raw_pattern)

        elif isinstance(param, n.ArrayPattern):
            array_type: str | None = None
            raw_items: list[str] = []
            for element in param.elements:
                if isinstance(element, n.Identifier):
                    raw_items.append("null")
                elif isinstance(element, n.AssignmentPattern):
                    if isinstance(element.right, n.Literal):
                        if array_type is None and element.right.value is not None:
                            array_type = js_typeof(element.right.value)
                        raw_items.append(json.dumps(element.right.value))
                    else:
                        raw_items.append("*")
            result.name = f"arrayPattern{suffix}"
            result.types = [f"{array_type or '*'}[]"]
            result.default_raw = raw_items
            result.default_value = f"[{', '.join(raw_items)}]"

        else:
            logger.warning("unknown param type: %s", param.type)

        results.append(result)

    return results


def guess_return_param(body: n.Node | None) -> ParsedParam | None:
    """Guess the return type from ``return`` statements of a function body."""
    if body is None:
        return None

    found: list[ParsedParam] = []

    def enter_node(node: n.Node, parent: n.Node | None) -> object:
        # returns of nested functions do not belong to this body
        if node is not body and isinstance(node, (*n.FUNCTION_NODES, n.ObjectMethod, n.ClassMethod)):
            return SKIP
        if isinstance(node, n.ReturnStatement) and node.argument is not None:
            found.append(guess_type(node.argument))
        return None

    traverse(body, enter_node)

    if not found:
        return None
    return ParsedParam(types=found[-1].types)


def guess_type(right: n.Node | None) -> ParsedParam:
    """Guess a value's type from the expression that produces it."""
    if right is None:
        return ParsedParam(types=["*"])

    if isinstance(right, n.TemplateLiteral):
        return ParsedParam(types=["string"])

    if isinstance(right, n.Literal):
        if right.kind == "null":
            return ParsedParam(types=["*"])
        if right.kind == "regex":
            return ParsedParam(types=["RegExp"])
        return ParsedParam(types=[js_typeof(right.value)])

    if isinstance(right, n.ArrayExpression):
        if right.elements:
            return ParsedParam(types=[f"{js_typeof(_literal_value(right.elements[0]))}[]"])
        return ParsedParam(types=["*[]"])

    if isinstance(right, n.ObjectExpression):
        type_map: dict[str, str] = {}
        for prop in right.properties:
            if isinstance(prop, n.ObjectProperty):
                value = _literal_value(prop.value)
                type_map[f'"{_key_name(prop.key)}"'] = js_typeof(value) if value else "*"
            elif isinstance(prop, n.ObjectMethod):
                type_map[f'"{_key_name(prop.key)}"'] = "function"
            elif isinstance(prop, n.SpreadElement):
                argument = prop.argument.name if isinstance(prop.argument, n.Identifier) else "*"
                type_map[f"...{argument}"] = "Object"
        return ParsedParam(types=["{" + ", ".join(f"{k}: {v}" for k, v in type_map.items()) + "}"])

    return ParsedParam(types=["*"])


def _js_string(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)

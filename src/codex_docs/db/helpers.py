from enum import Enum
from typing import Any

from codex_docs.models import DocObject


def make_longname(memberof: str, name: str | None, static: bool = True) -> str:
    """``<file>~<name>`` for module scope, ``<memberof>#<name>`` / ``.<name>`` inside a class."""
    if "~" in memberof:
        scope = "." if static else "#"
        return f"{memberof}{scope}{name}"
    return f"{memberof}~{name}"


def matches_query(doc: DocObject, query: dict[str, Any]) -> bool:
    for key, expected in query.items():
        actual = getattr(doc, key)
        if isinstance(expected, (list, tuple, set, frozenset)):
            if actual not in expected:
                return False
        elif isinstance(expected, Enum) or isinstance(actual, Enum):
            if _plain(actual) != _plain(expected):
                return False
        elif actual != expected:
            return False
    return True


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value

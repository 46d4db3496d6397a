import os

from codex_docs.core.context import HandleError


def get_handle_error() -> HandleError:
    value = os.getenv("CODEX_DOCS_HANDLE_ERROR", "throw")
    if value not in ("log", "throw"):
        raise ValueError(f"CODEX_DOCS_HANDLE_ERROR must be 'log' or 'throw', got '{value}'")
    return value  # type: ignore[return-value]


def get_root_path() -> str:
    return os.getenv("CODEX_DOCS_ROOT", os.getcwd())

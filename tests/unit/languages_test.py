from pathlib import Path

import pytest

from codex_docs.core.languages import default_file_name, detect_language_from_path, normalize_language, resolve_language


@pytest.mark.parametrize("alias", ["js", "JavaScript", " mjs ", "cjs", "jsx"])
def test_normalize_language_aliases(alias: str) -> None:
    assert normalize_language(alias) == "javascript"


def test_normalize_language_rejects_unknown() -> None:
    with pytest.raises(ValueError, match="Unsupported language"):
        normalize_language("python")


@pytest.mark.parametrize("suffix", [".js", ".mjs", ".cjs", ".jsx", ".JS"])
def test_detect_language_from_path(suffix: str) -> None:
    assert detect_language_from_path(Path(f"a{suffix}")) == "javascript"


def test_resolve_language_prefers_explicit_language() -> None:
    assert resolve_language("js", Path("a.txt")) == "javascript"


def test_resolve_language_needs_a_hint() -> None:
    with pytest.raises(ValueError, match="Language must be provided"):
        resolve_language(None, None)


def test_default_file_name() -> None:
    assert default_file_name("javascript") == "memory.js"

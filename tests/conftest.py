"""Shared fixtures and helpers for tests."""

from collections.abc import Callable
from pathlib import Path

import pytest
from tree_sitter import Parser
from tree_sitter_language_pack import get_parser

from codex_docs.core.context import HandleError
from codex_docs.core.generator import DocGenerator
from codex_docs.core.javascript import parse_source
from codex_docs.db import DocIdCounter, InMemoryDocDatabase
from codex_docs.db.invalid import InvalidCodeLog

_REPO_ROOT = Path(__file__).parent.parent

GenerateSource = Callable[..., InMemoryDocDatabase]


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def javascript_parser() -> Parser:
    """Return a tree-sitter parser for JavaScript."""
    return get_parser("javascript")


@pytest.fixture
def in_memory_db() -> InMemoryDocDatabase:
    """Doc database with its own id counter so ids start at 0 in every test."""
    return InMemoryDocDatabase(DocIdCounter())


@pytest.fixture
def generate_source(in_memory_db: InMemoryDocDatabase, tmp_path: Path) -> GenerateSource:
    """Run the doc generator over a JavaScript snippet and return the populated database."""

    def _generate(
        source: str,
        file_path: str = "src/foo.js",
        handle_error: HandleError = "throw",
        invalid_code: InvalidCodeLog | None = None,
    ) -> InMemoryDocDatabase:
        generator = DocGenerator(
            parse_source(source),
            in_memory_db,
            file_path,
            root_path=tmp_path,
            handle_error=handle_error,
            invalid_code=invalid_code,
        )
        generator.generate()
        return in_memory_db

    return _generate

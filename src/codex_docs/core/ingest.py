from dataclasses import dataclass
from pathlib import Path

from codex_docs.core.config import get_handle_error, get_root_path
from codex_docs.core.context import HandleError
from codex_docs.core.generator import DocGenerator
from codex_docs.core.javascript import parse_file, parse_source
from codex_docs.core.languages import DEFAULT_LANGUAGE, default_file_name, resolve_language
from codex_docs.core.mocha_generator import TestDocGenerator
from codex_docs.core.ports.database import DocDatabase
from codex_docs.db.invalid import InvalidCodeLog


@dataclass(frozen=True)
class IngestResult:
    module_id: int
    language: str
    file_path: str
    invalid_code: InvalidCodeLog


def run_ingest(
    database: DocDatabase,
    path: str | None = None,
    code: str | None = None,
    language: str | None = None,
    test: bool = False,
    handle_error: HandleError | None = None,
    root: str | None = None,
    name: str | None = None,
) -> IngestResult:
    """Generate the docs of a file or code snippet into the doc database.

    ``name`` is the file path recorded for a code snippet; it defaults to
    ``memory.js``.
    """
    file_path = Path(path) if path and code is None else None
    hint_path = file_path or (Path(name) if name else None)
    if code is not None and language is None and hint_path is None:
        language = DEFAULT_LANGUAGE
    resolved_language = resolve_language(language, hint_path)

    if code is not None:
        ast = parse_source(code)
        doc_path = name or default_file_name(resolved_language)
    elif file_path is not None:
        ast = parse_file(file_path)
        doc_path = str(file_path.resolve())
    else:
        raise ValueError("Either a path or code must be provided.")

    invalid_code = InvalidCodeLog()
    generator_cls = TestDocGenerator if test else DocGenerator
    generator = generator_cls(
        ast,
        database,
        doc_path,
        root_path=root or get_root_path(),
        handle_error=handle_error or get_handle_error(),
        code=code,
        invalid_code=invalid_code,
    )
    module_id = generator.generate()

    return IngestResult(
        module_id=module_id,
        language=resolved_language,
        file_path=generator.ctx.file_path,
        invalid_code=invalid_code,
    )

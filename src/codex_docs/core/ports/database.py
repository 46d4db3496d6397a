from collections.abc import Callable
from typing import Any, Protocol

from codex_docs.models import DocObject

DocFilter = Callable[[DocObject], bool]


class DocDatabase(Protocol):
    def next_id(self) -> int: ...

    def insert(self, doc: DocObject, doc_filter: DocFilter | None = None) -> bool: ...

    def find(self, **query: Any) -> list[DocObject]: ...

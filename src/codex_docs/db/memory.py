from typing import Any

from codex_docs.core.ports.database import DocFilter
from codex_docs.db.helpers import matches_query
from codex_docs.db.ids import GLOBAL_DOC_IDS, DocIdCounter
from codex_docs.models import DocObject


class InMemoryDocDatabase:
    """Append-only doc store. ``find`` returns the stored objects, not copies."""

    def __init__(self, ids: DocIdCounter | None = None) -> None:
        self.ids = ids if ids is not None else GLOBAL_DOC_IDS
        self.docs: dict[int, DocObject] = {}

    def next_id(self) -> int:
        return self.ids.increment()

    def insert(self, doc: DocObject, doc_filter: DocFilter | None = None) -> bool:
        if doc_filter is not None and not doc_filter(doc):
            return False
        if doc.doc_id in self.docs:
            raise ValueError(f"Duplicate doc id {doc.doc_id}")
        self.docs[doc.doc_id] = doc
        return True

    def find(self, **query: Any) -> list[DocObject]:
        query = {key: value for key, value in query.items() if value is not None}
        return [doc for doc in self.docs.values() if matches_query(doc, query)]

    def find_one(self, **query: Any) -> DocObject | None:
        found = self.find(**query)
        return found[0] if found else None

    def get(self, doc_id: int) -> DocObject | None:
        return self.docs.get(doc_id)

    def all(self) -> list[DocObject]:
        return list(self.docs.values())

    def __len__(self) -> int:
        return len(self.docs)

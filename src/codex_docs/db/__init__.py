from codex_docs.db.helpers import make_longname
from codex_docs.db.ids import GLOBAL_DOC_IDS, DocIdCounter
from codex_docs.db.invalid import InvalidCodeLog
from codex_docs.db.memory import InMemoryDocDatabase

__all__ = [
    "GLOBAL_DOC_IDS",
    "DocIdCounter",
    "InMemoryDocDatabase",
    "InvalidCodeLog",
    "make_longname",
]

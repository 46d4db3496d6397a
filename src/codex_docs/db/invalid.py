import logging

from codex_docs.core import nodes as n
from codex_docs.core.ast_util import line_number_start
from codex_docs.models import InvalidCode

logger = logging.getLogger(__name__)


class InvalidCodeLog:
    """Collects per-node generation faults when errors are logged instead of raised."""

    def __init__(self) -> None:
        self.entries: list[InvalidCode] = []

    def add(self, file_path: str, node: n.Node | None, error: Exception) -> None:
        entry = InvalidCode(
            file_path=file_path,
            node_type=node.type if node is not None else "",
            line_number=line_number_start(node),
            message=str(error),
            error=error,
        )
        self.entries.append(entry)
        logger.warning("Invalid code in %s (line %s, %s): %s", file_path, entry.line_number, entry.node_type, error)

    def __len__(self) -> int:
        return len(self.entries)

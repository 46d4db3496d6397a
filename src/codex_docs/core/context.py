from dataclasses import dataclass, field
from typing import Literal

from codex_docs.core import nodes as n
from codex_docs.core.path_resolver import PathResolver
from codex_docs.core.ports.database import DocDatabase, DocFilter
from codex_docs.db.invalid import InvalidCodeLog

HandleError = Literal["log", "throw"]


@dataclass
class TraversalContext:
    """Per-file generation state, created fresh for each traversal."""

    ast: n.Program
    database: DocDatabase
    path_resolver: PathResolver
    handle_error: HandleError = "throw"
    invalid_code: InvalidCodeLog | None = None
    code: str | None = None
    module_id: int | None = None
    doc_filter: DocFilter | None = None
    parents: dict[n.Node, n.Node | None] = field(default_factory=dict)
    visited: set[n.Node] = field(default_factory=set)
    processed_classes: list[n.Node] = field(default_factory=list)
    pending_exports: list[n.Node] = field(default_factory=list)
    doc_names: dict[n.Node, str] = field(default_factory=dict)

    @property
    def file_path(self) -> str:
        return self.path_resolver.file_path

    def next_id(self) -> int:
        return self.database.next_id()

    def parent_of(self, node: n.Node) -> n.Node | None:
        return self.parents.get(node)

    def set_parent(self, node: n.Node, parent: n.Node | None) -> None:
        self.parents[node] = parent

    def mark_visited(self, node: n.Node) -> None:
        self.visited.add(node)

    def is_visited(self, node: n.Node) -> bool:
        return node in self.visited

    def ancestors(self, node: n.Node) -> list[n.Node]:
        chain: list[n.Node] = []
        parent = self.parent_of(node)
        while parent is not None:
            chain.append(parent)
            parent = self.parent_of(parent)
        return chain

    def find_up(self, node: n.Node, types: tuple[type[n.Node], ...]) -> n.Node | None:
        """Nearest ancestor of one of ``types``."""
        for ancestor in self.ancestors(node):
            if isinstance(ancestor, types):
                return ancestor
        return None

    def is_top_level(self, node: n.Node) -> bool:
        """True when the node, or its export wrapper, is a statement of the program body."""
        parent = self.parent_of(node)
        if isinstance(parent, n.EXPORT_NODES):
            node = parent
        return any(node is statement for statement in self.ast.body)

    def is_class_processed(self, class_node: n.Node | None) -> bool:
        return any(class_node is processed for processed in self.processed_classes)

import logging
from pathlib import Path
from typing import get_args

from codex_docs.core import nodes as n
from codex_docs.core.comments import traverse_comments
from codex_docs.core.context import HandleError, TraversalContext
from codex_docs.core.exports import apply_mutations, is_export_second_pass, plan_export, unwrap_export
from codex_docs.core.path_resolver import PathResolver
from codex_docs.core.ports.database import DocDatabase, DocFilter
from codex_docs.core.walker import SKIP, traverse
from codex_docs.db.invalid import InvalidCodeLog
from codex_docs.docs import FileDoc, MemoryDoc

logger = logging.getLogger(__name__)


def build_context(
    ast: n.Program,
    database: DocDatabase,
    file_path: str,
    root_path: str | Path | None = None,
    handle_error: HandleError = "throw",
    code: str | None = None,
    invalid_code: InvalidCodeLog | None = None,
    doc_filter: DocFilter | None = None,
) -> TraversalContext:
    """Validate generator inputs and create the per-file traversal context."""
    if not isinstance(ast, n.Program):
        raise TypeError(f"'ast' is not a 'Program': {type(ast).__name__}")
    if not isinstance(file_path, str):
        raise TypeError(f"'file_path' is not a 'string': {type(file_path).__name__}")
    if handle_error not in get_args(HandleError):
        raise ValueError(f"Unknown handle_error: {handle_error}. Expected one of {', '.join(get_args(HandleError))}")

    return TraversalContext(
        ast=ast,
        database=database,
        path_resolver=PathResolver(root_path or Path.cwd(), file_path),
        handle_error=handle_error,
        invalid_code=invalid_code if invalid_code is not None else InvalidCodeLog(),
        code=code,
        doc_filter=doc_filter,
    )


class DocGenerator:
    """Generates doc objects for one module in two passes.

    The first pass walks the AST once and inserts a doc for every classified
    node. Exports that refer to other declarations are queued and reconciled
    against the inserted docs after the walk.
    """

    def __init__(
        self,
        ast: n.Program,
        database: DocDatabase,
        file_path: str,
        root_path: str | Path | None = None,
        handle_error: HandleError = "throw",
        code: str | None = None,
        invalid_code: InvalidCodeLog | None = None,
        doc_filter: DocFilter | None = None,
    ) -> None:
        self.ctx = build_context(ast, database, file_path, root_path, handle_error, code, invalid_code, doc_filter)

    @property
    def invalid_code(self) -> InvalidCodeLog:
        assert self.ctx.invalid_code is not None
        return self.ctx.invalid_code

    def generate(self) -> int:
        """Insert the docs of the module and return the module doc id."""
        ctx = self.ctx
        module_id = ctx.next_id()
        ctx.module_id = module_id

        builder = MemoryDoc if ctx.code is not None else FileDoc
        ctx.database.insert(builder.create(module_id, module_id, ctx, ctx.ast, []), ctx.doc_filter)

        # a file holding nothing but comments
        if not ctx.ast.body and ctx.ast.inner_comments:
            try:
                traverse_comments(ctx, None, ctx.ast, ctx.ast.inner_comments)
            except Exception as error:
                self._handle_fault(ctx.ast, error)

        traverse(ctx.ast, self._enter_node)
        self._process_exports()

        logger.info("Generated docs for %s (module id %s)", ctx.file_path, module_id)
        return module_id

    def _enter_node(self, node: n.Node, parent: n.Node | None) -> object:
        try:
            if is_export_second_pass(self.ctx, node):
                self.ctx.pending_exports.append(node)
                return SKIP
            self._push(node, parent)
        except Exception as error:
            self._handle_fault(node, error)
        return None

    def _handle_fault(self, node: n.Node, error: Exception) -> None:
        if self.ctx.handle_error == "throw":
            raise error
        # log policy: record and continue with the next node
        self.invalid_code.add(self.ctx.file_path, node, error)

    def _push(self, node: n.Node, parent: n.Node | None) -> None:
        ctx = self.ctx
        if node is ctx.ast or ctx.is_visited(node):
            return

        is_last = _is_last_in_parent(node, parent)
        ctx.mark_visited(node)
        ctx.set_parent(node, parent)

        if isinstance(node, n.EXPORT_NODES):
            unwrap_export(ctx, node, is_last)
        else:
            self._traverse_node(node, parent, is_last)

    def _traverse_node(self, node: n.Node, parent: n.Node | None, is_last: bool) -> None:
        leading = node.leading_comments
        decorators = getattr(node, "decorators", None)
        # comments above a decorated declaration are attached to its first decorator
        if decorators and decorators[0].leading_comments and not leading:
            leading = decorators[0].leading_comments

        traverse_comments(self.ctx, node, parent, leading)

        if node.trailing_comments and is_last:
            traverse_comments(self.ctx, None, parent, node.trailing_comments)

    def _process_exports(self) -> None:
        ctx = self.ctx
        for export_node in ctx.pending_exports:
            try:
                apply_mutations(ctx, plan_export(ctx, export_node))
            except Exception as error:
                self._handle_fault(export_node, error)
        ctx.pending_exports.clear()


def _is_last_in_parent(node: n.Node, parent: n.Node | None) -> bool:
    body = getattr(parent, "body", None)
    return isinstance(body, list) and bool(body) and body[-1] is node

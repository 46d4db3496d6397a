import itertools
import logging
from pathlib import Path

from codex_docs.core import nodes as n
from codex_docs.core.comments import parse_doc_tags
from codex_docs.core.context import HandleError
from codex_docs.core.generator import build_context
from codex_docs.core.ports.database import DocDatabase, DocFilter
from codex_docs.core.walker import traverse
from codex_docs.db.invalid import InvalidCodeLog
from codex_docs.docs import TestDoc, TestFileDoc
from codex_docs.docs.mocha import MOCHA_DESCRIBE, MOCHA_IT

logger = logging.getLogger(__name__)

MOCHA_FUNCTIONS = (*MOCHA_DESCRIBE, *MOCHA_IT)


class TestDocGenerator:
    """Generates ``Test`` docs for the mocha blocks of a test file.

    Only ``describe``, ``context``, ``suite``, ``it`` and ``test`` calls in
    expression statements are documented; each gets a name unique within the
    file, and nested blocks are members of the enclosing block.
    """

    __test__ = False

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
        self._sequence = itertools.count()

    @property
    def invalid_code(self) -> InvalidCodeLog:
        assert self.ctx.invalid_code is not None
        return self.ctx.invalid_code

    def generate(self) -> int:
        ctx = self.ctx
        module_id = ctx.next_id()
        ctx.module_id = module_id
        ctx.database.insert(TestFileDoc.create(module_id, module_id, ctx, ctx.ast, []), ctx.doc_filter)

        traverse(ctx.ast, self._enter_node)

        logger.info("Generated test docs for %s (module id %s)", ctx.file_path, module_id)
        return module_id

    def _enter_node(self, node: n.Node, parent: n.Node | None) -> None:
        try:
            self._push(node, parent)
        except Exception as error:
            if self.ctx.handle_error == "throw":
                raise
            self.invalid_code.add(self.ctx.file_path, node, error)

    def _push(self, node: n.Node, parent: n.Node | None) -> None:
        ctx = self.ctx
        if ctx.is_visited(node):
            return

        ctx.mark_visited(node)
        ctx.set_parent(node, parent)

        if not isinstance(node, n.ExpressionStatement):
            return

        expression = node.expression
        if not isinstance(expression, n.CallExpression) or not isinstance(expression.callee, n.Identifier):
            return
        if expression.callee.name not in MOCHA_FUNCTIONS:
            return

        ctx.mark_visited(expression)
        ctx.set_parent(expression, node)
        ctx.doc_names[expression] = f"{expression.callee.name}{next(self._sequence)}"

        tags = parse_doc_tags(node.leading_comments)
        doc = TestDoc.create(ctx.next_id(), module_id=ctx.module_id, ctx=ctx, node=expression, tags=tags)
        ctx.database.insert(doc, ctx.doc_filter)

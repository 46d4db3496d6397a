from codex_docs.core import nodes as n
from codex_docs.docs.base import AbstractDoc
from codex_docs.models import DocCategory

MOCHA_DESCRIBE = ("describe", "context", "suite")
MOCHA_IT = ("it", "test")


class TestDoc(AbstractDoc):
    """Doc for a mocha ``describe``/``it`` call expression."""

    __test__ = False

    category = DocCategory.TEST

    STEPS = ("test_kind",) + AbstractDoc.STEPS + ("test_targets",)

    def _callee(self) -> str:
        callee = self._node.callee if isinstance(self._node, n.CallExpression) else None
        return callee.name if isinstance(callee, n.Identifier) else ""

    def _test_kind(self) -> None:
        callee = self._callee()
        if callee in MOCHA_DESCRIBE:
            self._value.test_kind = "describe"
        elif callee in MOCHA_IT:
            self._value.test_kind = "it"
        else:
            raise ValueError(f"Unknown name. node.callee.name = {callee}")

    def _name(self) -> None:
        self._value.name = self._ctx.doc_names.get(self._node)

    def _memberof(self) -> None:
        chain = [self._ctx.doc_names[a] for a in self._ctx.ancestors(self._node) if a in self._ctx.doc_names]
        if chain:
            self._value.memberof = f"{self._ctx.file_path}~{'.'.join(reversed(chain))}"
        else:
            self._value.memberof = self._ctx.file_path
        self._value.test_depth = len(chain)

    def _desc(self) -> None:
        super()._desc()
        if self._value.description is not None or not isinstance(self._node, n.CallExpression):
            return
        first = self._node.arguments[0] if self._node.arguments else None
        if isinstance(first, n.Literal) and isinstance(first.value, str):
            self._value.description = first.value

    def _test_targets(self) -> None:
        self._value.test_targets = self._find_all_tag_values(["@test"])

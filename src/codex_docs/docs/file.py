from pathlib import Path

from codex_docs.docs.base import AbstractDoc
from codex_docs.models import DocCategory


class FileDoc(AbstractDoc):
    """Doc for a source file; its id becomes the module id of every doc in the file."""

    category = DocCategory.FILE

    STEPS = ("name", "memberof", "longname", "access", "desc", "content")

    def _name(self) -> None:
        self._value.name = self._ctx.file_path

    def _memberof(self) -> None:
        self._value.memberof = None

    def _content(self) -> None:
        path = Path(self._ctx.path_resolver.absolute_path)
        if path.is_file():
            self._value.content = path.read_text(encoding="utf-8")


class MemoryDoc(FileDoc):
    """Doc for source code that only exists in memory."""

    category = DocCategory.MEMORY

    def _content(self) -> None:
        self._value.content = self._ctx.code


class TestFileDoc(FileDoc):
    category = DocCategory.TEST_FILE

    # not a test class
    __test__ = False

    def _content(self) -> None:
        if self._ctx.code is not None:
            self._value.content = self._ctx.code
            return
        super()._content()

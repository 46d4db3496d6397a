from codex_docs.core import nodes as n
from codex_docs.docs.base import AbstractDoc
from codex_docs.models import DocCategory
from codex_docs.parser.params import parse_param, parse_param_value


class VirtualTypedefDoc(AbstractDoc):
    """Doc for a ``@typedef {type} Name`` comment, whether or not a node follows it."""

    category = DocCategory.VIRTUAL_TYPEDEF

    STEPS = AbstractDoc.STEPS + ("type", "properties")

    def _typedef(self) -> tuple[str | None, str | None]:
        value = self._find_tag_value(["@typedef"])
        if value is None:
            return None, None
        parsed = parse_param_value(value, type=True, name=True, desc=False)
        return parsed.type_text, parsed.param_name

    def _name(self) -> None:
        self._value.name = self._typedef()[1]

    def _memberof(self) -> None:
        class_node = self._ctx.find_up(self._node, (n.ClassDeclaration,))
        if isinstance(class_node, n.ClassDeclaration) and class_node.id:
            self._value.memberof = f"{self._ctx.file_path}~{class_node.id.name}"
        else:
            self._value.memberof = self._ctx.file_path

    def _type(self) -> None:
        type_text = self._typedef()[0]
        if type_text is not None:
            self._value.type = parse_param(type_text)

    def _properties(self) -> None:
        self._value.properties = self._parse_all(["@property"])


class VirtualExternalDoc(AbstractDoc):
    """Doc for an ``@external {Name} https://link`` comment."""

    category = DocCategory.VIRTUAL_EXTERNAL

    STEPS = AbstractDoc.STEPS + ("external_link",)

    def _external(self) -> tuple[str | None, str | None]:
        value = self._find_tag_value(["@external"])
        if value is None:
            return None, None
        parsed = parse_param_value(value, type=True, name=False, desc=True)
        return parsed.type_text, parsed.param_desc

    def _name(self) -> None:
        self._value.name = self._external()[0]

    def _external_link(self) -> None:
        self._value.external_link = self._external()[1] or None

"""Base doc builder: turns a (node, tags) pair into a ``DocObject``.

Each builder runs an ordered list of steps. A step reads the tags first and
falls back to the node's shape when no tag supplies the value; subclasses
extend ``STEPS`` and override individual steps.
"""

from codex_docs.core import nodes as n
from codex_docs.core.ast_util import find_class_declaration_node, find_path_in_import_declaration, line_number_start
from codex_docs.core.context import TraversalContext
from codex_docs.db.helpers import make_longname
from codex_docs.models import DocCategory, DocObject, ParsedParam, Tag
from codex_docs.parser.params import parse_tag_value

KNOWN_TAGS = frozenset(
    {
        "@_undocument",
        "@abstract",
        "@access",
        "@deprecated",
        "@desc",
        "@emits",
        "@example",
        "@experimental",
        "@extends",
        "@external",
        "@ignore",
        "@implements",
        "@interface",
        "@listens",
        "@override",
        "@param",
        "@private",
        "@property",
        "@protected",
        "@public",
        "@return",
        "@returns",
        "@see",
        "@since",
        "@test",
        "@throws",
        "@todo",
        "@type",
        "@typedef",
        "@version",
    }
)


class AbstractDoc:
    category: DocCategory

    STEPS: tuple[str, ...] = (
        "name",
        "memberof",
        "static",
        "longname",
        "access",
        "export",
        "desc",
        "line_number",
        "examples",
        "see",
        "since",
        "version",
        "deprecated",
        "experimental",
        "todo",
        "ignore",
        "undocument",
        "unknown",
    )

    def __init__(self, doc_id: int, module_id: int | None, ctx: TraversalContext, node: n.Node, tags: list[Tag]) -> None:
        self._ctx = ctx
        self._node = node
        self._tags = tags
        self._value = DocObject(doc_id=doc_id, category=self.category, module_id=module_id, file_path=ctx.file_path)

    @classmethod
    def create(
        cls, doc_id: int, module_id: int | None, ctx: TraversalContext, node: n.Node, tags: list[Tag]
    ) -> DocObject:
        builder = cls(doc_id, module_id, ctx, node, tags)
        builder.apply()
        return builder.value

    @property
    def value(self) -> DocObject:
        return self._value

    def apply(self) -> None:
        for step in self.STEPS:
            getattr(self, f"_{step}")()

    # tag lookup -----------------------------------------------------------

    def _find_all_tags(self, names: list[str]) -> list[Tag]:
        return [tag for tag in self._tags if tag.tag_name in names]

    def _find_tag(self, names: list[str]) -> Tag | None:
        found = self._find_all_tags(names)
        return found[-1] if found else None

    def _find_tag_value(self, names: list[str]) -> str | None:
        tag = self._find_tag(names)
        return tag.tag_value if tag else None

    def _find_all_tag_values(self, names: list[str]) -> list[str] | None:
        values = [tag.tag_value for tag in self._find_all_tags(names)]
        return values or None

    def _parse_all(self, names: list[str], name: bool = True) -> list[ParsedParam] | None:
        values = self._find_all_tag_values(names)
        if values is None:
            return None
        return [parse_tag_value(value, type=True, name=name, desc=True) for value in values]

    # longname resolution --------------------------------------------------

    def _find_class_longname(self, class_name: str | None) -> str | None:
        if not class_name:
            return None

        if find_class_declaration_node(self._ctx.ast, class_name, include_exports=True) is not None:
            return f"{self._ctx.file_path}~{class_name}"

        import_path = find_path_in_import_declaration(self._ctx.ast, class_name)
        if import_path:
            return f"{self._ctx.path_resolver.resolve(import_path)}~{class_name}"

        return None

    def _resolve_longname(self, name: str) -> str:
        import_path = find_path_in_import_declaration(self._ctx.ast, name)
        if import_path:
            return f"{self._ctx.path_resolver.resolve(import_path)}~{name}"
        return self._find_class_longname(name) or name

    # steps ----------------------------------------------------------------

    def _name(self) -> None:
        pass

    def _memberof(self) -> None:
        self._value.memberof = self._ctx.file_path

    def _static(self) -> None:
        self._value.static = True

    def _longname(self) -> None:
        memberof = self._value.memberof
        if memberof is None:
            self._value.longname = self._value.name
            return
        self._value.longname = make_longname(memberof, self._value.name, self._value.static)

    def _access(self) -> None:
        access = self._find_tag_value(["@access"])
        if access:
            self._value.access = access
            return

        tag = self._find_tag(["@public", "@protected", "@private"])
        if tag:
            self._value.access = tag.tag_name.removeprefix("@")
        elif self._value.name and self._value.name.startswith("_"):
            self._value.access = "private"
        else:
            self._value.access = "public"

    def _export(self) -> None:
        pass

    def _desc(self) -> None:
        self._value.description = self._find_tag_value(["@desc"])

    def _line_number(self) -> None:
        self._value.line_number = line_number_start(self._node)

    def _examples(self) -> None:
        self._value.examples = self._find_all_tag_values(["@example"])

    def _see(self) -> None:
        self._value.see = self._find_all_tag_values(["@see"])

    def _since(self) -> None:
        self._value.since = self._find_tag_value(["@since"])

    def _version(self) -> None:
        self._value.version = self._find_tag_value(["@version"])

    def _deprecated(self) -> None:
        tag = self._find_tag(["@deprecated"])
        if tag:
            self._value.deprecated = tag.tag_value or True

    def _experimental(self) -> None:
        tag = self._find_tag(["@experimental"])
        if tag:
            self._value.experimental = tag.tag_value or True

    def _todo(self) -> None:
        self._value.todo = self._find_all_tag_values(["@todo"])

    def _ignore(self) -> None:
        self._value.ignore = self._find_tag(["@ignore"]) is not None

    def _undocument(self) -> None:
        self._value.undocument = self._find_tag(["@_undocument"]) is not None

    def _unknown(self) -> None:
        unknown = [tag for tag in self._tags if tag.tag_name not in KNOWN_TAGS]
        self._value.unknown = unknown or None

    # shared by callables --------------------------------------------------

    def _params(self) -> None:
        self._value.params = self._parse_all(["@param"])

    def _return(self) -> None:
        value = self._find_tag_value(["@return", "@returns"])
        if value is not None:
            self._value.return_ = parse_tag_value(value, type=True, name=False, desc=True)

    def _type(self) -> None:
        value = self._find_tag_value(["@type"])
        if value is not None:
            self._value.type = parse_tag_value(value, type=True, name=False, desc=False)

    def _throws(self) -> None:
        self._value.throws = self._parse_all(["@throws"], name=False)

    def _emits(self) -> None:
        self._value.emits = self._parse_all(["@emits"], name=False)

    def _listens(self) -> None:
        self._value.listens = self._parse_all(["@listens"], name=False)

    def _abstract(self) -> None:
        self._value.abstract = self._find_tag(["@abstract"]) is not None

    def _override(self) -> None:
        self._value.override = self._find_tag(["@override"]) is not None


class ModuleDoc(AbstractDoc):
    """Base for docs of module-level declarations (class, function, variable, assignment)."""

    def _export(self) -> None:
        for ancestor in self._ctx.ancestors(self._node):
            if isinstance(ancestor, n.ExportNamedDeclaration):
                self._value.export = True
                self._value.import_style = f"{{{self._value.name}}}"
                return
            if isinstance(ancestor, n.ExportDefaultDeclaration):
                # direct default export; the separated form gets its import style in the export pass
                self._value.export = True
                self._value.import_style = None
                return

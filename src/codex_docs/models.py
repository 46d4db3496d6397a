from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class Position(BaseModel):
    line: int
    column: int


class SourceLocation(BaseModel):
    start: Position
    end: Position


class Comment(BaseModel):
    kind: Literal["CommentBlock", "CommentLine"]
    value: str
    loc: SourceLocation | None = None


class Tag(BaseModel):
    tag_name: str
    tag_value: str


class DocCategory(str, Enum):
    FILE = "File"
    MEMORY = "Memory"
    TEST_FILE = "TestFile"
    MODULE = "Module"
    MODULE_CLASS = "ModuleClass"
    MODULE_FUNCTION = "ModuleFunction"
    MODULE_VARIABLE = "ModuleVariable"
    MODULE_ASSIGNMENT = "ModuleAssignment"
    CLASS_METHOD = "ClassMethod"
    CLASS_MEMBER = "ClassMember"
    CLASS_PROPERTY = "ClassProperty"
    VIRTUAL_TYPEDEF = "VirtualTypedef"
    VIRTUAL_EXTERNAL = "VirtualExternal"
    TEST = "Test"


class ParsedParam(BaseModel):
    types: list[str] = Field(default_factory=list)
    name: str | None = None
    optional: bool | None = None
    nullable: bool | None = None
    spread: bool | None = None
    default_value: str | None = None
    default_raw: Any = None
    description: str | None = None


class Decorator(BaseModel):
    name: str
    arguments: str | None = None


class DocObject(BaseModel):
    """A documentation record for one program entity.

    Instances are stored by reference in the DocDB; the second export pass
    mutates them in place.
    """

    model_config = ConfigDict(populate_by_name=True)

    doc_id: int
    category: DocCategory
    module_id: int | None = None
    file_path: str
    name: str | None = None
    memberof: str | None = None
    longname: str | None = None
    description: str | None = None
    line_number: int | None = None
    access: str | None = None
    export: bool = False
    import_style: str | None = None
    ignore: bool = False
    undocument: bool = False
    static: bool = True
    pseudo_export: bool = False

    params: list[ParsedParam] | None = None
    return_: ParsedParam | None = Field(default=None, alias="return")
    type: ParsedParam | None = None
    properties: list[ParsedParam] | None = None
    async_: bool = Field(default=False, alias="async")
    generator: bool = False
    accessor: bool = False
    qualifier: str | None = None
    extends: list[str] | None = None
    expression_extends: str | None = None
    implements: list[str] | None = None
    interface: bool = False
    abstract: bool = False
    override: bool = False
    decorators: list[Decorator] | None = None
    throws: list[ParsedParam] | None = None
    emits: list[ParsedParam] | None = None
    listens: list[ParsedParam] | None = None

    examples: list[str] | None = None
    see: list[str] | None = None
    todo: list[str] | None = None
    since: str | None = None
    version: str | None = None
    deprecated: bool | str = False
    experimental: bool | str = False
    unknown: list[Tag] | None = None

    content: str | None = None
    external_link: str | None = None
    test_kind: str | None = None
    test_depth: int | None = None
    test_targets: list[str] | None = None


class InvalidCode(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    file_path: str
    node_type: str
    line_number: int | None = None
    message: str
    error: Exception

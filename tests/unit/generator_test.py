import logging

import pytest

from codex_docs.core import nodes as n
from codex_docs.core.generator import DocGenerator
from codex_docs.core.javascript import parse_source
from codex_docs.db import DocIdCounter, InMemoryDocDatabase
from codex_docs.db.invalid import InvalidCodeLog
from codex_docs.models import DocCategory
from tests.conftest import GenerateSource


def test_module_doc_is_inserted_first(generate_source: GenerateSource) -> None:
    db = generate_source("class Foo {}\n")

    file_doc = db.get(0)
    assert file_doc is not None
    assert file_doc.category is DocCategory.FILE
    assert file_doc.name == "src/foo.js"
    assert file_doc.module_id == 0


def test_undocumented_class_gets_placeholder_doc(generate_source: GenerateSource) -> None:
    db = generate_source("class Foo {}\n")

    cls = db.find_one(category=DocCategory.MODULE_CLASS)
    assert cls is not None
    assert cls.name == "Foo"
    assert cls.longname == "src/foo.js~Foo"
    assert cls.memberof == "src/foo.js"
    assert cls.undocument is True
    assert cls.export is False
    assert cls.module_id == 0


def test_documented_class_and_method(generate_source: GenerateSource) -> None:
    source = """
/**
 * A foo.
 */
class Foo {
  /**
   * Bar it.
   * @param {number} x - the x
   * @returns {string}
   */
  bar(x) { return 'a'; }
}
"""
    db = generate_source(source)

    cls = db.find_one(category=DocCategory.MODULE_CLASS, name="Foo")
    assert cls is not None
    assert cls.description == "A foo."
    assert cls.undocument is False

    method = db.find_one(category=DocCategory.CLASS_METHOD, name="bar")
    assert method is not None
    assert method.memberof == "src/foo.js~Foo"
    assert method.longname == "src/foo.js~Foo#bar"
    assert method.static is False
    assert method.description == "Bar it."
    assert method.params is not None and method.params[0].name == "x"
    assert method.params[0].types == ["number"]
    assert method.return_ is not None and method.return_.types == ["string"]


def test_class_method_outside_processed_class_is_rejected(
    generate_source: GenerateSource, caplog: pytest.LogCaptureFixture
) -> None:
    source = """
function make() {
  return class {
    /** hi */
    run() {}
  };
}
"""
    with caplog.at_level(logging.WARNING):
        db = generate_source(source)

    assert db.find(category=DocCategory.CLASS_METHOD) == []
    assert "This method is not in class" in caplog.text
    assert db.find_one(category=DocCategory.MODULE_FUNCTION, name="make") is not None


def test_this_member_in_constructor(generate_source: GenerateSource) -> None:
    source = """
class Foo {
  constructor() {
    /** the count */
    this.count = 0;
  }
}
"""
    db = generate_source(source)

    member = db.find_one(category=DocCategory.CLASS_MEMBER, name="count")
    assert member is not None
    assert member.memberof == "src/foo.js~Foo"
    assert member.longname == "src/foo.js~Foo#count"
    assert member.description == "the count"
    assert member.type is not None and member.type.types == ["number"]


def test_this_assignment_in_free_function_is_not_a_member(generate_source: GenerateSource) -> None:
    db = generate_source("function bind() {\n  this.x = 1;\n}\n")

    assert db.find(category=DocCategory.CLASS_MEMBER) == []


def test_accessors_are_class_members(generate_source: GenerateSource) -> None:
    db = generate_source("class Foo {\n  get size() { return 1; }\n}\n")

    accessor = db.find_one(name="size")
    assert accessor is not None
    assert accessor.category is DocCategory.CLASS_MEMBER
    assert accessor.accessor is True
    assert accessor.qualifier == "get"
    assert accessor.type is not None and accessor.type.types == ["number"]


def test_class_property(generate_source: GenerateSource) -> None:
    db = generate_source("class Foo {\n  /** the flag */\n  static flag = true;\n}\n")

    prop = db.find_one(category=DocCategory.CLASS_PROPERTY, name="flag")
    assert prop is not None
    assert prop.static is True
    assert prop.longname == "src/foo.js~Foo.flag"
    assert prop.type is not None and prop.type.types == ["boolean"]


def test_variables_functions_and_assignments(generate_source: GenerateSource) -> None:
    source = """
/** a number */
const answer = 42;
const make = () => 1;
export default total = 3;
"""
    db = generate_source(source)

    variable = db.find_one(category=DocCategory.MODULE_VARIABLE, name="answer")
    assert variable is not None
    assert variable.description == "a number"
    assert variable.type is not None and variable.type.types == ["number"]

    function = db.find_one(category=DocCategory.MODULE_FUNCTION, name="make")
    assert function is not None
    assert function.return_ is None

    assignment = db.find_one(category=DocCategory.MODULE_ASSIGNMENT, name="total")
    assert assignment is not None
    assert assignment.export is True


def test_private_names_get_private_access(generate_source: GenerateSource) -> None:
    db = generate_source("function _hidden() {}\n/** @protected */\nfunction shown() {}\n")

    hidden = db.find_one(name="_hidden")
    shown = db.find_one(name="shown")
    assert hidden is not None and hidden.access == "private"
    assert shown is not None and shown.access == "protected"


def test_direct_default_export_has_no_import_style(generate_source: GenerateSource) -> None:
    db = generate_source("export default class Foo {}\n")

    cls = db.find_one(category=DocCategory.MODULE_CLASS, name="Foo")
    assert cls is not None
    assert cls.export is True
    assert cls.import_style is None


def test_anonymous_default_function_is_named_after_the_file(generate_source: GenerateSource) -> None:
    db = generate_source("export default function () {}\n", file_path="src/foo-bar.js")

    function = db.find_one(category=DocCategory.MODULE_FUNCTION)
    assert function is not None
    assert function.name == "fooBar"
    assert function.export is True


def test_separated_default_export_uses_name_as_import_style(generate_source: GenerateSource) -> None:
    db = generate_source("class Foo {}\nexport default Foo;\n")

    cls = db.find_one(category=DocCategory.MODULE_CLASS, name="Foo")
    assert cls is not None
    assert cls.export is True
    assert cls.import_style == "Foo"


def test_named_export_function(generate_source: GenerateSource) -> None:
    db = generate_source("export function foo() {}\n")

    function = db.find_one(category=DocCategory.MODULE_FUNCTION, name="foo")
    assert function is not None
    assert function.export is True
    assert function.import_style == "{foo}"


def test_export_specifiers(generate_source: GenerateSource) -> None:
    db = generate_source("function foo() {}\nclass Bar {}\nexport { foo, Bar as Baz };\n")

    function = db.find_one(name="foo")
    cls = db.find_one(name="Bar")
    assert function is not None and function.export is True and function.import_style == "{foo}"
    assert cls is not None and cls.export is True and cls.import_style == "{Baz}"


def test_export_specifier_of_instance_updates_variable(generate_source: GenerateSource) -> None:
    db = generate_source("class Foo {}\nlet foo = new Foo();\nexport { foo };\n")

    variable = db.find_one(category=DocCategory.MODULE_VARIABLE, name="foo")
    assert variable is not None
    assert variable.export is True
    assert variable.import_style == "{foo}"
    assert variable.type is not None and variable.type.types == ["src/foo.js~Foo"]

    cls = db.find_one(category=DocCategory.MODULE_CLASS, name="Foo")
    assert cls is not None
    assert cls.export is False
    assert cls.import_style is None


def test_re_exports_leave_local_docs_alone(generate_source: GenerateSource) -> None:
    db = generate_source("function foo() {}\nexport { foo } from './other.js';\n")

    function = db.find_one(name="foo")
    assert function is not None
    assert function.export is False


def test_ignore_on_deferred_export(generate_source: GenerateSource) -> None:
    db = generate_source("class Foo {}\n/** @ignore */\nexport default Foo;\n")

    cls = db.find_one(category=DocCategory.MODULE_CLASS, name="Foo")
    assert cls is not None
    assert cls.export is False


def test_default_export_of_instance_synthesizes_variable(generate_source: GenerateSource) -> None:
    db = generate_source("class Foo {}\nexport default new Foo();\n")

    cls = db.find_one(category=DocCategory.MODULE_CLASS, name="Foo")
    assert cls is not None
    assert cls.export is True
    assert cls.import_style is None

    variables = db.find(category=DocCategory.MODULE_VARIABLE)
    assert len(variables) == 1
    variable = variables[0]
    assert variable.name == "foo"
    assert variable.export is True
    assert variable.import_style == "foo"
    assert variable.pseudo_export is True
    assert variable.type is not None and variable.type.types == ["src/foo.js~Foo"]
    assert variable.doc_id == 2


def test_named_export_of_instance_synthesizes_variable(generate_source: GenerateSource) -> None:
    db = generate_source("class Foo {}\nexport const foo = new Foo();\n")

    variables = db.find(category=DocCategory.MODULE_VARIABLE)
    assert len(variables) == 1
    assert variables[0].import_style == "{foo}"
    assert variables[0].type is not None and variables[0].type.types == ["src/foo.js~Foo"]


def test_named_instance_export_keeps_exported_class_import_style(generate_source: GenerateSource) -> None:
    db = generate_source("export class Foo {}\nexport const foo = new Foo();\n")

    cls = db.find_one(category=DocCategory.MODULE_CLASS, name="Foo")
    assert cls is not None
    assert cls.export is True
    assert cls.import_style == "{Foo}"

    variables = db.find(category=DocCategory.MODULE_VARIABLE)
    assert len(variables) == 1
    assert variables[0].export is True
    assert variables[0].import_style == "{foo}"
    assert variables[0].type is not None and variables[0].type.types == ["src/foo.js~Foo"]


def test_default_export_of_instance_of_imported_class(generate_source: GenerateSource) -> None:
    db = generate_source("import Foo from './foo2.js';\nconst foo = new Foo();\nexport default foo;\n")

    variables = db.find(category=DocCategory.MODULE_VARIABLE, name="foo")
    assert len(variables) == 1
    variable = variables[0]
    assert variable.export is True
    assert variable.import_style == "foo"
    assert variable.ignore is False
    assert db.find(category=DocCategory.MODULE_CLASS) == []


def test_separated_instance_export_updates_existing_variable_once(generate_source: GenerateSource) -> None:
    source = """
class Foo {}
/** the instance */
let foo = new Foo();
/** exported */
export default foo;
"""
    db = generate_source(source)

    variables = db.find(category=DocCategory.MODULE_VARIABLE, name="foo")
    assert len(variables) == 1
    variable = variables[0]
    assert variable.description == "the instance\nexported"
    assert variable.export is True
    assert variable.import_style == "foo"
    assert variable.pseudo_export is False
    assert variable.type is not None and variable.type.types == ["src/foo.js~Foo"]


def test_typedef_in_non_final_comment(generate_source: GenerateSource) -> None:
    source = "/** @typedef {Object} Options */\n/** A foo. */\nclass Foo {}\n"
    db = generate_source(source)

    typedef = db.find_one(category=DocCategory.VIRTUAL_TYPEDEF)
    assert typedef is not None
    assert typedef.name == "Options"
    assert typedef.longname == "src/foo.js~Options"
    assert typedef.type is not None and typedef.type.types == ["Object"]

    cls = db.find_one(category=DocCategory.MODULE_CLASS, name="Foo")
    assert cls is not None and cls.description == "A foo."


def test_comment_only_file(generate_source: GenerateSource) -> None:
    db = generate_source("/**\n * @external {Buffer} https://nodejs.org/api/buffer.html\n */\n")

    external = db.find_one(category=DocCategory.VIRTUAL_EXTERNAL)
    assert external is not None
    assert external.name == "Buffer"
    assert external.external_link == "https://nodejs.org/api/buffer.html"


def test_trailing_comments_of_last_statement(generate_source: GenerateSource) -> None:
    db = generate_source("class Foo {}\n/** @typedef {number} Count */\n")

    typedef = db.find_one(category=DocCategory.VIRTUAL_TYPEDEF, name="Count")
    assert typedef is not None


def test_throw_policy_propagates_faults(generate_source: GenerateSource) -> None:
    with pytest.raises(ValueError, match="Empty type found"):
        generate_source("/** @param {} x */\nfunction foo(x) {}\n")


def test_log_policy_records_faults_and_continues(generate_source: GenerateSource) -> None:
    invalid_code = InvalidCodeLog()
    db = generate_source(
        "/** @param {} x */\nfunction foo(x) {}\nclass Bar {}\n",
        handle_error="log",
        invalid_code=invalid_code,
    )

    assert len(invalid_code) == 1
    entry = invalid_code.entries[0]
    assert entry.file_path == "src/foo.js"
    assert entry.node_type == "FunctionDeclaration"
    assert entry.line_number == 2
    assert db.find(category=DocCategory.MODULE_FUNCTION) == []
    assert db.find_one(category=DocCategory.MODULE_CLASS, name="Bar") is not None


def test_memory_doc_for_code() -> None:
    db = InMemoryDocDatabase(DocIdCounter())
    code = "const a = 1;\n"

    DocGenerator(parse_source(code), db, "memory.js", code=code).generate()

    memory = db.get(0)
    assert memory is not None
    assert memory.category is DocCategory.MEMORY
    assert memory.content == code


def test_doc_filter_applies_to_every_insert() -> None:
    db = InMemoryDocDatabase(DocIdCounter())
    source = "class Foo {}\nfunction bar() {}\n"

    DocGenerator(
        parse_source(source), db, "src/foo.js", doc_filter=lambda doc: doc.category is DocCategory.MODULE_CLASS
    ).generate()

    assert [doc.category for doc in db.all()] == [DocCategory.MODULE_CLASS]


def test_generator_rejects_non_program_ast() -> None:
    db = InMemoryDocDatabase(DocIdCounter())

    with pytest.raises(TypeError, match="Program"):
        DocGenerator(n.Identifier(name="x"), db, "a.js")  # type: ignore[arg-type]


def test_generator_rejects_non_string_file_path() -> None:
    db = InMemoryDocDatabase(DocIdCounter())

    with pytest.raises(TypeError, match="string"):
        DocGenerator(n.Program(), db, 42)  # type: ignore[arg-type]


def test_generator_rejects_unknown_error_policy() -> None:
    db = InMemoryDocDatabase(DocIdCounter())

    with pytest.raises(ValueError, match="handle_error"):
        DocGenerator(n.Program(), db, "a.js", handle_error="ignore")  # type: ignore[arg-type]

from pathlib import Path

import pytest
from tree_sitter import Parser

from codex_docs.core import nodes as n
from codex_docs.core.javascript import JavaScriptConverter, _parse_number, parse_file, parse_source


def test_parse_source_builds_variable_declarations() -> None:
    program = parse_source("const a = 1, b = 'x';")

    declaration = program.body[0]
    assert isinstance(declaration, n.VariableDeclaration)
    assert declaration.kind == "const"
    assert [d.id.name for d in declaration.declarations if isinstance(d.id, n.Identifier)] == ["a", "b"]
    first, second = (d.init for d in declaration.declarations)
    assert isinstance(first, n.Literal) and first.value == 1 and first.kind == "number"
    assert isinstance(second, n.Literal) and second.value == "x" and second.kind == "string"


def test_var_declarations_default_to_var_kind() -> None:
    declaration = parse_source("var a;").body[0]

    assert isinstance(declaration, n.VariableDeclaration)
    assert declaration.kind == "var"
    assert declaration.declarations[0].init is None


def test_comments_attach_as_leading_and_trailing() -> None:
    program = parse_source("/** doc */\nclass A {}\n// tail\n")

    cls = program.body[0]
    assert isinstance(cls, n.ClassDeclaration)
    assert [c.value for c in cls.leading_comments] == ["* doc "]
    assert cls.leading_comments[0].kind == "CommentBlock"
    assert [c.value for c in cls.trailing_comments] == [" tail"]
    assert cls.trailing_comments[0].kind == "CommentLine"


def test_comments_of_empty_program_are_inner_comments() -> None:
    program = parse_source("/** @typedef {Object} Options */\n")

    assert program.body == []
    assert [c.value for c in program.inner_comments] == ["* @typedef {Object} Options "]


def test_comments_in_class_bodies_attach_to_members() -> None:
    program = parse_source("class A {\n  /** run it */\n  run() {}\n}\n")

    cls = program.body[0]
    assert isinstance(cls, n.ClassDeclaration)
    method = cls.body.body[0]
    assert isinstance(method, n.ClassMethod)
    assert [c.value for c in method.leading_comments] == ["* run it "]


def test_class_members_and_method_kinds() -> None:
    source = """
class A extends B {
  static count = 0;
  constructor() { this.x = 1; }
  get size() { return 1; }
  set size(value) {}
  static async *items() {}
}
"""
    cls = parse_source(source).body[0]

    assert isinstance(cls, n.ClassDeclaration)
    assert isinstance(cls.super_class, n.Identifier) and cls.super_class.name == "B"
    prop, ctor, getter, setter, items = cls.body.body
    assert isinstance(prop, n.ClassProperty) and prop.static
    assert isinstance(prop.key, n.Identifier) and prop.key.name == "count"
    assert isinstance(ctor, n.ClassMethod) and ctor.kind == "constructor"
    assert isinstance(getter, n.ClassMethod) and getter.kind == "get"
    assert isinstance(setter, n.ClassMethod) and setter.kind == "set"
    assert [p.name for p in setter.params if isinstance(p, n.Identifier)] == ["value"]
    assert isinstance(items, n.ClassMethod)
    assert items.kind == "method" and items.static and items.async_ and items.generator


def test_this_member_assignment_shape() -> None:
    cls = parse_source("class A { constructor() { this.x = 1; } }").body[0]

    assert isinstance(cls, n.ClassDeclaration)
    ctor = cls.body.body[0]
    assert isinstance(ctor, n.ClassMethod) and isinstance(ctor.body, n.BlockStatement)
    statement = ctor.body.body[0]
    assert isinstance(statement, n.ExpressionStatement)
    assignment = statement.expression
    assert isinstance(assignment, n.AssignmentExpression)
    assert isinstance(assignment.left, n.MemberExpression)
    assert isinstance(assignment.left.object, n.ThisExpression)
    assert isinstance(assignment.left.property, n.Identifier) and assignment.left.property.name == "x"


def test_decorator_comments_are_attached_to_the_first_decorator() -> None:
    cls = parse_source("/** doc */\n@dec\nclass A {}\n").body[0]

    assert isinstance(cls, n.ClassDeclaration)
    assert cls.leading_comments == []
    assert [c.value for c in cls.decorators[0].leading_comments] == ["* doc "]
    assert isinstance(cls.decorators[0].expression, n.Identifier)


def test_functions_and_arrows() -> None:
    program = parse_source("async function f(a, b = 1, ...rest) {}\nconst g = x => x;\nfunction* h() {}\n")

    f, g_declaration, h = program.body
    assert isinstance(f, n.FunctionDeclaration) and f.async_
    assert isinstance(f.id, n.Identifier) and f.id.name == "f"
    assert [type(p) for p in f.params] == [n.Identifier, n.AssignmentPattern, n.RestElement]
    assert isinstance(g_declaration, n.VariableDeclaration)
    arrow = g_declaration.declarations[0].init
    assert isinstance(arrow, n.ArrowFunctionExpression)
    assert [p.name for p in arrow.params if isinstance(p, n.Identifier)] == ["x"]
    assert isinstance(h, n.FunctionDeclaration) and h.generator


def test_export_forms() -> None:
    program = parse_source(
        "export class A {}\n"
        "export default foo;\n"
        "export { a, b as c };\n"
        "export * from './all.js';\n"
    )

    named, default, specifiers, star = program.body
    assert isinstance(named, n.ExportNamedDeclaration) and isinstance(named.declaration, n.ClassDeclaration)
    assert isinstance(default, n.ExportDefaultDeclaration) and isinstance(default.declaration, n.Identifier)
    assert isinstance(specifiers, n.ExportNamedDeclaration)
    assert [(s.local.name if s.local else None, s.exported.name if s.exported else None) for s in specifiers.specifiers] == [
        ("a", None),
        ("b", "c"),
    ]
    assert isinstance(star, n.ExportNamedDeclaration)
    assert star.declaration is None
    assert star.source is not None and star.source.value == "./all.js"


def test_anonymous_default_exports_become_declarations() -> None:
    program = parse_source("export default class {}\n")

    export = program.body[0]
    assert isinstance(export, n.ExportDefaultDeclaration)
    assert isinstance(export.declaration, n.ClassDeclaration)
    assert export.declaration.id is None


def test_default_export_of_new_expression() -> None:
    export = parse_source("export default new a.Foo();\n").body[0]

    assert isinstance(export, n.ExportDefaultDeclaration)
    assert isinstance(export.declaration, n.NewExpression)
    assert isinstance(export.declaration.callee, n.MemberExpression)


def test_import_declarations() -> None:
    program = parse_source("import Foo, { bar as baz } from './foo.js';\nimport * as ns from 'lib';\n")

    first, second = program.body
    assert isinstance(first, n.ImportDeclaration)
    assert first.source is not None and first.source.value == "./foo.js"
    assert [(s.local.name if s.local else None, s.imported.name if s.imported else None) for s in first.specifiers] == [
        ("Foo", "default"),
        ("baz", "bar"),
    ]
    assert isinstance(second, n.ImportDeclaration)
    assert [s.local.name for s in second.specifiers if s.local] == ["ns"]


def test_locations_are_one_based_lines_with_raw_text() -> None:
    program = parse_source("\n\nconst a = b.c;\n")

    declaration = program.body[0]
    assert declaration.loc is not None and declaration.loc.start.line == 3
    assert isinstance(declaration, n.VariableDeclaration)
    init = declaration.declarations[0].init
    assert init is not None and init.raw == "b.c"


def test_unknown_constructs_are_generic_nodes() -> None:
    program = parse_source("if (a) { b(); }\n")

    statement = program.body[0]
    assert isinstance(statement, n.GenericNode)
    assert statement.type == "if_statement"
    assert any(isinstance(child, n.BlockStatement) for child in statement.children())


def test_converter_accepts_trees_from_the_language_pack(javascript_parser: Parser) -> None:
    tree = javascript_parser.parse(b"let x = [1, 2];")

    program = JavaScriptConverter().convert(tree.root_node)

    declaration = program.body[0]
    assert isinstance(declaration, n.VariableDeclaration)
    assert isinstance(declaration.declarations[0].init, n.ArrayExpression)


@pytest.mark.parametrize(("text", "value"), [("10", 10), ("0x1f", 31), ("1_000", 1000), ("1.5", 1.5)])
def test_parse_number(text: str, value: int | float) -> None:
    assert _parse_number(text) == value


def test_parse_file_reads_sources(tmp_path: Path) -> None:
    path = tmp_path / "a.js"
    path.write_text("function a() {}\n", encoding="utf-8")

    program = parse_file(path)

    assert isinstance(program.body[0], n.FunctionDeclaration)


def test_parse_file_raises_for_missing_files(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="File not found"):
        parse_file(tmp_path / "missing.js")

"""Export handling: unwrapping in the first pass, reconciliation in the second.

Exports whose target needs other docs to exist (``export default Foo``,
``export {foo}``, ``export const foo = new Foo()``) are queued during the
walk. Once the walk is done each queued node is planned into a list of
mutations against the DocDB, then the mutations are applied.
"""

import logging
from dataclasses import dataclass
from typing import Any

from codex_docs.core import nodes as n
from codex_docs.core.ast_util import (
    callee_name,
    create_variable_declaration_and_new_expression_node,
    find_class_declaration_node,
    find_variable_declaration_and_new_expression_node,
)
from codex_docs.core.comments import parse_doc_tags, traverse_comments
from codex_docs.core.context import TraversalContext
from codex_docs.docs import ModuleVariableDoc
from codex_docs.models import DocCategory, DocObject, ParsedParam
from codex_docs.parser.comment import has_tag

logger = logging.getLogger(__name__)

# companion docs get their id when they are inserted
UNASSIGNED_ID = -1

_LOOKUP_CATEGORIES = (DocCategory.MODULE_CLASS, DocCategory.MODULE_FUNCTION, DocCategory.MODULE_VARIABLE)


@dataclass(frozen=True)
class UpdateDoc:
    doc: DocObject
    changes: dict[str, Any]


@dataclass(frozen=True)
class AppendDescription:
    doc: DocObject
    text: str


@dataclass(frozen=True)
class InsertDoc:
    doc: DocObject


DocMutation = UpdateDoc | AppendDescription | InsertDoc


# First pass ---------------------------------------------------------------


def unwrap_export(ctx: TraversalContext, export_node: n.Node, is_last: bool) -> None:
    """Document the declaration wrapped by an export with the merged comments of both."""
    declaration = getattr(export_node, "declaration", None)
    # e.g. `export {a} from './a.js'`
    if declaration is None:
        return

    leading = [*declaration.leading_comments, *export_node.leading_comments]
    trailing = [*declaration.trailing_comments, *export_node.trailing_comments]

    ctx.mark_visited(declaration)
    ctx.set_parent(declaration, export_node)

    decorators = getattr(declaration, "decorators", None)
    if decorators and decorators[0].leading_comments:
        leading.extend(decorators[0].leading_comments)

    traverse_comments(ctx, declaration, export_node, leading)

    # trailing comments belong to the last statement only
    if trailing and is_last:
        traverse_comments(ctx, None, export_node, trailing)


def is_export_second_pass(ctx: TraversalContext, node: n.Node) -> bool:
    """True when ``node`` is an export that can only be resolved after the walk."""
    if isinstance(node, n.ExportDefaultDeclaration):
        return isinstance(node.declaration, (n.Identifier, n.NewExpression))

    if isinstance(node, n.ExportNamedDeclaration):
        if node.specifiers:
            return True

        if isinstance(node.declaration, n.VariableDeclaration):
            for declarator in node.declaration.declarations:
                if not isinstance(declarator.init, n.NewExpression):
                    continue
                class_name = callee_name(declarator.init.callee)
                # bare class declarations only; `export class Foo` keeps its own import style
                if find_class_declaration_node(ctx.ast, class_name) is not None:
                    return True

    return False


# Second pass --------------------------------------------------------------


def _find(ctx: TraversalContext, category: DocCategory, name: str | None) -> DocObject | None:
    if not name:
        return None
    found = ctx.database.find(category=category, name=name, file_path=ctx.file_path)
    return found[0] if found else None


def _exported(import_style: str | None) -> dict[str, Any]:
    return {"export": True, "ignore": False, "import_style": import_style}


def plan_export(ctx: TraversalContext, export_node: n.Node) -> list[DocMutation]:
    """Read the DocDB and decide how a deferred export changes it."""
    if has_tag(parse_doc_tags(export_node.leading_comments), "@ignore"):
        return []

    if isinstance(export_node, n.ExportDefaultDeclaration):
        return _plan_default_export(ctx, export_node)
    if isinstance(export_node, n.ExportNamedDeclaration):
        return _plan_named_export(ctx, export_node)
    return []


def _plan_default_export(ctx: TraversalContext, export_node: n.ExportDefaultDeclaration) -> list[DocMutation]:
    declaration = export_node.declaration

    # export default new Foo();
    if isinstance(declaration, n.NewExpression):
        class_name = callee_name(declaration.callee)
        variable_name = class_name[:1].lower() + class_name[1:]
        return _plan_instance_export(ctx, export_node, class_name, variable_name)

    if isinstance(declaration, n.Identifier):
        mutations: list[DocMutation] = []

        # let foo = new Foo(); export default foo;
        var_node = find_variable_declaration_and_new_expression_node(ctx.ast, declaration.name)
        if var_node is not None:
            init = var_node.declarations[0].init
            class_name = callee_name(init.callee if isinstance(init, n.NewExpression) else None)
            mutations.extend(_plan_instance_export(ctx, export_node, class_name, declaration.name))

        # class Foo {} export default Foo; also marks foo when its class is imported
        for category in _LOOKUP_CATEGORIES:
            doc = _find(ctx, category, declaration.name)
            if doc is not None:
                mutations.append(UpdateDoc(doc, _exported(declaration.name)))
        return mutations

    logger.warning('Unknown export declaration type. type = "%s"', declaration.type if declaration else None)
    return []


def _plan_instance_export(
    ctx: TraversalContext, export_node: n.Node, class_name: str, variable_name: str
) -> list[DocMutation]:
    class_doc = _find(ctx, DocCategory.MODULE_CLASS, class_name)
    if class_doc is None:
        return []

    return [
        UpdateDoc(class_doc, _exported(None)),
        *plan_companion_variable(ctx, export_node, variable_name, class_name),
    ]


def _plan_named_export(ctx: TraversalContext, export_node: n.ExportNamedDeclaration) -> list[DocMutation]:
    mutations: list[DocMutation] = []

    # export const foo = new Foo();
    if isinstance(export_node.declaration, n.VariableDeclaration):
        for declarator in export_node.declaration.declarations:
            if not isinstance(declarator.init, n.NewExpression):
                continue

            class_name = callee_name(declarator.init.callee)
            variable_name = declarator.id.name if isinstance(declarator.id, n.Identifier) else None

            class_doc = _find(ctx, DocCategory.MODULE_CLASS, class_name)
            if class_doc is not None:
                mutations.append(UpdateDoc(class_doc, _exported(None)))

            if class_name and variable_name:
                mutations.extend(plan_companion_variable(ctx, export_node, variable_name, class_name))

    # re-exports name docs of another module
    if export_node.source is not None:
        return mutations

    # export {Foo, foo as bar};
    for specifier in export_node.specifiers:
        if specifier.local is None:
            continue
        exported = specifier.exported or specifier.local
        import_style = f"{{{exported.name}}}"
        for category in _LOOKUP_CATEGORIES:
            doc = _find(ctx, category, specifier.local.name)
            if doc is not None:
                mutations.append(UpdateDoc(doc, _exported(import_style)))

    return mutations


def plan_companion_variable(
    ctx: TraversalContext, export_node: n.Node, variable_name: str, class_name: str
) -> list[DocMutation]:
    """Update the variable doc holding an exported instance, or synthesize one."""
    is_default = isinstance(export_node, n.ExportDefaultDeclaration)
    changes = {
        **_exported(variable_name if is_default else f"{{{variable_name}}}"),
        "type": ParsedParam(types=[f"{ctx.file_path}~{class_name}"]),
    }

    virtual_node = create_variable_declaration_and_new_expression_node(variable_name, class_name, export_node)
    ctx.set_parent(virtual_node, ctx.ast)
    companion = ModuleVariableDoc.create(
        UNASSIGNED_ID, ctx.module_id, ctx, virtual_node, parse_doc_tags(virtual_node.leading_comments)
    )

    existing = _find(ctx, DocCategory.MODULE_VARIABLE, variable_name)
    if existing is None:
        return [InsertDoc(companion.model_copy(update={**changes, "pseudo_export": True}))]

    mutations: list[DocMutation] = []
    if companion.description:
        mutations.append(AppendDescription(existing, companion.description))
    mutations.append(UpdateDoc(existing, changes))
    return mutations


def apply_mutations(ctx: TraversalContext, mutations: list[DocMutation]) -> None:
    for mutation in mutations:
        if isinstance(mutation, UpdateDoc):
            for key, value in mutation.changes.items():
                setattr(mutation.doc, key, value)
        elif isinstance(mutation, AppendDescription):
            doc = mutation.doc
            doc.description = f"{doc.description}\n{mutation.text}" if doc.description else mutation.text
        elif isinstance(mutation, InsertDoc):
            mutation.doc.doc_id = ctx.next_id()
            ctx.database.insert(mutation.doc, ctx.doc_filter)

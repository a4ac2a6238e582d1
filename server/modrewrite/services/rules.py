"""
Rewrite rules for module declarations.

Each rule flushes the original text up to the declaration, drops the parts
of the declaration it replaces, appends the generated CommonJS code and
tells the walker whether it still needs to descend.

    import "m"                      require("m");
    import name from "m"            var name = require("m");
    import { a, b as c } from "m"   var mod$0 = require("m");
                                    var a = mod$0.a;
                                    var c = mod$0.b;
    module name from "m"            var name = require("m");
    export default = value          module.exports = value
    export var x = 1                var x = module.exports.x = 1
    export function f() {}          function f() {}
                                    module.exports.f = f;
    export * from "m"               var mod$0 = require("m");
                                    for (var key$1 in mod$0) module.exports[key$1] = mod$0[key$1];
    export { a, b as c } from "m"   var mod$0 = require("m");
                                    module.exports.a = mod$0.a;
                                    module.exports.c = mod$0.b;
    export { a, b as c }            module.exports.a = a;
                                    module.exports.c = b;
"""
import logging
from enum import Enum
from typing import Callable, Dict, List, Optional

from modrewrite.config import EXPORTS_OBJECT, LOAD_FUNCTION
from modrewrite.services.errors import MissingSpecifier, UnsupportedSyntax
from modrewrite.services.state import RewriteState
from modrewrite.services.syntax import (
    ExportDeclaration,
    ImportDeclaration,
    ImportKind,
    Literal,
    ModuleDeclaration,
    Node,
    NodeType,
    Specifier,
)
from modrewrite.services.traversal import Descend, Recurse, Rule

logger = logging.getLogger(__name__)


def _load(source: Optional[Literal], node: Node) -> str:
    if source is None:
        raise UnsupportedSyntax(
            f"{node.kind_name} at {node.start} has no module source", node.kind_name
        )
    return f"{LOAD_FUNCTION}({source.raw})"


def _export_target(name: str) -> str:
    if name == "default":
        return EXPORTS_OBJECT
    return f"{EXPORTS_OBJECT}.{name}"


def _specifiers(node: ExportDeclaration) -> List[Specifier]:
    return [s for s in node.specifiers if isinstance(s, Specifier)]


# ---------------------------------------------------------------------------
# import
# ---------------------------------------------------------------------------


def visit_import_declaration(
    recurse: Recurse, node: ImportDeclaration, path: List[Node], state: RewriteState
) -> Descend:
    cursor = state.cursor
    cursor.catchup(node.start)

    # import "m"
    if node.kind is None:
        cursor.append(f"{_load(node.source, node)};")

    # import name from "m"
    elif node.kind == ImportKind.DEFAULT:
        if not node.specifiers:
            raise MissingSpecifier(
                f"default import without specifier at {node.start}", node.kind_name
            )
        name = node.specifiers[0].local_name
        cursor.append(f"var {name} = {_load(node.source, node)};")

    # import { name, one as other } from "m"
    elif node.kind == ImportKind.NAMED:
        mod_id = state.ids.generate("mod")
        lines = [f"var {mod_id} = {_load(node.source, node)};"]
        for specifier in node.specifiers:
            lines.append(f"var {specifier.local_name} = {mod_id}.{specifier.name};")
        cursor.append("\n".join(lines))

    else:
        raise UnsupportedSyntax(
            f"don't know how to transform import kind: {node.kind}", node.kind_name
        )

    cursor.move(node.end)
    logger.debug("Rewrote import (%s) at [%d, %d)", node.kind, node.start, node.end)
    return Descend.SUBTREE_HANDLED


# ---------------------------------------------------------------------------
# export
# ---------------------------------------------------------------------------


class ExportShape(Enum):
    DEFAULT_ASSIGNMENT = "default_assignment"
    DEFAULT_BARE = "default_bare"
    EXPORTED_VARIABLE = "exported_variable"
    EXPORTED_FUNCTION = "exported_function"
    EXPORTED_CLASS = "exported_class"
    REEXPORT_ALL = "reexport_all"
    REEXPORT_NAMED = "reexport_named"
    NAMED_NO_SOURCE = "named_no_source"


def classify_export(node: ExportDeclaration) -> ExportShape:
    declaration = node.declaration

    if declaration is not None:
        if declaration.type is NodeType.DEFAULT_ASSIGNMENT:
            if declaration.init is None:
                return ExportShape.DEFAULT_BARE
            return ExportShape.DEFAULT_ASSIGNMENT
        if declaration.type is NodeType.VARIABLE_DECLARATION:
            return ExportShape.EXPORTED_VARIABLE
        if declaration.type is NodeType.FUNCTION_DECLARATION:
            return ExportShape.EXPORTED_FUNCTION
        if declaration.type is NodeType.CLASS_DECLARATION:
            return ExportShape.EXPORTED_CLASS
        raise UnsupportedSyntax(
            f"unknown declaration: {declaration.kind_name}", declaration.kind_name
        )

    specifiers = node.specifiers
    if node.source is not None:
        if len(specifiers) == 1 and specifiers[0].type is NodeType.BATCH_SPECIFIER:
            return ExportShape.REEXPORT_ALL
        if all(s.type is NodeType.SPECIFIER for s in specifiers):
            return ExportShape.REEXPORT_NAMED
    elif all(s.type is NodeType.SPECIFIER for s in specifiers):
        return ExportShape.NAMED_NO_SOURCE

    raise UnsupportedSyntax(
        f"don't know how to compile export declaration at {node.start}", node.kind_name
    )


def _export_default_assignment(recurse, node, path, state):
    declaration = node.declaration
    state.cursor.append(f"{_export_target(declaration.name)} = ")
    state.cursor.move(declaration.init.start)
    recurse(declaration.init, [declaration, node, *path], state)


def _export_default_bare(recurse, node, path, state):
    state.cursor.append(f"{_export_target(node.declaration.name)} = ")
    state.cursor.move(node.end)


def _export_variable(recurse, node, path, state):
    cursor = state.cursor
    declaration = node.declaration
    decl_path = [declaration, node, *path]
    cursor.move(declaration.start)

    uninitialized: List[str] = []
    for index, declarator in enumerate(declaration.declarations):
        name = declarator.name
        if name is None:
            raise UnsupportedSyntax(
                f"destructuring export at {declarator.start} is not supported",
                declarator.kind_name,
            )
        if declarator.init is None:
            # Keep `x` (and the keyword if it's first) as written, assign afterwards.
            cursor.catchup(declarator.end)
            uninitialized.append(name)
            continue

        if index == 0:
            cursor.move(declarator.start)
            cursor.append(f"{declaration.kind} ")
        else:
            cursor.catchup(declarator.start)
        cursor.append(f"{name} = {EXPORTS_OBJECT}.{name} = ")
        cursor.move(declarator.init.start)
        recurse(declarator.init, [declarator, *decl_path], state)

    cursor.catchup(node.end)
    for name in uninitialized:
        cursor.append(f"\n{EXPORTS_OBJECT}.{name} = {name};")


def _export_named_declaration(recurse, node, path, state):
    # Shared by functions and classes: keep the declaration, assign after it.
    cursor = state.cursor
    declaration = node.declaration
    if not declaration.name:
        raise UnsupportedSyntax(
            f"anonymous {declaration.kind_name} export at {declaration.start}",
            declaration.kind_name,
        )
    cursor.move(declaration.start)
    recurse(declaration, [node, *path], state)
    cursor.catchup(node.end)

    target = EXPORTS_OBJECT if node.default else f"{EXPORTS_OBJECT}.{declaration.name}"
    cursor.append(f"\n{target} = {declaration.name};")


def _reexport_all(recurse, node, path, state):
    mod_id = state.ids.generate("mod")
    key_id = state.ids.generate("key")
    # for-in also walks inherited enumerable keys.
    state.cursor.append(
        f"var {mod_id} = {_load(node.source, node)};\n"
        f"for (var {key_id} in {mod_id}) "
        f"{EXPORTS_OBJECT}[{key_id}] = {mod_id}[{key_id}];"
    )
    state.cursor.move(node.end)


def _reexport_named(recurse, node, path, state):
    mod_id = state.ids.generate("mod")
    lines = [f"var {mod_id} = {_load(node.source, node)};"]
    for specifier in _specifiers(node):
        lines.append(
            f"{EXPORTS_OBJECT}.{specifier.local_name} = {mod_id}.{specifier.name};"
        )
    state.cursor.append("\n".join(lines))
    state.cursor.move(node.end)


def _export_named_no_source(recurse, node, path, state):
    lines = [
        f"{EXPORTS_OBJECT}.{specifier.local_name} = {specifier.name};"
        for specifier in _specifiers(node)
    ]
    state.cursor.append("\n".join(lines))
    state.cursor.move(node.end)


EXPORT_HANDLERS: Dict[ExportShape, Callable[..., None]] = {
    ExportShape.DEFAULT_ASSIGNMENT: _export_default_assignment,
    ExportShape.DEFAULT_BARE: _export_default_bare,
    ExportShape.EXPORTED_VARIABLE: _export_variable,
    ExportShape.EXPORTED_FUNCTION: _export_named_declaration,
    ExportShape.EXPORTED_CLASS: _export_named_declaration,
    ExportShape.REEXPORT_ALL: _reexport_all,
    ExportShape.REEXPORT_NAMED: _reexport_named,
    ExportShape.NAMED_NO_SOURCE: _export_named_no_source,
}


def visit_export_declaration(
    recurse: Recurse, node: ExportDeclaration, path: List[Node], state: RewriteState
) -> Descend:
    state.cursor.catchup(node.start)
    shape = classify_export(node)
    EXPORT_HANDLERS[shape](recurse, node, path, state)
    logger.debug("Rewrote export (%s) at [%d, %d)", shape.value, node.start, node.end)
    return Descend.SUBTREE_HANDLED


# ---------------------------------------------------------------------------
# module
# ---------------------------------------------------------------------------


def visit_module_declaration(
    recurse: Recurse, node: ModuleDeclaration, path: List[Node], state: RewriteState
) -> Descend:
    state.cursor.catchup(node.start)
    state.cursor.append(f"var {node.name} = {_load(node.source, node)};")
    state.cursor.move(node.end)
    logger.debug("Rewrote module declaration at [%d, %d)", node.start, node.end)
    return Descend.SUBTREE_HANDLED


def _is(node_type: NodeType):
    def test(node: Node, path: List[Node], state: RewriteState) -> bool:
        return node.type is node_type
    return test


IMPORT_RULE = Rule("import", _is(NodeType.IMPORT_DECLARATION), visit_import_declaration)
MODULE_RULE = Rule("module", _is(NodeType.MODULE_DECLARATION), visit_module_declaration)
EXPORT_RULE = Rule("export", _is(NodeType.EXPORT_DECLARATION), visit_export_declaration)

DEFAULT_RULES = (IMPORT_RULE, MODULE_RULE, EXPORT_RULE)

import logging
from typing import List, Optional, Union

import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser

from modrewrite.services import syntax
from modrewrite.services.errors import ParseError
from modrewrite.services.syntax import ImportKind

# Plain JavaScript parses fine with the TypeScript grammar.
TYPESCRIPT_LANGUAGE = Language(tstypescript.language_typescript())
TSX_LANGUAGE = Language(tstypescript.language_tsx())

logger = logging.getLogger(__name__)

FUNCTION_DECLARATION_TYPES = {
    'function_declaration',
    'generator_function_declaration',
}

VARIABLE_DECLARATION_TYPES = {
    'lexical_declaration',
    'variable_declaration',
}


def _text(node: Node) -> str:
    return node.text.decode('utf-8')


def _first_child_of_type(node: Node, node_type: str) -> Optional[Node]:
    for child in node.children:
        if child.type == node_type:
            return child
    return None


def _type_modifier(node: Node) -> Optional[str]:
    """``type`` / ``typeof`` when the node only moves types around."""
    for child in node.children:
        if child.type in ('type', 'typeof'):
            return child.type
    return None


def _has_type_only_specifier(clause: Node) -> bool:
    return any(_type_modifier(child) is not None for child in clause.named_children)


def _literal(node: Optional[Node]) -> Optional[syntax.Literal]:
    if node is None:
        return None
    return syntax.Literal(node.start_byte, node.end_byte, raw=_text(node))


class TreeSitterFrontend:
    """
    Parses JS/TS source with tree-sitter and converts the result into the
    ``syntax`` node tree the rewrite rules work on.
    """

    def __init__(self):
        self.ts_parser = Parser(TYPESCRIPT_LANGUAGE)
        self.tsx_parser = Parser(TSX_LANGUAGE)

    def parse(self, source: Union[str, bytes], tsx: bool = False) -> syntax.Program:
        if isinstance(source, str):
            source = source.encode('utf-8')

        parser = self.tsx_parser if tsx else self.ts_parser
        tree = parser.parse(source)
        root = tree.root_node

        if root.has_error:
            line = self._first_error_line(root)
            raise ParseError(f"could not parse source (first error on line {line})", root.type)

        return syntax.Program(
            root.start_byte,
            root.end_byte,
            body=[self._convert(child) for child in root.named_children],
        )

    def _first_error_line(self, node: Node) -> int:
        stack = [node]
        while stack:
            n = stack.pop()
            if n.type == 'ERROR' or n.is_missing:
                return n.start_point.row + 1
            stack.extend(reversed(n.children))
        return node.start_point.row + 1

    def _convert(self, node: Node) -> syntax.Node:
        if node.type == 'import_statement':
            return self._convert_import(node)
        if node.type == 'export_statement':
            return self._convert_export(node)

        body = [self._convert(child) for child in node.named_children]
        if node.type.endswith('statement') or node.type.endswith('declaration'):
            return syntax.Statement(node.start_byte, node.end_byte, kind=node.type, body=body)
        return syntax.Expression(node.start_byte, node.end_byte, kind=node.type, body=body)

    # ------------------------------------------------------------------
    # import
    # ------------------------------------------------------------------

    def _convert_import(self, node: Node) -> syntax.Node:
        source = _literal(node.child_by_field_name('source'))
        start, end = node.start_byte, node.end_byte

        # import type { A } from 'm' / import typeof ...
        modifier = _type_modifier(node)
        if modifier is not None:
            return syntax.ImportDeclaration(start, end, kind=modifier, source=source)

        if _first_child_of_type(node, 'import_require_clause') is not None:
            return syntax.ImportDeclaration(start, end, kind='require', source=source)

        clause = _first_child_of_type(node, 'import_clause')
        if clause is None:
            # import 'm'
            return syntax.ImportDeclaration(start, end, kind=None, source=source)

        default_names = [c for c in clause.named_children if c.type == 'identifier']
        namespaces = [c for c in clause.named_children if c.type == 'namespace_import']
        named = [c for c in clause.named_children if c.type == 'named_imports']

        if namespaces and not default_names and not named:
            # import * as ns from 'm' is the same binding as `module ns from 'm'`
            ident = _first_child_of_type(namespaces[0], 'identifier')
            return syntax.ModuleDeclaration(start, end, name=_text(ident), source=source)

        if default_names and not namespaces and not named:
            ident = default_names[0]
            specifier = syntax.Specifier(ident.start_byte, ident.end_byte, name=_text(ident))
            return syntax.ImportDeclaration(
                start, end, kind=ImportKind.DEFAULT, specifiers=[specifier], source=source
            )

        if named and not default_names and not namespaces:
            # import { type A, b } from 'm'
            if _has_type_only_specifier(named[0]):
                return syntax.ImportDeclaration(start, end, kind='named+type', source=source)
            return syntax.ImportDeclaration(
                start,
                end,
                kind=ImportKind.NAMED,
                specifiers=self._specifiers(named[0], 'import_specifier'),
                source=source,
            )

        parts = []
        if default_names:
            parts.append('default')
        if namespaces:
            parts.append('namespace')
        if named:
            parts.append('named')
        return syntax.ImportDeclaration(start, end, kind='+'.join(parts), source=source)

    def _specifiers(self, clause: Node, specifier_type: str) -> List[syntax.Specifier]:
        specifiers = []
        for child in clause.named_children:
            if child.type != specifier_type:
                continue
            name_node = child.child_by_field_name('name')
            alias_node = child.child_by_field_name('alias')
            specifiers.append(
                syntax.Specifier(
                    child.start_byte,
                    child.end_byte,
                    name=_text(name_node),
                    alias=_text(alias_node) if alias_node is not None else None,
                )
            )
        return specifiers

    # ------------------------------------------------------------------
    # export
    # ------------------------------------------------------------------

    def _convert_export(self, node: Node) -> syntax.ExportDeclaration:
        start, end = node.start_byte, node.end_byte
        source = _literal(node.child_by_field_name('source'))
        default_token = _first_child_of_type(node, 'default')

        declaration = node.child_by_field_name('declaration')
        if declaration is not None:
            return syntax.ExportDeclaration(
                start,
                end,
                declaration=self._convert_declaration(declaration),
                default=default_token is not None,
            )

        # export default <expr>;
        value = node.child_by_field_name('value')
        if value is not None:
            assignment = syntax.DefaultAssignment(
                default_token.start_byte if default_token is not None else value.start_byte,
                end,
                name='default',
                init=self._convert(value),
            )
            return syntax.ExportDeclaration(start, end, declaration=assignment)

        # export = <expr>;  (TypeScript)
        equals = _first_child_of_type(node, '=')
        if equals is not None:
            expr = next((c for c in node.named_children if c.start_byte > equals.start_byte), None)
            assignment = syntax.DefaultAssignment(
                equals.start_byte,
                end,
                name='default',
                init=self._convert(expr) if expr is not None else None,
            )
            return syntax.ExportDeclaration(start, end, declaration=assignment)

        clause = _first_child_of_type(node, 'export_clause')
        if clause is not None:
            # export type { A } [from 'm'] / export { type A }
            modifier = _type_modifier(node)
            if modifier is None and _has_type_only_specifier(clause):
                modifier = 'type'
            if modifier is not None:
                other = syntax.OtherDeclaration(start, end, kind=f'{modifier}_export')
                return syntax.ExportDeclaration(start, end, declaration=other)
            return syntax.ExportDeclaration(
                start,
                end,
                specifiers=self._specifiers(clause, 'export_specifier'),
                source=source,
            )

        namespace_export = _first_child_of_type(node, 'namespace_export')
        if namespace_export is not None:
            other = syntax.OtherDeclaration(
                namespace_export.start_byte, namespace_export.end_byte, kind='namespace_export'
            )
            return syntax.ExportDeclaration(start, end, specifiers=[other], source=source)

        star = _first_child_of_type(node, '*')
        if star is not None:
            batch = syntax.BatchSpecifier(star.start_byte, star.end_byte)
            return syntax.ExportDeclaration(start, end, specifiers=[batch], source=source)

        # export as namespace Foo; and anything newer than this grammar
        other = syntax.OtherDeclaration(start, end, kind=node.type)
        return syntax.ExportDeclaration(start, end, declaration=other)

    def _convert_declaration(self, node: Node) -> syntax.Node:
        start, end = node.start_byte, node.end_byte

        if node.type in FUNCTION_DECLARATION_TYPES:
            name_node = node.child_by_field_name('name')
            return syntax.FunctionDeclaration(
                start,
                end,
                name=_text(name_node) if name_node is not None else '',
                body=[self._convert(child) for child in node.named_children],
            )

        if node.type == 'class_declaration':
            name_node = node.child_by_field_name('name')
            return syntax.ClassDeclaration(
                start,
                end,
                name=_text(name_node) if name_node is not None else '',
                body=[self._convert(child) for child in node.named_children],
            )

        if node.type in VARIABLE_DECLARATION_TYPES:
            # First token is the keyword: var / let / const
            keyword = _text(node.children[0])
            declarators = []
            for child in node.named_children:
                if child.type != 'variable_declarator':
                    continue
                name_node = child.child_by_field_name('name')
                value_node = child.child_by_field_name('value')
                declarators.append(
                    syntax.VariableDeclarator(
                        child.start_byte,
                        child.end_byte,
                        name=_text(name_node) if name_node.type == 'identifier' else None,
                        init=self._convert(value_node) if value_node is not None else None,
                    )
                )
            return syntax.VariableDeclaration(start, end, kind=keyword, declarations=declarators)

        logger.debug("Unhandled export declaration type: %s", node.type)
        return syntax.OtherDeclaration(start, end, kind=node.type)


_frontend = None


def get_frontend() -> TreeSitterFrontend:
    global _frontend
    if _frontend is None:
        _frontend = TreeSitterFrontend()
    return _frontend

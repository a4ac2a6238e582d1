import pytest

from modrewrite.services.errors import MissingSpecifier, UnsupportedSyntax
from modrewrite.services.ids import IdGenerator
from modrewrite.services.rewrite import transform_tree
from modrewrite.services.syntax import (
    ImportDeclaration,
    Literal,
    ModuleDeclaration,
    Program,
    Specifier,
    Statement,
)


def span(source: str, fragment: str) -> tuple[int, int]:
    start = source.index(fragment)
    return start, start + len(fragment)


def literal(source: str, raw: str) -> Literal:
    return Literal(*span(source, raw), raw=raw)


def program(source: str, *nodes) -> Program:
    return Program(0, len(source), body=list(nodes))


def test_bare_import():
    source = 'import "a";\n'
    node = ImportDeclaration(*span(source, 'import "a";'), kind=None, source=literal(source, '"a"'))

    assert transform_tree(source, program(source, node)) == 'require("a");\n'


def test_default_import_binds_the_module_itself():
    source = "import React from 'react';\nReact.render();\n"
    node = ImportDeclaration(
        *span(source, "import React from 'react';"),
        kind="default",
        specifiers=[Specifier(*span(source, "React"), name="React")],
        source=literal(source, "'react'"),
    )

    result = transform_tree(source, program(source, node))

    # The local name holds the loaded module, not a property of it.
    assert result == "var React = require('react');\nReact.render();\n"


def test_default_import_without_specifier_fails():
    source = 'import x from "m";'
    node = ImportDeclaration(0, len(source), kind="default", source=literal(source, '"m"'))

    with pytest.raises(MissingSpecifier):
        transform_tree(source, program(source, node))


def test_named_import_keeps_specifier_order():
    source = 'import { a, b as c } from "m";\nfoo(a, c);\n'
    decl = 'import { a, b as c } from "m";'
    node = ImportDeclaration(
        *span(source, decl),
        kind="named",
        specifiers=[
            Specifier(*span(source, "a,"), name="a"),
            Specifier(*span(source, "b as c"), name="b", alias="c"),
        ],
        source=literal(source, '"m"'),
    )
    rest = Statement(*span(source, "foo(a, c);"), kind="expression_statement")

    result = transform_tree(source, program(source, node, rest))

    assert result == (
        'var mod$0 = require("m");\n'
        "var a = mod$0.a;\n"
        "var c = mod$0.b;\n"
        "foo(a, c);\n"
    )


def test_each_named_import_gets_its_own_module_binding():
    source = 'import { a } from "x";\nimport { b } from "y";'
    first = ImportDeclaration(
        *span(source, 'import { a } from "x";'),
        kind="named",
        specifiers=[Specifier(9, 10, name="a")],
        source=literal(source, '"x"'),
    )
    second = ImportDeclaration(
        *span(source, 'import { b } from "y";'),
        kind="named",
        specifiers=[Specifier(32, 33, name="b")],
        source=literal(source, '"y"'),
    )

    result = transform_tree(source, program(source, first, second))

    assert result == (
        'var mod$0 = require("x");\nvar a = mod$0.a;\n'
        'var mod$1 = require("y");\nvar b = mod$1.b;'
    )


def test_unknown_import_kind_is_fatal():
    source = 'import x, { y } from "m";'
    node = ImportDeclaration(0, len(source), kind="default+named", source=literal(source, '"m"'))

    with pytest.raises(UnsupportedSyntax) as exc_info:
        transform_tree(source, program(source, node))

    assert "default+named" in str(exc_info.value)
    assert exc_info.value.node_type == "ImportDeclaration"


def test_module_declaration():
    source = 'module fs from "fs";\nfs.readFileSync();'
    node = ModuleDeclaration(
        *span(source, 'module fs from "fs";'), name="fs", source=literal(source, '"fs"')
    )

    result = transform_tree(source, program(source, node))

    assert result == 'var fs = require("fs");\nfs.readFileSync();'


def test_runs_are_reproducible_without_manual_reset():
    source = 'import { a } from "m";'
    node = ImportDeclaration(
        0, len(source), kind="named",
        specifiers=[Specifier(9, 10, name="a")],
        source=literal(source, '"m"'),
    )
    tree = program(source, node)

    assert transform_tree(source, tree) == transform_tree(source, tree)


def test_shared_generator_drifts_until_reset():
    source = 'import { a } from "m";'
    node = ImportDeclaration(
        0, len(source), kind="named",
        specifiers=[Specifier(9, 10, name="a")],
        source=literal(source, '"m"'),
    )
    tree = program(source, node)
    ids = IdGenerator()

    assert transform_tree(source, tree, ids=ids).startswith("var mod$0 ")
    assert transform_tree(source, tree, ids=ids).startswith("var mod$1 ")

    ids.reset()
    assert transform_tree(source, tree, ids=ids).startswith("var mod$0 ")

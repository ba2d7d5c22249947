import pytest

from oruspad.ast import (
    Block, LetDecl, IfStmt, ForInStmt, RangeExpr, BinaryExpr, NumberLiteral,
    Identifier, FieldAccess, PrintStmt, Assignment,
)
from oruspad.errors import OrusSyntaxError, MissingMainError
from oruspad.parser import parse_program, parse_cached


def main_body(source):
    program = parse_program(source)
    return program.find_function('main').body.statements


def test_operator_precedence():
    (stmt,) = main_body('fn main() { let x = 1 + 2 * 3; }')
    assert stmt == LetDecl(
        'x',
        BinaryExpr('+', NumberLiteral(1.0), BinaryExpr('*', NumberLiteral(2.0), NumberLiteral(3.0))),
    )


def test_semicolons_are_optional():
    stmts = main_body('fn main() {\n    let a = 1\n    a = a + 1\n    print(a)\n}')
    assert [type(s) for s in stmts] == [LetDecl, Assignment, PrintStmt]


def test_type_annotations_are_ignored():
    program = parse_program(
        'fn add(a: i32, b: [i32]) -> Result<i32, string> { return a; }\nfn main() {}'
    )
    assert program.find_function('add').params == ('a', 'b')


def test_else_if_chains_nest():
    (stmt,) = main_body('fn main() { if a { } else if b { } else { } }')
    assert isinstance(stmt, IfStmt)
    assert isinstance(stmt.else_block, IfStmt)
    assert isinstance(stmt.else_block.else_block, Block)


def test_range_call_becomes_range_expr():
    (stmt,) = main_body('fn main() { for i in range(0, 3) { print(i); } }')
    assert isinstance(stmt, ForInStmt)
    assert stmt.iterable == RangeExpr(NumberLiteral(0.0), NumberLiteral(3.0))


def test_interpolation_segments():
    (stmt,) = main_body('fn main() { print("Hi {name}, {user.len} \\{x\\}"); }')
    assert stmt.expr.segments == (
        'Hi ',
        Identifier('name'),
        ', ',
        FieldAccess(Identifier('user'), 'len'),
        ' {x}',
    )


def test_non_identifier_braces_stay_literal():
    (stmt,) = main_body('fn main() { print("{1 + 2}"); }')
    assert stmt.expr.segments == ('{1 + 2}',)
    assert stmt.expr.is_plain


def test_globals_and_source_length():
    source = 'let greeting = "hi";\nconst answer = 42;\nfn main() {}\n'
    program = parse_program(source)
    assert [g.name for g in program.globals] == ['greeting', 'answer']
    assert program.source_length == len(source)


@pytest.mark.parametrize('source', [
    'fn main() { let = 5; }',
    'fn main() { print("x") ',
    'fn main() { break; }',
    'fn main() { let x = print(1); }',
    'fn main() { let r = range(1); }',
    'fn main() { 1 = 2; }',
    'struct Point { x: i32 }\nfn main() {}',
    'fn main() { match x { } }',
    'fn main() { let s = "open; }',
    'print("top level")',
])
def test_syntax_errors(source):
    with pytest.raises(OrusSyntaxError):
        parse_program(source)


def test_expected_found_message():
    with pytest.raises(OrusSyntaxError) as exc:
        parse_program('fn main() { let = 5; }')
    assert exc.value.message == "expected a variable name, found '='"
    assert exc.value.position.column == 17


def test_unclosed_brace_message():
    with pytest.raises(OrusSyntaxError) as exc:
        parse_program('fn main() {\n    print("x");\n')
    assert exc.value.message == 'unclosed brace opened at 1:11'


def test_unsupported_keyword_message():
    with pytest.raises(OrusSyntaxError) as exc:
        parse_program('enum Color { Red }\nfn main() {}')
    assert exc.value.message == "'enum' is not supported by the playground simulator"


@pytest.mark.parametrize('source', ['', 'fn helper() {}', 'fn main(x) {}', 'let x = 1;'])
def test_missing_main(source):
    with pytest.raises(MissingMainError):
        parse_program(source)


def test_parse_cached_reuses_program():
    source = 'fn main() { print("cached"); }'
    assert parse_cached(source) is parse_cached(source)

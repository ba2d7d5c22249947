from oruspad.errors import TypeMismatch
from oruspad.formatter import (
    NO_OUTPUT_MESSAGE, format_diagnostics, format_error, format_result, render,
)
from oruspad.interpreter import RunResult
from oruspad.lexer import Position


def test_success_joins_lines():
    assert format_result(RunResult(output=('a', 'b'))) == 'a\nb'


def test_empty_output_message():
    assert format_result(RunResult()) == NO_OUTPUT_MESSAGE
    assert render('fn main() { let quiet = 1; }') == NO_OUTPUT_MESSAGE


def test_error_takes_precedence_over_partial_output():
    result = RunResult(error=TypeMismatch('bad operands', Position(3, 7, 40)),
                       partial_output=('printed',))
    assert format_result(result) == 'Error: TypeMismatch: bad operands (line 3, column 7)'


def test_error_without_position():
    assert format_error(TypeMismatch('bad operands')) == 'Error: TypeMismatch: bad operands'


def test_missing_main_message():
    assert render('fn helper() {}') == "Error: MissingMainError: no zero-argument 'main' function found"


def test_diagnostics():
    result = RunResult(output=('x',), diagnostics=('first', 'second'))
    assert format_diagnostics(result) == 'Warning: first\nWarning: second'

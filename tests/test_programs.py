from pathlib import Path

from oruspad.interpreter import Interpreter
from oruspad.parser import parse_program
from oruspad.formatter import format_result

EXAMPLES_DIR = Path(__file__).parent.parent / 'examples'


def run_example(name, mode='normal'):
    with open(EXAMPLES_DIR / name, 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter(debug_file=None)
    return format_result(interp.run(ast, mode=mode))


def test_program_1():
    assert run_example('program_1.orus') == (
        'Hello from OrusPad!\n'
        'Welcome to Orus programming language!\n'
        '5 + 10 = 15'
    )


def test_program_2():
    assert run_example('program_2.orus') == '0\n1\n2'


def test_program_3():
    assert run_example('program_3.orus') == 'big'


def test_program_4():
    assert run_example('program_4.orus') == 'inner 2\nouter 1\nHi!'


def test_program_5():
    assert run_example('program_5.orus') == \
        'Error: IndexError: index 5 out of range for length 3 (line 3, column 16)'


def test_program_6():
    assert run_example('program_6.orus') == \
        'Error: ResourceExhausted: program exceeded its loop iteration budget'


def test_program_7():
    out = run_example('program_7.orus', mode='debug').split('\n')
    assert out[:6] == [
        '',
        '--- Debug Information ---',
        'Variables: {',
        '  "name": "Orus",',
        '  "count": 3',
        '}',
    ]
    assert out[6].startswith('Code size: ')

import pytest

from oruspad import simulate
from oruspad.highlight import highlight, highlight_html
from oruspad.reindent import reindent_source
from oruspad.samples import EXAMPLES, FIBONACCI, ARRAYS, LOOPS
from oruspad.share import (
    ShareDecodeError, decode_source, encode_source, share_url, source_from_url,
)


def test_highlight_classes():
    assert highlight('fn main() { print("hi"); } // done') == [
        ('keyword', 'fn'),
        ('whitespace', ' '),
        ('variable', 'main'),
        ('punctuation', '('),
        ('punctuation', ')'),
        ('whitespace', ' '),
        ('punctuation', '{'),
        ('whitespace', ' '),
        ('builtin', 'print'),
        ('punctuation', '('),
        ('string', '"hi"'),
        ('punctuation', ')'),
        ('punctuation', ';'),
        ('whitespace', ' '),
        ('punctuation', '}'),
        ('whitespace', ' '),
        ('comment', '// done'),
    ]


def test_highlight_types_numbers_and_operators():
    pairs = highlight('let n: i32 = 2.5 * count;')
    assert ('type', 'i32') in pairs
    assert ('number', '2.5') in pairs
    assert ('operator', '*') in pairs
    assert ('variable', 'count') in pairs


def test_highlight_never_fails_on_broken_code():
    assert highlight('x @ y') == [
        ('variable', 'x'), ('whitespace', ' '), ('error', '@'), ('whitespace', ' '), ('variable', 'y'),
    ]
    assert highlight('"abc') == [('string', '"abc')]
    assert highlight('/* open') == [('comment', '/* open')]
    assert highlight('') == []


@pytest.mark.parametrize('name', sorted(EXAMPLES))
def test_highlight_covers_every_character(name):
    source = EXAMPLES[name]
    assert ''.join(text for _, text in highlight(source)) == source


def test_highlight_html_escapes():
    assert highlight_html('a < b') == (
        '<span class="orus-variable">a</span> <span class="orus-operator">&lt;</span> '
        '<span class="orus-variable">b</span>'
    )


def test_share_round_trip_unicode():
    source = 'fn main() {\n    print("héllo 🌍 {x}");\n}\n'
    token = encode_source(source)
    assert not set(token) & set('=+/')
    assert decode_source(token) == source
    assert decode_source(encode_source('')) == ''


@pytest.mark.parametrize('token', ['!!!', 'abcde', '_w'])
def test_share_rejects_malformed_tokens(token):
    with pytest.raises(ShareDecodeError):
        decode_source(token)


def test_share_url():
    url = share_url('https://orus.dev/playground/', 'fn main() {}')
    assert url.startswith('https://orus.dev/playground/?code=')
    assert source_from_url(url) == 'fn main() {}'
    assert share_url('https://x.dev/p?theme=dark&code=old', 'a') == 'https://x.dev/p?theme=dark&code=YQ'
    assert source_from_url('https://x.dev/p') is None


def test_reindent():
    source = 'fn main() {\nprint("x");\nif true {\n      print("y");\n}\n\n   // }\n}'
    assert reindent_source(source) == (
        'fn main() {\n'
        '    print("x");\n'
        '    if true {\n'
        '        print("y");\n'
        '    }\n'
        '\n'
        '    // }\n'
        '}'
    )


def test_reindent_never_goes_negative():
    assert reindent_source('}\n}\nx') == '}\n}\nx'


@pytest.mark.parametrize('name', sorted(EXAMPLES))
def test_examples_run(name):
    assert simulate(EXAMPLES[name]).ok


def test_fibonacci_example():
    output = simulate(FIBONACCI).output
    assert output[0] == 'Fibonacci Sequence:'
    assert output[1:] == tuple(f'fib({i}) = {v}' for i, v in enumerate([0, 1, 1, 2, 3, 5, 8, 13, 21, 34]))


def test_arrays_example():
    assert simulate(ARRAYS).output == (
        'Scores: [90, 72, 85, 64]',
        'Total: 311 over 4 tests',
        'Best: 90, worst: 64',
        '90 passed with distinction',
        '72 passed',
        '85 passed with distinction',
        '64 failed',
    )


def test_loops_example():
    assert simulate(LOOPS).output == ('Collatz steps for 27: 111', '1', '3', '5', '7')

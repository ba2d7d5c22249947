from oruspad.lexer import tokenize, IDENT, KEYWORD, NUMBER, STRING, PUNCT, OP, EOF, ERROR


def kinds(source):
    return [t.kind for t in tokenize(source)]


def test_tokenize_declaration():
    tokens = list(tokenize('let x = 1.5e3;'))
    assert [(t.kind, t.text) for t in tokens] == [
        (KEYWORD, 'let'),
        (IDENT, 'x'),
        (OP, '='),
        (NUMBER, '1.5e3'),
        (PUNCT, ';'),
        (EOF, ''),
    ]


def test_two_char_operators():
    texts = [t.text for t in tokenize('a <= b && c != d -> e')]
    assert texts == ['a', '<=', 'b', '&&', 'c', '!=', 'd', '->', 'e', '']


def test_comments_are_skipped():
    assert kinds('// note\nx /* block\n comment */ y') == [IDENT, IDENT, EOF]


def test_positions_track_lines_and_columns():
    tokens = list(tokenize('fn main() {\n    print("hi");\n}'))
    print_token = tokens[5]
    assert print_token.text == 'print'
    assert (print_token.position.line, print_token.position.column) == (2, 5)


def test_eof_offset_is_source_length():
    source = 'let s = "héllo";'
    tokens = list(tokenize(source))
    assert tokens[-1].kind == EOF
    assert tokens[-1].position.offset == len(source)


def test_string_token_keeps_raw_body():
    token = next(iter(tokenize(r'"a\n{b}"')))
    assert token.kind == STRING
    assert token.value == r'a\n{b}'


def test_unterminated_string_is_error_token():
    tokens = list(tokenize('print("oops'))
    assert tokens[-2].kind == ERROR
    assert tokens[-2].value == 'unterminated string literal'
    assert tokens[-1].kind == EOF


def test_unterminated_block_comment_is_error_token():
    tokens = list(tokenize('x /* never closed'))
    assert [t.kind for t in tokens] == [IDENT, ERROR, EOF]
    assert tokens[1].value == 'unterminated block comment'


def test_unknown_character_is_error_token():
    tokens = list(tokenize('let a = 1 @ 2'))
    errors = [t for t in tokens if t.kind == ERROR]
    assert len(errors) == 1
    assert errors[0].text == '@'
    assert errors[0].position.column == 11


def test_non_ascii_digits_are_not_numbers():
    assert kinds('²') == [ERROR, EOF]

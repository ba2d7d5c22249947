"""Tokenizer for the Orus playground simulator.

`tokenize` turns editor text into a lazy stream of tokens. It never raises:
malformed input such as an unterminated string or a stray character becomes
a single ``ERROR`` token, and the parser reports it as a syntax error at
that token's position. The stream always ends with one ``EOF`` token whose
offset equals the length of the source.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

IDENT = 'IDENT'
KEYWORD = 'KEYWORD'
NUMBER = 'NUMBER'
STRING = 'STRING'
PUNCT = 'PUNCT'
OP = 'OP'
EOF = 'EOF'
ERROR = 'ERROR'

KEYWORDS = frozenset({
    'fn', 'let', 'mut', 'if', 'else', 'elif', 'for', 'in', 'while', 'return',
    'struct', 'pub', 'use', 'match', 'try', 'catch', 'throw', 'const', 'as',
    'nil', 'impl', 'true', 'false', 'continue', 'break', 'enum',
})

PUNCTUATION = frozenset('{}[]().,:;')
TWO_CHAR_OPS = frozenset({'==', '!=', '<=', '>=', '&&', '||', '->'})
SINGLE_OPS = frozenset('+-*/%=<>!')
DIGITS = frozenset('0123456789')


@dataclass(frozen=True)
class Position:
    line: int
    column: int
    offset: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    position: Position
    # Raw body for STRING tokens, problem description for ERROR tokens.
    value: Optional[str] = None

    def describe(self) -> str:
        if self.kind == EOF:
            return 'end of input'
        if self.kind == STRING:
            return f"string {self.text}"
        return f"'{self.text}'"


def tokenize(source: str) -> Iterator[Token]:
    """Yield the tokens of `source` one at a time.

    The lexer recognizes identifiers, keywords, numbers (with optional
    fraction and exponent), double-quoted strings, punctuation and
    operators. Line (``//``) and block (``/* */``) comments and whitespace
    are skipped.
    """
    i = 0
    line = 1
    col = 1
    length = len(source)

    def advance(n: int = 1):
        nonlocal i, col, line
        for _ in range(n):
            if i < length and source[i] == '\n':
                line += 1
                col = 1
            else:
                col += 1
            i += 1

    while i < length:
        c = source[i]
        if c.isspace():
            advance()
            continue
        # Comments
        if c == '/' and source.startswith('//', i):
            while i < length and source[i] != '\n':
                advance()
            continue
        if c == '/' and source.startswith('/*', i):
            start = Position(line, col, i)
            end = source.find('*/', i + 2)
            if end == -1:
                text = source[i:]
                advance(length - i)
                yield Token(ERROR, text, start, 'unterminated block comment')
                continue
            advance(end + 2 - i)
            continue
        start = Position(line, col, i)
        # Identifiers or keywords
        if c.isalpha() or c == '_':
            while i < length and (source[i].isalnum() or source[i] == '_'):
                advance()
            word = source[start.offset:i]
            yield Token(KEYWORD if word in KEYWORDS else IDENT, word, start)
            continue
        # Numbers: digits, optional fraction, optional exponent
        if c in DIGITS:
            while i < length and source[i] in DIGITS:
                advance()
            if i + 1 < length and source[i] == '.' and source[i + 1] in DIGITS:
                advance()
                while i < length and source[i] in DIGITS:
                    advance()
            if i < length and source[i] in 'eE':
                j = i + 1
                if j < length and source[j] in '+-':
                    j += 1
                if j < length and source[j] in DIGITS:
                    advance(j - i)
                    while i < length and source[i] in DIGITS:
                        advance()
            yield Token(NUMBER, source[start.offset:i], start)
            continue
        # String literal
        if c == '"':
            advance()
            closed = False
            while i < length:
                ch = source[i]
                if ch == '\\' and i + 1 < length:
                    advance(2)
                    continue
                if ch == '"':
                    advance()
                    closed = True
                    break
                advance()
            text = source[start.offset:i]
            if not closed:
                yield Token(ERROR, text, start, 'unterminated string literal')
                continue
            # Escapes stay raw; the parser decodes them while it splits out
            # interpolation markers, so an escaped brace stays literal.
            yield Token(STRING, text, start, text[1:-1])
            continue
        pair = source[i:i + 2]
        if pair in TWO_CHAR_OPS:
            advance(2)
            yield Token(OP, pair, start)
            continue
        if c in SINGLE_OPS:
            advance()
            yield Token(OP, c, start)
            continue
        if c in PUNCTUATION:
            advance()
            yield Token(PUNCT, c, start)
            continue
        advance()
        yield Token(ERROR, c, start, f"unexpected character {c!r}")
    yield Token(EOF, '', Position(line, col, length))

"""Syntax highlighting for the editor and the documentation pages.

Highlighting is independent of the simulator's own lexer: it must color
half-typed code (unterminated strings, stray characters, unsupported
keywords) without ever failing. A Lark terminal grammar covers every
character of the input, and `highlight` maps each terminal to the CSS
class the editor theme uses.
"""

from __future__ import annotations

import html
from typing import List, Tuple

from lark import Lark

from .lexer import KEYWORDS

TYPES = ('i32', 'i64', 'f32', 'f64', 'bool', 'char', 'string', 'u32', 'u64')
BUILTINS = (
    'print', 'len', 'range', 'timestamp', 'push', 'pop', 'sum', 'min', 'max',
    'sort', 'input', 'int', 'float', 'str', 'type_of', 'is_type', 'Ok', 'Err',
)


def _words(words) -> str:
    return '(?:' + '|'.join(sorted(words)) + r')\b'


HIGHLIGHT_GRAMMAR = r"""
    start: _item*
    _item: COMMENT | STRING | NUMBER | KEYWORD | TYPE | BUILTIN | IDENT
         | OPERATOR | PUNCTUATION | WHITESPACE | UNKNOWN

    COMMENT.4: /\/\/[^\n]*/ | /\/\*[\s\S]*?(?:\*\/|\Z)/
    STRING.3: /"(?:\\.|[^"\\])*"?/
    NUMBER.2: /\d+(?:\.\d+)?(?:[eE][+-]?\d+)?/
    KEYWORD.2: /%(keywords)s/
    TYPE.2: /%(types)s/
    BUILTIN.2: /%(builtins)s/
    IDENT: /[A-Za-z_]\w*/
    OPERATOR: /&&|\|\||->|[=!<>]=?|[+\-*\/%%]/
    PUNCTUATION: /[{}\[\]().,:;]/
    WHITESPACE: /\s+/
    UNKNOWN: /[\s\S]/
""" % {
    'keywords': _words(KEYWORDS),
    'types': _words(TYPES),
    'builtins': _words(BUILTINS),
}

HIGHLIGHT_LEXER = Lark(
    HIGHLIGHT_GRAMMAR,
    parser='lalr',
    lexer='basic',
)

CSS_CLASSES = {
    'COMMENT': 'comment',
    'STRING': 'string',
    'NUMBER': 'number',
    'KEYWORD': 'keyword',
    'TYPE': 'type',
    'BUILTIN': 'builtin',
    'IDENT': 'variable',
    'OPERATOR': 'operator',
    'PUNCTUATION': 'punctuation',
    'WHITESPACE': 'whitespace',
    'UNKNOWN': 'error',
}


def highlight(source: str) -> List[Tuple[str, str]]:
    """Split `source` into ``(css_class, text)`` pairs covering all of it."""
    return [(CSS_CLASSES[token.type], str(token)) for token in HIGHLIGHT_LEXER.lex(source)]


def highlight_html(source: str) -> str:
    """Render `source` as HTML spans using the ``orus-<class>`` convention."""
    parts = []
    for css_class, text in highlight(source):
        escaped = html.escape(text, quote=False)
        if css_class == 'whitespace':
            parts.append(escaped)
        else:
            parts.append(f'<span class="orus-{css_class}">{escaped}</span>')
    return ''.join(parts)

"""Recursive-descent parser for the Orus playground subset.

The parser reads the token stream produced by `tokenize` strictly forward
with one token of lookahead and builds an immutable `Program`. It stops at
the first structural problem with an `OrusSyntaxError` naming what was
expected and what was found. A program that parses but has no
zero-argument ``fn main`` raises `MissingMainError` instead.

Operator priorities, lowest first: assignment, ``||``, ``&&``,
``== !=``, ``< > <= >=``, ``+ -``, ``* / %``, unary ``! -``, postfix
(call, index, field) and primary.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, List, Optional, Union

from .ast import (
    Program, FnDecl, Block, LetDecl, Assignment, PrintStmt, IfStmt,
    ForInStmt, WhileStmt, BreakStmt, ContinueStmt, ReturnStmt, ExprStmt,
    ArrayLiteral, RangeExpr, BinaryExpr, UnaryExpr, Identifier,
    NumberLiteral, StringLiteral, NilLiteral, Call, IndexExpr, FieldAccess,
    Node,
)
from .errors import OrusSyntaxError, MissingMainError
from .lexer import (
    Token, Position, tokenize, IDENT, KEYWORD, NUMBER, STRING, EOF, ERROR,
)

# Keywords of the full language that the simulator deliberately rejects.
UNSUPPORTED_KEYWORDS = frozenset({
    'struct', 'enum', 'impl', 'use', 'pub', 'match', 'try', 'catch', 'throw', 'as',
})

ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '0': '\0',
    '\\': '\\',
    '"': '"',
    "'": "'",
    '{': '{',
    '}': '}',
}

INTERPOLATION_MARKER = re.compile(r'\{\s*([A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*)\s*\}')


class Parser:
    def __init__(self, tokens: Iterable[Token]):
        self._tokens = iter(tokens)
        self.current: Token = Token(EOF, '', Position(1, 1, 0))
        self.loop_depth = 0
        self._shift()

    def _shift(self):
        try:
            token = next(self._tokens)
        except StopIteration:
            # A well-formed stream ends in EOF; keep repeating it.
            token = Token(EOF, '', self.current.position)
        if token.kind == ERROR:
            raise OrusSyntaxError('a valid token', repr(token.text), token.position,
                                  message=token.value)
        self.current = token

    def peek(self) -> Token:
        return self.current

    def advance(self) -> Token:
        token = self.current
        if token.kind != EOF:
            self._shift()
        return token

    def match(self, *texts: str) -> bool:
        token = self.current
        return token.kind not in (STRING, EOF) and token.text in texts

    def consume(self, text: str) -> Token:
        if not self.match(text):
            raise OrusSyntaxError(f"'{text}'", self.current.describe(), self.current.position)
        return self.advance()

    def consume_ident(self, what: str = 'an identifier') -> Token:
        if self.current.kind != IDENT:
            raise OrusSyntaxError(what, self.current.describe(), self.current.position)
        return self.advance()

    def skip_semicolon(self):
        if self.match(';'):
            self.advance()

    def unsupported(self, token: Token):
        raise OrusSyntaxError(
            'a supported statement', f"'{token.text}'", token.position,
            message=f"'{token.text}' is not supported by the playground simulator",
        )

    # Program structure

    def parse_program(self) -> Program:
        functions: List[FnDecl] = []
        globals_: List[LetDecl] = []
        while self.current.kind != EOF:
            if self.match(';'):
                self.advance()
                continue
            if self.match('fn'):
                functions.append(self.parse_fn_decl())
                continue
            if self.match('let', 'const'):
                globals_.append(self.parse_let())
                continue
            if self.current.kind == KEYWORD and self.current.text in UNSUPPORTED_KEYWORDS:
                self.unsupported(self.current)
            raise OrusSyntaxError("'fn', 'let' or 'const'", self.current.describe(),
                                  self.current.position)
        program = Program(tuple(functions), tuple(globals_), self.current.position.offset)
        if not any(fn.name == 'main' and not fn.params for fn in program.functions):
            raise MissingMainError("no zero-argument 'main' function found")
        return program

    def parse_fn_decl(self) -> FnDecl:
        fn_token = self.consume('fn')
        name = self.consume_ident('a function name').text
        self.consume('(')
        params: List[str] = []
        while not self.match(')'):
            params.append(self.consume_ident('a parameter name').text)
            if self.match(':'):
                self.advance()
                self.parse_type()
            if not self.match(','):
                break
            self.advance()
        self.consume(')')
        if self.match('->'):
            self.advance()
            self.parse_type()
        body = self.parse_block()
        return FnDecl(name, tuple(params), body, position=fn_token.position)

    def parse_type(self):
        # Type annotations are accepted and ignored: i32, string, [i32], Result<i32, string>
        if self.match('['):
            self.advance()
            self.parse_type()
            self.consume(']')
            return
        self.consume_ident('a type name')
        if self.match('<'):
            self.advance()
            self.parse_type()
            while self.match(','):
                self.advance()
                self.parse_type()
            self.consume('>')

    def parse_block(self) -> Block:
        open_brace = self.consume('{')
        statements: List[Node] = []
        while not self.match('}'):
            if self.current.kind == EOF:
                raise OrusSyntaxError("'}'", 'end of input', self.current.position,
                                      message=f"unclosed brace opened at {open_brace.position}")
            if self.match(';'):
                self.advance()
                continue
            statements.append(self.parse_statement())
        self.consume('}')
        return Block(tuple(statements), position=open_brace.position)

    # Statements

    def parse_statement(self) -> Node:
        token = self.current
        if token.kind == KEYWORD:
            if token.text in ('let', 'const'):
                return self.parse_let()
            if token.text == 'if':
                return self.parse_if()
            if token.text == 'for':
                return self.parse_for()
            if token.text == 'while':
                return self.parse_while()
            if token.text in ('break', 'continue'):
                return self.parse_loop_control()
            if token.text == 'return':
                return self.parse_return()
            if token.text in UNSUPPORTED_KEYWORDS or token.text == 'fn':
                self.unsupported(token)
        if self.match('{'):
            return self.parse_block()
        if token.kind == IDENT and token.text == 'print':
            return self.parse_print()
        expr = self.parse_expression()
        self.skip_semicolon()
        if isinstance(expr, Assignment):
            return expr
        return ExprStmt(expr, position=token.position)

    def parse_let(self) -> LetDecl:
        keyword = self.advance()
        mutable = False
        if keyword.text == 'let' and self.match('mut'):
            self.advance()
            mutable = True
        name = self.consume_ident('a variable name').text
        if self.match(':'):
            self.advance()
            self.parse_type()
        if keyword.text == 'const' or self.match('='):
            self.consume('=')
            init = self.parse_expression()
        else:
            init = NilLiteral(position=keyword.position)
        self.skip_semicolon()
        return LetDecl(name, init, mutable, position=keyword.position)

    def parse_print(self) -> PrintStmt:
        print_token = self.advance()
        self.consume('(')
        expr = None
        if not self.match(')'):
            expr = self.parse_expression()
        self.consume(')')
        self.skip_semicolon()
        return PrintStmt(expr, position=print_token.position)

    def parse_if(self) -> IfStmt:
        # Handles both `if` and `elif`; `elif` chains become nested IfStmt nodes.
        if_token = self.advance()
        cond = self.parse_expression()
        then_block = self.parse_block()
        else_block: Optional[Union[Block, IfStmt]] = None
        if self.match('elif'):
            else_block = self.parse_if()
        elif self.match('else'):
            self.advance()
            if self.match('if'):
                else_block = self.parse_if()
            else:
                else_block = self.parse_block()
        return IfStmt(cond, then_block, else_block, position=if_token.position)

    def parse_for(self) -> ForInStmt:
        for_token = self.consume('for')
        var_name = self.consume_ident('a loop variable').text
        self.consume('in')
        iterable = self.parse_expression()
        body = self.parse_loop_body()
        return ForInStmt(var_name, iterable, body, position=for_token.position)

    def parse_while(self) -> WhileStmt:
        while_token = self.consume('while')
        cond = self.parse_expression()
        body = self.parse_loop_body()
        return WhileStmt(cond, body, position=while_token.position)

    def parse_loop_body(self) -> Block:
        self.loop_depth += 1
        try:
            return self.parse_block()
        finally:
            self.loop_depth -= 1

    def parse_loop_control(self) -> Node:
        token = self.advance()
        if self.loop_depth == 0:
            raise OrusSyntaxError('a statement', f"'{token.text}'", token.position,
                                  message=f"'{token.text}' outside of a loop")
        self.skip_semicolon()
        if token.text == 'break':
            return BreakStmt(position=token.position)
        return ContinueStmt(position=token.position)

    def parse_return(self) -> ReturnStmt:
        return_token = self.consume('return')
        value = None
        if not self.match(';', '}'):
            value = self.parse_expression()
        self.skip_semicolon()
        return ReturnStmt(value, position=return_token.position)

    # Expression parsing

    def parse_expression(self) -> Node:
        return self.parse_assign()

    # assignment: logic_or ('=' assign)?
    def parse_assign(self) -> Node:
        left = self.parse_logic_or()
        if self.match('='):
            eq_token = self.advance()
            if not isinstance(left, Identifier):
                raise OrusSyntaxError('a variable name before =', "'='", eq_token.position,
                                      message='invalid assignment target')
            right = self.parse_assign()
            return Assignment(left.name, right, position=left.position)
        return left

    def _binary_level(self, operators, operand) -> Node:
        node = operand()
        while self.match(*operators):
            op_token = self.advance()
            right = operand()
            node = BinaryExpr(op_token.text, node, right, position=op_token.position)
        return node

    def parse_logic_or(self) -> Node:
        return self._binary_level(('||',), self.parse_logic_and)

    def parse_logic_and(self) -> Node:
        return self._binary_level(('&&',), self.parse_equality)

    def parse_equality(self) -> Node:
        return self._binary_level(('==', '!='), self.parse_comparison)

    def parse_comparison(self) -> Node:
        return self._binary_level(('<', '>', '<=', '>='), self.parse_term)

    def parse_term(self) -> Node:
        return self._binary_level(('+', '-'), self.parse_factor)

    def parse_factor(self) -> Node:
        return self._binary_level(('*', '/', '%'), self.parse_unary)

    def parse_unary(self) -> Node:
        if self.match('!', '-'):
            op_token = self.advance()
            operand = self.parse_unary()
            return UnaryExpr(op_token.text, operand, position=op_token.position)
        return self.parse_postfix()

    def parse_postfix(self) -> Node:
        node = self.parse_primary()
        while True:
            if self.match('['):
                bracket = self.advance()
                index = self.parse_expression()
                self.consume(']')
                node = IndexExpr(node, index, position=bracket.position)
                continue
            if self.match('.'):
                self.advance()
                name_token = self.consume_ident('a field name')
                node = FieldAccess(node, name_token.text, position=name_token.position)
                continue
            if self.match('(') and isinstance(node, Identifier):
                node = self.parse_call(node)
                continue
            break
        return node

    def parse_call(self, callee: Identifier) -> Node:
        if callee.name == 'print':
            raise OrusSyntaxError('an expression', "'print'", callee.position,
                                  message='print(...) can only be used as a statement')
        self.consume('(')
        args: List[Node] = []
        while not self.match(')'):
            args.append(self.parse_expression())
            if not self.match(','):
                break
            self.advance()
        self.consume(')')
        if callee.name == 'range':
            if len(args) != 2:
                raise OrusSyntaxError('range(start, end)', f"{len(args)} argument(s)",
                                      callee.position,
                                      message='range expects exactly 2 arguments')
            return RangeExpr(args[0], args[1], position=callee.position)
        return Call(callee.name, tuple(args), position=callee.position)

    def parse_primary(self) -> Node:
        token = self.current
        if token.kind == NUMBER:
            self.advance()
            return NumberLiteral(float(token.text), position=token.position)
        if token.kind == STRING:
            self.advance()
            return self.parse_string_literal(token)
        if token.kind == IDENT:
            self.advance()
            return Identifier(token.text, position=token.position)
        if self.match('true', 'false'):
            self.advance()
            return NumberLiteral(1.0 if token.text == 'true' else 0.0, position=token.position)
        if self.match('nil'):
            self.advance()
            return NilLiteral(position=token.position)
        if self.match('('):
            self.advance()
            expr = self.parse_expression()
            self.consume(')')
            return expr
        if self.match('['):
            self.advance()
            elements: List[Node] = []
            while not self.match(']'):
                elements.append(self.parse_expression())
                if not self.match(','):
                    break
                self.advance()
            self.consume(']')
            return ArrayLiteral(tuple(elements), position=token.position)
        if token.kind == KEYWORD and token.text in UNSUPPORTED_KEYWORDS:
            self.unsupported(token)
        raise OrusSyntaxError('an expression', token.describe(), token.position)

    def parse_string_literal(self, token: Token) -> StringLiteral:
        """Split a string body into literal text and `{name}` segments."""
        raw = token.value or ''
        segments: List[Union[str, Node]] = []
        buf: List[str] = []
        i = 0
        while i < len(raw):
            ch = raw[i]
            if ch == '\\' and i + 1 < len(raw):
                nxt = raw[i + 1]
                buf.append(ESCAPES.get(nxt, '\\' + nxt))
                i += 2
                continue
            if ch == '{':
                m = INTERPOLATION_MARKER.match(raw, i)
                if m:
                    if buf:
                        segments.append(''.join(buf))
                        buf = []
                    segments.append(self._marker_node(m.group(1), token.position))
                    i = m.end()
                    continue
            buf.append(ch)
            i += 1
        if buf or not segments:
            segments.append(''.join(buf))
        return StringLiteral(tuple(segments), position=token.position)

    def _marker_node(self, path: str, position: Position) -> Node:
        names = path.split('.')
        node: Node = Identifier(names[0], position=position)
        for name in names[1:]:
            node = FieldAccess(node, name, position=position)
        return node


def parse_program(source: str) -> Program:
    """Parse Orus source text into a Program AST."""
    try:
        return Parser(tokenize(source)).parse_program()
    except RecursionError:
        raise OrusSyntaxError('less deeply nested code', 'nesting too deep', None,
                              message='program is nested too deeply to parse') from None


@lru_cache(maxsize=64)
def parse_cached(source: str) -> Program:
    """Like `parse_program`, but reuses the AST for source seen recently."""
    return parse_program(source)

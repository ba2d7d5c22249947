"""Abstract Syntax Tree (AST) definitions for the Orus playground.

The AST classes defined in this module represent the syntactic structure
of parsed Orus programs. Nodes are frozen dataclasses whose child
collections are tuples, so a parsed `Program` is immutable and can be
reused across runs of the same source. Every node records the position
of the token that started it for error reporting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from .lexer import Position


def _pos():
    return field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass(frozen=True)
class Block(Node):
    statements: Tuple[Node, ...]
    position: Optional[Position] = _pos()


@dataclass(frozen=True)
class FnDecl(Node):
    name: str
    params: Tuple[str, ...]
    body: Block
    position: Optional[Position] = _pos()


@dataclass(frozen=True)
class LetDecl(Node):
    name: str
    init: Node
    mutable: bool = False
    position: Optional[Position] = _pos()


@dataclass(frozen=True)
class Program(Node):
    functions: Tuple[FnDecl, ...]
    globals: Tuple[LetDecl, ...] = ()
    source_length: int = 0
    position: Optional[Position] = _pos()

    def find_function(self, name: str) -> Optional[FnDecl]:
        for fn in self.functions:
            if fn.name == name:
                return fn
        return None


@dataclass(frozen=True)
class Assignment(Node):
    name: str
    expr: Node
    position: Optional[Position] = _pos()


@dataclass(frozen=True)
class PrintStmt(Node):
    expr: Optional[Node]
    position: Optional[Position] = _pos()


@dataclass(frozen=True)
class IfStmt(Node):
    cond: Node
    then_block: Block
    else_block: Optional[Union[Block, 'IfStmt']] = None
    position: Optional[Position] = _pos()


@dataclass(frozen=True)
class ForInStmt(Node):
    var_name: str
    iterable: Node
    body: Block
    position: Optional[Position] = _pos()


@dataclass(frozen=True)
class WhileStmt(Node):
    cond: Node
    body: Block
    position: Optional[Position] = _pos()


@dataclass(frozen=True)
class BreakStmt(Node):
    position: Optional[Position] = _pos()


@dataclass(frozen=True)
class ContinueStmt(Node):
    position: Optional[Position] = _pos()


@dataclass(frozen=True)
class ReturnStmt(Node):
    value: Optional[Node]
    position: Optional[Position] = _pos()


@dataclass(frozen=True)
class ExprStmt(Node):
    expr: Node
    position: Optional[Position] = _pos()


@dataclass(frozen=True)
class ArrayLiteral(Node):
    elements: Tuple[Node, ...]
    position: Optional[Position] = _pos()


@dataclass(frozen=True)
class RangeExpr(Node):
    start: Node
    end: Node
    position: Optional[Position] = _pos()


@dataclass(frozen=True)
class BinaryExpr(Node):
    op: str
    left: Node
    right: Node
    position: Optional[Position] = _pos()


@dataclass(frozen=True)
class UnaryExpr(Node):
    op: str
    operand: Node
    position: Optional[Position] = _pos()


@dataclass(frozen=True)
class Identifier(Node):
    name: str
    position: Optional[Position] = _pos()


@dataclass(frozen=True)
class NumberLiteral(Node):
    value: float
    position: Optional[Position] = _pos()


@dataclass(frozen=True)
class StringLiteral(Node):
    # Alternating pieces: plain `str` text and Identifier/FieldAccess nodes.
    segments: Tuple[Union[str, Node], ...]
    position: Optional[Position] = _pos()

    @property
    def is_plain(self) -> bool:
        return all(isinstance(s, str) for s in self.segments)


@dataclass(frozen=True)
class NilLiteral(Node):
    position: Optional[Position] = _pos()


@dataclass(frozen=True)
class Call(Node):
    name: str
    args: Tuple[Node, ...]
    position: Optional[Position] = _pos()


@dataclass(frozen=True)
class IndexExpr(Node):
    target: Node
    index: Node
    position: Optional[Position] = _pos()


@dataclass(frozen=True)
class FieldAccess(Node):
    target: Node
    name: str
    position: Optional[Position] = _pos()

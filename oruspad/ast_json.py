"""JSON serialization/deserialization for the Orus AST.

This module converts between AST dataclasses and plain Python dict/list
structures suitable for JSON encoding. It supports a full round-trip for
all node types, including the source position each node records.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from .ast import (
    Program,
    FnDecl,
    LetDecl,
    Block,
    Assignment,
    PrintStmt,
    IfStmt,
    ForInStmt,
    WhileStmt,
    BreakStmt,
    ContinueStmt,
    ReturnStmt,
    ExprStmt,
    ArrayLiteral,
    RangeExpr,
    BinaryExpr,
    UnaryExpr,
    Identifier,
    NumberLiteral,
    StringLiteral,
    NilLiteral,
    Call,
    IndexExpr,
    FieldAccess,
)
from .lexer import Position


def position_to_obj(p: Optional[Position]) -> Optional[Dict[str, int]]:
    if p is None:
        return None
    return {"line": p.line, "column": p.column, "offset": p.offset}


def position_from_obj(o: Optional[Dict[str, int]]) -> Optional[Position]:
    if o is None:
        return None
    return Position(o["line"], o["column"], o.get("offset", 0))


def _node(type_name: str, node: Any, **fields: Any) -> Dict[str, Any]:
    obj = {"type": type_name}
    obj.update(fields)
    obj["position"] = position_to_obj(node.position)
    return obj


def _many(nodes) -> list:
    return [ast_to_obj(n) for n in nodes]


def ast_to_obj(node: Any) -> Any:
    # Primitives (plain text segments of string literals included)
    if node is None:
        return None
    if isinstance(node, (int, float, str, bool)):
        return node

    if isinstance(node, Program):
        return _node(
            "Program", node,
            functions=_many(node.functions),
            globals=_many(node.globals),
            source_length=node.source_length,
        )
    if isinstance(node, FnDecl):
        return _node("FnDecl", node, name=node.name, params=list(node.params), body=ast_to_obj(node.body))
    if isinstance(node, LetDecl):
        return _node("LetDecl", node, name=node.name, init=ast_to_obj(node.init), mutable=node.mutable)
    if isinstance(node, Block):
        return _node("Block", node, statements=_many(node.statements))
    if isinstance(node, Assignment):
        return _node("Assignment", node, name=node.name, expr=ast_to_obj(node.expr))
    if isinstance(node, PrintStmt):
        return _node("PrintStmt", node, expr=ast_to_obj(node.expr))
    if isinstance(node, IfStmt):
        return _node(
            "IfStmt", node,
            cond=ast_to_obj(node.cond),
            then_block=ast_to_obj(node.then_block),
            else_block=ast_to_obj(node.else_block),
        )
    if isinstance(node, ForInStmt):
        return _node(
            "ForInStmt", node,
            var_name=node.var_name,
            iterable=ast_to_obj(node.iterable),
            body=ast_to_obj(node.body),
        )
    if isinstance(node, WhileStmt):
        return _node("WhileStmt", node, cond=ast_to_obj(node.cond), body=ast_to_obj(node.body))
    if isinstance(node, BreakStmt):
        return _node("BreakStmt", node)
    if isinstance(node, ContinueStmt):
        return _node("ContinueStmt", node)
    if isinstance(node, ReturnStmt):
        return _node("ReturnStmt", node, value=ast_to_obj(node.value))
    if isinstance(node, ExprStmt):
        return _node("ExprStmt", node, expr=ast_to_obj(node.expr))
    if isinstance(node, ArrayLiteral):
        return _node("ArrayLiteral", node, elements=_many(node.elements))
    if isinstance(node, RangeExpr):
        return _node("RangeExpr", node, start=ast_to_obj(node.start), end=ast_to_obj(node.end))
    if isinstance(node, BinaryExpr):
        return _node("BinaryExpr", node, op=node.op, left=ast_to_obj(node.left), right=ast_to_obj(node.right))
    if isinstance(node, UnaryExpr):
        return _node("UnaryExpr", node, op=node.op, operand=ast_to_obj(node.operand))
    if isinstance(node, Identifier):
        return _node("Identifier", node, name=node.name)
    if isinstance(node, NumberLiteral):
        return _node("NumberLiteral", node, value=node.value)
    if isinstance(node, StringLiteral):
        return _node("StringLiteral", node, segments=_many(node.segments))
    if isinstance(node, NilLiteral):
        return _node("NilLiteral", node)
    if isinstance(node, Call):
        return _node("Call", node, name=node.name, args=_many(node.args))
    if isinstance(node, IndexExpr):
        return _node("IndexExpr", node, target=ast_to_obj(node.target), index=ast_to_obj(node.index))
    if isinstance(node, FieldAccess):
        return _node("FieldAccess", node, target=ast_to_obj(node.target), name=node.name)

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def _tuple(objs) -> tuple:
    return tuple(ast_from_obj(o) for o in objs)


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (int, float, str, bool)):
        return obj
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    pos = position_from_obj(obj.get("position"))
    if t == "Program":
        return Program(
            functions=_tuple(obj["functions"]),
            globals=_tuple(obj.get("globals", [])),
            source_length=int(obj.get("source_length", 0)),
            position=pos,
        )
    if t == "FnDecl":
        return FnDecl(
            name=obj["name"],
            params=tuple(obj["params"]),
            body=ast_from_obj(obj["body"]),
            position=pos,
        )
    if t == "LetDecl":
        return LetDecl(
            name=obj["name"],
            init=ast_from_obj(obj["init"]),
            mutable=bool(obj.get("mutable", False)),
            position=pos,
        )
    if t == "Block":
        return Block(statements=_tuple(obj["statements"]), position=pos)
    if t == "Assignment":
        return Assignment(name=obj["name"], expr=ast_from_obj(obj["expr"]), position=pos)
    if t == "PrintStmt":
        return PrintStmt(expr=ast_from_obj(obj.get("expr")), position=pos)
    if t == "IfStmt":
        return IfStmt(
            cond=ast_from_obj(obj["cond"]),
            then_block=ast_from_obj(obj["then_block"]),
            else_block=ast_from_obj(obj.get("else_block")),
            position=pos,
        )
    if t == "ForInStmt":
        return ForInStmt(
            var_name=obj["var_name"],
            iterable=ast_from_obj(obj["iterable"]),
            body=ast_from_obj(obj["body"]),
            position=pos,
        )
    if t == "WhileStmt":
        return WhileStmt(cond=ast_from_obj(obj["cond"]), body=ast_from_obj(obj["body"]), position=pos)
    if t == "BreakStmt":
        return BreakStmt(position=pos)
    if t == "ContinueStmt":
        return ContinueStmt(position=pos)
    if t == "ReturnStmt":
        return ReturnStmt(value=ast_from_obj(obj.get("value")), position=pos)
    if t == "ExprStmt":
        return ExprStmt(expr=ast_from_obj(obj["expr"]), position=pos)
    if t == "ArrayLiteral":
        return ArrayLiteral(elements=_tuple(obj["elements"]), position=pos)
    if t == "RangeExpr":
        return RangeExpr(start=ast_from_obj(obj["start"]), end=ast_from_obj(obj["end"]), position=pos)
    if t == "BinaryExpr":
        return BinaryExpr(
            op=obj["op"],
            left=ast_from_obj(obj["left"]),
            right=ast_from_obj(obj["right"]),
            position=pos,
        )
    if t == "UnaryExpr":
        return UnaryExpr(op=obj["op"], operand=ast_from_obj(obj["operand"]), position=pos)
    if t == "Identifier":
        return Identifier(name=obj["name"], position=pos)
    if t == "NumberLiteral":
        return NumberLiteral(value=float(obj["value"]), position=pos)
    if t == "StringLiteral":
        return StringLiteral(segments=_tuple(obj["segments"]), position=pos)
    if t == "NilLiteral":
        return NilLiteral(position=pos)
    if t == "Call":
        return Call(name=obj["name"], args=_tuple(obj["args"]), position=pos)
    if t == "IndexExpr":
        return IndexExpr(target=ast_from_obj(obj["target"]), index=ast_from_obj(obj["index"]), position=pos)
    if t == "FieldAccess":
        return FieldAccess(target=ast_from_obj(obj["target"]), name=obj["name"], position=pos)

    raise ValueError(f"Unknown AST node type: {t}")

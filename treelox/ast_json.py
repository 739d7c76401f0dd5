"""JSON serialization/deserialization for the treelox AST.

This module converts between AST dataclasses and plain Python dict/list
structures suitable for JSON encoding. Tokens keep their kind, lexeme,
literal and line so that a reloaded tree reports errors at the same
source lines as the freshly parsed one. Numbers, strings and booleans are stored
as JSON scalars; ``nil`` is stored as ``{"type": "Nil"}``.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import (
    Program,
    Literal,
    Unary,
    Binary,
    Grouping,
    Variable,
    Assign,
    ExprStmt,
    PrintStmt,
    VarDecl,
    Block,
    IfStmt,
    WhileStmt,
)
from .tokens import Token, TokenType
from .types import NIL, NilVal


def token_to_obj(t: Token) -> Dict[str, Any]:
    return {"type": "Token", "kind": t.kind.name, "lexeme": t.lexeme, "literal": t.literal, "line": t.line}


def token_from_obj(o: Dict[str, Any]) -> Token:
    literal = o.get("literal")
    kind = TokenType[o["kind"]]
    if kind == TokenType.NUMBER and literal is not None:
        literal = float(literal)
    return Token(kind, o["lexeme"], literal, int(o["line"]))


def value_to_obj(value: Any) -> Any:
    if isinstance(value, NilVal):
        return {"type": "Nil"}
    return value


def value_from_obj(obj: Any) -> Any:
    if isinstance(obj, dict) and obj.get("type") == "Nil":
        return NIL
    # JSON has a single number type; treelox numbers are always floats
    if isinstance(obj, int) and not isinstance(obj, bool):
        return float(obj)
    return obj


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None
    if isinstance(node, Token):
        return token_to_obj(node)

    if isinstance(node, Program):
        return {"type": "Program", "statements": [ast_to_obj(s) for s in node.statements]}

    # Expressions
    if isinstance(node, Literal):
        return {"type": "Literal", "value": value_to_obj(node.value)}
    if isinstance(node, Unary):
        return {"type": "Unary", "operator": ast_to_obj(node.operator), "right": ast_to_obj(node.right)}
    if isinstance(node, Binary):
        return {
            "type": "Binary",
            "left": ast_to_obj(node.left),
            "operator": ast_to_obj(node.operator),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, Grouping):
        return {"type": "Grouping", "expression": ast_to_obj(node.expression)}
    if isinstance(node, Variable):
        return {"type": "Variable", "name": ast_to_obj(node.name)}
    if isinstance(node, Assign):
        return {"type": "Assign", "name": ast_to_obj(node.name), "value": ast_to_obj(node.value)}

    # Statements
    if isinstance(node, ExprStmt):
        return {"type": "ExprStmt", "expression": ast_to_obj(node.expression)}
    if isinstance(node, PrintStmt):
        return {"type": "PrintStmt", "expression": ast_to_obj(node.expression)}
    if isinstance(node, VarDecl):
        return {"type": "VarDecl", "name": ast_to_obj(node.name), "initializer": ast_to_obj(node.initializer)}
    if isinstance(node, Block):
        return {"type": "Block", "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, IfStmt):
        return {
            "type": "IfStmt",
            "condition": ast_to_obj(node.condition),
            "then_branch": ast_to_obj(node.then_branch),
            "else_branch": ast_to_obj(node.else_branch),
        }
    if isinstance(node, WhileStmt):
        return {"type": "WhileStmt", "condition": ast_to_obj(node.condition), "body": ast_to_obj(node.body)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "Token":
        return token_from_obj(obj)
    if t == "Program":
        return Program(statements=[ast_from_obj(s) for s in obj["statements"]])
    if t == "Literal":
        return Literal(value=value_from_obj(obj["value"]))
    if t == "Unary":
        return Unary(operator=ast_from_obj(obj["operator"]), right=ast_from_obj(obj["right"]))
    if t == "Binary":
        return Binary(
            left=ast_from_obj(obj["left"]),
            operator=ast_from_obj(obj["operator"]),
            right=ast_from_obj(obj["right"]),
        )
    if t == "Grouping":
        return Grouping(expression=ast_from_obj(obj["expression"]))
    if t == "Variable":
        return Variable(name=ast_from_obj(obj["name"]))
    if t == "Assign":
        return Assign(name=ast_from_obj(obj["name"]), value=ast_from_obj(obj["value"]))
    if t == "ExprStmt":
        return ExprStmt(expression=ast_from_obj(obj["expression"]))
    if t == "PrintStmt":
        return PrintStmt(expression=ast_from_obj(obj["expression"]))
    if t == "VarDecl":
        return VarDecl(name=ast_from_obj(obj["name"]), initializer=ast_from_obj(obj.get("initializer")))
    if t == "Block":
        return Block(statements=[ast_from_obj(s) for s in obj["statements"]])
    if t == "IfStmt":
        return IfStmt(
            condition=ast_from_obj(obj["condition"]),
            then_branch=ast_from_obj(obj["then_branch"]),
            else_branch=ast_from_obj(obj.get("else_branch")),
        )
    if t == "WhileStmt":
        return WhileStmt(condition=ast_from_obj(obj["condition"]), body=ast_from_obj(obj["body"]))

    raise ValueError(f"Unknown AST node type: {t}")

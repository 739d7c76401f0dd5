"""Abstract Syntax Tree (AST) definitions for treelox.

Expressions and statements are plain dataclasses. Each node owns its
children outright; the tree never shares a node between two parents
and has no back references. Nodes that need a source line for error
messages keep the token they were built from.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .tokens import Token
from .types import Value


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass
class Expr(Node):
    pass


@dataclass
class Stmt(Node):
    pass


@dataclass
class Program(Node):
    statements: List[Stmt]


# Expressions

@dataclass
class Literal(Expr):
    value: Value


@dataclass
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass
class Grouping(Expr):
    expression: Expr


@dataclass
class Variable(Expr):
    name: Token


@dataclass
class Assign(Expr):
    name: Token
    value: Expr


# Statements

@dataclass
class ExprStmt(Stmt):
    expression: Expr


@dataclass
class PrintStmt(Stmt):
    expression: Expr


@dataclass
class VarDecl(Stmt):
    name: Token
    initializer: Optional[Expr]  # nil when absent


@dataclass
class Block(Stmt):
    statements: List[Stmt]


@dataclass
class IfStmt(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass
class WhileStmt(Stmt):
    condition: Expr
    body: Stmt

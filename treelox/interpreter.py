"""Tree-walking interpreter for treelox.

This module ties the pipeline together: ``parse_program`` runs the
scanner and the parser, and ``Interpreter`` executes the resulting
statements against a chain of ``Environment`` scopes. ``run_program``
and ``evaluate_expression`` are the convenience entry points used by
the command line, the shell and the tests.

Errors never escape these entry points. Scan and parse errors are
reported as they are found and the statements that did parse still
run. A runtime error aborts the top-level statement it occurred in,
is reported, and execution carries on with the next statement.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from typing import Any, List, Optional

from .ast import (
    Assign, Binary, Block, Expr, ExprStmt, Grouping, IfStmt, Literal,
    PrintStmt, Program, Stmt, Unary, VarDecl, Variable, WhileStmt,
)
from .environment import Environment
from .errors import DivisionByZero, ErrorReporter, LoxRuntimeError, NestingTooDeep, TypeMismatch
from .parser import Parser
from .scanner import Scanner
from .tokens import Token, TokenType
from .types import NIL, is_truthy, to_string, type_name, values_equal


def parse_program(source: str, reporter: Optional[ErrorReporter] = None) -> Program:
    """Scan and parse source text into a Program, reporting errors as they occur."""
    tokens = Scanner(source, reporter).scan_tokens()
    return Parser(tokens, reporter).parse_program()


def node_line(node: Any) -> int:
    """Line of the first token found in a tree, or 0 if it holds none."""
    # iterative, so it also works on trees too deep to evaluate
    pending = [node]
    while pending:
        item = pending.pop()
        if isinstance(item, Token):
            return item.line
        if isinstance(item, list):
            pending.extend(reversed(item))
        elif is_dataclass(item):
            pending.extend(reversed([getattr(item, f.name) for f in fields(item)]))
    return 0


class Interpreter:
    """Executes treelox statements.

    The global environment is created once and outlives every call to
    ``run``, so a shell session can keep its variables between lines.
    Block scopes are ordinary ``Environment`` objects passed down the
    call stack; leaving ``execute_block`` by any route drops them.
    """
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt',
                 reporter: Optional[ErrorReporter] = None):
        self.global_env = Environment()
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str) -> None:
        if self.debug_fp:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def close(self) -> None:
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    def __enter__(self) -> 'Interpreter':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # Public API
    def run(self, program: Program, env: Optional[Environment] = None) -> None:
        self.interpret(program.statements, env)

    def run_source(self, source: str) -> None:
        self.run(parse_program(source, self.reporter))

    def interpret(self, statements: List[Stmt], env: Optional[Environment] = None) -> None:
        if env is None:
            env = self.global_env
        for stmt in statements:
            if self.debug_level >= 1:
                self.debug(f"execute {type(stmt).__name__}")
            try:
                self.execute(stmt, env)
            except LoxRuntimeError as e:
                self.runtime_error(e)
            except RecursionError:
                self.runtime_error(NestingTooDeep(node_line(stmt)))

    def runtime_error(self, error: LoxRuntimeError) -> None:
        if self.debug_level >= 1:
            self.debug(f"runtime error {error.describe()}")
        self.reporter.report(error)

    def execute_block(self, statements: List[Stmt], env: Environment) -> None:
        for stmt in statements:
            self.execute(stmt, env)

    def execute(self, node: Stmt, env: Environment) -> None:
        if isinstance(node, ExprStmt):
            self.evaluate(node.expression, env)
            return
        if isinstance(node, PrintStmt):
            value = self.evaluate(node.expression, env)
            print(to_string(value))
            return
        if isinstance(node, VarDecl):
            value = self.evaluate(node.initializer, env) if node.initializer is not None else NIL
            env.define(node.name.lexeme, value)
            if self.debug_level >= 2:
                self.debug(f"declare {node.name.lexeme}: {type_name(value)} = {to_string(value)}")
            return
        if isinstance(node, Block):
            block_env = Environment(parent=env)
            if self.debug_level >= 3:
                self.debug(f"enter block at depth {block_env.depth()}")
            self.execute_block(node.statements, block_env)
            if self.debug_level >= 3:
                self.debug(f"leave block at depth {block_env.depth()}")
            return
        if isinstance(node, IfStmt):
            cond = self.evaluate(node.condition, env)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {to_string(cond)} -> {to_string(truthy)}")
            if truthy:
                self.execute(node.then_branch, env)
            elif node.else_branch is not None:
                self.execute(node.else_branch, env)
            return
        if isinstance(node, WhileStmt):
            while True:
                cond = self.evaluate(node.condition, env)
                if self.debug_level >= 3:
                    self.debug(f"while condition {to_string(cond)}")
                if not is_truthy(cond):
                    break
                self.execute(node.body, env)
            return
        raise TypeError(f"Unsupported node for execution: {type(node).__name__}")

    def evaluate(self, node: Expr, env: Environment) -> Any:
        value = self.evaluate_node(node, env)
        if self.debug_level >= 4:
            self.debug(f"evaluate {type(node).__name__} -> {to_string(value)}")
        return value

    def evaluate_node(self, node: Expr, env: Environment) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Grouping):
            return self.evaluate(node.expression, env)
        if isinstance(node, Variable):
            return env.get(node.name)
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            env.assign(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"assign {node.name.lexeme} = {to_string(value)}")
            return value
        if isinstance(node, Unary):
            operand = self.evaluate(node.right, env)
            if node.operator.kind == TokenType.MINUS:
                self.check_number_operand(node.operator, operand)
                return -operand
            if node.operator.kind == TokenType.BANG:
                return not is_truthy(operand)
            raise TypeMismatch(node.operator, 'Unknown unary operator.')
        if isinstance(node, Binary):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self.apply_binary_op(node.operator, left, right)
        raise TypeError(f"Unsupported node for evaluation: {type(node).__name__}")

    def apply_binary_op(self, operator: Token, a: Any, b: Any) -> Any:
        op = operator.kind
        if op == TokenType.PLUS:
            if isinstance(a, float) and isinstance(b, float):
                return a + b
            if isinstance(a, str) and isinstance(b, str):
                return a + b
            raise TypeMismatch(operator, 'Operands must be two numbers or two strings.')
        if op == TokenType.EQUAL_EQUAL:
            return values_equal(a, b)
        if op == TokenType.BANG_EQUAL:
            return not values_equal(a, b)
        self.check_number_operands(operator, a, b)
        if op == TokenType.MINUS:
            return a - b
        if op == TokenType.STAR:
            return a * b
        if op == TokenType.SLASH:
            if b == 0.0:
                raise DivisionByZero(operator)
            return a / b
        if op == TokenType.GREATER:
            return a > b
        if op == TokenType.GREATER_EQUAL:
            return a >= b
        if op == TokenType.LESS:
            return a < b
        if op == TokenType.LESS_EQUAL:
            return a <= b
        raise TypeMismatch(operator, 'Unknown binary operator.')

    @staticmethod
    def check_number_operand(operator: Token, operand: Any) -> None:
        if not isinstance(operand, float):
            raise TypeMismatch(operator, f'Operand must be a number, got {type_name(operand)}.')

    @staticmethod
    def check_number_operands(operator: Token, a: Any, b: Any) -> None:
        if not (isinstance(a, float) and isinstance(b, float)):
            raise TypeMismatch(operator, f'Operands must be numbers, got {type_name(a)} and {type_name(b)}.')


def run_program(source: str, interpreter: Optional[Interpreter] = None, debug_level: int = 0) -> Interpreter:
    """Run treelox source text, returning the interpreter it ran in.

    Without an interpreter a fresh one is created (and its debug trace
    closed afterwards); passing one keeps its global variables.
    """
    if interpreter is not None:
        interpreter.run_source(source)
        return interpreter
    with Interpreter(debug_level=debug_level) as interpreter:
        interpreter.run_source(source)
    return interpreter


def evaluate_expression(source: str, interpreter: Optional[Interpreter] = None) -> Any:
    """Evaluate source text holding exactly one expression.

    Returns the resulting value, or None if scanning, parsing or
    evaluation failed (the error has been reported by then). The
    treelox ``nil`` comes back as ``NIL``, never as None.
    """
    if interpreter is None:
        interpreter = Interpreter()
    reporter = interpreter.reporter
    scanner = Scanner(source, reporter)
    tokens = scanner.scan_tokens()
    if scanner.errors:
        return None
    expr = Parser(tokens, reporter).parse_single_expression()
    if expr is None:
        return None
    try:
        return interpreter.evaluate(expr, interpreter.global_env)
    except LoxRuntimeError as e:
        interpreter.runtime_error(e)
        return None
    except RecursionError:
        interpreter.runtime_error(NestingTooDeep(node_line(expr)))
        return None

"""Error types and error reporting for treelox.

Scanning, parsing and evaluation each raise a subclass of ``LoxError``
where the fault is found. The stage that owns the recovery boundary
(character, declaration, top-level statement) catches it and hands it to
an ``ErrorReporter``, which prints it to the error stream and remembers
that something went wrong. No ``LoxError`` is meant to escape to the
host program.
"""

from __future__ import annotations

import sys
from typing import IO, List, Optional

from termcolor import colored

from treelox.tokens import Token, TokenType


class LoxError(Exception):
    """Base type of every error a treelox program can cause."""
    label = 'Error'

    def __init__(self, line: int, message: str):
        super().__init__(f"[line {line}] {message}")
        self.line = line
        self.message = message

    def describe(self) -> str:
        return f"[line {self.line}] {self.message}"


class ScanError(LoxError):
    """An unrecognised character or an unterminated string."""
    label = 'Scan error'


class ParseError(LoxError):
    """A grammar violation found by the parser."""
    label = 'Parse error'

    def __init__(self, token: Token, message: str):
        super().__init__(token.line, message)
        self.token = token

    def describe(self) -> str:
        if self.token.kind == TokenType.EOF:
            where = 'at end'
        else:
            where = f"at '{self.token.lexeme}'"
        return f"[line {self.line}] Error {where}: {self.message}"


class LoxRuntimeError(LoxError):
    """Raised while evaluating a statement; aborts that statement only."""
    label = 'Runtime error'
    name = 'RuntimeError'

    def __init__(self, token: Token, message: str):
        super().__init__(token.line, message)
        self.token = token

    def describe(self) -> str:
        return f"[line {self.line}] {self.name}: {self.message}"


class UndefinedVariable(LoxRuntimeError):
    name = 'UndefinedVariable'

    def __init__(self, token: Token):
        super().__init__(token, f"Undefined variable '{token.lexeme}'.")


class TypeMismatch(LoxRuntimeError):
    name = 'TypeMismatch'

    def __init__(self, operator: Token, message: str):
        super().__init__(operator, f"{message} (operator '{operator.lexeme}')")
        self.operator = operator


class DivisionByZero(LoxRuntimeError):
    name = 'DivisionByZero'

    def __init__(self, operator: Token):
        super().__init__(operator, 'Division by zero.')


class NestingTooDeep(LoxRuntimeError):
    """The program nests deeper than the Python stack allows."""
    name = 'NestingTooDeep'

    def __init__(self, line: int):
        LoxError.__init__(self, line, 'Too much nesting.')
        self.token = None


class ErrorReporter:
    """Writes errors to the error stream and tracks whether any occurred.

    ``color`` forces colored output on (True) or off (False); left as
    None, termcolor decides from the terminal and the NO_COLOR /
    FORCE_COLOR environment variables.
    """
    ERROR = 'red'
    RUNTIME = 'magenta'

    def __init__(self, stream: Optional[IO[str]] = None, color: Optional[bool] = None):
        self.stream = stream
        self.color = color
        self.errors: List[LoxError] = []
        self.had_error = False
        self.had_runtime_error = False

    def _colored(self, text: str, color: str) -> str:
        return colored(
            text, color, attrs=['bold'],
            no_color=True if self.color is False else None,
            force_color=True if self.color else None,
        )

    def format(self, error: LoxError) -> str:
        color = self.RUNTIME if isinstance(error, LoxRuntimeError) else self.ERROR
        return self._colored(f"{error.label}:", color) + ' ' + error.describe()

    def report(self, error: LoxError) -> None:
        if isinstance(error, LoxRuntimeError):
            self.had_runtime_error = True
        else:
            self.had_error = True
        self.errors.append(error)
        stream = self.stream if self.stream is not None else sys.stderr
        print(self.format(error), file=stream)

    def reset(self) -> None:
        """Forget earlier errors; used between REPL lines."""
        self.errors = []
        self.had_error = False
        self.had_runtime_error = False

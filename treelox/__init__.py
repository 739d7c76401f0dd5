# treelox language package
# This package provides a scanner, parser and tree-walking interpreter for treelox.
from .errors import ErrorReporter, LoxError, LoxRuntimeError
from .interpreter import Interpreter, evaluate_expression, parse_program, run_program

__all__ = [
    'run_program',
    'parse_program',
    'evaluate_expression',
    'Interpreter',
    'ErrorReporter',
    'LoxError',
    'LoxRuntimeError',
]

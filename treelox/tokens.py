"""Lexical token definitions for treelox.

Every token produced by the scanner carries its kind, the exact source
text it was made from, an optional literal payload (the parsed number or
the string contents) and the line it started on.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class TokenType(Enum):
    # Single-character tokens.
    LEFT_PAREN = '('
    RIGHT_PAREN = ')'
    LEFT_BRACE = '{'
    RIGHT_BRACE = '}'
    COMMA = ','
    DOT = '.'
    MINUS = '-'
    PLUS = '+'
    SEMICOLON = ';'
    SLASH = '/'
    STAR = '*'

    # One or two character tokens.
    BANG = '!'
    BANG_EQUAL = '!='
    EQUAL = '='
    EQUAL_EQUAL = '=='
    GREATER = '>'
    GREATER_EQUAL = '>='
    LESS = '<'
    LESS_EQUAL = '<='

    # Literals.
    IDENTIFIER = 'identifier'
    STRING = 'string'
    NUMBER = 'number'

    # Keywords.
    AND = 'and'
    CLASS = 'class'
    ELSE = 'else'
    FALSE = 'false'
    FUN = 'fun'
    FOR = 'for'
    IF = 'if'
    NIL = 'nil'
    OR = 'or'
    PRINT = 'print'
    RETURN = 'return'
    SUPER = 'super'
    THIS = 'this'
    TRUE = 'true'
    VAR = 'var'
    WHILE = 'while'

    EOF = 'eof'


KEYWORDS = {
    t.value: t for t in (
        TokenType.AND, TokenType.CLASS, TokenType.ELSE, TokenType.FALSE,
        TokenType.FUN, TokenType.FOR, TokenType.IF, TokenType.NIL,
        TokenType.OR, TokenType.PRINT, TokenType.RETURN, TokenType.SUPER,
        TokenType.THIS, TokenType.TRUE, TokenType.VAR, TokenType.WHILE,
    )
}

# Tokens that may begin a statement; the parser resynchronises on these.
STATEMENT_STARTS = frozenset({
    TokenType.CLASS, TokenType.FUN, TokenType.VAR, TokenType.FOR,
    TokenType.IF, TokenType.WHILE, TokenType.PRINT, TokenType.RETURN,
    TokenType.LEFT_BRACE,
})


@dataclass(frozen=True)
class Token:
    kind: TokenType
    lexeme: str
    literal: Optional[Union[float, str]]
    line: int

    def __repr__(self) -> str:
        if self.literal is None:
            return f"Token({self.kind.name}, {self.lexeme!r}, line={self.line})"
        return f"Token({self.kind.name}, {self.lexeme!r}, {self.literal!r}, line={self.line})"

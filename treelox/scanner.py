"""Scanner for treelox.

The terminals of the language are declared as a Lark grammar and the
source is tokenised by Lark's basic lexer in a single left-to-right
pass. Lark's tokens are then converted into treelox ``Token`` objects
with their literal payloads attached.

Lark stops at the first character no terminal accepts. The scanner
reports that character as a ``ScanError`` and restarts the lexer just
past it, so one bad character never hides the rest of the input.
"""

from __future__ import annotations

from typing import List, Optional

from lark import Lark
from lark.exceptions import UnexpectedCharacters

from treelox.errors import ErrorReporter, ScanError
from treelox.tokens import KEYWORDS, Token, TokenType


LOX_TERMINALS = r"""
    start: _token*
    _token: LEFT_PAREN | RIGHT_PAREN | LEFT_BRACE | RIGHT_BRACE
          | COMMA | DOT | MINUS | PLUS | SEMICOLON | SLASH | STAR
          | BANG | BANG_EQUAL | EQUAL | EQUAL_EQUAL
          | GREATER | GREATER_EQUAL | LESS | LESS_EQUAL
          | IDENTIFIER | STRING | NUMBER
          | AND | CLASS | ELSE | FALSE | FUN | FOR | IF | NIL | OR
          | PRINT | RETURN | SUPER | THIS | TRUE | VAR | WHILE

    LEFT_PAREN: "("
    RIGHT_PAREN: ")"
    LEFT_BRACE: "{"
    RIGHT_BRACE: "}"
    COMMA: ","
    DOT: "."
    MINUS: "-"
    PLUS: "+"
    SEMICOLON: ";"
    SLASH: "/"
    STAR: "*"

    BANG: "!"
    BANG_EQUAL: "!="
    EQUAL: "="
    EQUAL_EQUAL: "=="
    GREATER: ">"
    GREATER_EQUAL: ">="
    LESS: "<"
    LESS_EQUAL: "<="

    // Keywords are matched by IDENTIFIER and retyped by Lark when the
    // whole identifier equals one of these strings.
    AND: "and"
    CLASS: "class"
    ELSE: "else"
    FALSE: "false"
    FUN: "fun"
    FOR: "for"
    IF: "if"
    NIL: "nil"
    OR: "or"
    PRINT: "print"
    RETURN: "return"
    SUPER: "super"
    THIS: "this"
    TRUE: "true"
    VAR: "var"
    WHILE: "while"

    IDENTIFIER: /[A-Za-z_][A-Za-z0-9_]*/
    NUMBER: /[0-9]+(\.[0-9]+)?/

    // The closing quote is optional so that an unterminated string is
    // still one token; the scanner rejects it afterwards.
    STRING: /"[^"]*"?/

    COMMENT: /\/\/[^\n]*/
    WHITESPACE: /[ \t\r\n]+/
    %ignore COMMENT
    %ignore WHITESPACE
"""


LOX_LEXER = Lark(LOX_TERMINALS, parser='lalr', lexer='basic')


class Scanner:
    """Turns source text into a list of tokens ending with ``EOF``."""

    def __init__(self, source: str, reporter: Optional[ErrorReporter] = None):
        self.source = source
        self.reporter = reporter
        self.tokens: List[Token] = []
        self.errors: List[ScanError] = []

    def scan_tokens(self) -> List[Token]:
        offset = 0
        line_base = 0
        while True:
            try:
                for raw in LOX_LEXER.lex(self.source[offset:]):
                    self.add_token(raw.type, str(raw), line_base + raw.line)
                break
            except UnexpectedCharacters as e:
                line = line_base + e.line
                self.error(line, f"Unexpected character {e.char!r}.")
                # the rejected character is never a newline, so the
                # restarted lexer's line 1 is this same line
                offset += e.pos_in_stream + 1
                line_base = line - 1
        self.tokens.append(Token(TokenType.EOF, '', None, self.source.count('\n') + 1))
        return self.tokens

    def add_token(self, type_name: str, lexeme: str, line: int) -> None:
        kind = TokenType[type_name]
        literal = None
        if kind == TokenType.STRING:
            if len(lexeme) < 2 or not lexeme.endswith('"'):
                self.error(line, 'Unterminated string.')
                return
            literal = lexeme[1:-1]
        elif kind == TokenType.NUMBER:
            literal = float(lexeme)
        elif kind == TokenType.IDENTIFIER and lexeme in KEYWORDS:
            kind = KEYWORDS[lexeme]
        self.tokens.append(Token(kind, lexeme, literal, line))

    def error(self, line: int, message: str) -> None:
        err = ScanError(line, message)
        self.errors.append(err)
        if self.reporter is not None:
            self.reporter.report(err)


def scan(source: str, reporter: Optional[ErrorReporter] = None) -> List[Token]:
    """Scan ``source`` and return its tokens, reporting errors to ``reporter``."""
    return Scanner(source, reporter).scan_tokens()

"""Recursive-descent parser for treelox.

Grammar, lowest to highest precedence::

    program     := declaration* EOF
    declaration := "var" IDENTIFIER ("=" expression)? ";" | statement
    statement   := "print" expression ";"
                 | "{" declaration* "}"
                 | "if" "(" expression ")" statement ("else" statement)?
                 | "while" "(" expression ")" statement
                 | expression ";"
    expression  := assignment
    assignment  := equality ("=" assignment)?
    equality    := comparison (("==" | "!=") comparison)*
    comparison  := term ((">" | ">=" | "<" | "<=") term)*
    term        := factor (("+" | "-") factor)*
    factor      := unary (("*" | "/") unary)*
    unary       := ("!" | "-") unary | primary
    primary     := NUMBER | STRING | "true" | "false" | "nil"
                 | IDENTIFIER | "(" expression ")"

Each binary level folds its operands into a left-leaning tree. Unary and
assignment recurse on themselves and so associate to the right. The
grammar accepts any equality expression on the left of ``=``; whether it
is really an assignable name is checked once it has been parsed.

A syntax error raises ``ParseError``. In program mode the error is
caught at the declaration that contains it: it is reported, tokens are
skipped up to the next statement boundary and parsing continues, so one
broken statement only costs that statement. Nesting too deep for the
Python stack is caught once the top-level statement has unwound; it is
reported as one error and the whole statement is skipped. In
single-expression mode the first error ends the parse.
"""

from __future__ import annotations

from typing import List, Optional

from .ast import (
    Assign, Binary, Block, Expr, ExprStmt, Grouping, IfStmt, Literal,
    PrintStmt, Program, Stmt, Unary, VarDecl, Variable, WhileStmt,
)
from .errors import ErrorReporter, ParseError
from .tokens import STATEMENT_STARTS, Token, TokenType
from .types import NIL


class Parser:
    def __init__(self, tokens: List[Token], reporter: Optional[ErrorReporter] = None):
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].kind != TokenType.EOF:
            line = self.tokens[-1].line if self.tokens else 1
            self.tokens.append(Token(TokenType.EOF, '', None, line))
        self.pos = 0
        self.reporter = reporter
        self.errors: List[ParseError] = []

    # Token cursor

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def is_at_end(self) -> bool:
        return self.peek().kind == TokenType.EOF

    def match(self, *kinds: TokenType) -> bool:
        return self.peek().kind in kinds

    def advance(self) -> Token:
        token = self.peek()
        if not self.is_at_end():
            self.pos += 1
        return token

    def consume(self, kind: TokenType, message: str) -> Token:
        if self.match(kind):
            return self.advance()
        raise ParseError(self.peek(), message)

    # Error handling

    def report(self, error: ParseError) -> None:
        self.errors.append(error)
        if self.reporter is not None:
            self.reporter.report(error)

    def synchronize(self) -> None:
        """Discard tokens until a likely statement boundary."""
        self.advance()
        while not self.is_at_end():
            if self.previous().kind == TokenType.SEMICOLON:
                return
            if self.peek().kind in STATEMENT_STARTS:
                return
            self.advance()

    def skip_statement(self, start: int) -> None:
        """Skip the whole top-level statement that began at ``start``, nested blocks included."""
        self.pos = start
        depth = 0
        while not self.is_at_end():
            token = self.advance()
            if token.kind == TokenType.LEFT_BRACE:
                depth += 1
            elif token.kind == TokenType.RIGHT_BRACE:
                depth -= 1
                if depth <= 0:
                    return
            elif token.kind == TokenType.SEMICOLON and depth == 0:
                return

    # Entry points

    def parse(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.is_at_end():
            start = self.pos
            try:
                stmt = self.parse_declaration()
            except RecursionError:
                self.report(ParseError(self.peek(), 'Too much nesting.'))
                self.skip_statement(start)
                continue
            if stmt is not None:
                statements.append(stmt)
        return statements

    def parse_program(self) -> Program:
        return Program(self.parse())

    def parse_single_expression(self) -> Optional[Expr]:
        """Parse the whole token stream as one expression, or return None."""
        try:
            expr = self.parse_expression()
            if not self.is_at_end():
                raise ParseError(self.peek(), 'Expect end of expression.')
            return expr
        except ParseError as e:
            self.report(e)
            return None
        except RecursionError:
            self.report(ParseError(self.peek(), 'Too much nesting.'))
            return None

    # Declarations and statements

    def parse_declaration(self) -> Optional[Stmt]:
        try:
            if self.match(TokenType.VAR):
                return self.parse_var_decl()
            return self.parse_statement()
        except ParseError as e:
            self.report(e)
            self.synchronize()
            return None

    def parse_var_decl(self) -> VarDecl:
        self.advance()
        name = self.consume(TokenType.IDENTIFIER, 'Expect variable name.')
        initializer: Optional[Expr] = None
        if self.match(TokenType.EQUAL):
            self.advance()
            initializer = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return VarDecl(name, initializer)

    def parse_statement(self) -> Stmt:
        if self.match(TokenType.PRINT):
            return self.parse_print_stmt()
        if self.match(TokenType.LEFT_BRACE):
            return Block(self.parse_block())
        if self.match(TokenType.IF):
            return self.parse_if_stmt()
        if self.match(TokenType.WHILE):
            return self.parse_while_stmt()
        expr = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return ExprStmt(expr)

    def parse_print_stmt(self) -> PrintStmt:
        self.advance()
        value = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return PrintStmt(value)

    def parse_block(self) -> List[Stmt]:
        self.advance()
        statements: List[Stmt] = []
        while not self.match(TokenType.RIGHT_BRACE) and not self.is_at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def parse_if_stmt(self) -> IfStmt:
        self.advance()
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.parse_expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")
        then_branch = self.parse_statement()
        else_branch = None
        if self.match(TokenType.ELSE):
            self.advance()
            else_branch = self.parse_statement()
        return IfStmt(condition, then_branch, else_branch)

    def parse_while_stmt(self) -> WhileStmt:
        self.advance()
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.parse_expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        body = self.parse_statement()
        return WhileStmt(condition, body)

    # Expressions

    def parse_expression(self) -> Expr:
        return self.parse_assignment()

    def parse_assignment(self) -> Expr:
        expr = self.parse_equality()
        if self.match(TokenType.EQUAL):
            equals = self.advance()
            value = self.parse_assignment()
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            raise ParseError(equals, 'Invalid assignment target.')
        return expr

    def parse_equality(self) -> Expr:
        expr = self.parse_comparison()
        while self.match(TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL):
            operator = self.advance()
            right = self.parse_comparison()
            expr = Binary(expr, operator, right)
        return expr

    def parse_comparison(self) -> Expr:
        expr = self.parse_term()
        while self.match(TokenType.GREATER, TokenType.GREATER_EQUAL,
                         TokenType.LESS, TokenType.LESS_EQUAL):
            operator = self.advance()
            right = self.parse_term()
            expr = Binary(expr, operator, right)
        return expr

    def parse_term(self) -> Expr:
        expr = self.parse_factor()
        while self.match(TokenType.MINUS, TokenType.PLUS):
            operator = self.advance()
            right = self.parse_factor()
            expr = Binary(expr, operator, right)
        return expr

    def parse_factor(self) -> Expr:
        expr = self.parse_unary()
        while self.match(TokenType.SLASH, TokenType.STAR):
            operator = self.advance()
            right = self.parse_unary()
            expr = Binary(expr, operator, right)
        return expr

    def parse_unary(self) -> Expr:
        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.advance()
            right = self.parse_unary()
            return Unary(operator, right)
        return self.parse_primary()

    def parse_primary(self) -> Expr:
        token = self.peek()
        if token.kind == TokenType.FALSE:
            self.advance()
            return Literal(False)
        if token.kind == TokenType.TRUE:
            self.advance()
            return Literal(True)
        if token.kind == TokenType.NIL:
            self.advance()
            return Literal(NIL)
        if token.kind in (TokenType.NUMBER, TokenType.STRING):
            self.advance()
            return Literal(token.literal)
        if token.kind == TokenType.IDENTIFIER:
            self.advance()
            return Variable(token)
        if token.kind == TokenType.LEFT_PAREN:
            self.advance()
            expr = self.parse_expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)
        raise ParseError(token, 'Expect expression.')


def parse(tokens: List[Token], reporter: Optional[ErrorReporter] = None) -> List[Stmt]:
    """Parse a token list into statements, reporting errors to ``reporter``."""
    return Parser(tokens, reporter).parse()

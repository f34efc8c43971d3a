"""
MiniLang Recursive Descent Parser

Statements are parsed by recursive descent; expressions by precedence
climbing over the Precedence table, which folds every binary level to the
left so "1 - 2 - 3" becomes "(1 - 2) - 3".

Syntax errors never abort the parse. A statement routine raises
ParseError, the statement boundary records it and synchronizes to the
next safe restart point, and parsing continues. parse() always returns a
(possibly partial) Program.

Author: xwest
"""

import logging
import sys
from contextlib import contextmanager
from typing import Iterable, List, Optional, TextIO, Tuple, Union
from enum import IntEnum

from ..lexer.tokens import Token, TokenType, SourceLocation
from ..lexer.lexer import Lexer
from ..lexer.errors import DiagnosticLog, DEFAULT_MAX_ERRORS
from .ast_nodes import (
    Program, Statement, Expression, Block, VarDecl, ArrayDecl, Assign, If, While,
    RepeatUntil, Print, BinaryOp, Factorial, Number, Identifier, ArrayAccess
)
from .errors import (
    ParseError, SyntaxErrorRecovery, create_unexpected_token_error,
    create_missing_semicolon_error, create_missing_identifier_error,
    create_missing_equals_error, create_invalid_expression_error,
    create_missing_parentheses_error, create_missing_condition_error,
    create_missing_block_braces_error, create_invalid_operator_error,
    create_invalid_array_size_error, create_invalid_array_index_error,
    create_function_call_error, create_nesting_too_deep_error
)


logger = logging.getLogger(__name__)


class Precedence(IntEnum):
    """Binary operator precedence levels, lowest first."""
    NONE = 0
    EQUALITY = 1        # ==, !=
    COMPARISON = 2      # <, >
    TERM = 3            # +, -
    FACTOR = 4          # *, /
    PRIMARY = 5


BINARY_PRECEDENCE = {
    TokenType.EQUAL: Precedence.EQUALITY,
    TokenType.NOT_EQUAL: Precedence.EQUALITY,
    TokenType.LESS_THAN: Precedence.COMPARISON,
    TokenType.GREATER_THAN: Precedence.COMPARISON,
    TokenType.PLUS: Precedence.TERM,
    TokenType.MINUS: Precedence.TERM,
    TokenType.MULTIPLY: Precedence.FACTOR,
    TokenType.DIVIDE: Precedence.FACTOR,
}

EXPRESSION_START = {
    TokenType.NUMBER,
    TokenType.IDENTIFIER,
    TokenType.LEFT_PAREN,
    TokenType.FACTORIAL,
}

# Open brackets, blocks and if bodies allowed at once
MAX_NESTING_DEPTH = 64


TokenSource = Union[Lexer, Iterable[Token]]


class Parser:
    """
    MiniLang parser.

    Pulls tokens one at a time from a token source (anything with a
    next_token() method, such as Lexer, or a plain iterable of tokens) and
    builds the AST with one token of lookahead.

    All cursor and error state belongs to the instance. parse() starts
    from scratch every time, so repeated calls give identical results.
    """

    def __init__(self, tokens: TokenSource, max_errors: int = DEFAULT_MAX_ERRORS):
        """
        Initialize parser with a token source.

        Args:
            tokens: Lexer (or other object with next_token()) or a token list
            max_errors: Capacity of the syntax error log
        """
        self.tokens = tokens
        self.errors: DiagnosticLog[ParseError] = DiagnosticLog(max_errors)
        self.current: Optional[Token] = None
        self.previous: Optional[Token] = None
        self.consumed = 0
        self.depth = 0
        self._pull = None

    @classmethod
    def from_source(cls, source: str, filename: str = "<input>",
                    max_errors: int = DEFAULT_MAX_ERRORS) -> "Parser":
        """Create a parser reading directly from source text."""
        return cls(Lexer(source, filename, max_errors), max_errors)

    def parse(self) -> Program:
        """
        Parse the token stream into an AST.

        Returns:
            Program node; syntax errors are available through `errors`
        """
        self._start()
        logger.debug("Parsing started")
        first = self.current

        statements = []
        while not self._check(TokenType.EOF):
            statement = self._parse_statement()
            if statement is not None:
                statements.append(statement)

        logger.debug("Parsing finished: %d statements, %d errors",
                     len(statements), len(self.errors))
        return Program(statements, first)

    # ========================================================================
    # Error reporting
    # ========================================================================

    def error_count(self) -> int:
        """Number of syntax errors recorded by the last parse()."""
        return len(self.errors)

    @property
    def had_errors(self) -> bool:
        """True if the last parse() recorded any syntax error."""
        return bool(self.errors)

    @property
    def capacity_reached(self) -> bool:
        return self.errors.capacity_reached

    def format_errors(self) -> str:
        """All recorded errors, one 'Error <line>:<col>: <message>' per line."""
        return "\n".join(f"Error {e.location.line}:{e.location.column}: {e.message}"
                         for e in self.errors)

    def print_errors(self, file: Optional[TextIO] = None):
        """
        Write format_errors() to `file` (stdout by default).

        Nothing is written when the last parse() was clean.
        """
        if self.errors:
            print(self.format_errors(), file=file or sys.stdout)

    def _report(self, error: ParseError):
        if self.errors.add(error):
            logger.debug("Syntax error at %s: %s", error.location, error.message)

    def _synchronize(self):
        """Discard tokens up to the next statement boundary; a ';' is consumed."""
        while self.current.type not in SyntaxErrorRecovery.STATEMENT_BOUNDARIES:
            self._advance()
        if self._check(TokenType.SEMICOLON):
            self._advance()

    @contextmanager
    def _nested(self, opener: Token, closer: Optional[TokenType] = None):
        """
        Track one level of '(', '[', '{' or if-body nesting.

        Past MAX_NESTING_DEPTH a NESTING_TOO_DEEP error is raised. When
        `closer` is given, `opener` is the current token and the whole
        bracketed group is discarded first, so the error is reported once.
        """
        if self.depth >= MAX_NESTING_DEPTH:
            if closer is not None:
                self._skip_group(opener.type, closer)
            raise create_nesting_too_deep_error(opener, MAX_NESTING_DEPTH)

        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    def _skip_group(self, opener: TokenType, closer: TokenType):
        """Discard tokens from the current opener through its matching closer (or EOF)."""
        level = 0
        while not self._check(TokenType.EOF):
            token_type = self._advance().type
            if token_type == opener:
                level += 1
            elif token_type == closer:
                level -= 1
                if level == 0:
                    return

    # ========================================================================
    # Statements
    # ========================================================================

    def _parse_statement(self) -> Optional[Statement]:
        """Parse one statement, recovering from any syntax error inside it."""
        start = self.consumed
        try:
            return self._parse_statement_kind()
        except ParseError as e:
            self._report(e)
            self._synchronize()
            # A boundary token that could not start a statement: skip it
            if self.consumed == start and not self._check(TokenType.EOF):
                self._advance()
            return None

    def _parse_statement_kind(self) -> Optional[Statement]:
        token_type = self.current.type

        if token_type == TokenType.INT:
            return self._parse_declaration()
        elif token_type == TokenType.IDENTIFIER:
            return self._parse_assignment()
        elif token_type == TokenType.IF:
            return self._parse_if_statement()
        elif token_type == TokenType.WHILE:
            return self._parse_while_statement()
        elif token_type == TokenType.REPEAT:
            return self._parse_repeat_statement()
        elif token_type == TokenType.PRINT:
            return self._parse_print_statement()
        elif token_type == TokenType.LEFT_BRACE:
            return self._parse_block()
        elif token_type == TokenType.SEMICOLON:
            # Empty statement
            self._advance()
            return None

        raise create_unexpected_token_error(self.current, "a statement")

    def _parse_declaration(self) -> Statement:
        """int x;  int x = expr;  int a[size];"""
        int_token = self._advance()

        if not self._check(TokenType.IDENTIFIER):
            raise create_missing_identifier_error(int_token)
        name = self._advance()

        if self._match(TokenType.LEFT_BRACKET):
            if not self._starts_expression():
                raise create_invalid_array_size_error(name, self.current)
            size = self._parse_expression()
            if not self._check(TokenType.RIGHT_BRACKET):
                raise create_invalid_array_size_error(name, self.current)
            self._advance()
            self._consume_semicolon()
            return ArrayDecl(name.lexeme, size, name)

        initializer = None
        if self._match(TokenType.ASSIGN):
            initializer = self._parse_expression()

        self._consume_semicolon()
        return VarDecl(name.lexeme, initializer, name)

    def _parse_assignment(self) -> Assign:
        """x = expr;  a[i] = expr;"""
        name = self._advance()

        target: Expression = Identifier(name.lexeme, name)
        if self._match(TokenType.LEFT_BRACKET):
            target = ArrayAccess(name.lexeme, self._parse_index(name), name)

        if not self._check(TokenType.ASSIGN):
            raise create_missing_equals_error(self.previous)
        self._advance()

        value = self._parse_expression()
        self._consume_semicolon()
        return Assign(target, value, name)

    def _parse_if_statement(self) -> If:
        if_token = self._advance()
        condition = self._parse_condition(if_token)

        if self._check(TokenType.LEFT_BRACE):
            body = self._parse_block()
        elif self._check(TokenType.RIGHT_BRACE) or self._check(TokenType.EOF):
            raise create_unexpected_token_error(self.current, "a statement or block")
        else:
            # A single statement body gets a block (and scope) of its own
            first = self.current
            with self._nested(first):
                statement = self._parse_statement()
            body = Block([statement] if statement is not None else [], first)

        return If(condition, body, if_token)

    def _parse_while_statement(self) -> While:
        while_token = self._advance()
        condition = self._parse_condition(while_token)

        if not self._check(TokenType.LEFT_BRACE):
            raise create_missing_block_braces_error(while_token)
        body = self._parse_block()

        return While(condition, body, while_token)

    def _parse_repeat_statement(self) -> RepeatUntil:
        repeat_token = self._advance()

        if not self._check(TokenType.LEFT_BRACE):
            raise create_missing_block_braces_error(repeat_token)
        body = self._parse_block()

        if not self._check(TokenType.UNTIL):
            raise create_unexpected_token_error(self.current, "'until'")
        until_token = self._advance()
        condition = self._parse_condition(until_token)

        # Trailing ';' after the condition is optional
        self._match(TokenType.SEMICOLON)
        return RepeatUntil(body, condition, repeat_token)

    def _parse_print_statement(self) -> Print:
        print_token = self._advance()

        if not self._starts_expression():
            raise create_missing_identifier_error(print_token)
        value = self._parse_expression()

        self._consume_semicolon()
        return Print(value, print_token)

    def _parse_block(self) -> Block:
        """{ statement* }"""
        if not self._check(TokenType.LEFT_BRACE):
            raise create_missing_block_braces_error(self.previous or self.current)

        with self._nested(self.current, TokenType.RIGHT_BRACE):
            left_brace = self._advance()

            statements: List[Statement] = []
            while not self._check(TokenType.RIGHT_BRACE) and not self._check(TokenType.EOF):
                statement = self._parse_statement()
                if statement is not None:
                    statements.append(statement)

            if self._check(TokenType.EOF):
                # Unterminated block: keep what was parsed, report once
                self._report(create_missing_block_braces_error(self.current, TokenType.RIGHT_BRACE))
            else:
                self._advance()

        return Block(statements, left_brace)

    def _parse_condition(self, keyword: Token) -> Expression:
        """( expression ) after if / while / until."""
        if not self._check(TokenType.LEFT_PAREN):
            raise create_missing_parentheses_error(keyword, TokenType.LEFT_PAREN)
        self._advance()

        if self._check(TokenType.RIGHT_PAREN):
            raise create_missing_condition_error(keyword)

        condition = self._parse_expression()

        if self._check(TokenType.ASSIGN):
            raise create_invalid_operator_error(self.current)
        if not self._check(TokenType.RIGHT_PAREN):
            raise create_missing_parentheses_error(keyword)
        self._advance()

        return condition

    # ========================================================================
    # Expressions
    # ========================================================================

    def _parse_expression(self) -> Expression:
        return self._parse_precedence(Precedence.EQUALITY)

    def _parse_precedence(self, precedence: Precedence) -> Expression:
        """
        Parse operators binding at least as tightly as `precedence`.

        Each operand on the right is parsed one level higher, which makes
        every level left associative.
        """
        left = self._parse_primary()

        while True:
            operator_precedence = BINARY_PRECEDENCE.get(self.current.type)
            if operator_precedence is None or operator_precedence < precedence:
                break
            operator_token = self._advance()
            right = self._parse_precedence(Precedence(operator_precedence + 1))
            left = BinaryOp(left, operator_token.lexeme, right, operator_token)

        return left

    def _parse_primary(self) -> Expression:
        token = self.current

        if token.type == TokenType.NUMBER:
            self._advance()
            return Number(token.value, token)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            if self._match(TokenType.LEFT_BRACKET):
                return ArrayAccess(token.lexeme, self._parse_index(token), token)
            return Identifier(token.lexeme, token)

        if token.type == TokenType.LEFT_PAREN:
            with self._nested(token, TokenType.RIGHT_PAREN):
                self._advance()
                expr = self._parse_expression()
                if not self._check(TokenType.RIGHT_PAREN):
                    raise create_missing_parentheses_error(self.current)
                self._advance()
            return expr

        if token.type == TokenType.FACTORIAL:
            return self._parse_factorial()

        raise create_invalid_expression_error(token)

    def _parse_factorial(self) -> Factorial:
        """factorial ( expression )"""
        factorial_token = self._advance()

        if not self._check(TokenType.LEFT_PAREN):
            raise create_function_call_error(factorial_token)

        with self._nested(self.current, TokenType.RIGHT_PAREN):
            self._advance()
            operand = self._parse_expression()

            if not self._check(TokenType.RIGHT_PAREN):
                raise create_missing_parentheses_error(factorial_token)
            self._advance()

        return Factorial(operand, factorial_token)

    def _parse_index(self, name: Token) -> Expression:
        """Index expression after a consumed '['; consumes the closing ']'."""
        if not self._starts_expression():
            raise create_invalid_array_index_error(name, self.current)
        # The '[' is already consumed, so an over-deep index is not skipped
        with self._nested(self.previous):
            index = self._parse_expression()
        if not self._check(TokenType.RIGHT_BRACKET):
            raise create_invalid_array_index_error(name, self.current)
        self._advance()
        return index

    # ========================================================================
    # Token management
    # ========================================================================

    def _start(self):
        """Reset cursor and error state and load the first token."""
        if hasattr(self.tokens, "next_token"):
            if hasattr(self.tokens, "reset"):
                self.tokens.reset()
            self._pull = self.tokens.next_token
        else:
            iterator = iter(list(self.tokens))
            self._pull = lambda: next(iterator, None)

        self.errors.clear()
        self.consumed = 0
        self.depth = 0
        self.previous = None
        self.current = None
        self.current = self._next_token()

    def _next_token(self) -> Token:
        token = self._pull()
        if token is None:
            # Token lists without a trailing EOF
            anchor = self.current or self.previous
            location = anchor.location if anchor else SourceLocation("<input>", 1, 1, 0)
            token = Token(TokenType.EOF, "", None, location)
        return token

    def _advance(self) -> Token:
        """Consume and return the current token. EOF is never consumed."""
        token = self.current
        if token.type != TokenType.EOF:
            self.previous = token
            self.current = self._next_token()
            self.consumed += 1
        return token

    def _check(self, token_type: TokenType) -> bool:
        return self.current.type == token_type

    def _match(self, token_type: TokenType) -> bool:
        """Check if current token matches type and consume if so."""
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _starts_expression(self) -> bool:
        return self.current.type in EXPRESSION_START

    def _consume_semicolon(self):
        if not self._check(TokenType.SEMICOLON):
            raise create_missing_semicolon_error(self.previous)
        self._advance()


def parse_string(source: str, filename: str = "<string>",
                 max_errors: int = DEFAULT_MAX_ERRORS) -> Tuple[Program, List[ParseError]]:
    """
    Convenience function to parse a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting
        max_errors: Capacity of the syntax error log

    Returns:
        The Program and the ordered list of syntax errors
    """
    parser = Parser.from_source(source, filename, max_errors)
    program = parser.parse()
    return program, parser.errors.to_list()


def parse_file(filepath: str) -> Tuple[Program, List[ParseError]]:
    """
    Convenience function to parse a source file.

    Raises:
        OSError: If the file cannot be read
    """
    with open(filepath, "r", encoding="utf-8") as f:
        source = f.read()
    return parse_string(source, filepath)

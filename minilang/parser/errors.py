"""
Error handling for the MiniLang parser.

Provides syntax error reporting with source location information,
the statement-boundary set used for error recovery, and helpers that
build each kind of syntax error with its standard message.

Author: xwest
"""

from typing import Optional, List
from enum import Enum

from ..lexer.tokens import Token, TokenType, SourceLocation, STATEMENT_KEYWORDS
from ..lexer.errors import Diagnostic, ErrorRecovery


class SyntaxErrorKind(Enum):
    """Categories of syntax errors."""
    UNEXPECTED_TOKEN = "unexpected_token"
    MISSING_SEMICOLON = "missing_semicolon"
    MISSING_IDENTIFIER = "missing_identifier"
    MISSING_EQUALS = "missing_equals"
    INVALID_EXPRESSION = "invalid_expression"
    MISSING_PARENTHESES = "missing_parentheses"
    MISSING_CONDITION = "missing_condition"
    MISSING_BLOCK_BRACES = "missing_block_braces"
    INVALID_OPERATOR = "invalid_operator"
    INVALID_ARRAY_SIZE = "invalid_array_size"
    INVALID_ARRAY_INDEX = "invalid_array_index"
    FUNCTION_CALL = "function_call"
    NESTING_TOO_DEEP = "nesting_too_deep"


class ParseError(Exception):
    """
    Raised inside the parser when a statement cannot be completed.

    The parser catches it at the statement boundary, records it and
    resynchronizes; it never escapes Parser.parse().
    """

    def __init__(
        self,
        kind: SyntaxErrorKind,
        message: str,
        location: SourceLocation,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.kind = kind
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions,
            category=PARSER_ERROR_CODES.get(code)
        )
        self.token = token

    @property
    def message(self) -> str:
        return self.diagnostic.message

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    def __str__(self) -> str:
        return str(self.diagnostic)


class SyntaxErrorRecovery:
    """
    Utilities for error recovery in the parser.

    After an error the parser discards tokens until one of
    STATEMENT_BOUNDARIES is current, then resumes from there.
    """

    # Token types that indicate statement boundaries for recovery
    STATEMENT_BOUNDARIES = {
        TokenType.SEMICOLON,
        TokenType.LEFT_BRACE,
        TokenType.RIGHT_BRACE,
        TokenType.EOF,
    } | STATEMENT_KEYWORDS

    @staticmethod
    def suggest_missing_token(expected: TokenType) -> List[str]:
        """Suggest what token might be missing."""
        token_suggestions = {
            TokenType.SEMICOLON: ["Add a semicolon ';' to end the statement"],
            TokenType.RIGHT_PAREN: ["Add a closing parenthesis ')'"],
            TokenType.LEFT_PAREN: ["Add an opening parenthesis '('"],
            TokenType.RIGHT_BRACKET: ["Add a closing bracket ']'"],
            TokenType.RIGHT_BRACE: ["Add a closing brace '}'"],
            TokenType.LEFT_BRACE: ["Add an opening brace '{' to start a block"],
            TokenType.ASSIGN: ["Add an assignment operator '='"],
            TokenType.IDENTIFIER: ["Add a variable name"],
        }
        return list(token_suggestions.get(expected, []))

    @staticmethod
    def suggest_operator_corrections(invalid_op: str) -> List[str]:
        """Suggest corrections for invalid operators in expressions."""
        corrections = {
            "=": ["Use '==' for comparison"],
        }
        return list(corrections.get(invalid_op, []))


# Common parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P002": "Missing semicolon",
    "P003": "Missing identifier",
    "P004": "Missing '='",
    "P005": "Invalid expression",
    "P006": "Missing parentheses",
    "P007": "Missing condition",
    "P008": "Missing block braces",
    "P009": "Invalid operator usage",
    "P010": "Invalid array size",
    "P011": "Invalid array index",
    "P012": "Invalid function call",
    "P013": "Nesting too deep",
}


def describe(token: Token) -> str:
    """Text used for a token inside error messages."""
    if token.type == TokenType.EOF:
        return "end of input"
    return token.lexeme


def _end_of(token: Token) -> SourceLocation:
    loc = token.location
    return SourceLocation(loc.filename, loc.line, loc.column + len(token.lexeme),
                          loc.offset + len(token.lexeme))


# Helper functions for creating common parser errors

def create_unexpected_token_error(found: Token, expected: Optional[str] = None) -> ParseError:
    """Create an error for a token that cannot appear here."""
    help_text = f"Expected {expected} here." if expected else "This token cannot start a statement."
    return ParseError(
        SyntaxErrorKind.UNEXPECTED_TOKEN,
        message=f"Unexpected '{describe(found)}'",
        location=found.location,
        token=found,
        code="P001",
        help_text=help_text,
    )


def create_missing_semicolon_error(previous: Token) -> ParseError:
    """Create an error for a statement without its terminating ';'."""
    return ParseError(
        SyntaxErrorKind.MISSING_SEMICOLON,
        message=f"Missing semicolon after '{describe(previous)}'",
        location=_end_of(previous),
        token=previous,
        code="P002",
        help_text="Statements must end with ';'.",
        suggestions=SyntaxErrorRecovery.suggest_missing_token(TokenType.SEMICOLON)
    )


def create_missing_identifier_error(previous: Token) -> ParseError:
    """Create an error for a declaration or print without a name."""
    return ParseError(
        SyntaxErrorKind.MISSING_IDENTIFIER,
        message=f"Missing identifier after '{describe(previous)}'",
        location=_end_of(previous),
        token=previous,
        code="P003",
        suggestions=SyntaxErrorRecovery.suggest_missing_token(TokenType.IDENTIFIER)
    )


def create_missing_equals_error(previous: Token) -> ParseError:
    """Create an error for an assignment without '='."""
    suggestions = []
    if len(previous.lexeme) > 2:
        suggestions = [f"Did you mean '{keyword}'?"
                       for keyword in ErrorRecovery.suggest_keyword_corrections(previous.lexeme)]
    suggestions += SyntaxErrorRecovery.suggest_missing_token(TokenType.ASSIGN)
    return ParseError(
        SyntaxErrorKind.MISSING_EQUALS,
        message=f"Expected '=' after '{describe(previous)}'",
        location=_end_of(previous),
        token=previous,
        code="P004",
        suggestions=suggestions
    )


def create_invalid_expression_error(found: Token) -> ParseError:
    """Create an error for a token that cannot start an expression."""
    help_text = "Expressions start with a number, a variable, 'factorial' or '('."
    if found.type == TokenType.ERROR:
        help_text = "This text was rejected by the lexer."
    return ParseError(
        SyntaxErrorKind.INVALID_EXPRESSION,
        message=f"Invalid expression starting with '{describe(found)}'",
        location=found.location,
        token=found,
        code="P005",
        help_text=help_text,
        suggestions=["Check the expression syntax", "Ensure all operators have operands"]
    )


def create_missing_parentheses_error(found: Token, expected: TokenType = TokenType.RIGHT_PAREN) -> ParseError:
    """Create an error for a missing '(' or ')'."""
    return ParseError(
        SyntaxErrorKind.MISSING_PARENTHESES,
        message=f"Missing parentheses for '{describe(found)}'",
        location=found.location,
        token=found,
        code="P006",
        suggestions=SyntaxErrorRecovery.suggest_missing_token(expected)
    )


def create_missing_condition_error(found: Token) -> ParseError:
    """Create an error for empty parentheses where a condition belongs."""
    return ParseError(
        SyntaxErrorKind.MISSING_CONDITION,
        message=f"Expected condition after '{describe(found)}'",
        location=found.location,
        token=found,
        code="P007",
        help_text="Conditions cannot be empty.",
    )


def create_missing_block_braces_error(found: Token, expected: TokenType = TokenType.LEFT_BRACE) -> ParseError:
    """Create an error for a missing '{' or '}'."""
    return ParseError(
        SyntaxErrorKind.MISSING_BLOCK_BRACES,
        message=f"Expected '{{}}' block after '{describe(found)}'",
        location=found.location,
        token=found,
        code="P008",
        suggestions=SyntaxErrorRecovery.suggest_missing_token(expected)
    )


def create_invalid_operator_error(found: Token) -> ParseError:
    """Create an error for an operator that is not valid in this position."""
    return ParseError(
        SyntaxErrorKind.INVALID_OPERATOR,
        message=f"Invalid operator '{describe(found)}'",
        location=found.location,
        token=found,
        code="P009",
        suggestions=SyntaxErrorRecovery.suggest_operator_corrections(found.lexeme)
    )


def create_invalid_array_size_error(name: Token, found: Token) -> ParseError:
    """Create an error for a malformed '[size]' in an array declaration."""
    return ParseError(
        SyntaxErrorKind.INVALID_ARRAY_SIZE,
        message=f"Invalid array size for '{describe(name)}'",
        location=found.location,
        token=found,
        code="P010",
        help_text="Array declarations take a size in brackets, e.g. int a[10];",
    )


def create_invalid_array_index_error(name: Token, found: Token) -> ParseError:
    """Create an error for a malformed '[index]'."""
    return ParseError(
        SyntaxErrorKind.INVALID_ARRAY_INDEX,
        message=f"Invalid array index for '{describe(name)}'",
        location=found.location,
        token=found,
        code="P011",
        help_text="Array elements are selected with an expression in brackets, e.g. a[i].",
    )


def create_function_call_error(name: Token) -> ParseError:
    """Create an error for a built-in used without its argument list."""
    return ParseError(
        SyntaxErrorKind.FUNCTION_CALL,
        message=f"Invalid function call '{describe(name)}'",
        location=name.location,
        token=name,
        code="P012",
        help_text=f"'{name.lexeme}' takes one argument in parentheses.",
        suggestions=[f"Write {name.lexeme}(n)"]
    )


def create_nesting_too_deep_error(opener: Token, limit: int) -> ParseError:
    """Create an error for brackets, blocks or if bodies nested past the limit."""
    return ParseError(
        SyntaxErrorKind.NESTING_TOO_DEEP,
        message=f"Nesting too deep at '{describe(opener)}'",
        location=opener.location,
        token=opener,
        code="P013",
        help_text=f"At most {limit} levels of '(', '[', '{{' or if bodies may be open at once.",
        suggestions=["Move part of the expression into a separate variable"]
    )

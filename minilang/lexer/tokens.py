"""
Token definitions for the MiniLang lexer.

This module defines all token types supported by MiniLang:
- Keywords (int, if, while, repeat, until, print, factorial)
- Arithmetic, assignment and comparison operators
- Number literals and identifiers
- Punctuation and delimiters

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Optional


class TokenType(Enum):
    """
    Enumeration of all token types in MiniLang.

    Organized by category for clarity and maintainability.
    """

    # ========================================================================
    # Special Tokens
    # ========================================================================
    EOF = auto()                    # End of input
    ERROR = auto()                  # Lexically invalid input (see Token.error)

    # ========================================================================
    # Literals and Identifiers
    # ========================================================================
    NUMBER = auto()                 # 42, 007
    IDENTIFIER = auto()             # x, counter, _tmp1

    # ========================================================================
    # Keywords
    # ========================================================================
    INT = auto()                    # int
    IF = auto()                     # if
    WHILE = auto()                  # while
    REPEAT = auto()                 # repeat
    UNTIL = auto()                  # until
    PRINT = auto()                  # print
    FACTORIAL = auto()              # factorial

    # ========================================================================
    # Operators
    # ========================================================================
    PLUS = auto()                   # +
    MINUS = auto()                  # -
    MULTIPLY = auto()               # *
    DIVIDE = auto()                 # /
    ASSIGN = auto()                 # =
    EQUAL = auto()                  # ==
    NOT_EQUAL = auto()              # !=
    LESS_THAN = auto()              # <
    GREATER_THAN = auto()           # >

    # ========================================================================
    # Punctuation and Delimiters
    # ========================================================================
    SEMICOLON = auto()              # ;
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    LEFT_BRACE = auto()             # {
    RIGHT_BRACE = auto()            # }
    LEFT_BRACKET = auto()           # [
    RIGHT_BRACKET = auto()          # ]


class LexicalErrorKind(Enum):
    """Reasons a token was produced as TokenType.ERROR."""
    INVALID_CHAR = "invalid_char"
    INVALID_NUMBER = "invalid_number"
    CONSECUTIVE_OPERATORS = "consecutive_operators"
    INVALID_IDENTIFIER = "invalid_identifier"
    UNTERMINATED_COMMENT = "unterminated_comment"


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for error reporting and AST diagnostics.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of input

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token in the MiniLang language.

    Contains the token type, lexeme (raw text), semantic value,
    source location and, for ERROR tokens, the lexical error kind.
    """
    type: TokenType
    lexeme: str                     # Raw text from source
    value: Any                      # Parsed value (int for NUMBER, else None)
    location: SourceLocation        # Source location
    error: Optional[LexicalErrorKind] = None

    def __str__(self) -> str:
        if self.error is not None:
            return f"{self.type.name}({self.lexeme!r}: {self.error.value})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")

    @property
    def line(self) -> int:
        return self.location.line

    @property
    def column(self) -> int:
        return self.location.column

    @property
    def is_keyword(self) -> bool:
        """Check if this token is a keyword."""
        return self.type in KEYWORDS.values()

    @property
    def is_operator(self) -> bool:
        """Check if this token is an operator."""
        return self.type in OPERATORS.values()

    @property
    def is_identifier(self) -> bool:
        """Check if this token is an identifier."""
        return self.type == TokenType.IDENTIFIER


# Lookup tables used by the lexer for keyword/operator recognition

KEYWORDS = {
    "int": TokenType.INT,
    "if": TokenType.IF,
    "while": TokenType.WHILE,
    "repeat": TokenType.REPEAT,
    "until": TokenType.UNTIL,
    "print": TokenType.PRINT,
    "factorial": TokenType.FACTORIAL,
}

# Longest operators first so "==" wins over "="
OPERATORS = {
    "==": TokenType.EQUAL,
    "!=": TokenType.NOT_EQUAL,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULTIPLY,
    "/": TokenType.DIVIDE,
    "=": TokenType.ASSIGN,
    "<": TokenType.LESS_THAN,
    ">": TokenType.GREATER_THAN,
}

DELIMITERS = {
    ";": TokenType.SEMICOLON,
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    "[": TokenType.LEFT_BRACKET,
    "]": TokenType.RIGHT_BRACKET,
}

# Operators that may not directly follow one another
ARITHMETIC_OPERATORS = {
    TokenType.PLUS,
    TokenType.MINUS,
    TokenType.MULTIPLY,
    TokenType.DIVIDE,
}

# Keywords that begin a statement; used for parser error recovery
STATEMENT_KEYWORDS = {
    TokenType.INT,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.REPEAT,
    TokenType.PRINT,
}

# Bounded lexeme length (identifiers and numbers)
MAX_LEXEME_LENGTH = 99

"""
MiniLang Lexer Package

Implements the lexical analyzer (tokenizer) for the MiniLang language.

Key Features:
- Pull-style next_token() interface consumed by the parser
- Line and column tracking for every token
- Lexical errors surfaced as ERROR tokens instead of aborting
- // line comments and /* block */ comments

Author: xwest
"""

from .tokens import Token, TokenType, SourceLocation, LexicalErrorKind
from .lexer import Lexer, tokenize_string, tokenize_file
from .errors import Diagnostic, DiagnosticLog, LexerError, DEFAULT_MAX_ERRORS

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "LexicalErrorKind",
    "Diagnostic",
    "DiagnosticLog",
    "LexerError",
    "DEFAULT_MAX_ERRORS",
    "tokenize_string",
    "tokenize_file",
]

"""
MiniLang Lexer - turns source text into tokens

A straightforward single pass scanner. The parser pulls one token at a
time through next_token(); tokenize() is there for tests and tooling.

All cursor state (position, line/column counters and the "previous token
was an arithmetic operator" flag) lives on the Lexer instance, so two
lexers never interfere and reset() really starts over.

xwest
"""

import logging
from typing import List, Optional

from .tokens import (
    Token, TokenType, SourceLocation, KEYWORDS, OPERATORS,
    DELIMITERS, ARITHMETIC_OPERATORS, MAX_LEXEME_LENGTH
)
from .errors import (
    LexerError, DiagnosticLog, DEFAULT_MAX_ERRORS, create_invalid_character_error,
    create_invalid_number_error, create_consecutive_operators_error,
    create_invalid_identifier_error, create_unterminated_comment_error
)


logger = logging.getLogger(__name__)


class Lexer:
    """
    MiniLang lexical analyzer.

    Converts source code text into a stream of tokens. Invalid input never
    stops the scan: it is recorded in `errors` and handed on as an ERROR
    token so the parser can report it in context.
    """

    def __init__(self, source: str = "", filename: str = "<input>",
                 max_errors: int = DEFAULT_MAX_ERRORS):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string
            filename: Name of source file for error reporting
            max_errors: Capacity of the lexical error log
        """
        self.source = source
        self.filename = filename
        self.errors: DiagnosticLog[LexerError] = DiagnosticLog(max_errors)
        self.reset()

    def reset(self, source: Optional[str] = None):
        """
        Re-initialize the cursor for a fresh scan.

        Args:
            source: New input; the current input is rescanned if omitted
        """
        if source is not None:
            self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self._last_was_operator = False
        self.errors.clear()

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source code.

        Returns:
            List of tokens ending with an EOF token
        """
        self.reset()
        tokens = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                break

        logger.debug("Tokenized %s: %d tokens, %d errors",
                     self.filename, len(tokens), len(self.errors))
        return tokens

    def next_token(self) -> Token:
        """Scan and return the next token. Returns EOF forever at end of input."""
        comment_error = self._skip_whitespace_and_comments()
        if comment_error is not None:
            return comment_error

        if self._is_at_end():
            return Token(TokenType.EOF, "", None, self._location())

        char = self._peek()

        if _is_digit(char):
            return self._scan_number()

        if char.isalpha() or char == "_":
            return self._scan_identifier()

        return self._scan_symbol()

    # ========================================================================
    # Scanners
    # ========================================================================

    def _scan_number(self) -> Token:
        start = self._location()
        begin = self.pos
        while not self._is_at_end() and _is_digit(self._peek()):
            self._advance()

        # "123abc" is a single malformed token rather than NUMBER IDENTIFIER
        if not self._is_at_end() and (self._peek().isalpha() or self._peek() == "_"):
            while not self._is_at_end() and (self._peek().isalnum() or self._peek() == "_"):
                self._advance()
            lexeme = self.source[begin:self.pos]
            return self._error_token(lexeme, start, create_invalid_number_error(lexeme, start))

        lexeme = self.source[begin:self.pos]
        if len(lexeme) > MAX_LEXEME_LENGTH:
            return self._error_token(lexeme, start, create_invalid_number_error(lexeme, start))

        self._last_was_operator = False
        return Token(TokenType.NUMBER, lexeme, int(lexeme), start)

    def _scan_identifier(self) -> Token:
        start = self._location()
        begin = self.pos
        while not self._is_at_end() and (self._peek().isalnum() or self._peek() == "_"):
            self._advance()

        lexeme = self.source[begin:self.pos]
        if len(lexeme) > MAX_LEXEME_LENGTH:
            return self._error_token(lexeme, start, create_invalid_identifier_error(lexeme, start))

        self._last_was_operator = False
        token_type = KEYWORDS.get(lexeme, TokenType.IDENTIFIER)
        return Token(token_type, lexeme, None, start)

    def _scan_symbol(self) -> Token:
        start = self._location()

        two = self.source[self.pos:self.pos + 2]
        if two in ("==", "!="):
            self._advance()
            self._advance()
            self._last_was_operator = False
            return Token(OPERATORS[two], two, None, start)

        char = self._advance()

        if char in OPERATORS:
            token_type = OPERATORS[char]
            if token_type in ARITHMETIC_OPERATORS:
                if self._last_was_operator:
                    # Flag stays set: "+++" reports both extra operators
                    return self._error_token(
                        char, start, create_consecutive_operators_error(char, start),
                        reset_operator_flag=False
                    )
                self._last_was_operator = True
            else:
                self._last_was_operator = False
            return Token(token_type, char, None, start)

        if char in DELIMITERS:
            self._last_was_operator = False
            return Token(DELIMITERS[char], char, None, start)

        return self._error_token(char, start, create_invalid_character_error(char, start))

    def _skip_whitespace_and_comments(self) -> Optional[Token]:
        """Skip blanks and comments. Returns an ERROR token for an unclosed block comment."""
        while not self._is_at_end():
            char = self._peek()
            if char.isspace():
                self._advance()
            elif self.source.startswith("//", self.pos):
                while not self._is_at_end() and self._peek() != "\n":
                    self._advance()
            elif self.source.startswith("/*", self.pos):
                start = self._location()
                self._advance()
                self._advance()
                while not self._is_at_end() and not self.source.startswith("*/", self.pos):
                    self._advance()
                if self._is_at_end():
                    return self._error_token("/*", start, create_unterminated_comment_error(start))
                self._advance()
                self._advance()
            else:
                break
        return None

    # ========================================================================
    # Helpers
    # ========================================================================

    def _error_token(self, lexeme: str, location: SourceLocation, error: LexerError,
                     reset_operator_flag: bool = True) -> Token:
        self.errors.add(error)
        logger.debug("Lexical error at %s: %s", location, error.message)
        if reset_operator_flag:
            self._last_was_operator = False
        return Token(TokenType.ERROR, lexeme, None, location, error.kind)

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _peek(self) -> str:
        return self.source[self.pos]

    def _advance(self) -> str:
        char = self.source[self.pos]
        self.pos += 1
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char


def tokenize_string(source: str, filename: str = "<string>") -> List[Token]:
    """Convenience function to tokenize a source string."""
    return Lexer(source, filename).tokenize()


def tokenize_file(filepath: str) -> List[Token]:
    """Convenience function to tokenize a source file."""
    with open(filepath, "r", encoding="utf-8") as f:
        source = f.read()
    return Lexer(source, filepath).tokenize()


def _is_digit(char: str) -> bool:
    # str.isdigit() also accepts superscripts and other non-ASCII digits
    return "0" <= char <= "9"

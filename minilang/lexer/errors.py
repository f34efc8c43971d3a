"""
Error handling for the MiniLang lexer.

Provides the shared Diagnostic record used by every compiler phase,
a bounded diagnostic log, and the lexer's own error reporting.

Author: xwest
"""

import logging
from typing import Generic, Iterator, List, Optional, TypeVar
from dataclasses import dataclass

from .tokens import SourceLocation, LexicalErrorKind


logger = logging.getLogger(__name__)

# Default capacity of every diagnostic log
DEFAULT_MAX_ERRORS = 256


@dataclass
class Diagnostic:
    """Base record for diagnostics (errors, warnings) of every phase."""
    message: str
    location: SourceLocation
    severity: str  # "error", "warning"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None
    category: Optional[str] = None  # Title of `code` in its phase's code table

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        if self.code:
            severity_prefix += f"[{self.code}]"
        result = f"{severity_prefix}: {self.message}\n"
        result += f"  --> {self.location}\n"

        if self.category:
            result += f"  note: {self.category}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result

    @property
    def line(self) -> int:
        return self.location.line

    @property
    def column(self) -> int:
        return self.location.column

    def short(self) -> str:
        """One-line form: '<line>:<column>: <message>'."""
        return f"{self.location.line}:{self.location.column}: {self.message}"


T = TypeVar("T")


class DiagnosticLog(Generic[T]):
    """
    Ordered, bounded collection of diagnostics.

    Once `capacity` entries are stored, further entries are dropped and
    `capacity_reached` becomes true, so callers can tell that the report
    may be incomplete.
    """

    def __init__(self, capacity: int = DEFAULT_MAX_ERRORS):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._items: List[T] = []
        self.dropped = 0

    def add(self, item: T) -> bool:
        """Record an entry. Returns False if it was dropped."""
        if len(self._items) >= self.capacity:
            self.dropped += 1
            logger.debug("Diagnostic dropped, log is full (%d)", self.capacity)
            return False
        self._items.append(item)
        return True

    def clear(self):
        self._items.clear()
        self.dropped = 0

    @property
    def capacity_reached(self) -> bool:
        return len(self._items) >= self.capacity

    def to_list(self) -> List[T]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __getitem__(self, index):
        return self._items[index]

    def __bool__(self) -> bool:
        return bool(self._items)


class LexerError(Exception):
    """
    Raised when the lexer encounters invalid input.

    The lexer records these rather than propagating them; the offending
    text is handed to the parser as an ERROR token.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        kind: LexicalErrorKind,
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
            category=ERROR_CODES.get(code)
        )

    @property
    def message(self) -> str:
        return self.diagnostic.message

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    def __str__(self) -> str:
        return str(self.diagnostic)


class ErrorRecovery:
    """Suggestion helpers shared by the lexer and the later phases."""

    @staticmethod
    def suggest_keyword_corrections(word: str) -> List[str]:
        """Suggest keywords within edit distance 2 of the given word."""
        from .tokens import KEYWORDS

        candidates = [k for k in KEYWORDS if ErrorRecovery.edit_distance(word.lower(), k) <= 2]
        return sorted(candidates, key=lambda k: ErrorRecovery.edit_distance(word.lower(), k))[:3]

    @staticmethod
    def similar_names(name: str, candidates, max_distance: int = 2) -> List[str]:
        """Return candidate names close to `name`, nearest first."""
        scored = []
        for candidate in candidates:
            distance = ErrorRecovery.edit_distance(name.lower(), candidate.lower())
            if 0 < distance <= max_distance:
                scored.append((distance, candidate))
        scored.sort()
        return [candidate for _, candidate in scored[:3]]

    @staticmethod
    def edit_distance(s1: str, s2: str) -> int:
        """Calculate Levenshtein distance between two strings."""
        if len(s1) < len(s2):
            return ErrorRecovery.edit_distance(s2, s1)

        if len(s2) == 0:
            return len(s1)

        previous_row = list(range(len(s2) + 1))
        for i, c1 in enumerate(s1):
            current_row = [i + 1]
            for j, c2 in enumerate(s2):
                insertions = previous_row[j + 1] + 1
                deletions = current_row[j] + 1
                substitutions = previous_row[j] + (c1 != c2)
                current_row.append(min(insertions, deletions, substitutions))
            previous_row = current_row

        return previous_row[-1]


# Common error codes for categorization
ERROR_CODES = {
    "L001": "Invalid character",
    "L002": "Invalid numeric literal",
    "L003": "Consecutive operators",
    "L004": "Invalid identifier",
    "L005": "Unterminated comment",
}


# Helper functions for creating common errors

def create_invalid_character_error(char: str, location: SourceLocation) -> LexerError:
    """Create an error for an invalid character."""
    if char == "!":
        help_text = "'!' is only valid as part of '!='."
        suggestions = ["Use '!=' for not equal"]
    elif char.isprintable():
        help_text = f"The character '{char}' is not valid in MiniLang source code."
        suggestions = []
    else:
        help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is not allowed."
        suggestions = []

    return LexerError(
        message=f"Invalid character '{char}'",
        location=location,
        kind=LexicalErrorKind.INVALID_CHAR,
        code="L001",
        help_text=help_text,
        suggestions=suggestions
    )


def create_invalid_number_error(lexeme: str, location: SourceLocation) -> LexerError:
    """Create an error for a malformed numeric literal such as '12abc'."""
    return LexerError(
        message=f"Invalid number format '{lexeme}'",
        location=location,
        kind=LexicalErrorKind.INVALID_NUMBER,
        code="L002",
        help_text="Numbers are sequences of decimal digits and cannot be followed by letters.",
        suggestions=["Separate the number from the following name", "Identifiers cannot start with a digit"]
    )


def create_consecutive_operators_error(lexeme: str, location: SourceLocation) -> LexerError:
    """Create an error for an arithmetic operator directly following another."""
    return LexerError(
        message="Consecutive operators not allowed",
        location=location,
        kind=LexicalErrorKind.CONSECUTIVE_OPERATORS,
        code="L003",
        help_text=f"The operator '{lexeme}' directly follows another arithmetic operator.",
        suggestions=["Remove the extra operator", "Use parentheses to group the operand"]
    )


def create_invalid_identifier_error(lexeme: str, location: SourceLocation) -> LexerError:
    """Create an error for an identifier longer than the lexeme limit."""
    return LexerError(
        message=f"Invalid identifier '{lexeme[:16]}...'",
        location=location,
        kind=LexicalErrorKind.INVALID_IDENTIFIER,
        code="L004",
        help_text="Identifiers are limited to 99 characters.",
        suggestions=["Use a shorter name"]
    )


def create_unterminated_comment_error(location: SourceLocation) -> LexerError:
    """Create an error for a block comment that is never closed."""
    return LexerError(
        message="Unterminated block comment",
        location=location,
        kind=LexicalErrorKind.UNTERMINATED_COMMENT,
        code="L005",
        help_text="Block comments opened with '/*' must be closed with '*/'.",
        suggestions=["Add a closing '*/'"]
    )

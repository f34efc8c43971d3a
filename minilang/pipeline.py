"""
MiniLang front-end pipeline.

Wires lexer, parser and semantic analyzer together and reports one
verdict per phase. The analyzer only runs on a tree whose parse had no
syntax errors unless FrontendOptions.analyze_on_syntax_errors is set.

Example:
    frontend = Frontend()
    result = frontend.check_source("int x; x = 1; print x;")
    if result.success:
        print(format_ast(result.program))

Author: xwest
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .lexer.errors import LexerError, DEFAULT_MAX_ERRORS
from .lexer.lexer import Lexer
from .parser.ast_nodes import Program
from .parser.errors import ParseError
from .parser.parser import Parser
from .analyzer.errors import SemanticError, SemanticWarning
from .analyzer.semantic_analyzer import SemanticAnalyzer


logger = logging.getLogger(__name__)


@dataclass
class FrontendOptions:
    """
    Front-end configuration options.

    Attributes:
        filename: Name used in source locations
        max_errors: Capacity of each phase's diagnostic log
        analyze: Run the semantic analyzer (False for a syntax check only)
        analyze_on_syntax_errors: Run the analyzer even when parsing
                                  reported errors
    """
    filename: str = "<input>"
    max_errors: int = DEFAULT_MAX_ERRORS
    analyze: bool = True
    analyze_on_syntax_errors: bool = False


@dataclass
class FrontendResult:
    """Outcome of running the front end over one source text."""
    program: Optional[Program] = None
    lexer_errors: List[LexerError] = field(default_factory=list)
    syntax_errors: List[ParseError] = field(default_factory=list)
    semantic_errors: List[SemanticError] = field(default_factory=list)
    warnings: List[SemanticWarning] = field(default_factory=list)
    parsed_ok: bool = False
    analyzed: bool = False
    semantic_ok: bool = False

    @property
    def success(self) -> bool:
        """True when parsing succeeded and analysis, if it ran, succeeded."""
        return self.parsed_ok and (self.semantic_ok or not self.analyzed)

    def diagnostics(self) -> List[str]:
        """All diagnostics in phase order, one line each."""
        lines = [f"Lexical Error {e.diagnostic.short()}" for e in self.lexer_errors]
        lines += [f"Error {e.diagnostic.short()}" for e in self.syntax_errors]
        lines += [f"Semantic Error {e.diagnostic.short()}" for e in self.semantic_errors]
        lines += [f"Warning {w.diagnostic.short()}" for w in self.warnings]
        return lines


class Frontend:
    """
    MiniLang front end.

    Each check_source() call builds a new lexer, parser and analyzer, so a
    Frontend instance carries nothing from one run to the next.
    """

    def __init__(self, options: Optional[FrontendOptions] = None):
        """
        Initialize the front end.

        Args:
            options: Configuration (uses defaults if None)
        """
        self.options = options or FrontendOptions()

    def check_source(self, source: str) -> FrontendResult:
        """
        Parse and analyze source text.

        Args:
            source: MiniLang source code

        Returns:
            FrontendResult with the tree and every diagnostic
        """
        options = self.options
        result = FrontendResult()

        lexer = Lexer(source, options.filename, options.max_errors)
        parser = Parser(lexer, options.max_errors)
        result.program = parser.parse()
        result.lexer_errors = lexer.errors.to_list()
        result.syntax_errors = parser.errors.to_list()
        result.parsed_ok = not result.syntax_errors

        if not options.analyze:
            return result

        if not result.parsed_ok and not options.analyze_on_syntax_errors:
            logger.debug("Skipping semantic analysis of %s: %d syntax errors",
                         options.filename, len(result.syntax_errors))
            return result

        analyzer = SemanticAnalyzer(options.max_errors)
        result.semantic_ok = analyzer.analyze(result.program)
        result.analyzed = True
        result.semantic_errors = analyzer.result.errors
        result.warnings = analyzer.result.warnings

        return result

    def check_file(self, filepath: str) -> FrontendResult:
        """
        Parse and analyze a source file.

        Raises:
            FileNotFoundError: If the source file does not exist
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        source = path.read_text(encoding="utf-8")
        return self.check_source(source)


def check_source(source: str, **options) -> FrontendResult:
    """Convenience function: run the front end with keyword options."""
    return Frontend(FrontendOptions(**options)).check_source(source)


def check_file(filepath: str, **options) -> FrontendResult:
    """Convenience function: run the front end over a file."""
    options.setdefault("filename", str(filepath))
    return Frontend(FrontendOptions(**options)).check_file(filepath)

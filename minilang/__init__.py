"""
MiniLang Front End Package

Parser and semantic analyzer for MiniLang, a small block-structured
teaching language with int scalars, fixed-size int arrays, if, while,
repeat-until, print and factorial.

Architecture:
    minilang/
    ├── lexer/           # Tokenization and lexical analysis
    ├── parser/          # Syntax analysis, error recovery and AST generation
    ├── analyzer/        # Scopes, symbol table and semantic checks
    ├── pipeline.py      # Lexer -> parser -> analyzer driver
    └── cli.py           # mlc command

Author: xwest
License: MIT
"""

__version__ = "0.1.0"
__author__ = "xwest"
__license__ = "MIT"

from .lexer import Lexer
from .parser import Parser, format_ast
from .analyzer import SemanticAnalyzer
from .pipeline import Frontend, FrontendOptions, FrontendResult, check_source, check_file

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "SemanticAnalyzer",
    "Frontend",
    "FrontendOptions",
    "FrontendResult",

    # Convenience functions
    "check_source",
    "check_file",
    "format_ast",

    # Version info
    "__version__",
]

"""
MiniLang Semantic Analyzer Package

Implements semantic analysis including:
- Block-structured symbol resolution with shadowing
- Redeclaration detection
- Array size, shape and constant-index bounds checking
- Uninitialized-use warnings

Author: xwest
"""

from .semantic_analyzer import SemanticAnalyzer, AnalysisResult, analyze_program
from .symbol_table import SymbolTable, Symbol, SymbolType, Shape, Scope, ScopeKind
from .errors import SemanticError, SemanticWarning, SemanticErrorKind

__all__ = [
    # Main analyzer
    "SemanticAnalyzer", "AnalysisResult", "analyze_program",

    # Symbol management
    "SymbolTable", "Symbol", "SymbolType", "Shape", "Scope", "ScopeKind",

    # Error handling
    "SemanticError", "SemanticWarning", "SemanticErrorKind",
]

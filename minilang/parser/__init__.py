"""
MiniLang Parser Package

Implements a recursive descent parser for the MiniLang language.
Produces an Abstract Syntax Tree with source locations on every node.

Key Features:
- Precedence climbing for binary expressions (all levels left associative)
- Error recovery and synchronization at statement boundaries
- One diagnostic per malformed construct, bounded by max_errors
- Indented AST printing

Author: xwest
"""

from .ast_nodes import *
from .parser import Parser, Precedence, parse_string, parse_file
from .errors import ParseError, SyntaxErrorKind, SyntaxErrorRecovery

__all__ = [
    # Core parser
    "Parser", "Precedence", "parse_string", "parse_file",

    # AST nodes
    "ASTNode", "ASTNodeType", "ASTVisitor", "ASTPrinter", "format_ast",
    "Program", "Statement", "Expression",
    "VarDecl", "ArrayDecl", "Assign", "Block", "If", "While", "RepeatUntil", "Print",
    "BinaryOp", "Factorial", "Number", "Identifier", "ArrayAccess",

    # Error handling
    "ParseError", "SyntaxErrorKind", "SyntaxErrorRecovery",
]

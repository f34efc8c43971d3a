"""
Semantic analyzer for MiniLang.

Walks the AST once, in source order, and checks:
- Declarations (redeclaration at the same level, array sizes)
- Name resolution through nested block scopes
- Array shape and constant-index bounds
- Use of variables before any value is assigned (warning only)
- Structural well-formedness of the tree

Analysis never stops at the first problem: every violation is recorded
and the overall verdict is reported at the end.

Author: xwest
"""

import logging
from typing import List, Dict, Optional
from dataclasses import dataclass, field

from ..lexer.errors import DiagnosticLog, DEFAULT_MAX_ERRORS
from ..parser.ast_nodes import *
from .symbol_table import SymbolTable, Symbol, SymbolType, ScopeKind
from .errors import (
    SemanticError, SemanticWarning, create_undeclared_variable_error,
    create_type_mismatch_error, create_uninitialized_variable_warning,
    create_invalid_operation_error, create_invalid_array_size_error,
    create_not_an_array_error, create_index_out_of_bounds_error,
    create_array_assignment_error, create_structural_error
)


logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Results of semantic analysis."""
    ast: Optional[Program]
    errors: List[SemanticError]
    warnings: List[SemanticWarning]
    symbols: Dict[str, Symbol] = field(default_factory=dict)  # Global symbols after analysis
    capacity_reached: bool = False

    @property
    def success(self) -> bool:
        return not self.errors

    def has_errors(self) -> bool:
        """Check if analysis found any errors."""
        return len(self.errors) > 0

    def has_warnings(self) -> bool:
        """Check if analysis found any warnings."""
        return len(self.warnings) > 0


class SemanticAnalyzer:
    """
    Semantic analyzer for MiniLang programs.

    Each check routine returns True when its subtree is valid. Warnings
    never make a routine return False. A fresh symbol table and fresh
    diagnostic logs are created for every analyze() call, so an analyzer
    can be reused across programs.
    """

    def __init__(self, max_errors: int = DEFAULT_MAX_ERRORS):
        """
        Initialize the semantic analyzer.

        Args:
            max_errors: Capacity of the error log (and of the warning log)
        """
        self.max_errors = max_errors
        self.result: Optional[AnalysisResult] = None
        self._reset()

    def _reset(self):
        self.symbol_table = SymbolTable()
        self.errors: DiagnosticLog[SemanticError] = DiagnosticLog(self.max_errors)
        self.warnings: DiagnosticLog[SemanticWarning] = DiagnosticLog(self.max_errors)

    def analyze(self, program: Optional[Program]) -> bool:
        """
        Perform semantic analysis on the AST.

        Args:
            program: Root of the tree to analyze

        Returns:
            True if no semantic errors were found (warnings are allowed).
            Details are available in `result`.
        """
        self._reset()
        logger.debug("Semantic analysis started")

        ok = self._check_program(program)

        self.result = AnalysisResult(
            ast=program,
            errors=self.errors.to_list(),
            warnings=self.warnings.to_list(),
            symbols=self.symbol_table.all_symbols(),
            capacity_reached=self.errors.capacity_reached
        )
        logger.debug("Semantic analysis finished: %d errors, %d warnings",
                     len(self.errors), len(self.warnings))
        return ok

    # ========================================================================
    # Diagnostics
    # ========================================================================

    def _error(self, error: SemanticError) -> bool:
        if self.errors.add(error):
            logger.debug("Semantic error at %s: %s", error.location, error.message)
        return False

    def _warn(self, warning: SemanticWarning):
        if self.warnings.add(warning):
            logger.debug("Semantic warning at %s: %s", warning.location, warning.message)

    # ========================================================================
    # Statements
    # ========================================================================

    def _check_program(self, program: Optional[Program]) -> bool:
        if program is None:
            return True
        if not isinstance(program, Program):
            return self._error(create_structural_error("Program", program))
        return self._check_statements(program.statements)

    def _check_statements(self, statements: List[Statement]) -> bool:
        """Check statements in order; every statement is checked even after a failure."""
        ok = True
        for stmt in statements:
            ok = self._check_statement(stmt) and ok
        return ok

    def _check_statement(self, stmt: Optional[Statement]) -> bool:
        if stmt is None:
            return True

        if isinstance(stmt, VarDecl):
            return self._check_var_decl(stmt)
        elif isinstance(stmt, ArrayDecl):
            return self._check_array_decl(stmt)
        elif isinstance(stmt, Assign):
            return self._check_assign(stmt)
        elif isinstance(stmt, If):
            return self._check_if_statement(stmt)
        elif isinstance(stmt, While):
            return self._check_while_loop(stmt)
        elif isinstance(stmt, RepeatUntil):
            return self._check_repeat_until(stmt)
        elif isinstance(stmt, Print):
            return self._check_expression(stmt.value)
        elif isinstance(stmt, Block):
            return self._check_scoped_block(stmt, ScopeKind.BLOCK)

        return self._error(create_structural_error("a statement", stmt))

    def _check_var_decl(self, var_decl: VarDecl) -> bool:
        # The initializer is resolved before the new name becomes visible
        ok = self._check_expression(var_decl.initializer)

        try:
            self.symbol_table.declare(
                var_decl.name,
                SymbolType.scalar(),
                var_decl.location,
                ast_node=var_decl,
                is_initialized=var_decl.initializer is not None
            )
        except SemanticError as e:
            return self._error(e)

        return ok

    def _check_array_decl(self, array_decl: ArrayDecl) -> bool:
        ok = True
        length = None

        size = array_decl.size
        if isinstance(size, Number) and size.value > 0:
            length = size.value
        else:
            location = size.location if size is not None else array_decl.location
            ok = self._error(create_invalid_array_size_error(array_decl.name, location, array_decl))

        # Registered even with a bad size so later uses resolve
        try:
            self.symbol_table.declare(
                array_decl.name,
                SymbolType.array(length),
                array_decl.location,
                ast_node=array_decl
            )
        except SemanticError as e:
            return self._error(e)

        return ok

    def _check_assign(self, assign: Assign) -> bool:
        target = assign.target
        if not isinstance(target, (Identifier, ArrayAccess)):
            return self._error(create_structural_error("an assignment target", target or assign))

        ok = True
        symbol = self.symbol_table.lookup(target.name)

        if symbol is None:
            ok = self._error(create_undeclared_variable_error(
                target.name, target.location, target, self.symbol_table.similar_names(target.name)
            ))
            if isinstance(target, ArrayAccess):
                self._check_expression(target.index)
        elif isinstance(target, Identifier):
            if symbol.is_array:
                ok = self._error(create_array_assignment_error(target.name, target.location, assign))
        elif not symbol.is_array:
            ok = self._error(create_not_an_array_error(target.name, target.location, target))
            self._check_expression(target.index)
        else:
            ok = self._check_index(symbol, target)

        value_ok = self._check_expression(assign.value)

        if ok and value_ok:
            symbol.is_initialized = True
        return ok and value_ok

    def _check_if_statement(self, if_stmt: If) -> bool:
        condition_ok = self._check_expression(if_stmt.condition)
        body_ok = self._check_scoped_block(if_stmt.body, ScopeKind.IF)
        return condition_ok and body_ok

    def _check_while_loop(self, while_loop: While) -> bool:
        condition_ok = self._check_expression(while_loop.condition)
        body_ok = self._check_scoped_block(while_loop.body, ScopeKind.WHILE)
        return condition_ok and body_ok

    def _check_repeat_until(self, repeat: RepeatUntil) -> bool:
        # The body's scope is closed before the condition is checked
        body_ok = self._check_scoped_block(repeat.body, ScopeKind.REPEAT)
        condition_ok = self._check_expression(repeat.condition)
        return body_ok and condition_ok

    def _check_scoped_block(self, block: Optional[Block], kind: ScopeKind) -> bool:
        """Check a block in a new scope, purging its declarations afterwards."""
        if block is None:
            return True
        if not isinstance(block, Block):
            return self._error(create_structural_error("Block", block))

        self.symbol_table.enter_scope(kind)
        try:
            return self._check_statements(block.statements)
        finally:
            self.symbol_table.exit_scope()

    # ========================================================================
    # Expressions
    # ========================================================================

    def _check_expression(self, expr: Optional[Expression]) -> bool:
        if expr is None:
            return True

        if isinstance(expr, Number):
            return True
        elif isinstance(expr, Identifier):
            return self._check_identifier(expr)
        elif isinstance(expr, ArrayAccess):
            return self._check_array_access(expr)
        elif isinstance(expr, BinaryOp):
            return self._check_binary_op(expr)
        elif isinstance(expr, Factorial):
            return self._check_factorial(expr)

        return self._error(create_structural_error("an expression", expr))

    def _check_identifier(self, identifier: Identifier) -> bool:
        symbol = self.symbol_table.lookup(identifier.name)

        if symbol is None:
            return self._error(create_undeclared_variable_error(
                identifier.name, identifier.location, identifier,
                self.symbol_table.similar_names(identifier.name)
            ))

        if symbol.is_array:
            return self._error(create_type_mismatch_error(identifier.name, identifier.location, identifier))

        if not symbol.is_initialized:
            self._warn(create_uninitialized_variable_warning(identifier.name, identifier.location, identifier))

        return True

    def _check_array_access(self, access: ArrayAccess) -> bool:
        symbol = self.symbol_table.lookup(access.name)

        if symbol is None:
            self._check_expression(access.index)
            return self._error(create_undeclared_variable_error(
                access.name, access.location, access,
                self.symbol_table.similar_names(access.name)
            ))

        if not symbol.is_array:
            self._check_expression(access.index)
            return self._error(create_not_an_array_error(access.name, access.location, access))

        ok = self._check_index(symbol, access)

        if not symbol.is_initialized:
            self._warn(create_uninitialized_variable_warning(access.name, access.location, access))

        return ok

    def _check_index(self, symbol: Symbol, access: ArrayAccess) -> bool:
        """Validate the index expression; constant indices are bounds checked."""
        ok = self._check_expression(access.index)

        index = access.index
        length = symbol.symbol_type.length
        if isinstance(index, Number) and length is not None and not 0 <= index.value < length:
            ok = self._error(create_index_out_of_bounds_error(
                access.name, index.value, length, index.location, access
            ))

        return ok

    def _check_binary_op(self, binary_op: BinaryOp) -> bool:
        """
        Check an operator tree with an explicit work list.

        Operands are visited left to right, so diagnostics keep source
        order however long the chain is.
        """
        ok = True
        pending: List[Expression] = [binary_op]

        while pending:
            expr = pending.pop()
            if not isinstance(expr, BinaryOp):
                ok = self._check_expression(expr) and ok
                continue
            if expr.left is None or expr.right is None:
                ok = self._error(create_invalid_operation_error(expr.operator, expr.location, expr))
                continue
            pending.append(expr.right)
            pending.append(expr.left)

        return ok

    def _check_factorial(self, factorial: Factorial) -> bool:
        if factorial.operand is None:
            return self._error(create_invalid_operation_error("factorial", factorial.location, factorial))
        return self._check_expression(factorial.operand)


def analyze_program(program: Program, max_errors: int = DEFAULT_MAX_ERRORS) -> AnalysisResult:
    """Convenience function to analyze a tree and return the full result."""
    analyzer = SemanticAnalyzer(max_errors)
    analyzer.analyze(program)
    return analyzer.result

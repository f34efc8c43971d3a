"""
Test suite for the MiniLang semantic analyzer.

Tests cover:
- Symbol resolution and scoping
- Redeclaration and shadowing
- Array size, shape and bounds checking
- Uninitialized-use warnings
- Structural checks on hand-built trees

Author: xwest
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from minilang.lexer.tokens import Token, TokenType, SourceLocation
from minilang.parser.parser import Parser
from minilang.parser.ast_nodes import Program, Print, BinaryOp, Factorial, Number, Identifier, Block
from minilang.analyzer.semantic_analyzer import SemanticAnalyzer
from minilang.analyzer.errors import SemanticErrorKind


def make_token(token_type: TokenType, lexeme: str, value=None) -> Token:
    return Token(token_type, lexeme, value, SourceLocation("<test>", 1, 1, 0))


class TestSemanticAnalyzer(unittest.TestCase):
    """Test cases for the semantic analyzer."""

    def setUp(self):
        """Set up test fixtures."""
        self.analyzer = SemanticAnalyzer()

    def _analyze_code(self, code: str):
        """Helper to parse and analyze a code snippet."""
        parser = Parser.from_source(code)
        program = parser.parse()
        self.assertFalse(parser.had_errors, parser.format_errors())
        self.ok = self.analyzer.analyze(program)
        return self.analyzer.result

    def _error_kinds(self, result):
        return [e.kind for e in result.errors]

    def test_well_formed_program(self):
        result = self._analyze_code("int x; x = 1; if (x == 1) { print x; }")

        self.assertTrue(self.ok)
        self.assertTrue(result.success)
        self.assertFalse(result.has_errors(), f"Unexpected errors: {result.errors}")
        self.assertFalse(result.has_warnings())

    def test_redeclaration_in_same_scope(self):
        result = self._analyze_code("int x; int x;")

        self.assertFalse(self.ok)
        self.assertEqual(self._error_kinds(result), [SemanticErrorKind.REDECLARED_VARIABLE])
        self.assertEqual(result.errors[0].message, "Variable 'x' already declared in this scope")

    def test_array_redeclaring_scalar(self):
        result = self._analyze_code("int x; int x[3];")
        self.assertEqual(self._error_kinds(result), [SemanticErrorKind.REDECLARED_VARIABLE])

    def test_shadowing_in_nested_block(self):
        result = self._analyze_code("int x; x = 1; if (x) { int x; x = 2; print x; }")

        self.assertTrue(self.ok)
        self.assertEqual(result.errors, [])

    def test_scope_exit_restores_outer_declaration(self):
        # Inner x is never assigned; a read resolving to it would warn
        result = self._analyze_code("int x; x = 1; while (x) { int x; } print x;")

        self.assertEqual(result.errors, [])
        self.assertEqual(result.warnings, [])

    def test_block_local_is_undeclared_after_exit(self):
        result = self._analyze_code("if (1) { int y; y = 1; } print y;")

        self.assertEqual(self._error_kinds(result), [SemanticErrorKind.UNDECLARED_VARIABLE])
        self.assertEqual(result.errors[0].message, "Undeclared variable 'y'")

    def test_repeat_body_names_not_visible_in_condition(self):
        result = self._analyze_code("repeat { int done; done = 1; } until (done == 1);")

        self.assertEqual(self._error_kinds(result), [SemanticErrorKind.UNDECLARED_VARIABLE])

    def test_bare_block_may_shadow(self):
        result = self._analyze_code("int x = 1; { int x; x = 2; } print x;")

        self.assertTrue(self.ok)
        self.assertEqual(result.errors, [])
        self.assertEqual(result.warnings, [])

    def test_bare_block_declarations_are_purged(self):
        result = self._analyze_code("{ int y; y = 1; } print y;")

        self.assertFalse(self.ok)
        self.assertEqual(self._error_kinds(result), [SemanticErrorKind.UNDECLARED_VARIABLE])
        self.assertEqual(result.errors[0].message, "Undeclared variable 'y'")

    def test_nested_bare_blocks(self):
        result = self._analyze_code("int x; { int x; { int x; x = 3; } x = 2; } x = 1;")
        self.assertEqual(result.errors, [])
        self.assertEqual(self.analyzer.symbol_table.current_level, 0)

    def test_long_operator_chain(self):
        code = "int x; x = " + " + ".join(["1"] * 2000) + "; print x;"
        result = self._analyze_code(code)

        self.assertTrue(self.ok)
        self.assertEqual(result.errors, [])
        self.assertEqual(result.warnings, [])

    def test_operator_chain_errors_in_source_order(self):
        result = self._analyze_code("int x; x = a + 1 * b - c;")

        self.assertEqual(
            [e.message for e in result.errors],
            ["Undeclared variable 'a'", "Undeclared variable 'b'", "Undeclared variable 'c'"]
        )

    def test_use_before_initialization_is_a_warning(self):
        result = self._analyze_code("int x; print x;")

        self.assertTrue(self.ok)
        self.assertTrue(result.success)
        self.assertEqual(len(result.warnings), 1)
        self.assertEqual(result.warnings[0].kind, SemanticErrorKind.UNINITIALIZED_VARIABLE)
        self.assertEqual(result.warnings[0].message, "Variable 'x' may be used uninitialized")

    def test_initializer_counts_as_initialization(self):
        result = self._analyze_code("int x = 5; print x;")
        self.assertEqual(result.warnings, [])

    def test_initializer_is_resolved_before_declaration(self):
        result = self._analyze_code("int x = x;")
        self.assertEqual(self._error_kinds(result), [SemanticErrorKind.UNDECLARED_VARIABLE])

    def test_successful_assignment_initializes(self):
        result = self._analyze_code("int x; int y; y = x + 1; print y;")

        self.assertEqual(result.errors, [])
        self.assertEqual([w.message for w in result.warnings], ["Variable 'x' may be used uninitialized"])

    def test_failed_assignment_does_not_initialize(self):
        result = self._analyze_code("int x; x = z; print x;")

        self.assertEqual(self._error_kinds(result), [SemanticErrorKind.UNDECLARED_VARIABLE])
        self.assertEqual(len(result.warnings), 1)

    def test_undeclared_assignment_target(self):
        result = self._analyze_code("x = 1;")

        self.assertFalse(self.ok)
        self.assertEqual(result.errors[0].message, "Undeclared variable 'x'")

        text = str(result.errors[0])
        self.assertIn("ERROR[S010]: Undeclared variable 'x'", text)
        self.assertIn("note: Undeclared variable", text)

    def test_undeclared_suggests_similar_name(self):
        result = self._analyze_code("int count; count = 1; print cout;")
        self.assertIn("Did you mean 'count'?", result.errors[0].diagnostic.suggestions)

    def test_constant_index_out_of_bounds(self):
        result = self._analyze_code("int a[3]; a[5] = 1;")

        self.assertEqual(self._error_kinds(result), [SemanticErrorKind.ARRAY_INDEX_OUT_OF_BOUNDS])

    def test_index_equal_to_length_is_out_of_bounds(self):
        result = self._analyze_code("int a[3]; a[2] = 1; print a[3];")
        self.assertEqual(self._error_kinds(result), [SemanticErrorKind.ARRAY_INDEX_OUT_OF_BOUNDS])

    def test_non_constant_index_is_not_bounds_checked(self):
        result = self._analyze_code("int a[3]; int i; i = 7; a[i] = 1;")

        self.assertTrue(self.ok)
        self.assertEqual(result.errors, [])

    def test_invalid_array_sizes(self):
        for code in ("int a[0];", "int n; n = 3; int a[n];", "int a[1 + 2];"):
            with self.subTest(code=code):
                result = self._analyze_code(code)
                self.assertEqual(self._error_kinds(result), [SemanticErrorKind.INVALID_ARRAY_SIZE])

    def test_invalid_array_still_declared(self):
        result = self._analyze_code("int a[0]; a[7] = 1; print a[1];")

        # Only the size error: no undeclared cascade, no bounds check without a length
        self.assertEqual(self._error_kinds(result), [SemanticErrorKind.INVALID_ARRAY_SIZE])

    def test_indexing_a_scalar(self):
        result = self._analyze_code("int x; x[0] = 1;")
        self.assertEqual(self._error_kinds(result), [SemanticErrorKind.NOT_AN_ARRAY])

        result = self._analyze_code("int x = 1; print x[0];")
        self.assertEqual(self._error_kinds(result), [SemanticErrorKind.NOT_AN_ARRAY])

    def test_assigning_whole_array(self):
        result = self._analyze_code("int a[3]; a = 1;")

        self.assertEqual(self._error_kinds(result), [SemanticErrorKind.ARRAY_ASSIGNMENT])

    def test_array_used_as_scalar(self):
        result = self._analyze_code("int a[3]; a[0] = 1; print a + 1;")

        self.assertEqual(self._error_kinds(result), [SemanticErrorKind.TYPE_MISMATCH])
        self.assertEqual(result.errors[0].message, "Type mismatch involving 'a'")

    def test_array_read_before_any_element_assignment(self):
        result = self._analyze_code("int a[2]; print a[0];")
        self.assertEqual(len(result.warnings), 1)

        result = self._analyze_code("int a[2]; a[0] = 1; print a[1];")
        self.assertEqual(result.warnings, [])

    def test_all_errors_are_reported(self):
        result = self._analyze_code("x = 1; y = 2; int a[0]; print factorial(z);")

        self.assertEqual(len(result.errors), 4)

    def test_global_symbols_in_result(self):
        result = self._analyze_code("int x; int a[2]; if (1) { int y; }")

        self.assertEqual(set(result.symbols), {"x", "a"})
        self.assertTrue(result.symbols["a"].is_array)
        self.assertEqual(result.symbols["a"].symbol_type.length, 2)

    def test_analyzer_reuse_starts_fresh(self):
        first = self._analyze_code("int x; int x; print y;")
        self.assertEqual(len(first.errors), 2)

        second = self._analyze_code("int x; x = 1;")
        self.assertEqual(second.errors, [])

        third = self._analyze_code("int x; int x; print y;")
        self.assertEqual([e.message for e in third.errors], [e.message for e in first.errors])

    def test_error_capacity(self):
        self.analyzer = SemanticAnalyzer(max_errors=2)
        result = self._analyze_code("a = 1; b = 2; c = 3; d = 4;")

        self.assertEqual(len(result.errors), 2)
        self.assertTrue(result.capacity_reached)
        self.assertFalse(self.ok)


class TestStructuralChecks(unittest.TestCase):
    """Hand-built trees the parser would never produce."""

    def setUp(self):
        self.analyzer = SemanticAnalyzer()
        self.print_token = make_token(TokenType.PRINT, "print")

    def test_missing_children_are_valid(self):
        program = Program([Print(None, self.print_token)], self.print_token)

        self.assertTrue(self.analyzer.analyze(program))
        self.assertTrue(self.analyzer.analyze(None))

    def test_binary_op_missing_operand(self):
        plus = make_token(TokenType.PLUS, "+")
        one = Number(1, make_token(TokenType.NUMBER, "1", 1))
        program = Program([Print(BinaryOp(one, "+", None, plus), self.print_token)], self.print_token)

        self.assertFalse(self.analyzer.analyze(program))
        error = self.analyzer.result.errors[0]
        self.assertEqual(error.kind, SemanticErrorKind.INVALID_OPERATION)
        self.assertEqual(error.message, "Invalid operation involving '+'")

    def test_right_nested_operator_chain(self):
        plus = make_token(TokenType.PLUS, "+")
        expr = Number(0, make_token(TokenType.NUMBER, "0", 0))
        for _ in range(5000):
            expr = BinaryOp(Number(1, make_token(TokenType.NUMBER, "1", 1)), "+", expr, plus)
        program = Program([Print(expr, self.print_token)], self.print_token)

        self.assertTrue(self.analyzer.analyze(program))

    def test_factorial_missing_operand(self):
        token = make_token(TokenType.FACTORIAL, "factorial")
        program = Program([Print(Factorial(None, token), self.print_token)], self.print_token)

        self.assertFalse(self.analyzer.analyze(program))
        self.assertEqual(self.analyzer.result.errors[0].kind, SemanticErrorKind.INVALID_OPERATION)

    def test_wrong_node_kind_fails_only_its_subtree(self):
        number = Number(1, make_token(TokenType.NUMBER, "1", 1))
        undeclared = Identifier("ghost", make_token(TokenType.IDENTIFIER, "ghost"))
        program = Program([number, Print(undeclared, self.print_token)], self.print_token)

        self.assertFalse(self.analyzer.analyze(program))
        kinds = [e.kind for e in self.analyzer.result.errors]
        # Analysis carries on past the malformed statement
        self.assertEqual(kinds, [SemanticErrorKind.SEMANTIC_ERROR, SemanticErrorKind.UNDECLARED_VARIABLE])

    def test_statement_in_expression_position(self):
        block = Block([], make_token(TokenType.LEFT_BRACE, "{"))
        program = Program([Print(block, self.print_token)], self.print_token)

        self.assertFalse(self.analyzer.analyze(program))
        self.assertEqual(self.analyzer.result.errors[0].kind, SemanticErrorKind.SEMANTIC_ERROR)


if __name__ == '__main__':
    unittest.main()

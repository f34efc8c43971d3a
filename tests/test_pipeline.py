"""
End-to-end tests for the MiniLang front end.

Author: xwest
"""

import os
import sys
import tempfile
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from minilang.pipeline import Frontend, FrontendOptions, check_source, check_file
from minilang.parser.ast_nodes import format_ast
from minilang.parser.errors import SyntaxErrorKind
from minilang.analyzer.errors import SemanticErrorKind


SAMPLE_PROGRAM = """
// Sum the first few factorials
int n = 5;
int total;
int values[5];
int i;

total = 0;
i = 0;
while (i < n) {
    values[i] = factorial(i);
    total = total + values[i];
    i = i + 1;
}

repeat {
    n = n - 1;
} until (n == 0);

if (total > 10) print total;
"""


class TestFrontend(unittest.TestCase):
    """Test cases for the lexer -> parser -> analyzer pipeline."""

    def test_valid_program(self):
        result = check_source(SAMPLE_PROGRAM)

        self.assertTrue(result.success, result.diagnostics())
        self.assertTrue(result.parsed_ok)
        self.assertTrue(result.analyzed)
        self.assertTrue(result.semantic_ok)
        self.assertEqual(len(result.program.statements), 9)

    def test_syntax_errors_skip_analysis(self):
        result = check_source("int x = ;\nprint y;")

        self.assertFalse(result.success)
        self.assertFalse(result.parsed_ok)
        self.assertFalse(result.analyzed)
        self.assertEqual(result.syntax_errors[0].kind, SyntaxErrorKind.INVALID_EXPRESSION)
        self.assertEqual(result.semantic_errors, [])

    def test_analysis_on_syntax_errors_when_requested(self):
        result = check_source("int x = ;\nprint y;", analyze_on_syntax_errors=True)

        self.assertTrue(result.analyzed)
        self.assertEqual([e.kind for e in result.semantic_errors],
                         [SemanticErrorKind.UNDECLARED_VARIABLE])
        self.assertFalse(result.success)

    def test_semantic_errors(self):
        result = check_source("int a[3];\na[5] = 1;")

        self.assertTrue(result.parsed_ok)
        self.assertFalse(result.semantic_ok)
        self.assertFalse(result.success)
        self.assertEqual(result.semantic_errors[0].location.line, 2)

    def test_warnings_do_not_fail(self):
        result = check_source("int x; print x;")

        self.assertTrue(result.success)
        self.assertEqual(len(result.warnings), 1)

    def test_long_sum(self):
        result = check_source("int x; x = " + " + ".join(["1"] * 2000) + "; print x;")

        self.assertTrue(result.success, result.diagnostics())
        outline = format_ast(result.program)
        self.assertEqual(outline.count("BinaryOp: +"), 1999)
        self.assertEqual(outline.count("Number: 1"), 2000)

    def test_deep_nesting_is_reported(self):
        result = check_source("int x; " + "{" * 500 + "}" * 500)

        self.assertFalse(result.success)
        self.assertEqual([e.kind for e in result.syntax_errors], [SyntaxErrorKind.NESTING_TOO_DEEP])

    def test_bare_block_scope(self):
        result = check_source("int x; { int x; x = 1; } { int y; } print y;")

        self.assertFalse(result.success)
        self.assertEqual([e.kind for e in result.semantic_errors], [SemanticErrorKind.UNDECLARED_VARIABLE])

    def test_syntax_check_only(self):
        result = check_source("print y;", analyze=False)

        self.assertFalse(result.analyzed)
        self.assertTrue(result.success)

    def test_lexical_errors_are_collected(self):
        result = check_source("int x; x = 2 @ 3;")

        self.assertEqual(len(result.lexer_errors), 1)
        self.assertFalse(result.parsed_ok)

    def test_diagnostic_lines(self):
        result = check_source("int x\nprint x;")
        self.assertEqual(result.diagnostics(), ["Error 1:6: Missing semicolon after 'x'"])

        result = check_source("int x; print x; print y;")
        self.assertEqual(result.diagnostics(), [
            "Semantic Error 1:23: Undeclared variable 'y'",
            "Warning 1:14: Variable 'x' may be used uninitialized",
        ])

    def test_filename_in_locations(self):
        result = check_source("x = 1;", filename="prog.ml")
        self.assertEqual(result.semantic_errors[0].location.filename, "prog.ml")

    def test_max_errors(self):
        frontend = Frontend(FrontendOptions(max_errors=2))
        result = frontend.check_source("@; @; @; @;")

        self.assertEqual(len(result.syntax_errors), 2)

    def test_runs_are_independent(self):
        frontend = Frontend()
        first = frontend.check_source("int x; int x;")
        frontend.check_source(SAMPLE_PROGRAM)
        again = frontend.check_source("int x; int x;")

        self.assertEqual(first.diagnostics(), again.diagnostics())

    def test_check_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "sample.ml")
            with open(path, "w", encoding="utf-8") as f:
                f.write(SAMPLE_PROGRAM)

            result = check_file(path)

        self.assertTrue(result.success)

    def test_check_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            check_file("/nonexistent/program.ml")


if __name__ == '__main__':
    unittest.main()

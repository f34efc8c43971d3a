"""
Tests for the mlc command-line interface.

Author: xwest
"""

import os
import sys
import unittest

from click.testing import CliRunner

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from minilang.cli import main


class TestCLI(unittest.TestCase):
    """Test cases for mlc."""

    def setUp(self):
        self.runner = CliRunner()

    def _run(self, source: str, *args):
        with self.runner.isolated_filesystem():
            with open("prog.ml", "w", encoding="utf-8") as f:
                f.write(source)
            return self.runner.invoke(main, [*args, "prog.ml"])

    def test_valid_program_exits_zero(self):
        result = self._run("int x; x = 1; if (x == 1) { print x; }")

        self.assertEqual(result.exit_code, 0, result.output)

    def test_ast_output(self):
        result = self._run("int x = 1;", "--ast")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Program\n  VarDecl: x\n    Number: 1", result.output)

    def test_ast_output_for_long_sum(self):
        result = self._run("int x = " + " + ".join(["1"] * 1000) + ";", "--ast")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output.count("BinaryOp: +"), 999)

    def test_syntax_error_exits_one(self):
        result = self._run("int x\nprint x;")

        self.assertEqual(result.exit_code, 1)
        self.assertIn("Error 1:6: Missing semicolon after 'x'", result.output)

    def test_semantic_error_exits_one(self):
        result = self._run("int a[3]; a[5] = 1;")

        self.assertEqual(result.exit_code, 1)
        self.assertIn("Semantic Error", result.output)

    def test_warning_only_exits_zero(self):
        result = self._run("int x; print x;")

        self.assertEqual(result.exit_code, 0)
        self.assertIn("Warning 1:14: Variable 'x' may be used uninitialized", result.output)

    def test_no_analyze(self):
        result = self._run("print undeclared;", "--no-analyze")
        self.assertEqual(result.exit_code, 0, result.output)

    def test_tokens_dump(self):
        result = self._run("int x;", "--tokens")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("INT('int')", result.output)
        self.assertIn("EOF('')", result.output)

    def test_max_errors_must_be_positive(self):
        result = self._run("int x;", "--max-errors", "0")
        self.assertNotEqual(result.exit_code, 0)

    def test_missing_file(self):
        result = self.runner.invoke(main, ["does-not-exist.ml"])
        self.assertNotEqual(result.exit_code, 0)


if __name__ == '__main__':
    unittest.main()

#!/usr/bin/env python3
"""
Main test runner for the MiniLang front end.

Runs a quick smoke test of the full lexer -> parser -> analyzer pipeline,
then the unittest suites under tests/.

Author: xwest
"""

import sys
import os
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.dirname(__file__))
sys.path.insert(0, project_root)


def run_smoke_test() -> bool:
    """Run one valid and one invalid program through the pipeline."""
    try:
        from minilang.lexer.lexer import Lexer
        from minilang.parser.parser import Parser
        from minilang.parser.ast_nodes import format_ast
        from minilang.analyzer.semantic_analyzer import SemanticAnalyzer

        print("✅ All front-end modules imported successfully")
        print()

    except ImportError as e:
        print(f"❌ Failed to import front-end modules: {e}")
        return False

    print("Testing simple front-end pipeline...")
    code = """
    int n = 5;
    int result;
    result = factorial(n);
    if (result > 100) {
        print result;
    }
    """

    print("  🔧 Lexing...")
    lexer = Lexer(code)
    tokens = lexer.tokenize()
    print(f"     Generated {len(tokens)} tokens")

    print("  🔧 Parsing...")
    parser = Parser(tokens)
    program = parser.parse()
    if parser.had_errors:
        print(f"     ❌ Syntax errors: {parser.error_count()}")
        print(parser.format_errors())
        return False
    print(f"     Generated AST with {len(program.statements)} statements")

    print("  🔧 Semantic Analysis...")
    analyzer = SemanticAnalyzer()
    if not analyzer.analyze(program):
        print(f"     ❌ Semantic errors: {len(analyzer.result.errors)}")
        for error in analyzer.result.errors:
            print(f"        {error.message}")
        return False
    print("     ✅ No semantic errors")
    print()
    print(format_ast(program))
    print()

    print("  ❌ Testing error handling...")
    error_code = """
    int x
    int a[3];
    a[5] = y;
    """
    parser = Parser.from_source(error_code)
    program = parser.parse()
    analyzer.analyze(program)
    caught = parser.error_count() + len(analyzer.result.errors)
    if caught == 0:
        print("     ❌ Error handling test failed: expected errors but got none")
        return False
    print(f"     ✅ Error handling successful: caught {caught} expected errors")
    print()

    return True


def run_all_tests() -> bool:
    """Run the smoke test and every unittest suite."""
    print("🚀 MiniLang Front End Test Suite")
    print("=" * 60)

    if not run_smoke_test():
        return False

    suite = unittest.defaultTestLoader.discover(os.path.join(project_root, "tests"))
    result = unittest.TextTestRunner(verbosity=1).run(suite)

    print()
    if result.wasSuccessful():
        print("🎉 All tests PASSED!")
    else:
        print(f"❌ {len(result.failures)} failures, {len(result.errors)} errors")
    return result.wasSuccessful()


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)

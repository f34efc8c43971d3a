"""
mlc - MiniLang front-end command-line interface

Checks a MiniLang source file: lexes, parses and semantically analyzes
it, printing every diagnostic to stderr.

Usage Examples
--------------
Check a program:
    $ mlc program.ml

Show the syntax tree of a valid program:
    $ mlc --ast program.ml

Syntax check only:
    $ mlc --no-analyze program.ml

Author: xwest
"""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .lexer.lexer import Lexer
from .parser.ast_nodes import format_ast
from .pipeline import Frontend, FrontendOptions


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "source",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print the syntax tree when the program is valid",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream before parsing",
)
@click.option(
    "--max-errors",
    type=click.IntRange(min=1),
    default=256,
    show_default=True,
    help="Maximum diagnostics recorded per phase",
)
@click.option(
    "--no-analyze",
    is_flag=True,
    help="Stop after parsing (syntax check only)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging)",
)
@click.version_option(version=__version__, prog_name="mlc")
def main(
    source: Path,
    ast: bool,
    tokens: bool,
    max_errors: int,
    no_analyze: bool,
    verbose: bool,
) -> None:
    """
    Check a MiniLang program.

    SOURCE is the MiniLang source file to check.

    \b
    Exit status:
        0  every phase that ran succeeded
        1  lexical, syntax or semantic errors were found
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        text = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if tokens:
        for token in Lexer(text, str(source), max_errors).tokenize():
            click.echo(f"{token.line}:{token.column}\t{token}")

    options = FrontendOptions(filename=str(source), max_errors=max_errors, analyze=not no_analyze)
    result = Frontend(options).check_source(text)

    for line in result.diagnostics():
        click.echo(line, err=True)

    if not result.success:
        click.echo(f"{source}: check failed", err=True)
        sys.exit(1)

    if ast:
        click.echo(format_ast(result.program))

    if verbose:
        click.echo(f"{source}: OK ({len(result.warnings)} warnings)")


if __name__ == "__main__":
    main()

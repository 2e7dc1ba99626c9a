"""
funcc - Funclang Front End Command-Line Interface
=================================================

This module implements the command-line driver of the Funclang front
end. It reads a source file, parses it and prints the result.

Usage Examples
--------------
Print the AST:
    $ funcc main.fl

One-line tree:
    $ funcc --compact main.fl

Tree as JSON:
    $ funcc --json main.fl

Token stream:
    $ funcc --tokens main.fl

Verbose mode (debug logging, parser diagnostics):
    $ funcc -v main.fl
"""

import json
import logging
from dataclasses import replace
from pathlib import Path

import click

from funclang import __version__
from funclang.config import FrontendConfig
from funclang.frontend.lexer import Lexer
from funclang.frontend.parser import parse_source
from funclang.cli.errors import handle_cli_exception


logger = logging.getLogger(__name__)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--ast", "output_format",
    flag_value="ast",
    default=True,
    help="Print the indented AST (default)",
)
@click.option(
    "--compact", "output_format",
    flag_value="compact",
    help="Print the AST on one line",
)
@click.option(
    "--json", "output_format",
    flag_value="json",
    help="Print the AST as JSON",
)
@click.option(
    "--tokens", "output_format",
    flag_value="tokens",
    help="Print the token stream and exit",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="funcc")
def main(
    input_file: Path,
    output_format: str,
    verbose: bool,
) -> None:
    """
    Parse a Funclang program and print its syntax tree.

    INPUT_FILE is the source file to parse.

    \b
    Examples:
        funcc main.fl                # Indented AST
        funcc --compact main.fl      # One-line AST
        funcc --json main.fl         # JSON AST
        funcc --tokens main.fl       # Token stream

    \b
    Language:
        func NAME() void|i32 STATEMENT
        STATEMENT: { STATEMENT* } | return EXPR; | EXPR;
        EXPR:      NAME(EXPR) | INTEGER
    """
    config = replace(FrontendConfig.from_env(), filename=str(input_file))
    config.setup_logging(verbose)

    # The error report repeats the diagnostic, so only show it when verbose
    if not verbose:
        config.diagnostics = False

    try:
        if verbose:
            click.echo(f"Parsing {input_file}...")

        source = input_file.read_text(encoding="utf-8")

        if output_format == "tokens":
            for token in Lexer(source, config.filename).tokenize():
                click.echo(f"{token.kind.value:<10} {token.text}")
            return

        with parse_source(source, config=config) as tree:
            if verbose:
                click.echo(f"Parsed: {len(tree.arena)} nodes")

            if output_format == "compact":
                click.echo(tree.format())
            elif output_format == "json":
                click.echo(json.dumps(tree.to_dict(), indent=2))
            else:
                click.echo(tree.pretty())

    except Exception as e:
        logger.debug(f"funcc failed on {input_file}: {e!r}")
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()

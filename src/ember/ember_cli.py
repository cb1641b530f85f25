"""
Ember CLI Entrypoint.

This module provides the command-line interface for parsing Ember source code.

Features:
    - Read source from a UTF-8 file or an inline string.
    - Lex and parse it, then print the tree as S-expressions or JSON.
    - Dump the raw token stream instead of parsing.
    - Output to console or file.
    - Launch an interactive REPL.

Example usage:
    ember program.em
    ember -s "1 + 2 * 3"
    ember program.em -f json --indent -o program.json
    ember --tokens -s "if c then t end"
    ember --repl

Exit codes:
    0   success
    1   syntactic failure (diagnostic on stderr)
    2   usage error (argparse)
    65  lexical failure (fatal)
    66  input file could not be read
    73  output file could not be written

Functions:
    run_ember(...) -> int:
        Executes the pipeline (read -> lex -> parse -> render -> output) and returns the exit code.

    main() -> None:
        Parses CLI arguments and invokes the appropriate action (REPL or pipeline).
"""

import argparse
import logging
import os
import sys

from ember.ember_lexer import LexError, tokenize
from ember.ember_parser import parse
from ember.ember_render import Renderer

__version__ = "0.1.0"

EXIT_OK = 0
EXIT_SYNTAX = 1
EXIT_DATAERR = 65
EXIT_NOINPUT = 66
EXIT_CANTCREAT = 73

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    """Sets up stderr logging for the `ember` loggers.

    `--verbose` selects DEBUG; otherwise the `EMBER_LOG_LEVEL` environment
    variable names the level, defaulting to ERROR.
    """
    if verbose:
        level = logging.DEBUG
    else:
        name = os.environ.get("EMBER_LOG_LEVEL", "ERROR").upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            level = logging.ERROR
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)
    logging.getLogger("ember").setLevel(level)


def run_ember(
    source: str,
    is_string: bool = False,
    fmt: str = "sexpr",
    out: str | None = None,
    indent: bool = False,
    show_tokens: bool = False,
    partial: bool = False,
    quiet: bool = False,
) -> int:
    """
    Run the Ember pipeline: read, lex, parse, render, and write output.

    Args:
        source (str): The Ember source code or a path to a source file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        fmt (str): Output format ('sexpr' or 'json'). Defaults to 'sexpr'.
        out (str | None): Optional path to write the output to. If None, prints to stdout.
        indent (bool): Multi-line layout for the rendered tree.
        show_tokens (bool): Print the token stream instead of the tree.
        partial (bool): On a syntactic failure, still print the partial tree.
        quiet (bool): Suppress the version banner.

    Returns:
        int: The process exit code.
    """
    if not quiet:
        print(f"ember v{__version__}")

    # 1. Read source
    if not is_string:
        try:
            with open(source, encoding="utf-8") as f:
                source = f.read()
        except (OSError, UnicodeDecodeError) as e:
            print(f"[error] >>> Cannot read {source}: {e}", file=sys.stderr)
            return EXIT_NOINPUT

    # 2. Lex and parse
    code = EXIT_OK
    try:
        if show_tokens:
            output = "\n".join(
                f"{tok.line}:{tok.col}\t{tok.kind}\t{tok.text}"
                for tok in tokenize(source)
            )
        else:
            result = parse(source)
            if not result.ok:
                print(f"[error] >>> {result.error}", file=sys.stderr)
                code = EXIT_SYNTAX
                if not partial:
                    return code
            output = Renderer(fmt, indent=indent).render([result.tree])
    except LexError as e:
        print(f"[fatal] >>> {e}", file=sys.stderr)
        return EXIT_DATAERR

    # 3. Output result
    if out:
        try:
            with open(out, "w", encoding="utf-8") as f:
                f.write(output + "\n")
        except OSError as e:
            print(f"[error] >>> Cannot write {out}: {e}", file=sys.stderr)
            return EXIT_CANTCREAT
        logger.info("wrote %s", out)
    else:
        print(output)
    return code


def main() -> None:
    """
    Entry point for the Ember CLI.

    Parses command-line arguments and dispatches to the appropriate mode:
    - Launches the REPL if no arguments are passed or `--repl` is specified.
    - Otherwise, runs the pipeline and exits with its exit code.
    """
    if len(sys.argv) == 1:
        # No args passed: open REPL instead
        from ember.ember_repl import start_repl

        configure_logging()
        start_repl()
        return
    parser = argparse.ArgumentParser(
        prog="ember", description="Parse Ember source into a syntax tree."
    )
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "-f",
        "--format",
        dest="fmt",
        choices=("sexpr", "json"),
        default="sexpr",
        help="Output format (default: sexpr)",
    )
    parser.add_argument(
        "--indent", action="store_true", help="Lay the tree out over several lines"
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument(
        "--tokens",
        dest="show_tokens",
        action="store_true",
        help="Print the token stream instead of parsing",
    )
    parser.add_argument(
        "--partial",
        action="store_true",
        help="Print the partial tree even when parsing fails",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Do not print the version banner"
    )
    parser.add_argument(
        "--repl",
        action="store_true",
        help="Launch interactive REPL instead of parsing a source",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"ember {__version__}")

    args = parser.parse_args()
    configure_logging(args.verbose)

    if args.repl or args.source is None:
        from ember.ember_repl import start_repl

        start_repl(verbose=args.verbose)
        return

    sys.exit(
        run_ember(
            source=args.source,
            is_string=args.string,
            fmt=args.fmt,
            out=args.out,
            indent=args.indent,
            show_tokens=args.show_tokens,
            partial=args.partial,
            quiet=args.quiet,
        )
    )


if __name__ == "__main__":
    main()

"""
Esta CLI Entrypoint.

This module provides the command-line interface for the Esta parser.

Features:
    - Read source from `.esta` files or inline strings.
    - Lex and parse the code into an AST.
    - Print the AST as JSON or as canonical Esta source.
    - Output to console or file.
    - Load parser options from a JSON config file.

Example usage:
    esta hello.esta
    esta -s "var x = 1 + 2;" --format source
    esta myfile.esta -o myfile.json --verbose

Functions:
    run_esta(source: str, is_string: bool = False, fmt: str = "json", out: Optional[str] = None,
             config: Optional[ParserConfig] = None) -> str:
        Executes the full pipeline (lex → parse → render → output).

    main(argv: Optional[list[str]] = None) -> int:
        Parses CLI arguments and runs the pipeline, reporting errors on stderr.
"""

import argparse
import dataclasses
import json
import logging
import sys

from esta.esta_ast import program_to_dicts
from esta.esta_config import ParserConfig
from esta.esta_errors import ConfigError, EstaError
from esta.esta_lexer import tokenize
from esta.esta_parser import Parser
from esta.esta_printer import SourcePrinter

logger = logging.getLogger(__name__)


def run_esta(
    source: str,
    is_string: bool = False,
    fmt: str = "json",
    out: str | None = None,
    config: ParserConfig | None = None,
) -> str:
    """
    Run the Esta front end: lex, parse, render, and print or write the result.

    Args:
        source (str): The Esta source code or path to a `.esta` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path. Defaults to False.
        fmt (str): Output format, 'json' or 'source'. Defaults to 'json'.
        out (str | None): Optional path to write the output. If None, prints to stdout.
        config (ParserConfig | None): Parser options. Defaults to `ParserConfig()`.

    Returns:
        str: The rendered output.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.esta',
            or if `fmt` is unknown.
        EstaError: If the source fails to lex or parse.
    """
    if fmt not in ("json", "source"):
        raise ValueError(f"Unknown output format: {fmt!r}")
    if not is_string and not source.endswith(".esta"):
        raise ValueError("Only .esta files are supported.")
    config = config or ParserConfig()

    # 1. Read source
    if not is_string:
        logger.debug("Reading %s", source)
        with open(source, encoding="utf-8") as f:
            source = f.read()

    # 2. Lexing and parsing
    program = Parser(tokenize(source), config).parse()

    # 3. Rendering
    if fmt == "json":
        rendered = json.dumps(program_to_dicts(program), indent=2)
    else:
        rendered = SourcePrinter(config).print_program(program)

    # 4. Output result
    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(rendered + "\n")
        logger.info("Wrote %s", out)
    else:
        print(rendered)
    return rendered


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the Esta CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `-f`, `--format`: Output format ('json' or 'source'), default is 'json'.
        - `-o`, `--out`: Write output to a file.
        - `--config`: Load parser options from a JSON file.
        - `--legacy-for`: Require the `;` before a `for` body.
        - `--verbose`: Enable debug logging on stderr.

    Returns:
        int: Process exit status; 1 when the source, config or arguments are rejected.
    """
    parser = argparse.ArgumentParser(prog="esta")
    parser.add_argument("source", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "-f",
        "--format",
        dest="fmt",
        choices=("json", "source"),
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument(
        "--config", metavar="PATH", help="JSON file with parser options"
    )
    parser.add_argument(
        "--legacy-for",
        action="store_true",
        help="Require ';' between a for loop's increment and its body",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = ParserConfig.from_json(args.config) if args.config else ParserConfig()
        if args.legacy_for:
            config = dataclasses.replace(config, legacy_for_syntax=True)
        run_esta(
            source=args.source,
            is_string=args.string,
            fmt=args.fmt,
            out=args.out,
            config=config,
        )
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        for problem in e.problems:
            print(f"  - {problem}", file=sys.stderr)
        return 1
    except (EstaError, ValueError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

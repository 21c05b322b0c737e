"""CLI entry and startup wiring."""

import argparse
import sys

from replkit.config import ProgramConfig, load_config, map_path
from replkit.console import iter_reader
from replkit.demo import DemoProgram
from replkit.docs import DocumentationProvider, load_documentation
from replkit.errors import ReplkitError
from replkit.logging_utils import log_event, setup_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="replkit",
        description="Interactive demo of the replkit command dispatch engine.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  replkit
  replkit --prompt "demo> "
  replkit --config ~/replkit.json --log-file ~/replkit.log
  echo "double 21" | replkit
        """,
    )
    parser.add_argument("--config", "-c", help="Path to configuration JSON file")
    parser.add_argument("--prompt", help="Prompt string shown before each input line")
    parser.add_argument(
        "--docs",
        action="append",
        default=[],
        help="Extra documentation XML file (repeatable)",
    )
    parser.add_argument("--log-file", help="Write structured logs to this file")
    parser.add_argument("--debug", action="store_true", help="Show tracebacks for unexpected errors")
    return parser


def _resolve_config(args: argparse.Namespace) -> ProgramConfig:
    config = load_config(args.config) if args.config else ProgramConfig()
    if args.prompt is not None:
        config.prompt = args.prompt
    if args.docs:
        config.docs.extend(map_path(doc, ".") for doc in args.docs)
    if args.log_file:
        config.log_file = map_path(args.log_file, ".")
    if args.debug:
        config.debug = True
    return config


def build_program(config: ProgramConfig) -> DemoProgram:
    """Create the demo program with its documentation loaded."""
    docs = DocumentationProvider.for_program(DemoProgram)
    for path in config.docs:
        docs.merge(load_documentation(path))
        log_event("docs_loaded", source=path, entries=len(docs))
    return DemoProgram(
        docs,
        prompt=config.prompt,
        debug=config.debug,
        history=config.history,
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the replkit CLI."""
    args = _build_parser().parse_args(argv)

    try:
        config = _resolve_config(args)
        setup_logging(config.log_file, config.debug)
        program = build_program(config)
    except ReplkitError as e:
        print(f"ERROR: {e}")
        return 1

    read_line = None
    if not sys.stdin.isatty():
        read_line = iter_reader(line.rstrip("\r\n") for line in sys.stdin)

    program.run(read_line)
    return 0

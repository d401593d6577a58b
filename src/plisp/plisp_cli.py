"""Command-line interface for running Pocket Lisp programs."""

import argparse
import logging
import sys
from typing import List

import yaml

from plisp import __version__
from plisp.plisp import PLisp
from plisp.plisp_error import PLispError, PLispRuntimeError, format_error
from plisp.plisp_evaluator import PLispEvaluator
from plisp.plisp_options import PLispOptions
from plisp.plisp_tokenizer import PLispTokenizer
from plisp.plisp_trace import PLispFileTraceWatcher


CLI_OK = 0
CLI_ERROR = 1


def setup_logging(verbose: bool) -> None:
    """Configure diagnostic logging on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )


def format_error_message(error: str) -> str:
    """Construct the message shown when the CLI itself is misused."""
    return "\n".join([
        "Failed to run Pocket Lisp:",
        "",
        error,
        "",
        "---",
        "See `plisp --help` for detailed usage information."
    ])


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="plisp",
        description="The Pocket Lisp interpreter!",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s program.plisp                       # Run a program
  %(prog)s program.plisp --ast                 # Show the expression tree
  %(prog)s program.plisp --trace-execution     # Trace every evaluation step
  %(prog)s program.plisp --trace-file t.log     # Write the trace to t.log
        """
    )

    parser.add_argument('file', nargs='?', help='Pocket Lisp program to run')
    parser.add_argument('--version', action='store_true', help='Displays the version and exits')
    parser.add_argument('--tokens', action='store_true', help='Displays the tokens for the file and exits')
    parser.add_argument('--ast', action='store_true', help='Displays the AST for the file and exits')
    parser.add_argument(
        '--max-native-stack-trace',
        type=int,
        default=None,
        help='Defines the maximum number of locations to show in a native stack trace (default: 20)'
    )
    parser.add_argument(
        '--trace-execution',
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Prints a trace of the Pocket Lisp interpreter's execution"
    )
    parser.add_argument('--trace-file', help='Writes the execution trace to this file instead of stdout')
    parser.add_argument('--config', '-c', help='YAML file with interpreter options')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    return parser


def read_file(filename: str) -> str:
    """Read a program file."""
    with open(filename, 'r', encoding='utf-8') as f:
        return f.read()


def print_tokens(filename: str) -> int:
    """Print the tokens for the given file."""
    print(f"Tokens for {filename}\n---")
    for token in PLispTokenizer().tokenize(read_file(filename)):
        print(token)

    return CLI_OK


def print_ast(filename: str) -> int:
    """Print the expression tree for the given file."""
    print(f"AST for {filename}\n---")
    for form in PLisp.parse(read_file(filename)):
        print(form.describe())

    return CLI_OK


def run_program(filename: str, options: PLispOptions, trace_file: str | None = None) -> int:
    """
    Run the program in the given file.

    With a trace file, execution tracing is switched on and written there.
    """
    source = read_file(filename)
    if trace_file is None:
        PLisp(options).run(source)
        return CLI_OK

    with PLispFileTraceWatcher(trace_file) as watcher:
        PLisp(options.replace(trace_execution=True), watcher).run(source)

    return CLI_OK


def main(argv: List[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger("PLispCLI")

    if args.version:
        print(f"Pocket Lisp version {__version__}")
        return CLI_OK

    if not args.file:
        parser.print_help()
        return CLI_ERROR

    try:
        options = PLispOptions.load_from_file(args.config) if args.config else PLispOptions()
        options = options.replace(
            max_native_frames=args.max_native_stack_trace,
            trace_execution=args.trace_execution
        )

    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        print(format_error_message(str(e)))
        return CLI_ERROR

    try:
        if args.tokens:
            return print_tokens(args.file)

        if args.ast:
            return print_ast(args.file)

        logger.debug("Running %s with %s", args.file, options)
        return run_program(args.file, options, args.trace_file)

    except PLispRuntimeError as e:
        print(format_error(e))
        return CLI_ERROR

    except PLispError as e:
        print(e)
        return CLI_ERROR

    except OSError as e:
        print(format_error_message(str(e)))
        return CLI_ERROR

    except RecursionError:
        print(f"Error: {args.file} recursed deeper than {PLispEvaluator.RECURSION_LIMIT} Python frames")
        return CLI_ERROR

    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.exception("Unexpected failure running %s", args.file)
        print(f"Error: {e}")
        return CLI_ERROR

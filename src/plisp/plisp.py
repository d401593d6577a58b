"""Main Pocket Lisp class: parse and run programs in one call."""

from typing import Any, TextIO, Tuple

from plisp.plisp_ast import PLispExpr
from plisp.plisp_environment import PLispEnvironment
from plisp.plisp_evaluator import PLispEvaluator
from plisp.plisp_options import PLispOptions
from plisp.plisp_parser import PLispParser
from plisp.plisp_tokenizer import PLispTokenizer
from plisp.plisp_trace import PLispTraceWatcher
from plisp.plisp_value import PLispValue


class PLisp:
    """
    Pocket Lisp interpreter.

    Each instance owns one evaluator and one global environment, so
    definitions made by one `run` call are visible to the next.
    """

    def __init__(
        self,
        options: PLispOptions | None = None,
        trace_watcher: PLispTraceWatcher | None = None,
        output: TextIO | None = None
    ):
        """
        Initialize the interpreter.

        Args:
            options: Run configuration
            trace_watcher: Receives execution trace messages when tracing is enabled
            output: Stream written by display; stdout if omitted
        """
        self.evaluator = PLispEvaluator(options, trace_watcher)
        self.environment: PLispEnvironment = self.evaluator.root_environment(output=output)

    @staticmethod
    def parse(source: str) -> Tuple[PLispExpr, ...]:
        """
        Parse a program.

        Args:
            source: Program text

        Returns:
            The program's top-level forms

        Raises:
            PLispTokenError: If tokenization fails
            PLispParseError: If parsing fails
        """
        tokens = PLispTokenizer().tokenize(source)
        return PLispParser(tokens, source).parse()

    def run(self, source: str) -> PLispValue:
        """
        Parse and evaluate a program, returning the value of its last form.

        The program runs on a worker thread sized for deep recursion.

        Raises:
            PLispTokenError: If tokenization fails
            PLispParseError: If parsing fails
            PLispRuntimeError: If evaluation fails
        """
        return self.evaluator.evaluate_program(self.parse(source), self.environment)

    def run_file(self, path: str) -> PLispValue:
        """Read, parse and evaluate a program file."""
        with open(path, 'r', encoding='utf-8') as f:
            return self.run(f.read())

    def evaluate(self, source: str) -> Any:
        """Run a program and convert its result to a Python value."""
        return self.run(source).to_python()

    def evaluate_and_format(self, source: str) -> str:
        """Run a program and describe its result the way Pocket Lisp writes it."""
        return self.run(source).describe()

"""Input/output native functions for Pocket Lisp."""

import sys
from typing import Callable, List, TextIO

from plisp.plisp_collections import display_text
from plisp.plisp_value import NIL, PLispString, PLispValue


class PLispIOFunctions:
    """Input/output native functions for Pocket Lisp."""

    def __init__(self, output: TextIO | None = None):
        """
        Initialize I/O functions.

        Args:
            output: Stream written by display; stdout at call time if omitted
        """
        self._output = output

    def get_functions(self) -> dict[str, Callable[[List[PLispValue]], PLispValue]]:
        """Return dictionary of I/O function implementations."""
        return {
            'display': self._builtin_display,
            'read-file': self._builtin_read_file,
            'write-file': self._builtin_write_file,
        }

    def _ensure_string(self, value: PLispValue, function_name: str) -> str:
        if not isinstance(value, PLispString):
            raise TypeError(f"{function_name} expects a string, got {value.type_name()}: {value.describe()}")

        return value.value

    def _builtin_display(self, args: List[PLispValue]) -> PLispValue:
        """Print the arguments separated by spaces, followed by a newline."""
        output = self._output if self._output is not None else sys.stdout
        print(" ".join(display_text(arg) for arg in args), file=output)
        return NIL

    def _builtin_read_file(self, args: List[PLispValue]) -> PLispValue:
        if len(args) != 1:
            raise TypeError(f"read-file requires exactly 1 argument, got {len(args)}")

        with open(self._ensure_string(args[0], "read-file"), 'r', encoding='utf-8') as f:
            return PLispString(f.read())

    def _builtin_write_file(self, args: List[PLispValue]) -> PLispValue:
        """(write-file path content) - non-string content is written as displayed."""
        if len(args) != 2:
            raise TypeError(f"write-file requires exactly 2 arguments, got {len(args)}")

        with open(self._ensure_string(args[0], "write-file"), 'w', encoding='utf-8') as f:
            f.write(display_text(args[1]))

        return NIL

"""The standard native function table for Pocket Lisp."""

from typing import Dict, TextIO

from plisp.plisp_collections import PLispCollectionsFunctions, PLispProcedureCaller
from plisp.plisp_io import PLispIOFunctions
from plisp.plisp_math import PLispMathFunctions
from plisp.plisp_value import PLispNativeFunction


class PLispPrelude:
    """Builds the native functions every Pocket Lisp program starts with."""

    def __init__(self, call_procedure: PLispProcedureCaller, output: TextIO | None = None):
        """
        Initialize the prelude.

        Args:
            call_procedure: Applies a procedure value on behalf of higher-order natives
            output: Stream used by display; stdout if omitted
        """
        self.io_functions = PLispIOFunctions(output)
        self.math_functions = PLispMathFunctions()
        self.collections_functions = PLispCollectionsFunctions(call_procedure)

    def get_natives(self) -> Dict[str, PLispNativeFunction]:
        """Return the native table, keyed by binding name."""
        natives = {}
        for group in (self.io_functions, self.math_functions, self.collections_functions):
            for name, impl in group.get_functions().items():
                natives[name] = PLispNativeFunction(name, impl)

        return natives

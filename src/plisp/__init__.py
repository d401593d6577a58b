"""Pocket Lisp: a small Lisp with lexical closures and traceable errors."""

# Main API
from plisp.plisp import PLisp

# Exceptions
from plisp.plisp_error import (
    PLispError, PLispTokenError, PLispParseError, PLispRuntimeError,
    PLispArityMismatchError, PLispUndefinedBindingError, PLispNativeError,
    format_error, format_stack_trace
)

# Value types
from plisp.plisp_value import (
    PLispValue, PLispNumber, PLispString, PLispBoolean, PLispNil, PLispList,
    PLispClosure, PLispNativeFunction, NIL, TRUE, FALSE, is_truthy
)

# Expression tree
from plisp.plisp_ast import (
    PLispExpr, PLispDefineBinding, PLispDefineProcedure, PLispIf, PLispQuote,
    PLispLambda, PLispApply, PLispNameRef, PLispLiteral
)

# Lower-level components
from plisp.plisp_environment import PLispEnvironment, make_environment, root_environment, GLOBAL_LOCATION
from plisp.plisp_evaluator import PLispEvaluator
from plisp.plisp_options import PLispOptions
from plisp.plisp_parser import PLispParser
from plisp.plisp_prelude import PLispPrelude
from plisp.plisp_token import PLispToken, PLispTokenType
from plisp.plisp_tokenizer import PLispTokenizer
from plisp.plisp_trace import (
    PLispTraceWatcher, PLispStreamTraceWatcher, PLispFileTraceWatcher, PLispBufferingTraceWatcher
)


__version__ = "0.1.0"

__all__ = [
    # Main API
    "PLisp",

    # Exceptions
    "PLispError", "PLispTokenError", "PLispParseError", "PLispRuntimeError",
    "PLispArityMismatchError", "PLispUndefinedBindingError", "PLispNativeError",
    "format_error", "format_stack_trace",

    # Value types
    "PLispValue", "PLispNumber", "PLispString", "PLispBoolean", "PLispNil", "PLispList",
    "PLispClosure", "PLispNativeFunction", "NIL", "TRUE", "FALSE", "is_truthy",

    # Expression tree
    "PLispExpr", "PLispDefineBinding", "PLispDefineProcedure", "PLispIf", "PLispQuote",
    "PLispLambda", "PLispApply", "PLispNameRef", "PLispLiteral",

    # Lower-level components
    "PLispEnvironment", "make_environment", "root_environment", "GLOBAL_LOCATION",
    "PLispEvaluator", "PLispOptions", "PLispParser", "PLispPrelude",
    "PLispToken", "PLispTokenType", "PLispTokenizer",
    "PLispTraceWatcher", "PLispStreamTraceWatcher", "PLispFileTraceWatcher", "PLispBufferingTraceWatcher",
]

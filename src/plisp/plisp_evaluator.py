"""Tree-walking evaluator for Pocket Lisp expression trees."""

import logging
import sys
import threading
from typing import Any, Dict, List, Mapping, NoReturn, Sequence, TextIO

from plisp.plisp_ast import (
    PLispExpr, PLispDefineBinding, PLispDefineProcedure, PLispIf, PLispQuote,
    PLispLambda, PLispApply, PLispNameRef, PLispLiteral
)
from plisp.plisp_environment import PLispEnvironment, make_environment, root_environment
from plisp.plisp_error import (
    PLispRuntimeError, PLispArityMismatchError, PLispUndefinedBindingError, PLispNativeError
)
from plisp.plisp_options import PLispOptions
from plisp.plisp_prelude import PLispPrelude
from plisp.plisp_trace import PLispStreamTraceWatcher, PLispTraceWatcher
from plisp.plisp_value import NIL, PLispValue, PLispClosure, PLispList, PLispNativeFunction, is_truthy


class PLispEvaluator:
    """
    Evaluates Pocket Lisp expression trees with call-by-value semantics.

    One evaluator scopes one evaluation run: its options and trace watcher are
    read on every step, so two evaluators with different options can be used
    side by side.

    Recursion in the evaluated program maps directly onto the Python stack.
    Every procedure call costs several Python frames, so `evaluate_program`
    runs whole programs on a worker thread with a large stack and a raised
    recursion limit.
    """

    LAMBDA_NAME = "lambda"

    # Python frames allowed while running a program, and the worker stack that holds them
    RECURSION_LIMIT = 100_000
    STACK_SIZE = 512 * 1024 * 1024

    def __init__(self, options: PLispOptions | None = None, trace_watcher: PLispTraceWatcher | None = None):
        """
        Initialize evaluator.

        Args:
            options: Run configuration; defaults are used if omitted
            trace_watcher: Receives trace messages when execution tracing is
                enabled; defaults to printing on stdout
        """
        self.options = options if options is not None else PLispOptions()
        self.trace_watcher: PLispTraceWatcher | None = trace_watcher
        if self.trace_watcher is None and self.options.trace_execution:
            self.trace_watcher = PLispStreamTraceWatcher()

        self._logger = logging.getLogger("PLispEvaluator")

        # Call-site environments of the natives currently running, innermost last
        self._native_call_sites: List[PLispEnvironment] = []

        # Number of closure calls in progress, used to indent trace messages
        self._call_depth = 0

    def root_environment(
        self,
        native_table: Mapping[str, PLispValue] | None = None,
        output: TextIO | None = None
    ) -> PLispEnvironment:
        """
        Create a global environment for this evaluator.

        Args:
            native_table: Native functions to seed; the standard prelude is used if omitted
            output: Stream for the prelude's display function; stdout if omitted

        Returns:
            The global environment
        """
        if native_table is None:
            native_table = PLispPrelude(self.call_from_native, output).get_natives()

        return root_environment(native_table)

    def _trace(self, message: str, *args: Any) -> None:
        """
        Emit a trace message, indented by the current call depth.

        Values among `args` are described, and lists of values are shown as
        Pocket Lisp lists, only when tracing is on.
        """
        if self.trace_watcher is None or not self.options.trace_execution:
            return

        rendered = []
        for arg in args:
            if isinstance(arg, list):
                arg = PLispList(tuple(arg))

            rendered.append(arg.describe() if isinstance(arg, PLispValue) else arg)

        indent = "  " * self._call_depth
        self.trace_watcher.on_trace(f"[TRACE] {indent}" + message % tuple(rendered))

    def evaluate(self, expr: PLispExpr, env: PLispEnvironment) -> PLispValue:
        """
        Evaluate an expression in an environment.

        Args:
            expr: Expression to evaluate
            env: Environment for bindings and lookups

        Returns:
            The resulting value

        Raises:
            PLispArityMismatchError: If a closure is called with the wrong number of arguments
            PLispUndefinedBindingError: If a name is not bound
            PLispNativeError: If a native function fails
        """
        self._trace("%s in %s", expr, env.location)

        if isinstance(expr, PLispLiteral):
            return expr.value

        if isinstance(expr, PLispNameRef):
            return self._evaluate_name_ref(expr, env)

        if isinstance(expr, PLispApply):
            return self._evaluate_apply(expr, env)

        if isinstance(expr, PLispIf):
            return self._evaluate_if(expr, env)

        if isinstance(expr, PLispDefineBinding):
            return self._evaluate_define_binding(expr, env)

        if isinstance(expr, PLispDefineProcedure):
            return self._evaluate_define_procedure(expr, env)

        if isinstance(expr, PLispLambda):
            self._trace("creating a closure in %s", env.location)
            return PLispClosure(env, self.LAMBDA_NAME, expr.parameters, expr.body)

        if isinstance(expr, PLispQuote):
            return self._evaluate_quote(expr)

        raise TypeError(f"Cannot evaluate {type(expr).__name__}")

    def evaluate_sequence(self, exprs: Sequence[PLispExpr], env: PLispEnvironment) -> PLispValue:
        """
        Evaluate expressions in order, returning the value of the last one.

        An empty sequence evaluates to nil.
        """
        result: PLispValue = NIL
        for expr in exprs:
            result = self.evaluate(expr, env)

        return result

    def evaluate_program(self, exprs: Sequence[PLispExpr], env: PLispEnvironment) -> PLispValue:
        """
        Evaluate a program's top-level forms with a stack sized for deep recursion.

        The forms run as `evaluate_sequence` would, but on a worker thread whose
        stack is `STACK_SIZE` bytes, with the interpreter's recursion limit
        raised to at least `RECURSION_LIMIT`.  The caller blocks until the
        worker finishes; its result is returned and its failure re-raised.

        Args:
            exprs: Top-level forms
            env: Global environment

        Returns:
            The value of the last form, or nil
        """
        outcome: Dict[str, Any] = {}

        def run() -> None:
            try:
                outcome['value'] = self.evaluate_sequence(exprs, env)

            except BaseException as e:  # pylint: disable=broad-exception-caught
                outcome['error'] = e

        if sys.getrecursionlimit() < self.RECURSION_LIMIT:
            sys.setrecursionlimit(self.RECURSION_LIMIT)

        previous_stack_size = threading.stack_size(self.STACK_SIZE)
        try:
            worker = threading.Thread(target=run, name="PLispEvaluator", daemon=True)
            worker.start()

        finally:
            threading.stack_size(previous_stack_size)

        worker.join()

        if 'error' in outcome:
            raise outcome['error']

        return outcome['value']

    def _evaluate_quote(self, expr: PLispQuote) -> PLispValue:
        """Return the quoted form unevaluated; a quoted literal is its value."""
        self._trace("quote of %s", expr.form)
        if isinstance(expr.form, PLispLiteral):
            return expr.form.value

        return expr.form

    def _evaluate_name_ref(self, expr: PLispNameRef, env: PLispEnvironment) -> PLispValue:
        """Resolve a name through the environment chain."""
        self._trace("loading binding %s", expr.name)
        value = env.lookup(expr.name)
        if value is None:
            raise PLispUndefinedBindingError(expr.name, env)

        return value

    def _evaluate_define_binding(self, expr: PLispDefineBinding, env: PLispEnvironment) -> PLispValue:
        """Evaluate the value and bind it in `env`, returning the value."""
        self._trace("define %s", expr.name)
        value = self.evaluate(expr.value, env)
        self._trace("%s = %s", expr.name, value)
        env.define(expr.name, value)
        return value

    def _evaluate_define_procedure(self, expr: PLispDefineProcedure, env: PLispEnvironment) -> PLispValue:
        """Bind a named closure over `env`, returning the closure."""
        self._trace("define procedure %s [%s]", expr.name, " ".join(expr.parameters))

        # The closure captures env itself, so once bound it can see its own name
        closure = PLispClosure(env, expr.name, expr.parameters, expr.body)
        env.define(expr.name, closure)
        return closure

    def _evaluate_if(self, expr: PLispIf, env: PLispEnvironment) -> PLispValue:
        """Evaluate the test, then exactly one of the two branches."""
        if is_truthy(self.evaluate(expr.test, env)):
            self._trace("evaluating consequent")
            return self.evaluate(expr.consequent, env)

        self._trace("evaluating alternate")
        return self.evaluate(expr.alternate, env)

    def _evaluate_apply(self, expr: PLispApply, env: PLispEnvironment) -> PLispValue:
        """Evaluate the callee, then the arguments left to right, then apply."""
        self._trace("applying %s", expr.callee)
        callee = self.evaluate(expr.callee, env)
        args = [self.evaluate(arg, env) for arg in expr.arguments]
        return self.apply(callee, args, env)

    def apply(self, callee: PLispValue, args: List[PLispValue], env: PLispEnvironment) -> PLispValue:
        """
        Apply an evaluated procedure to evaluated arguments.

        Args:
            callee: Closure or native function
            args: Already evaluated arguments
            env: Environment of the call site, used for error traces

        Returns:
            The result of the call
        """
        if isinstance(callee, PLispClosure):
            return self._call_closure(callee, args, env)

        if isinstance(callee, PLispNativeFunction):
            return self._call_native(callee, args, env)

        self._fail_native(TypeError(f"{callee.describe()} is not a procedure"), env)

    def call_from_native(self, callee: PLispValue, args: List[PLispValue]) -> PLispValue:
        """
        Apply a procedure on behalf of a running native function.

        Higher-order natives (map, filter, reduce...) use this to call the
        procedures they are given.  Errors are reported at the native's call site.
        """
        if not self._native_call_sites:
            raise RuntimeError("call_from_native used outside of a native call")

        return self.apply(callee, args, self._native_call_sites[-1])

    def _call_closure(self, closure: PLispClosure, args: List[PLispValue], env: PLispEnvironment) -> PLispValue:
        """
        Call a closure in a new environment whose parent is the closure's own.

        The arity check uses the caller's environment as the error context, as
        the call environment does not exist yet.
        """
        self._trace("procedure %s", closure)
        if len(args) != closure.arity():
            raise PLispArityMismatchError(closure, len(args), env)

        call_env = make_environment(closure.environment, closure.name)
        call_env.add_bindings(dict(zip(closure.parameters, args)))

        self._call_depth += 1
        try:
            return self.evaluate_sequence(closure.body, call_env)

        finally:
            self._call_depth -= 1

    def _call_native(self, native: PLispNativeFunction, args: List[PLispValue], env: PLispEnvironment) -> PLispValue:
        """
        Invoke a native function, wrapping any host failure as a native error.

        Runtime errors raised by evaluation nested inside the native pass through.
        """
        self._trace("native %s on %s", native.name, args)
        self._native_call_sites.append(env)
        try:
            result = native.invoke(args)

        except PLispRuntimeError:
            # Failures from nested evaluation are already structured
            raise

        except Exception as e:  # pylint: disable=broad-exception-caught
            self._fail_native(e, env)

        finally:
            self._native_call_sites.pop()

        if not isinstance(result, PLispValue):
            self._fail_native(
                TypeError(f"native {native.name} returned {type(result).__name__}, not a Pocket Lisp value"), env
            )

        return result

    def _fail_native(self, cause: Exception, env: PLispEnvironment) -> NoReturn:
        """Raise a native error for `cause` in `env`, chaining the cause."""
        self._logger.debug("Native failure in %s: %s", env.location, cause)
        raise PLispNativeError(cause, env, self.options.max_native_frames) from cause

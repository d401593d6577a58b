"""Exception classes for Pocket Lisp with detailed context and stack traces."""

import traceback
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from plisp.plisp_environment import PLispEnvironment
    from plisp.plisp_value import PLispClosure


class PLispError(Exception):
    """Base exception for Pocket Lisp errors with detailed context information."""

    def __init__(
        self,
        message: str,
        context: Optional[str] = None,
        expected: Optional[str] = None,
        received: Optional[str] = None,
        suggestion: Optional[str] = None,
        example: Optional[str] = None,
        position: Optional[int] = None
    ):
        """
        Initialize detailed error.

        Args:
            message: Core error description
            context: Additional context information
            expected: What was expected
            received: What was actually received
            suggestion: Suggestion for fixing the error
            example: Example of correct usage
            position: Character position where error occurred
        """
        self.message = message
        self.context = context
        self.expected = expected
        self.received = received
        self.suggestion = suggestion
        self.example = example
        self.position = position

        super().__init__(self._format_detailed_message())

    def _format_detailed_message(self) -> str:
        """Format the error message with all available details."""
        parts = [f"Error: {self.message}"]

        if self.position is not None:
            parts.append(f"Position: {self.position}")

        if self.received:
            parts.append(f"Received: {self.received}")

        if self.expected:
            parts.append(f"Expected: {self.expected}")

        if self.context:
            parts.append(f"Context: {self.context}")

        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")

        if self.example:
            parts.append(f"Example: {self.example}")

        return "\n".join(parts)


class PLispTokenError(PLispError):
    """Tokenization errors with detailed context."""


class PLispParseError(PLispError):
    """Parsing errors with detailed context."""


def format_stack_trace(environment: 'PLispEnvironment') -> str:
    """
    Render the stack trace of an environment, innermost location first.

    Args:
        environment: Environment active at the failure point

    Returns:
        One "  at <location>" line per frame
    """
    return "\n".join(f"  at {location}" for location in environment.stack_trace())


class PLispRuntimeError(PLispError):
    """
    Evaluation failure carrying the environment that was active when it happened.

    The environment chain is enough to rebuild the call trace, so these errors
    render without any further help from the evaluator.
    """

    def __init__(self, message: str, environment: 'PLispEnvironment'):
        self.environment = environment
        super().__init__(message)

    def stack_trace(self) -> List[str]:
        """Return the locations from the failure site up to the global environment."""
        return self.environment.stack_trace()

    def describe(self) -> str:
        """Return the first line of the rendered error, without trace."""
        return self.message

    def format_error(self) -> str:
        """Render the error with its call trace."""
        return f"{self.describe()}\n{format_stack_trace(self.environment)}"

    def _format_detailed_message(self) -> str:
        return self.format_error()


class PLispArityMismatchError(PLispRuntimeError):
    """A closure was applied to the wrong number of arguments."""

    def __init__(self, closure: 'PLispClosure', given: int, environment: 'PLispEnvironment'):
        self.closure = closure
        super().__init__(
            f"{closure.describe()} expects {closure.arity()} arguments, got {given}.",
            environment
        )

        # Set after the base initializer, which clears the detail fields
        self.expected = closure.arity()  # type: ignore[assignment]
        self.given = given


class PLispUndefinedBindingError(PLispRuntimeError):
    """A name could not be resolved anywhere in the environment chain."""

    def __init__(self, name: str, environment: 'PLispEnvironment'):
        self.name = name
        super().__init__(f"{name} is not defined.", environment)


class PLispNativeError(PLispRuntimeError):
    """
    A host-provided function failed.

    The original exception is kept as `cause` so that its native traceback can
    be shown, bounded by `max_native_frames`.
    """

    def __init__(self, cause: BaseException, environment: 'PLispEnvironment', max_native_frames: int = 20):
        self.cause = cause
        self.max_native_frames = max_native_frames
        super().__init__(f"{type(cause).__name__}: {cause}", environment)

    def native_trace(self) -> str:
        """Return the host traceback of the cause, limited to `max_native_frames` frames."""
        lines = traceback.format_exception(
            type(self.cause), self.cause, self.cause.__traceback__, limit=self.max_native_frames
        )
        return "".join(lines).rstrip("\n")

    def format_error(self) -> str:
        rendered = super().format_error()
        if self.max_native_frames <= 0:
            return rendered

        return f"{rendered}\n\nNative trace:\n{self.native_trace()}"


def format_error(error: PLispRuntimeError) -> str:
    """
    Render a runtime error as human readable text with its call trace.

    Args:
        error: Any of the three runtime error kinds

    Returns:
        The formatted message
    """
    return error.format_error()

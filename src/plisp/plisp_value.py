"""Pocket Lisp value hierarchy - the runtime values the evaluator produces."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, List, Tuple, Union


class PLispValue(ABC):
    """
    Abstract base class for all Pocket Lisp values.

    Values are immutable.  Closures are the one exception in spirit: they hold
    a reference to a mutable environment, but the closure record itself never
    changes.
    """

    @abstractmethod
    def to_python(self) -> Any:
        """Convert to Python value for operations."""

    @abstractmethod
    def type_name(self) -> str:
        """Return Pocket Lisp type name for error messages."""

    @abstractmethod
    def describe(self) -> str:
        """Describe the value the way Pocket Lisp source would write it."""


@dataclass(frozen=True)
class PLispNumber(PLispValue):
    """Represents numeric values: integers and floats."""
    value: Union[int, float]

    def to_python(self) -> Union[int, float]:
        return self.value

    def type_name(self) -> str:
        return "number"

    def describe(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class PLispString(PLispValue):
    """Represents string values."""
    value: str

    def to_python(self) -> str:
        return self.value

    def type_name(self) -> str:
        return "string"

    def describe(self) -> str:
        escaped = self.value.replace('\\', '\\\\').replace('"', '\\"').replace('\n', '\\n')
        return f'"{escaped}"'


@dataclass(frozen=True)
class PLispBoolean(PLispValue):
    """Represents boolean values."""
    value: bool

    def to_python(self) -> bool:
        return self.value

    def type_name(self) -> str:
        return "boolean"

    def describe(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class PLispNil(PLispValue):
    """Represents the absence of a value."""

    def to_python(self) -> None:
        return None

    def type_name(self) -> str:
        return "nil"

    def describe(self) -> str:
        return "nil"


NIL = PLispNil()
TRUE = PLispBoolean(True)
FALSE = PLispBoolean(False)


@dataclass(frozen=True)
class PLispList(PLispValue):
    """Represents lists of Pocket Lisp values, as built by the list natives."""
    elements: Tuple[PLispValue, ...] = ()

    def to_python(self) -> List[Any]:
        """Convert to Python list with Python values."""
        return [elem.to_python() for elem in self.elements]

    def type_name(self) -> str:
        return "list"

    def describe(self) -> str:
        return "(" + " ".join(elem.describe() for elem in self.elements) + ")"

    def length(self) -> int:
        """Return the length of the list."""
        return len(self.elements)


@dataclass(frozen=True)
class PLispClosure(PLispValue):
    """
    Represents a user-defined procedure.

    The closure captures the environment active where it was defined.  That
    environment is shared: several closures may hold it and it outlives the
    call that created it for as long as any of them is reachable.
    """
    environment: Any  # PLispEnvironment, avoiding circular import
    name: str
    parameters: Tuple[str, ...]
    body: Tuple[Any, ...] = field(default=())  # Tuple[PLispExpr, ...]

    def arity(self) -> int:
        """The number of arguments this procedure accepts."""
        return len(self.parameters)

    def to_python(self) -> 'PLispClosure':
        """Closures return themselves as Python values."""
        return self

    def type_name(self) -> str:
        return "procedure"

    def describe(self) -> str:
        return "#(" + " ".join((self.name,) + self.parameters) + ")"

    def __repr__(self) -> str:
        return f"PLispClosure({self.describe()})"


class PLispNativeFunction(PLispValue):
    """
    Represents a function supplied by the host.

    The evaluator treats `native_impl` as a black box: it is called with the
    list of evaluated arguments and either returns a value or raises.
    """

    def __init__(self, name: str, native_impl: Callable[[List[PLispValue]], PLispValue]):
        """
        Initialize a native function.

        Args:
            name: Function name for display and error messages
            native_impl: Python callable that implements the function
        """
        self.name = name
        self.native_impl = native_impl

    def invoke(self, args: List[PLispValue]) -> PLispValue:
        """Call the native implementation with already evaluated arguments."""
        return self.native_impl(args)

    def to_python(self) -> Callable[[List[PLispValue]], PLispValue]:
        return self.native_impl

    def type_name(self) -> str:
        return "native-function"

    def describe(self) -> str:
        return f"#<native {self.name}>"

    def __repr__(self) -> str:
        return f"PLispNativeFunction({self.name!r})"


def is_truthy(value: PLispValue) -> bool:
    """Only boolean false is false; every other value, nil included, is true."""
    return not (isinstance(value, PLispBoolean) and not value.value)

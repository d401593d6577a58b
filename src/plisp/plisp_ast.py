"""Pocket Lisp expression tree.

The parser produces these nodes and the evaluator reduces them.  Nodes are
immutable.  Because quotation hands a form back to the program unevaluated,
every node is also a value (code is data): it can be bound, passed to natives
and displayed.

Source location fields are keyword-only and ignored by equality, so a quoted
form compares equal to the same form built by hand.
"""

from dataclasses import dataclass, field
from typing import Tuple

from plisp.plisp_value import PLispValue


@dataclass(frozen=True)
class PLispExpr(PLispValue):
    """Abstract base class for all Pocket Lisp expression nodes."""
    line: int | None = field(default=None, kw_only=True, compare=False)
    column: int | None = field(default=None, kw_only=True, compare=False)

    def to_python(self) -> 'PLispExpr':
        """Forms are their own Python representation."""
        return self

    def type_name(self) -> str:
        return "form"


def _describe_body(body: Tuple[PLispExpr, ...]) -> str:
    return "".join(f" {expr.describe()}" for expr in body)


@dataclass(frozen=True)
class PLispDefineBinding(PLispExpr):
    """(define name value)"""
    name: str
    value: PLispExpr

    def describe(self) -> str:
        return f"(define {self.name} {self.value.describe()})"


@dataclass(frozen=True)
class PLispDefineProcedure(PLispExpr):
    """(define name [params...] body...)"""
    name: str
    parameters: Tuple[str, ...]
    body: Tuple[PLispExpr, ...]

    def describe(self) -> str:
        return f"(define {self.name} [{' '.join(self.parameters)}]{_describe_body(self.body)})"


@dataclass(frozen=True)
class PLispIf(PLispExpr):
    """(if test consequent alternate)"""
    test: PLispExpr
    consequent: PLispExpr
    alternate: PLispExpr

    def describe(self) -> str:
        return f"(if {self.test.describe()} {self.consequent.describe()} {self.alternate.describe()})"


@dataclass(frozen=True)
class PLispQuote(PLispExpr):
    """(quote form)"""
    form: PLispExpr

    def describe(self) -> str:
        return f"(quote {self.form.describe()})"


@dataclass(frozen=True)
class PLispLambda(PLispExpr):
    """(lambda [params...] body...)"""
    parameters: Tuple[str, ...]
    body: Tuple[PLispExpr, ...]

    def describe(self) -> str:
        return f"(lambda [{' '.join(self.parameters)}]{_describe_body(self.body)})"


@dataclass(frozen=True)
class PLispApply(PLispExpr):
    """(callee args...)"""
    callee: PLispExpr
    arguments: Tuple[PLispExpr, ...] = ()

    def describe(self) -> str:
        return f"({self.callee.describe()}{_describe_body(self.arguments)})"


@dataclass(frozen=True)
class PLispNameRef(PLispExpr):
    """A reference to a binding."""
    name: str

    def describe(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f'PLispNameRef({self.name!r})'


@dataclass(frozen=True)
class PLispLiteral(PLispExpr):
    """A number, string, boolean or nil written directly in the source."""
    value: PLispValue

    def describe(self) -> str:
        return self.value.describe()

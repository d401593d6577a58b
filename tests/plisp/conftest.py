"""Shared fixtures and utilities for Pocket Lisp tests."""

import io
from typing import Any, List

import pytest

from plisp import (
    PLisp, PLispEvaluator, PLispEnvironment, PLispExpr, PLispNativeFunction, PLispValue, NIL
)


@pytest.fixture
def plisp():
    """Create a fresh interpreter, writing display output to a buffer."""
    return PLisp(output=io.StringIO())


@pytest.fixture
def evaluator():
    """Create an evaluator with default options."""
    return PLispEvaluator()


@pytest.fixture
def root_env(evaluator):
    """Create a global environment seeded with the standard prelude."""
    return evaluator.root_environment(output=io.StringIO())


class PLispTestHelpers:
    """Helper utilities for Pocket Lisp testing."""

    @staticmethod
    def parse_one(source: str) -> PLispExpr:
        """Parse source holding exactly one form."""
        forms = PLisp.parse(source)
        assert len(forms) == 1, f"Expected one form, got {len(forms)}"
        return forms[0]

    @staticmethod
    def run(evaluator: PLispEvaluator, env: PLispEnvironment, source: str) -> PLispValue:
        """Parse and evaluate a program against an existing environment."""
        return evaluator.evaluate_sequence(PLisp.parse(source), env)

    @staticmethod
    def assert_evaluates_to(plisp: PLisp, source: str, expected: str) -> None:
        """Assert that a program's result is described as expected."""
        result = plisp.evaluate_and_format(source)
        assert result == expected, f"Expected '{expected}', got '{result}'"

    @staticmethod
    def recorder(calls: List[Any]) -> PLispNativeFunction:
        """Native function recording the Python value of its argument, then returning it."""
        def touch(args: List[PLispValue]) -> PLispValue:
            calls.append(args[0].to_python())
            return args[0]

        return PLispNativeFunction("touch", touch)

    @staticmethod
    def failing(message: str) -> PLispNativeFunction:
        """Native function that always raises with the given message."""
        def fail(_args: List[PLispValue]) -> PLispValue:
            raise RuntimeError(message)

        return PLispNativeFunction("fail", fail)

    @staticmethod
    def nil_native(name: str = "noop") -> PLispNativeFunction:
        """Native function that ignores its arguments and returns nil."""
        return PLispNativeFunction(name, lambda _args: NIL)


@pytest.fixture
def helpers():
    """Provide test helper utilities."""
    return PLispTestHelpers

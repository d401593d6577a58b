"""String and list native functions for Pocket Lisp."""

import re
from typing import Callable, List, Tuple

from plisp.plisp_value import NIL, PLispBoolean, PLispList, PLispNil, PLispNumber, PLispString, PLispValue, is_truthy


PLispProcedureCaller = Callable[[PLispValue, List[PLispValue]], PLispValue]


def display_text(value: PLispValue) -> str:
    """Text of a value as printed by display: strings raw, everything else described."""
    if isinstance(value, PLispString):
        return value.value

    return value.describe()


class PLispCollectionsFunctions:
    """
    String and list native functions for Pocket Lisp.

    The higher-order functions (map, filter, reduce, flatmap) apply the
    procedures they receive through `call_procedure`, supplied by the evaluator.
    """

    def __init__(self, call_procedure: PLispProcedureCaller):
        self._call_procedure = call_procedure

    def get_functions(self) -> dict[str, Callable[[List[PLispValue]], PLispValue]]:
        """Return dictionary of collections function implementations."""
        return {
            # Strings
            'string-join': self._builtin_string_join,
            'string-split': self._builtin_string_split,
            'string-upcase': self._builtin_string_upcase,
            'string-downcase': self._builtin_string_downcase,
            'string-reverse': self._builtin_string_reverse,
            'string-trim': self._builtin_string_trim,
            'starts-with?': self._builtin_starts_with_p,
            'ends-with?': self._builtin_ends_with_p,

            # Lists
            'list': self._builtin_list,
            'first': self._builtin_first,
            'rest': self._builtin_rest,
            'nth': self._builtin_nth,
            'take': self._builtin_take,
            'drop': self._builtin_drop,
            'count': self._builtin_count,
            'map': self._builtin_map,
            'filter': self._builtin_filter,
            'reduce': self._builtin_reduce,
            'flatmap': self._builtin_flatmap,
        }

    def _ensure_arg_count(self, args: List[PLispValue], function_name: str, *counts: int) -> None:
        if len(args) not in counts:
            expected = " or ".join(str(c) for c in counts)
            raise TypeError(f"{function_name} requires {expected} argument(s), got {len(args)}")

    def _ensure_string(self, value: PLispValue, function_name: str) -> str:
        if not isinstance(value, PLispString):
            raise TypeError(f"{function_name} expects a string, got {value.type_name()}: {value.describe()}")

        return value.value

    def _ensure_integer(self, value: PLispValue, function_name: str) -> int:
        if not isinstance(value, PLispNumber) or not isinstance(value.value, int):
            raise TypeError(f"{function_name} expects an integer, got {value.type_name()}: {value.describe()}")

        return value.value

    def _ensure_sequence(self, value: PLispValue, function_name: str) -> Tuple[PLispValue, ...]:
        """Elements of a list; nil is treated as the empty list."""
        if isinstance(value, PLispNil):
            return ()

        if not isinstance(value, PLispList):
            raise TypeError(f"{function_name} expects a list, got {value.type_name()}: {value.describe()}")

        return value.elements

    # Strings
    def _builtin_string_join(self, args: List[PLispValue]) -> PLispValue:
        """(string-join list) or (string-join separator list)"""
        self._ensure_arg_count(args, "string-join", 1, 2)
        separator = self._ensure_string(args[0], "string-join") if len(args) == 2 else ""
        elements = self._ensure_sequence(args[-1], "string-join")
        return PLispString(separator.join(display_text(elem) for elem in elements))

    def _builtin_string_split(self, args: List[PLispValue]) -> PLispValue:
        """(string-split string pattern), pattern being a regular expression."""
        self._ensure_arg_count(args, "string-split", 2)
        text = self._ensure_string(args[0], "string-split")
        pattern = self._ensure_string(args[1], "string-split")
        return PLispList(tuple(PLispString(part) for part in re.split(pattern, text)))

    def _builtin_string_upcase(self, args: List[PLispValue]) -> PLispValue:
        self._ensure_arg_count(args, "string-upcase", 1)
        return PLispString(self._ensure_string(args[0], "string-upcase").upper())

    def _builtin_string_downcase(self, args: List[PLispValue]) -> PLispValue:
        self._ensure_arg_count(args, "string-downcase", 1)
        return PLispString(self._ensure_string(args[0], "string-downcase").lower())

    def _builtin_string_reverse(self, args: List[PLispValue]) -> PLispValue:
        self._ensure_arg_count(args, "string-reverse", 1)
        return PLispString(self._ensure_string(args[0], "string-reverse")[::-1])

    def _builtin_string_trim(self, args: List[PLispValue]) -> PLispValue:
        self._ensure_arg_count(args, "string-trim", 1)
        return PLispString(self._ensure_string(args[0], "string-trim").strip())

    def _builtin_starts_with_p(self, args: List[PLispValue]) -> PLispValue:
        self._ensure_arg_count(args, "starts-with?", 2)
        text = self._ensure_string(args[0], "starts-with?")
        return PLispBoolean(text.startswith(self._ensure_string(args[1], "starts-with?")))

    def _builtin_ends_with_p(self, args: List[PLispValue]) -> PLispValue:
        self._ensure_arg_count(args, "ends-with?", 2)
        text = self._ensure_string(args[0], "ends-with?")
        return PLispBoolean(text.endswith(self._ensure_string(args[1], "ends-with?")))

    # Lists
    def _builtin_list(self, args: List[PLispValue]) -> PLispValue:
        return PLispList(tuple(args))

    def _builtin_first(self, args: List[PLispValue]) -> PLispValue:
        """First element, or nil for an empty list."""
        self._ensure_arg_count(args, "first", 1)
        elements = self._ensure_sequence(args[0], "first")
        return elements[0] if elements else NIL

    def _builtin_rest(self, args: List[PLispValue]) -> PLispValue:
        self._ensure_arg_count(args, "rest", 1)
        return PLispList(self._ensure_sequence(args[0], "rest")[1:])

    def _builtin_nth(self, args: List[PLispValue]) -> PLispValue:
        self._ensure_arg_count(args, "nth", 2)
        elements = self._ensure_sequence(args[0], "nth")
        index = self._ensure_integer(args[1], "nth")
        if not 0 <= index < len(elements):
            raise IndexError(f"nth index {index} out of range for list of length {len(elements)}")

        return elements[index]

    def _builtin_take(self, args: List[PLispValue]) -> PLispValue:
        """(take n list)"""
        self._ensure_arg_count(args, "take", 2)
        n = max(0, self._ensure_integer(args[0], "take"))
        return PLispList(self._ensure_sequence(args[1], "take")[:n])

    def _builtin_drop(self, args: List[PLispValue]) -> PLispValue:
        """(drop n list)"""
        self._ensure_arg_count(args, "drop", 2)
        n = max(0, self._ensure_integer(args[0], "drop"))
        return PLispList(self._ensure_sequence(args[1], "drop")[n:])

    def _builtin_count(self, args: List[PLispValue]) -> PLispValue:
        self._ensure_arg_count(args, "count", 1)
        if isinstance(args[0], PLispString):
            return PLispNumber(len(args[0].value))

        return PLispNumber(len(self._ensure_sequence(args[0], "count")))

    def _builtin_map(self, args: List[PLispValue]) -> PLispValue:
        """(map f list...) - with several lists, f receives one element of each."""
        if len(args) < 2:
            raise TypeError(f"map requires a procedure and at least 1 list, got {len(args)} argument(s)")

        func = args[0]
        sequences = [self._ensure_sequence(arg, "map") for arg in args[1:]]
        return PLispList(tuple(self._call_procedure(func, list(items)) for items in zip(*sequences)))

    def _builtin_filter(self, args: List[PLispValue]) -> PLispValue:
        """(filter predicate list)"""
        self._ensure_arg_count(args, "filter", 2)
        func = args[0]
        elements = self._ensure_sequence(args[1], "filter")
        return PLispList(tuple(elem for elem in elements if is_truthy(self._call_procedure(func, [elem]))))

    def _builtin_reduce(self, args: List[PLispValue]) -> PLispValue:
        """(reduce f list) or (reduce f initial list)"""
        self._ensure_arg_count(args, "reduce", 2, 3)
        func = args[0]
        elements = list(self._ensure_sequence(args[-1], "reduce"))
        if len(args) == 3:
            accumulator = args[1]

        elif elements:
            accumulator = elements.pop(0)

        else:
            # Matches calling f with no arguments on an empty list
            return self._call_procedure(func, [])

        for elem in elements:
            accumulator = self._call_procedure(func, [accumulator, elem])

        return accumulator

    def _builtin_flatmap(self, args: List[PLispValue]) -> PLispValue:
        """(flatmap f list) - f must return a list; the results are concatenated."""
        self._ensure_arg_count(args, "flatmap", 2)
        func = args[0]
        result: List[PLispValue] = []
        for elem in self._ensure_sequence(args[1], "flatmap"):
            result.extend(self._ensure_sequence(self._call_procedure(func, [elem]), "flatmap"))

        return PLispList(tuple(result))

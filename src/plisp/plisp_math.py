"""Arithmetic, relational and boolean native functions for Pocket Lisp."""

from typing import Callable, List, Union

from plisp.plisp_value import FALSE, TRUE, PLispBoolean, PLispNumber, PLispValue, is_truthy


class PLispMathFunctions:
    """Arithmetic, relational and boolean native functions for Pocket Lisp."""

    def get_functions(self) -> dict[str, Callable[[List[PLispValue]], PLispValue]]:
        """Return dictionary of mathematical function implementations."""
        return {
            # Relational & equality
            '=': self._builtin_eq,
            'not=': self._builtin_not_eq,
            '>': self._builtin_gt,
            '>=': self._builtin_gte,
            '<': self._builtin_lt,
            '<=': self._builtin_lte,

            # Maths
            '+': self._builtin_plus,
            '-': self._builtin_minus,
            '*': self._builtin_star,
            '/': self._builtin_slash,
            'number?': self._builtin_number_p,

            # Booleans
            'not': self._builtin_not,
            'and': self._builtin_and,
            'or': self._builtin_or,
        }

    def _ensure_numbers(self, args: List[PLispValue], function_name: str) -> List[Union[int, float]]:
        """Extract Python numbers from the arguments, failing on anything else."""
        numbers = []
        for arg in args:
            if not isinstance(arg, PLispNumber):
                raise TypeError(f"{function_name} expects numbers, got {arg.type_name()}: {arg.describe()}")

            numbers.append(arg.value)

        return numbers

    def _ensure_arity(self, args: List[PLispValue], function_name: str, minimum: int) -> None:
        if len(args) < minimum:
            raise TypeError(f"{function_name} requires at least {minimum} argument(s), got {len(args)}")

    # Relational & equality
    def _builtin_eq(self, args: List[PLispValue]) -> PLispValue:
        self._ensure_arity(args, "=", 1)
        return PLispBoolean(all(a == b for a, b in zip(args, args[1:])))

    def _builtin_not_eq(self, args: List[PLispValue]) -> PLispValue:
        self._ensure_arity(args, "not=", 1)
        return PLispBoolean(not all(a == b for a, b in zip(args, args[1:])))

    def _compare(self, args: List[PLispValue], function_name: str, op: Callable[[float, float], bool]) -> PLispValue:
        self._ensure_arity(args, function_name, 1)
        numbers = self._ensure_numbers(args, function_name)
        return PLispBoolean(all(op(a, b) for a, b in zip(numbers, numbers[1:])))

    def _builtin_gt(self, args: List[PLispValue]) -> PLispValue:
        return self._compare(args, ">", lambda a, b: a > b)

    def _builtin_gte(self, args: List[PLispValue]) -> PLispValue:
        return self._compare(args, ">=", lambda a, b: a >= b)

    def _builtin_lt(self, args: List[PLispValue]) -> PLispValue:
        return self._compare(args, "<", lambda a, b: a < b)

    def _builtin_lte(self, args: List[PLispValue]) -> PLispValue:
        return self._compare(args, "<=", lambda a, b: a <= b)

    # Maths
    def _builtin_plus(self, args: List[PLispValue]) -> PLispValue:
        return PLispNumber(sum(self._ensure_numbers(args, "+")))

    def _builtin_minus(self, args: List[PLispValue]) -> PLispValue:
        self._ensure_arity(args, "-", 1)
        numbers = self._ensure_numbers(args, "-")
        if len(numbers) == 1:
            return PLispNumber(-numbers[0])

        result = numbers[0]
        for n in numbers[1:]:
            result -= n

        return PLispNumber(result)

    def _builtin_star(self, args: List[PLispValue]) -> PLispValue:
        result: Union[int, float] = 1
        for n in self._ensure_numbers(args, "*"):
            result *= n

        return PLispNumber(result)

    def _builtin_slash(self, args: List[PLispValue]) -> PLispValue:
        self._ensure_arity(args, "/", 1)
        numbers = self._ensure_numbers(args, "/")
        if len(numbers) == 1:
            numbers = [1] + numbers

        result = numbers[0]
        for n in numbers[1:]:
            result = self._divide(result, n)

        return PLispNumber(result)

    def _divide(self, a: Union[int, float], b: Union[int, float]) -> Union[int, float]:
        """Divide, keeping integers when the division is exact."""
        if isinstance(a, int) and isinstance(b, int) and b != 0 and a % b == 0:
            return a // b

        return a / b

    def _builtin_number_p(self, args: List[PLispValue]) -> PLispValue:
        if len(args) != 1:
            raise TypeError(f"number? requires exactly 1 argument, got {len(args)}")

        return PLispBoolean(isinstance(args[0], PLispNumber))

    # Booleans
    def _builtin_not(self, args: List[PLispValue]) -> PLispValue:
        if len(args) != 1:
            raise TypeError(f"not requires exactly 1 argument, got {len(args)}")

        return PLispBoolean(not is_truthy(args[0]))

    def _builtin_and(self, args: List[PLispValue]) -> PLispValue:
        """Return the first false argument, or the last argument."""
        result: PLispValue = TRUE
        for arg in args:
            result = arg
            if not is_truthy(arg):
                break

        return result

    def _builtin_or(self, args: List[PLispValue]) -> PLispValue:
        """Return the first true argument, or the last argument."""
        result: PLispValue = FALSE
        for arg in args:
            result = arg
            if is_truthy(arg):
                break

        return result

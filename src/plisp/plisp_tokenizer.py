"""Tokenizer for Pocket Lisp source with detailed error messages."""

from typing import List

from plisp.plisp_error import PLispTokenError
from plisp.plisp_token import PLispToken, PLispTokenType


class PLispTokenizer:
    """Tokenizes Pocket Lisp source into tokens with detailed error messages."""

    NAME_START_CHARS = "_-+*%=^?/><|\\!"
    DELIMITERS = "()[]\";"

    KEYWORD_TOKENS = {
        'true': (PLispTokenType.BOOLEAN, True),
        'false': (PLispTokenType.BOOLEAN, False),
        'nil': (PLispTokenType.NIL, None),
    }

    def __init__(self) -> None:
        self._source = ""
        self._line = 1
        self._line_start = 0

    def tokenize(self, source: str) -> List[PLispToken]:
        """
        Tokenize Pocket Lisp source with detailed error reporting.

        Args:
            source: The program text to tokenize

        Returns:
            List of tokens

        Raises:
            PLispTokenError: If tokenization fails
        """
        self._source = source
        self._line = 1
        self._line_start = 0

        tokens: List[PLispToken] = []
        i = 0

        while i < len(source):
            char = source[i]

            if char == '\n':
                self._line += 1
                self._line_start = i + 1
                i += 1
                continue

            if char.isspace() or char == ',':
                i += 1
                continue

            # Comments run from ';' to end of line
            if char == ';':
                while i < len(source) and source[i] != '\n':
                    i += 1

                continue

            if char in '()[]':
                tokens.append(self._make_token(PLispTokenType(char), char, i, 1))
                i += 1
                continue

            if char == '"':
                # Strings may span lines, so take the location before reading
                line, column = self._line, i - self._line_start + 1
                value, length = self._read_string(i)
                tokens.append(PLispToken(PLispTokenType.STRING, value, i, length, line=line, column=column))
                i += length
                continue

            if self._is_digit(char):
                value, length = self._read_number(i)
                tokens.append(self._make_token(PLispTokenType.NUMBER, value, i, length))
                i += length
                continue

            if char.isalpha() or char in self.NAME_START_CHARS:
                name = self._read_name(i)
                token_type, token_value = self.KEYWORD_TOKENS.get(name, (PLispTokenType.NAME, name))
                tokens.append(self._make_token(token_type, token_value, i, len(name)))
                i += len(name)
                continue

            raise PLispTokenError(
                message=f"Invalid character: {char!r}",
                position=i,
                received=f"Character: {char!r} at line {self._line}, column {i - self._line_start + 1}",
                expected="Parentheses, brackets, a name, a number or a string",
                example='(define greet [name] (display "hello" name))',
                suggestion=f"Remove {char!r} or put it inside a string"
            )

        return tokens

    def _make_token(self, token_type: PLispTokenType, value: object, position: int, length: int) -> PLispToken:
        return PLispToken(
            token_type, value, position, length, line=self._line, column=position - self._line_start + 1
        )

    def _is_digit(self, char: str) -> bool:
        return '0' <= char <= '9'

    def _is_digits(self, text: str) -> bool:
        """Check for one or more ASCII digits; str.isdigit also accepts other scripts."""
        return text != "" and all(self._is_digit(c) for c in text)

    def _is_delimiter(self, char: str) -> bool:
        return char.isspace() or char in self.DELIMITERS or char == ','

    def _read_string(self, start: int) -> tuple[str, int]:
        """
        Read a string literal.

        Returns:
            Tuple of (string_value, length_consumed)

        Raises:
            PLispTokenError: If the string is unterminated or has an invalid escape
        """
        source = self._source
        escapes = {'"': '"', '\\': '\\', 'n': '\n', 't': '\t', 'r': '\r'}
        result: list[str] = []
        i = start + 1

        while i < len(source):
            char = source[i]

            if char == '"':
                return ''.join(result), i + 1 - start

            if char == '\\':
                next_char = source[i + 1] if i + 1 < len(source) else ""
                if next_char not in escapes:
                    raise PLispTokenError(
                        message=f"Invalid escape sequence: \\{next_char}",
                        position=i,
                        received=f"Escape sequence: \\{next_char}",
                        expected="Valid escape: \\n, \\t, \\r, \\\" or \\\\",
                        example='"line1\\nline2"',
                        suggestion="Use a valid escape sequence or remove the backslash"
                    )

                result.append(escapes[next_char])
                i += 2
                continue

            if char == '\n':
                self._line += 1
                self._line_start = i + 1

            result.append(char)
            i += 1

        raise PLispTokenError(
            message="Unterminated string literal",
            position=start,
            received=f"String starting with: {source[start:start + 10]}...",
            expected="Closing quote \" at end of string",
            example='Correct: "hello world"\nIncorrect: "hello world',
            suggestion="Add closing quote \" at the end of the string"
        )

    def _read_number(self, start: int) -> tuple[int | float, int]:
        """
        Read a number literal: digits with an optional fractional part.

        Returns:
            Tuple of (number_value, length_consumed)

        Raises:
            PLispTokenError: If the token is not a valid number
        """
        source = self._source
        i = start
        while i < len(source) and not self._is_delimiter(source[i]):
            i += 1

        token = source[start:i]
        whole, dot, fraction = token.partition('.')
        if not self._is_digits(whole) or (dot and not self._is_digits(fraction)):
            raise PLispTokenError(
                message=f"Invalid number format: {token}",
                position=start,
                received=f"Malformed number token: {token}",
                expected="Digits, optionally followed by '.' and more digits",
                example="Valid: 42, 3.14",
                suggestion="Names cannot start with a digit"
            )

        value: int | float = float(token) if dot else int(token)
        return value, len(token)

    def _read_name(self, start: int) -> str:
        source = self._source
        i = start
        while i < len(source) and (source[i].isalnum() or source[i] in self.NAME_START_CHARS):
            i += 1

        return source[start:i]

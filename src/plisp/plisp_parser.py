"""Parser for Pocket Lisp source with detailed error messages."""

from typing import List, Tuple

from plisp.plisp_ast import (
    PLispExpr, PLispDefineBinding, PLispDefineProcedure, PLispIf, PLispQuote,
    PLispLambda, PLispApply, PLispNameRef, PLispLiteral
)
from plisp.plisp_error import PLispParseError
from plisp.plisp_token import PLispToken, PLispTokenType
from plisp.plisp_value import NIL, PLispBoolean, PLispNumber, PLispString


class PLispParser:
    """
    Parses tokens into a program: a sequence of expression trees.

    All surface validation happens here, so the evaluator can trust the shape
    of every node it receives.
    """

    SPECIAL_FORMS = {'define', 'if', 'quote', 'lambda'}

    def __init__(self, tokens: List[PLispToken], source: str = ""):
        """
        Initialize parser with tokens and original source.

        Args:
            tokens: List of tokens to parse
            source: Original source text for error context
        """
        self.tokens = tokens
        self.pos = 0
        self.current_token: PLispToken | None = tokens[0] if tokens else None
        self.source = source

    def parse(self) -> Tuple[PLispExpr, ...]:
        """
        Parse all top-level forms.

        Returns:
            The program's forms, in source order

        Raises:
            PLispParseError: If parsing fails
        """
        forms = []
        while self.current_token is not None:
            forms.append(self._parse_expression())

        return tuple(forms)

    def _advance(self) -> None:
        """Move to the next token."""
        self.pos += 1
        self.current_token = self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _location(self, token: PLispToken) -> dict[str, int]:
        return {'line': token.line, 'column': token.column}

    def _parse_expression(self) -> PLispExpr:
        """Parse a single expression."""
        token = self.current_token
        assert token is not None, "Current token must not be None here"

        if token.type == PLispTokenType.LPAREN:
            return self._parse_list(token)

        self._advance()
        location = self._location(token)

        if token.type == PLispTokenType.NAME:
            return PLispNameRef(token.value, **location)

        if token.type == PLispTokenType.NUMBER:
            return PLispLiteral(PLispNumber(token.value), **location)

        if token.type == PLispTokenType.STRING:
            return PLispLiteral(PLispString(token.value), **location)

        if token.type == PLispTokenType.BOOLEAN:
            return PLispLiteral(PLispBoolean(token.value), **location)

        if token.type == PLispTokenType.NIL:
            return PLispLiteral(NIL, **location)

        raise PLispParseError(
            message=f"Unexpected token: {token.value}",
            position=token.position,
            received=f"Token: {token.value} at line {token.line}, column {token.column}",
            expected="A number, string, boolean, nil, name or '('",
            example="(display (+ 1 2))",
            suggestion="Check for an extra closing paren, or a '[' outside a parameter list"
        )

    def _parse_list(self, open_token: PLispToken) -> PLispExpr:
        """Parse a parenthesised form: a special form or an application."""
        self._advance()  # consume '('
        head = self._require_token(open_token)

        if head.type == PLispTokenType.RPAREN:
            raise PLispParseError(
                message="Empty application: ()",
                position=open_token.position,
                received=f"() at line {open_token.line}, column {open_token.column}",
                expected="A procedure followed by its arguments",
                example="(f 1 2)",
                suggestion="Use (list) for an empty list"
            )

        if head.type == PLispTokenType.NAME and head.value in self.SPECIAL_FORMS:
            self._advance()
            if head.value == 'define':
                return self._parse_define(open_token)

            if head.value == 'if':
                return self._parse_if(open_token)

            if head.value == 'quote':
                return self._parse_quote(open_token)

            return self._parse_lambda(open_token)

        callee = self._parse_expression()
        arguments = self._parse_forms_until_close(open_token)
        return PLispApply(callee, arguments, **self._location(open_token))

    def _parse_define(self, open_token: PLispToken) -> PLispExpr:
        name_token = self._require_token(open_token)
        if name_token.type != PLispTokenType.NAME:
            raise self._form_error(
                "define", open_token, name_token,
                "A name after define",
                "(define x 1) or (define square [x] (* x x))"
            )

        self._advance()
        next_token = self._require_token(open_token)
        if next_token.type == PLispTokenType.LBRACKET:
            parameters = self._parse_parameters(open_token)
            body = self._parse_forms_until_close(open_token)
            return PLispDefineProcedure(name_token.value, parameters, body, **self._location(open_token))

        forms = self._parse_forms_until_close(open_token)
        if len(forms) != 1:
            raise self._arity_error("define", open_token, 1, len(forms), "(define x 1)")

        return PLispDefineBinding(name_token.value, forms[0], **self._location(open_token))

    def _parse_if(self, open_token: PLispToken) -> PLispExpr:
        forms = self._parse_forms_until_close(open_token)
        if len(forms) != 3:
            raise self._arity_error("if", open_token, 3, len(forms), "(if (> x 0) \"positive\" \"not positive\")")

        return PLispIf(forms[0], forms[1], forms[2], **self._location(open_token))

    def _parse_quote(self, open_token: PLispToken) -> PLispExpr:
        forms = self._parse_forms_until_close(open_token)
        if len(forms) != 1:
            raise self._arity_error("quote", open_token, 1, len(forms), "(quote (a b c))")

        return PLispQuote(forms[0], **self._location(open_token))

    def _parse_lambda(self, open_token: PLispToken) -> PLispExpr:
        token = self._require_token(open_token)
        if token.type != PLispTokenType.LBRACKET:
            raise self._form_error(
                "lambda", open_token, token,
                "A parameter list in brackets after lambda",
                "(lambda [x y] (+ x y))"
            )

        parameters = self._parse_parameters(open_token)
        body = self._parse_forms_until_close(open_token)
        return PLispLambda(parameters, body, **self._location(open_token))

    def _parse_parameters(self, open_token: PLispToken) -> Tuple[str, ...]:
        """Parse [name ...], the current token being '['."""
        self._advance()  # consume '['
        parameters = []
        while True:
            token = self._require_token(open_token)
            if token.type == PLispTokenType.RBRACKET:
                self._advance()
                return tuple(parameters)

            if token.type != PLispTokenType.NAME:
                raise PLispParseError(
                    message=f"Parameter must be a name: {token.value}",
                    position=token.position,
                    received=f"Token: {token.value} at line {token.line}, column {token.column}",
                    expected="Names inside [ ]",
                    example="(lambda [x y] (+ x y))",
                    suggestion="Parameters are unquoted names"
                )

            parameters.append(token.value)
            self._advance()

    def _parse_forms_until_close(self, open_token: PLispToken) -> Tuple[PLispExpr, ...]:
        """Parse forms up to and including the ')' that closes `open_token`."""
        forms = []
        while self._require_token(open_token).type != PLispTokenType.RPAREN:
            forms.append(self._parse_expression())

        self._advance()  # consume ')'
        return tuple(forms)

    def _require_token(self, open_token: PLispToken) -> PLispToken:
        """Return the current token, failing if the input ended inside a form."""
        if self.current_token is None:
            snippet = ' '.join(self.source[open_token.position:open_token.position + 30].split())
            raise PLispParseError(
                message="Unterminated list - missing closing parenthesis",
                position=open_token.position,
                received=f"End of input inside form at line {open_token.line}, column {open_token.column}",
                expected="')' to close the form",
                example="Correct: (+ 1 2)\nIncorrect: (+ 1 2",
                suggestion="Add the missing ')'",
                context=f"Unclosed form: {snippet}" if snippet else None
            )

        return self.current_token

    def _form_error(
        self,
        form_name: str,
        open_token: PLispToken,
        token: PLispToken,
        expected: str,
        example: str
    ) -> PLispParseError:
        return PLispParseError(
            message=f"Malformed {form_name} at line {open_token.line}, column {open_token.column}",
            position=token.position,
            received=f"Token: {token.value}",
            expected=expected,
            example=example
        )

    def _arity_error(self, form_name: str, open_token: PLispToken, expected: int, got: int, example: str) -> PLispParseError:
        return PLispParseError(
            message=f"{form_name} expects {expected} form(s), got {got}",
            position=open_token.position,
            received=f"{form_name} with {got} form(s) at line {open_token.line}, column {open_token.column}",
            expected=f"Exactly {expected} form(s) after {form_name}",
            example=example
        )

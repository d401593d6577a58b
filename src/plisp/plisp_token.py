"""Token types and token representation for Pocket Lisp source."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class PLispTokenType(Enum):
    """Token types for Pocket Lisp source."""
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    NAME = "NAME"
    NUMBER = "NUMBER"
    STRING = "STRING"
    BOOLEAN = "BOOLEAN"
    NIL = "NIL"


@dataclass
class PLispToken:
    """Represents a single token in Pocket Lisp source."""
    type: PLispTokenType
    value: Any
    position: int
    length: int = 1
    line: int = 1
    column: int = 1

    def __repr__(self) -> str:
        return f"PLispToken({self.type.name}, {self.value!r}, line={self.line}, col={self.column})"

"""
Classified input words.

A Token keeps the exact text of the word it was built from, its TokenType and
its index in the original word list (not a character offset).
"""
from enum import Enum, auto
from typing import NamedTuple


class TokenType(Enum):
    COMMAND = auto()
    OPTION = auto()
    ARGUMENT = auto()
    DIRECTIVE = auto()
    DOUBLEDASH = auto()

    def __repr__(self):
        return self.name


class Token(NamedTuple):
    value: str
    type: TokenType
    position: int = 0

    def __repr__(self):
        return "token(%s %r @%d)" % (self.type.name, self.value, self.position)


__all__ = (
    "TokenType",
    "Token",
)

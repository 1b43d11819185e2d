"""
Token Types for Lox

Shared between lexer and parser to avoid circular dependencies.
"""

from typing import Optional, Union
from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types - one per lexical category"""

    # Single-character punctuation
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SEMICOLON = auto()
    SLASH = auto()
    STAR = auto()

    # One or two character operators
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # Literals
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # Keywords
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FUN = auto()
    FOR = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    # Special
    EOF = auto()


LiteralValue = Union[str, float]

# Case-sensitive reserved words
KEYWORDS = {
    'and': TT.AND,
    'class': TT.CLASS,
    'else': TT.ELSE,
    'false': TT.FALSE,
    'for': TT.FOR,
    'fun': TT.FUN,
    'if': TT.IF,
    'nil': TT.NIL,
    'or': TT.OR,
    'print': TT.PRINT,
    'return': TT.RETURN,
    'super': TT.SUPER,
    'this': TT.THIS,
    'true': TT.TRUE,
    'var': TT.VAR,
    'while': TT.WHILE,
}

# Tokens that may start a new statement (parser synchronization points)
STATEMENT_STARTS = frozenset({
    TT.CLASS, TT.FUN, TT.VAR, TT.FOR, TT.IF, TT.WHILE, TT.PRINT, TT.RETURN,
})


@dataclass(frozen=True)
class Tok:
    """Token with position info"""

    type: TT
    lexeme: str
    literal: Optional[LiteralValue] = None
    line: int = 1

    def __str__(self) -> str:
        literal = '' if self.literal is None else self.literal
        return f"{self.type.name} {self.lexeme} {literal}".rstrip()

    def __repr__(self):
        return f"Tok({self.type.name}, {self.lexeme!r}, {self.literal!r}, line {self.line})"

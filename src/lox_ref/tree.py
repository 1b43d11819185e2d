"""AST node types shared by both parsers, the evaluator and the printer.

Each node is a frozen dataclass; the tree is strict (no sharing, no cycles)
so structural equality is enough to compare parses.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Union
from typing_extensions import TypeAlias

from .token_types import Tok

# ---------- Expressions ----------

@dataclass(frozen=True)
class Binary:
    left: 'Expr'
    operator: Tok
    right: 'Expr'

@dataclass(frozen=True)
class Grouping:
    inner: 'Expr'

@dataclass(frozen=True)
class Literal:
    # bool, None (nil), str or float
    value: Union[bool, None, str, float]

@dataclass(frozen=True)
class Unary:
    operator: Tok
    right: 'Expr'

@dataclass(frozen=True)
class Variable:
    name: Tok

Expr: TypeAlias = Union[Binary, Grouping, Literal, Unary, Variable]

# ---------- Statements ----------

@dataclass(frozen=True)
class ExpressionStmt:
    expr: Expr

@dataclass(frozen=True)
class PrintStmt:
    expr: Expr

@dataclass(frozen=True)
class VarStmt:
    name: Tok
    initializer: Optional[Expr] = None

Stmt: TypeAlias = Union[ExpressionStmt, PrintStmt, VarStmt]

Node: TypeAlias = Union[Expr, Stmt]


def format_number(value: float) -> str:
    """Render a number the way print displays it."""
    if value != value:
        return "NaN"
    if value in (float("inf"), float("-inf")):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        return str(int(value))
    # shortest round-trip digits, always positional
    return format(Decimal(repr(value)), "f")


def _parenthesize(name: str, *parts: Node) -> str:
    return "(" + " ".join([name] + [pretty(p) for p in parts]) + ")"


def pretty(node: Node) -> str:
    """Return the parenthesized prefix rendering of a node, e.g. ``(+ 1 (* 2 3))``."""
    match node:
        case Binary(left=left, operator=op, right=right):
            return _parenthesize(op.lexeme, left, right)
        case Grouping(inner=inner):
            return _parenthesize("group", inner)
        case Literal(value=None):
            return "nil"
        case Literal(value=bool() as b):
            return "true" if b else "false"
        case Literal(value=float() as n):
            return format_number(n)
        case Literal(value=str() as s):
            return s
        case Unary(operator=op, right=right):
            return _parenthesize(op.lexeme, right)
        case Variable(name=name):
            return name.lexeme
        case ExpressionStmt(expr=expr):
            return _parenthesize("expr", expr)
        case PrintStmt(expr=expr):
            return _parenthesize("print", expr)
        case VarStmt(name=name, initializer=None):
            return f"(var {name.lexeme})"
        case VarStmt(name=name, initializer=init):
            return f"(var {name.lexeme} {pretty(init)})"
        case _:
            raise TypeError(f"not an AST node: {node!r}")


def pretty_program(statements: List[Optional[Stmt]]) -> str:
    """One rendered statement per line; failed slots show as ``<error>``."""
    return "\n".join("<error>" if s is None else pretty(s) for s in statements)

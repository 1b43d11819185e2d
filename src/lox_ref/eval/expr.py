from __future__ import annotations

import math
from typing import Callable, Dict, Tuple

from ..runtime import (
    LoxBool,
    LoxNumber,
    LoxString,
    LoxTypeError,
    LoxValue,
    LoxRuntimeError,
)
from ..token_types import TT, Tok
from ..utils import is_truthy, lox_equals


def _require_number(op: Tok, value: LoxValue) -> float:
    if isinstance(value, LoxNumber):
        return value.value
    raise LoxTypeError("Operand must be a number.", op)


def _require_numbers(op: Tok, lhs: LoxValue, rhs: LoxValue) -> Tuple[float, float]:
    if isinstance(lhs, LoxNumber) and isinstance(rhs, LoxNumber):
        return lhs.value, rhs.value
    raise LoxTypeError("Operands must be numbers.", op)


def eval_unary(op: Tok, rhs: LoxValue) -> LoxValue:
    match op.type:
        case TT.MINUS:
            return LoxNumber(-_require_number(op, rhs))
        case TT.BANG:
            return LoxBool(not is_truthy(rhs))
        case _:
            raise LoxRuntimeError(f"Unsupported unary operator '{op.lexeme}'.", op)


def ieee_divide(lhs: float, rhs: float) -> float:
    """Float division with IEEE-754 results for a zero divisor."""
    if rhs != 0.0:
        return lhs / rhs
    if lhs == 0.0 or math.isnan(lhs):
        return math.nan
    return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)


def _add(op: Tok, lhs: LoxValue, rhs: LoxValue) -> LoxValue:
    match (lhs, rhs):
        case (LoxNumber(value=a), LoxNumber(value=b)):
            return LoxNumber(a + b)
        case (LoxString(value=a), LoxString(value=b)):
            return LoxString(a + b)
        case _:
            raise LoxTypeError("Operands must be two numbers or two strings.", op)


def _arith(fn: Callable[[float, float], float]) -> Callable[[Tok, LoxValue, LoxValue], LoxValue]:
    def apply(op: Tok, lhs: LoxValue, rhs: LoxValue) -> LoxValue:
        a, b = _require_numbers(op, lhs, rhs)
        return LoxNumber(fn(a, b))
    return apply


def _compare(fn: Callable[[float, float], bool]) -> Callable[[Tok, LoxValue, LoxValue], LoxValue]:
    def apply(op: Tok, lhs: LoxValue, rhs: LoxValue) -> LoxValue:
        a, b = _require_numbers(op, lhs, rhs)
        return LoxBool(fn(a, b))
    return apply


BINARY_OPS: Dict[TT, Callable[[Tok, LoxValue, LoxValue], LoxValue]] = {
    TT.PLUS: _add,
    TT.MINUS: _arith(lambda a, b: a - b),
    TT.STAR: _arith(lambda a, b: a * b),
    TT.SLASH: _arith(ieee_divide),
    TT.GREATER: _compare(lambda a, b: a > b),
    TT.GREATER_EQUAL: _compare(lambda a, b: a >= b),
    TT.LESS: _compare(lambda a, b: a < b),
    TT.LESS_EQUAL: _compare(lambda a, b: a <= b),
    TT.EQUAL_EQUAL: lambda _op, a, b: LoxBool(lox_equals(a, b)),
    TT.BANG_EQUAL: lambda _op, a, b: LoxBool(not lox_equals(a, b)),
}


def apply_binary_operator(op: Tok, lhs: LoxValue, rhs: LoxValue) -> LoxValue:
    handler = BINARY_OPS.get(op.type)
    if handler is None:
        raise LoxRuntimeError(f"Unsupported binary operator '{op.lexeme}'.", op)
    return handler(op, lhs, rhs)

from __future__ import annotations

import os as _os

from .tree import format_number
from .types import LoxBool, LoxNil, LoxNumber, LoxString, LoxValue

_TRUE_WORDS = {"1", "true", "yes", "on"}


def env_flag(name: str) -> bool:
    """Read a boolean switch from the environment (unset means off)."""
    return _os.environ.get(name, "").strip().lower() in _TRUE_WORDS


def set_env_flag(name: str, enabled: bool) -> None:
    if enabled:
        _os.environ[name] = "1"
    else:
        _os.environ.pop(name, None)


def debug_py_trace_enabled() -> bool:
    return env_flag("LOX_DEBUG_PY_TRACE")


def dump_tokens_enabled() -> bool:
    return env_flag("LOX_DUMP_TOKENS")


def dump_ast_enabled() -> bool:
    return env_flag("LOX_DUMP_AST")


def is_truthy(value: LoxValue) -> bool:
    """Everything except nil and false is truthy."""
    match value:
        case LoxNil():
            return False
        case LoxBool(value=b):
            return b
        case _:
            return True


def lox_equals(lhs: LoxValue, rhs: LoxValue) -> bool:
    """Same variant and same payload; never coerces across variants."""
    match (lhs, rhs):
        case (LoxNil(), LoxNil()):
            return True
        case (LoxBool(value=a), LoxBool(value=b)):
            return a == b
        case (LoxNumber(value=a), LoxNumber(value=b)):
            return a == b
        case (LoxString(value=a), LoxString(value=b)):
            return a == b
        case _:
            return False


def stringify(value: LoxValue) -> str:
    """Display text used by print."""
    match value:
        case LoxNil():
            return "nil"
        case LoxBool(value=b):
            return "true" if b else "false"
        case LoxNumber(value=n):
            return format_number(n)
        case LoxString(value=s):
            return s
        case _:
            raise TypeError(f"not a Lox value: {value!r}")

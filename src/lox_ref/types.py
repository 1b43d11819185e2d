from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union
from typing_extensions import TypeAlias, TypeGuard

from .token_types import Tok
from .tree import format_number

# ---------- Value Model ----------

@dataclass(frozen=True)
class LoxNil:
    def __repr__(self) -> str:
        return "nil"

@dataclass(frozen=True)
class LoxBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass(frozen=True)
class LoxNumber:
    value: float
    def __repr__(self) -> str:
        return format_number(self.value)

@dataclass(frozen=True)
class LoxString:
    value: str
    def __repr__(self) -> str:
        return f'"{self.value}"'

LoxValue: TypeAlias = Union[LoxNil, LoxBool, LoxNumber, LoxString]

_LOX_VALUE_TYPES = (LoxNil, LoxBool, LoxNumber, LoxString)

def is_lox_value(value: object) -> TypeGuard[LoxValue]:
    return isinstance(value, _LOX_VALUE_TYPES)

# ---------- Runtime errors ----------

class LoxRuntimeError(Exception):
    """Base class for errors raised while evaluating a program."""
    token: Optional[Tok]

    def __init__(self, message: str, token: Optional[Tok] = None):
        super().__init__(message)
        self.message = message
        self.token = token

    @property
    def line(self) -> Optional[int]:
        return self.token.line if self.token is not None else None

class LoxTypeError(LoxRuntimeError):
    """Operand of the wrong variant for an operator."""
    pass

class LoxNameError(LoxRuntimeError):
    """Reference to a variable that was never defined."""
    def __init__(self, name: str, token: Optional[Tok] = None):
        super().__init__(f"Undefined variable '{name}'.", token)
        self.name = name

from __future__ import annotations

from typing import Dict, Optional

from .token_types import Tok
from .types import (
    LoxNil, LoxBool, LoxNumber, LoxString, LoxValue,
    LoxRuntimeError, LoxTypeError, LoxNameError,
    is_lox_value,
)

__all__ = [
    "Environment",
    "LoxNil", "LoxBool", "LoxNumber", "LoxString", "LoxValue",
    "LoxRuntimeError", "LoxTypeError", "LoxNameError",
]


class Environment:
    """Single flat scope: name -> value.

    ``define`` inserts or overwrites, ``get`` fails loudly on unknown names.
    There is no delete and no parent chain.
    """

    def __init__(self) -> None:
        self.vars: Dict[str, LoxValue] = {}

    def define(self, name: str, val: LoxValue) -> None:
        if not is_lox_value(val):
            raise TypeError(f"cannot bind non-Lox value {val!r} to '{name}'")
        self.vars[name] = val

    def get(self, name: str, token: Optional[Tok] = None) -> LoxValue:
        # values are immutable dataclasses, so handing out the stored one is a copy
        if name in self.vars:
            return self.vars[name]

        raise LoxNameError(name, token)

    def __contains__(self, name: object) -> bool:
        return name in self.vars

    def __len__(self) -> int:
        return len(self.vars)

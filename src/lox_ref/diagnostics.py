"""Error reporting shared by the scanner, parser and interpreter.

Every diagnostic is one line on the error stream:

    [line: <N>] Error<loc>: <message>

where ``<loc>`` is empty, `` at end`` or `` at '<lexeme>'``.
"""

from __future__ import annotations

import sys
import traceback
from typing import List, Optional, TextIO

from .token_types import TT, Tok
from .types import LoxRuntimeError
from .utils import debug_py_trace_enabled


def token_location(token: Optional[Tok]) -> str:
    if token is None:
        return ""
    if token.type == TT.EOF:
        return " at end"
    return f" at '{token.lexeme}'"


def format_diagnostic(line: int, where: str, message: str) -> str:
    return f"[line: {line}] Error{where}: {message}"


class ErrorReporter:
    """Formats diagnostics and remembers whether any were emitted."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.had_error = False
        self.had_runtime_error = False
        self.messages: List[str] = []

    def _emit(self, text: str) -> None:
        self.messages.append(text)
        print(text, file=self.stream if self.stream is not None else sys.stderr)

    def error(self, line: int, message: str) -> None:
        """Static error without a token (scanner)."""
        self.had_error = True
        self._emit(format_diagnostic(line, "", message))

    def token_error(self, token: Tok, message: str) -> None:
        """Static error located at a token (parser)."""
        self.had_error = True
        self._emit(format_diagnostic(token.line, token_location(token), message))

    def runtime_error(self, exc: LoxRuntimeError) -> None:
        self.had_runtime_error = True
        token = exc.token
        line = token.line if token is not None else 0
        self._emit(format_diagnostic(line, token_location(token), exc.message))

        if debug_py_trace_enabled() and exc.__traceback__ is not None:
            out = self.stream if self.stream is not None else sys.stderr
            print("\nPython traceback:", file=out)
            print("".join(traceback.format_tb(exc.__traceback__)), file=out, end="")

    def reset(self) -> None:
        self.had_error = False
        self.had_runtime_error = False
        self.messages.clear()

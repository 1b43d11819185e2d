"""Interactive REPL for Lox, powered by prompt_toolkit."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from typing import Optional, TextIO

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.shortcuts import clear

from .diagnostics import ErrorReporter
from .evaluator import Interpreter
from .repl_highlight import LoxLexer
from .runner import run
from .utils import (
    debug_py_trace_enabled,
    dump_ast_enabled,
    dump_tokens_enabled,
    set_env_flag,
)

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# A command word is "/" followed by lowercase letters or dashes; "/ 2;" is Lox.
_SLASH_RE = re.compile(r"/[a-z][a-z-]*(?:\s|$)")

# Slash commands: name => (description, argument_hint, env switch or None).
_SLASH_CMDS = {
    "/ast": ("Dump the parsed AST before running", "[on|off]", "LOX_DUMP_AST"),
    "/clear": ("Clear the terminal screen", "", None),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]", "LOX_DEBUG_PY_TRACE"),
    "/reset": ("Reset the REPL environment", "", None),
    "/tokens": ("Dump scanned tokens before running", "[on|off]", "LOX_DUMP_TOKENS"),
}

_SWITCH_STATE = {
    "LOX_DUMP_AST": dump_ast_enabled,
    "LOX_DEBUG_PY_TRACE": debug_py_trace_enabled,
    "LOX_DUMP_TOKENS": dump_tokens_enabled,
}


@dataclass
class ReplState:
    """Everything that survives between prompt lines."""

    out: Optional[TextIO] = None
    err: Optional[TextIO] = None
    interpreter: Interpreter = field(init=False)

    def __post_init__(self) -> None:
        self.interpreter = Interpreter(out=self.out)

    def reset(self) -> None:
        self.interpreter = Interpreter(out=self.out)


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, _hint, _switch) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def _toggle(switch: str, arg: str, out: TextIO) -> None:
    arg = arg.lower()
    if arg in ("on", "1", "true", "yes"):
        set_env_flag(switch, True)
    elif arg in ("off", "0", "false", "no"):
        set_env_flag(switch, False)
    elif arg == "":
        set_env_flag(switch, not _SWITCH_STATE[switch]())
    else:
        raise ValueError(arg)

    state = "on" if _SWITCH_STATE[switch]() else "off"
    print(f"{switch}: {state}", file=out)


def _handle_slash(line: str, state: ReplState) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not _SLASH_RE.match(stripped):
        return False

    out = state.out if state.out is not None else sys.stdout
    err = state.err if state.err is not None else sys.stderr

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd not in _SLASH_CMDS:
        print(f"Unknown command: {cmd}", file=err)
        return True

    _desc, hint, switch = _SLASH_CMDS[cmd]

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/reset":
        state.reset()
        print("Environment reset.", file=out)
        return True

    try:
        _toggle(switch, arg, out)
    except ValueError:
        print(f"Usage: {cmd} {hint}", file=err)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def eval_line(text: str, state: ReplState) -> bool:
    """Process one prompt line. Returns False when the session should end."""
    text = _normalize(text)
    if not text.strip():
        return False

    if _handle_slash(text, state):
        return True

    # fresh reporter per line: an error in one line must not poison the next
    run(text, interpreter=state.interpreter, reporter=ErrorReporter(state.err))
    return True


def repl() -> None:
    """Interactive read-eval-print loop; a blank line or EOF exits."""
    state = ReplState()

    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=LoxLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
    )

    print("lox repl - blank line or Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt("> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        if not eval_line(text, state):
            break

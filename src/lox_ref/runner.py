from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .diagnostics import ErrorReporter
from .evaluator import Interpreter
from .lexer_rd import Lexer
from .parser_rd import Parser, parse_source
from .runtime import LoxNil, LoxValue
from .tree import Stmt, pretty_program
from .utils import dump_ast_enabled, dump_tokens_enabled

# sysexits.h codes used by the script driver
EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70


def parse_program(src: str, reporter: ErrorReporter) -> List[Optional[Stmt]]:
    """Scan and parse, reporting every static error; never raises for bad input."""
    lexer = Lexer(src, reporter=reporter.error)
    tokens = lexer.tokenize()

    if dump_tokens_enabled():
        for tok in tokens:
            print(tok, file=reporter.stream or sys.stderr)

    parser = Parser(tokens, reporter=reporter.token_error)
    statements = parser.parse()

    if dump_ast_enabled():
        print(pretty_program(statements), file=reporter.stream or sys.stderr)

    return statements


def run(src: str, interpreter: Optional[Interpreter] = None,
        reporter: Optional[ErrorReporter] = None) -> LoxValue:
    """Scan, parse and execute ``src``.

    Static errors are all reported and nothing executes. Runtime errors are
    reported per statement and execution continues. Returns the value of the
    last statement that completed.
    """
    if interpreter is None:
        interpreter = Interpreter()
    if reporter is None:
        reporter = ErrorReporter()

    statements = parse_program(src, reporter)
    if reporter.had_error:
        return LoxNil()

    return interpreter.interpret(statements, on_error=reporter.runtime_error)


def run_strict(src: str, interpreter: Optional[Interpreter] = None) -> LoxValue:
    """Fail-fast variant of run(): the first LexError, ParseError or
    LoxRuntimeError propagates to the caller."""
    statements = parse_source(src)
    if interpreter is None:
        interpreter = Interpreter()
    return interpreter.interpret(statements)


def run_file(path: str, reporter: Optional[ErrorReporter] = None) -> int:
    """Run a script file and return a process exit code."""
    if reporter is None:
        reporter = ErrorReporter()

    try:
        source = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        reason = getattr(exc, "strerror", None) or exc
        print(f"Could not read '{path}': {reason}", file=sys.stderr)
        return EX_NOINPUT

    run(source, reporter=reporter)

    if reporter.had_error:
        return EX_DATAERR
    if reporter.had_runtime_error:
        return EX_SOFTWARE
    return EX_OK


def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    Process entry point.
    - no arguments => interactive prompt
    - one argument => script path
    - anything else => usage error
    """
    args = list(sys.argv[1:] if argv is None else argv)

    if len(args) > 1:
        print("Usage: lox [script]", file=sys.stderr)
        raise SystemExit(EX_USAGE)

    if len(args) == 1:
        raise SystemExit(run_file(args[0]))

    from .repl import repl
    repl()


if __name__ == "__main__":
    main()

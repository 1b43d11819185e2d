from __future__ import annotations

import sys
from typing import Callable, Iterable, List, Optional, TextIO

from .runtime import (
    Environment,
    LoxBool,
    LoxNil,
    LoxNumber,
    LoxString,
    LoxValue,
    LoxRuntimeError,
)
from .tree import (
    Binary,
    Expr,
    ExpressionStmt,
    Grouping,
    Literal,
    PrintStmt,
    Stmt,
    Unary,
    Variable,
    VarStmt,
)
from .eval.expr import apply_binary_operator, eval_unary
from .token_types import Tok
from .utils import stringify

RuntimeErrorSink = Callable[[LoxRuntimeError], None]


def literal_value(value: object) -> LoxValue:
    match value:
        case None:
            return LoxNil()
        case bool() as b:
            return LoxBool(b)
        case float() | int():
            return LoxNumber(float(value))
        case str() as s:
            return LoxString(s)
        case _:
            raise LoxRuntimeError(f"Unsupported literal {value!r}")


class Interpreter:
    """Tree-walking evaluator over a single flat Environment.

    ``out`` receives print output (defaults to the live ``sys.stdout``).
    """

    def __init__(self, out: Optional[TextIO] = None, env: Optional[Environment] = None):
        self.out = out
        self.env = env if env is not None else Environment()

    # ---------------- Expressions ----------------

    def evaluate(self, expr: Expr) -> LoxValue:
        match expr:
            case Literal(value=value):
                return literal_value(value)
            case Grouping(inner=inner):
                return self.evaluate(inner)
            case Unary():
                return self._eval_unary_run(expr)
            case Binary():
                return self._eval_binary_chain(expr)
            case Variable(name=name):
                return self.env.get(name.lexeme, name)
            case _:
                raise LoxRuntimeError(f"Unknown expression node {type(expr).__name__}")

    def _eval_unary_run(self, expr: Unary) -> LoxValue:
        ops: List[Tok] = []
        node: Expr = expr
        while isinstance(node, Unary):
            ops.append(node.operator)
            node = node.right

        val = self.evaluate(node)
        for op in reversed(ops):
            val = eval_unary(op, val)
        return val

    def _eval_binary_chain(self, expr: Binary) -> LoxValue:
        """Walk the left spine iteratively; operands still run left to right."""
        spine: List[Binary] = []
        node: Expr = expr
        while isinstance(node, Binary):
            spine.append(node)
            node = node.left

        val = self.evaluate(node)
        for link in reversed(spine):
            rhs = self.evaluate(link.right)
            val = apply_binary_operator(link.operator, val, rhs)
        return val

    # ---------------- Statements ----------------

    def execute(self, stmt: Stmt) -> LoxValue:
        match stmt:
            case ExpressionStmt(expr=expr):
                return self.evaluate(expr)
            case PrintStmt(expr=expr):
                val = self.evaluate(expr)
                print(stringify(val), file=self.out if self.out is not None else sys.stdout)
                return val
            case VarStmt(name=name, initializer=init):
                val = self.evaluate(init) if init is not None else LoxNil()
                self.env.define(name.lexeme, val)
                return val
            case _:
                raise LoxRuntimeError(f"Unknown statement node {type(stmt).__name__}")

    def interpret(
        self,
        statements: Iterable[Optional[Stmt]],
        on_error: Optional[RuntimeErrorSink] = None,
    ) -> LoxValue:
        """Run statements in order.

        A runtime error aborts only the statement it came from; it is passed
        to ``on_error`` and execution resumes with the next statement. With no
        ``on_error`` the error propagates. Returns the last produced value.
        """
        last: LoxValue = LoxNil()

        for stmt in statements:
            if stmt is None:
                continue
            try:
                last = self._execute_guarded(stmt)
            except LoxRuntimeError as err:
                if on_error is None:
                    raise
                on_error(err)

        return last

    def _execute_guarded(self, stmt: Stmt) -> LoxValue:
        try:
            return self.execute(stmt)
        except RecursionError:
            raise LoxRuntimeError("Expression nesting too deep.", statement_token(stmt)) from None


# ---------------- Public API ----------------

def statement_token(stmt: Stmt) -> Optional[Tok]:
    """First operator or variable token along the statement's left edge."""
    match stmt:
        case VarStmt(name=name):
            return name
        case ExpressionStmt(expr=node) | PrintStmt(expr=node):
            pass
        case _:
            return None

    leftmost: Optional[Tok] = None
    while True:
        match node:
            case Binary(left=left, operator=op):
                leftmost = op
                node = left
            case Grouping(inner=inner):
                node = inner
            case Unary(operator=op):
                return op
            case Variable(name=name):
                return name
            case _:
                return leftmost


def eval_expr(expr: Expr, env: Optional[Environment] = None) -> LoxValue:
    return Interpreter(env=env).evaluate(expr)

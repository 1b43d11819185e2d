"""Lark-driven reference parser.

Builds an LALR parser from ``grammar.lark`` and transforms its parse tree
into the same dataclass nodes the hand-written parser produces, so the two
can be compared statement by statement.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Transformer, v_args
from lark.exceptions import VisitError

from .token_types import KEYWORDS, TT, Tok
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

GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")


def _read_grammar(grammar_path: Optional[str] = None) -> str:
    p = Path(grammar_path) if grammar_path else GRAMMAR_PATH
    if not p.exists():
        raise FileNotFoundError(f"grammar not found: {p}")
    return p.read_text(encoding="utf-8")


def to_tok(token: Token) -> Tok:
    """Convert a Lark token to the scanner's token type."""
    return Tok(TT[token.type], str(token), None, token.line or 1)


class ReservedWordError(ValueError):
    """A reserved word used where the grammar expects a plain identifier."""

    def __init__(self, token: Token):
        super().__init__(f"'{token}' is a reserved word (line {token.line})")
        self.token = token


def _ident(token: Token) -> Tok:
    # keywords this subset does not parse (class, fun, ...) still may not name things
    if str(token) in KEYWORDS:
        raise ReservedWordError(token)
    return to_tok(token)


@v_args(inline=True)
class ToAst(Transformer):
    """Parse tree -> tree.py nodes."""

    def start(self, *stmts: Stmt) -> List[Stmt]:
        return list(stmts)

    def var_decl(self, name: Token, initializer: Optional[Expr] = None) -> VarStmt:
        return VarStmt(_ident(name), initializer)

    def print_stmt(self, expr: Expr) -> PrintStmt:
        return PrintStmt(expr)

    def expr_stmt(self, expr: Expr) -> ExpressionStmt:
        return ExpressionStmt(expr)

    def binary(self, left: Expr, op: Token, right: Expr) -> Binary:
        return Binary(left, to_tok(op), right)

    def unary_op(self, op: Token, right: Expr) -> Unary:
        return Unary(to_tok(op), right)

    def number(self, token: Token) -> Literal:
        return Literal(float(token))

    def string(self, token: Token) -> Literal:
        return Literal(str(token)[1:-1])

    def true(self) -> Literal:
        return Literal(True)

    def false(self) -> Literal:
        return Literal(False)

    def nil(self) -> Literal:
        return Literal(None)

    def variable(self, token: Token) -> Variable:
        return Variable(_ident(token))

    def grouping(self, inner: Expr) -> Grouping:
        return Grouping(inner)


def build_parser(grammar_text: str, parser_kind: str = "lalr") -> Lark:
    return Lark(
        grammar_text,
        parser=parser_kind,
        lexer="contextual" if parser_kind == "lalr" else "basic",
        start="start",
        propagate_positions=True,
    )


@lru_cache(maxsize=None)
def make_parser(grammar_path: Optional[str] = None) -> Lark:
    return build_parser(_read_grammar(grammar_path))


def parse_reference(source: str, grammar_path: Optional[str] = None) -> List[Stmt]:
    """Parse with the Lark grammar; syntax errors raise ``lark.UnexpectedInput``."""
    tree = make_parser(grammar_path).parse(source)
    try:
        return ToAst().transform(tree)
    except VisitError as exc:
        raise exc.orig_exc from exc

from __future__ import annotations

from typing import List, Optional

import pytest

from lox_ref.token_types import TT
from lox_ref.tree import (
    Binary,
    ExpressionStmt,
    Grouping,
    Literal,
    PrintStmt,
    Unary,
    Variable,
    VarStmt,
    pretty,
)
from tests.support.harness import (
    ParseError,
    parse_collecting,
    parse_expr_fragment,
    parse_pipeline,
)

EXPRESSION_CASES = [
    pytest.param("1 + 2 * 3", "(+ 1 (* 2 3))", id="mul-binds-tighter"),
    pytest.param("(1 + 2) * 3", "(* (group (+ 1 2)) 3)", id="grouping-overrides"),
    pytest.param("1 - 2 - 3", "(- (- 1 2) 3)", id="term-left-assoc"),
    pytest.param("8 / 4 / 2", "(/ (/ 8 4) 2)", id="factor-left-assoc"),
    pytest.param("1 < 2 == true", "(== (< 1 2) true)", id="comparison-under-equality"),
    pytest.param("a == b != c", "(!= (== a b) c)", id="equality-left-assoc"),
    pytest.param("1 <= 2 >= 3 > 4 < 5", "(< (> (>= (<= 1 2) 3) 4) 5)", id="comparison-chain"),
    pytest.param("-1 - -2", "(- (- 1) (- 2))", id="unary-minus-operands"),
    pytest.param("!!true", "(! (! true))", id="unary-right-assoc"),
    pytest.param("-x * 2", "(* (- x) 2)", id="unary-binds-tighter-than-factor"),
    pytest.param("-(1 + 2)", "(- (group (+ 1 2)))", id="unary-on-group"),
    pytest.param("((nil))", "(group (group nil))", id="nested-groups"),
    pytest.param('"a" + "b"', "(+ a b)", id="string-literals"),
    pytest.param("2.5 * 4", "(* 2.5 4)", id="fractional-literal"),
    pytest.param("a + b * c - d / e", "(- (+ a (* b c)) (/ d e))", id="mixed-term-factor"),
    pytest.param("1 + 2 == 3 * 1", "(== (+ 1 2) (* 3 1))", id="term-under-equality"),
]


@pytest.mark.parametrize("source, expected", EXPRESSION_CASES)
def test_expression_precedence(source: str, expected: str) -> None:
    assert pretty(parse_expr_fragment(source)) == expected


def test_binary_node_keeps_operator_token() -> None:
    expr = parse_expr_fragment("1 +\n 2")
    assert isinstance(expr, Binary)
    assert expr.operator.type == TT.PLUS
    assert expr.operator.lexeme == "+"
    assert expr.operator.line == 1
    assert expr.left == Literal(1.0)
    assert expr.right == Literal(2.0)


def test_primary_literals() -> None:
    assert parse_expr_fragment("true") == Literal(True)
    assert parse_expr_fragment("false") == Literal(False)
    assert parse_expr_fragment("nil") == Literal(None)
    assert parse_expr_fragment("12") == Literal(12.0)
    assert parse_expr_fragment('"txt"') == Literal("txt")


def test_variable_and_grouping_nodes() -> None:
    expr = parse_expr_fragment("(answer)")
    assert isinstance(expr, Grouping)
    assert isinstance(expr.inner, Variable)
    assert expr.inner.name.lexeme == "answer"

    neg = parse_expr_fragment("-answer")
    assert isinstance(neg, Unary)
    assert neg.operator.type == TT.MINUS


STATEMENT_CASES = [
    pytest.param("print 1;", PrintStmt, id="print"),
    pytest.param("1 + 1;", ExpressionStmt, id="expression"),
    pytest.param("var x = 1;", VarStmt, id="var-init"),
    pytest.param("var x;", VarStmt, id="var-bare"),
]


@pytest.mark.parametrize("source, kind", STATEMENT_CASES)
def test_statement_kinds(source: str, kind: type) -> None:
    (stmt,) = parse_pipeline(source)
    assert isinstance(stmt, kind)


def test_var_declaration_shapes() -> None:
    with_init, bare = parse_pipeline("var a = 1 + 2; var b;")
    assert isinstance(with_init, VarStmt)
    assert with_init.name.lexeme == "a"
    assert pretty(with_init.initializer) == "(+ 1 2)"
    assert isinstance(bare, VarStmt)
    assert bare.initializer is None


def test_statement_order_matches_source() -> None:
    stmts = parse_pipeline("print 1; var a; a; print 2;")
    assert [type(s).__name__ for s in stmts] == [
        "PrintStmt", "VarStmt", "ExpressionStmt", "PrintStmt",
    ]


def test_empty_program() -> None:
    assert parse_pipeline("") == []
    assert parse_pipeline("// only a comment\n") == []


SYNTAX_ERROR_CASES = [
    pytest.param("(1 + 2;", "Expect ')' after expression.", ";", id="unclosed-group"),
    pytest.param("print 1", "Expect ';' after value.", "", id="print-missing-semicolon"),
    pytest.param("1 + 2", "Expect ';' after expression.", "", id="expr-missing-semicolon"),
    pytest.param("var = 1;", "Expect variable name.", "=", id="var-missing-name"),
    pytest.param("var x = 1", "Expect ';' after variable declaration.", "", id="var-missing-semicolon"),
    pytest.param("print;", "Expect expression.", ";", id="print-missing-expression"),
    pytest.param("1 + ;", "Expect expression.", ";", id="binary-missing-rhs"),
    pytest.param(")", "Expect expression.", ")", id="stray-rparen"),
    pytest.param("var class = 1;", "Expect variable name.", "class", id="reserved-var-name"),
    pytest.param("fun;", "Expect expression.", "fun", id="unsupported-keyword"),
]


@pytest.mark.parametrize("source, message, lexeme", SYNTAX_ERROR_CASES)
def test_syntax_errors(source: str, message: str, lexeme: str) -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_pipeline(source)

    err = exc_info.value
    assert err.message == message
    assert err.token.lexeme == lexeme
    if lexeme == "":
        assert err.token.type == TT.EOF


def test_unclosed_group_at_end_of_input() -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_expr_fragment("(1 + 2")

    assert exc_info.value.message == "Expect ')' after expression."
    assert exc_info.value.token.type == TT.EOF
    assert "at end" in str(exc_info.value)


def test_fragment_rejects_trailing_tokens() -> None:
    with pytest.raises(ParseError):
        parse_expr_fragment("1 2")


def test_parse_error_line() -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_pipeline("print 1;\nprint 2;\nprint (3;")

    assert exc_info.value.line == 3


def _kinds(stmts: List[Optional[object]]) -> List[Optional[str]]:
    return [None if s is None else type(s).__name__ for s in stmts]


RECOVERY_CASES = [
    pytest.param(
        "print 1; 1 +; print 2;",
        ["PrintStmt", None, "PrintStmt"],
        ["Expect expression."],
        id="bad-middle-statement",
    ),
    pytest.param(
        "var x = ; print 2;",
        [None, "PrintStmt"],
        ["Expect expression."],
        id="sync-on-semicolon",
    ),
    pytest.param(
        "x y print 2;",
        [None, "PrintStmt"],
        ["Expect ';' after expression."],
        id="sync-on-statement-keyword",
    ),
    pytest.param(
        "print ; var = 1; print 3",
        [None, None, None],
        ["Expect expression.", "Expect variable name.", "Expect ';' after value."],
        id="three-errors-one-pass",
    ),
    pytest.param(
        "(((",
        [None],
        ["Expect expression."],
        id="error-at-end",
    ),
]


@pytest.mark.parametrize("source, kinds, messages", RECOVERY_CASES)
def test_error_recovery(source: str, kinds: List[Optional[str]], messages: List[str]) -> None:
    stmts, parser = parse_collecting(source)

    assert _kinds(stmts) == kinds
    assert [e.message for e in parser.errors] == messages
    assert parser.had_error


def test_clean_parse_has_no_error_flag() -> None:
    stmts, parser = parse_collecting("print 1;")
    assert len(stmts) == 1
    assert not parser.had_error
    assert parser.errors == []


def test_parser_reports_through_callback() -> None:
    seen = []
    from lox_ref.lexer_rd import tokenize
    from lox_ref.parser_rd import Parser

    parser = Parser(tokenize("print;\nprint 1"), reporter=lambda tok, msg: seen.append((tok.line, tok.lexeme, msg)))
    parser.parse()

    assert seen == [(1, ";", "Expect expression."), (2, "", "Expect ';' after value.")]


def test_parser_tolerates_missing_eof() -> None:
    from lox_ref.lexer_rd import tokenize
    from lox_ref.parser_rd import Parser

    tokens = [t for t in tokenize("print 1;") if t.type != TT.EOF]
    (stmt,) = Parser(tokens).parse()
    assert isinstance(stmt, PrintStmt)


def test_deep_grouping_is_a_parse_error() -> None:
    depth = 2000
    source = "print " + "(" * depth + "1" + ")" * depth + ";\nprint 2;"
    stmts, parser = parse_collecting(source)

    assert _kinds(stmts) == [None, "PrintStmt"]
    assert [e.message for e in parser.errors] == ["Expression nesting too deep."]
    assert parser.errors[0].token.lexeme == "("


def test_moderate_grouping_still_parses() -> None:
    (stmt,) = parse_pipeline("(" * 40 + "1" + ")" * 40 + ";")
    assert pretty(stmt) == "(expr " + "(group " * 40 + "1" + ")" * 40 + ")"


def test_long_prefix_run_parses_without_recursion() -> None:
    (stmt,) = parse_pipeline("!" * 1200 + "true;")
    node = stmt.expr
    depth = 0
    while isinstance(node, Unary):
        assert node.operator.type == TT.BANG
        node = node.right
        depth += 1
    assert depth == 1200
    assert node == Literal(True)

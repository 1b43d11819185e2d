"""
Recursive Descent Parser for Lox

Structure:
- Lexer: Token stream from source
- Parser: Recursive descent, one method per precedence level
- AST: dataclass nodes from tree.py (shared with the Lark reference parser)
"""

from typing import Callable, List, Optional

from .token_types import STATEMENT_STARTS, TT, Tok
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

TokenErrorSink = Callable[[Tok, str], None]

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, token: Tok):
        self.message = message
        self.token = token
        self.line = token.line
        where = "at end" if token.type == TT.EOF else f"at '{token.lexeme}'"
        super().__init__(f"{message} ({where}, line {token.line})")


class Parser:
    """
    Recursive descent parser for Lox.

    Expression precedence (lowest to highest):
    1. equality (==, !=)
    2. comparison (<, <=, >, >=)
    3. term (+, -)
    4. factor (*, /)
    5. unary (-, !)
    6. primary (literals, identifiers, parens)

    Binary levels are left-associative; unary is right-associative.
    A syntax error inside a declaration is reported, the parser
    synchronizes to the next statement boundary and the declaration's
    slot in the output holds None.
    """

    def __init__(self, tokens: List[Tok], reporter: Optional[TokenErrorSink] = None):
        if not tokens or tokens[-1].type != TT.EOF:
            last_line = tokens[-1].line if tokens else 1
            tokens = list(tokens) + [Tok(TT.EOF, '', None, last_line)]
        self.tokens = tokens
        self.pos = 0
        self.reporter = reporter
        self.errors: List[ParseError] = []

    @property
    def had_error(self) -> bool:
        return bool(self.errors)

    # ========================================================================
    # Token Navigation
    # ========================================================================

    @property
    def current(self) -> Tok:
        return self.tokens[self.pos]

    def previous(self) -> Tok:
        return self.tokens[self.pos - 1]

    def at_end(self) -> bool:
        return self.current.type == TT.EOF

    def advance(self) -> Tok:
        """Consume current token and return it"""
        if not self.at_end():
            self.pos += 1
        return self.previous()

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, message: str) -> Tok:
        """Consume token of expected type or raise error"""
        if not self.check(token_type):
            raise ParseError(message, self.current)
        return self.advance()

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> List[Optional[Stmt]]:
        """Parse entire program; failed declarations leave a None slot"""
        statements: List[Optional[Stmt]] = []

        while not self.at_end():
            statements.append(self.parse_declaration())

        return statements

    def parse_declaration(self) -> Optional[Stmt]:
        try:
            if self.match(TT.VAR):
                return self.parse_var_declaration()
            return self.parse_statement()
        except ParseError as err:
            self.record(err)
        except RecursionError:
            self.record(ParseError("Expression nesting too deep.", self.current))

        self.synchronize()
        return None

    def record(self, err: ParseError) -> None:
        self.errors.append(err)
        if self.reporter is not None:
            self.reporter(err.token, err.message)

    def synchronize(self) -> None:
        """Discard tokens until a statement boundary looks plausible"""
        self.advance()

        while not self.at_end():
            if self.previous().type == TT.SEMICOLON:
                return
            if self.current.type in STATEMENT_STARTS:
                return
            self.advance()

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_var_declaration(self) -> VarStmt:
        """var IDENT ( '=' expr )? ';'   ('var' already consumed)"""
        name = self.expect(TT.IDENTIFIER, "Expect variable name.")

        initializer: Optional[Expr] = None
        if self.match(TT.EQUAL):
            initializer = self.parse_expr()

        self.expect(TT.SEMICOLON, "Expect ';' after variable declaration.")
        return VarStmt(name, initializer)

    def parse_statement(self) -> Stmt:
        if self.match(TT.PRINT):
            return self.parse_print_stmt()
        return self.parse_expression_stmt()

    def parse_print_stmt(self) -> PrintStmt:
        value = self.parse_expr()
        self.expect(TT.SEMICOLON, "Expect ';' after value.")
        return PrintStmt(value)

    def parse_expression_stmt(self) -> ExpressionStmt:
        expr = self.parse_expr()
        self.expect(TT.SEMICOLON, "Expect ';' after expression.")
        return ExpressionStmt(expr)

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expr(self) -> Expr:
        return self.parse_equality()

    def _parse_left_assoc(self, operand: Callable[[], Expr], *ops: TT) -> Expr:
        left = operand()

        while self.match(*ops):
            op = self.previous()
            right = operand()
            left = Binary(left, op, right)

        return left

    def parse_equality(self) -> Expr:
        """comparison ( ('!=' | '==') comparison )*"""
        return self._parse_left_assoc(self.parse_comparison, TT.BANG_EQUAL, TT.EQUAL_EQUAL)

    def parse_comparison(self) -> Expr:
        """term ( ('>' | '>=' | '<' | '<=') term )*"""
        return self._parse_left_assoc(
            self.parse_term, TT.GREATER, TT.GREATER_EQUAL, TT.LESS, TT.LESS_EQUAL
        )

    def parse_term(self) -> Expr:
        """factor ( ('-' | '+') factor )*"""
        return self._parse_left_assoc(self.parse_factor, TT.MINUS, TT.PLUS)

    def parse_factor(self) -> Expr:
        """unary ( ('/' | '*') unary )*"""
        return self._parse_left_assoc(self.parse_unary, TT.SLASH, TT.STAR)

    def parse_unary(self) -> Expr:
        """('-' | '!') unary | primary"""
        ops: List[Tok] = []
        while self.match(TT.MINUS, TT.BANG):
            ops.append(self.previous())

        # innermost operator applies first
        expr = self.parse_primary()
        for op in reversed(ops):
            expr = Unary(op, expr)
        return expr

    def parse_primary(self) -> Expr:
        if self.match(TT.FALSE):
            return Literal(False)
        if self.match(TT.TRUE):
            return Literal(True)
        if self.match(TT.NIL):
            return Literal(None)
        if self.match(TT.NUMBER, TT.STRING):
            return Literal(self.previous().literal)
        if self.match(TT.IDENTIFIER):
            return Variable(self.previous())
        if self.match(TT.LEFT_PAREN):
            inner = self.parse_expr()
            self.expect(TT.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(inner)

        raise ParseError("Expect expression.", self.current)


def parse_source(source: str) -> List[Stmt]:
    """
    Parse Lox source code to a statement list.

    Fail-fast variant: raises the first LexError or ParseError instead of
    reporting and recovering.
    """
    from .lexer_rd import Lexer

    lexer = Lexer(source)
    tokens = lexer.tokenize()
    if lexer.errors:
        raise lexer.errors[0]

    parser = Parser(tokens)
    statements = parser.parse()
    if parser.errors:
        raise parser.errors[0]

    return [stmt for stmt in statements if stmt is not None]


def parse_expr_fragment(source: str) -> Expr:
    """
    Parse a standalone expression fragment (no trailing ';').
    """
    from .lexer_rd import Lexer

    lexer = Lexer(source)
    tokens = lexer.tokenize()
    if lexer.errors:
        raise lexer.errors[0]

    parser = Parser(tokens)
    expr = parser.parse_expr()

    if not parser.at_end():
        raise ParseError("Unexpected tokens after expression.", parser.current)

    return expr

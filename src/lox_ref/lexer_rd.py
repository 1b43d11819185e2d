"""
Lexer for Lox - Recursive Descent Parser front end

Tokenizes Lox source code into a stream of tokens.

Features:
- Single-pass tokenization, one character of lookahead (two for numbers)
- Line tracking
- Error recovery: bad input is recorded and scanning continues
"""

from typing import Callable, List, Optional

from .token_types import KEYWORDS, TT, LiteralValue, Tok

ErrorSink = Callable[[int, str], None]


class LexError(Exception):
    """Lexical analysis error"""

    def __init__(self, message: str, line: int):
        self.message = message
        self.line = line
        super().__init__(f"{message} at line {line}")


# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Lox scanner.

    Keeps three cursors: start of the current lexeme, current read
    position and current line. Errors never abort the scan; they are
    collected in ``errors`` and forwarded to ``reporter`` when given.
    """

    KEYWORDS = KEYWORDS

    SINGLE_CHAR = {
        '(': TT.LEFT_PAREN,
        ')': TT.RIGHT_PAREN,
        '{': TT.LEFT_BRACE,
        '}': TT.RIGHT_BRACE,
        ',': TT.COMMA,
        '.': TT.DOT,
        '-': TT.MINUS,
        '+': TT.PLUS,
        ';': TT.SEMICOLON,
        '*': TT.STAR,
    }

    # char -> (kind when followed by '=', kind otherwise)
    WITH_EQUAL = {
        '!': (TT.BANG_EQUAL, TT.BANG),
        '=': (TT.EQUAL_EQUAL, TT.EQUAL),
        '<': (TT.LESS_EQUAL, TT.LESS),
        '>': (TT.GREATER_EQUAL, TT.GREATER),
    }

    def __init__(self, source: str, reporter: Optional[ErrorSink] = None):
        self.source = source
        self.start = 0
        self.pos = 0
        self.line = 1
        self.tokens: List[Tok] = []
        self.errors: List[LexError] = []
        self.reporter = reporter

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list ending in EOF"""
        while not self.at_end():
            self.start = self.pos
            self.scan_token()

        self.tokens.append(Tok(TT.EOF, '', None, self.line))
        return self.tokens

    def scan_token(self):
        """Scan next token"""
        ch = self.advance()

        if ch in self.SINGLE_CHAR:
            self.emit(self.SINGLE_CHAR[ch])
            return

        if ch in self.WITH_EQUAL:
            double, single = self.WITH_EQUAL[ch]
            self.emit(double if self.match('=') else single)
            return

        if ch == '/':
            if self.match('/'):
                self.skip_comment()
            else:
                self.emit(TT.SLASH)
            return

        if ch in (' ', '\r', '\t'):
            return

        if ch == '\n':
            self.line += 1
            return

        if ch == '"':
            self.scan_string()
            return

        if self.is_digit(ch):
            self.scan_number()
            return

        if self.is_alpha(ch):
            self.scan_identifier()
            return

        self.error("Unexpected character.")

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_string(self):
        """Scan string literal: "..." (no escape processing)"""
        while not self.at_end() and self.peek() != '"':
            if self.peek() == '\n':
                self.line += 1
            self.advance()

        if self.at_end():
            self.error("Unterminated string.")
            return

        self.advance()  # Closing quote
        self.emit(TT.STRING, self.source[self.start + 1:self.pos - 1])

    def scan_number(self):
        """Scan number literal: digits, optionally '.' followed by digits"""
        while self.is_digit(self.peek()):
            self.advance()

        # A trailing '.' is left for the next token
        if self.peek() == '.' and self.is_digit(self.peek(1)):
            self.advance()
            while self.is_digit(self.peek()):
                self.advance()

        self.emit(TT.NUMBER, float(self.source[self.start:self.pos]))

    def scan_identifier(self):
        """Scan identifier or keyword"""
        while self.is_alnum(self.peek()):
            self.advance()

        text = self.source[self.start:self.pos]
        self.emit(self.KEYWORDS.get(text, TT.IDENTIFIER))

    # ========================================================================
    # Utilities
    # ========================================================================

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self) -> str:
        """Consume one character and return it"""
        ch = self.source[self.pos]
        self.pos += 1
        return ch

    def match(self, expected: str) -> bool:
        """Consume the next character only if it is ``expected``"""
        if self.at_end() or self.source[self.pos] != expected:
            return False
        self.pos += 1
        return True

    def skip_comment(self):
        """Skip comment until end of line (newline itself is left)"""
        while self.peek() != '\n' and not self.at_end():
            self.advance()

    @staticmethod
    def is_digit(ch: str) -> bool:
        return '0' <= ch <= '9'

    @staticmethod
    def is_alpha(ch: str) -> bool:
        return ('a' <= ch <= 'z') or ('A' <= ch <= 'Z') or ch == '_'

    @classmethod
    def is_alnum(cls, ch: str) -> bool:
        return cls.is_alpha(ch) or cls.is_digit(ch)

    def emit(self, token_type: TT, literal: Optional[LiteralValue] = None):
        """Emit a token for the current lexeme"""
        tok = Tok(
            type=token_type,
            lexeme=self.source[self.start:self.pos],
            literal=literal,
            line=self.line,
        )
        self.tokens.append(tok)

    def error(self, message: str):
        err = LexError(message, self.line)
        self.errors.append(err)
        if self.reporter is not None:
            self.reporter(self.line, message)


def tokenize(source: str, reporter: Optional[ErrorSink] = None) -> List[Tok]:
    """Convenience function to tokenize source"""
    lexer = Lexer(source, reporter=reporter)
    return lexer.tokenize()

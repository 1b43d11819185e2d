"""prompt_toolkit lexer for live Lox syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import Lexer as LoxScanner
from .token_types import KEYWORDS, TT

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "constant": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
}

# Token type → highlight group.
_TT_GROUP = {tt: "keyword" for tt in KEYWORDS.values()}
_TT_GROUP.update({
    TT.TRUE: "constant",
    TT.FALSE: "constant",
    TT.NIL: "constant",
    TT.NUMBER: "number",
    TT.STRING: "string",
    TT.IDENTIFIER: "identifier",
    TT.PLUS: "operator",
    TT.MINUS: "operator",
    TT.STAR: "operator",
    TT.SLASH: "operator",
    TT.BANG: "operator",
    TT.BANG_EQUAL: "operator",
    TT.EQUAL: "operator",
    TT.EQUAL_EQUAL: "operator",
    TT.GREATER: "operator",
    TT.GREATER_EQUAL: "operator",
    TT.LESS: "operator",
    TT.LESS_EQUAL: "operator",
    TT.LEFT_PAREN: "punctuation",
    TT.RIGHT_PAREN: "punctuation",
    TT.LEFT_BRACE: "punctuation",
    TT.RIGHT_BRACE: "punctuation",
    TT.COMMA: "punctuation",
    TT.DOT: "punctuation",
    TT.SEMICOLON: "punctuation",
})


def _gap(text: str) -> StyleAndTextTuples:
    """Untokenized text between tokens: whitespace, bad characters or a comment."""
    idx = text.find("//")
    if idx < 0:
        return [("", text)]

    spans: StyleAndTextTuples = []
    if idx > 0:
        spans.append(("", text[:idx]))
    spans.append((GROUP_STYLE["comment"], text[idx:]))
    return spans


def highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    # errors are ignored here; unscannable text is left unstyled
    tokens = LoxScanner(text).tokenize()

    result: StyleAndTextTuples = []
    pos = 0

    for tok in tokens:
        if tok.type == TT.EOF or not tok.lexeme:
            continue

        # Find actual position of this token in the line from pos onwards.
        idx = text.find(tok.lexeme, pos)
        if idx < 0:
            continue

        if idx > pos:
            result.extend(_gap(text[pos:idx]))

        style = GROUP_STYLE.get(_TT_GROUP.get(tok.type, ""), "")
        result.append((style, tok.lexeme))
        pos = idx + len(tok.lexeme)

    if pos < len(text):
        result.extend(_gap(text[pos:]))

    return result if result else [("", text)]


class LoxLexer(Lexer):
    """prompt_toolkit Lexer that highlights Lox source using the scanner."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line

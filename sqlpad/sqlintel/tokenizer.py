"""Forgiving SQL tokenizer used by the autocomplete context resolver.

The tokenizer never fails: unterminated strings, comments and quoted
identifiers simply run to the end of the buffer. Every character of the input
belongs to exactly one token, so joining ``text[token.start:token.end]`` over
the result reproduces the original text.
"""

from __future__ import annotations

import string

from .models import Token, TokenType

BOUNDARY_KEYWORDS: frozenset[str] = frozenset(
    {
        "SELECT",
        "FROM",
        "WHERE",
        "PREWHERE",
        "GROUP",
        "ORDER",
        "BY",
        "HAVING",
        "JOIN",
        "INNER",
        "LEFT",
        "RIGHT",
        "FULL",
        "CROSS",
        "ARRAY",
        "SAMPLE",
        "FORMAT",
        "SETTINGS",
        "LIMIT",
        "OFFSET",
        "UNION",
        "INTERSECT",
        "EXCEPT",
        "INSERT",
        "UPDATE",
        "DELETE",
        "SET",
        "VALUES",
        "CREATE",
        "ALTER",
        "DROP",
        "TABLE",
        "VIEW",
        "MATERIALIZED",
        "DATABASE",
        "ENGINE",
        "TO",
        "AS",
        "IF",
        "EXISTS",
        "PARTITION",
        "ON",
        "USING",
    }
)

_WORD_START = frozenset(string.ascii_letters + "_")
_WORD_CHARS = frozenset(string.ascii_letters + string.digits + "_")
_DIGITS = frozenset(string.digits)
_NUMBER_CHARS = frozenset(string.digits + ".")
_OPERATOR_CHARS = frozenset("=<>!+-*/%")
_QUOTES = frozenset("'\"")


def tokenize(text: str) -> list[Token]:
    """Split ``text`` into spanned tokens."""

    tokens: list[Token] = []
    length = len(text)
    i = 0
    while i < length:
        char = text[i]
        start = i

        if char.isspace():
            while i < length and text[i].isspace():
                i += 1
            tokens.append(Token(TokenType.WHITESPACE, text[start:i], start, i))
            continue

        if text.startswith("--", i):
            end = text.find("\n", i)
            i = length if end == -1 else end
            tokens.append(Token(TokenType.COMMENT, text[start:i], start, i))
            continue

        if text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = length if end == -1 else end + 2
            tokens.append(Token(TokenType.COMMENT, text[start:i], start, i))
            continue

        if char in _QUOTES:
            i = _scan_quoted(text, i, char)
            tokens.append(Token(TokenType.STRING, text[start:i], start, i))
            continue

        if char == "`":
            i = _scan_quoted(text, i, "`")
            closed = i - start >= 2 and text[i - 1] == "`" and not _escaped(text, start + 1, i - 1)
            inner = text[start + 1 : i - 1] if closed else text[start + 1 : i]
            tokens.append(Token(TokenType.IDENTIFIER, _unescape(inner), start, i))
            continue

        if char in _DIGITS:
            while i < length and text[i] in _NUMBER_CHARS:
                i += 1
            tokens.append(Token(TokenType.NUMBER, text[start:i], start, i))
            continue

        if char == ".":
            tokens.append(Token(TokenType.DOT, ".", i, i + 1))
            i += 1
            continue

        if char == ",":
            tokens.append(Token(TokenType.COMMA, ",", i, i + 1))
            i += 1
            continue

        if char in "()":
            tokens.append(Token(TokenType.PAREN, char, i, i + 1))
            i += 1
            continue

        if char in _OPERATOR_CHARS:
            while i < length and text[i] in _OPERATOR_CHARS:
                i += 1
            tokens.append(Token(TokenType.OPERATOR, text[start:i], start, i))
            continue

        if char in _WORD_START:
            while i < length and text[i] in _WORD_CHARS:
                i += 1
            value = text[start:i]
            kind = TokenType.KEYWORD if value.upper() in BOUNDARY_KEYWORDS else TokenType.IDENTIFIER
            tokens.append(Token(kind, value, start, i))
            continue

        tokens.append(Token(TokenType.UNKNOWN, char, i, i + 1))
        i += 1

    return tokens


def is_word(token: Token | None) -> bool:
    """True for tokens that can name a database, table, column or alias."""

    return token is not None and token.type in (TokenType.IDENTIFIER, TokenType.KEYWORD)


def _scan_quoted(text: str, index: int, quote: str) -> int:
    """Return the offset just past the quoted run opened at ``index``."""

    length = len(text)
    i = index + 1
    while i < length and text[i] != quote:
        if text[i] == "\\":
            i += 1
        i += 1
    return min(i + 1, length)


def _escaped(text: str, start: int, index: int) -> bool:
    # Whether text[index] is consumed by an odd run of backslashes after start.
    count = 0
    i = index - 1
    while i >= start and text[i] == "\\":
        count += 1
        i -= 1
    return count % 2 == 1


def _unescape(value: str) -> str:
    if "\\" not in value:
        return value
    chars: list[str] = []
    i = 0
    while i < len(value):
        if value[i] == "\\" and i + 1 < len(value):
            i += 1
        chars.append(value[i])
        i += 1
    return "".join(chars)


__all__ = ["BOUNDARY_KEYWORDS", "is_word", "tokenize"]

"""Tokenizer for calculator expressions.

Recognition is an ordered list of recognizers tried at each cursor position.
The order carries the lexical precedence rules: date literals are tried before
plain numbers so ``2024-01-01`` never splits into ``2024 - 01 - 01``, and the
``now`` keyword is tried before anything that could consume letters.
"""

import logging
import math
import re
import string
from abc import ABC, abstractmethod
from collections.abc import Sequence

from typing_extensions import override

from timecalc import tokens as tk
from timecalc.duration import Duration
from timecalc.errors import (
    InvalidCharacter,
    InvalidDate,
    InvalidDuration,
    InvalidExpression,
    InvalidNumber,
)
from timecalc.tokens import Token, TokenKind
from timecalc.values import parse_datetime

logger = logging.getLogger(__name__)

Match = tuple[Token, int]

_WHITESPACE = re.compile(r"\s+")
_DATE_LITERAL = re.compile(
    r"\d{4}-\d{2}-\d{2}(?:T\d{2}(?::\d{2}(?::\d{2})?)?)?", re.IGNORECASE | re.ASCII
)
_WORD_CHAR = re.compile(r"\w", re.ASCII)
_DURATION_CHARS = re.compile(r"[A-Za-z0-9]*")
_NUMBER_LITERAL = re.compile(r"\d*(?:\.\d*)?", re.ASCII)

# A minus following one of these (or nothing) cannot be binary
_PREFIX_CONTEXT = frozenset({TokenKind.OPERATOR, TokenKind.UNARY_MINUS, TokenKind.LPAREN})

_SYMBOLS: dict[str, Token] = {
    "+": tk.operator("+"),
    "*": tk.operator("*"),
    "/": tk.operator("/"),
    "(": tk.LPAREN,
    ")": tk.RPAREN,
}


class Recognizer(ABC):
    """One lexical rule: claim a token at ``pos`` or decline with ``None``."""

    @abstractmethod
    def match(self, text: str, pos: int, previous: Sequence[Token]) -> Match | None:
        """Return the token found at ``pos`` and the cursor after it."""
        pass


class DateRecognizer(Recognizer):
    @override
    def match(self, text: str, pos: int, previous: Sequence[Token]) -> Match | None:
        if text[pos] not in string.digits:
            return None
        found = _DATE_LITERAL.match(text, pos)
        if found is None:
            return None
        lexeme = found.group()
        try:
            value = parse_datetime(lexeme)
        except ValueError:
            raise InvalidDate(
                lexeme, pos, hint="Dates are YYYY-MM-DD[THH[:MM[:SS]]], e.g. 2024-02-29T13:30"
            ) from None
        return tk.date_time(value), found.end()


class NowRecognizer(Recognizer):
    keyword = "now"

    @override
    def match(self, text: str, pos: int, previous: Sequence[Token]) -> Match | None:
        if not text.startswith(self.keyword, pos):
            return None
        end = pos + len(self.keyword)
        # "nowhere" is an identifier, not the keyword
        if end < len(text) and _WORD_CHAR.match(text, end):
            return None
        return tk.NOW, end


class DurationRecognizer(Recognizer):
    @override
    def match(self, text: str, pos: int, previous: Sequence[Token]) -> Match | None:
        if text[pos] not in "pP":
            return None
        end = _DURATION_CHARS.match(text, pos + 1).end()  # pyright: ignore[reportOptionalMemberAccess]
        lexeme = text[pos:end]
        try:
            value = Duration.parse(lexeme.upper())
        except ValueError:
            raise InvalidDuration(
                lexeme, pos, hint="Durations are ISO-8601, e.g. P1D, PT2H30M or P1Y2M3DT4H"
            ) from None
        return tk.duration(value), end


class SymbolRecognizer(Recognizer):
    """Operators and parentheses, deciding between unary and binary minus."""

    @override
    def match(self, text: str, pos: int, previous: Sequence[Token]) -> Match | None:
        char = text[pos]
        if char == "-":
            if not previous or previous[-1].kind in _PREFIX_CONTEXT:
                return tk.UNARY_MINUS, pos + 1
            return tk.operator("-"), pos + 1
        if char in _SYMBOLS:
            return _SYMBOLS[char], pos + 1
        return None


class NumberRecognizer(Recognizer):
    """Decimal numbers: digits with at most one decimal point."""

    @override
    def match(self, text: str, pos: int, previous: Sequence[Token]) -> Match | None:
        if text[pos] not in string.digits and text[pos] != ".":
            return None
        found = _NUMBER_LITERAL.match(text, pos)
        lexeme = found.group()  # pyright: ignore[reportOptionalMemberAccess]
        try:
            value = float(lexeme)
        except ValueError:
            raise InvalidNumber(lexeme, pos) from None
        if not math.isfinite(value):
            raise InvalidNumber(lexeme, pos, hint="Numbers must fit in a double")
        return tk.number(value), pos + len(lexeme)


RECOGNIZERS: tuple[Recognizer, ...] = (
    DateRecognizer(),
    NowRecognizer(),
    DurationRecognizer(),
    SymbolRecognizer(),
    NumberRecognizer(),
)


def tokenize(text: str, recognizers: Sequence[Recognizer] = RECOGNIZERS) -> list[Token]:
    """Split an expression into tokens.

    All whitespace is removed before scanning; error positions refer to the
    whitespace-free text.

    Raises:
        LexError: On the first character or literal that cannot be tokenized.
        InvalidExpression: If two operands follow each other with no operator
            or parenthesis between them, as in ``5now``.
    """
    source = _WHITESPACE.sub("", text)
    result: list[Token] = []
    pos = 0

    while pos < len(source):
        for recognizer in recognizers:
            found = recognizer.match(source, pos, result)
            if found is not None:
                token, pos = found
                if token.is_operand and result and result[-1].is_operand:
                    raise InvalidExpression(
                        f"{result[-1]} and {token} are not joined by an operator"
                    )
                result.append(token)
                break
        else:
            raise InvalidCharacter(source[pos], pos)

    logger.debug("tokenized %r into %s", text, " ".join(map(str, result)))
    return result

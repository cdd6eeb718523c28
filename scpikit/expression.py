"""Parsing of SCPI numeric-list and channel-list expressions.

An expression is the parenthesised program data of a parameter, for
example ``(1,3:5)`` (numeric list) or ``(@1!1:3!2,5)`` (channel list).
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from .errors import translate

DATA_TYPE_ERROR = -104
EXPRESSION_PARSING_ERROR = -170

_NUMBER = re.compile(
    r"[+-]?(?:\d+\.?\d*|\.\d+)(?P<exp>\s*[eE]\s*[+-]?\d+)?"
)


class ExpressionError(ValueError):
    """Raised when an expression cannot be parsed.

    ``code`` is the SCPI error number the failure corresponds to.
    """

    def __init__(self, code: int, detail: str) -> None:
        super().__init__(f"{translate(code)}: {detail}")
        self.code = code
        self.detail = detail


@dataclass(frozen=True)
class NumericEntry:
    """One entry of a numeric list: a single value or a range."""

    is_range: bool
    start: int | float
    stop: int | float


@dataclass(frozen=True)
class ChannelEntry:
    """One entry of a channel list: a channel spec or a range of them.

    For a single channel ``stop`` equals ``start``.
    """

    is_range: bool
    start: tuple[int, ...]
    stop: tuple[int, ...]

    @property
    def dimensions(self) -> int:
        return len(self.start)


class _Lexer:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def eos(self) -> bool:
        return self.pos >= len(self.text)

    def number(self) -> int | float | None:
        match = _NUMBER.match(self.text, self.pos)
        if match is None:
            return None
        self.pos = match.end()
        literal = re.sub(r"\s+", "", match.group(0))
        if "." in literal or match.group("exp"):
            return float(literal)
        return int(literal)

    def char(self, wanted: str) -> bool:
        if self.text.startswith(wanted, self.pos):
            self.pos += len(wanted)
            return True
        return False


class _NoMore(Exception):
    """Internal signal: the list has no entry at the requested index."""


def _body(expression: str) -> str:
    if len(expression) < 2 or expression[0] != "(" or expression[-1] != ")":
        raise ExpressionError(DATA_TYPE_ERROR, f"not an expression: {expression!r}")
    return expression[1:-1]


def _parse_error(detail: str) -> ExpressionError:
    return ExpressionError(EXPRESSION_PARSING_ERROR, detail)


def _numeric_range(lex: _Lexer) -> NumericEntry:
    start = lex.number()
    if start is None:
        raise _NoMore
    if lex.char(":"):
        stop = lex.number()
        if stop is None:
            raise _parse_error("missing range end")
        return NumericEntry(True, start, stop)
    return NumericEntry(False, start, start)


def numeric_list_entry(expression: str, index: int) -> NumericEntry | None:
    """Return entry ``index`` of a numeric list, or None if there is none."""
    lex = _Lexer(_body(expression))
    entry: NumericEntry | None = None
    try:
        for position in range(index + 1):
            entry = _numeric_range(lex)
            if position != index and not lex.char(","):
                if lex.eos():
                    return None
                raise _parse_error(f"unexpected text at offset {lex.pos}")
    except _NoMore:
        return None
    return entry


def numeric_list(expression: str) -> Iterator[NumericEntry]:
    """Yield every entry of a numeric list in order."""
    index = 0
    while (entry := numeric_list_entry(expression, index)) is not None:
        yield entry
        index += 1


def _channel_spec(lex: _Lexer) -> tuple[int, ...]:
    values: list[int] = []
    while (value := lex.number()) is not None:
        values.append(int(value))
        if not lex.char("!"):
            return tuple(values)
    if values:
        raise _parse_error("missing dimension after '!'")
    raise _parse_error(f"missing channel at offset {lex.pos}")


def _channel_range(lex: _Lexer) -> ChannelEntry:
    start = _channel_spec(lex)
    if lex.char(":"):
        stop = _channel_spec(lex)
        if len(start) != len(stop):
            raise _parse_error("range ends have different dimensions")
        return ChannelEntry(True, start, stop)
    return ChannelEntry(False, start, start)


def channel_list_entry(expression: str, index: int) -> ChannelEntry | None:
    """Return entry ``index`` of a channel list, or None if there is none."""
    lex = _Lexer(_body(expression))
    if not lex.char("@"):
        raise _parse_error("channel list must start with '@'")
    entry: ChannelEntry | None = None
    for position in range(index + 1):
        entry = _channel_range(lex)
        if position != index and not lex.char(","):
            if lex.eos():
                return None
            raise _parse_error(f"unexpected text at offset {lex.pos}")
    return entry


def channel_list(expression: str) -> Iterator[ChannelEntry]:
    """Yield every entry of a channel list in order."""
    index = 0
    while (entry := channel_list_entry(expression, index)) is not None:
        yield entry
        index += 1
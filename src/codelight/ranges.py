"""Line-range expressions for code block highlighting.

A range spec is a comma-separated list of tokens, each either a single
1-based line number (``"4"``) or an inclusive ``lower~upper`` range
(``"1~3"``).  ``"1~3,5"`` resolves to ``{1, 2, 3, 5}``.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

_INT = re.compile(r"\d+", re.ASCII)


class InvalidRangeError(ValueError):
    """A range spec token is malformed or inverted."""

    def __init__(self, token: str, spec: str, reason: str) -> None:
        self.token = token
        self.spec = spec
        self.reason = reason
        super().__init__(f"Invalid line range token {token!r} in {spec!r}: {reason}")


class EmptySpecError(ValueError):
    """A range spec selects no lines."""

    def __init__(self, spec: str) -> None:
        self.spec = spec
        super().__init__(f"Line range spec {spec!r} selects no lines")


def _parse_line_number(part: str, token: str, spec: str) -> int:
    text = part.strip()
    if not _INT.fullmatch(text):
        raise InvalidRangeError(token, spec, f"{text!r} is not a line number")
    number = int(text)
    if number < 1:
        raise InvalidRangeError(token, spec, "line numbers start at 1")
    return number


def parse_token(token: str, spec: str | None = None) -> range:
    """Parse one token into the inclusive range of lines it selects.

    Args:
        token: ``"N"`` or ``"lower~upper"``; surrounding whitespace is ignored.
        spec: The full spec the token came from, for error messages.

    Raises:
        InvalidRangeError: Non-numeric parts, an empty token, more than one
            ``~``, a line number below 1, or ``lower > upper``.
    """
    source = token if spec is None else spec
    parts = token.split("~")
    if len(parts) > 2:
        raise InvalidRangeError(token, source, "expected at most one '~'")

    if len(parts) == 2:
        lower = _parse_line_number(parts[0], token, source)
        upper = _parse_line_number(parts[1], token, source)
        if lower > upper:
            raise InvalidRangeError(
                token, source, f"lower bound {lower} exceeds upper bound {upper}"
            )
        return range(lower, upper + 1)

    number = _parse_line_number(parts[0], token, source)
    return range(number, number + 1)


def split_tokens(spec: str) -> list[str]:
    """Split *spec* on commas, or return ``[]`` for a blank spec."""
    if not spec.strip():
        return []
    return spec.split(",")


def parse_ranges(spec: str) -> list[range]:
    """Parse *spec* into one inclusive range per token, without expanding.

    Raises:
        InvalidRangeError: On the first malformed or inverted token.
    """
    return [parse_token(token, spec) for token in split_tokens(spec)]


def resolve_lines(ranges: list[range], line_count: int) -> frozenset[int]:
    """Expand *ranges* to line numbers, dropping lines past *line_count*.

    Expansion is bounded by the block, so ``"1~1000000000"`` on a three-line
    block costs three lines.
    """
    lines: set[int] = set()
    for selected in ranges:
        lines.update(range(selected.start, min(selected.stop, line_count + 1)))
    return frozenset(lines)


def parse_range_spec(spec: str) -> frozenset[int]:
    """Resolve *spec* to the set of line numbers it selects.

    Token order and overlaps do not matter: ``"1,2~3"`` and ``"2~3,1"``
    resolve to the same set.  A blank spec resolves to the empty set;
    callers decide whether that is an error (see ``EmptySpecError``).
    Every selected line is materialised; annotating a block should go
    through ``resolve_lines`` instead.

    Raises:
        InvalidRangeError: On the first malformed or inverted token.
    """
    lines: set[int] = set()
    for selected in parse_ranges(spec):
        lines.update(selected)
    logger.debug("Resolved line spec %r to %d lines", spec, len(lines))
    return frozenset(lines)


def sorted_lines(spec: str) -> tuple[int, ...]:
    """Return the lines selected by *spec* in ascending order."""
    return tuple(sorted(parse_range_spec(spec)))

"""Line-by-line highlighting of rendered code blocks.

``annotate`` wraps each line of a code block's inner markup in
``<span class="line">``, and each line selected by a range spec in
``<span class="line highlighted {style_tag}">``.

Public contract:

- Lines are split on ``"\\n"`` exactly, so a trailing newline yields a final
  empty line.  Output always holds one wrapper per input line, in order.
- Wrapped lines are joined with *separator*, ``""`` by default.  ``"\\n"``
  keeps the block's original line breaks.
- Line numbers beyond the block are ignored.
- A blank range spec highlights nothing by default
  (``empty_spec="ignore"``); ``empty_spec="error"`` raises
  ``EmptySpecError`` instead.
- Line contents are never escaped or unescaped.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from codelight.config import DEFAULT_STYLE_TAG
from codelight.ranges import EmptySpecError, parse_ranges, resolve_lines
from codelight.tag_balance import balance_lines

if TYPE_CHECKING:
    from collections.abc import Collection

    from codelight.config import EmptySpecPolicy

logger = logging.getLogger(__name__)

LINE_CLASS = "line"
HIGHLIGHTED_CLASS = "highlighted"


def split_block(raw_block_markup: str) -> list[str]:
    """Split code block markup into lines on ``"\\n"``."""
    return raw_block_markup.split("\n")


def wrap_line(line: str, *, highlighted: bool, style_tag: str) -> str:
    """Wrap one line as plain or highlighted."""
    classes = LINE_CLASS
    if highlighted:
        classes = f"{LINE_CLASS} {HIGHLIGHTED_CLASS} {style_tag}".rstrip()
    return f'<span class="{classes}">{line}</span>'


def wrap_lines(
    lines: list[str],
    selected: Collection[int],
    style_tag: str,
) -> list[str]:
    """Wrap *lines*, highlighting the 1-based positions in *selected*."""
    return [
        wrap_line(line, highlighted=number in selected, style_tag=style_tag)
        for number, line in enumerate(lines, start=1)
    ]


def annotate(
    raw_block_markup: str,
    range_spec: str,
    style_tag: str | None = None,
    *,
    separator: str = "",
    balance_tags: bool = True,
    empty_spec: EmptySpecPolicy = "ignore",
) -> str:
    """Wrap every line of a code block, highlighting those in *range_spec*.

    Args:
        raw_block_markup: Inner markup of the code block, newline-separated.
        range_spec: Comma-separated line numbers and ``lower~upper`` ranges.
        style_tag: Extra class for highlighted lines.  ``None`` falls back to
            ``DEFAULT_STYLE_TAG``.
        separator: Joins the wrapped lines.  ``""`` (legacy) or ``"\\n"``.
        balance_tags: Close and re-open inline elements that straddle a line
            break so each line wrapper is well-formed.
        empty_spec: ``"ignore"`` annotates zero lines for a blank spec;
            ``"error"`` raises ``EmptySpecError``.

    Returns:
        The reassembled markup.

    Raises:
        InvalidRangeError: A token in *range_spec* is malformed or inverted.
        EmptySpecError: *range_spec* is blank and *empty_spec* is ``"error"``.
    """
    ranges = parse_ranges(range_spec)
    if not ranges and empty_spec == "error":
        raise EmptySpecError(range_spec)

    tag = DEFAULT_STYLE_TAG if style_tag is None else style_tag
    lines = split_block(raw_block_markup)
    if balance_tags:
        lines = balance_lines(lines)
    selected = resolve_lines(ranges, len(lines))

    logger.debug(
        "Annotating %d lines, %d selected, style %r", len(lines), len(selected), tag
    )
    return separator.join(wrap_lines(lines, selected, tag))

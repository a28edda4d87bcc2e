"""Per-line tag balancing for line-wrapped code blocks.

Syntax highlighters emit one ``<span>`` per token, and a token such as a
block comment or a triple-quoted string can run across several lines.
Wrapping each line in its own ``<span class="line">`` would then produce
overlapping elements.  ``balance_lines`` closes every element still open at
the end of a line and re-opens it (with its original attributes) at the
start of the next, so each line is self-contained.

Tags inside HTML comments, including comments that run across lines, are
not counted.
"""

from __future__ import annotations

import re

# A comment (possibly left open at the end of the line), or a start, end or
# self-closing tag.  Quoted attribute values may contain ``>``.  Doctypes
# never match because a tag name must start with a letter.
_TAG = re.compile(
    r"<!--(?:.*?-->|(?P<open_comment>.*)$)"
    r"|<(?P<closing>/?)(?P<name>[A-Za-z][A-Za-z0-9:-]*)\b"
    r"""(?:"[^"]*"|'[^']*'|[^'">])*?(?P<self_closing>/?)>"""
)
_COMMENT_END = "-->"

VOID_ELEMENTS: frozenset[str] = frozenset(
    (
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    )
)


def _track_tags(line: str, stack: list[tuple[str, str]], in_comment: bool) -> bool:
    """Update *stack* of ``(name, start_tag)`` with the tags found in *line*.

    Returns whether *line* ends inside an unterminated comment.
    """
    pos = 0
    if in_comment:
        end = line.find(_COMMENT_END)
        if end == -1:
            return True
        pos = end + len(_COMMENT_END)

    for match in _TAG.finditer(line, pos):
        if match.group("open_comment") is not None:
            return True
        name = match.group("name")
        if name is None:
            continue
        name = name.lower()
        if name in VOID_ELEMENTS or match.group("self_closing"):
            continue
        if not match.group("closing"):
            stack.append((name, match.group(0)))
            continue
        # Close the innermost matching element (and anything opened inside
        # it).  Stray end tags with no open element are left alone.
        for idx in range(len(stack) - 1, -1, -1):
            if stack[idx][0] == name:
                del stack[idx:]
                break
    return False


def balance_lines(lines: list[str]) -> list[str]:
    """Make every line in *lines* a well-formed fragment.

    Args:
        lines: Code block markup already split on newlines.

    Returns:
        A list of the same length where elements left open at the end of
        a line are closed there and re-opened at the start of the next.
    """
    stack: list[tuple[str, str]] = []
    balanced: list[str] = []
    in_comment = False
    for line in lines:
        reopen = "".join(start_tag for _, start_tag in stack)
        in_comment = _track_tags(line, stack, in_comment)
        close = "".join(f"</{name}>" for name, _ in reversed(stack))
        balanced.append(f"{reopen}{line}{close}")
    return balanced

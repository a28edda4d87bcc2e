"""Whole-page post-processing of rendered site HTML.

Applies the page-level touches a rendered post needs before it is served:

- every ``<pre>`` gets the pending class (``all-new``);
- each ``.lines-highlight`` directive line-annotates the nearest preceding
  ``.highlight`` code block and clears that block's pending class;
- console prompt glyphs (``❯``) lose the highlighter's error class and gain
  ``browser-prompt``;
- the sidebar link pointing at the current page marks its parent ``active``.

A directive looks like::

    <div class="lines-highlight" data-lines="1~3,5" data-class="focus"></div>

and sits after the code block it refers to.

Annotated blocks are spliced in after serialisation: the target node is
replaced by a unique placeholder text node, because selectolax escapes HTML
when replacing nodes with strings.
"""

from __future__ import annotations

import html as html_lib
import logging
import re
from dataclasses import dataclass
from typing import Any
from uuid import uuid4

from selectolax.lexbor import LexborHTMLParser

from codelight.annotator import annotate
from codelight.config import Settings, get_settings
from codelight.ranges import EmptySpecError, InvalidRangeError

logger = logging.getLogger(__name__)

# The <html>, <head> and <body> start tags are all optional in a document.
_FULL_DOCUMENT = re.compile(r"<(?:!doctype|html|head|body)[\s>]", re.IGNORECASE)


@dataclass(frozen=True)
class LineDirective:
    """A ``{lines, class}`` directive read from a directive element."""

    lines: str
    style_tag: str | None = None

    @classmethod
    def from_attributes(cls, attributes: dict[str, str | None]) -> LineDirective | None:
        """Build a directive from ``data-lines`` / ``data-class``.

        Returns ``None`` when ``data-lines`` is absent.
        """
        lines = attributes.get("data-lines")
        if lines is None:
            return None
        style_tag = attributes.get("data-class") or None
        return cls(lines=lines, style_tag=style_tag)


@dataclass
class _Splice:
    """Annotated markup waiting to replace a placeholder after serialisation."""

    placeholder: str
    markup: str


# ---------------------------------------------------------------------------
# Node helpers
# ---------------------------------------------------------------------------


def _is_element(node: Any) -> bool:
    tag = node.tag
    return bool(tag) and not tag.startswith(("-", "!", "_"))


def _classes(node: Any) -> list[str]:
    return (node.attributes.get("class") or "").split()


def _has_class(node: Any, name: str) -> bool:
    return name in _classes(node)


def _add_class(node: Any, name: str) -> None:
    classes = _classes(node)
    if name not in classes:
        classes.append(name)
        node.attrs["class"] = " ".join(classes)


def _remove_class(node: Any, name: str) -> None:
    classes = _classes(node)
    if name not in classes:
        return
    remaining = [c for c in classes if c != name]
    if remaining:
        node.attrs["class"] = " ".join(remaining)
    else:
        del node.attrs["class"]


def _start_tag(node: Any) -> str:
    """Serialise *node*'s start tag from its current attributes."""
    parts = [node.tag]
    for name, value in node.attributes.items():
        if value is None:
            parts.append(name)
        else:
            parts.append(f'{name}="{html_lib.escape(value, quote=True)}"')
    return f"<{' '.join(parts)}>"


# ---------------------------------------------------------------------------
# Code block lookup
# ---------------------------------------------------------------------------


def _preceding_code_block(directive: Any, block_class: str) -> Any | None:
    """Return the ``<pre>`` of the nearest preceding ``.highlight`` sibling."""
    sibling = directive.prev
    while sibling is not None:
        if _is_element(sibling) and _has_class(sibling, block_class):
            if sibling.tag == "pre":
                return sibling
            return sibling.css_first("pre")
        sibling = sibling.prev
    return None


def _annotation_target(pre: Any) -> Any:
    """Return the node whose inner HTML holds the code lines.

    Highlighters commonly emit ``<pre><code>...</code></pre>``; when the
    ``<pre>`` holds exactly one ``<code>`` element (ignoring whitespace text)
    the lines live inside it.
    """
    elements = []
    child = pre.child
    while child is not None:
        if _is_element(child):
            elements.append(child)
        elif (child.text_content or "").strip():
            return pre
        child = child.next
    if len(elements) == 1 and elements[0].tag == "code":
        return elements[0]
    return pre


# ---------------------------------------------------------------------------
# Page passes
# ---------------------------------------------------------------------------


def _mark_prompts(tree: LexborHTMLParser, settings: Settings) -> None:
    cfg = settings.page
    for span in tree.css("span"):
        if cfg.prompt_glyph in span.text(deep=True):
            _remove_class(span, cfg.prompt_error_class)
            _add_class(span, cfg.prompt_class)


def _mark_active_link(
    tree: LexborHTMLParser, current_path: str, settings: Settings
) -> None:
    cfg = settings.page
    for link in tree.css(cfg.sidebar_link_selector):
        if link.attributes.get("href") == current_path and link.parent is not None:
            _add_class(link.parent, cfg.active_class)


def _mark_pending(tree: LexborHTMLParser, settings: Settings) -> None:
    for pre in tree.css("pre"):
        _add_class(pre, settings.page.pending_class)


def _annotate_directives(tree: LexborHTMLParser, settings: Settings) -> list[_Splice]:
    """Annotate every directive's code block, returning pending splices.

    Directive-to-block pairs are all resolved before any node is replaced so
    that a replaced block never shifts another directive's sibling lookup.
    """
    cfg = settings.page
    pairs: list[tuple[int, LineDirective, Any]] = []
    claimed: set[int] = set()

    for idx, element in enumerate(tree.css(cfg.directive_selector)):
        directive = LineDirective.from_attributes(element.attributes)
        if directive is None:
            logger.warning(
                "Line directive %d has no data-lines attribute, skipping", idx
            )
            continue
        pre = _preceding_code_block(element, cfg.code_block_class)
        if pre is None:
            logger.warning(
                "Line directive %d (%r) has no preceding .%s block, skipping",
                idx,
                directive.lines,
                cfg.code_block_class,
            )
            continue
        if pre.mem_id in claimed:
            logger.warning(
                "Line directive %d (%r) targets an already annotated block, skipping",
                idx,
                directive.lines,
            )
            continue
        claimed.add(pre.mem_id)
        pairs.append((idx, directive, pre))

    splices: list[_Splice] = []
    for idx, directive, pre in pairs:
        target = _annotation_target(pre)
        try:
            annotated = annotate(
                target.inner_html or "",
                directive.lines,
                directive.style_tag or settings.annotator.default_style_tag,
                separator=settings.annotator.separator,
                balance_tags=settings.annotator.balance_tags,
                empty_spec=settings.annotator.empty_spec,
            )
        except (InvalidRangeError, EmptySpecError) as exc:
            logger.warning("Line directive %d left unannotated: %s", idx, exc)
            continue

        _remove_class(pre, cfg.pending_class)
        placeholder = f"codelight-{uuid4().hex}"
        splices.append(
            _Splice(
                placeholder=placeholder,
                markup=f"{_start_tag(target)}{annotated}</{target.tag}>",
            )
        )
        target.replace_with(placeholder)

    return splices


def find_directives(html: str, settings: Settings | None = None) -> list[LineDirective]:
    """Return the line directives in *html*, in document order.

    Directive elements without ``data-lines`` are skipped.
    """
    settings = settings or get_settings()
    tree = LexborHTMLParser(html)
    directives = []
    for element in tree.css(settings.page.directive_selector):
        directive = LineDirective.from_attributes(element.attributes)
        if directive is not None:
            directives.append(directive)
    return directives


def process_page(
    html: str,
    *,
    current_path: str | None = None,
    settings: Settings | None = None,
) -> str:
    """Apply all page-level transforms to rendered *html*.

    Args:
        html: A rendered page or page fragment.
        current_path: URL path of the page; enables sidebar link marking.
        settings: Overrides ``get_settings()``.

    Returns:
        The transformed HTML.  A full document (any of a doctype, ``<html>``,
        ``<head>`` or ``<body>``) comes back as a full document; a fragment
        comes back as a fragment.
    """
    if not html:
        return html

    settings = settings or get_settings()
    tree = LexborHTMLParser(html)

    _mark_prompts(tree, settings)
    if current_path is not None:
        _mark_active_link(tree, current_path, settings)
    _mark_pending(tree, settings)
    splices = _annotate_directives(tree, settings)

    if _FULL_DOCUMENT.search(html):
        result = tree.html
    else:
        body = tree.body
        result = body.inner_html if body is not None else tree.html
    if result is None:
        return html

    for splice in splices:
        result = result.replace(splice.placeholder, splice.markup, 1)

    logger.debug("Processed page: %d code blocks annotated", len(splices))
    return result

"""HTML serialization utilities for whitelisthtml nodes.

Output follows the HTML fragment serialization algorithm used by browsers
for ``outerHTML``/``innerHTML``: text is escaped, children of raw-text
elements are written verbatim, and void elements have no end tag.
"""

from __future__ import annotations

from typing import Any

from .constants import RAWTEXT_ELEMENTS, VOID_ELEMENTS


def _escape_text(text: str | None) -> str:
    if not text:
        return ""
    return text.replace("&", "&amp;").replace("\xa0", "&nbsp;").replace("<", "&lt;").replace(">", "&gt;")


def _escape_attr_value(value: str | None) -> str:
    if not value:
        return ""
    value = value.replace("&", "&amp;").replace("\xa0", "&nbsp;").replace('"', "&quot;")
    return value.replace("<", "&lt;").replace(">", "&gt;")


def serialize_start_tag(name: str, attrs: dict[str, str] | None = None) -> str:
    parts: list[str] = ["<", name]
    for key, value in (attrs or {}).items():
        parts.extend([" ", key, '="', _escape_attr_value(value), '"'])
    parts.append(">")
    return "".join(parts)


def serialize_end_tag(name: str) -> str:
    return f"</{name}>"


def _is_void(node: Any) -> bool:
    return node.namespace in (None, "html") and node.name in VOID_ELEMENTS


def to_html(node: Any) -> str:
    """Convert a node to an HTML string.

    Elements serialize as their outer markup; a fragment serializes as the
    concatenation of its children. Uses an explicit stack so arbitrarily deep
    trees don't hit the recursion limit.
    """
    parts: list[str] = []
    # Entries are (node or literal end tag, parent is a raw-text element).
    stack: list[tuple[Any, bool]] = [(node, False)]
    while stack:
        item, raw = stack.pop()
        if isinstance(item, str):
            parts.append(item)
            continue

        name: str = item.name
        if name == "#text":
            parts.append(item.data if raw else _escape_text(item.data))
            continue

        if name == "#comment":
            parts.append(f"<!--{item.data}-->")
            continue

        if name == "#document-fragment":
            stack.extend((child, False) for child in reversed(item.children))
            continue

        parts.append(serialize_start_tag(name, item.attrs))
        if _is_void(item):
            continue

        stack.append((serialize_end_tag(name), False))
        child_raw = item.namespace in (None, "html") and name in RAWTEXT_ELEMENTS
        stack.extend((child, child_raw) for child in reversed(item.children))

    return "".join(parts)

"""Whitelist sanitization of parsed HTML.

`sanitize_node()` builds a fresh tree from an input tree, keeping only what
the policy allows:

- text is copied as is (the serializer escapes it);
- comments are always removed;
- elements missing from the policy, and all SVG/MathML elements, become
  either their literal markup as text (`escape=True`) or nothing;
- allowed elements keep allowed attributes, each passed through its
  sanitizer, plus the allowed CSS declarations of their `style` attribute.

`sanitize()` is the string-in, string-out entry point.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Mapping

from .constants import STYLE_ATTRIBUTE
from .css import is_unsafe_value, serialize_declarations
from .node import ContainerNode, ElementNode, FragmentNode, Node, TextNode
from .parser import parse_fragment
from .policy import DEFAULT_POLICY, SanitizationPolicy, TagPolicy, build_policy
from .serialize import to_html
from .tokens import ParseError, StrictModeError

logger = logging.getLogger(__name__)


def _sanitize_declarations(node: ElementNode, policy: SanitizationPolicy) -> dict[str, str]:
    source = node.style
    if not source:
        return {}

    declarations: dict[str, str] = {}
    for prop in policy.css:
        value = source.get(prop)
        if value is None:
            continue
        if policy.check_css_values and is_unsafe_value(value):
            logger.debug("Dropping unsafe value of CSS property %r on <%s>", prop, node.name)
            continue
        declarations[prop] = value

    if logger.isEnabledFor(logging.DEBUG):
        for prop in source:
            if prop not in policy.css:
                logger.debug("Dropping CSS property %r on <%s>", prop, node.name)
    return declarations


def _copy_element(node: ElementNode, policy: SanitizationPolicy) -> ElementNode:
    name = node.name.lower()
    copy = ElementNode(name)

    for attr, value in node.attrs.items():
        key = attr.lower()
        if key == STYLE_ATTRIBUTE:
            continue
        sanitizer = policy.attribute_sanitizer(name, key)
        if sanitizer is None:
            logger.debug("Dropping attribute %r on <%s>", key, name)
            continue
        clean = sanitizer(value)
        if clean is None:
            logger.debug("Attribute sanitizer dropped %r on <%s>", key, name)
            continue
        if clean != value:
            logger.debug("Rewrote value of attribute %r on <%s>", key, name)
        copy.attrs[key] = clean

    declarations = _sanitize_declarations(node, policy)
    if declarations:
        copy.attrs[STYLE_ATTRIBUTE] = serialize_declarations(declarations)
    return copy


def _sanitize_shallow(node: Node, policy: SanitizationPolicy, escape: bool) -> tuple[Node, bool]:
    """Decide what a single node becomes.

    Returns the output node (without children) and whether the input's
    children should be sanitized into it.
    """
    name = node.name
    if name == "#text":
        return TextNode(node.data), False  # type: ignore[attr-defined]

    if name == "#comment":
        logger.debug("Dropping comment")
        return TextNode(""), False

    if isinstance(node, FragmentNode):
        return FragmentNode(), True

    if not isinstance(node, ElementNode):
        logger.debug("Dropping unsupported node %r", name)
        return TextNode(""), False

    if node.is_foreign or not policy.allows_tag(name):
        if escape:
            logger.debug("Escaping disallowed element <%s>", name)
            return TextNode(to_html(node)), False
        logger.debug("Dropping disallowed element <%s>", name)
        return TextNode(""), False

    return _copy_element(node, policy), True


def _is_anchor(node: Node) -> bool:
    return isinstance(node, ElementNode) and not node.is_foreign and node.name.lower() == "a"


def sanitize_node(node: Node, policy: SanitizationPolicy = DEFAULT_POLICY, *, escape: bool = True) -> Node:
    """Return a sanitized copy of `node` according to `policy`.

    The input tree is left untouched. Traversal uses an explicit stack, so
    deeply nested input can't exhaust the interpreter's recursion limit.

    HTML can't nest links: a parser closes the open `<a>` when it meets
    another one. An allowed `<a>` inside an allowed `<a>` (which html5lib
    can produce around foster-parented tables) is therefore unwrapped, its
    sanitized children kept in place.
    """
    root, descend = _sanitize_shallow(node, policy, escape)
    if not descend:
        return root

    # Entries are (input node, output parent, output parent is inside an <a>).
    stack: list[tuple[Node, ContainerNode, bool]] = [(node, root, _is_anchor(root))]  # type: ignore[list-item]
    while stack:
        source, target, in_anchor = stack.pop()
        for child in source.children:
            copy, descend = _sanitize_shallow(child, policy, escape)
            if in_anchor and _is_anchor(copy):
                logger.debug("Unwrapping nested <a>")
                copy = FragmentNode()
            target.append_child(copy)
            if descend:
                stack.append((child, copy, in_anchor or _is_anchor(copy)))  # type: ignore[arg-type]
    return root


def sanitize(
    html: str,
    *,
    policy: SanitizationPolicy = DEFAULT_POLICY,
    escape: bool = True,
    strict: bool = False,
) -> str:
    """Sanitize an HTML fragment and return it as HTML text.

    With `strict=True`, input with parse errors is rejected with
    StrictModeError instead of being sanitized.
    """
    errors: list[ParseError] | None = [] if strict else None
    fragment = parse_fragment(html, errors=errors)
    if errors:
        raise StrictModeError(errors[0])
    return to_html(sanitize_node(fragment, policy, escape=escape))


class Sanitizer:
    """A reusable policy and escape mode.

    `tags`, `css` and `urls` are passed to `build_policy()`; alternatively pass
    a ready-made `policy`.
    """

    __slots__ = ("escape", "policy")

    def __init__(
        self,
        escape: bool = True,
        tags: Mapping[str, TagPolicy] | None = None,
        css: Collection[str] | None = None,
        urls: Iterable[str] | None = None,
        *,
        policy: SanitizationPolicy | None = None,
        check_css_values: bool = False,
    ):
        self.escape = bool(escape)
        if policy is None:
            policy = build_policy(tags, css, urls, check_css_values=check_css_values)
        self.policy = policy

    def sanitize_string(self, html: str, *, strict: bool = False) -> str:
        return sanitize(html, policy=self.policy, escape=self.escape, strict=strict)

    def sanitize_node(self, node: Node) -> Node:
        return sanitize_node(node, self.policy, escape=self.escape)

"""Fragment parsing on top of html5lib.

html5lib builds an inert tree: nothing is executed and no resource is
fetched while parsing, so hostile input can be parsed safely. The html5lib
tree is walked once and rebuilt as whitelisthtml nodes.
"""

from __future__ import annotations

import html5lib
from html5lib.constants import E, namespaces, prefixes

from .node import CommentNode, ContainerNode, ElementNode, FragmentNode, TextNode
from .tokens import ParseError

_TREE_BUILDER = html5lib.getTreeBuilder("etree")
_TREE_WALKER = html5lib.getTreeWalker("etree")

_HTML_NAMESPACE = namespaces["html"]
_XMLNS_NAMESPACE = namespaces["xmlns"]


def _element_namespace(namespace: str | None) -> str | None:
    if namespace is None or namespace == _HTML_NAMESPACE:
        return None
    return prefixes.get(namespace, namespace)


def _attribute_name(namespace: str | None, name: str) -> str:
    # Foreign attributes come back split, e.g. (xlink namespace, "href").
    if namespace is None or (namespace == _XMLNS_NAMESPACE and name == "xmlns"):
        return name
    prefix = prefixes.get(namespace)
    return f"{prefix}:{name}" if prefix else name


def _append_text(parent: ContainerNode, data: str) -> None:
    children = parent.children
    if children and isinstance(children[-1], TextNode):
        children[-1].data += data
        return
    parent.append_child(TextNode(data))


def _convert_error(position, code: str, datavars) -> ParseError:
    line, column = position if position else (None, None)
    template = E.get(code)
    message = template % (datavars or {}) if template else code
    return ParseError(code, line=line, column=column, message=message)


def parse_fragment(html: str, *, container: str = "div", errors: list[ParseError] | None = None) -> FragmentNode:
    """Parse an HTML fragment as if it were the content of a `container` element.

    The result is a detached FragmentNode. When an `errors` list is passed,
    the parser's errors are appended to it in document order.
    """
    if not isinstance(html, str):
        msg = f"Expected HTML text as str, got {type(html).__name__}"
        raise TypeError(msg)

    # HTMLParser holds per-document state, so each call gets its own.
    parser = html5lib.HTMLParser(tree=_TREE_BUILDER, namespaceHTMLElements=False)
    tree = parser.parseFragment(html, container=container)

    if errors is not None:
        errors.extend(_convert_error(*error) for error in parser.errors)

    fragment = FragmentNode()
    open_nodes: list[ContainerNode] = [fragment]
    for token in _TREE_WALKER(tree):
        kind = token["type"]
        if kind in ("Characters", "SpaceCharacters"):
            _append_text(open_nodes[-1], token["data"])
        elif kind in ("StartTag", "EmptyTag"):
            attrs = {_attribute_name(ns, name): value for (ns, name), value in token["data"].items()}
            element = ElementNode(token["name"], attrs, namespace=_element_namespace(token["namespace"]))
            open_nodes[-1].append_child(element)
            if kind == "StartTag":
                open_nodes.append(element)
        elif kind == "EndTag":
            open_nodes.pop()
        elif kind == "Comment":
            open_nodes[-1].append_child(CommentNode(token["data"]))
    return fragment

from .node import CommentNode, ElementNode, FragmentNode, TextNode
from .parser import parse_fragment
from .policy import (
    DEFAULT_POLICY,
    SanitizationPolicy,
    UrlSanitizer,
    build_policy,
    identity,
    make_url_sanitizer,
    merge_attributes,
)
from .sanitize import Sanitizer, sanitize, sanitize_node
from .serialize import to_html
from .tokens import ParseError, StrictModeError

__all__ = [
    "DEFAULT_POLICY",
    "CommentNode",
    "ElementNode",
    "FragmentNode",
    "ParseError",
    "SanitizationPolicy",
    "Sanitizer",
    "StrictModeError",
    "TextNode",
    "UrlSanitizer",
    "build_policy",
    "identity",
    "make_url_sanitizer",
    "merge_attributes",
    "parse_fragment",
    "sanitize",
    "sanitize_node",
    "to_html",
]

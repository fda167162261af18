"""Inline CSS declaration handling.

Declarations are tokenized with tinycss2 so that quoting, escapes, comments
and ``!important`` are handled the way a browser's CSS parser would, rather
than by splitting on ``;`` and ``:``.
"""

from __future__ import annotations

import tinycss2

# Functions that fetch a resource or evaluate script in some user agent.
_UNSAFE_FUNCTIONS = frozenset({"url", "expression", "image", "image-set", "-webkit-image-set", "element"})

_BLOCK_TYPES = frozenset({"() block", "[] block", "{} block"})


def _has_error_token(tokens) -> bool:
    stack = list(tokens)
    while stack:
        token = stack.pop()
        if token.type == "error":
            return True
        if token.type == "function":
            stack.extend(token.arguments)
        elif token.type in _BLOCK_TYPES:
            stack.extend(token.content)
    return False


def _reparses_to(value: str) -> bool:
    # An unterminated string or url() is serialized without its closing
    # quote or parenthesis and would swallow whatever follows it.
    items = tinycss2.parse_declaration_list(f"x: {value};", skip_comments=True, skip_whitespace=True)
    return (
        len(items) == 1
        and items[0].type == "declaration"
        and not items[0].important
        and tinycss2.serialize(items[0].value).strip() == value
    )


def parse_declarations(text: str | None) -> dict[str, str]:
    """Parse the contents of a ``style`` attribute.

    Returns an ordered mapping of lowercase property name to serialized value.
    A later declaration of the same property replaces the earlier one, like the
    cascade within a single declaration block. Priority (``!important``) is
    not kept. Malformed declarations are skipped, including those whose value
    holds a bad string, a bad url or an unterminated string or url.
    """
    if not text:
        return {}

    declarations: dict[str, str] = {}
    for item in tinycss2.parse_declaration_list(text, skip_comments=True, skip_whitespace=True):
        if item.type != "declaration" or _has_error_token(item.value):
            continue
        value = tinycss2.serialize(item.value).strip()
        if not value or not _reparses_to(value):
            continue
        declarations.pop(item.lower_name, None)
        declarations[item.lower_name] = value
    return declarations


def serialize_declarations(declarations: dict[str, str]) -> str:
    return " ".join(f"{name}: {value};" for name, value in declarations.items())


def is_unsafe_value(value: str) -> bool:
    """Check a declaration value for resource loads or script."""
    if "javascript:" in "".join(value.split()).lower():
        return True

    stack = list(tinycss2.parse_component_value_list(value))
    while stack:
        token = stack.pop()
        if token.type == "url":
            return True
        if token.type == "function":
            if token.lower_name in _UNSAFE_FUNCTIONS:
                return True
            stack.extend(token.arguments)
        elif token.type in _BLOCK_TYPES:
            stack.extend(token.content)
    return False

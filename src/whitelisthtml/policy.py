"""Whitelist policy table.

A policy maps each allowed tag to the attributes it may carry, and each
attribute to the function that sanitizes its value. Anything not listed is
excluded. Policies are immutable once constructed and may be shared freely
between threads.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .constants import DEFAULT_CSS_PROPERTIES, DEFAULT_URL_PREFIXES, GLOBAL_ATTRIBUTES, PLAIN_TAGS

# Returns the sanitized value, or None to drop the attribute entirely.
AttributeSanitizer = Callable[[str], str | None]

TagPolicy = Mapping[str, AttributeSanitizer]


def identity(value: str) -> str:
    """Sanitizer for unconstrained attributes."""
    return value


@dataclass(frozen=True, slots=True)
class UrlSanitizer:
    """Sanitizer for URL-valued attributes (e.g. a[href], img[src]).

    A value is kept unchanged if it starts with one of `prefixes`, tested in
    order. Anything else, including relative URLs and `javascript:`/`data:`
    URLs, becomes the empty string. The attribute itself is kept.
    """

    prefixes: tuple[str, ...] = DEFAULT_URL_PREFIXES

    def __post_init__(self) -> None:
        # Accept lists from user code, normalize for internal use.
        if not isinstance(self.prefixes, tuple):
            object.__setattr__(self, "prefixes", tuple(self.prefixes))

    def __call__(self, value: str | None) -> str:
        if not value:
            return ""
        for prefix in self.prefixes:
            if value.startswith(prefix):
                return value
        return ""


def make_url_sanitizer(prefixes: Iterable[str]) -> UrlSanitizer:
    return UrlSanitizer(tuple(prefixes))


def merge_attributes(*maps: Mapping[str, AttributeSanitizer]) -> dict[str, AttributeSanitizer]:
    """Right-biased union: when several maps define an attribute, the last one wins."""
    merged: dict[str, AttributeSanitizer] = {}
    for attributes in maps:
        merged.update(attributes)
    return merged


@dataclass(frozen=True, slots=True)
class SanitizationPolicy:
    """An allow-list driven policy for sanitizing a parsed fragment.

    - Tags not in `tags` are disallowed. Tag names are matched lowercase.
    - Attributes not in `tags[tag]` are dropped. Allowed attributes are passed
      through their sanitizer.
    - Only the CSS properties in `css` survive in the `style` attribute. The
      `style` attribute is governed by `css` alone, never by `tags[tag]`.
    - With `check_css_values`, allowed properties whose value loads a
      resource or references script are dropped as well.

    `urls` records the URL prefixes the policy was built with.
    """

    tags: Mapping[str, TagPolicy]
    css: Collection[str] = DEFAULT_CSS_PROPERTIES
    urls: tuple[str, ...] = DEFAULT_URL_PREFIXES
    check_css_values: bool = field(default=False, kw_only=True)

    def __post_init__(self) -> None:
        # Freeze the tables so a shared policy can't be changed under a running sanitizer.
        tags = {str(tag).lower(): MappingProxyType(dict(attrs)) for tag, attrs in self.tags.items()}
        object.__setattr__(self, "tags", MappingProxyType(tags))

        # Keep the caller's order (it decides the order of serialized declarations), drop duplicates.
        css = tuple(dict.fromkeys(str(name).lower() for name in self.css))
        object.__setattr__(self, "css", css)

        if not isinstance(self.urls, tuple):
            object.__setattr__(self, "urls", tuple(self.urls))

    def allows_tag(self, name: str) -> bool:
        return name.lower() in self.tags

    def attribute_sanitizer(self, tag: str, attr: str) -> AttributeSanitizer | None:
        attributes = self.tags.get(tag.lower())
        if attributes is None:
            return None
        return attributes.get(attr)


def build_policy(
    tags: Mapping[str, TagPolicy] | None = None,
    css: Collection[str] | None = None,
    urls: Iterable[str] | None = None,
    *,
    check_css_values: bool = False,
) -> SanitizationPolicy:
    """Build a policy, filling in the small default whitelist for whatever is omitted."""
    url_prefixes = DEFAULT_URL_PREFIXES if urls is None else tuple(urls)

    if tags is None:
        global_attributes = {name: identity for name in GLOBAL_ATTRIBUTES}
        url_sanitizer = make_url_sanitizer(url_prefixes)
        tags = {
            "a": merge_attributes(
                global_attributes,
                {
                    "download": identity,
                    "href": url_sanitizer,
                    "hreflang": identity,
                    "ping": url_sanitizer,
                    "rel": identity,
                    "target": identity,
                    "type": identity,
                },
            ),
            "img": merge_attributes(
                global_attributes,
                {
                    "alt": identity,
                    "height": identity,
                    "src": url_sanitizer,
                    "width": identity,
                },
            ),
        }
        for name in PLAIN_TAGS:
            tags[name] = global_attributes

    if css is None:
        css = DEFAULT_CSS_PROPERTIES

    return SanitizationPolicy(tags=tags, css=css, urls=url_prefixes, check_css_values=check_css_values)


DEFAULT_POLICY: SanitizationPolicy = build_policy()

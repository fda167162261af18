"""HTML and policy constants

Element sets follow the WHATWG HTML serialization rules. Elements are kept
in lists/tuples to maintain consistent iteration order while still allowing
efficient lookups through the frozenset views.

References:
    - https://html.spec.whatwg.org/multipage/syntax.html#void-elements
    - https://html.spec.whatwg.org/multipage/parsing.html#serialising-html-fragments
"""

# HTML Element Sets
VOID_ELEMENTS = frozenset(
    [
        "area",
        "base",
        "basefont",
        "bgsound",
        "br",
        "col",
        "embed",
        "frame",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    ]
)

# Children of these elements are serialized verbatim, without escaping.
# "noscript" is absent because fragments are parsed with scripting disabled.
RAWTEXT_ELEMENTS = frozenset(
    [
        "style",
        "script",
        "xmp",
        "iframe",
        "noembed",
        "noframes",
        "plaintext",
    ]
)

# Policy defaults
DEFAULT_URL_PREFIXES = ("http://", "https://")

DEFAULT_CSS_PROPERTIES = ("border", "margin", "padding")

GLOBAL_ATTRIBUTES = ("dir", "lang", "title")

# Tags whose policy is the global attribute set only
PLAIN_TAGS = ("p", "div", "span", "br", "b", "i", "u")

# Name of the attribute that carries inline CSS declarations.
STYLE_ATTRIBUTE = "style"

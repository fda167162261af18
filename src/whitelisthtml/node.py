from __future__ import annotations

from .constants import STYLE_ATTRIBUTE
from .css import parse_declarations


class Node:
    """Base class for the DOM-like nodes the sanitizer reads and produces.

    - name: '#text', '#comment', '#document-fragment', or the element's tag name
    - parent: reference to the parent node (or None for a detached root)
    """

    __slots__ = ("name", "parent")

    def __init__(self, name: str):
        self.name = name
        self.parent: Node | None = None

    @property
    def children(self) -> list[Node]:
        return []


class TextNode(Node):
    __slots__ = ("data",)

    def __init__(self, data: str = ""):
        super().__init__("#text")
        self.data = data

    def __repr__(self) -> str:
        return f"TextNode({self.data!r})"


class CommentNode(Node):
    __slots__ = ("data",)

    def __init__(self, data: str = ""):
        super().__init__("#comment")
        self.data = data

    def __repr__(self) -> str:
        return f"CommentNode({self.data!r})"


class ContainerNode(Node):
    """A node that can hold children."""

    __slots__ = ("_children",)

    def __init__(self, name: str):
        super().__init__(name)
        self._children: list[Node] = []

    @property
    def children(self) -> list[Node]:
        return self._children

    def append_child(self, child: Node) -> None:
        if child is self:
            msg = f"Cannot append {self.name} to itself"
            raise ValueError(msg)

        # Move semantics: a node lives in at most one tree.
        if child.parent is not None:
            child.parent.children.remove(child)

        child.parent = self
        self._children.append(child)


class FragmentNode(ContainerNode):
    """Parentless container for a parsed fragment's top-level nodes."""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__("#document-fragment")

    def __repr__(self) -> str:
        return f"FragmentNode(children={len(self._children)})"


class ElementNode(ContainerNode):
    """An element.

    - name: lowercase tag name for HTML elements (case-adjusted for SVG/MathML)
    - attrs: ordered dict of attribute name -> value
    - namespace: None for HTML, "svg" or "math" for foreign elements
    """

    __slots__ = ("attrs", "namespace")

    def __init__(self, name: str, attrs: dict[str, str] | None = None, namespace: str | None = None):
        if not name:
            msg = "Empty tag name passed to ElementNode"
            raise ValueError(msg)
        super().__init__(name)
        self.attrs: dict[str, str] = dict(attrs) if attrs else {}
        self.namespace = namespace

    @property
    def is_foreign(self) -> bool:
        """Check if this is a foreign element (SVG or MathML)."""
        return self.namespace is not None and self.namespace != "html"

    @property
    def style(self) -> dict[str, str]:
        """Declarations of the inline ``style`` attribute, keyed by lowercase property name."""
        return parse_declarations(self.attrs.get(STYLE_ATTRIBUTE))

    def __repr__(self) -> str:
        if self.is_foreign:
            return f"ElementNode({self.namespace} {self.name!r}, attrs={self.attrs!r})"
        return f"ElementNode({self.name!r}, attrs={self.attrs!r})"

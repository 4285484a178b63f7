"""
Pruned, index-addressed view of an HTML document.

The extractor scores elements in a flat arena: every element of the parsed
document gets one ContentNode, addressed by its position in document order,
with the index of its parent element. Text statistics are accumulated while
the arena is built so scoring never has to re-walk the markup.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Iterator

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag


# Subtrees that never hold readable content
STRIP_TAGS = (
    "script",
    "style",
    "noscript",
    "iframe",
    "svg",
    "form",
    "nav",
    "header",
    "footer",
    "template",
)

# class/id tokens marking boilerplate blocks
BOILERPLATE_TOKENS = (
    "ad",
    "ads",
    "advert",
    "sidebar",
    "nav",
    "menu",
    "footer",
    "header",
    "comment",
    "social",
    "share",
    "popup",
    "cookie",
    "subscribe",
    "related",
)

# Too short to match as a prefix: "ad" would also hit "adventure" or "address"
EXACT_ONLY_TOKENS = frozenset({"ad", "ads"})

PROTECTED_TAGS = frozenset({"html", "body"})

# Elements that receive a content score
SCORED_TAGS = frozenset({"p", "div", "article", "section", "td"})
# Containers score only the text they own directly; a page with no block
# structure is still found through them
CONTAINER_TAGS = frozenset({"main", "body"})
CANDIDATE_TAGS = SCORED_TAGS | CONTAINER_TAGS

_TOKEN_RE = re.compile(r"[a-z0-9]+")
_DISPLAY_NONE_RE = re.compile(r"display\s*:\s*none", re.IGNORECASE)


@dataclass
class ContentNode:
    """Scoring record for one element.

    Attributes:
        index: Position in document order (arena address)
        tag_name: Lowercased tag name
        parent: Arena index of the parent element, None for top-level elements
        element: The underlying BeautifulSoup tag
        is_candidate: Whether the element can become the content root
        in_link: Whether the element is, or sits inside, an <a>
        text_length: Visible characters in the whole subtree
        link_length: Visible characters of the subtree that sit inside anchors
        own_text_length: Characters owned by this candidate (not by a nested candidate)
        own_link_length: Owned characters that sit inside anchors
        comma_count: Commas in the owned text
        score: Content score, filled in by the extractor
    """
    index: int
    tag_name: str
    parent: int | None
    element: Tag = field(repr=False, compare=False)
    is_candidate: bool = False
    in_link: bool = False
    text_length: int = 0
    link_length: int = 0
    own_text_length: int = 0
    own_link_length: int = 0
    comma_count: int = 0
    score: float = 0.0

    @property
    def link_density(self) -> float:
        if not self.text_length:
            return 0.0
        return self.link_length / self.text_length

    @property
    def own_link_density(self) -> float:
        if not self.own_text_length:
            return 0.0
        return self.own_link_length / self.own_text_length


class ContentTree:
    """Arena of ContentNodes built from a (pruned) document."""

    def __init__(self, nodes: list[ContentNode]):
        self.nodes = nodes
        self._index_of = {id(node.element): node.index for node in nodes}

    @classmethod
    def from_soup(cls, soup: BeautifulSoup) -> ContentTree:
        nodes: list[ContentNode] = []
        index_of: dict[int, int] = {}

        # descendants yields elements and strings in document order, so a
        # parent always has a lower index than its children
        for element in soup.descendants:
            if isinstance(element, Tag):
                parent = index_of.get(id(element.parent))
                name = element.name.lower()
                in_link = name == "a" or (parent is not None and nodes[parent].in_link)
                node = ContentNode(
                    index=len(nodes),
                    tag_name=name,
                    parent=parent,
                    element=element,
                    is_candidate=name in CANDIDATE_TAGS,
                    in_link=in_link,
                )
                index_of[id(element)] = node.index
                nodes.append(node)
            elif is_visible_text(element):
                _account_text(nodes, index_of.get(id(element.parent)), element)

        return cls(nodes)

    def __iter__(self) -> Iterator[ContentNode]:
        return iter(self.nodes)

    def __reversed__(self) -> Iterator[ContentNode]:
        return reversed(self.nodes)

    def __getitem__(self, index: int) -> ContentNode:
        return self.nodes[index]

    def node_for(self, element: Tag) -> ContentNode | None:
        index = self._index_of.get(id(element))
        return None if index is None else self.nodes[index]

    def candidate_parent(self, index: int) -> int | None:
        """Arena index of the nearest candidate ancestor of a node."""
        parent = self.nodes[index].parent
        while parent is not None:
            if self.nodes[parent].is_candidate:
                return parent
            parent = self.nodes[parent].parent
        return None


def prune(soup: BeautifulSoup) -> None:
    """Remove non-content subtrees in place."""
    for tag in soup.find_all(_should_strip):
        if tag.decomposed:
            continue
        tag.decompose()


def is_boilerplate(tag: Tag) -> bool:
    """Check the class and id attributes against the boilerplate tokens.

    Attribute values are split into lowercase alphanumeric tokens. A token
    matches when it equals a boilerplate word or starts with one
    ("sidebar-left", "navbar", "comments"); "ad" and "ads" must match exactly.
    """
    if tag.name in PROTECTED_TAGS:
        return False
    values: list[str] = []
    classes = tag.get("class")
    if isinstance(classes, str):
        values.append(classes)
    elif classes:
        values.extend(classes)
    element_id = tag.get("id")
    if element_id:
        values.append(str(element_id))
    if not values:
        return False

    for token in _TOKEN_RE.findall(" ".join(values).lower()):
        for word in BOILERPLATE_TOKENS:
            if token == word:
                return True
            if word not in EXACT_ONLY_TOKENS and token.startswith(word):
                return True
    return False


def is_hidden(tag: Tag) -> bool:
    if tag.name in PROTECTED_TAGS:
        return False
    if tag.has_attr("hidden"):
        return True
    if str(tag.get("aria-hidden", "")).lower() == "true":
        return True
    style = tag.get("style")
    return bool(style and _DISPLAY_NONE_RE.search(str(style)))


def is_visible_text(element) -> bool:
    """True for text nodes, False for comments, doctypes, CDATA and the like."""
    return isinstance(element, NavigableString) and not isinstance(element, PreformattedString)


def clean_text(text: str) -> str:
    return " ".join(text.split())


def _should_strip(tag: Tag) -> bool:
    return tag.name in STRIP_TAGS or is_boilerplate(tag) or is_hidden(tag)


def _account_text(nodes: list[ContentNode], parent: int | None, text: NavigableString) -> None:
    """Add a text node's length to every ancestor and to its owning candidate."""
    length = len(clean_text(text))
    if not length or parent is None:
        return
    in_link = nodes[parent].in_link
    commas = text.count(",")
    owned = False
    index: int | None = parent
    while index is not None:
        node = nodes[index]
        node.text_length += length
        if in_link:
            node.link_length += length
        if not owned and node.is_candidate:
            node.own_text_length += length
            if in_link:
                node.own_link_length += length
            node.comma_count += commas
            owned = True
        index = node.parent

"""
Reader-mode content extraction.

Isolates the main readable text of an article page without per-site rules:
1. Parse the markup leniently and strip boilerplate subtrees
2. Score candidate blocks by the prose they own, penalizing link-heavy text
3. Propagate a fraction of each block's score to its enclosing candidate
4. Pick the best-scoring block (document order breaks ties)
5. Collect its text, one paragraph per block element

Extraction is a pure function of its input: no I/O, no shared state.
"""

from __future__ import annotations

from dataclasses import dataclass
import re

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from bs4.element import Tag

from ..core.errors import NoContentFound, ParseFailed
from ..core.types import ExtractedArticle
from .tree import ContentNode, ContentTree, clean_text, is_visible_text, prune


BONUS_TAGS = frozenset({"article", "p"})

# Elements rendered on their own line(s); everything else is inline
BLOCK_TAGS = frozenset({
    "address", "article", "aside", "blockquote", "body", "caption", "center",
    "dd", "details", "dialog", "div", "dl", "dt", "fieldset", "figcaption",
    "figure", "h1", "h2", "h3", "h4", "h5", "h6", "hr", "html", "li", "main",
    "ol", "p", "pre", "section", "summary", "table", "tbody", "td", "tfoot",
    "th", "thead", "tr", "ul",
})

_UTF16_BOMS = (b"\xff\xfe", b"\xfe\xff")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class ScoringWeights:
    """Heuristic constants of the content scorer.

    Attributes:
        tag_bonus: Added to <article> and <p> blocks with enough text
        bonus_min_length: Text length a block needs before the bonus applies
        link_penalty: Multiplied by the link density and subtracted
        propagation: Fraction of a block's score added to its enclosing candidate
        min_text_length: Minimum subtree text length of the content root
        min_score: The content root must score strictly above this
        fragment_max_link_density: Inline elements above this link density, standing
            outside running text, are dropped from the body...
        fragment_max_length: ...when shorter than this many characters
    """
    tag_bonus: float = 25.0
    bonus_min_length: int = 25
    link_penalty: float = 30.0
    propagation: float = 0.6
    min_text_length: int = 25
    min_score: float = 0.0
    fragment_max_link_density: float = 0.8
    fragment_max_length: int = 20


DEFAULT_WEIGHTS = ScoringWeights()


def extract(
    html: bytes | str,
    base_url: str,
    weights: ScoringWeights | None = None,
) -> ExtractedArticle:
    """Extract the main readable content of an HTML document.

    Args:
        html: Raw page markup as fetched (bytes are decoded by BeautifulSoup)
        base_url: URL of the page, reported back as the article source
        weights: Scoring constants, DEFAULT_WEIGHTS when None

    Returns:
        ExtractedArticle with title, body text and source URL

    Raises:
        ParseFailed: If the payload is empty or not HTML
        NoContentFound: If no block qualifies as the main content
    """
    weights = weights or DEFAULT_WEIGHTS
    soup = parse_html(html, base_url)
    title = document_title(soup)

    prune(soup)
    tree = ContentTree.from_soup(soup)
    score_tree(tree, weights)
    root = select_root(tree, weights)
    if root is None:
        raise NoContentFound(base_url, "No content block scored above the threshold")

    body_text = collect_text(root, tree, weights)
    if not body_text:
        raise NoContentFound(base_url, "Content block is empty after cleanup")

    if not title:
        heading = root.element.find("h1")
        title = clean_text(heading.get_text()) if heading is not None else ""

    return ExtractedArticle(title=title, body_text=body_text, source_url=base_url)


def parse_html(html: bytes | str, base_url: str) -> BeautifulSoup:
    """Parse markup with the lenient stdlib-backed parser.

    Raises:
        ParseFailed: For empty, binary or tag-less payloads
    """
    if isinstance(html, bytes):
        if not html.strip():
            raise ParseFailed(base_url, "Empty document")
        if b"\x00" in html[:1024] and not html.startswith(_UTF16_BOMS):
            raise ParseFailed(base_url, "Binary payload is not HTML")
    elif not html or not html.strip():
        raise ParseFailed(base_url, "Empty document")

    try:
        soup = BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup as exc:
        raise ParseFailed(base_url, f"Unparseable markup: {exc}") from exc

    if soup.find() is None:
        raise ParseFailed(base_url, "No markup found")
    return soup


def document_title(soup: BeautifulSoup) -> str:
    for tag in soup.find_all("title"):
        # <svg><title> is an image caption, not the document title
        if tag.find_parent("svg") is None:
            return clean_text(tag.get_text())
    return ""


def score_tree(tree: ContentTree, weights: ScoringWeights) -> None:
    """Score every candidate and propagate scores to enclosing candidates.

    The arena is walked in reverse document order, so each node's score is
    final (own score plus everything its descendants propagated) before a
    fraction of it moves up.
    """
    for node in reversed(tree):
        if not node.is_candidate:
            continue
        node.score += own_score(node, weights)
        target = tree.candidate_parent(node.index)
        if target is not None:
            tree[target].score += weights.propagation * node.score


def own_score(node: ContentNode, weights: ScoringWeights) -> float:
    """Score contributed by the text a candidate owns directly."""
    content = float(node.own_text_length + node.comma_count)
    if node.tag_name in BONUS_TAGS and node.text_length > weights.bonus_min_length:
        content += weights.tag_bonus
    density = node.own_link_density
    return content * (1.0 - density) - weights.link_penalty * density


def select_root(tree: ContentTree, weights: ScoringWeights) -> ContentNode | None:
    best: ContentNode | None = None
    for node in tree:
        if not node.is_candidate:
            continue
        if node.text_length < weights.min_text_length or node.score <= weights.min_score:
            continue
        # strict comparison keeps the earliest node on ties
        if best is None or node.score > best.score:
            best = node
    return best


def collect_text(root: ContentNode, tree: ContentTree, weights: ScoringWeights) -> str:
    """Render the content root as paragraphs separated by blank lines."""
    blocks: list[str] = []
    fragments: list[str] = []

    def flush() -> None:
        text = "".join(fragments)
        fragments.clear()
        lines = [clean_text(line) for line in text.split("\n")]
        paragraph = "\n".join(line for line in lines if line)
        if paragraph:
            blocks.append(paragraph)

    # in_block: element is a block, so its inline children are checked for link fragments
    def walk(element: Tag, in_block: bool) -> None:
        for child in element.children:
            if isinstance(child, Tag):
                name = child.name.lower()
                if name == "br":
                    fragments.append("\n")
                elif name in BLOCK_TAGS:
                    flush()
                    walk(child, True)
                    flush()
                elif not (in_block and is_link_fragment(child, tree, weights)):
                    walk(child, False)
            elif is_visible_text(child):
                fragments.append(_WHITESPACE_RE.sub(" ", str(child)))

    walk(root.element, True)
    flush()
    return "\n\n".join(blocks)


def is_link_fragment(element: Tag, tree: ContentTree, weights: ScoringWeights) -> bool:
    """Short, link-only inline element standing on its own (share rows, tag lists).

    Links inside running text are kept: an element qualifies only when no
    sibling in the same block carries non-link text.
    """
    node = tree.node_for(element)
    if node is None:
        return False
    if node.link_density <= weights.fragment_max_link_density:
        return False
    if node.text_length >= weights.fragment_max_length:
        return False
    return not _has_running_text(element, tree)


def _has_running_text(element: Tag, tree: ContentTree) -> bool:
    for sibling in element.parent.children:
        if sibling is element:
            continue
        if isinstance(sibling, Tag):
            if sibling.name.lower() in BLOCK_TAGS:
                continue
            node = tree.node_for(sibling)
            if node is not None and node.text_length > node.link_length:
                return True
        elif is_visible_text(sibling) and sibling.strip():
            return True
    return False

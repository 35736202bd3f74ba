# ABOUTME: Forgiving HTML document parser with structural queries over the node tree
# ABOUTME: Wraps BeautifulSoup and soupsieve; absent nodes are ordinary results, never errors

from dataclasses import dataclass

import soupsieve as sv
from bs4 import BeautifulSoup, ParserRejectedMarkup, Tag

from minebbs_scout.extraction.base import MalformedDocument

# Browser-like recovery from broken markup, no strict XML semantics
PARSER = "html.parser"

type Scope = DocumentTree | Tag


@dataclass(frozen=True)
class DocumentTree:
    """A parsed document and the origin its relative URLs resolve against."""

    root: BeautifulSoup
    origin: str

    def absolute(self, url: str) -> str:
        return absolute_url(url, self.origin)


def parse(raw: bytes | str, origin: str) -> DocumentTree:
    """Build a navigable tree from raw markup.

    Partial and invalid HTML is accepted; only input that yields no tokens at
    all is rejected.

    Raises:
        MalformedDocument: If the input is empty or the parser refuses it
    """
    if not isinstance(raw, (bytes, str)):
        raise MalformedDocument(f"Expected markup as bytes or str, got {type(raw).__name__}")
    if not raw.strip():
        raise MalformedDocument("Document is empty")

    try:
        soup = BeautifulSoup(raw, PARSER)
    except ParserRejectedMarkup as e:
        raise MalformedDocument(f"Markup could not be tokenized: {e}") from e

    if not soup.contents:
        raise MalformedDocument("Markup produced no nodes")

    return DocumentTree(root=soup, origin=origin.rstrip("/"))


def _scope_node(scope: Scope) -> Tag:
    return scope.root if isinstance(scope, DocumentTree) else scope


def select(scope: Scope, path: sv.SoupSieve) -> list[Tag]:
    """All descendants of ``scope`` matching ``path``, in document order."""
    return list(path.select(_scope_node(scope)))


def select_first(scope: Scope, path: sv.SoupSieve) -> Tag | None:
    """First descendant of ``scope`` matching ``path``, or None."""
    return path.select_one(_scope_node(scope))


def text(node: Tag | None, default: str = "") -> str:
    """Text content with surrounding whitespace trimmed."""
    if node is None:
        return default
    return node.get_text().strip()


def attr(node: Tag | None, name: str, default: str = "") -> str:
    """Attribute value, or ``default`` when the node or attribute is missing."""
    if node is None:
        return default
    value = node.get(name)
    if value is None:
        return default
    if isinstance(value, list):
        # Multi-valued attributes such as class
        return " ".join(value)
    return value.strip()


def absolute_url(url: str, origin: str) -> str:
    """Prefix site-relative URLs with ``origin``; absolute ones pass through."""
    if not url:
        return url
    if url.startswith("//"):
        return "https:" + url
    if url.startswith("/"):
        return origin.rstrip("/") + url
    return url

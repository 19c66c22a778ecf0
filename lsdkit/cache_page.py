"""Pages of the heading B-tree."""

from __future__ import annotations

from dataclasses import dataclass, field

from .article_heading import ArticleHeading
from .decoders import DictionaryDecoder
from .tools import BitStream


@dataclass(frozen=True)
class CachePage:
    """Header of a node or leaf page.

    ``headings_count`` counts headings on a leaf page and prefixes on a node page.
    """

    is_leaf: bool
    number: int
    prev: int
    parent: int
    next: int
    headings_count: int

    @classmethod
    def from_stream(cls, bstr: BitStream) -> "CachePage":
        """Read a page header and align the stream to the next byte."""
        is_leaf = bool(bstr.read(1))
        number = bstr.read(16)
        prev = bstr.read(16)
        parent = bstr.read(16)
        next_page = bstr.read(16)
        count = bstr.read(16)
        bstr.to_nearest_byte()
        return cls(is_leaf, number, prev, parent, next_page, count)


@dataclass
class NodePageBody:
    """Body of a node page: its first child and the separating prefixes."""

    first_child: int = 0
    prefixes: list[str] = field(default_factory=list)


def parse_node_page_body(bstr: BitStream, decoder: DictionaryDecoder, count: int) -> NodePageBody:
    """Read a node page body holding ``count`` prefixes; the last one is empty."""
    body = NodePageBody(first_child=decoder.read_reference1(bstr))
    for i in range(count):
        if i == count - 1:
            body.prefixes.append("")
            continue
        decoder.decode_prefix_len(bstr)
        postfix_len = decoder.decode_postfix_len(bstr)
        body.prefixes.append(decoder.decode_heading(bstr, postfix_len))
    return body


def parse_leaf_page_body(
    bstr: BitStream, decoder: DictionaryDecoder, count: int, known_prefix: str
) -> list[ArticleHeading]:
    """Read ``count`` headings, each sharing a prefix with the one before."""
    headings = []
    for _ in range(count):
        heading = ArticleHeading()
        heading.load(decoder, bstr, known_prefix)
        known_prefix = heading.text()
        headings.append(heading)
    return headings
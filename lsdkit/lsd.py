"""High-level access to an LSD dictionary: headings, articles and overlay."""

from __future__ import annotations

from .article_heading import ArticleHeading
from .cache_page import CachePage
from .dictionary_reader import DictionaryReader, LSDHeader
from .overlay import LSDOverlayReader, OverlayHeading
from .tools import BitStream

PAGE_SIZE = 512


def collect_headings_from_page(
    bstr: BitStream, reader: DictionaryReader, page_number: int
) -> list[ArticleHeading]:
    """The headings of one page; node pages hold none."""
    bstr.seek(reader.header.pages_offset + PAGE_SIZE * page_number)
    page = CachePage.from_stream(bstr)
    if not page.is_leaf:
        return []
    decoder = reader.decoder()
    headings = []
    prefix = ""
    for _ in range(page.headings_count):
        heading = ArticleHeading()
        prefix = heading.load(decoder, bstr, prefix)
        headings.append(heading)
    return headings


class LSDDictionary:
    """An LSD dictionary read from a bit stream."""

    def __init__(self, bstr: BitStream) -> None:
        self._bstr = bstr
        self._reader = DictionaryReader(bstr)
        self._overlay = LSDOverlayReader(bstr, self._reader)

    @property
    def name(self) -> str:
        return self._reader.name

    @property
    def icon(self) -> bytes:
        return self._reader.icon

    @property
    def header(self) -> LSDHeader:
        return self._reader.header

    @property
    def supported(self) -> bool:
        return self._reader.supported

    def annotation(self) -> str:
        return self._reader.annotation()

    def read_headings(self) -> list[ArticleHeading]:
        """All headings of all pages, in page order."""
        return [
            heading
            for page_number in range(self._reader.pages_count)
            for heading in collect_headings_from_page(self._bstr, self._reader, page_number)
        ]

    def read_article(self, reference: int) -> str:
        return self._reader.decode_article(self._bstr, reference)

    def read_overlay_headings(self) -> list[OverlayHeading]:
        return self._overlay.read_headings()

    def read_overlay_entry(self, heading: OverlayHeading) -> bytes:
        return self._overlay.read_entry(heading)
"""Decoders for the text compression schemes of the LSD dictionary kinds."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Optional, Sequence

from .len_table import LenTable
from .tools import BitStream, bit_length, read_reference, read_symbols, read_unicode_string

StreamWrapper = Callable[[BitStream], BitStream]


def _copy_slice(source: Sequence[str], start: int, length: int) -> list[str]:
    if start > len(source):
        raise ValueError(f"reference start {start} is beyond {len(source)} characters")
    chunk = list(source[start:start + length])
    if not chunk:
        raise ValueError("reference copies nothing")
    return chunk


def _read_article_length(bstr: BitStream) -> int:
    length = bstr.read(16)
    if length == 0xFFFF:
        length = bstr.read(32)
    return length


def decode_user_article(
    bstr: BitStream, prefix: str, lt_articles: LenTable, article_symbols: Sequence[int]
) -> str:
    """Decode an article compressed with the user-dictionary scheme."""
    length = _read_article_length(bstr)
    res: list[str] = []
    while len(res) < length:
        sym = article_symbols[lt_articles.decode(bstr)]
        if sym >= 0x10040:
            start = bstr.read(bit_length(length))
            res.extend(_copy_slice(res, start, sym - 0x1003D))
        elif sym >= 0x10000:
            start = bstr.read(bit_length(len(prefix)))
            res.extend(_copy_slice(prefix, start, sym - 0xFFFD))
        else:
            res.append(chr(sym))
    return "".join(res)


def decode_system_article(
    bstr: BitStream, prefix: str, lt_articles: LenTable, article_symbols: Sequence[int]
) -> str:
    """Decode an article compressed with the system-dictionary scheme."""
    max_len = _read_article_length(bstr)
    res: list[str] = []
    while len(res) < max_len:
        sym = article_symbols[lt_articles.decode(bstr)]
        if ((sym - 0x80) & 0xFFFFFFFF) >= 0x10000:
            if sym <= 0x3F:
                start = bstr.read(bit_length(len(prefix)))
                res.extend(_copy_slice(prefix, start, sym + 3))
            else:
                start = bstr.read(bit_length(max_len))
                res.extend(_copy_slice(res, start, sym - 0x3D))
        else:
            res.append(chr(sym - 0x80))
    return "".join(res)


def read_xored_prefix(bstr: BitStream, length: int) -> str:
    """Read an obfuscated prefix of ``length`` 16-bit code units."""
    return "".join(chr(bstr.read(16) ^ 0x879A) for _ in range(length))


def read_xored_symbols(bstr: BitStream) -> list[int]:
    """Read an obfuscated symbol table."""
    count = bstr.read(32)
    bits_per_symbol = bstr.read(8)
    return [bstr.read(bits_per_symbol) ^ 0x1325 for _ in range(count)]


class DictionaryDecoder(ABC):
    """Tables shared by all dictionary kinds and the operations built on them."""

    def __init__(self) -> None:
        self.prefix = ""
        self.article_symbols: list[int] = []
        self.heading_symbols: list[int] = []
        self.lt_articles = LenTable()
        self.lt_headings = LenTable()
        self.lt_prefix_lengths = LenTable()
        self.lt_postfix_lengths = LenTable()
        self.huffman1_number = 0
        self.huffman2_number = 0

    @abstractmethod
    def read(self, bstr: BitStream) -> None:
        """Load the decoding tables."""

    @abstractmethod
    def decode_article(self, bstr: BitStream) -> str:
        """Decode one article body."""

    def decode_heading(self, bstr: BitStream, length: int) -> str:
        """Decode ``length`` heading characters."""
        chars = []
        for _ in range(length):
            sym = self.heading_symbols[self.lt_headings.decode(bstr)]
            if sym > 0xFFFF:
                raise ValueError(f"heading symbol out of range: {sym:#x}")
            chars.append(chr(sym))
        return "".join(chars)

    def decode_prefix_len(self, bstr: BitStream) -> int:
        return self.lt_prefix_lengths.decode(bstr)

    def decode_postfix_len(self, bstr: BitStream) -> int:
        return self.lt_postfix_lengths.decode(bstr)

    def read_reference1(self, bstr: BitStream) -> int:
        return read_reference(bstr, self.huffman1_number)

    def read_reference2(self, bstr: BitStream) -> int:
        return read_reference(bstr, self.huffman2_number)


class UserDictionaryDecoder(DictionaryDecoder):
    """Decoder for user dictionaries; legacy system ones use the system article scheme."""

    def __init__(self, legacy_system: bool) -> None:
        super().__init__()
        self.legacy_system = legacy_system

    def read(self, bstr: BitStream) -> None:
        length = bstr.read(32)
        self.prefix = read_unicode_string(bstr, length, True)
        self.article_symbols = read_symbols(bstr)
        self.heading_symbols = read_symbols(bstr)
        self.lt_articles.read(bstr)
        self.lt_headings.read(bstr)
        self.lt_prefix_lengths.read(bstr)
        self.lt_postfix_lengths.read(bstr)
        self.huffman1_number = bstr.read(32)
        self.huffman2_number = bstr.read(32)

    def decode_article(self, bstr: BitStream) -> str:
        decode = decode_system_article if self.legacy_system else decode_user_article
        return decode(bstr, self.prefix, self.lt_articles, self.article_symbols)


class SystemDictionaryDecoder(DictionaryDecoder):
    """Decoder for system dictionaries.

    ``stream_wrapper``, when given, is applied to the stream before tables or
    articles are read; encrypted dictionaries supply their decrypting view here.
    """

    def __init__(self, stream_wrapper: Optional[StreamWrapper] = None) -> None:
        super().__init__()
        self.stream_wrapper = stream_wrapper

    def _wrap(self, bstr: BitStream) -> BitStream:
        return self.stream_wrapper(bstr) if self.stream_wrapper else bstr

    def read(self, bstr: BitStream) -> None:
        bstr = self._wrap(bstr)
        length = bstr.read(32)
        self.prefix = read_unicode_string(bstr, length, True)
        self.article_symbols = read_symbols(bstr)
        self.heading_symbols = read_symbols(bstr)
        self.lt_articles.read(bstr)
        self.lt_headings.read(bstr)
        self.lt_postfix_lengths.read(bstr)
        bstr.read(32)
        self.lt_prefix_lengths.read(bstr)
        self.huffman1_number = bstr.read(32)
        self.huffman2_number = bstr.read(32)

    def decode_article(self, bstr: BitStream) -> str:
        return decode_system_article(
            self._wrap(bstr), self.prefix, self.lt_articles, self.article_symbols
        )


class AbbreviationDictionaryDecoder(DictionaryDecoder):
    """Decoder for abbreviation dictionaries with obfuscated tables."""

    def read(self, bstr: BitStream) -> None:
        length = bstr.read(32)
        self.prefix = read_xored_prefix(bstr, length)
        self.article_symbols = read_xored_symbols(bstr)
        self.heading_symbols = read_xored_symbols(bstr)
        self.lt_articles.read(bstr)
        self.lt_headings.read(bstr)
        self.lt_prefix_lengths.read(bstr)
        self.lt_postfix_lengths.read(bstr)
        self.huffman1_number = bstr.read(32)
        self.huffman2_number = bstr.read(32)

    def decode_article(self, bstr: BitStream) -> str:
        return decode_user_article(bstr, self.prefix, self.lt_articles, self.article_symbols)
import struct
import zlib

import pytest

from lsdkit.cache_page import CachePage
from lsdkit.lsd import LSDDictionary, collect_headings_from_page
from lsdkit.dictionary_reader import DictionaryReader
from lsdkit.tools import BitStream

_USED = sorted(set("Abcdefg123Zzanotherxyjsk4\n"))
_ALPHABET = _USED + [chr(0x4E00 + i) for i in range(32 - len(_USED))]


class _Bits:
    def __init__(self):
        self._bits = []

    def put(self, value, width):
        self._bits.extend((value >> shift) & 1 for shift in reversed(range(width)))

    def align(self):
        self._bits.extend([0] * (-len(self._bits) % 8))

    def put_bytes(self, data):
        self.align()
        for byte in data:
            self.put(byte, 8)

    def to_bytes(self):
        self.align()
        return bytes(
            int("".join(map(str, self._bits[i:i + 8])), 2) for i in range(0, len(self._bits), 8)
        )


def _put_table(bits, k):
    count = 1 << k
    bits.put(count, 32)
    bits.put(8, 8)
    for sym in range(count):
        bits.put(sym, count.bit_length())
        bits.put(k, 8)


def _decoder_block():
    bits = _Bits()
    bits.put(0, 32)
    for _ in range(2):
        bits.put(len(_ALPHABET), 32)
        bits.put(16, 8)
        for char in _ALPHABET:
            bits.put(ord(char), 16)
    _put_table(bits, 5)
    _put_table(bits, 5)
    _put_table(bits, 4)
    _put_table(bits, 4)
    bits.put(0x10, 32)
    bits.put(0x10, 32)
    return bits.to_bytes()


def _article_block(text):
    bits = _Bits()
    bits.put(len(text), 16)
    for char in text:
        bits.put(_ALPHABET.index(char), 5)
    return bits.to_bytes()


def _page_block(leaf, entries, refs):
    bits = _Bits()
    bits.put(int(leaf), 1)
    for _ in range(4):
        bits.put(0, 16)
    bits.put(len(entries), 16)
    bits.align()
    for prefix_len, postfix, article in entries:
        bits.put(prefix_len, 4)
        bits.put(len(postfix), 4)
        for char in postfix:
            bits.put(_ALPHABET.index(char), 5)
        bits.put(3, 2)
        bits.put(refs[article], 32)
        bits.put(0, 1)
    return bits.to_bytes().ljust(512, b"\0")


def _utf16(text):
    return text.encode("utf-16-le")


def _build_lsd(*, name="Test", annotation="abc", articles=("abcd",), pages=((True, ()),),
               overlay=(), version=0x142001, checksum=0, entries_count=0):
    meta = bytes([len(name)]) + _utf16(name) + b"\0" + b"\0" + struct.pack("<I", 0)
    if version > 0x120000:
        meta += struct.pack("<H", 0)
    if version > 0x140000:
        meta += b"\0" * 4
    encoder_offset = 52 + len(meta) + 8
    decoder = _decoder_block()
    anno = _article_block(annotation)
    refs = []
    article_bytes = b""
    for text in articles:
        refs.append(len(article_bytes))
        article_bytes += _article_block(text)
    annotation_offset = encoder_offset + len(decoder)
    articles_offset = annotation_offset + len(anno)
    pages_offset = articles_offset + len(article_bytes)
    page_bytes = b"".join(_page_block(leaf, entries, refs) for leaf, entries in pages)
    pages_end = pages_offset + len(page_bytes)
    overlay_index = struct.pack("<I", len(overlay))
    overlay_data = b""
    for entry_name, payload in overlay:
        packed = zlib.compress(payload)
        overlay_index += bytes([len(entry_name)]) + _utf16(entry_name)
        overlay_index += struct.pack("<4I", len(overlay_data), 0, len(payload), len(packed))
        overlay_data += packed
    overlay_offset = pages_end + len(overlay_index)
    header = struct.pack(
        "<8s9I4H", b"LingVo", version, 0, checksum, entries_count, annotation_offset,
        encoder_offset, articles_offset, pages_offset, 0, len(pages) - 1, 0, 1033, 1033,
    )
    return (header + meta + struct.pack("<II", pages_end, overlay_offset) + decoder + anno
            + article_bytes + page_bytes + overlay_index + overlay_data)


def test_decoder():
    data = _build_lsd(
        name="Country Capital Dictionary [en-en]",
        annotation="yjsakfabcdaskdhabbdfjkgh1jkh33jkhj331ddj\n",
        articles=("abcd", "aabb33", "1234"),
        pages=((True, ((0, "a", 0), (0, "b", 1), (0, "c", 2))),),
        checksum=0x9341A792,
        entries_count=3,
    )
    decoder = LSDDictionary(BitStream(data))
    assert decoder.name == "Country Capital Dictionary [en-en]"
    header = decoder.header
    assert header.version == 0x142001
    assert header.checksum == 0x9341A792
    assert header.entries_count == 3
    assert header.source_language == 1033
    assert header.target_language == 1033
    assert decoder.annotation() == "yjsakfabcdaskdhabbdfjkgh1jkh33jkhj331ddj\n"
    heads = decoder.read_headings()
    assert decoder.read_article(heads[0].reference) == "abcd"
    assert decoder.read_article(heads[1].reference) == "aabb33"
    assert decoder.read_article(heads[2].reference) == "1234"


def test_user_lsd_headings():
    entries = (
        (0, "Abc", 0), (3, "de", 0), (5, "fg", 0), (7, "123", 0),
        (10, "ZzzzZ", 0), (0, "anotherone", 0), (0, "Zzxx", 0),
    )
    data = _build_lsd(pages=((True, entries),), entries_count=7)
    bstr = BitStream(data)
    reader = LSDDictionary(bstr)
    bstr.seek(reader.header.pages_offset)
    page = CachePage.from_stream(bstr)
    assert page.is_leaf is True
    assert page.headings_count == 7
    heads = reader.read_headings()
    assert [h.dsl_text() for h in heads] == [
        "Abc", "Abcde", "Abcdefg", "Abcdefg123", "Abcdefg123ZzzzZ", "anotherone", "Zzxx",
    ]


def test_overlay():
    image1 = b"BM" + bytes(range(60))
    image2 = b"BM" + bytes(range(100, 200))
    data = _build_lsd(overlay=(("image1.bmp", image1), ("image2.bmp", image2)))
    reader = LSDDictionary(BitStream(data))
    headings = reader.read_overlay_headings()
    assert len(headings) == 2
    assert headings[0].name == "image1.bmp"
    assert headings[1].name == "image2.bmp"
    assert reader.read_overlay_entry(headings[0]) == image1
    assert reader.read_overlay_entry(headings[1]) == image2


def test_headings_across_pages():
    pages = ((True, ((0, "ab", 0),)), (False, ()), (True, ((0, "cd", 1),)))
    data = _build_lsd(articles=("abcd", "1234"), pages=pages)
    bstr = BitStream(data)
    reader = LSDDictionary(bstr)
    heads = reader.read_headings()
    assert [h.text() for h in heads] == ["ab", "cd"]
    assert [reader.read_article(h.reference) for h in heads] == ["abcd", "1234"]


def test_collect_from_node_page_is_empty():
    pages = ((True, ((0, "ab", 0),)), (False, ()))
    data = _build_lsd(pages=pages)
    bstr = BitStream(data)
    dictionary_reader = DictionaryReader(bstr)
    assert collect_headings_from_page(bstr, dictionary_reader, 1) == []
    assert [h.text() for h in collect_headings_from_page(bstr, dictionary_reader, 0)] == ["ab"]


def test_old_version_has_no_overlay():
    data = _build_lsd(version=0x110001, overlay=(("image1.bmp", b"BM"),),
                      pages=((True, ((0, "ab", 0),)),))
    reader = LSDDictionary(BitStream(data))
    assert reader.read_overlay_headings() == []
    assert [h.dsl_text() for h in reader.read_headings()] == ["ab"]


def test_unsupported_version():
    data = _build_lsd(version=0x999999)
    reader = LSDDictionary(BitStream(data))
    assert reader.supported is False
    with pytest.raises(ValueError):
        reader.read_headings()
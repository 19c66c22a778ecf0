import struct
import zlib
from types import SimpleNamespace

import pytest

from lsdkit.overlay import LSDOverlayReader, OverlayHeading, zlib_inflate
from lsdkit.tools import BitStream


def _overlay_file(entries):
    index = struct.pack("<I", len(entries))
    blob = b""
    for name, payload in entries:
        packed = zlib.compress(payload)
        index += bytes([len(name)]) + name.encode("utf-16-le")
        index += struct.pack("<4I", len(blob), 0, len(payload), len(packed))
        blob += packed
    junk = b"\xAA" * 8
    reader = SimpleNamespace(overlay_headings_offset=len(junk),
                             overlay_data_offset=len(junk) + len(index))
    return BitStream(junk + index + blob), reader


IMAGE1 = b"BM" + bytes(range(60))
IMAGE2 = b"BM" + bytes(range(100, 200))


def test_round_trip():
    bstr, fake = _overlay_file([("image1.bmp", IMAGE1), ("image2.bmp", IMAGE2)])
    overlay = LSDOverlayReader(bstr, fake)
    headings = overlay.read_headings()
    assert [h.name for h in headings] == ["image1.bmp", "image2.bmp"]
    assert headings[0].inflated_size == len(IMAGE1)
    assert headings[1].stream_size == len(zlib.compress(IMAGE2))
    assert overlay.read_entry(headings[0]) == IMAGE1
    assert overlay.read_entry(headings[1]) == IMAGE2


def test_empty_entries_are_skipped():
    bstr, fake = _overlay_file([("empty", b""), ("full", IMAGE1)])
    headings = LSDOverlayReader(bstr, fake).read_headings()
    assert [h.name for h in headings] == ["full"]


def test_no_overlay():
    bstr, fake = _overlay_file([("image1.bmp", IMAGE1)])
    fake.overlay_data_offset = None
    overlay = LSDOverlayReader(bstr, fake)
    assert overlay.read_headings() == []
    with pytest.raises(ValueError):
        overlay.read_entry(OverlayHeading("image1.bmp", 0, 0, 1, 1))


def test_inflate_truncates_and_pads():
    packed = zlib.compress(b"abcdef")
    assert zlib_inflate(packed, 3) == b"abc"
    assert zlib_inflate(packed, 8) == b"abcdef\0\0"
    assert zlib_inflate(packed, 6) == b"abcdef"


def test_inflate_rejects_corrupt_data():
    with pytest.raises(ValueError):
        zlib_inflate(b"\x00\x01\x02\x03not zlib", 10)
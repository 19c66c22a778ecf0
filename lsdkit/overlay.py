"""Embedded files (pictures, sounds) stored zlib-compressed inside LSD files."""

from __future__ import annotations

import struct
import zlib
from dataclasses import dataclass

from .dictionary_reader import DictionaryReader
from .tools import BitStream, read_unicode_string

_ENTRY = struct.Struct("<4I")


@dataclass(frozen=True)
class OverlayHeading:
    """Name and location of one embedded file."""

    name: str
    offset: int
    unk2: int
    inflated_size: int
    stream_size: int


def zlib_inflate(data: bytes, inflated_size: int) -> bytes:
    """Inflate ``data`` into exactly ``inflated_size`` bytes, zero padded."""
    if inflated_size <= 0:
        return b""
    inflater = zlib.decompressobj()
    try:
        out = inflater.decompress(data, inflated_size)
    except zlib.error as exc:
        raise ValueError(f"zlib error: {exc}") from exc
    return out.ljust(inflated_size, b"\0")


class LSDOverlayReader:
    """Lists and extracts the embedded files of a dictionary."""

    def __init__(self, bstr: BitStream, dictionary_reader: DictionaryReader) -> None:
        self._bstr = bstr
        self._reader = dictionary_reader

    def read_headings(self) -> list[OverlayHeading]:
        """The non-empty embedded files; none for formats without overlay."""
        if self._reader.overlay_data_offset is None:
            return []
        bstr = self._bstr
        bstr.seek(self._reader.overlay_headings_offset)
        (count,) = struct.unpack("<I", bstr.read_bytes(4))
        headings = []
        for _ in range(count):
            name = read_unicode_string(bstr, bstr.read(8), False)
            offset, unk2, inflated_size, stream_size = _ENTRY.unpack(bstr.read_bytes(_ENTRY.size))
            if inflated_size:
                headings.append(OverlayHeading(name, offset, unk2, inflated_size, stream_size))
        return headings

    def read_entry(self, heading: OverlayHeading) -> bytes:
        """The inflated content of one embedded file."""
        base = self._reader.overlay_data_offset
        if base is None:
            raise ValueError("dictionary has no overlay data")
        self._bstr.seek(heading.offset + base)
        packed = self._bstr.read_bytes(heading.stream_size)
        return zlib_inflate(packed, heading.inflated_size)
"""Header, metadata and compressed text of LSD dictionaries."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Callable, ClassVar, Optional

from .decoders import (
    AbbreviationDictionaryDecoder,
    DictionaryDecoder,
    SystemDictionaryDecoder,
    UserDictionaryDecoder,
)
from .tools import BitStream, read_unicode_string, reverse32

_MAGIC = b"LingVo"
_NO_OVERLAY = 0xFFFFFFFF


class NotLSDError(ValueError):
    """The data does not start with an LSD header."""

    def __init__(self, message: str = "Not an LSD file.") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class LSDHeader:
    """The fixed-size header at the start of every LSD file."""

    magic: bytes
    version: int
    unk: int
    checksum: int
    entries_count: int
    annotation_offset: int
    dictionary_encoder_offset: int
    articles_offset: int
    pages_offset: int
    unk1: int
    last_page: int
    unk3: int
    source_language: int
    target_language: int

    FORMAT: ClassVar[struct.Struct] = struct.Struct("<8s9I4H")
    SIZE: ClassVar[int] = FORMAT.size

    @classmethod
    def from_bytes(cls, data: bytes) -> "LSDHeader":
        """Parse a header, checking its magic."""
        if len(data) < cls.SIZE:
            raise NotLSDError()
        header = cls(*cls.FORMAT.unpack_from(data))
        if b"\0" not in header.magic or header.magic.split(b"\0", 1)[0] != _MAGIC:
            raise NotLSDError()
        return header


_DECODERS: dict[int, Callable[[], DictionaryDecoder]] = {
    0x110001: lambda: UserDictionaryDecoder(False),
    0x120001: lambda: UserDictionaryDecoder(False),
    0x132001: lambda: UserDictionaryDecoder(False),
    0x142001: lambda: UserDictionaryDecoder(False),
    0x152001: lambda: UserDictionaryDecoder(False),
    0x131001: lambda: UserDictionaryDecoder(True),
    0x141004: lambda: SystemDictionaryDecoder(),
    0x145001: lambda: AbbreviationDictionaryDecoder(),
    0x155001: lambda: AbbreviationDictionaryDecoder(),
    # 0x151005, the encrypted system format, is not handled.
}


class DictionaryReader:
    """Reads dictionary metadata and decodes annotation and articles.

    Unknown versions leave ``supported`` False; decoding then raises ValueError.
    """

    def __init__(self, bstr: BitStream) -> None:
        self._bstr = bstr
        try:
            raw_header = bstr.read_bytes(LSDHeader.SIZE)
        except EOFError as exc:
            raise NotLSDError() from exc
        self.header = LSDHeader.from_bytes(raw_header)
        self.name = ""
        self.icon = b""
        self.overlay_headings_offset = 0
        self.overlay_data_offset: Optional[int] = None
        self._decoder_loaded = False

        factory = _DECODERS.get(self.header.version)
        self.supported = factory is not None
        self._decoder: Optional[DictionaryDecoder] = factory() if factory else None
        if factory is None:
            return

        version = self.header.version
        self.name = read_unicode_string(bstr, bstr.read_bytes(1)[0], False)
        read_unicode_string(bstr, bstr.read(8), False)  # first heading
        read_unicode_string(bstr, bstr.read(8), False)  # last heading
        read_unicode_string(bstr, reverse32(bstr.read(32)), False)  # capitals
        if version > 0x120000:
            (icon_len,) = struct.unpack("<H", bstr.read_bytes(2))
            self.icon = bstr.read_bytes(icon_len)
        if version > 0x140000:
            bstr.seek(bstr.tell() + 4)  # checksum
        pages_end, overlay_data = struct.unpack("<II", bstr.read_bytes(8))
        self.overlay_headings_offset = pages_end
        if version < 0x120000:
            self.overlay_data_offset = None
        elif version < 0x140000:
            self.overlay_data_offset = 0  # headings carry absolute offsets
        elif overlay_data == _NO_OVERLAY:
            self.overlay_data_offset = None
        else:
            self.overlay_data_offset = overlay_data

    @property
    def pages_count(self) -> int:
        return self.header.last_page + 1

    def decoder(self) -> DictionaryDecoder:
        """The decoder, with its tables loaded on first use."""
        if self._decoder is None:
            raise ValueError("unsupported dictionary version")
        if not self._decoder_loaded:
            pos = self._bstr.tell()
            self._bstr.seek(self.header.dictionary_encoder_offset)
            self._decoder.read(self._bstr)
            self._decoder_loaded = True
            self._bstr.seek(pos)
        return self._decoder

    def prefix(self) -> str:
        return self.decoder().prefix

    def annotation(self) -> str:
        decoder = self.decoder()
        self._bstr.seek(self.header.annotation_offset)
        return decoder.decode_article(self._bstr)

    def decode_article(self, bstr: BitStream, reference: int) -> str:
        """Decode the article at ``reference`` within the articles section."""
        decoder = self.decoder()
        bstr.seek(self.header.articles_offset + reference)
        return decoder.decode_article(bstr)
"""Traditional PKWARE ZIP encryption."""

from __future__ import annotations

import os
from typing import Optional, Union

_MASK32 = 0xFFFFFFFF
_HEADER_RANDOM_LEN = 10
_TEXT_ENCODING = "utf-8"


def _make_crc_table() -> tuple[int, ...]:
    table = []
    for n in range(256):
        c = n
        for _ in range(8):
            c = (c >> 1) ^ 0xEDB88320 if c & 1 else c >> 1
        table.append(c)
    return tuple(table)


_CRC_TABLE = _make_crc_table()


def _crc32_step(crc: int, byte: int) -> int:
    return _CRC_TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)


def _as_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, str):
        return value.encode(_TEXT_ENCODING)
    return bytes(value)


class ZipCrypto:
    """The three-key stream cipher, keyed by a password.

    ``decode`` and ``encode`` each advance the cipher by one byte.
    """

    def __init__(self, password: Union[str, bytes]) -> None:
        self.keys = [305419896, 591751049, 878082192]
        for byte in _as_bytes(password):
            self.update_keys(byte)

    def decrypt_byte(self) -> int:
        """The next byte of the key stream."""
        temp = (self.keys[2] & 0xFFFF) | 2
        return ((temp * (temp ^ 1)) >> 8) & 0xFF

    def update_keys(self, c: int) -> int:
        """Mix one plain-text byte into the keys and return it."""
        keys = self.keys
        keys[0] = _crc32_step(keys[0], c)
        keys[1] = ((keys[1] + (keys[0] & 0xFF)) * 134775813 + 1) & _MASK32
        keys[2] = _crc32_step(keys[2], keys[1] >> 24)
        return c

    def decode(self, c: int) -> int:
        """Decrypt one byte."""
        plain = (c ^ self.decrypt_byte()) & 0xFF
        return self.update_keys(plain)

    def encode(self, c: int) -> int:
        """Encrypt one byte."""
        t = self.decrypt_byte()
        self.update_keys(c & 0xFF)
        return t ^ (c & 0xFF)


def encrypt_header(
    password: Union[str, bytes],
    crc_for_crypting: int,
    random_bytes: Optional[bytes] = None,
) -> tuple[bytes, ZipCrypto]:
    """Build the 12-byte encryption header of an entry.

    Returns the header and the cipher, positioned to encrypt the entry data.
    ``random_bytes`` supplies the ten seed bytes; they are drawn from the
    operating system when omitted.
    """
    if random_bytes is None:
        random_bytes = os.urandom(_HEADER_RANDOM_LEN)
    if len(random_bytes) != _HEADER_RANDOM_LEN:
        raise ValueError(f"need {_HEADER_RANDOM_LEN} random bytes, got {len(random_bytes)}")
    masking = ZipCrypto(password)
    seed = bytes(masking.encode(b) for b in random_bytes)
    cipher = ZipCrypto(password)
    header = bytearray(cipher.encode(b) for b in seed)
    header.append(cipher.encode((crc_for_crypting >> 16) & 0xFF))
    header.append(cipher.encode((crc_for_crypting >> 24) & 0xFF))
    return bytes(header), cipher
"""Bit-level reading primitives and small helpers shared by the LSD decoders."""

from __future__ import annotations


class BitStream:
    """Reads big-endian bit fields and raw bytes from an in-memory buffer.

    Positions given to :meth:`seek` and returned by :meth:`tell` are byte
    offsets. A partially consumed byte counts as consumed.
    """

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._bit = 0

    def __len__(self) -> int:
        return len(self._data)

    def read(self, bits: int) -> int:
        """Read ``bits`` bits, most significant first, as an unsigned integer."""
        if bits < 0:
            raise ValueError(f"negative bit count: {bits}")
        if bits == 0:
            return 0
        end = self._bit + bits
        if end > len(self._data) * 8:
            raise EOFError("unexpected end of stream")
        first = self._bit // 8
        last = (end + 7) // 8
        chunk = int.from_bytes(self._data[first:last], "big")
        value = (chunk >> (last * 8 - end)) & ((1 << bits) - 1)
        self._bit = end
        return value

    def read_bytes(self, size: int) -> bytes:
        """Skip to the next byte boundary and read ``size`` raw bytes."""
        if size < 0:
            raise ValueError(f"negative size: {size}")
        self.to_nearest_byte()
        start = self._bit // 8
        if start + size > len(self._data):
            raise EOFError("unexpected end of stream")
        self._bit += size * 8
        return self._data[start:start + size]

    def seek(self, pos: int) -> None:
        """Move to byte offset ``pos``."""
        if pos < 0:
            raise ValueError(f"negative position: {pos}")
        self._bit = pos * 8

    def tell(self) -> int:
        """Return the current byte offset."""
        return (self._bit + 7) // 8

    def to_nearest_byte(self) -> None:
        """Discard the rest of a partially read byte."""
        self._bit = self.tell() * 8


def bit_length(num: int) -> int:
    """Number of bits needed to hold ``num``; zero still takes one bit."""
    return max(1, num.bit_length())


def upper_prime_number(count: int) -> int:
    """The prime table size used for small counts."""
    if count < 0x35:
        return 0x35
    raise ValueError(f"no prime table size known for count {count}")


def read_unicode_string(bstr: BitStream, length: int, big_endian: bool) -> str:
    """Read ``length`` UTF-16 code units; each becomes one character."""
    raw = bstr.read_bytes(2 * length)
    order = "big" if big_endian else "little"
    return "".join(
        chr(int.from_bytes(raw[i:i + 2], order)) for i in range(0, len(raw), 2)
    )


def read_symbols(bstr: BitStream) -> list[int]:
    """Read a symbol table: a 32-bit count, an 8-bit width, then the symbols."""
    count = bstr.read(32)
    bits_per_symbol = bstr.read(8)
    return [bstr.read(bits_per_symbol) for _ in range(count)]


def read_reference(bstr: BitStream, huffman_number: int) -> int:
    """Read an article or page reference packed against ``huffman_number``."""
    code = bstr.read(2)
    if code == 3:
        return bstr.read(32)
    bitlen = bit_length(huffman_number)
    if bitlen < 2:
        raise ValueError(f"reference table number too small: {huffman_number}")
    return (code << (bitlen - 2)) | bstr.read(bitlen - 2)


def reverse16(n: int) -> int:
    """Swap the two bytes of a 16-bit value."""
    return int.from_bytes((n & 0xFFFF).to_bytes(2, "little"), "big")


def reverse32(n: int) -> int:
    """Reverse the four bytes of a 32-bit value."""
    return int.from_bytes((n & 0xFFFFFFFF).to_bytes(4, "little"), "big")


def major_version(version: int) -> int:
    return version >> 16


def minor_version(version: int) -> int:
    return (version >> 12) & 0x0F


def revision_version(version: int) -> int:
    return version & 0xFFF
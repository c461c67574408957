"""
Sequential reads of fixed-width primitives from a bytecode buffer.

Integer fields in Pixel Bender bytecode are little-endian while 32-bit float
fields are big-endian. That mix is a property of the format and every read
below keeps the byte order of its field type.
"""

import struct
from dataclasses import dataclass, field

from pixelbender.decoder.errors import TruncatedError

_U16 = struct.Struct("<H")
_I16 = struct.Struct("<h")
_U32 = struct.Struct("<I")
_I32 = struct.Struct("<i")
_F32 = struct.Struct(">f")


@dataclass
class ByteReader:
    """Forward-only cursor over an in-memory byte buffer.

    A failed read raises :class:`TruncatedError` and leaves the cursor where
    it was.

    Attributes:
        data: The buffer being read
        position: Offset of the next byte to read
    """

    data: bytes
    position: int = 0
    _size: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.data = bytes(self.data)
        self._size = len(self.data)

    @property
    def remaining(self) -> int:
        return self._size - self.position

    @property
    def at_end(self) -> bool:
        return self.position >= self._size

    def _take(self, count: int) -> int:
        """Reserve ``count`` bytes and return the offset they start at."""
        if self.remaining < count:
            raise TruncatedError(count, self.remaining, self.position)
        start = self.position
        self.position += count
        return start

    def _unpack(self, layout: struct.Struct) -> int | float:
        start = self._take(layout.size)
        return layout.unpack_from(self.data, start)[0]

    def read_u8(self) -> int:
        return self.data[self._take(1)]

    def read_i8(self) -> int:
        raw = self.read_u8()
        return raw - 0x100 if raw & 0x80 else raw

    def read_u16(self) -> int:
        return self._unpack(_U16)

    def read_i16(self) -> int:
        return self._unpack(_I16)

    def read_u24(self) -> int:
        """Read a three-byte little-endian unsigned integer."""
        start = self._take(3)
        return int.from_bytes(self.data[start : start + 3], "little")

    def read_u32(self) -> int:
        return self._unpack(_U32)

    def read_i32(self) -> int:
        return self._unpack(_I32)

    def read_f32(self) -> float:
        """Read a big-endian IEEE 754 single-precision float."""
        return self._unpack(_F32)

    def read_bytes(self, count: int) -> bytes:
        start = self._take(count)
        return self.data[start : start + count]

    def read_cstring(self) -> str:
        """Read a zero-terminated string of single-byte characters.

        Each byte maps to the character with the same code point; the
        terminator is consumed but not returned.

        Returns:
            The decoded string

        Raises:
            TruncatedError: If the buffer ends before a zero byte
        """
        end = self.data.find(b"\x00", self.position)
        if end < 0:
            # Report the whole unterminated run as the missing field
            raise TruncatedError(self.remaining + 1, self.remaining, self.position)
        text = self.data[self.position : end].decode("latin-1")
        self.position = end + 1
        return text

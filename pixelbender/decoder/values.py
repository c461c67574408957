"""Decoding of typed literal values."""

from pixelbender.decoder.constants import Opcode, TypeTag
from pixelbender.decoder.errors import UnknownTypeTagError
from pixelbender.decoder.ir import Value
from pixelbender.decoder.reader import ByteReader


def parse_type_tag(raw: int, opcode: Opcode, offset: int | None = None) -> TypeTag:
    """Map a raw type-tag byte to a :class:`TypeTag`.

    Args:
        raw: The byte read from the stream
        opcode: Opcode of the instruction the tag belongs to
        offset: Byte offset of the tag

    Returns:
        The matching type tag

    Raises:
        UnknownTypeTagError: If the byte is outside the known table
    """
    try:
        return TypeTag(raw)
    except ValueError:
        raise UnknownTypeTagError(raw, offset, opcode) from None


def read_value(reader: ByteReader, type_tag: TypeTag) -> Value:
    """Read the literal for ``type_tag`` from the stream.

    Float components are big-endian 32-bit floats, int components are
    little-endian signed 16-bit integers, strings are zero-terminated.
    """
    if type_tag is TypeTag.STRING:
        return Value(type_tag, reader.read_cstring())

    count = type_tag.component_count
    if type_tag.is_int:
        return Value(type_tag, tuple(reader.read_i16() for _ in range(count)))
    return Value(type_tag, tuple(reader.read_f32() for _ in range(count)))

"""
Per-opcode field grammar of Pixel Bender instructions.

Each instruction starts with a one-byte opcode followed by a fixed-shape set of
fields. Header instructions update the program name and version, declaration
instructions add parameters and metadata, and everything else appends to the
operation list.
"""

from loguru import logger

from pixelbender.decoder.builder import ProgramBuilder
from pixelbender.decoder.constants import Opcode, Qualifier, RegisterKind
from pixelbender.decoder.errors import (
    DecodeError,
    InvalidFieldError,
    MalformedReservedFieldError,
    UnknownOpcodeError,
    UnsupportedConstructError,
)
from pixelbender.decoder.ir import (
    ElseOp,
    EndIfOp,
    IfOp,
    LoadFloatOp,
    LoadIntOp,
    MetadataEntry,
    NopOp,
    NormalOp,
    NormalParameter,
    SampleLinearOp,
    SampleNearestOp,
    TextureParameter,
)
from pixelbender.decoder.metadata import MetadataAccumulator
from pixelbender.decoder.reader import ByteReader
from pixelbender.decoder.registers import decode_destination, decode_source
from pixelbender.decoder.values import parse_type_tag, read_value

_RESERVED_READERS = {
    8: ByteReader.read_u8,
    16: ByteReader.read_u16,
    24: ByteReader.read_u24,
    32: ByteReader.read_u32,
}


def _read_reserved(reader: ByteReader, bits: int, field: str) -> None:
    """Read a field of ``bits`` width that must be zero."""
    offset = reader.position
    value = _RESERVED_READERS[bits](reader)
    if value != 0:
        raise MalformedReservedFieldError(field, value, offset)


def decode_instruction(
    reader: ByteReader, builder: ProgramBuilder, metadata: MetadataAccumulator
) -> Opcode:
    """Decode one instruction and apply it to the program under construction.

    Args:
        reader: Stream positioned at an opcode byte
        builder: Program under construction
        metadata: Pending metadata shared across instructions

    Returns:
        The opcode of the decoded instruction

    Raises:
        DecodeError: If the instruction is malformed, truncated or unsupported;
            the error names the opcode and the offset of the offending field
    """
    start = reader.position
    raw = reader.read_u8()
    try:
        opcode = Opcode(raw)
    except ValueError:
        raise UnknownOpcodeError(raw, start) from None

    try:
        _dispatch(opcode, start, reader, builder, metadata)
    except DecodeError as error:
        error.add_context(start, opcode)
        raise

    logger.debug(f"Decoded {opcode.name} at offset 0x{start:x}")
    return opcode


def _dispatch(
    opcode: Opcode,
    start: int,
    reader: ByteReader,
    builder: ProgramBuilder,
    metadata: MetadataAccumulator,
) -> None:
    match opcode:
        case Opcode.NOP:
            _read_reserved(reader, 32, "nop.reserved0")
            _read_reserved(reader, 16, "nop.reserved1")
            builder.operations.append(NopOp())
        case Opcode.NAME:
            _read_name(reader, builder)
        case Opcode.VERSION:
            builder.version = reader.read_i32()
        case Opcode.META1 | Opcode.META2:
            _read_metadata(opcode, reader, metadata)
        case Opcode.PARAM:
            _read_parameter(opcode, start, reader, builder, metadata)
        case Opcode.TEXTURE_PARAM:
            index = reader.read_u8()
            channel_count = reader.read_u8()
            name = reader.read_cstring()
            metadata.flush(builder, start)
            builder.parameters.append(TextureParameter(index, channel_count, name))
        case Opcode.IF:
            _read_reserved(reader, 24, "if.reserved0")
            source = reader.read_u24()
            _read_reserved(reader, 8, "if.reserved1")
            builder.operations.append(IfOp(decode_source(source, 1)))
        case Opcode.ELSE | Opcode.END_IF:
            _read_reserved(reader, 32, f"{opcode.mnemonic}.reserved0")
            _read_reserved(reader, 24, f"{opcode.mnemonic}.reserved1")
            builder.operations.append(ElseOp() if opcode is Opcode.ELSE else EndIfOp())
        case Opcode.LOAD_INT_OR_FLOAT:
            _read_load(reader, builder)
        case Opcode.SAMPLE_NEAREST | Opcode.SAMPLE_LINEAR:
            _read_sample(opcode, reader, builder)
        case _:
            _read_normal(opcode, start, reader, builder)


def _read_name(reader: ByteReader, builder: ProgramBuilder) -> None:
    length = reader.read_u16()
    offset = reader.position
    raw = reader.read_bytes(length)
    try:
        builder.name = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        message = f"Program name is not valid UTF-8: {e.reason}"
        raise InvalidFieldError(message, offset + e.start) from e


def _read_metadata(
    opcode: Opcode, reader: ByteReader, metadata: MetadataAccumulator
) -> None:
    tag_offset = reader.position
    raw_tag = reader.read_u8()
    key = reader.read_cstring()
    type_tag = parse_type_tag(raw_tag, opcode, tag_offset)
    metadata.add(MetadataEntry(key, read_value(reader, type_tag)))


def _read_parameter(
    opcode: Opcode,
    start: int,
    reader: ByteReader,
    builder: ProgramBuilder,
    metadata: MetadataAccumulator,
) -> None:
    qualifier_offset = reader.position
    raw_qualifier = reader.read_u8()
    raw_tag = reader.read_u8()
    word = reader.read_u16()
    mask = reader.read_u8()
    name = reader.read_cstring()

    type_tag = parse_type_tag(raw_tag, opcode, qualifier_offset + 1)
    try:
        qualifier = Qualifier(raw_qualifier)
    except ValueError:
        raise InvalidFieldError(
            f"Unknown parameter qualifier 0x{raw_qualifier:02x}", qualifier_offset
        ) from None

    metadata.flush(builder, start)

    if type_tag.is_matrix:
        raise UnsupportedConstructError(
            f"Parameter {name!r} has unsupported type {type_tag.display_name}",
            qualifier_offset + 1,
        )

    builder.parameters.append(
        NormalParameter(qualifier, type_tag, decode_destination(word, mask), name)
    )


def _read_load(reader: ByteReader, builder: ProgramBuilder) -> None:
    word = reader.read_u16()
    mask_offset = reader.position
    mask = reader.read_u8()
    if mask & 0xF:
        raise MalformedReservedFieldError("load.mask_low", mask & 0xF, mask_offset)

    destination = decode_destination(word, mask >> 4)
    if destination.kind is RegisterKind.FLOAT:
        builder.operations.append(LoadFloatOp(destination, reader.read_f32()))
    else:
        builder.operations.append(LoadIntOp(destination, reader.read_i32()))


def _read_sample(opcode: Opcode, reader: ByteReader, builder: ProgramBuilder) -> None:
    word = reader.read_u16()
    mask = reader.read_u8()
    source = reader.read_u24()
    sampler_selector = reader.read_u8()

    destination = decode_destination(word, mask >> 4)
    operation = SampleNearestOp if opcode is Opcode.SAMPLE_NEAREST else SampleLinearOp
    builder.operations.append(
        operation(destination, decode_source(source, 2), sampler_selector)
    )


def _read_normal(
    opcode: Opcode, start: int, reader: ByteReader, builder: ProgramBuilder
) -> None:
    word = reader.read_u16()
    mask = reader.read_u8()
    source = reader.read_u24()
    _read_reserved(reader, 8, f"{opcode.mnemonic}.reserved")

    count = (mask & 0x3) + 1
    matrix = (mask >> 2) & 0x3
    if matrix:
        raise UnsupportedConstructError(
            f"Matrix operands are not supported (mask 0b{mask:08b})", start + 3
        )

    destination = decode_destination(word, mask >> 4)
    builder.operations.append(
        NormalOp(opcode, destination, decode_source(source, count))
    )

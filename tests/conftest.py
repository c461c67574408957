"""Fixtures and configuration for pytest."""

import struct
from collections.abc import Callable, Sequence

import pytest

from pixelbender.decoder.constants import Opcode, TypeTag


class BytecodeWriter:
    """Encodes Pixel Bender instructions for tests.

    Every method appends to the buffer and returns the writer so calls can be
    chained; :meth:`build` returns the encoded bytes.
    """

    def __init__(self) -> None:
        self.buffer = bytearray()

    def build(self) -> bytes:
        return bytes(self.buffer)

    # Primitives

    def raw(self, data: bytes) -> "BytecodeWriter":
        self.buffer += data
        return self

    def u8(self, value: int) -> "BytecodeWriter":
        return self.raw(struct.pack("<B", value))

    def u16(self, value: int) -> "BytecodeWriter":
        return self.raw(struct.pack("<H", value))

    def u24(self, value: int) -> "BytecodeWriter":
        return self.raw(value.to_bytes(3, "little"))

    def u32(self, value: int) -> "BytecodeWriter":
        return self.raw(struct.pack("<I", value))

    def i32(self, value: int) -> "BytecodeWriter":
        return self.raw(struct.pack("<i", value))

    def f32(self, value: float) -> "BytecodeWriter":
        return self.raw(struct.pack(">f", value))

    def cstring(self, text: str) -> "BytecodeWriter":
        return self.raw(text.encode("latin-1") + b"\x00")

    def value(self, tag: TypeTag, data: Sequence[float] | str) -> "BytecodeWriter":
        if tag is TypeTag.STRING:
            return self.cstring(data)
        for item in data:
            if tag.is_int:
                self.raw(struct.pack("<h", item))
            else:
                self.f32(item)
        return self

    # Instructions

    def nop(self, reserved0: int = 0, reserved1: int = 0) -> "BytecodeWriter":
        return self.u8(Opcode.NOP).u32(reserved0).u16(reserved1)

    def name(self, text: str) -> "BytecodeWriter":
        encoded = text.encode("utf-8")
        return self.u8(Opcode.NAME).u16(len(encoded)).raw(encoded)

    def version(self, version: int) -> "BytecodeWriter":
        return self.u8(Opcode.VERSION).i32(version)

    def meta(
        self,
        key: str,
        tag: TypeTag,
        data: Sequence[float] | str,
        opcode: Opcode = Opcode.META1,
    ) -> "BytecodeWriter":
        return self.u8(opcode).u8(tag).cstring(key).value(tag, data)

    def param(
        self,
        name: str,
        tag: int = TypeTag.FLOAT,
        qualifier: int = 1,
        register: int = 0,
        mask: int = 0xF,
    ) -> "BytecodeWriter":
        return (
            self.u8(Opcode.PARAM)
            .u8(qualifier)
            .u8(tag)
            .u16(register)
            .u8(mask)
            .cstring(name)
        )

    def texture(self, name: str, index: int = 0, channels: int = 4) -> "BytecodeWriter":
        return self.u8(Opcode.TEXTURE_PARAM).u8(index).u8(channels).cstring(name)

    def if_(
        self, source: int, reserved0: int = 0, reserved1: int = 0
    ) -> "BytecodeWriter":
        return self.u8(Opcode.IF).u24(reserved0).u24(source).u8(reserved1)

    def else_(self, reserved0: int = 0, reserved1: int = 0) -> "BytecodeWriter":
        return self.u8(Opcode.ELSE).u32(reserved0).u24(reserved1)

    def end_if(self, reserved0: int = 0, reserved1: int = 0) -> "BytecodeWriter":
        return self.u8(Opcode.END_IF).u32(reserved0).u24(reserved1)

    def load_float(self, register: int, mask: int, value: float) -> "BytecodeWriter":
        return self.u8(Opcode.LOAD_INT_OR_FLOAT).u16(register).u8(mask).f32(value)

    def load_int(self, register: int, mask: int, value: int) -> "BytecodeWriter":
        return (
            self.u8(Opcode.LOAD_INT_OR_FLOAT)
            .u16(register | 0x8000)
            .u8(mask)
            .i32(value)
        )

    def sample(
        self,
        opcode: Opcode,
        destination: int,
        mask: int,
        source: int,
        selector: int,
    ) -> "BytecodeWriter":
        return (
            self.u8(opcode).u16(destination).u8(mask).u24(source).u8(selector)
        )

    def op(
        self,
        opcode: int,
        destination: int,
        mask: int,
        source: int,
        reserved: int = 0,
    ) -> "BytecodeWriter":
        return (
            self.u8(opcode).u16(destination).u8(mask).u24(source).u8(reserved)
        )


@pytest.fixture
def writer() -> BytecodeWriter:
    """Fixture providing an empty bytecode writer."""
    return BytecodeWriter()


@pytest.fixture
def sample_bytecode() -> Callable[[], bytes]:
    """Fixture providing a small but complete shader program."""

    def build() -> bytes:
        return (
            BytecodeWriter()
            .version(1)
            .name("Twirl")
            .meta("namespace", TypeTag.STRING, "com.example")
            .meta("vendor", TypeTag.STRING, "Example", opcode=Opcode.META2)
            .param("_OutCoord", TypeTag.FLOAT2, register=0, mask=0xC)
            .texture("src", index=0, channels=4)
            .param("dst", TypeTag.FLOAT4, qualifier=2, register=1, mask=0xF)
            .param("radius", TypeTag.FLOAT, register=2, mask=0x8)
            .meta("defaultValue", TypeTag.FLOAT, [0.5])
            .meta("minValue", TypeTag.FLOAT, [0.0])
            .load_float(3, 0x80, 1.5)
            .op(Opcode.ADD, 3, 0x80, 0x000002)
            .sample(Opcode.SAMPLE_LINEAR, 1, 0xF1, 0x1B0000, 0)
            .build()
        )

    return build

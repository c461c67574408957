"""Tests for metadata association."""

import pytest

from pixelbender.decoder import parse_shader
from pixelbender.decoder.builder import ProgramBuilder
from pixelbender.decoder.constants import Opcode, Qualifier, RegisterKind, TypeTag
from pixelbender.decoder.errors import MetadataTargetError
from pixelbender.decoder.ir import (
    MetadataEntry,
    NormalParameter,
    Register,
    TextureParameter,
    Value,
)
from pixelbender.decoder.metadata import MetadataAccumulator


def _entry(key: str, number: float = 1.0) -> MetadataEntry:
    return MetadataEntry(key, Value(TypeTag.FLOAT, (number,)))


def _parameter(name: str) -> NormalParameter:
    register = Register(0, RegisterKind.FLOAT)
    return NormalParameter(Qualifier.INPUT, TypeTag.FLOAT, register, name)


class TestMetadataAccumulator:
    """Tests for MetadataAccumulator.flush."""

    def test_flush_without_parameters_targets_program(self):
        """Test that entries before any parameter belong to the program."""
        builder = ProgramBuilder()
        accumulator = MetadataAccumulator()
        accumulator.add(_entry("a"))
        accumulator.add(_entry("b"))

        accumulator.flush(builder)

        assert [entry.key for entry in builder.metadata] == ["a", "b"]
        assert accumulator.pending == []

    def test_flush_targets_last_parameter(self):
        """Test that entries attach to the most recent parameter only."""
        builder = ProgramBuilder(parameters=[_parameter("p1"), _parameter("p2")])
        accumulator = MetadataAccumulator()
        accumulator.add(_entry("k"))

        accumulator.flush(builder)

        assert builder.parameters[0].metadata == ()
        assert builder.parameters[1].metadata == (_entry("k"),)

    def test_empty_flush_onto_texture(self):
        """Test that an empty flush onto a texture is allowed."""
        texture = TextureParameter(0, 4, "src")
        builder = ProgramBuilder(parameters=[texture])

        MetadataAccumulator().flush(builder)

        assert builder.parameters == [texture]

    def test_flush_onto_texture_fails(self):
        """Test that entries cannot attach to a texture parameter."""
        builder = ProgramBuilder(parameters=[TextureParameter(0, 4, "src")])
        accumulator = MetadataAccumulator()
        accumulator.add(_entry("defaultValue"))

        with pytest.raises(MetadataTargetError, match="src"):
            accumulator.flush(builder, offset=0x20)


class TestAssociationThroughDecoding:
    """Metadata placement across a whole instruction stream."""

    def test_metadata_follows_its_parameter(self, writer):
        """Test metadata between two parameters belongs to the first."""
        data = (
            writer.meta("k1", TypeTag.FLOAT, [1.0])
            .meta("k2", TypeTag.INT, [2], opcode=Opcode.META2)
            .param("p1")
            .meta("k3", TypeTag.STRING, "three")
            .param("p2", register=1)
            .build()
        )

        program = parse_shader(data)

        assert program.metadata == (
            MetadataEntry("k1", Value(TypeTag.FLOAT, (1.0,))),
            MetadataEntry("k2", Value(TypeTag.INT, (2,))),
        )
        p1, p2 = program.parameters
        assert p1.metadata == (MetadataEntry("k3", Value(TypeTag.STRING, "three")),)
        assert p2.metadata == ()

    def test_trailing_metadata_belongs_to_last_parameter(self, writer):
        """Test the final flush at end of stream."""
        data = (
            writer.param("amount")
            .nop()
            .meta("defaultValue", TypeTag.FLOAT, [0.5])
            .meta("maxValue", TypeTag.FLOAT, [2.0])
            .build()
        )

        program = parse_shader(data)

        (amount,) = program.parameters
        keys = [entry.key for entry in amount.metadata]
        assert keys == ["defaultValue", "maxValue"]
        assert amount.find_metadata("maxValue") == Value(TypeTag.FLOAT, (2.0,))
        assert program.metadata == ()

    def test_metadata_without_parameters(self, writer):
        """Test that a stream without parameters keeps all metadata."""
        data = writer.meta("description", TypeTag.STRING, "Blur").build()

        program = parse_shader(data)

        assert program.metadata[0].value.data == "Blur"

    def test_metadata_after_texture_fails(self, writer):
        """Test that metadata following a texture declaration is rejected."""
        data = (
            writer.texture("src")
            .meta("defaultValue", TypeTag.FLOAT, [0.5])
            .build()
        )

        with pytest.raises(MetadataTargetError):
            parse_shader(data)

    def test_metadata_after_texture_fails_at_next_parameter(self, writer):
        """Test that the failing flush is the one triggered by the next parameter."""
        writer.texture("src").meta("k", TypeTag.FLOAT, [0.5])
        param_offset = len(writer.buffer)
        data = writer.param("amount").build()

        with pytest.raises(MetadataTargetError) as excinfo:
            parse_shader(data)

        assert excinfo.value.opcode is Opcode.PARAM
        assert excinfo.value.offset == param_offset

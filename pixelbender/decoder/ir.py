"""Intermediate representation of a decoded Pixel Bender program."""

import json
from dataclasses import dataclass
from typing import Any

import numpy as np

from pixelbender.decoder.constants import (
    MATRIX_SIDES,
    Channel,
    Opcode,
    Qualifier,
    RegisterKind,
    TypeTag,
)

# Registers


@dataclass(frozen=True, slots=True)
class Register:
    """Operand slot reference: register file, index and selected channels."""

    index: int
    kind: RegisterKind
    channels: tuple[Channel, ...] = ()

    def __str__(self) -> str:
        swizzle = "".join(channel.name.lower() for channel in self.channels)
        base = f"{self.kind.value}{self.index}"
        return f"{base}.{swizzle}" if swizzle else base


# Values


@dataclass(frozen=True, slots=True)
class Value:
    """Literal value whose payload shape is fixed by its type tag.

    Attributes:
        type_tag: Declared type of the value
        data: Float components, int components, or the text of a string value
    """

    type_tag: TypeTag
    data: tuple[float, ...] | tuple[int, ...] | str

    def as_array(self) -> np.ndarray:
        """Return numeric components as a numpy array.

        Matrices are reshaped to square arrays; ints use ``int16`` to match
        their encoded width.
        """
        if self.type_tag is TypeTag.STRING:
            raise TypeError("String values have no array form")
        if self.type_tag.is_int:
            return np.array(self.data, dtype=np.int16)
        array = np.array(self.data, dtype=np.float32)
        side = MATRIX_SIDES.get(self.type_tag)
        if side is not None:
            return array.reshape(side, side)
        return array

    def __str__(self) -> str:
        if isinstance(self.data, str):
            return json.dumps(self.data, ensure_ascii=False)
        components = ", ".join(str(item) for item in self.data)
        return f"{self.type_tag.display_name}({components})"


@dataclass(frozen=True, slots=True)
class MetadataEntry:
    """Key/value annotation attached to the program or to a parameter."""

    key: str
    value: Value


# Parameters


@dataclass(frozen=True, slots=True)
class NormalParameter:
    """Value parameter bound to a register."""

    qualifier: Qualifier
    value_type: TypeTag
    register: Register
    name: str
    metadata: tuple[MetadataEntry, ...] = ()

    def find_metadata(self, key: str) -> Value | None:
        """Return the value of the first metadata entry named ``key``."""
        for entry in self.metadata:
            if entry.key == key:
                return entry.value
        return None


@dataclass(frozen=True, slots=True)
class TextureParameter:
    """Image input sampled by the program."""

    index: int
    channel_count: int
    name: str


Parameter = NormalParameter | TextureParameter


# Operations


@dataclass(frozen=True, slots=True)
class NopOp:
    pass


@dataclass(frozen=True, slots=True)
class NormalOp:
    """Generic arithmetic, logic or transcendental instruction."""

    opcode: Opcode
    destination: Register
    source: Register


@dataclass(frozen=True, slots=True)
class LoadIntOp:
    destination: Register
    value: int


@dataclass(frozen=True, slots=True)
class LoadFloatOp:
    destination: Register
    value: float


@dataclass(frozen=True, slots=True)
class IfOp:
    source: Register


@dataclass(frozen=True, slots=True)
class ElseOp:
    pass


@dataclass(frozen=True, slots=True)
class EndIfOp:
    pass


@dataclass(frozen=True, slots=True)
class SampleNearestOp:
    destination: Register
    source: Register
    sampler_selector: int


@dataclass(frozen=True, slots=True)
class SampleLinearOp:
    destination: Register
    source: Register
    sampler_selector: int


Operation = (
    NopOp
    | NormalOp
    | LoadIntOp
    | LoadFloatOp
    | IfOp
    | ElseOp
    | EndIfOp
    | SampleNearestOp
    | SampleLinearOp
)


# Program


@dataclass(frozen=True, slots=True)
class Program:
    """A fully decoded shader program.

    Attributes:
        name: Program name from the header
        version: Bytecode version from the header
        parameters: Declared parameters in declaration order
        metadata: Program-level metadata, seen before the first parameter
        operations: Instructions in execution order
    """

    name: str = ""
    version: int = 0
    parameters: tuple[Parameter, ...] = ()
    metadata: tuple[MetadataEntry, ...] = ()
    operations: tuple[Operation, ...] = ()

    def find_parameter(self, name: str) -> Parameter | None:
        for parameter in self.parameters:
            if parameter.name == name:
                return parameter
        return None

    @property
    def input_parameters(self) -> list[NormalParameter]:
        return [
            p
            for p in self.parameters
            if isinstance(p, NormalParameter) and p.qualifier is Qualifier.INPUT
        ]

    @property
    def output_parameters(self) -> list[NormalParameter]:
        return [
            p
            for p in self.parameters
            if isinstance(p, NormalParameter) and p.qualifier is Qualifier.OUTPUT
        ]

    @property
    def texture_parameters(self) -> list[TextureParameter]:
        return [p for p in self.parameters if isinstance(p, TextureParameter)]


# Arguments handed to an execution backend


@dataclass(frozen=True, slots=True)
class ImageInput:
    """Image bound to a texture parameter.

    ``texture`` is an opaque handle owned by the execution backend.
    """

    index: int
    channel_count: int
    name: str
    texture: Any


@dataclass(frozen=True, slots=True)
class ValueInput:
    """Value bound to the parameter at ``index``."""

    index: int
    value: Value


ShaderArgument = ImageInput | ValueInput

"""
Decoding of Pixel Bender bytecode.

This package turns a raw ``.pbj`` bytecode buffer into an immutable
:class:`~pixelbender.decoder.ir.Program`. Decoding is a pure function of its
input: it performs no I/O and keeps no state between calls.
"""

from pixelbender.decoder.assembler import ShaderAssembler, parse_shader
from pixelbender.decoder.constants import (
    OUT_COORD_NAME,
    Channel,
    Opcode,
    Qualifier,
    RegisterKind,
    TypeTag,
)
from pixelbender.decoder.errors import (
    DecodeError,
    InvalidFieldError,
    MalformedReservedFieldError,
    MetadataTargetError,
    TruncatedError,
    UnknownOpcodeError,
    UnknownTypeTagError,
    UnsupportedConstructError,
)
from pixelbender.decoder.ir import (
    ElseOp,
    EndIfOp,
    IfOp,
    ImageInput,
    LoadFloatOp,
    LoadIntOp,
    MetadataEntry,
    NopOp,
    NormalOp,
    NormalParameter,
    Operation,
    Parameter,
    Program,
    Register,
    SampleLinearOp,
    SampleNearestOp,
    ShaderArgument,
    TextureParameter,
    Value,
    ValueInput,
)

__all__ = [
    "parse_shader",
    "ShaderAssembler",
    "OUT_COORD_NAME",
    "Channel",
    "Opcode",
    "Qualifier",
    "RegisterKind",
    "TypeTag",
    "DecodeError",
    "InvalidFieldError",
    "MalformedReservedFieldError",
    "MetadataTargetError",
    "TruncatedError",
    "UnknownOpcodeError",
    "UnknownTypeTagError",
    "UnsupportedConstructError",
    "ElseOp",
    "EndIfOp",
    "IfOp",
    "ImageInput",
    "LoadFloatOp",
    "LoadIntOp",
    "MetadataEntry",
    "NopOp",
    "NormalOp",
    "NormalParameter",
    "Operation",
    "Parameter",
    "Program",
    "Register",
    "SampleLinearOp",
    "SampleNearestOp",
    "ShaderArgument",
    "TextureParameter",
    "Value",
    "ValueInput",
]

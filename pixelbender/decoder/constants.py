"""
Constants and lookup tables for the Pixel Bender bytecode format.

This module contains the opcode and type-tag enumerations along with the
per-tag tables the decoder and the formatter use to size and name values.
"""

from enum import Enum, IntEnum

# Name of the special input parameter that the execution backend fills with
# the coordinate of the pixel being processed.
OUT_COORD_NAME = "_OutCoord"


class Opcode(IntEnum):
    """Instruction opcodes, keyed by their wire byte."""

    NOP = 0x00
    ADD = 0x01
    SUB = 0x02
    MUL = 0x03
    RCP = 0x04
    DIV = 0x05
    ATAN2 = 0x06
    POW = 0x07
    MOD = 0x08
    MIN = 0x09
    MAX = 0x0A
    STEP = 0x0B
    SIN = 0x0C
    COS = 0x0D
    TAN = 0x0E
    ASIN = 0x0F
    ACOS = 0x10
    ATAN = 0x11
    EXP = 0x12
    EXP2 = 0x13
    LOG = 0x14
    LOG2 = 0x15
    SQRT = 0x16
    RSQRT = 0x17
    ABS = 0x18
    SIGN = 0x19
    FLOOR = 0x1A
    CEIL = 0x1B
    FRACT = 0x1C
    MOV = 0x1D
    FLOAT_TO_INT = 0x1E
    INT_TO_FLOAT = 0x1F
    MAT_MAT_MUL = 0x20
    VEC_MAT_MUL = 0x21
    MAT_VEC_MUL = 0x22
    NORMALIZE = 0x23
    LENGTH = 0x24
    DISTANCE = 0x25
    DOT_PRODUCT = 0x26
    CROSS_PRODUCT = 0x27
    EQUAL = 0x28
    NOT_EQUAL = 0x29
    LESS_THAN = 0x2A
    LESS_THAN_EQUAL = 0x2B
    LOGICAL_NOT = 0x2C
    LOGICAL_AND = 0x2D
    LOGICAL_OR = 0x2E
    LOGICAL_XOR = 0x2F
    SAMPLE_NEAREST = 0x30
    SAMPLE_LINEAR = 0x31
    LOAD_INT_OR_FLOAT = 0x32
    LOOP = 0x33
    IF = 0x34
    ELSE = 0x35
    END_IF = 0x36
    FLOAT_TO_BOOL = 0x37
    BOOL_TO_FLOAT = 0x38
    INT_TO_BOOL = 0x39
    BOOL_TO_INT = 0x3A
    VECTOR_EQUAL = 0x3B
    VECTOR_NOT_EQUAL = 0x3C
    BOOL_ANY = 0x3D
    BOOL_ALL = 0x3E
    META1 = 0xA0
    PARAM = 0xA1
    META2 = 0xA2
    TEXTURE_PARAM = 0xA3
    NAME = 0xA4
    VERSION = 0xA5

    @property
    def mnemonic(self) -> str:
        """Lower-case name used in disassembly listings."""
        return self.name.lower()


class TypeTag(IntEnum):
    """Declared type of a parameter or metadata value."""

    FLOAT = 0x1
    FLOAT2 = 0x2
    FLOAT3 = 0x3
    FLOAT4 = 0x4
    FLOAT2X2 = 0x5
    FLOAT3X3 = 0x6
    FLOAT4X4 = 0x7
    INT = 0x8
    INT2 = 0x9
    INT3 = 0xA
    INT4 = 0xB
    STRING = 0xC

    @property
    def display_name(self) -> str:
        return TYPE_TAG_NAMES[self]

    @property
    def component_count(self) -> int:
        """Number of scalar components, 0 for strings."""
        return TYPE_TAG_COMPONENTS[self]

    @property
    def is_matrix(self) -> bool:
        return self in MATRIX_TYPE_TAGS

    @property
    def is_float(self) -> bool:
        return TypeTag.FLOAT <= self <= TypeTag.FLOAT4X4

    @property
    def is_int(self) -> bool:
        return TypeTag.INT <= self <= TypeTag.INT4


class Qualifier(IntEnum):
    """Whether a declared parameter is a shader input or output."""

    INPUT = 1
    OUTPUT = 2


class RegisterKind(Enum):
    """Register file a register index refers to."""

    FLOAT = "f"
    INT = "i"


class Channel(IntEnum):
    """Vector channel of a register."""

    R = 0
    G = 1
    B = 2
    A = 3


# Channel order used both for swizzle lookup and destination mask expansion
RGBA = (Channel.R, Channel.G, Channel.B, Channel.A)

# Destination mask bit for each channel, in RGBA order
CHANNEL_MASK_BITS = (
    (Channel.R, 0x8),
    (Channel.G, 0x4),
    (Channel.B, 0x2),
    (Channel.A, 0x1),
)

# Bit 15 of a register word selects the int register file
INT_REGISTER_FLAG = 0x8000
REGISTER_INDEX_MASK = 0x7FFF

TYPE_TAG_NAMES: dict[TypeTag, str] = {
    TypeTag.FLOAT: "float",
    TypeTag.FLOAT2: "float2",
    TypeTag.FLOAT3: "float3",
    TypeTag.FLOAT4: "float4",
    TypeTag.FLOAT2X2: "matrix2x2",
    TypeTag.FLOAT3X3: "matrix3x3",
    TypeTag.FLOAT4X4: "matrix4x4",
    TypeTag.INT: "int",
    TypeTag.INT2: "int2",
    TypeTag.INT3: "int3",
    TypeTag.INT4: "int4",
    TypeTag.STRING: "string",
}

TYPE_TAG_COMPONENTS: dict[TypeTag, int] = {
    TypeTag.FLOAT: 1,
    TypeTag.FLOAT2: 2,
    TypeTag.FLOAT3: 3,
    TypeTag.FLOAT4: 4,
    TypeTag.FLOAT2X2: 4,
    TypeTag.FLOAT3X3: 9,
    TypeTag.FLOAT4X4: 16,
    TypeTag.INT: 1,
    TypeTag.INT2: 2,
    TypeTag.INT3: 3,
    TypeTag.INT4: 4,
    TypeTag.STRING: 0,
}

MATRIX_TYPE_TAGS = frozenset({TypeTag.FLOAT2X2, TypeTag.FLOAT3X3, TypeTag.FLOAT4X4})

# Matrix tag -> side length, used to reshape decoded matrix values
MATRIX_SIDES: dict[TypeTag, int] = {
    TypeTag.FLOAT2X2: 2,
    TypeTag.FLOAT3X3: 3,
    TypeTag.FLOAT4X4: 4,
}

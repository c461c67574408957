"""
Register operand decoding.

Both operand shapes take their register file from bit 15 of a 16-bit word
and their index from the remaining 15 bits. Destinations select channels with
a 4-bit write mask; sources select them with an 8-bit swizzle holding one
2-bit channel code per operand component, most significant first.
"""

from pixelbender.decoder.constants import (
    CHANNEL_MASK_BITS,
    INT_REGISTER_FLAG,
    REGISTER_INDEX_MASK,
    RGBA,
    RegisterKind,
)
from pixelbender.decoder.ir import Register


def _register_kind(word: int) -> RegisterKind:
    return RegisterKind.INT if word & INT_REGISTER_FLAG else RegisterKind.FLOAT


def decode_destination(word: int, mask: int) -> Register:
    """Decode a destination operand.

    Args:
        word: 16-bit register word
        mask: Channel write mask; bits 0x8, 0x4, 0x2, 0x1 select R, G, B, A

    Returns:
        Register whose channels are the selected subset in RGBA order
    """
    channels = tuple(channel for channel, bit in CHANNEL_MASK_BITS if mask & bit)
    return Register(word & REGISTER_INDEX_MASK, _register_kind(word), channels)


def decode_source(word: int, count: int) -> Register:
    """Decode a source operand.

    Args:
        word: Register word in the low 16 bits, swizzle in the bits above
        count: Number of components the enclosing instruction reads (1-4)

    Returns:
        Register whose channels follow the swizzle in extraction order
    """
    if not 1 <= count <= 4:
        raise ValueError(f"Source operand count must be 1-4, got {count}")
    swizzle = word >> 16
    channels = tuple(RGBA[(swizzle >> (6 - 2 * i)) & 0x3] for i in range(count))
    return Register(word & REGISTER_INDEX_MASK, _register_kind(word), channels)

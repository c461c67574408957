"""
Exceptions raised while decoding Pixel Bender bytecode.

Every failure the decoder can detect in its input is reported as a subclass of
:class:`DecodeError`. Errors carry the byte offset of the offending field and,
once known, the opcode of the instruction being decoded, so malformed or
adversarial input can be diagnosed from the message alone.
"""

from pixelbender.decoder.constants import Opcode


def _describe_opcode(opcode: Opcode | int) -> str:
    if isinstance(opcode, Opcode):
        return f"{opcode.name} 0x{opcode.value:02x}"
    return f"0x{opcode:02x}"


class DecodeError(Exception):
    """Exception raised when a bytecode buffer cannot be decoded.

    Examples:
        >>> raise DecodeError("Unexpected value", offset=12)
        DecodeError: Unexpected value at offset 0xc
    """

    def __init__(
        self,
        message: str,
        offset: int | None = None,
        opcode: Opcode | int | None = None,
    ):
        """Initialize the exception with a message and optional location.

        Args:
            message: The error message
            offset: Byte offset of the offending field
            opcode: Opcode of the instruction being decoded
        """
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.opcode = opcode

    def __str__(self) -> str:
        location_info = ""
        if self.opcode is not None:
            location_info += f" (opcode {_describe_opcode(self.opcode)})"
        if self.offset is not None:
            location_info += f" at offset 0x{self.offset:x}"
        return f"{self.message}{location_info}"

    def add_context(
        self, offset: int | None = None, opcode: Opcode | int | None = None
    ) -> "DecodeError":
        """Fill in location details that were not known where the error was raised.

        Context that is already present is kept, since it is always at least as
        precise as what an outer caller knows.

        Args:
            offset: Byte offset to record if none is set
            opcode: Opcode to record if none is set

        Returns:
            This error, for use in a ``raise`` statement
        """
        if self.offset is None:
            self.offset = offset
        if self.opcode is None:
            self.opcode = opcode
        return self


class TruncatedError(DecodeError):
    """The buffer ended in the middle of a field."""

    def __init__(self, needed: int, available: int, offset: int | None = None):
        message = (
            f"Unexpected end of data: needed {needed} byte(s), {available} left"
        )
        super().__init__(message, offset)
        self.needed = needed
        self.available = available


class MalformedReservedFieldError(DecodeError):
    """A field that must be zero holds another value."""

    def __init__(self, field: str, value: int, offset: int | None = None):
        message = f"Reserved field {field} must be zero, got 0x{value:x}"
        super().__init__(message, offset)
        self.field = field
        self.value = value


class UnknownOpcodeError(DecodeError):
    """The opcode byte is not part of the instruction set."""

    def __init__(self, raw: int, offset: int | None = None):
        super().__init__(f"Unknown opcode 0x{raw:02x}", offset)
        self.raw = raw


class UnknownTypeTagError(DecodeError):
    """A type-tag byte is outside the known table."""

    def __init__(
        self,
        raw: int,
        offset: int | None = None,
        opcode: Opcode | int | None = None,
    ):
        super().__init__(f"Unknown type tag 0x{raw:02x}", offset, opcode)
        self.raw = raw


class InvalidFieldError(DecodeError):
    """A field holds a value the format does not define."""


class UnsupportedConstructError(DecodeError):
    """Syntactically valid bytecode that the IR cannot represent."""


class MetadataTargetError(DecodeError):
    """Pending metadata would be attached to a texture parameter."""


__all__ = [
    "DecodeError",
    "TruncatedError",
    "MalformedReservedFieldError",
    "UnknownOpcodeError",
    "UnknownTypeTagError",
    "InvalidFieldError",
    "UnsupportedConstructError",
    "MetadataTargetError",
]

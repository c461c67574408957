"""Top-level decode loop turning a bytecode buffer into a :class:`Program`."""

from enum import Enum, auto

from loguru import logger

from pixelbender.decoder.builder import ProgramBuilder
from pixelbender.decoder.errors import DecodeError
from pixelbender.decoder.instructions import decode_instruction
from pixelbender.decoder.ir import Program
from pixelbender.decoder.metadata import MetadataAccumulator
from pixelbender.decoder.reader import ByteReader


class AssemblerState(Enum):
    """Lifecycle of a :class:`ShaderAssembler`."""

    READY = auto()
    READING = auto()
    DONE = auto()
    FAILED = auto()


class ShaderAssembler:
    """Decodes one complete bytecode buffer.

    An assembler is single-use: :meth:`run` decodes the buffer once and either
    returns the program or raises the first error encountered. No partial
    program is ever returned.
    """

    def __init__(self, data: bytes | bytearray | memoryview):
        self.reader = ByteReader(bytes(data))
        self.builder = ProgramBuilder()
        self.metadata = MetadataAccumulator()
        self.state = AssemblerState.READY

    def run(self) -> Program:
        """Decode every instruction in the buffer.

        Returns:
            The decoded program

        Raises:
            DecodeError: On the first malformed, truncated or unsupported field
            RuntimeError: If the assembler has already been run
        """
        if self.state is not AssemblerState.READY:
            raise RuntimeError(f"Assembler already used (state {self.state.name})")

        self.state = AssemblerState.READING
        instruction_count = 0
        try:
            while not self.reader.at_end:
                decode_instruction(self.reader, self.builder, self.metadata)
                instruction_count += 1
            # Trailing metadata belongs to the last parameter, or the program
            self.metadata.flush(self.builder, self.reader.position)
        except DecodeError as e:
            self.state = AssemblerState.FAILED
            logger.debug(f"Decode failed after {instruction_count} instructions: {e}")
            raise

        self.state = AssemblerState.DONE
        program = self.builder.build()
        logger.debug(
            f"Decoded {instruction_count} instructions: "
            f"{len(program.parameters)} parameters, "
            f"{len(program.operations)} operations"
        )
        return program


def parse_shader(data: bytes | bytearray | memoryview) -> Program:
    """Decode a complete Pixel Bender bytecode buffer.

    Args:
        data: The raw bytecode

    Returns:
        The decoded program

    Raises:
        DecodeError: If the buffer is malformed, truncated or uses constructs
            the IR cannot represent
    """
    return ShaderAssembler(data).run()

"""Mutable state of a program while its bytecode is being decoded."""

from dataclasses import dataclass, field

from pixelbender.decoder.ir import MetadataEntry, Operation, Parameter, Program


@dataclass
class ProgramBuilder:
    """In-progress program.

    Attributes:
        name: Program name, empty until a name instruction is seen
        version: Program version, 0 until a version instruction is seen
        parameters: Parameters declared so far
        metadata: Program-level metadata
        operations: Operations decoded so far
    """

    name: str = ""
    version: int = 0
    parameters: list[Parameter] = field(default_factory=list)
    metadata: list[MetadataEntry] = field(default_factory=list)
    operations: list[Operation] = field(default_factory=list)

    def build(self) -> Program:
        """Freeze the collected state into a :class:`Program`."""
        return Program(
            name=self.name,
            version=self.version,
            parameters=tuple(self.parameters),
            metadata=tuple(self.metadata),
            operations=tuple(self.operations),
        )

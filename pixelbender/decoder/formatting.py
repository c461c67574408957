"""Disassembly listings and plain-data export of decoded programs."""

import dataclasses
import math
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator

from pixelbender.decoder.constants import Qualifier, TypeTag
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
    Operation,
    Parameter,
    Program,
    Register,
    SampleLinearOp,
    SampleNearestOp,
    TextureParameter,
    Value,
)


@dataclass
class FormatConfig:
    """Options for :func:`format_program`.

    Attributes:
        indent: Text used for one level of indentation
        show_metadata: Whether metadata entries are listed
        show_header: Whether the name and version comment lines are emitted
    """

    indent: str = "    "
    show_metadata: bool = True
    show_header: bool = True


@dataclass
class CodeBlock:
    """Listing lines with block indentation."""

    indent_unit: str = "    "
    indent: int = 0
    lines: list[str] = field(default_factory=list)

    def add_line(self, line: str) -> None:
        self.lines.append(self.indent_unit * self.indent + line)

    @contextmanager
    def indented(self) -> Iterator[None]:
        """Context manager for indented block."""
        self.indent += 1
        try:
            yield
        finally:
            self.indent -= 1

    def begin_block(self) -> None:
        self.indent += 1

    def end_block(self) -> None:
        # Bytecode is not checked for balanced if/endif
        self.indent = max(self.indent - 1, 0)

    def get_code(self) -> str:
        return "\n".join(self.lines)


def _format_metadata(block: CodeBlock, entries: tuple[MetadataEntry, ...]) -> None:
    for entry in entries:
        block.add_line(f"; {entry.key} = {entry.value}")


def _format_parameter(
    block: CodeBlock, parameter: Parameter, config: FormatConfig
) -> None:
    match parameter:
        case NormalParameter():
            direction = "in" if parameter.qualifier is Qualifier.INPUT else "out"
            block.add_line(
                f"param {direction} {parameter.value_type.display_name} "
                f"{parameter.name} {parameter.register}"
            )
            if config.show_metadata:
                with block.indented():
                    _format_metadata(block, parameter.metadata)
        case TextureParameter():
            block.add_line(
                f"texture {parameter.name} "
                f"index={parameter.index} channels={parameter.channel_count}"
            )


def format_operation(operation: Operation) -> str:
    """Render a single operation as one listing line."""
    match operation:
        case NopOp():
            return "nop"
        case NormalOp(opcode=opcode, destination=dst, source=src):
            return f"{opcode.mnemonic} {dst}, {src}"
        case LoadIntOp(destination=dst, value=value):
            return f"load {dst}, {value}"
        case LoadFloatOp(destination=dst, value=value):
            return f"load {dst}, {value!r}"
        case IfOp(source=src):
            return f"if {src}"
        case ElseOp():
            return "else"
        case EndIfOp():
            return "endif"
        case SampleNearestOp(destination=dst, source=src, sampler_selector=sel):
            return f"sample_nearest {dst}, {src}, {sel}"
        case SampleLinearOp(destination=dst, source=src, sampler_selector=sel):
            return f"sample_linear {dst}, {src}, {sel}"
    raise TypeError(f"Not an operation: {operation!r}")


def format_program(program: Program, config: FormatConfig | None = None) -> str:
    """Render a human-readable listing of ``program``.

    Args:
        program: The decoded program
        config: Listing options, defaults to :class:`FormatConfig()`

    Returns:
        The listing text, one declaration or operation per line
    """
    config = config or FormatConfig()
    block = CodeBlock(indent_unit=config.indent)

    if config.show_header:
        block.add_line(f"; name: {program.name}")
        block.add_line(f"; version: {program.version}")
    if config.show_metadata:
        _format_metadata(block, program.metadata)

    for parameter in program.parameters:
        _format_parameter(block, parameter, config)

    for operation in program.operations:
        match operation:
            case ElseOp():
                block.end_block()
                block.add_line(format_operation(operation))
                block.begin_block()
            case EndIfOp():
                block.end_block()
                block.add_line(format_operation(operation))
            case IfOp():
                block.add_line(format_operation(operation))
                block.begin_block()
            case _:
                block.add_line(format_operation(operation))

    return block.get_code()


OPERATION_KINDS: dict[type, str] = {
    NopOp: "nop",
    NormalOp: "normal",
    LoadIntOp: "load_int",
    LoadFloatOp: "load_float",
    IfOp: "if",
    ElseOp: "else",
    EndIfOp: "end_if",
    SampleNearestOp: "sample_nearest",
    SampleLinearOp: "sample_linear",
}


def _register_to_dict(register: Register) -> dict[str, Any]:
    return {
        "index": register.index,
        "kind": register.kind.name.lower(),
        "channels": "".join(channel.name.lower() for channel in register.channels),
    }


def _plain_float(number: float) -> float | str:
    # JSON has no NaN or infinity tokens
    if math.isfinite(number):
        return number
    return str(number)


def _value_to_dict(value: Value) -> dict[str, Any]:
    if isinstance(value.data, str):
        data: str | list[Any] = value.data
    else:
        data = [_to_plain(item) for item in value.data]
    return {"type": value.type_tag.display_name, "data": data}


def _to_plain(item: Any) -> Any:
    if isinstance(item, Register):
        return _register_to_dict(item)
    if isinstance(item, Value):
        return _value_to_dict(item)
    if isinstance(item, MetadataEntry):
        return {"key": item.key, "value": _value_to_dict(item.value)}
    if isinstance(item, float):
        return _plain_float(item)
    if isinstance(item, TypeTag):
        return item.display_name
    if isinstance(item, Enum):
        return item.name.lower()
    if isinstance(item, tuple | list):
        return [_to_plain(element) for element in item]
    if dataclasses.is_dataclass(item):
        return {
            f.name: _to_plain(getattr(item, f.name)) for f in dataclasses.fields(item)
        }
    return item


def program_to_dict(program: Program) -> dict[str, Any]:
    """Convert ``program`` to JSON-serializable data.

    Parameters and operations carry a ``kind`` key naming their variant.
    Non-finite floats are exported as the strings ``"nan"``, ``"inf"`` and
    ``"-inf"``.
    """
    return {
        "name": program.name,
        "version": program.version,
        "metadata": _to_plain(program.metadata),
        "parameters": [
            {"kind": "texture" if isinstance(p, TextureParameter) else "normal"}
            | _to_plain(p)
            for p in program.parameters
        ],
        "operations": [
            {"kind": OPERATION_KINDS[type(op)]} | _to_plain(op)
            for op in program.operations
        ],
    }

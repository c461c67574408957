"""Shader Inspection Example

This example decodes a Pixel Bender bytecode file and walks the resulting
program: its parameters with their default values, and a count of the
operations by opcode.

Key concepts demonstrated:
1. Decoding a buffer with parse_shader
2. Handling decode failures through DecodeError
3. Reading parameter metadata such as defaultValue
4. Rendering a disassembly listing

To run this example:
    python examples/inspect_shader.py path/to/shader.pbj
    # The same listing from the command line
    pixelbender disasm path/to/shader.pbj
"""

import sys
from collections import Counter
from pathlib import Path

from loguru import logger

from pixelbender import DecodeError, FormatConfig, format_program, parse_shader
from pixelbender.decoder import NormalOp, NormalParameter


def main(path: str) -> int:
    try:
        program = parse_shader(Path(path).read_bytes())
    except DecodeError as e:
        logger.error(f"{path}: {e}")
        return 1

    print(f"{program.name} (version {program.version})")
    for parameter in program.parameters:
        if isinstance(parameter, NormalParameter):
            default = parameter.find_metadata("defaultValue")
            type_name = parameter.value_type.display_name
            print(f"  {parameter.name}: {type_name} = {default}")
        else:
            print(f"  {parameter.name}: image{parameter.channel_count}")

    opcodes = Counter(
        op.opcode.mnemonic if isinstance(op, NormalOp) else type(op).__name__
        for op in program.operations
    )
    for name, count in opcodes.most_common():
        print(f"  {count:4d} {name}")

    print(format_program(program, FormatConfig(show_metadata=False)))
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1]))

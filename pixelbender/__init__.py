from pixelbender.decoder import DecodeError, Program, parse_shader
from pixelbender.decoder.formatting import FormatConfig, format_program, program_to_dict

__version__ = "0.1.0"


__all__ = [
    "DecodeError",
    "Program",
    "parse_shader",
    "FormatConfig",
    "format_program",
    "program_to_dict",
]

"""Command line interface for pixelbender.

This module provides a command-line interface for decoding Pixel Bender
bytecode files and inspecting the result as a summary, a disassembly listing
or JSON.
"""

import json
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, Optional, TypeVar, cast

import typer
from loguru import logger

from pixelbender.decoder import DecodeError, Program, parse_shader
from pixelbender.decoder.formatting import FormatConfig, format_program, program_to_dict
from pixelbender.decoder.ir import NormalParameter, Parameter

LOG_LEVEL_ENV = "PIXELBENDER_LOG_LEVEL"

# Define type variables for TypedCallable
F = TypeVar("F", bound=Callable[..., Any])


# TypedCommand decorator helper
def typed_command(app_command: Any) -> Callable[[F], F]:
    """Wrap typer command with proper typing for mypy."""

    def decorator(func: F) -> F:
        return cast(F, app_command(func))

    return decorator


app = typer.Typer(
    name="pixelbender",
    help=(
        "Decode Pixel Bender shader bytecode. "
        "Commands: info, disasm, export-json."
    ),
    add_completion=False,
)


def _configure_logging(verbose: bool) -> None:
    """Route loguru output to stderr at the requested level.

    Args:
        verbose: Log DEBUG messages; otherwise use $PIXELBENDER_LOG_LEVEL or INFO
    """
    level = "DEBUG" if verbose else os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    logger.remove()
    try:
        logger.add(sys.stderr, level=level)
    except ValueError:
        logger.add(sys.stderr, level="INFO")
        logger.warning(f"Unknown log level {level!r} in ${LOG_LEVEL_ENV}, using INFO")


def _load_program(shader_file: Path) -> Program:
    """Read and decode a bytecode file.

    Args:
        shader_file: Path to the ``.pbj`` file

    Returns:
        The decoded program
    """
    try:
        data = shader_file.read_bytes()
    except OSError as e:
        logger.error(f"Failed to read {shader_file}: {e}")
        raise typer.Exit(1) from e

    logger.debug(f"Read {len(data)} bytes from {shader_file}")
    try:
        return parse_shader(data)
    except DecodeError as e:
        logger.error(f"Failed to decode {shader_file}: {e}")
        raise typer.Exit(1) from e


def _write_output(text: str, output: Path | None) -> None:
    if output is None:
        typer.echo(text)
        return
    logger.info(f"Writing to {output}...")
    try:
        output.write_text(text + "\n")
    except OSError as e:
        logger.error(f"Failed to write {output}: {e}")
        raise typer.Exit(1) from e


def _describe_parameter(parameter: Parameter) -> str:
    if isinstance(parameter, NormalParameter):
        return (
            f"{parameter.qualifier.name.lower()} "
            f"{parameter.value_type.display_name} {parameter.name} "
            f"({parameter.register})"
        )
    return (
        f"texture {parameter.name} "
        f"(index {parameter.index}, {parameter.channel_count} channels)"
    )


# Define reusable arguments
SHADER_FILE_ARG = typer.Argument(..., help="Pixel Bender bytecode (.pbj) file")
OUTPUT_ARG = typer.Argument(None, help="Output file path (stdout if omitted)")
VERBOSE_OPT = typer.Option(False, "--verbose", "-v", help="Enable debug logging")


@typed_command(app.command("info"))
def show_info(
    shader_file: Path = SHADER_FILE_ARG,
    verbose: bool = VERBOSE_OPT,
) -> None:
    """Print a summary of a shader.

    Example: pixelbender info shaders/twirl.pbj
    """
    _configure_logging(verbose)
    program = _load_program(shader_file)

    typer.echo(f"name: {program.name}")
    typer.echo(f"version: {program.version}")
    typer.echo(f"parameters: {len(program.parameters)}")
    for parameter in program.parameters:
        typer.echo(f"  {_describe_parameter(parameter)}")
    typer.echo(f"operations: {len(program.operations)}")


@typed_command(app.command("disasm"))
def disassemble(
    shader_file: Path = SHADER_FILE_ARG,
    output: Optional[Path] = OUTPUT_ARG,
    metadata: bool = typer.Option(
        True, "--metadata/--no-metadata", help="Include metadata entries"
    ),
    indent: int = typer.Option(4, "--indent", "-i", help="Spaces per block level"),
    verbose: bool = VERBOSE_OPT,
) -> None:
    """Write a disassembly listing of a shader.

    Example: pixelbender disasm shaders/twirl.pbj twirl.txt
    """
    _configure_logging(verbose)
    program = _load_program(shader_file)
    config = FormatConfig(indent=" " * indent, show_metadata=metadata)
    _write_output(format_program(program, config), output)


@typed_command(app.command("export-json"))
def export_json(
    shader_file: Path = SHADER_FILE_ARG,
    output: Optional[Path] = OUTPUT_ARG,
    verbose: bool = VERBOSE_OPT,
) -> None:
    """Export a decoded shader as JSON.

    Example: pixelbender export-json shaders/twirl.pbj twirl.json
    """
    _configure_logging(verbose)
    program = _load_program(shader_file)
    text = json.dumps(program_to_dict(program), indent=2, allow_nan=False)
    _write_output(text, output)


if __name__ == "__main__":
    app()

"""Command line interface for reading meters through an optical eye, using Typer."""

import asyncio
from collections.abc import Coroutine
from typing import Annotated, Any

import typer

from . import __version__
from .client import OpticalEyeClient
from .config import Settings
from .exceptions import (
    OpticalEyeConnectionError,
    OpticalEyeProtocolError,
    OpticalEyeTimeoutError,
    UnknownVariableError,
)
from .log import get_logger, setup_logging
from .protocol.display import render_ascii, render_named
from .protocol.response import Response
from .protocol.unit import UNITS
from .registry import VariableRegistry, get_registry
from .transport import OpticalEyeTransport, SerialMode, baudrate_of

app = typer.Typer(
    name="opticaleye",
    help="Read variables from an electricity meter through an optical eye.",
    no_args_is_help=True,
)

logger = get_logger(__name__)

EXIT_USAGE = 2
EXIT_CONNECTION = 3
EXIT_TIMEOUT = 4
EXIT_PROTOCOL = 5

# ============================================================================
# Shared arguments, options and helpers
# ============================================================================

VariableArgument = Annotated[str, typer.Argument(help="Variable id or part of its name (e.g. 1001, 'Serial number')")]
DeviceArgument = Annotated[
    str | None,
    typer.Argument(help="Serial device or pyserial URL (default: OPTICAL_EYE_DEVICE or /dev/ttyUSB0)"),
]
BaudrateArgument = Annotated[
    str | None,
    typer.Argument(help="Baud rate, e.g. 300 or 9600 (default: OPTICAL_EYE_BAUDRATE or 9600)"),
]
TimeoutOption = Annotated[
    float | None,
    typer.Option("--timeout", "-t", help="Seconds to wait for each part of the response"),
]
RegistryOption = Annotated[
    str | None,
    typer.Option("--registry", "-r", help="Variable registry: full or responding"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable debug logging"),
]


def fail(message: str, code: int) -> typer.Exit:
    """Print an error message and return the exit to raise."""
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(code)


def load_settings(verbose: bool) -> Settings:
    """Read settings from the environment and configure logging."""
    settings = Settings.from_env()
    setup_logging("DEBUG" if verbose else settings.loglevel, settings.log_format)
    return settings


def select_registry(name: str | None, settings: Settings) -> VariableRegistry:
    try:
        return get_registry(name or settings.registry)
    except ValueError as e:
        raise fail(str(e), EXIT_USAGE) from None


def open_transport(
    device: str | None,
    baudrate: str | None,
    settings: Settings,
    mode: SerialMode = SerialMode.MODE_8N2,
) -> OpticalEyeTransport:
    """Create the transport from the positional device/baudrate or the settings."""
    try:
        rate = baudrate_of(baudrate) if baudrate is not None else settings.baudrate
    except ValueError as e:
        raise fail(str(e), EXIT_USAGE) from None

    return OpticalEyeTransport(device or settings.device, baudrate=rate, mode=mode)


def resolve_variable(client: OpticalEyeClient, variable: str) -> int:
    try:
        return client.resolve(variable)
    except UnknownVariableError as e:
        raise fail(f"{e}. Usage: opticaleye read VARIABLE [DEVICE [BAUDRATE]]", EXIT_USAGE) from None


def format_response(registry: VariableRegistry, response: Response) -> str:
    return f"{registry.name_of(response.variable_id)} (id {response.variable_id}): {response.value}"


def run_exchange(coroutine: Coroutine[Any, Any, None], verbose: bool) -> None:
    """Run a coroutine talking to the meter and map its errors to exit codes."""
    try:
        asyncio.run(coroutine)
    except OpticalEyeConnectionError as e:
        raise fail(f"Connection error: {e}", EXIT_CONNECTION) from None
    except OpticalEyeTimeoutError as e:
        raise fail(f"Timeout: {e}", EXIT_TIMEOUT) from None
    except OpticalEyeProtocolError as e:
        if e.frame:
            typer.echo(render_named(e.frame), err=True)
        raise fail(f"Protocol error: {e}", EXIT_PROTOCOL) from None
    except ValueError as e:
        raise fail(str(e), EXIT_USAGE) from None
    except KeyboardInterrupt:
        typer.echo("\nStopped by user", err=True)
        raise typer.Exit(0) from None
    except Exception as e:
        logger.debug("unexpected_error", exc_info=verbose)
        raise fail(f"Unexpected error: {e}", 1) from None


# ============================================================================
# Commands
# ============================================================================


@app.command()
def read(
    variable: VariableArgument,
    device: DeviceArgument = None,
    baudrate: BaudrateArgument = None,
    timeout: TimeoutOption = None,
    registry: RegistryOption = None,
    verbose: VerboseOption = False,
) -> None:
    """
    Read one variable and print its value.

    VARIABLE is either a numeric id or part of a variable name; for a name
    the last matching registry entry is used.
    """
    settings = load_settings(verbose)
    variables = select_registry(registry, settings)
    transport = open_transport(device, baudrate, settings)
    client = OpticalEyeClient(transport, variables, timeout or settings.timeout)
    variable_id = resolve_variable(client, variable)

    async def exchange() -> None:
        async with transport:
            response = await client.read_variable(variable_id)
        typer.echo(format_response(variables, response))

    run_exchange(exchange(), verbose)


@app.command()
def monitor(
    variable: VariableArgument,
    device: DeviceArgument = None,
    baudrate: BaudrateArgument = None,
    interval: Annotated[float, typer.Option("--interval", "-i", help="Seconds between reads")] = 1.0,
    count: Annotated[int | None, typer.Option("--count", "-n", help="Stop after this many reads")] = None,
    timeout: TimeoutOption = None,
    registry: RegistryOption = None,
    verbose: VerboseOption = False,
) -> None:
    """
    Read one variable repeatedly and print every value.

    Reads that time out are skipped. Press Ctrl+C to stop.
    """
    settings = load_settings(verbose)

    if interval < 0:
        raise fail(f"Interval must not be negative, got {interval}", EXIT_USAGE)

    variables = select_registry(registry, settings)
    transport = open_transport(device, baudrate, settings)
    client = OpticalEyeClient(transport, variables, timeout or settings.timeout)
    variable_id = resolve_variable(client, variable)

    async def exchange() -> None:
        async with transport:
            async for response in client.poll(variable_id, interval, count):
                typer.echo(format_response(variables, response))

    run_exchange(exchange(), verbose)


@app.command()
def identify(
    device: DeviceArgument = None,
    baudrate: BaudrateArgument = None,
    lines: Annotated[int, typer.Option("--lines", "-l", help="Number of identification lines to read")] = 10,
    timeout: TimeoutOption = None,
    verbose: VerboseOption = False,
) -> None:
    """
    Send the IEC 1107 sign-on (7E1) and print the identification lines.

    Control characters are shown by name, e.g. [CR][LF].
    """
    settings = load_settings(verbose)
    transport = open_transport(device, baudrate, settings, SerialMode.MODE_7E1)
    client = OpticalEyeClient(transport, timeout=timeout or settings.timeout)

    async def exchange() -> None:
        async with transport:
            received = await client.identify(lines)
        for line in received:
            typer.echo(render_ascii(line))

    run_exchange(exchange(), verbose)


@app.command()
def lookup(
    query: Annotated[str, typer.Argument(help="Variable id, or part of a variable name")],
    registry: RegistryOption = None,
    verbose: VerboseOption = False,
) -> None:
    """
    Look up a variable in the registry without talking to the meter.
    """
    settings = load_settings(verbose)
    variables = select_registry(registry, settings)

    text = query.strip()
    if text.isdecimal():
        variable_id = int(text)
    else:
        found = variables.id_of_partial(text)
        if found is None:
            raise fail(f"Unknown variable: {query!r}", EXIT_USAGE)
        variable_id = found

    typer.echo(f"{variables.name_of(variable_id)} (id {variable_id})")


@app.command()
def units() -> None:
    """
    List the unit table: code, unit and representation.
    """
    for unit in UNITS:
        typer.echo(f"{unit.code:3d}  {unit.unit:<12} {unit.representation.name}")


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"opticaleye {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version and exit"),
    ] = None,
) -> None:
    """opticaleye - read meter variables through an optical eye."""


if __name__ == "__main__":
    app()

"""CLI application entry point for confinerbaker.

This module provides the main CLI interface using Typer.
"""

from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from confinerbaker import __version__
from confinerbaker.cli.output import (
    console,
    print_contour_info,
    print_error,
    print_header,
    print_path,
    print_states_table,
    print_step,
    print_success,
)
from confinerbaker.config import BakeConfig, ConfinerSettings, LoggingConfig
from confinerbaker.core import ConfinerOven, is_inside, polygons_to_path
from confinerbaker.domain import Vector2
from confinerbaker.exceptions import BakeError, ConfinerError, ContourFileError
from confinerbaker.io import ContourReader, PathWriter, StateReader, StateWriter
from confinerbaker.utils.logging import configure_logging

# Create the Typer app
app = typer.Typer(
    name="confinerbaker",
    help="Bake camera confiner shapes for every camera view size.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Confinerbaker[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Bake camera confiner shapes for every camera view size."""


def _check_input(input_file: Path) -> None:
    """Exit with an error unless input_file is an existing file."""
    if not input_file.exists():
        print_error(
            f"Input file not found: {input_file}",
            details=f"The file '{input_file}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not input_file.is_file():
        print_error(
            f"Input path is not a file: {input_file}",
            details="Please provide a path to a JSON contour file.",
        )
        raise typer.Exit(code=1)


def _build_settings(
    aspect: float,
    step: float,
    max_window: float,
    shrink_to_point: bool,
    log_file: Path | None,
    log_level: str,
) -> ConfinerSettings:
    """Create settings from CLI arguments, exiting on invalid values."""
    try:
        return ConfinerSettings(
            bake=BakeConfig(
                aspect_ratio=aspect,
                shrink_step=step,
                max_window_size=max_window,
                shrink_to_point=shrink_to_point,
            ),
            logging=LoggingConfig(log_file=log_file, log_level=log_level),
        )
    except ValidationError as e:
        print_error("Invalid settings", details=str(e))
        raise typer.Exit(code=1)


@app.command()
def bake(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="Path to a JSON file with the confining contours",
            show_default=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path (default: {name}-baked.json)",
        ),
    ] = None,
    aspect: Annotated[
        float,
        typer.Option(
            "--aspect",
            "-a",
            help="Camera aspect ratio (width / height)",
            min=0.01,
        ),
    ] = 1.0,
    step: Annotated[
        float,
        typer.Option(
            "--step",
            "-s",
            help="Shrink step per bake iteration",
            min=0.0001,
        ),
    ] = 0.005,
    max_window: Annotated[
        float,
        typer.Option(
            "--max-window",
            "-m",
            help="Largest window size to bake (0 = unbounded)",
            min=0.0,
        ),
    ] = 0.0,
    shrink_to_point: Annotated[
        bool,
        typer.Option(
            "--shrink-to-point",
            help="Collapse shapes to a point instead of freezing them",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
) -> None:
    """Bake confiner states for a set of contours.

    Example:
        confinerbaker bake level.json --aspect 1.777

    This will create level-baked.json with one state per topology change,
    ready to be queried for any camera frustum height.
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    _check_input(input_file)
    settings = _build_settings(aspect, step, max_window, shrink_to_point, log_file, log_level)

    if not quiet:
        print_header(__version__)

    try:
        logger = configure_logging(
            log_file=settings.logging.log_file,
            console_level=settings.logging.log_level,
            file_level=settings.logging.file_log_level,
            quiet=quiet,
        )

        if not quiet:
            print_step("Loading contours")
        contours = ContourReader(input_file).load()
        if not quiet:
            print_contour_info(str(input_file), contours)
            print_step("Baking")

        oven = ConfinerOven(settings, logger)
        states = oven.bake(contours)
        stats = oven.bake_logger.stats

        if not states:
            raise BakeError("the contours are degenerate or could not be shrunk")

        output_path = output or StateWriter.get_baked_path(input_file)
        StateWriter(output_path).write(states, settings.bake.model_dump())

        if verbose:
            print_states_table(states)

        if not quiet:
            print_success(
                output_path=str(output_path),
                total_time_s=stats.duration_seconds,
                states=len(states),
                levels=stats.levels,
                splits=stats.splits,
                warnings=len(stats.warnings),
            )

    except ContourFileError as e:
        print_error(f"Could not load contours: {e.reason}")
        raise typer.Exit(code=1)
    except ConfinerError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # Re-raise typer.Exit to allow clean exits
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


@app.command()
def path(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="Contour file, or a state file written by 'bake'",
            show_default=False,
        ),
    ],
    frustum_height: Annotated[
        float,
        typer.Option(
            "--frustum-height",
            "-f",
            help="Camera frustum height to convert the confiner for",
            min=0.0,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write the path to a JSON file instead of the console",
        ),
    ] = None,
    aspect: Annotated[
        float,
        typer.Option(
            "--aspect",
            "-a",
            help="Camera aspect ratio when baking contours",
            min=0.01,
        ),
    ] = 1.0,
    step: Annotated[
        float,
        typer.Option(
            "--step",
            "-s",
            help="Shrink step when baking contours",
            min=0.0001,
        ),
    ] = 0.005,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="List every point of the path",
        ),
    ] = False,
) -> None:
    """Print the confiner path for one camera frustum height.

    Example:
        confinerbaker path level-baked.json --frustum-height 2.5
    """
    _check_input(input_file)
    settings = _build_settings(aspect, step, 0.0, False, None, "WARNING")

    try:
        logger = configure_logging(quiet=True)
        oven = ConfinerOven(settings, logger)

        reader = ContourReader(input_file)
        if reader.is_state_file():
            oven.load(StateReader(input_file).load())
        else:
            oven.bake(reader.load())

        state = oven.get_state(frustum_height)
        confiner_path = polygons_to_path(state.polygons, frustum_height, settings.geometry)

        if output is not None:
            PathWriter(output).write(confiner_path, frustum_height)
            console.print(f"  {output}")
        else:
            print_path(confiner_path, frustum_height, verbose)

    except ConfinerError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


@app.command()
def inside(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="Path to a JSON file with contours",
            show_default=False,
        ),
    ],
    x: Annotated[float, typer.Argument(help="X coordinate of the point")],
    y: Annotated[float, typer.Argument(help="Y coordinate of the point")],
) -> None:
    """Check whether a point lies inside a set of contours."""
    _check_input(input_file)
    try:
        contours = ContourReader(input_file).load()
    except ContourFileError as e:
        print_error(f"Could not load contours: {e.reason}")
        raise typer.Exit(code=1)

    if is_inside(contours, Vector2(x, y)):
        console.print(f"({x:g}, {y:g}) is [green]inside[/green]")
    else:
        console.print(f"({x:g}, {y:g}) is [red]outside[/red]")


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()

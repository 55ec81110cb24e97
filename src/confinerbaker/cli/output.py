"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with tables and formatted messages.
"""

from collections.abc import Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from confinerbaker.domain import ConfinerState, Vector2

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Confinerbaker[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_contour_info(path: str, contours: Sequence[Sequence[Vector2]]) -> None:
    """Print input contour information.

    Args:
        path: Path to the contour file
        contours: Loaded contours
    """
    line = Text("  ")
    line.append(path)
    console.print(line)
    point_count = sum(len(c) for c in contours)
    console.print(f"  {len(contours)} contours {SYM_DOT} {point_count} points")


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_states_table(states: Sequence[ConfinerState], limit: int = 20) -> None:
    """Print a table of baked states.

    Args:
        states: Baked states ordered by window size
        limit: Maximum number of rows shown
    """
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("#", justify="right")
    table.add_column("Window size", justify="right")
    table.add_column("State", justify="right")
    table.add_column("Polygons", justify="right")
    table.add_column("Points", justify="right")

    for index, state in enumerate(states[:limit]):
        table.add_row(
            str(index),
            f"{state.window_size:.4f}",
            f"{state.state:.2f}",
            str(len(state.polygons)),
            str(sum(len(p) for p in state.polygons)),
        )
    console.print(table)
    if len(states) > limit:
        console.print(f"  {SYM_DOT}{SYM_DOT}{SYM_DOT} (+{len(states) - limit} more)")


def print_success(
    output_path: str,
    total_time_s: float,
    states: int,
    levels: int,
    splits: int,
    warnings: int,
) -> None:
    """Print success message with bake summary.

    Args:
        output_path: Path to output file
        total_time_s: Total bake time in seconds
        states: Number of states written
        levels: Number of bake levels computed
        splits: Number of polygon splits
        warnings: Number of warnings logged
    """
    time_str = _format_time(total_time_s)
    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    line = Text("  ")
    line.append(output_path, style="bold")
    console.print(line)

    warning_style = "yellow" if warnings > 0 else "green"
    console.print(
        f"  {states} states {SYM_DOT} {levels} levels {SYM_DOT} {splits} splits {SYM_DOT} "
        f"[{warning_style}]{warnings} warnings[/{warning_style}]"
    )


def print_path(path: Sequence[Sequence[Vector2]], frustum_height: float, verbose: bool) -> None:
    """Print a confiner path.

    Args:
        path: Contours of the path
        frustum_height: Frustum height the path was converted for
        verbose: Whether to list every point
    """
    console.print(
        f"  frustum height {frustum_height:g} {SYM_DOT} {len(path)} contours {SYM_DOT} "
        f"{sum(len(c) for c in path)} points"
    )
    if verbose:
        for index, contour in enumerate(path):
            points = ", ".join(f"({p.x:.4f}, {p.y:.4f})" for p in contour)
            console.print(f"  [{index}] {points}")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")

"""stopclock CLI - time commands from the shell.

This module provides a small command-line driver around the Stopwatch API:
a demo that mirrors the library's example program, and a ``run`` command
that times a subprocess over one or more repetitions.
"""

from __future__ import annotations

import json
import subprocess
import sys
import time
from pathlib import Path
from typing import Any, List, Optional, Union

try:
    import typer
    import yaml
    from rich.console import Console
    from rich.table import Table
except ImportError as e:
    print(
        f"CLI dependencies not installed: {e}\n"
        "Install with: pip install stopclock[cli]",
        file=sys.stderr,
    )
    sys.exit(1)

from stopclock.core.config import MeasureOnStop
from stopclock.core.stopwatch import Stopwatch
from stopclock.core.timespec import (
    Duration,
    subtract,
    to_micros,
    to_millis,
    to_nanos,
    to_seconds,
)
from stopclock.errors import StopclockError

app = typer.Typer(
    name="stopclock",
    help="stopclock - monotonic stopwatch CLI",
    no_args_is_help=True,
)

console = Console()

# Default configuration
DEFAULT_CONFIG = {
    "measure_on_stop": "disabled",
    "unit": "ms",
    "repeat": 1,
}

CONFIG_FILE = ".stopclock.yaml"

UNITS = ("s", "ms", "us", "ns")


def load_config() -> dict[str, Any]:
    """Load configuration from .stopclock.yaml file."""
    config_path = Path(CONFIG_FILE)
    if not config_path.exists():
        return DEFAULT_CONFIG.copy()

    try:
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}
            return {**DEFAULT_CONFIG, **config}
    except Exception as e:
        console.print(f"[yellow]Warning: Failed to load {CONFIG_FILE}: {e}[/yellow]")
        return DEFAULT_CONFIG.copy()


def save_config(config: dict[str, Any]) -> None:
    """Save configuration to .stopclock.yaml file."""
    try:
        with open(CONFIG_FILE, "w") as f:
            yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
        console.print(f"[green]✓ Configuration saved to {CONFIG_FILE}[/green]")
    except OSError as e:
        console.print(f"[red]✗ Failed to save configuration: {e}[/red]")
        raise typer.Exit(1)


def duration_value(duration: Duration, unit: str) -> Union[float, int]:
    """Convert a duration to a number in the given unit."""
    if unit == "s":
        return to_seconds(duration)
    elif unit == "ms":
        return to_millis(duration)
    elif unit == "us":
        return to_micros(duration)
    elif unit == "ns":
        return to_nanos(duration)
    else:
        raise ValueError(f"Unknown unit: {unit} (use s, ms, us, or ns)")


def format_duration(duration: Duration, unit: str) -> str:
    """Format a duration like '1.000000 s' or '1000 ms'."""
    value = duration_value(duration, unit)
    if unit == "s":
        return f"{value:f} s"
    return f"{value} {unit}"


@app.command()
def init() -> None:
    """Initialize stopclock configuration with interactive prompts."""
    console.print("[bold blue]stopclock Configuration Setup[/bold blue]\n")

    # Load existing config if available
    existing_config = load_config()

    measure_on_stop = typer.prompt(
        "Measure on stop (enabled/disabled)",
        default=existing_config.get("measure_on_stop", "disabled"),
    )
    try:
        measure_on_stop = MeasureOnStop.parse(measure_on_stop).value
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    unit = typer.prompt("Display unit (s/ms/us/ns)", default=existing_config.get("unit", "ms"))
    if unit not in UNITS:
        console.print(f"[red]Unit must be one of: {', '.join(UNITS)}[/red]")
        raise typer.Exit(1)

    repeat_str = typer.prompt("Default repetitions", default=str(existing_config.get("repeat", 1)))
    try:
        repeat = int(repeat_str)
    except ValueError:
        console.print("[red]Invalid repetition count[/red]")
        raise typer.Exit(1)
    if repeat < 1:
        console.print("[red]Repetitions must be at least 1[/red]")
        raise typer.Exit(1)

    save_config(
        {
            "measure_on_stop": measure_on_stop,
            "unit": unit,
            "repeat": repeat,
        }
    )


@app.command()
def demo(
    seconds: float = typer.Option(1.0, "--seconds", "-s", help="How long to sleep"),
) -> None:
    """Time a sleep and print the elapsed time in every unit."""
    config = load_config()

    try:
        sw = Stopwatch(name="demo", measure_on_stop=config.get("measure_on_stop"))
        sw.start()
        time.sleep(seconds)
        sw.stop()
        if sw.measure_on_stop is MeasureOnStop.DISABLED:
            sw.measure()
    except (StopclockError, ValueError) as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1)

    for unit in UNITS:
        console.print(f"Elapsed time: {format_duration(sw.elapsed, unit)}")


@app.command(context_settings={"allow_interspersed_args": False})
def run(
    command: List[str] = typer.Argument(..., help="Command to time, with its arguments"),
    repeat: Optional[int] = typer.Option(
        None, "--repeat", "-r", help="Number of runs (default: from config)"
    ),
    unit: Optional[str] = typer.Option(
        None, "--unit", "-u", help="Display unit: s, ms, us, or ns (default: from config)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
) -> None:
    """Run a command one or more times and report how long it took.

    Options go before the command, e.g. ``stopclock run -r 5 -- make test``.
    """
    config = load_config()
    if repeat is None:
        try:
            repeat = int(config.get("repeat", 1))
        except (TypeError, ValueError):
            console.print(f"[red]Invalid repetition count in {CONFIG_FILE}[/red]")
            raise typer.Exit(1)
    unit = unit or config.get("unit", "ms")

    if repeat < 1:
        console.print("[red]Repetitions must be at least 1[/red]")
        raise typer.Exit(1)
    if unit not in UNITS:
        console.print(f"[red]Invalid unit: {unit} (use s, ms, us, or ns)[/red]")
        raise typer.Exit(1)

    # Laps accumulate into one total, so stop() must not overwrite it
    sw = Stopwatch(name=command[0], measure_on_stop=MeasureOnStop.DISABLED)
    sw.reset()
    runs: list[dict[str, Any]] = []

    try:
        for index in range(1, repeat + 1):
            sw.start()
            result = subprocess.run(command)
            sw.stop()
            sw.lap()
            runs.append(
                {
                    "run": index,
                    "elapsed": subtract(sw.started_at, sw.ended_at),
                    "returncode": result.returncode,
                }
            )
    except FileNotFoundError:
        console.print(f"[red]✗ Command not found: {command[0]}[/red]")
        raise typer.Exit(1)
    except OSError as e:
        console.print(f"[red]✗ Failed to run {command[0]}: {e}[/red]")
        raise typer.Exit(1)
    except StopclockError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1)

    total = sw.elapsed
    mean = Duration.from_nanos(to_nanos(total) // repeat)
    failures = [r for r in runs if r["returncode"] != 0]

    if as_json:
        payload = {
            "command": command,
            "unit": unit,
            "runs": [
                {
                    "run": r["run"],
                    "elapsed": duration_value(r["elapsed"], unit),
                    "returncode": r["returncode"],
                }
                for r in runs
            ],
            "total": duration_value(total, unit),
            "mean": duration_value(mean, unit),
        }
        typer.echo(json.dumps(payload, indent=2))
    else:
        table = Table(title=f"{' '.join(command)} ({repeat} run{'s' if repeat != 1 else ''})")
        table.add_column("Run", style="bold yellow", justify="right")
        table.add_column("Elapsed", justify="right")
        table.add_column("Exit", justify="center")

        for r in runs:
            status_color = "green" if r["returncode"] == 0 else "red"
            table.add_row(
                str(r["run"]),
                format_duration(r["elapsed"], unit),
                f"[{status_color}]{r['returncode']}[/{status_color}]",
            )

        console.print(table)
        console.print(f"[bold]Total:[/bold] {format_duration(total, unit)}")
        console.print(f"[bold]Mean:[/bold] {format_duration(mean, unit)}")

    if failures:
        if not as_json:
            console.print(
                f"[yellow]{len(failures)} of {repeat} runs exited with a non-zero status[/yellow]"
            )
        raise typer.Exit(1)


def main() -> None:
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()

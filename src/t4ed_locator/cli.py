#!/usr/bin/env python3
"""Command-line front end for t4ed-locator using Typer."""

import json
import logging
from typing import Any, Optional

import typer
from typing_extensions import Annotated

from . import __version__  # type: ignore
from .errors import LayoutError, PickLightIOError
from .layout import RackLayout, get_default_layout
from .picker import LocationPicker
from .picklight import PickLightRenderer
from .render import TextRackRenderer
from .types import InputSource, Outcome, OutcomeKind

app = typer.Typer(
    name="t4ed",
    help="Locate T4ED rack cells by sequence number, draw the rack, and drive pick-to-light lamps.",
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)

# ============================================================================
# Shared options and helpers
# ============================================================================

SequenceArgument = Annotated[str, typer.Argument(help="Sequence number as typed by the operator (e.g. 42)")]
ProfileOption = Annotated[
    str,
    typer.Option("--profile", help="Rack layout profile", envvar="T4ED_PROFILE"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable debug logging"),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Output as JSON"),
]
HostOption = Annotated[
    Optional[str],
    typer.Option("--host", "-h", help="Rack PLC hostname or IP address", envvar="T4ED_HOST"),
]
PortOption = Annotated[
    int,
    typer.Option("--port", "-p", help="Modbus TCP port", envvar="T4ED_PORT"),
]
UnitIdOption = Annotated[
    int,
    typer.Option("--unit-id", "-u", help="Modbus unit ID", envvar="T4ED_UNIT_ID"),
]
TimeoutOption = Annotated[
    float,
    typer.Option("--timeout", "-t", help="Connection timeout in seconds", envvar="T4ED_TIMEOUT"),
]
RetriesOption = Annotated[
    int,
    typer.Option("--retries", "-r", help="Number of retries on failure", envvar="T4ED_RETRIES"),
]


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbose flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if not verbose else "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def load_layout(profile: str) -> RackLayout:
    """Load the layout profile or exit with status 2."""
    try:
        return get_default_layout(profile)
    except LayoutError as e:
        typer.echo(f"Error: Invalid layout: {e}", err=True)
        raise typer.Exit(2)


def outcome_to_dict(outcome: Outcome, layout: RackLayout) -> dict[str, Any]:
    """JSON-ready view of an outcome; cell details only for VALID."""
    data: dict[str, Any] = {"raw": outcome.raw, "outcome": outcome.kind.value}
    coord = outcome.coordinate
    if coord is not None:
        pos = layout.position(coord)
        data.update(
            {
                "sequence": layout.sequence_of(coord),
                "rack": coord.rack,
                "index": coord.index,
                "column": layout.column_of(coord),
                "slot": layout.slot_of(coord),
                "row": pos.row,
                "display_column": pos.column,
            }
        )
    if outcome.error is not None:
        data["error"] = outcome.error.kind.value
        data["message"] = outcome.error.message
    return data


def parse_event(line: str) -> tuple[InputSource, Optional[str]]:
    """
    Parse one replay line: "SEQ" (typed) or "SOURCE [SEQ]" with SOURCE one of
    typed/click/hover/drag/reset. A pointer source without SEQ means the pointer is
    not over a cell.
    """
    text = line.rstrip("\r\n")
    head, sep, rest = text.partition(" ")
    try:
        source = InputSource(head)
    except ValueError:
        return InputSource.TYPED, text
    if not sep:
        return source, None if source.is_pointer else ""
    return source, rest


def format_state(
    source: InputSource, raw: Optional[str], outcome: Optional[Outcome], picker: LocationPicker
) -> str:
    """One-line summary of the picker after an event; outcome is None when the event was ignored."""
    if raw is None or outcome is None:
        return f"{source.value:<5} (no cell) -> ignored"
    parts = [f"{source.value:<5} {raw!r} -> {outcome.kind.value}"]
    if outcome.coordinate is not None:
        parts.append(f"rack={outcome.coordinate.rack} index={outcome.coordinate.index}")
    if len(picker.errors):
        parts.append("errors=" + "; ".join(picker.errors.messages))
    return " ".join(parts)


# ============================================================================
# Commands
# ============================================================================


@app.command()
def locate(
    sequence: SequenceArgument,
    profile: ProfileOption = "t4ed",
    verbose: VerboseOption = False,
    json_output: JsonOption = False,
) -> None:
    """
    Resolve a sequence to its rack and cell.

    Exits 0 for a valid or empty sequence, 2 when the sequence is rejected.
    """
    setup_logging(verbose)
    layout = load_layout(profile)
    picker = LocationPicker(layout)
    outcome = picker.on_input(sequence)
    info = outcome_to_dict(outcome, layout)

    if json_output:
        typer.echo(json.dumps(info, indent=2))
    elif outcome.kind == OutcomeKind.VALID:
        typer.echo(f"Sequence:  {info['sequence']}")
        typer.echo(f"Rack:      {info['rack']}")
        typer.echo(f"Index:     {info['index']}")
        typer.echo(f"Column:    {info['column']} (from the right)")
        typer.echo(f"Slot:      {info['slot']} (from the bottom)")
    elif outcome.kind == OutcomeKind.EMPTY:
        typer.echo("No sequence entered")

    if outcome.error is not None:
        if not json_output:
            typer.echo(f"Error: {outcome.error}", err=True)
        raise typer.Exit(2)


@app.command()
def show(
    sequence: SequenceArgument,
    rack: Annotated[Optional[int], typer.Option("--rack", help="Rack to draw (default: rack of the sequence)")] = None,
    profile: ProfileOption = "t4ed",
    verbose: VerboseOption = False,
) -> None:
    """
    Draw a rack with the cell for SEQUENCE bracketed.

    Rejected sequences draw the rack without a selection, followed by the error.
    """
    setup_logging(verbose)
    layout = load_layout(profile)
    if rack is not None and not 1 <= rack <= layout.racks:
        typer.echo(f"Error: Rack must be between 1 and {layout.racks}, got {rack}", err=True)
        raise typer.Exit(2)

    renderer = TextRackRenderer(layout)
    picker = LocationPicker(layout, renderer=renderer, display=renderer)
    outcome = picker.on_input(sequence)
    typer.echo(renderer.render(rack))
    if outcome.error is not None:
        raise typer.Exit(2)


@app.command()
def replay(
    events: Annotated[
        typer.FileText,
        typer.Argument(help="Event file, one event per line: SEQ or SOURCE [SEQ] (default: stdin)"),
    ] = "-",  # type: ignore[assignment]
    profile: ProfileOption = "t4ed",
    verbose: VerboseOption = False,
    json_output: JsonOption = False,
) -> None:
    """
    Feed a series of input events through one picker and print the state after each.

    SOURCE is typed, click, hover, drag or reset. Every source goes through the same
    pipeline; pointer events also copy their value into the input box.

    Outputs format:
    - text: one summary line per event (default)
    - json: NDJSON with outcome, input box text and active errors per event
    """
    setup_logging(verbose)
    layout = load_layout(profile)
    renderer = TextRackRenderer(layout)
    picker = LocationPicker(layout, renderer=renderer, display=renderer)

    for line in events:
        source, raw = parse_event(line)
        if not source.is_pointer:
            renderer.set_input_text(raw or "")
        result = picker.dispatch(raw, source) if raw is not None else None

        if json_output:
            record: dict[str, Any] = {"source": source.value}
            if result is None:
                record["ignored"] = True
            else:
                record.update(outcome_to_dict(result, layout))
            record["input"] = renderer.input_text
            record["errors"] = picker.errors.messages
            typer.echo(json.dumps(record))
        else:
            typer.echo(format_state(source, raw, result, picker))


@app.command()
def light(
    sequence: SequenceArgument,
    host: HostOption = None,
    port: PortOption = 502,
    unit_id: UnitIdOption = 1,
    timeout: TimeoutOption = 3.0,
    retries: RetriesOption = 1,
    coil_base: Annotated[int, typer.Option("--coil-base", help="Coil offset of rack 1, cell 1", envvar="T4ED_COIL_BASE")] = 0,
    rack_register: Annotated[
        int, typer.Option("--rack-register", help="Holding register of the rack indicator", envvar="T4ED_RACK_REGISTER")
    ] = 0,
    error_coil: Annotated[
        Optional[int], typer.Option("--error-coil", help="Coil lit while an error is shown", envvar="T4ED_ERROR_COIL")
    ] = None,
    profile: ProfileOption = "t4ed",
    verbose: VerboseOption = False,
) -> None:
    """
    Light the pick-to-light lamp for SEQUENCE on the rack PLC.

    Every lamp (and --error-coil) is switched off on connect, so only the
    lamp for SEQUENCE stays lit. A rejected sequence leaves all cell lamps
    off and lights --error-coil if given.
    """
    setup_logging(verbose)
    if not host:
        typer.echo("Error: --host is required for this command", err=True)
        raise typer.Exit(2)
    layout = load_layout(profile)

    try:
        renderer = PickLightRenderer(
            host=host,
            port=port,
            unit_id=unit_id,
            layout=layout,
            coil_base=coil_base,
            rack_register=rack_register,
            error_coil=error_coil,
            timeout=timeout,
            retries=retries,
        )
        with renderer:
            picker = LocationPicker(layout, renderer=renderer, display=renderer)
            outcome = picker.on_input(sequence)
            if outcome.coordinate is not None:
                coil = renderer.lamp_offset(outcome.coordinate)
                typer.echo(
                    f"OK: Lit rack {outcome.coordinate.rack} cell {outcome.coordinate.local_sequence} (coil {coil})"
                )
            elif outcome.error is not None:
                typer.echo(f"Error: {outcome.error}", err=True)
                raise typer.Exit(2)
            else:
                typer.echo("OK: No sequence entered, lamps off")
    except ValueError as e:
        typer.echo(f"Error: Invalid option: {e}", err=True)
        raise typer.Exit(2)
    except PickLightIOError as e:
        typer.echo(f"Error: Connection/Modbus error: {e}", err=True)
        raise typer.Exit(3)
    except typer.Exit:
        raise
    except Exception as e:
        typer.echo(f"Error: Unexpected error: {e}", err=True)
        if verbose:
            import traceback
            traceback.print_exc()
        raise typer.Exit(4)


@app.command()
def info(
    profile: ProfileOption = "t4ed",
    verbose: VerboseOption = False,
    json_output: JsonOption = False,
) -> None:
    """Show package version and the geometry of the layout profile."""
    setup_logging(verbose)
    layout = load_layout(profile)

    info_data = {
        "version": __version__,
        "profile": layout.profile,
        "racks": layout.racks,
        "columns": layout.columns,
        "cells_per_column": layout.cells_per_column,
        "sequence_range": [layout.min_sequence, layout.max_sequence],
    }

    if json_output:
        typer.echo(json.dumps(info_data, indent=2))
    else:
        typer.echo(f"t4ed-locator version: {info_data['version']}")
        typer.echo(f"Profile:   {layout.profile}")
        typer.echo(f"Racks:     {layout.racks} x {layout.columns} columns x {layout.cells_per_column} cells")
        typer.echo(f"Sequences: {layout.min_sequence}..{layout.max_sequence}")


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"t4ed-locator {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version and exit"),
    ] = None,
) -> None:
    """t4ed - locate T4ED rack cells by sequence number."""
    pass


if __name__ == "__main__":
    app()

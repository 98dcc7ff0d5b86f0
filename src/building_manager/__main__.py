"""Building Manager CLI.

Usage:
    python -m building_manager <command> <save file> [options]

Every command loads a text save file and prints a JSON result on stdout.
Nothing is written back, except by ``simulate --save``. The save format
holds structure only, so drill flags and timer progress are not kept.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer

from building_manager.models.building import Building
from building_manager.models.errors import BuildingError
from building_manager.models.room import Room, RoomType
from building_manager.persistence.loader import FileFormatError, load_buildings, save_buildings
from building_manager.simulation.driver import Simulation

app = typer.Typer(
    name="building_manager",
    help="Building Manager — floors, rooms, hazard sensing and maintenance rotation.",
    no_args_is_help=True,
)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr")):
    """Building Manager CLI."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load(path: str, simulation: Simulation | None = None) -> list[Building]:
    """Load all buildings from a save file, failing with a JSON error."""
    clock = simulation.clock if simulation is not None else None
    try:
        return load_buildings(path, clock=clock)
    except FileNotFoundError:
        _output({"ok": False, "error": f"Save file not found: {path}"})
        raise typer.Exit(1)
    except FileFormatError as e:
        _output({"ok": False, "error": str(e)})
        raise typer.Exit(1)


def _room_json(room: Room) -> dict:
    return {
        "number": room.room_number,
        "type": room.room_type.value,
        "area_m2": round(room.area, 2),
        "state": room.evaluate_state().value,
        "sensors": [s.kind.value for s in room.sensors],
        "evaluator": room.hazard_evaluator.kind if room.hazard_evaluator else None,
        "hazard_level": room.hazard_level(),
    }


def _maintenance_json(building: Building) -> list[dict]:
    result = []
    for floor in building.floors:
        schedule = floor.maintenance_schedule
        if schedule is None:
            continue
        result.append({
            "floor": floor.floor_number,
            "order": list(schedule.room_order),
            "current_room": schedule.room_order[schedule.current_index],
            "minutes_elapsed": schedule.minutes_elapsed,
        })
    return result


def _output(data: dict) -> None:
    """Print JSON output to stdout."""
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


# ---------------------------------------------------------------------------
# Read-only commands
# ---------------------------------------------------------------------------

@app.command()
def version() -> None:
    """Show version."""
    from building_manager import __version__

    typer.echo(f"building-manager v{__version__}")


@app.command()
def validate(path: str = typer.Argument(..., help="Save file")):
    """Audit every invariant of every building in a save file."""
    buildings = _load(path)
    results = []
    for building in buildings:
        errors = building.validate()
        results.append({
            "building": building.name,
            "errors": sum(1 for e in errors if e.severity == "error"),
            "warnings": sum(1 for e in errors if e.severity == "warning"),
            "details": [
                {"severity": e.severity, "element_type": e.element_type,
                 "element_id": e.element_id, "message": e.message}
                for e in errors
            ],
        })
    _output({"ok": True, "buildings": results})


@app.command()
def summary(path: str = typer.Argument(..., help="Save file")):
    """Floors, rooms, room states and hazard levels."""
    buildings = _load(path)
    result = []
    for building in buildings:
        floors = []
        for floor in building.floors:
            floors.append({
                "number": floor.floor_number,
                "width": floor.width,
                "length": floor.length,
                "footprint_m2": round(floor.footprint_area(), 2),
                "occupied_m2": round(floor.occupied_area(), 2),
                "rooms": [_room_json(r) for r in floor.rooms],
            })
        result.append({
            "name": building.name,
            "floors": floors,
            "maintenance": _maintenance_json(building),
        })
    _output({"ok": True, "buildings": result})


@app.command()
def recommend(path: str = typer.Argument(..., help="Save file")):
    """Recommend the most comfortable open study room in each building."""
    from building_manager.queries.study_room import average_comfort, recommend_study_room

    buildings = _load(path)
    result = []
    for building in buildings:
        room = recommend_study_room(building)
        result.append({
            "building": building.name,
            "room": room.room_number if room else None,
            "comfort": average_comfort(room) if room else None,
        })
    _output({"ok": True, "recommendations": result})


@app.command()
def render(
    path: str = typer.Argument(..., help="Save file"),
    output_dir: str = typer.Argument(..., help="Output directory"),
):
    """Render the floor occupancy chart of each building to PNG."""
    buildings = _load(path)
    out = Path(output_dir)
    rendered = []
    for building in buildings:
        if not building.floors:
            continue
        filename = f"{building.name.lower().replace(' ', '_')}.png"
        img_path = building.render_overview(out / filename)
        rendered.append({"building": building.name, "path": str(img_path)})
    _output({"ok": True, "rendered": rendered})


# ---------------------------------------------------------------------------
# Commands that change the model
# ---------------------------------------------------------------------------

@app.command()
def drill(
    path: str = typer.Argument(..., help="Save file"),
    building_name: Optional[str] = typer.Option(None, "--building", "-b", help="Only this building"),
    room_type: Optional[str] = typer.Option(None, "--room-type", "-t", help="STUDY, OFFICE or LABORATORY"),
):
    """Start a fire drill and report the resulting room states."""
    buildings = _load(path)
    try:
        rtype = RoomType[room_type.upper()] if room_type else None
    except KeyError:
        _output({"ok": False, "error": f"Unknown room type: {room_type}"})
        raise typer.Exit(1)

    result = []
    for building in buildings:
        if building_name and building.name != building_name:
            continue
        try:
            building.fire_drill(rtype)
        except BuildingError as e:
            _output({"ok": False, "building": building.name, "error": str(e)})
            raise typer.Exit(1)
        result.append({
            "building": building.name,
            "rooms": [
                {"floor": f.floor_number, "room": r.room_number, "state": r.evaluate_state().value}
                for f, r in building.iter_rooms()
            ],
        })
    _output({"ok": True, "drills": result})


@app.command()
def simulate(
    path: str = typer.Argument(..., help="Save file"),
    minutes: int = typer.Option(60, "--minutes", "-m", min=0, help="Minutes to simulate"),
    save: Optional[str] = typer.Option(None, "--save", "-s", help="Write the result to this save file"),
):
    """Advance the simulation clock and report maintenance progress."""
    simulation = Simulation()
    buildings = _load(path, simulation)
    for building in buildings:
        simulation.attach(building)

    faults = simulation.run(minutes)

    output: dict = {
        "ok": True,
        "minutes": simulation.clock.minute,
        "faults": [
            {"minute": f.minute, "consumer": type(f.consumer).__name__, "error": str(f.error)}
            for f in faults
        ],
        "buildings": [
            {"name": b.name, "maintenance": _maintenance_json(b)} for b in buildings
        ],
    }
    if save:
        output["saved"] = str(save_buildings(buildings, save))
    _output(output)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    app()

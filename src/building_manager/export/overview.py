"""Building occupancy overview — all floors in one chart.

One horizontal bar per floor, ground floor at the bottom. Each bar is split
into the floor's rooms (by area, coloured by room state) and the remaining
free area, against a frame showing the full footprint.
"""

from __future__ import annotations

from pathlib import Path

import matplotlib
matplotlib.use("Agg")  # headless rendering
import matplotlib.pyplot as plt
from matplotlib.patches import Patch

from building_manager.models.building import Building
from building_manager.models.room import RoomState

STATE_COLORS: dict[RoomState, str] = {
    RoomState.OPEN: "#8fd19e",
    RoomState.MAINTENANCE: "#f5c26b",
    RoomState.EVACUATE: "#e8747c",
    RoomState.ERROR: "#9e9e9e",
}
FREE_COLOR = "#f4f4f4"


def render_overview(
    building: Building,
    output_path: str | Path,
    dpi: int = 150,
    show_labels: bool = True,
) -> Path:
    """Render the occupancy of every floor as stacked bars.

    Args:
        building: Building to render.
        output_path: Output image path.
        dpi: Image resolution.
        show_labels: Write room numbers inside their segments.

    Returns:
        Path to the output image.
    """
    output_path = Path(output_path)
    if not building.floors:
        raise ValueError("Building has no floors to render")
    output_path.parent.mkdir(parents=True, exist_ok=True)

    floors = sorted(building.floors, key=lambda f: f.floor_number)
    fig, ax = plt.subplots(1, 1, figsize=(10, 1.2 * len(floors) + 1.5))

    for y, floor in enumerate(floors):
        left = 0.0
        for room in floor.rooms:
            state = room.evaluate_state()
            ax.barh(
                y, room.area, left=left, height=0.6,
                color=STATE_COLORS[state], edgecolor="black", linewidth=0.6,
            )
            if show_labels:
                ax.text(
                    left + room.area / 2, y, str(room.room_number),
                    ha="center", va="center", fontsize=8,
                )
            left += room.area
        free = floor.footprint_area() - left
        if free > 0:
            ax.barh(y, free, left=left, height=0.6, color=FREE_COLOR, edgecolor="grey", linewidth=0.4)
        # footprint frame
        ax.barh(
            y, floor.footprint_area(), height=0.6, fill=False,
            edgecolor="black", linewidth=1.4,
        )

    ax.set_yticks(range(len(floors)))
    ax.set_yticklabels([f"Floor {f.floor_number}" for f in floors])
    ax.set_xlabel("Area (m²)")
    ax.set_title(f"{building.name} — Floor Occupancy", fontsize=14, fontweight="bold")
    ax.legend(
        handles=[Patch(color=c, label=s.value) for s, c in STATE_COLORS.items()]
        + [Patch(color=FREE_COLOR, label="FREE")],
        loc="upper right", fontsize=8,
    )

    plt.tight_layout()
    fig.savefig(str(output_path), dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    return output_path

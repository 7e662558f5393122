"""Scene layout for netlist drawings: cell boxes, pin markers and net fly-lines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence

Point = tuple[float, float]

# Overview layout of plain cell boxes.
_OVERVIEW_ORIGIN = 50
_OVERVIEW_BOX_WIDTH = 140
_OVERVIEW_BOX_HEIGHT = 60
_OVERVIEW_SPACING = 100
_OVERVIEW_MAX_Y = 500

# Graph layout of cells with their pins.
_GRAPH_ORIGIN = 50
CELL_SPACING = 150
PIN_SPACING = 20
_CELL_WIDTH = 100
_CELL_BASE_HEIGHT = 30
_PIN_SIZE = 10

SCALE_STEP = 1.2

LINE_COLOR = "red"
LINE_WIDTH = 2
DIMMED_COLOR = "gray"
DIMMED_WIDTH = 1
HIGHLIGHT_COLOR = "green"
HIGHLIGHT_WIDTH = 3


@dataclass
class Rect:
    """An axis-aligned box in scene coordinates, optionally labelled."""

    x: float
    y: float
    width: float
    height: float
    label: str = ""
    label_pos: Optional[Point] = None
    fill: str = "lightgray"
    selectable: bool = False

    @property
    def center(self) -> Point:
        return (self.x + self.width / 2, self.y + self.height / 2)


@dataclass
class Line:
    """A straight connection between two scene points belonging to a net."""

    start: Point
    end: Point
    net: str
    color: str = LINE_COLOR
    width: int = LINE_WIDTH


def layout_cells(cells: Iterable[str]) -> list[Rect]:
    """Place one labelled box per cell in columns that wrap below y=500."""
    rects = []
    x = y = _OVERVIEW_ORIGIN
    for cell in cells:
        rects.append(
            Rect(
                x,
                y,
                _OVERVIEW_BOX_WIDTH,
                _OVERVIEW_BOX_HEIGHT,
                label=cell,
                label_pos=(x + 10, y + 15),
            )
        )
        y += _OVERVIEW_BOX_HEIGHT + _OVERVIEW_SPACING
        if y > _OVERVIEW_MAX_Y:
            y = _OVERVIEW_ORIGIN
            x += _OVERVIEW_BOX_WIDTH + _OVERVIEW_SPACING
    return rects


class NetlistScene:
    """Cells, pins and net lines of a netlist, with highlighting and zoom."""

    def __init__(self) -> None:
        self.cells: dict[str, Rect] = {}
        self.pins: dict[str, Rect] = {}
        self.net_lines: dict[str, list[Line]] = {}
        self.scale = 1.0

    def load_graph(
        self,
        pins_by_cell: Mapping[str, Sequence[str]],
        net_by_pin: Mapping[tuple[str, str], str],
    ) -> None:
        """Replace the scene with the given cells, pins and net connections."""
        self.cells.clear()
        self.pins.clear()
        self.net_lines.clear()

        x = y = _GRAPH_ORIGIN
        for cell, pins in sorted(pins_by_cell.items()):
            self.cells[cell] = Rect(
                x,
                y,
                _CELL_WIDTH,
                _CELL_BASE_HEIGHT + PIN_SPACING * len(pins),
                label=cell,
                label_pos=(x + 5, y - 20),
            )
            pin_y = y + 10
            for pin in pins:
                self.pins[f"{cell}/{pin}"] = Rect(
                    x + 10,
                    pin_y,
                    _PIN_SIZE,
                    _PIN_SIZE,
                    label=pin,
                    fill="blue",
                    selectable=True,
                )
                pin_y += PIN_SPACING
            x += CELL_SPACING

        connections = sorted(net_by_pin.items())
        for key, net in connections:
            source = self.pins.get("/".join(key))
            if source is None:
                continue
            for other_key, other_net in connections:
                if other_key == key or other_net != net:
                    continue
                target = self.pins.get("/".join(other_key))
                if target is None:
                    continue
                self.net_lines.setdefault(net, []).append(
                    Line(source.center, target.center, net)
                )

    def highlight_net(self, pin_name: str) -> list[str]:
        """Dim every line, then highlight nets whose name occurs in ``pin_name``.

        Returns the names of the highlighted nets.
        """
        for lines in self.net_lines.values():
            for line in lines:
                line.color, line.width = DIMMED_COLOR, DIMMED_WIDTH

        highlighted = []
        for net, lines in self.net_lines.items():
            if net in pin_name:
                highlighted.append(net)
                for line in lines:
                    line.color, line.width = HIGHLIGHT_COLOR, HIGHLIGHT_WIDTH
        return highlighted

    def zoom(self, delta: float) -> float:
        """Zoom in for a positive wheel delta, otherwise out; return the scale."""
        if delta > 0:
            self.scale *= SCALE_STEP
        else:
            self.scale /= SCALE_STEP
        return self.scale
"""Line-oriented extraction of ports, nets, cells and pin connections from gate-level Verilog."""

from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from os import PathLike
from typing import Iterator, Union

logger = logging.getLogger(__name__)

StrPath = Union[str, "PathLike[str]"]

_MODULE_DECL = re.compile(r"^\s*module\s+(\w+)\s*\(([^;]*)\);", re.ASCII)
_WIRE_DECL = re.compile(r"^\s*wire\s+(\S+);", re.ASCII)
_INSTANCE_DECL = re.compile(r"^\s*(\w+)\s+(\w+)\s*\(.*\);", re.ASCII)
_INSTANCE_START = re.compile(r"^\s*(\w+)\s+(\w+)\s*\(\s*$", re.ASCII)
_INSTANCE_FULL = re.compile(r"^\s*(\w+)\s+(\w+)\s*\(.*\)\s*;\s*$", re.ASCII)
_PIN_CONN = re.compile(r"\.([A-Za-z0-9_]+)\s*\(\s*([A-Za-z0-9_]+)\s*\)")

_ASCII_SPACE = frozenset(" \t\n\v\f\r")


def strip_comments(line: str) -> str:
    """Return the part of ``line`` before the first ``//``."""
    return line.partition("//")[0]


def _identifiers(text: str) -> list[str]:
    """Split a comma separated list, dropping whitespace and empty entries."""
    result = []
    for item in text.split(","):
        ident = "".join(ch for ch in item if ch not in _ASCII_SPACE)
        if ident:
            result.append(ident)
    return result


def _read_lines(path: StrPath) -> Iterator[str]:
    """Yield the lines of a file without their terminating newline."""
    with open(path, encoding="utf-8", errors="replace", newline="\n") as handle:
        for raw in handle:
            yield raw[:-1] if raw.endswith("\n") else raw


@dataclass
class _ChunkResult:
    ports: list[str] = field(default_factory=list)
    nets: list[str] = field(default_factory=list)
    cells: list[str] = field(default_factory=list)
    connections: list[tuple[str, str, str]] = field(default_factory=list)

    def add_instance(self, text: str, cell: str) -> None:
        self.cells.append(cell)
        for conn in _PIN_CONN.finditer(text):
            self.connections.append((cell, conn.group(1), conn.group(2)))


def _parse_chunk(lines: list[str]) -> _ChunkResult:
    """Parse a slice of lines with its own instance-buffering state."""
    result = _ChunkResult()
    buffer = ""
    buffering = False

    for line in lines:
        if buffering:
            buffer += " " + line
            if ");" in line:
                match = _INSTANCE_FULL.fullmatch(buffer)
                if match:
                    result.add_instance(buffer, match.group(2))
                buffer = ""
                buffering = False
            continue

        if match := _MODULE_DECL.search(line):
            result.ports.extend(_identifiers(match.group(2)))
        elif match := _WIRE_DECL.search(line):
            result.nets.append(match.group(1))
        elif match := _INSTANCE_DECL.fullmatch(line):
            result.add_instance(line, match.group(2))
        elif _INSTANCE_START.fullmatch(line):
            buffer = line
            buffering = True

    return result


class VerilogParser:
    """Accumulates netlist information from one or more parsed files."""

    def __init__(self) -> None:
        self._inside_module = False
        self._buffering_instance = False
        self._instance_buffer = ""
        self._ports: list[str] = []
        self._nets: list[str] = []
        self._cells: list[str] = []
        self._pins_by_cell: dict[str, list[str]] = {}
        self._net_by_pin: dict[tuple[str, str], str] = {}

    def parse_file(self, path: StrPath) -> None:
        """Parse a file line by line, collecting ports, nets and cells.

        Raises OSError if the file cannot be opened.
        """
        try:
            lines = _read_lines(path)
            for number, line in enumerate(lines, start=1):
                logger.info("Line %d: %s", number, line)
                self._parse_line(strip_comments(line))
        except OSError:
            logger.error("Failed to open file: %s", path)
            raise
        logger.info("Parsing complete.")

    def parse_file_multithreaded(self, path: StrPath, num_threads: int) -> None:
        """Parse a file split into ``num_threads`` chunks, also recording pin connections.

        Each chunk is parsed independently, so an instance spanning a chunk
        boundary is not recognised. Raises OSError if the file cannot be
        opened and ValueError if ``num_threads`` is below one.
        """
        if num_threads < 1:
            raise ValueError(f"thread count must be at least 1, got {num_threads}")
        try:
            lines = [strip_comments(line) for line in _read_lines(path)]
        except OSError:
            logger.error("Failed to open file: %s", path)
            raise

        chunk = len(lines) // num_threads
        bounds = [
            (i * chunk, len(lines) if i == num_threads - 1 else (i + 1) * chunk)
            for i in range(num_threads)
        ]
        with ThreadPoolExecutor(max_workers=num_threads) as pool:
            results = list(pool.map(lambda b: _parse_chunk(lines[b[0]:b[1]]), bounds))

        for result in results:
            self._ports.extend(result.ports)
            self._nets.extend(result.nets)
            self._cells.extend(result.cells)
            for cell, pin, net in result.connections:
                self._pins_by_cell.setdefault(cell, []).append(pin)
                self._net_by_pin[(cell, pin)] = net

    def _parse_line(self, line: str) -> None:
        if not line:
            return

        if self._buffering_instance:
            self._instance_buffer += " " + line
            if ");" in line:
                match = _INSTANCE_FULL.fullmatch(self._instance_buffer)
                if match:
                    self._cells.append(match.group(2))
                self._buffering_instance = False
                self._instance_buffer = ""
            return

        if match := _MODULE_DECL.search(line):
            self._ports.extend(_identifiers(match.group(2)))
            self._inside_module = True
        elif match := _WIRE_DECL.search(line):
            self._nets.append(match.group(1))
        elif match := _INSTANCE_DECL.fullmatch(line):
            self._cells.append(match.group(2))
        elif _INSTANCE_START.fullmatch(line):
            self._instance_buffer = line
            self._buffering_instance = True

    def get_ports(self) -> list[str]:
        """Return the module ports in the order they were found."""
        return list(self._ports)

    def get_cells(self) -> list[str]:
        """Return the instance names in the order they were found."""
        return list(self._cells)

    def get_nets(self) -> list[str]:
        """Return the declared wires in the order they were found."""
        return list(self._nets)

    def get_pins(self, cell: str) -> list[str]:
        """Return the connected pins of ``cell``, or an empty list."""
        return list(self._pins_by_cell.get(cell, []))

    def get_net_for_pin(self, cell: str, pin: str) -> str:
        """Return the net connected to ``cell``'s ``pin``, or an empty string."""
        return self._net_by_pin.get((cell, pin), "")

    def pins_by_cell(self) -> dict[str, list[str]]:
        """Return a mapping of cell to pins, ordered by cell name."""
        return {cell: list(self._pins_by_cell[cell]) for cell in sorted(self._pins_by_cell)}

    def net_by_pin(self) -> dict[tuple[str, str], str]:
        """Return a mapping of (cell, pin) to net, ordered by key."""
        return {key: self._net_by_pin[key] for key in sorted(self._net_by_pin)}
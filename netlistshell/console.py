"""Interactive command console over a Verilog netlist parser."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from enum import Enum, auto
from os import PathLike
from typing import Callable, Optional, Union

from .parser import VerilogParser

logger = logging.getLogger(__name__)

DEFAULT_FONT_SIZE = 12
MIN_FONT_SIZE = 6
DEFAULT_THREAD_COUNT = 4

# Command name -> argument hint, in name order.
_COMMAND_HINTS = {
    "get_cells": "",
    "get_net_for_pin": "<cell> <pin>",
    "get_nets": "",
    "get_pins": "<cell>",
    "get_ports": "",
    "load_verilog": "<filename>",
    "print": "<message>",
    "set_multi_cpu": "<int>",
}

_WORD_END = " \t\r\n;"
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "a": "\a", "b": "\b", "f": "\f", "v": "\v"}
_VAR_NAME = re.compile(r"[A-Za-z0-9_]+")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class Key(Enum):
    """Keys the console reacts to."""

    UP = auto()
    DOWN = auto()
    TAB = auto()
    ESCAPE = auto()
    CONTROL = auto()


class _CommandError(Exception):
    """A command failed; the message is what the console reports."""


class _Incomplete(Exception):
    """The script ends inside a brace, quote or bracket."""


@dataclass(frozen=True)
class _Var:
    name: str


@dataclass(frozen=True)
class _Sub:
    script: str


_Part = Union[str, _Var, _Sub]


def _parse_braced(text: str, pos: int) -> tuple[str, int]:
    depth = 0
    i = pos
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[pos + 1:i], i + 1
        i += 1
    raise _Incomplete("missing close-brace")


def _find_bracket_end(text: str, pos: int) -> int:
    depth = 0
    i = pos
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "{":
            _, i = _parse_braced(text, i)
            continue
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    raise _Incomplete("missing close-bracket")


def _parse_var_name(text: str, pos: int) -> tuple[Optional[str], int]:
    if text.startswith("{", pos + 1):
        end = text.find("}", pos + 2)
        if end < 0:
            raise _Incomplete("missing close-brace for variable name")
        return text[pos + 2:end], end + 1
    match = _VAR_NAME.match(text, pos + 1)
    if match is None:
        return None, pos
    return match.group(0), match.end()


def _parse_parts(text: str, pos: int, quoted: bool) -> tuple[list[_Part], int]:
    parts: list[_Part] = []
    buf: list[str] = []

    def flush() -> None:
        if buf:
            parts.append("".join(buf))
            buf.clear()

    while pos < len(text):
        ch = text[pos]
        if quoted and ch == '"':
            flush()
            return parts, pos + 1
        if not quoted and ch in _WORD_END:
            break
        if ch == "\\":
            if pos + 1 >= len(text):
                buf.append("\\")
                pos += 1
                continue
            nxt = text[pos + 1]
            if nxt == "\n":
                if not quoted:
                    break
                buf.append(" ")
            else:
                buf.append(_ESCAPES.get(nxt, nxt))
            pos += 2
            continue
        if ch == "$":
            name, end = _parse_var_name(text, pos)
            if name is None:
                buf.append("$")
                pos += 1
                continue
            flush()
            parts.append(_Var(name))
            pos = end
            continue
        if ch == "[":
            end = _find_bracket_end(text, pos)
            flush()
            parts.append(_Sub(text[pos + 1:end]))
            pos = end + 1
            continue
        buf.append(ch)
        pos += 1

    if quoted:
        raise _Incomplete('missing "')
    flush()
    return parts, pos


def _expect_separator(text: str, pos: int, what: str) -> int:
    if pos < len(text) and text[pos] not in _WORD_END and not text.startswith("\\\n", pos):
        raise _CommandError(f"extra characters after {what}")
    return pos


def _skip_comment(text: str, pos: int) -> int:
    while pos < len(text):
        if text.startswith("\\\n", pos):
            pos += 2
            continue
        if text[pos] == "\n":
            return pos
        pos += 1
    return pos


def _parse_script(text: str) -> list[list[list[_Part]]]:
    """Split a script into commands made of words made of parts."""
    commands: list[list[list[_Part]]] = []
    words: list[list[_Part]] = []
    pos = 0
    while pos < len(text):
        ch = text[pos]
        if ch in " \t\r":
            pos += 1
        elif text.startswith("\\\n", pos):
            pos += 2
        elif ch in "\n;":
            if words:
                commands.append(words)
                words = []
            pos += 1
        elif ch == "#" and not words:
            pos = _skip_comment(text, pos)
        elif ch == "{":
            body, pos = _parse_braced(text, pos)
            words.append([body])
            pos = _expect_separator(text, pos, "close-brace")
        elif ch == '"':
            parts, pos = _parse_parts(text, pos + 1, quoted=True)
            words.append(parts)
            pos = _expect_separator(text, pos, "close-quote")
        else:
            parts, pos = _parse_parts(text, pos, quoted=False)
            words.append(parts)
    if words:
        commands.append(words)
    return commands


def _command_complete(script: str) -> bool:
    try:
        _parse_script(script)
    except _Incomplete:
        return False
    except _CommandError:
        return True
    return True


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _common_prefix(items: list[str]) -> str:
    return os.path.commonprefix(items)


class Console:
    """A command shell over a netlist parser, with history and completion."""

    def __init__(self, parser: Optional[VerilogParser] = None) -> None:
        self.parser = parser if parser is not None else VerilogParser()
        self.font_size = DEFAULT_FONT_SIZE
        self.thread_count = DEFAULT_THREAD_COUNT
        self.history: list[str] = []
        self.history_index = 0
        self.input_text = ""
        self._pending = ""
        self._output: list[str] = []
        self._variables: dict[str, str] = {}
        self._commands: dict[str, Callable[[list[str]], str]] = {
            "print": self._print,
            "puts": self._print,
            "set": self._set,
            "source": self._source,
            "get_ports": self._get_ports,
            "get_cells": self._get_cells,
            "get_nets": self._get_nets,
            "get_pins": self._get_pins,
            "get_net_for_pin": self._get_net_for_pin,
            "load_verilog": self._load_verilog,
            "set_multi_cpu": self._set_multi_cpu,
        }

    # Output

    def _append(self, text: str) -> None:
        self._output.append(text)

    def output_text(self) -> str:
        """Return everything written to the output pane."""
        return "\n".join(self._output)

    # Execution

    def execute(self, line: str) -> Optional[str]:
        """Feed one input line; run the pending script once it is complete.

        Returns the text reported for the finished command, or None while
        the script is still incomplete.
        """
        self.input_text = ""
        self._append("> " + line)
        self._pending += line + "\n"

        if not _command_complete(self._pending):
            self._append("... ")
            return None

        script = self._pending
        self._pending = ""
        self.history.append(script.strip())
        self.history_index = len(self.history)
        try:
            reported = self._eval(script)
        except _CommandError as exc:
            reported = "[TCL ERROR] " + str(exc)
        self._append(reported)
        return reported

    def _eval(self, script: str) -> str:
        try:
            commands = _parse_script(script)
        except _Incomplete as exc:
            raise _CommandError(str(exc)) from None
        result = ""
        for words in commands:
            args = [self._substitute(word) for word in words]
            result = self._invoke(args)
        return result

    def _substitute(self, parts: list[_Part]) -> str:
        pieces = []
        for part in parts:
            if isinstance(part, _Var):
                if part.name not in self._variables:
                    raise _CommandError(f"can't read \"{part.name}\": no such variable")
                pieces.append(self._variables[part.name])
            elif isinstance(part, _Sub):
                pieces.append(self._eval(part.script))
            else:
                pieces.append(part)
        return "".join(pieces)

    def _invoke(self, args: list[str]) -> str:
        name, *rest = args
        handler = self._commands.get(name)
        if handler is None:
            raise _CommandError(f'invalid command name "{name}"')
        return handler(rest)

    # Commands

    def _print(self, args: list[str]) -> str:
        message = " ".join(args)
        self._append(message)
        return message

    def _set(self, args: list[str]) -> str:
        if len(args) == 1:
            if args[0] not in self._variables:
                raise _CommandError(f"can't read \"{args[0]}\": no such variable")
            return self._variables[args[0]]
        if len(args) == 2:
            self._variables[args[0]] = args[1]
            return args[1]
        raise _CommandError('wrong # args: should be "set varName ?newValue?"')

    def _source(self, args: list[str]) -> str:
        echo = verbose = False
        filename = ""
        for arg in args:
            if arg == "-e":
                echo = True
            elif arg == "-v":
                verbose = True
            else:
                filename = arg
        try:
            with open(filename, encoding="utf-8", errors="replace") as handle:
                lines = handle.read().split("\n")
        except OSError as exc:
            reason = (exc.strerror or "unknown error").lower()
            raise _CommandError(f'couldn\'t open "{filename}": {reason}') from None

        for line in lines:
            if echo:
                self._print(["> " + line])
            if not line.strip():
                continue
            try:
                result = self._eval(line)
            except _CommandError as exc:
                self._print(["[TCL ERROR] " + str(exc)])
            else:
                if verbose:
                    self._print([result])
        return ""

    @staticmethod
    def _lines(items: list[str]) -> str:
        return "".join(item + "\n" for item in items)

    def _get_ports(self, args: list[str]) -> str:
        return self._lines(self.parser.get_ports())

    def _get_cells(self, args: list[str]) -> str:
        return self._lines(self.parser.get_cells())

    def _get_nets(self, args: list[str]) -> str:
        return self._lines(self.parser.get_nets())

    def _get_pins(self, args: list[str]) -> str:
        if not args:
            raise _CommandError("Usage: get_pins <cell>")
        return self._lines(self.parser.get_pins(args[0]))

    def _get_net_for_pin(self, args: list[str]) -> str:
        if len(args) < 2:
            raise _CommandError("Usage: get_net_for_pin <cell> <pin>")
        return self.parser.get_net_for_pin(args[0], args[1])

    def _load_verilog(self, args: list[str]) -> str:
        if not args:
            raise _CommandError("Usage: load_verilog -file <filename>")
        try:
            self.parser.parse_file_multithreaded(args[0], self.thread_count)
        except OSError:
            return "FAILED"
        return "OK"

    def _set_multi_cpu(self, args: list[str]) -> str:
        if not args:
            raise _CommandError("Usage: set_multi_cpu <int>")
        self.thread_count = max(1, _atoi(args[0]))
        return f"Multi-core parsing set to {self.thread_count}"

    # Completion and keys

    def autocomplete(self, text: str) -> str:
        """Complete a command name, then a path, in ``text``; return the new input."""
        self.input_text = text
        current = text.strip()
        logger.debug("Autocomplete triggered with: %s", current)

        matches = [
            f"{name} {hint}" if hint else name
            for name, hint in _COMMAND_HINTS.items()
            if name.startswith(current)
        ]
        if not matches:
            self._append("[Auto] No match found")
            return self.input_text
        if len(matches) == 1:
            self.input_text = matches[0]
            self._append("[Auto] " + matches[0])
            return self.input_text

        common = _common_prefix(matches)
        if common and common != current:
            self.input_text = common
            self._append("[Auto] " + common)
        else:
            self._append("[Auto] Multiple matches: " + ", ".join(matches))

        last_word = current.split(" ")[-1]
        if last_word:
            head, prefix = os.path.split(last_word)
            base = head or "."
        else:
            base = os.getcwd()
            prefix = ""
        try:
            names = sorted(os.listdir(base))
        except OSError:
            names = []
        file_matches = [
            f"{base}/{name}"
            for name in names
            if not name.startswith(".") and name.startswith(prefix)
        ]
        if file_matches:
            common = _common_prefix(file_matches)
            if common and common != last_word:
                completed = current[: current.rfind(last_word)] + common
                self.input_text = completed
                self._append("[Auto] " + completed)
            else:
                self._append("[Auto] Path matches: " + ", ".join(file_matches))
        return self.input_text

    def handle_key(self, key: Key, shift: bool = False) -> str:
        """React to a key press in the input line; return the new input."""
        if key in (Key.ESCAPE, Key.CONTROL) or (key is Key.TAB and not shift):
            return self.autocomplete(self.input_text)
        if key is Key.UP:
            return self.history_up()
        if key is Key.DOWN:
            return self.history_down()
        return self.input_text

    def history_up(self) -> str:
        """Recall the previous command, if any."""
        if self.history:
            self.history_index = max(0, self.history_index - 1)
            self.input_text = self.history[self.history_index]
        return self.input_text

    def history_down(self) -> str:
        """Recall the next command, if any."""
        if self.history:
            self.history_index = min(len(self.history) - 1, self.history_index + 1)
            self.input_text = self.history[self.history_index]
        return self.input_text

    # Display and files

    def increase_font_size(self) -> int:
        """Grow the font by one point."""
        self.font_size += 1
        return self.font_size

    def decrease_font_size(self) -> int:
        """Shrink the font by one point, not below the minimum."""
        self.font_size = max(MIN_FONT_SIZE, self.font_size - 1)
        return self.font_size

    def open_file(self, path: Union[str, "PathLike[str]"]) -> Optional[str]:
        """Load a Verilog file through the load_verilog command."""
        self.input_text = f'load_verilog "{os.fspath(path)}"'
        return self.execute(self.input_text)

    def save_output(self, path: Union[str, "PathLike[str]"]) -> None:
        """Write the output pane to a text file."""
        with open(path, "w", encoding="utf-8") as handle:
            handle.write(self.output_text())
"""Command-line entry point: a line-oriented console or a bare terminal shell."""

from __future__ import annotations

import sys
from typing import Optional, Sequence, TextIO

from .console import Console
from .license import is_license_valid

LICENSE_PATH = "license.txt"
PROMPT = "netlist> "
_ERROR_PREFIX = "[TCL ERROR] "
_EXIT_WORDS = frozenset({".exit", "exit"})


def _new_output(before: str, after: str) -> str:
    """Return what was appended to the console output between two snapshots."""
    if not before:
        return after
    return after[len(before) + 1:]


def run_terminal(
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> None:
    """Read commands with a prompt, printing results and errors, until exit or EOF."""
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout
    stderr = sys.stderr if stderr is None else stderr

    console = Console()
    stdout.write("Tcl Terminal Mode\n")
    while True:
        stdout.write(PROMPT)
        stdout.flush()
        raw = stdin.readline()
        if not raw:
            break
        line = raw[:-1] if raw.endswith("\n") else raw
        if line in _EXIT_WORDS:
            break

        reported = console.execute(line)
        if reported is None:
            continue
        if reported.startswith(_ERROR_PREFIX):
            stderr.write("Error: " + reported[len(_ERROR_PREFIX):] + "\n")
        else:
            stdout.write(reported + "\n")


def run_console(stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
    """Feed input lines to a console and echo its output pane as it grows.

    A line ending in a tab asks for completion of the text before it.
    """
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout

    if not is_license_valid(LICENSE_PATH):
        stdout.write("License Error: License is expired or invalid.\n")
        return

    console = Console()
    for raw in stdin:
        line = raw[:-1] if raw.endswith("\n") else raw
        before = console.output_text()
        if line.endswith("\t"):
            console.autocomplete(line.rstrip("\t"))
        else:
            console.execute(line)
        added = _new_output(before, console.output_text())
        if added:
            stdout.write(added + "\n")
        stdout.flush()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Check the licence, then start the mode named by the first argument."""
    args = sys.argv[1:] if argv is None else list(argv)

    if not is_license_valid(LICENSE_PATH):
        print("[LICENSE] Invalid or expired. Exiting.", file=sys.stderr)
        return 1

    if args:
        mode = args[0]
        if mode == "-gui":
            run_console()
            return 0
        if mode == "-terminal":
            run_terminal()
            return 0
        print(f"Unknown mode: {mode}", file=sys.stderr)
        print("Usage: netlistshell -gui | -terminal", file=sys.stderr)
        return 1

    run_console()
    return 0


if __name__ == "__main__":
    sys.exit(main())
# netlistshell

A command shell for exploring structural (gate-level) Verilog netlists. It
reads a netlist line by line and answers questions about it: which ports the
module declares, which cells are instantiated, which wires exist, and which
net each pin of a cell is connected to.

## Installation

```
pip install .
```

The package has no dependencies outside the standard library.

## Licence file

At start-up `netlistshell` looks for `license.txt` in the current directory.
The first line starting with `LICENSE_EXPIRES=` gives the expiry, as an ISO 8601
date or date-time, for example

```
LICENSE_EXPIRES=2030-12-31T23:59:59Z
```

A trailing `Z` means UTC; a value without a time zone is taken as local time.
If the file cannot be read, has no such line, holds a date that does not parse,
or the date has passed, the program prints
`[LICENSE] Invalid or expired. Exiting.` to standard error and exits with
status 1.

The check is available on its own as
`netlistshell.license.is_license_valid(path, now=None)`.

## Running

```
netlistshell -terminal
```

prints `Tcl Terminal Mode` and then reads commands with the prompt
`netlist> `. Each finished command's result is printed to standard output;
errors go to standard error as `Error: <message>`. A command left open (an
unclosed brace, quote or bracket) continues on the next line. Type `exit` or
`.exit`, or end the input, to leave.

```
netlistshell -gui
```

or `netlistshell` with no argument starts console mode. It checks the licence
file again, then reads lines from standard input and writes whatever the
console adds to its output pane: each command is echoed as `> <command>`,
followed by its result, with `... ` while a command is still incomplete. A
line ending in a tab character is not run; the text before the tab is
autocompleted instead (see below).

Any other first argument prints a usage message and exits with status 1.

### Commands

| Command | Result |
|---|---|
| `load_verilog <filename>` | parse a netlist file, answering `OK`, or `FAILED` if it cannot be opened |
| `set_multi_cpu <int>` | number of chunks/workers used by `load_verilog` (default 4, at least 1) |
| `get_ports` | module ports, one per line |
| `get_cells` | instance names, one per line |
| `get_nets` | declared wires, one per line |
| `get_pins <cell>` | pins connected on an instance, one per line |
| `get_net_for_pin <cell> <pin>` | net attached to a pin, or an empty result |
| `print <words...>` / `puts <words...>` | join the words with spaces and echo them |
| `set <name> ?<value>?` | set or read a variable |
| `source [-e] [-v] <file>` | run a file line by line; `-e` echoes each line, `-v` prints each result |

Commands use Tcl-style syntax: words are separated by spaces, `;` or a newline
ends a command, `{...}` groups text literally, `"..."` groups text with
substitution, `$name` and `${name}` read variables, `[...]` substitutes the
result of a command, backslash escapes are understood, and `#` at the start of
a command begins a comment. Failed commands are reported as
`[TCL ERROR] <message>`.

## What it does not do

- There is no graphical window. Console mode is line-based text; the
  visualizer module computes drawing geometry but renders nothing.
- The command language is a small subset of Tcl: only the commands listed
  above exist. There is no `proc`, `if`, `foreach`, `expr` or other control
  flow.
- The netlist reader is a line-oriented pattern matcher, not a full Verilog
  parser. It recognises `module` headers, `wire` declarations and
  instantiations (on one line, or opened on one line and closed with `);` on a
  later one), with `//` comments removed.

## Library use

### Parsing

```python
from netlistshell.parser import VerilogParser

parser = VerilogParser()
parser.parse_file_multithreaded("design.v", 4)
print(parser.get_ports(), parser.get_nets(), parser.get_cells())
print(parser.get_pins("u1"))
print(parser.get_net_for_pin("u1", "A"))
```

- `parse_file(path)` collects ports, nets and cells, logging each line at
  INFO level. It does not record pin connections.
- `parse_file_multithreaded(path, num_threads)` splits the file into
  `num_threads` chunks parsed in parallel and also records `.pin(net)`
  connections. An instance split across a chunk boundary is not recognised.
  It raises `ValueError` if `num_threads` is below one.
- Both raise `OSError` if the file cannot be opened. Results accumulate over
  repeated calls.
- `pins_by_cell()` and `net_by_pin()` return copies of the connection maps,
  ordered by key. `strip_comments(line)` is also exported.

### Console

`netlistshell.console.Console(parser=None)` runs the command language from
code:

```python
from netlistshell.console import Console, Key

console = Console()
console.execute("load_verilog design.v")   # returns "OK" or "FAILED"
console.execute("get_cells")
console.autocomplete("get_n")              # returns the completed input text
console.handle_key(Key.UP)                 # recalls the previous command
console.save_output("log.txt")
```

- `execute(line)` returns the reported result, or `None` while the command is
  incomplete.
- `autocomplete(text)` completes command names (with an argument hint when
  there is a single match) and then the last word as a path in the current
  directory, appending `[Auto] ...` notes to the output.
- `handle_key(key, shift=False)`: `Key.TAB` (without shift), `Key.ESCAPE`
  and `Key.CONTROL` autocomplete; `Key.UP`/`Key.DOWN` move through history,
  as do `history_up()` and `history_down()`.
- `increase_font_size()` / `decrease_font_size()` adjust `font_size`
  (default 12, minimum 6).
- `open_file(path)` runs `load_verilog` on a path; `output_text()` returns the
  whole output pane.

### Visualizer geometry

`netlistshell.visualizer` lays a netlist out as plain data:

- `layout_cells(cells)` returns one `Rect` per cell name, in columns that wrap
  once y passes 500.
- `NetlistScene().load_graph(pins_by_cell, net_by_pin)` builds `cells` and
  `pins` (keyed `cell/pin`) as `Rect`s and `net_lines` as `Line`s joining every
  pair of pins on the same net.
- `highlight_net(pin_name)` dims all lines and highlights the nets whose name
  occurs in `pin_name`, returning those names.
- `zoom(delta)` multiplies `scale` by 1.2 for a positive delta and divides it
  otherwise.

```python
from netlistshell.visualizer import NetlistScene

scene = NetlistScene()
scene.load_graph(parser.pins_by_cell(), parser.net_by_pin())
```
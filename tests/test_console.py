import pytest

from netlistshell.console import Console, Key, MIN_FONT_SIZE
from netlistshell.parser import VerilogParser

NETLIST = """module top(a, b, y);
wire n1;
AND2 u1 (.A(a), .B(b), .Y(n1));
INV u2 (.A(n1), .Y(y));
endmodule
"""


@pytest.fixture
def netlist(tmp_path):
    path = tmp_path / "top.v"
    path.write_text(NETLIST)
    return path


@pytest.fixture
def loaded(netlist):
    console = Console(VerilogParser())
    assert console.execute(f'load_verilog "{netlist}"') == "OK"
    return console


def test_load_and_query_ports(loaded):
    assert loaded.execute("get_ports") == "a\nb\ny\n"
    assert loaded.execute("get_nets") == "n1\n"
    assert loaded.execute("get_cells") == "u1\nu2\n"


def test_pins_and_nets(loaded):
    assert loaded.execute("get_pins u1") == "A\nB\nY\n"
    assert loaded.execute("get_net_for_pin u1 Y") == "n1"
    assert loaded.execute("get_net_for_pin u9 Y") == ""


def test_load_missing_file_reports_failed(tmp_path):
    console = Console(VerilogParser())
    assert console.execute(f"load_verilog {tmp_path / 'absent.v'}") == "FAILED"


def test_usage_errors():
    console = Console(VerilogParser())
    assert console.execute("load_verilog") == "[TCL ERROR] Usage: load_verilog -file <filename>"
    assert console.execute("get_pins") == "[TCL ERROR] Usage: get_pins <cell>"
    assert console.execute("get_net_for_pin u1") == "[TCL ERROR] Usage: get_net_for_pin <cell> <pin>"
    assert console.execute("set_multi_cpu") == "[TCL ERROR] Usage: set_multi_cpu <int>"


def test_set_multi_cpu():
    console = Console(VerilogParser())
    assert console.execute("set_multi_cpu 8") == "Multi-core parsing set to 8"
    assert console.thread_count == 8
    assert console.execute("set_multi_cpu 0") == "Multi-core parsing set to 1"
    assert console.execute("set_multi_cpu abc") == "Multi-core parsing set to 1"


def test_print_joins_and_echoes():
    console = Console(VerilogParser())
    assert console.execute("print hello world") == "hello world"
    assert console.output_text().split("\n") == ["> print hello world", "hello world", "hello world"]


def test_unknown_command_is_error():
    console = Console(VerilogParser())
    assert console.execute("bogus 1") == '[TCL ERROR] invalid command name "bogus"'


def test_substitution(loaded):
    assert loaded.execute("print [get_net_for_pin u1 Y]") == "n1"
    loaded.execute("set x abc")
    assert loaded.execute('print "$x-1"') == "abc-1"


def test_incomplete_command_waits_for_more():
    console = Console(VerilogParser())
    assert console.execute("print {a") is None
    assert console.output_text().endswith("... ")
    assert console.execute("b}") == "a\nb"
    assert console.history == ["print {a\nb}"]


def test_history_navigation():
    console = Console(VerilogParser())
    console.execute("print one")
    console.execute("print two")
    assert console.history_up() == "print two"
    assert console.history_up() == "print one"
    assert console.history_up() == "print one"
    assert console.handle_key(Key.DOWN) == "print two"
    assert console.handle_key(Key.DOWN) == "print two"


def test_history_empty_keeps_input():
    console = Console(VerilogParser())
    console.input_text = "draft"
    assert console.handle_key(Key.UP) == "draft"


def test_autocomplete_single_match():
    console = Console(VerilogParser())
    assert console.autocomplete("load") == "load_verilog <filename>"
    assert console.output_text() == "[Auto] load_verilog <filename>"


def test_autocomplete_common_prefix(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    console = Console(VerilogParser())
    assert console.autocomplete("get_n") == "get_net"


def test_autocomplete_multiple_matches(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    console = Console(VerilogParser())
    assert console.autocomplete("get_p") == "get_p"
    assert "Multiple matches: get_pins <cell>, get_ports" in console.output_text()


def test_autocomplete_no_match():
    console = Console(VerilogParser())
    assert console.autocomplete("zzz") == "zzz"
    assert console.output_text() == "[Auto] No match found"


def test_tab_key_completes_but_shift_tab_does_not():
    console = Console(VerilogParser())
    console.input_text = "set_"
    assert console.handle_key(Key.TAB, shift=True) == "set_"
    assert console.handle_key(Key.TAB) == "set_multi_cpu <int>"


def test_font_size_bounds():
    console = Console(VerilogParser())
    start = console.font_size
    assert console.increase_font_size() == start + 1
    for _ in range(30):
        console.decrease_font_size()
    assert console.font_size == MIN_FONT_SIZE


def test_open_file_and_save_output(netlist, tmp_path):
    console = Console(VerilogParser())
    assert console.open_file(netlist) == "OK"
    assert console.output_text().startswith(f'> load_verilog "{netlist}"')
    log = tmp_path / "out.txt"
    console.save_output(log)
    assert log.read_text() == console.output_text()
    assert console.input_text == ""
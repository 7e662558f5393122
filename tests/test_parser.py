import pytest

from netlistshell.parser import VerilogParser, strip_comments

NETLIST = """\
module top(a, b, y);
wire n1;
wire n2; // internal
AND2 u1 (.A(a), .B(b), .Y(n1));
INV u2 (
  .A(n1),
  .Y(n2)
);
// BUF u9 (.A(x), .Y(z));
BUF u3 (.A(n2), .Y(y));
endmodule
"""


@pytest.fixture
def netlist(tmp_path):
    path = tmp_path / "top.v"
    path.write_text(NETLIST)
    return path


def test_strip_comments_cuts_at_double_slash():
    assert strip_comments("wire a; // note") == "wire a; "
    assert strip_comments("wire a;") == "wire a;"
    assert strip_comments("// only") == ""


def test_parse_file_collects_ports_nets_cells(netlist):
    parser = VerilogParser()
    parser.parse_file(netlist)
    assert parser.get_ports() == ["a", "b", "y"]
    assert parser.get_nets() == ["n1", "n2"]
    assert parser.get_cells() == ["u1", "u2", "u3"]


def test_parse_file_records_no_pins(netlist):
    parser = VerilogParser()
    parser.parse_file(netlist)
    assert parser.get_pins("u1") == []
    assert parser.get_net_for_pin("u1", "A") == ""
    assert parser.pins_by_cell() == {}


def test_multithreaded_single_thread_matches_sequential(netlist):
    sequential = VerilogParser()
    sequential.parse_file(netlist)
    threaded = VerilogParser()
    threaded.parse_file_multithreaded(netlist, 1)
    assert threaded.get_ports() == sequential.get_ports()
    assert threaded.get_nets() == sequential.get_nets()
    assert threaded.get_cells() == sequential.get_cells()


def test_multithreaded_records_connections(netlist):
    parser = VerilogParser()
    parser.parse_file_multithreaded(netlist, 1)
    assert parser.get_pins("u1") == ["A", "B", "Y"]
    assert parser.get_pins("u2") == ["A", "Y"]
    assert parser.get_net_for_pin("u1", "Y") == "n1"
    assert parser.get_net_for_pin("u2", "Y") == "n2"
    assert parser.get_net_for_pin("u3", "Y") == "y"


def test_pins_by_cell_and_net_by_pin_are_sorted(tmp_path):
    path = tmp_path / "order.v"
    path.write_text("OR2 zed (.B(n2), .A(n1));\nOR2 alpha (.Y(n3));\n")
    parser = VerilogParser()
    parser.parse_file_multithreaded(path, 1)
    assert list(parser.pins_by_cell()) == ["alpha", "zed"]
    assert parser.pins_by_cell()["zed"] == ["B", "A"]
    keys = list(parser.net_by_pin())
    assert keys == sorted(keys)
    assert parser.net_by_pin()[("zed", "A")] == "n1"


def test_multithreaded_many_threads_keeps_single_line_items(netlist):
    parser = VerilogParser()
    parser.parse_file_multithreaded(netlist, 4)
    assert parser.get_ports() == ["a", "b", "y"]
    assert parser.get_nets() == ["n1", "n2"]
    assert "u1" in parser.get_cells()
    assert "u3" in parser.get_cells()


def test_results_accumulate_across_files(tmp_path):
    first = tmp_path / "one.v"
    first.write_text("wire x;\n")
    second = tmp_path / "two.v"
    second.write_text("wire z;\n")
    parser = VerilogParser()
    parser.parse_file(first)
    parser.parse_file(second)
    assert parser.get_nets() == ["x", "z"]


def test_getters_return_copies(netlist):
    parser = VerilogParser()
    parser.parse_file_multithreaded(netlist, 1)
    parser.get_cells().append("bogus")
    parser.get_pins("u1").clear()
    assert "bogus" not in parser.get_cells()
    assert parser.get_pins("u1") == ["A", "B", "Y"]


def test_missing_file_raises(tmp_path):
    parser = VerilogParser()
    with pytest.raises(FileNotFoundError):
        parser.parse_file(tmp_path / "absent.v")
    with pytest.raises(FileNotFoundError):
        parser.parse_file_multithreaded(tmp_path / "absent.v", 2)


def test_zero_threads_rejected(netlist):
    with pytest.raises(ValueError):
        VerilogParser().parse_file_multithreaded(netlist, 0)
"""Tests for the program loader."""

import io
import logging

import pytest
from hypo.cpu import CPUState
from hypo.errors import (
    BadAddress,
    BadFile,
    BadLine,
    BadValue,
    LoadError,
    LoadErrorKind,
)
from hypo.iohooks import IOBuffer
from hypo.loader import load_file, load_program
from hypo.machine import Machine


def make_machine() -> Machine:
    buf = IOBuffer()
    return Machine(read=buf.read_int, write=buf.write_int)


def memory_with(values: dict[int, int]) -> list[int]:
    mem = [0] * 50
    for addr, val in values.items():
        mem[addr] = val
    return mem


class TestLoadProgram:
    """Loader tests."""

    @pytest.mark.parametrize("prog,want", [
        ("0: 31000", {0: 31000}),
        ("0: 31000    ", {0: 31000}),
        ("0: 31000 // A comment", {0: 31000}),
        ("0:31000", {0: 31000}),
        ("0: 31000 // Ok\n49: 21000 // Bookends", {0: 31000, 49: 21000}),
        ("0: 31000 // Ok\n0: 21000 // Overwritten", {0: 21000}),
        ("0: 100\n0: 200", {0: 200}),
        ("1: 50\n0: 60", {0: 60, 1: 50}),
        ("1: -5 // Ok, negative  numbers", {1: -5}),
        ("2: 100000 // capped", {2: 99999}),
        ("3: -123456", {3: -99999}),
        ("007: 42", {7: 42}),
        ("", {}),
    ])
    def test_valid_programs(self, prog, want):
        """Valid programs fill memory and leave the CPU runnable."""
        machine = make_machine()
        load_program(machine, prog)
        assert machine.memory.snapshot() == memory_with(want)
        assert machine.state is CPUState.RUNNABLE

    @pytest.mark.parametrize("prog,error,kind", [
        (": 31000 // Bad line", BadLine, LoadErrorKind.BAD_LINE),
        ("1: 31aasdf // Bad line", BadLine, LoadErrorKind.BAD_LINE),
        ("a: 100", BadLine, LoadErrorKind.BAD_LINE),
        ("-1: 100", BadLine, LoadErrorKind.BAD_LINE),
        ("+1: 100", BadLine, LoadErrorKind.BAD_LINE),
        ("1: +100", BadLine, LoadErrorKind.BAD_LINE),
        ("1: --100", BadLine, LoadErrorKind.BAD_LINE),
        ("1 100", BadLine, LoadErrorKind.BAD_LINE),
        ("   ", BadLine, LoadErrorKind.BAD_LINE),
        ("// only a comment", BadLine, LoadErrorKind.BAD_LINE),
        ("50: 31000 // Bad address", BadAddress, LoadErrorKind.BAD_ADDRESS),
        ("999: 1", BadAddress, LoadErrorKind.BAD_ADDRESS),
    ])
    def test_invalid_programs(self, prog, error, kind):
        """Failures are typed, leave memory zero and the CPU halted."""
        machine = make_machine()
        with pytest.raises(error) as exc_info:
            load_program(machine, prog)
        assert exc_info.value.kind is kind
        assert isinstance(exc_info.value, LoadError)
        assert exc_info.value.source_line_no == 1
        assert machine.memory.snapshot() == [0] * 50
        assert machine.state is CPUState.HALTED

    def test_partial_memory_kept_on_failure(self):
        """Lines before the failing one stay in memory."""
        machine = make_machine()
        with pytest.raises(BadAddress) as exc_info:
            load_program(machine, "0: 1\n1: 2\n60: 3\n2: 4")
        assert exc_info.value.source_line_no == 3
        assert exc_info.value.source_text == "60: 3"
        assert machine.memory.snapshot() == memory_with({0: 1, 1: 2})
        assert machine.state is CPUState.HALTED

    def test_previous_program_cleared(self):
        """Loading zeroes memory left by an earlier program."""
        machine = make_machine()
        load_program(machine, "10: 5\n11: 6")
        load_program(machine, "0: 7")
        assert machine.memory.snapshot() == memory_with({0: 7})

    def test_previous_program_cleared_on_failure(self):
        machine = make_machine()
        load_program(machine, "10: 5")
        with pytest.raises(BadLine):
            load_program(machine, "x")
        assert machine.memory.snapshot() == [0] * 50

    def test_registers_reset(self):
        """Loading zeroes the registers."""
        machine = make_machine()
        machine.cpu.pc = 7
        machine.cpu.ac = 3
        machine.cpu.mq = 4
        machine.cpu.state = CPUState.DIVIDE_BY_ZERO
        load_program(machine, "0: 0")
        assert machine.cpu.get_state() == {"pc": 0, "ac": 0, "mq": 0, "state": "runnable"}

    def test_iterable_of_lines(self):
        """Lines may come from a file-like object, with terminators."""
        machine = make_machine()
        load_program(machine, io.StringIO("0: 31002 // PUT\r\n1: 5000\n2: 99103\n"))
        assert machine.memory.snapshot() == memory_with({0: 31002, 1: 5000, 2: 99103})

    @pytest.mark.parametrize("separator", ["\x0b", "\x0c", "\x1c", "\x85", "\u2028", "\u2029"])
    def test_comment_keeps_non_newline_separators(self, separator):
        """Only newlines end a line; other separators stay in the comment."""
        prog = f"0: 5 // page{separator}break\n1: 6"
        machine = make_machine()
        load_program(machine, prog)
        assert machine.memory.snapshot() == memory_with({0: 5, 1: 6})

        from_file = make_machine()
        load_program(from_file, io.StringIO(prog))
        assert from_file.memory.snapshot() == machine.memory.snapshot()

    def test_trailing_newline(self):
        """A final newline does not add an empty line."""
        machine = make_machine()
        load_program(machine, "0: 1\r\n1: 2\n")
        assert machine.memory.snapshot() == memory_with({0: 1, 1: 2})
        assert machine.state is CPUState.RUNNABLE

    def test_read_failure_is_bad_file(self):
        """Errors while reading the source are BadFile."""
        def lines():
            yield "0: 1"
            raise OSError("disk on fire")

        machine = make_machine()
        with pytest.raises(BadFile) as exc_info:
            load_program(machine, lines())
        assert exc_info.value.kind is LoadErrorKind.BAD_FILE
        assert machine.state is CPUState.HALTED
        assert machine.memory.read(0) == 1

    def test_bad_value_kind(self):
        """BadValue carries its own kind."""
        assert BadValue("x").kind is LoadErrorKind.BAD_VALUE

    def test_error_info_has_kind(self):
        machine = make_machine()
        with pytest.raises(BadLine) as exc_info:
            load_program(machine, "0: 1\nnope")
        info = exc_info.value.to_error_info()
        assert info.type == "BadLine"
        assert info.kind == "bad-line"
        assert info.source_line_no == 2
        assert info.source_text == "nope"

    def test_logs_rejected_line(self, caplog):
        """Rejected lines are logged as warnings."""
        machine = make_machine()
        with caplog.at_level(logging.WARNING, logger="hypo.loader"):
            with pytest.raises(BadLine):
                load_program(machine, "garbage")
        assert "garbage" in caplog.text


class TestLoadFile:
    """File loading tests."""

    def test_load_file(self, tmp_path):
        path = tmp_path / "prog.hypo"
        path.write_text("0: 31002 // PUT content of memory address 2\n1: 5000\n2: 99103\n")
        machine = make_machine()
        load_file(machine, path)
        assert machine.memory.snapshot()[:3] == [31002, 5000, 99103]
        assert machine.state is CPUState.RUNNABLE

    def test_missing_file(self, tmp_path):
        """A file that can't be opened is BadFile."""
        machine = make_machine()
        with pytest.raises(BadFile):
            load_file(machine, tmp_path / "missing.hypo")

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "prog.hypo"
        path.write_bytes(b"0: 1\n\xff\xfe\xfa")
        machine = make_machine()
        with pytest.raises(BadFile):
            load_file(machine, path)
        assert machine.state is CPUState.HALTED

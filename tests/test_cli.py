"""
Command-line front end tests.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import io

import pytest
from archsim.cli import main, positive_int


@pytest.fixture
def program_file(tmp_path):
    def write(text: str):
        path = tmp_path / "prog.s"
        path.write_text(text, encoding="utf-8")
        return str(path)
    return write


class TestRun:

    def test_success(self, program_file, capsys):
        path = program_file("mov 3, r[0]\nmov 4, r[1]\nadd r[0], r[1], r[2]\n")
        assert main([path, "--registers", "3"]) == 0
        out = capsys.readouterr().out
        assert "Registers" in out
        assert "r[2]" in out

    def test_trace(self, program_file, capsys):
        path = program_file("mov 3, r[0]\nmov 4, r[1]\nadd r[0], r[1], r[2]\n")
        assert main([path, "-r", "3", "--trace"]) == 0
        out = capsys.readouterr().out
        assert "0001: mov 3, r[0]  ->  r[0] = 3" in out
        assert "0003: add r[0], r[1], r[2]  ->  r[2] = 7" in out

    def test_failure_exit_status(self, program_file, capsys):
        path = program_file("xyz 1, r[0]\n")
        assert main([path]) == 1
        captured = capsys.readouterr()
        assert "Error: Instruction Not Supported: xyz" in captured.err
        assert "Registers" not in captured.out

    def test_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.StringIO("mov 9, r[1]\n"))
        assert main(["-", "--registers", "2", "--trace"]) == 0
        assert "r[1] = 9" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.s")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_dump_memory(self, program_file, capsys):
        path = program_file("mov 1, r[0]\n")
        assert main([path, "--memory", "4", "--dump-memory", "4"]) == 0
        assert "0000  0 0 0 0" in capsys.readouterr().out

    def test_dump_memory_clamped_to_size(self, program_file, capsys):
        path = program_file("mov 1, r[0]\n")
        assert main([path, "--memory", "3", "--dump-memory", "100"]) == 0
        out = capsys.readouterr().out
        assert "0000  0 0 0" in out
        assert "0000  0 0 0 0" not in out

    def test_log_file(self, program_file, tmp_path):
        path = program_file("mov 1, r[0]\n")
        log_path = tmp_path / "logs" / "run.log"
        assert main([path, "--log-file", str(log_path)]) == 0
        text = log_path.read_text(encoding="utf-8")
        assert "loaded program: 1 instruction(s)" in text
        assert "program complete" in text


class TestOptions:

    def test_list_isa(self, capsys):
        assert main(["--list-isa"]) == 0
        out = capsys.readouterr().out
        for mnemonic in ("mov", "add", "sub"):
            assert mnemonic in out

    @pytest.mark.parametrize("value", ["0", "-3", "ten"])
    def test_bad_register_count(self, value):
        with pytest.raises(SystemExit) as exc:
            main(["--registers", value, "--list-isa"])
        assert exc.value.code == 2

    def test_positive_int(self):
        assert positive_int("12") == 12
        assert positive_int("0x10") == 16

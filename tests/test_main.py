"""
Tests for the command-line entry point.
"""

import io
import json
import sys

import pytest

import main


def _report_tail(out: str) -> str:
    return out.strip().splitlines()[-1]


class TestMain:
    def test_sample_flag(self, capsys):
        assert main.main(["--sample"]) == 0
        out = capsys.readouterr().out
        assert "1. David (GPA: 4.8)" in out
        assert _report_tail(out) == "Total eligible (GPA > 4.0): 6"
        assert main.BANNER not in out

    def test_file_flag(self, tmp_path, capsys):
        p = tmp_path / "students.csv"
        p.write_text("Name,GPA\nAlice,4.5\nBob,3.9\nCharlie,4.2\n", encoding="utf-8")
        main.main(["--file", str(p)])
        out = capsys.readouterr().out
        assert "1. Alice (GPA: 4.5)" in out
        assert "2. Charlie (GPA: 4.2)" in out
        assert "Bob" not in out
        assert _report_tail(out) == "Total eligible (GPA > 4.0): 2"

    def test_missing_file_falls_back(self, tmp_path, capsys):
        main.main(["--file", str(tmp_path / "missing.csv")])
        out = capsys.readouterr().out
        assert "Using built-in sample" in out
        assert _report_tail(out) == "Total eligible (GPA > 4.0): 6"

    def test_prompt_default_is_sample(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("1\n"))
        main.main([], select_path=lambda: pytest.fail("picker must not be called"))
        out = capsys.readouterr().out
        assert main.BANNER in out
        assert _report_tail(out) == "Total eligible (GPA > 4.0): 6"

    def test_prompt_eof_is_sample(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(""))
        main.main([], select_path=lambda: pytest.fail("picker must not be called"))
        assert _report_tail(capsys.readouterr().out) == "Total eligible (GPA > 4.0): 6"

    def test_prompt_file_cancelled(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("2\n"))
        main.main([], select_path=lambda: None)
        out = capsys.readouterr().out
        assert "Falling back to built-in sample" in out
        assert _report_tail(out) == "Total eligible (GPA > 4.0): 6"

    def test_prompt_file_chosen(self, monkeypatch, tmp_path, capsys):
        p = tmp_path / "students.txt"
        p.write_text("Alice 4.5\nBob 4.1\n", encoding="utf-8")
        monkeypatch.setattr("sys.stdin", io.StringIO(" 2 \n"))
        main.main([], select_path=lambda: str(p))
        assert _report_tail(capsys.readouterr().out) == "Total eligible (GPA > 4.0): 2"

    def test_overrides_and_json(self, tmp_path, capsys):
        cfg = tmp_path / "cfg.json"
        cfg.write_text('{"gpa_threshold": 4.0, "max_recipients": 5}', encoding="utf-8")
        out_json = tmp_path / "report.json"
        main.main(["--sample", "--config", str(cfg), "--max-recipients", "2", "--json", str(out_json)])

        out = capsys.readouterr().out
        assert "Top GPA Students (up to 2, GPA > 4.0):" in out
        assert "3. " not in out
        data = json.loads(out_json.read_text(encoding="utf-8"))
        assert [w["name"] for w in data["winners"]] == ["David", "Grace"]
        assert data["eligible_count"] == 6

    def test_json_to_stdout(self, capsys):
        main.main(["--sample", "--threshold", "4.6", "--json", "-"])
        captured = capsys.readouterr()
        # stdout is the JSON document and nothing else
        data = json.loads(captured.out)
        assert data["eligible_count"] == 2
        assert data["threshold"] == 4.6
        assert "Top GPA Students" not in captured.out

    def test_json_to_stdout_keeps_notices_and_logs_on_stderr(self, tmp_path, capsys):
        p = tmp_path / "students.csv"
        p.write_text("Name,GPA\nAlice,4.5\nX,notanumber\n", encoding="utf-8")
        main.main(["--file", str(p), "--json", "-"])
        captured = capsys.readouterr()
        data = json.loads(captured.out)
        assert [w["name"] for w in data["winners"]] == ["Alice"]
        assert "Skipping bad GPA row" in captured.err

    def test_missing_tkinter_falls_back(self, monkeypatch, capsys):
        monkeypatch.setitem(sys.modules, "tkinter", None)
        monkeypatch.delitem(sys.modules, "gui", raising=False)
        monkeypatch.setattr("sys.stdin", io.StringIO("2\n"))
        assert main.main([]) == 0
        out = capsys.readouterr().out
        assert "Falling back to built-in sample" in out
        assert _report_tail(out) == "Total eligible (GPA > 4.0): 6"

    def test_interactive_picker_without_tkinter_cancels(self, monkeypatch):
        monkeypatch.setitem(sys.modules, "tkinter", None)
        monkeypatch.delitem(sys.modules, "gui", raising=False)
        assert main.interactive_picker()() is None

    def test_bad_settings_exit(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main.main(["--sample", "--max-recipients", "-3"])
        assert exc.value.code == 2

"""Tests for the command-line interface."""

import json

import pytest

from inline_eval.cli import main


@pytest.fixture
def script(tmp_path):
    path = tmp_path / "script.py"
    path.write_text("x = 20\ny = 22\nx + y\n")
    return path


def test_eval_line(script, capsys):
    assert main(["eval", str(script), "--line", "3"]) == 0
    captured = capsys.readouterr()
    assert captured.out == "x = 20\ny = 22\nx + y => 42 \n\n"
    assert "=> 42" in captured.err


def test_eval_with_prefix(script, capsys):
    assert main(["eval", str(script), "--line", "3", "--prefix", ";; "]) == 0
    assert "x + y ;; 42 " in capsys.readouterr().out


def test_eval_error(tmp_path, capsys):
    path = tmp_path / "broken.py"
    path.write_text("1 / 0\n")
    assert main(["eval", str(path), "--line", "1"]) == 1
    assert "ZeroDivisionError" in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    assert main(["eval", str(tmp_path / "nope.py"), "--line", "1"]) == 1
    assert "File not found" in capsys.readouterr().err


def test_line_out_of_range(script, capsys):
    assert main(["eval", str(script), "--line", "99"]) == 1
    assert "out of range" in capsys.readouterr().err


def test_list_commands(capsys):
    assert main(["list-commands"]) == 0
    assert "eval-region" in capsys.readouterr().out


def test_show_config(capsys):
    assert main(["show-config"]) == 0
    config = json.loads(capsys.readouterr().out)
    assert config["result_prefix"] == "=> "

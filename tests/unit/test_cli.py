import pathlib
import subprocess
import sys

import pytest

import json_parser as jp

REPO_ROOT = pathlib.Path(__file__).resolve().parents[2]
PARSER = str(REPO_ROOT / "json_parser.py")


def run_cli(*args, stdin=None):
    cmd = [sys.executable, PARSER, *args]
    return subprocess.run(cmd, capture_output=True, text=True, input=stdin)


@pytest.fixture
def json_file(tmp_path):
    def _write(data):
        path = tmp_path / "doc.json"
        path.write_text(data, encoding="utf-8")
        return str(path)
    return _write


def test_valid_file_prints_ok(json_file):
    cp = run_cli(json_file('{"a": [1, 2, 3]}'))
    assert cp.returncode == 0
    assert cp.stdout.strip() == "OK"


def test_invalid_file_reports_syntax_error(json_file):
    cp = run_cli(json_file("[1,]"))
    assert cp.returncode == 1
    assert cp.stderr.strip() == "SyntaxError: trailing comma before ']' at offset 3"


def test_stdin_input():
    cp = run_cli("-", stdin="[true, null]")
    assert cp.returncode == 0
    assert cp.stdout.strip() == "OK"


def test_missing_file_exits_2(tmp_path):
    cp = run_cli(str(tmp_path / "absent.json"))
    assert cp.returncode == 2
    assert "cannot read" in cp.stderr


def test_reject_dup_keys_flag(json_file):
    path = json_file('{"a":1,"a":2}')
    assert run_cli(path).returncode == 0
    cp = run_cli(path, "--reject-dup-keys")
    assert cp.returncode == 1
    assert "duplicate key 'a'" in cp.stderr


def test_max_depth_flag(json_file):
    path = json_file("[[[0]]]")
    assert run_cli(path, "--max-depth", "3").returncode == 0
    assert run_cli(path, "--max-depth", "2").returncode == 1


def test_show_prints_python_tree(json_file, capsys):
    rc = jp._cli([json_file('{"k": [1, "two", null]}'), "--show"])
    assert rc == 0
    assert capsys.readouterr().out.strip() == "{'k': [1.0, 'two', None]}"


def test_debug_dumps_tokens(json_file, capsys):
    rc = jp._cli([json_file("[true]"), "--debug"])
    out = capsys.readouterr().out.splitlines()
    assert rc == 0
    assert out == [
        "Token(kind=<TokenKind.LBRACKET: '['>, value='[', offset=0, end=1)",
        "Token(kind=<TokenKind.BOOLEAN: 'boolean'>, value=True, offset=1, end=5)",
        "Token(kind=<TokenKind.RBRACKET: ']'>, value=']', offset=5, end=6)",
    ]


def test_debug_reports_scan_errors(json_file, capsys):
    rc = jp._cli([json_file("[1, @]"), "--debug"])
    assert rc == 1
    assert "unexpected character '@' at offset 4" in capsys.readouterr().err


def test_verbose_logs_to_stderr(json_file):
    cp = run_cli(json_file("[1]"), "--verbose")
    assert cp.returncode == 0
    assert "tokenized 3 characters into 3 tokens" in cp.stderr
    assert "DEBUG" in cp.stderr


def test_main_reads_sys_argv(json_file, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["json-descent", json_file("{}")])
    assert jp.main() == 0


def test_max_depth_beyond_recursion_limit_reports_syntax_error(json_file):
    cp = run_cli(json_file("[" * 3000 + "]" * 3000), "--max-depth", "5000")
    assert cp.returncode == 1
    assert cp.stderr.startswith("SyntaxError: nesting exceeds the interpreter recursion limit")
    assert "Traceback" not in cp.stderr

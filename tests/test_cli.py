"""
Tests for the command line front end.
"""

import json

import pytest

from corvus.__main__ import main, parse_param
from corvus.config import CORVUS_CONFIG, CORVUS_ENGINE


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    monkeypatch.delenv(CORVUS_CONFIG, raising=False)
    monkeypatch.delenv(CORVUS_ENGINE, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))


class TestParseParam:
    """Test NAME=VALUE parsing."""

    @pytest.mark.parametrize("text, expected", [
        ("n=3", ("n", 3)),
        ("n=2.5", ("n", 2.5)),
        ("flag=TRUE", ("flag", True)),
        ("flag=false", ("flag", False)),
        ("s='quoted'", ("s", "quoted")),
        ("s=plain text", ("s", "plain text")),
        ("xs=[1, 2]", ("xs", [1, 2])),
        ('r={"a": "b"}', ("r", {"a": "b"})),
        ("eq=a=b", ("eq", "a=b")),
    ])
    def test_values(self, text, expected):
        assert parse_param(text) == expected

    def test_missing_equals(self):
        with pytest.raises(ValueError):
            parse_param("novalue")


class TestMain:
    """Test the eval and typeof commands."""

    def test_eval(self, capsys):
        code = main(["--engine", "toy_engine", "eval", "1 + x", "--input", "x=2"])
        assert code == 0
        assert json.loads(capsys.readouterr().out) == 3

    def test_eval_record(self, capsys):
        code = main(["--engine", "toy_engine", "eval", "{'name': n}", "-i", "n=corvus"])
        assert code == 0
        assert json.loads(capsys.readouterr().out) == {"name": "corvus"}

    def test_eval_block(self, capsys):
        assert main(["--engine", "toy_engine", "eval", "lambda v: v"]) == 0
        assert json.loads(capsys.readouterr().out) == "<block>"

    def test_engine_from_environment(self, monkeypatch, capsys):
        monkeypatch.setenv(CORVUS_ENGINE, "toy_engine")
        assert main(["eval", "'hi'"]) == 0
        assert json.loads(capsys.readouterr().out) == "hi"

    def test_typeof(self, capsys):
        assert main(["--engine", "toy_engine", "typeof", "price * qty"]) == 0
        out = json.loads(capsys.readouterr().out)
        assert out == {
            "inputs": {"price": "'price", "qty": "'qty"},
            "errors": [],
            "output": "number",
        }

    def test_engine_error(self, capsys):
        assert main(["--engine", "toy_engine", "eval", "nope"]) == 1
        assert "Error: unbound variable: nope" in capsys.readouterr().err

    def test_no_engine(self, capsys):
        assert main(["eval", "1"]) == 1
        assert "Error: no engine configured" in capsys.readouterr().err

    def test_bad_input(self, capsys):
        assert main(["--engine", "toy_engine", "eval", "x", "--input", "x"]) == 1
        assert "Invalid input format" in capsys.readouterr().err

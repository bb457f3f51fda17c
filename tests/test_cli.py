"""
Tests for the command-line interface.
"""

import json
import logging

import pytest

from cli import main
from utils.logging import set_log_level


def test_list_examples():
    assert main(["list"]) == 0


def test_show_prints_the_model(capsys):
    assert main(["show", "first_example"]) == 0
    out = capsys.readouterr().out
    assert "c1 :" in out
    assert "Subject to" in out


def test_solve_writes_report(tmp_path):
    output = tmp_path / "report.json"
    assert main(["solve", "first_example", "--output", str(output)]) == 0

    report = json.loads(output.read_text())
    assert report["termination_status"] == "OPTIMAL"
    assert report["objective_value"] == pytest.approx(205.0)
    values = {v["name"]: v["value"] for v in report["variables"]}
    assert values["x"] == pytest.approx(15.0)


def test_unknown_example_fails():
    assert main(["solve", "missing"]) == 1
    assert main(["show", "missing"]) == 1


def test_verbose_switches_loggers_to_debug():
    try:
        assert main(["--verbose", "list"]) == 0
        assert logging.getLogger("cli").level == logging.DEBUG
    finally:
        set_log_level("INFO")


def test_no_command_prints_help():
    assert main([]) == 1

"""
Tests for solution reports.
"""

import json

import pytest

from modeling.report import SolutionReport, summarize
from tutorial import build_example


def test_report_of_solved_model():
    model = build_example("first_example")
    model.optimize()
    report = summarize(model)

    assert report.termination_status == "OPTIMAL"
    assert report.objective_sense == "Min"
    assert report.objective_value == pytest.approx(205.0)
    assert [c.name for c in report.constraints] == ["c1", "c2"]
    assert all(c.shadow_price is not None for c in report.constraints)

    frame = report.to_frame()
    assert frame.loc["x", "value"] == pytest.approx(15.0)
    assert frame.loc["y", "upper_bound"] == pytest.approx(3.0)


def test_report_before_optimize_has_no_values():
    report = summarize(build_example("first_example"))
    assert report.termination_status == "OPTIMIZE_NOT_CALLED"
    assert report.objective_value is None
    assert all(v.value is None for v in report.variables)
    assert all(c.shadow_price is None for c in report.constraints)


def test_report_round_trips_through_json():
    model = build_example("objective_functions")
    model.optimize()
    report = summarize(model)
    restored = SolutionReport(**json.loads(json.dumps(report.model_dump())))
    assert restored == report


def test_integer_flag_in_report():
    model = build_example("variable_containers")
    flags = {v.name: v.integer for v in summarize(model).variables}
    assert flags["integer_x"] is True
    assert flags["binary_x"] is True
    assert flags["free_x"] is False

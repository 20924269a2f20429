"""Smoke tests for the end-to-end planning flow and the CLI."""

import json
import sys
from datetime import date

import pytest

from shiftplanner import cli
from shiftplanner.domain.models import Employee, Weekday
from shiftplanner.planning.summary import build_weekly_summary
from shiftplanner.serialization.payload import from_payload, to_payload
from shiftplanner.validation.validator import PlanValidator

MONDAY = date(2024, 1, 8)


class TestSmoke:
    """End-to-end smoke tests."""

    @pytest.fixture
    def employee(self):
        return Employee(id="E001", name="Ana Ruiz")

    def test_sample_week(self, employee):
        """The sample week is valid and round-trips through the payload."""
        plan = cli.create_sample_week(employee, date(2024, 1, 10))

        assert plan.week_start == MONDAY
        assert PlanValidator().validate_for_save(plan).is_valid

        summary = build_weekly_summary(plan)
        assert summary.ordinary_hours == 44
        assert summary.extra_hours == 2
        assert summary.days[Weekday.SUNDAY.offset].is_day_off

        loaded = from_payload(to_payload(plan, employee), MONDAY, "E001", "C001")
        assert loaded.plan == plan

    def run_cli(self, monkeypatch, *args):
        monkeypatch.setattr(sys, "argv", ["shiftplanner", *args])
        return cli.main()

    def test_demo(self, monkeypatch, capsys):
        assert self.run_cli(monkeypatch, "demo") == 0
        out = capsys.readouterr().out
        assert "Weekly summary - Ana Ruiz" in out
        assert "Validation: PASSED" in out

    def test_summary_command(self, monkeypatch, capsys, tmp_path):
        payload = {
            "employeeId": "E001",
            "laundryCenterId": "C001",
            "shifts": {"2024-01-08": [16, 17, 18, 19], "2024-01-09": [99]},
            "lunchHours": {},
            "overtimeHours": {"2024-01-08": 1},
            "dayOff": "Domingo",
        }
        path = tmp_path / "week.json"
        path.write_text(json.dumps(payload), encoding="utf-8")

        assert self.run_cli(monkeypatch, "summary", str(path), "--week", "2024-01-08") == 0
        out = capsys.readouterr().out
        assert "Dropped 2024-01-09" in out
        assert "Ordinary: 2 h • Extra: 1 h • Total: 3 h" in out

    def test_summary_bad_file(self, monkeypatch, capsys, tmp_path):
        path = tmp_path / "week.json"
        path.write_text("[1, 2]", encoding="utf-8")

        assert self.run_cli(monkeypatch, "summary", str(path), "--week", "2024-01-08") == 2
        assert "Error:" in capsys.readouterr().err

    def test_no_command(self, monkeypatch, capsys):
        assert self.run_cli(monkeypatch) == 1

#!/usr/bin/env python3
"""Tests for fleetmaint CLI formatting, table helpers and commands."""

import json
from datetime import date

import pytest
import yaml

from fleet import (
    Firm,
    Fleet,
    Location,
    MaintenanceDue,
    ServiceOrder,
    Status,
    Vehicle,
    enrich_record,
)
from fleetmaint import (
    format_date,
    format_days,
    format_money,
    main,
    make_due_table,
    make_order_table,
    make_vehicle_table,
    truncate,
)

TODAY = date(2025, 3, 15)

FLEET_YAML = """
firms:
  - id: 1
    name: Aviofuel
locations:
  - id: 1
    name: Airport
vehicles:
  - id: 1
    status: Active
    name: Refueller
    firmId: 1
    plate: ZG-1234-AB
    locationId: 1
    filterInstallDate: '2024-01-15'
    filterValidityMonths: 12
    annualInspectionDate: '2025-04-01'
    hoseHd63Date: '2015-03-10'
serviceOrders:
  - id: 1
    vehicleId: 1
    date: '2024-11-05'
    description: Hose leak test
    value: 180.0
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("FLEET_DUE_SOON_DAYS", "FLEET_TODAY", "FLEET_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fleet_file(tmp_path):
    path = tmp_path / "fleet.yaml"
    path.write_text(FLEET_YAML)
    return path


def _raw(path):
    with open(path) as fp:
        return yaml.safe_load(fp)


def _fleet():
    vehicle = Vehicle(
        1,
        "Refueller",
        1,
        "ZG-1234-AB",
        1,
        filter_install_date="2024-01-15",
        filter_validity_months=12,
    )
    return Fleet(
        firms=[Firm(1, "Aviofuel")],
        locations=[Location(1, "Airport")],
        vehicles=[vehicle],
        service_orders=[
            ServiceOrder(1, 1, "2024-11-05", "Hose leak test", value=180.0),
            ServiceOrder(2, 7, "2024-12-01", "Unknown vehicle", working=False),
        ],
    )


# =============================================================================
# Formatting helpers
# =============================================================================


class TestFormatDays:
    """Tests for format_days."""

    def test_none_returns_dash(self):
        assert format_days(None) == "-"

    def test_under_a_month(self):
        assert format_days(17) == "17d"
        assert format_days(0) == "0d"

    def test_months_and_days(self):
        assert format_days(105) == "3mo 15d"

    def test_negative(self):
        assert format_days(-65) == "-2mo 5d"
        assert format_days(-5) == "-5d"


class TestFormatMoney:
    """Tests for format_money."""

    def test_formats_number(self):
        assert format_money(1234.5) == "1,234.50"
        assert format_money(0) == "0.00"

    def test_none_returns_dash(self):
        assert format_money(None) == "-"


class TestFormatDate:
    """Tests for format_date."""

    def test_formats_date(self):
        assert format_date(date(2025, 1, 15)) == "2025-01-15"

    def test_none_returns_dash(self):
        assert format_date(None) == "-"


class TestTruncate:
    """Tests for truncate."""

    def test_short_text_unchanged(self):
        assert truncate("short") == "short"

    def test_long_text_truncated(self):
        result = truncate("a" * 40, max_len=10)
        assert result == "aaaaaaa..."
        assert len(result) == 10

    def test_none_returns_dash(self):
        assert truncate(None) == "-"


# =============================================================================
# Table helpers
# =============================================================================


class TestMakeDueTable:
    """Tests for make_due_table."""

    def test_scheduled_row(self):
        due = MaintenanceDue(
            key="daysToHoseHd63Replacement",
            label="Hose HD-63 replacement",
            status=Status.OVERDUE,
            source_date=date(2015, 3, 10),
            due_date=date(2025, 3, 10),
            days_remaining=-5,
            interval="10 years",
        )
        assert make_due_table([due]) == [
            ["Hose HD-63 replacement", "2015-03-10", "10 years", "2025-03-10", "-5", "-5d"]
        ]

    def test_unknown_row(self):
        due = MaintenanceDue(
            key="daysToHoseLeakTest",
            label="Hose leak test",
            status=Status.UNKNOWN,
        )
        assert make_due_table([due]) == [["Hose leak test", "-", "-", "-", "-", "-"]]


class TestMakeVehicleTable:
    """Tests for make_vehicle_table."""

    def test_row(self):
        fleet = _fleet()
        vehicles = fleet.vehicles
        enriched = [enrich_record(v, TODAY) for v in vehicles]

        rows = make_vehicle_table(fleet, enriched, vehicles)

        assert rows == [
            [
                "1",
                "Refueller",
                "ZG-1234-AB",
                "Aviofuel",
                "Airport",
                "Active",
                "2025-01-15",
                "-1mo 29d",
                "-",
            ]
        ]

    def test_missing_firm_shows_dash(self):
        fleet = _fleet()
        fleet.firms = []
        vehicles = fleet.vehicles
        enriched = [enrich_record(v, TODAY) for v in vehicles]
        assert make_vehicle_table(fleet, enriched, vehicles)[0][3] == "-"


class TestMakeOrderTable:
    """Tests for make_order_table."""

    def test_rows(self):
        fleet = _fleet()
        rows = make_order_table(fleet, fleet.service_orders)

        assert rows[0] == [
            "1", "2024-11-05", "ZG-1234-AB", "-", "Hose leak test", "180.00", "yes", "-",
        ]
        # Vehicle no longer on file
        assert rows[1][2] == "#7"
        assert rows[1][5] == "-"
        assert rows[1][6] == "no"


# =============================================================================
# Commands
# =============================================================================


class TestMain:
    """Tests for running commands through main."""

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.yaml"), "firms"]) == 1
        assert "File not found" in capsys.readouterr().out

    def test_malformed_file(self, tmp_path, capsys):
        path = tmp_path / "broken.yaml"
        path.write_text("firms: [\n")
        assert main([str(path), "firms"]) == 1
        assert "Error:" in capsys.readouterr().out

    def test_undecodable_file(self, tmp_path, capsys):
        path = tmp_path / "binary.yaml"
        path.write_bytes(b"\xff\xfefirms: []\n")
        assert main([str(path), "status"]) == 1
        assert "Error:" in capsys.readouterr().out

    def test_bad_today(self, fleet_file, capsys):
        assert main(["--today", "someday", str(fleet_file), "status"]) == 1
        assert "--today" in capsys.readouterr().out

    def test_bad_env(self, fleet_file, capsys, monkeypatch):
        monkeypatch.setenv("FLEET_DUE_SOON_DAYS", "soon")
        assert main([str(fleet_file), "firms"]) == 1
        assert "FLEET_DUE_SOON_DAYS" in capsys.readouterr().out

    def test_show_json(self, fleet_file, capsys):
        assert main(["--today", "2025-03-15", str(fleet_file), "show", "ZG-1234-AB", "--json"]) == 0

        record = json.loads(capsys.readouterr().out)
        assert record["plate"] == "ZG-1234-AB"
        assert record["status"] == "Active"
        assert record["filterExpiryDate"] == "2025-01-15"
        assert record["daysToFilterReplacement"] == -59
        assert record["daysToAnnualInspection"] == 17
        assert record["daysToHoseHd63Replacement"] == -5
        assert record["daysToHoseLeakTest"] is None

    def test_show_by_id(self, fleet_file, capsys):
        assert main(["--today", "2025-03-15", str(fleet_file), "show", "1"]) == 0
        out = capsys.readouterr().out
        assert "Refueller (ZG-1234-AB)" in out
        assert "Hose HD-63 replacement" in out

    def test_show_unknown_vehicle(self, fleet_file, capsys):
        assert main([str(fleet_file), "show", "XX-0000"]) == 1
        assert "not found" in capsys.readouterr().out

    def test_status_groups(self, fleet_file, capsys):
        assert main(["--today", "2025-03-15", str(fleet_file), "status"]) == 0
        out = capsys.readouterr().out
        assert "Date: 2025-03-15" in out
        assert "OVERDUE:" in out
        assert "DUE SOON (within 30 days):" in out
        assert "NOT SCHEDULED" in out

    def test_status_due_soon_days(self, fleet_file, capsys):
        argv = ["--today", "2025-03-15", "--due-soon-days", "10", str(fleet_file), "status"]
        assert main(argv) == 0
        out = capsys.readouterr().out
        assert "DUE SOON" not in out
        assert "OK:" in out

    def test_status_due_only(self, fleet_file, capsys):
        argv = ["--today", "2025-03-15", str(fleet_file), "status", "--due-only"]
        assert main(argv) == 0
        assert "NOT SCHEDULED" not in capsys.readouterr().out

    def test_today_from_env(self, fleet_file, capsys, monkeypatch):
        monkeypatch.setenv("FLEET_TODAY", "2025-03-15")
        assert main([str(fleet_file), "status"]) == 0
        assert "Date: 2025-03-15" in capsys.readouterr().out

    def test_vehicles(self, fleet_file, capsys):
        assert main(["--today", "2025-03-15", str(fleet_file), "vehicles"]) == 0
        out = capsys.readouterr().out
        assert "ZG-1234-AB" in out
        assert "2025-01-15" in out

    def test_vehicles_none_match(self, fleet_file, capsys):
        assert main([str(fleet_file), "vehicles", "--firm", "5"]) == 0
        assert "No vehicles found." in capsys.readouterr().out

    def test_log(self, fleet_file, capsys):
        argv = [
            str(fleet_file), "log", "zg-1234-ab", "Filter replaced",
            "--date", "2025-02-10", "--value", "99.99", "--order-number", "SO-17",
        ]
        assert main(argv) == 0
        assert "Service order saved." in capsys.readouterr().out

        order = _raw(fleet_file)["serviceOrders"][1]
        assert order == {
            "id": 2,
            "vehicleId": 1,
            "date": "2025-02-10",
            "description": "Filter replaced",
            "working": True,
            "orderNumber": "SO-17",
            "value": 99.99,
        }

    def test_log_defaults_to_today(self, fleet_file):
        argv = ["--today", "2025-03-15", str(fleet_file), "log", "1", "Leak test", "--faulty"]
        assert main(argv) == 0
        order = _raw(fleet_file)["serviceOrders"][1]
        assert order["date"] == "2025-03-15"
        assert order["working"] is False

    def test_log_dry_run(self, fleet_file, capsys):
        argv = [str(fleet_file), "log", "1", "Leak test", "--date", "2025-02-10", "--dry-run"]
        assert main(argv) == 0
        assert "dry run" in capsys.readouterr().out
        assert len(_raw(fleet_file)["serviceOrders"]) == 1

    def test_log_bad_date(self, fleet_file, capsys):
        argv = [str(fleet_file), "log", "1", "Leak test", "--date", "yesterday"]
        assert main(argv) == 1
        assert len(_raw(fleet_file)["serviceOrders"]) == 1

    def test_orders_summary(self, fleet_file, capsys):
        assert main([str(fleet_file), "orders", "--vehicle", "ZG-1234-AB"]) == 0
        out = capsys.readouterr().out
        assert "Service orders: 1" in out
        assert "Total value: 180.00" in out

    def test_orders_none_in_period(self, fleet_file, capsys):
        assert main([str(fleet_file), "orders", "--since", "2025-01-01"]) == 0
        assert "No service orders found." in capsys.readouterr().out

    def test_orders_bad_since(self, fleet_file, capsys):
        assert main([str(fleet_file), "orders", "--since", "2024-1-1"]) == 1
        assert "--since must be a date" in capsys.readouterr().out

    def test_orders_until(self, fleet_file, capsys):
        assert main([str(fleet_file), "orders", "--until", "2024-11-04"]) == 0
        assert "No service orders found." in capsys.readouterr().out

    def test_set(self, fleet_file, capsys):
        assert main([str(fleet_file), "set", "ZG-1234-AB", "hoseLeakTestDate", "2025-01-10"]) == 0
        assert "Vehicle updated." in capsys.readouterr().out
        assert _raw(fleet_file)["vehicles"][0]["hoseLeakTestDate"] == "2025-01-10"

    def test_set_clear(self, fleet_file):
        assert main([str(fleet_file), "set", "1", "annualInspectionDate"]) == 0
        assert "annualInspectionDate" not in _raw(fleet_file)["vehicles"][0]

    def test_set_unknown_field(self, fleet_file, capsys):
        assert main([str(fleet_file), "set", "1", "mileage", "1000"]) == 1
        assert "Unknown vehicle field" in capsys.readouterr().out

    def test_set_bad_date(self, fleet_file, capsys):
        assert main([str(fleet_file), "set", "1", "hoseHd63Date", "15.03.2015"]) == 1
        assert "must be a date" in capsys.readouterr().out
        assert _raw(fleet_file)["vehicles"][0]["hoseHd63Date"] == "2015-03-10"

    def test_add_firm_and_vehicle(self, fleet_file, capsys):
        assert main([str(fleet_file), "add-firm", "Port services", "--contact", "Ivana"]) == 0
        argv = [
            str(fleet_file), "add-vehicle", "Barge pump",
            "--plate", "RI-0001", "--firm", "2", "--location", "1",
            "--filter-installed", "2024-06-01", "--filter-months", "6",
        ]
        assert main(argv) == 0
        assert "Added vehicle 2: Barge pump (RI-0001)" in capsys.readouterr().out

        vehicle = _raw(fleet_file)["vehicles"][1]
        assert vehicle["firmId"] == 2
        assert vehicle["filterValidityMonths"] == 6

    def test_add_vehicle_unknown_location(self, fleet_file, capsys):
        argv = [
            str(fleet_file), "add-vehicle", "Barge pump",
            "--plate", "RI-0001", "--firm", "1", "--location", "9",
        ]
        assert main(argv) == 1
        assert "Location" in capsys.readouterr().out

    def test_add_vehicle_bad_date(self, fleet_file, capsys):
        argv = [
            str(fleet_file), "add-vehicle", "Barge pump",
            "--plate", "RI-0001", "--firm", "1", "--location", "1",
            "--inspection", "next spring",
        ]
        assert main(argv) == 1
        assert len(_raw(fleet_file)["vehicles"]) == 1

    def test_delete(self, fleet_file, capsys):
        assert main([str(fleet_file), "delete", "order", "1"]) == 0
        assert _raw(fleet_file)["serviceOrders"] == []

    def test_delete_missing(self, fleet_file, capsys):
        assert main([str(fleet_file), "delete", "firm", "9"]) == 1
        assert "not found" in capsys.readouterr().out

    def test_schedule(self, fleet_file, capsys):
        assert main([str(fleet_file), "schedule"]) == 0
        out = capsys.readouterr().out
        assert "Filter replacement" in out
        assert "hoseLeakTestDate" in out
        assert "6 months" in out

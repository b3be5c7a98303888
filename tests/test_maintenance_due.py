#!/usr/bin/env python3
"""Tests for MaintenanceDue dataclass."""
import pytest
from fleet import MaintenanceDue, Status


class TestMaintenanceDue:
    """Tests for MaintenanceDue.is_due."""

    @pytest.mark.parametrize(
        "status,expected",
        [
            (Status.OVERDUE, True),
            (Status.DUE_SOON, True),
            (Status.OK, False),
            (Status.UNKNOWN, False),
        ],
    )
    def test_is_due(self, status, expected):
        due = MaintenanceDue(key="daysToHoseLeakTest", label="Hose leak test", status=status)
        assert due.is_due is expected

from __future__ import annotations

import re
from pathlib import Path

import pytest

from src.hr_lifecycle.hr_lifecycle.core.exceptions import NotFoundError, ValidationError
from src.hr_lifecycle.hr_lifecycle.leaves.catalog import (
    LEAVE_TYPES,
    allocatable_leave_types,
    get_leave_type,
    require_active_leave_type,
)

SEED_SQL = Path(__file__).resolve().parents[2] / "database" / "seed.sql"
SEED_ROW = re.compile(r"\('(\w+)', '([^']+)', (NULL|\d+), ([01])\)")


def seeded_leave_types():
    block = SEED_SQL.read_text(encoding="utf-8").split("INSERT INTO leave_types", 1)[1].split(";", 1)[0]
    return {
        row[0]: (row[1], None if row[2] == "NULL" else int(row[2]), row[3] == "1")
        for row in SEED_ROW.findall(block)
    }


def test_seed_rows_match_catalog():
    expected = {lt.leave_type_id: (lt.name, lt.max_days_per_year, lt.is_active) for lt in LEAVE_TYPES.values()}

    assert seeded_leave_types() == expected


def test_quotas():
    assert get_leave_type("annual").max_days_per_year == 12
    assert get_leave_type("sick").max_days_per_year == 5
    assert get_leave_type(" wfh ").max_days_per_year == 5
    assert [lt.leave_type_id for lt in allocatable_leave_types()] == ["annual", "sick", "wfh"]


def test_unknown_and_inactive_types():
    with pytest.raises(NotFoundError):
        get_leave_type("sabbatical")
    with pytest.raises(ValidationError):
        require_active_leave_type("unpaid")

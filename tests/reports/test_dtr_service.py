from datetime import datetime

from src.ojt_tracker.ojt_tracker.core.enums import StudentShiftType
from src.ojt_tracker.ojt_tracker.reports.service import CSV_FIELDS, DtrService
from src.ojt_tracker.ojt_tracker.shifts.model import default_shift_config

REGULAR = default_shift_config(StudentShiftType.REGULAR)


def _clock(ledger, clock, action, when):
    clock.now = when
    ledger.record_clock_event(student_id=1, action=action, shift=REGULAR)


def _full_day(ledger, clock, day, out_minute=5):
    _clock(ledger, clock, "morningIn", datetime(2025, 1, day, 8, 0))
    _clock(ledger, clock, "morningOut", datetime(2025, 1, day, 12, 0))
    _clock(ledger, clock, "afternoonIn", datetime(2025, 1, day, 13, 0))
    _clock(ledger, clock, "afternoonOut", datetime(2025, 1, day, 17, out_minute))


def test_dtr_has_a_row_for_every_day(ledger, clock, students_repo):
    student = students_repo.add()
    _full_day(ledger, clock, 6)

    dtr = DtrService(ledger).build_month(student, year=2025, month=1)

    assert dtr.name == "JUAN SANTOS DELA CRUZ"
    assert dtr.month_label == "JANUARY 2025"
    assert dtr.official_hours == REGULAR.description
    assert len(dtr.rows) == 31

    row = dtr.rows[5]
    assert row["day"] == 6
    assert row["am_in"] == "08:00 AM"
    assert row["am_out"] == "12:00 PM"
    assert row["pm_in"] == "01:00 PM"
    assert row["pm_out"] == "05:05 PM"
    assert row["total_hours"] == "8.08"
    assert row["undertime_hours"] == ""

    assert dtr.rows[0]["am_in"] == ""
    assert dtr.rows[0]["total_hours"] == ""


def test_dtr_totals_and_undertime(ledger, clock, students_repo):
    student = students_repo.add()
    _full_day(ledger, clock, 6)
    # 75 minutes late in the morning.
    _clock(ledger, clock, "morningIn", datetime(2025, 1, 7, 9, 15))
    _clock(ledger, clock, "morningOut", datetime(2025, 1, 7, 12, 0))

    dtr = DtrService(ledger).build_month(student, year=2025, month=1)

    row = dtr.rows[6]
    assert row["undertime_hours"] == "1"
    assert row["undertime_minutes"] == "15"
    assert row["total_hours"] == "2.75"
    assert dtr.total_hours == "10.83"
    assert dtr.to_dict()["total_hours"] == "10.83"


def test_dtr_february_leap_year(ledger, students_repo):
    student = students_repo.add()
    assert len(DtrService(ledger).build_month(student, year=2024, month=2).rows) == 29


def test_csv_export_has_bom_header_and_rows(ledger, clock, students_repo):
    student = students_repo.add()
    _full_day(ledger, clock, 7)
    _full_day(ledger, clock, 6)

    data = DtrService(ledger).export_csv(student, start=datetime(2025, 1, 1).date(), end=datetime(2025, 1, 31).date())

    assert data.startswith(b"\xef\xbb\xbf")
    lines = data.decode("utf-8-sig").splitlines()
    assert lines[0] == ",".join(CSV_FIELDS)
    assert len(lines) == 3
    assert lines[1].startswith("2025-01-06,2024-00001,Juan Santos Dela Cruz,regular,08:00 AM")
    assert ",8.08,0,present," in lines[1]

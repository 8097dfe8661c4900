from __future__ import annotations

import calendar
import csv
import io
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.service import AttendanceLedger
from ..common.datetime_utils import format_clock, month_bounds
from ..students.model import Student

CSV_FIELDS = [
    "work_date",
    "student_number",
    "full_name",
    "shift_type",
    "morning_in",
    "morning_out",
    "afternoon_in",
    "afternoon_out",
    "evening_in",
    "evening_out",
    "total_hours",
    "undertime_minutes",
    "status",
    "remarks",
]


@dataclass(frozen=True)
class DtrReport:
    """Civil Service Form No. 48 for one student and month."""

    name: str
    month_label: str
    official_hours: str
    rows: list[dict]
    total_hours: str

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "month_label": self.month_label,
            "official_hours": self.official_hours,
            "rows": self.rows,
            "total_hours": self.total_hours,
        }


def _sum_hours(records: Sequence[AttendanceRecord]) -> str:
    total = sum((Decimal(str(r.total_hours or 0)) for r in records), Decimal(0))
    return str(total.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class DtrService:
    """Reporting: reads ledger rows and lays them out as DTR tables / CSV."""

    def __init__(self, ledger: AttendanceLedger):
        self._ledger = ledger

    def build_month(self, student: Student, *, year: int, month: int) -> DtrReport:
        start, end = month_bounds(year, month)
        records = self._ledger.get_records_for_period(start=start, end=end, student_id=student.student_id)
        by_day = {r.work_date: r for r in records}

        rows = []
        for day in range(1, end.day + 1):
            rec = by_day.get(date(start.year, start.month, day))
            rows.append(self._dtr_row(day, rec))

        shift = student.active_shift()
        return DtrReport(
            name=student.full_name.upper(),
            month_label=f"{calendar.month_name[start.month]} {start.year}".upper(),
            official_hours=(shift.description or "") if shift else "",
            rows=rows,
            total_hours=_sum_hours(records),
        )

    @staticmethod
    def _dtr_row(day: int, rec: AttendanceRecord | None) -> dict:
        if rec is None:
            return {
                "day": day,
                "am_in": "",
                "am_out": "",
                "pm_in": "",
                "pm_out": "",
                "evening_in": "",
                "evening_out": "",
                "undertime_hours": "",
                "undertime_minutes": "",
                "total_hours": "",
            }

        undertime = int(rec.undertime_minutes or 0)
        return {
            "day": day,
            "am_in": format_clock(rec.morning_in),
            "am_out": format_clock(rec.morning_out),
            "pm_in": format_clock(rec.afternoon_in),
            "pm_out": format_clock(rec.afternoon_out),
            "evening_in": format_clock(rec.evening_in),
            "evening_out": format_clock(rec.evening_out),
            "undertime_hours": str(undertime // 60) if undertime else "",
            "undertime_minutes": str(undertime % 60) if undertime else "",
            "total_hours": f"{rec.total_hours:.2f}",
        }

    def export_csv(self, student: Student, *, start: date, end: date) -> bytes:
        """CSV export of a student's records (UTF-8 with BOM so Excel opens it)."""
        records = self._ledger.get_records_for_period(start=start, end=end, student_id=student.student_id)

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for r in sorted(records, key=lambda x: x.work_date):
            writer.writerow(
                {
                    "work_date": r.work_date.strftime("%Y-%m-%d"),
                    "student_number": student.student_number,
                    "full_name": student.full_name,
                    "shift_type": r.shift_type.value,
                    "morning_in": format_clock(r.morning_in),
                    "morning_out": format_clock(r.morning_out),
                    "afternoon_in": format_clock(r.afternoon_in),
                    "afternoon_out": format_clock(r.afternoon_out),
                    "evening_in": format_clock(r.evening_in),
                    "evening_out": format_clock(r.evening_out),
                    "total_hours": f"{r.total_hours:.2f}",
                    "undertime_minutes": r.undertime_minutes,
                    "status": r.status.value,
                    "remarks": r.remarks or "",
                }
            )
        return out.getvalue().encode("utf-8-sig")

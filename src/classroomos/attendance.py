"""
Attendance roster operations.

Rows are ``AttendanceRow`` objects loaded by ``database.get_attendance_rows``;
every change here updates the row in place and persists it.
"""

from datetime import datetime, timedelta
from typing import Dict, List, Optional

from . import database
from .config import get_settings
from .logging_config import get_logger
from .models import ATTENDANCE_STATUSES, AttendanceRow, CorrectionEntry, normalize_time

logger = get_logger(__name__)

DEFAULT_CORRECTION_USER = "staff-demo"


def status_from_punch(punch_in: Optional[str], batch_start_time: str,
                      grace_minutes: Optional[int] = None) -> str:
    """Derive a status from the punch-in time.

    No punch is Absent, a punch up to ``grace_minutes`` after the batch start
    is Present, anything later is Late.
    """
    if not punch_in:
        return "Absent"
    if grace_minutes is None:
        grace_minutes = get_settings().late_grace_minutes
    start = datetime.strptime(batch_start_time, "%H:%M")
    punched = datetime.strptime(punch_in, "%H:%M")
    if punched <= start + timedelta(minutes=grace_minutes):
        return "Present"
    return "Late"


def summarize(rows: List[AttendanceRow]) -> Dict[str, int]:
    """Count rows per status."""
    summary = {"present": 0, "absent": 0, "late": 0}
    for row in rows:
        summary[row.status.lower()] += 1
    return summary


def batch_summary(batch_id: str, date_str: str) -> Dict[str, int]:
    """Present/absent/late counts of a batch on a date."""
    return summarize(database.get_attendance_rows(batch_id, date_str))


def set_status(row: AttendanceRow, status: str, batch_id: str, date_str: str) -> AttendanceRow:
    if status not in ATTENDANCE_STATUSES:
        raise ValueError(f"Unknown attendance status: {status}")
    if database.update_attendance(row.student_id, batch_id, date_str, status):
        row.status = status
    return row


def set_punch_time(row: AttendanceRow, field: str, value: Optional[str], batch_id: str,
                   date_str: str, batch_start_time: Optional[str] = None) -> AttendanceRow:
    """Set punch_in or punch_out.

    When ``batch_start_time`` is given a new punch-in also re-derives the status.
    Raises ValueError for times not in "HH:MM" form.
    """
    if field not in ("punch_in", "punch_out"):
        raise ValueError(f"Unknown punch field: {field}")
    value = normalize_time(value) if value else None
    if not database.update_punch_time(row.student_id, batch_id, date_str, field, value, row.status):
        return row
    setattr(row, field, value)
    if field == "punch_in" and batch_start_time:
        set_status(row, status_from_punch(value, batch_start_time), batch_id, date_str)
    logger.info("punch_time_set", student_id=row.student_id, batch_id=batch_id,
                date=date_str, field=field, value=value)
    return row


def log_correction(row: AttendanceRow, note: str, batch_id: str, date_str: str,
                   user: str = DEFAULT_CORRECTION_USER) -> bool:
    """Append ``note`` to the row's correction log. Blank notes are ignored."""
    note = (note or "").strip()
    if not note:
        return False
    stamp = datetime.now().isoformat(timespec="seconds")
    database.add_attendance_correction(row.student_id, batch_id, date_str, user, note, stamp)
    row.correction_log.append(CorrectionEntry(user, stamp, note))
    return True


def apply_correction(row: AttendanceRow, new_status: str, note: str, batch_id: str,
                     date_str: str, user: str = DEFAULT_CORRECTION_USER) -> AttendanceRow:
    """Save a correction: the status only when it changed, the note only when non-blank."""
    if new_status != row.status:
        set_status(row, new_status, batch_id, date_str)
    log_correction(row, note, batch_id, date_str, user)
    return row

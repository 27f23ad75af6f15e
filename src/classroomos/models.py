from datetime import datetime
from typing import List, Optional


PROGRAMS = ["IELTS", "Spoken English Junior", "Spoken English", "TOEFL", "GRE", "GMAT"]
WEEK_DAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
STATUSES = ["Active", "Inactive"]
ROOM_TYPES = ["Regular", "Lab", "Auditorium"]
ATTENDANCE_STATUSES = ["Present", "Absent", "Late"]
STAFF_ROLES = ["Admin", "FDO", "ADO", "Branch Manager"]
TIME_BLOCK_TYPES = ["Full Day", "Time Range"]
ACTIVITY_TAGS = ["Lecture", "Exam", "PTM", "Play Day", "Homework", "Rating",
                 "Free Class", "Speaking Tests"]

# Bitmask values follow WEEK_DAYS order: Sun=1, Mon=2, ... Sat=64
ALL_DAYS_MASK = 127


def days_to_mask(days: List[str]) -> int:
    """Convert weekday names to a bitmask."""
    mask = 0
    for day in days:
        mask |= 1 << WEEK_DAYS.index(day)
    return mask


def mask_to_days(mask: int) -> List[str]:
    """Convert a bitmask back to weekday names in week order."""
    return [day for i, day in enumerate(WEEK_DAYS) if mask & (1 << i)]


def normalize_time(value: str) -> str:
    """Return a time as zero-padded "HH:MM" ("9:5" -> "09:05").

    Stored times are compared as strings, so every time is normalized before
    it is saved. Raises ValueError for anything that is not a clock time.
    """
    return datetime.strptime(value.strip(), "%H:%M").strftime("%H:%M")


def get_days_label(mask: int) -> str:
    """Readable day names for a bitmask."""
    if mask == ALL_DAYS_MASK:
        return "Daily"
    elif mask == 0:
        return "No days"
    return ", ".join(mask_to_days(mask))


class Room:
    """Room inside a branch."""
    def __init__(self, room_name: str, capacity: int, room_type: str = "Regular"):
        self.room_name = room_name
        self.capacity = capacity
        self.room_type = room_type


class Branch:
    """Branch (physical center) data model."""
    def __init__(self, id: str, name: str, internal_name: str, location: str,
                 rooms: Optional[List[Room]] = None, branch_manager_user_id: str = "",
                 status: str = "Active", google_map_link: str = ""):
        self.id = id
        self.name = name
        self.internal_name = internal_name
        self.location = location
        self.rooms = rooms or []
        self.branch_manager_user_id = branch_manager_user_id
        self.status = status
        self.google_map_link = google_map_link


class Batch:
    """Batch (scheduled class cohort) data model."""
    def __init__(self, id: str, name: str, internal_name: str, branch_id: str,
                 program: str, start_date: str, end_date: str, days: List[str],
                 start_time: str, end_time: str, capacity: int,
                 admission_start_date: str, admission_end_date: str,
                 status: str = "Active", enrolled: int = 0, branch_name: str = ""):
        self.id = id
        self.name = name
        self.internal_name = internal_name
        self.branch_id = branch_id
        self.program = program
        self.start_date = start_date
        self.end_date = end_date
        self.days = days
        self.start_time = start_time
        self.end_time = end_time
        self.capacity = capacity
        self.admission_start_date = admission_start_date
        self.admission_end_date = admission_end_date
        self.status = status
        self.enrolled = enrolled
        self.branch_name = branch_name

    @property
    def days_mask(self) -> int:
        return days_to_mask(self.days)


class Activity:
    """Planned activity (class, exam, play day...) for a batch."""
    def __init__(self, id: str, batch_id: str, title: str, code: str, tag: str,
                 date: str, start_time: str, end_time: str, room_id: str, teachers: str):
        self.id = id
        self.batch_id = batch_id
        self.title = title
        self.code = code
        self.tag = tag
        self.date = date
        self.start_time = start_time
        self.end_time = end_time
        self.room_id = room_id
        self.teachers = teachers

    def teacher_names(self) -> List[str]:
        return [t.strip() for t in self.teachers.split(",") if t.strip()]


class GovHoliday:
    """Government holiday; blocks every branch for the whole day."""
    def __init__(self, name: str, date: str):
        self.name = name
        self.date = date


class TimeBlock:
    """Custom calendar exclusion created by staff."""
    def __init__(self, id: str, name: str, date: str, block_type: str = "Full Day",
                 start_time: Optional[str] = None, end_time: Optional[str] = None,
                 all_branches: bool = False, branch_id: Optional[str] = None,
                 reason: str = ""):
        self.id = id
        self.name = name
        self.date = date
        self.block_type = block_type
        self.start_time = start_time
        self.end_time = end_time
        self.all_branches = all_branches
        self.branch_id = branch_id
        self.reason = reason


class CorrectionEntry:
    """One manual attendance correction."""
    def __init__(self, user: str, time: str, note: str):
        self.user = user
        self.time = time
        self.note = note


class AttendanceRow:
    """Attendance of one student in one batch on one date."""
    def __init__(self, student_id: str, student_name: str, status: str = "Absent",
                 punch_in: Optional[str] = None, punch_out: Optional[str] = None,
                 correction_log: Optional[List[CorrectionEntry]] = None):
        self.student_id = student_id
        self.student_name = student_name
        self.status = status
        self.punch_in = punch_in
        self.punch_out = punch_out
        self.correction_log = correction_log or []


class StaffUser:
    """Staff account listed under Settings > Users & Roles."""
    def __init__(self, id: str, name: str, email: str, role: str,
                 branch: Optional[str] = None, status: str = "Active", created_at: str = ""):
        self.id = id
        self.name = name
        self.email = email
        self.role = role
        self.branch = branch
        self.status = status
        self.created_at = created_at

"""
Database operations for ClassroomOS.

Every function opens its own sqlite connection, the same way the console
screens call them directly from their event handlers.
"""

import json
import sqlite3
import uuid
from datetime import date, datetime
from typing import Dict, List, Optional

from .config import get_settings
from .logging_config import get_logger
from .models import (
    Activity, AttendanceRow, Batch, Branch, CorrectionEntry, Room, StaffUser,
    TimeBlock, days_to_mask, mask_to_days,
)

logger = get_logger(__name__)


def new_id(prefix: str) -> str:
    """Generate a short prefixed id such as ``bt-1a2b3c4d``."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def get_db_connection():
    """Get database connection with row factory."""
    conn = sqlite3.connect(get_settings().db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db():
    """Initialize the database with required tables."""
    conn = get_db_connection()
    cursor = conn.cursor()

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS branches (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            internal_name TEXT NOT NULL UNIQUE COLLATE NOCASE,
            location TEXT NOT NULL,
            google_map_link TEXT DEFAULT '',
            branch_manager_user_id TEXT DEFAULT '',
            status TEXT NOT NULL DEFAULT 'Active' CHECK(status IN ('Active', 'Inactive'))
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS rooms (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            branch_id TEXT NOT NULL,
            room_name TEXT NOT NULL,
            capacity INTEGER NOT NULL CHECK(capacity > 0),
            room_type TEXT NOT NULL DEFAULT 'Regular',
            position INTEGER NOT NULL DEFAULT 0,
            FOREIGN KEY (branch_id) REFERENCES branches (id) ON DELETE CASCADE
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS batches (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            internal_name TEXT NOT NULL UNIQUE COLLATE NOCASE,
            branch_id TEXT NOT NULL,
            program TEXT NOT NULL,
            start_date TEXT NOT NULL,
            end_date TEXT NOT NULL,
            days_mask INTEGER NOT NULL DEFAULT 0,
            start_time TEXT NOT NULL,
            end_time TEXT NOT NULL,
            capacity INTEGER NOT NULL CHECK(capacity > 0),
            admission_start_date TEXT NOT NULL,
            admission_end_date TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'Active' CHECK(status IN ('Active', 'Inactive')),
            FOREIGN KEY (branch_id) REFERENCES branches (id)
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS students (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS enrollments (
            student_id TEXT NOT NULL,
            batch_id TEXT NOT NULL,
            enrolled_at TEXT NOT NULL,
            PRIMARY KEY (student_id, batch_id),
            FOREIGN KEY (student_id) REFERENCES students (id) ON DELETE CASCADE,
            FOREIGN KEY (batch_id) REFERENCES batches (id)
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS activities (
            id TEXT PRIMARY KEY,
            batch_id TEXT NOT NULL,
            title TEXT NOT NULL,
            code TEXT NOT NULL,
            tag TEXT NOT NULL,
            date TEXT NOT NULL,
            start_time TEXT NOT NULL,
            end_time TEXT NOT NULL,
            room_id TEXT DEFAULT '',
            teachers TEXT DEFAULT '',
            FOREIGN KEY (batch_id) REFERENCES batches (id) ON DELETE CASCADE
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS time_blocks (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            date TEXT NOT NULL,
            block_type TEXT NOT NULL CHECK(block_type IN ('Full Day', 'Time Range')),
            start_time TEXT,
            end_time TEXT,
            all_branches BOOLEAN DEFAULT 0,
            branch_id TEXT,
            reason TEXT DEFAULT ''
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS attendance (
            student_id TEXT NOT NULL,
            batch_id TEXT NOT NULL,
            date TEXT NOT NULL,
            status TEXT NOT NULL CHECK(status IN ('Present', 'Absent', 'Late')),
            punch_in TEXT,
            punch_out TEXT,
            PRIMARY KEY (student_id, batch_id, date),
            FOREIGN KEY (student_id) REFERENCES students (id) ON DELETE CASCADE,
            FOREIGN KEY (batch_id) REFERENCES batches (id) ON DELETE CASCADE
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS attendance_corrections (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            student_id TEXT NOT NULL,
            batch_id TEXT NOT NULL,
            date TEXT NOT NULL,
            user TEXT NOT NULL,
            time TEXT NOT NULL,
            note TEXT NOT NULL
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS staff_users (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT NOT NULL,
            role TEXT NOT NULL CHECK(role IN ('Admin', 'FDO', 'ADO', 'Branch Manager')),
            branch TEXT,
            status TEXT NOT NULL DEFAULT 'Active' CHECK(status IN ('Active', 'Inactive')),
            created_at TEXT NOT NULL
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS session (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
    ''')

    if get_settings().seed_demo_data:
        cursor.execute("SELECT COUNT(*) FROM branches")
        if cursor.fetchone()[0] == 0:
            _seed_demo_data(cursor)

    conn.commit()
    conn.close()


def _seed_demo_data(cursor):
    """Insert the demo branches, batches, students and staff."""
    cursor.executemany(
        "INSERT INTO branches (id, name, internal_name, location, branch_manager_user_id, status) "
        "VALUES (?, ?, ?, ?, ?, ?)",
        [
            ("b1", "Uttara Center", "U1", "House 12, Road 3, Uttara, Dhaka", "mgr-01", "Active"),
            ("b2", "Mirpur Center", "M1", "Plot 5, Section 10, Mirpur, Dhaka", "mgr-02", "Inactive"),
        ],
    )
    cursor.executemany(
        "INSERT INTO rooms (branch_id, room_name, capacity, room_type, position) VALUES (?, ?, ?, ?, ?)",
        [
            ("b1", "Room A", 30, "Regular", 0),
            ("b1", "Room B", 24, "Regular", 1),
            ("b2", "Room 1", 20, "Regular", 0),
        ],
    )
    cursor.executemany(
        """INSERT INTO batches (id, name, internal_name, branch_id, program, start_date, end_date,
                                days_mask, start_time, end_time, capacity, admission_start_date,
                                admission_end_date, status)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        [
            ("bt1", "IELTS Morning", "IELTS-M-1", "b1", "IELTS", "2025-09-01", "2025-11-30",
             days_to_mask(["Sun", "Tue", "Thu"]), "10:00", "12:00", 30,
             "2025-08-15", "2025-08-31", "Active"),
            ("bt2", "Spoken Junior A", "SE-J-A", "b2", "Spoken English Junior", "2025-06-01", "2025-08-31",
             days_to_mask(["Mon", "Wed"]), "16:00", "17:30", 20,
             "2025-05-10", "2025-05-31", "Inactive"),
        ],
    )
    today = date.today().isoformat()
    cursor.executemany(
        "INSERT INTO students (id, name) VALUES (?, ?)",
        [("S-1001", "Nadia Rahman"), ("S-1002", "Arif Hossain"), ("S-1003", "Samira Akter")],
    )
    cursor.executemany(
        "INSERT INTO enrollments (student_id, batch_id, enrolled_at) VALUES (?, ?, ?)",
        [("S-1001", "bt1", today), ("S-1002", "bt1", today), ("S-1003", "bt1", today)],
    )
    cursor.executemany(
        "INSERT INTO attendance (student_id, batch_id, date, status, punch_in, punch_out) "
        "VALUES (?, ?, ?, ?, ?, ?)",
        [
            ("S-1001", "bt1", today, "Present", "09:55", "12:05"),
            ("S-1002", "bt1", today, "Late", "10:08", "12:00"),
            ("S-1003", "bt1", today, "Absent", None, None),
        ],
    )
    cursor.executemany(
        "INSERT INTO staff_users (id, name, email, role, branch, status, created_at) "
        "VALUES (?, ?, ?, ?, ?, ?, ?)",
        [
            ("u1", "John Doe", "john.doe@company.com", "Admin", None, "Active", "2024-01-15"),
            ("u2", "Sarah Smith", "sarah.smith@company.com", "FDO", None, "Active", "2024-01-20"),
            ("u3", "Michael Johnson", "michael.johnson@company.com", "Branch Manager",
             "Uttara Center", "Active", "2024-01-25"),
            ("u4", "Emily Davis", "emily.davis@company.com", "ADO", None, "Active", "2024-02-01"),
            ("u5", "David Wilson", "david.wilson@company.com", "Branch Manager",
             "Mirpur Center", "Inactive", "2024-02-05"),
        ],
    )
    logger.info("demo_data_seeded", branches=2, batches=2, staff_users=5)


# ----------------------------------------------------------------------
# Branches
# ----------------------------------------------------------------------
def _rooms_for_branch(cursor, branch_id: str) -> List[Room]:
    cursor.execute(
        "SELECT room_name, capacity, room_type FROM rooms WHERE branch_id = ? ORDER BY position, id",
        (branch_id,),
    )
    return [Room(row['room_name'], row['capacity'], row['room_type']) for row in cursor.fetchall()]


def _row_to_branch(cursor, row) -> Branch:
    return Branch(
        row['id'],
        row['name'],
        row['internal_name'],
        row['location'],
        _rooms_for_branch(cursor, row['id']),
        row['branch_manager_user_id'] or "",
        row['status'],
        row['google_map_link'] or "",
    )


def get_all_branches(search_query: str = "") -> List[Branch]:
    """Retrieve all branches, optionally filtered by name, code or location."""
    conn = get_db_connection()
    cursor = conn.cursor()
    if search_query:
        term = f"%{search_query}%"
        cursor.execute("""
            SELECT * FROM branches
            WHERE name LIKE ? OR internal_name LIKE ? OR location LIKE ?
            ORDER BY name
        """, (term, term, term))
    else:
        cursor.execute("SELECT * FROM branches ORDER BY name")
    rows = cursor.fetchall()
    branches = [_row_to_branch(cursor, row) for row in rows]
    conn.close()
    return branches


def get_branch_by_id(branch_id: str) -> Optional[Branch]:
    """Get a single branch by ID."""
    conn = get_db_connection()
    cursor = conn.cursor()
    cursor.execute("SELECT * FROM branches WHERE id = ?", (branch_id,))
    row = cursor.fetchone()
    branch = _row_to_branch(cursor, row) if row else None
    conn.close()
    return branch


def branch_internal_name_exists(internal_name: str, exclude_id: Optional[str] = None) -> bool:
    """Check whether another branch already uses the internal code (case-insensitive)."""
    conn = get_db_connection()
    cursor = conn.cursor()
    cursor.execute(
        "SELECT id FROM branches WHERE internal_name = ? COLLATE NOCASE AND id != ?",
        (internal_name.strip(), exclude_id or ""),
    )
    found = cursor.fetchone() is not None
    conn.close()
    return found


def _write_rooms(cursor, branch_id: str, rooms: List[Room]):
    cursor.execute("DELETE FROM rooms WHERE branch_id = ?", (branch_id,))
    cursor.executemany(
        "INSERT INTO rooms (branch_id, room_name, capacity, room_type, position) VALUES (?, ?, ?, ?, ?)",
        [(branch_id, r.room_name, r.capacity, r.room_type, i) for i, r in enumerate(rooms)],
    )


def add_branch(name: str, internal_name: str, location: str, rooms: List[Room],
               branch_manager_user_id: str = "", status: str = "Active",
               google_map_link: str = "") -> Optional[str]:
    """Add a new branch with its rooms. Returns the new id, or None if the code is taken."""
    branch_id = new_id("b")
    conn = get_db_connection()
    try:
        cursor = conn.cursor()
        cursor.execute("""
            INSERT INTO branches (id, name, internal_name, location, google_map_link,
                                  branch_manager_user_id, status)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """, (branch_id, name.strip(), internal_name.strip(), location.strip(),
              google_map_link.strip(), branch_manager_user_id, status))
        _write_rooms(cursor, branch_id, rooms)
        conn.commit()
    except sqlite3.IntegrityError as ex:
        logger.warning("branch_create_rejected", internal_name=internal_name, error=str(ex))
        return None
    finally:
        conn.close()
    logger.info("branch_created", branch_id=branch_id, internal_name=internal_name)
    return branch_id


def update_branch(branch_id: str, name: str, internal_name: str, location: str,
                  rooms: List[Room], branch_manager_user_id: str = "",
                  status: str = "Active", google_map_link: str = "") -> bool:
    """Update an existing branch and replace its rooms."""
    conn = get_db_connection()
    try:
        cursor = conn.cursor()
        cursor.execute("""
            UPDATE branches
            SET name = ?, internal_name = ?, location = ?, google_map_link = ?,
                branch_manager_user_id = ?, status = ?
            WHERE id = ?
        """, (name.strip(), internal_name.strip(), location.strip(), google_map_link.strip(),
              branch_manager_user_id, status, branch_id))
        if cursor.rowcount == 0:
            return False
        _write_rooms(cursor, branch_id, rooms)
        conn.commit()
    except sqlite3.IntegrityError as ex:
        logger.warning("branch_update_rejected", branch_id=branch_id, error=str(ex))
        return False
    finally:
        conn.close()
    logger.info("branch_updated", branch_id=branch_id)
    return True


def delete_branch(branch_id: str) -> bool:
    """Delete a branch. Refused while batches still belong to it."""
    conn = get_db_connection()
    try:
        cursor = conn.cursor()
        cursor.execute("DELETE FROM branches WHERE id = ?", (branch_id,))
        deleted = cursor.rowcount > 0
        conn.commit()
    except sqlite3.IntegrityError:
        logger.warning("branch_delete_rejected", branch_id=branch_id, reason="batches exist")
        return False
    finally:
        conn.close()
    if deleted:
        logger.info("branch_deleted", branch_id=branch_id)
    return deleted


# ----------------------------------------------------------------------
# Batches
# ----------------------------------------------------------------------
_BATCH_SELECT = """
    SELECT bt.*, b.name AS branch_name,
           (SELECT COUNT(*) FROM enrollments e WHERE e.batch_id = bt.id) AS enrolled
    FROM batches bt
    LEFT JOIN branches b ON bt.branch_id = b.id
"""


def _row_to_batch(row) -> Batch:
    return Batch(
        row['id'],
        row['name'],
        row['internal_name'],
        row['branch_id'],
        row['program'],
        row['start_date'],
        row['end_date'],
        mask_to_days(row['days_mask']),
        row['start_time'],
        row['end_time'],
        row['capacity'],
        row['admission_start_date'],
        row['admission_end_date'],
        row['status'],
        row['enrolled'],
        row['branch_name'] or "",
    )


def get_all_batches(search_query: str = "", branch_id: Optional[str] = None) -> List[Batch]:
    """Retrieve batches, optionally filtered by search text and branch."""
    conn = get_db_connection()
    cursor = conn.cursor()
    clauses = []
    params = []
    if search_query:
        term = f"%{search_query}%"
        clauses.append("(bt.name LIKE ? OR bt.internal_name LIKE ? OR bt.program LIKE ? OR b.name LIKE ?)")
        params.extend([term, term, term, term])
    if branch_id:
        clauses.append("bt.branch_id = ?")
        params.append(branch_id)
    query = _BATCH_SELECT
    if clauses:
        query += " WHERE " + " AND ".join(clauses)
    query += " ORDER BY bt.start_date DESC, bt.name"
    cursor.execute(query, params)
    batches = [_row_to_batch(row) for row in cursor.fetchall()]
    conn.close()
    return batches


def get_batch_by_id(batch_id: str) -> Optional[Batch]:
    """Get a single batch by ID."""
    conn = get_db_connection()
    cursor = conn.cursor()
    cursor.execute(_BATCH_SELECT + " WHERE bt.id = ?", (batch_id,))
    row = cursor.fetchone()
    conn.close()
    return _row_to_batch(row) if row else None


def add_batch(name: str, internal_name: str, branch_id: str, program: str,
              start_date: str, end_date: str, days: List[str], start_time: str,
              end_time: str, capacity: int, admission_start_date: str,
              admission_end_date: str, status: str = "Active") -> Optional[str]:
    """Add a new batch. Returns the new id, or None if the internal code is taken."""
    batch_id = new_id("bt")
    conn = get_db_connection()
    try:
        cursor = conn.cursor()
        cursor.execute("""
            INSERT INTO batches (id, name, internal_name, branch_id, program, start_date, end_date,
                                 days_mask, start_time, end_time, capacity, admission_start_date,
                                 admission_end_date, status)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, (batch_id, name.strip(), internal_name.strip(), branch_id, program, start_date,
              end_date, days_to_mask(days), start_time, end_time, int(capacity),
              admission_start_date, admission_end_date, status))
        conn.commit()
    except sqlite3.IntegrityError as ex:
        logger.warning("batch_create_rejected", internal_name=internal_name, error=str(ex))
        return None
    finally:
        conn.close()
    logger.info("batch_created", batch_id=batch_id, branch_id=branch_id, program=program)
    return batch_id


def update_batch(batch_id: str, name: str, internal_name: str, branch_id: str, program: str,
                 start_date: str, end_date: str, days: List[str], start_time: str,
                 end_time: str, capacity: int, admission_start_date: str,
                 admission_end_date: str, status: str = "Active") -> bool:
    """Update an existing batch. Enrollment is left untouched."""
    conn = get_db_connection()
    try:
        cursor = conn.cursor()
        cursor.execute("""
            UPDATE batches
            SET name = ?, internal_name = ?, branch_id = ?, program = ?, start_date = ?,
                end_date = ?, days_mask = ?, start_time = ?, end_time = ?, capacity = ?,
                admission_start_date = ?, admission_end_date = ?, status = ?
            WHERE id = ?
        """, (name.strip(), internal_name.strip(), branch_id, program, start_date, end_date,
              days_to_mask(days), start_time, end_time, int(capacity), admission_start_date,
              admission_end_date, status, batch_id))
        updated = cursor.rowcount > 0
        conn.commit()
    except sqlite3.IntegrityError as ex:
        logger.warning("batch_update_rejected", batch_id=batch_id, error=str(ex))
        return False
    finally:
        conn.close()
    if updated:
        logger.info("batch_updated", batch_id=batch_id)
    return updated


def delete_batch(batch_id: str) -> bool:
    """Delete a batch and its planned activities. Refused while students are enrolled."""
    conn = get_db_connection()
    try:
        cursor = conn.cursor()
        cursor.execute("SELECT COUNT(*) FROM enrollments WHERE batch_id = ?", (batch_id,))
        if cursor.fetchone()[0] > 0:
            logger.warning("batch_delete_rejected", batch_id=batch_id, reason="students enrolled")
            return False
        cursor.execute("DELETE FROM batches WHERE id = ?", (batch_id,))
        deleted = cursor.rowcount > 0
        conn.commit()
    finally:
        conn.close()
    if deleted:
        logger.info("batch_deleted", batch_id=batch_id)
    return deleted


# ----------------------------------------------------------------------
# Students and enrollment
# ----------------------------------------------------------------------
def add_student(name: str, batch_id: Optional[str] = None,
                student_id: Optional[str] = None) -> Optional[str]:
    """Add a student, optionally enrolling them in a batch."""
    student_id = student_id or new_id("S")
    conn = get_db_connection()
    try:
        cursor = conn.cursor()
        cursor.execute("INSERT INTO students (id, name) VALUES (?, ?)", (student_id, name.strip()))
        if batch_id:
            cursor.execute(
                "INSERT INTO enrollments (student_id, batch_id, enrolled_at) VALUES (?, ?, ?)",
                (student_id, batch_id, date.today().isoformat()),
            )
        conn.commit()
    except sqlite3.IntegrityError as ex:
        logger.warning("student_create_rejected", student_id=student_id, error=str(ex))
        return None
    finally:
        conn.close()
    return student_id


def get_all_students(search_query: str = "") -> List[Dict]:
    """Every student with the batches they are enrolled in."""
    conn = get_db_connection()
    cursor = conn.cursor()
    query = """
        SELECT s.id, s.name, GROUP_CONCAT(bt.name, ', ') AS batch_names
        FROM students s
        LEFT JOIN enrollments e ON e.student_id = s.id
        LEFT JOIN batches bt ON bt.id = e.batch_id
    """
    params = []
    if search_query:
        query += " WHERE s.name LIKE ? OR s.id LIKE ?"
        params = [f"%{search_query}%", f"%{search_query}%"]
    query += " GROUP BY s.id, s.name ORDER BY s.id"
    cursor.execute(query, params)
    students = [{"id": row['id'], "name": row['name'], "batches": row['batch_names'] or ""}
                for row in cursor.fetchall()]
    conn.close()
    return students


def count_students() -> int:
    conn = get_db_connection()
    cursor = conn.cursor()
    cursor.execute("SELECT COUNT(*) FROM students")
    total = cursor.fetchone()[0]
    conn.close()
    return total


# ----------------------------------------------------------------------
# Activities (batch planner)
# ----------------------------------------------------------------------
def _row_to_activity(row) -> Activity:
    return Activity(
        row['id'], row['batch_id'], row['title'], row['code'], row['tag'], row['date'],
        row['start_time'], row['end_time'], row['room_id'] or "", row['teachers'] or "",
    )


def get_activities_for_batch(batch_id: str) -> List[Activity]:
    """Planned activities of a batch in date order."""
    conn = get_db_connection()
    cursor = conn.cursor()
    cursor.execute(
        "SELECT * FROM activities WHERE batch_id = ? ORDER BY date, start_time, code",
        (batch_id,),
    )
    activities = [_row_to_activity(row) for row in cursor.fetchall()]
    conn.close()
    return activities


def replace_activities(batch_id: str, activities: List[Activity]) -> bool:
    """Replace every planned activity of a batch with a confirmed preview."""
    conn = get_db_connection()
    try:
        cursor = conn.cursor()
        cursor.execute("DELETE FROM activities WHERE batch_id = ?", (batch_id,))
        cursor.executemany("""
            INSERT INTO activities (id, batch_id, title, code, tag, date, start_time,
                                    end_time, room_id, teachers)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, [(a.id, batch_id, a.title, a.code, a.tag, a.date, a.start_time, a.end_time,
               a.room_id, a.teachers) for a in activities])
        conn.commit()
    except sqlite3.IntegrityError as ex:
        logger.warning("activities_replace_rejected", batch_id=batch_id, error=str(ex))
        return False
    finally:
        conn.close()
    logger.info("activities_replaced", batch_id=batch_id, count=len(activities))
    return True


def update_activity(activity: Activity) -> bool:
    """Persist a rescheduled activity (date and times)."""
    conn = get_db_connection()
    try:
        cursor = conn.cursor()
        cursor.execute("""
            UPDATE activities SET date = ?, start_time = ?, end_time = ?, room_id = ?, teachers = ?
            WHERE id = ?
        """, (activity.date, activity.start_time, activity.end_time, activity.room_id,
              activity.teachers, activity.id))
        updated = cursor.rowcount > 0
        conn.commit()
    finally:
        conn.close()
    return updated


# ----------------------------------------------------------------------
# Time blocks
# ----------------------------------------------------------------------
def get_all_time_blocks() -> List[TimeBlock]:
    """Custom time blocks in date order."""
    conn = get_db_connection()
    cursor = conn.cursor()
    cursor.execute("SELECT * FROM time_blocks ORDER BY date, start_time")
    blocks = [TimeBlock(
        row['id'],
        row['name'],
        row['date'],
        row['block_type'],
        row['start_time'],
        row['end_time'],
        bool(row['all_branches']),
        row['branch_id'],
        row['reason'] or "",
    ) for row in cursor.fetchall()]
    conn.close()
    return blocks


def add_time_block(name: str, date_str: str, block_type: str = "Full Day",
                   start_time: Optional[str] = None, end_time: Optional[str] = None,
                   all_branches: bool = False, branch_id: Optional[str] = None,
                   reason: str = "") -> Optional[str]:
    """Add a custom time block. Times are dropped for Full Day blocks."""
    block_id = new_id("tb")
    if block_type == "Full Day":
        start_time = end_time = None
    conn = get_db_connection()
    try:
        cursor = conn.cursor()
        cursor.execute("""
            INSERT INTO time_blocks (id, name, date, block_type, start_time, end_time,
                                     all_branches, branch_id, reason)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, (block_id, name.strip(), date_str, block_type, start_time, end_time,
              all_branches, None if all_branches else branch_id, reason.strip()))
        conn.commit()
    except sqlite3.IntegrityError as ex:
        logger.warning("time_block_create_rejected", name=name, error=str(ex))
        return None
    finally:
        conn.close()
    logger.info("time_block_created", time_block_id=block_id, date=date_str, block_type=block_type)
    return block_id


def delete_time_block(block_id: str) -> bool:
    """Remove a custom time block."""
    conn = get_db_connection()
    cursor = conn.cursor()
    cursor.execute("DELETE FROM time_blocks WHERE id = ?", (block_id,))
    deleted = cursor.rowcount > 0
    conn.commit()
    conn.close()
    if deleted:
        logger.info("time_block_removed", time_block_id=block_id)
    return deleted


# ----------------------------------------------------------------------
# Attendance
# ----------------------------------------------------------------------
def _corrections_for(cursor, student_id: str, batch_id: str, date_str: str) -> List[CorrectionEntry]:
    cursor.execute("""
        SELECT user, time, note FROM attendance_corrections
        WHERE student_id = ? AND batch_id = ? AND date = ?
        ORDER BY id
    """, (student_id, batch_id, date_str))
    return [CorrectionEntry(row['user'], row['time'], row['note']) for row in cursor.fetchall()]


def get_attendance_rows(batch_id: str, date_str: str) -> List[AttendanceRow]:
    """Roster of a batch for one date. Students without a record are Absent."""
    conn = get_db_connection()
    cursor = conn.cursor()
    cursor.execute("""
        SELECT s.id, s.name, a.status, a.punch_in, a.punch_out
        FROM students s
        JOIN enrollments e ON e.student_id = s.id
        LEFT JOIN attendance a
               ON a.student_id = s.id AND a.batch_id = e.batch_id AND a.date = ?
        WHERE e.batch_id = ?
        ORDER BY s.id
    """, (date_str, batch_id))
    rows = []
    for row in cursor.fetchall():
        rows.append(AttendanceRow(
            row['id'],
            row['name'],
            row['status'] or "Absent",
            row['punch_in'],
            row['punch_out'],
            _corrections_for(cursor, row['id'], batch_id, date_str),
        ))
    conn.close()
    return rows


def update_attendance(student_id: str, batch_id: str, date_str: str, status: str) -> bool:
    """Update or insert the attendance status of a student."""
    conn = get_db_connection()
    try:
        cursor = conn.cursor()
        cursor.execute("""
            INSERT INTO attendance (student_id, batch_id, date, status)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(student_id, batch_id, date) DO UPDATE SET status = excluded.status
        """, (student_id, batch_id, date_str, status))
        conn.commit()
    except sqlite3.IntegrityError as ex:
        logger.warning("attendance_update_rejected", student_id=student_id, error=str(ex))
        return False
    finally:
        conn.close()
    logger.info("attendance_status_set", student_id=student_id, batch_id=batch_id,
                date=date_str, status=status)
    return True


def update_punch_time(student_id: str, batch_id: str, date_str: str, field: str,
                      value: Optional[str], default_status: str = "Absent") -> bool:
    """Set punch_in or punch_out of a student, creating the record if needed."""
    if field not in ("punch_in", "punch_out"):
        raise ValueError(f"Unknown punch field: {field}")
    conn = get_db_connection()
    try:
        cursor = conn.cursor()
        cursor.execute(f"""
            INSERT INTO attendance (student_id, batch_id, date, status, {field})
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(student_id, batch_id, date) DO UPDATE SET {field} = excluded.{field}
        """, (student_id, batch_id, date_str, default_status, value or None))
        conn.commit()
    except sqlite3.IntegrityError as ex:
        logger.warning("punch_update_rejected", student_id=student_id, error=str(ex))
        return False
    finally:
        conn.close()
    return True


def add_attendance_correction(student_id: str, batch_id: str, date_str: str,
                              user: str, note: str, time: Optional[str] = None) -> bool:
    """Append an entry to the correction log of a student."""
    stamp = time or datetime.now().isoformat(timespec="seconds")
    conn = get_db_connection()
    cursor = conn.cursor()
    cursor.execute("""
        INSERT INTO attendance_corrections (student_id, batch_id, date, user, time, note)
        VALUES (?, ?, ?, ?, ?, ?)
    """, (student_id, batch_id, date_str, user, stamp, note))
    conn.commit()
    conn.close()
    logger.info("attendance_correction_logged", student_id=student_id, batch_id=batch_id,
                date=date_str, user=user)
    return True


# ----------------------------------------------------------------------
# Staff users (Settings > Users & Roles)
# ----------------------------------------------------------------------
def get_all_staff_users() -> List[StaffUser]:
    """All staff accounts in creation order."""
    conn = get_db_connection()
    cursor = conn.cursor()
    cursor.execute("SELECT * FROM staff_users ORDER BY created_at, id")
    users = [StaffUser(
        row['id'], row['name'], row['email'], row['role'], row['branch'],
        row['status'], row['created_at'],
    ) for row in cursor.fetchall()]
    conn.close()
    return users


def add_staff_user(name: str, email: str, role: str, branch: Optional[str] = None,
                   status: str = "Active") -> Optional[str]:
    """Add a staff account. Branch is kept only for Branch Managers."""
    user_id = new_id("u")
    conn = get_db_connection()
    try:
        cursor = conn.cursor()
        cursor.execute("""
            INSERT INTO staff_users (id, name, email, role, branch, status, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """, (user_id, name, email, role, branch if role == "Branch Manager" else None,
              status, date.today().isoformat()))
        conn.commit()
    except sqlite3.IntegrityError as ex:
        logger.warning("staff_user_create_rejected", email=email, error=str(ex))
        return None
    finally:
        conn.close()
    logger.info("staff_user_created", user_id=user_id, role=role)
    return user_id


def update_staff_user(user_id: str, name: str, email: str, role: str,
                      branch: Optional[str] = None, status: str = "Active") -> bool:
    """Update a staff account."""
    conn = get_db_connection()
    try:
        cursor = conn.cursor()
        cursor.execute("""
            UPDATE staff_users SET name = ?, email = ?, role = ?, branch = ?, status = ?
            WHERE id = ?
        """, (name, email, role, branch if role == "Branch Manager" else None, status, user_id))
        updated = cursor.rowcount > 0
        conn.commit()
    except sqlite3.IntegrityError as ex:
        logger.warning("staff_user_update_rejected", user_id=user_id, error=str(ex))
        return False
    finally:
        conn.close()
    if updated:
        logger.info("staff_user_updated", user_id=user_id, role=role)
    return updated


def delete_staff_user(user_id: str) -> bool:
    """Delete a staff account."""
    conn = get_db_connection()
    cursor = conn.cursor()
    cursor.execute("DELETE FROM staff_users WHERE id = ?", (user_id,))
    deleted = cursor.rowcount > 0
    conn.commit()
    conn.close()
    if deleted:
        logger.info("staff_user_deleted", user_id=user_id)
    return deleted


# ----------------------------------------------------------------------
# Session
# ----------------------------------------------------------------------
def save_session_value(key: str, value: Dict) -> None:
    conn = get_db_connection()
    cursor = conn.cursor()
    cursor.execute("""
        INSERT INTO session (key, value) VALUES (?, ?)
        ON CONFLICT(key) DO UPDATE SET value = excluded.value
    """, (key, json.dumps(value)))
    conn.commit()
    conn.close()


def load_session_value(key: str) -> Optional[Dict]:
    conn = get_db_connection()
    cursor = conn.cursor()
    cursor.execute("SELECT value FROM session WHERE key = ?", (key,))
    row = cursor.fetchone()
    conn.close()
    return json.loads(row['value']) if row else None


def delete_session_value(key: str) -> None:
    conn = get_db_connection()
    cursor = conn.cursor()
    cursor.execute("DELETE FROM session WHERE key = ?", (key,))
    conn.commit()
    conn.close()

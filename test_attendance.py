#!/usr/bin/env python3
"""
Tests for the attendance roster: punch-derived status, summaries,
corrections and CSV export.
"""

import csv
import os
import shutil
import tempfile
import unittest
from datetime import date

from classroomos.attendance import (
    apply_correction, batch_summary, log_correction, set_punch_time, set_status,
    status_from_punch, summarize,
)
from classroomos.config import clear_settings_cache
from classroomos.database import get_attendance_rows, init_db
from classroomos.utils import export_attendance_to_csv


class TestStatusFromPunch(unittest.TestCase):

    def setUp(self):
        clear_settings_cache()

    def test_no_punch_is_absent(self):
        self.assertEqual(status_from_punch(None, "10:00"), "Absent")
        self.assertEqual(status_from_punch("", "10:00"), "Absent")

    def test_within_grace_is_present(self):
        self.assertEqual(status_from_punch("09:55", "10:00"), "Present")
        self.assertEqual(status_from_punch("10:05", "10:00"), "Present")

    def test_after_grace_is_late(self):
        self.assertEqual(status_from_punch("10:06", "10:00"), "Late")
        self.assertEqual(status_from_punch("10:08", "10:00"), "Late")

    def test_explicit_grace(self):
        self.assertEqual(status_from_punch("10:08", "10:00", grace_minutes=10), "Present")
        self.assertEqual(status_from_punch("10:01", "10:00", grace_minutes=0), "Late")


class TestRoster(unittest.TestCase):

    def setUp(self):
        fd, self.db_path = tempfile.mkstemp(suffix=".db")
        os.close(fd)
        os.environ["CLASSROOMOS_DB_PATH"] = self.db_path
        clear_settings_cache()
        init_db()
        self.today = date.today().isoformat()

    def tearDown(self):
        os.environ.pop("CLASSROOMOS_DB_PATH", None)
        clear_settings_cache()
        if os.path.exists(self.db_path):
            os.remove(self.db_path)

    def row(self, student_id, date_str=None):
        rows = get_attendance_rows("bt1", date_str or self.today)
        return next(r for r in rows if r.student_id == student_id)

    def test_seeded_summary(self):
        self.assertEqual(batch_summary("bt1", self.today), {"present": 1, "absent": 1, "late": 1})

    def test_summary_for_unrecorded_date(self):
        self.assertEqual(batch_summary("bt1", "2025-09-02"), {"present": 0, "absent": 3, "late": 0})

    def test_summarize_empty(self):
        self.assertEqual(summarize([]), {"present": 0, "absent": 0, "late": 0})

    def test_set_status_persists(self):
        row = set_status(self.row("S-1003"), "Present", "bt1", self.today)
        self.assertEqual(row.status, "Present")
        self.assertEqual(self.row("S-1003").status, "Present")

    def test_set_status_rejects_unknown(self):
        with self.assertRaises(ValueError):
            set_status(self.row("S-1003"), "Excused", "bt1", self.today)

    def test_punch_in_derives_status(self):
        row = set_punch_time(self.row("S-1003"), "punch_in", "10:20", "bt1", self.today, "10:00")
        self.assertEqual(row.status, "Late")
        stored = self.row("S-1003")
        self.assertEqual(stored.punch_in, "10:20")
        self.assertEqual(stored.status, "Late")

    def test_punch_out_keeps_status(self):
        row = set_punch_time(self.row("S-1002"), "punch_out", "11:30", "bt1", self.today, "10:00")
        self.assertEqual(row.status, "Late")
        self.assertEqual(self.row("S-1002").punch_out, "11:30")

    def test_punch_on_new_date_creates_record(self):
        set_punch_time(self.row("S-1001", "2025-09-02"), "punch_in", "09:58", "bt1",
                       "2025-09-02", "10:00")
        self.assertEqual(self.row("S-1001", "2025-09-02").status, "Present")

    def test_punch_time_zero_padded(self):
        row = set_punch_time(self.row("S-1001", "2025-09-02"), "punch_in", "9:58", "bt1",
                             "2025-09-02", "10:00")
        self.assertEqual(row.status, "Present")
        self.assertEqual(self.row("S-1001", "2025-09-02").punch_in, "09:58")

    def test_punch_time_format_checked(self):
        with self.assertRaises(ValueError):
            set_punch_time(self.row("S-1001"), "punch_in", "ten", "bt1", self.today)
        with self.assertRaises(ValueError):
            set_punch_time(self.row("S-1001"), "status", "10:00", "bt1", self.today)

    def test_blank_note_not_logged(self):
        row = self.row("S-1001")
        self.assertFalse(log_correction(row, "   ", "bt1", self.today))
        self.assertEqual(self.row("S-1001").correction_log, [])

    def test_correction_changes_status_and_logs(self):
        row = apply_correction(self.row("S-1003"), "Present", "Arrived via side gate",
                               "bt1", self.today, user="front-desk")
        self.assertEqual(row.status, "Present")
        stored = self.row("S-1003")
        self.assertEqual(stored.status, "Present")
        self.assertEqual(len(stored.correction_log), 1)
        self.assertEqual(stored.correction_log[0].user, "front-desk")
        self.assertEqual(stored.correction_log[0].note, "Arrived via side gate")

    def test_correction_without_changes(self):
        apply_correction(self.row("S-1002"), "Late", "", "bt1", self.today)
        stored = self.row("S-1002")
        self.assertEqual(stored.status, "Late")
        self.assertEqual(stored.correction_log, [])

    def test_note_only_correction(self):
        apply_correction(self.row("S-1002"), "Late", "Bus delay", "bt1", self.today)
        stored = self.row("S-1002")
        self.assertEqual(stored.status, "Late")
        self.assertEqual(stored.correction_log[0].user, "staff-demo")

    def test_export_csv(self):
        out_dir = tempfile.mkdtemp()
        try:
            filename = export_attendance_to_csv("bt1", self.today, out_dir)
            self.assertTrue(os.path.basename(filename).startswith(f"attendance_IELTS-M-1_{self.today}_"))
            with open(filename, newline='', encoding='utf-8') as f:
                rows = list(csv.reader(f))
            self.assertEqual(rows[0][0], "Student ID")
            self.assertEqual(len(rows), 4)
            self.assertEqual(rows[1][:5], ["S-1001", "Nadia Rahman", "09:55", "12:05", "Present"])
            self.assertEqual(rows[3][2], "")
        finally:
            shutil.rmtree(out_dir)


if __name__ == '__main__':
    unittest.main()

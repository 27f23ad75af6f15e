#!/usr/bin/env python3
"""
Tests for government holidays and custom time blocks.
"""

import os
import tempfile
import unittest

from classroomos.config import clear_settings_cache
from classroomos.database import add_time_block, init_db
from classroomos.models import TimeBlock
from classroomos.time_blocks import (
    GOVERNMENT_HOLIDAYS, blocked_dates, blocks_on, holiday_on, is_blocked, overlaps_time_block,
)

BLOCKS = [
    TimeBlock("tb-1", "Uttara retreat", "2025-10-10", "Full Day", branch_id="b1"),
    TimeBlock("tb-2", "Network upgrade", "2025-10-11", "Full Day", all_branches=True),
    TimeBlock("tb-3", "Power cut", "2025-10-12", "Time Range", "14:00", "16:00", branch_id="b2"),
]


class TestHolidays(unittest.TestCase):

    def test_holiday_lookup(self):
        self.assertEqual(holiday_on("2025-12-16").name, "Victory Day")
        self.assertIsNone(holiday_on("2025-12-17"))

    def test_holidays_block_every_branch(self):
        for holiday in GOVERNMENT_HOLIDAYS:
            self.assertTrue(is_blocked(holiday.date, "b1", blocks=[]))
            self.assertTrue(is_blocked(holiday.date, "b2", blocks=[]))


class TestCustomBlocks(unittest.TestCase):

    def test_branch_full_day_block(self):
        self.assertTrue(is_blocked("2025-10-10", "b1", BLOCKS))
        self.assertFalse(is_blocked("2025-10-10", "b2", BLOCKS))

    def test_all_branches_block(self):
        self.assertTrue(is_blocked("2025-10-11", "b1", BLOCKS))
        self.assertTrue(is_blocked("2025-10-11", "b2", BLOCKS))

    def test_time_range_does_not_block_whole_day(self):
        self.assertFalse(is_blocked("2025-10-12", "b2", BLOCKS))
        self.assertEqual([b.id for b in blocks_on("2025-10-12", "b2", BLOCKS)], ["tb-3"])

    def test_no_branch_means_any_block(self):
        self.assertTrue(is_blocked("2025-10-10", None, BLOCKS))

    def test_blocked_dates_for_branch(self):
        dates = blocked_dates("b2", BLOCKS)
        self.assertIn("2025-10-11", dates)
        self.assertIn("2025-12-16", dates)
        self.assertNotIn("2025-10-10", dates)
        self.assertNotIn("2025-10-12", dates)

    def test_time_range_overlap(self):
        self.assertTrue(overlaps_time_block("2025-10-12", "15:00", "17:00", "b2", BLOCKS))
        self.assertTrue(overlaps_time_block("2025-10-12", "13:00", "14:30", "b2", BLOCKS))
        self.assertFalse(overlaps_time_block("2025-10-12", "16:00", "18:00", "b2", BLOCKS))
        self.assertFalse(overlaps_time_block("2025-10-12", "10:00", "14:00", "b2", BLOCKS))
        self.assertFalse(overlaps_time_block("2025-10-12", "15:00", "17:00", "b1", BLOCKS))

    def test_time_range_overlap_with_unpadded_hours(self):
        self.assertTrue(overlaps_time_block("2025-10-12", "9:00", "15:00", "b2", BLOCKS))
        self.assertFalse(overlaps_time_block("2025-10-12", "9:00", "13:00", "b2", BLOCKS))

    def test_full_day_overlaps_any_session(self):
        self.assertTrue(overlaps_time_block("2025-10-11", "08:00", "09:00", "b2", BLOCKS))


class TestStoredBlocks(unittest.TestCase):
    """Blocks loaded from the database when none are passed in."""

    def setUp(self):
        fd, self.db_path = tempfile.mkstemp(suffix=".db")
        os.close(fd)
        os.environ["CLASSROOMOS_DB_PATH"] = self.db_path
        clear_settings_cache()
        init_db()

    def tearDown(self):
        os.environ.pop("CLASSROOMOS_DB_PATH", None)
        clear_settings_cache()
        if os.path.exists(self.db_path):
            os.remove(self.db_path)

    def test_stored_block_applies(self):
        self.assertFalse(is_blocked("2025-10-20", "b1"))
        add_time_block("Exam hall booked", "2025-10-20", "Full Day", branch_id="b1")
        self.assertTrue(is_blocked("2025-10-20", "b1"))
        self.assertFalse(is_blocked("2025-10-20", "b2"))
        self.assertIn("2025-10-20", blocked_dates("b1"))


if __name__ == '__main__':
    unittest.main()

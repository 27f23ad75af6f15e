#!/usr/bin/env python3
"""
Tests for the batch planner: time/date labels, activity generation over the
batch weekdays and rescheduling.
"""

import os
import tempfile
import unittest
from datetime import date

from classroomos.config import clear_settings_cache
from classroomos.database import add_time_block, get_batch_by_id, init_db
from classroomos.errors import NotFoundError
from classroomos.models import Batch
from classroomos.scheduling import (
    change_activity_time, format_date, format_time, format_time_range, generate_activities,
    meeting_dates, reschedule_activity, sort_activities, weekday_name,
)


def ielts_batch(**overrides):
    values = dict(
        id="bt1", name="IELTS Morning", internal_name="IELTS-M-1", branch_id="b1",
        program="IELTS", start_date="2025-09-01", end_date="2025-11-30",
        days=["Sun", "Tue", "Thu"], start_time="10:00", end_time="12:00", capacity=30,
        admission_start_date="2025-08-15", admission_end_date="2025-08-31",
    )
    values.update(overrides)
    return Batch(**values)


class TestLabels(unittest.TestCase):

    def test_format_time(self):
        self.assertEqual(format_time("10:00"), "10 am")
        self.assertEqual(format_time("13:30"), "1:30 pm")
        self.assertEqual(format_time("12:00"), "12 pm")
        self.assertEqual(format_time("00:05"), "12:05 am")

    def test_format_time_range(self):
        self.assertEqual(format_time_range("16:00", "17:30"), "4 pm - 5:30 pm")

    def test_format_date(self):
        self.assertEqual(format_date("2025-09-01"), "1 Sep 25")
        self.assertEqual(format_date("2025-12-16"), "16 Dec 25")

    def test_weekday_name(self):
        self.assertEqual(weekday_name(date(2025, 9, 7)), "Sun")
        self.assertEqual(weekday_name(date(2025, 9, 1)), "Mon")


class TestGeneration(unittest.TestCase):

    def setUp(self):
        clear_settings_cache()

    def test_dates_follow_batch_weekdays(self):
        activities = generate_activities(ielts_batch(), blocked_dates=[])
        self.assertEqual([a.date for a in activities], [
            "2025-09-02", "2025-09-04", "2025-09-07", "2025-09-09",
            "2025-09-11", "2025-09-14", "2025-09-16", "2025-09-18",
        ])

    def test_codes_titles_and_tags(self):
        activities = generate_activities(ielts_batch(), blocked_dates=[])
        self.assertEqual(activities[0].id, "bt1-act-1")
        self.assertEqual(activities[0].title, "Class 1")
        self.assertEqual([a.code for a in activities[:3]], ["IRL01", "IRL02", "IRL03"])
        self.assertEqual(activities[7].code, "IRL08")
        self.assertEqual([a.tag for a in activities], [
            "Lecture", "Exam", "Lecture", "Play Day", "Lecture", "Rating", "Lecture", "Lecture",
        ])

    def test_defaults_from_batch_and_settings(self):
        activity = generate_activities(ielts_batch(), blocked_dates=[])[0]
        self.assertEqual((activity.start_time, activity.end_time), ("10:00", "12:00"))
        self.assertEqual(activity.room_id, "B7")
        self.assertEqual(activity.teacher_names(), ["John Doe", "Sarah Smith"])

    def test_generator_inputs_override_defaults(self):
        activities = generate_activities(ielts_batch(), "15:00", "16:30", "Room A",
                                         "Emily Davis", count=3, blocked_dates=[])
        self.assertEqual(len(activities), 3)
        self.assertTrue(all(a.room_id == "Room A" for a in activities))
        self.assertEqual(activities[2].start_time, "15:00")
        self.assertEqual(activities[2].end_time, "16:30")
        self.assertEqual(activities[2].teachers, "Emily Davis")

    def test_generator_times_zero_padded(self):
        activities = generate_activities(ielts_batch(), "9:00", "10:30", count=2, blocked_dates=[])
        self.assertEqual((activities[0].start_time, activities[0].end_time), ("09:00", "10:30"))

    def test_blocked_dates_are_skipped(self):
        activities = generate_activities(ielts_batch(), blocked_dates=["2025-09-04"])
        dates = [a.date for a in activities]
        self.assertNotIn("2025-09-04", dates)
        self.assertEqual(dates[1], "2025-09-07")
        self.assertEqual(dates[-1], "2025-09-21")

    def test_stops_at_end_date(self):
        activities = generate_activities(ielts_batch(end_date="2025-09-05"), blocked_dates=[])
        self.assertEqual([a.date for a in activities], ["2025-09-02", "2025-09-04"])

    def test_no_weekdays_means_every_day(self):
        dates = meeting_dates(ielts_batch(days=[]), 3)
        self.assertEqual(dates, ["2025-09-01", "2025-09-02", "2025-09-03"])

    def test_activity_count_from_settings(self):
        os.environ["CLASSROOMOS_ACTIVITY_COUNT"] = "4"
        try:
            clear_settings_cache()
            self.assertEqual(len(generate_activities(ielts_batch(), blocked_dates=[])), 4)
        finally:
            os.environ.pop("CLASSROOMOS_ACTIVITY_COUNT", None)
            clear_settings_cache()


class TestGenerationWithCalendar(unittest.TestCase):
    """Generation reading holidays and time blocks from the database."""

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

    def test_skips_branch_full_day_blocks(self):
        add_time_block("Staff retreat", "2025-09-04", "Full Day", branch_id="b1")
        add_time_block("Mirpur closed", "2025-09-07", "Full Day", branch_id="b2")
        add_time_block("Power cut", "2025-09-09", "Time Range", "10:00", "11:00", branch_id="b1")

        dates = [a.date for a in generate_activities(get_batch_by_id("bt1"))]
        self.assertNotIn("2025-09-04", dates)
        self.assertIn("2025-09-07", dates)
        self.assertIn("2025-09-09", dates)

    def test_skips_government_holidays(self):
        batch = ielts_batch(start_date="2025-12-14", end_date="2025-12-31")
        dates = [a.date for a in generate_activities(batch, count=3)]
        self.assertEqual(dates, ["2025-12-14", "2025-12-18", "2025-12-21"])


class TestRescheduling(unittest.TestCase):

    def setUp(self):
        clear_settings_cache()
        self.activities = generate_activities(ielts_batch(), count=4, blocked_dates=[])

    def test_reschedule_resorts_by_date(self):
        result = reschedule_activity(self.activities, "bt1-act-1", "2025-09-20")
        self.assertEqual([a.id for a in result],
                         ["bt1-act-2", "bt1-act-3", "bt1-act-4", "bt1-act-1"])
        self.assertEqual(result[-1].date, "2025-09-20")

    def test_reschedule_same_day_sorted_by_start_time(self):
        change_activity_time(self.activities, "bt1-act-3", "08:00", True)
        result = reschedule_activity(self.activities, "bt1-act-3", "2025-09-04")
        self.assertEqual([a.id for a in result[:3]], ["bt1-act-1", "bt1-act-3", "bt1-act-2"])

    def test_reschedule_unknown_activity(self):
        with self.assertRaises(NotFoundError):
            reschedule_activity(self.activities, "bt1-act-99", "2025-09-20")

    def test_reschedule_invalid_date(self):
        with self.assertRaises(ValueError):
            reschedule_activity(self.activities, "bt1-act-1", "20/09/2025")

    def test_single_digit_hour_sorts_before_later_hours(self):
        change_activity_time(self.activities, "bt1-act-2", "9:00", True)
        reschedule_activity(self.activities, "bt1-act-1", self.activities[1].date)
        result = sort_activities(self.activities)
        self.assertEqual([a.id for a in result[:2]], ["bt1-act-2", "bt1-act-1"])

    def test_sort_handles_unpadded_stored_times(self):
        self.activities[0].start_time = "10:00"
        self.activities[1].date = self.activities[0].date
        self.activities[1].start_time = "9:00"
        result = sort_activities(self.activities)
        self.assertEqual([a.id for a in result[:2]], ["bt1-act-2", "bt1-act-1"])

    def test_change_time_zero_padded(self):
        change_activity_time(self.activities, "bt1-act-2", "9:5", True)
        activity = next(a for a in self.activities if a.id == "bt1-act-2")
        self.assertEqual(activity.start_time, "09:05")

    def test_change_time_rejects_non_clock_value(self):
        with self.assertRaises(ValueError):
            change_activity_time(self.activities, "bt1-act-2", "noon", True)

    def test_change_end_time(self):
        change_activity_time(self.activities, "bt1-act-2", "12:30", False)
        activity = next(a for a in self.activities if a.id == "bt1-act-2")
        self.assertEqual((activity.start_time, activity.end_time), ("10:00", "12:30"))


if __name__ == '__main__':
    unittest.main()

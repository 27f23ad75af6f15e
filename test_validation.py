#!/usr/bin/env python3
"""
Tests for the form validators used by the branch, batch, time block and
staff user dialogs.
"""

import os
import tempfile
import unittest

from classroomos.config import clear_settings_cache
from classroomos.database import init_db
from classroomos.models import Batch
from classroomos.validation import (
    submit_form, validate_batch_form, validate_branch_form, validate_generator_form,
    validate_staff_user_form, validate_time_block_form,
)


def batch_form(**overrides):
    form = {
        "name": "IELTS Evening",
        "internal_name": "IELTS-E-1",
        "branch_id": "b1",
        "program": "IELTS",
        "start_date": "2025-10-01",
        "end_date": "2025-12-31",
        "days": ["Sun", "Tue"],
        "start_time": "18:00",
        "end_time": "20:00",
        "capacity": "25",
        "admission_start_date": "2025-09-01",
        "admission_end_date": "2025-09-30",
    }
    form.update(overrides)
    return form


def existing_batches():
    return [
        Batch("bt1", "IELTS Morning", "IELTS-M-1", "b1", "IELTS", "2025-09-01", "2025-11-30",
              ["Sun", "Tue", "Thu"], "10:00", "12:00", 30, "2025-08-15", "2025-08-31", enrolled=18),
    ]


class TestBatchValidation(unittest.TestCase):

    def test_empty_form_reports_required_fields(self):
        errors = validate_batch_form({}, [])
        for field in ("name", "internal_name", "branch_id", "program", "start_date", "end_date",
                      "start_time", "end_time", "admission_start_date", "admission_end_date"):
            self.assertEqual(errors[field], "Required", field)
        self.assertEqual(errors["days"], "Pick at least one day")
        self.assertEqual(errors["capacity"], "Invalid")

    def test_required_field_blocks_create_callback(self):
        created = []
        errors, result = submit_form(
            batch_form(name="   "),
            lambda form: validate_batch_form(form, []),
            created.append,
        )
        self.assertEqual(errors["name"], "Required")
        self.assertIsNone(result)
        self.assertEqual(created, [])

    def test_valid_form_calls_create_callback(self):
        created = []
        errors, _ = submit_form(batch_form(), lambda form: validate_batch_form(form, []), created.append)
        self.assertEqual(errors, {})
        self.assertEqual(len(created), 1)

    def test_capacity_must_be_positive_number(self):
        for value in ("0", "-3", "abc", ""):
            errors = validate_batch_form(batch_form(capacity=value), [])
            self.assertEqual(errors.get("capacity"), "Invalid", value)

    def test_internal_code_unique_case_insensitive(self):
        errors = validate_batch_form(batch_form(internal_name="ielts-m-1"), existing_batches())
        self.assertEqual(errors["internal_name"], "Internal code must be unique")

    def test_internal_code_ignores_batch_being_edited(self):
        errors = validate_batch_form(batch_form(internal_name="IELTS-M-1", capacity="30"),
                                     existing_batches(), editing_id="bt1")
        self.assertNotIn("internal_name", errors)

    def test_end_date_before_start_date(self):
        errors = validate_batch_form(batch_form(end_date="2025-09-30"), [])
        self.assertEqual(errors["end_date"], "EndDate must be on/after StartDate")

    def test_same_start_and_end_date_allowed(self):
        errors = validate_batch_form(batch_form(end_date="2025-10-01"), [])
        self.assertNotIn("end_date", errors)

    def test_admission_window_rules(self):
        errors = validate_batch_form(batch_form(admission_start_date="2025-10-02"), [])
        self.assertEqual(errors["admission_start_date"], "AdmissionStart ≤ StartDate")

        errors = validate_batch_form(batch_form(admission_end_date="2025-10-05"), [])
        self.assertEqual(errors["admission_end_date"], "AdmissionEnd ≤ StartDate")

        errors = validate_batch_form(batch_form(admission_start_date="2025-09-20",
                                                admission_end_date="2025-09-10"), [])
        self.assertEqual(errors["admission_end_date"], "AdmissionEnd ≥ AdmissionStart")

    def test_capacity_below_enrolled_on_edit(self):
        errors = validate_batch_form(batch_form(internal_name="IELTS-M-1", capacity="10"),
                                     existing_batches(), editing_id="bt1")
        self.assertEqual(errors["capacity"], "Capacity must be ≥ enrolled (18)")

    def test_capacity_not_checked_against_enrolled_on_create(self):
        errors = validate_batch_form(batch_form(capacity="10"), existing_batches())
        self.assertNotIn("capacity", errors)

    def test_end_time_after_start_time(self):
        errors = validate_batch_form(batch_form(start_time="12:00", end_time="11:00"), [])
        self.assertEqual(errors["end_time"], "EndTime must be after StartTime")

    def test_single_digit_hour_is_zero_padded(self):
        form = batch_form(start_time="9:00", end_time="10:00")
        self.assertEqual(validate_batch_form(form, []), {})
        self.assertEqual((form["start_time"], form["end_time"]), ("09:00", "10:00"))

    def test_single_digit_hour_order_checked_by_clock(self):
        errors = validate_batch_form(batch_form(start_time="9:00", end_time="8:30"), [])
        self.assertEqual(errors["end_time"], "EndTime must be after StartTime")

    def test_malformed_values_are_invalid(self):
        errors = validate_batch_form(batch_form(start_date="01/10/2025", start_time="9am"), [])
        self.assertEqual(errors["start_date"], "Invalid")
        self.assertEqual(errors["start_time"], "Invalid")


class TestBranchValidation(unittest.TestCase):

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

    def test_required_fields_and_rooms(self):
        errors = validate_branch_form({
            "name": "",
            "internal_name": " ",
            "location": "",
            "rooms": [
                {"room_name": "Room A", "capacity": "30"},
                {"room_name": "", "capacity": "0"},
                {"room_name": "Lab", "capacity": "x"},
            ],
        })
        self.assertEqual(errors["name"], "Required")
        self.assertEqual(errors["internal_name"], "Required")
        self.assertEqual(errors["location"], "Required")
        self.assertNotIn("rooms.0.room_name", errors)
        self.assertNotIn("rooms.0.capacity", errors)
        self.assertEqual(errors["rooms.1.room_name"], "Required")
        self.assertEqual(errors["rooms.1.capacity"], "Invalid")
        self.assertEqual(errors["rooms.2.capacity"], "Invalid")

    def test_branch_needs_a_room(self):
        errors = validate_branch_form({"name": "Mirpur", "internal_name": "m9", "location": "Mirpur",
                                       "rooms": []})
        self.assertEqual(errors, {"rooms": "Required"})

    def test_duplicate_internal_code(self):
        form = {"name": "Uttara Two", "internal_name": "u1", "location": "Uttara",
                "rooms": [{"room_name": "Room A", "capacity": "10"}]}
        self.assertEqual(validate_branch_form(form)["internal_name"], "Internal code must be unique")

        form["id"] = "b1"
        self.assertEqual(validate_branch_form(form), {})


class TestOtherForms(unittest.TestCase):

    def test_time_block_full_day(self):
        errors = validate_time_block_form({"name": "Staff retreat", "date": "2025-10-10",
                                           "block_type": "Full Day", "all_branches": True})
        self.assertEqual(errors, {})

    def test_time_block_required_fields(self):
        errors = validate_time_block_form({"block_type": "Time Range", "all_branches": False})
        self.assertEqual(errors["name"], "Required")
        self.assertEqual(errors["date"], "Required")
        self.assertEqual(errors["start_time"], "Required")
        self.assertEqual(errors["end_time"], "Required")
        self.assertEqual(errors["branch_id"], "Required")

    def test_time_block_range_order(self):
        errors = validate_time_block_form({"name": "Power cut", "date": "2025-10-10",
                                           "block_type": "Time Range", "start_time": "14:00",
                                           "end_time": "13:00", "branch_id": "b1"})
        self.assertEqual(errors, {"end_time": "EndTime must be after StartTime"})

    def test_time_block_range_zero_padded(self):
        form = {"name": "Power cut", "date": "2025-10-12", "block_type": "Time Range",
                "start_time": "9:00", "end_time": "15:00", "branch_id": "b2"}
        self.assertEqual(validate_time_block_form(form), {})
        self.assertEqual(form["start_time"], "09:00")

    def test_generator_form_zero_padded(self):
        form = {"start_time": "9:00", "end_time": "10:00", "room": "B7"}
        self.assertEqual(validate_generator_form(form), {})
        self.assertEqual((form["start_time"], form["end_time"]), ("09:00", "10:00"))
        errors = validate_generator_form({"start_time": "10:00", "end_time": "9:30", "room": "B7"})
        self.assertEqual(errors, {"end_time": "EndTime must be after StartTime"})

    def test_generator_form(self):
        self.assertEqual(validate_generator_form({"start_time": "10:00", "end_time": "12:00", "room": "B7"}), {})
        errors = validate_generator_form({"start_time": "10:00", "end_time": "", "room": ""})
        self.assertEqual(errors, {"end_time": "Required", "room": "Required"})

    def test_staff_user_form(self):
        errors = validate_staff_user_form({"name": "", "email": "", "role": ""})
        self.assertEqual(errors, {"name": "Required", "email": "Required", "role": "Required"})
        errors = validate_staff_user_form({"name": "A", "email": "a@b.c", "role": "Janitor"})
        self.assertEqual(errors, {"role": "Invalid"})


if __name__ == '__main__':
    unittest.main()

#!/usr/bin/env python3
"""
Tests for route matching, settings pages and configuration loading.
"""

import os
import unittest

from pydantic import ValidationError

from classroomos.config import Settings, clear_settings_cache, get_settings
from classroomos.models import days_to_mask, get_days_label, mask_to_days, normalize_time
from classroomos.navigation import NAV_ITEMS, href_for_index, is_active, selected_index
from classroomos.views.settings_view import AVAILABLE_PAGES, SETTINGS_ITEMS


class TestRoutes(unittest.TestCase):

    def test_root_matches_only_itself(self):
        self.assertTrue(is_active("/", "/"))
        self.assertFalse(is_active("/", "/batches"))

    def test_sub_paths_match_parent(self):
        self.assertTrue(is_active("/batches", "/batches"))
        self.assertTrue(is_active("/batches", "/batches/bt1"))
        self.assertTrue(is_active("/attendance", "/attendance/bt1/2025-09-02"))
        self.assertFalse(is_active("/batches", "/batches-archive"))

    def test_selected_index(self):
        self.assertEqual(selected_index("/"), 0)
        self.assertEqual(selected_index("/batches/bt1"), 2)
        self.assertEqual(selected_index("/settings/users-roles"), len(NAV_ITEMS) - 1)
        self.assertEqual(selected_index("/unknown"), 0)

    def test_href_for_index(self):
        self.assertEqual(href_for_index(1), "/branches")
        self.assertEqual(href_for_index(99), "/")
        self.assertEqual(href_for_index(-1), "/")

    def test_settings_pages(self):
        slugs = [item[0] for item in SETTINGS_ITEMS]
        self.assertIn("users-roles", slugs)
        self.assertTrue(AVAILABLE_PAGES.issubset(set(slugs)))


class TestDaysMask(unittest.TestCase):

    def test_sunday_first_bits(self):
        self.assertEqual(days_to_mask(["Sun"]), 1)
        self.assertEqual(days_to_mask(["Sat"]), 64)
        self.assertEqual(mask_to_days(days_to_mask(["Thu", "Sun", "Tue"])), ["Sun", "Tue", "Thu"])

    def test_labels(self):
        self.assertEqual(get_days_label(127), "Daily")
        self.assertEqual(get_days_label(0), "No days")
        self.assertEqual(get_days_label(days_to_mask(["Mon", "Wed"])), "Mon, Wed")

    def test_normalize_time(self):
        self.assertEqual(normalize_time("9:5"), "09:05")
        self.assertEqual(normalize_time(" 18:30 "), "18:30")
        with self.assertRaises(ValueError):
            normalize_time("ten")


class TestSettings(unittest.TestCase):

    def tearDown(self):
        for key in ("CLASSROOMOS_DEFAULT_ROOM", "CLASSROOMOS_LATE_GRACE_MINUTES"):
            os.environ.pop(key, None)
        clear_settings_cache()

    def test_environment_overrides(self):
        os.environ["CLASSROOMOS_DEFAULT_ROOM"] = "Room A"
        os.environ["CLASSROOMOS_LATE_GRACE_MINUTES"] = "10"
        clear_settings_cache()
        settings = get_settings()
        self.assertEqual(settings.default_room, "Room A")
        self.assertEqual(settings.late_grace_minutes, 10)

    def test_settings_cached(self):
        self.assertIs(get_settings(), get_settings())

    def test_debug_refused_in_production(self):
        with self.assertRaises(ValidationError):
            Settings(environment="production", debug=True)

    def test_activity_count_bounds(self):
        with self.assertRaises(ValidationError):
            Settings(activity_count=0)


if __name__ == '__main__':
    unittest.main()

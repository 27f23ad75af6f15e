#!/usr/bin/env python3
"""
Tests for Settings > Users & Roles: search, role filter, stats and saving.
"""

import os
import tempfile
import unittest
from datetime import date

from classroomos.config import clear_settings_cache
from classroomos.database import delete_staff_user, get_all_staff_users, init_db
from classroomos.staff import filter_users, role_stats, save_user


class TestStaffUsers(unittest.TestCase):

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

    def user_named(self, name):
        return next(u for u in get_all_staff_users() if u.name == name)

    def test_search_name_and_email(self):
        users = get_all_staff_users()
        self.assertEqual([u.name for u in filter_users(users, "sarah")], ["Sarah Smith"])
        self.assertEqual(len(filter_users(users, "COMPANY.COM")), 5)
        self.assertEqual(filter_users(users, "nobody"), [])

    def test_role_filter(self):
        users = get_all_staff_users()
        managers = filter_users(users, role="Branch Manager")
        self.assertEqual({u.name for u in managers}, {"Michael Johnson", "David Wilson"})
        self.assertEqual(len(filter_users(users, role="All")), 5)
        self.assertEqual([u.name for u in filter_users(users, "david", "Branch Manager")], ["David Wilson"])
        self.assertEqual(filter_users(users, "david", "Admin"), [])

    def test_role_stats_count_active_only(self):
        stats = role_stats(get_all_staff_users())
        self.assertEqual(stats, {"Admin": 1, "FDO": 1, "ADO": 1, "Branch Manager": 1})

    def test_incomplete_form_not_saved(self):
        errors, saved = save_user({"name": "New Person", "email": "", "role": "FDO"})
        self.assertEqual(errors, {"email": "Required"})
        self.assertFalse(saved)
        self.assertEqual(len(get_all_staff_users()), 5)

    def test_create_branch_manager(self):
        errors, saved = save_user({"name": "Rina Das", "email": "rina.das@company.com",
                                   "role": "Branch Manager", "branch": "Uttara Center"})
        self.assertEqual(errors, {})
        self.assertTrue(saved)
        user = self.user_named("Rina Das")
        self.assertEqual(user.branch, "Uttara Center")
        self.assertEqual(user.status, "Active")
        self.assertEqual(user.created_at, date.today().isoformat())

    def test_branch_dropped_for_other_roles(self):
        save_user({"name": "Omar Faruk", "email": "omar@company.com", "role": "FDO",
                   "branch": "Mirpur Center"})
        self.assertIsNone(self.user_named("Omar Faruk").branch)

    def test_edit_user(self):
        errors, saved = save_user({"name": "Sarah Smith", "email": "sarah.smith@company.com",
                                   "role": "ADO", "status": "Inactive"}, editing_id="u2")
        self.assertTrue(saved)
        user = self.user_named("Sarah Smith")
        self.assertEqual(user.role, "ADO")
        self.assertEqual(user.status, "Inactive")
        self.assertEqual(role_stats(get_all_staff_users())["FDO"], 0)

    def test_delete_user(self):
        self.assertTrue(delete_staff_user("u4"))
        self.assertFalse(delete_staff_user("u4"))
        self.assertEqual(len(get_all_staff_users()), 4)


if __name__ == '__main__':
    unittest.main()

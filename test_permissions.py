#!/usr/bin/env python3
"""
Tests for the role permission matrix and the persisted login session.
"""

import os
import tempfile
import unittest

from classroomos.auth import (
    DEMO_USERS, User, can, can_edit_branch, can_manage_staff, current_user, login_as, logout,
    require, require_staff_manager,
)
from classroomos.config import clear_settings_cache
from classroomos.database import get_branch_by_id, init_db
from classroomos.errors import PermissionDenied


class TestCan(unittest.TestCase):
    """Permission matrix for admin, manager and stockholder."""

    def setUp(self):
        self.admin = DEMO_USERS["admin"]
        self.manager = DEMO_USERS["manager"]
        self.stockholder = DEMO_USERS["stockholder"]

    def test_no_user_is_denied(self):
        self.assertFalse(can(None, "batches", "read", "b1"))

    def test_admin_can_do_everything(self):
        for feature in ("branches", "batches", "holidays", "planner", "attendance", "stockholderDashboard"):
            for action in ("create", "read", "update", "delete"):
                self.assertTrue(can(self.admin, feature, action), f"{feature}/{action}")
                self.assertTrue(can(self.admin, feature, action, "b2"), f"{feature}/{action} on b2")

    def test_manager_branches_update_only_own(self):
        self.assertTrue(can(self.manager, "branches", "update", "b1"))
        self.assertFalse(can(self.manager, "branches", "update", "b2"))
        self.assertFalse(can(self.manager, "branches", "create", "b1"))
        self.assertFalse(can(self.manager, "branches", "delete", "b1"))
        self.assertFalse(can(self.manager, "branches", "read", "b1"))

    def test_manager_full_control_of_own_branch_operations(self):
        for feature in ("batches", "planner", "attendance"):
            for action in ("create", "read", "update", "delete"):
                self.assertTrue(can(self.manager, feature, action, "b1"), f"{feature}/{action}")
                self.assertFalse(can(self.manager, feature, action, "b2"), f"{feature}/{action} on b2")

    def test_manager_needs_resource_branch(self):
        self.assertFalse(can(self.manager, "batches", "create"))
        self.assertFalse(can(self.manager, "attendance", "read", None))

    def test_manager_without_branch_owns_nothing(self):
        floating = User("u-x", "Floating", "x@classroomos.com", "manager")
        self.assertFalse(can(floating, "batches", "read", "b1"))

    def test_manager_read_only_features(self):
        for feature in ("holidays", "stockholderDashboard"):
            self.assertTrue(can(self.manager, feature, "read"))
            self.assertTrue(can(self.manager, feature, "read", "b2"))
            self.assertFalse(can(self.manager, feature, "create"))
            self.assertFalse(can(self.manager, feature, "delete"))

    def test_manager_unknown_feature(self):
        self.assertFalse(can(self.manager, "payroll", "read", "b1"))

    def test_stockholder_is_read_only(self):
        self.assertTrue(can(self.stockholder, "batches", "read", "b1"))
        self.assertTrue(can(self.stockholder, "stockholderDashboard", "read"))
        self.assertFalse(can(self.stockholder, "batches", "update", "b1"))
        self.assertFalse(can(self.stockholder, "holidays", "create"))

    def test_unknown_role_is_denied(self):
        guest = User("u-guest", "Guest", "guest@classroomos.com", "guest", "b1")
        self.assertFalse(can(guest, "batches", "read", "b1"))

    def test_require_raises_permission_denied(self):
        with self.assertRaises(PermissionDenied) as ctx:
            require(self.stockholder, "batches", "delete", "b1")
        self.assertEqual(ctx.exception.feature, "batches")
        self.assertEqual(ctx.exception.action, "delete")
        self.assertEqual(str(ctx.exception), "Not allowed to delete batches on branch b1")
        require(self.manager, "batches", "delete", "b1")

    def test_only_admin_manages_staff(self):
        self.assertTrue(can_manage_staff(self.admin))
        self.assertFalse(can_manage_staff(self.manager))
        self.assertFalse(can_manage_staff(self.stockholder))
        self.assertFalse(can_manage_staff(None))

    def test_require_staff_manager(self):
        require_staff_manager(self.admin)
        with self.assertRaises(PermissionDenied) as ctx:
            require_staff_manager(self.stockholder)
        self.assertEqual(str(ctx.exception), "Not allowed to manage staff users")


class TestSession(unittest.TestCase):
    """Login, logout and branch edit rights backed by the session table."""

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

    def test_no_session_by_default(self):
        self.assertIsNone(current_user())

    def test_login_persists_demo_user(self):
        user = login_as("manager")
        self.assertEqual(user.email, "sarah@classroomos.com")

        restored = current_user()
        self.assertIsNotNone(restored)
        self.assertEqual(restored.id, "u-manager")
        self.assertEqual(restored.role, "manager")
        self.assertEqual(restored.branch_id, "b1")

    def test_login_replaces_previous_session(self):
        login_as("admin")
        login_as("stockholder")
        self.assertEqual(current_user().id, "u-stockholder")

    def test_logout_clears_session(self):
        login_as("admin")
        logout()
        self.assertIsNone(current_user())

    def test_unknown_role_login(self):
        with self.assertRaises(ValueError):
            login_as("superuser")

    def test_can_edit_branch(self):
        b1 = get_branch_by_id("b1")
        b2 = get_branch_by_id("b2")
        self.assertTrue(can_edit_branch(DEMO_USERS["admin"], b2))
        self.assertTrue(can_edit_branch(DEMO_USERS["manager"], b1))
        self.assertFalse(can_edit_branch(DEMO_USERS["manager"], b2))
        self.assertFalse(can_edit_branch(DEMO_USERS["stockholder"], b1))


if __name__ == '__main__':
    unittest.main()

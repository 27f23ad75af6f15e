"""
Views module for ClassroomOS.

This module contains all UI view functions organized by feature.
"""

from .dashboard_view import create_dashboard_view
from .branches_view import create_branches_view
from .batches_view import create_batches_view
from .batch_detail_view import create_batch_detail_view
from .time_blocks_view import create_time_blocks_view
from .attendance_view import create_attendance_view
from .attendance_detail_view import create_attendance_detail_view
from .students_view import create_students_view
from .settings_view import create_settings_view

__all__ = [
    'create_dashboard_view',
    'create_branches_view',
    'create_batches_view',
    'create_batch_detail_view',
    'create_time_blocks_view',
    'create_attendance_view',
    'create_attendance_detail_view',
    'create_students_view',
    'create_settings_view',
]

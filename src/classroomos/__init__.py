"""
ClassroomOS - administration console for education centers.

Screens for branches, batches, attendance, time blocks and user roles.
"""

__version__ = "0.1.0"

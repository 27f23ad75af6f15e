"""
Staff directory helpers for Settings > Users & Roles.
"""

from typing import Dict, List, Optional

from . import database
from .logging_config import get_logger
from .models import STAFF_ROLES, StaffUser
from .validation import validate_staff_user_form

logger = get_logger(__name__)


def filter_users(users: List[StaffUser], search: str = "", role: str = "All") -> List[StaffUser]:
    """Case-insensitive name/email search plus an optional role filter."""
    term = (search or "").strip().lower()
    result = []
    for user in users:
        if term and term not in user.name.lower() and term not in user.email.lower():
            continue
        if role and role != "All" and user.role != role:
            continue
        result.append(user)
    return result


def role_stats(users: List[StaffUser]) -> Dict[str, int]:
    """Number of active users per role; every role is present."""
    stats = {role: 0 for role in STAFF_ROLES}
    for user in users:
        if user.status == "Active" and user.role in stats:
            stats[user.role] += 1
    return stats


def save_user(form: Dict, editing_id: Optional[str] = None):
    """Create or update a staff user from form values.

    Returns ``(errors, saved)``. Incomplete forms are refused without touching
    the database.
    """
    errors = validate_staff_user_form(form)
    if errors:
        logger.debug("staff_user_form_incomplete", fields=sorted(errors))
        return errors, False

    name = form["name"].strip()
    email = form["email"].strip()
    role = form["role"]
    branch = (form.get("branch") or "").strip() or None
    status = form.get("status") or "Active"

    if editing_id:
        saved = database.update_staff_user(editing_id, name, email, role, branch, status)
    else:
        saved = database.add_staff_user(name, email, role, branch, status) is not None
    return errors, saved

"""
Roles, permissions and the signed-in session.

Permissions are a static matrix evaluated by ``can()``; nothing is looked up
in the database except the persisted session.
"""

from typing import Optional

from .database import delete_session_value, load_session_value, save_session_value
from .errors import PermissionDenied
from .logging_config import bind_context, clear_context, get_logger

logger = get_logger(__name__)

ROLES = ["admin", "manager", "stockholder"]
FEATURES = ["branches", "batches", "holidays", "planner", "attendance", "stockholderDashboard"]
PERMISSIONS = ["create", "read", "update", "delete"]

SESSION_KEY = "current_user"


class User:
    """Signed-in console user."""
    def __init__(self, id: str, name: str, email: str, role: str,
                 branch_id: Optional[str] = None):
        self.id = id
        self.name = name
        self.email = email
        self.role = role
        self.branch_id = branch_id

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "branch_id": self.branch_id,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(data["id"], data["name"], data["email"], data["role"], data.get("branch_id"))


DEMO_USERS = {
    "admin": User("u-admin", "Admin", "admin@classroomos.com", "admin"),
    "manager": User("u-manager", "Branch Manager", "sarah@classroomos.com", "manager", "b1"),
    "stockholder": User("u-stockholder", "Stockholder", "mike@classroomos.com", "stockholder"),
}


def can(user: Optional[User], feature: str, action: str,
        resource_branch_id: Optional[str] = None) -> bool:
    """Return whether ``user`` may perform ``action`` on ``feature``.

    Managers act only inside their own branch: they may update their branch,
    fully manage its batches, planner and attendance, and read holidays and
    the stockholder dashboard. Stockholders are read-only, admins unrestricted.
    """
    if user is None:
        return False

    if user.role == "admin":
        return True

    if user.role == "manager":
        own = bool(user.branch_id) and bool(resource_branch_id) and user.branch_id == resource_branch_id
        if feature == "branches":
            return action == "update" and own
        if feature in ("batches", "planner", "attendance"):
            return action in PERMISSIONS and own
        if feature in ("holidays", "stockholderDashboard"):
            return action == "read"
        return False

    if user.role == "stockholder":
        return action == "read"

    return False


def require(user: Optional[User], feature: str, action: str,
            resource_branch_id: Optional[str] = None) -> None:
    """Raise PermissionDenied unless ``can()`` allows the action."""
    if not can(user, feature, action, resource_branch_id):
        logger.warning(
            "permission_denied",
            user_id=user.id if user else None,
            role=user.role if user else None,
            feature=feature,
            action=action,
            branch_id=resource_branch_id,
        )
        raise PermissionDenied(feature, action, resource_branch_id)


def can_edit_branch(user: Optional[User], branch) -> bool:
    """Admins edit any branch; managers only the branch they run."""
    return can(user, "branches", "update", branch.id if branch else None)


def can_manage_staff(user: Optional[User]) -> bool:
    """Only admins create, edit or delete staff accounts."""
    return user is not None and user.role == "admin"


def require_staff_manager(user: Optional[User]) -> None:
    """Raise PermissionDenied unless ``user`` may manage staff accounts."""
    if not can_manage_staff(user):
        logger.warning(
            "permission_denied",
            user_id=user.id if user else None,
            role=user.role if user else None,
            feature="staff users",
            action="manage",
        )
        raise PermissionDenied("staff users", "manage")


def login_as(role: str) -> User:
    """Sign in as the demo user of ``role`` and persist the session."""
    if role not in DEMO_USERS:
        raise ValueError(f"Unknown role: {role}")
    user = DEMO_USERS[role]
    save_session_value(SESSION_KEY, user.to_dict())
    bind_context(user_id=user.id, role=user.role)
    logger.info("user_logged_in", user_id=user.id, role=role)
    return user


def logout() -> None:
    """Clear the persisted session."""
    delete_session_value(SESSION_KEY)
    logger.info("user_logged_out")
    clear_context()


def current_user() -> Optional[User]:
    """Return the signed-in user, or None when nobody is signed in."""
    data = load_session_value(SESSION_KEY)
    return User.from_dict(data) if data else None

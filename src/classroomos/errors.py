"""
Exception types shared by the console modules.
"""


class ClassroomOSError(Exception):
    """Base exception for console errors."""

    pass


class PermissionDenied(ClassroomOSError):
    """Raised when the signed-in user may not perform an action."""

    def __init__(self, feature: str, action: str, resource_branch_id=None):
        self.feature = feature
        self.action = action
        self.resource_branch_id = resource_branch_id
        scope = f" on branch {resource_branch_id}" if resource_branch_id else ""
        super().__init__(f"Not allowed to {action} {feature}{scope}")


class NotFoundError(ClassroomOSError):
    """Raised when a branch, batch or activity id does not exist."""

    pass

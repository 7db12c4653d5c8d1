"""
Exceptions raised at the mutation boundary.

The permission resolver never raises; these errors come from operations that
change the application state and reject input that would leave dangling
references or break a registry invariant.
"""


class UserMgmtError(Exception):
    """Base exception for usermgmt errors."""

    def __init__(self, message: str, error_code: str = "INTERNAL_ERROR"):
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


class NotFoundError(UserMgmtError):
    """A referenced record does not exist."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(
            message=f"{resource} not found: {identifier}",
            error_code="RESOURCE_NOT_FOUND",
        )


class ValidationFailedError(UserMgmtError):
    """A record failed a business rule check."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message=message, error_code="VALIDATION_ERROR")


class DuplicateNameError(UserMgmtError):
    def __init__(self, resource: str, name: str):
        self.resource = resource
        self.name = name
        super().__init__(
            message=f"{resource} name must be unique: {name!r}",
            error_code="DUPLICATE_NAME",
        )


class SystemRoleError(UserMgmtError):
    """System roles cannot be deleted or renamed."""

    def __init__(self, role_id: str, message: str | None = None):
        self.role_id = role_id
        super().__init__(
            message=message or f"System role cannot be deleted: {role_id}",
            error_code="SYSTEM_ROLE_PROTECTED",
        )


class RoleInUseError(UserMgmtError):
    """Role still referenced by users and no replacement was given."""

    def __init__(self, role_id: str, user_count: int):
        self.role_id = role_id
        self.user_count = user_count
        super().__init__(
            message=f"Role {role_id} is assigned to {user_count} user(s); a replacement role is required",
            error_code="ROLE_IN_USE",
        )

"""
Domain Exceptions

Every error raised by the rights and pricing services inherits from
RightsDeskError. The API layer maps each subclass to an HTTP status.
"""

from typing import Any, Optional


class RightsDeskError(Exception):
    """Base exception for the rights and pricing engine"""

    def __init__(self, message: str, entity_id: Optional[Any] = None):
        self.message = message
        self.entity_id = entity_id
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.entity_id is not None:
            return f"[{self.entity_id}] {self.message}"
        return self.message


class ValidationError(RightsDeskError):
    """
    Input rejected before any write.

    Raised for override prices outside their tier band, malformed
    territory codes, inverted date windows and missing required fields.
    """


class InvalidTransitionError(ValidationError):
    """
    Lifecycle transition not allowed

    Attributes:
        entity: Entity kind (rights_event, rights_package, broadcaster)
        current: Current status
        target: Requested status
    """

    def __init__(self, entity: str, current: str, target: str, entity_id: Optional[Any] = None):
        self.entity = entity
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot move {entity} from '{current}' to '{target}'",
            entity_id,
        )


class NotFoundError(RightsDeskError):
    """Referenced entity does not exist"""

    def __init__(self, entity: str, entity_id: Optional[Any] = None):
        self.entity = entity
        super().__init__(f"{entity} not found", entity_id)

    def __str__(self) -> str:
        return self.message


class AuthorizationError(RightsDeskError):
    """Actor lacks the role required for an operation"""

    def __init__(self, required_role: str, actual_role: Optional[str] = None):
        self.required_role = required_role
        self.actual_role = actual_role
        super().__init__(f"Access denied: requires role '{required_role}' or higher")


class TransientStorageError(RightsDeskError):
    """
    Storage failed after the retry budget was spent.

    The unit of work has been rolled back; no partial state remains.

    Attributes:
        operation: Name of the failed unit of work
        original_error: Last storage exception
    """

    def __init__(self, operation: str, original_error: Optional[Exception] = None):
        self.operation = operation
        self.original_error = original_error
        super().__init__(f"Storage unavailable during {operation}, please retry")


class UpstreamServiceError(RightsDeskError):
    """Pricing suggestion service unreachable or returned an error status"""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(message)

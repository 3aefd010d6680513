"""Domain layer errors.

Every failure the engine reports to callers is one of these. Store and
adapter errors are translated before they reach the service boundary.
"""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Content length or required-field violation."""

    pass


class InvalidOperationError(DomainError):
    """Raised when an operation is not allowed in the comment's current state."""

    def __init__(self, message: str):
        super().__init__(message)


class ConflictError(DomainError):
    """Identifier or unique-constraint collision in the store."""

    pass


class ForbiddenError(DomainError):
    """Raised when a user attempts an action on content they may not touch."""

    def __init__(self, action: str, resource_id: str, user_id: str):
        self.action = action
        self.resource_id = resource_id
        self.user_id = user_id
        super().__init__(
            f"User {user_id} is not authorized to {action} comment {resource_id}"
        )


class EditWindowExpiredError(DomainError):
    """Raised when an edit is attempted after the edit window closed."""

    def __init__(self, resource_id: str, window_hours: int):
        self.resource_id = resource_id
        self.window_hours = window_hours
        super().__init__(
            f"Comment {resource_id} is older than {window_hours} hours and can no longer be edited"
        )


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class ContentDeletedError(NotFoundError, InvalidOperationError):
    """Raised when an operation targets a soft-deleted comment.

    A deleted comment is gone for replies (not found) and frozen for
    likes, flags and edits (invalid operation); callers may catch either.
    """

    def __init__(self, resource: str, identifier: str, action: str):
        self.resource = resource
        self.identifier = identifier
        self.action = action
        DomainError.__init__(self, f"Cannot {action} deleted {resource.lower()} {identifier}")


class MalformedIdentifierError(ValidationError):
    """Raised when a request carries an identifier that is not a UUID."""

    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field}: {value!r}")

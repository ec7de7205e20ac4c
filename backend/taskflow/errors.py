"""Error hierarchy: every refusal the API can produce, with its HTTP status.

Invariants:
    - Every error has a code (str) and an http_status (int)
    - to_response() produces the ``{success, message, code}`` envelope
    - "Not found" and "not allowed" on groups share NotFoundOrForbiddenError
      so a non-member cannot learn whether a group exists
    - UnexpectedError never carries internal detail to the client
"""


class TaskFlowError(Exception):
    """Base exception for all TaskFlow errors."""

    code = "ERROR"
    http_status = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"success": False, "message": self.message, "code": self.code}


# ─── 400 ────────────────────────────────────────────────────────

class ValidationError(TaskFlowError):
    """Malformed or missing input."""
    code = "VALIDATION_ERROR"


class DuplicateError(TaskFlowError):
    """An entity with the same unique key already exists."""
    code = "DUPLICATE"


class AlreadyMemberError(TaskFlowError):
    code = "ALREADY_MEMBER"

    def __init__(self, message: str = "You are already a member of this group"):
        super().__init__(message)


class AlreadyAdminError(TaskFlowError):
    code = "ALREADY_ADMIN"

    def __init__(self, message: str = "Member is already an admin"):
        super().__init__(message)


class LastAdminError(TaskFlowError):
    """Refusal that protects the at-least-one-admin invariant."""
    code = "LAST_ADMIN"

    def __init__(
        self,
        message: str = "Cannot leave group as the only admin. Transfer ownership or delete group.",
    ):
        super().__init__(message)


class InvalidOperationError(TaskFlowError):
    code = "INVALID_OPERATION"


# ─── 401 / 404 / 409 / 500 ──────────────────────────────────────

class AuthenticationError(TaskFlowError):
    code = "NOT_AUTHENTICATED"
    http_status = 401

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message)


class NotFoundError(TaskFlowError):
    code = "NOT_FOUND"
    http_status = 404


class NotFoundOrForbiddenError(TaskFlowError):
    code = "NOT_FOUND_OR_FORBIDDEN"
    http_status = 404

    def __init__(self, message: str = "Group not found or insufficient permissions"):
        super().__init__(message)


class ConflictError(TaskFlowError):
    """Concurrent modification or exhausted unique-key generation."""
    code = "CONFLICT"
    http_status = 409


class UnexpectedError(TaskFlowError):
    code = "INTERNAL_ERROR"
    http_status = 500

    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(message)

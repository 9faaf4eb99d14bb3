import enum


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    CONFLICT = "conflict"
    AUTH = "auth"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    STORAGE = "storage"


class TaskboardError(Exception):
    """Base for domain failures; services turn these into ``Failure`` results.

    Only the subclasses carry a ``kind``.
    """

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TaskboardError):
    kind = ErrorKind.VALIDATION


class ConflictError(TaskboardError):
    kind = ErrorKind.CONFLICT


class AuthError(TaskboardError):
    kind = ErrorKind.AUTH


class AuthorizationError(TaskboardError):
    kind = ErrorKind.AUTHORIZATION


class NotFoundError(TaskboardError):
    kind = ErrorKind.NOT_FOUND


class StorageError(TaskboardError):
    """Only ever logged by the store adapter, never returned to callers."""

    kind = ErrorKind.STORAGE

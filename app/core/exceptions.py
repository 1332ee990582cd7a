"""
Service error taxonomy.
Every error subclasses HTTPException so services can keep the
`except HTTPException: raise` pattern and FastAPI renders them directly.
"""

from fastapi import HTTPException
from typing import Optional


class ServiceError(HTTPException):
    """Base error carrying a machine-readable code next to the HTTP status."""

    code: str = "SERVICE_ERROR"
    default_status: int = 500

    def __init__(self, detail: str, status_code: Optional[int] = None):
        super().__init__(status_code=status_code or self.default_status, detail=detail)


class ValidationError(ServiceError):
    code = "VALIDATION_ERROR"
    default_status = 400


class NotFoundError(ServiceError):
    code = "NOT_FOUND"
    default_status = 404


class ConflictError(ServiceError):
    # Duplicate name / already-added; the API reports these as 400
    code = "CONFLICT"
    default_status = 400


class ForbiddenError(ServiceError):
    code = "FORBIDDEN"
    default_status = 403


class StorageError(ServiceError):
    """The document store was unreachable or an operation failed. Safe for callers to retry."""

    code = "STORAGE_ERROR"
    default_status = 500


class CascadeIncompleteError(StorageError):
    """
    A multi-step write stopped part way. `completed` lists the phases that went
    through and `deleted` how many records each of them removed.
    """

    def __init__(self, detail: str, completed: list, deleted: Optional[dict] = None):
        self.completed = list(completed)
        self.deleted = dict(deleted or {})
        done = ", ".join(self.completed) if self.completed else "none"
        message = f"{detail} (completed phases: {done}"
        if self.deleted:
            message += "; deleted: " + ", ".join(f"{n} {phase}" for phase, n in self.deleted.items())
        super().__init__(message + ")")

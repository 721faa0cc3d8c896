"""
Typed errors raised by the resource services and the document store
"""

from typing import Optional


class ServiceError(Exception):
    """Base class for errors the API layer turns into structured responses"""

    error_type = "SERVICE_ERROR"

    def __init__(self, message: str, error_type: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if error_type:
            self.error_type = error_type


class NotFoundError(ServiceError):
    """Lookup by a malformed or unknown identifier"""

    error_type = "RESOURCE_NOT_FOUND"


class ForbiddenError(ServiceError):
    """Acting principal does not own the resource"""

    error_type = "FORBIDDEN"


class StoreError(ServiceError):
    """Underlying document store failure"""

    error_type = "DATABASE_ERROR"

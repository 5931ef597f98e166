"""
Domain errors raised by the category services.

Each error carries the HTTP status the API layer maps it to; services never
raise HTTPException directly.
"""
from typing import Any, Dict, List, Optional


class CategoryError(Exception):
    """Base class for deterministic category-engine failures."""

    status_code = 400
    default_message = "Category request failed"

    def __init__(self, message: Optional[str] = None, *, details: Optional[List[str]] = None):
        self.message = message or self.default_message
        self.details = list(details or [])
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"detail": self.message, "error": type(self).__name__}
        if self.details:
            body["errors"] = self.details
        return body


class ValidationError(CategoryError):
    status_code = 400
    default_message = "Validation failed"


class DuplicateNameError(CategoryError):
    status_code = 400
    default_message = "Category name already exists in this scope"


class PermissionDeniedError(CategoryError):
    status_code = 403
    default_message = "Permission denied"


class ProtectedResourceError(CategoryError):
    status_code = 403
    default_message = "Cannot delete the default uncategorized category"


class NotFoundError(CategoryError):
    status_code = 404
    default_message = "Category not found"


__all__ = [
    "CategoryError",
    "ValidationError",
    "DuplicateNameError",
    "PermissionDeniedError",
    "ProtectedResourceError",
    "NotFoundError",
]

from typing import Dict, List, Optional
from fastapi import HTTPException, status

class BaseAppException(HTTPException):
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)

class ValidationError(BaseAppException):
    """Rejected input. ``errors`` maps each offending field to its messages."""

    def __init__(self, detail: str = "Validation error", errors: Optional[Dict[str, List[str]]] = None):
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)
        self.errors = errors or {}

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(detail=message, errors={field: [message]})

class NotFoundError(BaseAppException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class InvalidStateTransitionError(BaseAppException):
    def __init__(self, detail: str = "Action not allowed in the current state"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)

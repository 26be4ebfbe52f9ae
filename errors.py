# errors.py
from fastapi import status


class AppError(Exception):
    """Base error rendered as ``{"error": message}`` with ``status_code``."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message

    def payload(self) -> dict:
        return {"error": self.message}


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(AppError):
    # duplicate email / category name are reported as 400
    status_code = status.HTTP_400_BAD_REQUEST


class CategoryInUse(AppError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, count: int):
        super().__init__("Cannot delete category with expenses")
        self.count = count

    def payload(self) -> dict:
        return {"error": self.message, "count": self.count}


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST

"""
Error classification for the license service.

Services raise these close to the point of detection; main.py maps them
onto the JSON error envelope and an HTTP status.
"""


class LicenseServiceError(Exception):
    """Base exception for license service failures."""

    code = "error"
    status_code = 400

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(message)


class UnauthorizedError(LicenseServiceError):
    code = "unauthorized"
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ValidationError(LicenseServiceError):
    code = "validation_error"
    status_code = 400

    def __init__(self, message: str = "Validation failed"):
        super().__init__(message)


class VersionMismatchError(ValidationError):
    code = "version_mismatch"

    def __init__(self, message: str = "Version mismatch"):
        super().__init__(message)


class NotFoundError(LicenseServiceError):
    code = "not_found"
    status_code = 404

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class ConflictError(LicenseServiceError):
    code = "conflict"
    status_code = 409

    def __init__(self, message: str = "User already exists"):
        super().__init__(message)


class ForbiddenError(LicenseServiceError):
    code = "forbidden"
    status_code = 403

    def __init__(self, message: str = "User is banned"):
        super().__init__(message)

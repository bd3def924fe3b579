"""
JobDash - Client error taxonomy.

Every store operation either returns data or raises one of these:

    JobDashError
    ├── InputValidationError      caught before any request is sent
    │   ├── MissingFileError
    │   ├── InvalidFileTypeError
    │   └── FileTooLargeError
    ├── AuthorizationError        the server (or client) says "log in again"
    │   ├── NotAuthenticatedError
    │   └── SessionExpiredError
    ├── ApiError                  server rejected a well-formed request
    │   └── NotFoundError
    ├── TransportError            network failure or unparseable response
    └── FileEncodingError         local file could not be read, encoded or written
"""
from typing import Dict, Optional

SESSION_EXPIRED_MESSAGE = "Session expired. Please login again."


class JobDashError(Exception):
    """Base class for all client errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputValidationError(JobDashError):
    """Invalid user input; carries per-field messages for inline display."""

    def __init__(self, message: str, field_errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.field_errors = field_errors or {}

    @classmethod
    def from_pydantic(cls, exc) -> "InputValidationError":
        """Build from a pydantic ValidationError, keyed by field name."""
        field_errors: Dict[str, str] = {}
        for err in exc.errors():
            field = ".".join(str(part) for part in err.get("loc", ())) or "__root__"
            msg = err.get("msg", "Invalid value")
            # pydantic prefixes custom ValueError messages
            if msg.startswith("Value error, "):
                msg = msg[len("Value error, "):]
            field_errors.setdefault(field, msg)
        summary = "; ".join(f"{k}: {v}" for k, v in field_errors.items())
        return cls(f"Invalid input: {summary}", field_errors)


class MissingFileError(InputValidationError):
    def __init__(self, message: str = "Please select a PDF file"):
        super().__init__(message, {"file": message})


class InvalidFileTypeError(InputValidationError):
    def __init__(self, message: str = "Please upload a PDF file"):
        super().__init__(message, {"file": message})


class FileTooLargeError(InputValidationError):
    def __init__(self, message: str = "File size should be less than 5MB"):
        super().__init__(message, {"file": message})


class AuthorizationError(JobDashError):
    """The request needs a (valid) session."""
    pass


class NotAuthenticatedError(AuthorizationError):
    def __init__(self, message: str = "No authentication token"):
        super().__init__(message)


class SessionExpiredError(AuthorizationError):
    def __init__(self, message: str = SESSION_EXPIRED_MESSAGE):
        super().__init__(message)


class ApiError(JobDashError):
    """Server answered with a non-2xx status for business reasons."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(ApiError):
    def __init__(self, message: str = "Not found", status_code: Optional[int] = 404):
        super().__init__(message, status_code)


class TransportError(JobDashError):
    """Network failure or a response body that could not be decoded."""
    pass


class FileEncodingError(JobDashError):
    """A local file could not be read, encoded for upload, or written after download."""
    pass

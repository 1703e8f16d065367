"""
Custom Exceptions.

The closed error taxonomy shared by every key-value backend. Adapters raise
these; the command dispatcher is the only place that catches and renders
them. Each kind maps to one fixed user-facing message.
"""

from enum import Enum


class KVErrorKind(str, Enum):
    """Kinds of key-value store failures."""

    PERMISSION = "permission"
    AUTHENTICATION = "authentication"
    REMOTE_UNAVAILABLE = "remote_unavailable"
    NOT_FOUND = "not_found"
    VALUE_FORMAT = "value_format"
    WRITE_FAILURE = "write_failure"


class KVError(Exception):
    """Base exception for all key-value store errors."""

    kind: KVErrorKind
    message: str

    def __init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class PermissionDeniedError(KVError):
    """Raised when the remote refuses access to a key (HTTP 403)."""

    kind = KVErrorKind.PERMISSION
    message = "Error: not enough permissions"


class AuthenticationError(KVError):
    """Raised when the remote requires credentials (HTTP 401)."""

    kind = KVErrorKind.AUTHENTICATION
    message = "Error: remote authentication required"


class RemoteUnavailableError(KVError):
    """Raised on transport failures and unexpected HTTP statuses."""

    kind = KVErrorKind.REMOTE_UNAVAILABLE
    message = "Error: remote returned error"


class NotFoundError(KVError):
    """Raised when a key does not exist."""

    kind = KVErrorKind.NOT_FOUND
    message = "<unknown_value>"


class ValueFormatError(KVError):
    """Raised when the remote response does not have the expected shape."""

    kind = KVErrorKind.VALUE_FORMAT
    message = "<err_value>"


class WriteFailureError(KVError):
    """Raised when the value to write cannot be produced (file or editor I/O)."""

    kind = KVErrorKind.WRITE_FAILURE

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__()

    @property
    def message(self) -> str:  # type: ignore[override]
        return f"<file_error:{self.detail}>"

    @classmethod
    def wrap(cls, error: BaseException) -> "WriteFailureError":
        """Build a write failure carrying the text of an underlying error."""
        return cls(str(error))

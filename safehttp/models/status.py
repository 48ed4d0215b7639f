"""HTTP status codes as registered with IANA.

See: https://www.iana.org/assignments/http-status-codes/http-status-codes.xhtml
"""

from enum import IntEnum


class StatusCode(IntEnum):
    """Closed set of HTTP status codes used by the response writer."""

    OK = 200  # RFC 7231, 6.3.1
    MOVED_PERMANENTLY = 301  # RFC 7231, 6.4.2
    BAD_REQUEST = 400  # RFC 7231, 6.5.1
    UNAUTHORIZED = 401  # RFC 7235, 3.1
    FORBIDDEN = 403  # RFC 7231, 6.5.3
    INTERNAL_SERVER_ERROR = 500  # RFC 7231, 6.6.1

    @property
    def phrase(self) -> str:
        """IANA reason phrase for the status line."""
        return _PHRASES[self]


_PHRASES: dict[StatusCode, str] = {
    StatusCode.OK: "OK",
    StatusCode.MOVED_PERMANENTLY: "Moved Permanently",
    StatusCode.BAD_REQUEST: "Bad Request",
    StatusCode.UNAUTHORIZED: "Unauthorized",
    StatusCode.FORBIDDEN: "Forbidden",
    StatusCode.INTERNAL_SERVER_ERROR: "Internal Server Error",
}

StatusOK = StatusCode.OK
StatusMovedPermanently = StatusCode.MOVED_PERMANENTLY
StatusBadRequest = StatusCode.BAD_REQUEST
StatusUnauthorized = StatusCode.UNAUTHORIZED
StatusForbidden = StatusCode.FORBIDDEN
StatusInternalServerError = StatusCode.INTERNAL_SERVER_ERROR

# peonline/exceptions.py
"""
Exception taxonomy for the PE-online client.

Two caller-visible error kinds exist:
- ValidationException: the request is malformed and was never sent.
- ApiException: the webservice (or the network in between) failed.

Malformed response XML is NOT an error at this level. The normalizer reports
it as data (see peonline.response_models.fallback_response).
"""

from enum import IntEnum


class ValidationCode(IntEnum):
    """Stable numeric codes carried by ValidationException."""

    ORG_ID_MISSING = 1001
    END_DATE_IN_FUTURE = 1002
    COURSE_MISSING = 1003
    PERSON_MISSING = 1004


class PeOnlineError(Exception):
    """
    Base class for all errors raised by the peonline package.

    Attributes:
        message: Human-readable error description.
        code: Numeric error code. Its meaning depends on the subclass.
    """

    def __init__(self, message: str = '', code: int = 0) -> None:
        super().__init__(message)
        self.message: str = message
        self.code: int = int(code)

    def __repr__(self) -> str:
        return f'{type(self).__name__}(code={self.code}, message={self.message!r})'


class ValidationException(PeOnlineError):
    """Raised when an attendance request fails the pre-flight checks."""


class ApiException(PeOnlineError):
    """
    Raised when the HTTP exchange with the webservice fails.

    The code is the HTTP status when the server answered, 0 for transport
    errors (DNS, connection refused, timeout). The originating requests
    exception is chained as __cause__.
    """

    @property
    def status_code(self) -> int | None:
        """HTTP status of the failed response, or None for transport errors."""
        return self.code or None

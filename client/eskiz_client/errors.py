"""
Exceptions raised by the Eskiz client.

Every failure carries the short human-readable message the API call ended
with and, where one exists, the HTTP status code and raw response text.
"""

from typing import Optional


class EskizError(Exception):
    """Base class for all Eskiz client errors"""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 raw_response: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.raw_response = raw_response
        # Set by login() to the unusable client describing the failure
        self.client = None


class MarshalError(EskizError):
    """Request body could not be serialized to JSON"""


class TransportError(EskizError):
    """Network level failure: DNS, connection, timeout"""


class APIError(EskizError):
    """The gateway answered with an error status"""


class BadRequestError(APIError):
    pass


class UnauthorizedError(APIError):
    pass


class DecodeError(EskizError):
    """Response body is not the JSON object we expected"""


class NotAuthenticatedError(EskizError):
    """Authenticated call attempted on a client that holds no token"""

"""
Eskiz Client

A Python client library for the Eskiz.uz SMS gateway API with bearer token authentication.
"""

from .client import DEFAULT_BASE_URL, EskizClient, login
from .config import EskizConfig
from .errors import (
    APIError,
    BadRequestError,
    DecodeError,
    EskizError,
    MarshalError,
    NotAuthenticatedError,
    TransportError,
    UnauthorizedError,
)
from .models import SMS, Credentials, TokenGrant

__all__ = [
    'DEFAULT_BASE_URL',
    'EskizClient',
    'EskizConfig',
    'login',
    'Credentials',
    'SMS',
    'TokenGrant',
    'EskizError',
    'MarshalError',
    'TransportError',
    'APIError',
    'BadRequestError',
    'UnauthorizedError',
    'DecodeError',
    'NotAuthenticatedError',
]

__version__ = "0.1.0"

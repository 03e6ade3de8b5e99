"""
Eskiz API Client Module

This module provides login and the authenticated operations of the Eskiz.uz
SMS gateway: sending SMS, querying the SMS limit and profile, and refreshing
the bearer token.
"""

import json
import threading
from typing import Any, Dict, Optional

import requests

from .errors import DecodeError, EskizError, NotAuthenticatedError
from .logging_config import get_logger
from .models import SMS, Credentials, TokenGrant
from .transport import RequestOutcome, auth_header_value, execute

DEFAULT_BASE_URL = "https://notify.eskiz.uz/api"

SMS_PATH = "/message/sms/send"
USER_PATH = "/auth/user"
LOGIN_PATH = "/auth/login"
REFRESH_PATH = "/auth/refresh"
LIMIT_PATH = "/user/get-limit"


def _decode(outcome: RequestOutcome) -> Dict[str, Any]:
    """Decode the raw response text into a dict"""
    try:
        response = json.loads(outcome.raw)
    except ValueError as e:
        raise DecodeError(f"decoding response: {e}", status_code=outcome.status_code,
                          raw_response=outcome.raw) from e
    if not isinstance(response, dict):
        raise DecodeError("decoding response: expected a JSON object",
                          status_code=outcome.status_code, raw_response=outcome.raw)
    return response


class EskizClient:
    """Authenticated session with the Eskiz API.

    Normally obtained from login(). A client is also returned (attached to the
    raised exception) when login fails; that one has no token and only
    carries message/error for diagnostics.
    """

    def __init__(self, token: str = "", token_type: str = "", message: str = "",
                 error: str = "", *, base_url: str = DEFAULT_BASE_URL,
                 logger=None, http: Optional[requests.Session] = None):
        self.token = token
        self.token_type = token_type
        self.message = message
        self.error = error
        self.base_url = base_url.rstrip("/")
        self.logger = logger or get_logger("eskiz_client")
        self._http = http or requests.Session()
        self._lock = threading.Lock()

    def __repr__(self):
        return (f"EskizClient(token_type={self.token_type!r}, message={self.message!r}, "
                f"error={self.error!r}, authenticated={self.is_authenticated})")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close the underlying HTTP session"""
        self._http.close()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token and self.token_type)

    def authorization(self) -> str:
        """Current Authorization header value"""
        with self._lock:
            if not (self.token and self.token_type):
                raise NotAuthenticatedError("client holds no token, log in first")
            return auth_header_value(self.token, self.token_type)

    def _request(self, label: str, path: str, method: str,
                 body: Optional[Dict[str, Any]] = None) -> RequestOutcome:
        outcome = execute(
            self._http,
            self.base_url + path,
            method,
            body,
            self.authorization(),
            logger=self.logger,
            label=label,
        )
        outcome.raise_for_error()
        return outcome

    def _call(self, label: str, path: str, method: str,
              body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return _decode(self._request(label, path, method, body))

    def send(self, sms: SMS) -> Dict[str, Any]:
        """
        Send an SMS.

        Example:
            client.send(SMS(mobile_phone="998771234567", message="test-message",
                            sender="4546", callback_url="https://example.com/cb"))
        """
        return self._call("send sms", SMS_PATH, "POST", sms.to_payload())

    def get_user_limit(self) -> Dict[str, Any]:
        """Get the user's remaining SMS limit"""
        return self._call("get user limit", LIMIT_PATH, "GET")

    def get_profile(self) -> Dict[str, Any]:
        """Get the authenticated user's profile"""
        return self._call("get me", USER_PATH, "GET")

    def refresh(self) -> None:
        """
        Refresh the bearer token in place.

        On success token, token_type and message are replaced. On failure
        the exception propagates, token and token_type stay as they were,
        and error records what went wrong.
        """
        try:
            outcome = self._request("refresh token", REFRESH_PATH, "PATCH")
            grant = TokenGrant.from_response(_decode(outcome), raw=outcome.raw)
        except EskizError as e:
            with self._lock:
                self.error = str(e)
            raise

        with self._lock:
            self.token = grant.token
            self.token_type = grant.token_type
            self.message = grant.message
            self.error = ""


def login(credentials: Credentials, *, base_url: str = DEFAULT_BASE_URL,
          logger=None, http: Optional[requests.Session] = None) -> EskizClient:
    """
    Log in and get a token.

    Args:
        credentials: Account email and password
        base_url: API root (default: the public Eskiz endpoint)
        logger: Logger used for every call made by the returned client
        http: requests.Session to reuse (default: a new one)

    Returns:
        EskizClient: authenticated client

    Raises:
        EskizError: on any failure. The exception's ``client`` attribute
            holds an unauthenticated EskizClient whose message and error
            describe the failure.
    """
    logger = logger or get_logger("eskiz_client")
    http = http or requests.Session()
    base_url = base_url.rstrip("/")

    def failed(message: str, error: EskizError) -> EskizError:
        error.client = EskizClient(message=message, error=str(error),
                                   base_url=base_url, logger=logger, http=http)
        return error

    outcome = execute(
        http,
        base_url + LOGIN_PATH,
        "POST",
        credentials.to_payload(),
        logger=logger,
        label="authorization",
    )
    if outcome.error is not None:
        raise failed(outcome.message, outcome.error)

    try:
        grant = TokenGrant.from_response(_decode(outcome), raw=outcome.raw)
    except DecodeError as e:
        raise failed(outcome.message, e)

    return EskizClient(
        token=grant.token,
        token_type=grant.token_type,
        message=grant.message,
        base_url=base_url,
        logger=logger,
        http=http,
    )

"""
HTTP transport for the Eskiz API.

A single function, execute(), turns one API call into one HTTP round trip and
classifies the result. Callers never see requests exceptions; they get a
RequestOutcome whose error is one of the eskiz_client.errors types.
"""

import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests

from .errors import BadRequestError, EskizError, MarshalError, TransportError, UnauthorizedError
from .logging_config import log_api_event

# Overall per-request deadline and the HTTP client timeout, in seconds.
# The smaller of the two bounds the whole call, body read included.
REQUEST_DEADLINE = 60
CLIENT_TIMEOUT = 5
READ_CHUNK = 1

AUTH_HEADER = "Authorization"


@dataclass
class RequestOutcome:
    """Result of one execute() call"""

    message: str
    status_code: Optional[int] = None
    raw: str = ""
    payload: Dict[str, Any] = field(default_factory=dict)
    error: Optional[EskizError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self):
        if self.error is not None:
            raise self.error


def auth_header_value(token: str, token_type: str) -> str:
    """Build the Authorization value: 'bearer', 'T1' -> 'Bearer T1'"""
    return token_type[:1].upper() + token_type[1:] + " " + token


def _read_body(resp, deadline: float, limit: float) -> str:
    """Read the whole response body, giving up once the call deadline passes"""
    chunks = []
    # One byte per read so a slowly trickling body cannot hold a read past the deadline
    for chunk in resp.iter_content(chunk_size=READ_CHUNK):
        chunks.append(chunk)
        if time.monotonic() > deadline:
            raise requests.exceptions.Timeout(f"response not complete within {limit}s")
    return b"".join(chunks).decode(resp.encoding or "utf-8", errors="replace")


def execute(http, url: str, method: str, body: Optional[Dict[str, Any]] = None,
            auth_header: Optional[str] = None, *, logger, label: str) -> RequestOutcome:
    """
    Send one request to the Eskiz API.

    Args:
        http: requests.Session (or anything with the same request() signature)
        url: Full request URL
        method: HTTP method
        body: JSON-serializable request body, or None for no body
        auth_header: Authorization header value, or None for unauthenticated calls
        logger: Logger receiving one event per call
        label: Operation label used in the log event

    Returns:
        RequestOutcome: error is set on marshal, transport, 400 or 401 failures
    """
    headers = {}
    data = None

    if body is not None:
        try:
            data = json.dumps(body)
        except (TypeError, ValueError) as e:
            error = MarshalError("marshaling body")
            error.__cause__ = e
            log_api_event(logger, label, False, url, body, error=f"marshaling body: {e}")
            return RequestOutcome(message="marshaling body", error=error)
        headers["Content-Type"] = "application/json"

    if auth_header:
        headers[AUTH_HEADER] = auth_header

    limit = min(REQUEST_DEADLINE, CLIENT_TIMEOUT)
    deadline = time.monotonic() + limit
    try:
        resp = http.request(
            method,
            url,
            data=data,
            headers=headers,
            timeout=limit,
            stream=True,
        )
        try:
            raw = _read_body(resp, deadline, limit)
        finally:
            resp.close()
    except requests.exceptions.RequestException as e:
        error = TransportError("doing request")
        error.__cause__ = e
        log_api_event(logger, label, False, url, body, error=f"doing request: {e}")
        return RequestOutcome(message="doing request", error=error)

    try:
        payload = json.loads(raw)
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        payload = {}

    status = resp.status_code
    if status == 400:
        outcome = RequestOutcome(
            message="bad request",
            status_code=400,
            raw=raw,
            payload=payload,
            error=BadRequestError("bad request", status_code=400, raw_response=raw),
        )
    elif status == 401:
        outcome = RequestOutcome(
            message="unauthorized",
            status_code=401,
            raw=raw,
            payload=payload,
            error=UnauthorizedError("unauthorized", status_code=401, raw_response=raw),
        )
    else:
        # Every other status, 3xx and 5xx included, is passed through as success
        outcome = RequestOutcome(message="success", status_code=200, raw=raw, payload=payload)

    log_api_event(logger, label, outcome.ok, url, body,
                  response=payload or raw,
                  error=outcome.message if not outcome.ok else None)
    return outcome

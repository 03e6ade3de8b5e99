"""
Request and response shapes for the Eskiz API.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import DecodeError


@dataclass(frozen=True)
class Credentials:
    """Login email and password. Only used for the login request."""

    email: str
    password: str

    def to_payload(self) -> Dict[str, str]:
        return {"email": self.email, "password": self.password}


@dataclass(frozen=True)
class SMS:
    """A single outgoing SMS.

    Example:
        SMS(mobile_phone="998771234567", message="test-message", sender="4546")
    """

    mobile_phone: str
    message: str
    sender: str
    callback_url: Optional[str] = None

    def to_payload(self) -> Dict[str, str]:
        payload = {
            "mobile_phone": self.mobile_phone,
            "message": self.message,
            "from": self.sender,
        }
        if self.callback_url:
            payload["callback_url"] = self.callback_url
        return payload


@dataclass(frozen=True)
class TokenGrant:
    """Token issued by /auth/login and /auth/refresh"""

    token: str
    token_type: str
    message: str

    @classmethod
    def from_response(cls, response: Dict[str, Any], raw: Optional[str] = None) -> "TokenGrant":
        """
        Extract the token fields from a decoded login/refresh response.

        Expected shape: {"data": {"token": ...}, "token_type": ..., "message": ...}

        Raises:
            DecodeError: if a field is missing, not a string, or empty
        """
        data = response.get("data")
        if not isinstance(data, dict):
            raise DecodeError("missing 'data' object in token response", raw_response=raw)

        fields = {
            "data.token": data.get("token"),
            "token_type": response.get("token_type"),
            "message": response.get("message"),
        }
        for name, value in fields.items():
            if not isinstance(value, str):
                raise DecodeError(f"'{name}' missing or not a string in token response",
                                  raw_response=raw)

        if not fields["data.token"] or not fields["token_type"]:
            raise DecodeError("empty token in token response", raw_response=raw)

        return cls(
            token=fields["data.token"],
            token_type=fields["token_type"],
            message=fields["message"],
        )

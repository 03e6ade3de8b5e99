import json
import logging
import sys
from pathlib import Path

import pytest
import requests

# Allow running the tests without installing the package
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "client"))

BASE_URL = "https://eskiz.test/api"


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        if text is None:
            text = json.dumps(body) if body is not None else ""
        self.text = text
        self.encoding = "utf-8"
        self.closed = False

    def iter_content(self, chunk_size=1):
        content = self.text.encode(self.encoding)
        for i in range(0, len(content), chunk_size):
            yield content[i:i + chunk_size]

    def close(self):
        self.closed = True


class FakeHttp:
    """Records requests and answers from a (method, path) -> response table"""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self.closed = False

    def request(self, method, url, data=None, headers=None, timeout=None, stream=False):
        self.calls.append({
            "method": method,
            "url": url,
            "data": data,
            "headers": dict(headers or {}),
            "timeout": timeout,
            "stream": stream,
        })
        path = url[len(BASE_URL):]
        answer = self.routes.get((method, path))
        if answer is None:
            raise requests.exceptions.ConnectionError(f"no route for {method} {path}")
        if isinstance(answer, Exception):
            raise answer
        return answer

    def close(self):
        self.closed = True

    @property
    def last(self):
        return self.calls[-1]


def token_body(token="T1", token_type="bearer", message="ok"):
    return {"data": {"token": token}, "token_type": token_type, "message": message}


@pytest.fixture
def http():
    return FakeHttp({("POST", "/auth/login"): FakeResponse(200, token_body())})


@pytest.fixture
def logger():
    return logging.getLogger("eskiz_client.tests")

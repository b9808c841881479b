"""Shared pytest fixtures for s3acl tests.

Clients talk to an ``httpx.MockTransport`` backed by ``FakeS3``, which
records every request and answers from a small routing table keyed by
method and raw path (query string included). No network access is needed.
"""

import httpx
import pytest

from s3acl.client import S3Client

ENDPOINT = "http://s3.test"
ACCESS_KEY = "AKIDEXAMPLE"
SECRET_KEY = "wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY"


class FakeS3:
    """Minimal S3 stand-in for MockTransport.

    Attributes:
        requests: Every request received, in order.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], tuple[int, bytes, dict[str, str]]] = {}

    def add(
        self,
        method: str,
        path: str,
        status: int = 200,
        content: bytes | str = b"",
        headers: dict[str, str] | None = None,
    ) -> None:
        """Register the response for ``method`` on ``path`` (e.g. ``/b/k?acl=``)."""
        if isinstance(content, str):
            content = content.encode("utf-8")
        self._routes[(method, path)] = (status, content, headers or {})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self._routes.get((request.method, request.url.raw_path.decode()))
        if route is None:
            return httpx.Response(404)
        status, content, headers = route
        return httpx.Response(status, content=content, headers=headers)


@pytest.fixture
def fake_s3() -> FakeS3:
    """A fresh FakeS3 with no routes."""
    return FakeS3()


@pytest.fixture
async def client(fake_s3: FakeS3):
    """A signing S3Client wired to ``fake_s3``."""
    async with S3Client(
        ENDPOINT,
        access_key=ACCESS_KEY,
        secret_key=SECRET_KEY,
        transport=httpx.MockTransport(fake_s3),
    ) as c:
        yield c

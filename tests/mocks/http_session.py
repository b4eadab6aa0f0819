"""
Stand-ins for aiohttp sessions used by the OAuth provider tests.
"""
from typing import Any, Dict, List, Optional, Tuple


class FakeResponse:
    """Minimal aiohttp response: status plus a JSON body."""

    def __init__(self, status: int, payload: Optional[Any] = None):
        self.status = status
        self._payload = payload

    async def json(self, content_type: Optional[str] = None) -> Any:
        if self._payload is None:
            raise ValueError("response body is not JSON")
        return self._payload

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc_info) -> bool:
        return False


class FakeClientSession:
    """Replaces ``aiohttp.ClientSession``; every session shares this instance."""

    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    def __call__(self, *args: Any, **kwargs: Any) -> "FakeClientSession":
        return self

    async def __aenter__(self) -> "FakeClientSession":
        return self

    async def __aexit__(self, *exc_info) -> bool:
        return False

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response

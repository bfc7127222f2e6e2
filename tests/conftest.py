import json
from typing import Any, Callable, Dict, Optional

import pytest

from ficsitfetch.services import (
    FicsitClient,
    QueryExecutor,
    ResponseCache,
    TemporaryModOverlay,
)


def operation_of(body: dict) -> str:
    """Map a posted GraphQL body back to the registry operation it performs."""
    query = body["query"]
    if "getMods(" in query:
        return "getAvailableMods"
    if "getSMLVersions" in query:
        return "getSMLVersions"
    if "getBootstrapVersions" in query:
        return "getBootstrapperVersions"
    if "version(version" in query:
        return "getModDownloadLink"
    if "versions(filter" in query:
        return "getModVersions"
    return "getMod"


class FakeResponse:
    def __init__(self, text: str, status: int = 200):
        self._text = text
        self.status = status

    async def text(self) -> str:
        return self._text

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Stands in for aiohttp.ClientSession and answers POSTs from a route table.

    A route value may be a data dict (wrapped as {"data": ...}), a callable
    taking the query variables, a raw response string, or an exception to raise.
    """

    def __init__(self, routes: Dict[str, Any]):
        self.routes = routes
        self.requests = []
        self.closed = False

    def post(self, url, json=None, headers=None):
        self.requests.append(json)
        result = self.routes[operation_of(json)]
        if callable(result) and not isinstance(result, type):
            result = result(json.get("variables") or {})
        if isinstance(result, BaseException):
            raise result
        if isinstance(result, str):
            return FakeResponse(result)
        return FakeResponse(_dumps({"data": result}))

    def count(self, operation: str) -> int:
        return sum(1 for body in self.requests if operation_of(body) == operation)

    async def close(self):
        self.closed = True


def _dumps(payload) -> str:
    return json.dumps(payload)


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def overlay() -> TemporaryModOverlay:
    return TemporaryModOverlay(enabled=True)


@pytest.fixture
def make_client(clock, overlay) -> Callable[..., FicsitClient]:
    def factory(
        routes: Dict[str, Any],
        overlay: Optional[TemporaryModOverlay] = overlay,
        **kwargs,
    ) -> FicsitClient:
        session = FakeSession(routes)
        executor = QueryExecutor(session=session)
        client = FicsitClient(
            executor=executor,
            cache=ResponseCache(clock=clock),
            overlay=overlay,
            **kwargs,
        )
        client.session = session
        return client

    return factory


def mod_payload(mod_id: str, versions=(), **fields) -> dict:
    payload = {
        "id": mod_id,
        "name": fields.pop("name", mod_id),
        "short_description": "",
        "full_description": "",
        "logo": "",
        "downloads": 10,
        "hotness": 1,
        "popularity": 2,
        "last_version_date": "2020-10-01T12:00:00.000Z",
        "authors": [
            {"mod_id": mod_id, "user": {"username": "mircea", "avatar": ""}, "role": "creator"}
        ],
        "versions": [version_payload(mod_id, v) for v in versions],
    }
    payload.update(fields)
    return payload


def version_payload(mod_id: str, version: str, **fields) -> dict:
    payload = {
        "mod_id": mod_id,
        "version": version,
        "sml_version": "2.0.0",
        "changelog": "",
        "downloads": "5",
        "stability": "release",
        "link": f"/v1/mod/{mod_id}/versions/{version}/download",
    }
    payload.update(fields)
    return payload


def sml_payload(version: str, **fields) -> dict:
    payload = {
        "id": f"sml-{version}",
        "version": version,
        "satisfactory_version": 125236,
        "stability": "release",
        "link": f"https://github.com/satisfactorymodding/SatisfactoryModLoader/releases/tag/v{version}",
        "changelog": "",
        "date": "2020-09-01T00:00:00Z",
        "bootstrap_version": "2.0.0",
    }
    payload.update(fields)
    return payload


@pytest.fixture
def payloads():
    class Payloads:
        mod = staticmethod(mod_payload)
        version = staticmethod(version_payload)
        sml = staticmethod(sml_payload)

    return Payloads

"""Shared fixtures: a fake Mode API served through httpx.MockTransport."""
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from mode_rest.client import ModeClient
from shared.config import Settings


class FakeMode:
    """Serves canned Mode responses keyed by URL path and records every request."""

    def __init__(self):
        self.routes: Dict[str, Tuple[int, Any, Optional[str], Dict[str, str]]] = {}
        self.requests: List[httpx.Request] = []

    def add(
        self,
        path: str,
        body: Any = None,
        status: int = 200,
        text: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.routes[path] = (status, body, text, headers or {})

    def redirect(self, path: str, location: str, status: int = 302) -> None:
        self.add(path, status=status, text="", headers={"Location": location})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path not in self.routes:
            return httpx.Response(404, json={"message": "not found"})
        status, body, text, headers = self.routes[request.url.path]
        if text is not None:
            return httpx.Response(status, text=text, headers=headers)
        return httpx.Response(status, json=body, headers=headers)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def embeds(self, index: int = 0) -> List[str]:
        """Embed directives sent on the n-th request."""
        return [k for k, _ in self.requests[index].url.params.multi_items() if k.startswith("embed[")]


def collection(name: str, items: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Wrap items the way Mode wraps an embedded collection."""
    return {"_embedded": {name: items}}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        mode_token="session=abc123",
        auth_header="Cookie",
        base_url="https://mode.test",
        request_timeout=5,
    )


@pytest.fixture
def fake_mode() -> FakeMode:
    return FakeMode()


@pytest.fixture
def mode_client(settings, fake_mode) -> ModeClient:
    return ModeClient(settings, transport=fake_mode.transport)


@pytest.fixture
def report_envelope() -> Dict[str, Any]:
    """Report with two queries, each holding one chart with a color palette."""
    def query(token: str) -> Dict[str, Any]:
        return {
            "token": token,
            "name": f"Query {token}",
            "_embedded": {
                "charts": collection("charts", [{
                    "token": f"chart-{token}",
                    "view_version": 2,
                    "_embedded": {
                        "color_palette": {"token": "pal1", "name": "Mode Default", "palette_type": "categorical"},
                    },
                }]),
            },
        }

    return {
        "id": 42,
        "token": "abc123",
        "name": "Weekly KPIs",
        "_links": {"last_run": {"href": "/api/alice/reports/abc123/runs/run1"}},
        "_embedded": {
            "queries": collection("queries", [query("q1"), query("q2")]),
        },
    }


@pytest.fixture
def run_envelope() -> Dict[str, Any]:
    """Report run with one query run and its result links."""
    return {
        "token": "run1",
        "created_at": "2020-01-01T00:00:00Z",
        "_embedded": {
            "query_runs": collection("query_runs", [{
                "token": "qr1",
                "state": "succeeded",
                "_embedded": {
                    "result": {
                        "token": "res1",
                        "count": 10,
                        "_links": {
                            "csv": {"href": "/api/alice/reports/abc123/results/res1.csv"},
                            "json": {"href": "/api/alice/reports/abc123/results/res1.json"},
                        },
                    },
                },
            }]),
        },
    }

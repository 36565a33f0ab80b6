"""Test helper functions."""

import json
from typing import Any, Optional

import httpx


class FakeBackend:
    """Scripted stand-in for the listing backend, served through httpx.MockTransport.

    Routes are matched on method and URL path (exact, or prefix when
    ``prefix=True``). Queued responses for a route are consumed in order and
    the last one repeats. Unmatched requests get a 404.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: list[dict[str, Any]] = []

    def add(
        self,
        method: str,
        path: str,
        status: int = 200,
        json_body: Any = None,
        text: Optional[str] = None,
        prefix: bool = False,
    ) -> "FakeBackend":
        route = next(
            (r for r in self.routes if r["method"] == method and r["path"] == path and r["prefix"] == prefix),
            None,
        )
        if route is None:
            route = {"method": method, "path": path, "prefix": prefix, "responses": []}
            self.routes.append(route)
        route["responses"].append({"status": status, "json": json_body, "text": text})
        return self

    def _match(self, request: httpx.Request) -> Optional[dict[str, Any]]:
        for route in self.routes:
            if route["method"] != request.method:
                continue
            if route["prefix"] and request.url.path.startswith(route["path"]):
                return route
            if not route["prefix"] and request.url.path == route["path"]:
                return route
        return None

    def handler(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        route = self._match(request)
        if route is None:
            return httpx.Response(404, text="not found")

        responses = route["responses"]
        reply = responses.pop(0) if len(responses) > 1 else responses[0]
        if reply["text"] is not None:
            return httpx.Response(reply["status"], text=reply["text"])
        if reply["json"] is None:
            return httpx.Response(reply["status"])
        return httpx.Response(reply["status"], json=reply["json"])

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


def request_json(request: httpx.Request) -> Any:
    """Decode a recorded request's JSON body."""
    return json.loads(request.content.decode("utf-8"))


def paginated(results: list[dict]) -> dict:
    """Wrap records in the listing envelope."""
    return {"count": len(results), "next": None, "previous": None, "results": results}

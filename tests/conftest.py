"""Shared test fixtures: fake SPARQL endpoint and geometry server."""

import json
from typing import Callable, Dict, List, Optional

import httpx
import pytest

ENDPOINT = "http://sparql.test/tsukuba-highway/query"
ROUTE_URI = "http://x/geo.json"


def sparql_json(rows: List[Dict[str, str]], variables: Optional[List[str]] = None) -> str:
    """Build a SPARQL JSON results body where every value is a plain literal."""
    if variables is None:
        variables = sorted({var for row in rows for var in row})
    bindings = [
        {var: {"type": "literal", "value": value} for var, value in row.items()}
        for row in rows
    ]
    return json.dumps({"head": {"vars": variables}, "results": {"bindings": bindings}})


def query_kind(request: httpx.Request) -> str:
    """Tell the three queries apart by the variables they select."""
    query = request.url.params.get("query", "")
    if "?start_name" in query:
        return "names"
    if "?start_lng" in query:
        return "attributes"
    return "list"


class FakeEndpoint:
    """
    Canned responses keyed by query kind ("list", "attributes", "names") and by
    URL for geometry documents. A value may be a body string or an
    httpx.Response for status/failure cases.
    """

    def __init__(self):
        self.responses: Dict[str, object] = {}
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if str(request.url).startswith(ENDPOINT):
            key = query_kind(request)
        else:
            key = str(request.url)

        response = self.responses.get(key)
        if response is None:
            return httpx.Response(404, text="not found")
        if isinstance(response, Exception):
            raise response
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, text=response)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


SCENARIO_ATTRIBUTES = [
    {
        "start_lat": "36.08",
        "start_lng": "140.09",
        "end_lat": "36.10",
        "end_lng": "140.11",
        "length": "12.5",
        "lanes_count": "4",
        "route": ROUTE_URI,
    }
]
SCENARIO_NAMES = [{"start_name": "A", "end_name": "B"}]
SCENARIO_GEOMETRY = {"type": "LineString", "coordinates": []}


@pytest.fixture()
def fake() -> FakeEndpoint:
    """Fake endpoint loaded with the single-row reference scenario."""
    f = FakeEndpoint()
    f.responses["list"] = sparql_json(
        [{"roadLabel": "国道6号"}, {"roadLabel": "国道354号"}, {"roadLabel": "国道6号"}]
    )
    f.responses["attributes"] = sparql_json(SCENARIO_ATTRIBUTES)
    f.responses["names"] = sparql_json(SCENARIO_NAMES)
    f.responses[ROUTE_URI] = json.dumps(SCENARIO_GEOMETRY)
    return f


@pytest.fixture()
def make_resolver(fake: FakeEndpoint) -> Callable:
    """
    Returns a factory running `body(resolver)` inside a fresh event loop with
    an AsyncClient wired to the fake endpoint.
    """
    import asyncio

    from roadbrowser.services.roads import RoadResolver
    from roadbrowser.services.state import ResolutionController

    def run(body, controller: Optional[ResolutionController] = None):
        controller = controller or ResolutionController()

        async def main():
            async with httpx.AsyncClient(transport=fake.transport()) as client:
                resolver = RoadResolver(client, controller, endpoint=ENDPOINT)
                await body(resolver)

        asyncio.run(main())
        return controller

    return run

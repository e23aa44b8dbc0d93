import httpx
import pytest

from shopify_rest.integrations.base_client import ShopifyApiClient

API_PREFIX = "/admin/api/2024-01/"


class RecordingTransport:
    """
    Отвечает заготовленными ответами по (METHOD, относительный путь).
    Значение маршрута: (status, payload) или список таких пар для
    последовательных ответов.
    """

    def __init__(self, routes):
        self.routes = dict(routes)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix(API_PREFIX)
        route = self.routes.get((request.method, path), (404, {"errors": "Not Found"}))
        if isinstance(route, list):
            route = route.pop(0)
        status, payload = route
        if payload is None:
            return httpx.Response(status)
        return httpx.Response(status, json=payload)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def make_client():
    clients = []

    def _make(routes=None, max_retries=1):
        transport = RecordingTransport(routes or {})
        client = ShopifyApiClient(
            shop="test-shop",
            access_token="shpat_test_token",
            api_version="2024-01",
            max_retries=max_retries,
            transport=httpx.MockTransport(transport),
        )
        clients.append(client)
        return client, transport

    yield _make

    for client in clients:
        client.close()

from datetime import datetime, timezone
from unittest.mock import patch

import httpx
import pytest

from shopify_rest.integrations.base_client import (
    ShopifyApiClient,
    build_base_url,
    encode_body,
    encode_options,
    is_retryable_exception,
)
from shopify_rest.integrations.draft_orders import DraftOrderService
from shopify_rest.integrations.errors import IntegrationError, ShopifyResponseError
from shopify_rest.schemas.draft_order import DraftOrder, DraftOrderListOptions


@pytest.mark.parametrize(
    "shop, version, expected",
    [
        ("my-shop", "2024-01", "https://my-shop.myshopify.com/admin/api/2024-01/"),
        ("my-shop.myshopify.com", "2024-01", "https://my-shop.myshopify.com/admin/api/2024-01/"),
        ("https://my-shop.myshopify.com/", "2024-01", "https://my-shop.myshopify.com/admin/api/2024-01/"),
        ("my-shop", None, "https://my-shop.myshopify.com/admin/"),
        ("my-shop", "", "https://my-shop.myshopify.com/admin/"),
    ],
)
def test_build_base_url(shop, version, expected):
    assert build_base_url(shop, version) == expected


def test_build_base_url_requires_shop():
    with pytest.raises(ValueError, match="SHOPIFY_SHOP_URL"):
        build_base_url("  ")


def test_encode_options_from_model_drops_unset():
    options = DraftOrderListOptions(page=2, fields="id,name")

    assert encode_options(options) == {"page": 2, "fields": "id,name"}
    assert encode_options(DraftOrderListOptions()) == {}
    assert encode_options(None) is None


def test_encode_options_from_dict():
    params = encode_options({
        "limit": 10,
        "status": None,
        "created_at_min": datetime(2024, 1, 1, tzinfo=timezone.utc),
    })

    assert params == {"limit": 10, "created_at_min": "2024-01-01T00:00:00+00:00"}


def test_encode_options_rejects_unknown_types():
    with pytest.raises(TypeError):
        encode_options(["limit", 10])


def test_encode_body_dumps_only_set_fields():
    assert encode_body(DraftOrder(note="rush")) == {"note": "rush"}
    assert encode_body({"raw": True}) == {"raw": True}


def test_client_sets_auth_headers(make_client):
    client, transport = make_client({("GET", "shop.json"): (200, {"shop": {"id": 1}})})

    assert client.get("shop.json") == {"shop": {"id": 1}}
    assert transport.last.headers["X-Shopify-Access-Token"] == "shpat_test_token"
    assert transport.last.headers["Accept"] == "application/json"


def test_client_reads_settings_defaults(monkeypatch):
    from shopify_rest.core.config import settings

    monkeypatch.setattr(settings, "SHOPIFY_SHOP_URL", "settings-shop")
    monkeypatch.setattr(settings, "SHOPIFY_API_VERSION", "2023-10")
    monkeypatch.setattr(settings, "SHOPIFY_MAX_RETRIES", 4)

    with ShopifyApiClient(access_token="x") as client:
        assert client.base_url == "https://settings-shop.myshopify.com/admin/api/2023-10/"
        assert client.max_retries == 4


def test_empty_delete_response_returns_none(make_client):
    client, _ = make_client({("DELETE", "metafields/1.json"): (204, None)})

    assert client.delete("metafields/1.json") is None


def test_malformed_json_raises_response_error():
    def handler(request):
        return httpx.Response(200, content=b"<html>oops</html>", headers={"content-type": "application/json"})

    with ShopifyApiClient(shop="test-shop", access_token="t", api_version="2024-01",
                          max_retries=1, transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(ShopifyResponseError) as exc_info:
            client.get("draft_orders.json")

    assert isinstance(exc_info.value, IntegrationError)
    assert exc_info.value.status_code == 200
    assert "oops" in exc_info.value.body_preview


def test_count_without_count_key_raises(make_client):
    client, _ = make_client({("GET", "draft_orders/count.json"): (200, {"total": 3})})

    with pytest.raises(ShopifyResponseError):
        client.count("draft_orders/count.json")


def test_retryable_exception_classification():
    def status_error(code):
        response = httpx.Response(code, request=httpx.Request("GET", "https://x"))
        return httpx.HTTPStatusError("err", request=response.request, response=response)

    assert is_retryable_exception(httpx.ConnectError("down"))
    assert is_retryable_exception(httpx.ReadTimeout("slow"))
    assert is_retryable_exception(status_error(429))
    assert is_retryable_exception(status_error(503))
    assert not is_retryable_exception(status_error(404))
    assert not is_retryable_exception(status_error(422))
    assert not is_retryable_exception(ValueError("nope"))


def test_retries_server_errors_then_succeeds(make_client):
    client, transport = make_client(
        {("GET", "draft_orders/count.json"): [(503, {"errors": "unavailable"}), (200, {"count": 5})]},
        max_retries=3,
    )

    with patch("time.sleep"):
        assert client.count("draft_orders/count.json") == 5

    assert len(transport.requests) == 2


def test_throttled_request_honours_retry_after():
    responses = [
        httpx.Response(429, headers={"Retry-After": "2.0"}, json={"errors": "Exceeded 2 calls per second"}),
        httpx.Response(200, json={"draft_orders": []}),
    ]

    def handler(request):
        return responses.pop(0)

    with ShopifyApiClient(shop="test-shop", access_token="t", api_version="2024-01",
                          max_retries=3, transport=httpx.MockTransport(handler)) as client:
        with patch("time.sleep") as mock_sleep:
            assert client.get("draft_orders.json") == {"draft_orders": []}

    mock_sleep.assert_called_once_with(2.0)


def test_client_errors_are_not_retried(make_client):
    client, transport = make_client({("GET", "draft_orders/1.json"): (404, {"errors": "Not Found"})}, max_retries=3)

    with patch("time.sleep") as mock_sleep:
        with pytest.raises(httpx.HTTPStatusError):
            client.get("draft_orders/1.json")

    assert len(transport.requests) == 1
    mock_sleep.assert_not_called()


def test_gives_up_after_max_retries(make_client):
    client, transport = make_client({("GET", "draft_orders.json"): (500, {"errors": "boom"})}, max_retries=3)

    with patch("time.sleep"):
        with pytest.raises(httpx.HTTPStatusError):
            client.get("draft_orders.json")

    assert len(transport.requests) == 3


def test_connection_errors_propagate():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with ShopifyApiClient(shop="test-shop", access_token="t", api_version="2024-01",
                          max_retries=2, transport=httpx.MockTransport(handler)) as client:
        with patch("time.sleep"):
            with pytest.raises(httpx.ConnectError):
                client.get("draft_orders.json")


def _status_error(code, method="GET"):
    response = httpx.Response(code, request=httpx.Request(method, "https://x"))
    return httpx.HTTPStatusError("err", request=response.request, response=response)


def test_post_retry_classification():
    assert is_retryable_exception(httpx.ConnectError("down"), "POST")
    assert is_retryable_exception(httpx.ConnectTimeout("no connect"), "POST")
    assert is_retryable_exception(_status_error(429, "POST"), "POST")
    assert not is_retryable_exception(httpx.ReadTimeout("slow"), "POST")
    assert not is_retryable_exception(_status_error(503, "POST"), "POST")
    assert is_retryable_exception(httpx.ReadTimeout("slow"), "PUT")
    assert is_retryable_exception(_status_error(503, "DELETE"), "DELETE")


def _client_with_handler(handler, max_retries=3):
    return ShopifyApiClient(shop="test-shop", access_token="t", api_version="2024-01",
                            max_retries=max_retries, transport=httpx.MockTransport(handler))


def test_create_is_not_resent_after_read_timeout():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            raise httpx.ReadTimeout("response lost", request=request)
        return httpx.Response(201, json={"draft_order": {"id": 2}})

    with _client_with_handler(handler) as client:
        with patch("time.sleep"):
            with pytest.raises(httpx.ReadTimeout):
                DraftOrderService(client).create(DraftOrder(email="bob@example.com"))

    assert [r.method for r in calls] == ["POST"]


def test_create_is_not_resent_after_server_error(make_client):
    client, transport = make_client(
        {("POST", "draft_orders.json"): [(503, {"errors": "unavailable"}), (201, {"draft_order": {"id": 2}})]},
        max_retries=3,
    )

    with patch("time.sleep") as mock_sleep:
        with pytest.raises(httpx.HTTPStatusError):
            DraftOrderService(client).create(DraftOrder(email="bob@example.com"))

    assert len(transport.requests) == 1
    mock_sleep.assert_not_called()


def test_create_is_retried_when_connection_never_opened():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(201, json={"draft_order": {"id": 2}})

    with _client_with_handler(handler) as client:
        with patch("time.sleep"):
            created = DraftOrderService(client).create(DraftOrder(email="bob@example.com"))

    assert created.id == 2
    assert len(calls) == 2


def test_update_is_retried_after_read_timeout():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            raise httpx.ReadTimeout("slow", request=request)
        return httpx.Response(200, json={"draft_order": {"id": 7, "note": "x"}})

    with _client_with_handler(handler) as client:
        with patch("time.sleep"):
            updated = DraftOrderService(client).update(DraftOrder(id=7, note="x"))

    assert updated.note == "x"
    assert [r.method for r in calls] == ["PUT", "PUT"]


def test_explicit_constructor_values_override_settings(monkeypatch):
    from shopify_rest.core.config import settings

    monkeypatch.setattr(settings, "SHOPIFY_MAX_RETRIES", 4)
    monkeypatch.setattr(settings, "SHOPIFY_TIMEOUT_SECONDS", 30.0)

    with ShopifyApiClient(shop="s", access_token="t", max_retries=1, timeout=0.5) as client:
        assert client.max_retries == 1
        assert client.client.timeout.read == 0.5


@pytest.mark.parametrize("max_retries", [0, -1])
def test_max_retries_below_one_is_rejected(max_retries):
    with pytest.raises(ValueError, match="max_retries"):
        ShopifyApiClient(shop="s", access_token="t", max_retries=max_retries)


@pytest.mark.parametrize("header, expected", [("86400", 60.0), ("-5", 0.0)])
def test_retry_after_is_clamped(monkeypatch, header, expected):
    from shopify_rest.core.config import settings

    monkeypatch.setattr(settings, "SHOPIFY_MAX_RETRY_WAIT", 60.0)
    responses = [
        httpx.Response(429, headers={"Retry-After": header}, json={"errors": "Exceeded 2 calls per second"}),
        httpx.Response(200, json={"count": 0}),
    ]

    with _client_with_handler(lambda request: responses.pop(0)) as client:
        with patch("time.sleep") as mock_sleep:
            assert client.count("draft_orders/count.json") == 0

    mock_sleep.assert_called_once_with(expected)

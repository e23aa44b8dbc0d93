import hashlib
import logging
import os
import time
from datetime import datetime
from typing import Any, Type, TypeVar

import httpx
from pydantic import BaseModel
from tenacity import RetryCallState, Retrying, retry_if_exception, stop_after_attempt, wait_exponential

from shopify_rest.core.config import settings
from shopify_rest.core.logging import LOG_BODY_MAX, _redact, set_shop_context
from .errors import ShopifyResponseError

ModelT = TypeVar("ModelT", bound=BaseModel)


# POST не идемпотентен: create/complete/cancel повторяем только если запрос
# гарантированно не дошёл до Shopify (нет соединения или 429).
IDEMPOTENT_METHODS = {"GET", "PUT", "DELETE"}


def is_retryable_exception(exception: BaseException, method: str = "GET") -> bool:
    """Определяет, является ли исключение основанием для повторной попытки."""
    idempotent = method.upper() in IDEMPOTENT_METHODS
    if isinstance(exception, (httpx.ConnectError, httpx.ConnectTimeout)):
        return True
    if isinstance(exception, httpx.TimeoutException):
        return idempotent
    if isinstance(exception, httpx.HTTPStatusError):
        # 429 - превышен лимит запросов, 5xx - ошибка на стороне Shopify
        status = exception.response.status_code
        return status == 429 or (idempotent and 500 <= status < 600)
    return False


_backoff = wait_exponential(multiplier=1, min=1, max=60)


def wait_retry_after(retry_state: RetryCallState) -> float:
    """Honours Retry-After on throttled responses, exponential backoff otherwise."""
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    if isinstance(exc, httpx.HTTPStatusError):
        header = exc.response.headers.get("Retry-After")
        if header:
            try:
                delay = float(header)
            except ValueError:
                delay = None
            if delay is not None:
                return min(max(delay, 0.0), settings.SHOPIFY_MAX_RETRY_WAIT)
    return _backoff(retry_state)


def build_base_url(shop: str, api_version: str | None = None) -> str:
    """
    my-shop -> https://my-shop.myshopify.com/admin/api/<version>/
    Принимает имя магазина, домен или полный URL.
    """
    shop = shop.strip().rstrip("/")
    if not shop:
        raise ValueError("Shopify shop URL is not configured (SHOPIFY_SHOP_URL)")
    if not shop.startswith(("http://", "https://")):
        if "." not in shop:
            shop = f"{shop}.myshopify.com"
        shop = f"https://{shop}"
    if api_version:
        return f"{shop}/admin/api/{api_version}/"
    return f"{shop}/admin/"


def encode_options(options: Any) -> dict[str, Any] | None:
    """Query-параметры из option-модели или словаря; пустые значения отбрасываются."""
    if options is None:
        return None
    if hasattr(options, "to_params"):
        return options.to_params()
    if isinstance(options, BaseModel):
        return options.model_dump(mode="json", exclude_none=True)
    if isinstance(options, dict):
        return {
            k: (v.isoformat() if isinstance(v, datetime) else v)
            for k, v in options.items()
            if v is not None
        }
    raise TypeError(f"Unsupported options type: {type(options).__name__}")


def encode_body(body: Any) -> Any:
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json", exclude_unset=True)
    return body


class ShopifyApiClient:
    """
    Общий HTTP-клиент Shopify Admin REST API.

    Ресурсные сервисы (draft orders, metafields, fulfillments) держат ссылку
    на один экземпляр и вызывают get/post/put/delete/count.
    """

    def __init__(
        self,
        shop: str | None = None,
        access_token: str | None = None,
        api_version: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        shop = shop if shop is not None else settings.SHOPIFY_SHOP_URL
        access_token = access_token if access_token is not None else settings.SHOPIFY_ACCESS_TOKEN
        api_version = api_version if api_version is not None else settings.SHOPIFY_API_VERSION
        self.base_url = build_base_url(shop, api_version)
        self.max_retries = max_retries if max_retries is not None else settings.SHOPIFY_MAX_RETRIES
        if self.max_retries < 1:
            raise ValueError(f"max_retries must be at least 1, got {self.max_retries}")
        self.client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.SHOPIFY_TIMEOUT_SECONDS,
            transport=transport,
            headers={
                "X-Shopify-Access-Token": access_token,
                "Accept": "application/json",
                "Content-Type": "application/json",
                "User-Agent": settings.SHOPIFY_USER_AGENT,
            },
        )
        self._logger = logging.getLogger("http")
        set_shop_context(self.client.base_url.host, api_version)

    def _maybe_hash(self, body: str) -> str:
        return hashlib.sha256(body.encode("utf-8", "ignore")).hexdigest()[:16]

    def _send(self, method: str, url: str, attempt: int, t0: float, **kwargs) -> httpx.Response:
        req_body = kwargs.get("json")
        self._logger.debug("HTTP %s %s (attempt %d)", method, url, attempt,
                           extra={"extra": {"method": method, "url": url, "attempt": attempt,
                                            "params": kwargs.get("params"),
                                            "headers": _redact(dict(self.client.headers)),
                                            "body_preview": str(_redact(req_body) if req_body is not None else "")[:LOG_BODY_MAX]}})

        response = self.client.request(method, url, **kwargs)
        dt = round((time.perf_counter() - t0) * 1000)

        body_text = response.text or ""
        body_hash = self._maybe_hash(body_text)
        if float(os.getenv("LOG_SAMPLE_RATE", "1.0")) >= 1.0:
            body_preview = body_text[:LOG_BODY_MAX]
        else:
            body_preview = f"[sampled hash:{body_hash}]"

        self._logger.info("HTTP %s %s -> %d in %dms", method, url, response.status_code, dt,
                          extra={"extra": {"method": method, "url": url, "status_code": response.status_code,
                                           "elapsed_ms": dt, "response_preview": body_preview,
                                           "response_hash": body_hash}})

        response.raise_for_status()
        return response

    def _log_retry(self, retry_state: RetryCallState):
        wait = retry_state.next_action.sleep if retry_state.next_action else 0
        self._logger.debug("HTTP retry in %.1fs after attempt %d", wait, retry_state.attempt_number)

    def _request_with_retry(self, method: str, url: str, **kwargs) -> Any:
        """Один вызов API: повторы для сетевых ошибок, 429 и 5xx (для POST только до отправки)."""
        t0 = time.perf_counter()
        attempt = 0
        retryer = Retrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_retry_after,
            retry=retry_if_exception(lambda exc: is_retryable_exception(exc, method)),
            before_sleep=self._log_retry,
            reraise=True,
        )

        try:
            for attempt_ctx in retryer:
                with attempt_ctx:
                    attempt = attempt_ctx.retry_state.attempt_number
                    response = self._send(method, url, attempt, t0, **kwargs)
        except httpx.HTTPError as e:
            dt = round((time.perf_counter() - t0) * 1000)
            self._logger.error("HTTP FAIL %s %s after %d tries: %s", method, url, attempt, repr(e),
                               extra={"extra": {"method": method, "url": url, "elapsed_ms": dt,
                                                "attempts": attempt}}, exc_info=True)
            raise

        return self._parse_response(response)

    def _parse_response(self, response: httpx.Response) -> Any:
        # Пустой ответ (например, 204 No Content или DELETE)
        if response.status_code == 204 or not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise ShopifyResponseError(
                f"Invalid JSON in response to {response.request.method} {response.request.url}",
                status_code=response.status_code,
                body_preview=response.text[:LOG_BODY_MAX],
            ) from e

    @staticmethod
    def _load(data: Any, resource_cls: Type[ModelT] | None) -> Any:
        if resource_cls is None:
            return data
        return resource_cls.model_validate(data)

    def get(self, path: str, resource_cls: Type[ModelT] | None = None, options: Any = None) -> Any:
        data = self._request_with_retry("GET", path, params=encode_options(options))
        return self._load(data, resource_cls)

    def post(self, path: str, body: Any = None, resource_cls: Type[ModelT] | None = None) -> Any:
        data = self._request_with_retry("POST", path, json=encode_body(body))
        return self._load(data, resource_cls)

    def put(self, path: str, body: Any = None, resource_cls: Type[ModelT] | None = None) -> Any:
        data = self._request_with_retry("PUT", path, json=encode_body(body))
        return self._load(data, resource_cls)

    def delete(self, path: str) -> None:
        self._request_with_retry("DELETE", path)

    def count(self, path: str, options: Any = None) -> int:
        data = self.get(path, options=options)
        try:
            return int(data["count"])
        except (KeyError, TypeError, ValueError) as e:
            raise ShopifyResponseError(f"Response to GET {path} has no count", body_preview=str(data)[:200]) from e

    def close(self):
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


def require_id(value: int | None, what: str) -> int:
    """ID нужен для пути вида <resource>/<id>.json; 0 и None считаются незаданными."""
    if not value:
        raise ValueError(f"{what} id is required to build the request path")
    return value

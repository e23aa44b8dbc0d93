import json
import logging
import os
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any, Dict

# Correlation id of the caller's request and the shop the calls go to
request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
shop_var: ContextVar[str | None] = ContextVar("shop", default=None)
api_version_var: ContextVar[str | None] = ContextVar("api_version", default=None)

REDACT_KEYS = {
    k.strip().lower()
    for k in os.getenv(
        "LOG_REDACT_KEYS", "password,authorization,apikey,x-api-key,token,x-shopify-access-token,access_token"
    ).split(",")
    if k.strip()
}
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").lower()
LOG_BODY_MAX = int(os.getenv("LOG_BODY_MAX", "2000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(name)s] [%(shop)s %(api_version)s] %(message)s"

def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: ("***" if str(k).lower() in REDACT_KEYS else _redact(v)) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_redact(v) for v in value]
    if isinstance(value, str) and len(value) > LOG_BODY_MAX:
        return value[:LOG_BODY_MAX] + f"...(+{len(value)-LOG_BODY_MAX} chars)"
    return value


class ShopContextFilter(logging.Filter):
    """Проставляет shop/api_version в каждую запись, чтобы их видел и plain-формат."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.shop = shop_var.get() or "-"
        record.api_version = api_version_var.get() or "-"
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base: Dict[str, Any] = {
            "ts": round(time.time() * 1000),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": request_id_var.get(),
            "shop": shop_var.get(),
            "api_version": api_version_var.get(),
        }
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            base.update(_redact(extra))
        return json.dumps(base, ensure_ascii=False, default=str)

def configure_logging():
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(ShopContextFilter())
    if LOG_FORMAT == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    root.addHandler(handler)

def set_request_id(value: str | None = None) -> str:
    rid = value or str(uuid.uuid4())
    request_id_var.set(rid)
    return rid

def set_shop_context(shop: str | None, api_version: str | None) -> None:
    shop_var.set(shop)
    api_version_var.set(api_version or None)

import functools
import logging
import time
from typing import Any, Callable

from .logging import _redact

logger = logging.getLogger("steps")


def _result_summary(result: Any) -> dict[str, Any]:
    # Для list_* пишем размер, а не весь список черновиков
    if isinstance(result, list):
        return {"result_count": len(result)}
    return {"result_preview": str(result)[:200]}


def log_step(step: str):
    """
    Логирует вход, выход, тайминги и исключения операции ресурса.
    Позиционные аргументы (id черновика, id metafield/fulfillment) попадают в ENTER.
    Пример: @log_step("draft_orders.get")
    """
    def decorator(fn: Callable):
        @functools.wraps(fn)
        def wrapped(*args, **kwargs):
            t0 = time.perf_counter()
            # args[0] - сам сервис
            ids = [a for a in args[1:] if isinstance(a, int) and not isinstance(a, bool)]
            logger.debug("ENTER %s", step, extra={"extra": {"step": step, "ids": ids, "args": _redact(kwargs)}})
            try:
                result = fn(*args, **kwargs)
            except Exception as e:
                dt = round((time.perf_counter() - t0) * 1000)
                logger.error("ERROR %s: %s", step, e, extra={"extra": {"step": step, "ids": ids, "elapsed_ms": dt}}, exc_info=True)
                raise
            dt = round((time.perf_counter() - t0) * 1000)
            logger.info("EXIT %s", step, extra={"extra": {"step": step, "ids": ids, "elapsed_ms": dt, **_result_summary(result)}})
            return result

        return wrapped

    return decorator

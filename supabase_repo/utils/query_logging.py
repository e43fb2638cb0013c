"""레포지토리 쿼리 로깅 모듈.

Repository query logging.
Every public repository operation is wrapped with ``log_query`` which records
table, operation, duration and error reason, logs the event through the
``supabase_repo`` logger and, when configured, ships it to Axiom.
Sensitive fields (password, token, secret) are automatically masked.

For testing, use set_query_logger() to inject a logger that will be used
instead of the one built from settings.
"""

import functools
import json
import logging
import re
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from axiom_py import Client as AxiomClient
from pydantic import BaseModel

from supabase_repo.config import settings

logger = logging.getLogger("supabase_repo")

R = TypeVar("R")

# 마스킹 대상 필드 패턴 — Fields to mask in logged payloads
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|access_token|refresh_token|credential)",
    re.IGNORECASE,
)


def _mask_dict(data: Any, depth: int = 0) -> Any:
    """민감 필드 자동 마스킹 — Recursively mask sensitive fields in dicts/lists."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(str(k)) else _mask_dict(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [_mask_dict(item, depth + 1) for item in data[:20]]
    return data


def _truncate(value: Any, max_len: int = 2000) -> Any:
    """로그 크기 제한 — Truncate large values to prevent oversized logs."""
    if isinstance(value, str) and len(value) > max_len:
        return value[:max_len] + "...(truncated)"
    return value


def _describe(value: Any) -> Any:
    """로그용 값 변환 — Convert models and filter functions to loggable values."""
    if isinstance(value, BaseModel):
        # 필터 함수 필드는 JSON 직렬화 불가 — fields may hold filter functions
        return _describe({name: getattr(value, name) for name in value.model_fields_set})
    if callable(value):
        return f"<filter {getattr(value, '__qualname__', type(value).__name__)}>"
    if isinstance(value, dict):
        return {k: _describe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_describe(v) for v in value]
    return value


class QueryLogger:
    """쿼리 이벤트를 stdlib 로거와 Axiom으로 보내는 로거.

    Sends query events to the ``supabase_repo`` logger and, when an Axiom
    client is given, to the Axiom dataset.
    """

    def __init__(self, axiom_client: AxiomClient | None = None, dataset: str = "") -> None:
        self._client: AxiomClient | None = axiom_client
        self._dataset: str = dataset

    @classmethod
    def from_settings(cls) -> "QueryLogger":
        logger.setLevel(settings.LOG_LEVEL.upper())
        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            return cls(AxiomClient(token=settings.AXIOM_API_TOKEN), settings.AXIOM_DATASET)
        return cls()

    def emit(self, event: dict[str, Any]) -> None:
        level = logging.WARNING if "error" in event else logging.INFO
        logger.log(
            level,
            "%s.%s %.2fms%s",
            event["table"],
            event["operation"],
            event["duration_ms"],
            f" error={event['error']}" if "error" in event else "",
            extra={"query_event": event},
        )

        if self._client is None:
            return
        # Axiom 전송 — Send to Axiom
        try:
            self._client.ingest_events(self._dataset, [event])
        except Exception:
            # 로깅 실패가 쿼리 처리에 영향주지 않도록 — Never break a query on log failure
            logger.debug("Axiom ingest failed", exc_info=True)


_query_logger: QueryLogger | None = None


def get_query_logger() -> QueryLogger:
    """현재 쿼리 로거를 반환합니다 (최초 호출 시 설정값으로 생성).

    Return the active query logger, building it from settings on first use.
    """
    global _query_logger
    if _query_logger is None:
        _query_logger = QueryLogger.from_settings()
    return _query_logger


def set_query_logger(query_logger: QueryLogger | None) -> None:
    """쿼리 로거를 교체합니다. None이면 다음 호출 시 설정값으로 재생성.

    Replace the active query logger; None rebuilds it from settings on next use.
    """
    global _query_logger
    _query_logger = query_logger


def log_query(
    operation: str,
) -> Callable[[Callable[..., Awaitable[R]]], Callable[..., Awaitable[R]]]:
    """레포지토리 메서드를 쿼리 로깅으로 감싸는 데코레이터.

    Decorator for async repository methods. The wrapped method's result is
    returned and its exception re-raised unchanged; the event is emitted in
    both cases.

    Args:
        operation: 이벤트에 기록할 작업 이름 (Operation name recorded in the event)
    """

    def decorator(func: Callable[..., Awaitable[R]]) -> Callable[..., Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(self: Any, *args: Any, **kwargs: Any) -> R:
            start_time = time.perf_counter()
            error_detail: str | None = None
            try:
                return await func(self, *args, **kwargs)
            except Exception as exc:
                error_detail = f"{type(exc).__name__}: {str(exc)[:300]}"
                raise
            finally:
                duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
                try:
                    event: dict[str, Any] = {
                        "table": getattr(self, "table_name", type(self).__name__),
                        "operation": operation,
                        "duration_ms": duration_ms,
                    }
                    if settings.LOG_QUERY_PAYLOADS and (args or kwargs):
                        payload = _mask_dict(_describe({"args": list(args), "kwargs": kwargs}))
                        event["payload"] = _truncate(json.dumps(payload, default=str))
                    if error_detail:
                        event["error"] = error_detail

                    get_query_logger().emit(event)
                except Exception:
                    # 로깅 실패가 쿼리 결과를 바꾸지 않도록 — Never replace a query result with a log failure
                    logger.debug("Query event logging failed", exc_info=True)

        return wrapper

    return decorator

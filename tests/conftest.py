"""테스트 인프라 — 인메모리 Supabase 클라이언트와 레포지토리 픽스처.

Test infrastructure — In-memory fake of the async Supabase client and
repository fixtures. The fake implements the PostgREST query-builder subset
used by BaseRepository and records every executed request.
"""

import copy
import itertools
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import pytest

from supabase_repo.repositories.base import BaseRepository
from supabase_repo.utils.query_logging import QueryLogger, set_query_logger


# ---------------------------------------------------------------------------
# Fake Supabase client
# ---------------------------------------------------------------------------
@dataclass
class FakeResponse:
    """postgrest APIResponse 대체 — data/count만 제공."""

    data: list[dict[str, Any]]
    count: int | None = None


@dataclass
class ExecutedRequest:
    """실행된 요청 기록 — one executed request."""

    table: str
    operation: str
    columns: str = "*"
    count: str | None = None
    head: bool = False
    filters: list[tuple[str, str, Any]] = field(default_factory=list)
    orders: list[tuple[str, bool]] = field(default_factory=list)
    range: tuple[int, int] | None = None
    limit: int | None = None
    payload: Any = None
    on_conflict: str | None = None


class FakeQueryBuilder:
    """PostgREST 비동기 쿼리 빌더의 인메모리 구현."""

    def __init__(self, client: "FakeSupabaseClient", table: str) -> None:
        self._client = client
        self._predicates: list[Callable[[dict[str, Any]], bool]] = []
        self.request = ExecutedRequest(table=table, operation="select")

    # --- 작업 선택 (operation) ---
    def select(self, *columns: str, count: Any = None, head: bool | None = None) -> "FakeQueryBuilder":
        self.request.operation = "select"
        self.request.columns = ",".join(columns) or "*"
        self.request.count = str(count.value if hasattr(count, "value") else count) if count else None
        self.request.head = bool(head)
        return self

    def insert(self, json: Any) -> "FakeQueryBuilder":
        self.request.operation = "insert"
        self.request.payload = json
        return self

    def update(self, json: dict[str, Any]) -> "FakeQueryBuilder":
        self.request.operation = "update"
        self.request.payload = json
        return self

    def upsert(self, json: Any, *, on_conflict: str = "") -> "FakeQueryBuilder":
        self.request.operation = "upsert"
        self.request.payload = json
        self.request.on_conflict = on_conflict
        return self

    def delete(self) -> "FakeQueryBuilder":
        self.request.operation = "delete"
        return self

    # --- 필터 (filters) ---
    def _filter(self, op: str, column: str, value: Any, predicate: Callable[[Any], bool]) -> "FakeQueryBuilder":
        self.request.filters.append((op, column, value))
        self._predicates.append(lambda row: predicate(row.get(column)))
        return self

    def eq(self, column: str, value: Any) -> "FakeQueryBuilder":
        return self._filter("eq", column, value, lambda v: v == value)

    def neq(self, column: str, value: Any) -> "FakeQueryBuilder":
        return self._filter("neq", column, value, lambda v: v != value)

    def gt(self, column: str, value: Any) -> "FakeQueryBuilder":
        return self._filter("gt", column, value, lambda v: v is not None and v > value)

    def gte(self, column: str, value: Any) -> "FakeQueryBuilder":
        return self._filter("gte", column, value, lambda v: v is not None and v >= value)

    def lt(self, column: str, value: Any) -> "FakeQueryBuilder":
        return self._filter("lt", column, value, lambda v: v is not None and v < value)

    def lte(self, column: str, value: Any) -> "FakeQueryBuilder":
        return self._filter("lte", column, value, lambda v: v is not None and v <= value)

    def ilike(self, column: str, pattern: str) -> "FakeQueryBuilder":
        regex = re.compile(".*".join(re.escape(p) for p in pattern.split("%")), re.IGNORECASE)
        return self._filter("ilike", column, pattern, lambda v: v is not None and bool(regex.fullmatch(str(v))))

    def in_(self, column: str, values: list[Any]) -> "FakeQueryBuilder":
        return self._filter("in", column, list(values), lambda v: v in values)

    def is_(self, column: str, value: str) -> "FakeQueryBuilder":
        assert value == "null"
        return self._filter("is", column, value, lambda v: v is None)

    # --- 정렬 / 범위 (modifiers) ---
    def order(self, column: str, *, desc: bool = False) -> "FakeQueryBuilder":
        self.request.orders.append((column, desc))
        return self

    def range(self, start: int, end: int) -> "FakeQueryBuilder":
        self.request.range = (start, end)
        return self

    def limit(self, size: int) -> "FakeQueryBuilder":
        self.request.limit = size
        return self

    async def execute(self) -> FakeResponse:
        self._client.requests.append(self.request)
        if self._client.fail_with is not None:
            raise self._client.fail_with
        handler = getattr(self, f"_execute_{self.request.operation}")
        return handler(self._client.tables.setdefault(self.request.table, []))

    # --- 실행 (execution against the in-memory table) ---
    def _matches(self, row: dict[str, Any]) -> bool:
        return all(predicate(row) for predicate in self._predicates)

    def _execute_select(self, rows: list[dict[str, Any]]) -> FakeResponse:
        matched = [copy.deepcopy(row) for row in rows if self._matches(row)]
        for column, desc in reversed(self.request.orders):
            matched.sort(key=lambda row: row[column], reverse=desc)
        total = len(matched)
        if self.request.range is not None:
            start, end = self.request.range
            matched = matched[start:end + 1]
        if self.request.limit is not None:
            matched = matched[: self.request.limit]
        count = total if self.request.count == "exact" else None
        return FakeResponse(data=[] if self.request.head else matched, count=count)

    def _execute_insert(self, rows: list[dict[str, Any]]) -> FakeResponse:
        payload = self.request.payload
        items = payload if isinstance(payload, list) else [payload]
        inserted = [{"id": self._client.next_id(), **item} for item in items]
        rows.extend(inserted)
        return FakeResponse(data=copy.deepcopy(inserted))

    def _execute_update(self, rows: list[dict[str, Any]]) -> FakeResponse:
        updated = []
        for row in rows:
            if self._matches(row):
                row.update(self.request.payload)
                updated.append(copy.deepcopy(row))
        return FakeResponse(data=updated)

    def _execute_upsert(self, rows: list[dict[str, Any]]) -> FakeResponse:
        conflict_columns = (self.request.on_conflict or "id").split(",")
        payload = self.request.payload
        result = []
        for item in payload if isinstance(payload, list) else [payload]:
            existing = next(
                (
                    row for row in rows
                    if all(column in item and row.get(column) == item[column] for column in conflict_columns)
                ),
                None,
            )
            if existing is not None:
                existing.update(item)
                result.append(copy.deepcopy(existing))
            else:
                new_row = {"id": self._client.next_id(), **item}
                rows.append(new_row)
                result.append(copy.deepcopy(new_row))
        return FakeResponse(data=result)

    def _execute_delete(self, rows: list[dict[str, Any]]) -> FakeResponse:
        deleted = [row for row in rows if self._matches(row)]
        rows[:] = [row for row in rows if not self._matches(row)]
        return FakeResponse(data=deleted)


class FakeSupabaseClient:
    """Supabase AsyncClient 대체 — table() 과 요청 기록만 제공."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.requests: list[ExecutedRequest] = []
        self.fail_with: Exception | None = None
        self._ids = itertools.count(1)

    def next_id(self) -> str:
        return f"mock-id-{next(self._ids)}"

    def table(self, table_name: str) -> FakeQueryBuilder:
        return FakeQueryBuilder(self, table_name)

    def set_table_data(self, table_name: str, rows: list[dict[str, Any]]) -> None:
        self.tables[table_name] = copy.deepcopy(rows)


# ---------------------------------------------------------------------------
# 픽스처
# ---------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def quiet_query_logger():
    """설정(.env)의 Axiom 대신 로컬 전용 쿼리 로거를 사용합니다."""
    set_query_logger(QueryLogger())
    yield
    set_query_logger(None)


@pytest.fixture
def users_data() -> list[dict[str, Any]]:
    return [
        {
            "id": "1",
            "name": "John Doe",
            "email": "john@example.com",
            "age": 30,
            "created_at": "2024-01-01T00:00:00Z",
            "updated_at": "2024-01-01T00:00:00Z",
        },
        {
            "id": "2",
            "name": "Jane Smith",
            "email": "jane@example.com",
            "age": 25,
            "created_at": "2024-01-02T00:00:00Z",
            "updated_at": "2024-01-02T00:00:00Z",
        },
        {
            "id": "3",
            "name": "Bob Johnson",
            "email": "bob@example.com",
            "age": 35,
            "created_at": "2024-01-03T00:00:00Z",
            "updated_at": "2024-01-03T00:00:00Z",
        },
    ]


@pytest.fixture
def fake_client(users_data) -> FakeSupabaseClient:
    client = FakeSupabaseClient()
    client.set_table_data("users", users_data)
    return client


@pytest.fixture
def repository(fake_client) -> BaseRepository[dict[str, Any]]:
    """users 테이블용 dict 기반 레포지토리."""
    return BaseRepository("users", fake_client)

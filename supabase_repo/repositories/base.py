"""기본 CRUD 레포지토리 — 모든 레포지토리의 부모 클래스.

Base CRUD Repository — Parent class for all table repositories.
Provides generic Create, Read, Update, Delete, pagination, bulk and upsert
operations on one Supabase table. Every operation delegates to the Supabase
query builder; errors raised by the client propagate unchanged.

Usage:
    class UserRepository(BaseRepository[User]):
        def __init__(self, client: AsyncClient) -> None:
            super().__init__("users", client, model=User)
"""

from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar

from postgrest.types import CountMethod
from pydantic import BaseModel
from supabase import AsyncClient

from supabase_repo.schemas.query import Filter, FindOptions, FindPaginatedOptions
from supabase_repo.utils.exceptions import RecordNotFoundError
from supabase_repo.utils.filters import apply_filter, apply_order_by
from supabase_repo.utils.pagination import (
    PaginatedResult,
    Pagination,
    page_range,
    total_pages,
)
from supabase_repo.utils.query_logging import log_query

# 제네릭 타입 변수 — 행(dict) 또는 Pydantic 모델을 나타냄
# Generic type variable representing a row dict or a pydantic model
ModelType = TypeVar("ModelType")

RecordId = str | int

# 쓰기 요청 데이터 — dict 또는 Pydantic 모델 (Write payload: dict or pydantic model)
Payload = Mapping[str, Any] | BaseModel


class BaseRepository(Generic[ModelType]):
    """제네릭 Supabase CRUD 레포지토리.

    Generic CRUD repository over one Supabase table.
    Rows are returned as dicts, or validated into ``model`` when one is given.

    Attributes:
        table_name: 이 레포지토리가 관리하는 테이블 이름 (Table this repository manages)
        client: Supabase 비동기 클라이언트 (Async Supabase client)
        model: 행을 변환할 Pydantic 모델 클래스, 없으면 dict 반환
               (Pydantic model rows are validated into; dicts when None)
    """

    def __init__(
        self,
        table_name: str,
        client: AsyncClient,
        model: type[ModelType] | None = None,
    ) -> None:
        """레포지토리를 초기화합니다.

        Initialize the repository with a table name and a client.

        Args:
            table_name: 테이블 이름 (Table name)
            client: Supabase 비동기 클라이언트 (Async Supabase client)
            model: 행 변환용 Pydantic 모델 (Optional pydantic model for rows)
        """
        self._table_name: str = table_name
        self._client: AsyncClient = client
        self.model: type[ModelType] | None = model

    @property
    def table_name(self) -> str:
        return self._table_name

    @property
    def client(self) -> AsyncClient:
        return self._client

    def _table(self) -> Any:
        """테이블 쿼리 빌더 — A fresh query builder for this table."""
        return self._client.table(self._table_name)

    def _to_entity(self, row: dict[str, Any]) -> ModelType:
        if self.model is not None:
            return self.model.model_validate(row)
        return row  # type: ignore[return-value]

    def _to_entities(self, rows: list[dict[str, Any]] | None) -> list[ModelType]:
        return [self._to_entity(row) for row in rows or []]

    @staticmethod
    def _to_payload(data: Payload) -> dict[str, Any]:
        """요청 데이터 직렬화 — 모델은 설정된 필드만 전송 (Models send only set fields)."""
        if isinstance(data, BaseModel):
            return data.model_dump(mode="json", exclude_unset=True)
        return dict(data)

    def _single(self, rows: list[dict[str, Any]] | None, record_id: RecordId | None = None) -> ModelType:
        """단일 행 추출 — 결과가 비어 있으면 RecordNotFoundError.

        Return the first returned row, raising RecordNotFoundError when none.
        """
        if not rows:
            raise RecordNotFoundError(self._table_name, record_id)
        return self._to_entity(rows[0])

    # ── READ ──────────────────────────────────────────────

    @log_query("get")
    async def get(self, record_id: RecordId) -> ModelType | None:
        """ID로 단일 레코드를 조회합니다.

        Retrieve a single record by id.

        Args:
            record_id: 조회할 레코드 ID (Id of the record to retrieve)

        Returns:
            ModelType | None: 조회된 레코드 또는 None (Found record or None)
        """
        response = await self._table().select("*").eq("id", record_id).limit(1).execute()
        if not response.data:
            return None
        return self._to_entity(response.data[0])

    @log_query("find")
    async def find(self, options: FindOptions | None = None, **kwargs: Any) -> list[ModelType]:
        """조건에 맞는 모든 레코드를 조회합니다.

        Retrieve all records matching the filter, in the requested order.

        Args:
            options: 필터/정렬 옵션 (Filter and ordering options)
            **kwargs: options가 없을 때 FindOptions 생성에 사용
                      (Used to build FindOptions when options is omitted)

        Returns:
            list[ModelType]: 조회된 레코드 목록 (List of matching records)

        Raises:
            TypeError: options와 kwargs를 함께 전달한 경우 (Both options and kwargs given)
        """
        if options is not None and kwargs:
            raise TypeError("pass either options or keyword arguments, not both")
        if options is None:
            options = FindOptions(**kwargs)

        query = apply_filter(self._table().select("*"), options.filter)
        query = apply_order_by(query, options.order_by)

        response = await query.execute()
        return self._to_entities(response.data)

    @log_query("find_paginated")
    async def find_paginated(
        self,
        options: FindPaginatedOptions | None = None,
        **kwargs: Any,
    ) -> PaginatedResult[ModelType]:
        """페이지네이션이 적용된 레코드 목록을 조회합니다.

        Retrieve one page of records with pagination metadata.
        Runs two queries: an exact head-only count and the ranged page query.

        Args:
            options: 페이지/필터/정렬 옵션 (Page, filter and ordering options)
            **kwargs: options가 없을 때 FindPaginatedOptions 생성에 사용
                      (Used to build FindPaginatedOptions when options is omitted)

        Returns:
            PaginatedResult[ModelType]: 현재 페이지 항목과 메타데이터
                                        (Page items and pagination metadata)

        Raises:
            TypeError: options와 kwargs를 함께 전달한 경우 (Both options and kwargs given)
        """
        if options is not None and kwargs:
            raise TypeError("pass either options or keyword arguments, not both")
        if options is None:
            options = FindPaginatedOptions(**kwargs)

        # 전체 카운트 쿼리 — Total count query
        total_count = await self._count(options.filter)

        # 범위 계산 및 페이지 적용 — Calculate range and fetch the page
        start, end = page_range(options.page, options.page_size)
        query = apply_filter(self._table().select("*"), options.filter)
        query = apply_order_by(query, options.order_by)
        response = await query.range(start, end).execute()

        return PaginatedResult(
            items=self._to_entities(response.data),
            pagination=Pagination(
                page=options.page,
                page_size=options.page_size,
                total_count=total_count,
                total_pages=total_pages(total_count, options.page_size),
            ),
        )

    async def _count(self, filter: Filter | None, column: str = "*") -> int:
        query = self._table().select(column, count=CountMethod.exact, head=True)
        query = apply_filter(query, filter)
        response = await query.execute()
        return response.count or 0

    @log_query("exists")
    async def exists(self, filter: Filter) -> bool:
        """주어진 조건에 일치하는 레코드가 존재하는지 확인합니다.

        Check whether any record matches the filter.
        """
        return await self._count(filter, column="id") > 0

    @log_query("count")
    async def count(self, filter: Filter | None = None) -> int:
        """조건에 일치하는 레코드 수를 반환합니다.

        Count records matching the filter (all records when None).
        """
        return await self._count(filter)

    # ── CREATE ────────────────────────────────────────────

    @log_query("create")
    async def create(self, data: Payload) -> ModelType:
        """새 레코드를 생성합니다.

        Insert one record and return it as stored.

        Args:
            data: 생성할 레코드 데이터 (Data for the new record)

        Returns:
            ModelType: 생성된 레코드 (The created record)
        """
        response = await self._table().insert(self._to_payload(data)).execute()
        return self._single(response.data)

    @log_query("create_many")
    async def create_many(self, records: Sequence[Payload]) -> list[ModelType]:
        """여러 레코드를 한 번의 요청으로 생성합니다.

        Insert many records in a single request.
        """
        if not records:
            return []
        payload = [self._to_payload(record) for record in records]
        response = await self._table().insert(payload).execute()
        return self._to_entities(response.data)

    # ── UPDATE ────────────────────────────────────────────

    @log_query("update")
    async def update(self, record_id: RecordId, data: Payload) -> ModelType:
        """기존 레코드를 업데이트합니다.

        Update the record with the given id and return it.

        Args:
            record_id: 업데이트할 레코드 ID (Id of the record to update)
            data: 업데이트할 필드와 값 (Fields and values to update)

        Returns:
            ModelType: 업데이트된 레코드 (The updated record)

        Raises:
            RecordNotFoundError: 해당 ID의 레코드가 없을 때 (No record has this id)
        """
        response = await self._table().update(self._to_payload(data)).eq("id", record_id).execute()
        return self._single(response.data, record_id)

    @log_query("update_many")
    async def update_many(self, records: Sequence[Payload]) -> list[ModelType]:
        """여러 레코드를 하나씩 순차적으로 업데이트합니다.

        Update records one at a time, in order. Not atomic: a failure stops
        the loop and leaves earlier updates applied.

        Args:
            records: 각각 "id"를 포함한 업데이트 데이터 목록
                     (Update payloads, each carrying its "id")

        Returns:
            list[ModelType]: 입력 순서대로 업데이트된 레코드 (Updated records, input order)
        """
        results: list[ModelType] = []
        for record in records:
            update_data = self._to_payload(record)
            if "id" not in update_data:
                raise ValueError(f"update_many record for {self._table_name} has no 'id'")
            record_id = update_data.pop("id")
            results.append(await self.update(record_id, update_data))
        return results

    @log_query("upsert")
    async def upsert(self, data: Payload, conflict_columns: Sequence[str]) -> ModelType:
        """충돌 컬럼 기준으로 삽입 또는 업데이트합니다.

        Insert or update one record, detecting existing rows by the conflict columns.

        Args:
            data: 레코드 데이터 (Record data)
            conflict_columns: 충돌 판단 컬럼 목록 (Columns forming the conflict target)

        Returns:
            ModelType: 삽입 또는 업데이트된 레코드 (Inserted or updated record)
        """
        if not conflict_columns:
            raise ValueError("upsert requires at least one conflict column")
        response = await (
            self._table()
            .upsert(self._to_payload(data), on_conflict=",".join(conflict_columns))
            .execute()
        )
        return self._single(response.data)

    # ── DELETE ────────────────────────────────────────────

    @log_query("delete")
    async def delete(self, record_id: RecordId) -> None:
        """레코드를 삭제합니다. 없는 ID는 오류가 아닙니다.

        Delete the record with the given id; a missing id is not an error.
        """
        await self._table().delete().eq("id", record_id).execute()

    @log_query("delete_many")
    async def delete_many(self, ids: Sequence[RecordId]) -> None:
        """여러 레코드를 ID 목록으로 삭제합니다.

        Delete every record whose id is in ids.
        """
        if not ids:
            return
        await self._table().delete().in_("id", list(ids)).execute()

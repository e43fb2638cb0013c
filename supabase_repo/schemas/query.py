"""조회 옵션 Pydantic 스키마 정의.

Query option schemas passed to BaseRepository.find / find_paginated / count.
A filter is either a function refining the Supabase query builder, or a
{column: value} mapping applied as equality filters.
"""

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, Field

from supabase_repo.config import settings

# 쿼리 빌더를 받아 필터가 적용된 빌더를 반환하는 함수
# Function receiving the query builder and returning the filtered builder
FilterFunction = Callable[[Any], Any]

# 필터 함수 또는 {컬럼: 값} 동등 조건 매핑 — Filter function or equality mapping
Filter = FilterFunction | dict[str, Any]


class OrderBy(BaseModel):
    """정렬 조건 스키마.

    Single ordering clause.

    Attributes:
        column: 정렬 컬럼 이름 (Column to order by)
        ascending: 오름차순 여부 (Ascending when True, descending otherwise)
    """

    model_config = {"extra": "forbid"}

    column: str  # 정렬 컬럼 (Column name)
    ascending: bool = True  # 기본 오름차순 (Ascending by default)


class FindOptions(BaseModel):
    """목록 조회 옵션 스키마.

    Options for BaseRepository.find. The filter is applied before the
    orderings; orderings are applied in the order given.

    Attributes:
        filter: 필터 함수 또는 동등 조건 매핑 (Filter function or equality mapping)
        order_by: 정렬 조건 하나 또는 목록 (One ordering clause or a list of them)
    """

    model_config = {"extra": "forbid"}

    filter: Filter | None = None
    order_by: OrderBy | list[OrderBy] | None = None


class FindPaginatedOptions(FindOptions):
    """페이지네이션 조회 옵션 스키마.

    Options for BaseRepository.find_paginated.

    Attributes:
        page: 요청 페이지 번호, 1부터 시작 (Page number, 1-indexed)
        page_size: 페이지당 항목 수 (Items per page)
    """

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default_factory=lambda: settings.DEFAULT_PAGE_SIZE, ge=1)

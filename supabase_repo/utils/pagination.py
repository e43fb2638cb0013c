"""페이지네이션 유틸리티 모듈.

Pagination utility module for Supabase range queries.
Provides the offset / page-count arithmetic and the result models
returned by BaseRepository.find_paginated.
"""

import math
from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Pagination(BaseModel):
    """페이지네이션 메타데이터 모델.

    Pagination metadata for client-side pagination controls.

    Attributes:
        page: 현재 페이지 번호 (Current page number, 1-based)
        page_size: 페이지당 항목 수 (Items per page)
        total_count: 전체 항목 수 (Total count across all pages)
        total_pages: 전체 페이지 수 (Total number of pages)
    """

    page: int  # 현재 페이지 번호 — 1부터 시작 (Current page, 1-indexed)
    page_size: int  # 페이지당 항목 수 (Items per page)
    total_count: int  # 전체 항목 수 (Total item count)
    total_pages: int  # 전체 페이지 수 (ceil(total_count / page_size))


class PaginatedResult(BaseModel, Generic[T]):
    """페이지네이션 결과 모델.

    A page of items plus its pagination metadata.
    """

    items: list[T]  # 현재 페이지 항목 목록 (Items for the current page)
    pagination: Pagination


def page_offset(page: int, page_size: int) -> int:
    """페이지 번호를 0부터 시작하는 행 오프셋으로 변환합니다.

    Convert a 1-based page number to a 0-based row offset.
    """
    return (page - 1) * page_size


def page_range(page: int, page_size: int) -> tuple[int, int]:
    """페이지의 행 범위(start, end)를 양 끝 포함으로 반환합니다.

    Inclusive (start, end) row range for a page, as PostgREST expects.
    """
    start = page_offset(page, page_size)
    return start, start + page_size - 1


def total_pages(total_count: int, page_size: int) -> int:
    """전체 페이지 수 — ceil(total_count / page_size), 항목이 없으면 0.

    Number of pages needed for total_count items; 0 when there are none.
    """
    return math.ceil(total_count / page_size)

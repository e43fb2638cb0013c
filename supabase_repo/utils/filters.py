"""쿼리 빌더 조합 유틸리티.

Helpers composing filters and orderings onto a Supabase (PostgREST)
query builder. Every helper returns the refined builder; builders are
never executed here.
"""

from collections.abc import Mapping
from typing import Any

from supabase_repo.schemas.query import Filter, OrderBy


def apply_filter(query: Any, filter: Filter | None) -> Any:
    """필터 함수 또는 동등 조건 매핑을 쿼리에 적용합니다.

    Apply a filter to a query builder.

    A callable receives the builder and must return the refined builder.
    A mapping is applied column by column: None becomes ``is null``,
    lists/tuples/sets become ``in``, anything else becomes ``eq``.

    Args:
        query: PostgREST 쿼리 빌더 (PostgREST query builder)
        filter: 필터 함수, 매핑 또는 None (Filter function, mapping or None)

    Returns:
        필터가 적용된 쿼리 빌더 (Refined query builder)
    """
    if filter is None:
        return query
    if callable(filter):
        return filter(query)
    if isinstance(filter, Mapping):
        for column, value in filter.items():
            if value is None:
                query = query.is_(column, "null")
            elif isinstance(value, (list, tuple, set, frozenset)):
                query = query.in_(column, list(value))
            else:
                query = query.eq(column, value)
        return query
    raise TypeError(f"Unsupported filter type: {type(filter).__name__}")


def apply_order_by(query: Any, order_by: OrderBy | list[OrderBy] | None) -> Any:
    """정렬 조건을 주어진 순서대로 적용합니다.

    Apply one or more orderings, in the order given.
    """
    if order_by is None:
        return query
    orderings = order_by if isinstance(order_by, list) else [order_by]
    for order in orderings:
        query = query.order(order.column, desc=not order.ascending)
    return query

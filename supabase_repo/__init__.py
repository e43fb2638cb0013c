"""Supabase 레포지토리 래퍼 패키지.

Generic async repository wrapper around the Supabase client.
"""

from supabase_repo.repositories.base import BaseRepository
from supabase_repo.schemas.query import FilterFunction, FindOptions, FindPaginatedOptions, OrderBy
from supabase_repo.utils.exceptions import RecordNotFoundError, RepositoryError
from supabase_repo.utils.pagination import PaginatedResult, Pagination

__all__ = [
    "BaseRepository",
    "FilterFunction",
    "FindOptions",
    "FindPaginatedOptions",
    "OrderBy",
    "PaginatedResult",
    "Pagination",
    "RecordNotFoundError",
    "RepositoryError",
]

"""레포지토리 예외 클래스 모듈.

Repository exception classes module.
Errors raised by the Supabase client (postgrest APIError, httpx transport
errors) are never wrapped; these classes only cover results the client
reports as success but the repository cannot honour.

Usage:
    from supabase_repo.utils.exceptions import RecordNotFoundError
    raise RecordNotFoundError("users", record_id)
"""

from typing import Any


class RepositoryError(Exception):
    """레포지토리 계층 예외의 기본 클래스.

    Base class for errors raised by the repository layer itself.
    """


class RecordNotFoundError(RepositoryError, LookupError):
    """대상 레코드가 없을 때 발생 — 업데이트/업서트 결과가 비어 있는 경우.

    Raised when a write that must return a row (update, upsert) returns none,
    typically because no row has the requested id.

    Args:
        table_name: 테이블 이름 (Table that was written)
        record_id: 요청한 레코드 ID (Requested record id, if any)
    """

    def __init__(self, table_name: str, record_id: Any = None) -> None:
        self.table_name = table_name
        self.record_id = record_id
        if record_id is None:
            message = f"No row returned from {table_name}"
        else:
            message = f"No row with id {record_id!r} in {table_name}"
        super().__init__(message)

"""사용자 행 모델.

User row model for the ``users`` table, used by UserRepository.
"""

from datetime import datetime

from pydantic import BaseModel


class User(BaseModel):
    """사용자 테이블 행 — users table row.

    id is assigned by the database; leave it unset when creating.
    """

    id: str | None = None  # 사용자 UUID 문자열 (User UUID as string)
    email: str
    name: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None  # soft delete 시각 (Soft-delete timestamp)

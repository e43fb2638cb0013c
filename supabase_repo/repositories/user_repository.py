"""사용자 레포지토리 — 사용자 CRUD 및 관련 쿼리.

User Repository — CRUD and related queries for users.
Extends BaseRepository with user lookups by email and soft-delete aware listing.
"""

from supabase import AsyncClient

from supabase_repo.models.user import User
from supabase_repo.repositories.base import BaseRepository
from supabase_repo.schemas.query import OrderBy


class UserRepository(BaseRepository[User]):
    """users 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling queries for the users table.
    """

    def __init__(self, client: AsyncClient) -> None:
        super().__init__("users", client, model=User)

    async def find_by_email(self, email: str) -> User | None:
        """이메일로 사용자를 조회합니다.

        Retrieve the first user with the given email.

        Args:
            email: 사용자 이메일 (User email)

        Returns:
            User | None: 조회된 사용자 또는 None (Found user or None)
        """
        users = await self.find(filter={"email": email})
        return users[0] if users else None

    async def find_active_users(self) -> list[User]:
        """삭제되지 않은 사용자를 최신순으로 조회합니다.

        Retrieve users that are not soft-deleted, newest first.
        """
        return await self.find(
            filter=lambda query: query.is_("deleted_at", "null"),
            order_by=OrderBy(column="created_at", ascending=False),
        )

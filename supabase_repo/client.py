"""Supabase 클라이언트 생성 모듈.

Supabase client factory module.
Builds the async Supabase client from settings. Repositories receive the
client through their constructor, so applications may also build and
inject their own.
"""

from supabase import AsyncClient, AsyncClientOptions, acreate_client

from supabase_repo.config import settings

# 프로세스 전역 클라이언트 캐시 — Process-wide client cache used by get_client()
_client: AsyncClient | None = None


async def create_supabase_client(
    url: str | None = None,
    key: str | None = None,
) -> AsyncClient:
    """설정값으로 새 비동기 Supabase 클라이언트를 생성합니다.

    Create a new async Supabase client.

    Args:
        url: 프로젝트 URL, None이면 settings.SUPABASE_URL 사용
             (Project URL; defaults to settings.SUPABASE_URL)
        key: API 키, None이면 settings.SUPABASE_KEY 사용
             (API key; defaults to settings.SUPABASE_KEY)

    Returns:
        AsyncClient: 새 Supabase 비동기 클라이언트 (New async client)
    """
    options = AsyncClientOptions(
        schema=settings.SUPABASE_SCHEMA,
        postgrest_client_timeout=settings.POSTGREST_TIMEOUT,
    )
    return await acreate_client(
        url or settings.SUPABASE_URL,
        key or settings.SUPABASE_KEY,
        options=options,
    )


async def get_client() -> AsyncClient:
    """프로세스당 하나의 클라이언트를 반환합니다.

    Return the shared client, creating it on first use.
    """
    global _client
    if _client is None:
        _client = await create_supabase_client()
    return _client

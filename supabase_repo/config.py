"""라이브러리 환경 설정 모듈.

Library configuration module using pydantic-settings.
All settings can be overridden via environment variables or a .env file.
"""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings

# .env 파일 절대 경로 — CWD와 무관하게 항상 프로젝트 루트의 .env를 참조
# Absolute path to .env file — ensures correct loading regardless of CWD
_ENV_FILE: Path = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    """라이브러리 전역 설정 — 환경 변수 기반 구성.

    Global settings loaded from environment variables.
    Uses pydantic-settings for automatic env var parsing and .env file support.

    Attributes:
        SUPABASE_URL: Supabase 프로젝트 URL (Supabase project URL)
        SUPABASE_KEY: Supabase API 키 (anon or service-role API key)
        SUPABASE_SCHEMA: 조회 대상 Postgres 스키마 (Postgres schema exposed by PostgREST)
        POSTGREST_TIMEOUT: PostgREST 요청 타임아웃(초) (PostgREST request timeout in seconds)
        DEFAULT_PAGE_SIZE: 기본 페이지 크기 (Default page size for paginated queries)
        LOG_LEVEL: 쿼리 로거 레벨 (Level of the query logger)
        LOG_QUERY_PAYLOADS: 쿼리 페이로드 로깅 여부 (Include masked payloads in query logs)
    """

    # Supabase 연결 설정 — Supabase connection settings
    SUPABASE_URL: str = "http://localhost:54321"  # 로컬 supabase start 기본 주소 (Local dev stack)
    SUPABASE_KEY: str = ""  # 운영 환경에서 반드시 설정 (MUST be set outside local dev)
    SUPABASE_SCHEMA: str = "public"
    POSTGREST_TIMEOUT: int = 120

    # 페이지네이션 — Pagination defaults
    DEFAULT_PAGE_SIZE: int = 20

    # 로깅 설정 — Query logging settings
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_QUERY_PAYLOADS: bool = False  # True이면 마스킹된 요청 데이터도 기록 (Logs masked payloads when True)

    # Axiom 로깅 설정 — Axiom observability platform settings
    AXIOM_API_TOKEN: str = ""  # Axiom API 토큰 (API token from Axiom dashboard)
    AXIOM_DATASET: str = ""  # Axiom 데이터셋 이름 (Dataset name for query logs)

    model_config = {"env_file": _ENV_FILE, "env_file_encoding": "utf-8", "extra": "ignore"}


# 전역 설정 싱글턴 인스턴스 — Global settings singleton instance
settings: Settings = Settings()

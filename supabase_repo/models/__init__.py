"""행 모델 패키지 — Pydantic row models."""

from supabase_repo.models.user import User

__all__ = ["User"]

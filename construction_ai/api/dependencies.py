"""FastAPI dependencies."""

from functools import lru_cache

from fastapi import Header, HTTPException

from construction_ai.core.config import AppConfig, get_config


@lru_cache
def get_cached_config() -> AppConfig:
    """Get cached application config."""
    return get_config()


async def get_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Caller identity, supplied by the fronting auth layer as ``X-User-Id``."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id.strip()

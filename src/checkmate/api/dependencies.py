"""
FastAPI dependency injection for the check service.
"""

from functools import lru_cache

from checkmate.config import Settings, settings


@lru_cache()
def get_settings() -> Settings:
    """
    Get settings singleton.

    Returns:
        Settings instance
    """
    return settings

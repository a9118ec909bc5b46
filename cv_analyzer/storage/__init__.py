from functools import lru_cache

from cv_analyzer.core.config import settings

from .cv_store import CVStore, CVStoreError, SqliteCVStore


@lru_cache(maxsize=1)
def get_cv_store() -> SqliteCVStore:
    return SqliteCVStore(settings.cv_db_path)


__all__ = ["CVStore", "CVStoreError", "SqliteCVStore", "get_cv_store"]

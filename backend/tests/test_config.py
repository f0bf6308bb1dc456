"""
Quill Backend — Configuration & Store Factory Tests
====================================================
"""

import pytest
from pydantic import ValidationError as SettingsValidationError

from app.config import Settings
from app.dependencies import create_post_store
from app.services.memory_post_store import InMemoryPostStore
from app.services.sql_post_store import SQLAlchemyPostStore


class TestSettings:

    def test_log_level_is_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(SettingsValidationError):
            Settings(log_level="LOUD")

    def test_blank_database_url_rejected(self):
        with pytest.raises(SettingsValidationError):
            Settings(database_url="  ")

    def test_cors_origins_split(self):
        config = Settings(cors_origins="http://a.test, http://b.test,")

        assert config.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_memory_store_flag(self):
        assert Settings(database_url="memory://").uses_memory_store
        assert not Settings(database_url="postgresql+asyncpg://u:p@h/db").uses_memory_store


class TestCreatePostStore:

    @pytest.mark.asyncio
    async def test_memory_url_selects_memory_store(self):
        store = create_post_store(Settings(database_url="memory://"))

        assert isinstance(store, InMemoryPostStore)

    @pytest.mark.asyncio
    async def test_sql_url_selects_sqlalchemy_store(self, sqlite_url):
        store = create_post_store(Settings(database_url=sqlite_url, db_create_tables=True))

        try:
            assert isinstance(store, SQLAlchemyPostStore)
            assert store.create_tables is True
        finally:
            await store.close()

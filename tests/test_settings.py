"""Tests for task_api/config/settings.py."""

from task_api.config.settings import get_settings


class TestSettings:

    def test_defaults(self, override_settings, monkeypatch):
        for var in ("TASK_STORE_BACKEND", "DYNAMODB_TABLE_NAME", "LOG_LEVEL", "AUDIT_LOG_FILE"):
            monkeypatch.delenv(var, raising=False)
        override_settings()
        s = get_settings()
        assert s.task_store_backend == "memory"
        assert s.dynamodb_table_name == "tasks"
        assert s.log_level == "INFO"
        assert s.audit_log_file == ""

    def test_env_override(self, override_settings):
        override_settings(
            TASK_STORE_BACKEND="dynamodb",
            DYNAMODB_TABLE_NAME="todo",
            LOG_LEVEL="DEBUG",
        )
        s = get_settings()
        assert s.task_store_backend == "dynamodb"
        assert s.dynamodb_table_name == "todo"
        assert s.log_level == "DEBUG"

    def test_cached(self, override_settings):
        override_settings()
        assert get_settings() is get_settings()

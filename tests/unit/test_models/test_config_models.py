"""Unit tests for configuration models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from rgnotify.models.config import (
    AppConfig,
    DEFAULT_HISTORY_FILE,
    LoggingSettings,
    NotifierSettings,
)


class TestNotifierSettings:
    """Tests for NotifierSettings."""

    def test_defaults_never_suppress(self) -> None:
        settings = NotifierSettings()

        assert settings.days_to_wait == 0
        assert settings.suppression_enabled is False
        assert settings.history.path == DEFAULT_HISTORY_FILE
        assert settings.history.fail_on_corrupt is False
        assert settings.notifications == []

    def test_negative_days_disable_suppression(self) -> None:
        assert NotifierSettings(days_to_wait=-1).suppression_enabled is False
        assert NotifierSettings(days_to_wait=1).suppression_enabled is True

    def test_reply_to_defaults_to_sender(self) -> None:
        settings = NotifierSettings(sender="monitor@example.com")

        assert settings.effective_reply_to == "monitor@example.com"

    def test_explicit_reply_to(self) -> None:
        settings = NotifierSettings(
            sender="monitor@example.com", reply_to="ops@example.com"
        )

        assert settings.effective_reply_to == "ops@example.com"

    @pytest.mark.parametrize("value", ["", "   ", "${RGNOTIFY_SENDER}"])
    def test_unset_addresses_become_none(self, value: str) -> None:
        settings = NotifierSettings(sender=value, reply_to=value)

        assert settings.sender is None
        assert settings.reply_to is None

    def test_notifications_parsed(self) -> None:
        settings = NotifierSettings(
            notifications=[
                {"name": "alerts", "subject_prefix": "Disk Full:", "recipients": "a@x.com"}
            ]
        )

        assert settings.notifications[0].name == "alerts"
        assert settings.notifications[0].recipients == frozenset({"a@x.com"})

    def test_duplicate_notification_names_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            NotifierSettings(notifications=[{"name": "a"}, {"name": "a"}])

        assert "Duplicate notification name" in str(exc_info.value)

    def test_history_path_coerced(self) -> None:
        settings = NotifierSettings(history={"path": "data/h.json"})

        assert settings.history.path == Path("data/h.json")


class TestLoggingSettings:
    """Tests for LoggingSettings."""

    def test_level_upper_cased(self) -> None:
        assert LoggingSettings(level="debug").level == "DEBUG"

    def test_invalid_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LoggingSettings(level="verbose")


def test_app_config_defaults() -> None:
    config = AppConfig()

    assert config.notifier.days_to_wait == 0
    assert config.logging.json_output is True

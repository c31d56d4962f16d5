"""Unit tests for PaperlessSettings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from paperless_mcp.config.settings import PaperlessSettings


class TestDefaults:
    def test_defaults_applied(self) -> None:
        settings = PaperlessSettings()  # type: ignore[call-arg]
        assert settings.api_version == 9
        assert settings.max_page_size == 100
        assert settings.host == "0.0.0.0"
        assert settings.port == 5000
        assert settings.max_retries == 3
        assert settings.upload_max_retries == 3
        assert settings.request_timeout_seconds == 30.0
        assert settings.upload_timeout_seconds == 300.0

    def test_reads_connection_from_env(self) -> None:
        settings = PaperlessSettings()  # type: ignore[call-arg]
        assert settings.base_url == "http://paperless.test"
        assert settings.api_token == "test-token-123"


class TestAliases:
    def test_short_env_names_accepted(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("PAPERLESS_BASE_URL", raising=False)
        monkeypatch.delenv("PAPERLESS_API_TOKEN", raising=False)
        monkeypatch.setenv("PAPERLESS_URL", "https://docs.example.com")
        monkeypatch.setenv("PAPERLESS_TOKEN", "abc")

        settings = PaperlessSettings()  # type: ignore[call-arg]

        assert settings.base_url == "https://docs.example.com"
        assert settings.api_token == "abc"

    def test_tunables_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_PAGE_SIZE", "50")
        monkeypatch.setenv("MCP_HOST", "127.0.0.1")
        monkeypatch.setenv("MCP_PORT", "8080")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        settings = PaperlessSettings()  # type: ignore[call-arg]

        assert settings.max_page_size == 50
        assert settings.host == "127.0.0.1"
        assert settings.port == 8080
        assert settings.log_level == "DEBUG"


class TestValidation:
    def test_trailing_slash_stripped(self) -> None:
        settings = PaperlessSettings(base_url="http://host:8000/", api_token="t")
        assert settings.base_url == "http://host:8000"

    def test_scheme_required(self) -> None:
        with pytest.raises(ValidationError):
            PaperlessSettings(base_url="paperless.local", api_token="t")

    def test_empty_token_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PaperlessSettings(base_url="http://host", api_token="")

    def test_missing_token_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("PAPERLESS_API_TOKEN", raising=False)
        monkeypatch.delenv("PAPERLESS_TOKEN", raising=False)
        with pytest.raises(ValidationError):
            PaperlessSettings()  # type: ignore[call-arg]

    def test_settings_are_frozen(self) -> None:
        settings = PaperlessSettings()  # type: ignore[call-arg]
        with pytest.raises(ValidationError):
            settings.max_page_size = 5  # type: ignore[misc]

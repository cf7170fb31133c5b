from __future__ import annotations

import pytest

from httprpc.config import ServerSettings


class TestServerSettings:
    def test_defaults(self) -> None:
        settings = ServerSettings()

        assert settings.warn_on_duplicate is True
        assert settings.strict_errors is False
        assert settings.mount_path == "/rpc"

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HTTPRPC_PORT", "9001")
        monkeypatch.setenv("HTTPRPC_STRICT_ERRORS", "true")
        monkeypatch.setenv("HTTPRPC_WARN_ON_DUPLICATE", "0")
        monkeypatch.setenv("HTTPRPC_MOUNT_PATH", "/api")

        settings = ServerSettings.from_env()

        assert settings.port == 9001
        assert settings.strict_errors is True
        assert settings.warn_on_duplicate is False
        assert settings.mount_path == "/api"

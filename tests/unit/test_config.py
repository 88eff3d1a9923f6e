"""
Client settings validation and timeout resolution.

Run with: pytest tests/unit/test_config.py -v
"""

import pytest

from core.config import (
    ClientSettings,
    build_settings,
    resolve_timeouts,
)
from core.errors import ConfigurationError


def _settings(**overrides):
    values = {"base_url": "https://1.2.3.4:8443", "idpv": "2", "passkey": "secret"}
    values.update(overrides)
    return build_settings(_env_file=None, **values)


class TestBaseUrl:
    def test_valid_url_is_kept_without_trailing_slash(self):
        settings = _settings(base_url="https://1.2.3.4:8443/")
        assert settings.base_url == "https://1.2.3.4:8443"

    @pytest.mark.parametrize("url", ["not a url", "", "1.2.3.4:8443", "ftp://host/path"])
    def test_invalid_url_raises_configuration_error(self, url):
        with pytest.raises(ConfigurationError) as exc_info:
            _settings(base_url=url)
        assert "base_url" in exc_info.value.message

    def test_client_construction_with_bad_url_raises(self):
        from adapters.cinebot_client import CinebotClient

        with pytest.raises(ConfigurationError):
            CinebotClient("not a url", "2", "secret")


class TestSettings:
    def test_numeric_idpv_is_coerced_to_text(self):
        assert _settings(idpv=2).idpv == "2"

    def test_tls_verification_is_off_by_default(self):
        assert _settings().verify_tls is False

    def test_passkey_is_secret(self):
        settings = _settings()
        assert "secret" not in repr(settings)
        assert settings.passkey.get_secret_value() == "secret"

    def test_settings_are_immutable(self):
        settings = _settings()
        with pytest.raises(Exception):
            settings.base_url = "https://other"

    def test_non_positive_timeout_rejected(self):
        with pytest.raises(ConfigurationError):
            _settings(timeout_seconds=0)

    def test_loaded_from_environment(self, monkeypatch):
        monkeypatch.setenv("CINEBOT_BASE_URL", "http://cassa.local:8080")
        monkeypatch.setenv("CINEBOT_IDPV", "7")
        monkeypatch.setenv("CINEBOT_PASSKEY", "pw")
        monkeypatch.setenv("CINEBOT_TIMEOUT_SECONDS", "12")

        settings = ClientSettings(_env_file=None)

        assert settings.base_url == "http://cassa.local:8080"
        assert settings.idpv == "7"
        assert settings.timeout_seconds == 12

    def test_loaded_from_project_dotenv(self, tmp_path):
        (tmp_path / ".env").write_text(
            "CINEBOT_BASE_URL=https://cassa.local:8443\nCINEBOT_IDPV=3\nCINEBOT_PASSKEY=pw\n",
            encoding="utf-8",
        )

        settings = build_settings()

        assert settings.base_url == "https://cassa.local:8443"
        assert settings.idpv == "3"


class TestResolveTimeouts:
    def test_override_wins_over_configured(self):
        assert resolve_timeouts(_settings(timeout_seconds=10), 5) == (5.0, 5.0)

    def test_configured_timeout_used_without_override(self):
        assert resolve_timeouts(_settings(timeout_seconds=10)) == (10.0, 10.0)

    def test_hard_defaults_when_nothing_configured(self):
        assert resolve_timeouts(_settings()) == (30.0, 10.0)

    def test_connect_timeout_configured_separately(self):
        settings = _settings(timeout_seconds=20, connect_timeout_seconds=3)
        assert resolve_timeouts(settings) == (20.0, 3.0)

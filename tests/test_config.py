from unittest.mock import patch

import pytest

from app.core.config import ConfigurationWarning, Settings, SettingsValidationError


def test_defaults():
    with patch.dict("os.environ", {}, clear=True):
        s = Settings()
    assert s.COINGECKO_API_KEY is None
    assert s.COINGECKO_API_HOST == "https://api.coingecko.com/api/v3"
    assert s.COINGECKO_API_KEY_HEADER == "x-cg-demo-api-key"
    assert s.HTTP_TIMEOUT_SEC == 10.0
    assert s.API_PORT == 3000
    assert s.MCP_JSON_RESPONSE is False


def test_missing_key_is_only_a_warning():
    with patch.dict("os.environ", {}, clear=True):
        warnings = Settings().config_warnings()
    assert len(warnings) == 1
    assert isinstance(warnings[0], ConfigurationWarning)


def test_key_present_means_no_warnings():
    with patch.dict("os.environ", {"COINGECKO_API_KEY": "abc"}, clear=True):
        s = Settings()
    assert s.config_warnings() == []
    assert s.to_dict()["COINGECKO_API_KEY"] == "***REDACTED***"


def test_port_env_precedence():
    with patch.dict("os.environ", {"PORT": "8080", "API_PORT": "9090"}, clear=True):
        assert Settings().API_PORT == 8080
    with patch.dict("os.environ", {"API_PORT": "9090"}, clear=True):
        assert Settings().API_PORT == 9090


def test_host_trailing_slash_stripped():
    with patch.dict("os.environ", {"COINGECKO_API_HOST": "https://pro-api.coingecko.com/api/v3/"}, clear=True):
        assert Settings().COINGECKO_API_HOST == "https://pro-api.coingecko.com/api/v3"


def test_invalid_port_rejected():
    with patch.dict("os.environ", {"PORT": "70000"}, clear=True):
        with pytest.raises(SettingsValidationError):
            Settings()


def test_invalid_host_rejected():
    with patch.dict("os.environ", {"COINGECKO_API_HOST": "ftp://example"}, clear=True):
        with pytest.raises(SettingsValidationError):
            Settings()

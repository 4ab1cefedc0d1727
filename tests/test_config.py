from pathlib import Path

import pytest

from sjlibwatcher.config import DEFAULT_TARGET_URL, Settings
from sjlibwatcher.errors import ConfigError


def test_settings_defaults_from_empty_environment():
    settings = Settings.from_env({})

    assert settings.api_key == ""
    assert settings.folder == Path("data")
    assert settings.target_url == DEFAULT_TARGET_URL
    assert settings.timezone == "Asia/Seoul"
    assert settings.workbook_name == "SJLib"
    assert settings.sheet_name == "Complexity"
    assert settings.fetch_timeout is None


def test_settings_reads_property_keys():
    settings = Settings.from_env(
        {
            "SCRAPERAPI_API_KEY": "  secret  ",
            "FOLDER_ID": "/srv/sjlib",
            "FETCH_TIMEOUT": "45",
        }
    )

    assert settings.api_key == "secret"
    assert settings.folder == Path("/srv/sjlib")
    assert settings.fetch_timeout == 45.0


def test_settings_reads_process_environment(monkeypatch):
    monkeypatch.setenv("SCRAPERAPI_API_KEY", "from-env")
    monkeypatch.setenv("SHEET_NAME", "Readings")

    settings = Settings.from_env()

    assert settings.api_key == "from-env"
    assert settings.sheet_name == "Readings"


@pytest.mark.parametrize("raw", ["soon", "0", "-3"])
def test_settings_rejects_bad_timeout(raw):
    with pytest.raises(ConfigError, match="FETCH_TIMEOUT"):
        Settings.from_env({"FETCH_TIMEOUT": raw})

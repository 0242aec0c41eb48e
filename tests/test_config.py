"""Settings loading tests."""

from pathlib import Path

import pytest

from qrpro.config import Settings, load_settings

VARS = [
    "QRPRO_LOG_LEVEL", "QRPRO_LOG_FILE", "QRPRO_LOG_JSON", "QRPRO_HISTORY_CAPACITY",
    "QRPRO_MIN_CONTRAST", "QRPRO_LOGO_FRACTION", "QRPRO_LOGO_MARGIN", "QRPRO_OUTPUT_DIR",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Register every variable with monkeypatch so values loaded from .env are undone."""
    for name in VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    yield


def test_defaults(tmp_path):
    settings = load_settings(tmp_path / "missing.env")
    assert settings == Settings()
    assert settings.history_capacity == 10
    assert settings.min_contrast == 3.0
    assert settings.logo_fraction == 0.2
    assert settings.logo_margin == 5


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("QRPRO_LOG_LEVEL", "debug")
    monkeypatch.setenv("QRPRO_LOG_JSON", "yes")
    monkeypatch.setenv("QRPRO_HISTORY_CAPACITY", "5")
    monkeypatch.setenv("QRPRO_MIN_CONTRAST", "4.5")
    monkeypatch.setenv("QRPRO_OUTPUT_DIR", str(tmp_path))

    settings = load_settings(tmp_path / "missing.env")

    assert settings.log_level == "DEBUG"
    assert settings.json_logs is True
    assert settings.history_capacity == 5
    assert settings.min_contrast == 4.5
    assert settings.output_dir == Path(tmp_path)


def test_dotenv_file(tmp_path):
    env = tmp_path / ".env"
    env.write_text("QRPRO_HISTORY_CAPACITY=3\nQRPRO_LOGO_MARGIN=8\n", encoding="utf-8")

    settings = load_settings(env)

    assert settings.history_capacity == 3
    assert settings.logo_margin == 8


def test_environment_wins_over_dotenv(monkeypatch, tmp_path):
    env = tmp_path / ".env"
    env.write_text("QRPRO_HISTORY_CAPACITY=3\n", encoding="utf-8")
    monkeypatch.setenv("QRPRO_HISTORY_CAPACITY", "7")
    assert load_settings(env).history_capacity == 7


@pytest.mark.parametrize("name, value", [
    ("QRPRO_HISTORY_CAPACITY", "ten"),
    ("QRPRO_HISTORY_CAPACITY", "0"),
    ("QRPRO_HISTORY_CAPACITY", "11"),
    ("QRPRO_HISTORY_CAPACITY", "50"),
    ("QRPRO_MIN_CONTRAST", "high"),
    ("QRPRO_LOGO_FRACTION", "1.5"),
])
def test_invalid_values(monkeypatch, tmp_path, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError, match="QRPRO_"):
        load_settings(tmp_path / "missing.env")

import logging
import os

import pytest

from config import RAW_LOGGER_NAME, Settings, configure_logging


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("PORT", "CORS_ORIGINS", "APP_ENV", "OPENAI_API_KEY", "API_SECRET_KEY", "RATE_LIMIT_MAX", "MODEL_TIMEOUT_SECS"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = Settings.from_env(env_file=None)
    assert settings.port == 3000
    assert settings.rate_limit_window_secs == 900
    assert settings.rate_limit_max == 100
    assert settings.api_secret_key is None
    assert not settings.is_production


def test_reads_environment(clean_env):
    clean_env.setenv("PORT", "8080")
    clean_env.setenv("APP_ENV", "Production")
    clean_env.setenv("RATE_LIMIT_MAX", "5")
    clean_env.setenv("MODEL_TIMEOUT_SECS", "2.5")
    clean_env.setenv("API_SECRET_KEY", "s3cret")
    settings = Settings.from_env(env_file=None)
    assert settings.port == 8080
    assert settings.is_production
    assert settings.rate_limit_max == 5
    assert settings.model_timeout_secs == 2.5
    assert settings.api_secret_key == "s3cret"


def test_blank_values_count_as_unset(clean_env):
    clean_env.setenv("OPENAI_API_KEY", "   ")
    assert Settings.from_env(env_file=None).openai_api_key is None


def test_dotenv_file_does_not_override_environment(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("PORT=9000\nAPI_SECRET_KEY=from-file\n")
    clean_env.setenv("PORT", "7000")
    try:
        settings = Settings.from_env(env_file=str(env_file))
    finally:
        os.environ.pop("API_SECRET_KEY", None)
    assert settings.port == 7000
    assert settings.api_secret_key == "from-file"


def test_raw_log_file(tmp_path):
    path = tmp_path / "logs" / "raw.txt"
    raw_logger = logging.getLogger(RAW_LOGGER_NAME)
    old_handlers = list(raw_logger.handlers)
    for h in old_handlers:
        raw_logger.removeHandler(h)
    try:
        configure_logging(Settings(raw_log_path=str(path)))
        raw_logger.info("----CALL----\nhello")
        for h in raw_logger.handlers:
            h.flush()
        assert "hello" in path.read_text(encoding="utf-8")
    finally:
        for h in list(raw_logger.handlers):
            raw_logger.removeHandler(h)
            h.close()
        for h in old_handlers:
            raw_logger.addHandler(h)


def test_cors_origins_split_on_commas(clean_env):
    clean_env.setenv("CORS_ORIGINS", "https://a.example, https://b.example,")
    settings = Settings.from_env(env_file=None)
    assert settings.cors_origins == ["https://a.example", "https://b.example"]
    assert Settings().cors_origins == ["*"]
    assert Settings(cors_origins=" , ").cors_origins == ["*"]

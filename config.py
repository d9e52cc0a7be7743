import logging
import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

VERSION = "1.0.0"

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
RAW_LOGGER_NAME = "bantuhealth.raw"

# env var -> Settings field
_ENV_FIELDS = {
    "HOST": "host",
    "PORT": "port",
    "APP_ENV": "app_env",
    "OPENAI_API_KEY": "openai_api_key",
    "MODEL_NAME": "model_name",
    "MODEL_TEMPERATURE": "model_temperature",
    "MODEL_MAX_TOKENS": "model_max_tokens",
    "MODEL_TIMEOUT_SECS": "model_timeout_secs",
    "MODEL_MAX_RETRIES": "model_max_retries",
    "MODEL_RETRY_BACKOFF_SECS": "model_retry_backoff_secs",
    "API_SECRET_KEY": "api_secret_key",
    "RATE_LIMIT_WINDOW_SECS": "rate_limit_window_secs",
    "RATE_LIMIT_MAX": "rate_limit_max",
    "CORS_ORIGINS": "cors_origins",
    "LOG_LEVEL": "log_level",
    "RAW_LOG_PATH": "raw_log_path",
}


class Settings(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    host: str = "0.0.0.0"
    port: int = 3000
    app_env: str = "development"

    openai_api_key: Optional[str] = None
    model_name: str = "gpt-4o-mini"
    model_temperature: float = 0.0
    model_max_tokens: int = 1024
    model_timeout_secs: float = 30.0
    model_max_retries: int = 0
    model_retry_backoff_secs: float = 0.5

    # unset disables x-api-key gating
    api_secret_key: Optional[str] = None
    rate_limit_window_secs: float = 15 * 60
    rate_limit_max: int = 100

    # "*" or a comma-separated list of origins
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"
    raw_log_path: Optional[str] = None

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, v):
        if isinstance(v, str):
            v = v.split(",")
        origins = [o.strip() for o in v if o.strip()]
        return origins or ["*"]

    @property
    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    @classmethod
    def from_env(cls, env_file: Optional[str] = ".env") -> "Settings":
        """
        Build settings from the process environment. Values in `env_file`
        are loaded first but never override variables already set.
        Empty variables count as unset.
        """
        if env_file:
            load_dotenv(env_file)
        values = {}
        for name, field in _ENV_FIELDS.items():
            raw = os.getenv(name)
            if raw is not None and raw.strip():
                values[field] = raw.strip()
        return cls(**values)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)

    raw_logger = logging.getLogger(RAW_LOGGER_NAME)
    raw_logger.propagate = False
    raw_logger.setLevel(logging.INFO)
    if settings.raw_log_path and not raw_logger.handlers:
        log_dir = os.path.dirname(settings.raw_log_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handler = logging.FileHandler(settings.raw_log_path, encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(message)s"))
        raw_logger.addHandler(handler)

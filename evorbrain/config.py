"""Application configuration for EvorBrain."""

from __future__ import annotations

import os
from typing import Dict, Type

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


class BaseConfig:
    """Base configuration loaded for all environments."""

    SECRET_KEY = os.environ.get("SECRET_KEY", "change-me")

    # Directory holding the database file and logs. Empty means the Flask
    # instance folder.
    DATA_DIR = os.environ.get("EVORBRAIN_DATA_DIR", "")
    DATABASE_FILENAME = os.environ.get("DATABASE_FILENAME", "evorbrain.db")
    DB_BUSY_TIMEOUT_SECONDS = int(os.environ.get("DB_BUSY_TIMEOUT_SECONDS", "10"))
    AUTO_MIGRATE = _env_flag("AUTO_MIGRATE", "true")

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    LOG_BUFFER_SIZE = int(os.environ.get("LOG_BUFFER_SIZE", "500"))
    LOG_TO_FILE = _env_flag("LOG_TO_FILE", "true")

    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_CONTENT_LENGTH", str(2 * 1024 * 1024)))
    NOTE_SEARCH_LIMIT = 50


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    ENV = "development"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG").upper()


class TestingConfig(BaseConfig):
    TESTING = True
    ENV = "testing"
    LOG_TO_FILE = False


class ProductionConfig(BaseConfig):
    ENV = "production"


config_by_name: Dict[str, Type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    # CI pipelines set APP_ENV=ci; map to testing defaults.
    "ci": TestingConfig,
}

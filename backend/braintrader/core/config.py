"""
Configuration Settings for Braintrader

This module loads settings from config.yaml and provides them as a Pydantic settings object.
Environment variables (or a .env file) override any value from the YAML file.
"""

import os
import yaml
from typing import Any, List, Optional
from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the base directory of the project
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

PLACEHOLDER_SECRET = "CHANGE_THIS_TO_A_STRONG_SECRET"

# Load the configuration file
config_path = os.path.join(BASE_DIR, "config.yaml")
try:
    with open(config_path, "r") as file:
        yaml_config = yaml.safe_load(file) or {}
except FileNotFoundError:
    yaml_config = {}


def _section(name: str) -> dict:
    return yaml_config.get(name) or {}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Server settings
    project_name: str = "Braintrader"
    host: str = _section("server").get("host", "127.0.0.1")
    port: int = _section("server").get("port", 8000)
    debug: bool = _section("server").get("debug", False)

    # API and security
    api_prefix: str = "/api"
    secret_key: str = _section("security").get("jwt_secret", PLACEHOLDER_SECRET)
    algorithm: str = _section("security").get("jwt_algorithm", "HS256")
    access_token_expire_minutes: int = _section("security").get("jwt_expire_minutes", 60)
    cors_origins: List[str] = _section("server").get(
        "cors_origins", ["http://localhost:4200", "http://localhost:3000"]
    )

    # Database settings
    postgres_host: str = _section("database").get("postgres", {}).get("host", "localhost")
    postgres_port: int = _section("database").get("postgres", {}).get("port", 5432)
    postgres_user: str = _section("database").get("postgres", {}).get("username", "postgres")
    postgres_password: str = _section("database").get("postgres", {}).get("password", "postgres")
    postgres_db: str = _section("database").get("postgres", {}).get("database", "braintrader_db")
    sqlalchemy_database_uri: Optional[str] = Field(default=None, validate_default=True)

    redis_enabled: bool = _section("database").get("redis", {}).get("enabled", False)
    redis_host: str = _section("database").get("redis", {}).get("host", "localhost")
    redis_port: int = _section("database").get("redis", {}).get("port", 6379)
    redis_db: int = _section("database").get("redis", {}).get("db", 0)
    redis_password: Optional[str] = _section("database").get("redis", {}).get("password")

    # Journal settings
    contract_multiplier: int = _section("journal").get("contract_multiplier", 100)
    default_report_period: str = _section("journal").get("default_report_period", "monthly")
    default_instruments: List[str] = _section("journal").get(
        "default_instruments", ["XAUUSD", "EURUSD", "GBPUSD", "USDCHF", "USDJPY"]
    )
    publish_changes: bool = _section("journal").get("publish_changes", False)
    change_channel_prefix: str = _section("journal").get("change_channel_prefix", "braintrader:records")
    tip_rotation_seconds: int = _section("journal").get("tip_rotation_seconds", 10)

    # Logging settings
    log_level: str = _section("logging").get("level", "INFO")
    log_dir: str = os.path.join(BASE_DIR, _section("logging").get("dir", "logs"))
    log_file: str = _section("logging").get("file", "braintrader.log")
    log_to_file: bool = _section("logging").get("to_file", True)

    @field_validator("sqlalchemy_database_uri", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str], info: ValidationInfo) -> Any:
        if isinstance(v, str):
            return v

        values = info.data
        user = values.get("postgres_user")
        password = values.get("postgres_password")
        host = values.get("postgres_host")
        port = values.get("postgres_port")
        db = values.get("postgres_db")

        return f"postgresql://{user}:{password}@{host}:{port}/{db}"

    @property
    def secret_is_configured(self) -> bool:
        return bool(self.secret_key) and self.secret_key != PLACEHOLDER_SECRET


def get_settings() -> Settings:
    """Return the process-wide settings object"""
    return settings


settings = Settings()

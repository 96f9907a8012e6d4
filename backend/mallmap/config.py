from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Process-wide configuration, built once at startup and never mutated.

    Development and production values live side by side; ``node_env`` picks
    which pair is used through the read-only properties below.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", frozen=True)

    app_name: str = Field(default="Mall Map API")
    node_env: str = Field(default="development", description="development | production")
    api_prefix: str = "/api"

    dev_database_url: str = Field(
        default="postgresql+psycopg:///mall_map",
        description="PostgreSQL connection string (development)",
    )
    prod_database_url: str = Field(
        default="postgresql+psycopg:///mall_map",
        description="PostgreSQL connection string (production)",
    )
    dev_host: str = "http://localhost:5002"
    prod_host: str = "http://localhost:5002"
    dev_port: int = 5002
    prod_port: int = 5002

    jwt_secret: str = Field(default="change-me", description="HS256 signing secret")
    jwt_algorithm: str = "HS256"
    jwt_expires_in: int = Field(default=7 * 24 * 3600, description="token lifetime in seconds")
    session_secret: str = "default-secret"

    max_file_size: int = 10 * 1024 * 1024
    upload_dir: Path = BASE_DIR / "uploads"
    public_dir: Path = BASE_DIR / "public"

    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.node_env == "production"

    @property
    def database_url(self) -> str:
        return self.prod_database_url if self.is_production else self.dev_database_url

    @property
    def host(self) -> str:
        return self.prod_host if self.is_production else self.dev_host

    @property
    def port(self) -> int:
        return self.prod_port if self.is_production else self.dev_port


@lru_cache()
def get_settings() -> Settings:
    return Settings()

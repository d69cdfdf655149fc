# tasker/core/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

INSECURE_DEFAULT_SECRET = "change-me"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    # 기본 앱 설정
    app_env: str = Field("local", alias="APP_ENV")
    app_version: str = Field("0.1.0", alias="APP_VERSION")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # DB
    database_url: str = Field("sqlite:///./tasker.db", alias="DATABASE_URL")
    db_auto_create: bool = Field(False, alias="DB_AUTO_CREATE")
    db_statement_timeout_ms: int = Field(5000, alias="DB_STATEMENT_TIMEOUT_MS")

    # Auth
    jwt_secret_key: str = Field(INSECURE_DEFAULT_SECRET, alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    bcrypt_rounds: int = Field(10, alias="BCRYPT_ROUNDS")

    # CORS
    cors_allow_origins: str = Field("http://localhost:3000", alias="CORS_ALLOW_ORIGINS")

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]

    @property
    def uses_insecure_secret(self) -> bool:
        return self.jwt_secret_key == INSECURE_DEFAULT_SECRET


@lru_cache
def get_settings() -> Settings:
    return Settings()

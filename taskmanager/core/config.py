# taskmanager/core/config.py
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # app
    app_env: str = Field("local", alias="APP_ENV")
    app_version: str = Field("0.1.0", alias="APP_VERSION")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # bcrypt cost factor; tests lower it
    bcrypt_rounds: int = Field(12, alias="BCRYPT_ROUNDS")

    # Session token (JWT)
    jwt_secret_key: str = Field("taskmanager-secret-key", alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(60 * 24, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # Password reset
    reset_token_expire_minutes: int = Field(10, alias="RESET_TOKEN_EXPIRE_MINUTES")
    frontend_url: str = Field("http://localhost:3000", alias="FRONTEND_URL")

    # Outbound mail (HTTP API). Empty url -> reset links are only logged.
    mail_api_url: str = Field("", alias="MAIL_API_URL")
    mail_api_key: str = Field("", alias="MAIL_API_KEY")
    mail_from: str = Field("no-reply@taskmanager.local", alias="MAIL_FROM")
    mail_timeout_seconds: float = Field(10.0, alias="MAIL_TIMEOUT_SECONDS")

    cors_allow_origins: str = Field(
        "http://localhost:3000,http://localhost:5173", alias="CORS_ALLOW_ORIGINS"
    )

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def origins(self) -> list[str]:
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]


settings = Settings()

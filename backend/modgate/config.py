from __future__ import annotations
import os
from pydantic import BaseModel
from modgate.errors import ConfigError

DEFAULT_CAPTION_TEMPLATE = (
    "🌐 Server: {server}\n"
    "🚗 Car: {car}\n"
    "💰 Price: {price}\n"
    "👤 Buyer: {user_name}"
)

class Settings(BaseModel):
    environment: str = os.getenv("ENVIRONMENT", "dev")
    app_name: str = os.getenv("APP_NAME", "moderation-gateway")
    app_version: str = os.getenv("APP_VERSION", "0.1.0")
    git_sha: str = os.getenv("GIT_SHA", "dev")
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "3001"))
    cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    api_prefix: str = os.getenv("API_PREFIX", "")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Required: create_app refuses to start without these
    web_api_key: str = os.getenv("WEB_API_KEY", "")
    telegram_bot_token: str = os.getenv("TELEGRAM_BOT_TOKEN", "")
    channel_chat_id: str = os.getenv("CHANNEL_CHAT_ID", "")
    database_url: str = os.getenv("DATABASE_URL", "")

    database_ssl: str = os.getenv("DATABASE_SSL", "no-verify")  # no-verify|require|disable
    auto_create_schema: bool = os.getenv("AUTO_CREATE_SCHEMA", "1") == "1"

    telegram_api_base: str = os.getenv("TELEGRAM_API_BASE", "https://api.telegram.org")
    telegram_timeout_seconds: float = float(os.getenv("TELEGRAM_TIMEOUT_SECONDS", "15"))
    caption_template: str = os.getenv("CAPTION_TEMPLATE", DEFAULT_CAPTION_TEMPLATE)

    def missing(self) -> list[str]:
        required = {
            "WEB_API_KEY": self.web_api_key,
            "TELEGRAM_BOT_TOKEN": self.telegram_bot_token,
            "CHANNEL_CHAT_ID": self.channel_chat_id,
            "DATABASE_URL": self.database_url,
        }
        return [name for name, value in required.items() if not value]

    def ensure_complete(self) -> None:
        missing = self.missing()
        if missing:
            raise ConfigError(f"Missing required configuration: {', '.join(missing)}")

settings = Settings()

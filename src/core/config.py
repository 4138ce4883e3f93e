from datetime import datetime
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings

from src.core.env_manager import EnvManager


class Settings(BaseSettings):
    ASYNC_DATABASE_URL: str = EnvManager.get_env_variable(
        "ASYNC_DATABASE_URL", "sqlite+aiosqlite:///database.db"
    )
    SQL_ECHO: bool = EnvManager.get_bool("SQL_ECHO", False)

    PROJECT_NAME: str = EnvManager.get_env_variable("PROJECT_NAME", "Posts API")
    PROJECT_INFO: str = EnvManager.get_env_variable(
        "PROJECT_INFO", "Blog posts with soft delete, restore and publish gating"
    )
    PROJECT_VERSION: str = EnvManager.get_env_variable("PROJECT_VERSION", "1.0.0")
    TIME_ZONE: str = EnvManager.get_env_variable("TIME_ZONE", "UTC")
    LOG_LEVEL: str = EnvManager.get_env_variable("LOG_LEVEL", "INFO")

    DEFAULT_PER_PAGE: int = int(EnvManager.get_env_variable("DEFAULT_PER_PAGE", "15"))
    MAX_PER_PAGE: int = int(EnvManager.get_env_variable("MAX_PER_PAGE", "100"))

    def get_now(self):
        """Get the current time in the configured time zone."""
        tz = ZoneInfo(self.TIME_ZONE)
        return datetime.now(tz)

    def get_today(self):
        """Get the current date in the configured time zone."""
        return self.get_now().date()


settings = Settings()

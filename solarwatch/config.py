from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings, loaded from environment variables."""

    # Directories
    data_dir: Path = Path("/data")

    # Database
    db_url: str | None = None

    @property
    def database_url(self) -> str:
        if self.db_url:
            return self.db_url
        return f"sqlite+aiosqlite:///{self.data_dir / 'db' / 'solarwatch.db'}"

    # Object storage for uploaded images
    @property
    def media_dir(self) -> Path:
        return self.data_dir / "media"

    media_public_base_url: str = "/media"
    media_max_bytes: int = 12 * 1024 * 1024

    # Sessions
    session_secret: str = ""
    session_max_age: int = 86400 * 7  # seconds
    production: bool = False

    # First protected account, created only when no admin exists yet
    bootstrap_admin_username: str = "admin"
    bootstrap_admin_password: str | None = None

    # CORS, comma separated; empty allows all
    cors_origins: str = ""

    # Log level
    log_level: str = "info"

    model_config = {"env_prefix": "SOLARWATCH_", "case_sensitive": False}


settings = Settings()

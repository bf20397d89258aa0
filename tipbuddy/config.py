"""Application configuration settings."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database Configuration
    db_host: str = "localhost"
    db_port: int = 3306
    db_user: str = "sqlite"
    db_password: str = ""
    db_name: str = "tipbuddy"
    db_pool_recycle: int = 3600

    # Demo Data Configuration
    demo_user_password: str = "DemoPassword123!"
    demo_data_timezone: Optional[str] = None
    demo_refresh_hour: int = 0
    demo_refresh_minute: int = 5
    seed_demo_on_startup: bool = True

    # Application Settings
    secret_key: str = "change-me"
    debug: bool = False
    log_level: str = "INFO"
    api_prefix: str = "/api"

    # CORS Settings
    cors_origins: List[str] = []

    # Session Settings
    session_cookie_secure: bool = False
    session_cookie_httponly: bool = True
    session_cookie_samesite: str = "lax"
    session_max_age: int = 900

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    @property
    def database_url(self) -> str:
        """Construct database URL from configuration."""
        # Use SQLite if DB_USER is 'sqlite'
        if self.db_user.lower() == 'sqlite':
            return f"sqlite:///./{self.db_name}.db"
        return f"mysql+pymysql://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return not self.debug


# Global settings instance
settings = Settings()

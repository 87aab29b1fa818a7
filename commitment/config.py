"""Application configuration."""

import os

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server
    server_host: str = os.getenv("SERVER_HOST", "0.0.0.0")
    server_port: int = int(os.getenv("SERVER_PORT", "5000"))

    # Goal storage ("memory" or "sqlite")
    storage_backend: str = os.getenv("STORAGE_BACKEND", "memory")
    database_path: str = os.getenv("DATABASE_PATH", "data/goals.db")

    # Client
    api_url: str = os.getenv("API_URL", "http://localhost:5000")
    api_timeout: float = float(os.getenv("API_TIMEOUT", "10"))
    client_state_path: str = os.getenv("CLIENT_STATE_PATH", "data/client_state.json")

    # Dashboard
    dashboard_theme: str = os.getenv("DASHBOARD_THEME", "default")
    dashboard_output_dir: str = os.getenv("DASHBOARD_OUTPUT_DIR", "static/images")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        """Pydantic config."""

        env_file = ".env"
        case_sensitive = False


settings = Settings()

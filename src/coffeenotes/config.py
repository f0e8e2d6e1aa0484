from pathlib import Path

from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Server configuration loaded from environment variables."""

    database_url: str  # e.g. mongodb://localhost:27017/coffeenotes
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = []

    model_config = {
        "env_file": [".env"],
        "env_prefix": "COFFEENOTES_",
        "extra": "ignore",
    }


class ClientConfig(BaseSettings):
    """Configuration for the board client (store URL and local session storage)."""

    api_url: str = "http://localhost:8000/api/v1"
    session_file: Path = Path("~/.coffeenotes/session.json")  # Stand-in for browser local storage

    model_config = {
        "env_file": [".env"],
        "env_prefix": "COFFEENOTES_",
        "extra": "ignore",
    }

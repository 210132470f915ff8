"""
Application configuration settings
FILE: quizi/core/config.py
"""
from typing import List

from pydantic_settings import BaseSettings


# Vite preview server, always allowed alongside the configured frontend
PREVIEW_ORIGIN = "http://localhost:4173"


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # MongoDB Configuration
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_dbname: str = "quizi"
    mongo_timeout_ms: int = 5000

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 4000
    frontend_origin: str = "http://localhost:5173"
    log_level: str = "INFO"

    # Trivia provider (Open Trivia DB)
    trivia_api_url: str = "https://opentdb.com/api.php"
    trivia_question_count: int = 15
    trivia_timeout_seconds: float = 10.0

    # Quiz rules
    quiz_duration_minutes: int = 30

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "allow"

    @property
    def allowed_origins(self) -> List[str]:
        """Origins accepted by the CORS middleware"""
        return [self.frontend_origin, PREVIEW_ORIGIN]


settings = Settings()

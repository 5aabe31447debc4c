from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings
import os
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # PostgreSQL Configuration
    postgres_user: str = Field(default="admin")
    postgres_password: str = Field(default="admin")
    postgres_db: str = Field(default="dating")
    postgres_host: str = Field(default="db")
    postgres_port: int = Field(default=5432)

    # Application Configuration
    app_env: str = Field(default="dev")
    api_port: int = Field(default=8000)
    jwt_secret: str = Field(default="change-me-in-production-use-a-secure-random-string")
    jwt_algorithm: str = Field(default="HS256")
    access_token_expires: int = Field(default=900)  # 15 minutes

    # Redis (authenticated user cache)
    redis_url: str = Field(default="redis://localhost:6379/0")
    redis_pool_size: int = Field(default=10)

    # Matching & discovery
    undo_window_seconds: int = Field(default=300)
    discovery_default_limit: int = Field(default=40)
    discovery_max_limit: int = Field(default=100)
    discovery_batch_size: int = Field(default=500)

    @property
    def database_url(self) -> str:
        return f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"

    # CORS - allow frontend origins (filter out None values)
    allowed_origins: List[str] = [
        origin for origin in [
            "http://localhost:3000",
            "http://localhost:8081",   # Expo Metro
            os.getenv("FRONTEND_URL")
        ] if origin is not None
    ]

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()

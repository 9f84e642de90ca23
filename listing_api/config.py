from pydantic_settings import BaseSettings
from pydantic import ConfigDict, field_validator
import json


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./listings.db"
    STORE_TIMEOUT_SECONDS: int = 10

    # Redis cache; an empty URL disables caching
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_NAMESPACE: str = "pls"
    CACHE_TTL_SECONDS: int = 3600
    CACHE_TIMEOUT_SECONDS: float = 0.5

    # JWT
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Accept a JSON list or a comma separated string."""
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    raise ValueError(f"Invalid JSON in CORS_ORIGINS: {v}")
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    model_config = ConfigDict(env_file=".env", extra="ignore")


settings = Settings()

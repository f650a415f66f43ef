from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file="wheelapi/.env",
        env_file_encoding="utf-8",
        extra="allow",
    )
    # Application
    APP_NAME: str = "Event Prize Wheel API"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: List[str] = ["*"]

    # Database
    DATABASE_URL: str = "sqlite:///./wheel.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    # Security (tokens are issued by the identity provider)
    SECRET_KEY: str = ""
    JWT_ALGORITHM: str = "HS256"

    # Wheel
    SPIN_COST_POINTS: int = 20  # 1회 스핀 비용
    SPIN_REVEAL_DELAY_MS: int = 4000  # 휠 애니메이션 시간
    HISTORY_LIMIT: int = 20
    # JSON list of {"label", "weight", "reward_tag"}; default table when unset
    PRIZE_TABLE: Optional[List[dict]] = None


settings = Settings()

from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

from core.constants import EarlyExitPolicy, StoreBackend


class Settings(BaseSettings):

    ENVIRONMENT_NAME: str = "Development"

    @property
    def is_production(self):
        return self.ENVIRONMENT_NAME == "Production"

    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Weekly Rewards API"
    # BACKEND_CORS_ORIGINS is a JSON-formatted list of origins
    # e.g: '["http://localhost", "http://localhost:4200", "http://localhost:3000"]'
    BACKEND_CORS_ORIGINS: List[str] = []

    REWARD_STORE_BACKEND: StoreBackend = StoreBackend.memory
    SQLALCHEMY_DATABASE_URI: str = "sqlite:///./rewards.db"

    WEEK_POPULATION_EARLY_EXIT: EarlyExitPolicy = EarlyExitPolicy.first_record
    # answer future/expired/already-redeemed with 200 + error body, like the
    # first version of the API did
    REDEEM_LEGACY_STATUS_CODES: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False
    LOG_DIR: str = "~/logs"

    # Seq log
    SEQ_SERVER_URL: Optional[str] = None
    SEQ_SERVER_API_KEY: Optional[str] = None

    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    class Config:

        case_sensitive = True
        env_file = ".env"
        extra = "allow"


settings = Settings()

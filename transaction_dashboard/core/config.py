import json
from typing import Any

from pydantic_settings import BaseSettings

DEFAULT_PRICE_RANGES: list[dict[str, Any]] = [
    {"label": "0-100", "min": 0, "max": 100},
    {"label": "101-200", "min": 101, "max": 200},
    {"label": "201-300", "min": 201, "max": 300},
    {"label": "301-400", "min": 301, "max": 400},
    {"label": "401-500", "min": 401, "max": 500},
    {"label": "501-600", "min": 501, "max": 600},
    {"label": "601-700", "min": 601, "max": 700},
    {"label": "701-800", "min": 701, "max": 800},
    {"label": "801-900", "min": 801, "max": 900},
    {"label": "901-above", "min": 901, "max": None},
]


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./transactions.db"

    BACKEND_CORS_ORIGINS: str = (
        '["http://localhost:5173","http://localhost:3000","http://localhost:3001"]'
    )

    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Transaction Dashboard API"
    DEBUG: bool = False

    DEFAULT_PER_PAGE: int = 10
    MAX_PER_PAGE: int = 100

    # JSON list of {"label", "min", "max"}; "max": null means no upper bound
    PRICE_RANGES: str = json.dumps(DEFAULT_PRICE_RANGES)

    SEED_DATA_URL: str = "https://s3.amazonaws.com/roxiler.com/product_transaction.json"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def cors_origins(self) -> list[str]:
        try:
            parsed: list[str] = json.loads(self.BACKEND_CORS_ORIGINS)
            return parsed
        except json.JSONDecodeError:
            return ["http://localhost:5173", "http://localhost:3000"]

    @property
    def price_ranges(self) -> list[dict[str, Any]]:
        parsed: list[dict[str, Any]] = json.loads(self.PRICE_RANGES)
        return parsed


settings = Settings()

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    telegram_bot_token: str
    allowed_chat_ids: list[int] = []

    @field_validator("allowed_chat_ids", mode="before")
    @classmethod
    def parse_chat_ids(cls, v):
        if isinstance(v, str):
            return [int(x.strip()) for x in v.split(",") if x.strip()]
        if isinstance(v, int):
            return [v]
        return v

    db_path: str = "pcs.db"
    debug: bool = False
    health_check_port: int = 8080
    default_budget: float = Field(default=10000.0, gt=0)
    currency_symbol: str = "₹"
    top_insights: int = Field(default=3, ge=1)


settings = Settings()

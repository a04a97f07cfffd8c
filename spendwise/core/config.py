from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from spendwise.models.expense import AmountPolicy


class Settings(BaseSettings):
    # App settings
    PROJECT_NAME: str = "SpendWise"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")

    # Record store
    SEED_SAMPLE_DATA: bool = Field(default=True)
    AMOUNT_POLICY: AmountPolicy = Field(default=AmountPolicy.REJECT_NEGATIVE)

    # Dashboard defaults
    TREND_WINDOW_DAYS: int = Field(default=30, ge=1)
    RECENT_LIMIT: int = Field(default=5, ge=1)

    # External analysis agent
    INSIGHT_AGENT_URL: str = Field(default="http://localhost:3000/api/agent")
    INSIGHT_AGENT_ID: str = Field(default="693069930683f6b758456d1b")
    INSIGHT_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()

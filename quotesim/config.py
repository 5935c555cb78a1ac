""" Runtime settings, read from QUOTESIM_* environment variables or a .env file. """

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    max_hops: int = Field(default=1000, ge=1)
    process_file: Optional[Path] = None
    decision_file: Optional[Path] = None
    use_bundled_decision: bool = True
    parallel_scenarios: bool = False
    scenario_workers: int = Field(default=4, ge=1)
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="QUOTESIM_", env_file=".env", extra="ignore")


settings = Settings()

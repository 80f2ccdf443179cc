# paintwall/core/config.py
"""
Application settings.

Values come from environment variables (prefix ``PAINTWALL_``) or a ``.env``
file in the working directory.
"""

from datetime import date, datetime, time
from functools import lru_cache
from typing import Tuple
from zoneinfo import ZoneInfo

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PAINTWALL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str = Field(
        default="sqlite:///db.sqlite",
        description="SQLAlchemy URL for the application database",
    )
    timezone: str = Field(
        default="America/Chicago",
        description="Business timezone used for 'today' (due dates, overdue checks)",
    )
    default_tax_rate_bps: int = Field(
        default=825,
        ge=0,
        description="Sales tax rate applied when a project or invoice does not set one",
    )
    default_currency: str = Field(default="USD", min_length=3, max_length=3)
    upload_dir: str = Field(
        default="uploads",
        description="Directory where uploaded financial documents are stored",
    )
    log_level: str = Field(default="INFO")
    invoice_number_prefix: str = Field(default="INV")


@lru_cache
def get_settings() -> Settings:
    return Settings()


def business_today() -> date:
    """Today's date in the business timezone."""
    return datetime.now(ZoneInfo(get_settings().timezone)).date()


def year_bounds(year: int) -> Tuple[date, date]:
    """First and last day of ``year``, both inclusive."""
    return date(year, 1, 1), date(year, 12, 31)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max)

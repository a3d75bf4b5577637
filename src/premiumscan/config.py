from __future__ import annotations

from decimal import Decimal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from premiumscan.domain.money import FiatAmount
from premiumscan.logging_utils import parse_log_level
from premiumscan.services.scan_service import (
    DEFAULT_KRW_TO_EUR_RATE,
    DEFAULT_MIN_VOLUME_EUR,
    ScanConfig,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    krw_to_eur_rate: Decimal = Field(default=DEFAULT_KRW_TO_EUR_RATE, alias="KRW_TO_EUR_RATE")
    min_volume_eur: Decimal = Field(default=DEFAULT_MIN_VOLUME_EUR, alias="MIN_VOLUME_EUR")

    korbit_base_url: str = Field(default="https://api.korbit.co.kr", alias="KORBIT_BASE_URL")
    kraken_base_url: str = Field(default="https://api.kraken.com", alias="KRAKEN_BASE_URL")
    http_timeout_seconds: float = Field(default=10.0, alias="HTTP_TIMEOUT_SECONDS")
    parallel_fetch: bool = Field(default=False, alias="PARALLEL_FETCH")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("krw_to_eur_rate")
    def validate_krw_to_eur_rate(cls, value: Decimal) -> Decimal:
        if not value.is_finite() or value <= 0:
            raise ValueError("KRW_TO_EUR_RATE must be > 0")
        return value

    @field_validator("min_volume_eur")
    def validate_min_volume_eur(cls, value: Decimal) -> Decimal:
        if not value.is_finite() or value < 0:
            raise ValueError("MIN_VOLUME_EUR must be >= 0")
        return value

    @field_validator("log_level")
    def validate_log_level(cls, value: str) -> str:
        parse_log_level(value)
        return value.strip().upper()

    @field_validator("http_timeout_seconds")
    def validate_http_timeout_seconds(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("HTTP_TIMEOUT_SECONDS must be > 0")
        return value

    def scan_config(self) -> ScanConfig:
        return ScanConfig(
            krw_to_eur_rate=self.krw_to_eur_rate,
            min_volume=FiatAmount(self.min_volume_eur),
            parallel_fetch=self.parallel_fetch,
        )

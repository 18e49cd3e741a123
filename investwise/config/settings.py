"""
Configuration Management for InvestWise

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every knob the console app reads is declared and validated in one place
at startup, grouped by env prefix.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Snapshot persistence configuration."""

    model_config = SettingsConfigDict(
        env_prefix="INVESTWISE_STORAGE_",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the snapshot files"
    )

    # One snapshot per top-level store
    users_file_name: str = Field(
        default="users.json",
        description="Snapshot of the user registry"
    )
    portfolios_file_name: str = Field(
        default="portfolios.json",
        description="Snapshot of portfolios keyed by username"
    )
    bank_accounts_file_name: str = Field(
        default="bank_accounts.json",
        description="Snapshot of linked bank accounts keyed by username"
    )
    audit_file_name: str = Field(
        default="audit.jsonl",
        description="Append-only audit trail (JSON lines)"
    )

    save_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a snapshot write is attempted"
    )

    @property
    def users_path(self) -> Path:
        return self.data_dir / self.users_file_name

    @property
    def portfolios_path(self) -> Path:
        return self.data_dir / self.portfolios_file_name

    @property
    def bank_accounts_path(self) -> Path:
        return self.data_dir / self.bank_accounts_file_name

    @property
    def audit_path(self) -> Path:
        return self.data_dir / self.audit_file_name


class SecuritySettings(BaseSettings):
    """Credential hashing configuration."""

    model_config = SettingsConfigDict(
        env_prefix="INVESTWISE_SECURITY_",
        extra="ignore"
    )

    hash_rounds: int = Field(
        default=29000,
        ge=1000,
        description="PBKDF2-SHA256 rounds used for credential tokens"
    )


class BankSettings(BaseSettings):
    """Simulated bank link configuration."""

    model_config = SettingsConfigDict(
        env_prefix="INVESTWISE_BANK_",
        extra="ignore"
    )

    verification_delay_seconds: float = Field(
        default=2.0,
        ge=0.0,
        le=30.0,
        description="Simulated OTP verification latency"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level for the structured log file"
    )
    log_file_name: str = Field(
        default="investwise.log",
        description="Log file name, created inside the data directory"
    )

    # Display
    currency_symbol: str = Field(
        default="$",
        max_length=3,
        description="Symbol prefixed to monetary amounts"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept level names the stdlib logging module knows."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access. Each group reads its own
    env prefix; pass instances explicitly to override (CLI flags, tests).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    storage: StorageSettings = Field(default_factory=StorageSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    bank: BankSettings = Field(default_factory=BankSettings)
    app: AppSettings = Field(default_factory=AppSettings)


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with a
    "<name>_error" entry describing each failure.
    """
    results = {}

    groups = {
        "storage": StorageSettings,
        "security": SecuritySettings,
        "bank": BankSettings,
        "app": AppSettings,
    }

    for name, group in groups.items():
        try:
            group()
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results

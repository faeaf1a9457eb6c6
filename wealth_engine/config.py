"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "wealth-engine"
    log_level: str = "INFO"

    # Payroll
    tax_year: int = 2024
    social_security_rate: float = 0.062
    social_security_wage_base: float = 168600
    medicare_rate: float = 0.0145
    default_state_tax_rate: float = 0.05  # used when no ZIP-aware resolver is wired in
    default_local_tax_rate: float = 0.0

    # Options risk flags
    safe_prob_itm: float = 0.3
    risky_prob_itm: float = 0.7
    min_iv_to_hv_ratio: float = 1.0

    # Retirement
    wealth_multiplier_default: float = 50


settings = Settings()

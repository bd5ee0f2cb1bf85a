"""
Centralized configuration with environment variable overrides.

Marketplace identity, simulated latencies, and the scheduling window are
configurable here. Nothing is hardcoded in session or scheduling logic.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_bool(env_var: str, default: str) -> bool:
    """Parse a boolean flag from an env var (1/true/yes/on)."""
    raw = os.getenv(env_var, default).strip().lower()
    if raw in {"1", "true", "yes", "on"}:
        return True
    if raw in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean for {env_var}: {raw!r}")


@dataclass(frozen=True)
class MarketplaceConfig:
    """Marketplace-wide settings loaded from environment or defaults."""

    name: str = os.getenv("MARKETPLACE_NAME", "Gigdesk")
    default_currency: str = os.getenv("DEFAULT_CURRENCY", "bdt")


@dataclass(frozen=True)
class LatencyConfig:
    """Simulated network latency per operation, in milliseconds."""

    sign_in_ms: int = _safe_int("SIGN_IN_LATENCY_MS", "1000")
    sign_up_ms: int = _safe_int("SIGN_UP_LATENCY_MS", "1000")
    sign_out_ms: int = _safe_int("SIGN_OUT_LATENCY_MS", "500")
    booking_ms: int = _safe_int("BOOKING_LATENCY_MS", "1000")


@dataclass(frozen=True)
class SchedulingConfig:
    """Working window and granularity for candidate booking times."""

    workday_start_hour: int = _safe_int("WORKDAY_START_HOUR", "9")
    workday_end_hour: int = _safe_int("WORKDAY_END_HOUR", "17")
    slot_granularity_minutes: int = _safe_int("SLOT_GRANULARITY_MINUTES", "30")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    marketplace: MarketplaceConfig = field(default_factory=MarketplaceConfig)
    latency: LatencyConfig = field(default_factory=LatencyConfig)
    scheduling: SchedulingConfig = field(default_factory=SchedulingConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    seed_demo_data: bool = _safe_bool("SEED_DEMO_DATA", "true")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    for name, value in [
        ("SIGN_IN_LATENCY_MS", config.latency.sign_in_ms),
        ("SIGN_UP_LATENCY_MS", config.latency.sign_up_ms),
        ("SIGN_OUT_LATENCY_MS", config.latency.sign_out_ms),
        ("BOOKING_LATENCY_MS", config.latency.booking_ms),
    ]:
        if value < 0:
            raise ValueError(f"{name} must be >= 0, got {value}")

    scheduling = config.scheduling
    if not 0 <= scheduling.workday_start_hour <= 23:
        raise ValueError(
            f"WORKDAY_START_HOUR must be between 0 and 23, got {scheduling.workday_start_hour}"
        )
    if not 1 <= scheduling.workday_end_hour <= 24:
        raise ValueError(
            f"WORKDAY_END_HOUR must be between 1 and 24, got {scheduling.workday_end_hour}"
        )
    if scheduling.workday_end_hour <= scheduling.workday_start_hour:
        raise ValueError(
            "WORKDAY_END_HOUR must be after WORKDAY_START_HOUR, "
            f"got {scheduling.workday_start_hour}-{scheduling.workday_end_hour}"
        )
    if not 1 <= scheduling.slot_granularity_minutes <= 24 * 60:
        raise ValueError(
            "SLOT_GRANULARITY_MINUTES must be between 1 and 1440, "
            f"got {scheduling.slot_granularity_minutes}"
        )

    currency = config.marketplace.default_currency
    if len(currency) != 3 or not currency.isalpha():
        raise ValueError(f"DEFAULT_CURRENCY must be a 3-letter code, got {currency!r}")


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.marketplace.name)
    return config


# Singleton instance
settings = load_config()

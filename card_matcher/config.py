"""
Configuration management for the Card Matcher
"""

import json
import os
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger
from pydantic import BaseModel, Field


ENV_PREFIX = "CARD_MATCHER_"
LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class MatcherConfig(BaseModel):
    """Configuration model for the Card Matcher"""

    # Logging settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="<green>{time:HH:mm:ss}</green> | <level>{level}</level> | {message}",
        description="Loguru sink format",
    )

    # Savings settings
    processing_fee_rate: Decimal = Field(default=Decimal("0.03"), description="Payment-processing surcharge per dollar charged")

    # Ranking settings
    top_n: int = Field(default=3, description="Recommendations kept before diversity picks")
    preference_multiplier: Decimal = Field(default=Decimal("1.2"), description="Boost for cards in the preferred category")
    partner_match_multiplier: Decimal = Field(default=Decimal("1.4"), description="Boost for travel cards tied to a preferred partner")

    # Eligibility settings
    max_catalog_size: int = Field(default=500, description="Catalog entries considered per request")
    default_credit_score: int = Field(default=700, description="Assumed score when no tier is given")
    count_monthly_spend_toward_requirement: bool = Field(
        default=False,
        description="Let monthly spend capacity over the bonus timeframe count toward the spend requirement",
    )

    # Split strategy settings
    split_min_tuition: Decimal = Field(default=Decimal("6000"), description="Smallest tuition for which a split is proposed")
    split_candidate_pool: int = Field(default=10, description="Highest-bonus cards considered for pairing")
    split_degenerate_ratio: Decimal = Field(
        default=Decimal("1.5"),
        description="Pairs where both requirements exceed tuition by this factor are skipped",
    )

    # Cache settings
    spend_requirement_cache_limit: int = Field(default=500, description="Entries before the spend-requirement cache is cleared")

    class Config:
        validate_assignment = True


class ConfigManager:
    """Configuration manager for the Card Matcher"""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration manager

        Args:
            config_file: Path to configuration file
        """
        self.config_file = config_file or "card_matcher_config.json"
        self._config: Optional[MatcherConfig] = None
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file, falling back to environment"""
        try:
            if Path(self.config_file).exists():
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    config_data = json.load(f)
                self._config = MatcherConfig(**config_data)
                logger.debug(f"Loaded configuration from {self.config_file}")
            else:
                self._config = MatcherConfig(**self.get_environment_config())
        except Exception as e:
            logger.warning(f"Failed to load configuration: {e}")
            self._config = MatcherConfig()

    def get_config(self) -> MatcherConfig:
        """Get current configuration"""
        return self._config

    def update_config(self, **kwargs) -> None:
        """Update configuration with new values"""
        for key, value in kwargs.items():
            if hasattr(self._config, key):
                setattr(self._config, key, value)
            else:
                logger.warning(f"Ignoring unknown configuration key: {key}")

    def save_config(self) -> None:
        """Save current configuration to file"""
        try:
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(self._config.dict(), f, indent=2, default=str)
        except OSError as e:
            logger.warning(f"Failed to save configuration: {e}")

    def reset_to_defaults(self) -> None:
        """Reset configuration to defaults"""
        self._config = MatcherConfig()

    def validate_config(self) -> Dict[str, Any]:
        """Validate current configuration"""
        validation_results = {
            'valid': True,
            'warnings': [],
            'errors': []
        }

        if self._config.log_level.upper() not in LOG_LEVELS:
            validation_results['errors'].append(f"Invalid log level: {self._config.log_level}")
            validation_results['valid'] = False

        if self._config.top_n <= 0:
            validation_results['errors'].append("top_n must be positive")
            validation_results['valid'] = False

        if self._config.max_catalog_size <= 0:
            validation_results['errors'].append("max_catalog_size must be positive")
            validation_results['valid'] = False

        if self._config.split_candidate_pool < 2:
            validation_results['errors'].append("split_candidate_pool must be at least 2")
            validation_results['valid'] = False

        if not (Decimal("0") <= self._config.processing_fee_rate < Decimal("1")):
            validation_results['errors'].append("processing_fee_rate must be in [0, 1)")
            validation_results['valid'] = False

        if self._config.preference_multiplier < Decimal("1"):
            validation_results['warnings'].append("preference_multiplier below 1 penalizes preferred cards")

        if self._config.partner_match_multiplier < self._config.preference_multiplier:
            validation_results['warnings'].append("partner_match_multiplier is smaller than preference_multiplier")

        if self._config.spend_requirement_cache_limit <= 0:
            validation_results['errors'].append("spend_requirement_cache_limit must be positive")
            validation_results['valid'] = False

        return validation_results

    def get_environment_config(self) -> Dict[str, str]:
        """Get configuration from environment variables"""
        env_config = {}

        for field_name in MatcherConfig.__fields__:
            env_value = os.getenv(f"{ENV_PREFIX}{field_name.upper()}")
            if env_value is not None:
                env_config[field_name] = env_value

        return env_config


# Global configuration instance
config_manager = ConfigManager()


def get_config() -> MatcherConfig:
    """Get the global configuration instance"""
    return config_manager.get_config()


def update_config(**kwargs) -> None:
    """Update the global configuration"""
    config_manager.update_config(**kwargs)

# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Pydantic settings models for DataInsight configuration.

Every tunable number used by conflict detection and signal resolution can be
overridden from a YAML file (with environment variable substitution) or from
``DATAINSIGHT_*`` environment variables. The settings convert to the frozen
domain dataclasses, which stay free of pydantic.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from datainsight.domain.services.signal_thresholds import (
    BANK_CATEGORIES,
    DEFENSIVE_CATEGORIES,
    ConflictThresholds,
    ResolutionConfig,
    SectorCategory,
)


def _validate_percentage(v: float) -> float:
    if not 0 <= v <= 100:
        raise ValueError("must be between 0 and 100")
    return v


def _parse_categories(names: List[str]) -> frozenset:
    categories = set()
    for name in names:
        try:
            categories.add(SectorCategory(name.strip().lower()))
        except ValueError:
            valid = [c.value for c in SectorCategory]
            raise ValueError(f"unknown sector category '{name}', expected one of {valid}")
    return frozenset(categories)


# =============================================================================
# Conflict Threshold Settings
# =============================================================================


class ThresholdSettings(BaseSettings):
    """Cutoffs for the conflict heuristics."""

    model_config = SettingsConfigDict(env_prefix="DATAINSIGHT_THRESHOLD_")

    smart_money_low_score: float = Field(default=40.0)
    smart_money_high_score: float = Field(default=60.0)
    defensive_leadership_ratio: float = Field(default=0.5)
    strong_flow_score: int = Field(default=2)
    contradiction_spread: int = Field(default=4)
    prop_noise_threshold_pct: float = Field(default=40.0)
    bank_regime_confidence_floor: float = Field(default=60.0)
    bank_index_weight_pct: float = Field(default=30.0)
    defensive_categories: List[str] = Field(default_factory=lambda: sorted(c.value for c in DEFENSIVE_CATEGORIES))
    bank_categories: List[str] = Field(default_factory=lambda: sorted(c.value for c in BANK_CATEGORIES))

    @field_validator(
        "smart_money_low_score",
        "smart_money_high_score",
        "prop_noise_threshold_pct",
        "bank_regime_confidence_floor",
        "bank_index_weight_pct",
    )
    @classmethod
    def validate_percentage(cls, v: float) -> float:
        """Validate value is a 0-100 percentage."""
        return _validate_percentage(v)

    @field_validator("smart_money_high_score")
    @classmethod
    def validate_score_order(cls, v: float, info: ValidationInfo) -> float:
        """Validate the high score cutoff is above the low one."""
        low = info.data.get("smart_money_low_score")
        if low is not None and v <= low:
            raise ValueError("smart_money_high_score must be greater than smart_money_low_score")
        return v

    @field_validator("defensive_leadership_ratio")
    @classmethod
    def validate_ratio(cls, v: float) -> float:
        """Validate ratio is between 0 and 1."""
        if not 0 < v <= 1:
            raise ValueError("defensive_leadership_ratio must be in (0, 1]")
        return v

    @field_validator("strong_flow_score")
    @classmethod
    def validate_strong_flow(cls, v: int) -> int:
        """Validate cutoff is inside the +/-3 strength scale."""
        if not 0 <= v < 3:
            raise ValueError("strong_flow_score must be between 0 and 2")
        return v

    @field_validator("contradiction_spread")
    @classmethod
    def validate_spread(cls, v: int) -> int:
        """Validate spread is inside the 0-6 score range."""
        if not 0 <= v < 6:
            raise ValueError("contradiction_spread must be between 0 and 5")
        return v

    @field_validator("defensive_categories", "bank_categories")
    @classmethod
    def validate_categories(cls, v: List[str]) -> List[str]:
        """Validate every entry names a known sector category."""
        _parse_categories(v)
        return v

    def to_thresholds(self) -> ConflictThresholds:
        """Convert to the frozen domain thresholds."""
        values = self.model_dump(exclude={"defensive_categories", "bank_categories"})
        return ConflictThresholds(
            defensive_categories=_parse_categories(self.defensive_categories),
            bank_categories=_parse_categories(self.bank_categories),
            **values,
        )


# =============================================================================
# Resolution Settings
# =============================================================================


class ResolutionSettings(BaseSettings):
    """Weights, penalties and cutoffs for signal resolution."""

    model_config = SettingsConfigDict(env_prefix="DATAINSIGHT_RESOLUTION_")

    regime_weight: float = Field(default=1.0)
    smart_money_weight: float = Field(default=1.2)
    foreign_weight: float = Field(default=1.5)
    sector_weight: float = Field(default=0.8)

    foreign_flow_threshold: float = Field(default=1000.0)
    regime_confidence_override: float = Field(default=80.0)
    foreign_dominance_weight: float = Field(default=2.0)
    foreign_dominance_regime_weight: float = Field(default=0.5)

    smart_money_extreme_high: float = Field(default=60.0)
    smart_money_extreme_low: float = Field(default=30.0)
    smart_money_extreme_weight: float = Field(default=1.8)
    smart_money_extreme_regime_weight: float = Field(default=0.6)

    sector_confirmation_concentration: float = Field(default=60.0)
    sector_confirmation_weight: float = Field(default=1.2)

    smart_money_bullish_score: float = Field(default=60.0)
    smart_money_bearish_score: float = Field(default=40.0)

    high_conflict_penalty: float = Field(default=20.0)
    medium_conflict_penalty: float = Field(default=10.0)
    low_conflict_penalty: float = Field(default=5.0)
    max_conflict_penalty: float = Field(default=60.0)
    noise_confidence_cap: float = Field(default=30.0)
    default_confidence: float = Field(default=50.0)

    high_conviction_cutoff: float = Field(default=70.0)
    medium_conviction_cutoff: float = Field(default=40.0)

    primary_driver_floor: float = Field(default=0.2)

    @field_validator(
        "regime_weight",
        "smart_money_weight",
        "foreign_weight",
        "sector_weight",
        "foreign_dominance_weight",
        "foreign_dominance_regime_weight",
        "smart_money_extreme_weight",
        "smart_money_extreme_regime_weight",
        "sector_confirmation_weight",
        "foreign_flow_threshold",
        "primary_driver_floor",
    )
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        """Validate value is not negative."""
        if v < 0:
            raise ValueError("must not be negative")
        return v

    @field_validator(
        "regime_confidence_override",
        "smart_money_extreme_high",
        "smart_money_extreme_low",
        "sector_confirmation_concentration",
        "smart_money_bullish_score",
        "smart_money_bearish_score",
        "high_conflict_penalty",
        "medium_conflict_penalty",
        "low_conflict_penalty",
        "max_conflict_penalty",
        "noise_confidence_cap",
        "default_confidence",
        "high_conviction_cutoff",
        "medium_conviction_cutoff",
    )
    @classmethod
    def validate_percentage(cls, v: float) -> float:
        """Validate value is a 0-100 percentage."""
        return _validate_percentage(v)

    @field_validator("smart_money_extreme_low")
    @classmethod
    def validate_extreme_order(cls, v: float, info: ValidationInfo) -> float:
        """Validate the extreme low cutoff is below the extreme high one."""
        high = info.data.get("smart_money_extreme_high")
        if high is not None and v >= high:
            raise ValueError("smart_money_extreme_low must be less than smart_money_extreme_high")
        return v

    @field_validator("smart_money_bearish_score")
    @classmethod
    def validate_vote_order(cls, v: float, info: ValidationInfo) -> float:
        """Validate the bearish score cutoff is below the bullish one."""
        bullish = info.data.get("smart_money_bullish_score")
        if bullish is not None and v >= bullish:
            raise ValueError("smart_money_bearish_score must be less than smart_money_bullish_score")
        return v

    @field_validator("medium_conviction_cutoff")
    @classmethod
    def validate_conviction_order(cls, v: float, info: ValidationInfo) -> float:
        """Validate the medium conviction cutoff is below the high one."""
        high = info.data.get("high_conviction_cutoff")
        if high is not None and v >= high:
            raise ValueError("medium_conviction_cutoff must be less than high_conviction_cutoff")
        return v

    def to_resolution_config(self) -> ResolutionConfig:
        """Convert to the frozen domain resolution config."""
        return ResolutionConfig(**self.model_dump())


# =============================================================================
# Logging Settings
# =============================================================================


class LoggingSettings(BaseSettings):
    """Logging configuration used by the CLI."""

    model_config = SettingsConfigDict(env_prefix="DATAINSIGHT_LOG_")

    level: str = Field(default="INFO")
    file: Optional[str] = Field(default=None)

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate level is a standard logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}")
        return v.upper()


# =============================================================================
# Main Configuration
# =============================================================================


class DataInsightConfig(BaseSettings):
    """
    Master configuration.

    Example:
        >>> config = DataInsightConfig.from_yaml("datainsight.yaml")
        >>> thresholds = config.thresholds.to_thresholds()
        >>> resolution = config.resolution.to_resolution_config()
    """

    model_config = SettingsConfigDict(extra="ignore")

    thresholds: ThresholdSettings = Field(default_factory=ThresholdSettings)
    resolution: ResolutionSettings = Field(default_factory=ResolutionSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def to_thresholds(self) -> ConflictThresholds:
        return self.thresholds.to_thresholds()

    def to_resolution_config(self) -> ResolutionConfig:
        return self.resolution.to_resolution_config()

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "DataInsightConfig":
        """
        Load configuration from YAML file with environment variable substitution.

        Args:
            config_path: Path to the YAML file

        Returns:
            Validated DataInsightConfig instance

        Raises:
            ValidationError: If configuration is invalid
            FileNotFoundError: If config file doesn't exist
            ValueError: If required environment variable is missing
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "r") as f:
            yaml_content = f.read()

        # Pattern: ${VAR_NAME} or ${VAR_NAME:-default_value}
        def env_var_replacer(match):
            var_spec = match.group(1)
            if ":-" in var_spec:
                var_name, default = var_spec.split(":-", 1)
                return os.getenv(var_name, default)
            value = os.getenv(var_spec)
            if value is None:
                raise ValueError(f"Environment variable {var_spec} not set and no default provided")
            return value

        yaml_content = re.sub(r"\$\{([^}]+)\}", env_var_replacer, yaml_content)

        config_dict = yaml.safe_load(yaml_content) or {}
        if not isinstance(config_dict, dict):
            raise ValueError(f"Configuration file must contain a mapping: {config_path}")

        return cls(**config_dict)


__all__ = [
    "DataInsightConfig",
    "ThresholdSettings",
    "ResolutionSettings",
    "LoggingSettings",
]

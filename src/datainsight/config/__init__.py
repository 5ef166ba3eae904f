"""
Configuration Layer

Threshold and resolution settings with YAML and environment variable support.
"""

from datainsight.config.settings import DataInsightConfig, LoggingSettings, ResolutionSettings, ThresholdSettings

__all__ = [
    "DataInsightConfig",
    "ThresholdSettings",
    "ResolutionSettings",
    "LoggingSettings",
]

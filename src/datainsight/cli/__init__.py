"""
DataInsight CLI Package

Usage:
    from datainsight.cli import cli, main

Entry Points:
    datainsight - Main CLI command (configured in pyproject.toml)
"""

from .main import cli, main
from .utils import echo_json, error_exit, load_config, read_signal_file, setup_logging

__all__ = [
    "cli",
    "main",
    "setup_logging",
    "load_config",
    "read_signal_file",
    "echo_json",
    "error_exit",
]

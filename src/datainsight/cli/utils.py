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
Shared CLI utilities for DataInsight
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
import yaml
from pydantic import ValidationError

from datainsight.config.settings import DataInsightConfig

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None):
    """
    Configure application logging.

    Logs go to stderr so command output on stdout stays parseable JSON.
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    handlers = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=numeric_level,
        format=log_format,
        handlers=handlers,
        force=True,
    )


def load_config(config_file: Optional[str] = None) -> DataInsightConfig:
    """Load configuration from YAML file, or environment defaults when none is given"""
    if not config_file:
        return DataInsightConfig()

    try:
        return DataInsightConfig.from_yaml(config_file)
    except FileNotFoundError as e:
        error_exit(str(e))
    except ValidationError as e:
        error_exit(f"Invalid configuration in {config_file}:\n{e}")
    except (ValueError, yaml.YAMLError) as e:
        error_exit(f"Could not load configuration {config_file}: {e}")


def read_signal_file(path: str) -> Dict[str, Any]:
    """Read a ``{regime, smartMoney, sector}`` document from JSON or YAML"""
    signal_path = Path(path)

    try:
        with open(signal_path, "r") as f:
            content = f.read()
    except OSError as e:
        error_exit(f"Cannot read {path}: {e}")

    try:
        if signal_path.suffix.lower() == ".json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        error_exit(f"Cannot parse {path}: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        error_exit(f"{path} must contain a mapping with regime, smartMoney and sector")

    logger.debug(f"Loaded signals from {path}: {sorted(data)}")
    return data


def echo_json(data: Any, pretty: bool = False):
    """Write a JSON document to stdout"""
    click.echo(json.dumps(data, indent=2 if pretty else None, ensure_ascii=False))


def error_exit(message: str, code: int = 1):
    """Print error message and exit"""
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(code)

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
DataInsight CLI - Main Entry Point

Runs conflict detection and signal resolution over a signal document.

Usage:
    datainsight [OPTIONS] COMMAND [ARGS]...

Examples:
    datainsight detect signals.json
    datainsight resolve signals.yaml --pretty
    datainsight --config datainsight.yaml thresholds
"""

import sys

import click
import yaml

from datainsight import __version__
from datainsight.domain.models.signals import DataInsightInput
from datainsight.domain.services.conflict_detector import ConflictDetector
from datainsight.domain.services.signal_resolver import resolve_signals

from .utils import echo_json, load_config, read_signal_file, setup_logging

CONTEXT_SETTINGS = dict(
    help_option_names=["-h", "--help"],
    max_content_width=120,
)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option(
    "--config", "-c",
    default=None,
    envvar="DATAINSIGHT_CONFIG",
    type=click.Path(),
    help="Configuration file path (YAML)"
)
@click.option(
    "--log-level", "-l",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    default=None,
    envvar="DATAINSIGHT_LOG_LEVEL",
    help="Logging level"
)
@click.option(
    "--log-file",
    type=click.Path(),
    envvar="DATAINSIGHT_LOG_FILE",
    help="Log file path"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (same as --log-level DEBUG)"
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    help="Suppress non-essential output"
)
@click.version_option(
    version=__version__,
    prog_name="datainsight"
)
@click.pass_context
def cli(ctx, config, log_level, log_file, verbose, quiet):
    """DataInsight - Resolve conflicting market signals

    Combines market regime, smart money flow and sector rotation into a
    single PROCEED / CAUTION / WAIT / NEUTRAL verdict.

    \b
    COMMANDS:
      detect      List conflicts between the signals
      resolve     Resolve the signals into a verdict
      thresholds  Show the effective thresholds and weights

    \b
    EXAMPLES:
      $ datainsight detect signals.json
      $ datainsight resolve signals.json --pretty
      $ datainsight resolve partial.yaml --allow-partial
    """
    settings = load_config(config)

    # Determine effective log level
    effective_level = "DEBUG" if verbose else (log_level or settings.logging.level)
    if quiet:
        effective_level = "WARNING"

    setup_logging(effective_level, log_file or settings.logging.file)

    ctx.ensure_object(dict)
    ctx.obj["config"] = settings
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


@cli.command("detect")
@click.argument("signal_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--pretty", is_flag=True, help="Indent JSON output")
@click.pass_context
def detect(ctx, signal_file, pretty):
    """Detect conflicts between the signals in SIGNAL_FILE"""
    settings = ctx.obj["config"]
    signals = DataInsightInput.from_dict(read_signal_file(signal_file))

    result = ConflictDetector(thresholds=settings.to_thresholds()).detect(signals)
    echo_json(result.to_dict(), pretty)


@cli.command("resolve")
@click.argument("signal_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--allow-partial",
    is_flag=True,
    help="Return a degraded NEUTRAL verdict instead of null when inputs are missing"
)
@click.option("--pretty", is_flag=True, help="Indent JSON output")
@click.pass_context
def resolve(ctx, signal_file, allow_partial, pretty):
    """Resolve the signals in SIGNAL_FILE into a verdict

    Prints null when an input is missing and --allow-partial is not set.
    """
    settings = ctx.obj["config"]
    signals = DataInsightInput.from_dict(read_signal_file(signal_file))

    insight = resolve_signals(
        signals,
        allow_partial=allow_partial,
        config=settings.to_resolution_config(),
        thresholds=settings.to_thresholds(),
    )
    echo_json(insight.to_dict() if insight is not None else None, pretty)


@cli.command("thresholds")
@click.pass_context
def thresholds(ctx):
    """Show the effective thresholds and resolution weights"""
    settings = ctx.obj["config"]
    click.echo(yaml.safe_dump(settings.model_dump(), sort_keys=False, default_flow_style=False), nl=False)


def main():
    """Main entry point for the CLI"""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        click.echo("\nInterrupted")
        sys.exit(130)
    except Exception as e:
        if "--verbose" in sys.argv or "-v" in sys.argv:
            raise
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()

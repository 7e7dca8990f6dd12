"""hubboard CLI: status board for a fleet of hub clusters.

Usage:
    hubboard [OPTIONS] [HUB_NAMES...]

Hubs are read from ``.clusters.yaml`` (searched from the current directory
upwards) unless ``--config`` is given, processed one at a time, and printed
as soon as each one is done.
"""

from __future__ import annotations

import logging
import shutil
import sys
from typing import NoReturn

import click

from hubboard import __version__
from hubboard.board import format_hub, render_json
from hubboard.config import CONFIG_FILENAME, ConfigError, find_config, load_hubs, resolve_timeout
from hubboard.gateway.oc_gateway import OcGateway
from hubboard.models import DisplayMode
from hubboard.processor import HubProcessor, poll_hubs

_EPILOG = """\
\b
Examples:
  hubboard                     Show all hubs in short mode
  hubboard -m full             Show all hubs with detailed policies
  hubboard acm1 acm2           Show only acm1 and acm2
  hubboard -c custom.yaml      Use a custom config file
  LAB_TIMEOUT=5 hubboard       Use a 5 second API timeout

\b
Config file format:
  clusters:
    - name: acm1
      kubeconfig: /path/to/kubeconfig-acm1.yaml
    - name: acm2
      api: https://api.hub2.domain.com:6443
      username: admin
      password: admin
"""


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _fail(message: str) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


@click.command(epilog=_EPILOG)
@click.version_option(version=__version__)
@click.argument("hub_names", nargs=-1)
@click.option(
    "--config", "-c", "config_path", default=None,
    help=f"Config file path (default: {CONFIG_FILENAME}, searched upwards)",
)
@click.option(
    "--mode", "-m",
    type=click.Choice([m.value for m in DisplayMode]),
    default=DisplayMode.SHORT.value, show_default=True,
    help="full: spoke clusters with detailed policies; short: policy summary",
)
@click.option(
    "--timeout", type=click.FloatRange(min=0, min_open=True), default=None,
    help="API timeout in seconds (default: $LAB_TIMEOUT or 3)",
)
@click.option("--oc", "oc_path", default="oc", show_default=True, help="Path to the oc binary")
@click.option("--json-output", is_flag=True, help="Output as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Log gateway calls and state changes")
def cli(
    hub_names: tuple[str, ...],
    config_path: str | None,
    mode: str,
    timeout: float | None,
    oc_path: str,
    json_output: bool,
    verbose: bool,
) -> None:
    """Show node health, spoke clusters and policy compliance of every hub."""
    _configure_logging(verbose)

    try:
        api_timeout = resolve_timeout(timeout)
    except ConfigError as e:
        _fail(str(e))

    if shutil.which(oc_path) is None:
        _fail(f"{oc_path} is required but not installed.")

    path = config_path or find_config()
    if path is None:
        _fail(f"Config file '{CONFIG_FILENAME}' not found.")

    try:
        hubs = load_hubs(path)
    except ConfigError as e:
        _fail(str(e))

    processor = HubProcessor(OcGateway(oc_path), timeout=api_timeout, mode=DisplayMode(mode))
    reports = poll_hubs(hubs, processor, hub_names)

    if json_output:
        click.echo(render_json(reports))
        return

    for report in reports:
        for line in format_hub(report):
            click.echo(line)

"""
blobstage Command-Line Interface

Provisions the benchmark locations and writes the manifests the benchmark
driver consumes:

    A (local) --upload--> B (container) --server-side copy--> C (container) --download--> D (local)

Location A is generated separately (local_file_generator.sh).
"""

import re
import sys
import logging
from pathlib import Path
from typing import Optional

import click
import yaml
from pydantic import ValidationError

from blobstage import __version__
from blobstage.auth.credentials import AccountType
from blobstage.auth.exceptions import BlobStageError, ConfigurationError
from blobstage.core.config_manager import ConfigManager
from blobstage.core.logging_config import setup_logging
from blobstage.provisioner import Provisioner
from blobstage.storage.naming import container_name_from_url, unsigned_url

logger = logging.getLogger("blobstage.cli")

_INTEGER = re.compile(r"^[+-]?\d+$")


def parse_hours(value: str) -> int:
    """Lenient integer parsing: anything that is not an integer becomes 0."""
    value = value.strip()
    if not _INTEGER.match(value):
        logger.debug(f"Non-numeric duration {value!r} treated as 0")
        return 0
    return int(value)


def _fail(message: str) -> None:
    click.echo(f"[ERROR] {message}", err=True)
    sys.exit(1)


def _provisioner(ctx: click.Context) -> Provisioner:
    return Provisioner(config=ctx.obj["config"])


def _run(ctx: click.Context, operation, *args) -> Path:
    try:
        return operation(_provisioner(ctx), *args)
    except BlobStageError as e:
        _fail(e.message)


@click.group()
@click.version_option(version=__version__, prog_name="blobstage")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file (YAML or JSON)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Logging level (overrides configuration)",
)
@click.pass_context
def cli(ctx, config: Optional[Path], log_level: Optional[str]):
    """
    blobstage - benchmark container provisioning for Azure Blob Storage
    
    Creates and signs the containers for each benchmark stage and writes
    the CSV manifest describing it.
    """
    ctx.ensure_object(dict)
    
    overrides = {"logging": {"level": log_level.upper()}} if log_level else None
    try:
        settings = ConfigManager().load(
            config_file=str(config) if config else None,
            cli_overrides=overrides,
        )
    except (ValidationError, ValueError, FileNotFoundError, yaml.YAMLError) as e:
        _fail(f"Invalid configuration: {e}")
    
    setup_logging(
        level=settings.logging.level.value,
        format_type=settings.logging.format,
        log_file=settings.logging.file,
        rotation_size=settings.logging.rotation_size,
        rotation_count=settings.logging.rotation_count,
        module_levels=settings.logging.module_levels,
    )
    ctx.obj["config"] = settings


@cli.command(name="locB")
@click.argument("local_path")
@click.argument("hours")
@click.argument("version")
@click.pass_context
def location_b(ctx, local_path: str, hours: str, version: str):
    """
    Create location B: a new container under the default account.
    
    Writes locationB<VERSION>.csv with LOCAL_PATH and the signed container URL.
    
    Example:
        blobstage locB /data/source 2 10.16
    """
    path = _run(ctx, Provisioner.create_location_b, local_path, parse_hours(hours), version)
    click.echo(f"[OK] Wrote {path}")


@cli.command(name="locC")
@click.argument("container_url")
@click.argument("hours")
@click.argument("version")
@click.pass_context
def location_c(ctx, container_url: str, hours: str, version: str):
    """
    Create location C: a new container under the secondary account.
    
    Writes locationC<VERSION>.csv with the signed source (CONTAINER_URL)
    and destination container URLs.
    """
    path = _run(ctx, Provisioner.create_location_c, container_url, parse_hours(hours), version)
    click.echo(f"[OK] Wrote {path}")


@cli.command(name="locD")
@click.argument("container_url")
@click.argument("hours")
@click.argument("local_path")
@click.argument("version")
@click.pass_context
def location_d(ctx, container_url: str, hours: str, local_path: str, version: str):
    """
    Create location D: sign CONTAINER_URL for download to LOCAL_PATH.
    
    Writes locationD<VERSION>.csv with the signed container URL and LOCAL_PATH.
    """
    path = _run(
        ctx, Provisioner.create_location_d, container_url, parse_hours(hours), local_path, version
    )
    click.echo(f"[OK] Wrote {path}")


def _container_label(container_url: str) -> str:
    # Never echo the URL as given: it usually carries a live SAS token
    try:
        return container_name_from_url(container_url) or unsigned_url(container_url)
    except ConfigurationError:
        return unsigned_url(container_url)


def _delete(ctx: click.Context, account_type: AccountType, container_url: str) -> None:
    label = _container_label(container_url)
    if _provisioner(ctx).delete_container(account_type, container_url):
        click.echo(f"Successfully deleted container: {label}")
    else:
        click.echo(f"Failed to delete container: {label}", err=True)


@cli.command(name="delLocB")
@click.argument("container_url")
@click.pass_context
def delete_location_b(ctx, container_url: str):
    """Delete a location B container (default account). Best effort."""
    _delete(ctx, AccountType.DEFAULT, container_url)


@cli.command(name="delLocC")
@click.argument("container_url")
@click.pass_context
def delete_location_c(ctx, container_url: str):
    """Delete a location C container (secondary account). Best effort."""
    _delete(ctx, AccountType.SECONDARY, container_url)


@cli.command(name="pubRes")
@click.argument("local_path")
@click.argument("container_name")
@click.argument("hours")
@click.pass_context
def publish_results(ctx, local_path: str, container_name: str, hours: str):
    """
    Sign CONTAINER_NAME for uploading the result CSVs under LOCAL_PATH.
    
    Writes publishResultsLocation.csv.
    """
    path = _run(ctx, Provisioner.publish_results, local_path, container_name, parse_hours(hours))
    click.echo(f"[OK] Wrote {path}")


@cli.command()
def version():
    """Show blobstage version."""
    click.echo(f"blobstage version {__version__}")


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()

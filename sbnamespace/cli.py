"""
sbnamespace Command-Line Interface

Runs sweeps, existence and destroy checks and configuration validation for
Azure Service Bus namespaces.

Author: sbnamespace contributors
"""

import sys
import json
import asyncio
import logging
from pathlib import Path
from typing import Optional

import click
import yaml
from pydantic import ValidationError as PydanticValidationError

from sbnamespace import __version__
from sbnamespace.core.config_manager import ConfigManager, SbNamespaceConfig
from sbnamespace.core.logging_config import setup_logging
from sbnamespace.namespaces.client import build_client
from sbnamespace.namespaces.constants import (
    ATTR_NAME,
    ATTR_RESOURCE_GROUP,
    NAMESPACE_RESOURCE_TYPE,
    NAMESPACE_SWEEPER_NAME,
)
from sbnamespace.namespaces.destroy import DestroyVerifier
from sbnamespace.namespaces.exceptions import NamespaceError
from sbnamespace.namespaces.existence import ExistenceChecker, check_default_key_attributes
from sbnamespace.namespaces.models import DeclaredResource, NamespaceSpec
from sbnamespace.namespaces.provisioner import NamespaceProvisioner
from sbnamespace.namespaces.state import load_state
from sbnamespace.namespaces.sweeper import SweepPolicy, default_registry
from sbnamespace.namespaces.validation import validate_namespace_spec

logger = logging.getLogger("sbnamespace.cli")


def _load_spec(path: Path) -> NamespaceSpec:
    with open(path, 'r') as f:
        if path.suffix in ['.yaml', '.yml']:
            data = yaml.safe_load(f) or {}
        else:
            data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("namespace definition must be a mapping")
    return NamespaceSpec(**data)


def _read_input(loader, path: Path, what: str):
    """Load an input file, turning malformed content into a non-zero exit."""
    try:
        return loader(path)
    except PydanticValidationError as e:
        _fail(f"Invalid {what}: {e}")
    except (ValueError, TypeError, KeyError, yaml.YAMLError) as e:
        _fail(f"Cannot read {what} {path}: {e}")


def _fail(message: str) -> None:
    click.echo(f"[ERROR] {message}", err=True)
    sys.exit(1)


def _run(coro):
    """Run a coroutine, turning lifecycle errors into a non-zero exit."""
    try:
        return asyncio.run(coro)
    except NamespaceError as e:
        logger.debug("Command failed", exc_info=True)
        _fail(e.message)
    except ValueError as e:
        _fail(str(e))


@click.group()
@click.version_option(version=__version__, prog_name="sbnamespace")
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to configuration file (YAML or JSON)",
)
@click.option("--subscription", help="Azure subscription ID (overrides configuration)")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Logging level",
)
@click.option(
    "--log-format",
    type=click.Choice(["json", "text"], case_sensitive=False),
    help="Log output format",
)
@click.pass_context
def cli(ctx, config_file: Optional[str], subscription: Optional[str], log_level: Optional[str], log_format: Optional[str]):
    """
    sbnamespace - Azure Service Bus namespace lifecycle tooling

    Sweep leftover test namespaces, verify existence or destruction of
    declared namespaces, and validate namespace configuration.
    """
    overrides = {"subscription_id": subscription}
    if log_level or log_format:
        overrides["logging"] = {
            k: v for k, v in {"level": log_level and log_level.upper(), "format": log_format and log_format.lower()}.items()
            if v
        }

    try:
        config = ConfigManager().load(config_file=config_file, cli_overrides=overrides)
    except PydanticValidationError as e:
        raise click.ClickException(f"Invalid configuration: {e}")

    setup_logging(
        level=config.logging.level,
        format_type=config.logging.format,
        log_file=config.logging.file,
        rotation_size=config.logging.rotation_size,
        rotation_count=config.logging.rotation_count,
        module_levels=config.logging.module_levels,
    )
    ctx.obj = config


@cli.command()
@click.argument("region", required=False)
@click.option(
    "--sweeper",
    "sweeper_name",
    default=NAMESPACE_SWEEPER_NAME,
    show_default=True,
    help="Registered sweeper to run",
)
@click.pass_obj
def sweep(config: SbNamespaceConfig, region: Optional[str], sweeper_name: str):
    """
    Delete leftover test namespaces in REGION.

    Only namespaces whose names start with a configured test prefix
    (default "acctest") and whose location matches REGION are deleted.

    Examples:
        sbnamespace sweep westeurope
        sbnamespace --config sweep.yaml sweep "West Europe"
    """
    region = region or config.location
    if not region:
        _fail("No region given: pass REGION or set SBNAMESPACE_LOCATION / ARM_TEST_LOCATION")

    async def _sweep():
        async with build_client(config.subscription_id) as client:
            return await default_registry().run(
                sweeper_name, client, region, SweepPolicy.from_config(config.sweeper)
            )

    report = _run(_sweep())
    click.echo(f"Swept {region}: {len(report.deleted)} deleted, "
               f"{len(report.already_absent)} already absent, {report.listed} listed")
    for name in report.deleted:
        click.echo(f"  - deleted {name}")


@cli.command()
def sweepers():
    """List registered sweepers."""
    for name in default_registry().names():
        click.echo(name)


@cli.command("check-exists")
@click.argument("resource_group")
@click.argument("name")
@click.option("--default-keys", is_flag=True, help="Also read the default authorization rule keys")
@click.pass_obj
def check_exists(config: SbNamespaceConfig, resource_group: str, name: str, default_keys: bool):
    """Exit non-zero unless namespace NAME exists in RESOURCE_GROUP."""
    resource = DeclaredResource(
        address=f"{resource_group}/{name}",
        type=NAMESPACE_RESOURCE_TYPE,
        attributes={ATTR_NAME: name, ATTR_RESOURCE_GROUP: resource_group},
    )

    async def _check():
        async with build_client(config.subscription_id) as client:
            checker = ExistenceChecker(client)
            result = await checker.assert_exists(resource)
            if default_keys:
                attributes = await checker.read_default_keys(resource_group, name)
                check_default_key_attributes(resource.address, attributes)
            return result

    result = _run(_check())
    click.echo(f"Service Bus Namespace {name!r} exists in {result.descriptor.location}")


@cli.command("check-declared")
@click.argument("state_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("address")
@click.option("--default-keys", is_flag=True, help="Also check the recorded default_* key attributes")
@click.pass_obj
def check_declared(config: SbNamespaceConfig, state_file: Path, address: str, default_keys: bool):
    """
    Exit non-zero unless the namespace at ADDRESS in STATE_FILE exists.

    Examples:
        sbnamespace check-declared terraform.tfstate azurerm_servicebus_namespace.test
    """
    state = _read_input(load_state, state_file, "state file")

    async def _check():
        async with build_client(config.subscription_id) as client:
            return await ExistenceChecker(client).assert_declared_exists(
                state, address, default_keys=default_keys
            )

    result = _run(_check())
    click.echo(f"{address}: Service Bus Namespace {result.descriptor.name!r} exists")


@cli.command("verify-destroyed")
@click.argument("state_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--type", "resource_type", default=NAMESPACE_RESOURCE_TYPE, show_default=True)
@click.pass_obj
def verify_destroyed(config: SbNamespaceConfig, state_file: Path, resource_type: str):
    """Exit non-zero unless every namespace in STATE_FILE is gone."""
    state = _read_input(load_state, state_file, "state file")

    async def _verify():
        async with build_client(config.subscription_id) as client:
            return await DestroyVerifier(ExistenceChecker(client), resource_type).verify(state)

    verified = _run(_verify())
    click.echo(f"{len(verified)} namespace(s) verified destroyed")


@cli.command()
@click.argument("spec_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def validate(spec_file: Path):
    """Validate a namespace definition without contacting Azure."""
    spec = _read_input(_load_spec, spec_file, "namespace definition")

    errors = validate_namespace_spec(spec)
    if errors:
        for error in errors:
            click.echo(f"  - {error}", err=True)
        _fail(f"{len(errors)} validation error(s) in {spec_file}")
    click.echo(f"{spec_file}: OK")


@cli.command()
@click.argument("spec_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def create(config: SbNamespaceConfig, spec_file: Path):
    """Validate, then create the namespace described in SPEC_FILE."""
    spec = _read_input(_load_spec, spec_file, "namespace definition")

    async def _create():
        async with build_client(config.subscription_id) as client:
            return await NamespaceProvisioner(client).create(spec)

    descriptor = _run(_create())
    click.echo(f"Created Service Bus Namespace {descriptor.name!r} ({descriptor.id})")


def main():
    cli()


if __name__ == "__main__":
    main()

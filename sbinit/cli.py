"""
sbinit Command-Line Interface

Provides commands to provision a declared Service Bus topology and to delete
entities from a namespace.

Author: sbinit Contributors
Date: 2026-01-15
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from pydantic import ValidationError

from sbinit import __version__
from sbinit.clients.azure_client import AzureAdministrationClient
from sbinit.clients.interface import AdministrationClient
from sbinit.context import load_context
from sbinit.core.config_manager import ConfigManager, InitializerConfig
from sbinit.core.logging_config import get_logger, set_correlation_id, setup_logging
from sbinit.exceptions import ContextLoadError
from sbinit.initializer import build_resource, reconcile
from sbinit.provisioner import ServiceBusProvisioner

logger = get_logger("sbinit.cli")


def create_admin_client(connection_string: str) -> AdministrationClient:
    """Build the administration client used by CLI commands."""
    return AzureAdministrationClient.from_connection_string(connection_string)


def _require_connection_string(config: InitializerConfig, connection_string: Optional[str]) -> str:
    connection_string = connection_string or config.connection_string
    if not connection_string:
        raise click.UsageError(
            "No connection string given. Use --connection-string, SBINIT_CONNECTION_STRING "
            "or 'connection_string' in the config file."
        )
    return connection_string


def _require_context(config: InitializerConfig, context: Optional[str]) -> str:
    context = context or config.context
    if not context:
        raise click.UsageError(
            "No context given. Pass CONTEXT, set SBINIT_CONTEXT or 'context' in the config file."
        )
    return context


async def _with_client(admin_client: AdministrationClient, action):
    async with admin_client:
        return await action(admin_client)


def _run(connection_string: str, action, failure: str):
    try:
        admin_client = create_admin_client(connection_string)
    except ValueError as e:
        click.echo(f"[ERROR] Invalid connection string: {e}", err=True)
        sys.exit(2)

    try:
        return asyncio.run(_with_client(admin_client, action))
    except Exception as e:
        logger.exception(failure)
        click.echo(f"[ERROR] {failure}: {e}", err=True)
        sys.exit(1)


connection_string_option = click.option(
    "--connection-string",
    envvar="SBINIT_CONNECTION_STRING",
    help="Service Bus namespace connection string",
)


@click.group()
@click.version_option(version=__version__, prog_name="sbinit")
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file (YAML or JSON)",
)
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
def cli(ctx, config_file: Optional[Path], log_level: Optional[str], log_format: Optional[str]):
    """
    sbinit - Declarative Azure Service Bus initializer

    Create or converge queues, topics, subscriptions and filter rules.
    """
    overrides = {}
    if log_level:
        overrides.setdefault("logging", {})["level"] = log_level.upper()
    if log_format:
        overrides.setdefault("logging", {})["format"] = log_format.lower()

    try:
        config = ConfigManager().load(
            config_file=str(config_file) if config_file else None,
            cli_overrides=overrides,
        )
    except (ValidationError, ValueError) as e:
        raise click.ClickException(f"Invalid configuration: {e}")

    setup_logging(
        level=config.logging.level,
        format_type=config.logging.format,
        log_file=config.logging.file,
        rotation_size=config.logging.rotation_size,
        rotation_count=config.logging.rotation_count,
        module_levels=config.logging.module_levels,
    )
    set_correlation_id()

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command()
@click.argument("context", required=False)
@connection_string_option
@click.pass_context
def apply(ctx, context: Optional[str], connection_string: Optional[str]):
    """
    Provision the topology declared by CONTEXT.

    CONTEXT is an import path such as 'shop.bus:ShopContext'.

    Examples:
        sbinit apply shop.bus:ShopContext --connection-string "Endpoint=sb://..."
        sbinit --config sbinit.yaml apply
    """
    config: InitializerConfig = ctx.obj["config"]
    context_path = _require_context(config, context)
    connection_string = _require_connection_string(config, connection_string)

    try:
        resource = build_resource(load_context(context_path))
    except ContextLoadError as e:
        raise click.ClickException(e.message)

    click.echo(f"Provisioning {resource.name}: {len(resource.topics)} topic(s), {len(resource.queues)} queue(s)")
    _run(
        connection_string,
        lambda admin_client: reconcile(admin_client, resource),
        f"Provisioning {resource.name} failed",
    )
    click.echo(f"[OK] {resource.name} is up to date")


@cli.command()
@click.argument("context", required=False)
@click.pass_context
def show(ctx, context: Optional[str]):
    """
    Print the topology declared by CONTEXT as JSON without contacting the namespace.
    """
    config: InitializerConfig = ctx.obj["config"]
    context_path = _require_context(config, context)

    try:
        resource = build_resource(load_context(context_path))
    except ContextLoadError as e:
        raise click.ClickException(e.message)

    click.echo(json.dumps(resource.model_dump(mode="json"), indent=2))


@cli.group()
def delete():
    """Delete entities from the namespace (absent entities are skipped)."""
    pass


@delete.command("queue")
@click.argument("names", nargs=-1, required=True)
@connection_string_option
@click.pass_context
def delete_queue(ctx, names: Tuple[str, ...], connection_string: Optional[str]):
    """Delete queues by their namespace names."""
    connection_string = _require_connection_string(ctx.obj["config"], connection_string)
    _run(
        connection_string,
        lambda admin_client: ServiceBusProvisioner(admin_client).delete_queue(*names),
        "Deleting queues failed",
    )
    click.echo(f"[OK] Deleted queue(s): {', '.join(names)}")


@delete.command("topic")
@click.argument("names", nargs=-1, required=True)
@connection_string_option
@click.pass_context
def delete_topic(ctx, names: Tuple[str, ...], connection_string: Optional[str]):
    """Delete topics, with their subscriptions, by their namespace names."""
    connection_string = _require_connection_string(ctx.obj["config"], connection_string)
    _run(
        connection_string,
        lambda admin_client: ServiceBusProvisioner(admin_client).delete_topic(*names),
        "Deleting topics failed",
    )
    click.echo(f"[OK] Deleted topic(s): {', '.join(names)}")


@delete.command("subscription")
@click.argument("topic")
@click.argument("names", nargs=-1, required=True)
@connection_string_option
@click.pass_context
def delete_subscription(ctx, topic: str, names: Tuple[str, ...], connection_string: Optional[str]):
    """Delete subscriptions of TOPIC."""
    connection_string = _require_connection_string(ctx.obj["config"], connection_string)
    _run(
        connection_string,
        lambda admin_client: ServiceBusProvisioner(admin_client).delete_subscription(topic, *names),
        "Deleting subscriptions failed",
    )
    click.echo(f"[OK] Deleted subscription(s) of {topic}: {', '.join(names)}")


@delete.command("filter")
@click.argument("topic")
@click.argument("subscription")
@click.argument("names", nargs=-1, required=True)
@connection_string_option
@click.pass_context
def delete_filter(ctx, topic: str, subscription: str, names: Tuple[str, ...], connection_string: Optional[str]):
    """Delete filter rules of SUBSCRIPTION on TOPIC."""
    connection_string = _require_connection_string(ctx.obj["config"], connection_string)
    _run(
        connection_string,
        lambda admin_client: ServiceBusProvisioner(admin_client).delete_filter(topic, subscription, *names),
        "Deleting filters failed",
    )
    click.echo(f"[OK] Deleted filter(s) of {topic}/{subscription}: {', '.join(names)}")


@cli.command()
def version():
    """Show version information."""
    click.echo(f"sbinit v{__version__}")


def main():
    """Main entry point for CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()

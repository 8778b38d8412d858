"""
sentry-bridge CLI

Inspect the error tracking configuration and send test events.

Usage:
    sentry-bridge [OPTIONS] COMMAND [ARGS]...

Commands:
    clients   List configured clients
    check     Send a test message through a client
"""

import click
import logging
import sys
from urllib.parse import urlsplit

from dotenv import load_dotenv

from ..config import DEFAULT_CLIENT_KEY, TrackingConfig
from ..errors import ConfigurationError
from ..sentry.client import INFO
from ..sentry.registry import ClientRegistry

# Load .env file
load_dotenv()


def setup_logging(verbose: bool):
    """Configure logging to output to stdout."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(message)s',  # Simple format for CLI
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def mask_dsn(dsn):
    """Hide the key part of a DSN."""
    if not dsn:
        return '(none)'
    parts = urlsplit(dsn)
    host = parts.hostname or ''
    if parts.port:
        host = f"{host}:{parts.port}"
    return f"{parts.scheme}://***@{host}{parts.path}"


@click.group()
@click.option('-v', '--verbose', is_flag=True, help='Verbose output (show DEBUG logs)')
@click.pass_context
def cli(ctx, verbose):
    """Error tracking configuration tools."""
    setup_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj['config'] = TrackingConfig.from_env()


@cli.command()
@click.pass_context
def clients(ctx):
    """List configured clients."""
    config = ctx.obj['config']

    if DEFAULT_CLIENT_KEY not in config.clients:
        click.echo(f"{DEFAULT_CLIENT_KEY}: (not configured, events are dropped)")

    for key, client_config in sorted(config.clients.items()):
        options = ', '.join(sorted(client_config.options)) or '-'
        click.echo(f"{key}: dsn={mask_dsn(client_config.dsn)} options={options}")

    click.echo(f"auto capture: {'on' if config.auto_capture else 'off'}")


@cli.command()
@click.option('--key', default=DEFAULT_CLIENT_KEY, help='Client configuration key')
@click.option('--message', default='sentry-bridge test message', help='Message to send')
@click.pass_context
def check(ctx, key, message):
    """Send a test message through a client."""
    registry = ClientRegistry(ctx.obj['config'].clients)

    try:
        client = registry.get_client(key)
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    event_id = client.capture_message(message, level=INFO, tags={"category": "sentry-bridge.check"})
    sent = client.send_unsent_errors()
    if event_id is None and sent:
        # Held for bulk sending and sent by the call above
        event_id = sent[-1]

    if event_id:
        click.echo(f"Sent event {event_id}")
    else:
        click.echo("No event sent (client has no DSN or the event was dropped)")


if __name__ == '__main__':
    cli()

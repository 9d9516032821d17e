"""
cjdnsadmin CLI - main entry point.
"""
import logging
import os
from typing import Optional

import click

from ..admin.config import AdminConfig, DEFAULT_CONFIG_PATH
from .admin import memory, ping
from .routes import dump, hosts, routes


@click.group()
@click.option('--host', '-H', envvar='CJDNS_ADMIN_HOST', help='Admin socket host (default: localhost)')
@click.option('--port', '-p', type=int, envvar='CJDNS_ADMIN_PORT', help='Admin socket port (default: 11234)')
@click.option('--password', envvar='CJDNS_ADMIN_PASSWORD', help='Admin password')
@click.option('--config', 'config_path', type=click.Path(dir_okay=False),
              help=f'cjdnsadmin JSON file (default: {DEFAULT_CONFIG_PATH} if present)')
@click.option('--timeout', type=float, help='Socket timeout in seconds')
@click.option('--debug', is_flag=True, help='Log requests and replies')
@click.option('--dummy', is_flag=True, help='Talk to a built-in dummy router instead of a socket')
@click.pass_context
def cli(ctx, host: Optional[str], port: Optional[int], password: Optional[str],
        config_path: Optional[str], timeout: Optional[float], debug: bool, dummy: bool):
    """cjdnsadmin - cjdns admin socket client and route explorer."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format='%(name)s: %(message)s')

    config = AdminConfig()
    path = config_path or os.path.expanduser(DEFAULT_CONFIG_PATH)
    if config_path or os.path.exists(path):
        try:
            config = AdminConfig.from_file(path)
        except (OSError, ValueError) as e:
            raise click.ClickException(f"Failed to read config {path}: {e}")

    ctx.obj = {
        'config': config.with_overrides(host=host, port=port, password=password, timeout=timeout),
        'dummy': dummy,
    }


cli.add_command(ping)
cli.add_command(memory)
cli.add_command(dump)
cli.add_command(routes)
cli.add_command(hosts)

if __name__ == "__main__":
    cli()

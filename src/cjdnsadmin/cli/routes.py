"""
CLI commands for the routing table.
"""
import json
from typing import Optional

import click

from ..routing.table import RoutingTable
from .admin import open_session


def _route_record(route) -> dict:
    return {
        "address": route.address,
        "path": route.path,
        "link": route.link,
        "quality": route.quality,
    }


@click.command()
@click.option('--format', 'format', type=click.Choice(['table', 'json']),
              default='table', show_default=True, help='Output format')
@click.pass_obj
def dump(obj, format: str):
    """
    Dump the router's routing table.

    Example:
      cjdnsadmin dump --format json
    """
    with open_session(obj) as session:
        rows = session.dump_table()

    if format == 'json':
        click.echo(json.dumps(rows, separators=(",", ":"), ensure_ascii=True))
        return

    click.echo(f"{'Address':40} {'Path':20} {'Link':>12}")
    click.echo("-" * 74)
    for row in rows:
        click.echo(f"{row['ip']:40} {row['path']:20} {row['link']:>12}")
    click.echo(f"\n{len(rows)} routes")


@click.command()
@click.option('--target', '-t', help='Only show routes to this address')
@click.option('--max-hops', type=int, help='Skip routes with more intermediate hops')
@click.option('--format', 'format', type=click.Choice(['table', 'json']),
              default='table', show_default=True, help='Output format')
@click.pass_obj
def routes(obj, target: Optional[str], max_hops: Optional[int], format: str):
    """
    Show hop chains to every live host.

    Example:
      cjdnsadmin routes --max-hops 3
    """
    with open_session(obj) as session:
        table = RoutingTable.build(session)

    try:
        chains = table.get_routes(target, max_hops)
    except ValueError as e:
        raise click.ClickException(str(e))

    if format == 'json':
        payload = {
            address: [[_route_record(route) for route in chain] for chain in address_chains]
            for address, address_chains in chains.items()
        }
        click.echo(json.dumps(payload, separators=(",", ":"), ensure_ascii=True))
        return

    for address, address_chains in chains.items():
        click.echo(address)
        for chain in address_chains:
            hops = " -> ".join(route.path for route in chain)
            click.echo(f"  {len(chain) - 1} hops: {hops}")


@click.command()
@click.option('--max-hops', type=int, help='Only hosts within this many hops')
@click.option('--ping', 'ping_mode', type=click.Choice(['none', 'cjdns', 'tcp']),
              default='none', show_default=True, help='Probe each host')
@click.option('--ping-timeout', type=float, default=1.0, show_default=True,
              help='Probe timeout in seconds')
@click.pass_obj
def hosts(obj, max_hops: Optional[int], ping_mode: str, ping_timeout: float):
    """List distinct hosts in the routing table."""
    with open_session(obj) as session:
        table = RoutingTable.build(session)
        found = table.get_hosts(max_hops) if max_hops is not None else list(table.hosts)

        for host in found:
            if ping_mode == 'none':
                click.echo(host.address)
                continue

            if ping_mode == 'cjdns':
                result = host.ping_cjdns(ping_timeout)
            else:
                try:
                    result = host.ping_tcp(timeout=ping_timeout)
                except (RuntimeError, OSError) as e:
                    raise click.ClickException(f"TCP ping failed: {e}")

            status = f"{result['time']:.0f} ms" if result else "no reply"
            click.echo(f"{host.address:40} {status}")

        click.echo(f"\n{len(found)} hosts")

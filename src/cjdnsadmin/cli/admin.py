"""
CLI commands talking to the admin socket directly.
"""
from contextlib import contextmanager

import click

from ..admin.dummy_peer import DummyRouter
from ..admin.exceptions import AdminError
from ..admin.session import AdminSession


@contextmanager
def open_session(obj):
    """Session from the CLI context; AdminError becomes a ClickException."""
    config = obj['config']
    try:
        if obj['dummy']:
            session = AdminSession(DummyRouter(password=config.password),
                                   password=config.password, chunk_size=config.chunk_size)
        else:
            session = AdminSession.connect(config)

        with session:
            yield session
    except AdminError as e:
        raise click.ClickException(str(e))


@click.command()
@click.pass_obj
def ping(obj):
    """Ping the admin socket."""
    with open_session(obj) as session:
        response = session.ping()
    click.echo(response.get('q', 'no reply'))


@click.command()
@click.pass_obj
def memory(obj):
    """Show bytes of memory allocated by the router."""
    with open_session(obj) as session:
        allocated = session.memory()
    click.echo(f"{allocated:,} bytes")

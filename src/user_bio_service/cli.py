import asyncio

import click

from . import __version__


def get_version():
    return __version__


def run_server(host="0.0.0.0", port=3001, reload=False):
    import uvicorn

    uvicorn.run("user_bio_service.server.main:app", host=host, port=port, reload=reload)


async def initialize_roles():
    from .config import get_settings
    from .database import RoleRepository, close_db, init_db

    db = await init_db(get_settings())
    try:
        return await RoleRepository(db).initialize_defaults()
    finally:
        await close_db()


@click.group()
def cli():
    pass


@cli.command()
@click.option("--format", default="text", type=click.Choice(["text", "json"]))
def version(format):
    if format == "json":
        import json as j

        click.echo(j.dumps({"version": get_version()}))
    else:
        click.echo(f"v{get_version()}")


@cli.command()
@click.option("--host", default="0.0.0.0")
@click.option("--port", default=3001)
@click.option("--reload", is_flag=True)
def serve(host, port, reload):
    run_server(host, port, reload)


@cli.command("init-roles")
def init_roles():
    """Create the default roles if they do not exist."""
    from .telemetry import setup_logging

    setup_logging()
    roles = asyncio.run(initialize_roles())
    click.echo(f"Initialized {len(roles)} roles:")
    for role in roles:
        click.echo(f"  - {role['name']}: {role.get('description', '')}")


if __name__ == "__main__":
    cli()

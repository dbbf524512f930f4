"""Command-line interface for the MBC CMS API.

This module provides the CLI commands for running the server, preparing the
database, bootstrapping the administrator and managing roles.
"""

import asyncio
from typing import NoReturn

import click

from mbc_cms.core.config import get_settings
from mbc_cms.core.exceptions import MbcError
from mbc_cms.core.logging import configure_logging, get_logger

BANNER = r"""
  __  __ ____   ____    ____ __  __ ____       _    ____ ___
 |  \/  | __ ) / ___|  / ___|  \/  / ___|     / \  |  _ \_ _|
 | |\/| |  _ \| |     | |   | |\/| \___ \    / _ \ | |_) | |
 | |  | | |_) | |___  | |___| |  | |___) |  / ___ \|  __/| |
 |_|  |_|____/ \____|  \____|_|  |_|____/  /_/   \_\_|  |___|
"""


def parse_permission(value: str) -> tuple[str, int]:
    """Parse a ``name=level`` option value.

    Raises:
        click.BadParameter: If the value is not ``name=level`` with an integer level.
    """
    name, separator, level = value.partition("=")
    if not separator or not name.strip():
        raise click.BadParameter(f"expected name=level, got '{value}'")
    try:
        return name.strip(), int(level)
    except ValueError:
        raise click.BadParameter(f"level must be an integer, got '{level}'") from None


def _permission_callback(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> list[tuple[str, int]]:
    return [parse_permission(value) for value in values]


@click.group()
@click.version_option(version="1.0.0", prog_name="mbc-cms")
def cli() -> None:
    """MBC CMS API - content management with role-based access control."""


@cli.command()
@click.option("--host", type=str, default=None, help="Host to bind to (overrides config)")
@click.option("--port", type=int, default=None, help="Port to bind to (overrides config)")
@click.option("--workers", type=int, default=None, help="Number of worker processes")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
def serve(host: str | None, port: int | None, workers: int | None, reload: bool) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers

    click.echo(BANNER)
    configure_logging(settings)

    logger = get_logger(__name__)
    logger.info(
        "Starting MBC CMS API server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "mbc_cms.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command()
@click.option("--force", is_flag=True, help="Skip confirmation prompt")
def init_db(force: bool) -> None:
    """Create tables (development) or apply migrations (otherwise)."""
    from mbc_cms.infrastructure.persistence.database import close_database, init_database

    configure_logging(get_settings())

    if not force:
        click.confirm("This will prepare the database schema. Continue?", abort=True, default=False)

    async def initialize() -> None:
        try:
            await init_database()
        finally:
            await close_database()

    asyncio.run(initialize())
    click.echo("Database initialized successfully.")


@cli.command()
def bootstrap() -> None:
    """Ensure the default role and the administrator exist."""
    from mbc_cms.domain.services import BootstrapService
    from mbc_cms.infrastructure.persistence.database import close_database, get_db_manager

    settings = get_settings()
    configure_logging(settings)

    async def run() -> None:
        try:
            result = await BootstrapService(get_db_manager().session_factory, settings).run()
        finally:
            await close_database()
        click.echo(
            f"Default role:  {result.role_id} ({'created' if result.role_created else 'existing'})\n"
            f"Administrator: {settings.admin_email} "
            f"({'created' if result.admin_created else 'existing'})"
        )

    try:
        asyncio.run(run())
    except MbcError as e:
        click.echo(f"Error: {e.message}", err=True)
        raise SystemExit(1)


@cli.command()
@click.argument("name")
@click.option(
    "--permission",
    "-p",
    "permissions",
    multiple=True,
    callback=_permission_callback,
    help="Permission as name=level, repeatable",
)
def create_role(name: str, permissions: list[tuple[str, int]]) -> None:
    """Create a role NAME with its permissions in one transaction."""
    from mbc_cms.domain.services import RoleManager
    from mbc_cms.infrastructure.persistence.database import close_database, get_db_manager

    settings = get_settings()
    configure_logging(settings)

    async def create() -> str:
        try:
            manager = RoleManager(
                get_db_manager().session_factory, settings.permission_level_comparison
            )
            return await manager.create_role_with_permissions(name, permissions)
        finally:
            await close_database()

    try:
        role_id = asyncio.run(create())
    except (MbcError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    click.echo(role_id)


@cli.command()
@click.argument("role_id")
@click.argument("permission_name")
@click.argument("level", type=int)
def check_permission(role_id: str, permission_name: str, level: int) -> None:
    """Check whether ROLE_ID holds PERMISSION_NAME at LEVEL.

    Exits 0 when granted, 1 when denied and 2 when the store fails.
    """
    from mbc_cms.domain.services import RoleManager
    from mbc_cms.infrastructure.persistence.database import close_database, get_db_manager

    settings = get_settings()
    configure_logging(settings)

    async def check() -> bool:
        try:
            manager = RoleManager(
                get_db_manager().session_factory, settings.permission_level_comparison
            )
            return await manager.authorize(role_id, permission_name, level)
        finally:
            await close_database()

    try:
        granted = asyncio.run(check())
    except MbcError as e:
        click.echo(f"Error: {e.message}", err=True)
        raise SystemExit(2)
    click.echo("granted" if granted else "denied")
    raise SystemExit(0 if granted else 1)


@cli.command()
def info() -> None:
    """Display configuration."""
    settings = get_settings()

    click.echo(f"""
{settings.app_name} v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}
  API Prefix:   {settings.api_prefix}

Server:
  Host:         {settings.host}
  Port:         {settings.port}
  Workers:      {settings.workers}

Database:
  URL:          {settings.database_url}
  Pool Size:    {settings.db_pool_size}

Authorization:
  Admin Email:  {settings.admin_email}
  Default Role: {settings.default_role_name}
  Levels:       {settings.permission_level_comparison}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
  Directory:    {settings.log_dir}
""")


def main() -> NoReturn:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()

import asyncio
import typer

import app.db_models # noqa: F401

from app.auth.service import create_access_token
from app.config import settings
from app.database import Database
from app.users.service import get_or_create_admin

cli = typer.Typer()


async def create_admin_runner(database_url: str, email: str, name: str | None) -> None:
    database = Database(database_url, ssl=settings.DATABASE_SSL)
    try:
        async with database.session_factory() as session:
            admin_user = await get_or_create_admin(session, email=email, name=name)
            typer.echo(f"Admin ready: id={admin_user.id} email={admin_user.email} role={admin_user.role}")
    finally:
        await database.dispose()


@cli.command(name="create-admin")
def create_admin(
    email: str = typer.Option(..., "--email", "-e", help="Admin's email address."),
    name: str = typer.Option(None, "--name", "-n", help="Admin's display name."),
    database_url: str = typer.Option(settings.DATABASE_URL, "--database-url", help="Override DATABASE_URL."),
):
    """
    Creates a user with 'admin' role, or promotes an existing user with that email.
    """
    asyncio.run(create_admin_runner(database_url, email, name))


@cli.command(name="issue-token")
def issue_token(
    email: str = typer.Option(..., "--email", "-e", help="Subject email for the token."),
    minutes: int = typer.Option(settings.ACCESS_TOKEN_EXPIRE_MINUTES, "--minutes", help="Token lifetime."),
):
    """
    Prints a bearer token for local testing.
    """
    typer.echo(asyncio.run(create_access_token(email, expires_minutes=minutes)))


@cli.command(name="init-db")
def init_db(
    database_url: str = typer.Option(settings.DATABASE_URL, "--database-url", help="Override DATABASE_URL."),
):
    """
    Creates all tables directly (development only; use alembic for real deployments).
    """
    async def runner():
        database = Database(database_url, ssl=settings.DATABASE_SSL)
        try:
            await database.create_all()
        finally:
            await database.dispose()

    asyncio.run(runner())
    typer.echo("Tables created")


if __name__ == "__main__":
    cli()

"""HRS CLI tool."""

import asyncio

import typer

app = typer.Typer(name="hrs", help="HRS CLI")
db_app = typer.Typer(help="Database management commands")
app.add_typer(db_app, name="db")


def _mysql_params():
    """Split the sync MySQL URL into connection params and database name."""
    from sqlalchemy.engine import make_url
    from hrs.core.config import settings

    url = make_url(settings.MYSQL_URL)
    params = {
        "host": url.host or "localhost",
        "port": url.port or 3306,
        "user": url.username or "root",
        "password": url.password or "",
    }
    return params, url.database


@db_app.command("create")
def db_create():
    """Create the MySQL database if it doesn't exist."""
    import pymysql

    params, db_name = _mysql_params()
    conn = pymysql.connect(**params)
    try:
        cursor = conn.cursor()
        cursor.execute(f"CREATE DATABASE IF NOT EXISTS `{db_name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")
        conn.commit()
        typer.echo(f"✅ Database '{db_name}' created (or already exists)")
    finally:
        conn.close()


@db_app.command("init")
def db_init():
    """Create all tables."""
    from hrs.db.session import create_tables, engine

    async def _run():
        try:
            await create_tables()
        finally:
            await engine.dispose()

    asyncio.run(_run())
    typer.echo("✅ Tables created")


async def run_seeds() -> None:
    from hrs.db.session import SessionLocal
    from hrs.db.seeds.seed_roles import seed_roles
    from hrs.db.seeds.seed_super_admin import seed_super_admin
    from hrs.db.seeds.seed_settings import seed_settings

    async with SessionLocal() as db:
        await seed_roles(db)
        await seed_super_admin(db)
        await seed_settings(db)


@db_app.command("seed")
def db_seed():
    """Seed the Super Administrator role and user, and default settings."""
    from hrs.db.session import engine

    async def _run():
        try:
            await run_seeds()
        finally:
            await engine.dispose()

    asyncio.run(_run())
    typer.echo("✅ All seeds applied")


@db_app.command("reset")
def db_reset():
    """Drop and recreate the database (DANGER)."""
    confirm = typer.confirm("⚠️  This will DROP the entire database. Continue?")
    if not confirm:
        raise typer.Abort()
    import pymysql

    params, db_name = _mysql_params()
    conn = pymysql.connect(**params)
    try:
        cursor = conn.cursor()
        cursor.execute(f"DROP DATABASE IF EXISTS `{db_name}`")
        cursor.execute(f"CREATE DATABASE `{db_name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")
        conn.commit()
        typer.echo(f"✅ Database '{db_name}' reset")
    finally:
        conn.close()


@app.command("hash-password")
def hash_password_command(
    password: str = typer.Argument(..., help="Plain-text password to hash"),
):
    """Print the stored salt:hash form of a password."""
    from hrs.core.security import hash_password

    typer.echo(hash_password(password))


@app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", help="Host"),
    port: int = typer.Option(8000, help="Port"),
    reload: bool = typer.Option(True, help="Auto-reload"),
):
    """Start the FastAPI development server."""
    import uvicorn
    uvicorn.run("hrs.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()

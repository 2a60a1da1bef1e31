"""Back office CLI tool."""

from typing import Optional

import typer

app = typer.Typer(name="backoffice", help="Back office CLI")
db_app = typer.Typer(help="Database management commands")
sessions_app = typer.Typer(help="Session maintenance commands")
app.add_typer(db_app, name="db")
app.add_typer(sessions_app, name="sessions")


@db_app.command("init")
def db_init():
    """Create all tables that don't exist yet."""
    import backoffice.models  # noqa: F401  (registers tables on Base.metadata)
    from backoffice.db.base import Base
    from backoffice.db.session import engine

    Base.metadata.create_all(bind=engine)
    typer.echo("✅ Tables created")


@db_app.command("seed")
def db_seed():
    """Seed permissions, the admin role, and the admin user."""
    from backoffice.db.session import SessionLocal
    from backoffice.db.seeds.seed_rbac import seed_rbac
    from backoffice.db.seeds.seed_admin import seed_admin

    db = SessionLocal()
    try:
        seed_rbac(db)
        seed_admin(db)
    finally:
        db.close()
    typer.echo("✅ All seeds applied")


@db_app.command("reset")
def db_reset():
    """Drop and recreate all tables (DANGER)."""
    confirm = typer.confirm("⚠️  This will DROP every table. Continue?")
    if not confirm:
        raise typer.Abort()
    import backoffice.models  # noqa: F401
    from backoffice.db.base import Base
    from backoffice.db.session import engine

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    typer.echo("✅ Database reset")


@app.command("create-user")
def create_user(
    username: str = typer.Argument(..., help="Login name"),
    password: str = typer.Option(
        ..., prompt=True, hide_input=True, confirmation_prompt=True, help="Password",
    ),
    role: Optional[str] = typer.Option(None, help="Role name to assign"),
):
    """Provision a back office account."""
    from backoffice.core.exceptions import BackofficeError
    from backoffice.db.session import SessionLocal
    from backoffice.services.auth_service import auth_service

    db = SessionLocal()
    try:
        user = auth_service.create_user(db, username, password, role)
    except BackofficeError as e:
        typer.echo(f"❌ {e.message}", err=True)
        raise typer.Exit(code=1)
    finally:
        db.close()
    typer.echo(f"✅ Created user {username} ({user.id})")


@sessions_app.command("purge")
def sessions_purge():
    """Delete expired sessions."""
    from backoffice.db.session import SessionLocal
    from backoffice.services.auth_service import auth_service

    db = SessionLocal()
    try:
        deleted = auth_service.purge_expired_sessions(db)
    finally:
        db.close()
    typer.echo(f"✅ Purged {deleted} expired sessions")


@app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", help="Host"),
    port: int = typer.Option(8000, help="Port"),
    reload: bool = typer.Option(True, help="Auto-reload"),
):
    """Start the FastAPI development server."""
    import uvicorn
    uvicorn.run("backoffice.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()

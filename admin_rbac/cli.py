"""Admin RBAC CLI tool (rbacctl)."""

import json

import typer

app = typer.Typer(name="rbacctl", help="Admin RBAC CLI")
db_app = typer.Typer(help="Database management commands")
permissions_app = typer.Typer(help="Permission maintenance commands")
app.add_typer(db_app, name="db")
app.add_typer(permissions_app, name="permissions")


@db_app.command("init")
def db_init():
    """Create all tables that do not exist yet."""
    from admin_rbac.db.base import Base
    from admin_rbac.db.session import engine
    import admin_rbac.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    typer.echo("Tables created (or already exist)")


@db_app.command("seed")
def db_seed():
    """Seed modules, permissions, the super-admin role and account."""
    from admin_rbac.db.session import SessionLocal
    from admin_rbac.db.seeds.seed_rbac import seed_rbac
    from admin_rbac.db.seeds.seed_super_admin import seed_super_admin

    db = SessionLocal()
    try:
        seed_rbac(db)
        seed_super_admin(db)
    finally:
        db.close()
    typer.echo("All seeds applied")


@permissions_app.command("cleanup")
def permissions_cleanup(
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be deleted"),
):
    """Remove restricted-module permissions from every non-super-admin role."""
    from admin_rbac.db.session import SessionLocal
    from admin_rbac.services.role_service import role_service

    db = SessionLocal()
    try:
        report = role_service.cleanup_restricted_permissions(db, dry_run=dry_run)
    finally:
        db.close()

    if not report["found"]:
        typer.echo("No restricted permissions found. Database is clean.")
        return

    for role_key, entry in report["roles"].items():
        typer.echo(f"Role: {entry['role_name']} ({role_key})")
        for perm in entry["permissions"]:
            typer.echo(f"  - {perm['module_key']}:{perm['permission_name']}")

    if dry_run:
        typer.echo(f"DRY RUN: {report['found']} permission(s) would be removed")
    else:
        typer.echo(
            f"Removed {report['deleted']} restricted permission(s) "
            f"from {len(report['roles'])} role(s)"
        )


@permissions_app.command("catalog")
def permissions_catalog():
    """Print the assignable permission catalog as JSON."""
    from admin_rbac.db.session import SessionLocal
    from admin_rbac.services.permission_service import permission_service

    db = SessionLocal()
    try:
        modules = permission_service.list_modules_with_permissions(db)
    finally:
        db.close()
    typer.echo(json.dumps(modules, indent=2, default=str))


@app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", help="Host"),
    port: int = typer.Option(8000, help="Port"),
    reload: bool = typer.Option(False, help="Auto-reload"),
):
    """Start the FastAPI server."""
    import uvicorn
    uvicorn.run("admin_rbac.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()

"""Admin console CLI tool (adminctl)."""

from typing import List, Optional

import typer

from adminconsole.core.config import settings
from adminconsole.models.user import UserRole

app = typer.Typer(name="adminctl", help="Admin Console CLI")
db_app = typer.Typer(help="Database management commands")
app.add_typer(db_app, name="db")

TokenOption = typer.Option(None, "--token", envvar="ADMINCTL_TOKEN", help="Bearer token from `adminctl login`")
BaseUrlOption = typer.Option(None, "--base-url", help="API base URL")


@db_app.command("create")
def db_create():
    """Create the MySQL database if it doesn't exist."""
    import pymysql
    from sqlalchemy.engine import make_url

    url = make_url(settings.DATABASE_URL)
    conn = pymysql.connect(
        host=url.host, port=url.port or 3306, user=url.username, password=url.password or "",
    )
    try:
        cursor = conn.cursor()
        cursor.execute(
            f"CREATE DATABASE IF NOT EXISTS `{url.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
        typer.echo(f"✅ Database '{url.database}' created (or already exists)")
    finally:
        conn.close()


@db_app.command("init")
def db_init():
    """Create all tables."""
    from adminconsole import models  # noqa: F401
    from adminconsole.db.base import Base
    from adminconsole.db.session import engine

    Base.metadata.create_all(bind=engine)
    typer.echo("✅ Tables created")


@db_app.command("seed")
def db_seed():
    """Seed projects and the bootstrap admin."""
    from adminconsole.db.seeds.seed_admin import seed_admin
    from adminconsole.db.seeds.seed_projects import seed_projects
    from adminconsole.db.session import SessionLocal

    db = SessionLocal()
    try:
        seed_projects(db)
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
    from adminconsole import models  # noqa: F401
    from adminconsole.db.base import Base
    from adminconsole.db.session import engine

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    typer.echo("✅ Tables reset")


@app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", help="Host"),
    port: int = typer.Option(8000, help="Port"),
    reload: bool = typer.Option(False, help="Auto-reload"),
):
    """Start the API server."""
    import uvicorn
    uvicorn.run("adminconsole.main:app", host=host, port=port, reload=reload)


def _session(token: Optional[str]):
    from adminconsole.client.session import ConsoleSession, SessionExpiredError

    if not token:
        typer.echo("No token. Run `adminctl login` and export ADMINCTL_TOKEN.", err=True)
        raise typer.Exit(code=1)
    try:
        return ConsoleSession.from_token(token)
    except SessionExpiredError as e:
        typer.echo(f"❌ {e.message}", err=True)
        raise typer.Exit(code=1)


def _call(base_url: Optional[str], action):
    """Run ``action(client)`` and turn client/API errors into exit code 1."""
    from adminconsole.client.api_client import AdminConsoleClient, ApiError
    from adminconsole.core.exceptions import AdminConsoleError

    with AdminConsoleClient(base_url) as client:
        try:
            return action(client)
        except ApiError as e:
            for message in e.errors:
                typer.echo(f"❌ {e.status_code} {message}", err=True)
        except AdminConsoleError as e:
            for message in e.errors:
                typer.echo(f"❌ {message}", err=True)
    raise typer.Exit(code=1)


@app.command("login")
def login(
    email: str = typer.Option(..., prompt=True),
    password: str = typer.Option(..., prompt=True, hide_input=True),
    base_url: Optional[str] = BaseUrlOption,
):
    """Log in and print the access token."""
    session = _call(base_url, lambda client: client.login(email, password))
    typer.echo(f"✅ Logged in as {session.user.get('username')} ({session.user.get('role')})")
    typer.echo(f"   expires {session.expires_at.isoformat()}")
    typer.echo(f"export ADMINCTL_TOKEN={session.access_token}")


@app.command("users")
def list_users(token: Optional[str] = TokenOption, base_url: Optional[str] = BaseUrlOption):
    """List all users."""
    session = _session(token)
    users = _call(base_url, lambda client: client.list_users(session))
    for u in users:
        typer.echo(f"  [{u['user_id']}] {u['username']} <{u['email']}> {u['role']}")


@app.command("user")
def show_user(
    user_id: int = typer.Argument(..., help="User ID"),
    token: Optional[str] = TokenOption,
    base_url: Optional[str] = BaseUrlOption,
):
    """Show one user with its projects."""
    session = _session(token)
    user = _call(base_url, lambda client: client.get_user(session, user_id))
    _echo_user(user)


def _parse_project(value: str) -> dict:
    project_id, sep, support_type = value.partition(":")
    if not sep or not project_id.strip().isdigit() or not support_type.strip():
        raise typer.BadParameter(f"expected ID:SUPPORT_TYPE, got {value!r}", param_hint="--project")
    return {"project_id": int(project_id), "support_type": support_type.strip()}


@app.command("add-user")
def add_user(
    username: str = typer.Option(..., "--username"),
    full_name: str = typer.Option(..., "--full-name"),
    email: str = typer.Option(..., "--email"),
    mobile: str = typer.Option(..., "--mobile", help="10 digits"),
    role: UserRole = typer.Option(..., "--role"),
    project: List[str] = typer.Option(..., "--project", help="ID:SUPPORT_TYPE, repeatable"),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
    token: Optional[str] = TokenOption,
    base_url: Optional[str] = BaseUrlOption,
):
    """Create a user with one or more project assignments."""
    projects = [_parse_project(p) for p in project]
    session = _session(token)
    created = _call(base_url, lambda client: client.add_user(
        session,
        username=username, full_name=full_name, email=email, mobile=mobile,
        role=role.value, password=password, projects=projects,
    ))
    typer.echo(f"✅ Created user {created['userId']} ({created['role']})")


@app.command("edit-user")
def edit_user(
    user_id: int = typer.Argument(..., help="User ID"),
    username: Optional[str] = typer.Option(None, "--username"),
    full_name: Optional[str] = typer.Option(None, "--full-name"),
    email: Optional[str] = typer.Option(None, "--email"),
    mobile: Optional[str] = typer.Option(None, "--mobile"),
    role: Optional[UserRole] = typer.Option(None, "--role"),
    token: Optional[str] = TokenOption,
    base_url: Optional[str] = BaseUrlOption,
):
    """Change some of a user's fields; the rest are left as they are."""
    changes = {
        "username": username, "full_name": full_name, "email": email, "mobile": mobile,
        "role": role.value if role else None,
    }
    changes = {field: value for field, value in changes.items() if value is not None}
    if not changes:
        typer.echo("Nothing to change. Pass at least one of --username/--full-name/--email/--mobile/--role.", err=True)
        raise typer.Exit(code=1)
    session = _session(token)
    user = _call(base_url, lambda client: client.edit_user(session, user_id, **changes))
    typer.echo(f"✅ Updated user {user['user_id']}")
    _echo_user(user)


@app.command("delete-user")
def delete_user(
    user_id: int = typer.Argument(..., help="User ID"),
    token: Optional[str] = TokenOption,
    base_url: Optional[str] = BaseUrlOption,
):
    """Delete a user and its project assignments."""
    session = _session(token)
    typer.confirm(f"Delete user {user_id}?", abort=True)
    deleted = _call(base_url, lambda client: client.delete_user(session, user_id))
    typer.echo(f"✅ Deleted user {deleted}")


@app.command("projects")
def list_projects(token: Optional[str] = TokenOption, base_url: Optional[str] = BaseUrlOption):
    """List assignable projects."""
    session = _session(token)
    projects = _call(base_url, lambda client: client.list_projects(session))
    for p in projects:
        typer.echo(f"  [{p['project_id']}] {p['project_name']}")


@app.command("profile")
def profile(
    user_id: Optional[int] = typer.Argument(None, help="User ID (admins only; defaults to yourself)"),
    token: Optional[str] = TokenOption,
    base_url: Optional[str] = BaseUrlOption,
):
    """Show your profile."""
    session = _session(token)
    user = _call(base_url, lambda client: client.view_profile(session, user_id))
    _echo_user(user)


def _echo_user(user: dict) -> None:
    typer.echo(f"[{user['user_id']}] {user['username']} - {user['full_name']}")
    typer.echo(f"  email:  {user['email']}")
    typer.echo(f"  mobile: {user['mobile']}")
    typer.echo(f"  role:   {user['role']}")
    for p in user.get("projects", []):
        typer.echo(f"  - {p['project_name']} ({p['support_type']})")


if __name__ == "__main__":
    app()

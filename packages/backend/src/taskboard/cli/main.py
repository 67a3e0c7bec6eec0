"""Taskboard CLI — manage your tasks from the terminal.

Usage:
    taskboard register "Ann Lee" ann@example.com     # Create an account
    taskboard login ann@example.com                  # Store a token locally
    taskboard tasks add "Write spec" -p high         # Create a task
    taskboard tasks list --status pending            # List / filter tasks
    taskboard tasks done <id>                        # Mark a task completed
    taskboard stats                                  # Task summary
    taskboard serve                                  # Run the API server
    taskboard promote ann@example.com                # Grant admin (server side)

Talks to TASKBOARD_API_URL (default http://localhost:8000/api) and keeps
the token in TASKBOARD_TOKEN_FILE (default ~/.config/taskboard/token).
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
from datetime import datetime
from typing import Optional

import click

from taskboard import __version__
from taskboard.client.api import ApiClient, ApiError
from taskboard.client.services import TaskClient, UserClient
from taskboard.client.session import AuthSession
from taskboard.client.token_store import FileTokenStore
from taskboard.logging_config import configure_logging

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _api() -> ApiClient:
    """Build a client for the configured API with the on-disk token."""
    return ApiClient(token_store=FileTokenStore())


def _run(coro):
    """Run an async coroutine from synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    ApiError becomes a ClickException, so the command exits with code 1.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        runner = asyncio.run
    else:
        def runner(c):
            with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
                return pool.submit(asyncio.run, c).result()

    try:
        return runner(coro)
    except ApiError as e:
        raise click.ClickException(_describe(e.message, e.errors))


def _describe(message: Optional[str], errors) -> str:
    return "\n".join([message or "Request failed", *(f"  - {d}" for d in errors)])


async def _require_login(api: ApiClient) -> AuthSession:
    session = AuthSession(api)
    await session.check_auth()
    if not session.is_authenticated:
        raise click.ClickException("Not logged in. Run `taskboard login` first.")
    return session


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k) or "—")[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


def _status_color(status: str) -> str:
    colors = {
        "pending": "yellow",
        "in-progress": "cyan",
        "completed": "green",
        "low": "white",
        "medium": "yellow",
        "high": "red",
    }
    return colors.get(status, "white")


def _show_task(task: dict) -> None:
    click.secho(task["title"], bold=True)
    click.echo(f"  ID:        {task['id']}")
    click.echo(f"  Status:    {click.style(task['status'], fg=_status_color(task['status']))}")
    click.echo(f"  Priority:  {click.style(task['priority'], fg=_status_color(task['priority']))}")
    click.echo(f"  Category:  {task['category']}")
    if task.get("description"):
        click.echo(f"  Details:   {task['description']}")
    if task.get("dueDate"):
        click.echo(f"  Due:       {task['dueDate']}")
    if task.get("completedAt"):
        click.echo(f"  Completed: {task['completedAt']}")
    if task.get("tags"):
        click.echo(f"  Tags:      {', '.join(task['tags'])}")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="taskboard")
def main():
    """Taskboard — personal task tracking from the command line."""
    configure_logging("WARNING", to_stderr=True)


# ---------------------------------------------------------------------------
# Account
# ---------------------------------------------------------------------------


@main.command()
@click.argument("name")
@click.argument("email")
@click.password_option()
def register(name: str, email: str, password: str):
    """Create an account and log in."""
    _run(_auth_impl("register", name=name, email=email, password=password))


@main.command()
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True)
def login(email: str, password: str):
    """Log in and store the token locally."""
    _run(_auth_impl("login", email=email, password=password))


async def _auth_impl(action: str, **payload):
    async with _api() as api:
        session = AuthSession(api)
        if action == "register":
            result = await session.register(**payload)
        else:
            result = await session.login(**payload)

    if not result.success:
        raise click.ClickException(_describe(result.message, result.errors))

    click.secho(result.message or "OK", fg="green")
    click.echo(f"Signed in as {session.user['name']} <{session.user['email']}>")


@main.command()
def logout():
    """Forget the stored token."""
    _run(_logout_impl())


async def _logout_impl():
    async with _api() as api:
        await AuthSession(api).logout()
    click.echo("Logged out")


@main.command()
def whoami():
    """Show the logged-in user."""
    _run(_whoami_impl())


async def _whoami_impl():
    async with _api() as api:
        session = await _require_login(api)
    user = session.user
    click.echo(f"{user['name']} <{user['email']}>  role={user['role']}")


@main.command()
@click.option("--name", help="New display name")
@click.option("--avatar", help='Avatar URL ("" to clear)')
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def profile(name: Optional[str], avatar: Optional[str], as_json: bool):
    """Show the profile, or update it with --name / --avatar."""
    _run(_profile_impl(name, avatar, as_json))


async def _profile_impl(name: Optional[str], avatar: Optional[str], as_json: bool):
    async with _api() as api:
        await _require_login(api)
        users = UserClient(api)
        fields = {k: v for k, v in (("name", name), ("avatar", avatar)) if v is not None}
        user = await users.update_profile(**fields) if fields else await users.profile()
        stats = await users.stats()

    if as_json:
        click.echo(_pretty_json({"user": user, "stats": stats}))
        return

    click.secho(user["name"], bold=True)
    click.echo(f"  Email:    {user['email']}")
    click.echo(f"  Role:     {user['role']}")
    click.echo(f"  Avatar:   {user.get('avatar') or '—'}")
    click.echo(f"  Joined:   {stats['accountCreated']}")
    click.echo(f"  Profile:  {stats['profileCompletion']}% complete")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def stats(as_json: bool):
    """Task summary: totals, overdue and completion rate."""
    _run(_stats_impl(as_json))


async def _stats_impl(as_json: bool):
    async with _api() as api:
        await _require_login(api)
        summary = await TaskClient(api).stats()

    if as_json:
        click.echo(_pretty_json(summary))
        return

    click.secho("Task Summary", bold=True)
    click.echo(f"  Total:        {summary['total']}")
    click.echo(f"  Completed:    {click.style(str(summary['completed']), fg='green')}")
    click.echo(f"  In progress:  {summary['inProgress']}")
    click.echo(f"  Pending:      {summary['pending']}")
    click.echo(f"  High:         {summary['highPriority']}")
    click.echo(f"  Overdue:      {click.style(str(summary['overdue']), fg='red')}")
    click.echo(f"  Completion:   {summary['completionRate']}%")


# ---------------------------------------------------------------------------
# taskboard tasks ...
# ---------------------------------------------------------------------------


@main.group()
def tasks():
    """Create, list and update tasks."""


@tasks.command("list")
@click.option("--status", "-s", type=click.Choice(["pending", "in-progress", "completed"]))
@click.option("--priority", "-p", type=click.Choice(["low", "medium", "high"]))
@click.option("--category", "-c", help="Category substring")
@click.option("--search", "-q", help="Search title, description and tags")
@click.option("--page", default=1, show_default=True, type=click.IntRange(min=1))
@click.option("--limit", "-n", default=10, show_default=True, type=click.IntRange(1, 100))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_tasks(status, priority, category, search, page, limit, as_json):
    """List your tasks, newest first."""
    _run(_list_impl(status, priority, category, search, page, limit, as_json))


async def _list_impl(status, priority, category, search, page, limit, as_json):
    async with _api() as api:
        await _require_login(api)
        data = await TaskClient(api).list(
            status=status,
            priority=priority,
            category=category,
            search=search,
            page=page,
            limit=limit,
        )

    if as_json:
        click.echo(_pretty_json(data))
        return

    rows = data["tasks"]
    if not rows:
        click.echo("No tasks found.")
        return

    _print_table(
        rows,
        [
            ("ID", "id", 36),
            ("Title", "title", 30),
            ("Status", "status", 11),
            ("Priority", "priority", 8),
            ("Category", "category", 12),
        ],
    )
    p = data["pagination"]
    click.echo(f"\nPage {p['current']} of {p['total']} ({p['totalTasks']} tasks)")


@tasks.command("add")
@click.argument("title")
@click.option("--description", "-d", default="")
@click.option("--priority", "-p", type=click.Choice(["low", "medium", "high"]), default="medium")
@click.option("--category", "-c", default="General")
@click.option("--due", type=click.DateTime(["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S"]))
@click.option("--tag", "tags", multiple=True, help="Repeat for several tags")
def add_task(title, description, priority, category, due: Optional[datetime], tags):
    """Create a task."""
    fields = {
        "title": title,
        "description": description,
        "priority": priority,
        "category": category,
        "tags": list(tags),
    }
    if due:
        fields["dueDate"] = due.isoformat()
    _run(_task_call("create", None, fields, "Task created"))


@tasks.command("show")
@click.argument("task_id")
def show_task(task_id: str):
    """Show one task."""
    _run(_task_call("get", task_id, None, None))


@tasks.command("done")
@click.argument("task_id")
def done_task(task_id: str):
    """Mark a task completed."""
    _run(_task_call("complete", task_id, None, "Task completed"))


@tasks.command("start")
@click.argument("task_id")
def start_task(task_id: str):
    """Mark a task in progress."""
    _run(_task_call("start", task_id, None, "Task started"))


@tasks.command("reset")
@click.argument("task_id")
def reset_task(task_id: str):
    """Move a task back to pending."""
    _run(_task_call("reset", task_id, None, "Task reset"))


async def _task_call(action: str, task_id: Optional[str], fields: Optional[dict], done_msg):
    async with _api() as api:
        await _require_login(api)
        client = TaskClient(api)
        if action == "create":
            task = await client.create(**fields)
        else:
            task = await getattr(client, action)(task_id)

    if done_msg:
        click.secho(done_msg, fg="green")
    _show_task(task)


@tasks.command("rm")
@click.argument("task_id")
@click.confirmation_option(prompt="Delete this task?")
def remove_task(task_id: str):
    """Delete a task."""
    _run(_remove_impl(task_id))


async def _remove_impl(task_id: str):
    async with _api() as api:
        await _require_login(api)
        await TaskClient(api).delete(task_id)
    click.secho("Task deleted", fg="green")


# ---------------------------------------------------------------------------
# Server side
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", help="Bind address (default: TASKBOARD_HOST)")
@click.option("--port", type=int, help="Port (default: TASKBOARD_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    from taskboard.config import settings

    uvicorn.run(
        "taskboard.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@main.command()
@click.argument("email")
@click.option("--role", type=click.Choice(["user", "admin"]), default="admin", show_default=True)
def promote(email: str, role: str):
    """Set a user's role directly in the database."""
    _run(_promote_impl(email, role))


async def _promote_impl(email: str, role: str):
    from taskboard.config import settings
    from taskboard.errors import AppError
    from taskboard.services.user_service import UserService
    from taskboard.storage import close_storage, init_storage

    storage = await init_storage(settings)
    if storage.name == "memory":
        click.secho(
            "Warning: using in-memory storage; the change won't reach a running server.",
            fg="yellow",
            err=True,
        )
    try:
        user = await UserService(storage.users).set_role(email, role)
    except AppError as e:
        raise click.ClickException(e.message)
    finally:
        await close_storage()
    click.secho(f"{user.email} is now {user.role}", fg="green")


if __name__ == "__main__":
    main()

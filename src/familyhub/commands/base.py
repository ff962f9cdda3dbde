"""Shared CLI utilities."""

import asyncio
from functools import wraps
from pathlib import Path

import click
from questionary import Style

from ..auth import AuthClient
from ..config import settings
from ..db import TableStore, get_db_path
from ..notifications import Notifier, ToastKind
from ..session import SessionProvider

SESSION_FILE_NAME = ".session"

# Custom style for interactive forms
custom_style = Style(
    [
        ("qmark", "fg:#4f46e5 bold"),
        ("question", "bold"),
        ("answer", "fg:#16a34a bold"),
        ("pointer", "fg:#4f46e5 bold"),
        ("highlighted", "fg:#4f46e5 bold"),
        ("selected", "fg:#16a34a"),
        ("separator", "fg:#6b7280"),
        ("instruction", ""),
        ("text", ""),
    ]
)


def async_command(f):
    """Decorator to run async Click commands."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def get_data_dir() -> Path:
    """Get the data directory path."""
    return settings.DATA_DIR


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the database is initialized."""
    db_path = get_db_path()
    if not db_path.exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Project not initialized. Run 'familyhub init' first."
        )
        ctx.exit(1)


def session_file() -> Path:
    return get_data_dir() / SESSION_FILE_NAME


def load_token() -> str | None:
    path = session_file()
    if not path.exists():
        return None
    return path.read_text().strip() or None


def save_token(token: str) -> None:
    path = session_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(token)
    path.chmod(0o600)


def clear_token() -> None:
    session_file().unlink(missing_ok=True)


async def start_session(ctx: click.Context) -> SessionProvider:
    """Resolve the stored CLI session; exits when nobody is signed in."""
    auth = AuthClient(TableStore(), access_token=load_token())
    provider = SessionProvider(auth)
    await provider.start()
    if provider.user is None:
        provider.close()
        echo_error("Not signed in. Run 'familyhub auth login' first.")
        ctx.exit(1)
    return provider


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def echo_toasts(notifier: Notifier) -> None:
    """Print the toasts a controller raised."""
    for toast in notifier.drain():
        if toast.kind == ToastKind.SUCCESS:
            echo_success(toast.message)
        elif toast.kind == ToastKind.ERROR:
            echo_error(toast.message)
        else:
            echo_info(toast.message)


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = ["".join(h.ljust(widths[i] + padding) for i, h in enumerate(headers))]
    lines.append("".join("-" * w + " " * padding for w in widths))
    for row in rows:
        lines.append("".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(row)))

    return "\n".join(line.rstrip() for line in lines)

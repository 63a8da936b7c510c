"""Session commands for the WeTwo CLI.

Handles resuming a saved session, signing in and out, and showing the
signed-in user.
"""

import asyncio

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()

# Seconds to let profile follow-ups finish before the CLI exits
FOLLOW_UP_WAIT = 5.0

ONBOARDING_HINTS = {
    "no_cached_user": "No saved account found on this device.",
    "no_credentials": "Your saved account has no stored credentials.",
    "invalid_credentials": "Your stored credentials were rejected and have been removed.",
    "network_error": "Could not reach the WeTwo backend. Your credentials were kept.",
    "server_error": "The WeTwo backend reported an error. Your credentials were kept.",
    "timeout": "Signing in took too long. Your credentials were kept.",
    "unexpected_error": "Something went wrong while resuming your session.",
}


def _get_config() -> dict:
    """Load configuration, writing the template on first use."""
    from wetwo.config import create_template_config, load_config

    try:
        config = load_config()
        if config is None:
            config_path = create_template_config()
            console.print(f"[dim]Created default configuration at {config_path}[/dim]")
            config = load_config(config_path)
    except ValueError as e:
        console.print(Panel(
            f"[red]✗[/red] {e}",
            title="[bold red]Configuration Error[/bold red]",
            border_style="red",
        ))
        raise SystemExit(1)
    return config


def _get_store():
    """Get the local store instance."""
    from wetwo.config import DB_PATH
    from wetwo.db.store import LocalStore

    return LocalStore(DB_PATH)


def _get_backend(config: dict):
    """Get the backend client from the [backend] config table."""
    from wetwo.services.backend import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, BackendClient

    backend = config.get("backend", {})
    try:
        return BackendClient(
            base_url=backend.get("base_url") or DEFAULT_BASE_URL,
            api_key=backend.get("api_key", ""),
            timeout=float(backend.get("timeout", DEFAULT_TIMEOUT)),
        )
    except ValueError as e:
        console.print(Panel(
            f"[red]✗[/red] {e}\n\n[dim]Edit ~/.config/wetwo/config.toml to fix it.[/dim]",
            title="[bold red]Configuration Error[/bold red]",
            border_style="red",
        ))
        raise SystemExit(1)


@click.command()
def start() -> None:
    """Resume your saved session.

    Signs in with the stored credentials. If that is not possible you
    are sent to onboarding (wetwo login).
    """
    from wetwo.session.bootstrap import DEFAULT_SIGN_IN_TIMEOUT, SessionBootstrap

    config = _get_config()
    store = _get_store()
    backend = _get_backend(config)
    session = config.get("session", {})

    bootstrap = SessionBootstrap(
        store,
        backend,
        profile_service=backend,
        sign_in_timeout=float(session.get("sign_in_timeout", DEFAULT_SIGN_IN_TIMEOUT)),
        clear_user_on_invalid=bool(session.get("clear_user_on_invalid", False)),
    )

    async def _run():
        result = await bootstrap.run()
        await bootstrap.wait_for_follow_ups(timeout=FOLLOW_UP_WAIT)
        return result

    console.print("[dim]Resuming session...[/dim]")
    result = asyncio.run(_run())

    if result.state.is_active:
        user = result.state.current_user
        console.print(Panel(
            f"[green]✓[/green] Welcome back, [cyan]{user.name}[/cyan] "
            f"{user.zodiac_sign.emoji}\n\n"
            "[dim]Log today's mood with [cyan]wetwo mood log <1-5>[/cyan].[/dim]",
            title="[bold green]Session Active[/bold green]",
            border_style="green",
        ))
        return

    hint = ONBOARDING_HINTS.get(result.reason.value, "")
    console.print(Panel(
        f"[yellow]{hint}[/yellow]\n\n"
        "[dim]Run [green]wetwo login[/green] to sign in.[/dim]",
        title="[bold yellow]Onboarding[/bold yellow]",
        border_style="yellow",
    ))


@click.command()
@click.option("--email", prompt=True, help="Account email.")
@click.option("--password", prompt=True, hide_input=True, help="Account password.")
def login(email: str, password: str) -> None:
    """Sign in to WeTwo and remember the account on this device."""
    from wetwo.models import Credentials
    from wetwo.services.base import InvalidCredentials, NetworkError, ServerError
    from wetwo.session.actions import complete_onboarding

    config = _get_config()
    backend = _get_backend(config)

    console.print("[dim]Signing in...[/dim]")
    try:
        user = asyncio.run(backend.sign_in(email, password))
    except InvalidCredentials:
        console.print(Panel(
            "[red]✗[/red] Invalid email or password",
            title="[bold red]Login Failed[/bold red]",
            border_style="red",
        ))
        raise SystemExit(1)
    except (NetworkError, ServerError) as e:
        console.print(Panel(
            f"[red]✗[/red] Could not sign in\n\n[dim]{e}[/dim]",
            title="[bold red]Login Failed[/bold red]",
            border_style="red",
        ))
        raise SystemExit(1)

    complete_onboarding(_get_store(), user, Credentials(email=email, password=password))
    console.print(Panel(
        f"[green]✓[/green] Signed in as [cyan]{user.name}[/cyan]\n\n"
        "[dim]Your session will be resumed automatically by [cyan]wetwo start[/cyan].[/dim]",
        title="[bold green]Login Successful[/bold green]",
        border_style="green",
    ))


@click.command()
def logout() -> None:
    """Forget the saved account on this device.

    Logged moods stay in the local database.
    """
    from wetwo.session.actions import logout as logout_session

    logout_session(_get_store())
    console.print(Panel(
        "[green]✓[/green] Saved account and credentials removed",
        title="[bold green]Logout Successful[/bold green]",
        border_style="green",
    ))


@click.command()
def whoami() -> None:
    """Show the saved account."""
    user = _get_store().load_user()
    if user is None:
        console.print("[yellow]No saved account. Run [green]wetwo login[/green] first.[/yellow]")
        return

    sign = user.zodiac_sign
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="dim")
    table.add_column("Value")
    table.add_row("Name", user.name)
    table.add_row("Email", user.email or "-")
    table.add_row("Birthday", user.birth_date.isoformat())
    table.add_row("Zodiac", f"{sign.emoji} {sign.value} ({sign.element})")
    table.add_row("Partner code", user.partner_code or "-")
    table.add_row("Partner", "linked" if user.has_partner else "not linked")
    console.print(table)

"""Profile commands for the WeTwo CLI."""

from datetime import datetime
from typing import Optional

import click
from rich.console import Console

console = Console()


@click.command()
@click.argument("birth_date", type=click.DateTime(formats=["%Y-%m-%d"]), required=False)
def zodiac(birth_date: Optional[datetime]) -> None:
    """Show the zodiac sign for a birth date (default: your own)."""
    from wetwo.cli.auth import _get_store
    from wetwo.models import ZodiacSign

    if birth_date is None:
        user = _get_store().load_user()
        if user is None:
            console.print("[yellow]Pass a birth date (YYYY-MM-DD) or run [green]wetwo login[/green].[/yellow]")
            raise SystemExit(1)
        day = user.birth_date
    else:
        day = birth_date.date()

    sign = ZodiacSign.from_birth_date(day)
    console.print(f"{sign.emoji} [bold]{sign.value}[/bold] [dim]({sign.element})[/dim]")

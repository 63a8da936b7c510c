"""Mood commands for the WeTwo CLI.

Handles logging moods and the weekly and monthly summaries.
"""

from datetime import date, datetime, timedelta
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from wetwo.cli.auth import _get_config, _get_store

console = Console()

TREND_COLORS = {
    "improving": "green",
    "stable": "blue",
    "declining": "red",
}


def _require_user(store):
    """Get the saved user or exit with a hint."""
    user = store.load_user()
    if user is None:
        console.print(Panel(
            "[red]✗[/red] No saved account\n\n"
            "[dim]Run [green]wetwo login[/green] before logging moods.[/dim]",
            title="[bold red]Not Signed In[/bold red]",
            border_style="red",
        ))
        raise SystemExit(1)
    return user


def _mood_text(level) -> str:
    return f"{level.emoji} {level.label}"


def _entries_table(entries: list, title: str) -> Table:
    table = Table(title=title)
    table.add_column("Date", style="cyan")
    table.add_column("Mood")
    table.add_column("Event")
    table.add_column("Location", style="dim")
    for entry in entries:
        table.add_row(
            entry.date.strftime("%a %Y-%m-%d"),
            _mood_text(entry.mood_level),
            entry.event_label or "",
            entry.location or "",
        )
    return table


@click.group()
def mood() -> None:
    """Log and review your moods."""
    pass


@mood.command("log")
@click.argument("level", type=click.IntRange(1, 5))
@click.option("--event", "-e", default=None, help="What happened today.")
@click.option("--location", "-l", default=None, help="Where you are.")
@click.option(
    "--date", "-d", "day",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Day the mood is for (default: today).",
)
def log_mood(level: int, event: Optional[str], location: Optional[str], day: Optional[datetime]) -> None:
    """Log your mood (1=very sad ... 5=very happy)."""
    from wetwo.config import calendar_from_config
    from wetwo.engine import mood_for_date
    from wetwo.models import MoodEntry, MoodLevel

    store = _get_store()
    user = _require_user(store)
    calendar = calendar_from_config(_get_config())
    when = day or datetime.now()
    target_day = calendar.day_of(when)

    # One day of slack on each side for entries stored in another zone
    nearby = store.get_mood_entries(user.id, target_day - timedelta(days=1), target_day + timedelta(days=1))
    existing = mood_for_date(nearby, when, calendar)

    entry = MoodEntry(
        owner_id=user.id,
        date=when,
        mood_level=MoodLevel(level),
        event_label=event,
        location=location,
    )
    if existing is not None:
        # One entry per day: replace the existing one
        entry = entry.model_copy(update={"id": existing.id})
    store.save_mood_entry(entry)

    verb = "Updated" if existing else "Logged"
    console.print(
        f"[green]✓[/green] {verb} {_mood_text(entry.mood_level)} "
        f"for [cyan]{target_day.isoformat()}[/cyan]"
    )


@mood.command("today")
def today_mood() -> None:
    """Show today's mood."""
    from wetwo.config import calendar_from_config
    from wetwo.engine import mood_for_date

    store = _get_store()
    user = _require_user(store)
    calendar = calendar_from_config(_get_config())
    today = date.today()

    entry = mood_for_date(store.get_mood_entries(user.id, today, today), today, calendar)
    if entry is None:
        console.print("[yellow]No mood logged today. Use [green]wetwo mood log <1-5>[/green].[/yellow]")
        return
    console.print(f"Today: {_mood_text(entry.mood_level)}")
    if entry.event_label:
        console.print(f"[dim]{entry.event_label}[/dim]")


@mood.command("list")
@click.option("--days", "-n", default=7, type=click.IntRange(1, 366), help="Days to show.")
def list_moods(days: int) -> None:
    """List recently logged moods."""
    store = _get_store()
    user = _require_user(store)
    today = date.today()

    entries = store.get_mood_entries(user.id, today - timedelta(days=days - 1), today)
    if not entries:
        console.print("[yellow]No moods logged in this period.[/yellow]")
        return
    console.print(_entries_table(entries, f"Moods - last {days} days"))


@click.command()
@click.option(
    "--date", "-d", "day",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Any day in the week (default: this week).",
)
def week(day: Optional[datetime]) -> None:
    """Weekly mood summary with insights."""
    from wetwo.config import calendar_from_config, insight_rules_from_config, trend_delta_from_config
    from wetwo.engine import RuleBasedInsights, build_weekly_summary, entries_for_week

    config = _get_config()
    store = _get_store()
    user = _require_user(store)

    calendar = calendar_from_config(config)
    insights = RuleBasedInsights(insight_rules_from_config(config))
    reference = (day or datetime.now()).date()

    start = calendar.week_start(reference)
    # One day of slack on each side for entries stored in another zone
    entries = store.get_mood_entries(user.id, start - timedelta(days=1), start + timedelta(days=7))
    summary = build_weekly_summary(
        entries,
        reference,
        calendar=calendar,
        insights=insights,
        min_delta=trend_delta_from_config(config),
    )

    week_entries = entries_for_week(entries, summary.week_start_date, calendar)
    if week_entries:
        console.print(_entries_table(week_entries, f"Week of {summary.week_start_date.isoformat()}"))

    trend = summary.mood_trend
    color = TREND_COLORS[trend.value]
    lines = [
        f"Average mood: [bold]{summary.average_mood:.1f}[/bold]",
        f"Most frequent: {_mood_text(summary.most_frequent_mood)}",
        f"Trend: [{color}]{trend.emoji} {trend.value.capitalize()}[/{color}]",
        f"[dim]{insights.describe_trend(trend)}[/dim]",
        "",
        "[bold]Insights[/bold]",
        *[f"  • {text}" for text in summary.insights],
        "",
        "[bold]Recommendations[/bold]",
        *[f"  • {text}" for text in insights.recommendations(summary)],
    ]
    console.print(Panel(
        "\n".join(lines),
        title=f"[bold]Week of {summary.week_start_date.isoformat()}[/bold]",
        border_style=color,
    ))


@click.command()
@click.option(
    "--date", "-d", "day",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Any day in the month (default: this month).",
)
def month(day: Optional[datetime]) -> None:
    """Moods for a calendar month."""
    from wetwo.config import calendar_from_config
    from wetwo.engine import average_mood, bucket_by_month, most_frequent_mood

    config = _get_config()
    store = _get_store()
    user = _require_user(store)

    calendar = calendar_from_config(config)
    reference = (day or datetime.now()).date()
    first = reference.replace(day=1)
    next_month = (first + timedelta(days=32)).replace(day=1)

    entries = bucket_by_month(
        store.get_mood_entries(user.id, first - timedelta(days=1), next_month),
        reference,
        calendar,
    )
    if not entries:
        console.print(f"[yellow]No moods logged in {reference.strftime('%B %Y')}.[/yellow]")
        return

    console.print(_entries_table(entries, reference.strftime("%B %Y")))
    console.print(
        f"Average mood: [bold]{average_mood(entries):.1f}[/bold]  "
        f"Most frequent: {_mood_text(most_frequent_mood(entries))}  "
        f"Entries: {len(entries)}"
    )

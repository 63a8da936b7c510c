"""Main CLI entry point for WeTwo.

Provides the top-level click group. Subcommand modules are imported only
when their command is invoked.
"""

import logging

import click
from rich.console import Console

console = Console()


class LazyGroup(click.Group):
    """A click Group that imports subcommands on first use."""

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        """Initialize the lazy group.

        Args:
            lazy_subcommands: Mapping of command names to module paths.
        """
        super().__init__(*args, **kwargs)
        self._lazy_subcommands = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted(set(super().list_commands(ctx)) | set(self._lazy_subcommands))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        if cmd_name in self.commands:
            return self.commands[cmd_name]
        if cmd_name in self._lazy_subcommands:
            return self._lazy_load(cmd_name)
        return None

    def _lazy_load(self, cmd_name: str) -> click.Command:
        import importlib

        module_path = self._lazy_subcommands[cmd_name]
        module = importlib.import_module(module_path)

        cmd = getattr(module, cmd_name, None)
        if not isinstance(cmd, click.Command):
            raise click.ClickException(f"Could not find command '{cmd_name}' in {module_path}")

        self.add_command(cmd)
        return cmd


LAZY_SUBCOMMANDS = {
    # Session
    "start": "wetwo.cli.auth",
    "login": "wetwo.cli.auth",
    "logout": "wetwo.cli.auth",
    "whoami": "wetwo.cli.auth",
    # Moods
    "mood": "wetwo.cli.mood",
    "week": "wetwo.cli.mood",
    "month": "wetwo.cli.mood",
    # Profile
    "zodiac": "wetwo.cli.profile",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="wetwo")
@click.option("-v", "--verbose", is_flag=True, help="Show log output.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """WeTwo - track your mood together with your partner.

    \b
    Quick Start:
      wetwo login              # Sign in with your WeTwo account
      wetwo mood log 4         # Log today's mood (1-5)
      wetwo week               # Weekly summary with insights
    """
    if verbose:
        from rich.logging import RichHandler

        logging.basicConfig(
            level=logging.INFO,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )
    ctx.ensure_object(dict)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()

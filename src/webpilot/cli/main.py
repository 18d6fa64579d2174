"""
Web Pilot CLI - launch a browser driven by command/result files.
"""
import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click
from rich.logging import RichHandler
from rich.table import Table

from . import (
    commands_epilog,
    console,
    print_banner,
    print_command_table,
    send_command,
    spawn_background,
)
from ..automation.profiles import PROFILE_BROWSERS, available_profiles, find_profile_dir, profile_names
from ..core.config import BROWSERS, ENGINES, PilotConfig
from ..core.errors import ConfigError, StartupError
from ..pilot import WebPilot

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True)]
)
logger = logging.getLogger("webpilot")

BACKGROUND_LOG = "web-pilot.log"


class DefaultCommandGroup(click.Group):
    """Group that falls back to the ``run`` command.

    Keeps ``web-pilot https://example.com`` working next to the
    ``profiles`` and ``send`` subcommands. Leading options are skipped when
    looking for a subcommand name, so ``web-pilot --debug profiles`` still
    reaches ``profiles``.
    """

    default_command = "run"

    def parse_args(self, ctx: click.Context, args):
        index = self._first_positional(ctx, args)
        if index is None or args[index] not in self.commands:
            args = [self.default_command, *args]
        return super().parse_args(ctx, args)

    def _first_positional(self, ctx: click.Context, args) -> Optional[int]:
        """Index of the first argument that is neither an option nor an option value."""
        default = self.commands.get(self.default_command)
        takes_value = set()
        if default is not None:
            for param in default.get_params(ctx):
                if isinstance(param, click.Option) and not param.is_flag:
                    takes_value.update(param.opts)
        index = 0
        while index < len(args):
            arg = args[index]
            if arg == "--":
                return index + 1 if index + 1 < len(args) else None
            if not arg.startswith("-") or arg == "-":
                return index
            if arg in takes_value:
                index += 1
            index += 1
        return None


def _enable_debug() -> None:
    logging.getLogger().setLevel(logging.DEBUG)
    logger.debug("Debug mode enabled")


@click.group(cls=DefaultCommandGroup)
@click.option("--debug/--no-debug", default=False, help="Enable debug output", show_default=True)
def cli(debug: bool) -> None:
    """Web Pilot - LLM-driven browser automation through command files."""
    if debug:
        _enable_debug()


@cli.command(epilog=commands_epilog(), context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("url_arg", metavar="[URL]", required=False)
@click.option("--url", "-u", "url", default=None, help="Starting URL to navigate to")
@click.option(
    "--dir",
    "-d",
    "work_dir",
    type=click.Path(file_okay=False, dir_okay=True, writable=True),
    default=None,
    help="Working directory for command/result files  [default: current dir]",
)
@click.option("--profile", default=None, help="Browser profile path (persistent context with saved passwords/cookies)")
@click.option("--system-profile", is_flag=True, default=False, help="Use the installed profile of --browser")
@click.option("--browser", type=click.Choice(BROWSERS), default="chromium", show_default=True)
@click.option("--engine", type=click.Choice(ENGINES), default="playwright", show_default=True)
@click.option("--headless", is_flag=True, default=False, help="Run browser in headless mode")
@click.option("--poll-interval", type=float, default=None, help="Seconds between command file checks  [default: 1.0]")
@click.option("--timeout", "timeout_ms", type=int, default=None, help="Navigation timeout in ms  [default: 30000]")
@click.option("--background", is_flag=True, default=False, help="Detach and keep running in the background")
@click.option("--debug/--no-debug", default=False, help="Enable debug output", show_default=True)
def run(
    url_arg: Optional[str],
    url: Optional[str],
    work_dir: Optional[str],
    profile: Optional[str],
    system_profile: bool,
    browser: str,
    engine: str,
    headless: bool,
    poll_interval: Optional[float],
    timeout_ms: Optional[int],
    background: bool,
    debug: bool,
) -> None:
    """Start a browser and execute commands written to command.txt."""
    if debug:
        _enable_debug()

    if profile and system_profile:
        raise click.UsageError("--profile and --system-profile are mutually exclusive")
    if system_profile:
        profile = _system_profile(browser)

    try:
        config = PilotConfig.from_env(
            work_dir=Path(work_dir) if work_dir else None,
            headless=headless or None,
            poll_interval=poll_interval,
            timeout_ms=timeout_ms,
            profile=profile,
            browser=browser,
            engine=engine,
        )
    except ConfigError as e:
        raise click.UsageError(str(e))

    if background:
        config.work_dir.mkdir(parents=True, exist_ok=True)
        pid = spawn_background(sys.argv[1:], log_file=config.work_dir / BACKGROUND_LOG)
        console.print(f"[green]✓[/] Web Pilot running in background (PID {pid})")
        console.print(f"Command file: {config.command_path}")
        console.print(f"Result file: {config.result_path}")
        return

    print_banner()
    try:
        pilot = WebPilot(config)
    except RuntimeError as e:
        raise click.ClickException(str(e))

    try:
        with console.status("Starting browser..."):
            pilot.start(url or url_arg)
    except StartupError as e:
        console.print(f"[red]✗[/] {e}")
        if e.hint:
            console.print(f"[yellow]Hint:[/] {e.hint}")
        sys.exit(1)

    console.print("[green]✓[/] Browser launched successfully!\n")
    console.print(f"Command file: {config.command_path}")
    console.print(f"Result file: {config.result_path}\n")
    print_command_table()

    try:
        pilot.run()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/]")
    finally:
        pilot.stop()
    console.print("Browser closed. Goodbye!")


def _system_profile(browser: str) -> str:
    try:
        path = find_profile_dir(browser)
    except ValueError as e:
        raise click.UsageError(str(e))
    if path is None:
        raise click.ClickException(f"No installed {browser} profile found. Pass one explicitly with --profile.")
    return str(path)


@cli.command()
def profiles() -> None:
    """List installed browser profiles usable with --profile."""
    found = available_profiles()
    if not found:
        console.print(f"[yellow]No browser profiles found[/] (looked for: {', '.join(PROFILE_BROWSERS)})")
        return
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Browser")
    table.add_column("Profile directory")
    table.add_column("Profiles", style="dim")
    for browser, path in found.items():
        table.add_row(browser, str(path), ", ".join(profile_names(path)))
    console.print(table)


@cli.command()
@click.argument("command")
@click.option(
    "--dir",
    "-d",
    "work_dir",
    type=click.Path(file_okay=False, dir_okay=True),
    default=None,
    help="Working directory of the running pilot  [default: current dir]",
)
@click.option("--wait", "timeout", type=float, default=30.0, show_default=True, help="Seconds to wait for a result")
def send(command: str, work_dir: Optional[str], timeout: float) -> None:
    """Send COMMAND to a running pilot and print the result."""
    target = Path(work_dir) if work_dir else Path(os.getcwd())
    if not target.is_dir():
        raise click.ClickException(f"Working directory not found: {target}")
    try:
        result = send_command(target, command, timeout=timeout)
    except TimeoutError as e:
        raise click.ClickException(str(e))
    click.echo(result)
    if result.startswith("ERROR:"):
        sys.exit(1)


def main() -> None:
    """Entry point for the Web Pilot CLI."""
    cli()


if __name__ == "__main__":
    main()

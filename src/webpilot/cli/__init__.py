"""
Web Pilot CLI - helpers shared by the click commands.
"""
from typing import Callable, List, Optional
import logging
import os
import subprocess
import sys
import time
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..core.models import COMMAND_HELP

logger = logging.getLogger("webpilot")

# Create console for rich output
console = Console()

BANNER = """
[bold cyan]WEB PILOT[/]
LLM-Driven Browser Automation & Control
"""

HOW_IT_WORKS = """HOW IT WORKS:
  1. Web Pilot starts a browser and watches for commands in 'command.txt'
  2. An LLM (or any process) writes commands to 'command.txt'
  3. Web Pilot executes the command and writes results to 'result.txt'
  4. The LLM reads 'result.txt' to see the outcome
"""


def commands_epilog() -> str:
    """Plain-text command reference appended to --help.

    Each block starts with click's \\b marker so it is not rewrapped.
    """
    width = max(len(cmd) for cmd in COMMAND_HELP)
    lines = ["\b", "COMMANDS:"]
    lines.extend(f"  {cmd.ljust(width)}  {desc}" for cmd, desc in COMMAND_HELP.items())
    lines.append("")
    lines.append("\b")
    lines.append(HOW_IT_WORKS.rstrip())
    lines.append("")
    lines.append("Other subcommands: 'web-pilot profiles', 'web-pilot send <command>'.")
    return "\n".join(lines)


def print_banner() -> None:
    console.print(BANNER)


def print_command_table() -> None:
    """Print the available commands."""
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Command", style="cyan")
    table.add_column("Description")
    for cmd, desc in COMMAND_HELP.items():
        table.add_row(cmd, desc)
    console.print(table)


def background_args(argv: List[str]) -> List[str]:
    """Drop the --background flag so the child runs in the foreground."""
    return [arg for arg in argv if arg != "--background"]


def spawn_background(argv: List[str], log_file: Optional[Path] = None) -> int:
    """Re-launch this CLI detached from the terminal and return the child PID."""
    cmd = [sys.executable, "-m", "webpilot", *background_args(argv)]
    kwargs = {"stdin": subprocess.DEVNULL}
    if os.name == "nt":
        kwargs["creationflags"] = subprocess.DETACHED_PROCESS | subprocess.CREATE_NEW_PROCESS_GROUP
    else:
        kwargs["start_new_session"] = True
    logger.debug(f"Spawning background pilot: {cmd}")
    if log_file is None:
        proc = subprocess.Popen(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL, **kwargs)
        return proc.pid
    # The child keeps its own copy of the descriptor
    with open(log_file, "a", encoding="utf-8") as out:
        proc = subprocess.Popen(cmd, stdout=out, stderr=subprocess.STDOUT, **kwargs)
    return proc.pid


def send_command(
    work_dir: Path,
    command: str,
    timeout: float = 30.0,
    interval: float = 0.2,
    command_file: str = "command.txt",
    result_file: str = "result.txt",
    sleep: Callable[[float], None] = time.sleep,
) -> str:
    """Write a command for a running pilot and wait for its result.

    The result file is emptied first so any non-empty content seen afterwards
    belongs to this command.

    Raises:
        TimeoutError: If no result appears within ``timeout`` seconds
    """
    command_path = Path(work_dir) / command_file
    result_path = Path(work_dir) / result_file
    result_path.write_text("", encoding="utf-8")
    command_path.write_text(command, encoding="utf-8")

    waited = 0.0
    while waited < timeout:
        sleep(interval)
        waited += interval
        try:
            result = result_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            continue
        if result:
            return result
    raise TimeoutError(f"No result for '{command}' after {timeout:g}s. Is web-pilot running in {work_dir}?")

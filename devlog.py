#!/usr/bin/env python3
"""
devlog - Developer Log CLI Tool

Records development activity to a remote log:
- The last git commit message, optionally prefixed with its short hash
- Free-form notes with an optional date
- Automatically after every commit through a post-commit hook

Usage:
    devlog [COMMAND]

Examples:
    devlog config                                  # Configure API key and settings
    devlog install                                 # Install post-commit hook
    devlog                                         # Log the last commit message
    devlog log "Fixed critical bug"                # Log a custom message
    devlog log "Started new feature" 2025-06-24    # Log with a specific date
"""

import asyncio
import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.prompt import Prompt
from rich.text import Text

from config.settings import get_settings, settings
from services.devlog.main import DevLogService
from shared.config_store import ConfigStore, configure
from shared.errors import DevLogError
from shared.git_inspector import GitInspector
from shared.hook_installer import HookInstaller
from shared.models import HookInstallResult, HookInstallStatus

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.monitoring.log_level),
    format=settings.monitoring.log_format,
)
logger = logging.getLogger(__name__)

# Initialize Rich consoles
console = Console()
err_console = Console(stderr=True)


class TerminalPrompt:
    """Blocking question/answer over standard input."""

    def __init__(self, console: Console):
        self.console = console

    def __call__(self, question: str) -> str:
        # Prompt.ask appends its own ": " suffix
        question = question.rstrip().rstrip(":")
        return Prompt.ask(question, console=self.console, default="", show_default=False)


class DevLogCLI:
    """Console presentation for devlog commands."""

    def __init__(self):
        self.console = console
        self.err_console = err_console

    def display_entry(self, text: str, date: Optional[str]):
        self.console.print(f"Logging: {text}", markup=False, highlight=False)
        if date:
            self.console.print(f"Date: {date}", highlight=False)

    def display_success_message(self, response_message: Optional[str]):
        self.console.print("✅ Successfully logged to devlog", style="bold green")
        if response_message:
            self.console.print(f"Response: {response_message}", markup=False, highlight=False)

    def display_hook_result(self, result: HookInstallResult):
        """Report the outcome of a hook installation."""
        if result.backup_path:
            self.console.print(f"📋 Backed up existing hook to: {result.backup_path}", highlight=False)

        if result.status == HookInstallStatus.INSTALLED:
            self.console.print("✅ Successfully installed devlog post-commit hook!", style="bold green")
            self.console.print(f"📁 Hook installed at: {result.hook_path}", highlight=False)
            self.console.print("")
            self.console.print("🎉 devlog will now automatically log your commit messages.")
            self.console.print("💡 Make sure to run \"devlog config\" if you haven't already.")
            return

        self.console.print("⚠️  post-commit hook already exists.", style="yellow")
        if result.status == HookInstallStatus.ALREADY_INTEGRATED:
            self.console.print("✅ devlog is already integrated in the existing hook.", style="green")
            return

        self.console.print("The existing hook does not contain devlog integration.")
        self.console.print('You can manually add "devlog" to your existing post-commit hook,')
        self.console.print("or backup and replace it by running this command with --force flag.")
        self.console.print("\nTo backup and replace: [bold]devlog install --force[/bold]")

    def display_error_message(self, error: str, suggestion: str = ""):
        """Display error message with helpful suggestions."""
        error_text = Text()
        error_text.append("❌ ", style="bold red")
        error_text.append(f"{error}\n", style="white")

        if suggestion:
            error_text.append("Suggestion: ", style="yellow")
            error_text.append(f"{suggestion}", style="white")

        self.err_console.print(Panel(error_text, title="Error", border_style="red"))

    def display_help_text(self):
        """Display help text with usage examples."""
        help_text = f"""
[bold cyan]devlog[/bold cyan] - Developer Log CLI Tool

[bold yellow]Usage:[/bold yellow]
  devlog                    Log the last git commit message
  devlog config             Configure API key and settings
  devlog install            Install post-commit hook in current git repo
  devlog install --force    Install hook, backing up any existing post-commit hook
  devlog log "message"      Log a custom message
  devlog log "message" date Log a custom message with specific date (YYYY-MM-DD)
  devlog help               Show this help message

[bold yellow]Examples:[/bold yellow]
  devlog config
  devlog install
  devlog
  devlog log "Fixed critical bug in payment processing"
  devlog log "Started new feature" 2025-06-24

[bold yellow]Configuration:[/bold yellow]
  Configuration is stored in [green]{get_settings().storage.config_path}[/green]

[bold yellow]Git Hook Setup:[/bold yellow]
  Use "devlog install" to automatically set up the post-commit hook.
  This will create .git/hooks/post-commit that runs devlog after each commit.
        """
        self.console.print(Panel(help_text, title="Help", border_style="blue"))


# CLI instance
cli = DevLogCLI()


def fail(error: DevLogError):
    """Print a component error and terminate with status 1."""
    logger.debug(f"{type(error).__name__}: {error.message}")
    cli.display_error_message(error.message, error.hint or "")
    sys.exit(1)


def run_log(message: Optional[str] = None, entry_date: Optional[str] = None):
    """Log an explicit message, or the last commit when none is given."""
    current = get_settings()
    store = ConfigStore(current.storage.config_path)
    service = DevLogService(current, git_inspector=GitInspector())

    try:
        config = store.load()
        entry = service.build_entry(config, message, entry_date)
        cli.display_entry(entry.text, entry.date)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=cli.console,
            transient=True
        ) as progress:
            task = progress.add_task("Posting to devlog...", total=None)
            result = asyncio.run(service.send_entry(config, entry))
            progress.update(task, description="Posted")
    except DevLogError as e:
        cli.err_console.print("❌ Failed to log to devlog", style="bold red")
        fail(e)

    cli.display_success_message(result.message)


class DevLogGroup(click.Group):
    """Command group whose usage errors exit with status 1."""

    def make_context(self, info_name, args, parent=None, **extra):
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as e:
            e.exit_code = 1
            raise

    def resolve_command(self, ctx, args):
        if args and args[0] not in self.commands:
            raise click.UsageError(
                'Unknown command. Use "devlog help" for usage information.', ctx
            )
        return super().resolve_command(ctx, args)

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            e.exit_code = 1
            raise


@click.group(cls=DevLogGroup, invoke_without_command=True, add_help_option=False)
@click.option('--help', '-h', 'show_help', is_flag=True, help='Show detailed help')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.pass_context
def main(ctx: click.Context, show_help: bool, verbose: bool):
    """devlog - record commit messages and notes to your developer log."""

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if show_help:
        cli.display_help_text()
        ctx.exit(0)

    if ctx.invoked_subcommand is None:
        run_log()


@main.command(name="config", add_help_option=False)
def config_command():
    """Configure API key and settings."""
    current = get_settings()
    store = ConfigStore(current.storage.config_path)

    cli.console.print("Configuring devlog...\n")
    try:
        configure(store, TerminalPrompt(cli.console), current.api.default_base_url)
    except DevLogError as e:
        fail(e)

    cli.console.print("Configuration saved successfully.", style="green")


@main.command(
    add_help_option=False,
    context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
)
@click.option('--force', is_flag=True, help='Back up and replace an existing post-commit hook')
def install(force: bool):
    """Install the post-commit hook in the current git repository."""
    current = get_settings()
    installer = HookInstaller(
        GitInspector(),
        hook_name=current.hooks.hook_name,
        marker=current.hooks.marker,
        backup_suffix=current.hooks.backup_suffix,
    )

    try:
        result = installer.install_force() if force else installer.install()
    except DevLogError as e:
        fail(e)

    cli.display_hook_result(result)


# Notes may start with a dash, e.g. markdown bullets
@main.command(name="log", add_help_option=False, context_settings={"ignore_unknown_options": True})
@click.argument('message')
@click.argument('date', required=False)
def log_command(message: str, date: Optional[str]):
    """Log a custom message, optionally for a specific date (YYYY-MM-DD)."""
    run_log(message, date)


@main.command(name="help", add_help_option=False)
def help_command():
    """Show this help message."""
    cli.display_help_text()


if __name__ == "__main__":
    main()

"""Main CLI application."""

import sys
from typing import Any, Optional

import click
from rich.panel import Panel
from rich.table import Table

from hiworks_commute import __version__
from hiworks_commute.cli.account_commands import account
from hiworks_commute.cli.common import (
    console,
    error_console,
    fail,
    get_config,
    get_resolver,
    get_service,
    run_action,
)
from hiworks_commute.cli.config_commands import config
from hiworks_commute.core.log import setup_logging
from hiworks_commute.worker.errors import PathResolutionError, WorkerError


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", help="Custom settings file", type=click.Path())
@click.option("--notify/--no-notify", default=None, help="Send desktop notifications")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], notify: Optional[bool], verbose: bool) -> None:
    """Hiworks Commute - attendance automation for the Hiworks portal.

    Check in, check out and change your work status from the terminal.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["notify"] = notify

    level = "DEBUG" if verbose else get_config(ctx).get("advanced.log_level", "INFO")
    setup_logging(level)

    def stop_worker() -> None:
        service = ctx.obj.get("service")
        if service is not None:
            service.stop()

    ctx.call_on_close(stop_worker)


@cli.command("check-in")
@click.pass_context
def check_in(ctx: click.Context) -> None:
    """Check in for the day.

    Example:
        hiworks-commute check-in
    """
    run_action(ctx, "checkIn")


@cli.command("check-out")
@click.pass_context
def check_out(ctx: click.Context) -> None:
    """Check out for the day."""
    run_action(ctx, "checkOut")


@cli.command()
@click.pass_context
def work(ctx: click.Context) -> None:
    """Set status to working."""
    run_action(ctx, "setWork")


@cli.command()
@click.pass_context
def out(ctx: click.Context) -> None:
    """Set status to out of office."""
    run_action(ctx, "goOut")


@cli.command()
@click.pass_context
def meeting(ctx: click.Context) -> None:
    """Set status to in a meeting."""
    run_action(ctx, "setMeeting")


@cli.command()
@click.pass_context
def outwork(ctx: click.Context) -> None:
    """Set status to field work."""
    run_action(ctx, "setOutwork")


@cli.command()
@click.pass_context
def login(ctx: click.Context) -> None:
    """Open the portal login in a browser window."""
    run_action(ctx, "openLogin")


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show today's attendance status.

    Example:
        hiworks-commute status
    """
    service = get_service(ctx)

    try:
        result = service.get_status()
    except WorkerError as e:
        fail(ctx, e)
        return

    if not isinstance(result, dict):
        console.print(str(result))
        return

    def show(value: Any) -> str:
        return str(value).strip() if value else "-"

    lines = [
        f"[bold]Status:[/bold] {show(result.get('status'))}",
        f"Checked in:  {show(result.get('checkInTime'))}",
        f"Checked out: {show(result.get('checkOutTime'))}",
    ]
    console.print(Panel("\n".join(lines), title="Attendance", border_style="green"))


@cli.command("logged-in")
@click.pass_context
def logged_in(ctx: click.Context) -> None:
    """Check whether the browser session is logged in."""
    service = get_service(ctx)

    try:
        is_logged_in = service.is_logged_in()
    except WorkerError as e:
        fail(ctx, e)
        return

    if is_logged_in:
        console.print("[green]✓[/green] Logged in")
    else:
        console.print("[yellow]Not logged in[/yellow]")


@cli.command()
@click.pass_context
def paths(ctx: click.Context) -> None:
    """Show where the worker runtime and script are resolved from.

    Lists every candidate location in resolution order.
    """
    resolver = get_resolver(ctx)

    table = Table(title="Worker Script Candidates")
    table.add_column("Rule", style="cyan")
    table.add_column("Script")
    table.add_column("Found")
    for rule in resolver.rules():
        found = "[green]yes[/green]" if rule.script.is_file() else "[dim]no[/dim]"
        table.add_row(rule.name, str(rule.script), found)
    console.print(table)

    try:
        resolved = resolver.resolve()
    except PathResolutionError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        for path in e.tried:
            error_console.print(f"  tried: {path}")
        sys.exit(1)

    console.print(f"\n[green]✓[/green] Matched rule: {resolved.rule}")
    console.print(f"  Runtime: {resolved.runtime}")
    console.print(f"  Script: {resolved.script}")
    console.print(f"  Working directory: {resolved.working_dir}")
    for key, value in resolved.env.items():
        console.print(f"  {key}={value}")


cli.add_command(account)
cli.add_command(config)


if __name__ == "__main__":
    cli(obj={})

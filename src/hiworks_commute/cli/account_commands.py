"""CLI commands for portal account settings.

Values are stored by the worker, not in the settings file.
"""

import click

from hiworks_commute.cli.common import console, fail, get_service, run_action
from hiworks_commute.worker.errors import WorkerError


@click.group()
def account() -> None:
    """Manage the portal URL and login credentials."""
    pass


@account.command("set-url")
@click.argument("url")
@click.pass_context
def set_url(ctx: click.Context, url: str) -> None:
    """Set the company portal URL.

    Example:
        hiworks-commute account set-url https://example.hiworks.com
    """
    run_action(ctx, "setCompanyUrl", {"url": url})


@account.command("get-url")
@click.pass_context
def get_url(ctx: click.Context) -> None:
    """Show the company portal URL."""
    try:
        url = get_service(ctx).get_company_url()
    except WorkerError as e:
        fail(ctx, e)
        return

    console.print(url or "[yellow]Not set[/yellow]")


@account.command("set-username")
@click.argument("username")
@click.pass_context
def set_username(ctx: click.Context, username: str) -> None:
    """Set the portal login username."""
    run_action(ctx, "setUsername", {"username": username})


@account.command("get-username")
@click.pass_context
def get_username(ctx: click.Context) -> None:
    """Show the portal login username."""
    try:
        username = get_service(ctx).get_username()
    except WorkerError as e:
        fail(ctx, e)
        return

    console.print(username or "[yellow]Not set[/yellow]")


@account.command("set-password")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.pass_context
def set_password(ctx: click.Context, password: str) -> None:
    """Set the portal login password."""
    run_action(ctx, "setPassword", {"password": password})


@account.command("has-password")
@click.pass_context
def has_password(ctx: click.Context) -> None:
    """Show whether a password is stored."""
    try:
        stored = get_service(ctx).has_password()
    except WorkerError as e:
        fail(ctx, e)
        return

    if stored:
        console.print("[green]✓[/green] Password is set")
    else:
        console.print("[yellow]No password set[/yellow]")

"""Shared helpers for CLI commands."""

import sys
from pathlib import Path
from typing import Any, Optional

import click
from rich.console import Console

from hiworks_commute.app.notifier import Notifier
from hiworks_commute.app.service import ACTIONS, CommuteService
from hiworks_commute.core.config import ConfigManager
from hiworks_commute.worker.errors import WorkerError
from hiworks_commute.worker.manager import WorkerManager
from hiworks_commute.worker.paths import PathResolver

console = Console()
error_console = Console(stderr=True)


def get_config(ctx: click.Context) -> ConfigManager:
    """Get the ConfigManager for this invocation."""
    obj = ctx.ensure_object(dict)
    if "config" not in obj:
        config_path = obj.get("config_path")
        try:
            obj["config"] = ConfigManager(Path(config_path) if config_path else None)
        except ValueError as e:
            error_console.print(f"[red]Error:[/red] {e}")
            sys.exit(1)
    return obj["config"]  # type: ignore[no-any-return]


def get_resolver(ctx: click.Context) -> PathResolver:
    """Get the PathResolver for this invocation."""
    obj = ctx.ensure_object(dict)
    if "resolver" not in obj:
        obj["resolver"] = PathResolver.from_config(get_config(ctx))
    return obj["resolver"]  # type: ignore[no-any-return]


def get_service(ctx: click.Context) -> CommuteService:
    """Get the CommuteService for this invocation."""
    obj = ctx.ensure_object(dict)
    if "service" not in obj:
        obj["service"] = CommuteService(WorkerManager(get_resolver(ctx)))
    return obj["service"]  # type: ignore[no-any-return]


def get_notifier(ctx: click.Context) -> Notifier:
    """Get the Notifier for this invocation."""
    obj = ctx.ensure_object(dict)
    if "notifier" not in obj:
        enabled = obj.get("notify")
        if enabled is None:
            enabled = bool(get_config(ctx).get("notifications.enabled", False))
        backend = get_config(ctx).get("notifications.backend", "auto")
        obj["notifier"] = Notifier(enabled=enabled, backend=backend)
    return obj["notifier"]  # type: ignore[no-any-return]


def fail(ctx: click.Context, error: Exception) -> None:
    """Report an error and exit with status 1."""
    get_notifier(ctx).notify_error(error)
    error_console.print(f"[red]Error:[/red] {error}")
    sys.exit(1)


def run_action(ctx: click.Context, action: str, params: Optional[dict[str, Any]] = None) -> None:
    """Run a worker action and print its message."""
    spec = ACTIONS[action]
    service = get_service(ctx)

    try:
        message = service.run(action, params)
    except WorkerError as e:
        fail(ctx, e)
        return

    console.print(f"[green]✓[/green] {message}")
    if service.status:
        console.print(f"  Status: {service.status}")
    get_notifier(ctx).notify_result(spec.title, message)

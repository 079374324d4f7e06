"""
Boomi Proxy CLI

Command-line interface for running the proxy and calling its routes.
"""

import sys
import json
from pathlib import Path
from typing import Any, Dict, Optional

import click
import httpx
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from . import __version__
from .config import load_config, config_from_env, create_default_config


console = Console(stderr=True)
out = Console()

DEFAULT_PROXY_URL = "http://localhost:8766"


def credential_options(f):
    """Boomi credential options, read from the environment when omitted."""
    f = click.option("--password", envvar="BOOMI_PASSWORD", help="Boomi password or API token")(f)
    f = click.option("--username", "-u", envvar="BOOMI_USERNAME", help="Boomi username")(f)
    f = click.option("--account-id", "-a", envvar="BOOMI_ACCOUNT_ID", help="Boomi account ID")(f)
    return f


def _credentials(account_id: Optional[str], username: Optional[str], password: Optional[str]) -> Dict[str, str]:
    return {
        key: value
        for key, value in (("accountId", account_id), ("username", username), ("password", password))
        if value
    }


def _call(ctx, method: str, path: str, **kwargs) -> Any:
    """Call the running proxy; print the error and exit on failure."""
    url = ctx.obj["url"].rstrip("/") + path
    try:
        response = httpx.request(method, url, **kwargs)
    except httpx.HTTPError as e:
        console.print(f"[red]✗[/red] Proxy not reachable at {ctx.obj['url']}: {e}")
        sys.exit(1)

    try:
        data = response.json()
    except ValueError:
        data = response.text

    if not response.is_success:
        error = data.get("error", data) if isinstance(data, dict) else data
        console.print(f"[red]✗[/red] HTTP {response.status_code}: {error}")
        sys.exit(1)

    return data


@click.group()
@click.version_option(__version__, prog_name="boomi-proxy")
@click.option("--config", "-c", "config_path", type=click.Path(), help="Path to config file")
@click.option("--url", envvar="BOOMI_PROXY_URL", default=DEFAULT_PROXY_URL, show_default=True,
              help="Base URL of a running proxy; use the port `start` reports")
@click.pass_context
def cli(ctx, config_path: str, url: str):
    """Boomi Proxy - HTTP relay for the Boomi AtomSphere API"""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["url"] = url


# =============================================================================
# Server Commands
# =============================================================================

@cli.command()
@click.option("--host", "-h", default=None, help="Host to bind to")
@click.option("--port", "-p", default=None, type=int, help="Port to bind to (0 = any free port)")
@click.pass_context
def start(ctx, host: Optional[str], port: Optional[int]):
    """Start the Boomi Proxy server."""
    config_path = ctx.obj.get("config_path")

    if config_path and Path(config_path).exists():
        config = load_config(config_path)
        console.print(f"[green]✓[/green] Loaded config from {config_path}")
    else:
        config = config_from_env()

    # Override with CLI options
    if host is not None:
        config.server.host = host
    if port is not None:
        config.server.port = port

    console.print(Panel(
        f"[bold]Boomi Proxy v{__version__}[/bold]\n"
        f"Binding [cyan]{config.server.host}:{config.server.port or 'auto'}[/cyan]\n"
        f"Upstream: [cyan]{config.upstream.base_url}[/cyan]",
        title="🚀 Starting"
    ))

    from .startup import serve
    serve(config)


@cli.command()
def init():
    """Initialize a new configuration file."""
    config_path = Path("boomi-proxy.yaml")

    if config_path.exists():
        if not click.confirm(f"{config_path} already exists. Overwrite?"):
            return

    config_path.write_text(create_default_config())
    console.print(f"[green]✓[/green] Created {config_path}")
    console.print("\nEdit the file, then run:")
    console.print("  [cyan]boomi-proxy -c boomi-proxy.yaml start[/cyan]")


@cli.command()
@click.pass_context
def status(ctx):
    """Show server status."""
    data = _call(ctx, "GET", "/health")

    console.print(Panel(
        f"[bold green]{data.get('status', 'unknown').capitalize()}[/bold green]\n\n"
        f"URL: {ctx.obj['url']}\n"
        f"Timestamp: {data.get('timestamp', '-')}",
        title="📊 Boomi Proxy Status"
    ))


# =============================================================================
# Deployment Commands
# =============================================================================

@cli.group()
def deployments():
    """Inspect process deployments."""
    pass


@deployments.command("list")
@credential_options
@click.option("--process-id", help="Only deployments of this process")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
@click.pass_context
def deployments_list(ctx, account_id, username, password, process_id, as_json):
    """List deployments with full details."""
    params = _credentials(account_id, username, password)
    if process_id:
        params["processId"] = process_id

    data = _call(ctx, "GET", "/api/deployments", params=params)

    if as_json:
        out.print_json(json.dumps(data))
        return

    if not data:
        console.print("[yellow]No deployments found[/yellow]")
        return

    table = Table(title="Process Deployments")
    table.add_column("ID", style="cyan")
    table.add_column("Process")
    table.add_column("Environment")
    table.add_column("Version", justify="right")
    table.add_column("Listener")
    table.add_column("Schedule")

    for deployment in data:
        table.add_row(
            str(deployment.get("id", "-")),
            str(deployment.get("processName") or deployment.get("processId") or "-"),
            str(deployment.get("environmentId", "-")),
            str(deployment.get("version", "-")),
            str(deployment.get("listenerStatus", "-")),
            str(deployment.get("scheduleStatus", "-")),
        )

    out.print(table)
    console.print(f"\nTotal: {len(data)} deployment(s)")


@deployments.command("type")
@click.argument("deployment_id")
@credential_options
@click.pass_context
def deployments_type(ctx, deployment_id, account_id, username, password):
    """Show whether a deployment is a listener or a scheduler."""
    data = _call(
        ctx, "GET", f"/api/deployment/{deployment_id}/type",
        params=_credentials(account_id, username, password),
    )

    kinds = [
        name for name, flag in (("listener", data.get("isListener")), ("scheduler", data.get("isScheduler")))
        if flag
    ]

    out.print(Panel(
        f"Type: [bold]{' + '.join(kinds) or 'none'}[/bold]\n"
        f"Status: [cyan]{data.get('status')}[/cyan]",
        title=f"Deployment {deployment_id}"
    ))


# =============================================================================
# Toggle Commands
# =============================================================================

@cli.command()
@click.argument("action", type=click.Choice(["enable", "disable"]))
@click.argument("deployment_id")
@credential_options
@click.pass_context
def listener(ctx, action, deployment_id, account_id, username, password):
    """Enable or disable a deployment's listener."""
    data = _call(
        ctx, "POST", f"/api/deployment/{deployment_id}/listener/{action}",
        json=_credentials(account_id, username, password),
    )
    console.print(f"[green]✓[/green] {data.get('message')}")


@cli.command()
@click.argument("action", type=click.Choice(["pause", "resume"]))
@click.argument("deployment_id")
@credential_options
@click.pass_context
def scheduler(ctx, action, deployment_id, account_id, username, password):
    """Pause or resume a deployment's schedule."""
    data = _call(
        ctx, "POST", f"/api/deployment/{deployment_id}/scheduler/{action}",
        json=_credentials(account_id, username, password),
    )
    console.print(f"[green]✓[/green] {data.get('message')}")


# =============================================================================
# Process Commands
# =============================================================================

@cli.command()
@credential_options
@click.pass_context
def processes(ctx, account_id, username, password):
    """List every process in the account as raw JSON."""
    data = _call(ctx, "GET", "/api/processes", params=_credentials(account_id, username, password))
    out.print_json(json.dumps(data))


# =============================================================================
# Main
# =============================================================================

def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()

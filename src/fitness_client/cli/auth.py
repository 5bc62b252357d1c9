"""CLI: fitness auth login|status|logout"""

from typing import Optional
from urllib.parse import parse_qs, urlparse

import click
from rich.console import Console

from fitness_client.config import DEFAULT_BASE_URL

console = Console()


def _load_config() -> dict:
    from fitness_client.cli.main import _load_config
    return _load_config()


def _save_config(cfg: dict) -> None:
    from fitness_client.cli.main import _save_config
    _save_config(cfg)


def _make_app(cfg: dict):
    from fitness_client.cli.main import _make_app
    return _make_app(cfg)


def _run(coro):
    from fitness_client.cli.main import _run
    return _run(coro)


def parse_redirect(redirect: str) -> tuple[str, str]:
    """Pull `code` and `state` out of the URL the browser was sent back to."""
    query = parse_qs(urlparse(redirect.strip()).query)
    if "error" in query:
        raise click.ClickException(f"Login failed: {query['error'][0]}")
    if "code" not in query or "state" not in query:
        raise click.ClickException("Redirect URL has no code/state parameters")
    return query["code"][0], query["state"][0]


@click.group()
def auth():
    """Authentication commands."""


@auth.command("login")
@click.option("--base-url", default=None, help="Activity API base URL")
def auth_login(base_url: Optional[str]):
    """Log in through the identity provider."""

    async def _login():
        cfg = _load_config()
        cfg["base_url"] = base_url or cfg.get("base_url", DEFAULT_BASE_URL)
        cfg.pop("access_token", None)
        cfg.pop("refresh_token", None)
        app = _make_app(cfg)
        try:
            url = app.log_in()
            console.print("Open this URL in a browser and sign in:")
            console.print(f"[cyan]{url}[/cyan]")
            redirect = click.prompt("Paste the URL you were redirected to")
            code, state = parse_redirect(redirect)
            with console.status("Exchanging authorization code..."):
                await app.identity.complete_login(code, state)
            session = app.session
            console.print(f"[green]Logged in as {session.display_name}[/green]")
            _save_config({**cfg, "access_token": session.token,
                          "refresh_token": app.identity.refresh_token})
            console.print("[dim]Token saved to ~/.fitness/config.json[/dim]")
        finally:
            await app.close()

    _run(_login())


@auth.command("status")
def auth_status():
    """Show current auth status."""
    cfg = _load_config()
    if not cfg.get("access_token"):
        console.print("[yellow]Not logged in. Run `fitness auth login`.[/yellow]")
        return

    async def _status():
        app = _make_app(cfg)
        try:
            session = app.session
            console.print(f"[green]Logged in[/green] as {session.display_name} (ID: {session.user_id})")
        finally:
            await app.close()

    _run(_status())


@auth.command("logout")
def auth_logout():
    """Clear saved credentials."""
    cfg = _load_config()
    _save_config({k: v for k, v in cfg.items() if k not in ("access_token", "refresh_token")})
    console.print("[green]Logged out.[/green]")

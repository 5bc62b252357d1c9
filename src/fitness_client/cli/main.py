"""
Fitness CLI — `fitness` command.

Commands:
  fitness auth login              Browser login (authorization code + PKCE)
  fitness auth status|logout
  fitness activities list         Recorded activities
  fitness activities show <id>    One activity with its AI feedback
  fitness activities add          Record a new activity
"""

import asyncio
import logging

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install fitness-client[cli]")

from fitness_client.client import FitnessApp
from fitness_client.config import load_config, save_config, client_config_from
from fitness_client.errors import FitnessClientError
from fitness_client.identity import PkceIdentityProvider

console = Console()


def _load_config() -> dict:
    return load_config()


def _save_config(cfg: dict) -> None:
    save_config(cfg)


def _make_app(cfg: dict) -> FitnessApp:
    config = client_config_from(cfg)
    identity = PkceIdentityProvider(config.auth, timeout=config.timeout_s)
    if cfg.get("access_token"):
        identity.restore(cfg["access_token"], cfg.get("refresh_token"))
    return FitnessApp(config=config, identity=identity)


def _get_app() -> FitnessApp:
    cfg = _load_config()
    if not cfg.get("access_token"):
        console.print("[red]Not logged in. Run `fitness auth login` first.[/red]")
        raise SystemExit(1)
    return _make_app(cfg)


async def _renew_session(app: FitnessApp) -> bool:
    """Trade the saved refresh token for a new access token and persist the result.

    Returns False when the identity provider wants a fresh login; the saved
    tokens are dropped in that case.
    """
    try:
        renewed = await app.refresh_session()
    except FitnessClientError as e:
        raise click.ClickException(f"Could not renew session: {e}")
    cfg = _load_config()
    if renewed:
        cfg["access_token"] = app.identity.token
        cfg["refresh_token"] = getattr(app.identity, "refresh_token", None)
    else:
        cfg.pop("access_token", None)
        cfg.pop("refresh_token", None)
    _save_config(cfg)
    return renewed


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Log requests and state changes")
def main(verbose: bool):
    """Fitness CLI — track activities and read AI feedback."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# Register subcommands from separate modules
from fitness_client.cli.auth import auth
from fitness_client.cli.activities import activities

main.add_command(auth)
main.add_command(activities)


if __name__ == "__main__":
    main()

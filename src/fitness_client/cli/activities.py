"""CLI: fitness activities list|show|add"""

import json

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from fitness_client.errors import FitnessClientError, UnauthorizedError
from fitness_client.models.activity import Activity, ActivityType
from fitness_client.models.view_state import Failed, Loaded
from fitness_client.routes import LIST_PATH, detail_path
from fitness_client.views import NOT_FOUND_MESSAGE, status_message

console = Console()


def _get_app():
    from fitness_client.cli.main import _get_app
    return _get_app()


def _run(coro):
    from fitness_client.cli.main import _run
    return _run(coro)


async def _renew_session(app) -> bool:
    from fitness_client.cli.main import _renew_session
    return await _renew_session(app)


SESSION_EXPIRED = "Session expired. Run `fitness auth login`."


def _unauthorized(state) -> bool:
    return isinstance(state, Failed) and state.kind == "unauthorized"


def _fmt_number(value: float) -> str:
    return f"{value:g}"


def _parse_metrics(pairs: tuple[str, ...]) -> dict:
    metrics = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {pair!r}", param_hint="--metric")
        try:
            metrics[key] = float(value) if "." in value else int(value)
        except ValueError:
            metrics[key] = value
    return metrics


def render_activity(activity: Activity) -> None:
    console.print(Panel(
        f"{activity.created_at:%b %d, %Y %H:%M}\n"
        f"Duration: {_fmt_number(activity.duration)} minutes\n"
        f"Calories Burned: {_fmt_number(activity.calories_burned)}",
        title=activity.type.label,
    ))
    for section in activity.annotations().sections():
        style = "dim italic" if section.is_fallback else ""
        body = "\n".join(section.lines if len(section.lines) == 1 else [f"• {line}" for line in section.lines])
        console.print(Panel(body, title=section.title, style=style))


@click.group()
def activities():
    """Activity tracking."""


@activities.command("list")
@click.option("--json-output", "--json", is_flag=True)
def activities_list(json_output: bool):
    """List recorded activities."""
    app = _get_app()

    async def _list():
        try:
            with console.status("Loading activities..."):
                await app.navigate(LIST_PATH)
            state = app.activity_list.state
            if _unauthorized(state):
                if not await _renew_session(app):
                    raise click.ClickException(SESSION_EXPIRED)
                with console.status("Loading activities..."):
                    await app.activity_list.refresh()
                state = app.activity_list.state
            if json_output and isinstance(state, Loaded):
                click.echo(json.dumps([a.model_dump(mode="json", by_alias=True) for a in state.payload], indent=2))
                return
            message = status_message(state)
            if message:
                console.print(f"[yellow]{message}[/yellow]")
                return
            table = Table(title="My Activities")
            table.add_column("ID", style="bold")
            table.add_column("Type")
            table.add_column("Duration (min)", justify="right")
            table.add_column("Calories", justify="right")
            table.add_column("Created")
            for a in state.payload:
                table.add_row(a.id, a.type.label, _fmt_number(a.duration),
                              _fmt_number(a.calories_burned), f"{a.created_at:%Y-%m-%d %H:%M}")
            console.print(table)
        finally:
            await app.close()

    _run(_list())


@activities.command("show")
@click.argument("activity_id")
def activities_show(activity_id: str):
    """Show one activity with its AI feedback."""
    app = _get_app()

    async def _show():
        try:
            with console.status("Loading activity..."):
                await app.navigate(detail_path(activity_id))
            state = app.activity_detail.state
            if _unauthorized(state):
                if not await _renew_session(app):
                    raise click.ClickException(SESSION_EXPIRED)
                with console.status("Loading activity..."):
                    await app.activity_detail.reload()
                state = app.activity_detail.state
            message = status_message(state, empty_message=NOT_FOUND_MESSAGE)
            if message:
                console.print(f"[yellow]{message}[/yellow]")
                return
            render_activity(state.payload)
        finally:
            await app.close()

    _run(_show())


@activities.command("add")
@click.option("--type", "activity_type", type=click.Choice([t.value for t in ActivityType], case_sensitive=False),
              default=ActivityType.RUNNING.value, show_default=True)
@click.option("--duration", type=float, required=True, help="Minutes")
@click.option("--calories", type=float, required=True, help="Calories burned")
@click.option("--metric", "metrics", multiple=True, help="Extra metric as key=value (repeatable)")
def activities_add(activity_type: str, duration: float, calories: float, metrics: tuple[str, ...]):
    """Record a new activity."""
    draft = {
        "type": activity_type.upper(),
        "duration": duration,
        "calories_burned": calories,
        "additional_metrics": _parse_metrics(metrics) or None,
    }

    app = _get_app()

    async def _save():
        try:
            with console.status("Saving activity..."):
                return await app.add_activity(draft)
        except UnauthorizedError:
            raise
        except FitnessClientError as e:
            raise click.ClickException(f"Could not save activity: {e}")

    async def _add():
        try:
            try:
                created = await _save()
            except UnauthorizedError:
                if not await _renew_session(app):
                    raise click.ClickException(SESSION_EXPIRED)
                try:
                    created = await _save()
                except UnauthorizedError:
                    raise click.ClickException(SESSION_EXPIRED)
        finally:
            await app.close()
        console.print(f"[green]Activity recorded: {created.id}[/green]")

    _run(_add())

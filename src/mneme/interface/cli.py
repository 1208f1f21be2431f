"""Mneme CLI: reschedule concepts, inspect schedules, run the server."""

import asyncio
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Annotated

import typer

from mneme.application.config import AppConfig, resolve_config

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="mneme: adaptive spaced-repetition scheduler.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage mneme configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def _set_verbosity(verbose: int) -> None:
    level = logging.WARNING if verbose <= 0 else logging.INFO if verbose == 1 else logging.DEBUG
    logging.getLogger("mneme").setLevel(level)


def _resolve(ctx: typer.Context, **overrides) -> AppConfig:
    config = resolve_config({**overrides, "verbose": ctx.obj.get("verbose_bonus")})
    _set_verbosity(config.verbose)
    return config


def _to_json(obj) -> str:
    return json.dumps(asdict(obj), indent=2, default=str)


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 1,
):
    """Global settings for mneme."""
    ctx.ensure_object(dict)
    ctx.obj["verbose_bonus"] = verbose


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def reschedule(
    ctx: typer.Context,
    user_id: Annotated[str, typer.Argument(help="Learner ID.")],
    concept_id: Annotated[str, typer.Argument(help="Concept ID.")],
    topic: Annotated[str, typer.Option("--topic", "-t", help="Concept title to store.")] = "",
    db_path: Annotated[Path | None, typer.Option(help="SQLite database path.")] = None,
):
    """[bold green]Reschedule[/bold green] a concept from its review history."""
    from mneme.application.factory import build_rescheduling_service

    config = _resolve(ctx, db_path=db_path)
    service = build_rescheduling_service(config)

    try:
        result = asyncio.run(
            service.record_review_and_reschedule(user_id, concept_id, topic or concept_id)
        )
    except Exception as e:
        typer.secho(f"Reschedule failed: {e}", fg="red", err=True)
        raise typer.Exit(1) from e

    typer.echo(_to_json(result))


@app.command()
def show(
    ctx: typer.Context,
    user_id: Annotated[str, typer.Argument(help="Learner ID.")],
    concept_id: Annotated[str, typer.Argument(help="Concept ID.")],
    db_path: Annotated[Path | None, typer.Option(help="SQLite database path.")] = None,
):
    """Print the stored schedule for a concept."""
    from mneme.application.factory import get_repositories

    config = _resolve(ctx, db_path=db_path)
    _, store = get_repositories(config)

    try:
        state = asyncio.run(store.get(user_id, concept_id))
    except Exception as e:
        typer.secho(f"Lookup failed: {e}", fg="red", err=True)
        raise typer.Exit(1) from e

    if state is None:
        typer.secho(f"No schedule for user={user_id} concept={concept_id}.", fg="yellow")
        raise typer.Exit(1)

    typer.echo(_to_json(state))


@app.command()
def server(
    ctx: typer.Context,
    host: Annotated[str | None, typer.Option(help="Bind address.")] = None,
    port: Annotated[int | None, typer.Option(help="Bind port.")] = None,
    reload: Annotated[bool, typer.Option("--reload", help="Reload on code changes.")] = False,
):
    """Run the scheduling HTTP server."""
    import uvicorn

    config = _resolve(ctx, host=host, port=port)
    uvicorn.run("mneme.server:app", host=config.host, port=config.port, reload=reload)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    typer.echo(json.dumps(config.model_dump(mode="json"), indent=2))

from typing import cast

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..core import config as config_module
from ..core.config import PluginConfig, Settings
from ..core.errors import AuthorizationError, ConnectivityError, FetchAborted, NotFoundError
from ..core.logging import LogFormat, log, setup_logging
from ..core.plugin_options import mask_text

app = typer.Typer(add_completion=False, help="Contentful space snapshot CLI")


def _console(err: bool = False) -> Console:
    return Console(stderr=err, no_color=config_module.SETTINGS.NO_COLOR)


def _load_settings(config_file: str | None) -> Settings:
    settings = Settings.load_config(config_file)
    config_module.SETTINGS = settings
    return settings


def _setup_logging(log_format: str) -> None:
    setup_logging(format_type=(cast(LogFormat, log_format) if log_format in ("json", "plain", "auto") else "auto"))


def _exit_code(exc: FetchAborted) -> int:
    if isinstance(exc.cause, (AuthorizationError, NotFoundError)):
        return 2
    if isinstance(exc.cause, ConnectivityError):
        return 3
    return 1


def _abort(exc: FetchAborted) -> None:
    _console(err=True).print(Panel(Text(exc.diagnostic), title="Contentful fetch failed", border_style="red"))
    raise typer.Exit(_exit_code(exc)) from exc


@app.command()
def version() -> None:
    from .. import __version__

    typer.echo(__version__)


@app.command()
def config(
    config_file: str | None = typer.Option(None, "--config", help="Config file (.contentful-snapshot.yaml auto-discovered)"),
    mask_secrets: bool = typer.Option(True, help="Mask secrets in output"),
) -> None:
    settings = _load_settings(config_file)
    for k, v in settings.model_dump().items():
        if mask_secrets and "TOKEN" in k and v:
            v = "***"
        elif mask_secrets and k == "CONTENTFUL_SPACE_ID" and v:
            v = mask_text(v)
        typer.echo(f"{k}={v}")


@app.command()
def fetch(
    config_file: str | None = typer.Option(None, "--config", help="Config file (.contentful-snapshot.yaml auto-discovered)"),
    space_id: str | None = typer.Option(None, "--space-id", help="Override CONTENTFUL_SPACE_ID"),
    environment: str | None = typer.Option(None, "--environment", help="Override CONTENTFUL_ENVIRONMENT"),
    locale: list[str] = typer.Option([], "--locale", help="Only keep these locale codes (repeatable)"),
    workers: int | None = typer.Option(None, "--workers", min=1, help="2 fetches entries and assets concurrently"),
    log_format: str = typer.Option("auto", "--log-format", help="Logging format: json|plain|auto"),
) -> None:
    """Fetch every entry, asset and content type of a space and print a summary."""
    from ..pipeline.runner import fetch_contentful_data

    _setup_logging(log_format)
    settings = _load_settings(config_file)
    overrides = {
        "CONTENTFUL_SPACE_ID": space_id,
        "CONTENTFUL_ENVIRONMENT": environment,
        "CONTENTFUL_LOCALES": locale or None,
        "CONTENTFUL_WORKERS": workers,
    }
    settings = settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})

    try:
        result = fetch_contentful_data(
            PluginConfig.from_settings(settings),
            workers=settings.CONTENTFUL_WORKERS,
        )
    except FetchAborted as e:
        _abort(e)
        return

    table = Table(title=f"Space {settings.CONTENTFUL_SPACE_ID} ({settings.CONTENTFUL_ENVIRONMENT})")
    table.add_column("Collection")
    table.add_column("Count", justify="right")
    for name, count in result.counts().items():
        table.add_row(name, str(count))
    _console().print(table)
    typer.echo(f"default locale: {result.default_locale}")
    log.info("cli.fetch.done", space_id=settings.CONTENTFUL_SPACE_ID, **result.counts())


@app.command()
def locales(
    config_file: str | None = typer.Option(None, "--config", help="Config file (.contentful-snapshot.yaml auto-discovered)"),
    log_format: str = typer.Option("auto", "--log-format", help="Logging format: json|plain|auto"),
) -> None:
    """List the space locales and its default locale."""
    from ..adapters.contentful_api import client_from_config
    from ..core.errors import classify_remote_error
    from ..core.reporter import Reporter
    from ..pipeline.runner import bootstrap_diagnostic
    from ..pipeline.steps.ingest.locales import bootstrap_locales

    _setup_logging(log_format)
    settings = _load_settings(config_file)
    plugin_config = PluginConfig.from_settings(settings)

    try:
        with client_from_config(plugin_config) as client:
            try:
                boot = bootstrap_locales(client, plugin_config.get("localeFilter"))
            except Exception as e:
                error = classify_remote_error(e)
                Reporter().panic(bootstrap_diagnostic(error, plugin_config), error)
    except FetchAborted as e:
        _abort(e)
        return

    table = Table(title="Locales")
    table.add_column("Code")
    table.add_column("Name")
    table.add_column("Default")
    table.add_column("Fallback")
    for loc in boot.locales:
        table.add_row(loc.code, loc.name or "", "yes" if loc.default else "", loc.fallback_code or "")
    _console().print(table)
    typer.echo(f"default locale: {boot.default_locale}")


if __name__ == "__main__":
    app()

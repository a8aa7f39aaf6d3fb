"""
pearl: London Oyster journey analytics

Entry point for the command line and the web server.
"""

import logging
from pathlib import Path

import typer

from pearl.bigquery_client import BigQueryClientError, JourneyClient
from pearl.cli import ANSI_PALETTE, PLAIN_PALETTE, render_heatmap
from pearl.config import CONFIG_PATH, Config, load_config
from pearl.heatmap_calculator import DateParseError

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="pearl",
    help="London Oyster journey heatmaps for the terminal and the browser.",
    no_args_is_help=True,
)

ConfigOption = typer.Option(
    Path(CONFIG_PATH),
    "--config",
    "-c",
    help="Path to configuration file",
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_config_or_exit(path: Path) -> Config:
    try:
        return load_config(path)
    except ValueError as e:
        typer.echo(f"loading config: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def show(
    config: Path = ConfigOption,
    plain: bool = typer.Option(False, "--plain", help="Disable ANSI colours"),
) -> None:
    """Print a heatmap of every day in the journeys table."""
    cfg = _load_config_or_exit(config)

    typer.echo("Pearl – London Oyster Analytics Dashboard")
    typer.echo("=" * 41)
    typer.echo()

    try:
        with JourneyClient(cfg.bigquery.project_id, cfg.bigquery.dataset) as client:
            activity = client.fetch_activity()
    except BigQueryClientError as e:
        typer.echo(f"fetching activity data: {e}", err=True)
        raise typer.Exit(1)

    try:
        render_heatmap(activity, palette=PLAIN_PALETTE if plain else ANSI_PALETTE)
    except DateParseError as e:
        typer.echo(f"rendering heatmap: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def serve(
    config: Path = ConfigOption,
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Host to bind to"),
) -> None:
    """Start the web dashboard."""
    import uvicorn

    from pearl.app import app as web_app

    cfg = _load_config_or_exit(config)
    web_app.state.config = cfg

    logger.info("starting server on %s:%d", host, cfg.server.port)
    # uvicorn handles SIGINT/SIGTERM and drains open connections on shutdown
    uvicorn.run(
        web_app,
        host=host,
        port=cfg.server.port,
        timeout_keep_alive=60,
        timeout_graceful_shutdown=10,
    )
    logger.info("server stopped")


if __name__ == "__main__":
    app()

from __future__ import annotations

import asyncio
import logging
from typing import Annotated, Optional

import typer
from tabulate import tabulate

from .config import ConnectionConfig, get_settings
from .models import TimeRange
from .service import PageviewService

app = typer.Typer(help="Pageviews per url and per post slug, read from Umami Analytics.")
settings = get_settings()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_with_service(fn):
    async def _with_service():
        async with PageviewService.from_settings(settings) as service:
            return await fn(service)

    return asyncio.run(_with_service())


@app.callback()
def main_callback(
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="Niveau de log (DEBUG, INFO...)")] = None,
) -> None:
    configure_logging(log_level or settings.log_level)


@app.command()
def check() -> None:
    """Indique si UMAMI_HOST, UMAMI_WEBSITE_ID et UMAMI_TOKEN sont renseignés."""
    config = ConnectionConfig.from_settings(settings)
    if config.is_complete:
        typer.echo(f"Configuré : {config.endpoint} (site {config.site_id})")
    else:
        typer.echo("Non configuré.")
        raise typer.Exit(code=1)


@app.command()
def metrics(
    start_at: Annotated[Optional[int], typer.Option("--start-at", help="Début (epoch ms)")] = None,
    end_at: Annotated[Optional[int], typer.Option("--end-at", help="Fin (epoch ms)")] = None,
    limit: Annotated[int, typer.Option("--limit", "-n")] = 50,
) -> None:
    """Pageviews par url, fusionnées sans le #fragment."""
    rows = run_with_service(lambda service: service.fetch_url_metrics(TimeRange(start_at=start_at, end_at=end_at)))
    rows = sorted(rows, key=lambda metric: metric.views, reverse=True)[:limit]
    table = [{"url": metric.path, "views": metric.views} for metric in rows]
    typer.echo(tabulate(table, headers="keys"))


@app.command()
def url(path: Annotated[str, typer.Argument(help="Chemin suivi, ex. /post/mon-article")]) -> None:
    """Total des pageviews d'une url."""
    typer.echo(run_with_service(lambda service: service.pageviews_for_url(path)))


@app.command()
def slug(value: Annotated[str, typer.Argument(metavar="SLUG")]) -> None:
    """Total des pageviews d'un post."""
    typer.echo(run_with_service(lambda service: service.pageviews_for_slug(value)))


@app.command()
def views(limit: Annotated[int, typer.Option("--limit", "-n")] = 50) -> None:
    """Liste des posts les plus vus."""
    views_by_slug = run_with_service(lambda service: service.slug_view_map())
    ranked = sorted(views_by_slug.items(), key=lambda item: item[1], reverse=True)[:limit]
    typer.echo(tabulate([{"slug": s, "views": v} for s, v in ranked], headers="keys"))


@app.command()
def stats() -> None:
    """Totaux du site (pageviews, visiteurs, visites...)."""
    website_stats = run_with_service(lambda service: service.website_stats())
    if website_stats is None:
        typer.echo("Aucune statistique disponible.")
        raise typer.Exit(code=1)
    typer.echo(tabulate(website_stats.rows(), headers="keys"))


def main() -> None:  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()

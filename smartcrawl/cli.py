"""smartcrawl CLI

Usage:
    smartcrawl crawl -u https://example.com -o results.json
    smartcrawl serve
    smartcrawl submit https://example.com --download-dir downloads
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer

from smartcrawl.core.config import settings

app = typer.Typer(
    name="smartcrawl",
    help="Render a page, extract structured items, and expose crawls as polled jobs.",
    no_args_is_help=True,
)


@app.command()
def crawl(
    url: str = typer.Option(..., "--url", "-u", help="URL to crawl"),
    output: Path = typer.Option(Path("results.json"), "--output", "-o", help="Output JSON file"),
) -> None:
    """Crawl one URL in-process and write the result JSON."""
    from smartcrawl.core.exceptions import SmartCrawlException
    from smartcrawl.crawlers import CrawlOrchestrator

    try:
        result = asyncio.run(CrawlOrchestrator().crawl(url, output))
    except SmartCrawlException as e:
        typer.echo(f"Crawl failed: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Extracted {len(result.items)} items ({result.item_count} unique) -> {output}")


@app.command()
def serve(
    host: str = typer.Option(settings.api_host, help="Bind address"),
    port: int = typer.Option(settings.api_port, help="Bind port"),
) -> None:
    """Run the job API server."""
    import uvicorn

    uvicorn.run("smartcrawl.app:app", host=host, port=port)


@app.command()
def submit(
    url: str = typer.Argument(..., help="URL to crawl"),
    api_url: str = typer.Option(settings.poller_api_url, "--api-url", help="Job API base URL"),
    download_dir: Optional[Path] = typer.Option(None, "--download-dir", help="Save the result JSON here"),
) -> None:
    """Submit a job to a running server and poll until it finishes."""
    from smartcrawl.client import JobPoller, PollState

    async def _run() -> PollState:
        poller = JobPoller(api_url, download_dir=download_dir)
        final = None
        async for update in poller.start_job(url):
            typer.echo(f"[{update.state.value}] {update.progress:.0f}%")
            final = update
        if final is not None and final.state is PollState.SUCCESS:
            typer.echo(json.dumps(final.data, indent=2, ensure_ascii=False))
        elif final is not None and final.error:
            typer.echo(final.error, err=True)
        return final.state if final is not None else PollState.ERROR

    state = asyncio.run(_run())
    if state is not PollState.SUCCESS:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()

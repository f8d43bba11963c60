"""CLI tool for scraping listing prices for a stay window."""
import asyncio
import time
from typing import Dict, List, Optional

import httpx
import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from ..exceptions import ScraperError
from ..models import NOT_AVAILABLE, ScrapeBatchRequest
from ..scraping import ScrapeOrchestrator
from ..services import load_url_list

app = typer.Typer()
console = Console()


async def request_prices(
    arrival: str,
    departure: str,
    urls: List[str],
    api_url: str,
    timeout: float,
) -> Optional[List[Dict[str, str]]]:
    """Send a scrape batch to the API and return its outcomes."""
    async with httpx.AsyncClient(timeout=timeout) as client:
        try:
            response = await client.post(
                f"{api_url}/scrape",
                json={
                    "arrivalDate": arrival,
                    "departureDate": departure,
                    "urls": urls,
                },
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            console.print(
                f"[red]Scrape failed ({e.response.status_code}): {e.response.text}[/red]"
            )
            return None
        except httpx.HTTPError as e:
            console.print(f"[red]Error: {e}[/red]")
            return None


async def scrape_locally(
    arrival: str,
    departure: str,
    urls: List[str],
    list_file: Optional[str],
) -> List[Dict[str, str]]:
    """Run a batch in-process against a local browser."""
    default_urls = load_url_list(list_file) if list_file else ()
    orchestrator = ScrapeOrchestrator(default_urls=default_urls)
    request = ScrapeBatchRequest(arrivalDate=arrival, departureDate=departure, urls=urls)
    outcomes = await orchestrator.handle_batch(request)
    return [outcome.model_dump() for outcome in outcomes]


def create_results_table(outcomes: List[Dict[str, str]]) -> Table:
    """Create a rich table of URL and price, sorted by URL."""
    table = Table(show_header=True, header_style="cyan bold")
    table.add_column("URL", style="white", overflow="fold")
    table.add_column("Price", justify="right", no_wrap=True)

    for outcome in sorted(outcomes, key=lambda o: o.get("url", "")):
        price = outcome.get("price", NOT_AVAILABLE)
        style = "red" if price == NOT_AVAILABLE else "green"
        table.add_row(outcome.get("url", ""), f"[{style}]{price}[/{style}]")

    return table


def print_results(outcomes: List[Dict[str, str]], elapsed: float) -> None:
    found = sum(1 for o in outcomes if o.get("price") != NOT_AVAILABLE)
    console.print(create_results_table(outcomes))
    console.print(
        f"\n[cyan]Prices found:[/cyan] {found}/{len(outcomes)} "
        f"[dim]({elapsed:.1f}s)[/dim]"
    )


@app.command()
def scrape(
    arrival: str = typer.Option(..., help="Check-in date (YYYY-MM-DD)"),
    departure: str = typer.Option(..., help="Check-out date (YYYY-MM-DD)"),
    url: Optional[List[str]] = typer.Option(
        None, help="Listing URL, repeatable. Omit to use the server's default list"
    ),
    api_url: str = typer.Option("http://localhost:8080", help="API base URL"),
    timeout: float = typer.Option(600.0, help="Request timeout in seconds"),
):
    """
    Scrape prices through a running API server.

    Examples:

        python -m src.cli.scrape scrape --arrival 2024-06-01 --departure 2024-06-05

        python -m src.cli.scrape scrape --arrival 2024-06-01 --departure 2024-06-05 --url https://example.com/a
    """
    urls = url or []
    console.print(f"\n[bold cyan]Scraping prices for[/bold cyan] {arrival} to {departure}\n")

    async def run():
        start_time = time.time()
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task(
                f"[cyan]Scraping {len(urls) or 'default'} URLs...", total=None
            )
            outcomes = await request_prices(arrival, departure, urls, api_url, timeout)

        if outcomes is None:
            raise typer.Exit(1)
        print_results(outcomes, time.time() - start_time)

    asyncio.run(run())


@app.command("run-local")
def run_local(
    arrival: str = typer.Option(..., help="Check-in date (YYYY-MM-DD)"),
    departure: str = typer.Option(..., help="Check-out date (YYYY-MM-DD)"),
    url: Optional[List[str]] = typer.Option(None, help="Listing URL, repeatable"),
    list_file: Optional[str] = typer.Option(
        None, help="File with one URL per line, used when no --url is given"
    ),
):
    """
    Scrape prices in-process with a local headless browser.

    Ctrl-C abandons the batch and closes the browser.
    """
    start_time = time.time()
    try:
        outcomes = asyncio.run(scrape_locally(arrival, departure, url or [], list_file))
    except KeyboardInterrupt:
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(130)
    except ScraperError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    print_results(outcomes, time.time() - start_time)


if __name__ == "__main__":
    app()

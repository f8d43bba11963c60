"""Gradio frontend for the price scraper - single process, no API server needed."""
import os
import sys
from datetime import date, datetime
from pathlib import Path
from typing import List

import gradio as gr
from dotenv import load_dotenv
from pydantic import ValidationError

# Add backend to path for direct imports
sys.path.insert(0, str(Path(__file__).parent.parent))

load_dotenv()

from backend.src.config import settings
from backend.src.exceptions import ScraperError, URLListError
from backend.src.models import NOT_AVAILABLE, ScrapeBatchRequest
from backend.src.scraping import ScrapeOrchestrator
from backend.src.services import load_url_list, parse_url_list

custom_css = """
.gradio-container {
    padding-left: max(0px, calc((100% - 960px) / 2)) !important;
    padding-right: max(0px, calc((100% - 960px) / 2)) !important;
}
.status-line {
    font-family: monospace;
    font-size: 0.9em;
    padding: 8px 0;
}
.status-line.error {
    color: #C6603F;
}
"""


def build_orchestrator() -> ScrapeOrchestrator:
    """Create the orchestrator, falling back to no default URLs if the list is missing."""
    try:
        default_urls = load_url_list(settings.url_list_path)
    except URLListError as e:
        print(f"[WARNING] {e}. URLs must be entered in the form.")
        default_urls = ()
    return ScrapeOrchestrator(default_urls=default_urls)


orchestrator = build_orchestrator()


def format_status(message: str, error: bool = False) -> str:
    """Generate HTML for the status line."""
    css_class = "status-line error" if error else "status-line"
    timestamp = datetime.now().strftime("%H:%M:%S")
    return f'<div class="{css_class}">[{timestamp}] {message}</div>'


async def start_scraping(arrival: str, departure: str, urls_text: str):
    """Run a batch and stream button state, result rows and status."""
    idle_button = gr.update(value="Start Scraping", interactive=True)
    urls: List[str] = list(parse_url_list((urls_text or "").splitlines()))

    yield (
        gr.update(value="Scraping...", interactive=False),
        [],
        format_status(f"Scraping {len(urls) or len(orchestrator.default_urls)} URLs..."),
    )

    try:
        request = ScrapeBatchRequest(arrivalDate=arrival, departureDate=departure, urls=urls)
        outcomes = await orchestrator.handle_batch(request)
    except (ScraperError, ValidationError) as e:
        print(f"[ERROR] Scrape failed: {e}")
        yield idle_button, [], format_status(
            "Failed to fetch data. Please try again later.", error=True
        )
        return

    rows = [[outcome.url, outcome.price] for outcome in outcomes]
    found = sum(1 for outcome in outcomes if outcome.price != NOT_AVAILABLE)
    yield idle_button, rows, format_status(f"Done: {found}/{len(rows)} prices found")


with gr.Blocks(title="Price Scraper") as demo:
    gr.HTML(f"<style>{custom_css}</style>")

    gr.HTML("<h1>Price <span style='color: #C6603F;'>Scraper</span></h1>")

    today = date.today().strftime("%Y-%m-%d")
    with gr.Row():
        arrival_input = gr.Textbox(label="Arrival Date", value=today, placeholder="yyyy-MM-dd")
        departure_input = gr.Textbox(label="Departure Date", value=today, placeholder="yyyy-MM-dd")

    urls_input = gr.Textbox(
        label="Listing URLs (optional)",
        placeholder="One URL per line. Leave empty to use the default list.",
        lines=4,
    )
    scrape_btn = gr.Button("Start Scraping", variant="primary")

    status = gr.HTML(value=format_status("Ready"))
    results = gr.Dataframe(headers=["URL", "Price"], datatype=["str", "str"], interactive=False)

    scrape_btn.click(
        fn=start_scraping,
        inputs=[arrival_input, departure_input, urls_input],
        outputs=[scrape_btn, results, status],
    )


if __name__ == "__main__":
    print("[STARTUP] Starting Gradio price scraper...")
    demo.queue()
    demo.launch(
        server_port=int(os.getenv("GRADIO_SERVER_PORT", 7860)),
        server_name="0.0.0.0",
        share=False,
    )

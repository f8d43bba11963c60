"""Price scraping API endpoints."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from ..exceptions import (
    BatchCancelledError,
    BatchTimeoutError,
    BrowserSessionError,
    NoURLsConfiguredError,
)
from ..models import ScrapeBatchRequest, ScrapeOutcome
from ..scraping import ScrapeOrchestrator
from ..utils.logger import logger

router = APIRouter(tags=["scrape"])


def get_orchestrator(request: Request) -> ScrapeOrchestrator:
    """Return the orchestrator created at startup."""
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(status_code=503, detail="Scraper is not initialized")
    return orchestrator


@router.post("/scrape", response_model=List[ScrapeOutcome])
async def scrape_prices(
    batch: ScrapeBatchRequest,
    orchestrator: ScrapeOrchestrator = Depends(get_orchestrator),
) -> List[ScrapeOutcome]:
    """Scrape the stay price of every listing URL.

    Args:
        batch: Stay dates and optional listing URLs
        orchestrator: Batch orchestrator

    Returns:
        One outcome per URL, price "N/A" where none was found
    """
    try:
        return await orchestrator.handle_batch(batch)

    except NoURLsConfiguredError as e:
        logger.error(f"Rejected scrape batch: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except BrowserSessionError as e:
        logger.error(f"Scrape batch failed: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    except BatchTimeoutError as e:
        logger.error(f"Scrape batch timed out: {e}")
        raise HTTPException(status_code=504, detail=str(e))
    except BatchCancelledError as e:
        logger.error(f"Scrape batch cancelled: {e}")
        raise HTTPException(status_code=503, detail=str(e))


@router.options("/scrape")
async def scrape_options() -> Response:
    """Answer bare OPTIONS requests with an empty body."""
    return Response(status_code=200)

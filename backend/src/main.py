"""FastAPI application entry point."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .exceptions import URLListError
from .routes import scrape
from .scraping import ScrapeOrchestrator
from .services import load_url_list
from .utils.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the default URL list and build the orchestrator before serving."""
    logger.info("Starting Price Scraper API")
    try:
        default_urls = load_url_list(settings.url_list_path)
    except URLListError as e:
        logger.error(f"Cannot start without a URL list: {e}")
        raise

    app.state.orchestrator = ScrapeOrchestrator(default_urls=default_urls)
    logger.info(f"Max concurrency: {settings.max_concurrency}")
    logger.info(f"Allowed origin: {settings.cors_origin}")

    yield

    logger.info("Shutting down Price Scraper API")


# Create FastAPI app
app = FastAPI(
    title="Price Scraper API",
    description="Scrapes stay prices from listing pages for a date range",
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.cors_origin],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400 Bad Request."""
    errors = [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")}
        for error in exc.errors()
    ]
    logger.warning(f"Invalid request to {request.url.path}: {errors}")
    return JSONResponse(status_code=400, content={"detail": "Invalid JSON", "errors": errors})


# Include routers
app.include_router(scrape.router)


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint.

    Returns:
        Health status
    """
    return {"status": "healthy", "service": "price-scraper"}


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint.

    Returns:
        Welcome message
    """
    return {
        "message": "Price Scraper API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info",
    )

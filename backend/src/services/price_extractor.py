"""Price extraction from loaded listing pages."""
from typing import Iterable, List, Optional

from ..config import settings
from ..models import NOT_AVAILABLE
from ..utils.logger import logger


class PriceExtractor:
    """Finds the stay total on a listing page."""

    def __init__(self, selector: Optional[str] = None, currency_prefix: Optional[str] = None):
        """Initialize the extractor.

        Args:
            selector: CSS selector for candidate price elements. Defaults to
                settings price_selector
            currency_prefix: Text a price must start with. Defaults to
                settings currency_prefix
        """
        self.selector = selector or settings.price_selector
        self.currency_prefix = currency_prefix or settings.currency_prefix

    def select_price(self, texts: Iterable[Optional[str]]) -> Optional[str]:
        """Pick the price from candidate texts in document order.

        The last text carrying the currency prefix wins, so later matches
        override earlier ones.

        Args:
            texts: Element texts; None entries are skipped

        Returns:
            Trimmed price text, or None if nothing qualifies
        """
        price = None
        for text in texts:
            if not text:
                continue
            candidate = text.strip()
            if candidate.startswith(self.currency_prefix):
                price = candidate
        return price

    async def find_price(self, page) -> Optional[str]:
        """Query the page and return the price text, or None if absent.

        Errors from the element query itself propagate; an element whose text
        cannot be read counts as empty.
        """
        elements = await page.query_selector_all(self.selector)
        texts: List[Optional[str]] = []
        for element in elements:
            try:
                texts.append(await element.inner_text())
            except Exception as e:
                logger.debug(f"Could not read text of price element: {e}")
                texts.append(None)
        return self.select_price(texts)

    async def extract(self, page) -> str:
        """Return the price text, or "N/A" when the page shows none."""
        price = await self.find_price(page)
        return price if price is not None else NOT_AVAILABLE

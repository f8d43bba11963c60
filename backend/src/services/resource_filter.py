"""Resource filter for trimming page loads down to what price extraction needs."""
from typing import Iterable, Optional, Union

from ..config import settings
from ..models import FilterDecision, ResourceType
from ..utils.logger import logger


class ResourceFilterPolicy:
    """Decides which sub-resource requests a page is allowed to make.

    Images, fonts, stylesheets and scripts are aborted by default; the price
    text lives in the server-rendered document. The policy holds no mutable
    state, so one instance can serve every page of a session concurrently.
    """

    def __init__(self, blocked_types: Optional[Iterable[Union[str, ResourceType]]] = None):
        """Initialize the policy.

        Args:
            blocked_types: Resource types to abort. Defaults to settings
                blocked_resource_types
        """
        if blocked_types is None:
            blocked_types = settings.blocked_resource_types
        self.blocked_types = frozenset(self._normalize(t) for t in blocked_types)

    @staticmethod
    def _normalize(resource_type: Union[str, ResourceType]) -> str:
        if isinstance(resource_type, ResourceType):
            return resource_type.value
        return str(resource_type).strip().lower()

    def decide(self, resource_type: Union[str, ResourceType]) -> FilterDecision:
        """Return whether a request of the given type may proceed."""
        if self._normalize(resource_type) in self.blocked_types:
            return FilterDecision.ABORT
        return FilterDecision.ALLOW

    async def handle_route(self, route) -> None:
        """Playwright route handler applying the policy to one request."""
        resource_type = route.request.resource_type
        if self.decide(resource_type) is FilterDecision.ABORT:
            await route.abort()
        else:
            await route.continue_()
        logger.debug(f"{resource_type} {route.request.url}")

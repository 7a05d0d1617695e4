import logging
import re
import secrets
from typing import Optional, Tuple, Union

from shorturl_app.exceptions import (
    AccessDenied,
    IdentifierConflict,
    InvalidIdentifier,
    MissingField,
    NotFound,
)
from shorturl_app.models.record import Record
from shorturl_app.schemas.url import RedirectTarget, StatsResponse
from shorturl_app.services.allocator import IdentifierAllocator
from shorturl_app.storage.strategies import StorageStrategy

logger = logging.getLogger("shorturl.service")

ID_PATTERN = re.compile(r"[0-9a-zA-Z_-]+")
STATS_MARKER = "+"


def parse_path(raw_path: str) -> Tuple[str, bool]:
    """
    Split a request path into (identifier, stats_mode).

    "/abc" -> ("abc", False), "/abc+" -> ("abc", True). Only one leading
    slash and one trailing marker are stripped.
    """
    path = raw_path[1:] if raw_path.startswith("/") else raw_path
    stats = path.endswith(STATS_MARKER)
    if stats:
        path = path[:-len(STATS_MARKER)]
    return path, stats


class URLService:
    """
    URL Service with dependency injection for storage and id allocation.

    This follows the Dependency Injection pattern:
    - Storage strategy is injected (not created internally)
    - Easy to test (inject an in-memory store)
    - Flexible (swap backends without changing code)
    """

    def __init__(
        self,
        storage: StorageStrategy,
        allocator: IdentifierAllocator,
        token: str
    ):
        """
        Initialize URL service with dependencies.

        Args:
            storage: Record storage shared by every request
            allocator: Generates identifiers when the client gives none
            token: Shared secret required for submissions
        """
        self.storage = storage
        self.allocator = allocator
        self.token = token

    def authorize(self, caller_token: Optional[str]) -> None:
        """Raise AccessDenied unless caller_token is exactly the shared secret."""
        if caller_token is None or not secrets.compare_digest(
            caller_token.encode("utf-8"), self.token.encode("utf-8")
        ):
            raise AccessDenied()

    async def submit(
        self,
        caller_token: Optional[str],
        url: Optional[str],
        identifier: Optional[str] = None
    ) -> Record:
        """Create a new short URL

        Validation order: token, url, identifier charset, identifier
        availability. Nothing is written unless every check passes.

        An empty identifier counts as "not given" and one is allocated.
        Creation is create-if-absent, so a client-supplied id that is taken
        (or gets taken between the check and the write) is a conflict,
        never an overwrite.
        """
        self.authorize(caller_token)

        if not url:
            raise MissingField("url")

        if identifier:
            if not ID_PATTERN.fullmatch(identifier):
                raise InvalidIdentifier(identifier)
            if await self.storage.exists(identifier):
                raise IdentifierConflict(identifier)
        else:
            identifier = await self.allocator.allocate()

        record = Record(id=identifier, url=url, visits=0)
        if not await self.storage.create(identifier, record):
            raise IdentifierConflict(identifier)

        logger.info(f"Created id '{identifier}' -> {url}")
        return record

    async def retrieve(self, raw_path: str) -> Union[RedirectTarget, StatsResponse]:
        """
        Resolve a request path.

        Stats mode (trailing "+") reads the record and never touches the
        counter. Redirect mode bumps the counter with a single atomic
        backend call and returns the destination.
        """
        identifier, stats = parse_path(raw_path)
        if not identifier:
            raise NotFound(identifier)

        if stats:
            record = await self.storage.get(identifier)
            if record is None:
                raise NotFound(identifier)
            return StatsResponse(visits=record.visits, url=record.url, id=identifier)

        record = await self.storage.increment_visits(identifier)
        if record is None:
            raise NotFound(identifier)
        return RedirectTarget(url=record.url)

import asyncio

import pytest

from shorturl_app.exceptions import (
    AccessDenied,
    AllocationExhausted,
    IdentifierConflict,
    InvalidIdentifier,
    MissingField,
    NotFound,
)
from shorturl_app.models.record import Record
from shorturl_app.schemas.url import RedirectTarget, StatsResponse
from shorturl_app.services.allocator import IdentifierAllocator
from shorturl_app.services.url_service import URLService, parse_path
from shorturl_app.storage.strategies import InMemoryStorage


class TestParsePath:
    """Test identifier extraction from request paths"""

    def test_plain(self):
        assert parse_path("/abc") == ("abc", False)

    def test_stats_marker(self):
        assert parse_path("/abc+") == ("abc", True)

    def test_only_one_marker_stripped(self):
        assert parse_path("/abc++") == ("abc+", True)

    def test_root(self):
        assert parse_path("/") == ("", False)

    def test_no_leading_slash(self):
        assert parse_path("abc") == ("abc", False)


class TestSubmit:
    """Test the submission business rules directly"""

    def test_generated_id(self, url_service, storage):
        record = asyncio.run(url_service.submit("secret", "https://example.com"))

        assert len(record.id) == 3
        assert record.visits == 0
        assert asyncio.run(storage.get(record.id)) == record

    def test_client_id(self, url_service):
        record = asyncio.run(url_service.submit("secret", "https://a.com", "my-id"))
        assert record == Record(id="my-id", url="https://a.com", visits=0)

    def test_empty_id_means_generate(self, url_service):
        record = asyncio.run(url_service.submit("secret", "https://a.com", ""))
        assert len(record.id) == 3

    def test_wrong_token(self, url_service, storage):
        with pytest.raises(AccessDenied):
            asyncio.run(url_service.submit("Secret", "https://a.com", "abc"))
        assert len(storage) == 0

    def test_missing_token(self, url_service):
        with pytest.raises(AccessDenied):
            asyncio.run(url_service.submit(None, "https://a.com"))

    def test_token_checked_before_url(self, url_service):
        with pytest.raises(AccessDenied):
            asyncio.run(url_service.submit("nope", None))

    def test_missing_url(self, url_service):
        with pytest.raises(MissingField):
            asyncio.run(url_service.submit("secret", ""))

    @pytest.mark.parametrize("identifier", ["bad id!", "a/b", "a+", "héllo", "abc\n"])
    def test_invalid_identifier(self, url_service, storage, identifier):
        with pytest.raises(InvalidIdentifier):
            asyncio.run(url_service.submit("secret", "https://a.com", identifier))
        assert len(storage) == 0

    def test_conflict_keeps_original(self, url_service, storage):
        asyncio.run(url_service.submit("secret", "https://a.com", "my-id"))

        with pytest.raises(IdentifierConflict):
            asyncio.run(url_service.submit("secret", "https://a.com", "my-id"))
        with pytest.raises(IdentifierConflict):
            asyncio.run(url_service.submit("secret", "https://b.com", "my-id"))

        assert asyncio.run(storage.get("my-id")).url == "https://a.com"

    def test_conflict_with_falsy_looking_url(self, url_service):
        asyncio.run(url_service.submit("secret", "0", "zero"))

        with pytest.raises(IdentifierConflict):
            asyncio.run(url_service.submit("secret", "https://a.com", "zero"))

    def test_allocation_exhausted_leaves_no_trace(self):
        class FullStorage(InMemoryStorage):
            async def exists(self, identifier):
                return True

        storage = FullStorage()
        service = URLService(storage, IdentifierAllocator(storage, length=3), token="secret")

        with pytest.raises(AllocationExhausted):
            asyncio.run(service.submit("secret", "https://a.com"))
        assert len(storage) == 0


class TestRetrieve:
    """Test redirect and stats lookups directly"""

    def test_redirect_counts_visit(self, url_service, storage):
        asyncio.run(url_service.submit("secret", "https://a.com", "abc"))

        result = asyncio.run(url_service.retrieve("/abc"))

        assert result == RedirectTarget(url="https://a.com")
        assert asyncio.run(storage.get("abc")).visits == 1

    def test_stats(self, url_service):
        asyncio.run(url_service.submit("secret", "https://a.com", "abc"))
        asyncio.run(url_service.retrieve("/abc"))

        result = asyncio.run(url_service.retrieve("/abc+"))

        assert result == StatsResponse(visits=1, url="https://a.com", id="abc")

    def test_stats_never_mutate(self, url_service, storage):
        asyncio.run(url_service.submit("secret", "https://a.com", "abc"))

        for _ in range(10):
            asyncio.run(url_service.retrieve("/abc+"))

        assert asyncio.run(storage.get("abc")).visits == 0

    def test_not_found(self, url_service):
        with pytest.raises(NotFound):
            asyncio.run(url_service.retrieve("/never"))
        with pytest.raises(NotFound):
            asyncio.run(url_service.retrieve("/never+"))

    def test_empty_identifier(self, url_service):
        with pytest.raises(NotFound):
            asyncio.run(url_service.retrieve("/"))
        with pytest.raises(NotFound):
            asyncio.run(url_service.retrieve("/+"))

    def test_concurrent_redirects_count_every_visit(self, url_service, storage):
        asyncio.run(url_service.submit("secret", "https://a.com", "hot"))

        async def burst():
            await asyncio.gather(*(url_service.retrieve("/hot") for _ in range(50)))

        asyncio.run(burst())
        assert asyncio.run(storage.get("hot")).visits == 50

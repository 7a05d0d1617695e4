"""
FastAPI dependencies for dependency injection.

Settings and storage are built once by the application lifespan and kept on
`app.state`; these helpers hand them to routes and services.

Pattern: Dependency Injection
- No ambient globals: every handler receives what it needs
- Easy to test (build an app with an explicit store)
"""

from fastapi import Depends, Request

from shorturl_app.config import Settings
from shorturl_app.services.allocator import IdentifierAllocator
from shorturl_app.services.url_service import URLService
from shorturl_app.storage.strategies import StorageStrategy


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> StorageStrategy:
    """The process-wide storage instance created at startup."""
    return request.app.state.storage


def get_url_service(
    settings: Settings = Depends(get_settings),
    storage: StorageStrategy = Depends(get_storage)
) -> URLService:
    """
    Get URLService with all dependencies injected.

    Controller depends on service, service depends on storage.
    """
    allocator = IdentifierAllocator(storage, length=settings.id_length)
    return URLService(storage=storage, allocator=allocator, token=settings.token)

"""
Random identifier allocation.
Draws short random identifiers and checks storage for collisions.
"""

import secrets
import string
from typing import Optional

from shorturl_app.exceptions import AllocationExhausted
from shorturl_app.storage.strategies import StorageStrategy

ALPHABET = string.digits + string.ascii_letters + "_-"


class IdentifierAllocator:
    """
    Generates a random string and checks storage for uniqueness.

    Pros: Simple, unpredictable, short
    Cons: Collision risk grows as the id space fills up

    The retry budget is fixed: with short ids the space can saturate, and
    failing with AllocationExhausted beats looping forever.
    """

    MAX_ATTEMPTS = 5

    def __init__(self, storage: StorageStrategy, length: int = 3):
        if length < 1:
            raise ValueError(f"Identifier length must be at least 1, got {length}")
        self.storage = storage
        self.length = length
        self.characters = ALPHABET

    async def allocate(self, length: Optional[int] = None) -> str:
        """
        Return an identifier not currently present in storage.

        Args:
            length: Identifier length, defaults to the configured one

        Raises:
            AllocationExhausted: if every attempt collided
        """
        for attempt in range(self.MAX_ATTEMPTS):
            identifier = self._generate_random_string(length or self.length)
            if not await self.storage.exists(identifier):
                return identifier

        raise AllocationExhausted(self.MAX_ATTEMPTS)

    def _generate_random_string(self, length: int) -> str:
        """Generate a random string of specified length"""
        return ''.join(secrets.choice(self.characters) for _ in range(length))

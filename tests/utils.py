"""Test utilities for URL shortener tests."""

import random
import string
from typing import List, Optional

from shortener.models.pair import ShortPair


def random_string(length: int = 10) -> str:
    """Generate a random alphanumeric string."""
    return ''.join(random.choice(string.ascii_letters + string.digits) for _ in range(length))


def random_url() -> str:
    """Generate a random URL for testing."""
    domain = f"{random_string(8)}.com"
    path = random_string(12)
    return f"https://{domain}/{path}"


async def create_test_pair(
    db,
    original_url: Optional[str] = None,
    alias: Optional[str] = None,
) -> ShortPair:
    """Create and persist a test ShortPair in the database."""
    pair = ShortPair(
        original_url=original_url or random_url(),
        alias=alias or random_string(6),
    )
    db.add(pair)
    await db.flush()
    await db.refresh(pair)
    return pair


class ScriptedRandom:
    """Random source returning a fixed sequence of characters.

    ``choice`` ignores the sequence it is given and hands out the next
    scripted character, so aliases can be predicted in tests.
    """

    def __init__(self, *aliases: str):
        self._chars: List[str] = list("".join(aliases))

    def choice(self, seq):
        return self._chars.pop(0)

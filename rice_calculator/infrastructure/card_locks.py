"""Per-card asyncio locks."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Tuple


class CardLockRegistry:
    """Serializes work on the same card id.

    Two webhooks for one card that arrive close together would otherwise both
    read the same stale score and both publish. Locks are created on demand
    and dropped once no coroutine holds or waits for them.
    """

    def __init__(self):
        self._locks: Dict[str, Tuple[asyncio.Lock, int]] = {}

    @asynccontextmanager
    async def hold(self, card_id: str) -> AsyncIterator[None]:
        lock, users = self._locks.get(card_id, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._locks[card_id] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            lock, users = self._locks[card_id]
            if users <= 1:
                del self._locks[card_id]
            else:
                self._locks[card_id] = (lock, users - 1)

    def __len__(self) -> int:
        return len(self._locks)

"""
AsyncQueueStore — asyncio facade over a blocking QueueStore.

Each call is executed in a thread-pool worker via asyncio.to_thread, so the
event loop never blocks on directory scans or file writes.

Usage
-----
    from dirqueue import AsyncQueueStore, QueueStore

    queue = AsyncQueueStore(QueueStore.open("/var/spool/outbox", mkpath=True))
    await queue.schedule(message)

    while (message := await queue.next()) is not None:
        await send(message)

Calls on one AsyncQueueStore are serialized with an asyncio.Lock: the
claimed-ID buffer inside QueueStore is not thread-safe. Consumers that want
parallelism should each hold their own handle, exactly as separate processes
would.
"""
from __future__ import annotations

import asyncio
import dataclasses
from email.message import EmailMessage, Message

from dirqueue.core.store import QueueStore


@dataclasses.dataclass
class AsyncQueueStore:
    """
    Awaitable wrapper around one QueueStore handle.

    Parameters
    ----------
    store : the blocking QueueStore to delegate to
    """

    store: QueueStore

    def __post_init__(self) -> None:
        self._lock: asyncio.Lock = asyncio.Lock()

    async def schedule(self, message: Message) -> str:
        """Persist a new message. Returns its ID."""
        async with self._lock:
            return await asyncio.to_thread(self.store.schedule, message)

    async def count(self) -> int:
        """Number of pending message files."""
        async with self._lock:
            return await asyncio.to_thread(self.store.count)

    async def next(self) -> EmailMessage | None:
        """Claim, load and remove the next message, or None if none is available."""
        async with self._lock:
            return await asyncio.to_thread(self.store.next)

    async def lock(self, message_id: str) -> bool:
        """Try to claim a single message by ID."""
        async with self._lock:
            return await asyncio.to_thread(self.store.lock, message_id)

import asyncio

import pytest
from conftest import make_message

from dirqueue.adapters.clock.manual import ManualClock
from dirqueue.core.aio import AsyncQueueStore
from dirqueue.core.store import QueueStore
from dirqueue.domain.errors import MessageValidationError
from dirqueue.domain.models import QueueConfig


@pytest.fixture
def aqueue(queue: QueueStore) -> AsyncQueueStore:
    return AsyncQueueStore(queue)


async def test_schedule_and_count(aqueue: AsyncQueueStore, message):
    message_id = await aqueue.schedule(message)
    assert message_id.endswith(".eml")
    assert await aqueue.count() == 1


async def test_schedule_rejects_non_message(aqueue: AsyncQueueStore):
    with pytest.raises(MessageValidationError):
        await aqueue.schedule("not a message")  # type: ignore[arg-type]


async def test_next_empty_returns_none(aqueue: AsyncQueueStore):
    assert await aqueue.next() is None


async def test_next_drains_queue(aqueue: AsyncQueueStore, message):
    for _ in range(3):
        await aqueue.schedule(message)
    results = [await aqueue.next() for _ in range(4)]
    assert all(r is not None for r in results[:3])
    assert results[3] is None
    assert await aqueue.count() == 0


async def test_lock_then_lock_again_fails(aqueue: AsyncQueueStore, message):
    message_id = await aqueue.schedule(message)
    assert await aqueue.lock(message_id) is True
    assert await aqueue.lock(message_id) is False


async def test_concurrent_next_calls_deliver_each_message_once(aqueue: AsyncQueueStore):
    for i in range(10):
        await aqueue.schedule(make_message(subject=f"m{i}"))
    results = await asyncio.gather(*(aqueue.next() for _ in range(12)))
    subjects = sorted(r["Subject"] for r in results if r is not None)
    assert subjects == sorted(f"m{i}" for i in range(10))


async def test_separate_handles_share_directory(tmp_path, clock: ManualClock):
    producer = AsyncQueueStore(QueueStore(QueueConfig(path=tmp_path), clock))
    consumer = AsyncQueueStore(QueueStore(QueueConfig(path=tmp_path), clock))
    await producer.schedule(make_message(subject="hand-off"))
    result = await consumer.next()
    assert result is not None
    assert result["Subject"] == "hand-off"
    assert await producer.count() == 0

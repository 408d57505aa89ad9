from email.message import EmailMessage

import pytest

from dirqueue.adapters.clock.manual import ManualClock
from dirqueue.core.store import QueueStore
from dirqueue.domain.models import QueueConfig


def make_message(subject: str = "Welcome", body: str = "Hello!\n") -> EmailMessage:
    message = EmailMessage()
    message["From"] = "noreply@example.com"
    message["To"] = "user@example.com"
    message["Subject"] = subject
    message.set_content(body)
    return message


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def queue(tmp_path, clock: ManualClock) -> QueueStore:
    return QueueStore(QueueConfig(path=tmp_path), clock)


@pytest.fixture
def message() -> EmailMessage:
    return make_message()

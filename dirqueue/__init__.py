"""
dirqueue — a directory of message files as a multi-consumer work queue.

Producers write each message as its own file. Consumers, possibly in many
independent processes, claim messages by stamping a lock header inside the
file; a claim older than `timeout` seconds is considered abandoned and can be
taken over by anyone. There is no daemon and no index: the directory listing
is the queue.

Quick start
-----------
    from email.message import EmailMessage
    from dirqueue import QueueStore

    queue = QueueStore.open("/var/spool/outbox", mkpath=True)

    message = EmailMessage()
    message["To"] = "user@example.com"
    message["Subject"] = "Welcome"
    message.set_content("Hello!")
    queue.schedule(message)

    # ... later, from any number of worker processes ...
    for message in queue.drain():
        sendmail(message.as_bytes())

Options
-------
  path       — queue directory (default ".")
  mkpath     — create the directory if missing (default False)
  ext        — message file extension (default "eml")
  prefix     — message filename prefix (default "msg")
  xlock      — lock header name (default "X-Lock")
  timeout    — seconds before a lock goes stale (default 3600)
  grab_count — messages claimed per directory scan in next() (default 50, 0 = all)

Architecture
------------
Follows the Ports & Adapters pattern:
  domain/   — value types and errors (QueueConfig, MessageName, DirQueueError)
  ports/    — Protocol interfaces (Clock)
  core/     — business logic (QueueStore, AsyncQueueStore, codec, naming)
  adapters/ — concrete clocks (SystemClock, ManualClock)
"""
from __future__ import annotations

import logging

from dirqueue.adapters.clock.manual import ManualClock
from dirqueue.adapters.clock.system import SystemClock
from dirqueue.core.aio import AsyncQueueStore
from dirqueue.core.store import QueueStore
from dirqueue.domain.errors import (
    ConfigError,
    DirQueueError,
    MessageNotFoundError,
    MessageValidationError,
    StorageError,
)
from dirqueue.domain.models import MessageName, QueueConfig
from dirqueue.ports.clock import Clock

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Domain models
    "MessageName",
    "QueueConfig",
    # Errors
    "DirQueueError",
    "ConfigError",
    "MessageNotFoundError",
    "MessageValidationError",
    "StorageError",
    # Port (for typing custom clocks)
    "Clock",
    # Queue API
    "AsyncQueueStore",
    "QueueStore",
    # Built-in clocks
    "ManualClock",
    "SystemClock",
]

"""
QueueStore — a directory of message files, claimed through an embedded lock header.

Every pending message is one file. There is no index and no broker: the
directory listing is the whole queue state. Consumers in different processes
coordinate only through the filesystem.

Claim protocol
--------------
lock(message_id):
  1. load the message
  2. if its X-Lock header is younger than `timeout` seconds → not claimed
  3. rename the file to "<id>~" and delete the "~" file
       - the rename fails if another consumer already moved or removed it,
         so of two consumers racing on the same file only the first renamer
         proceeds; the loser gets False and moves on
  4. stamp X-Lock with the current epoch second
  5. write the message back under the same name, via a temporary file and
     os.replace so no reader ever sees a half-written message

A consumer that crashes after step 5 leaves a locked file behind. Once the
lock is `timeout` seconds old, any consumer's next grab cycle reclaims it.
That is the only recovery path.

Batched dequeue
---------------
next() claims up to `grab_count` messages in one directory scan (a "grab
cycle") and buffers their IDs. Subsequent calls hand out buffered messages
without rescanning until the buffer is empty.

All methods block. Use AsyncQueueStore from asyncio code.
"""
from __future__ import annotations

import collections
import dataclasses
import logging
import os
from collections.abc import Iterator
from email.message import EmailMessage, Message
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from dirqueue.adapters.clock.system import SystemClock
from dirqueue.core import codec, naming
from dirqueue.domain.errors import (
    ConfigError,
    MessageNotFoundError,
    MessageValidationError,
    StorageError,
)
from dirqueue.domain.models import QueueConfig
from dirqueue.ports.clock import Clock

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class QueueStore:
    """
    Process-local handle over a queue directory.

    Parameters
    ----------
    config : validated QueueConfig (directory, naming, lock header, timeout)
    clock  : time source for lock stamps and message names (default SystemClock)

    The claimed-ID buffer is private to this handle. Other handles, in this
    process or another, never see it and scan the directory themselves.
    """

    config: QueueConfig
    clock: Clock = dataclasses.field(default_factory=SystemClock)

    _claimed: collections.deque[str] = dataclasses.field(
        default_factory=collections.deque, init=False, repr=False
    )

    def __post_init__(self) -> None:
        self._prepare_directory()
        self._pattern = naming.pending_pattern(self.config.prefix, self.config.ext)

    @classmethod
    def open(
        cls,
        path: str | Path = ".",
        *,
        clock: Clock | None = None,
        **options: Any,
    ) -> "QueueStore":
        """
        Build a QueueStore from keyword options.

        Accepts the QueueConfig fields (mkpath, ext, prefix, xlock, timeout,
        grab_count). Invalid options raise ConfigError.
        """
        try:
            config = QueueConfig(path=path, **options)
        except ValidationError as exc:
            raise ConfigError(f"invalid queue options: {exc}") from exc
        if clock is None:
            return cls(config)
        return cls(config, clock)

    @property
    def path(self) -> Path:
        return self.config.path

    @property
    def claimed(self) -> tuple[str, ...]:
        """IDs claimed by this handle and not yet handed out by next()."""
        return tuple(self._claimed)

    def set_grab_count(self, count: int) -> None:
        """Change how many messages the next grab cycle may claim (0 = all)."""
        try:
            self.config = self.config.with_grab_count(count)
        except ValidationError as exc:
            raise ConfigError(f"invalid grab_count {count!r}: {exc}") from exc

    # ------------------------------------------------------------------ #
    # Public queue operations                                             #
    # ------------------------------------------------------------------ #

    def schedule(self, message: Message) -> str:
        """Persist a new message. Returns its ID (the filename)."""
        if not isinstance(message, Message):
            raise MessageValidationError(
                f"message must be an email.message.Message, got {type(message).__name__}"
            )
        message_id = self.store(message)
        logger.debug("Scheduled %s in %s", message_id, self.path)
        return message_id

    def count(self) -> int:
        """Number of pending message files. Always a fresh directory scan."""
        return len(self.list_pending())

    def next(self) -> EmailMessage | None:
        """
        Claim, load and remove the next message. Returns None when none is available.

        Triggers a grab cycle only when the claimed buffer is empty. The
        returned message has its lock header cleared; its file is gone.
        """
        if not self._claimed:
            self._grab()

        while self._claimed:
            message_id = self._claimed.popleft()
            try:
                message = self.load(message_id)
            except MessageNotFoundError:
                # Lock expired before hand-off and another consumer took it.
                logger.warning("Claimed message %s vanished before hand-off", message_id)
                continue
            self.remove(message_id)
            self.unlock(message)
            return message
        return None

    def drain(self) -> Iterator[EmailMessage]:
        """Yield next() results until the queue has nothing claimable left."""
        while (message := self.next()) is not None:
            yield message

    # ------------------------------------------------------------------ #
    # Claim protocol                                                      #
    # ------------------------------------------------------------------ #

    def lock(self, message_id: str) -> bool:
        """
        Try to claim `message_id` for this consumer.

        Returns False if the message holds a lock younger than `timeout` or
        another consumer won the rename race. Load failures propagate.
        """
        message = self.load(message_id)
        now = int(self.clock.now())

        locked_at = self._lock_timestamp(message, message_id)
        if locked_at is not None and now - locked_at < self.config.timeout:
            logger.debug(
                "Message %s is locked (age %ds < %ds)",
                message_id,
                now - locked_at,
                self.config.timeout,
            )
            return False

        if not self._probe(message_id):
            return False

        codec.set_header(message, self.config.xlock, str(now))
        self.store(message, message_id)
        logger.debug("Locked message %s at %d", message_id, now)
        return True

    def unlock(self, message: Message) -> None:
        """Clear the lock header on the in-memory message. Does not touch the file."""
        codec.set_header(message, self.config.xlock, None)

    def _lock_timestamp(self, message: Message, message_id: str) -> int | None:
        value = codec.get_header(message, self.config.xlock)
        if value is None:
            return None
        try:
            return int(float(value.strip()))
        except (ValueError, OverflowError):
            logger.warning(
                "Ignoring unparsable %s header %r on %s", self.config.xlock, value, message_id
            )
            return None

    def _probe(self, message_id: str) -> bool:
        """Rename-then-delete existence gate. Only the first renamer gets True."""
        source = self._file(message_id)
        target = source.with_name(source.name + naming.PROBE_SUFFIX)
        try:
            os.rename(source, target)
        except OSError as exc:
            logger.debug("Lost claim race on %s: %s", message_id, exc)
            return False
        target.unlink(missing_ok=True)
        return True

    def _grab(self) -> None:
        """Scan the directory and claim up to grab_count messages into the buffer."""
        limit = self.config.grab_count
        pending = self.list_pending()
        claimed: list[str] = []
        for message_id in pending:
            try:
                if self.lock(message_id):
                    claimed.append(message_id)
            except (MessageNotFoundError, StorageError) as exc:
                logger.debug("Skipping %s during grab: %s", message_id, exc)
            if limit > 0 and len(claimed) >= limit:
                break
        self._claimed = collections.deque(claimed)
        logger.info(
            "Grab cycle in %s claimed %d of %d pending messages",
            self.path,
            len(claimed),
            len(pending),
        )

    # ------------------------------------------------------------------ #
    # Directory I/O                                                       #
    # ------------------------------------------------------------------ #

    def unique_name(self) -> str:
        """A fresh message ID that does not yet exist in the directory."""
        return naming.unique_name(
            self.path,
            self.config.prefix,
            self.config.ext,
            created=int(self.clock.now()),
        )

    def list_pending(self) -> list[str]:
        """IDs of all message files in the directory, in lexicographic order."""
        try:
            with os.scandir(self.path) as entries:
                names = [
                    entry.name
                    for entry in entries
                    if self._pattern.match(entry.name) and entry.is_file()
                ]
        except OSError as exc:
            raise StorageError(f"Listing {self.path} failed", exc) from exc
        return sorted(names)

    def store(self, message: Message, name: str | None = None) -> str:
        """
        Write `message` to the directory and return its ID.

        The content is written to a private temporary file first, so readers
        only ever see a complete message. With `name`, the temporary file
        replaces the existing one atomically; otherwise it is hard-linked
        under the first free unique name, which cannot clobber a message
        another handle published in the same second.
        """
        filepath = None if name is None else self._file(name)
        content = codec.encode(message)
        temp = self.path / naming.temp_name(self.config.prefix)
        try:
            with open(temp, "xb") as fh:
                fh.write(content)
            if filepath is None:
                name = self._publish(temp)
            else:
                os.replace(temp, filepath)
        except OSError as exc:
            target = filepath or f"new message in {self.path}"
            raise StorageError(f"Writing {target} failed", exc) from exc
        finally:
            temp.unlink(missing_ok=True)
        return name

    def _publish(self, temp: Path) -> str:
        """Link `temp` under the first unique name nobody else has taken."""
        candidates = naming.candidate_names(
            self.path,
            self.config.prefix,
            self.config.ext,
            created=int(self.clock.now()),
        )
        while True:
            candidate = next(candidates)
            try:
                os.link(temp, self._file(candidate))
            except FileExistsError:
                logger.debug("Name %s taken concurrently, trying the next one", candidate)
                continue
            return candidate

    def load(self, message_id: str) -> EmailMessage:
        """Read and parse one message. Raises MessageNotFoundError if absent."""
        filepath = self._file(message_id)
        try:
            with open(filepath, "rb") as fh:
                content = fh.read()
        except FileNotFoundError as exc:
            raise MessageNotFoundError(message_id) from exc
        except OSError as exc:
            raise StorageError(f"Reading {filepath} failed", exc) from exc
        return codec.decode(content)

    def remove(self, *message_ids: str) -> None:
        """Delete message files. IDs that are already gone are ignored."""
        for message_id in message_ids:
            filepath = self._file(message_id)
            try:
                filepath.unlink(missing_ok=True)
            except OSError as exc:
                raise StorageError(f"Removing {filepath} failed", exc) from exc

    def _file(self, message_id: str) -> Path:
        if not message_id or os.sep in message_id or message_id in (".", ".."):
            raise MessageValidationError(f"Invalid message id {message_id!r}")
        return self.path / message_id

    def _prepare_directory(self) -> None:
        path = self.path
        if self.config.mkpath and not path.is_dir():
            try:
                path.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise ConfigError(f"{path}: {exc}") from exc
        if not path.is_dir():
            raise ConfigError(f"{path}: no such directory")
        if not os.access(path, os.W_OK):
            raise ConfigError(f"{path}: write access denied")

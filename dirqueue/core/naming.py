"""
Naming — message IDs and the pattern that recognises them.

A message ID is the filename of a pending message:

    <prefix>-<epochSeconds>-<pid>-<sequence>.<ext>

The sequence index starts at 0 and is bumped until the candidate does not
exist, so one process scheduling many messages within the same second still
gets distinct names. A candidate is only a proposal: QueueStore publishes a
new message with os.link, which fails if the name was taken in the meantime,
and then moves on to the next candidate. Because names sort lexicographically,
the directory listing is roughly chronological for a single producer.
"""
from __future__ import annotations

import os
import re
import uuid
from collections.abc import Iterator
from pathlib import Path

from dirqueue.domain.models import MessageName

PROBE_SUFFIX = "~"


def pending_pattern(prefix: str, ext: str) -> re.Pattern[str]:
    """Regex matching filenames that belong to the queue: ``<prefix>...<ext>``."""
    return re.compile(rf"^{re.escape(prefix)}.+\.{re.escape(ext)}$")


def candidate_names(
    directory: Path,
    prefix: str,
    ext: str,
    created: int,
    pid: int | None = None,
) -> Iterator[str]:
    """`prefix-created-pid-N.ext` for N = 0, 1, … skipping names present in `directory`."""
    name = MessageName(
        prefix=prefix,
        created=created,
        pid=os.getpid() if pid is None else pid,
        ext=ext,
    )
    sequence = 0
    while True:
        candidate = name.with_sequence(sequence).render()
        if not (directory / candidate).exists():
            yield candidate
        sequence += 1


def unique_name(
    directory: Path,
    prefix: str,
    ext: str,
    created: int,
    pid: int | None = None,
) -> str:
    """First `prefix-created-pid-N.ext` (N = 0, 1, …) not present in `directory`."""
    return next(candidate_names(directory, prefix, ext, created, pid))


def temp_name(prefix: str) -> str:
    """
    A private scratch filename for writing a message before it is published.

    Starts with a dot and ends with PROBE_SUFFIX, so pending_pattern never
    matches it whatever the prefix and extension are.
    """
    return f".{prefix}-{os.getpid()}-{uuid.uuid4().hex}{PROBE_SUFFIX}"

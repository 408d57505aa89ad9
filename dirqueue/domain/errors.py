"""
Exception hierarchy for dirqueue.

DirQueueError
├── ConfigError             — queue directory missing, unwritable, or bad options
├── MessageNotFoundError    — message file not present in the queue directory
├── MessageValidationError  — not a message, or not a usable message id
└── StorageError            — underlying I/O failure (wraps original exception)
"""

from __future__ import annotations


class DirQueueError(Exception):
    """Base class for all dirqueue exceptions."""


class ConfigError(DirQueueError):
    """
    Raised when a QueueStore cannot be constructed.

    Fatal: the directory is absent (and could not be created), is not a
    directory, is not writable, or the options failed validation.
    """


class MessageNotFoundError(DirQueueError):
    """Raised when a message file is not present in the queue directory."""

    def __init__(self, message_id: str) -> None:
        self.message_id = message_id
        super().__init__(f"Message {message_id!r} not found in queue directory")


class MessageValidationError(DirQueueError):
    """
    Raised when schedule() is given a payload that is not an email message,
    or when a message id is empty or would point outside the queue directory.
    """


class StorageError(DirQueueError):
    """
    Wraps an underlying I/O failure from the queue directory.

    Attributes
    ----------
    cause : Exception
        The original exception raised by the filesystem call.
    """

    def __init__(self, message: str, cause: Exception) -> None:
        self.cause = cause
        super().__init__(f"{message}: {cause}")

"""
Codec — serialize and deserialize queued messages using the stdlib email package.

A queued message is an RFC 2822 document: header fields, a blank line, a body.
The queue never interprets the payload; it only reads and rewrites a single
header (the lock marker, X-Lock by default).

Wire format (produced by EmailMessage.as_bytes):
-----------------------------------------------
    To: user@example.com
    Subject: Welcome
    X-Lock: 1700000000          <-- present only while a consumer holds it

    Hello!
"""
from __future__ import annotations

from email import message_from_bytes, policy
from email.message import EmailMessage, Message

POLICY = policy.default


def encode(message: Message) -> bytes:
    """Serialize a message to bytes."""
    return message.as_bytes(policy=POLICY)


def decode(data: bytes) -> EmailMessage:
    """Parse bytes into an EmailMessage."""
    return message_from_bytes(data, policy=POLICY)


def get_header(message: Message, name: str) -> str | None:
    """Return the value of header `name` as a plain str, or None if absent."""
    value = message.get(name)
    if value is None:
        return None
    return str(value)


def set_header(message: Message, name: str, value: str | None) -> None:
    """
    Replace header `name` with `value`, in place.

    Passing None removes every occurrence of the header.
    """
    del message[name]
    if value is not None:
        message[name] = value

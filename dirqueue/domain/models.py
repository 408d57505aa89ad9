"""
Domain models for dirqueue — backed by Pydantic v2.

Pydantic handles:
  - option validation and type coercion (str → Path, "3600" → 3600)
  - normalisation of the file extension (".eml" → "eml")
  - rejecting names that would escape the queue directory

All models are frozen (immutable). Runtime adjustments return new instances,
re-validated, following a functional-update style.
"""

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

# RFC 5322 field-name: printable US-ASCII except colon.
_HEADER_NAME = re.compile(r"^[\x21-\x39\x3b-\x7e]+$")


class QueueConfig(BaseModel):
    """
    Construction-time options for a QueueStore.

    path       — directory holding one file per pending message
    mkpath     — create `path` (and parents) when it does not exist
    ext        — file extension for message files, without the dot
    prefix     — filename prefix for message files
    xlock      — name of the header that carries the lock timestamp
    timeout    — seconds after which a lock is stale and may be reclaimed
    grab_count — messages claimed per grab cycle in next(); 0 = all
    """

    model_config = ConfigDict(frozen=True)

    path: Path = Path(".")
    mkpath: bool = False
    ext: str = "eml"
    prefix: str = "msg"
    xlock: str = "X-Lock"
    timeout: int = Field(default=3600, gt=0)
    grab_count: int = Field(default=50, ge=0)

    @field_validator("ext", mode="before")
    @classmethod
    def _strip_dot(cls, v: object) -> object:
        """Accept ".eml" as well as "eml"."""
        if isinstance(v, str):
            return v.lstrip(".")
        return v

    @field_validator("ext", "prefix")
    @classmethod
    def _plain_component(cls, v: str) -> str:
        if not v:
            raise ValueError("must not be empty")
        if "/" in v or "\0" in v:
            raise ValueError(f"must not contain a path separator, got {v!r}")
        return v

    @field_validator("xlock")
    @classmethod
    def _header_name(cls, v: str) -> str:
        if not _HEADER_NAME.match(v):
            raise ValueError(f"not a valid header field name: {v!r}")
        return v

    def with_grab_count(self, count: int) -> "QueueConfig":
        """Return a new, re-validated config with an updated grab_count."""
        return self.model_validate(self.model_dump() | {"grab_count": count})


class MessageName(BaseModel):
    """
    The components of a message ID, i.e. an on-disk filename.

    Rendered as ``<prefix>-<created>-<pid>-<sequence>.<ext>``.
    """

    model_config = ConfigDict(frozen=True)

    prefix: str
    created: int
    pid: int
    sequence: int = Field(default=0, ge=0)
    ext: str

    def render(self) -> str:
        return f"{self.prefix}-{self.created}-{self.pid}-{self.sequence}.{self.ext}"

    def with_sequence(self, sequence: int) -> "MessageName":
        """Return a new MessageName with an updated sequence index."""
        return self.model_copy(update={"sequence": sequence})

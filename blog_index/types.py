from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Post:
    """Metadata for one blog entry shown on the front page."""

    title: str
    url: str
    date: date
    excerpt: Optional[str] = None
    external_code_ref: Optional[str] = None
    body: str = field(default="", repr=False, compare=False)


class MalformedPostError(ValueError):
    """A post record is missing a required field or cannot be read."""

    def __init__(self, entry: str, reason: str) -> None:
        super().__init__(f"{entry}: {reason}")
        self.entry = entry
        self.reason = reason

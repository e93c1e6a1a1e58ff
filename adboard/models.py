"""Domain objects: ads, users and the filter used to list ads."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Ad:
    """A classified ad written by a user."""

    id: int
    title: str
    text: str
    author_id: int
    published: bool = False
    deleted: bool = False
    date_created: datetime = field(default_factory=datetime.now)
    date_updated: datetime = field(default_factory=datetime.now)


@dataclass
class User:
    """A user who can author ads."""

    id: int
    name: str
    deleted: bool = False


@dataclass(frozen=True)
class AdFilter:
    """Criteria for listing ads.

    By default only published ads are listed; an ``auth`` of -1 means any
    author and an empty ``title`` means any title.
    """

    pub: bool = True
    auth: int = -1
    title: str = ""

    def matches(self, ad: Ad) -> bool:
        """Return True if the ad passes every criterion of this filter."""
        if self.pub and not ad.published:
            return False
        if self.auth != -1 and ad.author_id != self.auth:
            return False
        if self.title and ad.title != self.title:
            return False
        return True
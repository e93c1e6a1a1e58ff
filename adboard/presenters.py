"""JSON payloads returned by the REST interface."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from adboard.models import Ad, User

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ``YYYY-MM-DD HH:MM:SS``."""
    return value.strftime(TIMESTAMP_FORMAT)


def ad_response(ad: Ad) -> dict[str, Any]:
    """Public view of an ad."""
    return {
        "id": ad.id,
        "title": ad.title,
        "text": ad.text,
        "author_id": ad.author_id,
        "published": ad.published,
        "date_created": format_timestamp(ad.date_created),
        "date_updated": format_timestamp(ad.date_updated),
    }


def ad_success_response(ad: Ad) -> dict[str, Any]:
    """Envelope holding a single ad."""
    return {"data": ad_response(ad), "error": None}


def user_success_response(user: User) -> dict[str, Any]:
    """Envelope holding a single user."""
    return {"data": {"id": user.id, "name": user.name}, "error": None}


def ad_list_success_response(ads: Iterable[Ad]) -> dict[str, Any]:
    """Envelope holding a list of ads in the given order."""
    return {"data": [ad_response(ad) for ad in ads], "error": None}


def error_response(error: BaseException | str) -> dict[str, Any]:
    """Envelope carrying an error message and no data."""
    return {"data": None, "error": str(error)}
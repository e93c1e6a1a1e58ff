"""Message types and the remote-call service of the ad board."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from adboard.app import App
from adboard.models import Ad, AdFilter, User
from adboard.presenters import format_timestamp


@dataclass(frozen=True)
class CreateAdRequest:
    title: str = ""
    text: str = ""
    user_id: int = 0


@dataclass(frozen=True)
class ChangeAdStatusRequest:
    ad_id: int = 0
    user_id: int = 0
    published: bool = False


@dataclass(frozen=True)
class UpdateAdRequest:
    ad_id: int = 0
    user_id: int = 0
    title: str = ""
    text: str = ""


@dataclass(frozen=True)
class DeleteAdRequest:
    ad_id: int = 0
    author_id: int = 0


@dataclass(frozen=True)
class CreateUserRequest:
    name: str = ""


@dataclass(frozen=True)
class GetUserRequest:
    id: int = 0


@dataclass(frozen=True)
class DeleteUserRequest:
    id: int = 0


@dataclass(frozen=True)
class AdResponse:
    id: int = 0
    title: str = ""
    text: str = ""
    author_id: int = 0
    published: bool = False
    date_created: str = ""
    date_updated: str = ""


@dataclass(frozen=True)
class ListAdResponse:
    ads: list[AdResponse] = field(default_factory=list)


@dataclass(frozen=True)
class UserResponse:
    id: int = 0
    name: str = ""


def to_ad_response(ad: Ad) -> AdResponse:
    """Message form of an ad."""
    return AdResponse(
        id=ad.id,
        title=ad.title,
        text=ad.text,
        author_id=ad.author_id,
        published=ad.published,
        date_created=format_timestamp(ad.date_created),
        date_updated=format_timestamp(ad.date_updated),
    )


def to_list_ad_response(ads: Iterable[Ad]) -> ListAdResponse:
    """Message form of a list of ads, in the given order."""
    return ListAdResponse(ads=[to_ad_response(ad) for ad in ads])


def to_user_response(user: User) -> UserResponse:
    """Message form of a user."""
    return UserResponse(id=user.id, name=user.name)


class AdService:
    """Remote-call endpoints; application errors propagate to the caller."""

    def __init__(self, application: App) -> None:
        self._app = application

    def create_ad(self, request: CreateAdRequest) -> AdResponse:
        return to_ad_response(
            self._app.create_ad(request.title, request.text, request.user_id)
        )

    def change_ad_status(self, request: ChangeAdStatusRequest) -> AdResponse:
        return to_ad_response(
            self._app.change_ad_status(request.ad_id, request.user_id, request.published)
        )

    def update_ad(self, request: UpdateAdRequest) -> AdResponse:
        return to_ad_response(
            self._app.update_ad(request.ad_id, request.user_id, request.title, request.text)
        )

    def list_ads(self) -> ListAdResponse:
        """List published ads of every author."""
        return to_list_ad_response(self._app.get_list(AdFilter(pub=True, auth=-1, title="")))

    def create_user(self, request: CreateUserRequest) -> UserResponse:
        return to_user_response(self._app.create_user(request.name))

    def get_user(self, request: GetUserRequest) -> UserResponse:
        return to_user_response(self._app.get_user(request.id))

    def delete_user(self, request: DeleteUserRequest) -> None:
        self._app.delete_user(request.id)

    def delete_ad(self, request: DeleteAdRequest) -> None:
        self._app.delete_ad(request.ad_id, request.author_id)
"""Application layer that exposes ad and user operations."""

from __future__ import annotations

from typing import Protocol

from adboard.models import Ad, AdFilter, User


class _Repository(Protocol):
    def create(self, title: str, text: str, user_id: int) -> Ad: ...

    def update_published(self, ad_id: int, user_id: int, published: bool) -> Ad: ...

    def update_text_and_title(self, ad_id: int, user_id: int, title: str, text: str) -> Ad: ...

    def get_list(self, ad_filter: AdFilter) -> list[Ad]: ...

    def get_by_id(self, ad_id: int) -> Ad: ...

    def delete_ad(self, ad_id: int, user_id: int) -> None: ...

    def create_user(self, name: str) -> User: ...

    def get_user(self, user_id: int) -> User: ...

    def delete_user(self, user_id: int) -> None: ...


class App:
    """Use cases of the ad board, backed by a repository."""

    def __init__(self, repository: _Repository) -> None:
        self._repository = repository

    def create_ad(self, title: str, text: str, user_id: int) -> Ad:
        return self._repository.create(title, text, user_id)

    def change_ad_status(self, ad_id: int, user_id: int, published: bool) -> Ad:
        return self._repository.update_published(ad_id, user_id, published)

    def update_ad(self, ad_id: int, user_id: int, title: str, text: str) -> Ad:
        return self._repository.update_text_and_title(ad_id, user_id, title, text)

    def get_list(self, ad_filter: AdFilter) -> list[Ad]:
        return self._repository.get_list(ad_filter)

    def get_by_id(self, ad_id: int) -> Ad:
        return self._repository.get_by_id(ad_id)

    def delete_ad(self, ad_id: int, user_id: int) -> None:
        self._repository.delete_ad(ad_id, user_id)

    def create_user(self, name: str) -> User:
        return self._repository.create_user(name)

    def get_user(self, user_id: int) -> User:
        return self._repository.get_user(user_id)

    def delete_user(self, user_id: int) -> None:
        self._repository.delete_user(user_id)
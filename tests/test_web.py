import pytest

from adboard.app import App
from adboard.repository import (
    MemoryRepository,
    NotAuthorError,
    NotCreatedError,
    RepositoryError,
    ValidationError,
    WasDeletedError,
)
from adboard.web import create_app, status_for_error


class BadRequest(Exception):
    pass


class Forbidden(Exception):
    pass


def _result(response):
    if response.status_code == 400:
        raise BadRequest(response.get_json())
    if response.status_code == 403:
        raise Forbidden(response.get_json())
    assert response.status_code == 200, response.status_code
    return response.get_json()


@pytest.fixture
def client():
    return create_app(App(MemoryRepository())).test_client()


def create_ad(client, user_id, title, text):
    return _result(client.post(
        "/api/v1/ads", json={"user_id": user_id, "title": title, "text": text}
    ))


def change_ad_status(client, user_id, ad_id, published):
    return _result(client.put(
        f"/api/v1/ads/{ad_id}/status", json={"user_id": user_id, "published": published}
    ))


def update_ad(client, user_id, ad_id, title, text):
    return _result(client.put(
        f"/api/v1/ads/{ad_id}", json={"user_id": user_id, "title": title, "text": text}
    ))


def list_ads(client, query=""):
    return _result(client.get(f"/api/v1/ads{query}"))


def test_create_ad(client):
    response = create_ad(client, 123, "hello", "world")
    assert response["data"]["id"] == 0
    assert response["data"]["title"] == "hello"
    assert response["data"]["text"] == "world"
    assert response["data"]["author_id"] == 123
    assert response["data"]["published"] is False
    assert response["error"] is None


def test_change_ad_status(client):
    response = create_ad(client, 123, "hello", "world")
    response = change_ad_status(client, 123, response["data"]["id"], True)
    assert response["data"]["published"] is True
    response = change_ad_status(client, 123, response["data"]["id"], False)
    assert response["data"]["published"] is False
    response = change_ad_status(client, 123, response["data"]["id"], False)
    assert response["data"]["published"] is False


def test_update_ad(client):
    response = create_ad(client, 123, "hello", "world")
    response = update_ad(client, 123, response["data"]["id"], "привет", "мир")
    assert response["data"]["title"] == "привет"
    assert response["data"]["text"] == "мир"


def test_list_ads(client):
    response = create_ad(client, 123, "hello", "world")
    published = change_ad_status(client, 123, response["data"]["id"], True)
    create_ad(client, 123, "best cat", "not for sale")

    ads = list_ads(client)
    assert len(ads["data"]) == 1
    assert ads["data"][0]["id"] == published["data"]["id"]
    assert ads["data"][0]["title"] == published["data"]["title"]
    assert ads["data"][0]["text"] == published["data"]["text"]
    assert ads["data"][0]["author_id"] == published["data"]["author_id"]
    assert ads["data"][0]["published"] is True


def test_change_status_ad_of_another_user(client):
    response = create_ad(client, 123, "hello", "world")
    with pytest.raises(Forbidden):
        change_ad_status(client, 100, response["data"]["id"], True)


def test_update_ad_of_another_user(client):
    response = create_ad(client, 123, "hello", "world")
    with pytest.raises(Forbidden):
        update_ad(client, 100, response["data"]["id"], "title", "text")


def test_create_ad_ids(client):
    assert create_ad(client, 123, "hello", "world")["data"]["id"] == 0
    assert create_ad(client, 123, "hello", "world")["data"]["id"] == 1
    assert create_ad(client, 123, "hello", "world")["data"]["id"] == 2


@pytest.mark.parametrize(
    "title, text",
    [("", "world"), ("a" * 101, "world"), ("title", ""), ("title", "a" * 501)],
)
def test_create_ad_validation(client, title, text):
    with pytest.raises(BadRequest):
        create_ad(client, 123, title, text)


@pytest.mark.parametrize(
    "title, text",
    [("", "new_world"), ("a" * 101, "world"), ("title", ""), ("title", "a" * 501)],
)
def test_update_ad_validation(client, title, text):
    response = create_ad(client, 123, "hello", "world")
    with pytest.raises(BadRequest):
        update_ad(client, 123, response["data"]["id"], title, text)


def test_list_filters(client):
    first = create_ad(client, 1, "bike", "fast")["data"]["id"]
    create_ad(client, 2, "car", "red")
    change_ad_status(client, 1, first, True)

    assert len(list_ads(client, "?pub=false")["data"]) == 2
    assert [ad["author_id"] for ad in list_ads(client, "?pub=false&auth=2")["data"]] == [2]
    assert [ad["title"] for ad in list_ads(client, "?pub=0&title=car")["data"]] == ["car"]
    assert list_ads(client, "?pub=nonsense&auth=x")["data"][0]["id"] == first


def test_get_ad(client):
    created = create_ad(client, 5, "hello", "world")
    fetched = _result(client.get(f"/api/v1/ads/{created['data']['id']}"))
    assert fetched == created


def test_get_missing_ad(client):
    response = client.get("/api/v1/ads/42")
    assert response.status_code == 400
    assert response.get_json() == {"data": None, "error": "not created"}


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/api/v1/ads/abc"),
        ("put", "/api/v1/ads/abc/status"),
        ("put", "/api/v1/ads/1x"),
        ("delete", "/api/v1/ads/abc/del"),
        ("get", "/api/v1/users/abc"),
        ("delete", "/api/v1/users/abc/del"),
    ],
)
def test_non_numeric_id(client, method, path):
    response = getattr(client, method)(path, json={})
    assert response.status_code == 400
    assert response.get_json()["error"] == "id should be a number"


def test_delete_ad(client):
    ad_id = create_ad(client, 123, "hello", "world")["data"]["id"]
    response = client.delete(f"/api/v1/ads/{ad_id}/del", json={"author_id": 100})
    assert response.status_code == 403
    response = client.delete(f"/api/v1/ads/{ad_id}/del", json={"author_id": 123})
    assert response.status_code == 200
    assert response.get_json() == {}
    assert client.get(f"/api/v1/ads/{ad_id}").status_code == 400


def test_bad_body(client):
    response = client.post("/api/v1/ads", json={"title": 5, "text": "x", "user_id": 1})
    assert response.status_code == 400
    assert response.get_json()["data"] is None
    response = client.post(
        "/api/v1/ads", data="{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400


def test_users(client):
    created = _result(client.post("/api/v1/users", json={"name": "Oleg"}))
    assert created == {"data": {"id": 0, "name": "Oleg"}, "error": None}
    assert _result(client.get("/api/v1/users/0")) == created
    assert client.delete("/api/v1/users/0/del").status_code == 200
    assert client.get("/api/v1/users/0").status_code == 400


class _Exploding:
    def get_by_id(self, ad_id):
        raise RuntimeError("boom")


def test_recovery_returns_500():
    server = create_app(_Exploding()).test_client()
    response = server.get("/api/v1/ads/1")
    assert response.status_code == 500
    assert response.data == b""


@pytest.mark.parametrize(
    "error, status",
    [
        (NotAuthorError(), 403),
        (ValidationError(), 400),
        (NotCreatedError(), 400),
        (WasDeletedError(), 400),
        (RepositoryError("broken"), 500),
    ],
)
def test_status_for_error(error, status):
    assert status_for_error(error) == status
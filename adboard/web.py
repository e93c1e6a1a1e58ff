"""REST interface of the ad board."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable, Mapping
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request

from adboard.app import App
from adboard.models import AdFilter
from adboard.presenters import (
    ad_list_success_response,
    ad_success_response,
    error_response,
    user_success_response,
)
from adboard.repository import (
    NotAuthorError,
    NotCreatedError,
    RepositoryError,
    ValidationError,
    WasDeletedError,
)

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1
_BOOLS = {
    "1": True, "t": True, "T": True, "TRUE": True, "true": True, "True": True,
    "0": False, "f": False, "F": False, "FALSE": False, "false": False, "False": False,
}
_BAD_ID = "id should be a number"

_Reply = tuple[Response, int]


class _BindError(ValueError):
    """The request body does not match the expected shape."""


def status_for_error(error: BaseException) -> int:
    """HTTP status code that reports the given application error."""
    if isinstance(error, NotAuthorError):
        return HTTPStatus.FORBIDDEN
    if isinstance(error, (ValidationError, NotCreatedError, WasDeletedError)):
        return HTTPStatus.BAD_REQUEST
    return HTTPStatus.INTERNAL_SERVER_ERROR


def _parse_int(text: str) -> int:
    if not _INT_PATTERN.fullmatch(text):
        raise ValueError(f"invalid integer {text!r}")
    value = int(text)
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"integer out of range {text!r}")
    return value


def _parse_bool(text: str) -> bool:
    try:
        return _BOOLS[text]
    except KeyError:
        raise ValueError(f"invalid boolean {text!r}") from None


def _from_json(fields: Mapping[str, Any]) -> dict[str, Any]:
    raw = request.get_data()
    if not raw:
        raise _BindError("EOF")
    try:
        document = json.loads(raw)
    except (ValueError, UnicodeDecodeError) as exc:
        raise _BindError(f"invalid JSON: {exc}") from None
    if not isinstance(document, dict):
        raise _BindError("request body must be a JSON object")
    result = dict(fields)
    for name, default in fields.items():
        value = document.get(name)
        if value is None:
            continue
        if type(value) is not type(default):
            raise _BindError(f"field {name!r} must be of type {type(default).__name__}")
        if isinstance(value, int) and not isinstance(value, bool):
            if not _INT_MIN <= value <= _INT_MAX:
                raise _BindError(f"field {name!r} is out of range")
        result[name] = value
    return result


def _from_form(fields: Mapping[str, Any]) -> dict[str, Any]:
    result = dict(fields)
    for name, default in fields.items():
        raw = request.values.get(name)
        if raw is None or raw == "":
            continue
        try:
            if isinstance(default, bool):
                result[name] = _parse_bool(raw)
            elif isinstance(default, int):
                result[name] = _parse_int(raw)
            else:
                result[name] = raw
        except ValueError as exc:
            raise _BindError(f"field {name!r}: {exc}") from None
    return result


def _bind(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Read the request body; each field's default fixes its type."""
    if request.is_json:
        return _from_json(fields)
    return _from_form(fields)


def _reply(payload: Mapping[str, Any], status: int = HTTPStatus.OK) -> _Reply:
    return jsonify(payload), int(status)


def _run(action: Callable[[], Mapping[str, Any]]) -> _Reply:
    try:
        return _reply(action())
    except RepositoryError as exc:
        return _reply(error_response(exc), status_for_error(exc))


def _create_ad(application: App) -> _Reply:
    try:
        body = _bind({"title": "", "text": "", "user_id": 0})
    except _BindError as exc:
        return _reply(error_response(exc), HTTPStatus.BAD_REQUEST)
    return _run(lambda: ad_success_response(
        application.create_ad(body["title"], body["text"], body["user_id"])
    ))


def _change_ad_status(application: App, raw_id: str) -> _Reply:
    try:
        ad_id = _parse_int(raw_id)
    except ValueError:
        return _reply(error_response(_BAD_ID), HTTPStatus.BAD_REQUEST)
    try:
        body = _bind({"published": False, "user_id": 0})
    except _BindError as exc:
        return _reply(error_response(exc), HTTPStatus.BAD_REQUEST)
    return _run(lambda: ad_success_response(
        application.change_ad_status(ad_id, body["user_id"], body["published"])
    ))


def _update_ad(application: App, raw_id: str) -> _Reply:
    try:
        ad_id = _parse_int(raw_id)
    except ValueError:
        return _reply(error_response(_BAD_ID), HTTPStatus.BAD_REQUEST)
    try:
        body = _bind({"title": "", "text": "", "user_id": 0})
    except _BindError as exc:
        return _reply(error_response(exc), HTTPStatus.BAD_REQUEST)
    return _run(lambda: ad_success_response(
        application.update_ad(ad_id, body["user_id"], body["title"], body["text"])
    ))


def _list_ads(application: App) -> _Reply:
    try:
        pub = _parse_bool(request.args.get("pub", ""))
    except ValueError:
        pub = True
    try:
        auth = _parse_int(request.args.get("auth", ""))
    except ValueError:
        auth = -1
    ad_filter = AdFilter(pub=pub, auth=auth, title=request.args.get("title", ""))
    return _run(lambda: ad_list_success_response(application.get_list(ad_filter)))


def _get_ad(application: App, raw_id: str) -> _Reply:
    try:
        ad_id = _parse_int(raw_id)
    except ValueError:
        return _reply(error_response(_BAD_ID), HTTPStatus.BAD_REQUEST)
    return _run(lambda: ad_success_response(application.get_by_id(ad_id)))


def _delete_ad(application: App, raw_id: str) -> _Reply:
    try:
        ad_id = _parse_int(raw_id)
    except ValueError:
        return _reply(error_response(_BAD_ID), HTTPStatus.BAD_REQUEST)
    try:
        body = _bind({"author_id": 0})
    except _BindError as exc:
        return _reply(error_response(exc), HTTPStatus.BAD_REQUEST)

    def action() -> dict[str, Any]:
        application.delete_ad(ad_id, body["author_id"])
        return {}

    return _run(action)


def _create_user(application: App) -> _Reply:
    try:
        body = _bind({"name": ""})
    except _BindError as exc:
        return _reply(error_response(exc), HTTPStatus.BAD_REQUEST)
    return _run(lambda: user_success_response(application.create_user(body["name"])))


def _get_user(application: App, raw_id: str) -> _Reply:
    try:
        user_id = _parse_int(raw_id)
    except ValueError:
        return _reply(error_response(_BAD_ID), HTTPStatus.BAD_REQUEST)
    return _run(lambda: user_success_response(application.get_user(user_id)))


def _delete_user(application: App, raw_id: str) -> _Reply:
    try:
        user_id = _parse_int(raw_id)
    except ValueError:
        return _reply(error_response(_BAD_ID), HTTPStatus.BAD_REQUEST)

    def action() -> dict[str, Any]:
        application.delete_user(user_id)
        return {}

    return _run(action)


_ROUTES: list[tuple[str, str, Callable[..., _Reply]]] = [
    ("POST", "/api/v1/ads", _create_ad),
    ("PUT", "/api/v1/ads/<raw_id>/status", _change_ad_status),
    ("PUT", "/api/v1/ads/<raw_id>", _update_ad),
    ("GET", "/api/v1/ads", _list_ads),
    ("GET", "/api/v1/ads/<raw_id>", _get_ad),
    ("DELETE", "/api/v1/ads/<raw_id>/del", _delete_ad),
    ("POST", "/api/v1/users", _create_user),
    ("GET", "/api/v1/users/<raw_id>", _get_user),
    ("DELETE", "/api/v1/users/<raw_id>/del", _delete_user),
]


def create_app(application: App, logger: logging.Logger | None = None) -> Flask:
    """Build the WSGI application serving the REST API of ``application``."""
    log = logger or logging.getLogger("adboard.web")
    server = Flask("adboard")

    def recovering(view: Callable[..., _Reply]) -> Callable[..., Any]:
        def handle(**kwargs: str) -> Any:
            try:
                return view(application, **kwargs)
            except Exception:
                log.exception("panic")
                return Response(status=HTTPStatus.INTERNAL_SERVER_ERROR)

        return handle

    for method, rule, view in _ROUTES:
        server.add_url_rule(
            rule,
            endpoint=f"{method} {rule}",
            view_func=recovering(view),
            methods=[method],
        )
    return server
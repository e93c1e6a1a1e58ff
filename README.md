# adboard

adboard is a small classified-ads service. Users post ads, publish or
unpublish them, edit them and delete them. It provides a Flask application
that serves a JSON HTTP API. It also has an RPC-style service layer with
request and response objects. Storage is either in memory or in an SQLite
database.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Using it as a library

```python
from adboard.app import App
from adboard.models import AdFilter
from adboard.repository import MemoryRepository

app = App(MemoryRepository())
ad = app.create_ad("hello", "world", 123)
app.change_ad_status(ad.id, 123, True)
published = app.get_list(AdFilter(pub=True, auth=-1, title=""))
```

### Storage

- `adboard.repository.MemoryRepository` keeps ads and users in memory. Ad
  and user ids start at 0.
- `adboard.repository.SqliteRepository(path=":memory:")` keeps them in an
  SQLite database and creates the tables when it opens. Ids start at 1. You
  can use it as a context manager, or call `close()` yourself.

Both storage classes are thread-safe. Both raise subclasses of
`RepositoryError`:

| Exception         | When                                                      |
|-------------------|-----------------------------------------------------------|
| `ValidationError` | title or text is empty or too long                        |
| `NotAuthorError`  | the user is not the author of the ad                      |
| `NotCreatedError` | the ad or user does not exist                             |

A title must be non-empty and shorter than 100 bytes in UTF-8. A text must be
non-empty and shorter than 500 bytes. `adboard.repository.validate(title, text)`
applies these rules.

`AdFilter` has three fields. `pub` (default `True`) lists only published ads.
`auth` (default `-1`, meaning any author) picks one author. `title` (default
empty, meaning any title) matches the title exactly. Ads are returned in id
order.

## HTTP API

`adboard.web.create_app(application, logger=None)` returns a Flask
application for an `App`:

```python
from adboard.app import App
from adboard.repository import MemoryRepository
from adboard.web import create_app

create_app(App(MemoryRepository())).run(port=8081)
```

Every response is a JSON object holding `data` and `error`. Timestamps are
written as `YYYY-MM-DD HH:MM:SS`.

| Method | Path                       | Body                                      |
|--------|----------------------------|-------------------------------------------|
| POST   | `/api/v1/ads`              | `{"title", "text", "user_id"}`            |
| PUT    | `/api/v1/ads/<id>/status`  | `{"published", "user_id"}`                |
| PUT    | `/api/v1/ads/<id>`         | `{"title", "text", "user_id"}`            |
| GET    | `/api/v1/ads`              | query: `pub`, `auth`, `title`             |
| GET    | `/api/v1/ads/<id>`         |                                           |
| DELETE | `/api/v1/ads/<id>/del`     | `{"author_id"}`                           |
| POST   | `/api/v1/users`            | `{"name"}`                                |
| GET    | `/api/v1/users/<id>`       |                                           |
| DELETE | `/api/v1/users/<id>/del`   |                                           |

Request bodies may be JSON or form data.

The status code follows the kind of error:

- 400 for a non-numeric id, a malformed body, a validation error, or an ad or
  user that does not exist.
- 403 when someone other than the author changes or deletes an ad.
- 500 for any other failure.

`status_for_error(error)` gives the code for an application error.

When listing ads, `pub` defaults to true. It accepts `1`, `t`, `true`, `0`,
`f`, `false` and their capitalised forms. `auth` defaults to any author.

## RPC service layer

`adboard.rpc.AdService(application)` offers the same operations as plain
method calls. The request types are `CreateAdRequest`, `ChangeAdStatusRequest`,
`UpdateAdRequest`, `DeleteAdRequest`, `CreateUserRequest`, `GetUserRequest` and
`DeleteUserRequest`. The response types are `AdResponse`, `ListAdResponse` and
`UserResponse`. `list_ads()` returns the published ads of every author.
Application errors are raised to the caller.

## Configuration

`adboard.config.load_config(env_file=".env")` reads a dotenv file. The file
must exist, or `FileNotFoundError` is raised. Environment variables override
values from the file.

| Variable    | Default      | Field                   |
|-------------|--------------|-------------------------|
| `GRPC_PORT` | `8080`       | `Config.grpc_port`      |
| `REST_PORT` | `8081`       | `Config.rest_port`      |
| `HOST`      | `localhost`  | `DatabaseConfig.host`   |
| `PORT`      | `5432`       | `DatabaseConfig.port`   |
| `DATABASE`  | `postgres`   | `DatabaseConfig.database` |
| `USERNAME`  | `mac`        | `DatabaseConfig.username` |
| `PASSWORD`  | `password`   | `DatabaseConfig.password` |
| `DB_PATH`   | `adboard.db` | `DatabaseConfig.path`   |

`DatabaseConfig.url` builds a connection URL from the network settings.

## What it does not do

adboard has no command-line program and no ready-made server process. To
serve the HTTP API, build it with `create_app` and run it under a WSGI server
of your choice. `AdService` has no network transport; it is called directly
from Python. Nothing in the package connects to a network database. The
`DatabaseConfig` network settings and the `url` property are provided, but
only `SqliteRepository` and `MemoryRepository` store data.
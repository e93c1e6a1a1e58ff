"""A classified-ads service: a Flask JSON API, an RPC-style service layer and in-memory or SQLite storage."""

__version__ = "0.1.0"
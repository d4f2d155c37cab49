"""WSGI generic adapter for the SimpleJSON endpoints.

Each request runs the async dispatcher to completion in a fresh event loop,
so synchronous servers (gunicorn sync workers, wsgiref) can host the
endpoints without an ASGI server.
"""

import asyncio
from collections.abc import Callable, Iterable
from http import HTTPStatus
from typing import Any

from grafanasj.adapters.frameworks.http import handle_request
from grafanasj.core.config import SimpleJSONConfig
from grafanasj.core.dispatcher import SimpleJSONDispatcher

Environ = dict[str, Any]
StartResponse = Callable[[str, list[tuple[str, str]]], Any]
WSGIApp = Callable[[Environ, StartResponse], Iterable[bytes]]


def _status_line(status: int) -> str:
    try:
        return f"{status} {HTTPStatus(status).phrase}"
    except ValueError:
        return f"{status} Unknown"


def _read_body(environ: Environ) -> bytes:
    """Read the request body as declared by CONTENT_LENGTH."""
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0
    if length <= 0:
        return b""
    body: bytes = environ["wsgi.input"].read(length)
    return body


def create_wsgi_app(config: SimpleJSONConfig) -> WSGIApp:
    """Create a WSGI app serving the SimpleJSON datasource endpoints.

    Args:
        config: Wired capabilities and credentials.

    Returns:
        WSGI application callable.
    """
    dispatcher = SimpleJSONDispatcher(config)

    def app(environ: Environ, start_response: StartResponse) -> Iterable[bytes]:
        async def read_body() -> bytes:
            return _read_body(environ)

        response = asyncio.run(
            handle_request(
                dispatcher,
                environ.get("REQUEST_METHOD", "GET").upper(),
                environ.get("PATH_INFO") or "/",
                environ.get("HTTP_AUTHORIZATION"),
                read_body,
            )
        )
        start_response(_status_line(response.status), response.all_headers)
        return [response.body]

    return app

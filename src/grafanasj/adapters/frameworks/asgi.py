"""ASGI generic adapter for the SimpleJSON endpoints.

This adapter provides a framework-agnostic ASGI application that can be used
with any ASGI server (uvicorn, hypercorn, daphne) without requiring FastAPI
as a dependency.
"""

from collections.abc import Callable, Coroutine
from typing import Any

from grafanasj.adapters.frameworks.http import HTTPResponse, handle_request
from grafanasj.core.config import SimpleJSONConfig
from grafanasj.core.dispatcher import SimpleJSONDispatcher

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]


def _get_header(scope: Scope, header_name: str) -> str | None:
    """Return a request header from ASGI scope headers (case-insensitive).

    Args:
        scope: ASGI scope dictionary containing request metadata.
        header_name: Name of the header to search for.

    Returns:
        The header value, or None if the header is absent.
    """
    header_bytes = header_name.lower().encode()
    headers: list[tuple[bytes, bytes]] = scope.get("headers", [])
    for name, value in headers:
        if name.lower() == header_bytes:
            return value.decode("latin-1")
    return None


async def _read_body(receive: Receive) -> bytes:
    """Read the full request body from ``http.request`` messages."""
    chunks = []
    while True:
        message = await receive()
        if message["type"] != "http.request":
            break
        chunks.append(message.get("body", b""))
        if not message.get("more_body", False):
            break
    return b"".join(chunks)


async def _send_response(send: Send, response: HTTPResponse) -> None:
    """Send an HTTP response with headers and body.

    Args:
        send: ASGI send callable for writing response.
        response: The response to send, CORS headers are added.
    """
    headers = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in response.all_headers
    ]
    await send(
        {"type": "http.response.start", "status": response.status, "headers": headers}
    )
    await send({"type": "http.response.body", "body": response.body})


def create_asgi_app(config: SimpleJSONConfig) -> ASGIApp:
    """Create an ASGI app serving the SimpleJSON datasource endpoints.

    Endpoints: ``/``, ``/query``, ``/annotations``, ``/search``,
    ``/tag-keys`` and ``/tag-values``.

    Args:
        config: Wired capabilities and credentials.

    Returns:
        ASGI application callable.
    """
    dispatcher = SimpleJSONDispatcher(config)

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return

        response = await handle_request(
            dispatcher,
            scope["method"],
            scope["path"],
            _get_header(scope, "Authorization"),
            lambda: _read_body(receive),
        )
        await _send_response(send, response)

    return app

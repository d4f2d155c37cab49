"""Shared request handling for framework adapters.

This module holds the routing, CORS, basic-auth and error mapping rules
common to every adapter (ASGI, WSGI, FastAPI). Adapters only translate
between their framework's request/response objects and these helpers.
"""

import base64
import binascii
import hmac
import json
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from grafanasj.core.config import SimpleJSONConfig
from grafanasj.core.dispatcher import SimpleJSONDispatcher
from grafanasj.core.errors import SimpleJSONError, Unauthorized
from grafanasj.core.logs import log_exception, log_request

JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"

CORS_HEADERS: tuple[tuple[str, str], ...] = (
    ("Access-Control-Allow-Headers", "accept, content-type"),
    ("Access-Control-Allow-Methods", "POST"),
    ("Access-Control-Allow-Origin", "*"),
)

# Data endpoints and the dispatcher method serving each
ROUTES = {
    "/query": "handle_query",
    "/annotations": "handle_annotations",
    "/search": "handle_search",
    "/tag-keys": "handle_tag_keys",
    "/tag-values": "handle_tag_values",
}

ANNOTATIONS_ALLOW = "POST,OPTIONS"


@dataclass(frozen=True)
class HTTPResponse:
    """A framework-neutral response.

    Attributes:
        status: HTTP status code.
        body: Encoded response body.
        content_type: Content-Type header value.
        headers: Extra headers, CORS headers excluded.
    """

    status: int
    body: bytes
    content_type: str = TEXT_CONTENT_TYPE
    headers: tuple[tuple[str, str], ...] = ()

    @property
    def all_headers(self) -> list[tuple[str, str]]:
        """Content-Type, CORS and extra headers, in sending order."""
        return [("Content-Type", self.content_type), *CORS_HEADERS, *self.headers]


def text_response(status: int, message: str, **kwargs: Any) -> HTTPResponse:
    """Build a plain-text response; the body gets a trailing newline."""
    return HTTPResponse(status=status, body=f"{message}\n".encode(), **kwargs)


def json_response(payload: Any) -> HTTPResponse:
    """Build a 200 JSON response.

    Raises:
        ValueError: If the payload holds NaN or infinite floats.
    """
    body = json.dumps(payload, allow_nan=False, separators=(",", ":"))
    return HTTPResponse(status=200, body=body.encode(), content_type=JSON_CONTENT_TYPE)


def unauthorized_response(realm: str) -> HTTPResponse:
    """Build the 401 response carrying a basic-auth challenge."""
    return text_response(
        401,
        "401 Unauthorized",
        headers=(("WWW-Authenticate", f'Basic realm="{realm}"'),),
    )


def is_authorized(config: SimpleJSONConfig, authorization: str | None) -> bool:
    """Check an ``Authorization`` header against the configured credentials.

    Always True when no credentials are configured.
    """
    if config.basic_auth is None:
        return True
    if not authorization:
        return False

    scheme, _, encoded = authorization.partition(" ")
    if scheme.lower() != "basic" or not encoded:
        return False
    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return False

    username, sep, password = decoded.partition(":")
    if not sep:
        return False
    expected = config.basic_auth
    # Evaluate both comparisons so timing does not reveal which one failed
    user_ok = hmac.compare_digest(username.encode(), expected.username.encode())
    pass_ok = hmac.compare_digest(password.encode(), expected.password.encode())
    return user_ok and pass_ok


async def _dispatch(
    dispatcher: SimpleJSONDispatcher,
    method: str,
    path: str,
    authorization: str | None,
    read_body: Callable[[], Awaitable[bytes]],
) -> HTTPResponse:
    if path == "/":
        return HTTPResponse(status=200, body=b"OK")

    handler_name = ROUTES.get(path)
    if handler_name is None:
        return text_response(404, "404 page not found")

    if path == "/annotations" and method == "OPTIONS":
        return HTTPResponse(
            status=200,
            body=f"Allow: {ANNOTATIONS_ALLOW}".encode(),
            headers=(("Allow", ANNOTATIONS_ALLOW),),
        )

    handler = getattr(dispatcher, handler_name)
    try:
        if not is_authorized(dispatcher.config, authorization):
            raise Unauthorized("401 Unauthorized")
        body = await read_body()
        return json_response(await handler(body))
    except Unauthorized:
        return unauthorized_response(dispatcher.config.realm)
    except SimpleJSONError as e:
        return text_response(e.status_code, str(e))
    except Exception:
        log_exception(f"Error handling {path}", method=method, path=path)
        return text_response(500, "Internal Server Error")


async def handle_request(
    dispatcher: SimpleJSONDispatcher,
    method: str,
    path: str,
    authorization: str | None,
    read_body: Callable[[], Awaitable[bytes]],
) -> HTTPResponse:
    """Route one request to the dispatcher and map the outcome to a response.

    Args:
        dispatcher: Dispatcher built from the adapter's configuration.
        method: HTTP method, upper case.
        path: Request path relative to where the endpoints are mounted.
        authorization: Value of the ``Authorization`` header, if any.
        read_body: Coroutine function returning the request body. It is not
            called for unauthorized requests.

    Returns:
        The response to send, without CORS headers (see ``all_headers``).
    """
    start_time = time.perf_counter()
    response = await _dispatch(dispatcher, method, path, authorization, read_body)
    detail = ""
    if response.status >= 400:
        detail = response.body.decode(errors="replace").strip()
    log_request(method, path, response.status, time.perf_counter() - start_time, detail)
    return response

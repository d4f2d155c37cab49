"""FastAPI adapter for the SimpleJSON endpoints."""

from collections.abc import Awaitable, Callable

from fastapi import APIRouter, Request, Response

from grafanasj.adapters.frameworks.http import ROUTES, handle_request
from grafanasj.core.config import SimpleJSONConfig
from grafanasj.core.dispatcher import SimpleJSONDispatcher

# Every method reaches the shared handler, as with the plain ASGI and WSGI apps
_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_simplejson_router(config: SimpleJSONConfig) -> APIRouter:
    """Create a FastAPI router with the SimpleJSON datasource endpoints.

    Mount it at the URL configured as the datasource in Grafana:

        app.include_router(create_simplejson_router(config), prefix="/grafana")

    Args:
        config: Wired capabilities and credentials.

    Returns:
        APIRouter with ``/``, ``/query``, ``/annotations``, ``/search``,
        ``/tag-keys`` and ``/tag-values`` configured.
    """
    router = APIRouter()
    dispatcher = SimpleJSONDispatcher(config)

    def endpoint_for(path: str) -> Callable[[Request], Awaitable[Response]]:
        async def endpoint(request: Request) -> Response:
            result = await handle_request(
                dispatcher,
                request.method,
                path,
                request.headers.get("authorization"),
                request.body,
            )
            return Response(
                content=result.body,
                status_code=result.status,
                headers=dict(result.all_headers),
            )

        return endpoint

    router.add_api_route(
        "/", endpoint_for("/"), methods=_ALL_METHODS, include_in_schema=False
    )
    for path in ROUTES:
        router.add_api_route(path, endpoint_for(path), methods=_ALL_METHODS)

    return router

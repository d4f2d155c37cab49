"""HTTP framework adapters exposing the SimpleJSON endpoints.

The FastAPI adapter is not imported here so that FastAPI stays optional.
"""

from grafanasj.adapters.frameworks.asgi import create_asgi_app
from grafanasj.adapters.frameworks.wsgi import create_wsgi_app

__all__ = ["create_asgi_app", "create_wsgi_app"]

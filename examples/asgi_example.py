"""Example plain ASGI application serving a SimpleJSON datasource.

Run with:
    uvicorn examples.asgi_example:app

Then add a "SimpleJSON" datasource in Grafana with URL
``http://localhost:8000``.
"""

import logging

from examples.demo_data import build_demo_source
from grafanasj.adapters.frameworks.asgi import create_asgi_app
from grafanasj.core.config import BasicAuth, SimpleJSONConfig

logging.basicConfig(level=logging.DEBUG)

app = create_asgi_app(
    SimpleJSONConfig.from_source(build_demo_source(), basic_auth=BasicAuth.from_env())
)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

"""Example FastAPI application serving a SimpleJSON datasource.

Run with:
    uvicorn examples.fastapi_example:app --reload

Then add a "SimpleJSON" datasource in Grafana with URL
``http://localhost:8000/grafana``.

Endpoints (under /grafana):
    /             - Health check used by "Save & Test"
    /query        - Timeseries and table data
    /annotations  - Annotation records
    /search       - Metric names for the query editor
    /tag-keys     - Ad-hoc filter keys
    /tag-values   - Ad-hoc filter values

Set GRAFANASJ_USERNAME and GRAFANASJ_PASSWORD to require basic auth.
"""

import logging

from fastapi import FastAPI

from examples.demo_data import build_demo_source
from grafanasj.adapters.frameworks.fastapi import create_simplejson_router
from grafanasj.core.config import BasicAuth, SimpleJSONConfig

logging.basicConfig(level=logging.INFO)

config = SimpleJSONConfig.from_source(
    build_demo_source(), basic_auth=BasicAuth.from_env()
)

app = FastAPI(title="SimpleJSON Example")
app.include_router(create_simplejson_router(config), prefix="/grafana")


@app.get("/")
async def root() -> dict[str, str]:
    """Point visitors at the datasource URL."""
    return {"message": "Grafana datasource mounted at /grafana"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

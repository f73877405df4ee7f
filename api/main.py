import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from api.routes.analyze_mix import router as analyze_mix_router
from api.routes.chat import router as chat_router
from api.routes.projects import router as projects_router
from infrastructure.log_setup import configure_logging
from infrastructure.metrics import get_metrics_response


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    configure_logging()
    yield


app = FastAPI(title="Dirt Halo Studio Assistant", lifespan=lifespan)

# CORS: allow a browser front end on the local dev ports to call the API.
# localhost and 127.0.0.1 are different origins to a browser.
_DEFAULT_ORIGINS = (
    "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173"
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in os.getenv("CORS_ORIGINS", _DEFAULT_ORIGINS).split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat_router)
app.include_router(analyze_mix_router)
app.include_router(projects_router)


@app.get("/health")
def health() -> dict[str, str]:
    """Return a simple liveness check."""
    return {"status": "ok"}


@app.get("/metrics")
def metrics() -> Response:
    """Prometheus metrics endpoint.

    Returns metrics in Prometheus text exposition format.
    """
    body, content_type = get_metrics_response()
    return Response(content=body, media_type=content_type)

"""FastAPI app: SpaceAPI v14 document, text/html status, index page, admin publish routes, CORS.

Admin routes (space-open, space-close, space-keep-open) exist only when admin.enable is
true; with admin disabled they are never registered, so callers get 404 rather than 401.
"""

import html
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response

from spacebeacon import SOFTWARE, __version__
from spacebeacon.config.settings import SpaceConfig
from spacebeacon.core.clock import Clock, SystemClock
from spacebeacon.core.metrics import Metrics
from spacebeacon.engine.scheduler import ExpiryScheduler
from spacebeacon.engine.store import StatusStore
from spacebeacon.errors import Unauthorized
from spacebeacon.status_server.auth import API_KEY_HEADER, AuthGate, require_api_key

logger = logging.getLogger(__name__)

SPACEAPI_VERSION = "14"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST,GET",
    "Access-Control-Allow-Headers": API_KEY_HEADER,
}

_INDEX_TEMPLATE = """<html>
    <body>
        <center>
            <img src="{logo}" alt="{name}"></img>
            <div>{status}</div>
            <div><a href="https://spaceapi.io/">{software} v{version}</a></div>
        </center>
    </body>
</html>
"""


def render_index(config: SpaceConfig, is_open: bool) -> str:
    """Minimal index page: logo, space name, text status, software version."""
    return _INDEX_TEMPLATE.format(
        logo=html.escape(config.logo, quote=True),
        name=html.escape(config.space_name, quote=True),
        status=html.escape(config.status_display.text.pick(is_open)),
        software=SOFTWARE,
        version=__version__,
    )


def build_spaceapi_document(template: Dict[str, Any], is_open: bool, last_change: float) -> Dict[str, Any]:
    """Publish template plus api_compatibility and live state."""
    doc = dict(template)
    doc["api_compatibility"] = [SPACEAPI_VERSION]
    doc["state"] = {"open": is_open, "lastchange": int(last_change)}
    return doc


def _admin_router() -> APIRouter:
    router = APIRouter(prefix="/admin/publish", dependencies=[Depends(require_api_key)])

    @router.post("/space-open")
    def open_space(request: Request) -> Response:
        """Open the space until explicitly closed."""
        request.app.state.store.open()
        return Response(status_code=200)

    @router.post("/space-close")
    def close_space(request: Request) -> Response:
        """Close the space, whatever opened it."""
        request.app.state.store.close()
        return Response(status_code=200)

    @router.post("/space-keep-open")
    def keep_open(request: Request) -> Dict[str, int]:
        """Open (or renew) for keep_open_interval seconds from now; returns the deadline."""
        till = request.app.state.store.keep_open(request.app.state.clock.now())
        logger.debug("Space will be opened till %s", till)
        return {"open_till": int(till)}

    return router


def create_app(
    config: SpaceConfig,
    clock: Optional[Clock] = None,
    metrics: Optional[Metrics] = None,
) -> FastAPI:
    """Composition root: one StatusStore, one ExpiryScheduler, one AuthGate per app."""
    clock = clock or SystemClock()
    metrics = metrics or Metrics()
    store = StatusStore(keep_open_window=config.admin.keep_open_interval, clock=clock, metrics=metrics)
    scheduler = ExpiryScheduler(store, tick_interval=config.admin.tick_interval, clock=clock)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        scheduler.start()
        try:
            yield
        finally:
            await scheduler.stop()
            metrics.log_snapshot()

    app = FastAPI(title="SpaceBeacon", description="SpaceAPI status with keep-open timer", lifespan=lifespan)
    app.state.config = config
    app.state.clock = clock
    app.state.metrics = metrics
    app.state.store = store
    app.state.scheduler = scheduler

    # CORSMiddleware only answers OPTIONS carrying preflight headers; bare OPTIONS on any path must get 200
    @app.middleware("http")
    async def cors(request: Request, call_next):
        """Answer every OPTIONS as a preflight; stamp CORS headers on all responses."""
        if request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    @app.exception_handler(Unauthorized)
    async def unauthorized_handler(request: Request, exc: Unauthorized) -> JSONResponse:
        return JSONResponse(status_code=401, content={"detail": exc.reason})

    @app.get("/", response_class=HTMLResponse)
    def index() -> str:
        return render_index(config, store.is_open())

    @app.get("/spaceapi/v14")
    def get_status_v14() -> Dict[str, Any]:
        snap = store.snapshot()
        return build_spaceapi_document(config.publish, snap.is_open, snap.last_change)

    @app.get("/status/text", response_class=PlainTextResponse)
    def get_status_text() -> str:
        return config.status_display.text.pick(store.is_open())

    @app.get("/status/html", response_class=HTMLResponse)
    def get_status_html() -> str:
        return config.status_display.html.pick(store.is_open())

    if config.admin.enabled:
        app.state.auth_gate = AuthGate(config.admin.api_key, metrics=metrics)
        app.include_router(_admin_router())
        logger.info("Admin API enabled (keep_open_interval=%.0fs)", config.admin.keep_open_interval)
    else:
        logger.info("Admin API disabled; publish routes not registered")

    return app


def run_server(config: SpaceConfig, log_level: str = "info") -> None:
    """Start uvicorn on server.host:server.port."""
    import uvicorn

    app = create_app(config)
    host, port = config.server.host, config.server.port
    logger.info("Status server for %s on %s:%s", config.space_name, host, port)
    uvicorn.run(app, host=host, port=int(port), log_level=log_level, log_config=None)

"""HTTP layer: FastAPI app, CORS, admin auth gate."""

from spacebeacon.status_server.app import create_app, run_server
from spacebeacon.status_server.auth import AuthGate

__all__ = ["create_app", "run_server", "AuthGate"]

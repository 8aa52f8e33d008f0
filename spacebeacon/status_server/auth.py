"""Admin auth gate: X-API-Key header must equal the configured key."""

import logging
from typing import Optional

from fastapi import Header, Request

from spacebeacon.core.metrics import Metrics
from spacebeacon.errors import Unauthorized

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"


class AuthGate:
    """Single shared-secret check for mutating routes.

    Comparison is plain string equality; see DESIGN.md for the timing note.
    """

    def __init__(self, api_key: str, metrics: Optional[Metrics] = None):
        if not api_key:
            raise ValueError("api_key must be a non-empty string")
        self._api_key = api_key
        self._metrics = metrics

    def check(self, presented: Optional[str]) -> None:
        """Return silently when presented matches; raise Unauthorized otherwise."""
        if presented is not None and presented == self._api_key:
            return
        if self._metrics is not None:
            self._metrics.inc_unauthorized()
        logger.info("Rejected admin request: %s", "no api key" if presented is None else "wrong api key")
        raise Unauthorized()


def require_api_key(
    request: Request,
    x_api_key: Optional[str] = Header(None, alias=API_KEY_HEADER),
) -> None:
    """FastAPI dependency: run the app's AuthGate against the X-API-Key header."""
    gate: AuthGate = request.app.state.auth_gate
    gate.check(x_api_key)

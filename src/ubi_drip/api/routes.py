"""FastAPI routers for UBI Drip.

JSON API (:data:`router`):

- ``GET /api/config``                — current configuration
- ``POST /api/config``               — update the per-recipient rates
- ``GET /api/recipients``            — recipient list
- ``POST /api/recipients``           — add a recipient
- ``DELETE /api/recipients/{address}`` — remove a recipient
- ``GET /health``                    — liveness check

Dashboard (:data:`dashboard_router`):

- ``GET /`` — server-rendered admin page

Dependencies (attached to ``app.state`` by :func:`~ubi_drip.api.main.create_app`):

- :class:`~ubi_drip.model.service.ConfigurationService` — configuration reads
  and mutations, persisted best effort.
- :class:`~ubi_drip.dashboard.DashboardRenderer` — HTML rendering.

No endpoint authenticates its caller.  The dashboard's admin check runs in the
browser only.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, JSONResponse

from ubi_drip.api.models import (
    ConfigUpdateResponse,
    ErrorResponse,
    HealthResponse,
    RatesUpdate,
    RecipientCreate,
    RecipientsResponse,
)
from ubi_drip.dashboard.renderer import DashboardRenderer
from ubi_drip.model.configuration import Configuration, Recipient, RecipientError
from ubi_drip.model.service import ConfigurationService

logger = logging.getLogger(__name__)

router = APIRouter()
dashboard_router = APIRouter()


# ---------------------------------------------------------------------------
# Dependency accessor helpers
# ---------------------------------------------------------------------------


def _get_service(request: Request) -> ConfigurationService:
    """Extract the :class:`ConfigurationService` from application state."""
    return request.app.state.config_service  # type: ignore[no-any-return]


def _get_renderer(request: Request) -> DashboardRenderer:
    """Extract the :class:`DashboardRenderer` from application state."""
    return request.app.state.renderer  # type: ignore[no-any-return]


ServiceDep = Annotated[ConfigurationService, Depends(_get_service)]


# ---------------------------------------------------------------------------
# /api/config
# ---------------------------------------------------------------------------


@router.get(
    "/api/config",
    response_model=Configuration,
    summary="Read the distribution configuration",
    tags=["config"],
)
def get_config(service: ServiceDep) -> Configuration:
    """Return the rates and recipients, refreshed from the store first."""
    return service.snapshot()


@router.post(
    "/api/config",
    response_model=ConfigUpdateResponse,
    summary="Update the per-recipient rates",
    tags=["config"],
)
def post_config(body: RatesUpdate, service: ServiceDep) -> ConfigUpdateResponse:
    """Update the ETH and/or token rate.

    Fields that are omitted, empty, ``"0"`` or zero are ignored, so a rate
    cannot be set to zero through this endpoint.  The response is the same
    whether or not the change could be persisted.
    """
    result = service.update_rates(eth=body.eth_per_recipient, tokens=body.tokens_per_recipient)
    return ConfigUpdateResponse(config=result.config)


# ---------------------------------------------------------------------------
# /api/recipients
# ---------------------------------------------------------------------------


@router.get(
    "/api/recipients",
    response_model=list[Recipient],
    summary="List recipients",
    tags=["recipients"],
)
def get_recipients(service: ServiceDep) -> list[Recipient]:
    """Return the recipients in insertion order, refreshed from the store first."""
    return service.recipients()


@router.post(
    "/api/recipients",
    response_model=RecipientsResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Add a recipient",
    tags=["recipients"],
)
def post_recipient(
    body: RecipientCreate, service: ServiceDep
) -> RecipientsResponse | JSONResponse:
    """Append a recipient.

    Returns HTTP 400 ``{"error": "Invalid address"}`` for a missing or
    malformed address and ``{"error": "Recipient already exists"}`` when the
    address (compared case-insensitively) is already listed.
    """
    try:
        result = service.add_recipient(body.address, body.label)
    except RecipientError as exc:
        logger.info("Rejected recipient %r: %s", body.address, exc)
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error=exc.public_message).model_dump(),
        )
    return RecipientsResponse(recipients=result.config.recipients)


@router.delete(
    "/api/recipients/{address}",
    response_model=RecipientsResponse,
    summary="Remove a recipient",
    tags=["recipients"],
)
def delete_recipient(address: str, service: ServiceDep) -> RecipientsResponse:
    """Remove every recipient matching *address*, ignoring case.

    Always returns HTTP 200, including when no recipient matched.
    """
    result = service.remove_recipient(address)
    return RecipientsResponse(recipients=result.config.recipients)


# ---------------------------------------------------------------------------
# /health
# ---------------------------------------------------------------------------


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness check",
    tags=["health"],
)
def get_health() -> HealthResponse:
    """Always return ``{"status": "ok"}``.  The store is not probed."""
    return HealthResponse()


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


@dashboard_router.get("/", response_class=HTMLResponse, include_in_schema=False)
def get_dashboard(
    service: ServiceDep,
    renderer: Annotated[DashboardRenderer, Depends(_get_renderer)],
) -> HTMLResponse:
    """Render the admin dashboard for the current configuration."""
    return HTMLResponse(renderer.render(service.snapshot()))

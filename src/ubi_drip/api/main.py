"""FastAPI application factory for UBI Drip.

Exposes a :func:`create_app` factory function that instantiates the
:class:`fastapi.FastAPI` application, wires up the dependency-injected
components (:class:`~ubi_drip.model.service.ConfigurationService` and
:class:`~ubi_drip.dashboard.DashboardRenderer`), mounts the dashboard's
static assets, and registers the routers defined in :mod:`ubi_drip.api.routes`.

Usage::

    # Production startup (uvicorn)
    uvicorn ubi_drip.api.main:app --host 0.0.0.0 --port 3000

    # Testing: pass an isolated service
    from ubi_drip.api.main import create_app
    app = create_app(service=ConfigurationService(initial=Configuration()))

The production ``app`` object is created by calling :func:`create_app` with
defaults sourced from :mod:`ubi_drip.config`.  Components are attached to
``app.state`` so that route handlers can retrieve them via
``request.app.state``.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from ubi_drip.api.routes import dashboard_router, router
from ubi_drip.config import AppConfig, get_config
from ubi_drip.dashboard.renderer import DashboardRenderer
from ubi_drip.model.service import ConfigurationService
from ubi_drip.store import ConfigStore, build_store

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(
    settings: AppConfig | None = None,
    service: ConfigurationService | None = None,
    store: ConfigStore | None = None,
    renderer: DashboardRenderer | None = None,
) -> FastAPI:
    """Create and configure the UBI Drip FastAPI application.

    Parameters
    ----------
    settings:
        Application settings.  If ``None``, read from the environment via
        :func:`~ubi_drip.config.get_config`.
    service:
        Pre-built :class:`~ubi_drip.model.service.ConfigurationService`.  If
        ``None``, one is built over *store* starting from the default
        configuration.
    store:
        Configuration store for the default service.  If ``None``, chosen by
        :func:`~ubi_drip.store.build_store`.  Ignored when *service* is
        provided.
    renderer:
        Pre-built :class:`~ubi_drip.dashboard.DashboardRenderer`.  If
        ``None``, one is built from *settings*.

    Returns
    -------
    FastAPI
        A fully-configured application instance with all routes registered
        and dependencies attached to ``app.state``.
    """
    if settings is None:
        settings = get_config()

    app = FastAPI(
        title="UBI Drip",
        description=(
            "Configures the weekly ETH and $owockibot distribution "
            "to owockibot ecosystem contributors."
        ),
        version=_get_version(),
        docs_url="/docs",
        redoc_url="/redoc",
    )

    if service is None:
        if store is None:
            store = build_store(settings)
        service = ConfigurationService(store=store)
        logger.info("ConfigurationService initialised with %s store", store.name)

    if renderer is None:
        renderer = DashboardRenderer(settings)

    app.state.settings = settings
    app.state.config_service = service
    app.state.renderer = renderer

    app.mount(
        "/static",
        StaticFiles(packages=[("ubi_drip.dashboard", "static")]),
        name="static",
    )
    app.include_router(router)
    app.include_router(dashboard_router)

    return app


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _get_version() -> str:
    """Return the installed package version, or ``"unknown"`` when not installed."""
    import importlib.metadata  # local import keeps module-level imports clean

    try:
        return importlib.metadata.version("ubi-drip")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


# ---------------------------------------------------------------------------
# Production application instance
# ---------------------------------------------------------------------------

#: Module-level application object for production use with uvicorn:
#:
#:   uvicorn ubi_drip.api.main:app --host 0.0.0.0 --port 3000
app: FastAPI = create_app()

#!/usr/bin/env python3
"""
Kappsync - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Initializes modules
3. Exposes resource lifecycle hooks over HTTP

All business logic is in the modules, following black box principles.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Response
from fastapi.responses import JSONResponse

from kappsync import __version__
from kappsync.config.provider import ConfigProvider, EnvConfigProvider
from kappsync.exceptions import (
    CaptureError,
    FormatError,
    LaunchError,
    ReconcileError,
    ToolFailedError,
)
from kappsync.logging_config import configure_logging, get_logging_config

# Import modules through their black box interfaces
from kappsync.modules.api import (
    AppResourceBody,
    AppResourceState,
    DiffPreviewResponse,
    ErrorResponse,
    HealthResponse,
    TemplateResourceSpec,
    TemplateResourceState,
)
from kappsync.modules.executor import ProcessRunner
from kappsync.modules.reconciler import AppReconciler, TemplateReconciler
from kappsync.modules.storage import StorageModule

# Configuration provider (centralized config access)
config_provider: ConfigProvider = EnvConfigProvider()

configure_logging(config_provider.get_logging_config().level)
logger = logging.getLogger(__name__)

# Module instances (initialized at startup)
storage_module: Optional[StorageModule] = None
app_reconciler: Optional[AppReconciler] = None
template_reconciler: Optional[TemplateReconciler] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle - initialize and cleanup resources.
    """
    global storage_module, app_reconciler, template_reconciler

    logger.info("Starting Kappsync API...")

    tools = config_provider.get_tools_config()
    storage_module = StorageModule()
    app_reconciler = AppReconciler(ProcessRunner(tools.kapp_binary))
    template_reconciler = TemplateReconciler(ProcessRunner(tools.kbld_binary))

    logger.info(f"Kappsync API started (kapp={tools.kapp_binary}, kbld={tools.kbld_binary})")

    yield

    logger.info("Kappsync API shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Kappsync API",
    description="Kappsync - Declarative kapp and kbld reconciliation",
    version=__version__,
    lifespan=lifespan,
)


# Dependency injection helpers
def get_storage() -> StorageModule:
    """Get the storage module."""
    if not storage_module:
        raise HTTPException(503, "Service not initialized")
    return storage_module


def get_app_reconciler() -> AppReconciler:
    """Get the app reconciler."""
    if not app_reconciler:
        raise HTTPException(503, "Service not initialized")
    return app_reconciler


def get_template_reconciler() -> TemplateReconciler:
    """Get the template reconciler."""
    if not template_reconciler:
        raise HTTPException(503, "Service not initialized")
    return template_reconciler


@app.get("/health", response_model=HealthResponse)
def health():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=__version__)


@app.put("/apps/{namespace}/{app_name}", response_model=AppResourceState)
def apply_app(
    namespace: str,
    app_name: str,
    body: AppResourceBody,
    storage: StorageModule = Depends(get_storage),
    reconciler: AppReconciler = Depends(get_app_reconciler),
):
    """
    Create or update an app.

    Unknown identities are created; known ones are updated. Drift
    information is cleared either way.
    """
    spec = body.to_spec(namespace, app_name)

    with storage.lock(spec.identity):
        record = storage.get(spec.identity)

        if record is None:
            state = AppResourceState()
            reconciler.create(spec, state)
            storage.put(spec, state)
            logger.info(f"Created {spec.identity}")
            return state

        state = record.state
        try:
            reconciler.update(spec, state)
        except ReconcileError:
            storage.put(record.spec, state)
            raise

        storage.put(spec, state)
        logger.info(f"Updated {spec.identity}")
        return state


@app.get("/apps/{namespace}/{app_name}", response_model=AppResourceState)
def read_app(
    namespace: str,
    app_name: str,
    storage: StorageModule = Depends(get_storage),
    reconciler: AppReconciler = Depends(get_app_reconciler),
):
    """Refresh and return an app's drift information."""
    identity = f"{namespace}/{app_name}"

    with storage.lock(identity):
        record = storage.get(identity)
        if record is None:
            raise HTTPException(404, f"App '{identity}' not found")

        reconciler.read(record.spec, record.state)
        storage.put(record.spec, record.state)
        return record.state


@app.post("/apps/{namespace}/{app_name}/diff", response_model=DiffPreviewResponse)
def preview_app(
    namespace: str,
    app_name: str,
    body: AppResourceBody,
    storage: StorageModule = Depends(get_storage),
    reconciler: AppReconciler = Depends(get_app_reconciler),
):
    """Preview drift for a planned spec without persisting anything."""
    spec = body.to_spec(namespace, app_name)

    with storage.lock(spec.identity):
        record = storage.get(spec.identity)
        planned = AppResourceState(
            id=spec.identity,
            change_diff=record.state.change_diff if record else "",
        )

        reconciler.customize_diff(spec, planned)
        return DiffPreviewResponse(identity=spec.identity, planned=planned)


@app.delete("/apps/{namespace}/{app_name}", status_code=204)
def delete_app(
    namespace: str,
    app_name: str,
    storage: StorageModule = Depends(get_storage),
    reconciler: AppReconciler = Depends(get_app_reconciler),
):
    """Delete an app from the cluster and forget it."""
    identity = f"{namespace}/{app_name}"

    with storage.lock(identity):
        record = storage.get(identity)
        if record is None:
            raise HTTPException(404, f"App '{identity}' not found")

        reconciler.delete(record.spec, record.state)
        storage.delete(identity)

    logger.info(f"Deleted {identity}")
    return Response(status_code=204)


@app.post("/templates", response_model=TemplateResourceState)
def render_template(
    spec: TemplateResourceSpec,
    reconciler: TemplateReconciler = Depends(get_template_reconciler),
):
    """Render a template with kbld."""
    state = TemplateResourceState()
    reconciler.read(spec, state)
    return state


# Error handlers


def _status_for(cause: Exception) -> int:
    if isinstance(cause, FormatError):
        return 400
    if isinstance(cause, ToolFailedError):
        return 502
    if isinstance(cause, (LaunchError, CaptureError)):
        return 503
    return 500


@app.exception_handler(ReconcileError)
async def reconcile_error_handler(request, exc: ReconcileError):
    """Handle failed lifecycle events."""
    logger.error(f"Reconcile error: {exc}")
    content = ErrorResponse(error=str(exc), stderr=exc.stderr)
    return JSONResponse(status_code=_status_for(exc.cause), content=content.model_dump())


@app.exception_handler(ValueError)
async def validation_error_handler(request, exc):
    """Handle validation errors."""
    logger.error(f"Validation error: {exc}")
    return JSONResponse(status_code=400, content={"error": str(exc)})


if __name__ == "__main__":
    api_config = config_provider.get_api_config()
    log_level = config_provider.get_logging_config().level
    uvicorn.run(
        "kappsync.main:app",
        host=api_config.host,
        port=api_config.port,
        log_level=log_level.lower(),
        reload=api_config.debug,
        log_config=get_logging_config(log_level),
    )

"""
FastAPI application exposing the compliance engine over REST.

The app wraps a single `ComplianceOrchestrator`. Content is checked with
``POST /check``; modules can be listed, toggled, reconfigured and added at
runtime without restarting the service.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

load_dotenv()

logger = logging.getLogger("regcheck.api")
if not logging.getLogger().handlers:
    logging.basicConfig(level=os.getenv("REGCHECK_LOG_LEVEL", "INFO").upper())

from regcheck import get_version
from regcheck.config import load_settings
from regcheck.reporting.schema import serialize_report, serialize_requirements
from regcheck.services.engine import orchestrator_from_settings
from regcheck.services.orchestrator import ComplianceOrchestrator
from regcheck.services.registry import DuplicateNameError, UnknownModuleError
from regcheck.storage.audit import JsonlReportLogger


class CheckRequest(BaseModel):
    content: str
    context: Dict[str, Any] = Field(default_factory=dict)


class EnabledRequest(BaseModel):
    enabled: bool


class ConfigRequest(BaseModel):
    config: Dict[str, Any] = Field(default_factory=dict)


class RegisterRequest(BaseModel):
    variant: Optional[str] = None
    config: Dict[str, Any] = Field(default_factory=dict)
    overwrite: bool = True
    enabled: Optional[bool] = None


def _resolve_components() -> tuple[ComplianceOrchestrator, Optional[JsonlReportLogger]]:
    settings = load_settings()
    audit_logger = JsonlReportLogger(settings.audit_log) if settings.audit_log else None
    return orchestrator_from_settings(settings), audit_logger


def _module_listing(orchestrator: ComplianceOrchestrator) -> List[dict]:
    registry = orchestrator.registry
    listing = []
    for name in registry.available_names():
        entry = registry.get(name)
        listing.append(
            {
                "name": name,
                "enabled": entry.enabled,
                "variant": type(entry.instance).__name__,
            }
        )
    return listing


def create_api(
    orchestrator: ComplianceOrchestrator | None = None,
    audit_logger: JsonlReportLogger | None = None,
) -> FastAPI:
    """
    Build a FastAPI app serving compliance checks and module configuration.

    Args:
        orchestrator: Optional pre-configured orchestrator (useful for tests).
            When omitted, one is built from the ``REGCHECK_*`` environment,
            together with the audit logger.
        audit_logger: Optional JSONL logger receiving every report.

    Returns:
        FastAPI instance with routes registered.
    """

    if orchestrator is None:
        orchestrator, env_audit_logger = _resolve_components()
        audit_logger = audit_logger or env_audit_logger

    app = FastAPI(title="regcheck Compliance API", version=get_version())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=os.getenv("REGCHECK_CORS_ORIGINS", "*").split(","),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def get_orchestrator() -> ComplianceOrchestrator:
        return orchestrator

    @app.get("/")
    def root() -> dict:
        """Health endpoint for quick status checks."""

        return {"status": "ok"}

    @app.get("/modules")
    def list_modules(engine: ComplianceOrchestrator = Depends(get_orchestrator)) -> List[dict]:
        return _module_listing(engine)

    @app.get("/requirements")
    def get_requirements(engine: ComplianceOrchestrator = Depends(get_orchestrator)) -> dict:
        return serialize_requirements(engine.get_requirements())

    @app.post("/check")
    def check(payload: CheckRequest, engine: ComplianceOrchestrator = Depends(get_orchestrator)) -> dict:
        """
        Evaluate content against every enabled module.

        Module failures are reported inside the report, so this endpoint
        answers 200 regardless of the verdict.
        """

        report = engine.check_compliance(payload.content, payload.context)
        if audit_logger is not None:
            try:
                audit_logger.log(report, content=payload.content, context=payload.context, metadata={"source": "api"})
            except OSError as exc:
                logger.error("Failed to append audit record", extra={"error": str(exc)})
                raise HTTPException(status_code=500, detail="Failed to capture audit log for the request.") from exc
        return serialize_report(report)

    @app.put("/modules/{name}/enabled")
    def set_enabled(
        name: str,
        payload: EnabledRequest,
        engine: ComplianceOrchestrator = Depends(get_orchestrator),
    ) -> dict:
        if name not in engine.registry:
            raise HTTPException(status_code=404, detail=str(UnknownModuleError(name)))
        engine.set_module_enabled(name, payload.enabled)
        return {"name": name, "enabled": engine.registry.is_enabled(name)}

    @app.put("/modules/{name}/config")
    def reconfigure(
        name: str,
        payload: ConfigRequest,
        engine: ComplianceOrchestrator = Depends(get_orchestrator),
    ) -> dict:
        try:
            engine.reconfigure_module(name, payload.config)
        except UnknownModuleError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return {"name": name, "status": "reconfigured"}

    @app.post("/modules/{name}", status_code=201)
    def register(
        name: str,
        payload: RegisterRequest,
        engine: ComplianceOrchestrator = Depends(get_orchestrator),
    ) -> dict:
        """Build a catalogue variant under ``name`` from the given options.

        The variant defaults to the catalogue entry named ``name``.
        """

        factory = None
        if payload.variant is not None:
            factory = engine.catalogue.get(payload.variant)
            if factory is None:
                raise HTTPException(status_code=404, detail=f"Unknown module variant '{payload.variant}'.")
        try:
            engine.register_module(
                name,
                payload.config,
                factory=factory,
                overwrite=payload.overwrite,
                enabled=payload.enabled,
            )
        except UnknownModuleError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except DuplicateNameError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return {"name": name, "enabled": engine.registry.is_enabled(name)}

    return app


app = create_api()


__all__ = ["create_api", "app"]

"""Health check: no auth required."""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.api.dependencies import get_registry
from src.api.registry import Registry

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    version: str
    ledger_ok: bool


@router.get("/health", response_model=HealthResponse)
async def health_check(reg: Registry = Depends(get_registry)) -> HealthResponse:
    ledger_ok = reg.ledger is not None
    return HealthResponse(
        status="ok" if ledger_ok else "degraded",
        timestamp=datetime.now(UTC).isoformat(),
        version="0.1.0",
        ledger_ok=ledger_ok,
    )

# backend/src/busquedas/observability/payloads_carga.py
from __future__ import annotations
from typing import Dict, Literal, Optional
from pydantic import BaseModel, Field
from datetime import datetime


class LoadRequested(BaseModel):
    correlation_id: str = Field(..., description="Id de la carga")
    start: Optional[str] = Field(default=None, description="Límite inferior YYYY-MM-DD (incl.)")
    end: Optional[str] = Field(default=None, description="Límite superior YYYY-MM-DD (incl.)")
    ts: Optional[datetime] = Field(default=None, description="UTC timestamp")


class LoadCompleted(BaseModel):
    correlation_id: str
    latencia_ms: int = Field(..., ge=0)
    n_rows: int = Field(..., ge=0)
    n_records: int = Field(..., ge=0)
    years: Optional[list[int]] = None
    por_tipo: Optional[Dict[str, int]] = None
    ts: Optional[datetime] = None


class LoadFailed(BaseModel):
    correlation_id: str
    error_code: str
    error: str
    stage: Optional[Literal["fetch", "normalize"]] = None
    ts: Optional[datetime] = None

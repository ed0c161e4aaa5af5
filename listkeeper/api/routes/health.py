"""Liveness endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter()


class HealthOut(BaseModel):
    status: str
    authorized_groups: int
    groups: int


@router.get("/health", response_model=HealthOut)
async def health(request: Request) -> HealthOut:
    store = request.app.state.store
    if store is None:
        return HealthOut(status="ok", authorized_groups=0, groups=0)
    return HealthOut(
        status="ok",
        authorized_groups=store.authorized_count,
        groups=store.group_count,
    )

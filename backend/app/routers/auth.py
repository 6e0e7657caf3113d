# backend/app/routers/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from ..auth import get_actor
from ..schemas import UserOut

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/user", response_model=UserOut)
def current_user(actor=Depends(get_actor)):
    """Whoever the configured auth mode resolved for this request."""
    return actor

# app/routers/health.py
from fastapi import APIRouter

router = APIRouter(tags=["Health"])


@router.get("/health")
def health():
    """Liveness check."""
    return {"status": "ok"}

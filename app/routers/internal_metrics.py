from __future__ import annotations

from fastapi import APIRouter, Depends

from app.core.metrics import request_metrics
from app.deps import get_whatsapp_session
from app.whatsapp.session import GatewaySession

router = APIRouter(prefix="/internal/metrics", tags=["internal-metrics"])


@router.get("")
def metrics_snapshot(session: GatewaySession = Depends(get_whatsapp_session)):
    return {
        "endpoints": request_metrics.snapshot(),
        "orders": request_metrics.snapshot_outcomes(),
        "whatsapp": {"state": session.state.value, "detail": session.last_detail},
    }

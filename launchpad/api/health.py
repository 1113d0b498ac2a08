# launchpad/api/health.py
from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])

APP_STARTED_AT = time.time()


def _now_meta() -> Dict[str, Any]:
    now_ts = time.time()
    now_dt = datetime.fromtimestamp(now_ts, tz=timezone.utc)
    return {
        "timestamp": now_dt.isoformat().replace("+00:00", "Z"),
        "now_unix": int(now_ts),
        "uptime_s": int(now_ts - APP_STARTED_AT),
    }


@router.get("/live")
async def live():
    return {"status": "ok"}


@router.get("/health")
async def health(request: Request):
    settings = request.app.state.settings
    return {
        "status": "ok",
        **_now_meta(),
        "network": settings.SOLANA_NETWORK,
        "fee_recipient_configured": bool(settings.ADMIN_WALLET_ADDRESS),
    }

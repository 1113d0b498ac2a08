from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from launchpad.api.deps import get_app_settings, require_admin
from launchpad.api.responses import ERROR_RESPONSES
from launchpad.config.settings import Settings
from launchpad.schemas.payments import AdminStatsResponse, TransactionHistoryResponse, WalletRequest
from launchpad.services.admin import dashboard_stats, fee_transactions

logger = logging.getLogger("launchpad.api.admin")

router = APIRouter(prefix="/api/admin", tags=["admin"], responses=ERROR_RESPONSES)


@router.post("/transactions", response_model=TransactionHistoryResponse)
async def get_transactions(req: WalletRequest, settings: Settings = Depends(get_app_settings)):
    require_admin(settings, req.wallet_address, req.signature)
    logger.info("admin fetched transaction history")
    return TransactionHistoryResponse(data=fee_transactions())


@router.post("/stats", response_model=AdminStatsResponse)
async def get_stats(req: WalletRequest, settings: Settings = Depends(get_app_settings)):
    require_admin(settings, req.wallet_address, req.signature)
    logger.info("admin fetched dashboard statistics")
    return AdminStatsResponse(data=dashboard_stats())

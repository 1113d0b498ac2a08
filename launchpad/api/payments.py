from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from launchpad.api.deps import get_app_settings, get_payments, require_wallet_signature
from launchpad.api.responses import ERROR_RESPONSES, error_response
from launchpad.config.settings import Settings
from launchpad.schemas.payments import (
    BalanceReport,
    BalanceRequest,
    BalanceResponse,
    FeeReceipt,
    FeeResponse,
    WalletRequest,
)
from launchpad.services.payments import PaymentService

logger = logging.getLogger("launchpad.api.payments")

router = APIRouter(prefix="/api/payments", tags=["payments"], responses=ERROR_RESPONSES)


@router.post("/fee", response_model=FeeResponse)
async def collect_fee(
    req: WalletRequest,
    payments: PaymentService = Depends(get_payments),
    settings: Settings = Depends(get_app_settings),
):
    wallet = require_wallet_signature(req.wallet_address, req.signature)

    logger.info("processing fee payment | wallet=%s", wallet)
    result = await payments.collect_fee(wallet)
    if not result["success"]:
        return error_response(
            status_code=400,
            message="Failed to collect fee",
            error=result.get("error"),
            debug=settings.debug_errors,
        )

    return FeeResponse(
        data=FeeReceipt(amount=result["amount"], transaction_signature=result["transactionSignature"])
    )


@router.post("/verify-balance", response_model=BalanceResponse)
async def verify_balance(
    req: BalanceRequest,
    payments: PaymentService = Depends(get_payments),
    settings: Settings = Depends(get_app_settings),
):
    logger.info("verifying balance | wallet=%s", req.wallet_address)
    result = await payments.verify_balance(req.wallet_address)
    if not result["success"]:
        return error_response(
            status_code=400,
            message="Failed to verify wallet balance",
            error=result.get("error"),
            debug=settings.debug_errors,
        )

    return BalanceResponse(
        data=BalanceReport(
            has_enough_balance=result["hasEnoughBalance"],
            balance=result["balance"],
            minimum_required=result["minimumRequired"],
        )
    )

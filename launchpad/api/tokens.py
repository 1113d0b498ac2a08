from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from launchpad.api.deps import (
    get_aggregator,
    get_app_settings,
    get_minting,
    get_payments,
    require_wallet_signature,
)
from launchpad.api.responses import ERROR_RESPONSES, error_response
from launchpad.config.settings import Settings
from launchpad.schemas.tokens import CreatedToken, CreateTokenRequest, CreateTokenResponse, TokenFeedResponse
from launchpad.services.discovery import TokenAggregator
from launchpad.services.minting import MintService
from launchpad.services.payments import PaymentService

logger = logging.getLogger("launchpad.api.tokens")

router = APIRouter(prefix="/api/tokens", tags=["tokens"], responses=ERROR_RESPONSES)


@router.get("/trending", response_model=TokenFeedResponse)
async def get_trending_tokens(aggregator: TokenAggregator = Depends(get_aggregator)):
    return TokenFeedResponse(data=await aggregator.list_tokens("trending"))


@router.get("/new", response_model=TokenFeedResponse)
async def get_new_tokens(aggregator: TokenAggregator = Depends(get_aggregator)):
    return TokenFeedResponse(data=await aggregator.list_tokens("new"))


@router.post("/create", status_code=201, response_model=CreateTokenResponse)
async def create_token(
    req: CreateTokenRequest,
    payments: PaymentService = Depends(get_payments),
    minting: MintService = Depends(get_minting),
    settings: Settings = Depends(get_app_settings),
):
    """
    Collect the 0.2 SOL creation fee, then build the mint.
    Example body: {"name": "Moon Cat", "symbol": "MCAT", "walletAddress": "...", "signature": "..."}
    """
    wallet = require_wallet_signature(req.wallet_address, req.signature)

    logger.info("collecting creation fee | wallet=%s", wallet)
    fee = await payments.collect_fee(wallet)
    if not fee["success"]:
        return error_response(
            status_code=400,
            message="Failed to collect token creation fee",
            error=fee.get("error"),
            debug=settings.debug_errors,
        )

    logger.info("creating token %s (%s) | wallet=%s", req.name, req.symbol, wallet)
    result = await minting.create_token(
        {
            "name": req.name,
            "symbol": req.symbol,
            "decimals": req.decimals,
            "walletAddress": wallet,
        }
    )
    if not result["success"]:
        return error_response(
            status_code=400,
            message="Token creation failed",
            error=result.get("error"),
            debug=settings.debug_errors,
        )

    return CreateTokenResponse(
        data=CreatedToken(
            token_id=result["tokenId"],
            name=req.name,
            symbol=req.symbol,
            decimals=req.decimals,
            transaction_signature=result["transactionSignature"],
        )
    )

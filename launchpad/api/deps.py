from __future__ import annotations

import logging
from typing import Optional

from fastapi import Request

from launchpad.api.responses import ApiError
from launchpad.config.settings import Settings
from launchpad.services.discovery import TokenAggregator
from launchpad.services.minting import MintService
from launchpad.services.payments import PaymentService

logger = logging.getLogger("launchpad.auth")

# Signatures are not verified cryptographically; wallets sign client-side and
# the backend only checks the placeholder format.
SIGNATURE_PREFIX = "simulated_signature_"


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_aggregator(request: Request) -> TokenAggregator:
    return request.app.state.aggregator


def get_payments(request: Request) -> PaymentService:
    return request.app.state.payments


def get_minting(request: Request) -> MintService:
    return request.app.state.minting


def require_wallet_signature(wallet_address: Optional[str], signature: Optional[str]) -> str:
    if not wallet_address or not signature:
        raise ApiError(400, "Wallet address and signature are required")

    if not signature.startswith(SIGNATURE_PREFIX):
        logger.warning("invalid signature format | wallet=%s", wallet_address)
        raise ApiError(401, "Invalid signature")

    logger.info("wallet signature accepted | wallet=%s", wallet_address)
    return wallet_address


def require_admin(settings: Settings, wallet_address: Optional[str], signature: Optional[str]) -> str:
    if not wallet_address or not signature:
        raise ApiError(400, "Wallet address and signature are required")

    if not settings.ADMIN_WALLET_ADDRESS:
        logger.error("admin access attempted but ADMIN_WALLET_ADDRESS is not configured")
        raise ApiError(500, "Error verifying admin access", "Admin wallet address not configured")

    if wallet_address != settings.ADMIN_WALLET_ADDRESS:
        logger.warning("unauthorized admin access attempt | wallet=%s", wallet_address)
        raise ApiError(403, "Unauthorized access")

    if not signature.startswith(SIGNATURE_PREFIX):
        logger.warning("invalid admin signature format | wallet=%s", wallet_address)
        raise ApiError(401, "Invalid signature")

    logger.info("admin access granted | wallet=%s", wallet_address)
    return wallet_address

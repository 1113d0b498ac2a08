# launchpad/services/payments.py
from __future__ import annotations

import logging
import secrets
from typing import Any, Callable, Dict, Optional

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed
from solders.instruction import Instruction
from solders.pubkey import Pubkey
from solders.system_program import TransferParams, transfer

from launchpad.config.settings import Settings
from launchpad.services.errors import ConfigurationError, InvalidInput
from launchpad.utils.time import epoch_ms

logger = logging.getLogger("launchpad.payments")

LAMPORTS_PER_SOL = 1_000_000_000
FEE_LAMPORTS = 200_000_000  # 0.2 SOL
MINIMUM_BALANCE_LAMPORTS = 500_000_000  # 0.5 SOL

RpcClientFactory = Callable[[], AsyncClient]


def parse_pubkey(address: Optional[str], label: str = "wallet address") -> Pubkey:
    if not address:
        raise InvalidInput(f"{label} is required")
    try:
        return Pubkey.from_string(address.strip())
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"invalid {label}: {address}") from exc


def fabricated_signature(prefix: str) -> str:
    """Placeholder settlement reference; unique per call."""
    return f"{prefix}{epoch_ms()}_{secrets.token_hex(4)}"


def rpc_client_factory(settings: Settings) -> RpcClientFactory:
    def _factory() -> AsyncClient:
        return AsyncClient(settings.SOLANA_RPC_URL, commitment=Confirmed)

    return _factory


class PaymentService:
    """Fee collection and balance checks for the token creation flow."""

    def __init__(self, settings: Settings, client_factory: Optional[RpcClientFactory] = None) -> None:
        self.settings = settings
        self.client_factory = client_factory or rpc_client_factory(settings)

    def fee_recipient(self) -> Pubkey:
        if not self.settings.ADMIN_WALLET_ADDRESS:
            raise ConfigurationError("Admin wallet address not configured")
        return parse_pubkey(self.settings.ADMIN_WALLET_ADDRESS, "admin wallet address")

    def build_fee_instruction(self, wallet_address: str) -> Instruction:
        return transfer(
            TransferParams(
                from_pubkey=parse_pubkey(wallet_address),
                to_pubkey=self.fee_recipient(),
                lamports=FEE_LAMPORTS,
            )
        )

    async def collect_fee(self, wallet_address: str) -> Dict[str, Any]:
        """
        Report the 0.2 SOL creation fee as collected.

        The transfer instruction is built but never signed or submitted: the
        wallet is expected to sign client-side. Every call returns a new
        fabricated reference.
        """
        try:
            self.build_fee_instruction(wallet_address)
        except (ConfigurationError, InvalidInput) as e:
            logger.error("fee collection failed | wallet=%s | err=%s", wallet_address, e)
            return {"success": False, "error": str(e)}

        signature = fabricated_signature("simulated_fee_payment_")
        logger.info(
            "fee collected | %.1f SOL | from=%s | to=%s",
            FEE_LAMPORTS / LAMPORTS_PER_SOL, wallet_address, self.settings.ADMIN_WALLET_ADDRESS,
        )
        return {
            "success": True,
            "amount": FEE_LAMPORTS / LAMPORTS_PER_SOL,
            "transactionSignature": signature,
        }

    async def verify_balance(self, wallet_address: str) -> Dict[str, Any]:
        try:
            pubkey = parse_pubkey(wallet_address)
            async with self.client_factory() as client:
                resp = await client.get_balance(pubkey)
            lamports = int(resp.value)
        except Exception as e:
            logger.error("balance check failed | wallet=%s | err=%r", wallet_address, e)
            return {"success": False, "error": str(e) or repr(e)}

        has_enough = lamports >= MINIMUM_BALANCE_LAMPORTS
        logger.info(
            "balance check | wallet=%s | %s SOL | sufficient=%s",
            wallet_address, lamports / LAMPORTS_PER_SOL, has_enough,
        )
        return {
            "success": True,
            "hasEnoughBalance": has_enough,
            "balance": lamports / LAMPORTS_PER_SOL,
            "minimumRequired": MINIMUM_BALANCE_LAMPORTS / LAMPORTS_PER_SOL,
        }

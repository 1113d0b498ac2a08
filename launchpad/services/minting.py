# launchpad/services/minting.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.pubkey import Pubkey
from solders.system_program import CreateAccountParams, create_account
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import initialize_mint
from spl.token.models import InitializeMintParams

from launchpad.config.settings import Settings
from launchpad.services.payments import RpcClientFactory, fabricated_signature, parse_pubkey, rpc_client_factory

logger = logging.getLogger("launchpad.minting")

MINT_ACCOUNT_SPACE = 82  # spl-token Mint layout
DEFAULT_DECIMALS = 9


def build_mint_instructions(
    payer: Pubkey,
    mint: Pubkey,
    decimals: int,
    rent_lamports: int,
) -> list[Instruction]:
    """create_account sized for a mint, then initialize_mint with ``payer`` as both authorities."""
    return [
        create_account(
            CreateAccountParams(
                from_pubkey=payer,
                to_pubkey=mint,
                lamports=rent_lamports,
                space=MINT_ACCOUNT_SPACE,
                owner=TOKEN_PROGRAM_ID,
            )
        ),
        initialize_mint(
            InitializeMintParams(
                decimals=decimals,
                program_id=TOKEN_PROGRAM_ID,
                mint=mint,
                mint_authority=payer,
                freeze_authority=payer,
            )
        ),
    ]


class MintService:
    def __init__(self, settings: Settings, client_factory: Optional[RpcClientFactory] = None) -> None:
        self.settings = settings
        self.client_factory = client_factory or rpc_client_factory(settings)

    async def rent_exemption(self) -> int:
        async with self.client_factory() as client:
            resp = await client.get_minimum_balance_for_rent_exemption(MINT_ACCOUNT_SPACE)
        return int(resp.value)

    async def build_mint_message(self, wallet_address: str, decimals: int = DEFAULT_DECIMALS) -> tuple[Keypair, MessageV0]:
        payer = parse_pubkey(wallet_address)
        mint_account = Keypair()
        logger.info("generated mint account | %s", mint_account.pubkey())

        lamports = await self.rent_exemption()
        instructions = build_mint_instructions(payer, mint_account.pubkey(), decimals, lamports)

        # compiled against a placeholder blockhash: the wallet fetches a fresh one when signing
        message = MessageV0.try_compile(payer, instructions, [], Hash.default())
        return mint_account, message

    async def create_token(self, token: Dict[str, Any]) -> Dict[str, Any]:
        """
        Build the mint transaction for ``{name, symbol, decimals, walletAddress}``.

        Nothing is signed or submitted; the returned signature is fabricated.
        """
        name = token.get("name")
        symbol = token.get("symbol")
        decimals = token.get("decimals")
        decimals = DEFAULT_DECIMALS if decimals is None else int(decimals)
        wallet_address = token.get("walletAddress")

        try:
            logger.info("building mint on solana %s | %s (%s)", self.settings.SOLANA_NETWORK, name, symbol)
            mint_account, _message = await self.build_mint_message(wallet_address, decimals)
        except Exception as e:
            logger.error("token creation failed | wallet=%s | err=%r", wallet_address, e)
            return {"success": False, "error": str(e) or repr(e)}

        token_id = str(mint_account.pubkey())
        logger.info("token created | %s", token_id)
        return {
            "success": True,
            "tokenId": token_id,
            "transactionSignature": fabricated_signature("simulated_signature_"),
        }

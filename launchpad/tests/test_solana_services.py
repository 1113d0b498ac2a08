from __future__ import annotations

from types import SimpleNamespace

import pytest
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID
from solders.system_program import decode_create_account, decode_transfer
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import decode_initialize_mint

from launchpad.config.settings import Settings
from launchpad.services.minting import MINT_ACCOUNT_SPACE, MintService, build_mint_instructions
from launchpad.services.payments import FEE_LAMPORTS, PaymentService

ADMIN = str(Keypair().pubkey())
USER = str(Keypair().pubkey())


class FakeRpc:
    def __init__(self, balance: int = 0, rent: int = 1_461_600, exc: Exception | None = None):
        self.balance = balance
        self.rent = rent
        self.exc = exc
        self.balance_requests: list[Pubkey] = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def get_balance(self, pubkey):
        self.balance_requests.append(pubkey)
        if self.exc:
            raise self.exc
        return SimpleNamespace(value=self.balance)

    async def get_minimum_balance_for_rent_exemption(self, size):
        if self.exc:
            raise self.exc
        assert size == MINT_ACCOUNT_SPACE
        return SimpleNamespace(value=self.rent)


def _settings(admin: str | None = ADMIN) -> Settings:
    return Settings(ADMIN_WALLET_ADDRESS=admin)


# ----------------------------
# fee collection
# ----------------------------
@pytest.mark.asyncio
async def test_collect_fee_reports_fixed_amount_regardless_of_balance():
    rpc = FakeRpc(balance=0)
    service = PaymentService(_settings(), client_factory=lambda: rpc)

    result = await service.collect_fee(USER)

    assert result["success"] is True
    assert result["amount"] == 0.2
    assert result["transactionSignature"].startswith("simulated_fee_payment_")
    assert rpc.balance_requests == []


@pytest.mark.asyncio
async def test_collect_fee_mints_new_reference_each_call():
    service = PaymentService(_settings(), client_factory=FakeRpc)

    first = await service.collect_fee(USER)
    second = await service.collect_fee(USER)

    assert first["success"] and second["success"]
    assert first["transactionSignature"] != second["transactionSignature"]


@pytest.mark.asyncio
async def test_collect_fee_without_recipient_is_a_failure_result():
    service = PaymentService(_settings(admin=None), client_factory=FakeRpc)

    result = await service.collect_fee(USER)

    assert result == {"success": False, "error": "Admin wallet address not configured"}


@pytest.mark.asyncio
async def test_collect_fee_bad_wallet_is_a_failure_result():
    service = PaymentService(_settings(), client_factory=FakeRpc)

    result = await service.collect_fee("definitely-not-base58!")

    assert result["success"] is False
    assert "invalid wallet address" in result["error"]


def test_fee_instruction_moves_point_two_sol_to_recipient():
    service = PaymentService(_settings(), client_factory=FakeRpc)

    ix = service.build_fee_instruction(USER)
    params = decode_transfer(ix)

    assert ix.program_id == SYSTEM_PROGRAM_ID
    assert params["from_pubkey"] == Pubkey.from_string(USER)
    assert params["to_pubkey"] == Pubkey.from_string(ADMIN)
    assert params["lamports"] == FEE_LAMPORTS == 200_000_000


# ----------------------------
# balance verification
# ----------------------------
@pytest.mark.asyncio
@pytest.mark.parametrize(
    "lamports, enough",
    [(0, False), (499_999_999, False), (500_000_000, True), (2_000_000_000, True)],
)
async def test_verify_balance_threshold(lamports, enough):
    rpc = FakeRpc(balance=lamports)
    service = PaymentService(_settings(), client_factory=lambda: rpc)

    result = await service.verify_balance(USER)

    assert result == {
        "success": True,
        "hasEnoughBalance": enough,
        "balance": lamports / 1_000_000_000,
        "minimumRequired": 0.5,
    }
    assert rpc.balance_requests == [Pubkey.from_string(USER)]


@pytest.mark.asyncio
async def test_verify_balance_rpc_error_is_reported_once():
    rpc = FakeRpc(exc=ConnectionError("rpc down"))
    service = PaymentService(_settings(), client_factory=lambda: rpc)

    result = await service.verify_balance(USER)

    assert result == {"success": False, "error": "rpc down"}
    assert len(rpc.balance_requests) == 1


# ----------------------------
# minting
# ----------------------------
def test_mint_instructions_create_then_initialize():
    payer = Keypair().pubkey()
    mint = Keypair().pubkey()

    create_ix, init_ix = build_mint_instructions(payer, mint, decimals=6, rent_lamports=1_461_600)

    assert create_ix.program_id == SYSTEM_PROGRAM_ID
    created = decode_create_account(create_ix)
    assert created["from_pubkey"] == payer
    assert created["to_pubkey"] == mint
    assert created["space"] == MINT_ACCOUNT_SPACE
    assert created["owner"] == TOKEN_PROGRAM_ID
    assert created["lamports"] == 1_461_600

    assert init_ix.program_id == TOKEN_PROGRAM_ID
    initialized = decode_initialize_mint(init_ix)
    assert initialized.mint == mint
    assert initialized.decimals == 6
    assert initialized.mint_authority == payer
    assert initialized.freeze_authority == payer


@pytest.mark.asyncio
async def test_build_mint_message_has_two_instructions():
    service = MintService(_settings(), client_factory=FakeRpc)

    mint_account, message = await service.build_mint_message(USER, decimals=9)

    assert len(message.instructions) == 2
    assert message.account_keys[0] == Pubkey.from_string(USER)
    assert mint_account.pubkey() in message.account_keys


@pytest.mark.asyncio
async def test_create_token_returns_fabricated_reference():
    service = MintService(_settings(), client_factory=FakeRpc)

    result = await service.create_token({"name": "Moon Cat", "symbol": "MCAT", "decimals": None, "walletAddress": USER})

    assert result["success"] is True
    Pubkey.from_string(result["tokenId"])
    assert result["transactionSignature"].startswith("simulated_signature_")


@pytest.mark.asyncio
async def test_create_token_failure_result():
    service = MintService(_settings(), client_factory=lambda: FakeRpc(exc=ConnectionError("rpc down")))

    bad_wallet = await service.create_token({"name": "X", "symbol": "X", "walletAddress": "nope"})
    rpc_down = await service.create_token({"name": "X", "symbol": "X", "walletAddress": USER})

    assert bad_wallet["success"] is False
    assert rpc_down == {"success": False, "error": "rpc down"}

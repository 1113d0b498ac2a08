from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class WalletRequest(BaseModel):
    """Body of every signed request (fee payment, admin surface)."""

    model_config = ConfigDict(populate_by_name=True)

    wallet_address: Optional[str] = Field(None, alias="walletAddress")
    signature: Optional[str] = None


class BalanceRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    wallet_address: str = Field(..., min_length=1, alias="walletAddress")


class FeeReceipt(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    amount: float
    transaction_signature: str = Field(..., alias="transactionSignature")


class FeeResponse(BaseModel):
    success: bool = True
    message: str = "Fee collected successfully"
    data: FeeReceipt


class BalanceReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    has_enough_balance: bool = Field(..., alias="hasEnoughBalance")
    balance: float
    minimum_required: float = Field(..., alias="minimumRequired")


class BalanceResponse(BaseModel):
    success: bool = True
    data: BalanceReport


class FeeTransactionRecord(BaseModel):
    """Fabricated per request; there is no fee ledger behind it."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    wallet_address: str = Field(..., alias="walletAddress")
    amount: float
    timestamp: str
    transaction_signature: str = Field(..., alias="transactionSignature")
    status: str


class TransactionHistory(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    transactions: List[FeeTransactionRecord]
    total_fees: float = Field(..., alias="totalFees")


class TransactionHistoryResponse(BaseModel):
    success: bool = True
    data: TransactionHistory


class AdminStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_tokens_created: int = Field(..., alias="totalTokensCreated")
    total_fees_collected: float = Field(..., alias="totalFeesCollected")
    active_users: int = Field(..., alias="activeUsers")
    last_day_transactions: int = Field(..., alias="lastDayTransactions")
    last_week_transactions: int = Field(..., alias="lastWeekTransactions")


class AdminStatsResponse(BaseModel):
    success: bool = True
    data: AdminStats

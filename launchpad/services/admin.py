from __future__ import annotations

from datetime import datetime
from typing import Optional

from launchpad.schemas.payments import AdminStats, FeeTransactionRecord, TransactionHistory
from launchpad.utils.time import iso_ago, utcnow

FEE_SOL = 0.2


def fee_transactions(now: Optional[datetime] = None) -> TransactionHistory:
    """Sample fee history. Fee payments are not recorded anywhere."""
    now = now or utcnow()
    transactions = [
        FeeTransactionRecord(
            id="tx1",
            wallet_address="user1wallet123",
            amount=FEE_SOL,
            timestamp=iso_ago(now, hours=1),
            transaction_signature="simulated_fee_payment_1234567890",
            status="completed",
        ),
        FeeTransactionRecord(
            id="tx2",
            wallet_address="user2wallet456",
            amount=FEE_SOL,
            timestamp=iso_ago(now, hours=2),
            transaction_signature="simulated_fee_payment_0987654321",
            status="completed",
        ),
    ]
    return TransactionHistory(
        transactions=transactions,
        total_fees=round(sum(tx.amount for tx in transactions), 9),
    )


def dashboard_stats() -> AdminStats:
    tokens_created = 42
    return AdminStats(
        total_tokens_created=tokens_created,
        total_fees_collected=round(tokens_created * FEE_SOL, 9),
        active_users=38,
        last_day_transactions=5,
        last_week_transactions=18,
    )

"""
Billing dashboard aggregation.

Transactions are partitioned into nested period buckets relative to ``now``:
a transaction at T is in the N-day bucket iff ``now - T <= N days`` and in
``today`` iff T falls on the same UTC calendar date as ``now`` and T <= now.
"""
from dataclasses import dataclass, field, asdict
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

PERIOD_DAYS = {
    "last_7_days": 7,
    "last_15_days": 15,
    "last_30_days": 30,
}


@dataclass
class BucketTotal:
    total_cents: int = 0
    count: int = 0

    def add(self, amount_cents: int):
        self.total_cents += amount_cents
        self.count += 1


@dataclass
class BillingSummary:
    today: BucketTotal = field(default_factory=BucketTotal)
    last_7_days: BucketTotal = field(default_factory=BucketTotal)
    last_15_days: BucketTotal = field(default_factory=BucketTotal)
    last_30_days: BucketTotal = field(default_factory=BucketTotal)
    all_time: BucketTotal = field(default_factory=BucketTotal)

    def to_dict(self) -> dict:
        return asdict(self)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def bucket_transactions(transactions: Iterable, now: Optional[datetime] = None) -> BillingSummary:
    """Sum ``amount_cents`` of each transaction into every bucket it belongs to."""
    now = _as_utc(now or datetime.now(timezone.utc))
    summary = BillingSummary()

    for tx in transactions:
        created = _as_utc(tx.created_at)
        amount = tx.amount_cents or 0
        age = now - created

        summary.all_time.add(amount)
        for bucket_name, days in PERIOD_DAYS.items():
            if age <= timedelta(days=days):
                getattr(summary, bucket_name).add(amount)
        if created.date() == now.date() and created <= now:
            summary.today.add(amount)

    return summary

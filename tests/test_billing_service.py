"""Tests for billing period buckets."""
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from app.services.billing import bucket_transactions

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


def _tx(amount, **delta):
    return SimpleNamespace(amount_cents=amount, created_at=NOW - timedelta(**delta))


def test_empty_input_gives_zero_buckets():
    summary = bucket_transactions([], now=NOW)
    for bucket in summary.to_dict().values():
        assert bucket == {"total_cents": 0, "count": 0}


def test_transaction_counts_in_every_enclosing_bucket():
    summary = bucket_transactions([_tx(1000, hours=1)], now=NOW)
    assert summary.today.total_cents == 1000
    assert summary.last_7_days.total_cents == 1000
    assert summary.last_15_days.total_cents == 1000
    assert summary.last_30_days.total_cents == 1000
    assert summary.all_time.total_cents == 1000


def test_mixed_ages():
    txs = [
        _tx(100, hours=2),     # today
        _tx(200, days=3),      # 7d
        _tx(400, days=10),     # 15d
        _tx(800, days=20),     # 30d
        _tx(1600, days=90),    # all time only
    ]
    s = bucket_transactions(txs, now=NOW)
    assert s.today.total_cents == 100
    assert s.last_7_days.total_cents == 300
    assert s.last_15_days.total_cents == 700
    assert s.last_30_days.total_cents == 1500
    assert s.all_time.total_cents == 3100
    assert s.all_time.count == 5


def test_buckets_are_nested():
    txs = [_tx(i * 10, days=i) for i in range(0, 40)]
    s = bucket_transactions(txs, now=NOW)
    assert s.today.total_cents <= s.last_7_days.total_cents
    assert s.last_7_days.total_cents <= s.last_15_days.total_cents
    assert s.last_15_days.total_cents <= s.last_30_days.total_cents
    assert s.last_30_days.total_cents <= s.all_time.total_cents


def test_exact_boundary_is_inside():
    s = bucket_transactions([_tx(500, days=7)], now=NOW)
    assert s.last_7_days.count == 1


def test_yesterday_is_not_today():
    s = bucket_transactions([_tx(500, hours=13)], now=NOW)
    assert s.today.count == 0
    assert s.last_7_days.count == 1


def test_naive_datetimes_are_treated_as_utc():
    tx = SimpleNamespace(amount_cents=700, created_at=datetime(2026, 3, 15, 8, 0))
    s = bucket_transactions([tx], now=NOW)
    assert s.today.total_cents == 700

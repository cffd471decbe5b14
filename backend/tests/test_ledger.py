from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import select

from temple_billing.core.exceptions import ValidationFailed
from temple_billing.models import AuditLog, User, Withdrawal
from temple_billing.models.enums import AuditAction
from temple_billing.services.ledger import (
    coerce_handover_amount,
    daily_summary,
    is_online_mode,
    record_withdrawal,
    resolve_withdrawal_date,
    split_by_payment_mode,
)

from conftest import FIXED_NOW, make_bill

DAY = FIXED_NOW.date()


@pytest.fixture
async def collected(db):
    """ravi: cash 200 (50 of it a donation), online 150, one earlier handover of 80"""
    db.add(User(username="ravi", password_hash="x", name="Ravi"))
    db.add_all([
        make_bill("SRI/25-26/1", "150", payment_mode="Cash"),
        make_bill("SRI/25-26/2", "50", pooja_name="Donation – Annadanam", payment_mode="Cash"),
        make_bill("SRI/25-26/3", "150", payment_mode="Online", reference_id="UPI1"),
        # other user / other day are not counted
        make_bill("SRI/25-26/4", "999", username="meena"),
        make_bill("SRI/25-26/5", "999", bill_date=DAY - timedelta(days=1)),
    ])
    await db.flush()
    await record_withdrawal(db, "ravi", "80", today=DAY, now=FIXED_NOW)
    return db


@pytest.mark.parametrize(
    "mode, online",
    [
        ("Online", True),
        ("online", True),
        ("UPI Online", True),
        ("ONLINE-GPay", True),
        ("Cash", False),
        ("UPI", False),
        ("", False),
        (None, False),
    ],
)
def test_online_mode_rule(mode, online):
    assert is_online_mode(mode) is online


def test_unknown_modes_count_as_cash():
    cash, online = split_by_payment_mode([("Cash", Decimal("10")), ("Card", Decimal("5")), ("Online", Decimal("7"))])

    assert cash == Decimal("15")
    assert online == Decimal("7")


@pytest.mark.parametrize("raw", ["abc", "", None, "12abc", "Infinity"])
def test_unparseable_handover_counts_as_zero(raw):
    assert coerce_handover_amount(raw, strict=False) == Decimal("0")


def test_strict_handover_rejects_garbage():
    with pytest.raises(ValidationFailed) as exc:
        coerce_handover_amount("abc", strict=True)
    assert exc.value.code == "INVALID_HANDOVER_AMOUNT"


@pytest.mark.parametrize("strict", [True, False])
@pytest.mark.parametrize("raw", ["1e30", "-1e30", "10000000000"])
def test_huge_handover_rejected(raw, strict):
    with pytest.raises(ValidationFailed) as exc:
        coerce_handover_amount(raw, strict=strict)
    assert exc.value.code == "INVALID_HANDOVER_AMOUNT"


def test_handover_amount_parsed():
    assert coerce_handover_amount(" 150.25 ") == Decimal("150.25")
    assert coerce_handover_amount(80) == Decimal("80")


def test_withdrawal_date_policy():
    today = date(2025, 6, 15)
    viewed = date(2025, 6, 10)

    assert resolve_withdrawal_date(today, viewed, policy="today") == today
    assert resolve_withdrawal_date(today, viewed, policy="viewed") == viewed
    assert resolve_withdrawal_date(today, None, policy="viewed") == today


async def test_daily_summary(collected):
    summary = await daily_summary(collected, "ravi", DAY)

    assert summary.cash == Decimal("200")
    assert summary.online == Decimal("150")
    assert summary.donation == Decimal("50")
    assert summary.total == Decimal("350")
    assert summary.withdrawn == Decimal("80")
    assert summary.remaining == Decimal("120")
    assert len(summary.withdrawals) == 1


async def test_daily_summary_is_read_only(collected):
    first = await daily_summary(collected, "ravi", DAY)
    second = await daily_summary(collected, "ravi", DAY)

    assert first.as_dict() == second.as_dict()
    withdrawals = (await collected.execute(select(Withdrawal))).scalars().all()
    assert len(withdrawals) == 1


async def test_withdrawal_snapshot_and_remaining(collected):
    withdrawal = await record_withdrawal(
        collected, "ravi", "100", today=DAY, now=FIXED_NOW + timedelta(minutes=5)
    )

    assert withdrawal.cash == Decimal("200")
    assert withdrawal.online == Decimal("150")
    assert withdrawal.donation == Decimal("50")
    assert withdrawal.handover == Decimal("100")
    assert withdrawal.remaining == Decimal("20")


async def test_overdraw_goes_negative(collected):
    withdrawal = await record_withdrawal(
        collected, "ravi", "150", today=DAY, now=FIXED_NOW + timedelta(minutes=5)
    )

    assert withdrawal.remaining == Decimal("-30")

    summary = await daily_summary(collected, "ravi", DAY)
    assert summary.withdrawn == Decimal("230")
    assert summary.remaining == Decimal("-30")


async def test_garbage_handover_records_zero(collected):
    withdrawal = await record_withdrawal(
        collected, "ravi", "abc", today=DAY, now=FIXED_NOW + timedelta(minutes=5)
    )

    assert withdrawal.handover == Decimal("0")
    assert withdrawal.remaining == Decimal("120")


async def test_withdrawals_listed_newest_first(collected):
    later = await record_withdrawal(
        collected, "ravi", "10", today=DAY, now=FIXED_NOW + timedelta(hours=1)
    )

    summary = await daily_summary(collected, "ravi", DAY)

    assert [w.id for w in summary.withdrawals][0] == later.id
    assert [w.handover for w in summary.withdrawals] == [Decimal("10"), Decimal("80")]


async def test_withdrawal_is_audited(collected):
    logs = (await collected.execute(
        select(AuditLog).where(AuditLog.action == AuditAction.WITHDRAWAL_CREATE)
    )).scalars().all()

    assert len(logs) == 1
    assert logs[0].username == "ravi"
    assert Decimal(logs[0].after_data["remaining"]) == Decimal("120")


async def test_empty_day(db):
    summary = await daily_summary(db, "nobody", DAY)

    assert summary.as_dict() == {
        "cash": Decimal("0"),
        "online": Decimal("0"),
        "donation": Decimal("0"),
        "total": Decimal("0"),
        "remaining": Decimal("0"),
        "withdrawn": Decimal("0"),
    }
    assert summary.withdrawals == []

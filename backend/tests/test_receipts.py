from datetime import date

from sqlalchemy import select

from temple_billing.models import ReceiptCounter
from temple_billing.services.receipts import last_issued_serial, next_receipt_number

from conftest import FIXED_NOW, make_bill

JUNE = date(2025, 6, 15)


async def test_first_receipt_of_year_is_one(db):
    receipt_no, fiscal_year = await next_receipt_number(db, JUNE)

    assert receipt_no == "SRI/25-26/1"
    assert fiscal_year == "25-26"


async def test_counter_stamped_with_business_time(db):
    await next_receipt_number(db, JUNE, FIXED_NOW)

    counter = (await db.execute(select(ReceiptCounter))).scalar_one()
    assert counter.updated_at == FIXED_NOW


async def test_continues_from_last_receipt(db):
    db.add(make_bill("SRI/25-26/41", "100"))
    await db.flush()

    receipt_no, _ = await next_receipt_number(db, JUNE)

    assert receipt_no == "SRI/25-26/42"


async def test_non_numeric_last_serial_restarts_at_one(db):
    db.add(make_bill("SRI/25-26/abc", "100"))
    await db.flush()

    receipt_no, _ = await next_receipt_number(db, JUNE)

    assert receipt_no == "SRI/25-26/1"


async def test_other_fiscal_years_are_ignored(db):
    db.add(make_bill("SRI/24-25/99", "100", bill_date=date(2025, 3, 31)))
    await db.flush()

    assert (await next_receipt_number(db, JUNE))[0] == "SRI/25-26/1"
    assert (await next_receipt_number(db, date(2025, 3, 31)))[0] == "SRI/24-25/100"


async def test_january_uses_previous_fiscal_year(db):
    receipt_no, fiscal_year = await next_receipt_number(db, date(2026, 1, 5))

    assert fiscal_year == "25-26"
    assert receipt_no == "SRI/25-26/1"


async def test_counter_increments_without_gaps(db):
    numbers = [(await next_receipt_number(db, JUNE))[0] for _ in range(3)]

    assert numbers == ["SRI/25-26/1", "SRI/25-26/2", "SRI/25-26/3"]

    result = await db.execute(select(ReceiptCounter).where(ReceiptCounter.fiscal_year == "25-26"))
    assert result.scalar_one().last_serial == 3


async def test_seed_order_insertion_vs_serial(db):
    db.add(make_bill("SRI/25-26/10", "100"))
    db.add(make_bill("SRI/25-26/3", "100"))
    await db.flush()

    assert await last_issued_serial(db, "25-26", order="insertion") == 3
    assert await last_issued_serial(db, "25-26", order="serial") == 10


async def test_serial_order_skips_non_numeric(db):
    db.add(make_bill("SRI/25-26/5", "100"))
    db.add(make_bill("SRI/25-26/x9", "100"))
    await db.flush()

    assert await last_issued_serial(db, "25-26", order="serial") == 5
    assert await last_issued_serial(db, "25-26", order="insertion") == 0


async def test_existing_counter_is_not_reseeded(db):
    await next_receipt_number(db, JUNE)
    # a bill numbered outside the counter does not move it
    db.add(make_bill("SRI/25-26/500", "100"))
    await db.flush()

    receipt_no, _ = await next_receipt_number(db, JUNE)

    assert receipt_no == "SRI/25-26/2"

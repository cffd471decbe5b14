"""
Temple Billing - Billing model
One row per pooja sale or donation, numbered per fiscal year
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Integer, String, Boolean, Date, DateTime, Numeric, Index
from sqlalchemy.orm import Mapped, mapped_column

from temple_billing.core.database import Base


class Billing(Base):
    """Billing transactions table"""

    __tablename__ = "billing"

    # Insertion order; the receipt counter is seeded from the highest id
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    devotee_name: Mapped[str | None] = mapped_column(String(200), nullable=True, comment="devotee name")
    pooja_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="pooja name, or 'Donation – <purpose>'"
    )
    qty: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, comment="unit price")
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, comment="price x qty")

    receipt_no: Mapped[str] = mapped_column(
        String(40),
        unique=True,
        nullable=False,
        comment="SRI/<fiscal year>/<serial>"
    )
    fiscal_year: Mapped[str] = mapped_column(String(5), nullable=False, comment="e.g. 25-26")

    bill_date: Mapped[date] = mapped_column(Date, nullable=False, comment="business date")
    bill_datetime: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    username: Mapped[str] = mapped_column(String(50), nullable=False, comment="issuing user")

    payment_mode: Mapped[str] = mapped_column(String(30), nullable=False, default="Cash")
    reference_id: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        comment="payment reference, online payments only"
    )

    # Legacy flag, never set; reconciliation uses the withdrawals table
    withdrawn: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        Index("ix_billing_user_date", "username", "bill_date"),
        Index("ix_billing_bill_date", "bill_date"),
    )

    def __repr__(self) -> str:
        return f"<Billing(id={self.id}, receipt_no={self.receipt_no}, total={self.total})>"

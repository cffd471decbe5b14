"""
Temple Billing - Withdrawal model
Cash handover events: a snapshot of the day's totals plus the amount handed over
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Integer, String, Date, DateTime, Numeric, Index
from sqlalchemy.orm import Mapped, mapped_column

from temple_billing.core.database import Base


class Withdrawal(Base):
    """Cash handover table (insert only)"""

    __tablename__ = "withdrawals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(String(50), nullable=False)
    withdrawal_date: Mapped[date] = mapped_column(Date, nullable=False, comment="business date handed over against")

    # snapshot at the time of the handover
    cash: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    online: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    donation: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)

    handover: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, comment="amount handed over")
    remaining: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        comment="cash - (earlier handovers + handover), may be negative"
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_withdrawals_user_date", "username", "withdrawal_date"),
    )

    def __repr__(self) -> str:
        return f"<Withdrawal(id={self.id}, username={self.username}, handover={self.handover})>"

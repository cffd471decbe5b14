"""
Temple Billing - Expense model
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Integer, String, Date, DateTime, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from temple_billing.core.database import Base


class Expense(Base):
    """Temple expenses table"""

    __tablename__ = "expenses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    expense_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    purpose: Mapped[str] = mapped_column(String(500), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    added_by: Mapped[str] = mapped_column(String(50), nullable=False, default="Admin")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Expense(id={self.id}, date={self.expense_date}, amount={self.amount})>"

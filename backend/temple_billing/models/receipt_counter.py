"""
Temple Billing - ReceiptCounter model
Last issued receipt serial per fiscal year
"""

from datetime import datetime

from sqlalchemy import Integer, String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from temple_billing.core.database import Base


class ReceiptCounter(Base):
    """Receipt counters table (one row per fiscal year)"""

    __tablename__ = "receipt_counters"

    fiscal_year: Mapped[str] = mapped_column(String(5), primary_key=True, comment="e.g. 25-26")
    last_serial: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<ReceiptCounter(fiscal_year={self.fiscal_year}, last_serial={self.last_serial})>"

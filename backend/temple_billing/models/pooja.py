"""
Temple Billing - Pooja model
Item catalog (pooja master): name, unit price, visibility on the billing form
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Integer, String, Boolean, DateTime, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from temple_billing.core.database import Base


class Pooja(Base):
    """Pooja master table"""

    __tablename__ = "poojas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False, comment="pooja name")
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, comment="unit price")
    visible: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        comment="shown on the billing form"
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Pooja(id={self.id}, name={self.name}, price={self.price})>"

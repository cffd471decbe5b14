"""
Temple Billing - AuditLog model
Who did what, when, with before/after data
"""

from datetime import datetime

from sqlalchemy import Integer, String, DateTime, Text, JSON, Enum as SQLEnum, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from temple_billing.core.database import Base
from temple_billing.models.enums import AuditAction


# JSONB on PostgreSQL, plain JSON elsewhere
JSONData = JSON().with_variant(JSONB(), "postgresql")


class AuditLog(Base):
    """Audit log table"""

    __tablename__ = "audit_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(String(50), nullable=False, comment="acting user")

    action: Mapped[AuditAction] = mapped_column(
        SQLEnum(AuditAction, name="audit_action"),
        nullable=False,
    )

    # target
    target_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="e.g. billing, pooja, withdrawal, expense, user"
    )
    target_id: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # change
    before_data: Mapped[dict | None] = mapped_column(JSONData, nullable=True)
    after_data: Mapped[dict | None] = mapped_column(JSONData, nullable=True)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        index=True,
    )

    __table_args__ = (
        Index("ix_audit_logs_user_created", "username", "created_at"),
        Index("ix_audit_logs_action_created", "action", "created_at"),
        Index("ix_audit_logs_target", "target_type", "target_id"),
    )

    def __repr__(self) -> str:
        return f"<AuditLog(id={self.id}, action={self.action}, target={self.target_type})>"

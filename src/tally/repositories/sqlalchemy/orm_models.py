"""SQLAlchemy ORM model definitions.

The tables themselves are created by ``migrations``; these classes map onto
them for querying and must stay in step with the migration DDL.
"""

from sqlalchemy import (
    Column,
    String,
    DateTime,
    Boolean,
    Float,
    Text,
    ForeignKey,
    UniqueConstraint,
    Enum as SqlEnum,
)
from sqlalchemy.orm import relationship

from tally.repositories.sqlalchemy.database import Base
from tally.domain.models.enums import AccountType, AccountCategory


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class AccountORM(Base):
    """SQLAlchemy model for Account."""

    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True)
    name = Column(Text, nullable=False)
    account_type = Column(
        SqlEnum(AccountType, native_enum=False, values_callable=_enum_values, length=20),
        nullable=False,
    )
    category = Column(
        SqlEnum(AccountCategory, native_enum=False, values_callable=_enum_values, length=20),
        nullable=False,
    )
    institution = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    currency = Column(String(3), nullable=False, default="GBP")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    balance_entries = relationship(
        "BalanceEntryORM",
        back_populates="account",
        passive_deletes=True,
    )


class BalanceEntryORM(Base):
    """SQLAlchemy model for BalanceEntry."""

    __tablename__ = "balance_entries"
    __table_args__ = (UniqueConstraint("account_id", "date"),)

    id = Column(String(36), primary_key=True)
    account_id = Column(
        String(36),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    )
    date = Column(String(10), nullable=False)
    balance = Column(Float, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False)

    account = relationship("AccountORM", back_populates="balance_entries")


class MilestoneORM(Base):
    """SQLAlchemy model for Milestone."""

    __tablename__ = "milestones"

    id = Column(String(36), primary_key=True)
    date = Column(String(10), nullable=False)
    label = Column(Text, nullable=False)
    account_id = Column(
        String(36),
        ForeignKey("accounts.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at = Column(DateTime, nullable=False)

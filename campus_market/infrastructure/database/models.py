"""
SQLAlchemy ORM models.

These are purely infrastructure concerns — domain entities are mapped to/from
these models inside the repository implementations.
"""
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campus_market.domain.enums.listing_condition import ListingCondition
from campus_market.domain.enums.listing_status import ListingStatus
from campus_market.infrastructure.database.connection import Base

_listing_status_enum = SAEnum(
    ListingStatus,
    name="listing_status",
    values_callable=lambda obj: [e.value for e in obj],
)

_listing_condition_enum = SAEnum(
    ListingCondition,
    name="listing_condition",
    values_callable=lambda obj: [e.value for e in obj],
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CategoryModel(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)


class UserModel(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    display_name: Mapped[str] = mapped_column(String(256), nullable=False)


class ListingModel(Base):
    __tablename__ = "listings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Item data
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    condition: Mapped[ListingCondition] = mapped_column(_listing_condition_enum, nullable=False)

    # References
    category_id: Mapped[int] = mapped_column(
        ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    seller_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Lifecycle
    status: Mapped[ListingStatus] = mapped_column(_listing_status_enum, nullable=False, index=True)
    status_changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now()
    )

    status_history: Mapped[list["ListingStatusHistoryModel"]] = relationship(
        "ListingStatusHistoryModel",
        back_populates="listing",
        cascade="all, delete-orphan",
        lazy="select",
    )

    __table_args__ = (
        Index("ix_listings_status_category", "status", "category_id"),
    )


class ListingStatusHistoryModel(Base):
    __tablename__ = "listing_status_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    listing_id: Mapped[int] = mapped_column(
        ForeignKey("listings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    from_status: Mapped[ListingStatus | None] = mapped_column(_listing_status_enum, nullable=True)
    to_status: Mapped[ListingStatus] = mapped_column(_listing_status_enum, nullable=False)
    transitioned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now()
    )
    triggered_by: Mapped[str] = mapped_column(String(256), nullable=False)

    listing: Mapped[ListingModel] = relationship("ListingModel", back_populates="status_history")

"""Order model for checkout snapshots"""
from __future__ import annotations

from sqlalchemy import String, Integer, Enum, DateTime, Boolean, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
import enum
from storefront.database import Base
from storefront.core.datetime_utils import utc_now


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    CONTACTED = "contacted"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    # Human readable id shown to customers, e.g. ORD-1718000000000
    order_id: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)

    # Frozen copies of the cart and its breakdown
    items: Mapped[list] = mapped_column(JSON, nullable=False)
    subtotal: Mapped[int] = mapped_column(Integer, nullable=False)
    shipping_total: Mapped[int] = mapped_column(Integer, nullable=False)
    shipping_line_items: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    grand_total: Mapped[int] = mapped_column(Integer, nullable=False)

    status: Mapped[OrderStatus] = mapped_column(
        Enum(OrderStatus, values_callable=lambda e: [m.value for m in e]),
        default=OrderStatus.PENDING,
        nullable=False,
        index=True,
    )
    admin_notes: Mapped[str] = mapped_column(Text, default="", nullable=False)
    whatsapp_sent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    invoice_generated: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    invoice_generated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    def __repr__(self):
        return f"<Order(id={self.id}, order_id={self.order_id}, status={self.status})>"

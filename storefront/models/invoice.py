"""Invoice log entries written whenever an invoice is generated for an order"""
from __future__ import annotations

from sqlalchemy import String, Integer, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from storefront.database import Base
from storefront.core.datetime_utils import utc_now


class InvoiceRecord(Base):
    __tablename__ = "invoices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    invoice_id: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    order_id: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    generated_by: Mapped[str] = mapped_column(String(100), nullable=False, default="admin")
    generated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)
    order_total: Mapped[int] = mapped_column(Integer, nullable=False)
    order_items: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    def __repr__(self):
        return f"<InvoiceRecord(invoice_id={self.invoice_id}, order_id={self.order_id})>"

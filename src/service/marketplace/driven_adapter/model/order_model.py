from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class OrderModel(Base):
    __tablename__ = 'orders'

    # Record field name -> column attribute
    FIELD_COLUMNS = {
        'productId': 'product_id',
        'productName': 'product_name',
        'buyerId': 'buyer_id',
        'sellerId': 'seller_id',
        'quantity': 'quantity',
        'totalPrice': 'total_price',
        'shippingAddress': 'shipping_address',
        'status': 'status',
        'orderDate': 'order_date',
        'updatedAt': 'updated_at',
    }

    id: Mapped[str] = mapped_column(String(36), primary_key=True)  # UUID7
    # No foreign key: deleting a product leaves its orders intact
    product_id: Mapped[str] = mapped_column(String(36), nullable=False)
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    buyer_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    seller_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    total_price: Mapped[float] = mapped_column(Float, nullable=False)
    shipping_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default='Pending', nullable=False)
    order_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    revision: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self):
        return f'<OrderModel(id={self.id}, product_id={self.product_id}, status={self.status})>'

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Integer, Numeric, text
from sqlalchemy.orm import relationship
from app.infrastructure.db.base import Base

class Order(Base):
    __tablename__ = "orders"
    order_id = Column(String(16), primary_key=True)
    user_id = Column(String(32), index=True, nullable=False)
    customer_name = Column(String(200), nullable=False)
    delivery_address = Column(Text, nullable=False)
    delivery_location = Column(Text, nullable=False)
    billing_address = Column(Text, nullable=False)
    status = Column(String(30), nullable=False, default="Placed", server_default="Placed")
    total = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"))
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

class OrderItem(Base):
    __tablename__ = "order_items"
    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String(16), ForeignKey("orders.order_id", ondelete="CASCADE"), index=True, nullable=False)
    product_id = Column(Integer, nullable=False)
    product_name = Column(String(200), nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
    subtotal = Column(Numeric(12, 2), nullable=False)
    order = relationship("Order", back_populates="items")

class SupportTicket(Base):
    __tablename__ = "support_tickets"
    ticket_number = Column(String(16), primary_key=True)
    user_id = Column(String(32), index=True, nullable=False)
    name = Column(String(200), nullable=False)
    order_number = Column(String(32), nullable=True)
    topic = Column(String(50), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="Open", server_default="Open")
    created_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"))

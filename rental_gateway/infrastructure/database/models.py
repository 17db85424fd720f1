"""SQLAlchemy ORM models for the rental back-office tables"""

import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Integer, Numeric, ForeignKey, Text, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

MONEY = Numeric(12, 2)
# Unrounded pricing components; agreement drafts re-derive totals from them
AMOUNT = Numeric(18, 6)


class Vehicle(Base):
    """Fleet vehicle with its rate card"""

    __tablename__ = "vehicles"

    id = Column(Text, primary_key=True)
    registration_number = Column(String(20), nullable=True, unique=True)
    make = Column(Text, nullable=True)
    model = Column(Text, nullable=True)
    daily_rate = Column(MONEY, nullable=True)
    weekly_rate = Column(MONEY, nullable=True)
    monthly_rate = Column(MONEY, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Customer(Base):
    """Customer profile with credit limit"""

    __tablename__ = "customers"

    id = Column(Text, primary_key=True)
    full_name = Column(Text, nullable=True)
    customer_type = Column(Text, nullable=True)  # individual | business | corporate
    credit_limit = Column(MONEY, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class InstantBookingRule(Base):
    """Auto-approval rule per customer type"""

    __tablename__ = "instant_booking_rules"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    customer_type = Column(Text, nullable=False, index=True)
    max_auto_approve_amount = Column(MONEY, nullable=True)
    max_rental_days = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Reservation(Base):
    """Instant-booking reservation created from a confirmed quote"""

    __tablename__ = "reservations"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    ro_number = Column(Text, nullable=False, unique=True)
    customer_id = Column(Text, nullable=False, index=True)
    vehicle_id = Column(Text, ForeignKey("vehicles.id"), nullable=False)
    start_datetime = Column(DateTime(timezone=True), nullable=False)
    end_datetime = Column(DateTime(timezone=True), nullable=False)
    pickup_location = Column(Text, nullable=True)
    return_location = Column(Text, nullable=True)
    booking_type = Column(Text, nullable=False, default="INSTANT")
    rate_type = Column(Text, nullable=False)
    days = Column(Integer, nullable=False)
    base_amount = Column(AMOUNT, nullable=False)
    discount_value = Column(AMOUNT, nullable=False, default=0)
    tax_amount = Column(AMOUNT, nullable=False)
    total_amount = Column(MONEY, nullable=False)
    add_ons = Column(JSON, nullable=False, default=list)
    auto_approved = Column(Boolean, nullable=False, default=False)
    approval_reason = Column(Text, nullable=True)
    status = Column(Text, nullable=False, default="pending_approval")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

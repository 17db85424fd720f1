"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from rental_gateway.api.main import create_app
from rental_gateway.infrastructure.database.models import Base, Customer, InstantBookingRule, Vehicle
from rental_gateway.infrastructure.database.session import get_db
from rental_gateway.domain.models import RentalRequest, VehicleRateCard


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PICKUP = datetime(2025, 3, 1, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seeded_db(db: Session) -> Session:
    """Fleet, customers and auto-approval rules used by the API tests"""
    db.add_all(
        [
            Vehicle(id="veh_economy", registration_number="D 10001", make="Nissan", model="Sunny",
                    daily_rate=Decimal("100")),
            Vehicle(id="veh_tiered", registration_number="D 10002", make="Toyota", model="Camry",
                    daily_rate=Decimal("100"), weekly_rate=Decimal("600"), monthly_rate=Decimal("2400")),
            Vehicle(id="veh_unpriced", registration_number="D 10003", make="Kia", model="Picanto"),
            Vehicle(id="veh_midsize", registration_number="D 10004", make="Mazda", model="6",
                    daily_rate=Decimal("85.50")),
            Customer(id="cust_business", full_name="Gulf Trading LLC", customer_type="business",
                     credit_limit=Decimal("1000")),
            Customer(id="cust_corporate", full_name="Emirates Holdings", customer_type="corporate",
                     credit_limit=Decimal("100000")),
            InstantBookingRule(customer_type="business", max_auto_approve_amount=Decimal("2000"),
                               is_active=True),
            InstantBookingRule(customer_type="corporate", max_auto_approve_amount=Decimal("100000"),
                               max_rental_days=14, is_active=True),
        ]
    )
    db.commit()
    return db


@pytest.fixture
def client(seeded_db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield seeded_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def tiered_rate_card() -> VehicleRateCard:
    """Daily 100, weekly 600, monthly 2400"""
    return VehicleRateCard(
        daily_rate=Decimal("100"),
        weekly_rate=Decimal("600"),
        monthly_rate=Decimal("2400"),
    )


@pytest.fixture
def make_request():
    """Build a RentalRequest of `days` days starting at a fixed pickup time"""

    def _make(days: int, **overrides) -> RentalRequest:
        fields = {
            "pickup_at": PICKUP,
            "return_at": PICKUP + timedelta(days=days),
            "vehicle_id": "veh_tiered",
            "customer_id": "cust_1",
        }
        fields.update(overrides)
        return RentalRequest(**fields)

    return _make


@pytest.fixture
def instant_booking() -> dict:
    """Instant booking as returned by the hosted backend"""
    return {
        "id": "ib_001",
        "ro_number": "RO-20250301-0001",
        "booking_type": "INSTANT",
        "status": "confirmed",
        "customer_id": "cust_business",
        "start_datetime": "2025-03-01T10:00:00Z",
        "end_datetime": "2025-03-11T10:00:00Z",
        "pickup_location": "loc_dxb_airport",
        "return_location": "loc_marina",
        "rate_plan": {"base_rate": 1200, "insurance_cost": 150, "maintenance_cost": 50},
        "add_ons": [
            {"id": "gps", "name": "GPS", "category": "equipment", "quantity": 1, "unit_price": 30},
            {"addonId": "child_seat", "name": "Child seat", "quantity": 2, "unitPrice": 25},
        ],
        "discount_value": 100,
        "mileage_package": {"type": "limited", "included_km": 2500, "excess_rate": 0.5},
        "cross_border_permits": {"allowed": True, "countries": ["OM"]},
        "salik_package": {"account_no": "SLK-42"},
        "down_payment_amount": 500,
        "down_payment_status": "paid",
        "down_payment_method": "card",
        "security_deposit_paid": 1000,
        "bill_to_type": "corporate",
        "bill_to_meta": {"company_id": "co_9", "contacts": ["ap@example.com"]},
    }

"""Data access layer for pricing inputs and reservations"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from rental_gateway.infrastructure.database.models import Customer, InstantBookingRule, Reservation, Vehicle
from rental_gateway.domain.models import AddOnCharge, CustomerCategory, PricingBreakdown, VehicleRateCard


class VehicleRepository:
    """Repository for vehicles and their rate cards"""

    def __init__(self, db: Session):
        self.db = db

    def get_rate_card(self, vehicle_id: str) -> Optional[VehicleRateCard]:
        """Rate card for a vehicle, or None when the vehicle does not exist"""
        vehicle = self.db.get(Vehicle, vehicle_id)
        if vehicle is None:
            return None
        return VehicleRateCard(
            daily_rate=vehicle.daily_rate,
            weekly_rate=vehicle.weekly_rate,
            monthly_rate=vehicle.monthly_rate,
        )


class CustomerRepository:
    """Repository for customer profiles"""

    def __init__(self, db: Session):
        self.db = db

    def get_credit_limit(self, customer_id: str) -> Optional[Decimal]:
        customer = self.db.get(Customer, customer_id)
        return customer.credit_limit if customer else None


class RuleRepository:
    """Repository for instant-booking auto-approval rules"""

    def __init__(self, db: Session):
        self.db = db

    def get_active_rule(self, category: Optional[CustomerCategory]) -> Optional[InstantBookingRule]:
        """Most recently created active rule for a customer category"""
        if category is None:
            return None
        return (
            self.db.query(InstantBookingRule)
            .filter(
                InstantBookingRule.customer_type == category.value,
                InstantBookingRule.is_active.is_(True),
            )
            .order_by(InstantBookingRule.created_at.desc())
            .first()
        )


class ReservationRepository:
    """Repository for instant-booking reservations"""

    def __init__(self, db: Session):
        self.db = db

    def create_reservation(
        self,
        ro_number: str,
        customer_id: str,
        vehicle_id: str,
        start_datetime: datetime,
        end_datetime: datetime,
        pickup_location: Optional[str],
        return_location: Optional[str],
        add_ons: List[AddOnCharge],
        pricing: PricingBreakdown,
        auto_approved: bool,
        approval_reason: Optional[str],
    ) -> Reservation:
        """Persist a priced reservation; status follows the approval outcome"""
        db_reservation = Reservation(
            ro_number=ro_number,
            customer_id=customer_id,
            vehicle_id=vehicle_id,
            start_datetime=start_datetime,
            end_datetime=end_datetime,
            pickup_location=pickup_location,
            return_location=return_location,
            booking_type="INSTANT",
            rate_type=pricing.rate_tier.value,
            days=pricing.days,
            base_amount=pricing.base_amount,
            discount_value=pricing.discount_amount,
            tax_amount=pricing.tax_amount,
            total_amount=pricing.presented_total,
            add_ons=[
                {
                    "id": a.addon_id,
                    "unit_price": str(a.unit_price),
                    "quantity": a.quantity,
                    "total": str(a.unit_price * a.quantity),
                }
                for a in add_ons
            ],
            auto_approved=auto_approved,
            approval_reason=approval_reason,
            status="confirmed" if auto_approved else "pending_approval",
        )
        self.db.add(db_reservation)
        self.db.flush()  # Get ID without committing
        return db_reservation

    def get_reservation(self, reservation_id: uuid.UUID) -> Optional[Reservation]:
        return (
            self.db.query(Reservation)
            .filter(Reservation.id == reservation_id)
            .first()
        )

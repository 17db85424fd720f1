"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from rental_gateway.domain.models import AddOnCharge, CustomerCategory, PricingBreakdown, RentalRequest
from rental_gateway.utils.money import round_currency


class AddOnItem(BaseModel):
    """Selected add-on with per-unit price"""

    addon_id: str = Field(..., min_length=1)
    unit_price: Decimal = Field(..., ge=0)
    quantity: int = Field(1, ge=1)


class QuoteRequest(BaseModel):
    """Request body for POST /v1/pricing/quote"""

    vehicle_id: str = Field(..., min_length=1, description="Vehicle identifier")
    customer_id: str = Field(..., min_length=1, description="Customer identifier")
    customer_type: Optional[CustomerCategory] = Field(
        None, description="individual | business | corporate (B2C, B2B, CORPORATE accepted)"
    )
    pickup_datetime: datetime
    return_datetime: datetime
    add_ons: List[AddOnItem] = Field(default_factory=list)

    @field_validator("customer_type", mode="before")
    @classmethod
    def parse_customer_type(cls, value):
        return CustomerCategory.parse(value)

    def to_rental_request(self) -> RentalRequest:
        return RentalRequest(
            pickup_at=self.pickup_datetime,
            return_at=self.return_datetime,
            vehicle_id=self.vehicle_id,
            customer_id=self.customer_id,
            customer_category=self.customer_type,
            add_ons=tuple(
                AddOnCharge(addon_id=a.addon_id, unit_price=a.unit_price, quantity=a.quantity)
                for a in self.add_ons
            ),
        )


class ReservationRequest(QuoteRequest):
    """Request body for POST /v1/reservations"""

    pickup_location: Optional[str] = None
    return_location: Optional[str] = None


class ApprovalSchema(BaseModel):
    approved: bool
    effective_limit: float
    reason: Optional[str] = None


class PricingSchema(BaseModel):
    """Pricing breakdown rounded to currency precision"""

    days: int
    rate_tier: str
    unit_rate: float
    base_amount: float
    addon_total: float
    discount_amount: float
    discounted_base: float
    subtotal: float
    tax_amount: float
    total: float
    approval: ApprovalSchema

    @classmethod
    def from_breakdown(cls, pricing: PricingBreakdown) -> "PricingSchema":
        def money(value: Decimal) -> float:
            return float(round_currency(value))

        return cls(
            days=pricing.days,
            rate_tier=pricing.rate_tier.value,
            unit_rate=money(pricing.unit_rate),
            base_amount=money(pricing.base_amount),
            addon_total=money(pricing.addon_total),
            discount_amount=money(pricing.discount_amount),
            discounted_base=money(pricing.discounted_base),
            subtotal=money(pricing.subtotal),
            tax_amount=money(pricing.tax_amount),
            total=money(pricing.total),
            approval=ApprovalSchema(
                approved=pricing.approval.approved,
                effective_limit=money(pricing.approval.effective_limit),
                reason=pricing.approval.reason,
            ),
        )


class QuoteResponse(BaseModel):
    """Response for POST /v1/pricing/quote"""

    vehicle_id: str
    customer_id: str
    currency: str
    pricing: PricingSchema


class ReservationResponse(BaseModel):
    """Response for POST /v1/reservations and GET /v1/reservations/{id}"""

    reservation_id: str
    ro_number: str
    customer_id: str
    vehicle_id: str
    status: str
    auto_approved: bool
    approval_reason: Optional[str] = None
    rate_type: str
    days: int
    total_amount: float
    created_at: Optional[str] = None
    pricing: Optional[PricingSchema] = None

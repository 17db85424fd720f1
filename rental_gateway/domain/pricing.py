"""Instant-booking pricing engine - rate, discount, tax and auto-approval in one breakdown"""

from decimal import Decimal
from typing import Iterable, Optional

from rental_gateway.domain.models import (
    AddOnCharge,
    ApprovalInputs,
    CustomerCategory,
    PricingBreakdown,
    PricingConfig,
    RentalRequest,
    VehicleRateCard,
)
from rental_gateway.domain.exceptions import InvalidAmountError
from rental_gateway.domain.rates import rental_day_count, select_rate
from rental_gateway.domain.approval import evaluate_auto_approval

ZERO = Decimal("0")


def customer_discount(
    base_amount: Decimal,
    category: Optional[CustomerCategory],
    config: PricingConfig,
) -> Decimal:
    """
    Category discount on the base rental amount (never on add-ons).

    One fixed percentage per category, no stacking; categories without a
    configured rate get 0.
    """
    if base_amount < 0:
        raise InvalidAmountError(f"Base amount must not be negative, got {base_amount}")
    if category is None:
        return ZERO
    return base_amount * config.discount_rates.get(category, ZERO)


def calculate_tax(subtotal: Decimal, config: PricingConfig) -> Decimal:
    """VAT on the discounted subtotal; unrounded"""
    return subtotal * config.tax_rate


def addon_total(add_ons: Iterable[AddOnCharge]) -> Decimal:
    return sum((a.unit_price * a.quantity for a in add_ons), ZERO)


def compute_pricing(
    request: RentalRequest,
    rate_card: VehicleRateCard,
    approval_inputs: Optional[ApprovalInputs] = None,
    config: Optional[PricingConfig] = None,
) -> PricingBreakdown:
    """
    Main entry point: price a rental request and evaluate auto-approval.

    Order of computation (consumers display each step):
    1. Day count from the request timestamps
    2. Base amount and tier from the rate card
    3. Add-on total (no discount on add-ons)
    4. Category discount on the base amount
    5. Subtotal = base - discount + add-ons
    6. Tax on the subtotal
    7. Total = subtotal + tax
    8. Auto-approval against the effective limit

    Example:
        10 days, daily 100, weekly 600, 10% discount
        base 1200, discount 120, subtotal 1080, tax 54, total 1134
    """
    config = config or PricingConfig()
    approval_inputs = approval_inputs or ApprovalInputs()

    days = rental_day_count(request.pickup_at, request.return_at)
    rate = select_rate(rate_card, days)
    addons = addon_total(request.add_ons)
    discount = customer_discount(rate.amount, request.customer_category, config)

    discounted_base = rate.amount - discount
    subtotal = discounted_base + addons
    tax = calculate_tax(subtotal, config)
    total = subtotal + tax

    approval = evaluate_auto_approval(
        total,
        approval_inputs.customer_credit_limit,
        approval_inputs.rule_max_amount,
        config,
    )

    return PricingBreakdown(
        days=days,
        rate_tier=rate.tier,
        unit_rate=rate.unit_rate,
        base_amount=rate.amount,
        addon_total=addons,
        discount_amount=discount,
        discounted_base=discounted_base,
        subtotal=subtotal,
        tax_amount=tax,
        total=total,
        approval=approval,
    )

"""POST /v1/pricing/quote - instant-booking pricing and auto-approval"""

import time
import logging
from dataclasses import replace
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from rental_gateway.api.v1.schemas import QuoteRequest, QuoteResponse, PricingSchema
from rental_gateway.api.dependencies import get_pricing_config, get_request_id
from rental_gateway.infrastructure.database.session import get_db
from rental_gateway.infrastructure.database.repositories import (
    CustomerRepository,
    RuleRepository,
    VehicleRepository,
)
from rental_gateway.domain.models import ApprovalInputs, PricingBreakdown, PricingConfig, RentalRequest
from rental_gateway.domain.pricing import compute_pricing
from rental_gateway.domain.approval import enforce_max_rental_days
from rental_gateway.domain.exceptions import InvalidAmountError, InvalidDurationError, MissingRateError
from rental_gateway.infrastructure.observability.metrics import record_quote
from rental_gateway.infrastructure.observability.logging import log_quote

router = APIRouter()

PRICING_ERRORS = (InvalidDurationError, MissingRateError, InvalidAmountError)


def price_rental(db: Session, rental: RentalRequest, config: PricingConfig) -> PricingBreakdown:
    """
    Resolve the rate card, credit limit and rule for a request, then price it.

    Raises:
        HTTPException(404): unknown vehicle
        InvalidDurationError, MissingRateError, InvalidAmountError: from the pricing core
    """
    rate_card = VehicleRepository(db).get_rate_card(rental.vehicle_id)
    if rate_card is None:
        raise HTTPException(status_code=404, detail="Vehicle not found")

    credit_limit = CustomerRepository(db).get_credit_limit(rental.customer_id)
    rule = RuleRepository(db).get_active_rule(rental.customer_category)

    pricing = compute_pricing(
        rental,
        rate_card,
        ApprovalInputs(
            customer_credit_limit=credit_limit,
            rule_max_amount=rule.max_auto_approve_amount if rule else None,
        ),
        config,
    )

    if rule is not None and rule.max_rental_days:
        approval = enforce_max_rental_days(pricing.approval, pricing.days, rule.max_rental_days)
        pricing = replace(pricing, approval=approval)

    return pricing


@router.post("/pricing/quote", response_model=QuoteResponse)
def create_quote(
    request_body: QuoteRequest,
    request: Request,
    db: Session = Depends(get_db),
    config: PricingConfig = Depends(get_pricing_config),
):
    """
    Price a rental and report whether it qualifies for auto-approval.

    Nothing is persisted; the client re-quotes on every input change.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        pricing = price_rental(db, request_body.to_rental_request(), config)
    except PRICING_ERRORS as e:
        logging.warning(f"Pricing rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    total = float(pricing.presented_total)
    duration_ms = (time.time() - start_time) * 1000
    record_quote(pricing.rate_tier.value, pricing.approval.approved, total)
    log_quote(
        request_id,
        request_body.customer_id,
        request_body.vehicle_id,
        pricing.rate_tier.value,
        total,
        pricing.approval.approved,
        duration_ms,
    )

    return QuoteResponse(
        vehicle_id=request_body.vehicle_id,
        customer_id=request_body.customer_id,
        currency=config.currency,
        pricing=PricingSchema.from_breakdown(pricing),
    )

"""Instant-booking reservations: create, fetch and convert to agreement drafts"""

import uuid
import time
import secrets
import logging
from datetime import datetime, timezone
from typing import Any, Dict
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from rental_gateway.api.v1.schemas import PricingSchema, ReservationRequest, ReservationResponse
from rental_gateway.api.v1.pricing import PRICING_ERRORS, price_rental
from rental_gateway.api.dependencies import get_pricing_config, get_request_id
from rental_gateway.infrastructure.database.session import get_db
from rental_gateway.infrastructure.database.models import Reservation
from rental_gateway.infrastructure.database.repositories import ReservationRepository
from rental_gateway.domain.models import PricingConfig
from rental_gateway.domain.agreement_mapper import map_to_agreement_draft
from rental_gateway.domain.exceptions import MissingCustomerError
from rental_gateway.infrastructure.observability.metrics import (
    agreement_draft_counter,
    record_quote,
    reservation_counter,
)
from rental_gateway.infrastructure.observability.logging import log_agreement_draft, log_quote

router = APIRouter()


def generate_ro_number() -> str:
    """Reservation order number: RO-<UTC timestamp>-<6 hex chars>"""
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    return f"RO-{stamp}-{secrets.token_hex(3).upper()}"


def reservation_to_booking(reservation: Reservation) -> Dict[str, Any]:
    """Stored reservation as a booking record the agreement mapper understands"""
    return {
        "id": str(reservation.id),
        "customer_id": reservation.customer_id,
        "vehicle_id": reservation.vehicle_id,
        "days": reservation.days,
        "start_datetime": reservation.start_datetime.isoformat(),
        "end_datetime": reservation.end_datetime.isoformat(),
        "pickup_location": reservation.pickup_location,
        "return_location": reservation.return_location,
        "rate_plan": {"base_rate": str(reservation.base_amount)},
        "discount_value": str(reservation.discount_value),
        "add_ons": list(reservation.add_ons or []),
    }


def _to_response(reservation: Reservation, pricing: PricingSchema | None = None) -> ReservationResponse:
    return ReservationResponse(
        reservation_id=str(reservation.id),
        ro_number=reservation.ro_number,
        customer_id=reservation.customer_id,
        vehicle_id=reservation.vehicle_id,
        status=reservation.status,
        auto_approved=reservation.auto_approved,
        approval_reason=reservation.approval_reason,
        rate_type=reservation.rate_type,
        days=reservation.days,
        total_amount=float(reservation.total_amount),
        created_at=reservation.created_at.isoformat() if reservation.created_at else None,
        pricing=pricing,
    )


def _load_reservation(db: Session, reservation_id: str) -> Reservation:
    try:
        reservation_uuid = uuid.UUID(reservation_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid reservation ID format")

    reservation = ReservationRepository(db).get_reservation(reservation_uuid)
    if not reservation:
        raise HTTPException(status_code=404, detail="Reservation not found")
    return reservation


@router.post("/reservations", response_model=ReservationResponse, status_code=201)
def create_reservation(
    request_body: ReservationRequest,
    request: Request,
    db: Session = Depends(get_db),
    config: PricingConfig = Depends(get_pricing_config),
):
    """
    Price and store an instant-booking reservation.

    Flow:
    1. Price the request (same rules as /pricing/quote)
    2. Persist with status confirmed (auto-approved) or pending_approval
    3. Return the stored reservation with its breakdown
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        pricing = price_rental(db, request_body.to_rental_request(), config)
    except PRICING_ERRORS as e:
        logging.warning(f"Reservation rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    try:
        reservation = ReservationRepository(db).create_reservation(
            ro_number=generate_ro_number(),
            customer_id=request_body.customer_id,
            vehicle_id=request_body.vehicle_id,
            start_datetime=request_body.pickup_datetime,
            end_datetime=request_body.return_datetime,
            pickup_location=request_body.pickup_location,
            return_location=request_body.return_location,
            add_ons=list(request_body.to_rental_request().add_ons),
            pricing=pricing,
            auto_approved=pricing.approval.approved,
            approval_reason=pricing.approval.reason,
        )
        db.commit()
        db.refresh(reservation)
    except Exception as e:
        db.rollback()
        logging.error(f"Reservation persistence failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    total = float(pricing.presented_total)
    duration_ms = (time.time() - start_time) * 1000
    record_quote(pricing.rate_tier.value, pricing.approval.approved, total)
    reservation_counter.labels(status=reservation.status).inc()
    log_quote(
        request_id,
        request_body.customer_id,
        request_body.vehicle_id,
        pricing.rate_tier.value,
        total,
        pricing.approval.approved,
        duration_ms,
    )

    return _to_response(reservation, PricingSchema.from_breakdown(pricing))


@router.get("/reservations/{reservation_id}", response_model=ReservationResponse)
def get_reservation(reservation_id: str, db: Session = Depends(get_db)):
    """Retrieve a stored reservation"""
    return _to_response(_load_reservation(db, reservation_id))


@router.get("/reservations/{reservation_id}/agreement-draft")
def get_reservation_agreement_draft(
    reservation_id: str,
    request: Request,
    db: Session = Depends(get_db),
    config: PricingConfig = Depends(get_pricing_config),
) -> Dict[str, Any]:
    """Map a stored reservation into an agreement draft"""
    reservation = _load_reservation(db, reservation_id)

    try:
        draft = map_to_agreement_draft(reservation_to_booking(reservation), config, source="reservation")
    except MissingCustomerError as e:
        raise HTTPException(status_code=422, detail=str(e))

    agreement_draft_counter.labels(source="reservation").inc()
    log_agreement_draft(
        get_request_id(request),
        draft.source,
        draft.source_id,
        draft.customer_terms.customer_id,
        draft.customer_terms.agreement_type,
    )
    return draft.to_dict()

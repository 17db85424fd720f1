"""Booking-to-agreement draft endpoints"""

import logging
from typing import Any, Dict
from fastapi import APIRouter, Body, Depends, HTTPException, Request

from rental_gateway.api.dependencies import get_backend_client, get_pricing_config, get_request_id
from rental_gateway.infrastructure.clients.backend import BackendClient
from rental_gateway.domain.models import AgreementDraftFields, PricingConfig
from rental_gateway.domain.agreement_mapper import map_to_agreement_draft
from rental_gateway.domain.exceptions import BackendAPIError, BookingNotFoundError, MissingCustomerError
from rental_gateway.infrastructure.observability.metrics import agreement_draft_counter, backend_fetch_failures_counter
from rental_gateway.infrastructure.observability.logging import log_agreement_draft

router = APIRouter()


def _draft(booking: Dict[str, Any], config: PricingConfig, source: str, request_id: str) -> AgreementDraftFields:
    try:
        draft = map_to_agreement_draft(booking, config, source=source)
    except MissingCustomerError as e:
        logging.warning(f"Agreement draft rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    agreement_draft_counter.labels(source=source).inc()
    log_agreement_draft(
        request_id,
        draft.source,
        draft.source_id,
        draft.customer_terms.customer_id,
        draft.customer_terms.agreement_type,
    )
    return draft


@router.post("/agreements/draft")
def create_agreement_draft(
    request: Request,
    booking: Dict[str, Any] = Body(..., description="Booking record (snake_case or camelCase fields)"),
    config: PricingConfig = Depends(get_pricing_config),
) -> Dict[str, Any]:
    """
    Map a posted booking record into agreement wizard fields.

    Only the customer reference is required; missing fields come back as
    defaults for an agent to complete.
    """
    return _draft(booking, config, "request", get_request_id(request)).to_dict()


@router.get("/instant-bookings/{booking_id}/agreement-draft")
async def get_instant_booking_agreement_draft(
    booking_id: str,
    request: Request,
    config: PricingConfig = Depends(get_pricing_config),
    backend_client: BackendClient = Depends(get_backend_client),
) -> Dict[str, Any]:
    """
    Fetch an instant booking from the hosted backend and map it.

    Flow:
    1. Load the booking through the get-instant-booking-by-id edge function
    2. Normalize and map into agreement draft fields
    """
    request_id = get_request_id(request)

    try:
        booking = await backend_client.get_instant_booking(booking_id)
    except BookingNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BackendAPIError as e:
        backend_fetch_failures_counter.inc()
        logging.error(f"Backend API error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Booking service unavailable")

    return _draft(booking, config, "instant_booking", request_id).to_dict()

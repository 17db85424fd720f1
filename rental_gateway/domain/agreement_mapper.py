"""Instant booking to agreement draft conversion"""

import copy
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional

from rental_gateway.domain.models import (
    AdvancePayment,
    AgreementDraftFields,
    BillingTerms,
    BookingAddon,
    BookingRecord,
    CustomerTerms,
    PricingConfig,
    PricingTerms,
    PricingTermsBreakdown,
    SecurityDeposit,
)
from rental_gateway.domain.exceptions import MissingCustomerError
from rental_gateway.utils.date_utils import ceil_days, parse_timestamp
from rental_gateway.utils.money import to_decimal

ZERO = Decimal("0")

# Lower bound (inclusive) of each band, longest first
AGREEMENT_TYPE_BANDS = (
    (90, "long_term"),
    (28, "monthly"),
    (7, "weekly"),
    (0, "daily"),
)


def derive_agreement_type(days: int) -> str:
    """
    Map a rental day count to an agreement type.

    Bands: <7 daily, 7-27 weekly, 28-89 monthly, 90+ long_term.
    Negative counts are treated as 0.
    """
    days = max(days, 0)
    for lower_bound, agreement_type in AGREEMENT_TYPE_BANDS:
        if days >= lower_bound:
            return agreement_type
    return "daily"


def _pick(source: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """First present, non-empty value among alternate spellings of a field"""
    for key in keys:
        value = source.get(key)
        if value is not None and value != "":
            return value
    return default


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _as_int(value: Any, default: int = 0) -> int:
    number = to_decimal(value, Decimal(default))
    return int(number)


def _as_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def normalize_addons(raw_addons: Any) -> List[BookingAddon]:
    """
    Normalize loosely-typed add-on entries into BookingAddon.

    Accepts snake_case or camelCase fields and bare string ids. A missing or
    zero quantity counts as 1 and a missing price as 0. A non-zero `total`
    wins over quantity * price.
    """
    if not isinstance(raw_addons, Iterable) or isinstance(raw_addons, (str, bytes, Mapping)):
        return []

    addons = []
    for entry in raw_addons:
        if isinstance(entry, str):
            entry = {"id": entry}
        elif not isinstance(entry, Mapping):
            continue

        quantity = _as_int(_pick(entry, "quantity", "qty"), default=1) or 1
        unit_price = to_decimal(_pick(entry, "unit_price", "unitPrice", "price"))
        total = to_decimal(_pick(entry, "total", "line_total", "lineTotal")) or quantity * unit_price

        addons.append(
            BookingAddon(
                addon_id=str(_pick(entry, "id", "addonId", "addon_id", default="")),
                name=str(_pick(entry, "name", default="")),
                category=str(_pick(entry, "category", default="other")),
                quantity=quantity,
                unit_price=unit_price,
                pricing_model=str(_pick(entry, "pricing_model", "pricingModel", default="one_time")),
                total=total,
            )
        )
    return addons


def _booking_days(raw: Mapping[str, Any], start: Optional[datetime], end: Optional[datetime]) -> int:
    explicit = _pick(raw, "days", "day_count", "dayCount", "rental_days", "rentalDays")
    if explicit is not None:
        return max(_as_int(explicit), 0)
    if start is None or end is None:
        return 0
    try:
        return max(ceil_days(start, end), 0)
    except TypeError:
        # naive vs aware timestamps
        return 0


def parse_booking_record(raw: Mapping[str, Any]) -> BookingRecord:
    """
    Parse a loosely-typed booking mapping into a strict BookingRecord.

    Raises:
        MissingCustomerError: no customer reference on the booking
    """
    if not isinstance(raw, Mapping):
        raise MissingCustomerError("Booking record is empty")

    customer_id = _pick(raw, "customer_id", "customerId")
    if customer_id is None or not str(customer_id).strip():
        raise MissingCustomerError("Booking has no customer reference")

    start = parse_timestamp(_pick(raw, "start_datetime", "startDatetime", "pickup_datetime", "pickupDate"))
    end = parse_timestamp(_pick(raw, "end_datetime", "endDatetime", "return_datetime", "returnDate"))

    rate_plan = _as_mapping(_pick(raw, "rate_plan", "ratePlan"))
    mileage = _as_mapping(_pick(raw, "mileage_package", "mileagePackage"))
    cross_border = _as_mapping(_pick(raw, "cross_border_permits", "crossBorderPermits"))
    salik = _as_mapping(_pick(raw, "salik_package", "salikPackage"))
    darb = _as_mapping(_pick(raw, "darb_package", "darbPackage"))
    countries = _pick(cross_border, "countries", default=[])
    bill_to_meta = _pick(raw, "bill_to_meta", "billToMeta")
    excess_amount = _pick(rate_plan, "excess_amount", "excessAmount")
    included_km = _pick(mileage, "included_km", "includedKm")
    excess_rate = _pick(mileage, "excess_rate", "excessRate")

    return BookingRecord(
        customer_id=str(customer_id),
        booking_id=_as_str(_pick(raw, "id", "booking_id", "bookingId")),
        days=_booking_days(raw, start, end),
        start_datetime=start,
        end_datetime=end,
        pickup_location=str(_pick(raw, "pickup_location", "pickupLocation", default="")),
        return_location=str(_pick(raw, "return_location", "returnLocation", default="")),
        base_rate=to_decimal(_pick(rate_plan, "base_rate", "baseRate")),
        insurance_cost=to_decimal(_pick(rate_plan, "insurance_cost", "insuranceCost")),
        maintenance_cost=to_decimal(_pick(rate_plan, "maintenance_cost", "maintenanceCost")),
        excess_amount=to_decimal(excess_amount) if excess_amount is not None else None,
        discount_value=to_decimal(_pick(raw, "discount_value", "discountValue")),
        add_ons=normalize_addons(_pick(raw, "add_ons", "addOns", "addons", default=[])),
        mileage_type=_as_str(_pick(mileage, "type")),
        included_km=_as_int(included_km) if included_km is not None else None,
        excess_km_rate=to_decimal(excess_rate) if excess_rate is not None else None,
        cross_border_allowed=bool(_pick(cross_border, "allowed", default=False)),
        cross_border_countries=[str(c) for c in countries] if isinstance(countries, list) else [],
        salik_account_no=_as_str(_pick(salik, "account_no", "accountNo")),
        darb_account_no=_as_str(_pick(darb, "account_no", "accountNo")),
        special_requests=_as_str(_pick(raw, "special_requests", "specialRequests")),
        insurance_level_id=_as_str(_pick(raw, "insurance_level_id", "insuranceLevelId")),
        insurance_group_id=_as_str(_pick(raw, "insurance_group_id", "insuranceGroupId")),
        insurance_provider_id=_as_str(_pick(raw, "insurance_provider_id", "insuranceProviderId")),
        price_list_id=_as_str(_pick(raw, "price_list_id", "priceListId")),
        tax_level_id=_as_str(_pick(raw, "tax_level_id", "taxLevelId")),
        tax_code_id=_as_str(_pick(raw, "tax_code_id", "taxCodeId")),
        down_payment_amount=to_decimal(_pick(raw, "down_payment_amount", "downPaymentAmount")),
        down_payment_status=_as_str(_pick(raw, "down_payment_status", "downPaymentStatus")),
        down_payment_method=_as_str(_pick(raw, "down_payment_method", "downPaymentMethod")),
        down_payment_transaction_id=_as_str(
            _pick(raw, "down_payment_transaction_id", "downPaymentTransactionId")
        ),
        advance_payment=to_decimal(_pick(raw, "advance_payment", "advancePayment")),
        security_deposit_paid=to_decimal(_pick(raw, "security_deposit_paid", "securityDepositPaid")),
        bill_to_type=_as_str(_pick(raw, "bill_to_type", "billToType")),
        bill_to_meta=copy.deepcopy(bill_to_meta) if isinstance(bill_to_meta, Mapping) else None,
        business_unit_id=_as_str(_pick(raw, "business_unit_id", "businessUnitId")),
    )


def derive_pricing_breakdown(booking: BookingRecord, config: PricingConfig) -> PricingTermsBreakdown:
    """Recompute subtotal, VAT and total from the booking's components"""
    addons = sum((a.total for a in booking.add_ons), ZERO)
    subtotal = booking.base_rate + booking.insurance_cost + booking.maintenance_cost + addons
    taxable = subtotal - booking.discount_value
    vat = taxable * config.tax_rate

    return PricingTermsBreakdown(
        base_rate=booking.base_rate,
        insurance=booking.insurance_cost,
        maintenance=booking.maintenance_cost,
        addons=addons,
        subtotal=subtotal,
        discount=booking.discount_value,
        taxable_amount=taxable,
        vat=vat,
        total=taxable + vat,
    )


def _customer_terms(booking: BookingRecord) -> CustomerTerms:
    return CustomerTerms(
        customer_id=booking.customer_id,
        customer_verified=True,  # instant bookings are pre-verified
        agreement_type=derive_agreement_type(booking.days),
        rental_purpose="personal",
        pickup_location_id=booking.pickup_location,
        pickup_datetime=booking.start_datetime,
        dropoff_location_id=booking.return_location,
        dropoff_datetime=booking.end_datetime,
        mileage_package="limited" if booking.mileage_type == "limited" else "unlimited",
        included_km=booking.included_km,
        excess_km_rate=booking.excess_km_rate,
        cross_border_allowed=booking.cross_border_allowed,
        cross_border_countries=list(booking.cross_border_countries),
        salik_account_no=booking.salik_account_no,
        darb_account_no=booking.darb_account_no,
        special_instructions=booking.special_requests,
    )


def _billing_terms(booking: BookingRecord) -> BillingTerms:
    advance = booking.advance_payment or booking.down_payment_amount
    deposit = booking.security_deposit_paid

    return BillingTerms(
        billing_type="same",
        payment_method=booking.down_payment_method or "",
        advance_payment=AdvancePayment(
            amount=advance,
            status="completed" if booking.down_payment_status == "paid" else "pending",
            transaction_ref=booking.down_payment_transaction_id,
        ),
        security_deposit=SecurityDeposit(
            method="card_hold",
            amount=deposit,
            status="collected" if deposit > 0 else "pending",
        ),
        bill_to_type=booking.bill_to_type or "customer",
        bill_to_details=copy.deepcopy(booking.bill_to_meta),
        tax_level_id=booking.tax_level_id,
        tax_code_id=booking.tax_code_id,
    )


def map_to_agreement_draft(
    booking: Mapping[str, Any],
    config: Optional[PricingConfig] = None,
    source: str = "instant_booking",
) -> AgreementDraftFields:
    """
    Convert a booking record into the field set of a multi-step agreement.

    Only the customer reference is mandatory; every other missing field
    falls back to a default so the draft can be completed by an agent.
    The source mapping is never modified.

    Raises:
        MissingCustomerError: booking has no customer reference
    """
    config = config or PricingConfig()
    record = parse_booking_record(booking)

    pricing_terms = PricingTerms(
        base_rate=record.base_rate,
        insurance_package="comprehensive",
        excess_amount=record.excess_amount if record.excess_amount is not None else config.default_excess_amount,
        maintenance_included=record.maintenance_cost > 0,
        maintenance_cost=record.maintenance_cost,
        discount_amount=record.discount_value,
        breakdown=derive_pricing_breakdown(record, config),
    )

    return AgreementDraftFields(
        source=source,
        source_id=record.booking_id,
        customer_terms=_customer_terms(record),
        pricing_terms=pricing_terms,
        addons=record.add_ons,
        billing_terms=_billing_terms(record),
        business_unit_id=record.business_unit_id,
        price_list_id=record.price_list_id,
        insurance_config={
            "level_id": record.insurance_level_id,
            "group_id": record.insurance_group_id,
            "provider_id": record.insurance_provider_id,
        },
    )

"""Unit tests for booking-to-agreement draft mapping"""

import copy
import json
import pytest
from decimal import Decimal
from rental_gateway.domain.models import PricingConfig
from rental_gateway.domain.agreement_mapper import (
    derive_agreement_type,
    map_to_agreement_draft,
    normalize_addons,
    parse_booking_record,
)
from rental_gateway.domain.exceptions import MissingCustomerError


@pytest.mark.parametrize(
    "days, expected",
    [
        (0, "daily"),
        (6, "daily"),
        (7, "weekly"),
        (27, "weekly"),
        (28, "monthly"),
        (45, "monthly"),
        (89, "monthly"),
        (90, "long_term"),
        (400, "long_term"),
    ],
)
def test_derive_agreement_type_bands(days, expected):
    """Test each day count falls in exactly one band"""
    assert derive_agreement_type(days) == expected


def test_explicit_day_count_sets_agreement_type():
    """Test booking with day count 45 maps to a monthly agreement"""
    draft = map_to_agreement_draft({"customer_id": "cust_1", "days": 45})
    assert draft.customer_terms.agreement_type == "monthly"


def test_day_count_derived_from_timestamps():
    """Test 10 days and 2 hours between start and end -> 11 days -> weekly"""
    record = parse_booking_record(
        {
            "customer_id": "cust_1",
            "start_datetime": "2025-03-01T10:00:00Z",
            "end_datetime": "2025-03-11T12:00:00Z",
        }
    )
    assert record.days == 11


@pytest.mark.parametrize("booking", [{}, {"customer_id": None}, {"customer_id": "  "}, {"id": "ib_1", "days": 5}])
def test_missing_customer_raises(booking):
    """Test bookings without a customer reference are rejected"""
    with pytest.raises(MissingCustomerError):
        map_to_agreement_draft(booking)


def test_camel_case_customer_reference_accepted():
    """Test customerId is accepted as the customer reference"""
    draft = map_to_agreement_draft({"customerId": "cust_7"})
    assert draft.customer_terms.customer_id == "cust_7"


def test_minimal_booking_degrades_to_defaults():
    """Test a booking carrying only the customer maps without error"""
    draft = map_to_agreement_draft({"customer_id": "cust_1"})

    assert draft.customer_terms.agreement_type == "daily"
    assert draft.customer_terms.pickup_datetime is None
    assert draft.customer_terms.mileage_package == "unlimited"
    assert draft.addons == []
    assert draft.pricing_terms.excess_amount == Decimal("1500")
    assert draft.pricing_terms.breakdown.total == 0
    assert draft.billing_terms.advance_payment.status == "pending"
    assert draft.billing_terms.security_deposit.status == "pending"
    assert draft.billing_terms.bill_to_type == "customer"


def test_garbage_optional_fields_do_not_abort_mapping():
    """Test malformed optional fields fall back instead of raising"""
    booking = {
        "customer_id": "cust_1",
        "start_datetime": "not a date",
        "end_datetime": 12345,
        "rate_plan": "premium",
        "discount_value": "ten",
        "add_ons": [None, 42, {"unit_price": "abc", "quantity": "x"}],
        "mileage_package": ["limited"],
        "cross_border_permits": {"allowed": True, "countries": "OM"},
    }

    draft = map_to_agreement_draft(booking)

    assert draft.customer_terms.agreement_type == "daily"
    assert len(draft.addons) == 1
    assert draft.addons[0].quantity == 1
    assert draft.addons[0].total == 0
    assert draft.customer_terms.cross_border_countries == []


def test_normalize_addons_alternate_field_names():
    """Test snake_case, camelCase and bare id add-ons share one shape"""
    addons = normalize_addons(
        [
            {"id": "gps", "name": "GPS", "quantity": 2, "unit_price": 15},
            {"addonId": "seat", "unitPrice": "25.50", "pricingModel": "per_day"},
            {"addon_id": "wifi", "unit_price": 10, "total": 70},
            "roadside",
        ]
    )

    assert [a.addon_id for a in addons] == ["gps", "seat", "wifi", "roadside"]
    assert addons[0].total == Decimal("30")
    assert addons[1].unit_price == Decimal("25.50")
    assert addons[1].quantity == 1
    assert addons[1].pricing_model == "per_day"
    assert addons[2].total == Decimal("70")
    assert addons[3].unit_price == 0
    assert addons[3].category == "other"


def test_normalize_addons_zero_quantity_and_total():
    """Test zero quantity counts as one unit and zero total falls back to the computed one"""
    addons = normalize_addons(
        [
            {"id": "gps", "quantity": 0, "unit_price": 10},
            {"id": "seat", "quantity": 2, "unit_price": 25, "total": 0},
        ]
    )

    assert addons[0].quantity == 1
    assert addons[0].total == Decimal("10")
    assert addons[1].total == Decimal("50")


def test_pricing_breakdown_recomputed(instant_booking):
    """Test subtotal, VAT and total are recomputed from components"""
    draft = map_to_agreement_draft(instant_booking)
    breakdown = draft.pricing_terms.breakdown

    # 1200 + 150 + 50 + (30 + 2 * 25) = 1480; - 100 = 1380; VAT 69
    assert breakdown.addons == Decimal("80")
    assert breakdown.subtotal == Decimal("1480")
    assert breakdown.taxable_amount == Decimal("1380")
    assert breakdown.vat == Decimal("69")
    assert breakdown.total == Decimal("1449")
    assert breakdown.total == breakdown.taxable_amount * Decimal("1.05")


def test_breakdown_ignores_stale_totals():
    """Test a copied total on the booking does not leak into the draft"""
    draft = map_to_agreement_draft(
        {"customer_id": "c", "total_amount": 99999, "rate_plan": {"base_rate": 100}}
    )
    assert draft.pricing_terms.breakdown.total == Decimal("105")


def test_tax_rate_from_config(instant_booking):
    """Test VAT follows the configured rate"""
    draft = map_to_agreement_draft(instant_booking, PricingConfig(tax_rate=Decimal("0")))
    assert draft.pricing_terms.breakdown.total == Decimal("1380")


def test_instant_booking_full_mapping(instant_booking):
    """Test customer, billing and pricing terms from a complete booking"""
    draft = map_to_agreement_draft(instant_booking)

    assert draft.source == "instant_booking"
    assert draft.source_id == "ib_001"

    terms = draft.customer_terms
    assert terms.customer_id == "cust_business"
    assert terms.customer_verified is True
    assert terms.agreement_type == "weekly"  # 10 days
    assert terms.pickup_location_id == "loc_dxb_airport"
    assert terms.mileage_package == "limited"
    assert terms.included_km == 2500
    assert terms.excess_km_rate == Decimal("0.5")
    assert terms.cross_border_allowed is True
    assert terms.cross_border_countries == ["OM"]
    assert terms.salik_account_no == "SLK-42"

    assert draft.pricing_terms.maintenance_included is True
    assert draft.pricing_terms.insurance_package == "comprehensive"

    billing = draft.billing_terms
    assert billing.advance_payment.amount == Decimal("500")
    assert billing.advance_payment.status == "completed"
    assert billing.payment_method == "card"
    assert billing.security_deposit.status == "collected"
    assert billing.bill_to_type == "corporate"
    assert billing.bill_to_details == {"company_id": "co_9", "contacts": ["ap@example.com"]}


def test_mapping_does_not_mutate_source(instant_booking):
    """Test the source booking is unchanged and not shared with the draft"""
    original = copy.deepcopy(instant_booking)

    draft = map_to_agreement_draft(instant_booking)
    draft.billing_terms.bill_to_details["contacts"].append("new@example.com")
    draft.customer_terms.cross_border_countries.append("SA")

    assert instant_booking == original


def test_to_dict_is_json_ready(instant_booking):
    """Test decimals become floats and datetimes ISO strings"""
    data = map_to_agreement_draft(instant_booking).to_dict()

    assert data["pricing_terms"]["breakdown"]["total"] == 1449.0
    assert data["customer_terms"]["pickup_datetime"] == "2025-03-01T10:00:00+00:00"
    assert data["addons"][1]["addon_id"] == "child_seat"


def test_oversized_addon_quantity_falls_back():
    """Test an absurd add-on quantity is treated as missing instead of overflowing"""
    draft = map_to_agreement_draft(
        {"customer_id": "c", "add_ons": [{"id": "gps", "quantity": "1e999999", "unit_price": 10}]}
    )

    assert draft.addons[0].quantity == 1
    assert draft.pricing_terms.breakdown.addons == Decimal("10")


@pytest.mark.parametrize("amount", ["9e999999", "1e400", "1e16"])
def test_oversized_rate_plan_amounts_fall_back(amount):
    """Test absurd rate plan amounts become 0 and the draft stays JSON-safe"""
    draft = map_to_agreement_draft(
        {"customer_id": "c", "rate_plan": {"base_rate": amount, "insurance_cost": amount}}
    )

    assert draft.pricing_terms.base_rate == 0
    assert draft.pricing_terms.breakdown.total == 0
    json.dumps(draft.to_dict(), allow_nan=False)

"""Unit tests for auto-approval evaluation"""

import pytest
from decimal import Decimal
from rental_gateway.domain.models import ApprovalDecision, PricingConfig
from rental_gateway.domain.approval import effective_limit, enforce_max_rental_days, evaluate_auto_approval


def test_total_above_customer_credit_limit():
    """Test 1134.00 against credit 1000 / rule 2000 -> declined at 1000"""
    decision = evaluate_auto_approval(Decimal("1134.00"), Decimal("1000"), Decimal("2000"))

    assert decision.approved is False
    assert decision.effective_limit == Decimal("1000")
    assert "1000" in decision.reason


def test_total_within_rule_limit():
    """Test 400.00 against credit 1000 / rule 500 -> approved at 500"""
    decision = evaluate_auto_approval(Decimal("400.00"), Decimal("1000"), Decimal("500"))

    assert decision.approved is True
    assert decision.effective_limit == Decimal("500")
    assert decision.reason is None


def test_total_equal_to_limit_is_approved():
    """Test the limit itself is inclusive"""
    assert evaluate_auto_approval(Decimal("500"), Decimal("1000"), Decimal("500")).approved is True
    assert evaluate_auto_approval(Decimal("500.01"), Decimal("1000"), Decimal("500")).approved is False


@pytest.mark.parametrize(
    "credit_limit, rule_max, expected",
    [
        (None, None, Decimal("500")),
        (Decimal("300"), None, Decimal("300")),
        (None, Decimal("2000"), Decimal("1000")),
        (Decimal("0"), Decimal("2000"), Decimal("0")),
    ],
)
def test_missing_limits_use_defaults(credit_limit, rule_max, expected):
    """Test absent limits fall back to credit 1000 / rule 500"""
    assert effective_limit(credit_limit, rule_max, PricingConfig()) == expected


@pytest.mark.parametrize("total", [Decimal("0"), Decimal("250"), Decimal("749.99"), Decimal("750"), Decimal("3000")])
@pytest.mark.parametrize("credit_limit", [Decimal("100"), Decimal("750"), Decimal("5000")])
@pytest.mark.parametrize("rule_max", [Decimal("500"), Decimal("750"), Decimal("10000")])
def test_approved_iff_total_within_lesser_limit(total, credit_limit, rule_max):
    """Test effective limit is the minimum and approval is total <= limit"""
    decision = evaluate_auto_approval(total, credit_limit, rule_max)

    assert decision.effective_limit == min(credit_limit, rule_max)
    assert decision.approved == (total <= min(credit_limit, rule_max))


def test_configured_defaults_and_currency():
    """Test defaults and currency come from the config object"""
    config = PricingConfig(default_credit_limit=Decimal("250"), currency="USD")
    decision = evaluate_auto_approval(Decimal("300"), None, Decimal("1000"), config)

    assert decision.effective_limit == Decimal("250")
    assert decision.reason == "Amount exceeds auto-approval limit of USD 250.00"


def test_max_rental_days_withdraws_approval():
    """Test a rental longer than the rule allows goes to manual review"""
    approved = ApprovalDecision(approved=True, effective_limit=Decimal("5000"))

    decision = enforce_max_rental_days(approved, days=20, max_rental_days=14)
    assert decision.approved is False
    assert "14 days" in decision.reason
    assert decision.effective_limit == Decimal("5000")

    assert enforce_max_rental_days(approved, days=14, max_rental_days=14) is approved
    assert enforce_max_rental_days(approved, days=60, max_rental_days=None) is approved

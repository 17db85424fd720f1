"""Auto-approval evaluation for instant bookings"""

from dataclasses import replace
from decimal import Decimal
from typing import Optional

from rental_gateway.domain.models import ApprovalDecision, PricingConfig


def effective_limit(
    customer_credit_limit: Optional[Decimal],
    rule_max_amount: Optional[Decimal],
    config: PricingConfig,
) -> Decimal:
    """Lesser of the customer's credit limit and the rule maximum, with configured defaults"""
    if customer_credit_limit is None:
        customer_credit_limit = config.default_credit_limit
    if rule_max_amount is None:
        rule_max_amount = config.default_rule_max_amount
    return min(customer_credit_limit, rule_max_amount)


def evaluate_auto_approval(
    total: Decimal,
    customer_credit_limit: Optional[Decimal] = None,
    rule_max_amount: Optional[Decimal] = None,
    config: Optional[PricingConfig] = None,
) -> ApprovalDecision:
    """
    Decide whether a booking total can bypass manual review.

    Approved iff total <= min(customer credit limit, rule max amount). Missing
    limits fall back to the configured defaults (1000 and 500) so pricing can
    still be displayed while customer or rule data is incomplete.
    """
    config = config or PricingConfig()
    limit = effective_limit(customer_credit_limit, rule_max_amount, config)

    if total <= limit:
        return ApprovalDecision(approved=True, effective_limit=limit)

    return ApprovalDecision(
        approved=False,
        effective_limit=limit,
        reason=f"Amount exceeds auto-approval limit of {config.currency} {limit:.2f}",
    )


def enforce_max_rental_days(
    decision: ApprovalDecision,
    days: int,
    max_rental_days: Optional[int],
) -> ApprovalDecision:
    """Withdraw auto-approval when the rental is longer than the rule allows"""
    if not decision.approved or not max_rental_days or days <= max_rental_days:
        return decision
    return replace(
        decision,
        approved=False,
        reason=f"Rental of {days} days exceeds auto-approval limit of {max_rental_days} days",
    )

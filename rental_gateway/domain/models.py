"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from rental_gateway.utils.money import round_currency


class CustomerCategory(str, Enum):
    """Closed set of customer categories used for discounts and rule lookup"""

    INDIVIDUAL = "individual"
    BUSINESS = "business"
    CORPORATE = "corporate"

    @classmethod
    def parse(cls, value: Any) -> Optional["CustomerCategory"]:
        """Accept canonical names and the backend's aliases (B2C, B2B, CORPORATE, Company)"""
        if value is None or isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        if not key:
            return None
        if key in _CATEGORY_ALIASES:
            return _CATEGORY_ALIASES[key]
        return cls(key)


_CATEGORY_ALIASES = {
    "b2c": CustomerCategory.INDIVIDUAL,
    "b2b": CustomerCategory.BUSINESS,
    "company": CustomerCategory.CORPORATE,
}


class RateTier(str, Enum):
    """Pricing basis selected from the rental duration"""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class PricingConfig:
    """Rates and defaults applied by the pricing core and the agreement mapper"""

    tax_rate: Decimal = Decimal("0.05")
    discount_rates: Dict[CustomerCategory, Decimal] = field(
        default_factory=lambda: {
            CustomerCategory.INDIVIDUAL: Decimal("0"),
            CustomerCategory.BUSINESS: Decimal("0.10"),
            CustomerCategory.CORPORATE: Decimal("0.15"),
        }
    )
    default_credit_limit: Decimal = Decimal("1000")
    default_rule_max_amount: Decimal = Decimal("500")
    currency: str = "AED"
    default_excess_amount: Decimal = Decimal("1500")


@dataclass(frozen=True)
class AddOnCharge:
    """Selected add-on with its per-unit price"""

    addon_id: str
    unit_price: Decimal
    quantity: int = 1


@dataclass(frozen=True)
class RentalRequest:
    """Inputs to pricing; immutable once submitted"""

    pickup_at: datetime
    return_at: datetime
    vehicle_id: str
    customer_id: str
    customer_category: Optional[CustomerCategory] = None
    add_ons: Tuple[AddOnCharge, ...] = ()


@dataclass(frozen=True)
class VehicleRateCard:
    """Per-vehicle rates; weekly and monthly are optional tiers"""

    daily_rate: Optional[Decimal]
    weekly_rate: Optional[Decimal] = None
    monthly_rate: Optional[Decimal] = None


@dataclass(frozen=True)
class RateSelection:
    """Output of rate selection"""

    tier: RateTier
    amount: Decimal
    units: int  # days, weeks or months billed
    unit_rate: Decimal


@dataclass(frozen=True)
class ApprovalInputs:
    """Externally resolved limits; None means not configured"""

    customer_credit_limit: Optional[Decimal] = None
    rule_max_amount: Optional[Decimal] = None


@dataclass(frozen=True)
class ApprovalDecision:
    """Auto-approval outcome"""

    approved: bool
    effective_limit: Decimal
    reason: Optional[str] = None


@dataclass(frozen=True)
class PricingBreakdown:
    """Full pricing decomposition, unrounded; presented values are rounded by callers"""

    days: int
    rate_tier: RateTier
    unit_rate: Decimal
    base_amount: Decimal
    addon_total: Decimal
    discount_amount: Decimal
    discounted_base: Decimal
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal
    approval: ApprovalDecision

    @property
    def presented_total(self) -> Decimal:
        return round_currency(self.total)


@dataclass
class BookingAddon:
    """Canonical add-on shape after normalization"""

    addon_id: str
    name: str
    category: str
    quantity: int
    unit_price: Decimal
    pricing_model: str
    total: Decimal


@dataclass
class BookingRecord:
    """Strict internal shape of an instant booking / reservation record"""

    customer_id: str
    booking_id: Optional[str] = None
    days: int = 0
    start_datetime: Optional[datetime] = None
    end_datetime: Optional[datetime] = None
    pickup_location: str = ""
    return_location: str = ""
    base_rate: Decimal = Decimal("0")
    insurance_cost: Decimal = Decimal("0")
    maintenance_cost: Decimal = Decimal("0")
    excess_amount: Optional[Decimal] = None
    discount_value: Decimal = Decimal("0")
    add_ons: List[BookingAddon] = field(default_factory=list)
    mileage_type: Optional[str] = None
    included_km: Optional[int] = None
    excess_km_rate: Optional[Decimal] = None
    cross_border_allowed: bool = False
    cross_border_countries: List[str] = field(default_factory=list)
    salik_account_no: Optional[str] = None
    darb_account_no: Optional[str] = None
    special_requests: Optional[str] = None
    insurance_level_id: Optional[str] = None
    insurance_group_id: Optional[str] = None
    insurance_provider_id: Optional[str] = None
    price_list_id: Optional[str] = None
    tax_level_id: Optional[str] = None
    tax_code_id: Optional[str] = None
    down_payment_amount: Decimal = Decimal("0")
    down_payment_status: Optional[str] = None
    down_payment_method: Optional[str] = None
    down_payment_transaction_id: Optional[str] = None
    advance_payment: Decimal = Decimal("0")
    security_deposit_paid: Decimal = Decimal("0")
    bill_to_type: Optional[str] = None
    bill_to_meta: Optional[Dict[str, Any]] = None
    business_unit_id: Optional[str] = None


@dataclass
class CustomerTerms:
    customer_id: str
    customer_verified: bool
    agreement_type: str
    rental_purpose: str
    pickup_location_id: str
    pickup_datetime: Optional[datetime]
    dropoff_location_id: str
    dropoff_datetime: Optional[datetime]
    mileage_package: str
    included_km: Optional[int]
    excess_km_rate: Optional[Decimal]
    cross_border_allowed: bool
    cross_border_countries: List[str]
    salik_account_no: Optional[str]
    darb_account_no: Optional[str]
    special_instructions: Optional[str]


@dataclass
class PricingTermsBreakdown:
    base_rate: Decimal
    insurance: Decimal
    maintenance: Decimal
    addons: Decimal
    subtotal: Decimal
    discount: Decimal
    taxable_amount: Decimal
    vat: Decimal
    total: Decimal


@dataclass
class PricingTerms:
    base_rate: Decimal
    insurance_package: str
    excess_amount: Decimal
    maintenance_included: bool
    maintenance_cost: Decimal
    discount_amount: Decimal
    breakdown: PricingTermsBreakdown


@dataclass
class AdvancePayment:
    amount: Decimal
    status: str
    transaction_ref: Optional[str] = None


@dataclass
class SecurityDeposit:
    method: str
    amount: Decimal
    status: str


@dataclass
class BillingTerms:
    billing_type: str
    payment_method: str
    advance_payment: AdvancePayment
    security_deposit: SecurityDeposit
    bill_to_type: str
    bill_to_details: Optional[Dict[str, Any]]
    tax_level_id: Optional[str]
    tax_code_id: Optional[str]


@dataclass
class AgreementDraftFields:
    """Partial multi-step agreement produced from a booking"""

    source: str
    source_id: Optional[str]
    customer_terms: CustomerTerms
    pricing_terms: PricingTerms
    addons: List[BookingAddon]
    billing_terms: BillingTerms
    business_unit_id: Optional[str] = None
    price_list_id: Optional[str] = None
    insurance_config: Dict[str, Optional[str]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict: decimals become floats, datetimes ISO strings"""
        return _jsonable(asdict(self))


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value

"""Rate tier selection - picks daily, weekly or monthly pricing from the rental duration"""

from datetime import datetime

from rental_gateway.domain.models import VehicleRateCard, RateSelection, RateTier
from rental_gateway.domain.exceptions import InvalidDurationError, MissingRateError
from rental_gateway.utils.date_utils import ceil_days

DAYS_PER_WEEK = 7
DAYS_PER_MONTH = 30


def _ceil_div(numerator: int, denominator: int) -> int:
    return -(-numerator // denominator)


def rental_day_count(pickup_at: datetime, return_at: datetime) -> int:
    """
    Billable days for a rental: ceil((return - pickup) / 1 day).

    Raises:
        InvalidDurationError: return is at or before pickup
    """
    try:
        days = ceil_days(pickup_at, return_at)
    except TypeError as e:
        raise InvalidDurationError("Pickup and return times must both include a timezone, or neither") from e
    if days <= 0:
        raise InvalidDurationError(
            f"Return time {return_at.isoformat()} must be after pickup time {pickup_at.isoformat()}"
        )
    return days


def select_rate(rate_card: VehicleRateCard, days: int) -> RateSelection:
    """
    Select the rate tier for a rental of `days` whole days.

    Tiers (a longer tier wins only when its rate is configured):
    - 30+ days with a monthly rate: ceil(days / 30) months
    - 7+ days with a weekly rate:   ceil(days / 7) weeks
    - otherwise:                    days * daily rate

    Example:
        10 days, daily 100, weekly 600 -> 2 weeks -> 1200 (weekly)

    Raises:
        MissingRateError: rate card has no daily rate
        InvalidDurationError: negative day count
    """
    if rate_card.daily_rate is None:
        raise MissingRateError("Vehicle rate card has no daily rate")
    if days < 0:
        raise InvalidDurationError(f"Day count must not be negative, got {days}")

    if days >= DAYS_PER_MONTH and rate_card.monthly_rate:
        months = _ceil_div(days, DAYS_PER_MONTH)
        return RateSelection(
            tier=RateTier.MONTHLY,
            amount=months * rate_card.monthly_rate,
            units=months,
            unit_rate=rate_card.monthly_rate,
        )

    if days >= DAYS_PER_WEEK and rate_card.weekly_rate:
        weeks = _ceil_div(days, DAYS_PER_WEEK)
        return RateSelection(
            tier=RateTier.WEEKLY,
            amount=weeks * rate_card.weekly_rate,
            units=weeks,
            unit_rate=rate_card.weekly_rate,
        )

    return RateSelection(
        tier=RateTier.DAILY,
        amount=days * rate_card.daily_rate,
        units=days,
        unit_rate=rate_card.daily_rate,
    )

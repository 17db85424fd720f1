"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from rental_gateway.config import settings
from rental_gateway.domain.models import CustomerCategory, PricingConfig
from rental_gateway.infrastructure.clients.backend import BackendClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_backend_client() -> BackendClient:
    """Provide hosted backend client instance"""
    return BackendClient()


def get_pricing_config() -> PricingConfig:
    """Build the pricing configuration from settings"""
    return PricingConfig(
        tax_rate=settings.tax_rate,
        discount_rates={
            CustomerCategory.INDIVIDUAL: settings.individual_discount_rate,
            CustomerCategory.BUSINESS: settings.business_discount_rate,
            CustomerCategory.CORPORATE: settings.corporate_discount_rate,
        },
        default_credit_limit=settings.default_credit_limit,
        default_rule_max_amount=settings.default_rule_max_amount,
        currency=settings.currency,
        default_excess_amount=settings.default_excess_amount,
    )

"""Hosted backend HTTP client for reading instant bookings via edge functions"""

import httpx
from typing import Any, Dict
from rental_gateway.domain.exceptions import BackendAPIError, BookingNotFoundError
from rental_gateway.config import settings


class BackendClient:
    """Client for the hosted backend's edge functions"""

    def __init__(self, base_url: str | None = None, api_key: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or settings.backend_api_base).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.backend_api_key
        self.timeout = timeout or settings.http_timeout_seconds

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            return {}
        return {"apikey": self.api_key, "Authorization": f"Bearer {self.api_key}"}

    async def get_instant_booking(self, booking_id: str) -> Dict[str, Any]:
        """
        Fetch a raw instant booking record by ID.

        The record is returned as the backend sends it (loosely typed); the
        agreement mapper normalizes it.

        Raises:
            BookingNotFoundError: Backend has no booking with this ID
            BackendAPIError: On timeout, HTTP errors, or invalid response
        """
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.post(
                    f"{self.base_url}/functions/v1/get-instant-booking-by-id",
                    json={"id": booking_id},
                    headers=self._headers(),
                )
                if response.status_code == 404:
                    raise BookingNotFoundError(f"Instant booking {booking_id} not found")
                response.raise_for_status()
                data = response.json()

            except httpx.TimeoutException as e:
                raise BackendAPIError(f"Backend timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise BackendAPIError(f"Backend error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise BackendAPIError(f"Backend unreachable: {e}") from e
            except ValueError as e:
                raise BackendAPIError(f"Invalid booking payload from backend: {e}") from e

        if not data:
            raise BookingNotFoundError(f"Instant booking {booking_id} not found")
        if not isinstance(data, dict):
            raise BackendAPIError("Invalid booking payload from backend: expected an object")
        return data

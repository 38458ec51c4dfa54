"""Email service client for realtor payout notifications"""

import asyncio
import httpx
from shortlet_settlement.config import settings
from shortlet_settlement.domain.exceptions import NotificationError
from shortlet_settlement.domain.money import Money
from shortlet_settlement.infrastructure.observability.metrics import notification_latency_histogram


class NotificationClient:
    """Client for sending transactional emails through the email service"""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = base_url or settings.email_service_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.notification_max_retries
        self.backoff_base = settings.notification_backoff_base

    async def send_realtor_payout(
        self,
        email: str,
        realtor_name: str | None,
        amount: Money,
        currency: str,
        booking_id: str,
    ) -> None:
        """
        Send the "Payout Processed" email to a realtor.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s (base * 2^attempt)
        - Retries on 5xx errors and network failures, not on 4xx

        Raises:
            NotificationError: After the last failed attempt or on a rejected request
        """
        payload = {
            "template": "realtor_payout",
            "to": email,
            "subject": "Payout Processed - Booking Payment Released",
            "context": {
                "business_name": realtor_name,
                "amount": str(amount.quantize().amount),
                "currency": currency,
                "booking_id": booking_id,
            },
        }

        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            while True:
                try:
                    with notification_latency_histogram.time():
                        response = await client.post(f"{self.base_url}/send", json=payload)
                        response.raise_for_status()
                        return  # Success

                except httpx.HTTPStatusError as e:
                    if e.response.status_code < 500:
                        raise NotificationError(f"Email service rejected request: {e.response.status_code}") from e
                    attempt += 1
                    if attempt >= self.max_retries:
                        raise NotificationError(f"Email service error: {e.response.status_code}") from e

                except httpx.RequestError as e:
                    attempt += 1
                    if attempt >= self.max_retries:
                        raise NotificationError(f"Email service unavailable: {e}") from e

                backoff = self.backoff_base * (2 ** (attempt - 1))
                await asyncio.sleep(backoff)

"""Payments service HTTP client for moving settlement-asset funds"""

import httpx
from typing import Any, Dict
from factoring_gateway.domain.exceptions import PaymentError
from factoring_gateway.config import settings


class PaymentsClient:
    """Client for the external payments service"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url or settings.payments_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def pay_out(
        self,
        asset_id: str,
        source: str,
        destination: str,
        amount: int,
        fee: int = 0,
        reference: str | None = None,
    ) -> Dict[str, Any]:
        """
        Instruct a single payout from a lender pool.

        The call is synchronous and never retried here: any failure must
        abort the operation that issued it.

        Raises:
            PaymentError: On timeout, HTTP errors, or transport failure
        """
        payload = {
            "asset_id": asset_id,
            "source": source,
            "destination": destination,
            "amount": amount,
            "fee": fee,
            "reference": reference,
        }
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = client.post(f"{self.base_url}/payments/payouts", json=payload)
                response.raise_for_status()
                return response.json() if response.content else {}

            except httpx.TimeoutException as e:
                raise PaymentError(f"Payments API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise PaymentError(f"Payments API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise PaymentError(f"Payments API unreachable: {e}") from e
            except ValueError as e:
                raise PaymentError(f"Invalid payout response: {e}") from e

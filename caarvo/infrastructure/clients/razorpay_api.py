"""Razorpay Orders API client."""

from typing import Any, Dict, Optional

import httpx
import structlog

from caarvo.config import get_settings
from caarvo.core.exceptions import ExternalServiceException

logger = structlog.get_logger(__name__)


class RazorpayClient:
    """Mints payment orders. Signature verification is local and lives in the payment service."""

    def __init__(
        self,
        key_id: Optional[str] = None,
        key_secret: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 15.0,
    ):
        settings = get_settings()
        self.key_id = settings.RAZORPAY_KEY_ID if key_id is None else key_id
        self.key_secret = settings.RAZORPAY_KEY_SECRET if key_secret is None else key_secret
        self.base_url = (base_url or settings.RAZORPAY_BASE_URL).rstrip("/")
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.key_id and self.key_secret)

    async def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
        notes: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Create an order. ``amount`` is in the currency's smallest unit (paise)."""
        payload = {"amount": amount, "currency": currency, "receipt": receipt, "notes": notes or {}}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, auth=(self.key_id, self.key_secret)
            ) as client:
                response = await client.post(f"{self.base_url}/orders", json=payload)
                response.raise_for_status()
                order = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Razorpay order creation rejected",
                status_code=e.response.status_code,
                body=e.response.text[:200],
                receipt=receipt,
            )
            raise ExternalServiceException(
                "Payment gateway rejected the order",
                details={"provider": "razorpay", "status": e.response.status_code},
            )
        except httpx.HTTPError as e:
            logger.warning("Razorpay connection error", error=str(e), receipt=receipt)
            raise ExternalServiceException(
                "Payment gateway unreachable", details={"provider": "razorpay"}
            )

        logger.info("Razorpay order created", order_id=order.get("id"), receipt=receipt)
        return order

"""MSG91 HTTP client: OTP SMS delivery and widget access-token verification."""

import asyncio
from typing import Optional

import httpx
import structlog

from caarvo.config import get_settings
from caarvo.core.exceptions import ExternalServiceException

logger = structlog.get_logger(__name__)

RETRYABLE_STATUS = (429, 500, 502, 503, 504)


def _national_number(phone: str) -> str:
    """MSG91 wants the 10-digit mobile number without the +91 prefix."""
    return phone[3:] if phone.startswith("+91") else phone.lstrip("+")


class Msg91Client:
    """Client for the MSG91 v5 OTP API.

    Sends are retried up to ``max_retries`` times with linear backoff; a
    non-retryable 4xx fails immediately.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        template_id: Optional[str] = None,
        sender_id: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
    ):
        settings = get_settings()
        self.api_key = settings.MSG91_API_KEY if api_key is None else api_key
        self.template_id = settings.MSG91_TEMPLATE_ID if template_id is None else template_id
        self.sender_id = settings.MSG91_SENDER_ID if sender_id is None else sender_id
        self.base_url = (base_url or settings.MSG91_BASE_URL).rstrip("/")
        self.timeout = timeout
        self.headers = {
            "authkey": self.api_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        self.max_retries = 3
        self.retry_delay = 1  # seconds

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def send_otp(self, phone: str, code: str) -> dict:
        url = f"{self.base_url}/otp"
        payload = {"mobile": _national_number(phone), "otp": code}
        if self.template_id:
            payload["template_id"] = self.template_id
        if self.sender_id:
            payload["sender"] = self.sender_id

        last_error: Optional[Exception] = None
        for attempt in range(1, self.max_retries + 1):
            try:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, json=payload, headers=self.headers)
                    response.raise_for_status()
                    result = response.json()
                if result.get("type") == "error":
                    raise ExternalServiceException(
                        "SMS provider rejected the request",
                        details={"provider": "msg91", "reason": result.get("message")},
                    )
                logger.info("OTP SMS sent", phone=phone, attempt=attempt)
                return result
            except httpx.HTTPStatusError as e:
                last_error = e
                logger.warning(
                    "MSG91 error response",
                    attempt=attempt,
                    status_code=e.response.status_code,
                    body=e.response.text[:200],
                )
                if e.response.status_code not in RETRYABLE_STATUS:
                    break
            except httpx.HTTPError as e:
                last_error = e
                logger.warning("MSG91 connection error", attempt=attempt, error=str(e))

            if attempt < self.max_retries:
                await asyncio.sleep(self.retry_delay * attempt)

        raise ExternalServiceException(
            f"SMS delivery failed after {attempt} attempt(s)",
            details={"provider": "msg91", "error": str(last_error)},
        )

    async def verify_access_token(self, access_token: str) -> Optional[str]:
        """Verify an OTP-widget access token.

        Returns the verified 10-digit mobile number (``None`` when the provider
        does not echo one). Raises ``ExternalServiceException`` when the token
        is rejected or the provider is unreachable.
        """
        url = f"{self.base_url}/widget/verifyAccessToken"
        payload = {"authkey": self.api_key, "access-token": access_token}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=payload, headers=self.headers)
                response.raise_for_status()
                result = response.json()
        except httpx.HTTPError as e:
            logger.warning("MSG91 token verification error", error=str(e))
            raise ExternalServiceException(
                "Access token verification failed", details={"provider": "msg91"}
            )

        if result.get("type") != "success":
            raise ExternalServiceException(
                "Access token verification failed",
                details={"provider": "msg91", "reason": result.get("message")},
            )
        return result.get("mobile")

"""Async client for the phone number admin API."""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

import httpx

from numberdesk.core.models.phone_number import PhoneNumberId, ResourceSnapshot
from numberdesk.core.models.reputation import ReputationData
from numberdesk.utils.errors import (
    ApiError,
    AuthenticationError,
    MissingRequiredFieldError,
    NetworkError,
    NetworkTimeoutError,
)
from numberdesk.utils.logging import async_log_call, get_logger

logger = get_logger(__name__)

ADMIN_NUMBERS_PATH = "/api/admin/phone-numbers"


@dataclass
class AssignmentRequest:
    """Body of an assign call."""

    user_id: str
    billing_start_date: Optional[date] = None
    notes: str = ""

    def __post_init__(self):
        if not self.user_id or not self.user_id.strip():
            raise MissingRequiredFieldError("A user id is required to assign numbers")

    def to_payload(self) -> Dict[str, Any]:
        billing_start = self.billing_start_date or date.today()
        payload: Dict[str, Any] = {
            "userId": self.user_id,
            "billingStartDate": billing_start.isoformat(),
        }
        if self.notes:
            payload["notes"] = self.notes
        return payload


@dataclass
class UnassignRequest:
    """Body of an unassign call."""

    reason: str = "Bulk unassigned by admin"
    cancel_pending_billing: bool = True
    create_refund: bool = False
    refund_amount: float = 0.0

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "reason": self.reason,
            "cancelPendingBilling": self.cancel_pending_billing,
            "createRefund": self.create_refund,
        }
        if self.create_refund:
            payload["refundAmount"] = self.refund_amount
        return payload


class PhoneNumberAdminClient:
    """Thin wrapper around ``httpx.AsyncClient`` for the admin endpoints.

    Every method raises a NetworkError subclass (or AuthenticationError)
    on failure, so callers can map exceptions to per-item failures.
    """

    def __init__(
        self,
        base_url: str,
        token: str = "",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_config(cls, api_config, transport: Optional[httpx.AsyncBaseTransport] = None) -> "PhoneNumberAdminClient":
        return cls(
            base_url=api_config.base_url,
            token=api_config.token,
            timeout=api_config.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "PhoneNumberAdminClient":
        return self

    async def __aexit__(self, exc_type, exc_value, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            response = await self._client.request(method, path, **kwargs)

        except httpx.TimeoutException as e:
            raise NetworkTimeoutError(f"{method} {path} timed out") from e
        except httpx.RequestError as e:
            raise NetworkError(f"Network error calling {method} {path}: {e}") from e

        data = self._decode(response)

        if response.status_code in (401, 403):
            raise AuthenticationError(
                data.get("error") or AuthenticationError.user_message,
                details={"status_code": response.status_code},
            )
        if response.is_error:
            raise ApiError(
                data.get("error") or f"{method} {path} failed with HTTP {response.status_code}",
                status_code=response.status_code,
            )

        return data

    @staticmethod
    def _decode(response: httpx.Response) -> Dict[str, Any]:
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {"data": data}

    @async_log_call
    async def list_numbers(self, page: int = 1, limit: int = 10) -> ResourceSnapshot:
        """Load one page of phone numbers."""
        data = await self._request(
            "GET", ADMIN_NUMBERS_PATH, params={"page": page, "limit": limit}
        )
        snapshot = ResourceSnapshot.from_api(data.get("phoneNumbers", []))
        logger.debug(f"Loaded {len(snapshot)} numbers (page {page})")
        return snapshot

    async def assign(self, id: PhoneNumberId, request: AssignmentRequest) -> Dict[str, Any]:
        return await self._request(
            "POST", f"{ADMIN_NUMBERS_PATH}/{id.value}/assign", json=request.to_payload()
        )

    async def unassign(self, id: PhoneNumberId, request: UnassignRequest) -> Dict[str, Any]:
        return await self._request(
            "POST", f"{ADMIN_NUMBERS_PATH}/{id.value}/unassign", json=request.to_payload()
        )

    async def delete(self, id: PhoneNumberId) -> Dict[str, Any]:
        return await self._request("DELETE", f"{ADMIN_NUMBERS_PATH}/{id.value}")

    async def check_reputation(self, id: PhoneNumberId, force_refresh: bool = True) -> ReputationData:
        """Run a reputation lookup for one number.

        Raises:
            ApiError: If the service answered without reputation data.
        """
        data = await self._request(
            "POST",
            f"{ADMIN_NUMBERS_PATH}/{id.value}/reputation",
            json={"forceRefresh": force_refresh},
        )
        if not data.get("success") or not data.get("reputation"):
            raise ApiError(data.get("error") or "Unknown error")

        return ReputationData.from_api(data["reputation"])

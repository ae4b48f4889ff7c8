"""HTTP notification dispatcher.

POSTs order status changes to the email function endpoint, which renders
and sends the customer email.
"""
# mypy: warn-unused-ignores=False

from typing import Any, Optional

import httpx
import structlog
from circuitbreaker import CircuitBreakerError, circuit
from pydantic import BaseModel, ConfigDict, Field
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from domain.shared.errors import NotificationFailureError
from domain.shared.ports.notification_dispatcher import OrderStatusNotification

logger = structlog.get_logger(__name__)


class OrderStatusPayload(BaseModel):
    """Wire body expected by the email function."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    order_id: str = Field(alias="orderId")
    customer_id: str = Field(alias="customerId")
    status: str
    date: str
    notes: str = ""
    skip_reason: Optional[str] = Field(default=None, alias="skipReason")

    @classmethod
    def from_notification(cls, notification: OrderStatusNotification) -> "OrderStatusPayload":
        return cls(
            order_id=notification.order_id,
            customer_id=notification.customer_id,
            status=notification.status,
            date=notification.date_key,
            notes=notification.notes,
            skip_reason=notification.skip_reason,
        )


class HttpNotificationDispatcher:
    """
    Implements INotificationDispatcher over HTTP.

    Transport errors and 5xx responses are retried; 4xx responses are not.
    Anything still failing surfaces as NotificationFailureError.

    Example:
        >>> async with HttpNotificationDispatcher("https://fn.example/email") as d:
        ...     await d.send_order_status(notification)
    """

    def __init__(
        self,
        endpoint_url: str,
        timeout_s: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.endpoint_url = endpoint_url
        self.timeout_s = timeout_s
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "HttpNotificationDispatcher":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout_s))
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def send_order_status(self, notification: OrderStatusNotification) -> None:
        """
        POST the notification.

        Raises:
            NotificationFailureError: If the endpoint could not be reached
                or rejected the notification
        """
        payload = OrderStatusPayload.from_notification(notification)
        try:
            await self._post(payload.model_dump(by_alias=True))
        except (httpx.HTTPError, CircuitBreakerError) as e:
            logger.warning(
                "Notification dispatch failed",
                order_id=notification.order_id,
                status=notification.status,
                error=str(e),
            )
            raise NotificationFailureError(
                f"Could not notify customer {notification.customer_id} "
                f"about order {notification.order_id}: {e}"
            ) from e

        logger.info(
            "Notification dispatched",
            order_id=notification.order_id,
            customer_id=notification.customer_id,
            status=notification.status,
        )

    @circuit(  # type: ignore[misc]
        failure_threshold=5,
        recovery_timeout=60,
        expected_exception=httpx.TransportError,
        name="notification_dispatch",
    )
    @retry(  # type: ignore[misc]
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _post(self, body: dict) -> None:
        client = self._ensure_client()
        response = await client.post(self.endpoint_url, json=body)
        if response.status_code >= 500:
            raise httpx.RemoteProtocolError(
                f"Server error {response.status_code}", request=response.request
            )
        response.raise_for_status()

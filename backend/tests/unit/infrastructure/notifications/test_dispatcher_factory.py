"""Unit tests for the notification dispatcher factory."""

import pytest

from domain.shared.ports.notification_dispatcher import OrderStatusNotification
from infrastructure.notifications.factory import (
    create_notification_dispatcher,
    get_notification_dispatcher,
    reset_notification_dispatcher,
)
from infrastructure.notifications.http_dispatcher import HttpNotificationDispatcher
from infrastructure.notifications.logging_dispatcher import LoggingNotificationDispatcher


@pytest.fixture(autouse=True)
def _reset():
    reset_notification_dispatcher()
    yield
    reset_notification_dispatcher()


def test_defaults_to_logging(monkeypatch):
    monkeypatch.delenv("NOTIFICATION_BACKEND", raising=False)

    assert isinstance(create_notification_dispatcher(), LoggingNotificationDispatcher)


def test_http_backend(monkeypatch):
    monkeypatch.setenv("NOTIFICATION_BACKEND", "HTTP")
    monkeypatch.setenv("NOTIFICATION_ENDPOINT_URL", "https://functions.example.test/email")
    monkeypatch.setenv("NOTIFICATION_TIMEOUT_S", "2.5")

    dispatcher = create_notification_dispatcher()

    assert isinstance(dispatcher, HttpNotificationDispatcher)
    assert dispatcher.timeout_s == 2.5


def test_http_backend_requires_endpoint(monkeypatch):
    monkeypatch.setenv("NOTIFICATION_BACKEND", "http")
    monkeypatch.delenv("NOTIFICATION_ENDPOINT_URL", raising=False)

    with pytest.raises(ValueError, match="NOTIFICATION_ENDPOINT_URL not set"):
        create_notification_dispatcher()


def test_singleton(monkeypatch):
    monkeypatch.delenv("NOTIFICATION_BACKEND", raising=False)

    assert get_notification_dispatcher() is get_notification_dispatcher()


@pytest.mark.asyncio
async def test_logging_dispatcher_records():
    dispatcher = LoggingNotificationDispatcher()
    notification = OrderStatusNotification("O1", "C1", "delivered", "2025-03-10")

    await dispatcher.send_order_status(notification)

    assert dispatcher.sent == [notification]

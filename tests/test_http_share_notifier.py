import json

import httpx
import pytest
from domain.exceptions import NotificationError
from domain.services.share_notifier import ShareNotification
from infrastructure.notifications.http_share_notifier import (
    HttpShareNotifier,
    NullShareNotifier,
)

NOTIFICATION = ShareNotification(
    recipient_email="bob@example.com",
    note_title="Plan",
    from_display_name="alice@example.com",
)


async def test_posts_notification_payload():
    requests = []

    def sender(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, text="Email sent successfully!")

    notifier = HttpShareNotifier(
        url="http://notifications.test/send-share-email",
        token="anon-key",
        transport=httpx.MockTransport(sender),
    )

    await notifier.send(NOTIFICATION)

    assert len(requests) == 1
    request = requests[0]
    assert request.method == "POST"
    assert str(request.url) == "http://notifications.test/send-share-email"
    assert request.headers["Authorization"] == "Bearer anon-key"
    assert json.loads(request.content) == {
        "recipientEmail": "bob@example.com",
        "noteTitle": "Plan",
        "fromDisplayName": "alice@example.com",
    }


async def test_accepts_any_2xx():
    notifier = HttpShareNotifier(
        url="http://notifications.test/send",
        transport=httpx.MockTransport(lambda request: httpx.Response(202)),
    )

    await notifier.send(NOTIFICATION)


async def test_non_2xx_raises_notification_error():
    notifier = HttpShareNotifier(
        url="http://notifications.test/send",
        transport=httpx.MockTransport(
            lambda request: httpx.Response(500, text="Missing RESEND_API_KEY")
        ),
    )

    with pytest.raises(NotificationError, match="500"):
        await notifier.send(NOTIFICATION)


async def test_transport_error_raises_notification_error():
    def sender(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    notifier = HttpShareNotifier(
        url="http://notifications.test/send", transport=httpx.MockTransport(sender)
    )

    with pytest.raises(NotificationError):
        await notifier.send(NOTIFICATION)


async def test_null_notifier_does_nothing():
    await NullShareNotifier().send(NOTIFICATION)

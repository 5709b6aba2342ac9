"""HTTP implementation of the share notifier.

POSTs share notifications to an external sender (for example an edge
function that emails the recipient). A 2xx answer means the sender
accepted the notification; anything else is reported as NotificationError.
Notifications are never retried.
"""

import logging
from typing import Optional

import httpx
from domain.exceptions import NotificationError
from domain.services.share_notifier import ShareNotification, ShareNotifier

logger = logging.getLogger(__name__)


class HttpShareNotifier(ShareNotifier):
    """Sends share notifications to a webhook-style sender.

    Attributes:
        url (str): Endpoint of the notification sender.
        token (str): Optional bearer token for the sender.
    """

    def __init__(
        self,
        url: str,
        token: str = "",
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.token = token
        self._timeout = timeout
        self._transport = transport

    async def send(self, notification: ShareNotification) -> None:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self.url, json=notification.to_payload(), headers=headers
                )
        except httpx.HTTPError as e:
            raise NotificationError(f"Error sending email notification: {e}") from e

        if not response.is_success:
            raise NotificationError(
                f"Email notification failed with status {response.status_code}: "
                f"{response.text}"
            )

        logger.info(f"Share notification sent to {notification.recipient_email}")


class NullShareNotifier(ShareNotifier):
    """Notifier used when no sender is configured."""

    async def send(self, notification: ShareNotification) -> None:
        logger.info(
            f"Notifications disabled, not notifying {notification.recipient_email}"
        )

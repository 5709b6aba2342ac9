"""Share notification contract.

When a note is shared, the recipient is told about it through an external
sender. Delivery is best effort: the sharing coordinator logs failures and
never lets them affect the share itself.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ShareNotification:
    """Payload describing a new share for the recipient.

    Attributes:
        recipient_email (str): Email of the user the note was shared with.
        note_title (str): Title of the shared note.
        from_display_name (str): How the sharing owner is shown to the recipient.
    """

    recipient_email: str
    note_title: str
    from_display_name: str

    def to_payload(self) -> dict:
        """Return the JSON body expected by the notification sender."""
        return {
            "recipientEmail": self.recipient_email,
            "noteTitle": self.note_title,
            "fromDisplayName": self.from_display_name,
        }


class ShareNotifier(ABC):
    """Abstract sender of share notifications."""

    @abstractmethod
    async def send(self, notification: ShareNotification) -> None:
        """Send one notification.

        Raises:
            NotificationError: If the sender did not accept the notification.
        """
        pass

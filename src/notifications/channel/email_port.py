"""Email channel port: abstract interface for receipt dispatch."""

from abc import ABC, abstractmethod


class EmailPort(ABC):
    """Abstract interface for email dispatch adapters."""

    @abstractmethod
    def send(
        self,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
    ) -> dict:
        """Send one message to a single recipient.

        Adapters never raise for delivery problems; they report them in the
        returned dict.

        Returns:
            dict with keys: message_id (None on failure), status ("sent" or
            "failed"), error (present on failure)
        """
        ...

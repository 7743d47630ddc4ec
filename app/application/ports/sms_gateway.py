from typing import Protocol


class SmsDeliveryError(Exception):
    """Raised by a gateway when a message could not be handed to the provider."""


class SmsGateway(Protocol):
    def send(self, phone_number: str, content: str) -> None:
        ...

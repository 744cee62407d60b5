from __future__ import annotations


class OrderIntakeError(Exception):
    """Base for every terminal outcome of an order submission other than success."""

    kind = "order_error"
    http_status = 500
    client_message = "Error placing order. Please try again."

    def __init__(self, detail: str | None = None, *, stage: str | None = None) -> None:
        super().__init__(detail or self.client_message)
        self.stage = stage

    @property
    def is_client_error(self) -> bool:
        return self.http_status < 500


class ValidationError(OrderIntakeError):
    http_status = 400


class MissingFieldsError(ValidationError):
    kind = "missing_fields"
    client_message = "All fields are required."


class InvalidPhoneError(ValidationError):
    kind = "invalid_phone"
    client_message = "Please enter a valid 10-digit Indian mobile number."


class DuplicateOrderError(OrderIntakeError):
    kind = "duplicate_order"
    http_status = 400
    client_message = "Similar order was placed recently. Please wait a moment."


class StorageError(OrderIntakeError):
    kind = "storage_error"


class NotifyError(OrderIntakeError):
    kind = "notify_error"


class PipelineTimeoutError(OrderIntakeError):
    kind = "timeout"

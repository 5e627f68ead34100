# app/core/exceptions.py


class TariffError(Exception):
    """Base class for errors raised by the tariff service."""

    reason = "Internal server error"

    def __init__(self, reason: str | None = None):
        if reason is not None:
            self.reason = reason
        super().__init__(self.reason)


class ValidationError(TariffError):
    """A required query field is missing or malformed."""

    reason = "Invalid request"


class ParseFailure(TariffError):
    """Free text did not match any known date or power pattern."""

    reason = "Unrecognized text"


class StoreFailure(TariffError):
    """The tariff store could not be read or written."""


class EntityUpdateFailure(TariffError):
    """The entity API rejected the tariff update."""

    reason = "Entity update failed"


class CallbackFailure(TariffError):
    """The resume callback to the automation workflow failed."""

    reason = "Callback failed"

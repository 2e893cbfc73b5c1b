"""Exceptions raised by the harness."""

from typing import Optional


class EthClientsError(Exception):
    """Base class for all harness errors."""


class ConfigError(EthClientsError):
    """Network configuration could not be interpreted."""


class ClientNotInitializedError(EthClientsError):
    """A call needs the spec or genesis, but init() has not completed."""


class NotReadyError(EthClientsError):
    """The requested resource does not exist on the remote node yet.

    Always retryable inside a poll loop.
    """


class BeaconAPIError(EthClientsError):
    """Error from Beacon API."""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"Beacon API error {status}: {message}")


class NotFoundError(BeaconAPIError, NotReadyError):
    """Endpoint or resource returned 404."""

    def __init__(self, message: str):
        super().__init__(404, message)


class UnsupportedVariantError(EthClientsError):
    """A field or operation does not exist at the payload's fork."""

    def __init__(self, fork: str, operation: str):
        self.fork = fork
        self.operation = operation
        super().__init__(f"{operation} is not available for {fork} payloads")


class UnknownSchemaError(EthClientsError):
    """The payload's version tag or type matches none of the known forks."""

    def __init__(self, version: str):
        self.version = version
        super().__init__(f"badly formatted payload: unknown schema {version!r}")


class InvalidRegistryStateError(EthClientsError):
    """Validator registry and balances are inconsistent."""


class InvalidValidatorIndexError(InvalidRegistryStateError):
    """A validator index fell outside the registry or the balance list."""

    def __init__(
        self,
        index: int,
        validator_count: int,
        balance_count: Optional[int] = None,
    ):
        self.index = index
        self.validator_count = validator_count
        self.balance_count = balance_count
        detail = f"validators={validator_count}"
        if balance_count is not None:
            detail += f", balances={balance_count}"
        super().__init__(f"invalid validator index {index} ({detail})")


class PollTimeoutError(EthClientsError):
    """The deadline passed before a polled condition held."""

    def __init__(self, what: str, timeout: Optional[float]):
        self.what = what
        self.timeout = timeout
        super().__init__(f"timed out after {timeout}s waiting for {what}")

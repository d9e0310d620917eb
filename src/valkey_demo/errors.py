from __future__ import annotations


class ValkeyDemoError(Exception):
    """Base class for all application errors."""


class ResolutionError(ValkeyDemoError):
    """Raised when connection credentials cannot be resolved."""


class ConfigurationError(ResolutionError):
    """A local-mode environment value is missing or invalid."""


class MissingHost(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("environment variable VALKEY_HOST not set")


class MissingUsername(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("environment variable VALKEY_USERNAME not set")


class MissingPassword(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("environment variable VALKEY_PASSWORD not set")


class MissingPort(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("environment variable VALKEY_PORT not set")


class InvalidPort(ConfigurationError):
    def __init__(self, raw: str) -> None:
        super().__init__(f"environment variable VALKEY_PORT is not a valid port: {raw!r}")
        self.raw = raw


class PayloadError(ResolutionError):
    """The platform service-binding payload is unusable."""


class MalformedBindingPayload(PayloadError):
    pass


class NoServiceInstances(PayloadError):
    def __init__(self) -> None:
        super().__init__("no valid services found in VCAP_SERVICES")


class StoreConnectionError(ValkeyDemoError):
    """Transport, authentication or TLS failure while connecting."""


class InvalidCaCertificate(StoreConnectionError):
    def __init__(self) -> None:
        super().__init__("failed to create root CA pool using `cacrt`")


class StoreOperationError(ValkeyDemoError):
    """A get/set/keys command failed on an established connection."""


class AppDirError(ValkeyDemoError):
    """The static asset directory could not be resolved at startup."""

"""
Custom exceptions for the provider adapter layer.

The orchestrator never surfaces these to the caller: any ProviderError moves
the request on to the next candidate provider.
"""


class ProviderError(Exception):
    """
    Base exception for all provider adapter errors.

    Carries the provider name and, where the provider sent one, its own error
    message so that it can be echoed in the fallback response.
    """

    def __init__(self, message: str, provider: str = "unknown", details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.details = details or {}


class ProviderConfigurationError(ProviderError):
    """
    Raised at construction when a provider is missing required configuration.

    Adapters fail fast so unconfigured providers are skipped without any
    network call.
    """
    pass


class ProviderConnectionError(ProviderError):
    """Network-level failure reaching the provider (DNS, refused, reset...)."""
    pass


class ProviderTimeoutError(ProviderConnectionError):
    """The provider did not answer within the configured timeout."""
    pass


class ProviderHTTPError(ProviderError):
    """
    Non-2xx response from the provider.

    ``message`` is the provider's own error message when one can be found in
    the body.
    """

    def __init__(self, message: str, provider: str = "unknown", status_code: int = 0, details: dict | None = None):
        super().__init__(message, provider=provider, details=details)
        self.status_code = status_code


class ProviderResponseError(ProviderError):
    """The provider answered 2xx but the body could not be parsed."""
    pass


class ProviderEmptyResponseError(ProviderError):
    """The provider answered but produced no usable text."""
    pass

"""Domain exception hierarchy.

Every stage of the request pipeline raises its own exception type so callers
can tell *where* a call failed.  The underlying cause is always chained with
``raise ... from``; nothing is retried or recovered internally.  The
interface layer maps each type to an HTTP status code.
"""

from __future__ import annotations


class LanguageGatewayError(Exception):
    """Base exception for the entire application."""


# ── Input validation ────────────────────────────────────────────────────────


class InvalidRequestError(LanguageGatewayError):
    """A required request field (model name, API key, text) is empty."""


# ── Local request preparation ───────────────────────────────────────────────


class SerializationError(LanguageGatewayError):
    """The request body could not be encoded as JSON."""


class RequestConstructionError(LanguageGatewayError):
    """The outbound HTTP request could not be built (bad URL, bad header)."""


# ── Provider round trip ─────────────────────────────────────────────────────


class ProviderError(LanguageGatewayError):
    """Any failure while talking to the LLM provider."""


class NetworkError(ProviderError):
    """The request could not be delivered (DNS, connect, TLS, timeout)."""


class ResponseReadError(ProviderError):
    """The response body could not be read to completion."""


class ProviderStatusError(ProviderError):
    """The provider answered with a non-2xx status code."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class DeserializationError(ProviderError):
    """The response body did not decode into the expected structure."""


class EmptyResultsError(ProviderError):
    """The provider returned no moderation results or completion choices."""


class ModelReplyDecodeError(ProviderError):
    """The model's reply text is not JSON matching :class:`ModelResponse`."""

"""
Albedo intent error types.

Validation errors are raised before any transport is touched. Transport
errors come back from a single exchange and are never retried here.
"""

from typing import Any, Optional

# Error codes reported by the confirmation surface in {"error": {"code", "message"}}
INTENT_ERRORS = {
    "unhandled_error": -1,
    "invalid_intent_request": -2,
    "action_rejected_by_user": -4,
    "external_error": -5,
    "not_supported": -6,
}


class AlbedoError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class IntentValidationError(AlbedoError):
    """Request rejected locally, nothing was sent."""


class MissingIntentError(IntentValidationError):
    def __init__(self, message: str = 'Parameter "intent" is required.'):
        super().__init__("missing_intent", message)


class UnknownIntentError(IntentValidationError):
    def __init__(self, intent: str):
        super().__init__("unknown_intent", f'Unknown intent: "{intent}".', {"intent": intent})


class InvalidParametersError(IntentValidationError):
    def __init__(self, message: str = "Intent parameters expected.", details: Optional[dict[str, Any]] = None):
        super().__init__("invalid_parameters", message, details)


class InvalidPubkeyError(IntentValidationError):
    def __init__(self, pubkey: Any):
        super().__init__(
            "invalid_pubkey",
            'Invalid "pubkey" parameter. Stellar account public key expected.',
            {"pubkey": pubkey},
        )


class MissingRequiredParameterError(IntentValidationError):
    def __init__(self, parameter: str, intent: str):
        super().__init__(
            "missing_required_parameter",
            f'Parameter "{parameter}" is required for intent "{intent}".',
            {"parameter": parameter, "intent": intent},
        )
        self.parameter = parameter
        self.intent = intent


class TransportError(AlbedoError):
    """Exchange with the confirmation surface failed."""


class UserRejectedError(TransportError):
    def __init__(self, message: str = "Action request was rejected by the user.", details: Optional[dict[str, Any]] = None):
        super().__init__("user_rejected", message, details)


class RequestTimeoutError(TransportError):
    def __init__(self, message: str):
        super().__init__("timeout", message)


class ChannelClosedError(TransportError):
    def __init__(self, message: str = "Confirmation surface closed before responding."):
        super().__init__("channel_closed", message)


class IntentRequestError(TransportError):
    """Error reported by the confirmation surface itself."""

    def __init__(self, message: str, remote_code: Optional[int] = None):
        super().__init__("intent_request_error", message, {"remote_code": remote_code})
        self.remote_code = remote_code


class SessionGrantError(AlbedoError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("invalid_session_grant", message, details)


class InvalidLinkError(AlbedoError):
    def __init__(self, message: str, uri: Optional[str] = None):
        super().__init__("invalid_link", message, {"uri": uri} if uri is not None else None)

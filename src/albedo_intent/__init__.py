"""
albedo-intent — Albedo intent client for Python.

Request transaction signing, payments, trustlines, message signing and
account management from the Albedo signer without handling key material.
"""

from albedo_intent.client import Albedo, AsyncAlbedo
from albedo_intent.dispatcher import IntentDispatcher
from albedo_intent.registry import INTENT_INTERFACE, IntentRegistry
from albedo_intent.session_store import SessionStore
from albedo_intent.transport import TransportKind, TransportProvider
from albedo_intent.errors import (
    AlbedoError,
    IntentValidationError,
    MissingIntentError,
    UnknownIntentError,
    InvalidParametersError,
    InvalidPubkeyError,
    MissingRequiredParameterError,
    TransportError,
    UserRejectedError,
    RequestTimeoutError,
    ChannelClosedError,
    IntentRequestError,
    SessionGrantError,
    InvalidLinkError,
)

__version__ = "0.1.0"
__all__ = [
    "Albedo",
    "AsyncAlbedo",
    "IntentDispatcher",
    "IntentRegistry",
    "INTENT_INTERFACE",
    "SessionStore",
    "TransportKind",
    "TransportProvider",
    "AlbedoError",
    "IntentValidationError",
    "MissingIntentError",
    "UnknownIntentError",
    "InvalidParametersError",
    "InvalidPubkeyError",
    "MissingRequiredParameterError",
    "TransportError",
    "UserRejectedError",
    "RequestTimeoutError",
    "ChannelClosedError",
    "IntentRequestError",
    "SessionGrantError",
    "InvalidLinkError",
]

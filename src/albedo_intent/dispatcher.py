"""
Intent dispatcher — validates a request against the intent interface, picks a
transport, exchanges one request/response pair and records implicit session
grants.

Flow:
- validate: params → RequestEnvelope (declared parameters only)
- select: extension > frame (implicit session) > dialog
- exchange: one correlated round-trip, errors propagate as raised
- post-process: implicit_flow grants are stored, results returned unchanged
"""

import logging
import re
from typing import Any, Mapping, Protocol

from albedo_intent.errors import (
    InvalidParametersError,
    InvalidPubkeyError,
    MissingIntentError,
    MissingRequiredParameterError,
    UnknownIntentError,
)
from albedo_intent.models.envelope import IntentResult, RequestEnvelope
from albedo_intent.models.intent import IntentDescriptor
from albedo_intent.registry import IntentRegistry
from albedo_intent.session_store import SessionStore
from albedo_intent.transport.base import Transport, TransportKind, select_transport_kind

logger = logging.getLogger(__name__)

PUBKEY_PATTERN = re.compile(r"^G[0-9A-Z]{55}$")


class TransportFactory(Protocol):
    async def extension_available(self) -> bool: ...

    def create(self, kind: TransportKind) -> Transport: ...


def is_valid_pubkey(pubkey: Any) -> bool:
    return isinstance(pubkey, str) and PUBKEY_PATTERN.match(pubkey) is not None


class IntentDispatcher:
    def __init__(self, registry: IntentRegistry, store: SessionStore, transports: TransportFactory):
        self._registry = registry
        self._store = store
        self._transports = transports

    async def dispatch(self, params: Any) -> dict[str, Any]:
        """Validate params, send them through a suitable transport and return the result."""
        envelope = self.prepare_request(params)
        kind = await self.select_transport(envelope)
        transport = self._transports.create(kind)
        logger.debug(f"Dispatching {envelope.intent} via {kind.value} transport")
        result = await transport.exchange(envelope.to_message())
        return self._post_process(result)

    def prepare_request(self, params: Any) -> RequestEnvelope:
        """Build the outgoing envelope. Raises before any transport work."""
        if not isinstance(params, Mapping):
            raise InvalidParametersError()
        intent = params.get("intent")
        if not intent:
            raise MissingIntentError()
        descriptor = self._registry.lookup(intent) if isinstance(intent, str) else None
        if descriptor is None:
            raise UnknownIntentError(str(intent))
        pubkey = params.get("pubkey")
        if pubkey and not is_valid_pubkey(pubkey):
            raise InvalidPubkeyError(pubkey)
        return RequestEnvelope(intent=intent, params=self._collect_parameters(descriptor, params))

    @staticmethod
    def _collect_parameters(descriptor: IntentDescriptor, params: Mapping[str, Any]) -> dict[str, Any]:
        collected: dict[str, Any] = {}
        for key, props in descriptor.parameters.items():
            value = params.get(key)
            if value:
                collected[key] = value
            elif props.required:
                raise MissingRequiredParameterError(key, descriptor.name)
        return collected

    async def select_transport(self, envelope: RequestEnvelope) -> TransportKind:
        """Pick the transport kind, attaching a cached implicit session key when one applies."""
        extension_available = await self._transports.extension_available()
        session = None
        if envelope.pubkey:
            session = self._store.get(envelope.intent, envelope.pubkey)
            if session is not None:
                envelope.session = session.key
                logger.debug(f"Using implicit session for {envelope.intent} ({envelope.pubkey})")
        return select_transport_kind(extension_available, session is not None)

    def _post_process(self, result: dict[str, Any]) -> dict[str, Any]:
        if IntentResult.model_construct(**result).is_session_grant:
            self._store.add(result)
        return result


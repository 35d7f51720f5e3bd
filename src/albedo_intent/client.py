"""
AsyncAlbedo / Albedo — intent clients for third-party applications.
"""

import asyncio
import json
from typing import Any, Optional, Union

from albedo_intent.dispatcher import IntentDispatcher, TransportFactory
from albedo_intent.errors import InvalidParametersError
from albedo_intent.links import parse_stellar_link
from albedo_intent.models.session import ImplicitSession
from albedo_intent.registry import IntentRegistry
from albedo_intent.session_store import SessionStore
from albedo_intent.tokens import generate_random_token
from albedo_intent.transport.provider import TransportProvider

DEFAULT_FRONTEND_URL = "https://albedo.link"


def normalize_message(message: Any) -> str:
    """Messages to sign are sent as text; non-string values are JSON-encoded."""
    if isinstance(message, str):
        return message
    if message is None:
        return ""
    return json.dumps(message)


def _merge(params: Optional[dict[str, Any]], **kwargs: Any) -> dict[str, Any]:
    merged = dict(params or {})
    merged.update({k: v for k, v in kwargs.items() if v is not None})
    return merged


class AsyncAlbedo:
    """Async intent client (primary)."""

    def __init__(
        self,
        frontend_url: str = DEFAULT_FRONTEND_URL,
        store: Optional[SessionStore] = None,
        transports: Optional[TransportFactory] = None,
        registry: Optional[IntentRegistry] = None,
        **transport_options: Any,
    ):
        self.frontend_url = frontend_url
        self.registry = registry or IntentRegistry()
        self.sessions = store if store is not None else SessionStore()
        self.transports = transports or TransportProvider(frontend_url, **transport_options)
        self._dispatcher = IntentDispatcher(self.registry, self.sessions, self.transports)

    async def request(self, intent: str, params: Optional[dict[str, Any]] = None, **kwargs: Any) -> dict[str, Any]:
        """Request confirmation for any intent by name."""
        merged = _merge(params, **kwargs)
        merged["intent"] = intent
        return await self._dispatcher.dispatch(merged)

    async def implicit_flow(self, intents: Union[str, list[str]], network: Optional[str] = None, **kwargs: Any) -> dict[str, Any]:
        """Request temporary permission to run intents without a confirmation dialog."""
        requested = [i.strip() for i in intents.split(",") if i.strip()] if isinstance(intents, str) else list(intents)
        allowed = self.registry.implicit_flow_intents()
        refused = [i for i in requested if i not in allowed]
        if refused:
            raise InvalidParametersError(
                f"Intents cannot be granted to an implicit session: {', '.join(refused)}.",
                {"intents": refused, "allowed": allowed},
            )
        intents = ",".join(requested)
        return await self.request("implicit_flow", intents=intents, network=network, **kwargs)

    async def public_key(self, token: Optional[str] = None, **kwargs: Any) -> dict[str, Any]:
        """Request account public key; a random verification token is generated when not given."""
        return await self.request("public_key", token=token or generate_random_token(), **kwargs)

    async def tx(self, xdr: str, pubkey: Optional[str] = None, network: Optional[str] = None,
                 submit: Optional[bool] = None, **kwargs: Any) -> dict[str, Any]:
        """Request transaction signing (base64 XDR)."""
        return await self.request("tx", xdr=xdr, pubkey=pubkey, network=network, submit=submit, **kwargs)

    async def pay(self, amount: str, destination: str, **kwargs: Any) -> dict[str, Any]:
        """Request a payment. Optional: asset_code, asset_issuer, memo, memo_type, pubkey, network, submit."""
        return await self.request("pay", amount=amount, destination=destination, **kwargs)

    async def trust(self, asset_code: str, asset_issuer: str, limit: Optional[str] = None, **kwargs: Any) -> dict[str, Any]:
        """Request a trustline creation."""
        return await self.request("trust", asset_code=asset_code, asset_issuer=asset_issuer, limit=limit, **kwargs)

    async def exchange(self, amount: str, max_price: str, **kwargs: Any) -> dict[str, Any]:
        """Request token exchange on Stellar DEX."""
        return await self.request("exchange", amount=amount, max_price=max_price, **kwargs)

    async def sign_message(self, message: Any, pubkey: Optional[str] = None, **kwargs: Any) -> dict[str, Any]:
        """Request arbitrary message signing."""
        return await self.request("sign_message", message=normalize_message(message), pubkey=pubkey, **kwargs)

    async def manage_account(self, pubkey: str, network: Optional[str] = None) -> dict[str, Any]:
        """Open account settings for the given account."""
        return await self.request("manage_account", pubkey=pubkey, network=network)

    async def handle_stellar_link(self, uri: str) -> dict[str, Any]:
        """Dispatch a web+stellar: link as the matching intent."""
        link = parse_stellar_link(uri)
        return await self.request(link.intent, link.params)

    @staticmethod
    def generate_random_token() -> str:
        return generate_random_token()

    def is_implicit_session_allowed(self, intent: str, pubkey: str) -> bool:
        return self.sessions.get(intent, pubkey) is not None

    def list_implicit_sessions(self) -> list[ImplicitSession]:
        """Currently active implicit sessions."""
        return self.sessions.list_active()

    def forget_implicit_session(self, pubkey: str) -> None:
        self.sessions.forget(pubkey)

    async def close(self) -> None:
        close = getattr(self.transports, "close", None)
        if close is not None:
            await close()


class Albedo:
    """Sync wrapper around AsyncAlbedo. Runs the event loop internally."""

    def __init__(self, **kwargs: Any):
        self._async = AsyncAlbedo(**kwargs)
        self._loop = asyncio.new_event_loop()

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def sessions(self) -> SessionStore:
        return self._async.sessions

    def request(self, intent: str, params: Optional[dict[str, Any]] = None, **kwargs: Any) -> dict[str, Any]:
        return self._run(self._async.request(intent, params, **kwargs))

    def implicit_flow(self, intents: Union[str, list[str]], **kwargs: Any) -> dict[str, Any]:
        return self._run(self._async.implicit_flow(intents, **kwargs))

    def public_key(self, token: Optional[str] = None, **kwargs: Any) -> dict[str, Any]:
        return self._run(self._async.public_key(token, **kwargs))

    def tx(self, xdr: str, **kwargs: Any) -> dict[str, Any]:
        return self._run(self._async.tx(xdr, **kwargs))

    def pay(self, amount: str, destination: str, **kwargs: Any) -> dict[str, Any]:
        return self._run(self._async.pay(amount, destination, **kwargs))

    def trust(self, asset_code: str, asset_issuer: str, **kwargs: Any) -> dict[str, Any]:
        return self._run(self._async.trust(asset_code, asset_issuer, **kwargs))

    def exchange(self, amount: str, max_price: str, **kwargs: Any) -> dict[str, Any]:
        return self._run(self._async.exchange(amount, max_price, **kwargs))

    def sign_message(self, message: Any, **kwargs: Any) -> dict[str, Any]:
        return self._run(self._async.sign_message(message, **kwargs))

    def manage_account(self, pubkey: str, **kwargs: Any) -> dict[str, Any]:
        return self._run(self._async.manage_account(pubkey, **kwargs))

    def handle_stellar_link(self, uri: str) -> dict[str, Any]:
        return self._run(self._async.handle_stellar_link(uri))

    def is_implicit_session_allowed(self, intent: str, pubkey: str) -> bool:
        return self._async.is_implicit_session_allowed(intent, pubkey)

    def list_implicit_sessions(self) -> list[ImplicitSession]:
        return self._async.list_implicit_sessions()

    def forget_implicit_session(self, pubkey: str) -> None:
        self._async.forget_implicit_session(pubkey)

    def close(self) -> None:
        self._run(self._async.close())
        self._loop.close()

    generate_random_token = staticmethod(AsyncAlbedo.generate_random_token)

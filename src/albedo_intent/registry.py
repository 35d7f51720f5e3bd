"""
Intent registry — static interface table of every intent a third-party app may request.
"""

from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

from albedo_intent.models.intent import IntentDescriptor, IntentParameter


def _intent(name: str, title: str, risk: str, implicit_flow: bool, **params: dict[str, Any]) -> IntentDescriptor:
    return IntentDescriptor(
        name=name,
        title=title,
        risk=risk,
        implicit_flow=implicit_flow,
        parameters={key: IntentParameter(**props) for key, props in params.items()},
    )


_OPTIONAL: dict[str, Any] = {"required": False}
_REQUIRED: dict[str, Any] = {"required": True}

INTENT_INTERFACE: Mapping[str, IntentDescriptor] = MappingProxyType({
    d.name: d for d in (
        _intent(
            "public_key", "Get account public key", "low", True,
            token=_OPTIONAL, callback=_OPTIONAL,
        ),
        _intent(
            "sign_message", "Sign text message", "high", False,
            message=_REQUIRED, pubkey=_OPTIONAL, callback=_OPTIONAL,
        ),
        _intent(
            "tx", "Sign transaction", "high", True,
            xdr=_REQUIRED, pubkey=_OPTIONAL, network=_OPTIONAL, submit=_OPTIONAL,
            description=_OPTIONAL, callback=_OPTIONAL,
        ),
        _intent(
            "pay", "Make payment", "medium", True,
            amount=_REQUIRED, destination=_REQUIRED, asset_code=_OPTIONAL, asset_issuer=_OPTIONAL,
            memo=_OPTIONAL, memo_type=_OPTIONAL, pubkey=_OPTIONAL, network=_OPTIONAL,
            submit=_OPTIONAL, callback=_OPTIONAL,
        ),
        _intent(
            "trust", "Establish trustline", "low", True,
            asset_code=_REQUIRED, asset_issuer=_REQUIRED, limit=_OPTIONAL, pubkey=_OPTIONAL,
            network=_OPTIONAL, submit=_OPTIONAL, callback=_OPTIONAL,
        ),
        _intent(
            "exchange", "Purchase tokens on Stellar DEX", "medium", True,
            amount=_REQUIRED, max_price=_REQUIRED, sell_asset_code=_OPTIONAL, sell_asset_issuer=_OPTIONAL,
            buy_asset_code=_OPTIONAL, buy_asset_issuer=_OPTIONAL, pubkey=_OPTIONAL, network=_OPTIONAL,
            submit=_OPTIONAL, callback=_OPTIONAL,
        ),
        _intent(
            "implicit_flow", "Request implicit session permissions", "high", False,
            intents=_REQUIRED, network=_OPTIONAL, app_name=_OPTIONAL,
        ),
        _intent(
            "manage_account", "Open account settings", "low", False,
            pubkey=_REQUIRED, network=_OPTIONAL,
        ),
    )
})


class IntentRegistry:
    """Read-only lookup over an intent interface table."""

    def __init__(self, table: Optional[Mapping[str, IntentDescriptor]] = None):
        self._table: Mapping[str, IntentDescriptor] = MappingProxyType(
            dict(table if table is not None else INTENT_INTERFACE)
        )

    def lookup(self, name: str) -> Optional[IntentDescriptor]:
        return self._table.get(name)

    def names(self) -> list[str]:
        return list(self._table)

    def implicit_flow_intents(self) -> list[str]:
        """Intents that may be granted to an implicit session."""
        return [name for name, d in self._table.items() if d.implicit_flow]

    def __contains__(self, name: object) -> bool:
        return name in self._table

    def __iter__(self) -> Iterator[IntentDescriptor]:
        return iter(self._table.values())

"""
web+stellar: link handling (SEP-0007).

    web+stellar:tx?xdr=...&pubkey=...&network_passphrase=...&callback=url:...
    web+stellar:pay?destination=...&amount=...&asset_code=...&memo=...

Each link maps onto a regular intent request.
"""

from typing import Any, NamedTuple
from urllib.parse import parse_qsl, urlsplit

from albedo_intent.errors import InvalidLinkError

LINK_SCHEME = "web+stellar"

# SEP-0007 query field → intent parameter
_FIELD_MAP: dict[str, dict[str, str]] = {
    "tx": {
        "xdr": "xdr",
        "pubkey": "pubkey",
        "network_passphrase": "network",
        "callback": "callback",
        "msg": "description",
    },
    "pay": {
        "destination": "destination",
        "amount": "amount",
        "asset_code": "asset_code",
        "asset_issuer": "asset_issuer",
        "memo": "memo",
        "memo_type": "memo_type",
        "network_passphrase": "network",
        "callback": "callback",
    },
}


class StellarLinkRequest(NamedTuple):
    intent: str
    params: dict[str, Any]


def parse_stellar_link(uri: str) -> StellarLinkRequest:
    """Parse a web+stellar: link into an intent name and its parameters."""
    if not isinstance(uri, str):
        raise InvalidLinkError("Link must be a string.")
    parts = urlsplit(uri.strip())
    if parts.scheme.lower() != LINK_SCHEME:
        raise InvalidLinkError(f'Unsupported link scheme "{parts.scheme}".', uri)
    operation = parts.path.strip("/")
    fields = _FIELD_MAP.get(operation)
    if fields is None:
        raise InvalidLinkError(f'Unsupported web+stellar operation "{operation}".', uri)

    params: dict[str, Any] = {}
    for key, value in parse_qsl(parts.query, keep_blank_values=False):
        target = fields.get(key)
        if not target or not value:
            continue
        if target == "callback" and value.startswith("url:"):
            value = value[len("url:"):]
        params[target] = value
    return StellarLinkRequest(intent=operation, params=params)

import pytest

from albedo_intent.errors import InvalidLinkError
from albedo_intent.links import parse_stellar_link

from conftest import PUBKEY


def test_tx_link():
    link = parse_stellar_link(
        f"web+stellar:tx?xdr=AAAA%2B%2F%3D&pubkey={PUBKEY}"
        "&network_passphrase=Test%20SDF%20Network%20%3B%20September%202015"
        "&callback=url%3Ahttps%3A%2F%2Fexample.com%2Fcb&msg=order%2042&origin_domain=example.com"
    )
    assert link.intent == "tx"
    assert link.params == {
        "xdr": "AAAA+/=",
        "pubkey": PUBKEY,
        "network": "Test SDF Network ; September 2015",
        "callback": "https://example.com/cb",
        "description": "order 42",
    }


def test_pay_link():
    link = parse_stellar_link(
        f"web+stellar:pay?destination={PUBKEY}&amount=120.1234567&memo=skdjfasf&memo_type=MEMO_TEXT"
        "&asset_code=USD&asset_issuer=GISSUER"
    )
    assert link.intent == "pay"
    assert link.params == {
        "destination": PUBKEY,
        "amount": "120.1234567",
        "memo": "skdjfasf",
        "memo_type": "MEMO_TEXT",
        "asset_code": "USD",
        "asset_issuer": "GISSUER",
    }


@pytest.mark.parametrize("uri", [
    "https://albedo.link/confirm",
    "web+stellar:sign?msg=hello",
    "web+stellar:",
])
def test_unsupported_links(uri):
    with pytest.raises(InvalidLinkError):
        parse_stellar_link(uri)

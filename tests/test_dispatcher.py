import pytest

from albedo_intent.dispatcher import IntentDispatcher, is_valid_pubkey
from albedo_intent.errors import (
    ChannelClosedError,
    InvalidParametersError,
    InvalidPubkeyError,
    MissingIntentError,
    MissingRequiredParameterError,
    RequestTimeoutError,
    UnknownIntentError,
    UserRejectedError,
)
from albedo_intent.registry import IntentRegistry
from albedo_intent.transport.base import TransportKind

from conftest import PUBKEY, FakeTransports, grant


def make_dispatcher(store, **kwargs):
    transports = FakeTransports(**kwargs)
    return IntentDispatcher(IntentRegistry(), store, transports), transports


class TestValidation:
    @pytest.mark.asyncio
    async def test_missing_intent(self, store):
        dispatcher, transports = make_dispatcher(store)
        with pytest.raises(MissingIntentError):
            await dispatcher.dispatch({"xdr": "AAAA"})
        with pytest.raises(MissingIntentError):
            await dispatcher.dispatch({"intent": ""})
        assert transports.created == []

    @pytest.mark.asyncio
    async def test_unknown_intent(self, store):
        dispatcher, transports = make_dispatcher(store)
        with pytest.raises(UnknownIntentError) as exc:
            await dispatcher.dispatch({"intent": "drain_wallet"})
        assert exc.value.details == {"intent": "drain_wallet"}
        assert transports.created == []

    @pytest.mark.asyncio
    async def test_params_must_be_mapping(self, store):
        dispatcher, transports = make_dispatcher(store)
        with pytest.raises(InvalidParametersError):
            await dispatcher.dispatch(["intent", "tx"])
        with pytest.raises(InvalidParametersError):
            await dispatcher.dispatch(None)
        assert transports.created == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("pubkey", [
        "GABC",
        "g" + "A" * 55,
        "S" + "A" * 55,
        "G" + "a" * 55,
        "G" + "A" * 56,
        12345,
    ])
    async def test_invalid_pubkey(self, store, pubkey):
        dispatcher, transports = make_dispatcher(store)
        with pytest.raises(InvalidPubkeyError):
            await dispatcher.dispatch({"intent": "tx", "xdr": "AAAA", "pubkey": pubkey})
        assert transports.created == []

    @pytest.mark.asyncio
    async def test_missing_required_parameter(self, store):
        dispatcher, transports = make_dispatcher(store)
        with pytest.raises(MissingRequiredParameterError) as exc:
            await dispatcher.dispatch({"intent": "pay", "amount": "10"})
        assert exc.value.parameter == "destination"
        assert exc.value.intent == "pay"
        assert transports.created == []

    @pytest.mark.asyncio
    async def test_falsy_required_value_counts_as_missing(self, store):
        dispatcher, _ = make_dispatcher(store)
        with pytest.raises(MissingRequiredParameterError):
            await dispatcher.dispatch({"intent": "tx", "xdr": ""})

    def test_pubkey_shape(self):
        assert is_valid_pubkey(PUBKEY)
        assert is_valid_pubkey("G" + "Z2" * 27 + "7")
        assert not is_valid_pubkey(None)


class TestEnvelope:
    @pytest.mark.asyncio
    async def test_undeclared_parameters_are_dropped(self, store):
        dispatcher, transports = make_dispatcher(store)
        await dispatcher.dispatch({
            "intent": "tx",
            "xdr": "AAAA",
            "network": "testnet",
            "secret": "SXXX",
            "session": "forged",
            "submit": False,
        })
        assert transports.last.sent == [{"intent": "tx", "xdr": "AAAA", "network": "testnet"}]

    def test_prepare_request(self, store):
        dispatcher, _ = make_dispatcher(store)
        envelope = dispatcher.prepare_request({"intent": "sign_message", "message": "hi", "pubkey": PUBKEY})
        assert envelope.intent == "sign_message"
        assert envelope.params == {"message": "hi", "pubkey": PUBKEY}
        assert envelope.pubkey == PUBKEY
        assert envelope.session is None


class TestTransportSelection:
    @pytest.mark.asyncio
    async def test_dialog_without_session_or_extension(self, store):
        dispatcher, transports = make_dispatcher(store)
        await dispatcher.dispatch({"intent": "tx", "xdr": "AAAA", "pubkey": PUBKEY})
        assert transports.last.kind == TransportKind.DIALOG
        assert "session" not in transports.last.sent[0]

    @pytest.mark.asyncio
    async def test_frame_with_session(self, store):
        store.add(grant(key="tok-1", grants=["tx"]))
        dispatcher, transports = make_dispatcher(store)
        await dispatcher.dispatch({"intent": "tx", "xdr": "AAAA", "pubkey": PUBKEY})
        assert transports.last.kind == TransportKind.FRAME
        assert transports.last.sent[0]["session"] == "tok-1"

    @pytest.mark.asyncio
    async def test_session_not_granted_for_intent(self, store):
        store.add(grant(grants=["pay"]))
        dispatcher, transports = make_dispatcher(store)
        await dispatcher.dispatch({"intent": "tx", "xdr": "AAAA", "pubkey": PUBKEY})
        assert transports.last.kind == TransportKind.DIALOG
        assert "session" not in transports.last.sent[0]

    @pytest.mark.asyncio
    async def test_expired_session_falls_back_to_dialog(self, store, clock):
        store.add(grant(valid_until=clock.now + 5))
        clock.now += 10
        dispatcher, transports = make_dispatcher(store)
        await dispatcher.dispatch({"intent": "tx", "xdr": "AAAA", "pubkey": PUBKEY})
        assert transports.last.kind == TransportKind.DIALOG

    @pytest.mark.asyncio
    async def test_session_needs_pubkey(self, store):
        store.add(grant())
        dispatcher, transports = make_dispatcher(store)
        await dispatcher.dispatch({"intent": "tx", "xdr": "AAAA"})
        assert transports.last.kind == TransportKind.DIALOG

    @pytest.mark.asyncio
    async def test_extension_wins_without_session(self, store):
        dispatcher, transports = make_dispatcher(store, extension=True)
        await dispatcher.dispatch({"intent": "tx", "xdr": "AAAA", "pubkey": PUBKEY})
        assert transports.last.kind == TransportKind.EXTENSION

    @pytest.mark.asyncio
    async def test_extension_wins_with_session_but_keeps_token(self, store):
        store.add(grant(key="tok-2"))
        dispatcher, transports = make_dispatcher(store, extension=True)
        await dispatcher.dispatch({"intent": "pay", "amount": "1", "destination": PUBKEY, "pubkey": PUBKEY})
        assert transports.last.kind == TransportKind.EXTENSION
        assert transports.last.sent[0]["session"] == "tok-2"


class TestPostProcess:
    @pytest.mark.asyncio
    async def test_grant_is_stored_and_forgettable(self, store):
        dispatcher, _ = make_dispatcher(store, result=grant(key="granted-key", grants=["tx"]))
        result = await dispatcher.dispatch({"intent": "implicit_flow", "intents": "tx"})
        assert result["granted"] is True
        assert store.get("tx", PUBKEY).key == "granted-key"
        store.forget(PUBKEY)
        assert store.get("tx", PUBKEY) is None

    @pytest.mark.asyncio
    async def test_denied_grant_is_not_stored(self, store):
        denied = {**grant(), "granted": False}
        dispatcher, _ = make_dispatcher(store, result=denied)
        result = await dispatcher.dispatch({"intent": "implicit_flow", "intents": "tx"})
        assert result == denied
        assert store.list_all() == []

    @pytest.mark.asyncio
    async def test_other_results_pass_through(self, store):
        payload = {"intent": "tx", "signed_envelope_xdr": "BBBB", "pubkey": PUBKEY, "granted": True}
        dispatcher, _ = make_dispatcher(store, result=payload)
        assert await dispatcher.dispatch({"intent": "tx", "xdr": "AAAA"}) == payload
        assert store.list_all() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        UserRejectedError(),
        RequestTimeoutError("too slow"),
        ChannelClosedError(),
    ])
    async def test_transport_errors_surface_verbatim(self, store, error):
        dispatcher, transports = make_dispatcher(store, error=error)
        with pytest.raises(type(error)) as exc:
            await dispatcher.dispatch({"intent": "implicit_flow", "intents": "tx"})
        assert exc.value is error
        assert len(transports.created) == 1
        assert transports.last.closed
        assert store.list_all() == []

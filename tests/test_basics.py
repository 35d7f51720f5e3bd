"""Basic unit tests for albedo-intent package."""

from albedo_intent import (
    Albedo,
    AsyncAlbedo,
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
    TransportKind,
    __version__,
)


def test_version():
    assert __version__ == "0.1.0"


def test_public_exports():
    assert Albedo is not None
    assert AsyncAlbedo is not None


def test_error_hierarchy():
    for cls in (MissingIntentError, UnknownIntentError, InvalidParametersError,
                InvalidPubkeyError, MissingRequiredParameterError):
        assert issubclass(cls, IntentValidationError)
    for cls in (UserRejectedError, RequestTimeoutError, ChannelClosedError, IntentRequestError):
        assert issubclass(cls, TransportError)
    assert issubclass(IntentValidationError, AlbedoError)
    assert issubclass(TransportError, AlbedoError)


def test_error_attributes():
    err = AlbedoError(code="test_code", message="something broke")
    assert err.code == "test_code"
    assert str(err) == "something broke"
    assert err.details is None

    missing = MissingRequiredParameterError("xdr", "tx")
    assert missing.code == "missing_required_parameter"
    assert missing.details == {"parameter": "xdr", "intent": "tx"}
    assert str(missing) == 'Parameter "xdr" is required for intent "tx".'

    assert UnknownIntentError("foo").code == "unknown_intent"
    assert ChannelClosedError().code == "channel_closed"
    assert RequestTimeoutError("slow").code == "timeout"
    assert UserRejectedError().code == "user_rejected"


def test_transport_kind_constants():
    assert TransportKind.DIALOG == "dialog"
    assert TransportKind.FRAME == "frame"
    assert TransportKind.EXTENSION == "extension"

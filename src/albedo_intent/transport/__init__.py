from albedo_intent.transport.base import Transport, TransportKind, select_transport_kind
from albedo_intent.transport.provider import TransportProvider

__all__ = ["Transport", "TransportKind", "TransportProvider", "select_transport_kind"]

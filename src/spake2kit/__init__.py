from spake2kit.errors import (
    AuthenticationFailure,
    InvalidCurvePoint,
    MhfUnavailable,
    ProtocolStateError,
    SPAKE2Error,
    UnknownCipherSuite,
)
from spake2kit.protocol import SPAKE2, spake2, spake2_plus
from spake2kit.shared_secret import ClientSharedSecret, ServerSharedSecret, SharedSecret
from spake2kit.states import ClientPlusState, ClientState, ServerPlusState, ServerState
from spake2kit.suites import CIPHER_SUITES, CipherSuite, get_cipher_suite
from spake2kit.types import DEFAULT_SUITE, KdfOptions, MhfOptions, PlusVerifier, ProtocolOptions

__all__ = [
    "SPAKE2",
    "spake2",
    "spake2_plus",
    "ClientState",
    "ServerState",
    "ClientPlusState",
    "ServerPlusState",
    "SharedSecret",
    "ClientSharedSecret",
    "ServerSharedSecret",
    "CipherSuite",
    "CIPHER_SUITES",
    "get_cipher_suite",
    "DEFAULT_SUITE",
    "ProtocolOptions",
    "KdfOptions",
    "MhfOptions",
    "PlusVerifier",
    "SPAKE2Error",
    "UnknownCipherSuite",
    "InvalidCurvePoint",
    "ProtocolStateError",
    "AuthenticationFailure",
    "MhfUnavailable",
]

class SPAKE2Error(Exception):
    """Base class for every error raised by spake2kit."""


class UnknownCipherSuite(SPAKE2Error, KeyError):
    """The requested cipher suite identifier is not in the registry."""


class InvalidCurvePoint(SPAKE2Error, ValueError):
    """A peer element is malformed or lies in a small subgroup."""


class ProtocolStateError(SPAKE2Error, RuntimeError):
    """A session method was called out of order, or after the session ended."""


class AuthenticationFailure(SPAKE2Error, ValueError):
    """The peer's key confirmation did not match."""


class MhfUnavailable(SPAKE2Error, RuntimeError):
    """No usable memory-hard password hashing backend is installed."""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from spake2kit import codec
from spake2kit.errors import InvalidCurvePoint, ProtocolStateError
from spake2kit.rfc_steps.curve import CurvePoint
from spake2kit.rfc_steps.transcript import create_plus_transcript, create_transcript
from spake2kit.shared_secret import ClientSharedSecret, ServerSharedSecret, SharedSecret
from spake2kit.suites import CipherSuite, get_cipher_suite
from spake2kit.types import ProtocolOptions, Role

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)


class SessionState:
    """Base class for the stage a session is in."""

    pass


class Created(SessionState):
    """No message has been produced yet."""

    def __repr__(self) -> str:
        return "Created()"


class MessageSent(SessionState):
    """The outbound share has been computed and may be resent."""

    def __init__(self, message: bytes, point: CurvePoint) -> None:
        self.message = message
        self.point = point

    def __repr__(self) -> str:
        return f"MessageSent(message={self.message.hex()!r})"


class Finished(SessionState):
    """finish() ran, successfully or not. The ephemeral scalar is gone."""

    def __repr__(self) -> str:
        return "Finished()"


class _Session(Generic[R]):
    """
    One side of one exchange: Created -> MessageSent -> Finished.

    The ephemeral scalar is used for exactly one finish(). A failed finish()
    also ends the session; retry with a fresh session.
    """

    role: ClassVar[Role]
    record_type: ClassVar[type[BaseModel]]

    def __init__(
        self,
        options: ProtocolOptions,
        suite: CipherSuite,
        client_identity: bytes,
        server_identity: bytes,
        ephemeral: int,
    ) -> None:
        self.options = options.resolve(suite)
        self.suite = suite
        self.client_identity = client_identity
        self.server_identity = server_identity
        self._ephemeral: int | None = ephemeral % suite.curve.order
        self._state: SessionState = Created()

    @property
    def state(self) -> SessionState:
        return self._state

    def _compute_point(self, ephemeral: int) -> CurvePoint:
        raise NotImplementedError

    def _derive(self, ephemeral: int, own_message: bytes, peer: CurvePoint, peer_message: bytes) -> SharedSecret:
        raise NotImplementedError

    def _to_record(self, ephemeral: int) -> R:
        raise NotImplementedError

    def get_message(self) -> bytes:
        if isinstance(self._state, MessageSent):
            return self._state.message
        if self._ephemeral is None:
            raise ProtocolStateError("session is finished; start a new one")

        point = self._compute_point(self._ephemeral)
        message = self.suite.curve.encode_point(point)
        self._state = MessageSent(message, point)
        return message

    def finish(self, incoming_message: bytes) -> SharedSecret:
        state = self._state
        if isinstance(state, Finished):
            raise ProtocolStateError("finish() can only be called once")
        if not isinstance(state, MessageSent):
            raise ProtocolStateError("get_message() needs to be called before finish()")

        ephemeral = self._ephemeral
        if ephemeral is None:
            raise ProtocolStateError("session has no ephemeral scalar")
        self._state = Finished()
        self._ephemeral = None

        curve = self.suite.curve
        try:
            peer = curve.decode_point(incoming_message)
            if curve.in_small_subgroup(peer):
                raise InvalidCurvePoint("invalid curve point")
            secret = self._derive(ephemeral, state.message, peer, curve.encode_point(peer))
        except InvalidCurvePoint:
            logger.warning("%s rejected the peer's share (suite %s)", self.role.value, self.suite.name)
            raise

        logger.debug("%s session finished (suite %s, plus=%s)", self.role.value, self.suite.name, self.options.plus)
        return secret

    def _cofactor_scalar(self, scalar: int) -> int:
        curve = self.suite.curve
        return (curve.h * scalar) % curve.order

    def save(self) -> dict[str, Any]:
        if self._ephemeral is None:
            raise ProtocolStateError("a finished session cannot be saved")
        return self._to_record(self._ephemeral).model_dump()

    @classmethod
    def _from_record(cls, record: Any, suite: CipherSuite) -> _Session[R]:
        raise NotImplementedError

    @classmethod
    def load(cls, data: dict[str, Any]) -> Any:
        record = cls.record_type.model_validate(data)
        suite = get_cipher_suite(record.options.suite)  # type: ignore
        return cls._from_record(record, suite)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(suite={self.suite.name!r}, state={self._state!r})"


class ClientState(_Session[codec.ClientStateRecord]):
    """SPAKE2 client (A): T = x*P + w*M."""

    role = Role.CLIENT
    record_type = codec.ClientStateRecord

    def __init__(
        self,
        options: ProtocolOptions,
        suite: CipherSuite,
        client_identity: bytes,
        server_identity: bytes,
        w: int,
        x: int,
    ) -> None:
        super().__init__(options, suite, client_identity, server_identity, x)
        self.w = w % suite.curve.order

    def _compute_point(self, ephemeral: int) -> CurvePoint:
        curve = self.suite.curve
        return curve.mask(ephemeral, curve.M, self.w)

    def _derive(self, ephemeral: int, own_message: bytes, peer: CurvePoint, peer_message: bytes) -> SharedSecret:
        # K = h*x*(S - w*N)
        curve = self.suite.curve
        K = curve.mul(curve.unmask(peer, curve.N, self.w), self._cofactor_scalar(ephemeral))
        transcript = create_transcript(
            self.suite,
            self.client_identity,
            self.server_identity,
            own_message,
            peer_message,
            curve.encode_point(K),
            self.w,
        )
        return ClientSharedSecret(self.options, self.suite, transcript, own_message, peer_message)

    def _to_record(self, ephemeral: int) -> codec.ClientStateRecord:
        return codec.ClientStateRecord(
            options=codec.OptionsRecord.from_options(self.options),
            client_identity=self.client_identity,
            server_identity=self.server_identity,
            x=ephemeral,
            w=self.w,
        )

    @classmethod
    def _from_record(cls, record: codec.ClientStateRecord, suite: CipherSuite) -> ClientState:  # type: ignore
        return cls(
            record.options.to_options(),
            suite,
            record.client_identity,
            record.server_identity,
            w=record.w,
            x=record.x,
        )


class ServerState(_Session[codec.ServerStateRecord]):
    """SPAKE2 server (B): S = y*P + w*N."""

    role = Role.SERVER
    record_type = codec.ServerStateRecord

    def __init__(
        self,
        options: ProtocolOptions,
        suite: CipherSuite,
        client_identity: bytes,
        server_identity: bytes,
        w: int,
        y: int,
    ) -> None:
        super().__init__(options, suite, client_identity, server_identity, y)
        self.w = w % suite.curve.order

    def _compute_point(self, ephemeral: int) -> CurvePoint:
        curve = self.suite.curve
        return curve.mask(ephemeral, curve.N, self.w)

    def _derive(self, ephemeral: int, own_message: bytes, peer: CurvePoint, peer_message: bytes) -> SharedSecret:
        # K = h*y*(T - w*M)
        curve = self.suite.curve
        K = curve.mul(curve.unmask(peer, curve.M, self.w), self._cofactor_scalar(ephemeral))
        transcript = create_transcript(
            self.suite,
            self.client_identity,
            self.server_identity,
            peer_message,
            own_message,
            curve.encode_point(K),
            self.w,
        )
        return ServerSharedSecret(self.options, self.suite, transcript, peer_message, own_message)

    def _to_record(self, ephemeral: int) -> codec.ServerStateRecord:
        return codec.ServerStateRecord(
            options=codec.OptionsRecord.from_options(self.options),
            client_identity=self.client_identity,
            server_identity=self.server_identity,
            y=ephemeral,
            w=self.w,
        )

    @classmethod
    def _from_record(cls, record: codec.ServerStateRecord, suite: CipherSuite) -> ServerState:  # type: ignore
        return cls(
            record.options.to_options(),
            suite,
            record.client_identity,
            record.server_identity,
            w=record.w,
            y=record.y,
        )


class ClientPlusState(_Session[codec.ClientPlusStateRecord]):
    """SPAKE2+ prover: shareP = x*P + w0*M."""

    role = Role.CLIENT
    record_type = codec.ClientPlusStateRecord

    def __init__(
        self,
        options: ProtocolOptions,
        suite: CipherSuite,
        client_identity: bytes,
        server_identity: bytes,
        w0: int,
        w1: int,
        x: int,
    ) -> None:
        super().__init__(options, suite, client_identity, server_identity, x)
        self.w0 = w0 % suite.curve.order
        self.w1 = w1 % suite.curve.order

    def _compute_point(self, ephemeral: int) -> CurvePoint:
        curve = self.suite.curve
        return curve.mask(ephemeral, curve.M, self.w0)

    def _derive(self, ephemeral: int, own_message: bytes, peer: CurvePoint, peer_message: bytes) -> SharedSecret:
        # Z = h*x*(shareV - w0*N), V = h*w1*(shareV - w0*N)
        curve = self.suite.curve
        base = curve.unmask(peer, curve.N, self.w0)
        Z = curve.mul(base, self._cofactor_scalar(ephemeral))
        V = curve.mul(base, self._cofactor_scalar(self.w1))
        transcript = create_plus_transcript(
            self.suite,
            self.options.context_bytes(),
            self.client_identity,
            self.server_identity,
            own_message,
            peer_message,
            Z,
            V,
            self.w0,
        )
        return ClientSharedSecret(self.options, self.suite, transcript, own_message, peer_message)

    def _to_record(self, ephemeral: int) -> codec.ClientPlusStateRecord:
        return codec.ClientPlusStateRecord(
            options=codec.OptionsRecord.from_options(self.options),
            client_identity=self.client_identity,
            server_identity=self.server_identity,
            x=ephemeral,
            w0=self.w0,
            w1=self.w1,
        )

    @classmethod
    def _from_record(cls, record: codec.ClientPlusStateRecord, suite: CipherSuite) -> ClientPlusState:  # type: ignore
        return cls(
            record.options.to_options(),
            suite,
            record.client_identity,
            record.server_identity,
            w0=record.w0,
            w1=record.w1,
            x=record.x,
        )


class ServerPlusState(_Session[codec.ServerPlusStateRecord]):
    """SPAKE2+ verifier: shareV = y*P + w0*N. Holds L = w1*P, never w1."""

    role = Role.SERVER
    record_type = codec.ServerPlusStateRecord

    def __init__(
        self,
        options: ProtocolOptions,
        suite: CipherSuite,
        client_identity: bytes,
        server_identity: bytes,
        w0: int,
        L: CurvePoint,
        y: int,
    ) -> None:
        super().__init__(options, suite, client_identity, server_identity, y)
        self.w0 = w0 % suite.curve.order
        self.L = L

    def _compute_point(self, ephemeral: int) -> CurvePoint:
        curve = self.suite.curve
        return curve.mask(ephemeral, curve.N, self.w0)

    def _derive(self, ephemeral: int, own_message: bytes, peer: CurvePoint, peer_message: bytes) -> SharedSecret:
        # Z = h*y*(shareP - w0*M), V = h*y*L
        curve = self.suite.curve
        scalar = self._cofactor_scalar(ephemeral)
        Z = curve.mul(curve.unmask(peer, curve.M, self.w0), scalar)
        V = curve.mul(self.L, scalar)
        transcript = create_plus_transcript(
            self.suite,
            self.options.context_bytes(),
            self.client_identity,
            self.server_identity,
            peer_message,
            own_message,
            Z,
            V,
            self.w0,
        )
        return ServerSharedSecret(self.options, self.suite, transcript, peer_message, own_message)

    def _to_record(self, ephemeral: int) -> codec.ServerPlusStateRecord:
        return codec.ServerPlusStateRecord(
            options=codec.OptionsRecord.from_options(self.options),
            client_identity=self.client_identity,
            server_identity=self.server_identity,
            y=ephemeral,
            w0=self.w0,
            L=self.suite.curve.encode_point(self.L),
        )

    @classmethod
    def _from_record(cls, record: codec.ServerPlusStateRecord, suite: CipherSuite) -> ServerPlusState:  # type: ignore
        return cls(
            record.options.to_options(),
            suite,
            record.client_identity,
            record.server_identity,
            w0=record.w0,
            L=suite.curve.decode_point(record.L),
            y=record.y,
        )
